"""Inline run tokenizer: split one block of text into formatted runs.

Two inputs are understood:

* the legacy markdown-like emphasis syntax (``*italic*``, ``**bold**``,
  ``***bold italic***``), and
* the sanitized markup vocabulary (``<strong>``, ``<em>``, ``<u>``, ``<br>``;
  ``<b>`` and ``<i>`` are accepted as aliases).

Any input yields some run sequence. Unbalanced markup leaves the formatting
state set until the end of the fragment; state never carries over between
calls, so callers tokenize one block at a time.
"""

from __future__ import annotations

import html
import re
from typing import Iterable, List

from .models import InlineRun

_MARKDOWN_TOKEN_RE = re.compile(r"(\*\*\*[^*]+\*\*\*|\*\*[^*]+\*\*|\*[^*]+\*)")
_HTML_TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\b[^>]*?(/?)>")

_BOLD_TAGS = {"strong", "b"}
_ITALIC_TAGS = {"em", "i"}
_UNDERLINE_TAGS = {"u"}


def push_run(runs: List[InlineRun], run: InlineRun) -> None:
    """Append *run*, merging it into the previous run when styles match."""
    if not run.text:
        return
    if runs and runs[-1].same_style(run):
        runs[-1].text += run.text
        return
    runs.append(run)


def merge_runs(runs: Iterable[InlineRun]) -> List[InlineRun]:
    merged: List[InlineRun] = []
    for run in runs:
        push_run(merged, InlineRun(run.text, run.bold, run.italic, run.underline))
    return merged


def runs_have_text(runs: Iterable[InlineRun]) -> bool:
    return any(run.text.strip() for run in runs)


def runs_to_text(runs: Iterable[InlineRun]) -> str:
    return "".join(run.text for run in runs)


def trim_runs(runs: List[InlineRun]) -> List[InlineRun]:
    """Strip leading whitespace of the first run and trailing of the last."""
    out = merge_runs(runs)
    while out and not out[0].text.lstrip(" \t"):
        out.pop(0)
    if out:
        out[0].text = out[0].text.lstrip(" \t")
    while out and not out[-1].text.rstrip(" \t"):
        out.pop()
    if out:
        out[-1].text = out[-1].text.rstrip(" \t")
    return out


def strip_markdown_markers(text: str) -> str:
    """Remove emphasis markers, keeping the emphasized text."""
    text = re.sub(r"\*\*\*([^*]+)\*\*\*", r"\1", text or "")
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    return re.sub(r"\*([^*]+)\*", r"\1", text)


def parse_markdown_runs(text: str) -> List[InlineRun]:
    """Tokenize legacy emphasis syntax. Unpaired asterisks stay literal."""
    if not text:
        return []
    runs: List[InlineRun] = []
    last = 0
    for match in _MARKDOWN_TOKEN_RE.finditer(text):
        if match.start() > last:
            push_run(runs, InlineRun(text[last : match.start()]))
        token = match.group(0)
        if token.startswith("***"):
            push_run(runs, InlineRun(token[3:-3], bold=True, italic=True))
        elif token.startswith("**"):
            push_run(runs, InlineRun(token[2:-2], bold=True))
        else:
            push_run(runs, InlineRun(token[1:-1], italic=True))
        last = match.end()
    if last < len(text):
        push_run(runs, InlineRun(text[last:]))
    return runs


def _decode_chunk(chunk: str) -> str:
    return html.unescape(re.sub(r"\s+", " ", chunk))


def parse_html_runs(fragment: str) -> List[InlineRun]:
    """Tokenize an inline markup fragment, tracking a running style state.

    ``<br>`` becomes a ``"\\n"`` run in the current style. Tags outside the
    inline vocabulary are dropped; their text content is kept.
    """
    if not fragment:
        return []
    runs: List[InlineRun] = []
    bold = italic = underline = False
    last = 0

    for match in _HTML_TAG_RE.finditer(fragment):
        push_run(runs, InlineRun(_decode_chunk(fragment[last : match.start()]), bold, italic, underline))
        closing = match.group(1) == "/"
        tag = match.group(2).lower()

        if tag == "br":
            push_run(runs, InlineRun("\n", bold, italic, underline))
        elif tag in _BOLD_TAGS:
            bold = not closing
        elif tag in _ITALIC_TAGS:
            italic = not closing
        elif tag in _UNDERLINE_TAGS:
            underline = not closing

        last = match.end()

    if last < len(fragment):
        push_run(runs, InlineRun(_decode_chunk(fragment[last:]), bold, italic, underline))
    return runs


# ---------------------------------------------------------------------------
# Runs -> markup
# ---------------------------------------------------------------------------


def escape_html(value: str) -> str:
    return html.escape(value, quote=False)


def runs_to_html(runs: Iterable[InlineRun]) -> str:
    """Inverse of :func:`parse_html_runs`: escape first, then wrap."""
    parts: List[str] = []
    for run in runs:
        text = escape_html(run.text).replace("\n", "<br>")
        if run.underline:
            text = f"<u>{text}</u>"
        if run.italic:
            text = f"<em>{text}</em>"
        if run.bold:
            text = f"<strong>{text}</strong>"
        parts.append(text)
    return "".join(parts) or "<br>"
