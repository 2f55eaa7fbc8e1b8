"""Pure domain logic for item descriptions.

A description is stored either as sanitized markup (``p br strong em u ul
ol li``) or in the legacy dialect (``- bullet`` lines with ``*``/``**``
emphasis). Both parse into the same :class:`DescriptionBlock` sequence, and
every rendering surface (editor, PDF, plain preview) renders from that one
sequence so they cannot drift apart.

No function in this module raises on string input.
"""

from __future__ import annotations

import logging
import re
import warnings
from typing import List, Optional

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PreformattedString
from bs4.formatter import HTMLFormatter

from ..core.config import DEFAULT_CONFIG, HeuristicsConfig
from .headings import (
    BULLET_RE,
    ends_with_sentence_punctuation,
    is_likely_heading_line,
    is_role_or_date_line,
)
from .inline_runs import (
    escape_html,
    parse_html_runs,
    parse_markdown_runs,
    push_run,
    runs_have_text,
    runs_to_html,
    trim_runs,
)
from .models import BlockKind, DescriptionBlock, InlineRun, SectionKind

logger = logging.getLogger(__name__)

# short plain descriptions ("gmail.com", "notes.txt") are text, not locators
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

ALLOWED_TAGS = frozenset({"p", "br", "strong", "em", "u", "ul", "ol", "li"})

#: Tags renamed onto the allow-list before filtering.
_RENAMED_TAGS = {"b": "strong", "i": "em", "div": "p"}

#: Disallowed tags whose text is dropped along with the markup.
_DROP_CONTENT_TAGS = ["script", "style", "textarea", "option", "noscript", "template", "iframe"]

_EMPTY_MARKUP = {"", "<p></p>", "<p><br></p>"}

_HTML_LIKE_RE = re.compile(r"</?[a-z][\s\S]*>", re.IGNORECASE)

#: Minimal escaping (``& < >``) and ``<br>`` rather than ``<br/>``.
_OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)

_LIST_TAGS = {"ul": BlockKind.BULLET, "ol": BlockKind.NUMBERED}


# ---------------------------------------------------------------------------
# Sanitizing
# ---------------------------------------------------------------------------


def is_html_description(value: str) -> bool:
    return bool(_HTML_LIKE_RE.search(value or ""))


def _strip_tags(value: str) -> str:
    return re.sub(r"<[^>]*>", " ", value or "")


def sanitize_description_html(value: str) -> str:
    """Reduce *value* to the allow-listed vocabulary with no attributes."""
    try:
        soup = BeautifulSoup(value or "", "html.parser")

        for node in list(soup.descendants):
            if isinstance(node, PreformattedString):
                node.extract()
        for tag in soup.find_all(_DROP_CONTENT_TAGS):
            tag.extract()

        for tag in soup.find_all(True):
            name = tag.name.lower()
            name = _RENAMED_TAGS.get(name, name)
            if name in ALLOWED_TAGS:
                tag.name = name
                tag.attrs = {}
            else:
                tag.unwrap()

        # Unwrapping leaves adjacent strings that a fresh parse would merge and
        # collapse, so serialize the re-parsed tree to reach a fixed point.
        first_pass = soup.decode(formatter=_OUTPUT_FORMATTER)
        reparsed = BeautifulSoup(first_pass, "html.parser")
        return reparsed.decode(formatter=_OUTPUT_FORMATTER).strip()
    except Exception as e:
        logger.warning("Markup sanitizing failed, keeping text only: %s", e)
        return escape_html(re.sub(r"\s+", " ", _strip_tags(value))).strip()


def _is_visually_empty(value: str) -> bool:
    return re.sub(r"\s+", "", value).lower() in _EMPTY_MARKUP


def normalize_stored_description_html(value: str) -> str:
    """Canonical stored form: sanitized markup, or ``""`` when visually empty.

    Idempotent: normalizing an already normalized value returns it unchanged.
    """
    sanitized = sanitize_description_html(value)
    if not sanitized or _is_visually_empty(sanitized):
        return ""
    return sanitized


# ---------------------------------------------------------------------------
# Heading promotion
# ---------------------------------------------------------------------------


def _list_item_is_subheading(text: str, config: HeuristicsConfig) -> bool:
    """A list item becomes a sub-heading only when shaped like a role or date line."""
    if not is_role_or_date_line(text):
        return False
    if ends_with_sentence_punctuation(text, config):
        return False
    if len(text) > config.heading_max_length:
        return False
    return bool(re.search(r"[A-Za-z]", text))


def apply_heading_heuristics(
    blocks: List[DescriptionBlock], config: HeuristicsConfig = DEFAULT_CONFIG
) -> List[DescriptionBlock]:
    """Promote context lines sitting directly above a list to headings.

    * a paragraph followed by a list item is always promoted;
    * a list item followed by a list item is promoted when it looks like a
      "Role, Company" line or a date range.
    """
    promoted: List[DescriptionBlock] = []
    for index, block in enumerate(blocks):
        nxt = blocks[index + 1] if index + 1 < len(blocks) else None
        next_is_list = nxt is not None and nxt.kind.is_list

        kind = block.kind
        if next_is_list:
            if block.kind == BlockKind.PARAGRAPH:
                kind = BlockKind.HEADING
            elif block.kind.is_list and _list_item_is_subheading(block.text, config):
                kind = BlockKind.HEADING
        promoted.append(DescriptionBlock(kind=kind, runs=block.runs))
    return [block for block in promoted if runs_have_text(block.runs)]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_legacy_blocks(value: str, config: HeuristicsConfig) -> List[DescriptionBlock]:
    lines = [line.strip() for line in value.replace("\r", "\n").split("\n")]
    blocks: List[DescriptionBlock] = []
    for line in lines:
        if not line:
            continue
        if BULLET_RE.match(line):
            body = BULLET_RE.sub("", line).strip()
            blocks.append(DescriptionBlock(BlockKind.BULLET, parse_markdown_runs(body)))
        else:
            blocks.append(DescriptionBlock(BlockKind.PARAGRAPH, parse_markdown_runs(line)))
    return apply_heading_heuristics(blocks, config)


def _split_runs_on_newlines(runs: List[InlineRun]) -> List[List[InlineRun]]:
    lines: List[List[InlineRun]] = [[]]
    for run in runs:
        pieces = run.text.split("\n")
        for i, piece in enumerate(pieces):
            if i > 0:
                lines.append([])
            push_run(lines[-1], InlineRun(piece, run.bold, run.italic, run.underline))
    return lines


def _loose_blocks(fragment: str) -> List[DescriptionBlock]:
    """Text outside any ``<p>``/list becomes one paragraph per line."""
    blocks: List[DescriptionBlock] = []
    for line_runs in _split_runs_on_newlines(parse_html_runs(fragment)):
        runs = trim_runs(line_runs)
        if runs_have_text(runs):
            blocks.append(DescriptionBlock(BlockKind.PARAGRAPH, runs))
    return blocks


def _node_markup(node) -> str:
    if isinstance(node, Tag):
        return node.decode(formatter=_OUTPUT_FORMATTER)
    if isinstance(node, NavigableString):
        return escape_html(str(node))
    return ""


def _list_blocks(list_tag: Tag) -> List[DescriptionBlock]:
    """Flatten a list (and any nested lists) into items in document order."""
    kind = _LIST_TAGS[list_tag.name]
    blocks: List[DescriptionBlock] = []

    for child in list_tag.children:
        if isinstance(child, Tag) and child.name == "li":
            inline: List[str] = []
            nested: List[Tag] = []
            for part in child.children:
                if isinstance(part, Tag) and part.name in _LIST_TAGS:
                    nested.append(part)
                elif isinstance(part, Tag) and part.name == "p":
                    inline.append(part.decode_contents(formatter=_OUTPUT_FORMATTER) + " ")
                else:
                    inline.append(_node_markup(part))
            runs = trim_runs(parse_html_runs("".join(inline)))
            if runs_have_text(runs):
                blocks.append(DescriptionBlock(kind, runs))
            for sub in nested:
                blocks.extend(_list_blocks(sub))
        elif isinstance(child, Tag) and child.name in _LIST_TAGS:
            blocks.extend(_list_blocks(child))
        else:
            runs = trim_runs(parse_html_runs(_node_markup(child)))
            if runs_have_text(runs):
                blocks.append(DescriptionBlock(kind, runs))
    return blocks


def _parse_markup_blocks(sanitized: str, config: HeuristicsConfig) -> List[DescriptionBlock]:
    soup = BeautifulSoup(sanitized, "html.parser")
    blocks: List[DescriptionBlock] = []
    loose: List[str] = []

    def flush_loose() -> None:
        if loose:
            blocks.extend(_loose_blocks("".join(loose)))
            loose.clear()

    for node in soup.contents:
        if isinstance(node, Tag) and node.name == "p":
            flush_loose()
            runs = trim_runs(parse_html_runs(node.decode_contents(formatter=_OUTPUT_FORMATTER)))
            if runs_have_text(runs):
                blocks.append(DescriptionBlock(BlockKind.PARAGRAPH, runs))
        elif isinstance(node, Tag) and node.name in _LIST_TAGS:
            flush_loose()
            blocks.extend(_list_blocks(node))
        else:
            loose.append(_node_markup(node))
    flush_loose()

    return apply_heading_heuristics(blocks, config)


def _fallback_blocks(value: str) -> List[DescriptionBlock]:
    text = re.sub(r"\s+", " ", _strip_tags(value)).strip()
    if not text:
        return []
    return [DescriptionBlock(BlockKind.PARAGRAPH, [InlineRun(text)])]


def parse_description_blocks(value: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> List[DescriptionBlock]:
    """Parse a stored description (markup or legacy dialect) into blocks."""
    raw = (value or "").strip()
    if not raw:
        return []

    if is_html_description(raw):
        try:
            sanitized = sanitize_description_html(raw)
            if not sanitized:
                return []
            return _parse_markup_blocks(sanitized, config)
        except Exception as e:
            logger.warning("Description markup could not be parsed, degrading to text: %s", e)
            return _fallback_blocks(raw)

    return _parse_legacy_blocks(raw, config)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def blocks_to_html(blocks: List[DescriptionBlock]) -> str:
    """Render blocks as sanitized markup, grouping list runs into one list."""
    parts: List[str] = []
    open_list: Optional[str] = None

    for block in blocks:
        if not runs_have_text(block.runs):
            continue

        if block.kind.is_list:
            list_tag = "ol" if block.kind == BlockKind.NUMBERED else "ul"
            if open_list != list_tag:
                if open_list:
                    parts.append(f"</{open_list}>")
                parts.append(f"<{list_tag}>")
                open_list = list_tag
            parts.append(f"<li>{runs_to_html(block.runs)}</li>")
            continue

        if open_list:
            parts.append(f"</{open_list}>")
            open_list = None
        parts.append(f"<p>{runs_to_html(block.runs)}</p>")

    if open_list:
        parts.append(f"</{open_list}>")
    return "".join(parts)


def blocks_to_plain_text(blocks: List[DescriptionBlock]) -> str:
    lines: List[str] = []
    for block in blocks:
        text = block.text
        if not text:
            continue
        lines.append(f"- {text}" if block.kind.is_list else text)
    return "\n".join(lines).strip()


def description_to_plain_text(value: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> str:
    """Plain text with ``- `` prefixed list items, for the plain-text renderer."""
    return blocks_to_plain_text(parse_description_blocks(value, config))


def legacy_markdown_to_html(value: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> str:
    blocks = _parse_legacy_blocks(value or "", config)
    if not blocks:
        return ""
    return normalize_stored_description_html(blocks_to_html(blocks))


def description_to_editor_html(value: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> str:
    """Markup for the rich editor. Legacy descriptions are upgraded."""
    raw = (value or "").strip()
    if not raw:
        return "<p></p>"
    if is_html_description(raw):
        return sanitize_description_html(raw) or "<p></p>"
    return legacy_markdown_to_html(raw, config) or "<p></p>"


# ---------------------------------------------------------------------------
# Plain-text normalization (format on blur)
# ---------------------------------------------------------------------------

_LIST_SECTIONS = {SectionKind.EXPERIENCE, SectionKind.PROJECTS, SectionKind.CUSTOM}


def _normalize_inline_spacing(value: str) -> str:
    value = re.sub(r"\s+", " ", value)
    return re.sub(r"\s+([,.;:!?])", r"\1", value).strip()


def _split_text_lines(value: str) -> List[str]:
    lines = [_normalize_inline_spacing(line) for line in (value or "").replace("\r", "\n").split("\n")]
    return [line for line in lines if line]


def _should_append_to_bullet(line: str, config: HeuristicsConfig) -> bool:
    if not line or is_role_or_date_line(line):
        return False
    return not is_likely_heading_line(line, config)


def normalize_description_plain_text(
    section_kind: SectionKind | str, raw_text: str, config: HeuristicsConfig = DEFAULT_CONFIG
) -> str:
    """Tidy typed or pasted plain text before it is stored.

    For list-style sections, wrapped continuation lines are folded back into
    their bullet and sub-headings get a blank line above them.
    """
    lines = _split_text_lines(raw_text)
    if not lines:
        return ""

    try:
        kind = SectionKind(section_kind)
    except ValueError:
        kind = SectionKind.CUSTOM
    if kind not in _LIST_SECTIONS:
        return "\n".join(lines)

    merged: List[str] = []
    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if BULLET_RE.match(line):
            body = BULLET_RE.sub("", line).strip()
            if BULLET_RE.match(next_line) and _list_item_is_subheading(body, config):
                merged.append(body)
            else:
                merged.append(f"- {body}")
            continue

        if merged and merged[-1].startswith("- ") and _should_append_to_bullet(line, config):
            merged[-1] = re.sub(r"\s+", " ", f"{merged[-1]} {line}").strip()
            continue

        merged.append(line)

    output: List[str] = []
    for line in merged:
        if is_likely_heading_line(line, config) and output and output[-1] != "":
            output.append("")
        output.append(line)

    return re.sub(r"\n{3,}", "\n\n", "\n".join(output)).strip()


def normalize_description_to_html(
    section_kind: SectionKind | str, raw_value: str, config: HeuristicsConfig = DEFAULT_CONFIG
) -> str:
    """Any stored or pasted description -> normalized canonical markup."""
    plain_text = description_to_plain_text(raw_value, config)
    normalized = normalize_description_plain_text(section_kind, plain_text, config)
    if not normalized:
        return ""
    return legacy_markdown_to_html(normalized, config)
