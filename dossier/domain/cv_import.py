"""Pure domain logic for importing an extracted résumé document.

Input is the text (or lightly marked-up markdown) produced by an external
document converter. Output is a :class:`ParsedDocument`: header basics plus
ordered sections of raw item blocks, which :func:`build_items` then splits
into title / subtitle / date range / description.

This is a best-effort heuristic pipeline. A missed heading degrades to body
text; nothing here raises on string input.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from ..core.config import DEFAULT_CONFIG, HeuristicsConfig
from .contact import extract_basics, extract_email, extract_location, extract_phone, is_contact_text, pick_best_url
from .headings import (
    ROLE_TITLE_LINE_RE,
    classify_heading,
    ends_with_sentence_punctuation,
    has_date_tail,
    heading_to_section,
    is_bullet_line,
    split_date_tail,
    split_title_subtitle,
    strip_bullet,
)
from .inline_runs import strip_markdown_markers
from .models import Basics, ParsedDocument, ParsedItem, ParsedSection, SectionKind

logger = logging.getLogger(__name__)

#: Intro lines longer than this are summary candidates.
_SUMMARY_MIN_LENGTH = 20
_SUMMARY_MAX_LINES = 6
_SUMMARY_SCAN_LINES = 18

# ---------------------------------------------------------------------------
# Line handling
# ---------------------------------------------------------------------------


def normalize_lines(text: str) -> List[str]:
    """CR/LF-normalize, collapse whitespace and drop empty lines."""
    lines = [re.sub(r"\s+", " ", line).strip() for line in (text or "").replace("\r", "\n").split("\n")]
    return [line for line in lines if line]


def _starts_new_item(buffer: List[str], line: str) -> bool:
    """Should a non-bullet *line* open a new block instead of extending *buffer*?

    After an item's bullets, a "Role, Company" or dated header line starts the
    next item; any other line is a wrapped continuation.
    """
    if is_bullet_line(buffer[0]):
        return False
    if any(is_bullet_line(b) for b in buffer[1:]):
        return bool(ROLE_TITLE_LINE_RE.match(line) or has_date_tail(line))
    return has_date_tail(buffer[0]) and has_date_tail(line)


def split_blocks(lines: List[str]) -> List[str]:
    """Group section lines into one raw block per list item.

    A bullet line closes a buffer that is itself a bullet item; bullets under
    a header line stay with that header.
    """
    blocks: List[str] = []
    buffer: List[str] = []

    def flush() -> None:
        block = "\n".join(buffer).strip()
        if block:
            blocks.append(block)
        buffer.clear()

    for line in lines:
        if buffer:
            if is_bullet_line(line):
                if is_bullet_line(buffer[0]):
                    flush()
            elif _starts_new_item(buffer, line):
                flush()
        buffer.append(line)
    flush()
    return blocks


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


def _extract_summary(lines: List[str], basics: Basics) -> str:
    """Summary from the intro lines above the first recognized heading."""
    first_heading = next((i for i, line in enumerate(lines) if classify_heading(line)), None)
    cutoff = first_heading if first_heading is not None else min(len(lines), _SUMMARY_SCAN_LINES)

    summary_lines = [
        line
        for line in lines[:cutoff]
        if line not in (basics.name, basics.headline)
        and not is_contact_text(line)
        and len(line) > _SUMMARY_MIN_LENGTH
    ]
    if 0 < len(summary_lines) <= _SUMMARY_MAX_LINES:
        return " ".join(summary_lines)
    return ""


def parse_cv_text(text: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> ParsedDocument:
    """Parse plain extracted text into basics and sections."""
    lines = normalize_lines(text)
    basics = extract_basics(lines, config)

    sections: List[ParsedSection] = []
    current: Optional[ParsedSection] = None
    current_lines: List[str] = []

    def flush() -> None:
        if current is not None:
            current.blocks = split_blocks(current_lines)
            sections.append(current)
        current_lines.clear()

    for line in lines:
        mapped = classify_heading(line)
        if mapped:
            flush()
            kind, title = mapped
            current = ParsedSection(kind=kind, title=title)
            logger.debug("Section heading %r -> %s", line, kind.value)
            continue
        if current is not None:
            current_lines.append(line)
    flush()

    if basics.name:
        basics.summary = _extract_summary(lines, basics)

    if not any(section.kind != SectionKind.CUSTOM for section in sections):
        logger.debug("No known section headings found, importing as a single Content section")
        return ParsedDocument(
            basics=basics,
            sections=[
                ParsedSection(
                    kind=SectionKind.CUSTOM,
                    title="Content",
                    blocks=split_blocks(lines[: config.fallback_line_cap]),
                )
            ],
        )

    return ParsedDocument(basics=basics, sections=sections)


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def normalize_markdown_line(line: str) -> str:
    """Strip links, heading hashes, escapes and emphasis from one markdown line."""
    value = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", line or "")
    value = re.sub(r"^\s*#{1,6}\s+", "", value)
    value = re.sub(r"^\s*[-*+]\s+", "- ", value)
    value = re.sub(r"^__|__$", "", value.strip())
    value = re.sub(r"\\([.\[\]()*_\-+#!])", r"\1", value)
    value = strip_markdown_markers(value)
    return re.sub(r"\s+", " ", value).strip()


def _markdown_blocks(kind: SectionKind, entries: List[Tuple[bool, str]]) -> List[str]:
    """Blocks for one markdown section. ``entries`` are ``(is_item_heading, line)``."""
    if any(is_item for is_item, _ in entries):
        blocks: List[str] = []
        buffer: List[str] = []
        for is_item, line in entries:
            if is_item and buffer:
                blocks.append("\n".join(buffer).strip())
                buffer = []
            buffer.append(line)
        if buffer:
            blocks.append("\n".join(buffer).strip())
        return [block for block in blocks if block]

    lines = [line for _, line in entries if line]
    if kind == SectionKind.SKILLS:
        joined = "\n".join(lines).strip()
        return [joined] if joined else []

    if kind == SectionKind.PROJECTS:
        # Title line followed by a one-sentence description.
        blocks = []
        i = 0
        while i < len(lines):
            title = lines[i]
            nxt = lines[i + 1] if i + 1 < len(lines) else ""
            if nxt and ends_with_sentence_punctuation(nxt):
                blocks.append(f"{title}\n{nxt}")
                i += 2
            else:
                blocks.append(title)
                i += 1
        return blocks

    return split_blocks(lines)


def parse_cv_markdown(markdown: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> ParsedDocument:
    """Parse converter markdown: ``#`` name, ``##`` headline, ``###`` sections,
    ``####`` item headings.
    """
    raw_lines = (markdown or "").replace("\r", "\n").split("\n")
    basics = Basics()

    h1 = next((line for line in raw_lines if line.strip().startswith("# ")), None)
    if h1:
        basics.name = normalize_markdown_line(h1)
    h2 = next((line for line in raw_lines if line.strip().startswith("## ")), None)
    if h2:
        basics.headline = normalize_markdown_line(h2)

    first_section = next((i for i, line in enumerate(raw_lines) if line.strip().startswith("### ")), len(raw_lines))
    header_lines = [
        normalize_markdown_line(line)
        for line in raw_lines[:first_section]
        if line.strip() and not line.strip().startswith("#")
    ]
    header_lines = [line for line in header_lines if line]
    header_text = " ".join(header_lines)

    basics.email = extract_email(header_text)
    basics.phone = extract_phone(header_text)
    basics.url = pick_best_url(header_text, basics.email, config)
    basics.location = extract_location(
        part.strip() for line in header_lines for part in line.split("|") if part.strip()
    )

    sections: List[ParsedSection] = []
    current: Optional[ParsedSection] = None
    entries: List[Tuple[bool, str]] = []

    def flush() -> None:
        if current is not None:
            current.blocks = _markdown_blocks(current.kind, entries)
            sections.append(current)
        entries.clear()

    for raw in raw_lines:
        stripped = raw.strip()
        if not stripped:
            continue
        if stripped.startswith("### "):
            flush()
            mapped = heading_to_section(normalize_markdown_line(stripped[4:]))
            current = ParsedSection(kind=mapped[0], title=mapped[1]) if mapped else None
            continue
        if current is None:
            continue
        if stripped.startswith("#### "):
            entries.append((True, normalize_markdown_line(stripped[5:])))
            continue
        entries.append((False, normalize_markdown_line(stripped)))
    flush()

    summary = next(
        (s for s in sections if s.kind == SectionKind.CUSTOM and s.title.lower() == "summary" and s.blocks),
        None,
    )
    if summary is not None:
        basics.summary = re.sub(r"\n+", " ", summary.blocks[0]).strip()

    return ParsedDocument(basics=basics, sections=sections)


def parse_document(
    text: str = "", markdown: Optional[str] = None, config: HeuristicsConfig = DEFAULT_CONFIG
) -> ParsedDocument:
    """Prefer the markdown rendition when it yields sections, else plain text."""
    if markdown and markdown.strip():
        parsed = parse_cv_markdown(markdown, config)
        if parsed.sections:
            return parsed
        logger.debug("Markdown import found no sections, falling back to plain text")
        if not (text or "").strip():
            text = "\n".join(normalize_markdown_line(line) for line in markdown.split("\n"))
    return parse_cv_text(text, config)


# ---------------------------------------------------------------------------
# Item builder
# ---------------------------------------------------------------------------


def _block_lines(block: str) -> List[str]:
    return [line.strip() for line in (block or "").split("\n") if line.strip()]


def _collect_bullets(lines: List[str]) -> List[str]:
    """Bullet bodies, with wrapped continuation lines folded into their bullet."""
    bullets: List[str] = []
    previous_was_bullet = False
    for line in lines:
        if is_bullet_line(line):
            bullets.append(strip_bullet(line))
            previous_was_bullet = True
        elif previous_was_bullet and bullets:
            bullets[-1] = f"{bullets[-1]} {line}".strip()
        else:
            bullets.append(line)
    return [b for b in bullets if b]


def _header_fields(lines: List[str]) -> Tuple[str, str, str, List[str]]:
    """``(title, subtitle, date_range, remaining_lines)`` for a block.

    A date range on its own second line is picked up when the first line
    carries none.
    """
    header = strip_bullet(lines[0]) if lines else ""
    main, date_range = split_date_tail(header)
    rest = lines[1:]
    if not date_range and rest and not is_bullet_line(rest[0]):
        lead_main, lead_date = split_date_tail(rest[0])
        if lead_date and not lead_main:
            date_range = lead_date
            rest = rest[1:]
    title, subtitle = split_title_subtitle(main)
    return title, subtitle, date_range, rest


def _experience_item(block: str) -> ParsedItem:
    title, subtitle, date_range, rest = _header_fields(_block_lines(block))
    description = "\n".join(f"- {b}" for b in _collect_bullets(rest))
    return ParsedItem(title=title, subtitle=subtitle, date_range=date_range, description=description)


def _education_item(block: str) -> ParsedItem:
    title, subtitle, date_range, rest = _header_fields(_block_lines(block))
    if not subtitle and rest and not is_bullet_line(rest[0]):
        subtitle, rest = rest[0], rest[1:]
    return ParsedItem(title=title, subtitle=subtitle, date_range=date_range, description="\n".join(rest))


def _certification_item(block: str) -> ParsedItem:
    lines = _block_lines(block)
    main, date_range = split_date_tail(strip_bullet(lines[0]) if lines else "")
    title, subtitle = split_title_subtitle(main)
    return ParsedItem(title=title, subtitle=subtitle, date_range=date_range, description="\n".join(lines[1:]))


def _project_item(block: str) -> ParsedItem:
    lines = _block_lines(block)
    title = strip_bullet(lines[0]) if lines else ""
    return ParsedItem(title=title, description="\n".join(lines[1:]))


def _custom_item(block: str) -> ParsedItem:
    lines = _block_lines(block)
    return ParsedItem(
        title=lines[0] if lines else "",
        subtitle=lines[1] if len(lines) > 1 else "",
        description="\n".join(lines[2:]),
    )


def _skills_items(blocks: List[str]) -> List[ParsedItem]:
    """All skill lines as one item; headings of other sections that bled in are dropped."""
    lines = []
    for line in _block_lines("\n".join(blocks)):
        mapped = classify_heading(line)
        if mapped and mapped[0] != SectionKind.SKILLS:
            continue
        lines.append(line)
    text = "\n".join(lines).strip()
    return [ParsedItem(title="Skills", description=text)] if text else []


_ITEM_BUILDERS = {
    SectionKind.EXPERIENCE: _experience_item,
    SectionKind.EDUCATION: _education_item,
    SectionKind.CERTIFICATIONS: _certification_item,
    SectionKind.PROJECTS: _project_item,
    SectionKind.CUSTOM: _custom_item,
}


def build_items(section: ParsedSection, config: HeuristicsConfig = DEFAULT_CONFIG) -> List[ParsedItem]:
    """Split a section's raw blocks into items, shaped per section kind."""
    if section.kind == SectionKind.SKILLS:
        return _skills_items(section.blocks)
    builder = _ITEM_BUILDERS.get(section.kind, _custom_item)
    cap = config.item_cap(section.kind.value)
    return [builder(block) for block in section.blocks[:cap]]
