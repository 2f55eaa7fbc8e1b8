"""Heading and section classification plus the line heuristics shared by
the document parser and the description normalizer.

Every function here is a small pure predicate or transform over one line of
text; none of them raise.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from ..core.config import DEFAULT_CONFIG, HeuristicsConfig
from .models import SectionKind

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

BULLET_RE = re.compile(r"^[-•*]\s+")

_MONTH = (
    r"\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?"
)
_DASH = r"\s*[—–-]\s*"

#: A month/year or year range anywhere in a line ("Jan 2020 - Present").
DATE_RANGE_LINE_RE = re.compile(
    rf"(?:{_MONTH}\s+\d{{4}}{_DASH}(?:{_MONTH}\s+\d{{4}}|Present)|\d{{4}}{_DASH}(?:\d{{4}}|Present))",
    re.IGNORECASE,
)

#: A trailing date or date range at the end of an item header line.
DATE_TAIL_RE = re.compile(
    rf"((?:{_MONTH}\s+\d{{4}}(?:{_DASH}(?:{_MONTH}\s+\d{{4}}|Present))?)|(?:\d{{4}}{_DASH}(?:\d{{4}}|Present)))$",
    re.IGNORECASE,
)

#: "Senior Engineer, Acme" shaped lines.
ROLE_TITLE_LINE_RE = re.compile(r"^[A-Z][A-Za-z .,'&/()-]+,\s*[A-Z][A-Za-z .,'&/()-]+$")

_TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$")

# ---------------------------------------------------------------------------
# Section aliases
# ---------------------------------------------------------------------------

#: Cleaned, lower-cased heading text -> (section kind, display title).
SECTION_ALIASES: dict[str, Tuple[SectionKind, str]] = {}

for _alias in ("experience", "work experience", "professional experience", "employment", "employment history"):
    SECTION_ALIASES[_alias] = (SectionKind.EXPERIENCE, "Experience")
for _alias in ("education", "academic", "academics"):
    SECTION_ALIASES[_alias] = (SectionKind.EDUCATION, "Education")
for _alias in ("skills", "technical skills", "core skills"):
    SECTION_ALIASES[_alias] = (SectionKind.SKILLS, "Skills")
for _alias in ("courses", "coursework", "certificates", "certifications", "certification", "training"):
    SECTION_ALIASES[_alias] = (SectionKind.CERTIFICATIONS, "Certificates")
for _alias in ("projects", "project", "selected projects"):
    SECTION_ALIASES[_alias] = (SectionKind.PROJECTS, "Projects")
for _alias in ("summary", "profile", "about"):
    SECTION_ALIASES[_alias] = (SectionKind.CUSTOM, "Summary")


# ---------------------------------------------------------------------------
# Bullets
# ---------------------------------------------------------------------------


def is_bullet_line(line: str) -> bool:
    return bool(BULLET_RE.match(line or ""))


def strip_bullet(line: str) -> str:
    return BULLET_RE.sub("", (line or "").strip()).strip()


# ---------------------------------------------------------------------------
# Section headings
# ---------------------------------------------------------------------------


def clean_heading(heading: str) -> str:
    """Drop a leading bullet and trailing colons/dashes from a heading line."""
    value = BULLET_RE.sub("", (heading or "").strip())
    return re.sub(r"[:–—-]+$", "", value).strip()


def heading_to_section(heading: str) -> Optional[Tuple[SectionKind, str]]:
    """Map a heading line to ``(kind, title)``, or ``None`` if it is not one."""
    key = re.sub(r"\s+", " ", clean_heading(heading).lower())
    return SECTION_ALIASES.get(key)


def looks_like_heading(line: str) -> bool:
    """True for short, mostly upper-case or Title Case lines."""
    if not line or len(line) > 42:
        return False
    alpha = re.sub(r"[^A-Za-z]", "", line)
    if len(alpha) < 4:
        return False
    upper_ratio = len(re.sub(r"[^A-Z]", "", alpha)) / len(alpha)
    return upper_ratio > 0.7 or bool(_TITLE_CASE_RE.match(line))


def classify_heading(line: str) -> Optional[Tuple[SectionKind, str]]:
    """Combined check used while segmenting: heading-shaped *and* a known alias."""
    if not looks_like_heading(line):
        return None
    return heading_to_section(line)


# ---------------------------------------------------------------------------
# Sub-heading heuristics
# ---------------------------------------------------------------------------


def ends_with_sentence_punctuation(text: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> bool:
    text = (text or "").rstrip()
    return bool(text) and text[-1] in config.sentence_punctuation


def is_role_or_date_line(line: str) -> bool:
    return bool(ROLE_TITLE_LINE_RE.match(line or "") or DATE_RANGE_LINE_RE.search(line or ""))


def is_likely_heading_line(line: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> bool:
    """Could *line* be a sub-heading (a short context line above a list)?"""
    if not line or is_bullet_line(line):
        return False
    if is_role_or_date_line(line):
        return True
    if ends_with_sentence_punctuation(line, config):
        return False
    if len(line) > config.heading_max_length:
        return False
    return bool(re.search(r"[A-Za-z]", line))


# ---------------------------------------------------------------------------
# Item header splitting
# ---------------------------------------------------------------------------


def split_date_tail(value: str) -> Tuple[str, str]:
    """Split ``"Eng, Acme  Jan 2020 - Present"`` into main text and date range.

    The date range comes back with its separator normalized to `` — ``.
    """
    text = re.sub(r"\s+", " ", value or "").strip()
    match = DATE_TAIL_RE.search(text)
    if not match:
        return text, ""
    main = re.sub(r"[,\s–—-]+$", "", text[: match.start()]).strip()
    date_range = re.sub(r"\s*[–—-]\s*", " — ", match.group(1))
    return main, date_range


def has_date_tail(value: str) -> bool:
    return bool(DATE_TAIL_RE.search(re.sub(r"\s+", " ", value or "").strip()))


def split_title_subtitle(value: str) -> Tuple[str, str]:
    """Split on the first comma: ``"Eng, Acme, Berlin"`` -> ``("Eng", "Acme, Berlin")``."""
    parts = [part.strip() for part in (value or "").split(",")]
    parts = [part for part in parts if part]
    if len(parts) <= 1:
        return (value or "").strip(), ""
    return parts[0], ", ".join(parts[1:])
