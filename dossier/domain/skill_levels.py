"""Skill rating codec: ``name::level`` lines with levels clamped to 1-5."""

from __future__ import annotations

import re
from typing import List, Optional

from .models import SkillEntry

DEFAULT_SKILL_LEVEL = 4
MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 5

_LEVEL_SUFFIX_RE = re.compile(r"^(.*?)(?:::|\|)\s*([1-5])\s*$")
_FRACTION_SUFFIX_RE = re.compile(r"^(.*?)\s*\((\d)\s*/\s*5\)\s*$")
_LEADING_BULLET_RE = re.compile(r"^[-•*](?:\s+|$)")


def clamp_level(value: float) -> int:
    # half-up, so 2.5 -> 3 as a user would expect
    return max(MIN_SKILL_LEVEL, min(MAX_SKILL_LEVEL, int(float(value) + 0.5)))


def normalize_skill_name(value: str) -> str:
    return re.sub(r"\s+", " ", _LEADING_BULLET_RE.sub("", (value or "").strip())).strip()


def _parse_line(line: str, default_level: int) -> Optional[SkillEntry]:
    for pattern in (_LEVEL_SUFFIX_RE, _FRACTION_SUFFIX_RE):
        match = pattern.match(line)
        if match:
            name = normalize_skill_name(match.group(1))
            if not name:
                return None
            return SkillEntry(name=name, level=clamp_level(int(match.group(2))))

    name = normalize_skill_name(line)
    if not name:
        return None
    return SkillEntry(name=name, level=clamp_level(default_level))


def _has_level_markers(line: str) -> bool:
    return "::" in line or "|" in line or bool(_FRACTION_SUFFIX_RE.match(line))


def parse_skill_entries(description: str, default_level: int = DEFAULT_SKILL_LEVEL) -> List[SkillEntry]:
    """Parse a skills description into ordered, de-duplicated entries.

    Accepted per line: ``React::4``, ``React|4``, ``React (4/5)`` or a bare
    ``React`` at *default_level*. A single comma-separated line without level
    markers is read as one skill per comma.
    """
    text = (description or "").strip()
    if not text:
        return []

    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if len(lines) == 1 and "," in lines[0] and not _has_level_markers(lines[0]):
        lines = [part.strip() for part in lines[0].split(",") if part.strip()]

    entries: List[SkillEntry] = []
    seen: set[str] = set()
    for line in lines:
        entry = _parse_line(line, default_level)
        if entry is None:
            continue
        key = entry.name.lower()
        if key in seen:
            continue
        seen.add(key)
        entries.append(entry)
    return entries


def serialize_skill_entries(entries: List[SkillEntry]) -> str:
    lines = []
    for entry in entries:
        name = normalize_skill_name(entry.name)
        if not name:
            continue
        lines.append(f"{name}::{clamp_level(entry.level)}")
    return "\n".join(lines)
