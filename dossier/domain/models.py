"""Value types produced by the import and description pipelines.

Every value here is derived on demand from a string and never persisted in
this form; callers map them onto their own long-lived records.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List


class SectionKind(str, Enum):
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    PROJECTS = "projects"
    CUSTOM = "custom"


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET = "bullet"
    NUMBERED = "numbered"

    @property
    def is_list(self) -> bool:
        return self in (BlockKind.BULLET, BlockKind.NUMBERED)


@dataclass
class InlineRun:
    """A maximal span of text sharing one bold/italic/underline combination."""

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def same_style(self, other: "InlineRun") -> bool:
        return (self.bold, self.italic, self.underline) == (other.bold, other.italic, other.underline)


@dataclass
class DescriptionBlock:
    """One structural unit of a description: heading, paragraph or list item."""

    kind: BlockKind
    runs: List[InlineRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        return re.sub(r"\s+", " ", "".join(run.text for run in self.runs)).strip()


@dataclass
class Basics:
    """Header fields of a résumé. An empty string means "not found"."""

    name: str = ""
    headline: str = ""
    email: str = ""
    phone: str = ""
    url: str = ""
    summary: str = ""
    location: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Return only the fields that were found."""
        return {key: value for key, value in asdict(self).items() if value}


@dataclass
class ParsedSection:
    """A recognized résumé section holding raw, unsplit item blocks."""

    kind: SectionKind
    title: str
    blocks: List[str] = field(default_factory=list)


@dataclass
class ParsedDocument:
    basics: Basics = field(default_factory=Basics)
    sections: List[ParsedSection] = field(default_factory=list)


@dataclass
class ParsedItem:
    """One list item of a section, split into header fields and body."""

    title: str = ""
    subtitle: str = ""
    date_range: str = ""
    description: str = ""


@dataclass
class SkillEntry:
    name: str
    level: int


@dataclass
class ContactLine:
    kind: str  # "location", "email", "phone", "url"
    value: str


@dataclass(frozen=True)
class MonthYear:
    month: int
    year: int
