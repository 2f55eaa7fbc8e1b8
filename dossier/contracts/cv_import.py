"""Response contracts for an imported résumé document."""

from __future__ import annotations

from pydantic import BaseModel

from ..domain.models import ParsedDocument, ParsedItem, ParsedSection, SectionKind
from ..domain.skill_levels import DEFAULT_SKILL_LEVEL, parse_skill_entries


class BasicsResponse(BaseModel):
    name: str = ""
    headline: str = ""
    email: str = ""
    phone: str = ""
    url: str = ""
    summary: str = ""
    location: str = ""


class ParsedItemResponse(BaseModel):
    title: str = ""
    subtitle: str = ""
    date_range: str = ""
    description: str = ""

    @classmethod
    def from_item(cls, item: ParsedItem) -> "ParsedItemResponse":
        return cls(
            title=item.title,
            subtitle=item.subtitle,
            date_range=item.date_range,
            description=item.description,
        )


class SkillResponse(BaseModel):
    name: str
    level: int


class ParsedSectionResponse(BaseModel):
    kind: str
    title: str
    blocks: list[str] = []
    items: list[ParsedItemResponse] = []
    skills: list[SkillResponse] = []

    @classmethod
    def from_section(
        cls,
        section: ParsedSection,
        items: list[ParsedItem],
        default_skill_level: int = DEFAULT_SKILL_LEVEL,
    ) -> "ParsedSectionResponse":
        skills: list[SkillResponse] = []
        if section.kind == SectionKind.SKILLS:
            entries = parse_skill_entries("\n".join(item.description for item in items), default_skill_level)
            skills = [SkillResponse(name=entry.name, level=entry.level) for entry in entries]
        return cls(
            kind=section.kind.value,
            title=section.title,
            blocks=list(section.blocks),
            items=[ParsedItemResponse.from_item(item) for item in items],
            skills=skills,
        )


class ParsedDocumentResponse(BaseModel):
    """Parsed document as returned to callers of the import tool."""

    source: str = ""
    format: str = ""
    basics: BasicsResponse
    sections: list[ParsedSectionResponse] = []

    @classmethod
    def from_document(
        cls,
        document: ParsedDocument,
        items: list[list[ParsedItem]],
        source: str = "",
        format: str = "",
        default_skill_level: int = DEFAULT_SKILL_LEVEL,
    ) -> "ParsedDocumentResponse":
        """Pair each section with its built items (same order as ``document.sections``).

        Skills sections additionally carry their rated entries; lines without
        a level get *default_skill_level*.
        """
        basics = document.basics
        return cls(
            source=source,
            format=format,
            basics=BasicsResponse(
                name=basics.name,
                headline=basics.headline,
                email=basics.email,
                phone=basics.phone,
                url=basics.url,
                summary=basics.summary,
                location=basics.location,
            ),
            sections=[
                ParsedSectionResponse.from_section(section, section_items, default_skill_level)
                for section, section_items in zip(document.sections, items)
            ],
        )
