"""Tests for résumé document import and item building."""

from dossier.core.config import HeuristicsConfig
from dossier.domain.cv_import import (
    build_items,
    normalize_markdown_line,
    parse_cv_markdown,
    parse_cv_text,
    parse_document,
    split_blocks,
)
from dossier.domain.models import ParsedSection, SectionKind


def _kinds(document):
    return [section.kind for section in document.sections]


MARKDOWN_RESUME = """\
# Jane Doe
## Backend Engineer
jane@janedoe.dev | Berlin, Germany

### Summary
Builds reliable systems.

### Experience
#### Engineer, Acme  Jan 2020 - Present
- Led the **rewrite**
- Cut latency

### Skills
Python::5
Go::3
"""


class TestSplitBlocks:
    def test_bullets_stay_with_their_header(self):
        lines = [
            "Eng, Acme Jan 2020 - Present",
            "- Did X",
            "- Did Y",
            "Lead, Beta 2018 - 2019",
            "- Did Z",
        ]
        assert split_blocks(lines) == [
            "Eng, Acme Jan 2020 - Present\n- Did X\n- Did Y",
            "Lead, Beta 2018 - 2019\n- Did Z",
        ]

    def test_bare_bullets_are_separate_items(self):
        assert split_blocks(["- A", "- B"]) == ["- A", "- B"]

    def test_wrapped_bullet_continues(self):
        assert split_blocks(["- Built a", "very long thing"]) == ["- Built a\nvery long thing"]

    def test_consecutive_dated_headers(self):
        assert split_blocks(["Course A 2019 - 2020", "Course B 2020 - 2021"]) == [
            "Course A 2019 - 2020",
            "Course B 2020 - 2021",
        ]


class TestParseText:
    def test_sections_and_items(self):
        text = "\n".join(
            ["EXPERIENCE", "Eng, Acme  Jan 2020 - Present", "- Did X", "EDUCATION", "BS CS, State U  2016 - 2020"]
        )
        document = parse_cv_text(text)
        assert _kinds(document) == [SectionKind.EXPERIENCE, SectionKind.EDUCATION]
        assert [len(section.blocks) for section in document.sections] == [1, 1]

        experience = build_items(document.sections[0])[0]
        assert experience.title == "Eng"
        assert experience.subtitle == "Acme"
        assert experience.date_range == "Jan 2020 — Present"
        assert experience.description == "- Did X"

        education = build_items(document.sections[1])[0]
        assert (education.title, education.subtitle, education.date_range) == ("BS CS", "State U", "2016 — 2020")

    def test_lines_before_first_heading_not_in_section(self):
        document = parse_cv_text("Jane Doe\nSome intro\nSKILLS\nPython")
        assert document.sections[0].blocks == ["Python"]

    def test_no_headings_falls_back_to_content(self):
        document = parse_cv_text("Just some text\nwith no headings")
        assert len(document.sections) == 1
        assert document.sections[0].kind == SectionKind.CUSTOM
        assert document.sections[0].title == "Content"

    def test_fallback_respects_line_cap(self):
        text = "\n".join(f"- line {i}" for i in range(10))
        document = parse_cv_text(text, HeuristicsConfig(fallback_line_cap=3))
        assert len(document.sections[0].blocks) == 3

    def test_basics_and_summary(self):
        text = "\n".join(
            [
                "Jane Doe",
                "Senior Backend Engineer",
                "I build reliable distributed systems for fintech.",
                "EXPERIENCE",
                "Eng, Acme 2020 - 2021",
            ]
        )
        basics = parse_cv_text(text).basics
        assert basics.name == "Jane Doe"
        assert basics.headline == "Senior Backend Engineer"
        assert basics.summary == "I build reliable distributed systems for fintech."

    def test_empty_input(self):
        document = parse_cv_text("")
        assert document.basics.to_dict() == {}
        assert document.sections[0].blocks == []


class TestParseMarkdown:
    def test_markdown_resume(self):
        document = parse_cv_markdown(MARKDOWN_RESUME)
        assert document.basics.name == "Jane Doe"
        assert document.basics.headline == "Backend Engineer"
        assert document.basics.email == "jane@janedoe.dev"
        assert document.basics.location == "Berlin, Germany"
        assert document.basics.summary == "Builds reliable systems."
        assert _kinds(document) == [SectionKind.CUSTOM, SectionKind.EXPERIENCE, SectionKind.SKILLS]

        item = build_items(document.sections[1])[0]
        assert item.title == "Engineer"
        assert item.date_range == "Jan 2020 — Present"
        assert item.description == "- Led the rewrite\n- Cut latency"

        skills = build_items(document.sections[2])
        assert [(s.title, s.description) for s in skills] == [("Skills", "Python::5\nGo::3")]

    def test_normalize_markdown_line(self):
        assert normalize_markdown_line("* See [my site](https://x.io) \\- **now**") == "- See my site - now"

    def test_unknown_section_heading_skipped(self):
        document = parse_cv_markdown("### Hobbies\nChess\n### Skills\nGo")
        assert _kinds(document) == [SectionKind.SKILLS]


class TestParseDocument:
    def test_prefers_markdown(self):
        document = parse_document("ignored", markdown=MARKDOWN_RESUME)
        assert document.basics.headline == "Backend Engineer"

    def test_markdown_without_sections_falls_back_to_text(self):
        document = parse_document(markdown="# Jane Doe\nEXPERIENCE\nEng, Acme 2020 - 2021")
        assert _kinds(document) == [SectionKind.EXPERIENCE]

    def test_plain_text_only(self):
        assert _kinds(parse_document("SKILLS\nGo")) == [SectionKind.SKILLS]


class TestBuildItems:
    def test_caps(self):
        section = ParsedSection(SectionKind.EXPERIENCE, "Experience", [f"Role {i}, Co" for i in range(5)])
        config = HeuristicsConfig(item_caps={"experience": 2})
        assert len(build_items(section, config)) == 2
        assert len(build_items(section)) == 5

    def test_date_on_second_line(self):
        section = ParsedSection(SectionKind.EXPERIENCE, "Experience", ["Engineer, Acme\nJan 2020 - Present\n- Did X"])
        item = build_items(section)[0]
        assert (item.title, item.subtitle, item.date_range, item.description) == (
            "Engineer",
            "Acme",
            "Jan 2020 — Present",
            "- Did X",
        )

    def test_wrapped_bullets_folded(self):
        section = ParsedSection(SectionKind.EXPERIENCE, "Experience", ["Engineer, Acme\n- Built a\nlong thing"])
        assert build_items(section)[0].description == "- Built a long thing"

    def test_education_second_line_subtitle(self):
        section = ParsedSection(
            SectionKind.EDUCATION, "Education", ["State University\nBSc Computer Science\nThesis on compilers"]
        )
        item = build_items(section)[0]
        assert (item.title, item.subtitle, item.description) == (
            "State University",
            "BSc Computer Science",
            "Thesis on compilers",
        )

    def test_certification_keeps_body_verbatim(self):
        section = ParsedSection(
            SectionKind.CERTIFICATIONS, "Certificates", ["AWS Solutions Architect, Amazon Mar 2022\n- Credential 123"]
        )
        item = build_items(section)[0]
        assert (item.title, item.subtitle, item.date_range) == ("AWS Solutions Architect", "Amazon", "Mar 2022")
        assert item.description == "- Credential 123"

    def test_project(self):
        section = ParsedSection(SectionKind.PROJECTS, "Projects", ["- Dossier\nA résumé importer."])
        item = build_items(section)[0]
        assert (item.title, item.description) == ("Dossier", "A résumé importer.")

    def test_skills_drop_foreign_headings(self):
        section = ParsedSection(SectionKind.SKILLS, "Skills", ["Python\nEXPERIENCE", "Go"])
        assert build_items(section)[0].description == "Python\nGo"

    def test_skills_empty(self):
        assert build_items(ParsedSection(SectionKind.SKILLS, "Skills", [])) == []

    def test_custom(self):
        section = ParsedSection(SectionKind.CUSTOM, "Awards", ["Title\nSub\nRest one\nRest two"])
        item = build_items(section)[0]
        assert (item.title, item.subtitle, item.description) == ("Title", "Sub", "Rest one\nRest two")
