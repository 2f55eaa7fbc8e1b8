"""Tests for heading classification and item header splitting."""

from dossier.core.config import HeuristicsConfig
from dossier.domain.headings import (
    classify_heading,
    heading_to_section,
    is_likely_heading_line,
    looks_like_heading,
    split_date_tail,
    split_title_subtitle,
)
from dossier.domain.models import SectionKind


class TestSectionHeadings:
    def test_aliases(self):
        assert heading_to_section("Work Experience:") == (SectionKind.EXPERIENCE, "Experience")
        assert heading_to_section("- Certifications") == (SectionKind.CERTIFICATIONS, "Certificates")
        assert heading_to_section("Profile") == (SectionKind.CUSTOM, "Summary")
        assert heading_to_section("Hobbies") is None

    def test_looks_like_heading(self):
        assert looks_like_heading("EXPERIENCE")
        assert looks_like_heading("Technical Skills")
        assert not looks_like_heading("I have experience in many things")
        assert not looks_like_heading("CV")

    def test_classify_requires_shape_and_alias(self):
        assert classify_heading("EDUCATION") == (SectionKind.EDUCATION, "Education")
        assert classify_heading("education and training in depth") is None


class TestSubheadingLines:
    def test_role_line(self):
        assert is_likely_heading_line("Senior Engineer, Acme")

    def test_sentence_is_not_heading(self):
        assert not is_likely_heading_line("Did the thing.")

    def test_bullet_is_not_heading(self):
        assert not is_likely_heading_line("- Senior Engineer, Acme")

    def test_length_limit(self):
        assert not is_likely_heading_line("word " * 20)
        assert is_likely_heading_line("Short context line", HeuristicsConfig(heading_max_length=20))
        assert not is_likely_heading_line("Short context line", HeuristicsConfig(heading_max_length=10))


class TestHeaderSplitting:
    def test_month_range_tail(self):
        assert split_date_tail("Eng, Acme  Jan 2020 - Present") == ("Eng, Acme", "Jan 2020 — Present")

    def test_year_range_tail(self):
        assert split_date_tail("BS CS, State U  2016 - 2020") == ("BS CS, State U", "2016 — 2020")

    def test_bare_year_is_not_a_range(self):
        assert split_date_tail("Marketing 2020") == ("Marketing 2020", "")

    def test_title_subtitle(self):
        assert split_title_subtitle("Eng, Acme, Berlin") == ("Eng", "Acme, Berlin")
        assert split_title_subtitle("Eng") == ("Eng", "")
