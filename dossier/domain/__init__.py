"""Dossier Domain - Pure logic for résumé import and description formats.

This package contains pure functions with no file system dependencies.
All I/O is handled by the tools layer; this package operates on strings.
"""

from .contact import contact_inline, contact_lines, extract_basics
from .cv_import import build_items, parse_cv_markdown, parse_cv_text, parse_document, split_blocks
from .date_format import DATE_FORMATS, format_date_range, parse_month_year, split_date_range
from .description_format import (
    blocks_to_html,
    description_to_editor_html,
    description_to_plain_text,
    is_html_description,
    legacy_markdown_to_html,
    normalize_description_plain_text,
    normalize_description_to_html,
    normalize_stored_description_html,
    parse_description_blocks,
    sanitize_description_html,
)
from .headings import classify_heading, heading_to_section, looks_like_heading, split_date_tail, split_title_subtitle
from .inline_runs import parse_html_runs, parse_markdown_runs
from .models import (
    Basics,
    BlockKind,
    ContactLine,
    DescriptionBlock,
    InlineRun,
    MonthYear,
    ParsedDocument,
    ParsedItem,
    ParsedSection,
    SectionKind,
    SkillEntry,
)
from .skill_levels import parse_skill_entries, serialize_skill_entries

__all__ = [
    # Models
    "Basics",
    "BlockKind",
    "ContactLine",
    "DescriptionBlock",
    "InlineRun",
    "MonthYear",
    "ParsedDocument",
    "ParsedItem",
    "ParsedSection",
    "SectionKind",
    "SkillEntry",
    # Inline runs
    "parse_markdown_runs",
    "parse_html_runs",
    # Description format
    "parse_description_blocks",
    "blocks_to_html",
    "sanitize_description_html",
    "normalize_stored_description_html",
    "description_to_plain_text",
    "description_to_editor_html",
    "legacy_markdown_to_html",
    "normalize_description_plain_text",
    "normalize_description_to_html",
    "is_html_description",
    # Skill levels
    "parse_skill_entries",
    "serialize_skill_entries",
    # Dates
    "DATE_FORMATS",
    "format_date_range",
    "parse_month_year",
    "split_date_range",
    # Headings
    "classify_heading",
    "heading_to_section",
    "looks_like_heading",
    "split_date_tail",
    "split_title_subtitle",
    # Contact
    "extract_basics",
    "contact_lines",
    "contact_inline",
    # Import
    "parse_cv_text",
    "parse_cv_markdown",
    "parse_document",
    "split_blocks",
    "build_items",
]
