"""Tests for description parsing, sanitizing and rendering."""

import pytest

from dossier.core.config import HeuristicsConfig
from dossier.domain.description_format import (
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
from dossier.domain.models import BlockKind, DescriptionBlock, InlineRun


def _kinds(blocks):
    return [b.kind for b in blocks]


class TestSanitize:
    def test_renames_and_strips_attributes(self):
        assert sanitize_description_html("<p onclick='x()'>Hi <b>there</b></p>") == "<p>Hi <strong>there</strong></p>"

    def test_deeply_nested_disallowed_tags_unwrapped(self):
        value = "<div><span><font color='red'><a href='https://x.io'>deep</a></font></span></div>"
        assert sanitize_description_html(value) == "<p>deep</p>"

    def test_script_content_dropped(self):
        assert sanitize_description_html("<script>alert(1)</script><p>ok</p>") == "<p>ok</p>"

    def test_line_break_stays_html_void(self):
        assert sanitize_description_html("<p>a<br/>b</p>") == "<p>a<br>b</p>"

    def test_stray_close_tag_between_spaces_collapses(self):
        assert sanitize_description_html("<ul><li>a</li> </span> </ul>") == "<ul><li>a</li> </ul>"

    def test_is_html_description(self):
        assert is_html_description("<p>x</p>")
        assert not is_html_description("- Built X\n- Shipped Y")


class TestNormalizeStored:
    @pytest.mark.parametrize(
        "value",
        [
            "",
            "<p></p>",
            "<p><br></p>",
            "<div><span><font><a href='x'>deep</a></font></span></div>",
            "<p onclick='x'>Hi <b>there</b></p>",
            "<ul><li>One</li><li><em>Two</em></li></ul>",
            "a & b",
            "<ul><li>a</li> </span> </ul>",
            "<p><p> </ul> ",
            "<p>x</p>\n</div>\n <!-- c --> <p>y</p>",
        ],
    )
    def test_idempotent(self, value):
        once = normalize_stored_description_html(value)
        assert normalize_stored_description_html(once) == once

    @pytest.mark.parametrize("value", ["", "<p></p>", "<p><br></p>", "  <p> </p> "])
    def test_visually_empty_is_empty_string(self, value):
        assert normalize_stored_description_html(value) == ""


class TestParseBlocks:
    def test_legacy_heading_promotion(self):
        blocks = parse_description_blocks("Senior Engineer, Acme\n- Led rewrite\n- Cut latency 40%")
        assert _kinds(blocks) == [BlockKind.HEADING, BlockKind.BULLET, BlockKind.BULLET]
        assert blocks[0].text == "Senior Engineer, Acme"

    def test_plain_bullets_are_not_promoted(self):
        blocks = parse_description_blocks("- Built X\n- Shipped Y")
        assert _kinds(blocks) == [BlockKind.BULLET, BlockKind.BULLET]

    def test_role_shaped_list_item_promoted(self):
        blocks = parse_description_blocks("- Senior Engineer, Acme\n- Led rewrite")
        assert _kinds(blocks) == [BlockKind.HEADING, BlockKind.BULLET]

    def test_paragraph_without_list_stays_paragraph(self):
        assert _kinds(parse_description_blocks("Just a sentence.")) == [BlockKind.PARAGRAPH]

    def test_markup_blocks(self):
        blocks = parse_description_blocks("<p>Intro</p><ul><li>One</li><li><strong>Two</strong></li></ul>")
        assert _kinds(blocks) == [BlockKind.HEADING, BlockKind.BULLET, BlockKind.BULLET]
        assert blocks[2].runs[0].bold is True

    def test_nested_lists_flattened(self):
        blocks = parse_description_blocks("<ul><li>A<ul><li>B</li></ul></li></ul>")
        assert [(b.kind, b.text) for b in blocks] == [(BlockKind.BULLET, "A"), (BlockKind.BULLET, "B")]

    def test_ordered_list(self):
        blocks = parse_description_blocks("<ol><li>First</li><li>Second</li></ol>")
        assert _kinds(blocks) == [BlockKind.NUMBERED, BlockKind.NUMBERED]

    def test_empty_blocks_dropped(self):
        assert parse_description_blocks("<p> </p><ul><li></li></ul>") == []
        assert parse_description_blocks("") == []

    def test_loose_text_becomes_paragraphs(self):
        blocks = parse_description_blocks("first<br>second <strong>bold</strong>")
        assert [b.text for b in blocks] == ["first", "second bold"]

    def test_heading_length_threshold_is_configurable(self):
        config = HeuristicsConfig(heading_max_length=10)
        blocks = parse_description_blocks("- Senior Engineer, Acme\n- Led rewrite", config)
        assert _kinds(blocks) == [BlockKind.BULLET, BlockKind.BULLET]


class TestRendering:
    def test_bullet_round_trip(self):
        html = description_to_editor_html("- Built X\n- Shipped Y")
        assert html == "<ul><li>Built X</li><li>Shipped Y</li></ul>"
        assert description_to_plain_text(html) == "- Built X\n- Shipped Y"

    def test_heading_renders_as_paragraph(self):
        html = description_to_editor_html("Senior Engineer, Acme\n- Led rewrite\n- Cut latency 40%")
        assert html == "<p>Senior Engineer, Acme</p><ul><li>Led rewrite</li><li>Cut latency 40%</li></ul>"

    def test_legacy_emphasis(self):
        assert description_to_editor_html("Did **big** things") == "<p>Did <strong>big</strong> things</p>"

    def test_editor_html_for_empty(self):
        assert description_to_editor_html("") == "<p></p>"
        assert description_to_editor_html("<p></p>") == "<p></p>"

    def test_editor_html_sanitizes_markup(self):
        assert description_to_editor_html("<div>Hi <i>x</i></div>") == "<p>Hi <em>x</em></p>"

    def test_blocks_to_html_switches_list_types(self):
        blocks = [
            DescriptionBlock(BlockKind.BULLET, [InlineRun("a")]),
            DescriptionBlock(BlockKind.NUMBERED, [InlineRun("b")]),
            DescriptionBlock(BlockKind.PARAGRAPH, [InlineRun(" ")]),
        ]
        assert blocks_to_html(blocks) == "<ul><li>a</li></ul><ol><li>b</li></ol>"

    def test_legacy_markdown_to_html_empty(self):
        assert legacy_markdown_to_html("") == ""

    def test_plain_text_decodes_entities(self):
        assert description_to_plain_text("<p>Tom &amp; Jerry</p>") == "Tom & Jerry"


class TestPlainTextNormalization:
    def test_wrapped_sentence_folds_into_bullet(self):
        raw = "- Built a thing\nthat wraps up nicely.\n- Shipped"
        assert normalize_description_plain_text("experience", raw) == "- Built a thing that wraps up nicely.\n- Shipped"

    def test_subheading_gets_blank_line(self):
        raw = "Intro line.\nSenior Engineer, Acme\n- Did X"
        assert normalize_description_plain_text("experience", raw) == "Intro line.\n\nSenior Engineer, Acme\n- Did X"

    def test_non_list_section_only_tidies_spacing(self):
        assert normalize_description_plain_text("skills", "  React ,  Node \n\n Go") == "React, Node\nGo"

    def test_unknown_kind_treated_as_custom(self):
        assert normalize_description_plain_text("awards", "- One\n- Two") == "- One\n- Two"

    def test_empty(self):
        assert normalize_description_plain_text("experience", " \n ") == ""

    def test_to_html(self):
        html = normalize_description_to_html("experience", "Senior Engineer, Acme\n- Led rewrite")
        assert html == "<p>Senior Engineer, Acme</p><ul><li>Led rewrite</li></ul>"

    def test_to_html_empty(self):
        assert normalize_description_to_html("experience", "<p></p>") == ""
