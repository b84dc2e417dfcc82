"""
Cursor and page-break bookkeeping for the summary renderer.

Run: pytest backend/tests/test_pagination.py -v
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from portal.core.constants import PDF_CONFIG
from portal.services.pdf_renderer import RenderContext, add_section, add_title

MARGIN = PDF_CONFIG["MARGIN"]
PAGE_HEIGHT = PDF_CONFIG["PAGE_HEIGHT"]
TOP = PAGE_HEIGHT - MARGIN


@pytest.fixture
def ctx():
    context = RenderContext.create()
    yield context
    context.doc.close()


def _words_by_page(ctx):
    return [page.get_text("words") for page in ctx.doc]


class TestRenderContext:

    def test_starts_with_one_a4_page(self, ctx):
        assert ctx.page_count == 1
        assert ctx.page.rect.width == pytest.approx(PDF_CONFIG["PAGE_WIDTH"])
        assert ctx.page.rect.height == pytest.approx(PAGE_HEIGHT)
        assert ctx.current_y == pytest.approx(TOP)

    def test_content_width(self, ctx):
        assert ctx.content_width == pytest.approx(PDF_CONFIG["PAGE_WIDTH"] - 2 * MARGIN)

    def test_new_page_resets_cursor(self, ctx):
        ctx.current_y = 123
        ctx.new_page()
        assert ctx.page_count == 2
        assert ctx.current_y == pytest.approx(TOP)

    def test_ensure_space_breaks_below_threshold(self, ctx):
        ctx.current_y = MARGIN + 19
        assert ctx.ensure_space(20) is True
        assert ctx.page_count == 2
        assert ctx.current_y == pytest.approx(TOP)

    def test_ensure_space_keeps_page_at_threshold(self, ctx):
        ctx.current_y = MARGIN + 20
        assert ctx.ensure_space(20) is False
        assert ctx.page_count == 1
        assert ctx.current_y == MARGIN + 20

    def test_draw_text_uses_bottom_up_cursor(self, ctx):
        ctx.current_y = TOP
        ctx.draw_text("Marker", "helv", 12)
        (x0, y0, x1, y1, word, *_rest) = ctx.page.get_text("words")[0]
        assert word == "Marker"
        assert x0 == pytest.approx(MARGIN, abs=1)
        # Baseline sits MARGIN points below the top edge
        assert y0 < MARGIN < y1


class TestCursorAdvance:

    def test_title_advance(self, ctx):
        add_title(ctx, "Application Summary")
        assert ctx.current_y == pytest.approx(TOP - PDF_CONFIG["TITLE_SIZE"] - PDF_CONFIG["TITLE_GAP"])

    def test_section_advance(self, ctx):
        add_section(ctx, "Heading", "one\ntwo\nthree")
        expected = (
            TOP
            - (PDF_CONFIG["HEADING_SIZE"] + PDF_CONFIG["HEADING_GAP"])
            - 3 * PDF_CONFIG["LINE_HEIGHT"]
            - PDF_CONFIG["SECTION_SPACING"]
        )
        assert ctx.current_y == pytest.approx(expected)

    def test_blank_lines_advance_without_drawing(self, ctx):
        add_section(ctx, "Heading", "one\n\nthree")
        words = [w[4] for w in ctx.page.get_text("words")]
        assert words == ["Heading", "one", "three"]
        expected = TOP - 26 - 3 * PDF_CONFIG["LINE_HEIGHT"] - PDF_CONFIG["SECTION_SPACING"]
        assert ctx.current_y == pytest.approx(expected)


class TestPageBreaks:

    def test_section_moves_to_new_page_when_space_is_short(self, ctx):
        ctx.current_y = MARGIN + PDF_CONFIG["SECTION_BREAK_SPACE"] - 1
        add_section(ctx, "Moved", "content")
        assert ctx.page_count == 2
        words = _words_by_page(ctx)
        assert words[0] == []
        assert [w[4] for w in words[1]] == ["Moved", "content"]

    def test_section_stays_when_space_suffices(self, ctx):
        ctx.current_y = MARGIN + PDF_CONFIG["SECTION_BREAK_SPACE"]
        add_section(ctx, "Stays", "content")
        assert ctx.page_count == 1

    def test_long_content_flows_across_pages(self, ctx):
        content = "\n".join(f"line{i}" for i in range(100))
        add_section(ctx, "Long", content)
        assert ctx.page_count > 1

        drawn = [w[4] for page_words in _words_by_page(ctx) for w in page_words]
        assert drawn == ["Long"] + [f"line{i}" for i in range(100)]

    def test_lines_never_cross_bottom_margin(self, ctx):
        content = "\n".join(f"line{i}" for i in range(150))
        add_section(ctx, "Long", content)
        bottom_limit = PAGE_HEIGHT - MARGIN
        for page_words in _words_by_page(ctx):
            for (x0, y0, x1, y1, *_rest) in page_words:
                assert y1 <= bottom_limit
                assert y0 >= 0

    def test_lines_per_page(self, ctx):
        # After the heading, a full page holds lines while the cursor stays >= margin + 20
        add_section(ctx, "Count", "\n".join(f"w{i}" for i in range(200)))
        first_page = [w[4] for w in ctx.doc[0].get_text("words")]
        usable = TOP - (PDF_CONFIG["HEADING_SIZE"] + PDF_CONFIG["HEADING_GAP"]) - (MARGIN + PDF_CONFIG["LINE_BREAK_SPACE"])
        expected_lines = int(usable // PDF_CONFIG["LINE_HEIGHT"]) + 1
        assert len(first_page) - 1 == expected_lines
