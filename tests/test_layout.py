"""
Tests for LayoutEngine - canvas sizing, artwork square, text stacking.
"""
import pytest

from musicshare.layout import aspect_fill_rect, canvas_size, compute_layout, fit_line_counts, qr_rect, text_space
from musicshare.models import AspectRatio, Rect

HEIGHTS = (20.0, 15.0, 12.0)


def assert_rect(rect, x, y, w, h):
    assert rect.x == pytest.approx(x)
    assert rect.y == pytest.approx(y)
    assert rect.width == pytest.approx(w)
    assert rect.height == pytest.approx(h)


class TestCanvasSize:

    def test_three_four(self):
        assert canvas_size(300, AspectRatio.THREE_FOUR, 2.0) == (300, 400)

    def test_nine_sixteen(self):
        assert canvas_size(900, AspectRatio.NINE_SIXTEEN, 2.0) == (900, 1600)

    def test_nine_sixteen_rounds(self):
        assert canvas_size(300, AspectRatio.NINE_SIXTEEN, 2.0) == (300, 533)

    def test_device_screen_uses_ratio(self):
        assert canvas_size(300, AspectRatio.DEVICE_SCREEN, 2.0) == (300, 600)
        assert canvas_size(1170, AspectRatio.DEVICE_SCREEN, 2532 / 1170) == (1170, 2532)


class TestThreeFourLayout:

    def test_artwork_pinned_top_with_padding(self):
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, *HEIGHTS)
        assert_rect(rects.artwork, 15, 15, 270, 270)

    def test_text_block_centered_below_artwork(self):
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, *HEIGHTS)
        space_above = rects.title.y - rects.artwork.max_y
        space_below = 400 - rects.details.max_y
        assert space_above == pytest.approx(space_below)
        # 115 px below the artwork, 77 px of text block
        assert rects.title.y == pytest.approx(304)

    def test_lines_stacked_with_fixed_gap(self):
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, *HEIGHTS)
        assert_rect(rects.title, 15, 304, 270, 20)
        assert_rect(rects.subtitle, 15, 339, 270, 15)
        assert_rect(rects.details, 15, 369, 270, 12)
        assert rects.subtitle.y - rects.title.max_y == pytest.approx(15)
        assert rects.details.y - rects.subtitle.max_y == pytest.approx(15)

    def test_no_qr_rect_by_default(self):
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, *HEIGHTS)
        assert rects.qr is None


class TestTallLayouts:

    @pytest.mark.parametrize('profile,size', [
        (AspectRatio.NINE_SIXTEEN, (300, 533)),
        (AspectRatio.DEVICE_SCREEN, (300, 650)),
    ])
    def test_group_vertically_centered(self, profile, size):
        rects = compute_layout(size, profile, *HEIGHTS)
        gap = size[1] * 0.05
        assert rects.title.y - rects.artwork.max_y == pytest.approx(gap)
        assert rects.artwork.y == pytest.approx(size[1] - rects.details.max_y)

    def test_nine_sixteen_positions(self):
        rects = compute_layout((300, 533), AspectRatio.NINE_SIXTEEN, *HEIGHTS)
        # group = 270 + 26.65 + 77
        start = (533 - (270 + 26.65 + 77)) / 2
        assert_rect(rects.artwork, 15, start, 270, 270)
        assert rects.title.y == pytest.approx(start + 270 + 26.65)


class TestInvariants:

    @pytest.mark.parametrize('profile,size', [
        (AspectRatio.THREE_FOUR, (300, 400)),
        (AspectRatio.THREE_FOUR, (2000, 2667)),
        (AspectRatio.NINE_SIXTEEN, (2000, 3556)),
        (AspectRatio.DEVICE_SCREEN, (1170, 2532)),
    ])
    def test_artwork_square_and_text_inside_canvas(self, profile, size):
        w = size[0]
        rects = compute_layout(size, profile, w * 0.08, w * 0.06, w * 0.05)
        padding = size[0] * 0.05
        assert rects.artwork.width == pytest.approx(size[0] - 2 * padding)
        assert rects.artwork.height == pytest.approx(rects.artwork.width)
        assert rects.artwork.x == pytest.approx(padding)
        assert rects.artwork.max_x == pytest.approx(size[0] - padding)

        ordered = [rects.title, rects.subtitle, rects.details]
        for upper, lower in zip(ordered, ordered[1:]):
            assert upper.max_y <= lower.y
        for r in ordered:
            assert r.x == pytest.approx(rects.artwork.x)
            assert r.width == pytest.approx(rects.artwork.width)
            assert 0 <= r.y and r.max_y <= size[1]
        assert rects.artwork.max_y <= rects.title.y


class TestOverflow:

    def assert_inside(self, rects, size):
        ordered = [rects.title, rects.subtitle, rects.details]
        assert rects.artwork.max_y <= rects.title.y
        for upper, lower in zip(ordered, ordered[1:]):
            assert upper.max_y <= lower.y
        for r in ordered:
            assert 0 <= r.y and r.max_y <= size[1]

    def test_three_four_block_too_tall_starts_under_artwork(self):
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, 100, 20, 20)
        assert rects.title.y == pytest.approx(285)
        self.assert_inside(rects, (300, 400))

    def test_three_four_gap_shrinks_before_clipping(self):
        # 105 px of text in 115 px: the two gaps share the 10 px left
        rects = compute_layout((300, 400), AspectRatio.THREE_FOUR, 66, 22, 17)
        assert rects.subtitle.y - rects.title.max_y == pytest.approx(5)
        assert rects.details.max_y == pytest.approx(400)
        assert rects.details.height == pytest.approx(17)

    def test_tall_block_keeps_artwork_on_canvas(self):
        rects = compute_layout((300, 533), AspectRatio.NINE_SIXTEEN, 200, 40, 40)
        assert rects.artwork.y == pytest.approx(0)
        self.assert_inside(rects, (300, 533))


class TestFitLineCounts:

    HEIGHTS = (22.0, 16.0, 14.0)

    def test_text_space(self):
        assert text_space((300, 400), AspectRatio.THREE_FOUR) == pytest.approx(115)
        assert text_space((300, 533), AspectRatio.NINE_SIXTEEN) == pytest.approx(533 - 270 - 26.65)

    def test_fitting_block_unchanged(self):
        assert fit_line_counts((2, 1, 1), self.HEIGHTS, 115) == (2, 1, 1)

    def test_drops_lines_from_the_tallest_block(self):
        # 4 title lines need 148 px, two of them have to go
        assert fit_line_counts((4, 1, 1), self.HEIGHTS, 115) == (2, 1, 1)

    def test_keeps_one_line_per_block(self):
        assert fit_line_counts((3, 2, 2), self.HEIGHTS, 10) == (1, 1, 1)

    def test_empty_block_stays_empty(self):
        assert fit_line_counts((0, 1, 1), self.HEIGHTS, 10) == (0, 1, 1)


class TestHelpers:

    def test_qr_rect_bottom_right(self):
        rect = qr_rect((300, 400), 270, 15)
        assert_rect(rect, 300 - 32.4 - 4.5, 400 - 32.4 - 4.5, 32.4, 32.4)

    def test_aspect_fill_wide_target(self):
        assert_rect(aspect_fill_rect((300, 300), (300, 400)), -50, 0, 400, 400)

    def test_aspect_fill_landscape_source(self):
        assert_rect(aspect_fill_rect((400, 200), (300, 400)), -250, 0, 800, 400)

    def test_aspect_fill_tall_source(self):
        assert_rect(aspect_fill_rect((100, 400), (300, 400)), 0, -400, 300, 1200)

    def test_rect_inset(self):
        assert Rect(10, 10, 100, 50).inset(5, 5) == Rect(15, 15, 90, 40)
