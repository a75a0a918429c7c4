"""Tests for the Pillow rendering surface."""

from PIL import Image

from bigredact.editor.page_model import Page, RedactionRect
from bigredact.editor.page_store import PageStore
from bigredact.editor.render_surface import PillowSurface, _rotate_pixels


def _surface_with(page, zoom=1.0, pan=(0.0, 0.0)):
    surface = PillowSurface()
    width, height = page.frame_size
    surface.set_stage(width * zoom, height * zoom, zoom, pan)
    surface.show_page(page)
    return surface


class TestFrames:
    def test_request_frame_completes_and_paints(self):
        surface = _surface_with(Page(100, 50))
        future = surface.request_frame()
        assert future.done()
        assert surface.frame.size == (100, 50)

    def test_frame_repainted_after_invalidate(self):
        page = Page(100, 50)
        surface = _surface_with(page)
        surface.request_frame()
        first = surface.frame
        surface.request_frame()
        assert surface.frame is first
        surface.invalidate()
        surface.request_frame()
        assert surface.frame is not first

    def test_snapshot_uses_pixel_ratio(self):
        surface = _surface_with(Page(100, 50))
        assert surface.snapshot(3).size == (300, 150)

    def test_blank_stage_without_page(self):
        surface = PillowSurface()
        surface.set_stage(10, 10, 1.0, (0.0, 0.0))
        image = surface.snapshot(1)
        assert image.getpixel((5, 5)) == (255, 255, 255, 255)


class TestPainting:
    def test_selected_rect_gets_selection_stroke(self):
        page = Page(100, 100)
        rect = RedactionRect(10, 10, 50, 50, selected=True)
        page.shapes.append(rect)
        image = _surface_with(page).snapshot(1)
        assert image.getpixel((10, 35)) == (255, 0, 0, 255)

    def test_unselected_rect_gets_black_stroke(self):
        page = Page(100, 100)
        page.shapes.append(RedactionRect(10, 10, 50, 50))
        image = _surface_with(page).snapshot(1)
        assert image.getpixel((10, 35)) == (0, 0, 0, 255)

    def test_image_painted_under_rectangles(self):
        store = PageStore()
        page = store.add_page(100, 100)
        store.place_image(page, "red", Image.new("RGBA", (10, 10), (255, 0, 0, 255)))
        page.shapes.append(RedactionRect(50, 50, 40, 40))
        image = _surface_with(page).snapshot(1)
        assert image.getpixel((20, 20)) == (255, 0, 0, 255)
        r, g, b, _a = image.getpixel((70, 70))
        assert r < 255 and g == 0 and b == 0

    def test_rotated_image_lands_in_frame(self):
        store = PageStore()
        page = store.add_page(100, 50)
        left_half = Image.new("RGBA", (20, 10), (0, 0, 255, 255))
        left_half.paste((0, 255, 0, 255), (10, 0, 20, 10))
        store.place_image(page, "split", left_half)
        store.rotate_right(page)

        image = _surface_with(page).snapshot(1)
        assert image.size == (50, 100)
        # Blue (left) half ends up on top after a clockwise turn
        assert image.getpixel((25, 25)) == (0, 0, 255, 255)
        assert image.getpixel((25, 75)) == (0, 255, 0, 255)

    def test_from_config_colours(self, config):
        config.set("render.background", [0, 0, 0, 255], save_immediately=False)
        surface = PillowSurface.from_config(config)
        surface.set_stage(4, 4, 1.0, (0.0, 0.0))
        assert surface.snapshot(1).getpixel((1, 1)) == (0, 0, 0, 255)


class TestHitTesting:
    def test_shape_at_stage_point(self):
        page = Page(100, 100)
        rect = RedactionRect(10, 10, 20, 20)
        page.shapes.append(rect)
        surface = _surface_with(page, zoom=2.0)
        assert surface.shape_at(40, 40) is rect
        assert surface.shape_at(15, 15) is None

    def test_shape_at_without_page(self):
        assert PillowSurface().shape_at(1, 1) is None


class TestRotatePixels:
    def test_quarter_turn_swaps_size(self):
        pixels = Image.new("RGBA", (20, 10))
        assert _rotate_pixels(pixels, 90).size == (10, 20)
        assert _rotate_pixels(pixels, 270).size == (10, 20)
        assert _rotate_pixels(pixels, 180).size == (20, 10)

    def test_clockwise_direction(self):
        pixels = Image.new("RGBA", (2, 1), (0, 0, 0, 255))
        pixels.putpixel((0, 0), (255, 0, 0, 255))
        rotated = _rotate_pixels(pixels, 90)
        # Left pixel moves to the top after a clockwise turn
        assert rotated.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_zero_is_identity(self):
        pixels = Image.new("RGBA", (3, 3))
        assert _rotate_pixels(pixels, 0) is pixels
