"""
BigRedact - Rendering Surface

The editor core never paints pixels itself. It pushes stage geometry and the
page to show into a RenderSurface, asks it which rectangle sits under the
pointer and pulls raster snapshots from it. PillowSurface is the headless
implementation used by the CLI and the exporter.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future

from PIL import Image, ImageDraw

from bigredact import constants
from bigredact.editor import geometry
from bigredact.editor.page_model import Page, PlacedImage, RedactionRect
from bigredact.utils.config_manager import ConfigManager

Color = tuple[int, ...]


class RenderSurface(ABC):
    """Interface between the editor core and a 2D scene/canvas library."""

    @abstractmethod
    def set_stage(
        self, width: float, height: float, zoom: float, pan: tuple[float, float]
    ) -> None:
        """Resize the stage and set the page-to-stage transform."""

    @abstractmethod
    def show_page(self, page: Page | None) -> None:
        """Make ``page`` the only visible content."""

    @abstractmethod
    def request_frame(self) -> Future:
        """Schedule a paint; the future completes once it has happened."""

    @abstractmethod
    def snapshot(self, pixel_ratio: float) -> Image.Image:
        """Rasterize the full stage, ``pixel_ratio`` output pixels per stage unit."""

    @abstractmethod
    def shape_at(self, x: float, y: float) -> RedactionRect | None:
        """Topmost rectangle under a stage-space point."""

    def invalidate(self) -> None:
        """Note that the visible page's content changed."""


def _rotate_pixels(pixels: Image.Image, rotation: float) -> Image.Image:
    """Rotate image pixels clockwise, exactly for quarter turns."""
    rotation = geometry.normalize_rotation(rotation)
    if rotation == 0:
        return pixels
    if rotation == 90:
        return pixels.transpose(Image.Transpose.ROTATE_270)
    if rotation == 180:
        return pixels.transpose(Image.Transpose.ROTATE_180)
    if rotation == 270:
        return pixels.transpose(Image.Transpose.ROTATE_90)
    return pixels.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)


class PillowSurface(RenderSurface):
    """Paints pages into Pillow images.

    Placed images are drawn first in insertion order, redaction rectangles
    on top of them. The selected rectangle gets the selection stroke.
    """

    def __init__(
        self,
        background: Color = constants.PAGE_BACKGROUND,
        redaction_fill: Color = constants.REDACTION_FILL,
        redaction_stroke: Color = constants.REDACTION_STROKE,
        selection_stroke: Color = constants.SELECTION_STROKE,
        stroke_width: float = constants.REDACTION_STROKE_WIDTH,
        selection_stroke_width: float = constants.SELECTION_STROKE_WIDTH,
    ) -> None:
        self._background = tuple(background)
        self._fill = tuple(redaction_fill)
        self._stroke = tuple(redaction_stroke)
        self._selection_stroke = tuple(selection_stroke)
        self._stroke_width = stroke_width
        self._selection_stroke_width = selection_stroke_width

        self._width = 0.0
        self._height = 0.0
        self._zoom = 1.0
        self._pan = (0.0, 0.0)
        self._page: Page | None = None
        self._frame: Image.Image | None = None
        self._dirty = True

    @classmethod
    def from_config(cls, config: ConfigManager) -> "PillowSurface":
        """Build a surface using the colours from the settings file."""
        return cls(
            background=config.get_color("render.background", constants.PAGE_BACKGROUND),
            redaction_fill=config.get_color("render.redaction_fill", constants.REDACTION_FILL),
            redaction_stroke=config.get_color(
                "render.redaction_stroke", constants.REDACTION_STROKE
            ),
            selection_stroke=config.get_color(
                "render.selection_stroke", constants.SELECTION_STROKE
            ),
        )

    @property
    def stage_size(self) -> tuple[float, float]:
        return self._width, self._height

    @property
    def frame(self) -> Image.Image | None:
        """The most recently painted frame at pixel ratio 1."""
        return self._frame

    def set_stage(
        self, width: float, height: float, zoom: float, pan: tuple[float, float]
    ) -> None:
        self._width = width
        self._height = height
        self._zoom = zoom
        self._pan = pan
        self._dirty = True

    def show_page(self, page: Page | None) -> None:
        self._page = page
        self._dirty = True

    def invalidate(self) -> None:
        self._dirty = True

    def request_frame(self) -> Future:
        if self._dirty or self._frame is None:
            self._frame = self._paint(1.0)
            self._dirty = False
        done: Future = Future()
        done.set_result(None)
        return done

    def snapshot(self, pixel_ratio: float) -> Image.Image:
        return self._paint(pixel_ratio)

    def shape_at(self, x: float, y: float) -> RedactionRect | None:
        if self._page is None:
            return None
        px, py = geometry.invert_point(geometry.stage_transform(self._zoom, self._pan), x, y)
        return self._page.shape_at(px, py)

    def _paint(self, pixel_ratio: float) -> Image.Image:
        size = (
            max(1, round(self._width * pixel_ratio)),
            max(1, round(self._height * pixel_ratio)),
        )
        canvas = Image.new("RGBA", size, self._background)
        if self._page is None:
            return canvas

        matrix = geometry.scale_matrix(pixel_ratio) @ geometry.stage_transform(
            self._zoom, self._pan
        )
        factor = pixel_ratio * self._zoom

        for placed in self._page.images:
            self._paint_image(canvas, placed, matrix, factor)

        overlay = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        for shape in self._page.shapes:
            points = [geometry.apply_transform(matrix, cx, cy) for cx, cy in shape.corners()]
            if shape.selected:
                outline, width = self._selection_stroke, self._selection_stroke_width
            else:
                outline, width = self._stroke, self._stroke_width
            draw.polygon(
                points,
                fill=self._fill,
                outline=outline,
                width=max(1, round(width * factor)),
            )

        return Image.alpha_composite(canvas, overlay)

    def _paint_image(
        self,
        canvas: Image.Image,
        placed: PlacedImage,
        matrix,
        factor: float,
    ) -> None:
        width = max(1, round(placed.width * factor))
        height = max(1, round(placed.height * factor))
        pixels = placed.pixels
        if pixels.mode != "RGBA":
            pixels = pixels.convert("RGBA")
        pixels = pixels.resize((width, height), Image.Resampling.LANCZOS)
        pixels = _rotate_pixels(pixels, placed.rotation)

        corners = [geometry.apply_transform(matrix, cx, cy) for cx, cy in placed.corners()]
        left, top, _, _ = geometry.bounding_box(corners)
        canvas.paste(pixels, (round(left), round(top)), pixels)
