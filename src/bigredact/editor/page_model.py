"""
BigRedact - Page Model

Data models for pages, redaction rectangles and placed images.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bigredact.constants import DEFAULT_PAGE_HEIGHT, DEFAULT_PAGE_WIDTH
from bigredact.editor import geometry

if TYPE_CHECKING:
    from PIL import Image


@dataclass(eq=False)
class RedactionRect:
    """A user-drawn rectangle on a page.

    Attributes:
        x: Anchor x in the page's current orientation frame
        y: Anchor y in the page's current orientation frame
        width: Box width before rotation
        height: Box height before rotation
        rotation: Clockwise rotation about the anchor, accumulated from
            page orientation changes, in [0, 360)
        selected: Transient selection flag
    """

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    selected: bool = field(default=False, repr=False)

    def corners(self) -> list[tuple[float, float]]:
        return geometry.rotated_corners(self.x, self.y, self.width, self.height, self.rotation)

    def contains(self, px: float, py: float) -> bool:
        return geometry.contains_point(
            self.x, self.y, self.width, self.height, self.rotation, px, py
        )

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
        }


@dataclass(eq=False)
class PlacedImage:
    """A decoded raster image placed on a page.

    Attributes:
        source: Where the pixels came from (path or URL)
        pixels: Decoded Pillow image
        natural_width: Width of the decoded image in pixels
        natural_height: Height of the decoded image in pixels
        x: Anchor x in the page's current orientation frame
        y: Anchor y in the page's current orientation frame
        scale: Uniform scale from image pixels to page units
        rotation: Clockwise rotation about the anchor, in [0, 360)
    """

    source: str
    pixels: "Image.Image" = field(repr=False)
    natural_width: int
    natural_height: int
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0

    @property
    def width(self) -> float:
        return self.natural_width * self.scale

    @property
    def height(self) -> float:
        return self.natural_height * self.scale

    def corners(self) -> list[tuple[float, float]]:
        return geometry.rotated_corners(self.x, self.y, self.width, self.height, self.rotation)


@dataclass(eq=False)
class Page:
    """State of a single document page.

    Attributes:
        base_width: Unrotated content width
        base_height: Unrotated content height
        orientation: Clockwise rotation of the page (0, 90, 180, 270)
        shapes: Redaction rectangles, last one on top
        images: Placed raster images, in insertion order
        label: Optional description of where the page came from
    """

    base_width: float = DEFAULT_PAGE_WIDTH
    base_height: float = DEFAULT_PAGE_HEIGHT
    orientation: int = 0
    shapes: list[RedactionRect] = field(default_factory=list)
    images: list[PlacedImage] = field(default_factory=list)
    label: str = ""

    def __post_init__(self) -> None:
        """Validate and normalize orientation angle."""
        self.orientation = geometry.normalize_orientation(self.orientation)

    @property
    def frame_size(self) -> tuple[float, float]:
        """Width and height of the page as currently oriented."""
        return geometry.oriented_size(self.base_width, self.base_height, self.orientation)

    def shape_at(self, px: float, py: float) -> RedactionRect | None:
        """Topmost rectangle containing a page-local point, if any."""
        for shape in reversed(self.shapes):
            if shape.contains(px, py):
                return shape
        return None

    def selected_shape(self) -> RedactionRect | None:
        for shape in self.shapes:
            if shape.selected:
                return shape
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for display and logging.

        Returns:
            Dictionary representation of the page without pixel data
        """
        return {
            "label": self.label,
            "base_width": self.base_width,
            "base_height": self.base_height,
            "orientation": self.orientation,
            "shapes": [s.to_dict() for s in self.shapes],
            "images": [img.source for img in self.images],
        }
