"""
BigRedact - Page Geometry

Pure functions for page orientation and viewport transforms.

Coordinates are screen-style (y grows downwards), so a positive angle is a
clockwise rotation. Every transform is a 3x3 affine matrix acting on
homogeneous column vectors ``(x, y, 1)``.
"""

import math

import numpy as np

# cos/sin for quarter turns, exact so repeated page rotations are lossless
_QUARTER_TURNS: dict[int, tuple[float, float]] = {
    0: (1.0, 0.0),
    90: (0.0, 1.0),
    180: (-1.0, 0.0),
    -90: (0.0, -1.0),
}


def normalize_orientation(angle: float) -> int:
    """Snap an angle to the nearest valid page orientation.

    Args:
        angle: Rotation angle in degrees (any value, may be negative)

    Returns:
        One of 0, 90, 180 or 270
    """
    return int(round(angle / 90)) * 90 % 360


def orientation_delta(old: float, new: float) -> float:
    """Signed rotation taking orientation ``old`` to ``new``.

    Returns:
        Angle in degrees within (-180, 180]
    """
    delta = (new - old) % 360
    if delta > 180:
        delta -= 360
    return delta


def normalize_rotation(angle: float) -> float:
    """Bring a free rotation angle into [0, 360)."""
    angle = angle % 360
    return 0.0 if angle == 360 else angle


def is_sideways(orientation: int) -> bool:
    """True when the orientation swaps the page's width and height."""
    return orientation % 180 == 90


def oriented_size(width: float, height: float, orientation: int) -> tuple[float, float]:
    """Frame size of a page shown at ``orientation``."""
    if is_sideways(orientation):
        return height, width
    return width, height


def _cos_sin(angle: float) -> tuple[float, float]:
    key = orientation_delta(0, angle)
    if key in _QUARTER_TURNS:
        return _QUARTER_TURNS[key]
    radians = math.radians(angle)
    return math.cos(radians), math.sin(radians)


def rotation_matrix(angle: float) -> np.ndarray:
    """Clockwise rotation about the origin."""
    c, s = _cos_sin(angle)
    return np.array(
        [
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )


def translation_matrix(dx: float, dy: float) -> np.ndarray:
    return np.array(
        [
            [1.0, 0.0, dx],
            [0.0, 1.0, dy],
            [0.0, 0.0, 1.0],
        ]
    )


def scale_matrix(factor: float) -> np.ndarray:
    return np.array(
        [
            [factor, 0.0, 0.0],
            [0.0, factor, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )


def orientation_matrix(
    old: int, new: int, base_width: float, base_height: float
) -> np.ndarray:
    """Affine map from the ``old`` orientation frame to the ``new`` one.

    The point is taken relative to the old frame's center, rotated by the
    orientation delta and re-expressed relative to the new frame's center.
    Frame sizes are the base dimensions swapped for 90/270.

    Args:
        old: Orientation the coordinates are currently expressed in
        new: Orientation to express them in
        base_width: Unrotated page width
        base_height: Unrotated page height

    Returns:
        3x3 affine matrix
    """
    old_w, old_h = oriented_size(base_width, base_height, old)
    new_w, new_h = oriented_size(base_width, base_height, new)
    return (
        translation_matrix(new_w / 2, new_h / 2)
        @ rotation_matrix(orientation_delta(old, new))
        @ translation_matrix(-old_w / 2, -old_h / 2)
    )


def apply_transform(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """Apply an affine matrix to a single point."""
    px, py, _ = matrix @ np.array([x, y, 1.0])
    return float(px), float(py)


def invert_point(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """Map a point back through the inverse of ``matrix``."""
    return apply_transform(np.linalg.inv(matrix), x, y)


def remap_point(
    x: float,
    y: float,
    old: int,
    new: int,
    base_width: float,
    base_height: float,
) -> tuple[float, float]:
    """Re-express a page-local point after an orientation change.

    Remapping ``old -> new`` and then ``new -> old`` returns the original
    point to floating-point precision.
    """
    return apply_transform(orientation_matrix(old, new, base_width, base_height), x, y)


def stage_transform(zoom: float, pan: tuple[float, float] = (0.0, 0.0)) -> np.ndarray:
    """Page-to-stage transform: scale by ``zoom`` then translate by ``pan``.

    Page rotation is already baked into page-local coordinates, so the
    stage transform carries no rotation of its own.
    """
    return translation_matrix(pan[0], pan[1]) @ scale_matrix(zoom)


def rotated_corners(
    x: float, y: float, width: float, height: float, rotation: float
) -> list[tuple[float, float]]:
    """Corners of a box rotated clockwise by ``rotation`` about ``(x, y)``.

    Returns:
        The four corners in drawing order, starting at the anchor.
    """
    matrix = translation_matrix(x, y) @ rotation_matrix(rotation)
    return [
        apply_transform(matrix, 0.0, 0.0),
        apply_transform(matrix, width, 0.0),
        apply_transform(matrix, width, height),
        apply_transform(matrix, 0.0, height),
    ]


def bounding_box(points: list[tuple[float, float]]) -> tuple[float, float, float, float]:
    """Axis-aligned ``(left, top, right, bottom)`` of a set of points."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs), max(ys)


def contains_point(
    x: float,
    y: float,
    width: float,
    height: float,
    rotation: float,
    px: float,
    py: float,
) -> bool:
    """Whether ``(px, py)`` lies inside the rotated box anchored at ``(x, y)``."""
    u, v = apply_transform(rotation_matrix(-rotation), px - x, py - y)
    eps = 1e-9
    return -eps <= u <= width + eps and -eps <= v <= height + eps


def fit_image(
    frame_width: float,
    frame_height: float,
    image_width: float,
    image_height: float,
) -> tuple[float, float, float]:
    """Uniform scale and centered position that fit an image inside a frame.

    Returns:
        ``(scale, x, y)`` where ``(x, y)`` is the scaled image's top-left corner
    """
    scale = min(frame_width / image_width, frame_height / image_height)
    x = (frame_width - image_width * scale) / 2
    y = (frame_height - image_height * scale) / 2
    return scale, x, y
