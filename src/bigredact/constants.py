"""
BigRedact - Numeric Constants

Simple numeric constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Page Geometry
# ============================================================================

# Portrait US-Letter in PDF points
DEFAULT_PAGE_WIDTH: Final[float] = 612.0
DEFAULT_PAGE_HEIGHT: Final[float] = 792.0

VALID_ORIENTATIONS: Final[tuple[int, ...]] = (0, 90, 180, 270)

# ============================================================================
# Viewport
# ============================================================================

DEFAULT_ZOOM: Final[float] = 1.0
ZOOM_STEP: Final[float] = 1.2

# ============================================================================
# Export
# ============================================================================

DEFAULT_LONG_EDGE_PX: Final[int] = 3000
DEFAULT_EXPORT_PREFIX: Final[str] = "page"
DEFAULT_PDF_SCALE: Final[float] = 2.0
PDF_POINTS_PER_INCH: Final[int] = 72

# ============================================================================
# Rendering (RGBA)
# ============================================================================

PAGE_BACKGROUND: Final[tuple[int, int, int, int]] = (255, 255, 255, 255)
REDACTION_FILL: Final[tuple[int, int, int, int]] = (0, 0, 0, 77)
REDACTION_STROKE: Final[tuple[int, int, int, int]] = (0, 0, 0, 255)
REDACTION_STROKE_WIDTH: Final[float] = 1.0
SELECTION_STROKE: Final[tuple[int, int, int, int]] = (255, 0, 0, 255)
SELECTION_STROKE_WIDTH: Final[float] = 3.0

# ============================================================================
# Worker Pools and Subprocess Timeouts (seconds)
# ============================================================================

IMAGE_LOADER_WORKERS: Final[int] = 2
PDFTOPPM_TIMEOUT: Final[int] = 300
