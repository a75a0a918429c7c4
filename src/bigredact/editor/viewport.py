"""
BigRedact - Viewport Controller

Tracks which page is shown and at what zoom, derives the stage size from
the page orientation and pushes the resulting geometry to the surface.
"""

from collections.abc import Callable

import numpy as np

from bigredact.constants import DEFAULT_ZOOM, ZOOM_STEP
from bigredact.editor import geometry
from bigredact.editor.page_store import PageStore
from bigredact.editor.render_surface import RenderSurface
from bigredact.utils.exceptions import NoCurrentPageError
from bigredact.utils.logger import logger


class ViewportController:
    """Current page, zoom and pan of the editor stage.

    Zoom steps are multiplicative: ``zoom_in`` multiplies by ``zoom_step``
    and ``zoom_out`` divides by it, so one step in each direction returns
    to the starting factor.
    """

    def __init__(
        self,
        store: PageStore,
        surface: RenderSurface,
        zoom_step: float = ZOOM_STEP,
        on_page_changed: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the viewport.

        Args:
            store: Pages to navigate
            surface: Rendering surface that receives the stage geometry
            zoom_step: Multiplier used by zoom_in / zoom_out
            on_page_changed: Called whenever another page becomes current
        """
        self._store = store
        self._surface = surface
        self._zoom_step = zoom_step if zoom_step > 1 else ZOOM_STEP
        self._on_page_changed = on_page_changed
        self._zoom = DEFAULT_ZOOM
        self._pan = (0.0, 0.0)
        self._stage_size = (0.0, 0.0)

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def pan(self) -> tuple[float, float]:
        return self._pan

    @property
    def stage_size(self) -> tuple[float, float]:
        """Displayed stage width and height."""
        return self._stage_size

    @property
    def current_index(self) -> int:
        return self._store.current_index

    @property
    def transform(self) -> np.ndarray:
        """Page-to-stage affine transform."""
        return geometry.stage_transform(self._zoom, self._pan)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_to_page(self, index: int) -> bool:
        """Show the page at ``index``.

        Out-of-range indices are ignored. Switching pages clears the
        selection and recenters the stage.

        Returns:
            True if the page was shown
        """
        if not self._store.set_current(index):
            logger.debug(f"Ignoring navigation to page index {index}")
            return False

        if self._on_page_changed:
            self._on_page_changed()
        self._pan = (0.0, 0.0)
        self.apply_orientation()
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self.current_index + 1)

    def prev_page(self) -> bool:
        if self.current_index <= 0:
            return False
        return self.go_to_page(self.current_index - 1)

    # ------------------------------------------------------------------
    # Stage geometry
    # ------------------------------------------------------------------

    def apply_orientation(self) -> None:
        """Recompute the stage size from the current page and zoom.

        Only presentation changes here; page coordinates were already
        remapped when the page was rotated.
        """
        try:
            page = self._store.current_page()
        except NoCurrentPageError:
            self._stage_size = (0.0, 0.0)
            self._surface.set_stage(0.0, 0.0, self._zoom, self._pan)
            self._surface.show_page(None)
            return

        frame_w, frame_h = page.frame_size
        self._stage_size = (frame_w * self._zoom, frame_h * self._zoom)
        self._surface.set_stage(*self._stage_size, self._zoom, self._pan)
        self._surface.show_page(page)

    def refresh(self) -> None:
        """Tell the surface that the visible page content changed."""
        self._surface.invalidate()

    # ------------------------------------------------------------------
    # Zoom and pan
    # ------------------------------------------------------------------

    def set_zoom(self, factor: float) -> bool:
        """Set the zoom factor; non-positive factors are ignored.

        Returns:
            True if the zoom changed
        """
        if not factor > 0:
            logger.debug(f"Ignoring invalid zoom factor {factor}")
            return False

        self._zoom = float(factor)
        if self._zoom <= 1:
            self._pan = (0.0, 0.0)
        self.apply_orientation()
        return True

    def zoom_in(self) -> bool:
        return self.set_zoom(self._zoom * self._zoom_step)

    def zoom_out(self) -> bool:
        return self.set_zoom(self._zoom / self._zoom_step)

    def reset_zoom(self) -> bool:
        return self.set_zoom(DEFAULT_ZOOM)

    def pan_by(self, dx: float, dy: float) -> bool:
        """Drag the stage; only possible while zoomed in."""
        if self._zoom <= 1:
            return False
        self._pan = (self._pan[0] + dx, self._pan[1] + dy)
        self._surface.set_stage(*self._stage_size, self._zoom, self._pan)
        return True

    def recenter(self) -> None:
        self._pan = (0.0, 0.0)
        self._surface.set_stage(*self._stage_size, self._zoom, self._pan)

    # ------------------------------------------------------------------
    # Coordinate conversion
    # ------------------------------------------------------------------

    def to_page_coords(self, x: float, y: float) -> tuple[float, float]:
        """Convert a stage/pointer position into current-page coordinates."""
        return geometry.invert_point(self.transform, x, y)

    def to_stage_coords(self, x: float, y: float) -> tuple[float, float]:
        return geometry.apply_transform(self.transform, x, y)
