"""
BigRedact - Annotation Tool

Pointer-driven drawing and selection of redaction rectangles.
"""

from enum import Enum, auto

from bigredact.editor.page_model import Page, RedactionRect
from bigredact.editor.page_store import PageStore
from bigredact.editor.viewport import ViewportController
from bigredact.utils.exceptions import NoCurrentPageError
from bigredact.utils.logger import logger


class ToolState(Enum):
    IDLE = auto()
    DRAWING = auto()


class AnnotationTool:
    """Draw, select and delete redaction rectangles on the current page.

    Draw mode is one-shot: it is armed by ``activate_draw_mode`` and
    consumed by the next pointer press, which starts a rectangle. Any other
    press toggles the selection of the rectangle under the pointer.
    """

    def __init__(self, store: PageStore, viewport: ViewportController) -> None:
        self._store = store
        self._viewport = viewport
        self._armed = False
        self._state = ToolState.IDLE
        self._anchor = (0.0, 0.0)
        self._drawing: RedactionRect | None = None
        self._selected: RedactionRect | None = None
        self._selected_page: Page | None = None

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def state(self) -> ToolState:
        return self._state

    @property
    def selected(self) -> RedactionRect | None:
        return self._selected

    @property
    def drawing(self) -> RedactionRect | None:
        """The rectangle being dragged out, if any."""
        return self._drawing

    def activate_draw_mode(self) -> None:
        """Make the next pointer press start a new rectangle."""
        self._armed = True
        logger.debug("Draw mode armed")

    def pointer_down(self, x: float, y: float, target: RedactionRect | None = None) -> bool:
        """Handle a pointer press at stage coordinates.

        Args:
            x: Pointer x in stage space
            y: Pointer y in stage space
            target: Rectangle under the pointer, if the caller hit-tested one

        Returns:
            True if the press was handled
        """
        if self._state is ToolState.DRAWING:
            return False

        if not self._armed:
            self._toggle_selection(target)
            return True

        self._armed = False
        try:
            page = self._store.current_page()
        except NoCurrentPageError:
            logger.warning("Cannot draw a redaction: no page is open")
            return False

        px, py = self._viewport.to_page_coords(x, y)
        self._anchor = (px, py)
        self._drawing = RedactionRect(px, py)
        page.shapes.append(self._drawing)
        self._state = ToolState.DRAWING
        self._viewport.refresh()
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        """Stretch the rectangle being drawn to the pointer.

        The rectangle always spans the axis-aligned box between the press
        point and the pointer, whichever direction the drag goes.
        """
        if self._state is not ToolState.DRAWING or self._drawing is None:
            return False

        px, py = self._viewport.to_page_coords(x, y)
        ax, ay = self._anchor
        self._drawing.x = min(ax, px)
        self._drawing.y = min(ay, py)
        self._drawing.width = abs(px - ax)
        self._drawing.height = abs(py - ay)
        self._viewport.refresh()
        return True

    def pointer_up(self) -> RedactionRect | None:
        """Finish drawing.

        Returns:
            The completed rectangle, or None if nothing was being drawn
        """
        if self._state is not ToolState.DRAWING:
            return None

        rect = self._drawing
        self._state = ToolState.IDLE
        self._drawing = None
        logger.info(
            f"Redaction added at ({rect.x:.1f}, {rect.y:.1f}) "
            f"size {rect.width:.1f}x{rect.height:.1f}"
        )
        return rect

    def delete_selected(self) -> bool:
        """Remove the selected rectangle from its page.

        Returns:
            True if a rectangle was deleted
        """
        shape, page = self._selected, self._selected_page
        if shape is None or page is None:
            return False

        self.clear_selection()
        if shape in page.shapes:
            page.shapes.remove(shape)
            logger.info("Redaction deleted")
        self._viewport.refresh()
        return True

    def clear_selection(self) -> None:
        if self._selected is not None:
            self._selected.selected = False
        self._selected = None
        self._selected_page = None

    def _toggle_selection(self, target: RedactionRect | None) -> None:
        try:
            page = self._store.current_page()
        except NoCurrentPageError:
            page = None

        if target is None or page is None or target not in page.shapes:
            self.clear_selection()
        elif target is self._selected:
            self.clear_selection()
        else:
            self.clear_selection()
            target.selected = True
            self._selected = target
            self._selected_page = page
        self._viewport.refresh()
