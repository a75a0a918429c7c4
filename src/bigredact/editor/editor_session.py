"""
BigRedact - Editor Session

Wires the page store, viewport, annotation tool, exporter and image loader
to one rendering surface. This is the object a host (GUI window or CLI)
talks to.
"""

import os
import tempfile
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from typing import Any

from bigredact import constants
from bigredact.editor.annotation_tool import AnnotationTool
from bigredact.editor.exporter import Exporter
from bigredact.editor.page_model import Page, RedactionRect
from bigredact.editor.page_store import PageStore
from bigredact.editor.render_surface import PillowSurface, RenderSurface
from bigredact.editor.viewport import ViewportController
from bigredact.services import pdf_rasterizer
from bigredact.services.image_loader import ImageLoader, ImageSource
from bigredact.utils.config_manager import ConfigManager, get_config_manager
from bigredact.utils.exceptions import NoCurrentPageError
from bigredact.utils.logger import logger
from bigredact.utils.observable import ObservableValue


class EditorSession:
    """One open document being rotated, annotated and exported."""

    def __init__(
        self,
        surface: RenderSurface | None = None,
        config: ConfigManager | None = None,
        loader: ImageLoader | None = None,
        dispatch: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            surface: Rendering surface; a PillowSurface styled from the
                configuration is created when omitted
            config: Configuration manager, defaults to the global one
            loader: Image loader; created with ``dispatch`` when omitted
            dispatch: Callable used to deliver decode results to the
                caller's thread (e.g. ``GLib.idle_add``)
        """
        self.config = config or get_config_manager()
        self.surface = surface or PillowSurface.from_config(self.config)
        self.pages = PageStore(
            self.config.get("page.default_width", constants.DEFAULT_PAGE_WIDTH),
            self.config.get("page.default_height", constants.DEFAULT_PAGE_HEIGHT),
        )
        self.viewport = ViewportController(
            self.pages,
            self.surface,
            zoom_step=self.config.get("viewport.zoom_step", constants.ZOOM_STEP),
            on_page_changed=self._on_page_changed,
        )
        self.tool = AnnotationTool(self.pages, self.viewport)
        self.exporter = Exporter(self.pages, self.viewport, self.surface)
        self._owns_loader = loader is None
        self.loader = loader or ImageLoader(dispatch=dispatch)
        self._temp_dirs: list[tempfile.TemporaryDirectory] = []

    @property
    def page_index(self) -> ObservableValue[int]:
        return self.pages.page_index

    @property
    def page_count(self) -> ObservableValue[int]:
        return self.pages.page_count

    def _on_page_changed(self) -> None:
        self.tool.clear_selection()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def add_page(
        self,
        width: float | None = None,
        height: float | None = None,
        label: str = "",
    ) -> Page:
        """Append a page and show it."""
        page = self.pages.add_page(width, height, label)
        self.viewport.go_to_page(self.pages.current_index)
        return page

    def current_page(self) -> Page:
        return self.pages.current_page()

    def add_image(self, source: ImageSource) -> Future:
        """Decode an image and place it on the current page.

        Returns:
            Future resolving to the PlacedImage. It fails with
            NoCurrentPageError when no page is open, or with
            ImageDecodeError when decoding fails.
        """
        try:
            page = self.pages.current_page()
        except NoCurrentPageError as e:
            logger.warning("Cannot add an image: no page is open")
            failed: Future = Future()
            failed.set_exception(e)
            return failed

        return self._add_image_to(page, source)

    def _add_image_to(self, page: Page, source: ImageSource) -> Future:
        future = self.pages.add_image(page, source, self.loader)
        future.add_done_callback(lambda _f: self.viewport.refresh())
        return future

    def process_pending(self, timeout: float | None = 0) -> int:
        """Deliver finished image decodes on the calling thread."""
        return self.loader.process_pending(timeout)

    def wait(self, future: Future, timeout: float | None = None) -> Any:
        """Wait for an image future, placing decoded images meanwhile."""
        return self.loader.wait(future, timeout)

    def open_files(
        self, paths: Iterable[str], pdf_scale: float | None = None
    ) -> list[Future]:
        """Add one page per image file and per PDF page, then show the first page.

        Image pages use the default page size; PDF pages take their own size.
        Decoding continues in the background; results are placed by
        ``process_pending`` or ``wait`` unless the loader has a dispatch.

        Args:
            paths: Image and PDF file paths, in document order
            pdf_scale: Rasterization pixels per PDF point

        Returns:
            One image future per added page
        """
        if pdf_scale is None:
            pdf_scale = self.config.get("ingest.pdf_scale", constants.DEFAULT_PDF_SCALE)

        paths = list(paths)
        futures = []
        for path in paths:
            name = os.path.basename(path)
            if pdf_rasterizer.is_pdf_file(path):
                sizes = pdf_rasterizer.get_page_sizes(path)
                temp_dir = tempfile.TemporaryDirectory(prefix="bigredact_")
                self._temp_dirs.append(temp_dir)
                images = pdf_rasterizer.convert_pdf_to_png(path, pdf_scale, temp_dir.name)
                for number, (image_path, (width, height)) in enumerate(
                    zip(images, sizes), start=1
                ):
                    page = self.add_page(width, height, label=f"{name}:{number}")
                    futures.append(self._add_image_to(page, image_path))
            else:
                page = self.add_page(label=name)
                futures.append(self._add_image_to(page, path))

        if len(self.pages):
            self.go_to_page(0)
        logger.info(f"Opened {len(futures)} page(s) from {len(paths)} file(s)")
        return futures

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def set_orientation(self, orientation: int) -> bool:
        try:
            page = self.pages.current_page()
        except NoCurrentPageError:
            logger.debug("Ignoring rotation: no page is open")
            return False
        self.pages.set_orientation(page, orientation)
        self.viewport.apply_orientation()
        return True

    def rotate(self, degrees: int) -> bool:
        try:
            page = self.pages.current_page()
        except NoCurrentPageError:
            logger.debug("Ignoring rotation: no page is open")
            return False
        return self.set_orientation(page.orientation + degrees)

    def rotate_left(self) -> bool:
        return self.rotate(-90)

    def rotate_right(self) -> bool:
        return self.rotate(90)

    # ------------------------------------------------------------------
    # Navigation and zoom
    # ------------------------------------------------------------------

    def go_to_page(self, index: int) -> bool:
        return self.viewport.go_to_page(index)

    def next_page(self) -> bool:
        return self.viewport.next_page()

    def prev_page(self) -> bool:
        return self.viewport.prev_page()

    def set_zoom(self, factor: float) -> bool:
        return self.viewport.set_zoom(factor)

    def zoom_in(self) -> bool:
        return self.viewport.zoom_in()

    def zoom_out(self) -> bool:
        return self.viewport.zoom_out()

    def reset_zoom(self) -> bool:
        return self.viewport.reset_zoom()

    def pan_by(self, dx: float, dy: float) -> bool:
        return self.viewport.pan_by(dx, dy)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def activate_draw_mode(self) -> None:
        self.tool.activate_draw_mode()

    def pointer_down(self, x: float, y: float) -> bool:
        """Pointer press in stage coordinates; hit-testing is done by the surface."""
        return self.tool.pointer_down(x, y, target=self.surface.shape_at(x, y))

    def pointer_move(self, x: float, y: float) -> bool:
        return self.tool.pointer_move(x, y)

    def pointer_up(self) -> RedactionRect | None:
        return self.tool.pointer_up()

    def delete_selected(self) -> bool:
        return self.tool.delete_selected()

    @property
    def selected(self) -> RedactionRect | None:
        return self.tool.selected

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_all(self, long_edge_pixels: int | None = None) -> Future:
        """Rasterize every page; the long edge defaults to ``export.long_edge``.

        Returns:
            Future resolving to one image per page, in page order
        """
        if long_edge_pixels is None:
            long_edge_pixels = self.config.get("export.long_edge", constants.DEFAULT_LONG_EDGE_PX)
        return self.exporter.export_all(long_edge_pixels)

    def frame_sizes(self) -> list[tuple[float, float]]:
        """Oriented size of every page, in document order."""
        return [page.frame_size for page in self.pages]

    def close(self) -> None:
        """Stop background decoding and remove rasterized PDF pages."""
        if self._owns_loader:
            self.loader.shutdown()
        for temp_dir in self._temp_dirs:
            temp_dir.cleanup()
        self._temp_dirs.clear()
