"""
BigRedact - Page Exporter

Rasterizes every page through the rendering surface at a fixed long-edge
resolution.
"""

import threading
from collections.abc import Sequence
from concurrent.futures import Future

from PIL import Image

from bigredact.editor.page_store import PageStore
from bigredact.editor.render_surface import RenderSurface
from bigredact.editor.viewport import ViewportController
from bigredact.utils.exceptions import (
    ExportInProgressError,
    InvalidArgumentError,
    NoCurrentPageError,
)
from bigredact.utils.logger import logger


class Exporter:
    """Export pages as images, one at a time, in page order.

    Each page is shown on the surface and a snapshot is taken once the
    surface reports the frame as painted. Frames are awaited through done
    callbacks, never by blocking, so a surface that paints on the host main
    loop keeps working. Only one export may run at a time.
    """

    def __init__(
        self,
        store: PageStore,
        viewport: ViewportController,
        surface: RenderSurface,
    ) -> None:
        self._store = store
        self._viewport = viewport
        self._surface = surface
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def export_all(self, long_edge_pixels: int) -> Future:
        """Rasterize all pages.

        Args:
            long_edge_pixels: Size of the longer side of every output image

        Returns:
            Future resolving to one image per page, in page order. With no
            pages it is already resolved to an empty list.

        Raises:
            InvalidArgumentError: If long_edge_pixels is not positive
            ExportInProgressError: If another export is running
        """
        self._check_long_edge(long_edge_pixels)
        if len(self._store) == 0:
            logger.warning("Nothing to export: no page is open")
            empty: Future = Future()
            empty.set_result([])
            return empty
        return self._run(range(len(self._store)), long_edge_pixels)

    def export_page(self, index: int, long_edge_pixels: int) -> Future:
        """Rasterize a single page; the future resolves to one image."""
        self._check_long_edge(long_edge_pixels)
        if not 0 <= index < len(self._store):
            raise NoCurrentPageError(index, len(self._store))

        single: Future = Future()

        def unwrap(done: Future) -> None:
            error = done.exception()
            if error is not None:
                single.set_exception(error)
            else:
                single.set_result(done.result()[0])

        self._run([index], long_edge_pixels).add_done_callback(unwrap)
        return single

    @staticmethod
    def _check_long_edge(long_edge_pixels: int) -> None:
        if long_edge_pixels <= 0:
            raise InvalidArgumentError(
                "long_edge_pixels", long_edge_pixels, "must be a positive number of pixels"
            )

    def _run(self, indices: Sequence[int], long_edge_pixels: int) -> Future:
        if not self._lock.acquire(blocking=False):
            raise ExportInProgressError()

        result: Future = Future()
        previous = self._store.current_index
        images: list[Image.Image] = []

        def finish(error: BaseException | None = None) -> None:
            try:
                self._viewport.go_to_page(previous)
            finally:
                self._lock.release()
            if error is not None:
                logger.error(f"Export failed after {len(images)} page(s): {error}")
                result.set_exception(error)
            else:
                logger.info(f"Exported {len(images)} page(s) at long edge {long_edge_pixels}px")
                result.set_result(images)

        def advance(frame: Future | None = None) -> None:
            # Frames that are already painted are handled in this loop;
            # pending ones resume it from their done callback.
            try:
                while True:
                    if frame is not None:
                        frame.result()
                        images.append(self._snapshot(indices[len(images)], long_edge_pixels))
                        if len(images) == len(indices):
                            break
                    self._viewport.go_to_page(indices[len(images)])
                    frame = self._surface.request_frame()
                    if not frame.done():
                        frame.add_done_callback(advance)
                        return
            except Exception as e:
                finish(e)
                return
            finish()

        advance()
        return result

    def _snapshot(self, index: int, long_edge_pixels: int) -> Image.Image:
        stage_w, stage_h = self._viewport.stage_size
        pixel_ratio = long_edge_pixels / max(stage_w, stage_h)
        image = self._surface.snapshot(pixel_ratio)
        logger.debug(f"Page {index + 1}: {image.width}x{image.height} (ratio {pixel_ratio:.4f})")
        return image
