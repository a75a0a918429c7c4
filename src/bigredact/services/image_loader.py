"""
BigRedact - Image Loader

Decodes raster images on a background thread pool and hands the result back
through a dispatch callable, so a GUI host can marshal completion onto its
main loop (e.g. ``GLib.idle_add``).
"""

import io
import os
import queue
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from PIL import Image, ImageOps

from bigredact.constants import IMAGE_LOADER_WORKERS
from bigredact.utils.exceptions import ImageDecodeError
from bigredact.utils.logger import logger

ImageSource = str | os.PathLike | bytes


class PendingCalls:
    """Dispatch target that holds callbacks until the owning thread runs them.

    Worker threads only enqueue; ``run_pending`` executes the queued calls on
    whichever thread calls it, in submission order.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()

    def __call__(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.put((callback, args))

    def run_pending(self, timeout: float | None = 0) -> int:
        """Run every queued callback.

        Args:
            timeout: Seconds to wait for the first callback when the queue is
                empty; 0 returns immediately and None waits indefinitely

        Returns:
            Number of callbacks that ran
        """
        try:
            if timeout == 0:
                item = self._queue.get_nowait()
            else:
                item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return 0

        count = 0
        while True:
            callback, args = item
            callback(*args)
            count += 1
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return count


class ImageLoader:
    """Asynchronous raster decoder.

    ``load`` returns a Future that completes after the ``then`` callback has
    run on the dispatch context; its result is whatever ``then`` returned.
    Without an explicit dispatch, completions wait in a PendingCalls queue
    until the owner calls ``process_pending`` or ``wait``.
    """

    def __init__(
        self,
        max_workers: int = IMAGE_LOADER_WORKERS,
        dispatch: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            max_workers: Size of the decode thread pool
            dispatch: Runs ``callback(*args)`` on the consumer's thread
                (e.g. ``GLib.idle_add``); defaults to a PendingCalls queue
                drained by the thread that owns the loader
        """
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="decode")
        self._pending = PendingCalls() if dispatch is None else None
        self._dispatch = dispatch or self._pending

    @staticmethod
    def describe(source: ImageSource) -> str:
        """Short human-readable description of an image source."""
        if isinstance(source, bytes):
            return f"<{len(source)} bytes>"
        return os.fspath(source)

    def decode(self, source: ImageSource) -> Image.Image:
        """Decode an image synchronously.

        EXIF orientation is applied and the result is always RGBA.

        Raises:
            ImageDecodeError: If the source cannot be read or decoded
        """
        label = self.describe(source)
        try:
            fp = io.BytesIO(source) if isinstance(source, bytes) else source
            with Image.open(fp) as img:
                img.load()
                img = ImageOps.exif_transpose(img)
                return img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.error(f"Failed to decode image {label}: {e}")
            raise ImageDecodeError(label, str(e)) from e

    def load(
        self,
        source: ImageSource,
        then: Callable[[Image.Image], Any] | None = None,
    ) -> Future:
        """Decode an image in the background.

        Args:
            source: File path or encoded image bytes
            then: Called with the decoded image on the dispatch context

        Returns:
            Future resolving to ``then(image)`` (or the image itself when no
            callback is given), or failing with ImageDecodeError
        """
        result: Future = Future()

        def finish(image: Image.Image | None, error: BaseException | None) -> bool:
            if error is not None:
                result.set_exception(error)
                return False
            try:
                result.set_result(then(image) if then else image)
            except Exception as e:
                logger.error(f"Image completion callback failed: {e}")
                result.set_exception(e)
            return False

        def on_decoded(task: Future) -> None:
            error = task.exception()
            image = None if error is not None else task.result()
            self._dispatch(finish, image, error)

        self._pool.submit(self.decode, source).add_done_callback(on_decoded)
        return result

    def process_pending(self, timeout: float | None = 0) -> int:
        """Run queued completions on the calling thread.

        A no-op returning 0 when the loader was built with an explicit
        dispatch; the host main loop delivers those.
        """
        if self._pending is None:
            return 0
        return self._pending.run_pending(timeout)

    def wait(self, future: Future, timeout: float | None = None) -> Any:
        """Block until a load future resolves, running completions meanwhile.

        Must be called from the thread that owns the loader.

        Raises:
            TimeoutError: If the future is not done within timeout seconds
        """
        if self._pending is None:
            return future.result(timeout=timeout)

        deadline = None if timeout is None else time.monotonic() + timeout
        while not future.done():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                raise TimeoutError(f"Image load did not finish within {timeout}s")
            self._pending.run_pending(remaining)
        return future.result()

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
