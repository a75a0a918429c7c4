"""Tests for the background image loader."""

import io
import threading
from concurrent.futures import Future

import pytest
from PIL import Image

from bigredact.services.image_loader import ImageLoader, PendingCalls
from bigredact.utils.exceptions import ImageDecodeError


@pytest.fixture
def loader():
    image_loader = ImageLoader(max_workers=1)
    yield image_loader
    image_loader.shutdown()


class TestDecode:
    def test_decode_bytes(self, loader, png_bytes):
        image = loader.decode(png_bytes(30, 20))
        assert image.size == (30, 20)
        assert image.mode == "RGBA"

    def test_decode_path(self, loader, tmp_path):
        path = tmp_path / "photo.png"
        Image.new("RGB", (8, 4)).save(path)
        assert loader.decode(str(path)).size == (8, 4)

    def test_decode_garbage_raises(self, loader):
        with pytest.raises(ImageDecodeError):
            loader.decode(b"not an image")

    def test_decode_missing_file_raises(self, loader, tmp_path):
        with pytest.raises(ImageDecodeError) as exc_info:
            loader.decode(str(tmp_path / "missing.png"))
        assert "missing.png" in str(exc_info.value)

    def test_exif_orientation_applied(self, loader):
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 clockwise on display
        buf = io.BytesIO()
        Image.new("RGB", (40, 20)).save(buf, format="JPEG", exif=exif)
        assert loader.decode(buf.getvalue()).size == (20, 40)

    def test_describe(self):
        assert ImageLoader.describe("/tmp/a.png") == "/tmp/a.png"
        assert ImageLoader.describe(b"1234") == "<4 bytes>"



class TestLoad:
    def test_load_without_callback_returns_image(self, loader, png_bytes):
        image = loader.wait(loader.load(png_bytes(5, 5)), timeout=5)
        assert image.size == (5, 5)

    def test_load_runs_callback(self, loader, png_bytes):
        future = loader.load(png_bytes(6, 3), then=lambda image: image.size)
        assert loader.wait(future, timeout=5) == (6, 3)

    def test_load_failure(self, loader):
        calls = []
        future = loader.load(b"garbage", then=calls.append)
        with pytest.raises(ImageDecodeError):
            loader.wait(future, timeout=5)
        assert calls == []

    def test_callback_error_fails_future(self, loader, png_bytes):
        def explode(_image):
            raise ValueError("boom")

        future = loader.load(png_bytes(2, 2), then=explode)
        with pytest.raises(ValueError):
            loader.wait(future, timeout=5)

    def test_callback_runs_on_waiting_thread(self, loader, png_bytes):
        caller = threading.current_thread()
        future = loader.load(png_bytes(2, 2), then=lambda _image: threading.current_thread())
        assert loader.wait(future, timeout=5) is caller

    def test_completion_held_until_processed(self, loader, png_bytes):
        future = loader.load(png_bytes(2, 2))
        assert not future.done()
        assert loader.process_pending(timeout=5) == 1
        assert future.result().size == (2, 2)

    def test_process_pending_with_nothing_queued(self, loader):
        assert loader.process_pending() == 0

    def test_wait_times_out(self, loader):
        with pytest.raises(TimeoutError):
            loader.wait(Future(), timeout=0.05)

    def test_completion_goes_through_dispatch(self, png_bytes):
        dispatched = []

        def dispatch(callback, *args):
            dispatched.append(callback)
            callback(*args)

        image_loader = ImageLoader(dispatch=dispatch)
        try:
            assert image_loader.wait(image_loader.load(png_bytes(2, 2)), timeout=5).size == (2, 2)
            assert image_loader.process_pending() == 0
        finally:
            image_loader.shutdown()
        assert len(dispatched) == 1


class TestPendingCalls:
    def test_calls_run_in_order(self):
        pending = PendingCalls()
        seen = []
        pending(seen.append, 1)
        pending(seen.append, 2)
        assert seen == []
        assert pending.run_pending() == 2
        assert seen == [1, 2]

    def test_empty_queue_returns_immediately(self):
        assert PendingCalls().run_pending() == 0

    def test_waits_for_call_from_another_thread(self):
        pending = PendingCalls()
        seen = []
        worker = threading.Thread(target=pending, args=(seen.append, "done"))
        worker.start()
        worker.join()
        assert pending.run_pending(timeout=5) == 1
        assert seen == ["done"]
