"""Pytest configuration for bigredact tests.

Provides a RenderSurface fake that records what the editor core pushes to
it, a loader whose decodes complete on demand, and small image helpers.
"""

import io
from concurrent.futures import Future

import pytest
from PIL import Image

from bigredact.editor import geometry
from bigredact.editor.editor_session import EditorSession
from bigredact.editor.render_surface import RenderSurface
from bigredact.services.image_loader import ImageLoader
from bigredact.utils.config_manager import ConfigManager


class RecordingSurface(RenderSurface):
    """Surface that records stage updates, frames and snapshots."""

    def __init__(self):
        self.stages = []
        self.page = None
        self.frames = 0
        self.invalidations = 0
        self.snapshots = []
        self.on_frame = None
        self.defer_frames = False
        self.pending_frames = []
        self.width = 0.0
        self.height = 0.0
        self.zoom = 1.0
        self.pan = (0.0, 0.0)

    def set_stage(self, width, height, zoom, pan):
        self.width, self.height, self.zoom, self.pan = width, height, zoom, pan
        self.stages.append((width, height, zoom, pan))

    def show_page(self, page):
        self.page = page

    def invalidate(self):
        self.invalidations += 1

    def request_frame(self):
        self.frames += 1
        if self.on_frame:
            self.on_frame()
        done = Future()
        if self.defer_frames:
            self.pending_frames.append(done)
        else:
            done.set_result(None)
        return done

    def paint_pending(self):
        """Complete queued frames the way a host main loop would."""
        frames, self.pending_frames = self.pending_frames, []
        for frame in frames:
            frame.set_result(None)
        return len(frames)

    def snapshot(self, pixel_ratio):
        self.snapshots.append((self.page, pixel_ratio))
        size = (max(1, round(self.width * pixel_ratio)), max(1, round(self.height * pixel_ratio)))
        return Image.new("RGBA", size, (255, 255, 255, 255))

    def shape_at(self, x, y):
        if self.page is None:
            return None
        px, py = geometry.invert_point(geometry.stage_transform(self.zoom, self.pan), x, y)
        return self.page.shape_at(px, py)


class ManualLoader:
    """Image loader whose decodes finish only when ``complete`` is called."""

    def __init__(self):
        self.pending = []

    def describe(self, source):
        return ImageLoader.describe(source)

    def load(self, source, then=None):
        future = Future()
        self.pending.append((source, then, future))
        return future

    def complete(self, image, index=0):
        _source, then, future = self.pending.pop(index)
        future.set_result(then(image) if then else image)
        return future

    def shutdown(self, wait=True):
        pass


def make_png_bytes(width, height, color=(200, 30, 30)):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def config(tmp_path):
    return ConfigManager(config_path=str(tmp_path / "settings.json"))


@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def session(recording_surface, config):
    s = EditorSession(surface=recording_surface, config=config)
    yield s
    s.close()


@pytest.fixture
def pillow_session(config):
    s = EditorSession(config=config)
    yield s
    s.close()


@pytest.fixture
def manual_loader():
    return ManualLoader()


@pytest.fixture
def png_bytes():
    """Factory returning PNG-encoded bytes of a solid image."""
    return make_png_bytes
