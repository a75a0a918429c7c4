"""
BigRedact - Page Store

Ordered collection of pages with the current-page pointer, orientation
changes that keep annotations attached to the content, and image placement.
"""

from collections.abc import Iterator
from concurrent.futures import Future
from typing import TYPE_CHECKING

from bigredact.constants import DEFAULT_PAGE_HEIGHT, DEFAULT_PAGE_WIDTH
from bigredact.editor import geometry
from bigredact.editor.page_model import Page, PlacedImage
from bigredact.utils.exceptions import InvalidArgumentError, NoCurrentPageError
from bigredact.utils.logger import logger
from bigredact.utils.observable import ObservableValue

if TYPE_CHECKING:
    from PIL import Image

    from bigredact.services.image_loader import ImageLoader, ImageSource


class PageStore:
    """Owns the pages of one editing session.

    ``page_index`` and ``page_count`` are observable so a host UI can keep
    its page counter in sync without polling.
    """

    def __init__(
        self,
        default_width: float = DEFAULT_PAGE_WIDTH,
        default_height: float = DEFAULT_PAGE_HEIGHT,
    ) -> None:
        self._pages: list[Page] = []
        self._default_size = (default_width, default_height)
        self.page_index: ObservableValue[int] = ObservableValue(-1)
        self.page_count: ObservableValue[int] = ObservableValue(0)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self._pages))

    def __getitem__(self, index: int) -> Page:
        return self._pages[index]

    @property
    def current_index(self) -> int:
        return self.page_index.value

    def add_page(
        self,
        width: float | None = None,
        height: float | None = None,
        label: str = "",
    ) -> Page:
        """Append a new upright page and make it current.

        Args:
            width: Base width, defaults to the store's default page width
            height: Base height, defaults to the store's default page height
            label: Optional description of the page's origin

        Returns:
            The new page
        """
        width = self._default_size[0] if width is None else width
        height = self._default_size[1] if height is None else height
        if width <= 0:
            raise InvalidArgumentError("width", width, "page width must be positive")
        if height <= 0:
            raise InvalidArgumentError("height", height, "page height must be positive")

        page = Page(base_width=float(width), base_height=float(height), label=label)
        self._pages.append(page)
        self.page_count.set(len(self._pages))
        self.page_index.set(len(self._pages) - 1)
        logger.info(f"Added page {len(self._pages)} ({width:g}x{height:g})")
        return page

    def set_current(self, index: int) -> bool:
        """Point the store at another page.

        Returns:
            False (and no change) when the index is out of range
        """
        if not 0 <= index < len(self._pages):
            return False
        self.page_index.set(index)
        return True

    def current_page(self) -> Page:
        """Return the current page.

        Raises:
            NoCurrentPageError: If the store is empty
        """
        index = self.current_index
        if not 0 <= index < len(self._pages):
            raise NoCurrentPageError(index, len(self._pages))
        return self._pages[index]

    def set_orientation(self, page: Page, new_orientation: int) -> None:
        """Rotate a page to an absolute orientation.

        Every rectangle and placed image is re-expressed in the new frame
        and its own rotation grows by the same delta, so a rotate-left
        followed by a rotate-right restores all coordinates.
        """
        new_orientation = geometry.normalize_orientation(new_orientation)
        old_orientation = page.orientation
        if new_orientation == old_orientation:
            return

        matrix = geometry.orientation_matrix(
            old_orientation, new_orientation, page.base_width, page.base_height
        )
        delta = geometry.orientation_delta(old_orientation, new_orientation)
        for item in [*page.shapes, *page.images]:
            item.x, item.y = geometry.apply_transform(matrix, item.x, item.y)
            item.rotation = geometry.normalize_rotation(item.rotation + delta)

        page.orientation = new_orientation
        logger.info(f"Page orientation: {old_orientation}° -> {new_orientation}°")

    def rotate(self, page: Page, degrees: int) -> None:
        """Rotate a page relative to its current orientation."""
        self.set_orientation(page, page.orientation + degrees)

    def rotate_left(self, page: Page) -> None:
        """Rotate page 90 degrees counter-clockwise."""
        self.rotate(page, -90)

    def rotate_right(self, page: Page) -> None:
        """Rotate page 90 degrees clockwise."""
        self.rotate(page, 90)

    def add_image(
        self, page: Page, source: "ImageSource", loader: "ImageLoader"
    ) -> Future:
        """Decode an image and place it on a page once its size is known.

        The image is fitted to the page frame as oriented when this method
        is called. Decoding is asynchronous; the page is only touched when
        it succeeds.

        Returns:
            Future resolving to the PlacedImage, or failing with ImageDecodeError
        """
        orientation = page.orientation
        label = loader.describe(source)
        return loader.load(
            source,
            then=lambda image: self.place_image(page, label, image, orientation),
        )

    def place_image(
        self,
        page: Page,
        source: str,
        image: "Image.Image",
        orientation: int | None = None,
    ) -> PlacedImage:
        """Fit a decoded image into a page frame and append it to the page.

        Args:
            page: Target page
            source: Description of the image origin
            image: Decoded image
            orientation: Page orientation the placement is computed for,
                defaults to the page's current orientation

        Returns:
            The placed image
        """
        if orientation is None:
            orientation = page.orientation

        frame_w, frame_h = geometry.oriented_size(page.base_width, page.base_height, orientation)
        img_w, img_h = image.size
        scale, x, y = geometry.fit_image(frame_w, frame_h, img_w, img_h)
        placed = PlacedImage(
            source=source,
            pixels=image,
            natural_width=img_w,
            natural_height=img_h,
            x=x,
            y=y,
            scale=scale,
        )

        # The page may have been rotated while the image was decoding
        if orientation != page.orientation:
            matrix = geometry.orientation_matrix(
                orientation, page.orientation, page.base_width, page.base_height
            )
            placed.x, placed.y = geometry.apply_transform(matrix, placed.x, placed.y)
            placed.rotation = geometry.normalize_rotation(
                geometry.orientation_delta(orientation, page.orientation)
            )

        page.images.append(placed)
        logger.info(f"Placed image {source} ({img_w}x{img_h}) at scale {scale:.4f}")
        return placed
