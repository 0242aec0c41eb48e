"""The drawing surface a render commits to."""

import io

from PIL import Image

from qrpro.errors import RenderError


class Surface:
    """A single shared canvas with last-committed-wins semantics.

    Renders never draw on the live image directly: they build a complete
    frame and ``commit`` it, so readers only ever see whole frames.
    """

    def __init__(self):
        self._image: Image.Image | None = None
        self._closed = False
        self.commits = 0

    @property
    def image(self) -> Image.Image | None:
        return self._image

    @property
    def available(self) -> bool:
        return not self._closed

    @property
    def is_empty(self) -> bool:
        return self._image is None

    def close(self) -> None:
        self._closed = True

    def snapshot(self) -> Image.Image:
        """Copy of the committed frame."""
        if self._image is None:
            raise RenderError("QR code not found. Please generate a QR code first.")
        return self._image.copy()

    def commit(self, image: Image.Image) -> None:
        if self._closed:
            raise RenderError("Drawing surface is no longer available")
        self._image = image
        self.commits += 1

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self.snapshot().save(buf, format="PNG")
        return buf.getvalue()
