from __future__ import annotations

from io import BytesIO
from typing import Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError


class PreviewReleasedError(RuntimeError):
    pass


class Preview:
    """In-memory handle on the uploaded photo, shown as the BEFORE image.

    Owned by the session; ``release()`` must be called exactly once.
    """

    def __init__(self, image_bytes: bytes, name: str = "") -> None:
        self.name = name
        self._buffer: Optional[BytesIO] = BytesIO(image_bytes)
        self._image: Optional[Image.Image] = None

    @property
    def released(self) -> bool:
        return self._buffer is None

    def display(self) -> Union[Image.Image, bytes]:
        """Upright Pillow image when decodable, raw bytes otherwise."""
        if self._buffer is None:
            raise PreviewReleasedError(f"Preview {self.name!r} was already released.")
        if self._image is None:
            try:
                self._buffer.seek(0)
                # Phone photos carry their rotation in EXIF.
                opened = Image.open(self._buffer)
                upright = ImageOps.exif_transpose(opened)
                if upright is not opened:
                    opened.close()
                self._image = upright
            except (UnidentifiedImageError, OSError):
                return self._buffer.getvalue()
        return self._image

    def release(self) -> None:
        if self._buffer is None:
            raise PreviewReleasedError(f"Preview {self.name!r} was already released.")
        if self._image is not None:
            self._image.close()
            self._image = None
        self._buffer.close()
        self._buffer = None


def open_preview(image_bytes: bytes, name: str = "") -> Preview:
    return Preview(image_bytes, name=name)
