from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from components.errors import ReadError
from config import FALLBACK_MIME_TYPE


@dataclass(frozen=True)
class ImagePayload:
    """Inline image ready for the model: base64 text plus declared media type."""

    data: str
    mime_type: str
    name: str = ""

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    @property
    def size(self) -> int:
        return len(self.raw_bytes())


def _declared_mime_type(source: Any, name: str) -> str:
    declared = getattr(source, "type", None)
    if isinstance(declared, str) and declared:
        return declared
    guessed, _ = mimetypes.guess_type(name)
    return guessed or FALLBACK_MIME_TYPE


def _read_all(source: Any) -> bytes:
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()

    # Streamlit's UploadedFile exposes getvalue(); plain handles only read().
    getvalue = getattr(source, "getvalue", None)
    if callable(getvalue):
        return bytes(getvalue())

    seek = getattr(source, "seek", None)
    if callable(seek):
        seek(0)
    return source.read()


def encode_image(source: Union[str, Path, Any]) -> ImagePayload:
    """Read ``source`` fully and return its bytes as base64 with the declared type.

    No size or dimension checks happen here; the model is the judge of what
    it accepts.
    """
    name = str(source) if isinstance(source, (str, Path)) else str(getattr(source, "name", "") or "")
    try:
        raw = _read_all(source)
    except (OSError, ValueError) as exc:
        raise ReadError() from exc
    if not isinstance(raw, (bytes, bytearray)):
        raise ReadError()

    return ImagePayload(
        data=base64.b64encode(raw).decode("utf-8"),
        mime_type=_declared_mime_type(source, name),
        name=Path(name).name if name else "",
    )


def decode_data_uri(uri: str) -> bytes:
    """Bytes behind a ``data:<type>;base64,<payload>`` URI."""
    header, sep, encoded = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI.")
    return base64.b64decode(encoded)
