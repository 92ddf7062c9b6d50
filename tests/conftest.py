from __future__ import annotations

import asyncio
import base64
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List, Optional

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from components.encoder import ImagePayload
from config import Settings

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body\xff\xd9"
PNG_BYTES = b"\x89PNG\r\n\x1a\ngenerated-image"


class FakeModels:
    """Stands in for ``client.aio.models`` of the google-genai SDK."""

    def __init__(self, response: Any = None, error: Optional[BaseException] = None, delay: float = 0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def generate_content(self, *, model: str, contents: list, config: Any) -> Any:
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def fake_client(models: FakeModels) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def text_response(text: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(text=text, candidates=[])


def parts_response(*parts: Any) -> SimpleNamespace:
    content = SimpleNamespace(parts=list(parts))
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=content)])


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data: bytes = PNG_BYTES, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


class CountingPreview:
    def __init__(self, name: str = "photo.jpg") -> None:
        self.name = name
        self.releases = 0

    def release(self) -> None:
        self.releases += 1


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", request_timeout=5.0)


@pytest.fixture
def payload() -> ImagePayload:
    return ImagePayload(
        data=base64.b64encode(JPEG_BYTES).decode("utf-8"),
        mime_type="image/jpeg",
        name="photo.jpg",
    )


@pytest.fixture
def detected_payload() -> dict:
    return {
        "detected": True,
        "summary": "Solid base with room to build the upper body.",
        "targetAreas": ["shoulders", "core"],
        "postureNotes": ["anterior pelvic tilt"],
        "routine": [{"name": "Plank", "sets": 3, "reps": "60s", "focus": "core stability"}],
    }
