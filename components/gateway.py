"""Gemini gateway: physique analysis and "future progress" image generation.

Both calls are one-shot (no retry) and time-bounded. Every failure at this
boundary leaves as AnalysisError or GenerationError with a stable message;
the real cause goes to the log.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from google import genai
from google.genai import types

from components.encoder import ImagePayload
from components.errors import AnalysisError, GenerationError, ParseError, ValidationError
from components.models import AnalysisResult, parse_json_from_text
from config import (
    ANALYSIS_PROMPT,
    ANALYSIS_REQUIRED_FIELDS,
    EXERCISE_REQUIRED_FIELDS,
    FUTURE_PROMPT_TEMPLATE,
    GENERATED_IMAGE_PREFIX,
    Settings,
    load_settings,
)

logger = logging.getLogger(__name__)

_STRING = types.Schema(type=types.Type.STRING)

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "detected": types.Schema(type=types.Type.BOOLEAN),
        "message": _STRING,
        "summary": types.Schema(
            type=types.Type.STRING,
            description="A 2-3 sentence overview of the analysis.",
        ),
        "targetAreas": types.Schema(
            type=types.Type.ARRAY,
            items=_STRING,
            description="List of specific body parts to focus on.",
        ),
        "postureNotes": types.Schema(
            type=types.Type.ARRAY,
            items=_STRING,
            description="Observations about posture.",
        ),
        "estimatedBodyFat": _STRING,
        "routine": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": _STRING,
                    "sets": types.Schema(type=types.Type.INTEGER),
                    "reps": _STRING,
                    "focus": types.Schema(
                        type=types.Type.STRING,
                        description="Why this exercise was chosen.",
                    ),
                },
                required=EXERCISE_REQUIRED_FIELDS,
            ),
        ),
    },
    required=ANALYSIS_REQUIRED_FIELDS,
)


def build_future_prompt(target_areas: Sequence[str]) -> str:
    areas = ", ".join(a for a in target_areas if a) or "overall physique"
    return FUTURE_PROMPT_TEMPLATE.format(areas=areas)


def _image_part(payload: ImagePayload) -> types.Part:
    return types.Part.from_bytes(data=payload.raw_bytes(), mime_type=payload.mime_type)


def _iter_response_parts(response: Any) -> Iterator[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        yield part


def _inline_image_bytes(part: Any) -> Optional[bytes]:
    inline_data = getattr(part, "inline_data", None)
    data = getattr(inline_data, "data", None) if inline_data is not None else None
    if not data:
        return None
    if isinstance(data, str):
        # Some transports hand back base64 text instead of raw bytes.
        return base64.b64decode(data)
    return bytes(data)


def first_inline_image(parts: Iterable[Any]) -> Optional[str]:
    """Return the first part carrying inline image bytes as a PNG data URI."""
    for part in parts:
        image_bytes = _inline_image_bytes(part)
        if image_bytes:
            return GENERATED_IMAGE_PREFIX + base64.b64encode(image_bytes).decode("utf-8")
    return None


class PhysiqueGateway:
    def __init__(self, client: Any, settings: Settings) -> None:
        self.client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PhysiqueGateway":
        settings = settings or load_settings()
        client = genai.Client(
            api_key=settings.api_key,
            http_options=types.HttpOptions(timeout=int(settings.request_timeout * 1000)),
        )
        return cls(client, settings)

    async def _generate(self, model: str, contents: List[Any], config: types.GenerateContentConfig) -> Any:
        return await asyncio.wait_for(
            self.client.aio.models.generate_content(model=model, contents=contents, config=config),
            timeout=self.settings.request_timeout,
        )

    async def analyze(self, payload: ImagePayload) -> AnalysisResult:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=ANALYSIS_SCHEMA,
        )
        logger.info(
            "Sending %s for analysis (%s, %d bytes)",
            payload.name or "upload",
            payload.mime_type,
            payload.size,
        )
        try:
            response = await self._generate(
                self.settings.analysis_model,
                [_image_part(payload), ANALYSIS_PROMPT],
                config,
            )
        except Exception as exc:
            logger.exception("Gemini analysis call failed (model=%s)", self.settings.analysis_model)
            raise AnalysisError() from exc

        text = getattr(response, "text", None)
        if not text or not text.strip():
            logger.error("Gemini analysis returned no text content")
            raise AnalysisError()

        try:
            result = AnalysisResult.from_payload(parse_json_from_text(text))
        except (ParseError, ValidationError) as exc:
            logger.error("Discarding unparseable analysis response: %s", exc)
            raise AnalysisError() from exc

        logger.info(
            "Analysis complete: detected=%s target_areas=%d routine=%d",
            result.detected,
            len(result.target_areas),
            len(result.routine),
        )
        return result

    async def generate_future(self, payload: ImagePayload, target_areas: Sequence[str]) -> str:
        # Image models emit binary parts; no response schema is requested.
        config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])
        try:
            response = await self._generate(
                self.settings.image_model,
                [_image_part(payload), build_future_prompt(target_areas)],
                config,
            )
        except Exception as exc:
            logger.exception("Gemini image generation failed (model=%s)", self.settings.image_model)
            raise GenerationError() from exc

        data_uri = first_inline_image(_iter_response_parts(response))
        if data_uri is None:
            logger.error("Gemini image response carried no inline image data")
            raise GenerationError()
        return data_uri
