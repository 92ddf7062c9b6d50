"""Centralized configuration for PhysiqueLab.

Single source of truth for model defaults, prompts, schema field names and
the user-facing messages. Runtime settings (API key, model names, timeout)
come from the environment via ``load_settings()``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# ── Environment keys ───────────────────────────────────────────────────

API_KEY_ENV = "GEMINI_API_KEY"
ANALYSIS_MODEL_ENV = "PHYSIQUE_ANALYSIS_MODEL"
IMAGE_MODEL_ENV = "PHYSIQUE_IMAGE_MODEL"
TIMEOUT_ENV = "PHYSIQUE_REQUEST_TIMEOUT"
LOG_LEVEL_ENV = "PHYSIQUE_LOG_LEVEL"

DEFAULT_ANALYSIS_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_LOG_LEVEL = "INFO"

# ── Upload boundary ────────────────────────────────────────────────────

UPLOAD_TYPES = ["jpg", "jpeg", "png", "webp"]
FALLBACK_MIME_TYPE = "application/octet-stream"
GENERATED_IMAGE_PREFIX = "data:image/png;base64,"

# ── User-facing messages ───────────────────────────────────────────────
# Internal causes are logged; only these strings reach the page.

READ_ERROR_MESSAGE = "Could not read the selected file. Please choose another photo."
ANALYSIS_ERROR_MESSAGE = "Failed to analyze image. Please try again."
GENERATION_ERROR_MESSAGE = "Failed to generate progress visualization."
NO_PERSON_FALLBACK_MESSAGE = (
    "We couldn't clearly see a person in this image. "
    "Please upload a clear photo of your physique."
)

# ── Analysis output schema (wire names) ────────────────────────────────

ANALYSIS_REQUIRED_FIELDS = ["detected", "summary", "targetAreas", "postureNotes", "routine"]
EXERCISE_REQUIRED_FIELDS = ["name", "sets", "reps", "focus"]

# ── Prompts ────────────────────────────────────────────────────────────

ANALYSIS_PROMPT = """
Analyze this image from a fitness and physiotherapy perspective.
1. Identify if there is a person in the image. If not, set 'detected' to false and explain why in 'message'.
2. If a person is detected, analyze their physique, posture, and muscle development.
3. Identify "Target Areas" (lagging muscle groups, imbalances, or areas that need work).
4. Note any posture observations (e.g., rounded shoulders, anterior pelvic tilt, good alignment).
5. Suggest a specific workout routine with 4-6 exercises targeting these areas.
6. Estimate body fat percentage range if visible (e.g. "15-20%").

Be professional, constructive, and encouraging. Focus on aesthetics and functional health.
""".strip()

FUTURE_PROMPT_TEMPLATE = """
The user is following a fitness routine to improve these areas: {areas}.
Generate a photorealistic "after" image of this person.
1. Show visible muscle growth and definition in the target areas (hypertrophy).
2. Improve posture if needed.
3. CRITICAL: Keep the face, skin tone, background, and lighting EXACTLY the same.
4. The result should look like a natural progression after 6 months of training.
""".strip()


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    analysis_model: str = DEFAULT_ANALYSIS_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}.") from exc
    if value <= 0:
        raise ConfigError(f"{TIMEOUT_ENV} must be positive, got {value}.")
    return value


def load_settings(use_dotenv: bool = True) -> Settings:
    """Read settings from the environment (and ``.env`` when present).

    Raises ConfigError when the API key is missing so a misconfigured
    deployment fails at startup instead of on the first upload.
    """
    if use_dotenv:
        load_dotenv()

    api_key = (os.getenv(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} is not set. Add it to your environment or .env file.")

    return Settings(
        api_key=api_key,
        analysis_model=os.getenv(ANALYSIS_MODEL_ENV) or DEFAULT_ANALYSIS_MODEL,
        image_model=os.getenv(IMAGE_MODEL_ENV) or DEFAULT_IMAGE_MODEL,
        request_timeout=_parse_timeout(os.getenv(TIMEOUT_ENV)),
        log_level=(os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
    )
