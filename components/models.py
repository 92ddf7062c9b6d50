"""Structured analysis result and its validation.

The model is asked for schema-conformant JSON, but the reply is still
checked here: a response that misses a required key or carries the wrong
type is rejected as a whole, never rendered partially.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from components.errors import ParseError, ValidationError
from config import ANALYSIS_REQUIRED_FIELDS, EXERCISE_REQUIRED_FIELDS


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: int
    reps: str
    focus: str

    @property
    def prescription(self) -> str:
        return f"{self.sets} Sets × {self.reps}"


@dataclass(frozen=True)
class AnalysisResult:
    detected: bool
    message: Optional[str] = None
    summary: str = ""
    target_areas: Tuple[str, ...] = field(default_factory=tuple)
    posture_notes: Tuple[str, ...] = field(default_factory=tuple)
    estimated_body_fat: Optional[str] = None
    routine: Tuple[Exercise, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AnalysisResult":
        return validate_analysis_payload(payload)


def parse_json_from_text(text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except RecursionError as exc:
        raise ParseError("Model output nests too deeply to parse.") from exc
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise ParseError("No JSON object found in model output.")
        try:
            parsed = json.loads(text[start : end + 1])
        except (json.JSONDecodeError, RecursionError) as exc:
            raise ParseError(f"Invalid JSON in model output: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ParseError(f"Expected a JSON object, got {type(parsed).__name__}.")
    return parsed


def _require_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string.")
    return value


def _optional_str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    text = _require_str(value, key).strip()
    return text or None


def _as_list_of_strings(value: Any, key: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list.")
    for x in value:
        if not isinstance(x, str):
            raise ValidationError(f"{key} must contain only strings.")
    return tuple(x.strip() for x in value if x.strip())


def _validate_exercise(item: Any, index: int) -> Exercise:
    if not isinstance(item, dict):
        raise ValidationError(f"routine[{index}] must be an object.")
    missing = [k for k in EXERCISE_REQUIRED_FIELDS if k not in item]
    if missing:
        raise ValidationError(f"routine[{index}] missing required keys: {missing}")

    sets = item["sets"]
    # bool is an int subclass; true/false is not a set count.
    if isinstance(sets, bool) or not isinstance(sets, int):
        raise ValidationError(f"routine[{index}].sets must be an integer.")
    if sets < 1:
        raise ValidationError(f"routine[{index}].sets must be positive, got {sets}.")

    return Exercise(
        name=_require_str(item["name"], f"routine[{index}].name"),
        sets=sets,
        reps=_require_str(item["reps"], f"routine[{index}].reps"),
        focus=_require_str(item["focus"], f"routine[{index}].focus"),
    )


def validate_analysis_payload(payload: Dict[str, Any]) -> AnalysisResult:
    if "detected" not in payload:
        raise ValidationError("Missing required key: detected")
    detected = payload["detected"]
    if not isinstance(detected, bool):
        raise ValidationError("detected must be a boolean.")

    message = _optional_str(payload.get("message"), "message")

    # Nothing else is meaningful for a "no person" answer; don't read it.
    if not detected:
        return AnalysisResult(detected=False, message=message)

    missing = [k for k in ANALYSIS_REQUIRED_FIELDS if k not in payload]
    if missing:
        raise ValidationError(f"Missing required keys: {missing}")

    routine = payload["routine"]
    if not isinstance(routine, list):
        raise ValidationError("routine must be a list.")

    return AnalysisResult(
        detected=True,
        message=message,
        summary=_require_str(payload["summary"], "summary"),
        target_areas=_as_list_of_strings(payload["targetAreas"], "targetAreas"),
        posture_notes=_as_list_of_strings(payload["postureNotes"], "postureNotes"),
        estimated_body_fat=_optional_str(payload.get("estimatedBodyFat"), "estimatedBodyFat"),
        routine=tuple(_validate_exercise(item, i) for i, item in enumerate(routine)),
    )
