from __future__ import annotations

import pytest

from components.models import AnalysisResult, Exercise
from components.result_view import DetectedView, NoPersonView, RoutineCard, build_result_view
from config import NO_PERSON_FALLBACK_MESSAGE


class NoPersonOnly:
    """A result whose detail fields blow up if anything reads them."""

    detected = False
    message = "Only a dog in frame"

    def __getattr__(self, name):
        raise AssertionError(f"renderer read {name!r} on a no-person result")


class TestNoPersonView:
    def test_detail_fields_are_never_read(self):
        view = build_result_view(NoPersonOnly())
        assert view == NoPersonView(message="Only a dog in frame")

    def test_missing_message_uses_fallback(self):
        view = build_result_view(AnalysisResult(detected=False))
        assert view.message == NO_PERSON_FALLBACK_MESSAGE


class TestDetectedView:
    @pytest.fixture
    def result(self):
        return AnalysisResult(
            detected=True,
            summary="Good symmetry overall.",
            target_areas=("upper chest", "rear delts"),
            posture_notes=("forward head posture", "slight scapular winging"),
            estimated_body_fat="12-15%",
            routine=(
                Exercise("Face Pull", 3, "15", "Rear delts and scapular control"),
                Exercise("Push-Up", 4, "AMRAP", "Chest endurance"),
            ),
        )

    def test_sections_follow_result_order(self, result):
        view = build_result_view(result)
        assert isinstance(view, DetectedView)
        assert view.target_chips == ("Upper Chest", "Rear Delts")
        assert view.posture_notes == ("forward head posture", "slight scapular winging")
        assert view.body_fat == "12-15%"
        assert view.routine_cards == (
            RoutineCard("Face Pull", "3 Sets × 15", "Rear delts and scapular control"),
            RoutineCard("Push-Up", "4 Sets × AMRAP", "Chest endurance"),
        )

    def test_body_fat_badge_is_optional(self, result):
        view = build_result_view(AnalysisResult(detected=True, summary=result.summary))
        assert view.body_fat is None
        assert view.routine_cards == ()
