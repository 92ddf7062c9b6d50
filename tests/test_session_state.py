from __future__ import annotations

import pytest

from components.errors import InvalidTransition, OperationInProgress
from components.models import AnalysisResult, validate_analysis_payload
from components.session_state import Phase, PhysiqueSession, UploadState
from conftest import CountingPreview


@pytest.fixture
def session():
    return PhysiqueSession()


@pytest.fixture
def detected_result(detected_payload) -> AnalysisResult:
    return validate_analysis_payload(detected_payload)


def _analyzed(session, payload, result, preview=None):
    ticket = session.start_analysis(payload, preview or CountingPreview())
    assert session.complete_analysis(ticket, result)
    return session


class TestPhases:
    def test_starts_idle(self, session):
        assert session.state == UploadState()
        assert session.state.phase is Phase.IDLE
        assert not session.state.busy

    def test_happy_path(self, session, payload, detected_result):
        ticket = session.start_analysis(payload, CountingPreview())
        assert session.state.phase is Phase.ANALYZING

        session.complete_analysis(ticket, detected_result)
        assert session.state.phase is Phase.RESULT
        assert session.state.can_visualize

        ticket, sent_payload, areas = session.start_generation()
        assert session.state.phase is Phase.GENERATING
        assert sent_payload is payload
        assert areas == ("shoulders", "core")

        session.complete_generation(ticket, "data:image/png;base64,AAAA")
        assert session.state.phase is Phase.RESULT
        assert session.state.generated_image == "data:image/png;base64,AAAA"
        assert not session.state.can_visualize

    def test_transitions_replace_state_wholesale(self, session, payload, detected_result):
        before = session.state
        ticket = session.start_analysis(payload, CountingPreview())
        during = session.state
        session.complete_analysis(ticket, detected_result)
        assert before is not during is not session.state
        assert before.analyzing is False and during.analyzing is True


class TestAnalysisFailure:
    def test_falls_back_to_idle_with_error_and_releases_preview(self, session, payload):
        preview = CountingPreview()
        ticket = session.start_analysis(payload, preview)
        session.fail_analysis(ticket, "Failed to analyze image. Please try again.")

        state = session.state
        assert state.phase is Phase.IDLE
        assert state.result is None
        assert state.error == "Failed to analyze image. Please try again."
        assert state.preview is None
        assert preview.releases == 1

    def test_upload_read_failure(self, session, payload, detected_result):
        preview = CountingPreview()
        _analyzed(session, payload, detected_result, preview)
        session.fail_upload("Could not read the selected file.")
        assert session.state.phase is Phase.IDLE
        assert session.state.error == "Could not read the selected file."
        assert preview.releases == 1


class TestGenerationFailure:
    def test_keeps_result_and_shows_error(self, session, payload, detected_result):
        _analyzed(session, payload, detected_result)
        ticket, _, _ = session.start_generation()
        session.fail_generation(ticket, "Failed to generate progress visualization.")

        state = session.state
        assert state.phase is Phase.RESULT
        assert state.result is detected_result
        assert state.is_generating_image is False
        assert state.error == "Failed to generate progress visualization."
        assert state.can_visualize

    def test_retry_clears_previous_error(self, session, payload, detected_result):
        _analyzed(session, payload, detected_result)
        ticket, _, _ = session.start_generation()
        session.fail_generation(ticket, "boom")
        session.start_generation()
        assert session.state.error is None


class TestSingleFlight:
    def test_second_upload_rejected_while_analyzing(self, session, payload):
        session.start_analysis(payload, CountingPreview())
        second = CountingPreview()
        with pytest.raises(OperationInProgress):
            session.start_analysis(payload, second)
        assert second.releases == 0

    def test_generation_rejected_while_generating(self, session, payload, detected_result):
        _analyzed(session, payload, detected_result)
        session.start_generation()
        with pytest.raises(OperationInProgress):
            session.start_generation()

    def test_upload_rejected_while_generating(self, session, payload, detected_result):
        _analyzed(session, payload, detected_result)
        session.start_generation()
        with pytest.raises(OperationInProgress):
            session.start_analysis(payload, CountingPreview())

    def test_generation_needs_detected_result(self, session, payload):
        with pytest.raises(InvalidTransition):
            session.start_generation()
        ticket = session.start_analysis(payload, CountingPreview())
        session.complete_analysis(ticket, AnalysisResult(detected=False, message="empty"))
        with pytest.raises(InvalidTransition):
            session.start_generation()

    def test_generation_not_offered_twice(self, session, payload, detected_result):
        _analyzed(session, payload, detected_result)
        ticket, _, _ = session.start_generation()
        session.complete_generation(ticket, "data:image/png;base64,AAAA")
        with pytest.raises(InvalidTransition):
            session.start_generation()

    def test_completion_after_reset_is_dropped(self, session, payload, detected_result):
        ticket = session.start_analysis(payload, CountingPreview())
        session.reset()
        assert session.complete_analysis(ticket, detected_result) is False
        assert session.state == UploadState()

    def test_stale_completion_does_not_touch_new_upload(self, session, payload, detected_result):
        old_ticket = session.start_analysis(payload, CountingPreview())
        session.reset()
        session.start_analysis(payload, CountingPreview())
        assert session.fail_analysis(old_ticket, "late failure") is False
        assert session.state.phase is Phase.ANALYZING
        assert session.state.error is None


class TestPreviewOwnership:
    def test_reset_releases_preview_exactly_once(self, session, payload, detected_result):
        preview = CountingPreview()
        _analyzed(session, payload, detected_result, preview)
        session.reset()
        session.reset()
        assert preview.releases == 1
        assert session.state == UploadState()

    def test_reset_without_preview_releases_nothing(self, session):
        session.reset()
        assert session.state.preview is None

    def test_new_upload_releases_previous_preview(self, session, payload, detected_result):
        first, second = CountingPreview("a.jpg"), CountingPreview("b.jpg")
        _analyzed(session, payload, detected_result, first)
        session.start_analysis(payload, second)
        assert first.releases == 1
        assert second.releases == 0
        assert session.state.preview is second
        assert session.state.result is None

    def test_preview_survives_generation_failure(self, session, payload, detected_result):
        preview = CountingPreview()
        _analyzed(session, payload, detected_result, preview)
        ticket, _, _ = session.start_generation()
        session.fail_generation(ticket, "boom")
        assert preview.releases == 0
        assert session.state.preview is preview


def test_dismiss_error_touches_nothing_else(session, payload, detected_result):
    _analyzed(session, payload, detected_result)
    ticket, _, _ = session.start_generation()
    session.fail_generation(ticket, "boom")
    before = session.state
    session.dismiss_error()
    assert session.state.error is None
    assert session.state.result is before.result
    assert session.state.preview is before.preview


def test_refused_action_message_reaches_the_banner(session, payload, detected_result):
    _analyzed(session, payload, detected_result)
    session.start_generation()
    with pytest.raises(OperationInProgress) as info:
        session.start_analysis(payload, CountingPreview())
    session.report_error(info.value.user_message)

    state = session.state
    assert state.error == OperationInProgress.default_message
    assert state.is_generating_image is True
    assert state.result is detected_result
