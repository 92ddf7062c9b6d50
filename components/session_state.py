"""Presentation state machine for the upload -> analyze -> visualize flow.

``UploadState`` is immutable; every transition builds a new one and swaps it
in whole. ``PhysiqueSession`` is the only writer. It owns at most one
preview and releases it exactly once on whichever comes first: a new upload,
a failed analysis, or a reset.

At most one remote call may be in flight. A ``start_*`` call made while busy
raises OperationInProgress. Completions carry the ticket returned by their
``start_*`` call, so a result that lands after a reset is dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from components.encoder import ImagePayload
from components.errors import InvalidTransition, OperationInProgress
from components.models import AnalysisResult
from components.preview import Preview

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    RESULT = "result"
    GENERATING = "generating"


@dataclass(frozen=True)
class UploadState:
    upload: Optional[ImagePayload] = None
    preview: Optional[Preview] = None
    analyzing: bool = False
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    generated_image: Optional[str] = None
    is_generating_image: bool = False

    @property
    def phase(self) -> Phase:
        if self.analyzing:
            return Phase.ANALYZING
        if self.is_generating_image:
            return Phase.GENERATING
        if self.result is not None:
            return Phase.RESULT
        return Phase.IDLE

    @property
    def busy(self) -> bool:
        return self.analyzing or self.is_generating_image

    @property
    def can_visualize(self) -> bool:
        return (
            self.result is not None
            and self.result.detected
            and self.upload is not None
            and self.generated_image is None
            and not self.busy
        )


class PhysiqueSession:
    def __init__(self) -> None:
        self._state = UploadState()
        self._ticket = 0

    @property
    def state(self) -> UploadState:
        return self._state

    # ── internals ──────────────────────────────────────────────────────

    def _next_ticket(self) -> int:
        self._ticket += 1
        return self._ticket

    def _is_current(self, ticket: int, operation: str) -> bool:
        if ticket != self._ticket:
            logger.info("Ignoring stale %s completion (ticket %d, current %d)", operation, ticket, self._ticket)
            return False
        return True

    def _release_preview(self, keep: Optional[Preview] = None) -> None:
        preview = self._state.preview
        if preview is not None and preview is not keep:
            preview.release()

    def _ensure_idle(self, operation: str) -> None:
        if self._state.busy:
            raise OperationInProgress()
        logger.debug("Starting %s from phase %s", operation, self._state.phase.value)

    # ── analysis ───────────────────────────────────────────────────────

    def start_analysis(self, upload: ImagePayload, preview: Optional[Preview]) -> int:
        self._ensure_idle("analysis")
        self._release_preview(keep=preview)
        self._state = UploadState(upload=upload, preview=preview, analyzing=True)
        return self._next_ticket()

    def complete_analysis(self, ticket: int, result: AnalysisResult) -> bool:
        if not self._is_current(ticket, "analysis") or not self._state.analyzing:
            return False
        self._state = replace(self._state, analyzing=False, result=result)
        return True

    def fail_analysis(self, ticket: int, message: str) -> bool:
        if not self._is_current(ticket, "analysis") or not self._state.analyzing:
            return False
        # Back to the upload screen: the photo that failed is dropped.
        self._release_preview()
        self._state = UploadState(error=message)
        return True

    def fail_upload(self, message: str) -> None:
        """The file could not be read; nothing was started."""
        self._ensure_idle("upload")
        self._release_preview()
        self._state = UploadState(error=message)
        self._next_ticket()

    # ── visualization ──────────────────────────────────────────────────

    def start_generation(self) -> Tuple[int, ImagePayload, Tuple[str, ...]]:
        self._ensure_idle("generation")
        state = self._state
        if not state.can_visualize:
            raise InvalidTransition("A detected analysis result is required before visualizing progress.")
        self._state = replace(state, is_generating_image=True, error=None)
        return self._next_ticket(), state.upload, state.result.target_areas

    def complete_generation(self, ticket: int, data_uri: str) -> bool:
        if not self._is_current(ticket, "generation") or not self._state.is_generating_image:
            return False
        self._state = replace(self._state, is_generating_image=False, generated_image=data_uri)
        return True

    def fail_generation(self, ticket: int, message: str) -> bool:
        if not self._is_current(ticket, "generation") or not self._state.is_generating_image:
            return False
        self._state = replace(self._state, is_generating_image=False, error=message)
        return True

    # ── always available ───────────────────────────────────────────────

    def report_error(self, message: str) -> None:
        """Show a message in the banner without touching anything else."""
        self._state = replace(self._state, error=message)

    def dismiss_error(self) -> None:
        self._state = replace(self._state, error=None)

    def reset(self) -> None:
        self._release_preview()
        self._state = UploadState()
        # Invalidates any in-flight completion.
        self._next_ticket()
