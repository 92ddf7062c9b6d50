"""Async glue between the encoder, the gateway and the session.

Each coroutine drives one user action end to end and always leaves the
session in a stable state: success moves forward, failure falls back with
the error's user-facing message attached.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

from components.encoder import encode_image
from components.errors import AnalysisError, GenerationError, OperationInProgress, ReadError
from components.preview import Preview, open_preview
from components.session_state import PhysiqueSession, UploadState
from config import ANALYSIS_ERROR_MESSAGE, GENERATION_ERROR_MESSAGE

logger = logging.getLogger(__name__)

PreviewFactory = Callable[[bytes, str], Preview]


async def analyze_upload(
    session: PhysiqueSession,
    gateway: Any,
    source: Any,
    preview_factory: PreviewFactory = open_preview,
) -> UploadState:
    if session.state.busy:
        raise OperationInProgress()
    try:
        payload = encode_image(source)
    except ReadError as exc:
        logger.warning("Upload could not be read: %r", exc.__cause__)
        session.fail_upload(exc.user_message)
        return session.state

    ticket = session.start_analysis(payload, preview_factory(payload.raw_bytes(), payload.name))
    try:
        result = await gateway.analyze(payload)
    except AnalysisError as exc:
        session.fail_analysis(ticket, exc.user_message)
    except Exception:
        logger.exception("Analysis of %s failed unexpectedly", payload.name or "upload")
        session.fail_analysis(ticket, ANALYSIS_ERROR_MESSAGE)
        raise
    else:
        session.complete_analysis(ticket, result)
    return session.state


async def visualize_progress(session: PhysiqueSession, gateway: Any) -> UploadState:
    ticket, payload, target_areas = session.start_generation()
    try:
        data_uri = await gateway.generate_future(payload, list(target_areas))
    except GenerationError as exc:
        session.fail_generation(ticket, exc.user_message)
    except Exception:
        logger.exception("Progress visualization failed unexpectedly")
        session.fail_generation(ticket, GENERATION_ERROR_MESSAGE)
        raise
    else:
        session.complete_generation(ticket, data_uri)
    return session.state
