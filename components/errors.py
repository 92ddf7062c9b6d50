"""Failure taxonomy shared by the encoder, the gateway and the session.

Each error carries a stable, user-facing message. The underlying cause is
chained (``raise ... from exc``) and logged where it is caught, never shown.
"""
from __future__ import annotations

from config import ANALYSIS_ERROR_MESSAGE, GENERATION_ERROR_MESSAGE, READ_ERROR_MESSAGE


class PhysiqueError(Exception):
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class ReadError(PhysiqueError):
    default_message = READ_ERROR_MESSAGE


class AnalysisError(PhysiqueError):
    default_message = ANALYSIS_ERROR_MESSAGE


class GenerationError(PhysiqueError):
    default_message = GENERATION_ERROR_MESSAGE


class OperationInProgress(PhysiqueError):
    default_message = "Please wait for the current request to finish."


class ParseError(ValueError):
    pass


class ValidationError(ValueError):
    pass


class InvalidTransition(PhysiqueError):
    default_message = "That action is not available right now."
