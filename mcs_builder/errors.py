"""Error taxonomy for the build pipeline."""

from typing import Optional

BODY_PREVIEW_CHARS = 500


class BuilderError(Exception):
    """Base class for errors reported back to the requester"""


class AuthError(BuilderError):
    """No API credential is configured; no request was sent."""


class TransportError(BuilderError):
    """The HTTP exchange with the model service failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body[:BODY_PREVIEW_CHARS] if body else body
        detail = message
        if status_code is not None:
            detail = f"{message} (status {status_code})"
        if self.body:
            detail = f"{detail} - {self.body}"
        super().__init__(detail)


class ParseError(BuilderError):
    """The model reply has no usable content."""


class OperationError(BuilderError):
    """A single world operation failed or a single record was malformed."""


class StoreError(BuilderError):
    """Persisting or loading a command file failed."""


class ExecutionInProgressError(BuilderError):
    """A command file is already being executed."""
