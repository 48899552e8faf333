"""Remote failure taxonomy and classification."""

import socket
from enum import Enum
from typing import Dict, Optional

import httpx

SETTING_HINT = "Check if setting is correct"


class FailurePolicy(str, Enum):
    """What a pipeline stage does when its remote call fails."""

    FATAL = "fatal"
    DEGRADED = "degraded"


class RemoteError(Exception):
    """Base class for classified remote failures.

    ``details`` is a human-readable explanation (None when nothing specific
    is known) and ``errors`` maps option names to a hint for the user.
    """

    details: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        if details is not None:
            self.details = details
        self.errors: Dict[str, str] = errors or {}


class ConnectivityError(RemoteError):
    details = "You seem to be offline"


class NotFoundError(RemoteError):
    details = "Endpoint not found. Check if host and spaceId settings are correct"

    def __init__(self, message: str):
        super().__init__(message, errors={"host": SETTING_HINT, "spaceId": SETTING_HINT})


class AuthorizationError(RemoteError):
    details = "Authorization error. Check if accessToken and environment are correct"

    def __init__(self, message: str):
        super().__init__(
            message,
            errors={"accessToken": SETTING_HINT, "environment": SETTING_HINT},
        )


class UnclassifiedRemoteError(RemoteError):
    pass


class ContentTypeFetchError(RemoteError):
    """Content types could not be fetched; the run continues without them."""


class FetchAborted(Exception):
    """Raised by the reporter when a run must stop.

    Carries the full diagnostic text and the classified cause, if any.
    """

    def __init__(self, diagnostic: str, cause: Optional[BaseException] = None):
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.cause = cause


def _status_code(exc: BaseException) -> Optional[int]:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_remote_error(exc: BaseException) -> RemoteError:
    """Map a transport exception onto the remote error taxonomy.

    Already-classified errors are returned unchanged.
    """
    if isinstance(exc, RemoteError):
        return exc

    message = str(exc)
    if isinstance(exc, (httpx.ConnectError, socket.gaierror)):
        return ConnectivityError(message)

    status = _status_code(exc)
    if status == 404:
        return NotFoundError(message)
    if status == 401:
        return AuthorizationError(message)
    return UnclassifiedRemoteError(message)
