# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Error handling for prompt_forge.

Transient request errors are raised by the Gemini client and absorbed by
the retry loop. Only AllCredentialsExhaustedError, InvalidImageDataError
and the configuration errors ever reach a caller of the pipeline.
"""

import re
import time
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

import httpx


# =============================================================================
# BASE EXCEPTIONS
# =============================================================================


class PromptForgeError(Exception):
    """Base class for every error raised by prompt_forge."""


class NoCredentialsError(PromptForgeError, ValueError):
    """Raised when a pool is built without any credential."""


class InvalidImageDataError(PromptForgeError, ValueError):
    """Raised for image input that cannot be decoded. Never retried."""


class UnsupportedUrlError(PromptForgeError, ValueError):
    """Raised when a URL is neither a YouTube link nor a direct image URL."""


# =============================================================================
# TRANSIENT REQUEST ERRORS
# =============================================================================


class TransientRequestError(PromptForgeError):
    """
    An attempt failed in a way the retry loop may recover from.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status, when the failure came with a response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RateLimitedError(TransientRequestError):
    """Upstream throttling (HTTP 429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded. Wait a moment and try again.",
        status_code: Optional[int] = 429,
        retry_after: float = 0.0,
    ):
        super().__init__(message, status_code)
        self.retry_after = retry_after


class ServerTransientError(TransientRequestError):
    """Upstream 5xx. Retried without penalizing the credential."""


class ClientRequestError(TransientRequestError):
    """Rejected request or credential (non-429 4xx)."""


class NetworkError(TransientRequestError):
    """Transport failure before a response was received."""


class EmptyResponseError(TransientRequestError):
    """Successful status but no usable text in the payload."""

    def __init__(self, message: str = "No response from API", status_code: Optional[int] = None):
        super().__init__(message, status_code)


class AllCredentialsExhaustedError(PromptForgeError):
    """
    The retry budget was spent without a usable response.

    Attributes:
        last_error: The last concrete error recorded, if any
        attempts: Number of attempts made
    """

    def __init__(self, last_error: Optional[Exception] = None, attempts: int = 0):
        if last_error is not None:
            message = str(last_error)
        else:
            message = f"All credentials exhausted after {attempts} attempt(s)"
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts


# =============================================================================
# UTILITIES
# =============================================================================


def mask_credential(credential: str, style: str = "short") -> str:
    """
    Mask a credential for logging.

    Args:
        credential: API key to mask
        style: "short" keeps the last 4 characters, "full" keeps the first
            4 and last 4

    Returns:
        Masked representation safe to log
    """
    if not credential:
        return "<empty>"
    if len(credential) <= 8:
        return "..." + credential[-2:]
    if style == "full":
        return f"{credential[:4]}...{credential[-4:]}"
    return "..." + credential[-4:]


_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*s?\s*$")


def _parse_seconds(value: Any) -> Optional[float]:
    if value is None:
        return None
    match = _DURATION_RE.match(str(value))
    if match:
        return float(match.group(1))
    return None


def extract_retry_after_from_body(body: Any) -> Optional[float]:
    """
    Read a google.rpc.RetryInfo delay from a Gemini error body.

    Gemini reports throttling as
    {"error": {"details": [{"@type": ".../google.rpc.RetryInfo", "retryDelay": "12s"}]}}.

    Args:
        body: Parsed JSON error body

    Returns:
        Delay in seconds, or None if absent
    """
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and "retryDelay" in detail:
            seconds = _parse_seconds(detail.get("retryDelay"))
            if seconds is not None:
                return seconds
    return None


def get_retry_after(
    response: httpx.Response, body: Any = None, now: Optional[float] = None
) -> float:
    """
    Determine how long the server asked us to wait.

    Checks the Retry-After header (seconds or HTTP date) first, then the
    error body.

    Args:
        response: The HTTP response
        body: Parsed JSON error body, if any
        now: Current timestamp for HTTP-date headers (defaults to time.time())

    Returns:
        Seconds to wait, 0.0 when the server gave no hint
    """
    header = response.headers.get("retry-after")
    if header:
        seconds = _parse_seconds(header)
        if seconds is not None:
            return seconds
        if now is None:
            now = time.time()
        try:
            return max(0.0, parsedate_to_datetime(header).timestamp() - now)
        except (TypeError, ValueError):
            pass
    from_body = extract_retry_after_from_body(body)
    return from_body if from_body is not None else 0.0


def extract_error_message(body: Any) -> Optional[str]:
    """Return error.message from a JSON error body, if present."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return None


def classify_response(
    response: httpx.Response, now: Optional[float] = None
) -> Optional[TransientRequestError]:
    """
    Map a non-2xx response to the matching transient error.

    Args:
        response: The HTTP response
        now: Current timestamp, used to resolve an HTTP-date Retry-After

    Returns:
        The error to raise, or None for a 2xx response
    """
    status = response.status_code
    if 200 <= status < 300:
        return None

    body: Optional[Dict[str, Any]]
    try:
        body = response.json()
    except ValueError:
        body = None

    if status == 429:
        return RateLimitedError(retry_after=get_retry_after(response, body, now=now))
    message = extract_error_message(body) or f"API error: {status}"
    if status >= 500:
        return ServerTransientError(message, status)
    return ClientRequestError(message, status)


__all__ = [
    "PromptForgeError",
    "NoCredentialsError",
    "InvalidImageDataError",
    "UnsupportedUrlError",
    "TransientRequestError",
    "RateLimitedError",
    "ServerTransientError",
    "ClientRequestError",
    "NetworkError",
    "EmptyResponseError",
    "AllCredentialsExhaustedError",
    "mask_credential",
    "extract_retry_after_from_body",
    "get_retry_after",
    "extract_error_message",
    "classify_response",
]
