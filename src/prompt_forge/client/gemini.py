# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Gemini generateContent client.

Performs exactly one HTTP call per invocation and converts every failure
into the matching TransientRequestError subclass. Retrying is the
executor's job.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from ..core.constants import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    GEMINI_API_BASE_URL,
)
from ..core.errors import (
    EmptyResponseError,
    NetworkError,
    classify_response,
    mask_credential,
)
from ..core.types import PreparedImage
from .file_logger import TransactionLogger

lib_logger = logging.getLogger("prompt_forge")


def build_request_payload(
    instruction: str,
    image: PreparedImage,
    temperature: float = DEFAULT_TEMPERATURE,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Dict[str, Any]:
    """
    Build a generateContent request body with one text and one image part.

    Args:
        instruction: Instruction text for the model
        image: Validated source image
        temperature: Sampling temperature
        max_output_tokens: Output token limit

    Returns:
        JSON-serializable request body
    """
    return {
        "contents": [
            {
                "parts": [
                    {"text": instruction},
                    {"inlineData": {"mimeType": image.mime_type, "data": image.base64}},
                ]
            }
        ],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def extract_text(data: Any) -> Optional[str]:
    """
    Pull candidates[0].content.parts[0].text out of a response body.

    Returns:
        Stripped text, or None if the path is missing or blank
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text.strip()


class GeminiClient:
    """
    Thin async wrapper around the generateContent endpoint.

    Owns its httpx.AsyncClient unless one is injected.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = GEMINI_API_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        log_transactions: bool = False,
        log_dir: str = "logs",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the client.

        Args:
            model: Model identifier, e.g. "gemini-2.5-flash-lite"
            base_url: API root up to and including the version segment
            timeout: Transport timeout for one call, in seconds
            http_client: Shared client; when None one is created and closed
                by aclose()
            log_transactions: Write per-attempt request/response files
            log_dir: Root directory for transaction logs
            clock: Returns the current timestamp; resolves HTTP-date Retry-After
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.log_transactions = log_transactions
        self.log_dir = log_dir
        self._clock = clock
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, credential: str, payload: Dict[str, Any]) -> str:
        """
        Perform one generateContent call.

        Args:
            credential: API key to authenticate with
            payload: Request body from build_request_payload()

        Returns:
            The model's text

        Raises:
            RateLimitedError: HTTP 429
            ServerTransientError: HTTP >= 500
            ClientRequestError: Any other non-2xx status
            NetworkError: Transport failure or timeout
            EmptyResponseError: 2xx without usable text
        """
        file_logger = TransactionLogger(self.model, self.log_transactions, self.log_dir)
        file_logger.log_request(payload)

        lib_logger.debug(
            f"POST {self.endpoint} with credential {mask_credential(credential)}"
        )
        try:
            response = await self._http.post(
                self.endpoint,
                json=payload,
                headers={"x-goog-api-key": credential},
            )
        except httpx.RequestError as e:
            file_logger.log_error(f"{type(e).__name__}: {e}")
            raise NetworkError(f"Network error: {e}") from e

        error = classify_response(response, now=self._clock())
        if error is not None:
            file_logger.log_error(f"HTTP {response.status_code}: {error.message}")
            file_logger.log_final_response(response.status_code, response.text)
            raise error

        try:
            data = response.json()
        except ValueError as e:
            file_logger.log_error(f"Unparseable body: {e}")
            raise EmptyResponseError("Unparseable response from API", response.status_code) from e

        file_logger.log_final_response(response.status_code, data)
        text = extract_text(data)
        if text is None:
            raise EmptyResponseError(status_code=response.status_code)
        return text

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
