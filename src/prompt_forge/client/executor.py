# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Request executor: credential rotation with bounded retries.

One generate_once() call runs at most credential_count * 3 attempts.
Each attempt selects a credential, honours the global rate gate, performs
one network call and updates the pool from the outcome.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

from ..core.constants import (
    ATTEMPTS_PER_CREDENTIAL,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    EMPTY_RESPONSE_DELAY,
    MAX_JITTER,
    NETWORK_ERROR_DELAY,
    RATE_LIMIT_BACKOFF_STEP,
    SERVER_ERROR_DELAY,
)
from ..core.errors import (
    AllCredentialsExhaustedError,
    ClientRequestError,
    EmptyResponseError,
    NetworkError,
    RateLimitedError,
    ServerTransientError,
    TransientRequestError,
    mask_credential,
)
from ..core.types import Attempt, AttemptOutcome, GenerationOptions, PreparedImage
from ..pool import CredentialPool
from ..prompting import build_instruction
from .gemini import GeminiClient, build_request_payload
from .types import RetryState

lib_logger = logging.getLogger("prompt_forge")

Sleep = Callable[[float], Awaitable[None]]


class RequestExecutor:
    """
    Runs the retry loop for a single generation.

    Outcome policy:
        rate limited   -> penalize, wait 2s * attempt + retry_after + jitter
        server 5xx     -> no penalty, wait 1.5s + jitter
        other non-2xx  -> penalize, no wait
        network error  -> penalize, wait 1.2s + jitter
        empty payload  -> no penalty, wait 0.5s + jitter
        success        -> mark_success, return text
    """

    def __init__(
        self,
        client: GeminiClient,
        rng: Optional[random.Random] = None,
        sleep: Optional[Sleep] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ):
        """
        Initialize the executor.

        Args:
            client: Gemini client performing the network calls
            rng: Source of backoff jitter; inject a seeded Random for tests
            sleep: Awaitable sleep used for backoff (defaults to asyncio.sleep)
            temperature: Sampling temperature sent upstream
            max_output_tokens: Output token limit sent upstream
        """
        self.client = client
        self.rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        # Serializes select -> gate -> call -> mark so one attempt is in flight
        self._lock = asyncio.Lock()

    def _jitter(self) -> float:
        return self.rng.uniform(0.0, MAX_JITTER)

    async def generate_once(
        self,
        image: PreparedImage,
        options: GenerationOptions,
        pool: CredentialPool,
    ) -> str:
        """
        Obtain one raw model response, rotating credentials on failure.

        Args:
            image: Validated source image
            options: Options for this round
            pool: Credential pool owned by the calling pipeline

        Returns:
            Raw model text

        Raises:
            AllCredentialsExhaustedError: When the attempt budget is spent
        """
        payload = build_request_payload(
            build_instruction(options),
            image,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        state = RetryState(max_attempts=len(pool) * ATTEMPTS_PER_CREDENTIAL)

        while not state.exhausted:
            attempt_index = state.attempt_count + 1
            async with self._lock:
                credential = await pool.select_credential()
                await pool.wait_min_delay()
                attempt = Attempt(credential_id=credential, attempt_index=attempt_index)
                state.record_attempt(attempt)
                try:
                    text = await self.client.generate(credential, payload)
                except TransientRequestError as e:
                    attempt.error = e
                    state.record_error(e)
                    delay = self._handle_failure(pool, attempt, e)
                else:
                    attempt.outcome = AttemptOutcome.SUCCESS
                    pool.mark_success(credential)
                    lib_logger.debug(
                        f"Attempt {attempt_index}/{state.max_attempts} succeeded with "
                        f"{mask_credential(credential)}"
                    )
                    return text

            lib_logger.warning(
                f"Attempt {attempt_index}/{state.max_attempts} with "
                f"{mask_credential(credential)} failed ({attempt.outcome.value}): {attempt.error}"
            )
            if delay > 0 and not state.exhausted:
                await self._sleep(delay)

        lib_logger.error(
            f"Giving up after {state.attempt_count} attempt(s) across "
            f"{len(state.tried_credentials)} credential(s): {state.last_exception}"
        )
        raise AllCredentialsExhaustedError(state.last_exception, state.attempt_count)

    def _handle_failure(
        self,
        pool: CredentialPool,
        attempt: Attempt,
        error: TransientRequestError,
    ) -> float:
        """
        Apply the outcome policy for a failed attempt.

        Returns:
            Seconds to wait before the next attempt
        """
        if isinstance(error, RateLimitedError):
            attempt.outcome = AttemptOutcome.RATE_LIMITED
            pool.mark_penalized(attempt.credential_id)
            return (
                RATE_LIMIT_BACKOFF_STEP * attempt.attempt_index
                + error.retry_after
                + self._jitter()
            )
        if isinstance(error, ServerTransientError):
            attempt.outcome = AttemptOutcome.SERVER_ERROR
            return SERVER_ERROR_DELAY + self._jitter()
        if isinstance(error, NetworkError):
            attempt.outcome = AttemptOutcome.NETWORK_ERROR
            pool.mark_penalized(attempt.credential_id)
            return NETWORK_ERROR_DELAY + self._jitter()
        if isinstance(error, EmptyResponseError):
            attempt.outcome = AttemptOutcome.EMPTY_RESPONSE
            return EMPTY_RESPONSE_DELAY + self._jitter()
        if isinstance(error, ClientRequestError):
            attempt.outcome = AttemptOutcome.CLIENT_ERROR
            pool.mark_penalized(attempt.credential_id)
            return 0.0

        # Unknown transient subclass: treat like a client error
        attempt.outcome = AttemptOutcome.CLIENT_ERROR
        pool.mark_penalized(attempt.credential_id)
        return 0.0
