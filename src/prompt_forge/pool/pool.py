# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Credential pool.

Owns the health registry of every configured credential and the global
rate gate. One pool belongs to one pipeline instance; it is handed to the
request executor by reference.
"""

import asyncio
import logging
import time
from dataclasses import replace
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.constants import (
    DEFAULT_COOLDOWN_BASE,
    DEFAULT_COOLDOWN_CAP,
    DEFAULT_MIN_REQUEST_INTERVAL,
)
from ..core.errors import NoCredentialsError, mask_credential
from .cooldowns import CooldownChecker
from .selection import FirstFitStrategy
from .types import AvailabilityStats, CredentialState, RateGateState

lib_logger = logging.getLogger("prompt_forge")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class CredentialPool:
    """
    Mutable registry of credential health plus the global rate gate.

    Execution is cooperative (asyncio); the outcome handlers are plain
    synchronous methods so each update is atomic with respect to other
    tasks on the same loop.
    """

    def __init__(
        self,
        credentials: Iterable[str],
        cooldown_base: float = DEFAULT_COOLDOWN_BASE,
        cooldown_cap: float = DEFAULT_COOLDOWN_CAP,
        min_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        """
        Initialize the pool.

        Args:
            credentials: API keys in configured (significant) order
            cooldown_base: Seconds of cooldown added per consecutive failure
            cooldown_cap: Maximum cooldown in seconds
            min_interval: Global minimum spacing after a success, in seconds
            clock: Returns the current timestamp (defaults to time.time)
            sleep: Awaitable sleep (defaults to asyncio.sleep)

        Raises:
            NoCredentialsError: If no credential is given
        """
        self._order: List[str] = list(dict.fromkeys(c for c in credentials if c))
        if not self._order:
            raise NoCredentialsError(
                "No Gemini API key configured. Set GEMINI_API_KEY or pass credentials."
            )

        self._clock = clock or time.time
        self._sleep = sleep or asyncio.sleep
        self._cooldowns = CooldownChecker(cooldown_base, cooldown_cap)
        self._strategy = FirstFitStrategy()
        self._states: Dict[str, CredentialState] = {
            cid: CredentialState(credential_id=cid) for cid in self._order
        }
        self.gate = RateGateState(min_interval=min_interval)

    def __len__(self) -> int:
        return len(self._order)

    @property
    def credentials(self) -> List[str]:
        """Credential ids in configured order."""
        return list(self._order)

    def now(self) -> float:
        return self._clock()

    def get_state(self, credential_id: str) -> CredentialState:
        """
        Get the state for a credential, creating it with defaults if unseen.
        """
        state = self._states.get(credential_id)
        if state is None:
            state = CredentialState(credential_id=credential_id)
            self._states[credential_id] = state
            if credential_id not in self._order:
                self._order.append(credential_id)
        return state

    # =========================================================================
    # SELECTION
    # =========================================================================

    def pick_credential(self, now: Optional[float] = None) -> Tuple[str, float]:
        """
        Decide which credential to use and how long to wait for it.

        Args:
            now: Timestamp to evaluate at (defaults to the pool clock)

        Returns:
            (credential_id, seconds_to_wait)
        """
        if now is None:
            now = self._clock()
        return self._strategy.select(self._order, self._states, now)

    async def select_credential(self) -> str:
        """
        Select a credential, suspending until it is available. Never fails.
        """
        credential_id, wait = self.pick_credential()
        if wait > 0:
            lib_logger.info(
                f"Waiting {wait:.1f}s for credential {mask_credential(credential_id)} "
                f"to leave cooldown"
            )
            await self._sleep(wait)
        return credential_id

    def gate_delay(self, now: Optional[float] = None) -> float:
        """Seconds the global rate gate still holds the next attempt."""
        if now is None:
            now = self._clock()
        return self.gate.delay(now)

    async def wait_min_delay(self) -> None:
        """Suspend until the global minimum interval since the last success has passed."""
        delay = self.gate_delay()
        if delay > 0:
            lib_logger.debug(f"Rate gate: sleeping {delay:.2f}s")
            await self._sleep(delay)

    # =========================================================================
    # OUTCOME HANDLERS
    # =========================================================================

    def mark_success(self, credential_id: str) -> None:
        """
        Reset a credential after a successful attempt and stamp the rate gate.
        """
        state = self.get_state(credential_id)
        self._cooldowns.reset(state)
        self.gate.last_success_at = self._clock()

    def mark_penalized(self, credential_id: str) -> float:
        """
        Count a failure against a credential and put it on cooldown.

        Returns:
            The cooldown applied, in seconds
        """
        state = self.get_state(credential_id)
        duration = self._cooldowns.penalize(state, self._clock())
        lib_logger.warning(
            f"Credential {mask_credential(credential_id)} on cooldown for {duration:.0f}s "
            f"(consecutive failures: {state.consecutive_failures})"
        )
        return duration

    # =========================================================================
    # INSPECTION
    # =========================================================================

    def snapshot(self) -> List[CredentialState]:
        """Copies of every credential state, in configured order."""
        return [replace(self._states[cid]) for cid in self._order]

    def availability(self, now: Optional[float] = None) -> AvailabilityStats:
        if now is None:
            now = self._clock()
        on_cooldown = sum(1 for s in self._states.values() if not s.is_available(now))
        return AvailabilityStats(
            available=len(self._states) - on_cooldown,
            on_cooldown=on_cooldown,
            total=len(self._states),
        )
