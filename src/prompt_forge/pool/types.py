# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Type definitions for the credential pool.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CredentialState:
    """
    Health of a single credential.

    Created with defaults when the pool is built (or on first reference),
    mutated only by the pool's outcome handlers, never deleted.
    """

    credential_id: str
    next_available_at: float = 0.0  # Timestamp; 0 = available now
    consecutive_failures: int = 0  # Penalized outcomes since last success

    def is_available(self, now: float) -> bool:
        """True if the credential may be used at `now`."""
        return self.next_available_at <= now

    def remaining(self, now: float) -> float:
        """Seconds until the credential becomes available."""
        return max(0.0, self.next_available_at - now)


@dataclass
class RateGateState:
    """
    Global minimum-interval gate, shared by every credential in a pool.

    Updated only on a successful attempt.
    """

    min_interval: float
    last_success_at: Optional[float] = None  # None until the first success

    def delay(self, now: float) -> float:
        """Seconds to wait before the next attempt may start."""
        if self.last_success_at is None:
            return 0.0
        return max(0.0, self.min_interval - (now - self.last_success_at))


@dataclass
class AvailabilityStats:
    """
    Statistics about credential availability.

    Used for logging pool status.
    """

    available: int  # Credentials not on cooldown
    on_cooldown: int  # Credentials on cooldown
    total: int  # Total credentials in the pool

    def __str__(self) -> str:
        parts = [f"{self.available}/{self.total}"]
        if self.on_cooldown > 0:
            parts.append(f"cd:{self.on_cooldown}")
        return ",".join(parts)
