# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Cooldown calculation.

Every penalizing outcome uses the same linear, capped formula:
    cooldown = min(cap, base * consecutive_failures)
"""

from .types import CredentialState


def linear_cooldown(consecutive_failures: int, base: float, cap: float) -> float:
    """
    Cooldown duration after `consecutive_failures` penalties.

    Args:
        consecutive_failures: Failures since the last success (>= 0)
        base: Seconds added per failure
        cap: Upper bound in seconds

    Returns:
        Cooldown in seconds
    """
    if consecutive_failures <= 0:
        return 0.0
    return min(cap, base * consecutive_failures)


class CooldownChecker:
    """
    Applies and inspects credential cooldowns.
    """

    def __init__(self, base: float, cap: float):
        self.base = base
        self.cap = cap

    def duration_for(self, state: CredentialState) -> float:
        return linear_cooldown(state.consecutive_failures, self.base, self.cap)

    def penalize(self, state: CredentialState, now: float) -> float:
        """
        Record one more failure and push the credential's availability out.

        Args:
            state: Credential state to update
            now: Current timestamp

        Returns:
            The cooldown applied, in seconds
        """
        state.consecutive_failures += 1
        duration = self.duration_for(state)
        state.next_available_at = now + duration
        return duration

    def reset(self, state: CredentialState) -> None:
        """Clear cooldown and failure count for a credential."""
        state.consecutive_failures = 0
        state.next_available_at = 0.0

