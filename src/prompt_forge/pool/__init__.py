# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Credential pool package.

Public API:
    CredentialPool: Credential health registry and global rate gate

Components (for advanced usage):
    FirstFitStrategy: Ordered first-fit selection
    CooldownChecker: Linear capped cooldowns
"""

from .types import AvailabilityStats, CredentialState, RateGateState
from .cooldowns import CooldownChecker, linear_cooldown
from .selection import FirstFitStrategy
from .pool import CredentialPool

__all__ = [
    "CredentialPool",
    "CredentialState",
    "RateGateState",
    "AvailabilityStats",
    "CooldownChecker",
    "linear_cooldown",
    "FirstFitStrategy",
]
