# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Client-specific type definitions.

Types that are only used within the client package.
Shared types are in core/types.py.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..core.types import Attempt


@dataclass
class RetryState:
    """
    State tracking for one retry loop.

    Lives only for the duration of a single generate_once() call.
    """

    max_attempts: int
    tried_credentials: Set[str] = field(default_factory=set)
    last_exception: Optional[Exception] = None
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def exhausted(self) -> bool:
        return self.attempt_count >= self.max_attempts

    def record_attempt(self, attempt: Attempt) -> None:
        """Record that a credential was tried."""
        self.attempts.append(attempt)
        self.tried_credentials.add(attempt.credential_id)

    def record_error(self, error: Exception) -> None:
        self.last_exception = error
