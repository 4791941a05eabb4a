# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
First-fit credential selection.

Configured order is the tie-break: the first available credential wins,
not the least loaded one.
"""

import logging
from typing import Dict, List, Tuple

from ..core.errors import mask_credential
from .types import CredentialState

lib_logger = logging.getLogger("prompt_forge")


class FirstFitStrategy:
    """
    Pick the first credential in configured order that is available now.

    When every credential is cooling down, pick the one that frees up
    first (earliest next_available_at, configured order breaking ties)
    and report how long the caller must wait for it.
    """

    @property
    def name(self) -> str:
        return "first_fit"

    def select(
        self,
        order: List[str],
        states: Dict[str, CredentialState],
        now: float,
    ) -> Tuple[str, float]:
        """
        Select a credential.

        Args:
            order: Credential ids in configured order
            states: Dict of credential_id -> CredentialState
            now: Current timestamp

        Returns:
            (credential_id, seconds_to_wait); the wait is 0.0 when a
            credential is immediately available
        """
        candidates = [cid for cid in order if cid in states]
        if not candidates:
            # Nothing tracked yet; fall back to the first configured credential
            return order[0], 0.0

        for cid in candidates:
            if states[cid].is_available(now):
                return cid, 0.0

        earliest = candidates[0]
        for cid in candidates[1:]:
            if states[cid].next_available_at < states[earliest].next_available_at:
                earliest = cid

        wait = states[earliest].remaining(now)
        lib_logger.debug(
            f"All {len(candidates)} credential(s) cooling down; "
            f"{mask_credential(earliest)} frees up in {wait:.1f}s"
        )
        return earliest, wait
