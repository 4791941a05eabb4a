# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Client package for Gemini requests.

Public API:
    RequestExecutor: Retry loop with credential rotation
    GeminiClient: Single generateContent call over httpx

Components (for advanced usage):
    TransactionLogger: Per-attempt request/response files
    RetryState: Bookkeeping for one retry loop
"""

from .gemini import GeminiClient, build_request_payload, extract_text
from .file_logger import TransactionLogger
from .types import RetryState
from .executor import RequestExecutor

__all__ = [
    "RequestExecutor",
    "GeminiClient",
    "build_request_payload",
    "extract_text",
    "TransactionLogger",
    "RetryState",
]
