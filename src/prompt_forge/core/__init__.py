# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Core package for prompt_forge.

Provides shared infrastructure used by the pool, client and pipeline:
- types: Shared dataclasses and enums
- errors: All custom exceptions
- config: ConfigLoader for centralized configuration
- constants: Default values and magic numbers
"""

from .types import (
    AnalyzerSignals,
    Attempt,
    AttemptOutcome,
    CopySpace,
    GenerationOptions,
    GenerationRequest,
    OutputFormat,
    PreparedImage,
    PromptResult,
)

from .errors import (
    PromptForgeError,
    NoCredentialsError,
    InvalidImageDataError,
    UnsupportedUrlError,
    TransientRequestError,
    RateLimitedError,
    ServerTransientError,
    ClientRequestError,
    NetworkError,
    EmptyResponseError,
    AllCredentialsExhaustedError,
    mask_credential,
)

from .config import ConfigLoader, PipelineConfig, load_credentials_from_env

__all__ = [
    # Types
    "AnalyzerSignals",
    "Attempt",
    "AttemptOutcome",
    "CopySpace",
    "GenerationOptions",
    "GenerationRequest",
    "OutputFormat",
    "PreparedImage",
    "PromptResult",
    # Errors
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
    # Config
    "ConfigLoader",
    "PipelineConfig",
    "load_credentials_from_env",
]
