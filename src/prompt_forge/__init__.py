# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
prompt_forge: image-to-prompt generation over the Gemini API.

Public API:
    GenerationPipeline: Sequential generation rounds with credential rotation
    GenerationRequest / GenerationOptions: Caller input
    PromptResult: Structured output record
    analyze_image: Copy-space, cutout and checkerboard signals
    process: Text post-processing of raw model output
"""

import logging

from .core import (
    AllCredentialsExhaustedError,
    AnalyzerSignals,
    ConfigLoader,
    CopySpace,
    GenerationOptions,
    GenerationRequest,
    InvalidImageDataError,
    NoCredentialsError,
    OutputFormat,
    PipelineConfig,
    PromptForgeError,
    PromptResult,
    UnsupportedUrlError,
    load_credentials_from_env,
)
from .analysis import analyze_image
from .pool import CredentialPool
from .client import GeminiClient, RequestExecutor
from .prompting import TEMPLATE_PRESETS, apply_preset, build_instruction
from .text import process
from .pipeline import GenerationPipeline

# Library convention: callers configure handlers
logging.getLogger("prompt_forge").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "GenerationPipeline",
    "GenerationRequest",
    "GenerationOptions",
    "OutputFormat",
    "PromptResult",
    "AnalyzerSignals",
    "CopySpace",
    "CredentialPool",
    "GeminiClient",
    "RequestExecutor",
    "ConfigLoader",
    "PipelineConfig",
    "load_credentials_from_env",
    "analyze_image",
    "process",
    "build_instruction",
    "apply_preset",
    "TEMPLATE_PRESETS",
    "PromptForgeError",
    "NoCredentialsError",
    "InvalidImageDataError",
    "UnsupportedUrlError",
    "AllCredentialsExhaustedError",
]
