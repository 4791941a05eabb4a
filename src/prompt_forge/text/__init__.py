# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

from .pipeline import (
    DEFAULT_STAGES,
    RewriteContext,
    TextPipeline,
    default_pipeline,
    process,
)
from .rewrite import (
    add_suffix_safely,
    clamp_to_max_chars,
    first_non_empty_line,
    mentions_transparent_background,
    normalize_punctuation,
    rewrite_background,
    strip_copy_space,
)

__all__ = [
    "DEFAULT_STAGES",
    "RewriteContext",
    "TextPipeline",
    "default_pipeline",
    "process",
    "add_suffix_safely",
    "clamp_to_max_chars",
    "first_non_empty_line",
    "mentions_transparent_background",
    "normalize_punctuation",
    "rewrite_background",
    "strip_copy_space",
]
