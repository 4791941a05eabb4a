# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Post-processing of raw model output.

The raw candidate runs through an ordered list of named stages. A stage
that raises is skipped and its input passes through unchanged, so the
pipeline as a whole always produces a string.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_MAX_CHARS, WHITE_BACKGROUND_SUFFIX
from ..core.types import AnalyzerSignals
from .rewrite import (
    add_suffix_safely,
    clamp_to_max_chars,
    first_non_empty_line,
    mentions_transparent_background,
    rewrite_background,
    strip_copy_space,
)

lib_logger = logging.getLogger("prompt_forge")


@dataclass(frozen=True)
class RewriteContext:
    """Inputs shared by every stage of one run."""

    signals: AnalyzerSignals = field(default_factory=AnalyzerSignals.neutral)
    max_chars: int = DEFAULT_MAX_CHARS


Stage = Callable[[str, RewriteContext], str]


# =============================================================================
# STAGES
# =============================================================================


def first_line_stage(text: str, ctx: RewriteContext) -> str:
    return first_non_empty_line(text)


def copy_space_stage(text: str, ctx: RewriteContext) -> str:
    return strip_copy_space(text)


def white_background_stage(text: str, ctx: RewriteContext) -> str:
    """
    Force white-background phrasing for cutouts and checkerboards.

    Also applies when the text itself asks for a transparent background,
    since the generator cannot produce real transparency.
    """
    signals = ctx.signals
    if not (signals.cutout or signals.checkerboard or mentions_transparent_background(text)):
        return text
    return add_suffix_safely(rewrite_background(text), WHITE_BACKGROUND_SUFFIX, ctx.max_chars)


def clamp_stage(text: str, ctx: RewriteContext) -> str:
    return clamp_to_max_chars(text, ctx.max_chars)


# =============================================================================
# PIPELINE
# =============================================================================


class TextPipeline:
    """Ordered, fail-soft sequence of named text stages."""

    def __init__(self, stages: Sequence[Tuple[str, Stage]]):
        self.stages: List[Tuple[str, Stage]] = list(stages)

    @property
    def stage_names(self) -> List[str]:
        return [name for name, _ in self.stages]

    def run(self, text: str, ctx: RewriteContext) -> str:
        for name, stage in self.stages:
            try:
                result = stage(text, ctx)
            except Exception as e:
                lib_logger.warning(f"Text stage '{name}' failed, keeping its input: {e}")
                continue
            if not isinstance(result, str):
                lib_logger.warning(
                    f"Text stage '{name}' returned {type(result).__name__}, keeping its input"
                )
                continue
            text = result
        return text


DEFAULT_STAGES: Tuple[Tuple[str, Stage], ...] = (
    ("first_line", first_line_stage),
    ("strip_copy_space", copy_space_stage),
    ("white_background", white_background_stage),
    ("clamp", clamp_stage),
)

default_pipeline = TextPipeline(DEFAULT_STAGES)


def process(
    raw_text: str,
    signals: Optional[AnalyzerSignals] = None,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    """
    Turn raw model output into a finished prompt.

    Args:
        raw_text: Text returned by the model
        signals: Analyzer signals for the source image; neutral when omitted
        max_chars: Character budget of the finished prompt

    Returns:
        The finished prompt, never longer than max_chars
    """
    ctx = RewriteContext(signals=signals or AnalyzerSignals.neutral(), max_chars=max_chars)
    return default_pipeline.run(raw_text or "", ctx)
