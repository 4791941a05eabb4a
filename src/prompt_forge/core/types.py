# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Shared type definitions for prompt_forge.

Request/response records exchanged with callers, analyzer signals and
the per-attempt record used by the retry loop.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .constants import DEFAULT_MAX_CHARS


# =============================================================================
# ENUMS
# =============================================================================


class OutputFormat(str, Enum):
    """What the pipeline yields per round."""

    TEXT = "text"  # Plain prompt string
    STRUCTURED = "structured"  # PromptResult record


class AttemptOutcome(str, Enum):
    """Outcome of a single network attempt."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    NETWORK_ERROR = "network_error"
    EMPTY_RESPONSE = "empty_response"


COPY_SPACE_SIDES = ("left", "right", "top", "bottom")


# =============================================================================
# GENERATION OPTIONS & REQUEST
# =============================================================================


@dataclass(frozen=True)
class GenerationOptions:
    """
    Per-round options supplied by the caller.

    Immutable; presets produce new instances via dataclasses.replace().
    """

    max_chars: int = DEFAULT_MAX_CHARS
    aspect_ratio: Optional[str] = None
    style: Optional[str] = None
    extra_params: Optional[str] = None
    output_format: OutputFormat = OutputFormat.TEXT

    def __post_init__(self):
        if int(self.max_chars) <= 0:
            raise ValueError(f"max_chars must be > 0, got {self.max_chars}")
        if not isinstance(self.output_format, OutputFormat):
            object.__setattr__(self, "output_format", OutputFormat(self.output_format))


@dataclass
class GenerationRequest:
    """
    Input from the image-handling collaborator.

    image is raw encoded bytes or a base64 data URL
    ("data:image/jpeg;base64,...").
    """

    image: Union[bytes, str]
    options: GenerationOptions = field(default_factory=GenerationOptions)
    num_prompts: int = 2
    mime_type: Optional[str] = None


# =============================================================================
# ANALYZER SIGNALS
# =============================================================================


@dataclass(frozen=True)
class CopySpace:
    """Low-activity border region suitable for overlay text."""

    present: bool = False
    side: Optional[str] = None  # One of COPY_SPACE_SIDES when present
    score: float = 0.0  # (centre - chosen) / centre, in [0, 1)
    flagged: Tuple[str, ...] = ()  # Every flagged side, evaluation order


@dataclass(frozen=True)
class AnalyzerSignals:
    """Heuristic signals derived from one source image. Never cached."""

    copy_space: CopySpace = field(default_factory=CopySpace)
    cutout: bool = False
    checkerboard: bool = False

    @classmethod
    def neutral(cls) -> "AnalyzerSignals":
        """The "no signal" result used when analysis fails."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["copy_space"]["flagged"] = list(self.copy_space.flagged)
        return data


# =============================================================================
# ATTEMPTS & RESULTS
# =============================================================================


@dataclass
class Attempt:
    """
    Record of one network try.

    Used only for control flow and logging inside the retry loop.
    """

    credential_id: str
    attempt_index: int  # 1-based
    outcome: Optional[AttemptOutcome] = None
    error: Optional[Exception] = None


@dataclass
class PromptResult:
    """Structured output of one generation round."""

    index: int  # 1-based round number
    text: str
    raw_text: str
    signals: AnalyzerSignals
    options: GenerationOptions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "prompt": self.text,
            "raw": self.raw_text,
            "aspect_ratio": self.options.aspect_ratio,
            "style": self.options.style,
            "extra_params": self.options.extra_params,
            "max_chars": self.options.max_chars,
            "signals": self.signals.to_dict(),
        }


@dataclass
class PreparedImage:
    """Validated image ready to send upstream."""

    data: bytes
    mime_type: str
    base64: str
