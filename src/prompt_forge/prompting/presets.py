# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Template presets.

A preset fills style, aspect ratio and trailing parameters for a common
kind of image.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from ..core.types import GenerationOptions

lib_logger = logging.getLogger("prompt_forge")


@dataclass(frozen=True)
class TemplatePreset:
    style: str
    aspect_ratio: str
    extra_params: str


TEMPLATE_PRESETS: Dict[str, TemplatePreset] = {
    "product": TemplatePreset(
        style="realistic",
        aspect_ratio="1:1",
        extra_params="--style raw --no human, isolated on white background",
    ),
    "character": TemplatePreset(
        style="fantasy",
        aspect_ratio="3:2",
        extra_params="full body, detailed, character design",
    ),
    "logo": TemplatePreset(
        style="minimalist",
        aspect_ratio="1:1",
        extra_params="vector, clean lines, simple, iconic",
    ),
    "landscape": TemplatePreset(
        style="cinematic",
        aspect_ratio="16:9",
        extra_params="wide angle, cinematic lighting, epic",
    ),
    "portrait": TemplatePreset(
        style="realistic",
        aspect_ratio="3:2",
        extra_params="portrait photography, professional lighting",
    ),
    "anime": TemplatePreset(
        style="anime",
        aspect_ratio="9:16",
        extra_params="anime style, detailed, vibrant colors",
    ),
}


def apply_preset(name: Optional[str], options: GenerationOptions) -> GenerationOptions:
    """
    Return options with a preset's style, aspect ratio and parameters.

    Unknown or empty preset names leave the options unchanged.
    """
    if not name:
        return options
    preset = TEMPLATE_PRESETS.get(name.lower())
    if preset is None:
        lib_logger.warning(
            f"Unknown preset '{name}'. Available: {', '.join(sorted(TEMPLATE_PRESETS))}"
        )
        return options
    return replace(
        options,
        style=preset.style,
        aspect_ratio=preset.aspect_ratio,
        extra_params=preset.extra_params,
    )
