# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

from .instructions import build_instruction
from .presets import TEMPLATE_PRESETS, TemplatePreset, apply_preset

__all__ = [
    "build_instruction",
    "TEMPLATE_PRESETS",
    "TemplatePreset",
    "apply_preset",
]
