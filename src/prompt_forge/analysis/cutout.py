# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Cutout and checkerboard detection.

A cutout has a large transparent area. A checkerboard is the grey/white
pattern editors use to display transparency, baked into opaque pixels.
"""

from typing import Tuple

import numpy as np
from PIL import Image

from ..core.constants import (
    CHECKER_FRACTION,
    CHECKER_GRAY_RANGE,
    CHECKER_WHITE_MIN,
    CUTOUT_ALPHA_THRESHOLD,
    CUTOUT_FRACTION,
    CUTOUT_MIN_HEIGHT,
    CUTOUT_SAMPLE_WIDTH,
)
from .image import luminance


def _downsample(img: Image.Image) -> Image.Image:
    w, h = img.size
    target_h = max(CUTOUT_MIN_HEIGHT, int(round(h * CUTOUT_SAMPLE_WIDTH / float(w))))
    rgba = img.convert("RGBA")
    if rgba.size == (CUTOUT_SAMPLE_WIDTH, target_h):
        return rgba
    return rgba.resize((CUTOUT_SAMPLE_WIDTH, target_h), Image.Resampling.BILINEAR)


def detect_cutout_or_checkerboard(img: Image.Image) -> Tuple[bool, bool]:
    """
    Sample every second pixel and classify transparency.

    Returns:
        (cutout, checkerboard)
    """
    samples = np.asarray(_downsample(img))[::2, ::2]
    total = samples.shape[0] * samples.shape[1]
    if total == 0:
        return False, False

    alpha = samples[..., 3]
    cutout = np.count_nonzero(alpha < CUTOUT_ALPHA_THRESHOLD) / total > CUTOUT_FRACTION

    opaque = alpha == 255
    lum = luminance(samples)
    gray_lo, gray_hi = CHECKER_GRAY_RANGE
    white = np.count_nonzero(opaque & (lum > CHECKER_WHITE_MIN))
    gray = np.count_nonzero(opaque & (lum >= gray_lo) & (lum <= gray_hi))
    checkerboard = white > CHECKER_FRACTION * total and gray > CHECKER_FRACTION * total

    return bool(cutout), bool(checkerboard)
