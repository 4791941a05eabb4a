# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Copy-space detection.

Compares the mean gradient magnitude of four border bands against the
centre of the image. A border that is much calmer than the centre is a
candidate for overlay text.
"""

import logging
from typing import Dict

import numpy as np
from PIL import Image

from ..core.constants import (
    COPY_SPACE_BAND,
    COPY_SPACE_CENTER,
    COPY_SPACE_MAX_SCORE,
    COPY_SPACE_MAX_SIDE,
    COPY_SPACE_MIN_SIDE,
    COPY_SPACE_RATIO,
)
from ..core.types import COPY_SPACE_SIDES, CopySpace
from .image import premultiplied_luminance

lib_logger = logging.getLogger("prompt_forge")


def _downsample(img: Image.Image) -> Image.Image:
    """Bound the longer side to COPY_SPACE_MAX_SIDE, each side at least COPY_SPACE_MIN_SIDE."""
    w, h = img.size
    scale = min(1.0, COPY_SPACE_MAX_SIDE / float(max(w, h)))
    target = (
        max(COPY_SPACE_MIN_SIDE, int(round(w * scale))),
        max(COPY_SPACE_MIN_SIDE, int(round(h * scale))),
    )
    rgba = img.convert("RGBA")
    if target == rgba.size:
        return rgba
    return rgba.resize(target, Image.Resampling.BILINEAR)


def gradient_magnitude(lum: np.ndarray) -> np.ndarray:
    """
    Central-difference gradient magnitude using orthogonal neighbours only.

    Edge rows/columns without both neighbours contribute zero along that axis.
    """
    gx = np.zeros_like(lum)
    gy = np.zeros_like(lum)
    gx[:, 1:-1] = lum[:, 2:] - lum[:, :-2]
    gy[1:-1, :] = lum[2:, :] - lum[:-2, :]
    return np.hypot(gx, gy)


def region_means(mag: np.ndarray) -> Dict[str, float]:
    """
    Mean gradient per border band and for the centre box.

    Returns:
        Dict with keys left, right, top, bottom, center
    """
    h, w = mag.shape
    band_w = max(1, int(round(w * COPY_SPACE_BAND)))
    band_h = max(1, int(round(h * COPY_SPACE_BAND)))
    lo, hi = COPY_SPACE_CENTER
    y0, y1 = int(h * lo), max(int(h * lo) + 1, int(h * hi))
    x0, x1 = int(w * lo), max(int(w * lo) + 1, int(w * hi))

    return {
        "left": float(mag[:, :band_w].mean()),
        "right": float(mag[:, w - band_w :].mean()),
        "top": float(mag[:band_h, :].mean()),
        "bottom": float(mag[h - band_h :, :].mean()),
        "center": float(mag[y0:y1, x0:x1].mean()),
    }


def detect_copy_space(img: Image.Image) -> CopySpace:
    """
    Find the calmest border band, if any is calm enough.

    A band is flagged when its mean gradient is below
    COPY_SPACE_RATIO * centre mean. The lowest flagged mean wins; equal
    means resolve in the order left, right, top, bottom.

    Args:
        img: Decoded source image (any mode)

    Returns:
        CopySpace; present=False with score 0.0 when nothing is flagged
        or the centre has no gradient at all
    """
    small = _downsample(img)
    lum = premultiplied_luminance(np.asarray(small))
    means = region_means(gradient_magnitude(lum))
    center = means["center"]

    if center <= 0:
        return CopySpace()

    flagged = tuple(side for side in COPY_SPACE_SIDES if means[side] < COPY_SPACE_RATIO * center)
    if not flagged:
        return CopySpace()

    chosen = flagged[0]
    for side in flagged[1:]:
        if means[side] < means[chosen]:
            chosen = side

    score = min((center - means[chosen]) / center, COPY_SPACE_MAX_SCORE)
    lib_logger.debug(
        f"Copy space on {chosen} (score {score:.2f}, flagged {list(flagged)}, "
        f"means {{{', '.join(f'{k}: {v:.1f}' for k, v in means.items())}}})"
    )
    return CopySpace(present=True, side=chosen, score=score, flagged=flagged)
