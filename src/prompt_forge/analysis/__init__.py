# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Image content analysis.

analyze_image() is advisory: it never raises, and any failure degrades
to neutral signals.
"""

import logging
from typing import Union

from PIL import Image

from ..core.types import AnalyzerSignals
from .copy_space import detect_copy_space, gradient_magnitude, region_means
from .cutout import detect_cutout_or_checkerboard
from .image import compress_image, decode_data_url, open_image, prepare_image

lib_logger = logging.getLogger("prompt_forge")


def analyze_image(image: Union[bytes, Image.Image]) -> AnalyzerSignals:
    """
    Derive copy-space, cutout and checkerboard signals from an image.

    Args:
        image: Encoded image bytes or an already decoded PIL image

    Returns:
        AnalyzerSignals; AnalyzerSignals.neutral() on any failure
    """
    try:
        img = image if isinstance(image, Image.Image) else open_image(image)
        copy_space = detect_copy_space(img)
        cutout, checkerboard = detect_cutout_or_checkerboard(img)
    except Exception as e:
        lib_logger.debug(f"Image analysis failed, using neutral signals: {e}")
        return AnalyzerSignals.neutral()
    return AnalyzerSignals(copy_space=copy_space, cutout=cutout, checkerboard=checkerboard)


__all__ = [
    "analyze_image",
    "detect_copy_space",
    "detect_cutout_or_checkerboard",
    "gradient_magnitude",
    "region_means",
    "compress_image",
    "decode_data_url",
    "open_image",
    "prepare_image",
]
