# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Image decoding and preparation helpers.

Everything that turns caller input into pixels (or into the base64 the
API expects) goes through here, so malformed input is rejected before a
request is ever attempted.
"""

import base64
import binascii
import re
from io import BytesIO
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.constants import IMAGE_JPEG_QUALITY, IMAGE_MAX_SIZE
from ..core.errors import InvalidImageDataError
from ..core.types import PreparedImage

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,(.+)$", re.DOTALL)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def decode_data_url(value: str) -> Tuple[bytes, str]:
    """
    Split a base64 data URL into raw bytes and its MIME type.

    Raises:
        InvalidImageDataError: If the URL is not a base64 image data URL
    """
    match = _DATA_URL_RE.match(value.strip())
    if not match:
        raise InvalidImageDataError("Invalid image data")
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageDataError(f"Invalid base64 image data: {e}") from e
    return data, match.group(1)


def open_image(data: bytes) -> Image.Image:
    """
    Decode encoded image bytes.

    Raises:
        InvalidImageDataError: If Pillow cannot decode the bytes
    """
    if not data:
        raise InvalidImageDataError("Empty image data")
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise InvalidImageDataError(f"Cannot decode image: {e}") from e
    return img


def prepare_image(
    image: Union[bytes, str],
    mime_type: Optional[str] = None,
) -> PreparedImage:
    """
    Validate caller input and encode it for the request body.

    Args:
        image: Encoded image bytes or a base64 data URL
        mime_type: Explicit MIME type; detected from the data when omitted

    Returns:
        PreparedImage with raw bytes, MIME type and base64 text

    Raises:
        InvalidImageDataError: For anything that is not a decodable image
    """
    if isinstance(image, str):
        data, url_mime = decode_data_url(image)
        mime_type = mime_type or url_mime
    elif isinstance(image, (bytes, bytearray, memoryview)):
        data = bytes(image)
    else:
        raise InvalidImageDataError(f"Unsupported image input type: {type(image).__name__}")

    img = open_image(data)
    if not mime_type:
        mime_type = Image.MIME.get(img.format or "")
    if not mime_type:
        raise InvalidImageDataError(f"Unknown image format: {img.format}")

    return PreparedImage(
        data=data,
        mime_type=mime_type,
        base64=base64.b64encode(data).decode("ascii"),
    )


def compress_image(
    data: bytes,
    max_size: int = IMAGE_MAX_SIZE,
    quality: int = IMAGE_JPEG_QUALITY,
) -> Tuple[bytes, str]:
    """
    Bound the longer side to max_size and re-encode.

    Opaque images become JPEG. Images with an alpha channel stay PNG so the
    analyzer can still see their transparency.

    Returns:
        (encoded bytes, MIME type)
    """
    img = open_image(data)
    if max(img.size) > max_size:
        img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

    buf = BytesIO()
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        img.convert("RGBA").save(buf, format="PNG", optimize=True)
        return buf.getvalue(), "image/png"
    img.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue(), "image/jpeg"


def premultiplied_luminance(rgba: np.ndarray) -> np.ndarray:
    """
    Luminance of an RGBA array with colour weighted by alpha.

    Fully transparent pixels read as black, the way a canvas reports them.
    """
    rgb = rgba[..., :3].astype(np.float64)
    alpha = rgba[..., 3:4].astype(np.float64) / 255.0
    return (rgb * alpha) @ LUMA_WEIGHTS


def luminance(rgba: np.ndarray) -> np.ndarray:
    """Plain luminance of the colour channels, ignoring alpha."""
    return rgba[..., :3].astype(np.float64) @ LUMA_WEIGHTS
