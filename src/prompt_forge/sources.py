# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Remote image sources.

Resolves YouTube links to their thumbnail and accepts direct image URLs.
"""

import logging
import re
from typing import Optional

import httpx

from .analysis.image import open_image
from .core.constants import DEFAULT_IMAGE_FETCH_TIMEOUT
from .core.errors import UnsupportedUrlError

lib_logger = logging.getLogger("prompt_forge")

_YOUTUBE_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/shorts/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
)
_DIRECT_IMAGE_RE = re.compile(r"\.(?:jpg|jpeg|png|gif|webp)(?:\?|$)", re.IGNORECASE)

YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def extract_youtube_id(url: str) -> Optional[str]:
    """Return the 11-character video id of a watch, youtu.be, shorts or embed URL."""
    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def resolve_image_url(url: str) -> str:
    """
    Map a user-supplied URL to a fetchable image URL.

    Raises:
        UnsupportedUrlError: If the URL is neither YouTube nor a direct image
    """
    url = url.strip()
    if not url:
        raise UnsupportedUrlError("Please enter a URL")

    video_id = extract_youtube_id(url)
    if video_id:
        return YOUTUBE_THUMBNAIL_URL.format(video_id=video_id)
    if _DIRECT_IMAGE_RE.search(url):
        return url
    raise UnsupportedUrlError("Unsupported URL. Use YouTube or direct image URL.")


async def fetch_image(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
) -> bytes:
    """
    Download the image behind a YouTube or direct image URL.

    Args:
        url: User-supplied URL
        client: Shared HTTP client; a temporary one is created when omitted
        timeout: Request timeout in seconds

    Returns:
        Encoded image bytes

    Raises:
        UnsupportedUrlError: For URLs that cannot be resolved
        InvalidImageDataError: If the response body is not an image
        httpx.HTTPError: On transport failures and non-2xx responses
    """
    image_url = resolve_image_url(url)
    lib_logger.info(f"Fetching image from {image_url}")

    if client is None:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
            response = await owned.get(image_url)
    else:
        response = await client.get(image_url, timeout=timeout)

    response.raise_for_status()
    data = response.content
    open_image(data)
    return data
