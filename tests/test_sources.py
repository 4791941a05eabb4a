import asyncio

import httpx
import pytest

from conftest import encode_png, noise_image
from prompt_forge.core.errors import InvalidImageDataError, UnsupportedUrlError
from prompt_forge.sources import extract_youtube_id, fetch_image, resolve_image_url


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1",
    ],
)
def test_extract_youtube_id(url):
    assert extract_youtube_id(url) == "dQw4w9WgXcQ"


def test_extract_youtube_id_misses():
    assert extract_youtube_id("https://vimeo.com/123456") is None
    assert extract_youtube_id("https://youtu.be/short") is None


def test_resolve_youtube_to_thumbnail():
    assert resolve_image_url("  https://youtu.be/dQw4w9WgXcQ ") == (
        "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
    )


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/cat.jpg",
        "https://example.com/cat.JPEG",
        "https://cdn.example.com/a/b.webp?w=800",
        "http://example.com/anim.gif",
        "https://example.com/logo.png",
    ],
)
def test_resolve_direct_image(url):
    assert resolve_image_url(url) == url


@pytest.mark.parametrize(
    "url", ["", "https://example.com/page.html", "https://example.com/cat.jpg.html"]
)
def test_resolve_unsupported(url):
    with pytest.raises(UnsupportedUrlError):
        resolve_image_url(url)


def test_fetch_image_with_shared_client():
    png = encode_png(noise_image((32, 32)))
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, content=png, headers={"content-type": "image/png"})

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_image("https://youtu.be/dQw4w9WgXcQ", client=client)

    assert asyncio.run(go()) == png
    assert seen == ["https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"]


def test_fetch_image_rejects_non_image_body():
    def handler(request):
        return httpx.Response(200, text="<html>not found</html>")

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_image("https://example.com/cat.png", client=client)

    with pytest.raises(InvalidImageDataError):
        asyncio.run(go())


def test_fetch_image_raises_on_http_error():
    async def go():
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            return await fetch_image("https://example.com/missing.png", client=client)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(go())
