import json
from io import BytesIO

import httpx
import numpy as np
import pytest
from PIL import Image

from prompt_forge.client import GeminiClient


class FakeClock:
    """Manual clock whose sleep() advances time instead of blocking."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def encode_png(img):
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def noise_image(size=(240, 240), seed=0):
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    return Image.fromarray(pixels, "RGB")


@pytest.fixture
def png_bytes():
    return encode_png(noise_image((64, 64)))


@pytest.fixture
def transparent_png_bytes():
    return encode_png(Image.new("RGBA", (200, 200), (0, 0, 0, 0)))


class RecordingHandler:
    """MockTransport handler replaying scripted responses and recording requests."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if len(self.responses) > 1:
            item = self.responses.pop(0)
        else:
            item = self.responses[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        # Fresh copy per call; a Response instance cannot be sent twice
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def keys_used(self):
        return [r.headers["x-goog-api-key"] for r in self.requests]

    def json_body(self, index=0):
        return json.loads(self.requests[index].content)


@pytest.fixture
def make_client():
    """Build a GeminiClient whose HTTP layer replays scripted responses."""

    def _builder(*responses, **kwargs):
        handler = RecordingHandler(responses)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GeminiClient(http_client=http_client, **kwargs), handler

    return _builder
