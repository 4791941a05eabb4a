import asyncio

import httpx
import pytest

from conftest import gemini_body
from prompt_forge.analysis import prepare_image
from prompt_forge.client import build_request_payload, extract_text
from prompt_forge.core.errors import (
    ClientRequestError,
    EmptyResponseError,
    NetworkError,
    RateLimitedError,
    ServerTransientError,
    classify_response,
    get_retry_after,
    mask_credential,
)


@pytest.fixture
def payload(png_bytes):
    return build_request_payload("describe", prepare_image(png_bytes), temperature=0.5)


def test_payload_shape(png_bytes):
    image = prepare_image(png_bytes)
    body = build_request_payload("describe", image, temperature=0.5, max_output_tokens=100)

    text_part, image_part = body["contents"][0]["parts"]
    assert text_part == {"text": "describe"}
    assert image_part == {"inlineData": {"mimeType": "image/png", "data": image.base64}}
    assert body["generationConfig"] == {"temperature": 0.5, "maxOutputTokens": 100}


@pytest.mark.parametrize(
    "data, expected",
    [
        (gemini_body("  hello  "), "hello"),
        (gemini_body("   "), None),
        ({"candidates": []}, None),
        ({"candidates": [{"content": {"parts": []}}]}, None),
        ({"promptFeedback": {"blockReason": "SAFETY"}}, None),
        (None, None),
    ],
)
def test_extract_text(data, expected):
    assert extract_text(data) == expected


def test_generate_posts_to_model_endpoint(make_client, payload):
    client, handler = make_client(
        httpx.Response(200, json=gemini_body("ok")), model="gemini-2.5-flash-lite"
    )

    assert asyncio.run(client.generate("secret-key-1234", payload)) == "ok"

    request = handler.requests[0]
    assert request.method == "POST"
    assert str(request.url) == (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.5-flash-lite:generateContent"
    )
    assert request.headers["x-goog-api-key"] == "secret-key-1234"
    assert "key=" not in str(request.url)


def test_rate_limit_reads_retry_delay_from_body(make_client, payload):
    body = {
        "error": {
            "code": 429,
            "message": "Resource exhausted",
            "details": [
                {"@type": "type.googleapis.com/google.rpc.RetryInfo", "retryDelay": "12s"}
            ],
        }
    }
    client, _ = make_client(httpx.Response(429, json=body))

    with pytest.raises(RateLimitedError) as excinfo:
        asyncio.run(client.generate("key", payload))
    assert excinfo.value.retry_after == 12.0
    assert excinfo.value.status_code == 429


def test_server_error(make_client, payload):
    client, _ = make_client(httpx.Response(503, text="unavailable"))
    with pytest.raises(ServerTransientError) as excinfo:
        asyncio.run(client.generate("key", payload))
    assert excinfo.value.status_code == 503
    assert str(excinfo.value) == "API error: 503"


def test_client_error_uses_error_message(make_client, payload):
    client, _ = make_client(
        httpx.Response(403, json={"error": {"message": "Permission denied"}})
    )
    with pytest.raises(ClientRequestError, match="Permission denied"):
        asyncio.run(client.generate("key", payload))


def test_unparseable_success_is_empty_response(make_client, payload):
    client, _ = make_client(httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(EmptyResponseError):
        asyncio.run(client.generate("key", payload))


def test_transport_failure_is_network_error(make_client, payload):
    client, _ = make_client(httpx.ReadTimeout("timed out"))
    with pytest.raises(NetworkError):
        asyncio.run(client.generate("key", payload))


def test_classify_response_passes_success():
    assert classify_response(httpx.Response(204)) is None


def test_retry_after_header_wins_over_body():
    response = httpx.Response(
        429,
        headers={"Retry-After": "3"},
        json={"error": {"details": [{"retryDelay": "40s"}]}},
    )
    assert get_retry_after(response, response.json()) == 3.0
    assert get_retry_after(httpx.Response(429)) == 0.0


HTTP_DATE = "Wed, 21 Oct 2015 07:28:00 GMT"
HTTP_DATE_TS = 1445412480.0


def test_retry_after_http_date_uses_given_now():
    response = httpx.Response(429, headers={"Retry-After": HTTP_DATE})
    assert get_retry_after(response, now=HTTP_DATE_TS - 20.0) == 20.0
    assert get_retry_after(response, now=HTTP_DATE_TS + 5.0) == 0.0
    assert classify_response(response, now=HTTP_DATE_TS - 7.5).retry_after == 7.5


def test_client_clock_resolves_http_date_retry_after(make_client, payload):
    client, _ = make_client(
        httpx.Response(429, headers={"Retry-After": HTTP_DATE}),
        clock=lambda: HTTP_DATE_TS - 12.0,
    )
    with pytest.raises(RateLimitedError) as excinfo:
        asyncio.run(client.generate("key", payload))
    assert excinfo.value.retry_after == 12.0


def test_mask_credential():
    assert mask_credential("AIzaSyExampleKey1234") == "...1234"
    assert mask_credential("AIzaSyExampleKey1234", style="full") == "AIza...1234"
    assert mask_credential("short") == "...rt"
    assert mask_credential("") == "<empty>"


def test_transaction_logging_writes_files(make_client, payload, tmp_path):
    client, _ = make_client(
        httpx.Response(200, json=gemini_body("ok")),
        log_transactions=True,
        log_dir=str(tmp_path),
    )
    asyncio.run(client.generate("key", payload))

    attempt_dirs = list((tmp_path / "gemini_logs").iterdir())
    assert len(attempt_dirs) == 1
    request_file = attempt_dirs[0] / "request_payload.json"
    assert request_file.exists()
    assert (attempt_dirs[0] / "final_response.json").exists()
    assert "base64 chars" in request_file.read_text()
