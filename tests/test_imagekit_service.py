from __future__ import annotations

import anyio
import httpx
import pytest

from quickgpt.core.errors import UpstreamError
from quickgpt.core.settings import Settings
from quickgpt.services.imagekit_service import (
    ImageKitService,
    build_generation_url,
    encode_uri_component,
    to_data_uri,
)

ENDPOINT = "https://ik.imagekit.io/demo"
UPLOAD_URL = "https://upload.imagekit.io/api/v1/files/upload"
PNG_BYTES = b"\x89PNG\r\n\x1a\n"


def _settings() -> Settings:
    return Settings(
        IMAGEKIT_URL_ENDPOINT=ENDPOINT,
        IMAGEKIT_PRIVATE_KEY="private_test_key",
    )


def test_encode_uri_component_matches_javascript():
    assert encode_uri_component("a cat & a dog?") == "a%20cat%20%26%20a%20dog%3F"
    assert encode_uri_component("keep-_.!~*'()") == "keep-_.!~*'()"
    assert encode_uri_component("café/🦊") == "caf%C3%A9%2F%F0%9F%A6%8A"


def test_build_generation_url():
    url = build_generation_url(ENDPOINT + "/", "red fox", 1760000000000)

    assert url == (
        "https://ik.imagekit.io/demo/ik-genimg-prompt-red%20fox"
        "/quickgpt/1760000000000.png?tr=w-800,h-800"
    )


def test_to_data_uri():
    assert to_data_uri(b"PNG") == "data:image/png;base64,UE5H"


def test_generate_image_fetches_then_uploads():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "GET":
            return httpx.Response(200, content=PNG_BYTES)
        return httpx.Response(
            200, json={"url": "https://ik.imagekit.io/demo/quickgpt/fox.png"}
        )

    service = ImageKitService(_settings(), transport=httpx.MockTransport(handler))

    url = anyio.run(service.generate_image, "red fox")

    assert url == "https://ik.imagekit.io/demo/quickgpt/fox.png"

    generate, upload = seen
    assert generate.url.raw_path.startswith(b"/demo/ik-genimg-prompt-red%20fox/quickgpt/")
    assert generate.url.params["tr"] == "w-800,h-800"

    assert str(upload.url) == UPLOAD_URL
    assert upload.headers["authorization"].startswith("Basic ")
    body = upload.content
    assert to_data_uri(PNG_BYTES).encode() in body
    assert b'name="folder"' in body
    assert b"quickgpt" in body


def test_generation_failure_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    service = ImageKitService(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError):
        anyio.run(service.generate_image, "red fox")


def test_upload_without_url_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, content=PNG_BYTES)
        return httpx.Response(200, json={"fileId": "abc"})

    service = ImageKitService(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError, match="no URL"):
        anyio.run(service.generate_image, "red fox")


def test_missing_configuration_is_rejected():
    with pytest.raises(RuntimeError, match="IMAGEKIT_URL_ENDPOINT"):
        ImageKitService(Settings(IMAGEKIT_URL_ENDPOINT=None, IMAGEKIT_PRIVATE_KEY="key"))


def test_upload_with_non_object_body_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, content=PNG_BYTES)
        return httpx.Response(200, json=["https://ik.imagekit.io/demo/quickgpt/fox.png"])

    service = ImageKitService(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError, match="no URL"):
        anyio.run(service.generate_image, "red fox")
