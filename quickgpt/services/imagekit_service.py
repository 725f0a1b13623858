from __future__ import annotations

import base64
import logging
from urllib.parse import quote

import httpx

from quickgpt.core.errors import UpstreamError
from quickgpt.core.settings import Settings, get_settings
from quickgpt.db.models import now_ms

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_generation_url(
    url_endpoint: str, prompt: str, timestamp_ms: int, folder: str = "quickgpt"
) -> str:
    """ImageKit renders the image on first GET of this URL."""
    return (
        f"{url_endpoint.rstrip('/')}/ik-genimg-prompt-{encode_uri_component(prompt)}"
        f"/{folder}/{timestamp_ms}.png?tr=w-800,h-800"
    )


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class ImageKitService:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or get_settings()

        if not self._settings.imagekit_url_endpoint:
            raise RuntimeError("IMAGEKIT_URL_ENDPOINT is not configured")
        if not self._settings.imagekit_private_key:
            raise RuntimeError("IMAGEKIT_PRIVATE_KEY is not configured")

        self._transport = transport

    async def generate_image(self, prompt: str) -> str:
        """Generate an image for ``prompt`` and return its media-library URL.

        1. Build the AI generation URL and fetch it, which renders the image
        2. Re-encode the bytes as a base64 data URI
        3. Upload it to the media library so the URL outlives the transform cache
        """
        stamp = now_ms()
        folder = self._settings.imagekit_folder
        generation_url = build_generation_url(
            self._settings.imagekit_url_endpoint, prompt, stamp, folder
        )

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.image_http_timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                generated = await client.get(generation_url)
                generated.raise_for_status()

                upload = await client.post(
                    self._settings.imagekit_upload_url,
                    auth=(self._settings.imagekit_private_key, ""),
                    files={
                        "file": (None, to_data_uri(generated.content)),
                        "fileName": (None, f"{stamp}.png"),
                        "folder": (None, folder),
                    },
                )
                upload.raise_for_status()
                uploaded = upload.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("ImageKit request failed")
            raise UpstreamError(f"Image generation failed: {e}") from e

        url = uploaded.get("url") if isinstance(uploaded, dict) else None
        if not url:
            raise UpstreamError("Image upload returned no URL")

        logger.info(f"Uploaded generated image {stamp}.png to /{folder}")
        return url
