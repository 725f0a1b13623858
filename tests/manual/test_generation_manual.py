"""Manual runner for the two generation clients against the real services.

This spends real API quota; nothing touches the database.

Run (example):
  GEMINI_API_KEY=... \
  IMAGEKIT_URL_ENDPOINT='https://ik.imagekit.io/<id>' IMAGEKIT_PRIVATE_KEY=... \
  RUN_MANUAL=1 \
  python -m pytest -s tests/manual/test_generation_manual.py

Optional env vars:
- PROMPT: defaults to a short question / scene description
"""

from __future__ import annotations

import os

import anyio
import pytest

from quickgpt.services.gemini_service import GeminiService
from quickgpt.services.imagekit_service import ImageKitService


def _require_manual() -> None:
    if os.getenv("RUN_MANUAL") != "1":
        pytest.skip("Manual runner; set RUN_MANUAL=1 to execute")


def test_manual_gemini_reply() -> None:
    _require_manual()

    prompt = os.getenv("PROMPT", "In one sentence, what is a lighthouse for?")
    reply = anyio.run(GeminiService().generate_reply, prompt)

    print("\n=== Gemini reply ===")
    print(reply)
    assert reply.strip()


def test_manual_imagekit_image() -> None:
    _require_manual()

    prompt = os.getenv("PROMPT", "a lighthouse at dusk, watercolor")
    url = anyio.run(ImageKitService().generate_image, prompt)

    print("\n=== ImageKit upload ===")
    print(url)
    assert url.startswith("https://")
