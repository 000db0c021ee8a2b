"""Shared fixtures for gateway tests."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from app.config import Settings


class DummySettings(Settings):
    model_config = {"env_file": None}


def make_image_bytes(size: int = 64, fmt: str = "JPEG") -> bytes:
    img = Image.new("RGB", (size, size), color=(200, 80, 40))
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def settings() -> DummySettings:
    return DummySettings(log_file=None)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes(fmt="PNG")
