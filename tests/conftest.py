from __future__ import annotations

from io import BytesIO
from typing import Callable, Tuple

import pytest
from PIL import Image

from config import Settings, SyncSettings


def encode_image(
    width: int,
    height: int,
    *,
    fmt: str = "PNG",
    color: Tuple[int, int, int] = (200, 40, 40),
) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return encode_image


@pytest.fixture
def settings() -> Settings:
    # No backoff between query attempts in tests.
    return Settings(sync=SyncSettings(retry_wait_max_seconds=0))
