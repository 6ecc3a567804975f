from __future__ import annotations

import asyncio

import pytest

from shipyard.imports.uploads import (
    UploadTooLargeError,
    describe_upload_limit,
    read_body_limited,
)


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


def test_read_body_limited_joins_chunks() -> None:
    body = asyncio.run(read_body_limited(_chunks(b"name: ", b"", b"billing"), max_bytes=13))

    assert body == b"name: billing"


def test_read_body_limited_rejects_oversized_body() -> None:
    with pytest.raises(UploadTooLargeError):
        asyncio.run(read_body_limited(_chunks(b"12345", b"67890"), max_bytes=8))


def test_read_body_limited_rejects_negative_limit() -> None:
    with pytest.raises(ValueError):
        asyncio.run(read_body_limited(_chunks(b"x"), max_bytes=-1))


@pytest.mark.parametrize(
    ("max_bytes", "expected"),
    [(10 * 1024 * 1024, "10 MB"), (1, "1 byte"), (1500, "1500 bytes")],
)
def test_describe_upload_limit(max_bytes: int, expected: str) -> None:
    assert describe_upload_limit(max_bytes) == expected
