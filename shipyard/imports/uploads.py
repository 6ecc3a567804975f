from __future__ import annotations

from typing import AsyncIterator


class UploadTooLargeError(ValueError):
    """Raised when a request body exceeds the configured size limit."""


async def read_body_limited(chunks: AsyncIterator[bytes], *, max_bytes: int) -> bytes:
    if max_bytes < 0:
        raise ValueError("max_bytes must be non-negative")

    received: list[bytes] = []
    total = 0
    async for chunk in chunks:
        if not chunk:
            continue
        total += len(chunk)
        if total > max_bytes:
            raise UploadTooLargeError
        received.append(chunk)

    return b"".join(received)


def describe_upload_limit(max_bytes: int) -> str:
    mb = 1024 * 1024
    if max_bytes % mb == 0 and max_bytes >= mb:
        return f"{max_bytes // mb} MB"
    if max_bytes == 1:
        return "1 byte"
    return f"{max_bytes} bytes"
