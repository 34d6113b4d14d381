# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage, (C)
# [2014] - [2025] MinIO, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
minio_aio.transfer
~~~~~~~~~~~~~~~~~~

Streaming upload and download helpers.

Upload bodies of known length are sent as aws-chunked frames, each carrying
a signature chained to the previous one::

    hex(size) + ";chunk-signature=" + signature + "\\r\\n" + data + "\\r\\n"

terminated by a zero sized frame. Only one chunk is held in memory.

"""

from __future__ import annotations

import re
from contextlib import aclosing
from typing import TYPE_CHECKING, AsyncIterable, AsyncIterator, Optional

from .error import TransportError
from .signer import SigningContext, get_chunk_signature

if TYPE_CHECKING:
    from .executor import Executor, Response
    from .retry import RetryPolicy

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KiB
_SIGNATURE_LENGTH = 64
_RANGE_REGEX = re.compile(r"^bytes=(\d+)-(\d*)$")


def _frame_length(size: int) -> int:
    """Get encoded length of one aws-chunked frame of given data size."""
    return (
        len(f"{size:x}") + len(";chunk-signature=") + _SIGNATURE_LENGTH +
        len("\r\n") + size + len("\r\n")
    )


def get_chunked_content_length(length: int, chunk_size: int) -> int:
    """Get Content-Length of aws-chunked encoded body of given length."""
    if chunk_size <= 0:
        raise ValueError("chunk size must be positive")
    full_chunks, remaining = divmod(length, chunk_size)
    return (
        full_chunks * _frame_length(chunk_size) +
        (_frame_length(remaining) if remaining else 0) +
        _frame_length(0)
    )


def encode_chunk(chunk: bytes, signature: str) -> bytes:
    """Encode chunk into an aws-chunked frame."""
    return (
        f"{len(chunk):x};chunk-signature={signature}\r\n".encode() +
        chunk + b"\r\n"
    )


async def rechunk(
        source: AsyncIterable[bytes],
        chunk_size: int,
) -> AsyncIterator[bytes]:
    """Regroup data of source into chunks of chunk_size; last may be short."""
    buffer = bytearray()
    async for data in source:
        buffer += data
        while len(buffer) >= chunk_size:
            yield bytes(buffer[:chunk_size])
            del buffer[:chunk_size]
    if buffer:
        yield bytes(buffer)


async def aws_chunked(  # pylint: disable=too-many-positional-arguments
        source: AsyncIterable[bytes],
        length: int,
        chunk_size: int,
        seed_signature: str,
        signing_key: bytes,
        context: SigningContext,
) -> AsyncIterator[bytes]:
    """
    Encode source of exactly length bytes into signed aws-chunked frames.
    """
    signature = seed_signature
    total = 0
    async for chunk in rechunk(source, chunk_size):
        total += len(chunk)
        if total > length:
            raise ValueError(
                f"stream has more data than declared length {length}",
            )
        signature = get_chunk_signature(
            signature, chunk, signing_key, context,
        )
        yield encode_chunk(chunk, signature)

    if total != length:
        raise ValueError(
            f"stream has {total} bytes, expected declared length {length}",
        )
    yield encode_chunk(
        b"", get_chunk_signature(signature, b"", signing_key, context),
    )


async def exact_length(
        source: AsyncIterable[bytes],
        length: int,
) -> AsyncIterator[bytes]:
    """Pass data of source through, failing unless it has length bytes."""
    total = 0
    async for data in source:
        total += len(data)
        if total > length:
            raise ValueError(
                f"stream has more data than declared length {length}",
            )
        yield data
    if total != length:
        raise ValueError(
            f"stream has {total} bytes, expected declared length {length}",
        )


class PartReader:
    """Reader slicing an async byte source into parts of given size."""

    def __init__(self, source: AsyncIterable[bytes]):
        self._iterator = source.__aiter__()
        self._pending = b""
        self._eof = False

    @property
    def eof(self) -> bool:
        """Check whether source is exhausted and nothing is pending."""
        return self._eof and not self._pending

    async def read(self, size: int) -> bytes:
        """Read at most size bytes; empty bytes means end of source."""
        while not self._pending and not self._eof:
            try:
                self._pending = bytes(await self._iterator.__anext__())
            except StopAsyncIteration:
                self._eof = True
        data, self._pending = self._pending[:size], self._pending[size:]
        return data

    async def iter_part(self, size: int) -> AsyncIterator[bytes]:
        """Yield data of next part of given size without buffering it."""
        while size > 0:
            data = await self.read(size)
            if not data:
                return
            size -= len(data)
            yield data

    async def read_part(self, size: int) -> bytes:
        """Read next part of given size into memory."""
        data = bytearray()
        async for chunk in self.iter_part(size):
            data += chunk
        return bytes(data)


def _resume_range(range_header: Optional[str], offset: int) -> str:
    """Get Range header to resume a download after offset bytes."""
    start, end = 0, ""
    match = _RANGE_REGEX.match(range_header or "")
    if match:
        start, end = int(match.group(1)), match.group(2)
    return f"bytes={start + offset}-{end}"


async def resumable_stream(
        executor: Executor,
        response: Response,
        retry: RetryPolicy,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """
    Yield object data of a GET response. On transport failure in the middle
    of the body the remaining range is requested again, pinned to the
    original ETag by If-Match.
    """
    etag = response.headers.get("etag")
    range_header = executor.request.headers.get("range")
    offset = 0
    async for attempt in retry.retrying(
            lambda exc: etag is not None and isinstance(exc, TransportError),
    ):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                response = await (
                    executor
                    .header("Range", _resume_range(range_header, offset))
                    .header("If-Match", etag)
                    .send_ok()
                )
            async with aclosing(response.stream(chunk_size)) as stream:
                async for data in stream:
                    offset += len(data)
                    yield data
