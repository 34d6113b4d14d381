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
minio_aio.executor
~~~~~~~~~~~~~~~~~~

Request description, response envelope and the request builder.

    >>> response = await (
    ...     client.executor("GET")
    ...     .bucket_name("my-bucket")
    ...     .object_name("my-object")
    ...     .header("Range", "bytes=0-9")
    ...     .send_ok()
    ... )
    >>> data = await response.read()

"""

from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from typing import (TYPE_CHECKING, AsyncIterable, AsyncIterator, Callable,
                    Iterable, Mapping, Optional, Union)

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy, MultiDict, MultiDictProxy

from .error import TransportError
from .transfer import DEFAULT_CHUNK_SIZE

if TYPE_CHECKING:
    from .api import Minio


@dataclass(frozen=True)
class Stream:
    """
    Lazy request body read from an async byte source. A stream can be
    consumed once and is never retried. Length is None when unknown.
    """
    source: AsyncIterable[bytes]
    length: Optional[int] = None

    def __post_init__(self):
        if self.length is not None and self.length < 0:
            raise ValueError("stream length must not be negative")

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.source.__aiter__()


Body = Union[None, bytes, str, Stream]


def _frozen_headers(headers=None) -> CIMultiDictProxy[str]:
    return CIMultiDictProxy(CIMultiDict(headers or {}))


def _frozen_query(query=None) -> MultiDictProxy[str]:
    return MultiDictProxy(MultiDict(query or {}))


@dataclass(frozen=True)
class Request:  # pylint: disable=too-many-instance-attributes
    """Immutable description of one S3 request before signing."""
    method: str = "GET"
    region: Optional[str] = None
    bucket_name: Optional[str] = None
    object_name: Optional[str] = None
    query_params: MultiDictProxy[str] = field(default_factory=_frozen_query)
    headers: CIMultiDictProxy[str] = field(default_factory=_frozen_headers)
    body: Body = None
    timeout: Optional[float] = None

    @property
    def resource(self) -> str:
        """Get resource path of bucket and object."""
        return "/" + "/".join(
            name for name in (self.bucket_name, self.object_name) if name
        )


class Response:
    """Envelope of an HTTP response whose body is read lazily."""

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response

    @property
    def status(self) -> int:
        """Get HTTP status code."""
        return self._response.status

    @property
    def headers(self) -> CIMultiDictProxy[str]:
        """Get HTTP headers."""
        return self._response.headers

    @property
    def ok(self) -> bool:  # pylint: disable=invalid-name
        """Check whether status is 2xx."""
        return 200 <= self.status < 300

    async def read(self) -> bytes:
        """Read whole body and return the connection to the pool."""
        try:
            return await self._response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self.close()
            raise TransportError(f"error in reading response; {exc}") from exc
        finally:
            self.release()

    async def text(self, encoding: str = "utf-8") -> str:
        """Read whole body as text."""
        return (await self.read()).decode(encoding)

    async def stream(
            self, amt: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncIterator[bytes]:
        """
        Yield body in segments of at most amt bytes. Stopping early drops
        the connection so it is never reused with unread data.
        """
        completed = False
        try:
            async for data in self._response.content.iter_chunked(amt):
                yield data
            completed = True
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"error in reading response; {exc}") from exc
        finally:
            if completed:
                self.release()
            else:
                self.close()

    def close(self):
        """Abort response and drop its connection."""
        self._response.close()

    def release(self):
        """Release connection back to the pool."""
        self._response.release()

    async def __aenter__(self) -> Response:
        return self

    async def __aexit__(self, exc_type, value, traceback):
        if exc_type is None:
            self.release()
        else:
            self.close()


class Executor:
    """
    Immutable request builder; every method returns a new builder and the
    terminal coroutines send the request through the client.
    """

    def __init__(self, client: Minio, request: Request):
        self._client = client
        self._request = request

    @property
    def request(self) -> Request:
        """Get request being built."""
        return self._request

    def _replace(self, **changes) -> Executor:
        return Executor(
            self._client, dataclasses.replace(self._request, **changes),
        )

    def method(self, method: str) -> Executor:
        """Set HTTP method."""
        return self._replace(method=method.upper())

    def region(self, region: str) -> Executor:
        """Set region overriding client region."""
        return self._replace(region=region)

    def bucket_name(self, bucket_name: str) -> Executor:
        """Set bucket name."""
        return self._replace(bucket_name=bucket_name)

    def object_name(self, object_name: str) -> Executor:
        """Set object name."""
        return self._replace(object_name=object_name)

    def body(self, body: Body) -> Executor:
        """Set request body."""
        if not isinstance(body, (type(None), bytes, str, Stream)):
            if isinstance(body, (bytearray, memoryview)):
                body = bytes(body)
            else:
                raise TypeError(
                    "body must be bytes, str or Stream; "
                    f"got {type(body).__name__}"
                )
        return self._replace(body=body)

    def timeout(self, timeout: Optional[float]) -> Executor:
        """Set seconds allowed for the whole operation including retries."""
        return self._replace(timeout=timeout)

    def headers(
            self, headers: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> Executor:
        """Replace all headers."""
        return self._replace(headers=_frozen_headers(headers))

    def header(self, name: str, value: str) -> Executor:
        """Set header replacing existing values of the name."""
        headers = CIMultiDict(self._request.headers)
        headers[name] = value
        return self._replace(headers=CIMultiDictProxy(headers))

    def headers_merge(
            self, headers: Optional[Mapping[str, str]],
    ) -> Executor:
        """Set each of given headers replacing existing values."""
        merged = CIMultiDict(self._request.headers)
        merged.update(headers or {})
        return self._replace(headers=CIMultiDictProxy(merged))

    def query_params(
            self, query: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> Executor:
        """Replace all query parameters."""
        return self._replace(query_params=_frozen_query(query))

    def query_params_merge(
            self,
            query: Optional[Mapping[str, str] | Iterable[tuple[str, str]]],
    ) -> Executor:
        """Add given query parameters keeping existing ones."""
        merged = MultiDict(self._request.query_params)
        merged.extend(query or {})
        return self._replace(query_params=MultiDictProxy(merged))

    def query(self, name: str, value: str = "") -> Executor:
        """Add a query parameter; names may repeat."""
        return self.query_params_merge([(name, value)])

    def query_string(self, query: str) -> Executor:
        """
        Add query parameters from a raw query string like 'uploads' or
        'partNumber=1&uploadId=abc'. Parameter without '=' gets empty value.
        """
        pairs = []
        for param in query.split("&"):
            if param:
                name, _, value = param.partition("=")
                pairs.append((name, value))
        return self.query_params_merge(pairs)

    def apply(self, func: Callable[[Executor], Executor]) -> Executor:
        """Apply func to this builder."""
        return func(self)

    async def send(self) -> Response:
        """
        Send request and return response of any status. Only transport
        failures are retried.
        """
        # pylint: disable=protected-access
        return await self._client._execute(self._request, check=False)

    async def send_ok(self) -> Response:
        """Send request; non-2xx response raises S3Error."""
        # pylint: disable=protected-access
        return await self._client._execute(self._request)

    async def send_text_ok(self) -> str:
        """Send request and return body text of 2xx response."""
        return await (await self.send_ok()).text()
