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

# pylint: disable=too-many-lines,too-many-public-methods
# pylint: disable=too-many-positional-arguments

"""
Simple Storage Service (aka S3) asyncio client to perform bucket and object
operations.
"""

from __future__ import annotations

import asyncio
import os
import ssl
from contextlib import aclosing
from datetime import datetime, timedelta
from typing import (AsyncIterable, AsyncIterator, Mapping, Optional, TextIO,
                    Union, cast)
from urllib.parse import SplitResult, urlunsplit

import aiohttp
import certifi
from multidict import CIMultiDict, MultiDict
from yarl import URL

from . import time
from .canonical import encode_query, get_payload_hash
from .credentials import Provider, StaticProvider
from .datatypes import (Bucket, CompleteMultipartUpload,
                        CompleteMultipartUploadResult,
                        InitiateMultipartUploadResult, ListAllMyBucketsResult,
                        ListObjectsResult, Object, Part)
from .error import S3Error, TransportError, parse_error
from .executor import Body, Executor, Request, Response, Stream
from .helpers import (_DEFAULT_USER_AGENT, MIN_PART_SIZE, BaseURL,
                      ObjectWriteResult, check_bucket_name,
                      check_non_empty_string, get_part_info,
                      headers_to_strings, md5sum_hash, queryencode)
from .models import (LegalHold, ObjectLockConfig, Retention, Tagging, Tags,
                     VersioningConfig)
from .retry import RetryPolicy
from .signer import check_presign_expiry, presign_v4, sign_v4_s3
from .sse import Sse, SseCustomerKey, check_sse, check_ssec
from .transfer import (DEFAULT_CHUNK_SIZE, PartReader, aws_chunked,
                       exact_length, get_chunked_content_length,
                       resumable_stream)
from .xml import MarshalT, marshal, unmarshal

DEFAULT_REGION = "us-east-1"
_DEFAULT_TIMEOUT = int(timedelta(minutes=5).total_seconds())
_STANDARD_HEADERS = (
    "cache-control",
    "content-disposition",
    "content-encoding",
    "content-language",
    "content-type",
    "expires",
)

ObjectData = Union[bytes, str, Stream, AsyncIterable[bytes]]


def _body_error(exc: BaseException) -> Optional[ValueError]:
    """
    Get ValueError raised by request body source, which aiohttp reports as
    a connection failure.
    """
    seen = set()
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        if isinstance(cause, ValueError):
            return cause
        seen.add(id(cause))
        cause = cause.__cause__ or cause.__context__
    return None


class Minio:  # pylint: disable=too-many-instance-attributes
    """
    Simple Storage Service (aka S3) client to perform bucket and object
    operations.
    """
    _base_url: BaseURL
    _user_agent: str
    _trace_stream: Optional[TextIO]
    _provider: Optional[Provider]
    _session: Optional[aiohttp.ClientSession]

    def __init__(
            self,
            endpoint: str,
            access_key: Optional[str] = None,
            secret_key: Optional[str] = None,
            session_token: Optional[str] = None,
            secure: bool = True,
            region: Optional[str] = None,
            session: Optional[aiohttp.ClientSession] = None,
            credentials: Optional[Provider] = None,
            cert_check: bool = True,
            virtual_style: Optional[bool] = None,
            chunked_upload: bool = True,
            chunk_size: int = DEFAULT_CHUNK_SIZE,
            retry: Optional[RetryPolicy] = None,
    ):
        """
        Initializes a new Minio client object.

        Args:
            endpoint (str):
                Hostname of an S3 service.

            access_key (Optional[str], default=None):
                Access key (aka user ID) of your account in the S3 service.

            secret_key (Optional[str], default=None):
                Secret key (aka password) of your account in the S3 service.

            session_token (Optional[str], default=None):
                Session token of your account in the S3 service.

            secure (bool, default=True):
                Flag to indicate whether to use a secure (TLS) connection
                to the S3 service.

            region (Optional[str], default=None):
                Region every request is signed for; defaults to
                'us-east-1'.

            session (Optional[aiohttp.ClientSession], default=None):
                Customized HTTP client session. It is not closed by
                :meth:`close`.

            credentials (Optional[Provider], default=None):
                Credentials provider of your account in the S3 service.

            cert_check (bool, default=True):
                Flag to enable/disable server certificate validation
                for HTTPS connections.

            virtual_style (Optional[bool], default=None):
                Force virtual-host or path style bucket addressing. By
                default virtual-host style is used for Amazon S3 and Aliyun
                OSS endpoints only.

            chunked_upload (bool, default=True):
                Flag to sign streaming uploads of known length chunk by
                chunk (aws-chunked) instead of sending them unsigned.

            chunk_size (int, default=65536):
                Size of each signed chunk of streaming uploads.

            retry (Optional[RetryPolicy], default=None):
                Retry policy of requests; defaults to three attempts.

        Example:
            >>> from minio_aio import Minio
            >>>
            >>> # Create client with access and secret key
            >>> async with Minio(
            ...     endpoint="play.min.io",
            ...     access_key="Q3AM3UQ867SPQQA43P2F",
            ...     secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
            ... ) as client:
            ...     buckets = await client.list_buckets()
        """
        if session is not None and not isinstance(
                session, aiohttp.ClientSession,
        ):
            raise TypeError(
                "session should be aiohttp.ClientSession like object, "
                f"got {type(session).__name__}",
            )
        if chunk_size <= 0:
            raise ValueError("chunk size must be positive")

        self._base_url = BaseURL(
            ("https://" if secure else "http://") + endpoint,
            region or DEFAULT_REGION,
        )
        if virtual_style is not None:
            self._base_url.virtual_style_flag = virtual_style
        self._user_agent = _DEFAULT_USER_AGENT
        self._trace_stream = None
        if access_key:
            if secret_key is None:
                raise ValueError("secret key must be provided with access key")
            credentials = StaticProvider(access_key, secret_key, session_token)
        self._provider = credentials
        self._session = session
        self._own_session = session is None
        self._cert_check = cert_check
        self._chunked_upload = chunked_upload
        self._chunk_size = chunk_size
        self._retry = retry or RetryPolicy()

    async def __aenter__(self) -> Minio:
        return self

    async def __aexit__(self, exc_type, value, traceback):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Create default HTTP client session on first use."""
        if self._session is None:
            ssl_context = ssl.create_default_context(
                cafile=os.environ.get("SSL_CERT_FILE") or certifi.where(),
            )
            if not self._cert_check:
                ssl_context.check_hostname = False
                ssl_context.verify_mode = ssl.CERT_NONE
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=10, ssl=ssl_context),
                timeout=aiohttp.ClientTimeout(
                    connect=_DEFAULT_TIMEOUT, sock_read=_DEFAULT_TIMEOUT,
                ),
                auto_decompress=False,
            )
        return self._session

    async def close(self):
        """Close HTTP client session created by this client."""
        if self._own_session and self._session is not None:
            await self._session.close()
            self._session = None

    def set_app_info(self, app_name: str, app_version: str):
        """
        Set your application name and version to user agent header.

        Example:
            >>> client.set_app_info("my_app", "1.0.2")
        """
        if not (app_name and app_version):
            raise ValueError("Application name/version cannot be empty.")
        self._user_agent = f"{_DEFAULT_USER_AGENT} {app_name}/{app_version}"

    def trace_on(self, stream: TextIO):
        """
        Enable http trace.

        Args:
            stream (TextIO):
                Stream for writing HTTP call tracing.

        Example:
            >>> client.trace_on(sys.stdout)
        """
        if not stream:
            raise ValueError('Input stream for trace output is invalid.')
        # Save new output stream.
        self._trace_stream = stream

    def trace_off(self):
        """Disable HTTP trace."""
        self._trace_stream = None

    def executor(self, method: str = "GET") -> Executor:
        """
        Get request builder for advanced usage.

        Example:
            >>> text = await (
            ...     client.executor("GET")
            ...     .bucket_name("my-bucket")
            ...     .query_string("versioning")
            ...     .send_text_ok()
            ... )
        """
        return Executor(self, Request(method=method.upper()))

    def _trace_request(
            self,
            method: str,
            url: SplitResult,
            headers: CIMultiDict[str],
            body: Body,
    ):
        """Write request to trace stream."""
        if not self._trace_stream:
            return
        self._trace_stream.write("---------START-HTTP---------\n")
        query = ("?" + url.query) if url.query else ""
        self._trace_stream.write(f"{method} {url.path}{query} HTTP/1.1\n")
        self._trace_stream.write(headers_to_strings(headers, titled_key=True))
        self._trace_stream.write("\n")
        if (
                isinstance(body, bytes) and
                headers.get("Content-Type") == "application/xml"
        ):
            self._trace_stream.write("\n")
            self._trace_stream.write(body.decode(errors="replace"))
            self._trace_stream.write("\n")
        self._trace_stream.write("\n")

    def _trace_response(self, response: Response, body: Optional[bytes]):
        """Write response to trace stream."""
        if not self._trace_stream:
            return
        self._trace_stream.write(f"HTTP/1.1 {response.status}\n")
        self._trace_stream.write(headers_to_strings(response.headers))
        self._trace_stream.write("\n")
        if body:
            self._trace_stream.write(body.decode(errors="replace"))
            self._trace_stream.write("\n")
        self._trace_stream.write("----------END-HTTP----------\n")

    async def _url_open(self, request: Request) -> Response:
        """Sign and send one attempt of request."""
        method = request.method
        if request.bucket_name is not None:
            check_bucket_name(request.bucket_name)
        if request.object_name is not None:
            check_non_empty_string(request.object_name)

        url = self._base_url.build(
            method=method,
            bucket_name=request.bucket_name,
            object_name=request.object_name,
            query=encode_query(request.query_params),
        )

        headers = CIMultiDict(request.headers)
        headers["Host"] = url.netloc
        headers["User-Agent"] = self._user_agent

        body = request.body
        if isinstance(body, str):
            body = body.encode()
        streaming_signed = (
            isinstance(body, Stream) and body.length is not None and
            self._chunked_upload and self._provider is not None
        )
        content_sha256 = (
            headers.get("x-amz-content-sha256") or
            get_payload_hash(body, streaming_signed)
        )
        headers["x-amz-content-sha256"] = content_sha256

        if isinstance(body, Stream):
            if streaming_signed:
                headers["Content-Encoding"] = "aws-chunked"
                headers["x-amz-decoded-content-length"] = str(body.length)
                headers["Content-Length"] = str(
                    get_chunked_content_length(
                        body.length or 0, self._chunk_size,
                    ),
                )
            elif body.length is not None:
                headers["Content-Length"] = str(body.length)
        elif method in ["PUT", "POST"]:
            headers["Content-Length"] = str(len(body or b""))
        if method in ["PUT", "POST"] and not headers.get("Content-Type"):
            headers["Content-Type"] = "application/octet-stream"

        date = time.utcnow()
        headers["x-amz-date"] = time.to_amz_date(date)

        data: Union[None, bytes, AsyncIterable[bytes]] = None
        if isinstance(body, Stream):
            data = (
                body.source if body.length is None
                else exact_length(body.source, body.length)
            )
        else:
            data = body

        if self._provider is not None:
            creds = await self._provider.current()
            if creds.session_token:
                headers["X-Amz-Security-Token"] = creds.session_token
            signed = sign_v4_s3(
                method=method,
                url=url,
                region=request.region or self._base_url.region,
                headers=headers,
                credentials=creds,
                content_sha256=content_sha256,
                date=date,
            )
            if streaming_signed and isinstance(body, Stream):
                data = aws_chunked(
                    body.source,
                    body.length or 0,
                    self._chunk_size,
                    signed.signature,
                    signed.signing_key,
                    signed.context,
                )

        self._trace_request(method, url, headers, body)

        try:
            response = await self._ensure_session().request(
                method,
                URL(urlunsplit(url), encoded=True),
                data=data,
                headers=headers,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            error = _body_error(exc)
            if error:
                raise ValueError(str(error)) from exc
            raise TransportError(
                f"{method} {url.path} failed; {exc!r}",
            ) from exc
        return Response(response)

    async def _execute(self, request: Request, check: bool = True) -> Response:
        """
        Execute request with retry and timeout. Non-2xx response raises
        S3Error if check is set.
        """
        async def attempt() -> Response:
            response = await self._url_open(request)
            if not check or response.ok:
                self._trace_response(response, None)
                return response
            body = await response.read()
            self._trace_response(response, body)
            raise parse_error(
                response.status,
                response.headers,
                body,
                resource=request.resource,
                bucket_name=request.bucket_name,
                object_name=request.object_name,
            )

        call = self._retry.call(
            request.method, request.body, attempt, transport_only=not check,
        )
        if request.timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, request.timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"{request.method} {request.resource} timed out after "
                f"{request.timeout} seconds",
            ) from exc

    @staticmethod
    def _xml_headers(obj: MarshalT) -> tuple[bytes, dict[str, str]]:
        """Marshal obj and get headers required for the XML body."""
        body = marshal(obj)
        return body, {
            "Content-Type": "application/xml",
            "Content-MD5": md5sum_hash(body) or "",
        }

    async def _send_xml(self, executor: Executor, obj: MarshalT):
        """Send obj as XML body and discard empty response."""
        body, headers = self._xml_headers(obj)
        response = await executor.headers_merge(headers).body(body).send_ok()
        response.release()

    async def _send_empty(self, executor: Executor):
        """Send request whose successful response carries nothing."""
        response = await executor.send_ok()
        response.release()

    async def make_bucket(
            self,
            bucket_name: str,
            location: Optional[str] = None,
            object_lock: bool = False,
    ):
        """
        Create a bucket with region and object lock.

        Args:
            bucket_name (str):
                Name of the bucket.

            location (Optional[str], default=None):
                Region in which the bucket will be created; defaults to
                region of this client.

            object_lock (bool, default=False):
                Flag to set object-lock feature.

        Example:
            >>> await client.make_bucket("my-bucket", object_lock=True)
        """
        check_bucket_name(bucket_name, True)
        location = location or self._base_url.region
        executor = self.executor("PUT").bucket_name(bucket_name).region(
            location,
        )
        if object_lock:
            executor = executor.header(
                "x-amz-bucket-object-lock-enabled", "true",
            )
        if location != DEFAULT_REGION:
            body = (
                "<CreateBucketConfiguration "
                'xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
                f"<LocationConstraint>{location}</LocationConstraint>"
                "</CreateBucketConfiguration>"
            ).encode()
            executor = executor.header(
                "Content-MD5", md5sum_hash(body) or "",
            ).body(body)
        await self._send_empty(executor)

    async def bucket_exists(self, bucket_name: str) -> bool:
        """
        Check if a bucket exists.

        Example:
            >>> if await client.bucket_exists("my-bucket"):
            ...     print("my-bucket exists")
        """
        check_bucket_name(bucket_name)
        response = await self.executor("HEAD").bucket_name(bucket_name).send()
        body = await response.read()
        if response.ok:
            return True
        if response.status == 404:
            return False
        raise parse_error(
            response.status, response.headers, body,
            resource="/" + bucket_name, bucket_name=bucket_name,
        )

    async def remove_bucket(self, bucket_name: str):
        """
        Remove an empty bucket.

        Example:
            >>> await client.remove_bucket("my-bucket")
        """
        check_bucket_name(bucket_name)
        await self._send_empty(
            self.executor("DELETE").bucket_name(bucket_name),
        )

    async def list_buckets(self) -> list[Bucket]:
        """
        List information of all accessible buckets.

        Returns:
            list[Bucket]:
                List of bucket information.

        Example:
            >>> for bucket in await client.list_buckets():
            ...     print(bucket.name, bucket.creation_date)
        """
        text = await self.executor("GET").send_text_ok()
        return unmarshal(ListAllMyBucketsResult, text).buckets

    async def list_objects(
            self,
            bucket_name: str,
            prefix: Optional[str] = None,
            recursive: bool = False,
            start_after: Optional[str] = None,
            include_version: bool = False,
            max_keys: int = 1000,
    ) -> AsyncIterator[Object]:
        """
        Lists object information of a bucket, page by page.

        Args:
            bucket_name (str):
                Name of the bucket.

            prefix (Optional[str], default=None):
                Object name starts with prefix.

            recursive (bool, default=False):
                List recursively than directory structure emulation.

            start_after (Optional[str], default=None):
                List objects after this key name.

            include_version (bool, default=False):
                Flag to control whether include object versions.

            max_keys (int, default=1000):
                Maximum number of objects fetched per page.

        Returns:
            AsyncIterator[Object]:
                Iterator of object information.

        Example:
            >>> async for obj in client.list_objects(
            ...     "my-bucket", prefix="my/prefix/", recursive=True,
            ... ):
            ...     print(obj.object_name)
        """
        check_bucket_name(bucket_name)
        continuation_token: Optional[str] = None
        version_id_marker: Optional[str] = None
        while True:
            executor = (
                self.executor("GET")
                .bucket_name(bucket_name)
                .query("encoding-type", "url")
                .query("max-keys", str(max_keys))
                .query("prefix", prefix or "")
            )
            if not recursive:
                executor = executor.query("delimiter", "/")
            if include_version:
                executor = executor.query("versions")
                key_marker = continuation_token or start_after
                if key_marker:
                    executor = executor.query("key-marker", key_marker)
                if version_id_marker:
                    executor = executor.query(
                        "version-id-marker", version_id_marker,
                    )
            else:
                executor = executor.query("list-type", "2")
                if continuation_token:
                    executor = executor.query(
                        "continuation-token", continuation_token,
                    )
                if start_after:
                    executor = executor.query("start-after", start_after)

            result = unmarshal(
                ListObjectsResult, await executor.send_text_ok(),
            )
            for obj in result.objects:
                yield obj
            if not result.is_truncated:
                return
            if not result.continuation_token:
                raise S3Error(
                    200, "InvalidResponse",
                    "truncated listing without continuation marker",
                    "/" + bucket_name, None, None, bucket_name,
                )
            continuation_token = result.continuation_token
            version_id_marker = result.version_id_marker

    async def get_bucket_tags(self, bucket_name: str) -> Optional[Tags]:
        """
        Get tags configuration of a bucket; None if no tags are set.

        Example:
            >>> tags = await client.get_bucket_tags("my-bucket")
        """
        check_bucket_name(bucket_name)
        try:
            text = await (
                self.executor("GET")
                .bucket_name(bucket_name)
                .query("tagging")
                .send_text_ok()
            )
        except S3Error as exc:
            if exc.code != "NoSuchTagSet":
                raise
            return None
        return unmarshal(Tagging, text).tags

    async def set_bucket_tags(
            self, bucket_name: str, tags: Mapping[str, str],
    ):
        """
        Set tags configuration to a bucket.

        Example:
            >>> await client.set_bucket_tags(
            ...     "my-bucket", {"Project": "One", "User": "jsmith"},
            ... )
        """
        check_bucket_name(bucket_name)
        await self._send_xml(
            self.executor("PUT").bucket_name(bucket_name).query("tagging"),
            Tagging(Tags.new_bucket_tags(tags)),
        )

    async def delete_bucket_tags(self, bucket_name: str):
        """Delete tags configuration of a bucket."""
        check_bucket_name(bucket_name)
        await self._send_empty(
            self.executor("DELETE").bucket_name(bucket_name).query("tagging"),
        )

    async def get_bucket_versioning(
            self, bucket_name: str,
    ) -> VersioningConfig:
        """Get versioning configuration of a bucket."""
        check_bucket_name(bucket_name)
        text = await (
            self.executor("GET")
            .bucket_name(bucket_name)
            .query("versioning")
            .send_text_ok()
        )
        return unmarshal(VersioningConfig, text)

    async def set_bucket_versioning(
            self, bucket_name: str, config: VersioningConfig,
    ):
        """
        Set versioning configuration to a bucket.

        Example:
            >>> await client.set_bucket_versioning(
            ...     "my-bucket", VersioningConfig(ENABLED),
            ... )
        """
        check_bucket_name(bucket_name)
        if not isinstance(config, VersioningConfig):
            raise ValueError("config must be VersioningConfig type")
        await self._send_xml(
            self.executor("PUT").bucket_name(bucket_name).query("versioning"),
            config,
        )

    async def get_object_lock_config(
            self, bucket_name: str,
    ) -> ObjectLockConfig:
        """Get object-lock configuration of a bucket."""
        check_bucket_name(bucket_name)
        text = await (
            self.executor("GET")
            .bucket_name(bucket_name)
            .query("object-lock")
            .send_text_ok()
        )
        return unmarshal(ObjectLockConfig, text)

    async def set_object_lock_config(
            self, bucket_name: str, config: ObjectLockConfig,
    ):
        """
        Set object-lock configuration to a bucket.

        Example:
            >>> await client.set_object_lock_config(
            ...     "my-bucket", ObjectLockConfig(GOVERNANCE, 15, DAYS),
            ... )
        """
        check_bucket_name(bucket_name)
        if not isinstance(config, ObjectLockConfig):
            raise ValueError("config must be ObjectLockConfig type")
        await self._send_xml(
            self.executor("PUT").bucket_name(bucket_name).query("object-lock"),
            config,
        )

    async def delete_object_lock_config(self, bucket_name: str):
        """Delete default retention rule of object-lock configuration."""
        await self.set_object_lock_config(bucket_name, ObjectLockConfig())

    def _object_executor(
            self,
            method: str,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ) -> Executor:
        """Get builder for object level request."""
        check_bucket_name(bucket_name)
        check_non_empty_string(object_name)
        executor = self.executor(method).bucket_name(bucket_name).object_name(
            object_name,
        )
        if version_id:
            executor = executor.query("versionId", version_id)
        return executor

    @staticmethod
    def _object_headers(
            content_type: str,
            metadata: Optional[Mapping[str, str]],
            tags: Optional[Mapping[str, str]],
    ) -> dict[str, str]:
        """Get headers of object creation for metadata and tags."""
        headers = {"Content-Type": content_type}
        for key, value in (metadata or {}).items():
            lower = key.lower()
            if not (
                    lower.startswith("x-amz-") or lower in _STANDARD_HEADERS
            ):
                key = "X-Amz-Meta-" + key
            headers[key] = str(value)
        if tags:
            headers["x-amz-tagging"] = "&".join(
                queryencode(key) + "=" + queryencode(value)
                for key, value in Tags.new_object_tags(tags).items()
            )
        return headers

    async def put_object(
            self,
            bucket_name: str,
            object_name: str,
            data: ObjectData,
            length: int = -1,
            content_type: str = "application/octet-stream",
            metadata: Optional[Mapping[str, str]] = None,
            part_size: int = 0,
            tags: Optional[Mapping[str, str]] = None,
            sse: Optional[Sse] = None,
    ) -> ObjectWriteResult:
        """
        Uploads data to an object in a bucket. Data larger than one part is
        uploaded with multipart upload, which is aborted on failure.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            data (bytes | str | Stream | AsyncIterable[bytes]):
                In-memory data or an async source of bytes. Async sources
                are read once and never buffered whole.

            length (int, default=-1):
                Data size; -1 for unknown size, in which case data is
                uploaded in buffered parts of part_size.

            content_type (str, default="application/octet-stream"):
                Content type of the object.

            metadata (Optional[Mapping[str, str]], default=None):
                Any additional metadata to be uploaded along with your
                object.

            part_size (int, default=0):
                Multipart part size; computed from length if 0.

            tags (Optional[Mapping[str, str]], default=None):
                Tags for the object.

            sse (Optional[Sse], default=None):
                Server-side encryption of the object. A customer key
                (SseCustomerKey) is sent with every part upload too.

        Returns:
            ObjectWriteResult:
                The result of the object upload.

        Example:
            >>> result = await client.put_object(
            ...     "my-bucket", "my-object", b"hello",
            ... )
            >>> print(result.etag)
        """
        check_bucket_name(bucket_name)
        check_non_empty_string(object_name)
        check_sse(sse, self._base_url.is_https)

        source: Union[bytes, AsyncIterable[bytes]]
        if isinstance(data, str):
            data = data.encode()
        if isinstance(data, (bytes, bytearray, memoryview)):
            source = bytes(data)
            length = len(source)
        elif isinstance(data, Stream):
            source = data.source
            if length < 0 and data.length is not None:
                length = data.length
        elif isinstance(data, AsyncIterable):
            source = data
        else:
            raise TypeError(
                "data must be bytes, str, Stream or async iterable of bytes",
            )

        if length < 0 and part_size <= 0:
            part_size = MIN_PART_SIZE
        part_size, part_count = get_part_info(length, part_size)
        headers = self._object_headers(content_type, metadata, tags)
        if sse:
            headers.update(sse.headers())
        part_headers = (
            sse.headers() if isinstance(sse, SseCustomerKey) else None
        )

        if part_count == 1:
            return await self._put_object(
                bucket_name,
                object_name,
                source if isinstance(source, bytes) else Stream(
                    source, length,
                ),
                headers,
            )

        reader = None if isinstance(source, bytes) else PartReader(source)
        first_part = None
        if part_count < 0 and reader:
            # Unknown length fitting in one part needs no multipart upload.
            first_part = await reader.read_part(part_size)
            if reader.eof:
                return await self._put_object(
                    bucket_name, object_name, first_part, headers,
                )

        upload_id = await self._create_multipart_upload(
            bucket_name, object_name, headers,
        )
        try:
            parts = []
            part_number = 0
            while part_count < 0 or part_number < part_count:
                part_number += 1
                offset = (part_number - 1) * part_size
                body: Body
                if isinstance(source, bytes):
                    body = source[offset:offset + part_size]
                elif part_count > 0:
                    size = min(part_size, length - offset)
                    body = Stream(
                        cast(PartReader, reader).iter_part(size), size,
                    )
                else:
                    body = first_part if part_number == 1 else (
                        await cast(PartReader, reader).read_part(part_size)
                    )
                    if not body:
                        break
                etag = await self._upload_part(
                    bucket_name, object_name, upload_id, part_number, body,
                    part_headers,
                )
                parts.append(Part(part_number, etag))
            result = await self._complete_multipart_upload(
                bucket_name, object_name, upload_id, parts,
            )
        except (Exception, asyncio.CancelledError):
            await self._abort_multipart_upload(
                bucket_name, object_name, upload_id,
            )
            raise

        return ObjectWriteResult(
            bucket_name,
            object_name,
            result.headers.get("x-amz-version-id"),
            result.etag,
            result.headers,
            location=result.location,
        )

    async def _put_object(
            self,
            bucket_name: str,
            object_name: str,
            body: Body,
            headers: Mapping[str, str],
    ) -> ObjectWriteResult:
        """Execute PutObject S3 API."""
        response = await (
            self._object_executor("PUT", bucket_name, object_name)
            .headers_merge(headers)
            .body(body)
            .send_ok()
        )
        response.release()
        return ObjectWriteResult(
            bucket_name,
            object_name,
            response.headers.get("x-amz-version-id"),
            (response.headers.get("etag") or "").replace('"', "") or None,
            response.headers,
        )

    async def _create_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            headers: Mapping[str, str],
    ) -> str:
        """Execute CreateMultipartUpload S3 API."""
        text = await (
            self._object_executor("POST", bucket_name, object_name)
            .query("uploads")
            .headers_merge(headers)
            .send_text_ok()
        )
        return unmarshal(InitiateMultipartUploadResult, text).upload_id

    async def _upload_part(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            part_number: int,
            body: Body,
            headers: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Execute UploadPart S3 API and return ETag of the part."""
        response = await (
            self._object_executor("PUT", bucket_name, object_name)
            .query("partNumber", str(part_number))
            .query("uploadId", upload_id)
            .headers_merge(headers)
            .body(body)
            .send_ok()
        )
        response.release()
        return (response.headers.get("etag") or "").replace('"', "")

    async def _complete_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            parts: list[Part],
    ) -> _CompletedUpload:
        """Execute CompleteMultipartUpload S3 API."""
        body, headers = self._xml_headers(CompleteMultipartUpload(parts))
        response = await (
            self._object_executor("POST", bucket_name, object_name)
            .query("uploadId", upload_id)
            .headers_merge(headers)
            .body(body)
            .send_ok()
        )
        data = await response.read()
        # Failure may be reported in the body of a 200 OK response.
        error = parse_error(
            response.status, response.headers, data,
            resource=f"/{bucket_name}/{object_name}",
            bucket_name=bucket_name, object_name=object_name,
        )
        if error.code is not None:
            raise error
        result = unmarshal(CompleteMultipartUploadResult, data)
        return _CompletedUpload(response, result)

    async def _abort_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
    ):
        """Execute AbortMultipartUpload S3 API."""
        await self._send_empty(
            self._object_executor("DELETE", bucket_name, object_name)
            .query("uploadId", upload_id),
        )

    def _get_executor(
            self,
            bucket_name: str,
            object_name: str,
            offset: int = 0,
            length: int = 0,
            version_id: Optional[str] = None,
            request_headers: Optional[Mapping[str, str]] = None,
            ssec: Optional[SseCustomerKey] = None,
    ) -> Executor:
        """Get builder of GetObject request."""
        executor = self._object_executor(
            "GET", bucket_name, object_name, version_id,
        ).headers_merge(request_headers).headers_merge(
            ssec.headers() if ssec else None,
        )
        if offset < 0 or length < 0:
            raise ValueError("offset and length must not be negative")
        if offset or length:
            end = str(offset + length - 1) if length else ""
            executor = executor.header("Range", f"bytes={offset}-{end}")
        return executor

    async def get_object(
            self,
            bucket_name: str,
            object_name: str,
            offset: int = 0,
            length: int = 0,
            version_id: Optional[str] = None,
            request_headers: Optional[Mapping[str, str]] = None,
            ssec: Optional[SseCustomerKey] = None,
    ) -> Response:
        """
        Get data of an object. Returned response must be read, streamed or
        closed to release the connection.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            offset (int, default=0):
                Start byte position of object data.

            length (int, default=0):
                Number of bytes of object data from offset; 0 for all.

            version_id (Optional[str], default=None):
                Version-ID of the object.

            request_headers (Optional[Mapping[str, str]], default=None):
                Any additional headers to be added with GET request.

            ssec (Optional[SseCustomerKey], default=None):
                Customer key the object was encrypted with.

        Returns:
            Response:
                Response envelope whose body is read lazily.

        Example:
            >>> async with await client.get_object(
            ...     "my-bucket", "my-object",
            ... ) as response:
            ...     async for data in response.stream(amt=32 * 1024):
            ...         process(data)
        """
        check_ssec(ssec, self._base_url.is_https)
        return await self._get_executor(
            bucket_name, object_name, offset, length, version_id,
            request_headers, ssec,
        ).send_ok()

    async def stream_object(
            self,
            bucket_name: str,
            object_name: str,
            offset: int = 0,
            length: int = 0,
            version_id: Optional[str] = None,
            chunk_size: int = DEFAULT_CHUNK_SIZE,
            ssec: Optional[SseCustomerKey] = None,
    ) -> AsyncIterator[bytes]:
        """
        Yield data of an object, resuming with ranged requests on the same
        object version after connection failures.

        Example:
            >>> async for data in client.stream_object("my-bucket", "obj"):
            ...     process(data)
        """
        check_ssec(ssec, self._base_url.is_https)
        executor = self._get_executor(
            bucket_name, object_name, offset, length, version_id,
            ssec=ssec,
        )
        response = await executor.send_ok()
        async with aclosing(
                resumable_stream(executor, response, self._retry, chunk_size),
        ) as stream:
            async for data in stream:
                yield data

    async def stat_object(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
            ssec: Optional[SseCustomerKey] = None,
    ) -> Object:
        """
        Get object information and metadata of an object.

        Example:
            >>> stat = await client.stat_object("my-bucket", "my-object")
            >>> print(stat.size, stat.etag)
        """
        check_ssec(ssec, self._base_url.is_https)
        response = await self._object_executor(
            "HEAD", bucket_name, object_name, version_id,
        ).headers_merge(ssec.headers() if ssec else None).send_ok()
        response.release()
        return Object.fromheaders(response.headers, bucket_name, object_name)

    async def remove_object(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ):
        """
        Remove an object.

        Example:
            >>> await client.remove_object("my-bucket", "my-object")
        """
        await self._send_empty(
            self._object_executor(
                "DELETE", bucket_name, object_name, version_id,
            ),
        )

    async def get_object_tags(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ) -> Optional[Tags]:
        """Get tags of an object; None if no tags are set."""
        try:
            text = await self._object_executor(
                "GET", bucket_name, object_name, version_id,
            ).query("tagging").send_text_ok()
        except S3Error as exc:
            if exc.code != "NoSuchTagSet":
                raise
            return None
        tags = unmarshal(Tagging, text).tags
        return tags or None

    async def set_object_tags(
            self,
            bucket_name: str,
            object_name: str,
            tags: Mapping[str, str],
            version_id: Optional[str] = None,
    ):
        """
        Set tags to an object.

        Example:
            >>> await client.set_object_tags(
            ...     "my-bucket", "my-object", {"Project": "One"},
            ... )
        """
        await self._send_xml(
            self._object_executor(
                "PUT", bucket_name, object_name, version_id,
            ).query("tagging"),
            Tagging(Tags.new_object_tags(tags)),
        )

    async def delete_object_tags(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ):
        """Delete tags of an object."""
        await self._send_empty(
            self._object_executor(
                "DELETE", bucket_name, object_name, version_id,
            ).query("tagging"),
        )

    async def get_object_retention(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ) -> Optional[Retention]:
        """Get retention of an object; None if no retention is set."""
        try:
            text = await self._object_executor(
                "GET", bucket_name, object_name, version_id,
            ).query("retention").send_text_ok()
        except S3Error as exc:
            if exc.code != "NoSuchObjectLockConfiguration":
                raise
            return None
        return unmarshal(Retention, text)

    async def set_object_retention(
            self,
            bucket_name: str,
            object_name: str,
            config: Retention,
            version_id: Optional[str] = None,
    ):
        """
        Set retention to an object.

        Example:
            >>> await client.set_object_retention(
            ...     "my-bucket", "my-object",
            ...     Retention(GOVERNANCE, datetime.now(timezone.utc) +
            ...               timedelta(days=10)),
            ... )
        """
        if not isinstance(config, Retention):
            raise ValueError("config must be Retention type")
        await self._send_xml(
            self._object_executor(
                "PUT", bucket_name, object_name, version_id,
            ).query("retention"),
            config,
        )

    async def _set_legal_hold(
            self,
            bucket_name: str,
            object_name: str,
            status: bool,
            version_id: Optional[str],
    ):
        await self._send_xml(
            self._object_executor(
                "PUT", bucket_name, object_name, version_id,
            ).query("legal-hold"),
            LegalHold(status),
        )

    async def enable_object_legal_hold(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ):
        """Enable legal hold on an object."""
        await self._set_legal_hold(bucket_name, object_name, True, version_id)

    async def disable_object_legal_hold(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ):
        """Disable legal hold on an object."""
        await self._set_legal_hold(
            bucket_name, object_name, False, version_id,
        )

    async def is_object_legal_hold_enabled(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
    ) -> bool:
        """Returns true if legal hold is enabled on an object."""
        try:
            text = await self._object_executor(
                "GET", bucket_name, object_name, version_id,
            ).query("legal-hold").send_text_ok()
        except S3Error as exc:
            if exc.code != "NoSuchObjectLockConfiguration":
                raise
            return False
        return unmarshal(LegalHold, text).status

    async def get_presigned_url(
            self,
            method: str,
            bucket_name: str,
            object_name: str,
            expires: timedelta = timedelta(days=7),
            response_headers: Optional[Mapping[str, str]] = None,
            request_date: Optional[datetime] = None,
            version_id: Optional[str] = None,
            extra_query_params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Get presigned URL of an object for HTTP method, expiry time and
        custom request parameters.

        Args:
            method (str):
                HTTP method.

            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            expires (timedelta, default=timedelta(days=7)):
                Expiry in seconds; from one second to seven days.

            response_headers (Optional[Mapping[str, str]], default=None):
                Optional response_headers argument to specify response
                fields like date, size, type of file, data about server,
                etc.

            request_date (Optional[datetime], default=None):
                Optional request_date argument to specify a different
                request date. Default is current date.

            version_id (Optional[str], default=None):
                Version ID of the object.

            extra_query_params (Optional[Mapping[str, str]], default=None):
                Extra query parameters for advanced usage.

        Returns:
            str:
                URL string; an unsigned URL for anonymous client.

        Example:
            >>> url = await client.get_presigned_url(
            ...     "DELETE", "my-bucket", "my-object",
            ...     expires=timedelta(days=1),
            ... )
        """
        check_bucket_name(bucket_name)
        check_non_empty_string(object_name)
        expiry = check_presign_expiry(expires)
        query: MultiDict[str] = MultiDict(extra_query_params or {})
        query.extend(response_headers or {})
        if version_id:
            query["versionId"] = version_id

        method = method.upper()
        url = self._base_url.build(
            method=method,
            bucket_name=bucket_name,
            object_name=object_name,
            query=encode_query(query),
        )
        if self._provider is not None:
            creds = await self._provider.current()
            url = presign_v4(
                method,
                url,
                self._base_url.region,
                creds,
                request_date or time.utcnow(),
                expiry,
            )
        return urlunsplit(url)

    async def presigned_get_object(
            self,
            bucket_name: str,
            object_name: str,
            expires: timedelta = timedelta(days=7),
            response_headers: Optional[Mapping[str, str]] = None,
            request_date: Optional[datetime] = None,
            version_id: Optional[str] = None,
    ) -> str:
        """
        Get presigned URL of an object to download its data with expiry
        time and custom request parameters.

        Example:
            >>> url = await client.presigned_get_object(
            ...     "my-bucket", "my-object", expires=timedelta(hours=2),
            ... )
        """
        return await self.get_presigned_url(
            "GET",
            bucket_name,
            object_name,
            expires,
            response_headers=response_headers,
            request_date=request_date,
            version_id=version_id,
        )

    async def presigned_put_object(
            self,
            bucket_name: str,
            object_name: str,
            expires: timedelta = timedelta(days=7),
    ) -> str:
        """
        Get presigned URL of an object to upload data with expiry time.

        Example:
            >>> url = await client.presigned_put_object(
            ...     "my-bucket", "my-object", expires=timedelta(hours=2),
            ... )
        """
        return await self.get_presigned_url(
            "PUT", bucket_name, object_name, expires,
        )


class _CompletedUpload:  # pylint: disable=too-few-public-methods
    """Response headers and document of CompleteMultipartUpload API."""

    def __init__(
            self,
            response: Response,
            result: CompleteMultipartUploadResult,
    ):
        self.headers = response.headers
        self.etag = result.etag
        self.location = result.location
