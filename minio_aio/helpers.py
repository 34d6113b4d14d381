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

"""Helper functions."""

from __future__ import annotations

import base64
import hashlib
import math
import platform
import re
import urllib.parse
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping

from multidict import CIMultiDictProxy

from . import __title__, __version__
from .error import EncodingError

_DEFAULT_USER_AGENT = (
    f"MinIO ({platform.system()}; {platform.machine()}) "
    f"{__title__}/{__version__}"
)

MAX_MULTIPART_COUNT = 10000  # 10000 parts
MAX_MULTIPART_OBJECT_SIZE = 5 * 1024 * 1024 * 1024 * 1024  # 5TiB
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024  # 5GiB
MIN_PART_SIZE = 5 * 1024 * 1024  # 5MiB

_BUCKET_NAME_REGEX = re.compile(r'^[a-z0-9][a-z0-9\.\-]{1,61}[a-z0-9]$')
_OLD_BUCKET_NAME_REGEX = re.compile(r'^[a-z0-9][a-z0-9_\.\-\:]{1,61}[a-z0-9]$',
                                    re.IGNORECASE)
_IPV4_REGEX = re.compile(
    r'^((25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])\.){3}'
    r'(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])$')
_AWS_ENDPOINT_REGEX = re.compile(r'.*\.amazonaws\.com(|\.cn)$', re.IGNORECASE)
_REGION_REGEX = re.compile(r'^((?!_)(?!-)[a-z_\d-]{1,63}(?<!-)(?<!_))$',
                           re.IGNORECASE)
_CREDENTIAL_REGEX = re.compile(r"Credential=([^/]+)")
_SIGNATURE_REGEX = re.compile(r"Signature=([0-9a-f]+)")
_SECRET_HEADERS = frozenset([
    "x-amz-server-side-encryption-customer-key",
])


def quote(resource: str, safe: str = "/") -> str:
    """
    Percent-encode resource as UTF-8 keeping RFC 3986 unreserved characters
    and '~' as is.
    """
    try:
        return urllib.parse.quote(
            resource, safe=safe, encoding="utf-8", errors="strict",
        ).replace("%7E", "~")
    except UnicodeEncodeError as exc:
        raise EncodingError(
            f"{resource!r} cannot be encoded as UTF-8",
        ) from exc


def queryencode(query: str) -> str:
    """Encode query parameter name or value."""
    return quote(query, safe="")


def headers_to_strings(
        headers: Mapping[str, str] | Iterable[tuple[str, str]],
        titled_key: bool = False,
) -> str:
    """Convert HTTP headers to multi-line string."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    values = []
    for key, value in items:
        key = key.title() if titled_key else key
        if titled_key and key.lower() in _SECRET_HEADERS:
            value = "*REDACTED*"
        elif titled_key:
            value = _CREDENTIAL_REGEX.sub(
                "Credential=*REDACTED*",
                _SIGNATURE_REGEX.sub("Signature=*REDACTED*", value),
            )
        values.append(f"{key}: {value}")
    return "\n".join(values)


def _validate_sizes(object_size: int, part_size: int):
    """Validate object and part size."""
    if part_size > 0:
        if part_size < MIN_PART_SIZE:
            raise ValueError(
                f"part size {part_size} is not supported; minimum allowed 5MiB"
            )
        if part_size > MAX_PART_SIZE:
            raise ValueError(
                f"part size {part_size} is not supported; maximum allowed 5GiB"
            )

    if object_size >= 0:
        if object_size > MAX_MULTIPART_OBJECT_SIZE:
            raise ValueError(
                f"object size {object_size} is not supported; "
                f"maximum allowed 5TiB"
            )
    elif part_size <= 0:
        raise ValueError(
            "valid part size must be provided when object size is unknown",
        )


def get_part_info(object_size: int, part_size: int) -> tuple[int, int]:
    """
    Compute part size and part count for object size. Negative object size
    means unknown length, for which part count is -1.
    """
    _validate_sizes(object_size, part_size)

    if object_size < 0:
        return part_size, -1

    if part_size <= 0:
        part_size = math.ceil(
            math.ceil(object_size / MAX_MULTIPART_COUNT) / MIN_PART_SIZE,
        ) * MIN_PART_SIZE

    part_size = max(min(part_size, object_size), 1)
    part_count = math.ceil(object_size / part_size) if object_size else 1
    if part_count > MAX_MULTIPART_COUNT:
        raise ValueError(
            f"object size {object_size} and part size {part_size} "
            f"make more than {MAX_MULTIPART_COUNT} parts for upload"
        )
    return part_size, part_count


def check_bucket_name(bucket_name: str, strict: bool = False):
    """Check whether bucket name is valid optional with strict check or not."""

    if strict:
        if not _BUCKET_NAME_REGEX.match(bucket_name):
            raise ValueError(f'invalid bucket name {bucket_name}')
    else:
        if not _OLD_BUCKET_NAME_REGEX.match(bucket_name):
            raise ValueError(f'invalid bucket name {bucket_name}')

    if _IPV4_REGEX.match(bucket_name):
        raise ValueError(f'bucket name {bucket_name} must not be formatted '
                         'as an IP address')

    unallowed_successive_chars = ['..', '.-', '-.']
    if any(x in bucket_name for x in unallowed_successive_chars):
        raise ValueError(f'bucket name {bucket_name} contains invalid '
                         'successive characters')


def check_non_empty_string(string: str | bytes):
    """Check whether given string is not empty."""
    try:
        if not string.strip():
            raise ValueError()
    except AttributeError as exc:
        raise TypeError() from exc


def md5sum_hash(data: str | bytes | None) -> str | None:
    """Compute MD5 of data and return hash as Base64 encoded value."""
    if data is None:
        return None

    # indicate md5 hashing algorithm is not used in a security context.
    hasher = hashlib.new("md5", usedforsecurity=False)
    hasher.update(data.encode() if isinstance(data, str) else data)
    return base64.b64encode(hasher.digest()).decode()


def sha256_hash(data: str | bytes | None) -> str:
    """Compute SHA-256 of data and return hash as hex encoded value."""
    data = data or b""
    return hashlib.sha256(
        data.encode() if isinstance(data, str) else data,
    ).hexdigest()


def url_replace(
        url: urllib.parse.SplitResult,
        scheme: str | None = None,
        netloc: str | None = None,
        path: str | None = None,
        query: str | None = None,
        fragment: str | None = None,
) -> urllib.parse.SplitResult:
    """Return new URL with replaced properties in given URL."""
    return urllib.parse.SplitResult(
        scheme if scheme is not None else url.scheme,
        netloc if netloc is not None else url.netloc,
        path if path is not None else url.path,
        query if query is not None else url.query,
        fragment if fragment is not None else url.fragment,
    )


def _parse_url(endpoint: str) -> urllib.parse.SplitResult:
    """Parse url string."""

    url = urllib.parse.urlsplit(endpoint)
    host = url.hostname

    if url.scheme.lower() not in ["http", "https"]:
        raise ValueError("scheme in endpoint must be http or https")

    url = url_replace(url, scheme=url.scheme.lower())

    if url.path and url.path != "/":
        raise ValueError("path in endpoint is not allowed")

    url = url_replace(url, path="")

    if url.query:
        raise ValueError("query in endpoint is not allowed")

    if url.fragment:
        raise ValueError("fragment in endpoint is not allowed")

    try:
        url.port
    except ValueError as exc:
        raise ValueError("invalid port") from exc

    if url.username:
        raise ValueError("username in endpoint is not allowed")

    if url.password:
        raise ValueError("password in endpoint is not allowed")

    if (
            (url.scheme == "http" and url.port == 80) or
            (url.scheme == "https" and url.port == 443)
    ):
        url = url_replace(url, netloc=host)

    return url


class BaseURL:
    """Base URL of S3 endpoint."""
    _virtual_style_flag: bool
    _url: urllib.parse.SplitResult
    _region: str

    def __init__(self, endpoint: str, region: str):
        url = _parse_url(endpoint)

        if not _REGION_REGEX.match(region):
            raise ValueError(f"invalid region {region}")

        hostname = url.hostname or ""
        self._is_aws_host = bool(_AWS_ENDPOINT_REGEX.match(hostname))
        self._virtual_style_flag = (
            self._is_aws_host or hostname.endswith("aliyuncs.com")
        )
        self._url = url
        self._region = region

    @property
    def region(self) -> str:
        """Get region."""
        return self._region

    @property
    def is_https(self) -> bool:
        """Check if scheme is HTTPS."""
        return self._url.scheme == "https"

    @property
    def host(self) -> str:
        """Get hostname."""
        return self._url.netloc

    @property
    def is_aws_host(self) -> bool:
        """Check if URL points to AWS host."""
        return self._is_aws_host

    @property
    def virtual_style_flag(self) -> bool:
        """Check to use virtual style or not."""
        return self._virtual_style_flag

    @virtual_style_flag.setter
    def virtual_style_flag(self, flag: bool):
        """Set to use virtual style or not."""
        self._virtual_style_flag = flag

    def build(
            self,
            method: str,
            bucket_name: str | None = None,
            object_name: str | None = None,
            query: str = "",
    ) -> urllib.parse.SplitResult:
        """
        Build URL for given bucket, object and already encoded query string.
        """
        if not bucket_name and object_name:
            raise ValueError(
                f"empty bucket name for object name {object_name}",
            )

        url = url_replace(self._url, path="/", query=query)
        if not bucket_name:
            return url

        enforce_path_style = (
            # CreateBucket API requires path style in Amazon AWS S3.
            (method == "PUT" and not object_name and not query) or

            # Use path style for bucket name containing '.' which causes
            # SSL certificate validation error.
            ("." in bucket_name and self._url.scheme == "https")
        )

        netloc = url.netloc
        path = "/"

        if enforce_path_style or not self._virtual_style_flag:
            path = f"/{bucket_name}"
        else:
            netloc = f"{bucket_name}.{netloc}"

        if object_name:
            path += ("" if path.endswith("/") else "/") + quote(object_name)

        return url_replace(url, netloc=netloc, path=path)


@dataclass(frozen=True)
class ObjectWriteResult:
    """Result class of any APIs doing object creation."""
    bucket_name: str
    object_name: str
    version_id: str | None
    etag: str | None
    http_headers: CIMultiDictProxy[str]
    last_modified: datetime | None = None
    location: str | None = None
