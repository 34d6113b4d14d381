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
minio_aio.canonical
~~~~~~~~~~~~~~~~~~~

Canonical request construction of AWS Signature version '4'.

    CanonicalRequest =
      HTTPRequestMethod + '\\n' +
      CanonicalURI + '\\n' +
      CanonicalQueryString + '\\n' +
      CanonicalHeaders + '\\n\\n' +
      SignedHeaders + '\\n' +
      HexEncode(Hash(RequestPayload))

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Union
from urllib.parse import SplitResult

from .helpers import queryencode, sha256_hash

# SHA-256 hash of zero length byte array.
ZERO_SHA256_HASH = (
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
)
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
STREAMING_PAYLOAD = "STREAMING-AWS4-HMAC-SHA256-PAYLOAD"

_MULTI_SPACE_REGEX = re.compile(r"\s+")
_EXCLUDED_HEADERS = ("authorization", "user-agent")

QueryParams = Union[Mapping[str, str], Iterable[tuple[str, str]]]
Headers = Union[Mapping[str, str], Iterable[tuple[str, str]]]


@dataclass(frozen=True)
class CanonicalRequest:
    """Canonical form of a request which is hashed for signing."""
    method: str
    canonical_uri: str
    canonical_query_string: str
    canonical_headers: str
    signed_headers: str
    payload_hash: str

    def __str__(self):
        return (
            f"{self.method}\n"
            f"{self.canonical_uri}\n"
            f"{self.canonical_query_string}\n"
            f"{self.canonical_headers}\n\n"
            f"{self.signed_headers}\n"
            f"{self.payload_hash}"
        )

    def hash(self) -> str:
        """Get hex encoded SHA-256 of this canonical request."""
        return sha256_hash(str(self))


def _items(values: QueryParams | Headers) -> Iterable[tuple[str, str]]:
    """Iterate (name, value) pairs of a mapping or a pair sequence."""
    if isinstance(values, Mapping):
        # multidict's items() yields every value of a repeated name.
        return values.items()
    return values


def encode_query(params: QueryParams | None) -> str:
    """
    Encode query parameters into a query string sorted by encoded name and
    then encoded value.
    """
    return "&".join(
        f"{name}={value}" for name, value in sorted(
            (queryencode(name), queryencode(value))
            for name, value in _items(params or {})
        )
    )


def get_canonical_query_string(query: str) -> str:
    """Get canonical query string of an already encoded query string."""
    if not query:
        return ""
    pairs = []
    for param in query.split("&"):
        if param:
            name, _, value = param.partition("=")
            pairs.append((name, value))
    return "&".join(f"{name}={value}" for name, value in sorted(pairs))


def _trimall(value: str) -> str:
    """
    Trim value and collapse whitespace runs into single space except
    inside double quoted strings.
    """
    tokens = value.split('"')
    # Even tokens are outside of quotes; an unbalanced quote leaves the
    # tail outside as well.
    return '"'.join(
        token if index % 2 else _MULTI_SPACE_REGEX.sub(" ", token)
        for index, token in enumerate(tokens)
    ).strip()


def get_canonical_headers(headers: Headers) -> tuple[str, str]:
    """Get canonical headers and signed headers."""
    combined: dict[str, list[str]] = {}
    for name, value in _items(headers):
        name = name.lower()
        if name in _EXCLUDED_HEADERS:
            continue
        combined.setdefault(name, []).append(_trimall(str(value)))

    names = sorted(combined)
    canonical_headers = "\n".join(
        f"{name}:{','.join(combined[name])}" for name in names
    )
    return canonical_headers, ";".join(names)


def get_payload_hash(body, streaming_signed: bool = False) -> str:
    """
    Get payload hash of request body. In-memory body is hashed; streaming
    body is never read here and gets a sentinel instead.
    """
    if body is None:
        return ZERO_SHA256_HASH
    if isinstance(body, (bytes, bytearray, memoryview)):
        return sha256_hash(bytes(body))
    if isinstance(body, str):
        return sha256_hash(body.encode())
    if streaming_signed and getattr(body, "length", None) is not None:
        return STREAMING_PAYLOAD
    return UNSIGNED_PAYLOAD


def get_canonical_request(
        method: str,
        url: SplitResult,
        headers: Headers,
        payload_hash: str,
) -> CanonicalRequest:
    """Get canonical request of method, encoded URL, headers and payload."""
    canonical_headers, signed_headers = get_canonical_headers(headers)
    return CanonicalRequest(
        method=method,
        canonical_uri=url.path or "/",
        canonical_query_string=get_canonical_query_string(url.query),
        canonical_headers=canonical_headers,
        signed_headers=signed_headers,
        payload_hash=payload_hash,
    )
