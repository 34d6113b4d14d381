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
minio_aio.signer
~~~~~~~~~~~~~~~~

This module implements all helpers for AWS Signature version '4' support,
header signing, presigned URLs and aws-chunked payload signing.

:copyright: (c) 2015 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, MutableMapping
from urllib.parse import SplitResult, parse_qsl

from . import time
from .canonical import (UNSIGNED_PAYLOAD, ZERO_SHA256_HASH, CanonicalRequest,
                        get_canonical_query_string, get_canonical_request)
from .helpers import queryencode, sha256_hash, url_replace

if TYPE_CHECKING:
    from .credentials import Credentials

SIGN_V4_ALGORITHM = "AWS4-HMAC-SHA256"
_CHUNK_ALGORITHM = "AWS4-HMAC-SHA256-PAYLOAD"

MAX_PRESIGN_EXPIRY = int(timedelta(days=7).total_seconds())


def _hmac_hash(key: bytes, data: bytes) -> bytes:
    """Return HMacSHA256 digest of given key and data."""
    return hmac.new(key, data, hashlib.sha256).digest()


@dataclass(frozen=True)
class SigningContext:
    """Region, service and timestamp a request is signed for."""
    region: str
    date: datetime
    service_name: str = "s3"

    @property
    def amz_date(self) -> str:
        """Get timestamp in AMZ date format."""
        return time.to_amz_date(self.date)

    @property
    def signer_date(self) -> str:
        """Get date part of credential scope."""
        return time.to_signer_date(self.date)

    @property
    def scope(self) -> str:
        """Get credential scope."""
        return (
            f"{self.signer_date}/{self.region}/{self.service_name}/"
            "aws4_request"
        )


@dataclass(frozen=True)
class SignedRequest:
    """Outcome of header signing."""
    canonical_request: CanonicalRequest
    context: SigningContext
    signing_key: bytes
    signature: str
    authorization: str


def get_signing_key(secret_key: str, context: SigningContext) -> bytes:
    """Get signing key."""
    key = ("AWS4" + secret_key).encode()
    for data in (
            context.signer_date, context.region, context.service_name,
            "aws4_request",
    ):
        key = _hmac_hash(key, data.encode())
    return key


def get_string_to_sign(
        context: SigningContext,
        canonical_request_hash: str,
) -> str:
    """Get string-to-sign."""
    return (
        f"{SIGN_V4_ALGORITHM}\n{context.amz_date}\n{context.scope}\n"
        f"{canonical_request_hash}"
    )


def _get_signature(signing_key: bytes, string_to_sign: str) -> str:
    """Get signature."""
    return hmac.new(
        signing_key, string_to_sign.encode(), hashlib.sha256,
    ).hexdigest()


def _get_authorization(
        access_key: str,
        scope: str,
        signed_headers: str,
        signature: str,
) -> str:
    """Get authorization."""
    return (
        f"{SIGN_V4_ALGORITHM} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def sign_v4(
        method: str,
        url: SplitResult,
        headers: MutableMapping[str, str],
        credentials: Credentials,
        payload_hash: str,
        context: SigningContext,
) -> SignedRequest:
    """
    Do signature V4 of given request. Headers must already carry every
    header to be sent except Authorization, including Host and x-amz-date.
    """
    canonical_request = get_canonical_request(
        method, url, headers, payload_hash,
    )
    string_to_sign = get_string_to_sign(context, canonical_request.hash())
    signing_key = get_signing_key(credentials.secret_key, context)
    signature = _get_signature(signing_key, string_to_sign)
    return SignedRequest(
        canonical_request=canonical_request,
        context=context,
        signing_key=signing_key,
        signature=signature,
        authorization=_get_authorization(
            credentials.access_key,
            context.scope,
            canonical_request.signed_headers,
            signature,
        ),
    )


def _sign_headers(  # pylint: disable=too-many-positional-arguments
        service_name: str,
        method: str,
        url: SplitResult,
        region: str,
        headers: MutableMapping[str, str],
        credentials: Credentials,
        content_sha256: str,
        date: datetime,
) -> SignedRequest:
    """Sign request and set Authorization header."""
    signed = sign_v4(
        method,
        url,
        headers,
        credentials,
        content_sha256,
        SigningContext(region, date, service_name),
    )
    headers["Authorization"] = signed.authorization
    return signed


def sign_v4_s3(  # pylint: disable=too-many-positional-arguments
        method: str,
        url: SplitResult,
        region: str,
        headers: MutableMapping[str, str],
        credentials: Credentials,
        content_sha256: str,
        date: datetime,
) -> SignedRequest:
    """Do signature V4 of given request for S3 service."""
    return _sign_headers(
        "s3", method, url, region, headers, credentials, content_sha256, date,
    )


def sign_v4_sts(  # pylint: disable=too-many-positional-arguments
        method: str,
        url: SplitResult,
        region: str,
        headers: MutableMapping[str, str],
        credentials: Credentials,
        content_sha256: str,
        date: datetime,
) -> SignedRequest:
    """Do signature V4 of given request for STS service."""
    return _sign_headers(
        "sts", method, url, region, headers, credentials, content_sha256, date,
    )


def check_presign_expiry(expires: int | timedelta) -> int:
    """Get expiry in seconds; it must be within one second and seven days."""
    if isinstance(expires, timedelta):
        expires = int(expires.total_seconds())
    if not 1 <= expires <= MAX_PRESIGN_EXPIRY:
        raise ValueError(
            f"expires must be between 1 second to 7 days; got {expires}",
        )
    return expires


def presign_v4(  # pylint: disable=too-many-positional-arguments
        method: str,
        url: SplitResult,
        region: str,
        credentials: Credentials,
        date: datetime,
        expires: int | timedelta,
) -> SplitResult:
    """Do signature V4 of given presign request."""
    expires = check_presign_expiry(expires)
    context = SigningContext(region, date)

    query = url.query + "&" if url.query else ""
    query += (
        f"X-Amz-Algorithm={SIGN_V4_ALGORITHM}"
        f"&X-Amz-Credential="
        f"{queryencode(credentials.access_key + '/' + context.scope)}"
        f"&X-Amz-Date={context.amz_date}"
        f"&X-Amz-Expires={expires}"
    )
    if credentials.session_token:
        query += (
            f"&X-Amz-Security-Token={queryencode(credentials.session_token)}"
        )
    query += "&X-Amz-SignedHeaders=host"
    url = url_replace(url, query=query)

    canonical_request = CanonicalRequest(
        method=method,
        canonical_uri=url.path or "/",
        canonical_query_string=get_canonical_query_string(query),
        canonical_headers="host:" + url.netloc,
        signed_headers="host",
        payload_hash=UNSIGNED_PAYLOAD,
    )
    string_to_sign = get_string_to_sign(context, canonical_request.hash())
    signing_key = get_signing_key(credentials.secret_key, context)
    signature = _get_signature(signing_key, string_to_sign)
    return url_replace(url, query=query + "&X-Amz-Signature=" + signature)


def get_presigned_url_expiry(url: SplitResult) -> datetime:
    """Get the time after which a presigned URL is rejected."""
    params = dict(parse_qsl(url.query))
    try:
        date = time.from_amz_date(params["X-Amz-Date"])
        expires = int(params["X-Amz-Expires"])
    except KeyError as exc:
        raise ValueError(f"{exc.args[0]} not found in presigned URL") from exc
    return date + timedelta(seconds=expires)


def get_chunk_signature(
        previous_signature: str,
        chunk: bytes,
        signing_key: bytes,
        context: SigningContext,
) -> str:
    """Get signature of a chunk chained to previous signature."""
    string_to_sign = (
        f"{_CHUNK_ALGORITHM}\n{context.amz_date}\n{context.scope}\n"
        f"{previous_signature}\n{ZERO_SHA256_HASH}\n{sha256_hash(chunk)}"
    )
    return _get_signature(signing_key, string_to_sign)
