# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage,
# (C) 2018 MinIO, Inc.
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
minio_aio.sse
~~~~~~~~~~~~~

Server-side encryption request headers. Objects written with a customer
key (SSE-C) must be read, streamed and stat'ed with the same key.

"""

from __future__ import annotations

import base64
import json
from abc import ABC, abstractmethod
from typing import Any, Optional, cast

from .helpers import md5sum_hash


class Sse(ABC):
    """Server-side encryption base class."""

    @abstractmethod
    def headers(self) -> dict[str, str]:
        """Return headers."""

    def tls_required(self) -> bool:  # pylint: disable=no-self-use
        """Return TLS required to use this server-side encryption."""
        return True


class SseCustomerKey(Sse):
    """Server-side encryption - customer key type."""

    def __init__(self, key: bytes):
        if len(key) != 32:
            raise ValueError(
                "SSE-C keys need to be 256 bit base64 encoded",
            )
        self._headers: dict[str, str] = {
            "X-Amz-Server-Side-Encryption-Customer-Algorithm": "AES256",
            "X-Amz-Server-Side-Encryption-Customer-Key":
            base64.b64encode(key).decode(),
            "X-Amz-Server-Side-Encryption-Customer-Key-MD5":
            cast(str, md5sum_hash(key)),
        }

    def headers(self) -> dict[str, str]:
        return self._headers.copy()


class SseKMS(Sse):
    """Server-side encryption - KMS type."""

    def __init__(self, key: str, context: Optional[dict[str, Any]] = None):
        self._headers = {
            "X-Amz-Server-Side-Encryption-Aws-Kms-Key-Id": key,
            "X-Amz-Server-Side-Encryption": "aws:kms"
        }
        if context:
            data = bytes(json.dumps(context), "utf-8")
            self._headers["X-Amz-Server-Side-Encryption-Context"] = (
                base64.b64encode(data).decode()
            )

    def headers(self) -> dict[str, str]:
        return self._headers.copy()


class SseS3(Sse):
    """Server-side encryption - S3 type."""

    def headers(self) -> dict[str, str]:
        return {
            "X-Amz-Server-Side-Encryption": "AES256"
        }

    def tls_required(self) -> bool:
        return False


def check_sse(sse: Optional[Sse], secure: bool):
    """Check sse is Sse type and usable over the connection."""
    if sse is None:
        return
    if not isinstance(sse, Sse):
        raise ValueError("Sse type is required")
    if sse.tls_required() and not secure:
        raise ValueError(
            f"{type(sse).__name__} requires a secure (TLS) connection",
        )


def check_ssec(ssec: Optional[SseCustomerKey], secure: bool):
    """Check ssec is SseCustomerKey type and usable over the connection."""
    if ssec is not None and not isinstance(ssec, SseCustomerKey):
        raise ValueError("SseCustomerKey type is required")
    check_sse(ssec, secure)
