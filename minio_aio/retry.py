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

"""Retry policy of request execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import (AsyncRetrying, retry_if_exception, stop_after_attempt,
                      wait_random_exponential)

from .error import S3Error, TransportError

T = TypeVar("T")

IDEMPOTENT_METHODS = frozenset(["GET", "HEAD", "PUT", "DELETE"])
RETRYABLE_STATUSES = frozenset([500, 502, 503, 504])
RETRYABLE_CODES = frozenset([
    "InternalError",
    "RequestTimeTooSkewed",
    "RequestTimeout",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
])


def is_replayable(body) -> bool:
    """Check whether body can be sent again on retry."""
    return body is None or isinstance(body, (bytes, bytearray, str))


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff with full jitter. Only idempotent requests with
    replayable body are retried; each attempt is signed afresh by the
    caller.
    """
    attempts: int = 3
    backoff_factor: float = 0.2
    max_backoff: float = 5.0

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")

    def wait(self) -> wait_random_exponential:
        """Get wait strategy sleeping up to backoff_factor * 2^(n-1)."""
        return wait_random_exponential(
            multiplier=self.backoff_factor, max=self.max_backoff,
        )

    def retrying(
            self,
            predicate: Callable[[BaseException], bool],
    ) -> AsyncRetrying:
        """Get controller retrying failures accepted by predicate."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=self.wait(),
            retry=retry_if_exception(predicate),
            reraise=True,
        )

    @staticmethod
    def is_retryable(exc: BaseException, transport_only: bool = False) -> bool:
        """Check whether the failure is transient."""
        if isinstance(exc, TransportError):
            return True
        if transport_only or not isinstance(exc, S3Error):
            return False
        return exc.status in RETRYABLE_STATUSES or exc.code in RETRYABLE_CODES

    async def call(
            self,
            method: str,
            body,
            func: Callable[[], Awaitable[T]],
            transport_only: bool = False,
    ) -> T:
        """Await func, calling it again on retryable failure."""
        if method not in IDEMPOTENT_METHODS or not is_replayable(body):
            return await func()
        return await self.retrying(
            lambda exc: self.is_retryable(exc, transport_only),
        )(func)
