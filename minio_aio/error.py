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
minio_aio.error
~~~~~~~~~~~~~~~

This module provides custom exception classes for the library and the
mapper turning S3 error responses into them.

Exceptions are split by what went wrong:

* :class:`EncodingError` - request input cannot be canonicalized.
* :class:`TransportError` - connection failure or timeout.
* :class:`S3Error` - server answered with a non-success status.
* :class:`DecodeError` - successful response body cannot be decoded.

:copyright: (c) 2015, 2016, 2017 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import annotations

from typing import Mapping, Optional
from xml.etree import ElementTree as ET


class MinioException(Exception):
    """Base Minio exception."""


class EncodingError(MinioException, ValueError):
    """Raised to indicate request input cannot be encoded for signing."""


class TransportError(MinioException):
    """Raised to indicate connection failure or timeout."""


class DecodeError(MinioException):
    """Raised to indicate successful response body cannot be decoded."""


class S3Error(MinioException):
    """
    Raised to indicate that error response is received
    when executing S3 operation.
    """
    status: int
    code: Optional[str]
    message: Optional[str]
    resource: Optional[str]
    request_id: Optional[str]
    host_id: Optional[str]
    bucket_name: Optional[str]
    object_name: Optional[str]

    _EXC_MUTABLES = {
        "__traceback__", "__context__", "__cause__", "__suppress_context__",
        "__notes__",
    }

    def __init__(  # pylint: disable=too-many-positional-arguments
        self,
        status: int,
        code: Optional[str],
        message: Optional[str],
        resource: Optional[str],
        request_id: Optional[str],
        host_id: Optional[str],
        bucket_name: Optional[str] = None,
        object_name: Optional[str] = None,
    ):
        object.__setattr__(self, "status", status)
        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "resource", resource)
        object.__setattr__(self, "request_id", request_id)
        object.__setattr__(self, "host_id", host_id)
        object.__setattr__(self, "bucket_name", bucket_name)
        object.__setattr__(self, "object_name", object_name)

        bucket_message = f", bucket_name: {bucket_name}" if bucket_name else ""
        object_message = f", object_name: {object_name}" if object_name else ""

        super().__init__(
            f"S3 operation failed; status: {status}, code: {code}, "
            f"message: {message}, resource: {resource}, "
            f"request_id: {request_id}, "
            f"host_id: {host_id}{bucket_message}{object_message}"
        )

        # freeze after init
        object.__setattr__(self, "_is_frozen", True)

    def __setattr__(self, name, value):
        if name in self._EXC_MUTABLES:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_is_frozen", False):
            raise AttributeError(
                f"{self.__class__.__name__} is frozen and "
                "does not allow attribute assignment"
            )
        object.__setattr__(self, name, value)

    def __delattr__(self, name):
        if name in self._EXC_MUTABLES:
            object.__delattr__(self, name)
            return
        if getattr(self, "_is_frozen", False):
            raise AttributeError(
                f"{self.__class__.__name__} is frozen and "
                "does not allow attribute deletion"
            )
        object.__delattr__(self, name)

    def __reduce__(self):
        return type(self), (
            self.status, self.code, self.message, self.resource,
            self.request_id, self.host_id, self.bucket_name, self.object_name,
        )

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(status={self.status!r}, "
            f"code={self.code!r}, message={self.message!r}, "
            f"resource={self.resource!r}, request_id={self.request_id!r}, "
            f"host_id={self.host_id!r}, bucket_name={self.bucket_name!r}, "
            f"object_name={self.object_name!r})"
        )

    def __eq__(self, other):
        if not isinstance(other, S3Error):
            return NotImplemented
        return (
            self.status == other.status
            and self.code == other.code
            and self.message == other.message
            and self.resource == other.resource
            and self.request_id == other.request_id
            and self.host_id == other.host_id
            and self.bucket_name == other.bucket_name
            and self.object_name == other.object_name
        )

    def __hash__(self):
        return hash(
            (
                self.status,
                self.code,
                self.message,
                self.resource,
                self.request_id,
                self.host_id,
                self.bucket_name,
                self.object_name,
            )
        )


class SignatureExpiredError(S3Error):
    """
    Raised when the server rejects the request timestamp, i.e. clock skew
    between client and server or an expired presigned request.
    """


SIGNATURE_EXPIRED_CODES = frozenset(["RequestTimeTooSkewed", "RequestExpired"])


def _status_error(
        status: int,
        headers: Mapping[str, str],
        bucket_name: Optional[str],
        object_name: Optional[str],
) -> tuple[Optional[str], Optional[str]]:
    """Derive error code and message from HTTP status only."""
    if status in (301, 307, 400):
        code, message = {
            301: ("PermanentRedirect", "Moved Permanently"),
            307: ("Redirect", "Temporary redirect"),
            400: ("BadRequest", "Bad request"),
        }[status]
        region = headers.get("x-amz-bucket-region")
        if region:
            message += "; use region " + region
        return code, message
    if status == 403:
        return "AccessDenied", "Access denied"
    if status == 404:
        if object_name:
            return "NoSuchKey", "Object does not exist"
        if bucket_name:
            return "NoSuchBucket", "Bucket does not exist"
        return "ResourceNotFound", "Request resource not found"
    if status in (405, 501):
        return (
            "MethodNotAllowed",
            "The specified method is not allowed against this resource",
        )
    if status == 409:
        if bucket_name:
            return "NoSuchBucket", "Bucket does not exist"
        return "ResourceConflict", "Request resource conflicts"
    return None, f"server failed with HTTP status code {status}"


def _parse_error_document(body: bytes) -> Optional[ET.Element]:
    """Return <Error> element of body if any."""
    if not body or not body.strip():
        return None
    try:
        element = ET.fromstring(body)
    except ET.ParseError:
        return None
    return element if element.tag.rsplit("}", 1)[-1] == "Error" else None


def parse_error(  # pylint: disable=too-many-positional-arguments
        status: int,
        headers: Mapping[str, str],
        body: bytes,
        resource: Optional[str] = None,
        bucket_name: Optional[str] = None,
        object_name: Optional[str] = None,
) -> S3Error:
    """
    Map an unsuccessful HTTP response to :class:`S3Error`. This function
    never raises; it degrades to a status derived error when the body is
    empty or not an S3 error document.
    """
    request_id = headers.get("x-amz-request-id")
    host_id = headers.get("x-amz-id-2")

    element = _parse_error_document(body)
    if element is not None:
        code = element.findtext("{*}Code")
        cls = SignatureExpiredError if code in SIGNATURE_EXPIRED_CODES else (
            S3Error
        )
        return cls(
            status=status,
            code=code,
            message=element.findtext("{*}Message"),
            resource=element.findtext("{*}Resource") or resource,
            request_id=element.findtext("{*}RequestId") or request_id,
            host_id=element.findtext("{*}HostId") or host_id,
            bucket_name=element.findtext("{*}BucketName") or bucket_name,
            object_name=element.findtext("{*}Key") or object_name,
        )

    code, message = _status_error(status, headers, bucket_name, object_name)
    return S3Error(
        status=status,
        code=code,
        message=message,
        resource=resource,
        request_id=request_id,
        host_id=host_id,
        bucket_name=bucket_name,
        object_name=object_name,
    )
