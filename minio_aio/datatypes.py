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
Response of ListBuckets, ListObjects, ListObjectVersions, HeadObject and
multipart upload APIs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, cast
from urllib.parse import unquote_plus
from xml.etree import ElementTree as ET

from .time import from_http_header, from_iso8601utc
from .xml import Element, SubElement, find, findall, findtext


def _etag(value: Optional[str]) -> Optional[str]:
    return None if value is None else value.replace('"', "")


@dataclass(frozen=True)
class Bucket:
    """Bucket information."""
    name: str
    creation_date: Optional[datetime]


@dataclass(frozen=True)
class ListAllMyBucketsResult:
    """ListBuckets API result."""
    buckets: list[Bucket]

    @classmethod
    def fromxml(cls, element: ET.Element) -> ListAllMyBucketsResult:
        """Create new object with values from XML element."""
        element = cast(ET.Element, find(element, "Buckets", True))
        return cls([
            Bucket(
                cast(str, findtext(bucket, "Name", True)),
                from_iso8601utc(findtext(bucket, "CreationDate")),
            )
            for bucket in findall(element, "Bucket")
        ])


@dataclass(frozen=True)
class Object:  # pylint: disable=too-many-instance-attributes
    """Object information."""
    bucket_name: str
    object_name: str
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    size: Optional[int] = None
    metadata: Optional[Mapping[str, str]] = None
    version_id: Optional[str] = None
    is_latest: Optional[str] = None
    storage_class: Optional[str] = None
    content_type: Optional[str] = None
    is_delete_marker: bool = False
    is_dir: bool = field(default=False, init=False)

    def __post_init__(self):
        object.__setattr__(self, "is_dir", self.object_name.endswith("/"))

    @classmethod
    def fromxml(
            cls,
            element: ET.Element,
            bucket_name: str,
            is_delete_marker: bool = False,
            encoding_type: Optional[str] = None,
    ) -> Object:
        """Create new object with values from XML element."""
        object_name = cast(str, findtext(element, "Key", True))
        if encoding_type == "url":
            object_name = unquote_plus(object_name)

        size = findtext(element, "Size")
        return cls(
            bucket_name=bucket_name,
            object_name=object_name,
            last_modified=from_iso8601utc(findtext(element, "LastModified")),
            etag=_etag(findtext(element, "ETag")),
            size=None if size is None else int(size),
            version_id=findtext(element, "VersionId"),
            is_latest=findtext(element, "IsLatest"),
            storage_class=findtext(element, "StorageClass"),
            is_delete_marker=is_delete_marker,
        )

    @classmethod
    def fromheaders(
            cls,
            headers: Mapping[str, str],
            bucket_name: str,
            object_name: str,
    ) -> Object:
        """Create new object with values from HeadObject response headers."""
        last_modified = headers.get("last-modified")
        size = headers.get("content-length")
        return cls(
            bucket_name=bucket_name,
            object_name=object_name,
            last_modified=(
                from_http_header(last_modified) if last_modified else None
            ),
            etag=_etag(headers.get("etag")),
            size=int(size) if size else None,
            metadata=headers,
            version_id=headers.get("x-amz-version-id"),
            storage_class=headers.get("x-amz-storage-class"),
            content_type=headers.get("content-type"),
            is_delete_marker=headers.get("x-amz-delete-marker") == "true",
        )


@dataclass(frozen=True)
class ListObjectsResult:
    """One page of ListObjectsV2 or ListObjectVersions API result."""
    objects: list[Object]
    is_truncated: bool
    continuation_token: Optional[str]
    version_id_marker: Optional[str]

    @classmethod
    def fromxml(cls, element: ET.Element) -> ListObjectsResult:
        """Create new object with values from XML element."""
        bucket_name = cast(str, findtext(element, "Name", True))
        encoding_type = findtext(element, "EncodingType")

        def decode(value: Optional[str]) -> Optional[str]:
            if value and encoding_type == "url":
                return unquote_plus(value)
            return value

        objects = [
            Object.fromxml(tag, bucket_name, encoding_type=encoding_type)
            for tag in (
                findall(element, "Contents") + findall(element, "Version")
            )
        ]
        objects += [
            Object.fromxml(
                tag, bucket_name, is_delete_marker=True,
                encoding_type=encoding_type,
            )
            for tag in findall(element, "DeleteMarker")
        ]
        objects += [
            Object(
                bucket_name,
                cast(str, decode(findtext(tag, "Prefix", True))),
            )
            for tag in findall(element, "CommonPrefixes")
        ]

        return cls(
            objects=objects,
            is_truncated=(
                (findtext(element, "IsTruncated") or "").lower() == "true"
            ),
            continuation_token=(
                findtext(element, "NextContinuationToken") or
                decode(findtext(element, "NextKeyMarker"))
            ),
            version_id_marker=findtext(element, "NextVersionIdMarker"),
        )


@dataclass(frozen=True)
class InitiateMultipartUploadResult:
    """CreateMultipartUpload API result."""
    upload_id: str

    @classmethod
    def fromxml(cls, element: ET.Element) -> InitiateMultipartUploadResult:
        """Create new object with values from XML element."""
        return cls(cast(str, findtext(element, "UploadId", True)))


@dataclass(frozen=True)
class Part:
    """Uploaded part of a multipart upload."""
    part_number: int
    etag: str


@dataclass(frozen=True)
class CompleteMultipartUpload:
    """CompleteMultipartUpload API request."""
    parts: list[Part]

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("CompleteMultipartUpload")
        for part in self.parts:
            tag = SubElement(element, "Part")
            SubElement(tag, "PartNumber", str(part.part_number))
            SubElement(tag, "ETag", '"' + part.etag + '"')
        return element


@dataclass(frozen=True)
class CompleteMultipartUploadResult:
    """CompleteMultipartUpload API result."""
    bucket_name: Optional[str]
    object_name: Optional[str]
    location: Optional[str]
    etag: Optional[str]

    @classmethod
    def fromxml(cls, element: ET.Element) -> CompleteMultipartUploadResult:
        """Create new object with values from XML element."""
        return cls(
            bucket_name=findtext(element, "Bucket"),
            object_name=findtext(element, "Key"),
            location=findtext(element, "Location"),
            etag=_etag(findtext(element, "ETag")),
        )
