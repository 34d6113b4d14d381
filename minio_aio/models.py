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
Request/response documents of tagging, legal hold, retention, versioning
and object lock configuration APIs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Type, TypeVar, cast
from xml.etree import ElementTree as ET

from .time import from_iso8601utc, to_iso8601utc
from .xml import Element, SubElement, find, findall, findtext

DISABLED = "Disabled"
ENABLED = "Enabled"
SUSPENDED = "Suspended"
OFF = "Off"
GOVERNANCE = "GOVERNANCE"
COMPLIANCE = "COMPLIANCE"
DAYS = "Days"
YEARS = "Years"

_MAX_KEY_LENGTH = 128
_MAX_VALUE_LENGTH = 256
_MAX_OBJECT_TAG_COUNT = 10
_MAX_BUCKET_TAG_COUNT = 50

A = TypeVar("A", bound="Tags")


class Tags(dict):
    """dict extended to bucket/object tags with S3 limits enforced."""

    def __init__(
            self,
            tags: Mapping[str, str] | None = None,
            for_object: bool = False,
    ):
        super().__init__()
        self._for_object = for_object
        for key, value in (tags or {}).items():
            self[key] = value

    def __setitem__(self, key: str, value: str):
        limit = _MAX_OBJECT_TAG_COUNT if self._for_object else (
            _MAX_BUCKET_TAG_COUNT
        )
        if key not in self and len(self) == limit:
            kind = "object" if self._for_object else "bucket"
            raise ValueError(f"only {limit} {kind} tags are allowed")
        if not key or len(key) > _MAX_KEY_LENGTH or "&" in key:
            raise ValueError(f"invalid tag key '{key}'")
        if value is None or len(value) > _MAX_VALUE_LENGTH or "&" in value:
            raise ValueError(f"invalid tag value '{value}'")
        super().__setitem__(key, value)

    @classmethod
    def new_bucket_tags(
            cls: Type[A], tags: Mapping[str, str] | None = None,
    ) -> A:
        """Create new bucket tags."""
        return cls(tags)

    @classmethod
    def new_object_tags(
            cls: Type[A], tags: Mapping[str, str] | None = None,
    ) -> A:
        """Create new object tags."""
        return cls(tags, for_object=True)


@dataclass(frozen=True)
class Tagging:
    """Tagging document of buckets and objects."""
    tags: Tags = field(default_factory=Tags)

    @classmethod
    def fromxml(cls, element: ET.Element) -> Tagging:
        """Create new object with values from XML element."""
        tags = Tags()
        tag_set = find(element, "TagSet")
        for tag in [] if tag_set is None else findall(tag_set, "Tag"):
            tags[cast(str, findtext(tag, "Key", True))] = cast(
                str, findtext(tag, "Value", True),
            )
        return cls(tags)

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("Tagging")
        tag_set = SubElement(element, "TagSet")
        for key, value in self.tags.items():
            tag = SubElement(tag_set, "Tag")
            SubElement(tag, "Key", key)
            SubElement(tag, "Value", value)
        return element


@dataclass(frozen=True)
class LegalHold:
    """Legal hold document."""
    status: bool = False

    @classmethod
    def fromxml(cls, element: ET.Element) -> LegalHold:
        """Create new object with values from XML element."""
        return cls(findtext(element, "Status") == "ON")

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("LegalHold")
        SubElement(element, "Status", "ON" if self.status else "OFF")
        return element


@dataclass(frozen=True)
class Retention:
    """Object retention document."""
    mode: str
    retain_until_date: datetime

    def __post_init__(self):
        if self.mode not in (GOVERNANCE, COMPLIANCE):
            raise ValueError(f"mode must be {GOVERNANCE} or {COMPLIANCE}")
        if not isinstance(self.retain_until_date, datetime):
            raise ValueError("retain until date must be datetime type")

    @classmethod
    def fromxml(cls, element: ET.Element) -> Retention:
        """Create new object with values from XML element."""
        return cls(
            mode=cast(str, findtext(element, "Mode", True)),
            retain_until_date=cast(
                datetime,
                from_iso8601utc(findtext(element, "RetainUntilDate", True)),
            ),
        )

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("Retention")
        SubElement(element, "Mode", self.mode)
        SubElement(
            element, "RetainUntilDate", to_iso8601utc(self.retain_until_date),
        )
        return element


@dataclass(frozen=True)
class VersioningConfig:
    """Bucket versioning configuration; status None means never enabled."""
    status: Optional[str] = None
    mfa_delete: Optional[str] = None

    def __post_init__(self):
        if self.status not in (None, ENABLED, SUSPENDED):
            raise ValueError(f"status must be {ENABLED} or {SUSPENDED}")
        if self.mfa_delete not in (None, ENABLED, DISABLED):
            raise ValueError(f"MFA delete must be {ENABLED} or {DISABLED}")

    @property
    def status_string(self) -> str:
        """Get status as reported by S3 console, i.e. 'Off' if unset."""
        return self.status or OFF

    @classmethod
    def fromxml(cls, element: ET.Element) -> VersioningConfig:
        """Create new object with values from XML element."""
        return cls(
            status=findtext(element, "Status"),
            mfa_delete=findtext(element, "MFADelete"),
        )

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("VersioningConfiguration")
        if self.status:
            SubElement(element, "Status", self.status)
        if self.mfa_delete:
            SubElement(element, "MFADelete", self.mfa_delete)
        return element


@dataclass(frozen=True)
class ObjectLockConfig:
    """
    Object lock configuration. Mode and duration are either both set for a
    default retention rule or both unset.
    """
    mode: Optional[str] = None
    duration: Optional[int] = None
    duration_unit: Optional[str] = None

    def __post_init__(self):
        if (self.mode is None) != (self.duration is None):
            raise ValueError("mode and duration must be provided together")
        if self.mode is not None and self.mode not in (GOVERNANCE, COMPLIANCE):
            raise ValueError(f"mode must be {GOVERNANCE} or {COMPLIANCE}")
        if self.duration is not None:
            unit = (self.duration_unit or "").title()
            if unit not in (DAYS, YEARS):
                raise ValueError(f"duration unit must be {DAYS} or {YEARS}")
            object.__setattr__(self, "duration_unit", unit)

    @classmethod
    def fromxml(cls, element: ET.Element) -> ObjectLockConfig:
        """Create new object with values from XML element."""
        retention = find(element, "Rule/DefaultRetention")
        if retention is None:
            return cls()
        for unit in (DAYS, YEARS):
            duration = findtext(retention, unit)
            if duration:
                return cls(findtext(retention, "Mode"), int(duration), unit)
        raise ValueError(f"XML element <{DAYS}> or <{YEARS}> not found")

    def toxml(self, element: Optional[ET.Element]) -> ET.Element:
        """Convert to XML."""
        element = Element("ObjectLockConfiguration")
        SubElement(element, "ObjectLockEnabled", ENABLED)
        if self.mode:
            retention = SubElement(
                SubElement(element, "Rule"), "DefaultRetention",
            )
            SubElement(retention, "Mode", self.mode)
            SubElement(
                retention, cast(str, self.duration_unit), str(self.duration),
            )
        return element
