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
Credential providers.

A provider is anything with a ``current()`` coroutine returning a
:class:`Credentials` snapshot. Providers here do not share a base class.
"""

from __future__ import annotations

import asyncio
import configparser
import json
import os
import sys
from datetime import timedelta
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, cast
from urllib.parse import urlencode, urlsplit
from xml.etree import ElementTree as ET

import aiohttp
from multidict import CIMultiDict
from typing_extensions import Protocol, runtime_checkable
from yarl import URL

from ..error import DecodeError, TransportError, parse_error
from ..helpers import sha256_hash
from ..signer import sign_v4_sts
from ..time import from_iso8601utc, to_amz_date, utcnow
from ..xml import find, findtext
from .credentials import Credentials

_MAX_DURATION_SECONDS = int(timedelta(days=7).total_seconds())
_DEFAULT_DURATION_SECONDS = int(timedelta(hours=1).total_seconds())


@runtime_checkable
class Provider(Protocol):  # pylint: disable=too-few-public-methods
    """Credential retriever capability."""

    async def current(self) -> Credentials:
        """Return a credential snapshot valid for signing now."""


def _user_home_dir() -> str:
    """Return current user home folder."""
    return (
        os.environ.get("HOME") or
        os.environ.get("UserProfile") or
        str(Path.home())
    )


class StaticProvider:
    """Fixed credential provider."""

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            session_token: str | None = None,
    ):
        self._credentials = Credentials(access_key, secret_key, session_token)

    async def current(self) -> Credentials:
        """Return passed credentials."""
        return self._credentials


class EnvAWSProvider:
    """Credential provider from AWS environment variables."""

    async def current(self) -> Credentials:
        """Retrieve credentials."""
        return Credentials(
            access_key=(
                os.environ.get("AWS_ACCESS_KEY_ID") or
                os.environ.get("AWS_ACCESS_KEY") or ""
            ),
            secret_key=(
                os.environ.get("AWS_SECRET_ACCESS_KEY") or
                os.environ.get("AWS_SECRET_KEY") or ""
            ),
            session_token=os.environ.get("AWS_SESSION_TOKEN"),
        )


class EnvMinioProvider:
    """Credential provider from MinIO environment variables."""

    async def current(self) -> Credentials:
        """Retrieve credentials."""
        return Credentials(
            access_key=os.environ.get("MINIO_ACCESS_KEY") or "",
            secret_key=os.environ.get("MINIO_SECRET_KEY") or "",
        )


class AWSConfigProvider:
    """Credential provider from AWS credential file."""

    def __init__(
            self,
            filename: str | None = None,
            profile: str | None = None,
    ):
        self._filename = (
            filename or
            os.environ.get("AWS_SHARED_CREDENTIALS_FILE") or
            os.path.join(_user_home_dir(), ".aws", "credentials")
        )
        self._profile = profile or os.environ.get("AWS_PROFILE") or "default"

    async def current(self) -> Credentials:
        """Retrieve credentials from AWS configuration file."""
        return await asyncio.to_thread(self._read)

    def _read(self) -> Credentials:
        """Parse AWS configuration file."""
        parser = configparser.ConfigParser()
        parser.read(self._filename)
        access_key = parser.get(
            self._profile, "aws_access_key_id", fallback=None,
        )
        secret_key = parser.get(
            self._profile, "aws_secret_access_key", fallback=None,
        )
        session_token = parser.get(
            self._profile, "aws_session_token", fallback=None,
        )

        if not access_key:
            raise ValueError(
                f"access key does not exist in profile "
                f"{self._profile} in AWS credential file {self._filename}"
            )

        if not secret_key:
            raise ValueError(
                f"secret key does not exist in profile "
                f"{self._profile} in AWS credential file {self._filename}"
            )

        return Credentials(access_key, secret_key, session_token=session_token)


class MinioClientConfigProvider:
    """Credential provider from MinIO Client configuration file."""

    def __init__(self, filename: str | None = None, alias: str | None = None):
        self._filename = (
            filename or
            os.path.join(
                _user_home_dir(),
                "mc" if sys.platform == "win32" else ".mc",
                "config.json",
            )
        )
        self._alias = alias or os.environ.get("MINIO_ALIAS") or "s3"

    async def current(self) -> Credentials:
        """Retrieve credential value from MinIO client configuration file."""
        return await asyncio.to_thread(self._read)

    def _read(self) -> Credentials:
        """Parse MinIO client configuration file."""
        try:
            with open(self._filename, encoding="utf-8") as conf_file:
                config = json.load(conf_file)
        except (IOError, OSError) as exc:
            raise ValueError(
                f"error in reading file {self._filename}",
            ) from exc

        aliases = config.get("hosts") or config.get("aliases")
        if not aliases:
            raise ValueError(f"invalid configuration in file {self._filename}")
        creds = aliases.get(self._alias)
        if not creds:
            raise ValueError(
                f"alias {self._alias} not found in MinIO client "
                f"configuration file {self._filename}"
            )
        return Credentials(
            creds.get("accessKey") or "", creds.get("secretKey") or "",
        )


class ChainedProvider:
    """
    Chained credential provider. The first provider returning credentials
    is remembered and asked first next time.
    """

    def __init__(self, providers: Sequence[Provider]):
        self._providers = list(providers)
        self._provider: Provider | None = None
        self._credentials: Credentials | None = None

    async def current(self) -> Credentials:
        """Retrieve credentials from one of available provider."""
        if self._credentials and not self._credentials.is_expired():
            return self._credentials

        if self._provider:
            try:
                self._credentials = await self._provider.current()
                return self._credentials
            except ValueError:
                # Ignore this error and iterate other providers.
                pass

        for provider in self._providers:
            try:
                self._credentials = await provider.current()
                self._provider = provider
                return self._credentials
            except ValueError:
                # Ignore this error and iterate other providers.
                pass

        raise ValueError("All providers fail to fetch credentials")


class RefreshingProvider:
    """
    Provider caching credentials fetched by a coroutine function until they
    expire. Concurrent callers observing expired credentials wait on a
    single refresh instead of each fetching.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Credentials]]):
        self._fetch = fetch
        self._credentials: Credentials | None = None
        self._lock = asyncio.Lock()

    def _valid(self) -> Credentials | None:
        creds = self._credentials
        return creds if creds and not creds.is_expired() else None

    async def current(self) -> Credentials:
        """Return cached credentials or refresh them."""
        creds = self._valid()
        if creds:
            return creds

        async with self._lock:
            # Another task may have refreshed while this one waited.
            creds = self._valid()
            if creds:
                return creds
            self._credentials = await self._fetch()
            return self._credentials


def _parse_credentials(data: str, name: str) -> Credentials:
    """Parse data containing credentials XML."""
    try:
        element = ET.fromstring(data)
        element = cast(ET.Element, find(element, name, True))
        element = cast(ET.Element, find(element, "Credentials", True))
        return Credentials(
            cast(str, findtext(element, "AccessKeyId", True)),
            cast(str, findtext(element, "SecretAccessKey", True)),
            findtext(element, "SessionToken", True),
            from_iso8601utc(findtext(element, "Expiration", True)),
        )
    except (ET.ParseError, ValueError) as exc:
        raise DecodeError(f"unable to decode {name}; {exc}") from exc


class AssumeRoleProvider:
    """Assume-role credential provider using STS AssumeRole API."""

    def __init__(  # pylint: disable=too-many-positional-arguments
            self,
            sts_endpoint: str,
            access_key: str,
            secret_key: str,
            duration_seconds: int = 0,
            policy: str | None = None,
            region: str | None = None,
            role_arn: str | None = None,
            role_session_name: str | None = None,
            external_id: str | None = None,
            session: Optional[aiohttp.ClientSession] = None,
    ):
        self._sts_endpoint = sts_endpoint
        self._credentials = Credentials(access_key, secret_key)
        self._region = region or ""
        self._session = session

        query_params = {
            "Action": "AssumeRole",
            "Version": "2011-06-15",
            "DurationSeconds": str(
                min(
                    max(duration_seconds, _DEFAULT_DURATION_SECONDS),
                    _MAX_DURATION_SECONDS,
                ),
            ),
        }

        if role_arn:
            query_params["RoleArn"] = role_arn
        if role_session_name:
            query_params["RoleSessionName"] = role_session_name
        if policy:
            query_params["Policy"] = policy
        if external_id:
            query_params["ExternalId"] = external_id

        self._body = urlencode(query_params)
        self._content_sha256 = sha256_hash(self._body)
        url = urlsplit(sts_endpoint)
        self._url = url
        self._host = url.netloc
        if (
                (url.scheme == "http" and url.port == 80) or
                (url.scheme == "https" and url.port == 443)
        ):
            self._host = cast(str, url.hostname)
        self._refresher = RefreshingProvider(self._assume_role)

    async def current(self) -> Credentials:
        """Retrieve credentials."""
        return await self._refresher.current()

    async def _post(self, session: aiohttp.ClientSession) -> str:
        """Execute signed AssumeRole request and return response body."""
        utctime = utcnow()
        headers = CIMultiDict({
            "Content-Type": "application/x-www-form-urlencoded",
            "Host": self._host,
            "X-Amz-Date": to_amz_date(utctime),
        })
        sign_v4_sts(
            "POST",
            self._url,
            self._region,
            headers,
            self._credentials,
            self._content_sha256,
            utctime,
        )
        try:
            async with session.post(
                    URL(self._sts_endpoint, encoded=True),
                    data=self._body.encode(),
                    headers=headers,
            ) as response:
                body = await response.read()
                if response.status != 200:
                    raise parse_error(
                        response.status, response.headers, body,
                        resource=self._url.path,
                    )
                return body.decode()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(
                f"AssumeRole request to {self._sts_endpoint} failed; {exc}",
            ) from exc

    async def _assume_role(self) -> Credentials:
        if self._session:
            data = await self._post(self._session)
        else:
            async with aiohttp.ClientSession() as session:
                data = await self._post(session)
        return _parse_credentials(data, "AssumeRoleResult")
