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

"""Credential module."""

# pylint: disable=unused-import,useless-import-alias
from .credentials import Credentials as Credentials
from .providers import AssumeRoleProvider as AssumeRoleProvider
from .providers import AWSConfigProvider as AWSConfigProvider
from .providers import ChainedProvider as ChainedProvider
from .providers import EnvAWSProvider as EnvAWSProvider
from .providers import EnvMinioProvider as EnvMinioProvider
from .providers import MinioClientConfigProvider as MinioClientConfigProvider
from .providers import Provider as Provider
from .providers import RefreshingProvider as RefreshingProvider
from .providers import StaticProvider as StaticProvider
