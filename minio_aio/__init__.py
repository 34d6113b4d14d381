# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage,
# (C) 2015, 2016, 2017 MinIO, Inc.
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
minio_aio - asyncio MinIO SDK for Amazon S3 Compatible Cloud Storage

    >>> from minio_aio import Minio
    >>> async with Minio(
    ...     "play.min.io",
    ...     access_key="Q3AM3UQ867SPQQA43P2F",
    ...     secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    ... ) as client:
    ...     for bucket in await client.list_buckets():
    ...         print(bucket.name, bucket.creation_date)

:copyright: (C) 2015-2025 MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.
"""

__title__ = "minio-aio"
__author__ = "MinIO, Inc."
__version__ = "0.1.0"
__license__ = "Apache 2.0"
__copyright__ = "Copyright 2015-2025 MinIO, Inc."

# pylint: disable=unused-import,useless-import-alias,wrong-import-position
from .api import Minio as Minio
from .error import DecodeError as DecodeError
from .error import EncodingError as EncodingError
from .error import MinioException as MinioException
from .error import S3Error as S3Error
from .error import SignatureExpiredError as SignatureExpiredError
from .error import TransportError as TransportError
from .executor import Executor as Executor
from .executor import Request as Request
from .executor import Response as Response
from .executor import Stream as Stream
from .retry import RetryPolicy as RetryPolicy
