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

import pickle
from unittest import TestCase

from minio_aio.error import S3Error, SignatureExpiredError, parse_error


class ParseErrorTest(TestCase):
    def test_error_document(self):
        body = (
            b'<?xml version="1.0" encoding="UTF-8"?>'
            b'<Error><Code>NoSuchKey</Code>'
            b'<Message>The specified key does not exist.</Message>'
            b'<Key>my-object</Key><BucketName>my-bucket</BucketName>'
            b'<Resource>/my-bucket/my-object</Resource>'
            b'<RequestId>4442587FB7D0A2F9</RequestId><HostId>host</HostId>'
            b'</Error>'
        )
        error = parse_error(404, {}, body)
        self.assertIs(type(error), S3Error)
        self.assertEqual(404, error.status)
        self.assertEqual("NoSuchKey", error.code)
        self.assertEqual("The specified key does not exist.", error.message)
        self.assertEqual("/my-bucket/my-object", error.resource)
        self.assertEqual("4442587FB7D0A2F9", error.request_id)
        self.assertEqual("host", error.host_id)
        self.assertEqual("my-bucket", error.bucket_name)
        self.assertEqual("my-object", error.object_name)

    def test_namespaced_error_document(self):
        body = (
            b'<Error xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
            b'<Code>AccessDenied</Code><Message>denied</Message></Error>'
        )
        error = parse_error(
            403, {"x-amz-request-id": "abc"}, body, resource="/b",
        )
        self.assertEqual("AccessDenied", error.code)
        self.assertEqual("abc", error.request_id)
        self.assertEqual("/b", error.resource)

    def test_signature_expired(self):
        body = (
            b'<Error><Code>RequestTimeTooSkewed</Code>'
            b'<Message>skewed</Message></Error>'
        )
        error = parse_error(403, {}, body)
        self.assertIsInstance(error, SignatureExpiredError)
        self.assertIsInstance(error, S3Error)

    def test_empty_body_object(self):
        error = parse_error(
            404, {"x-amz-request-id": "abc", "x-amz-id-2": "def"}, b"",
            resource="/my-bucket/my-object", bucket_name="my-bucket",
            object_name="my-object",
        )
        self.assertEqual("NoSuchKey", error.code)
        self.assertEqual("abc", error.request_id)
        self.assertEqual("def", error.host_id)

    def test_empty_body_bucket(self):
        error = parse_error(404, {}, b"", bucket_name="my-bucket")
        self.assertEqual("NoSuchBucket", error.code)
        self.assertEqual(
            "ResourceNotFound", parse_error(404, {}, b"").code,
        )

    def test_redirect_with_region(self):
        error = parse_error(
            301, {"x-amz-bucket-region": "eu-west-1"}, b"",
            bucket_name="my-bucket",
        )
        self.assertEqual("PermanentRedirect", error.code)
        self.assertEqual("Moved Permanently; use region eu-west-1",
                         error.message)

    def test_conflict(self):
        self.assertEqual(
            "NoSuchBucket", parse_error(409, {}, b"", bucket_name="b").code,
        )
        self.assertEqual("ResourceConflict", parse_error(409, {}, b"").code)

    def test_empty_body_server_error(self):
        error = parse_error(500, {}, b"", resource="/b", bucket_name="b")
        self.assertIsInstance(error, S3Error)
        self.assertIsNone(error.code)
        self.assertEqual(500, error.status)
        self.assertEqual("server failed with HTTP status code 500",
                         error.message)
        self.assertEqual("/b", error.resource)

    def test_unknown_status_and_garbage_body(self):
        error = parse_error(502, {}, b"<html>bad gateway")
        self.assertIsNone(error.code)
        self.assertEqual(502, error.status)
        self.assertEqual("server failed with HTTP status code 502",
                         error.message)

    def test_non_error_document(self):
        error = parse_error(200, {}, b"<CompleteMultipartUploadResult/>")
        self.assertIsNone(error.code)


class S3ErrorTest(TestCase):
    def test_pickle_and_equality(self):
        error = S3Error(
            404, "NoSuchKey", "no key", "/b/o", "req", "host", "b", "o",
        )
        copy = pickle.loads(pickle.dumps(error))
        self.assertEqual(error, copy)
        self.assertEqual(hash(error), hash(copy))
        self.assertEqual("NoSuchKey", copy.code)
