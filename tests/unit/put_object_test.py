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

import hashlib

from minio_aio import Minio, S3Error, Stream, TransportError
from minio_aio.helpers import MIN_PART_SIZE

from .minio_mocks import MockResponse, MockTestCase, chunks

OBJECT_URL = 'http://localhost:9000/bucket/obj'
HELLO_SHA256 = (
    '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
)
INITIATE_RESULT = (
    b'<InitiateMultipartUploadResult '
    b'xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
    b'<Bucket>bucket</Bucket><Key>obj</Key><UploadId>upload1</UploadId>'
    b'</InitiateMultipartUploadResult>'
)
COMPLETE_RESULT = (
    b'<CompleteMultipartUploadResult '
    b'xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
    b'<Location>http://localhost:9000/bucket/obj</Location>'
    b'<Bucket>bucket</Bucket><Key>obj</Key>'
    b'<ETag>&quot;final-2&quot;</ETag>'
    b'</CompleteMultipartUploadResult>'
)


def new_client(**kwargs):
    return Minio('localhost:9000', access_key='minio',
                 secret_key='minio123', secure=False, **kwargs)


class PutObjectTest(MockTestCase):
    def add_multipart_requests(self, part_count):
        self.server.mock_add_request(
            MockResponse('POST', OBJECT_URL + '?uploads=', {}, 200,
                         content=INITIATE_RESULT),
        )
        parts = [
            self.server.mock_add_request(
                MockResponse(
                    'PUT',
                    f'{OBJECT_URL}?partNumber={number}&uploadId=upload1',
                    {}, 200,
                    response_headers={'ETag': f'"etag{number}"'},
                ),
            )
            for number in range(1, part_count + 1)
        ]
        complete = self.server.mock_add_request(
            MockResponse('POST', OBJECT_URL + '?uploadId=upload1', {}, 200,
                         response_headers={'x-amz-version-id': 'v2'},
                         content=COMPLETE_RESULT),
        )
        return parts, complete

    async def test_object_is_not_supported_type(self):
        client = new_client()
        with self.assertRaises(TypeError):
            await client.put_object('bucket', 'obj', 1234)

    async def test_put_bytes(self):
        response = self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Type': 'application/octet-stream',
                 'Content-Length': '5',
                 'x-amz-content-sha256': HELLO_SHA256},
                200,
                response_headers={'ETag': '"abc"', 'x-amz-version-id': 'v1'},
            ),
        )
        result = await new_client().put_object('bucket', 'obj', b'hello')
        self.assertEqual(b'hello', response.request_body)
        self.assertEqual('abc', result.etag)
        self.assertEqual('v1', result.version_id)
        self.assertEqual('bucket', result.bucket_name)
        self.assertEqual('obj', result.object_name)

    async def test_put_str(self):
        response = self.server.mock_add_request(
            MockResponse('PUT', OBJECT_URL, {}, 200),
        )
        await new_client().put_object('bucket', 'obj', 'hello')
        self.assertEqual(b'hello', response.request_body)

    async def test_metadata_and_tags(self):
        self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Type': 'text/plain',
                 'Cache-Control': 'no-cache',
                 'x-amz-storage-class': 'REDUCED_REDUNDANCY',
                 'X-Amz-Meta-Color': 'red',
                 'x-amz-tagging': 'Project=One%20Two&User=jsmith'},
                200,
            ),
        )
        await new_client().put_object(
            'bucket', 'obj', b'hello',
            content_type='text/plain',
            metadata={'Cache-Control': 'no-cache',
                      'x-amz-storage-class': 'REDUCED_REDUNDANCY',
                      'Color': 'red'},
            tags={'Project': 'One Two', 'User': 'jsmith'},
        )

    async def test_too_many_object_tags(self):
        client = new_client()
        with self.assertRaises(ValueError):
            await client.put_object(
                'bucket', 'obj', b'hello',
                tags={f'key{i}': 'value' for i in range(11)},
            )

    async def test_signed_stream(self):
        response = self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Encoding': 'aws-chunked',
                 'x-amz-decoded-content-length': '10',
                 'Content-Length': '182',
                 'x-amz-content-sha256':
                 'STREAMING-AWS4-HMAC-SHA256-PAYLOAD'},
                200,
            ),
        )
        await new_client().put_object(
            'bucket', 'obj', Stream(chunks(b'a' * 10, 4), 10),
        )
        body = response.request_body
        self.assertEqual(182, len(body))
        self.assertTrue(body.startswith(b'a;chunk-signature='))
        self.assertIn(b'\r\n' + b'a' * 10 + b'\r\n', body)
        self.assertTrue(body[96:].startswith(b'0;chunk-signature='))
        self.assertTrue(body.endswith(b'\r\n\r\n'))

    async def test_signed_stream_small_chunks(self):
        response = self.server.mock_add_request(
            MockResponse('PUT', OBJECT_URL,
                         {'Content-Length': '354'}, 200),
        )
        await new_client(chunk_size=4).put_object(
            'bucket', 'obj', Stream(chunks(b'a' * 10, 3), 10),
        )
        body = response.request_body
        self.assertEqual(354, len(body))
        self.assertEqual(4, body.count(b';chunk-signature='))

    async def test_anonymous_stream_unsigned(self):
        response = self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Length': '10',
                 'x-amz-content-sha256': 'UNSIGNED-PAYLOAD'},
                200,
            ),
        )
        client = Minio('localhost:9000', secure=False)
        await client.put_object(
            'bucket', 'obj', Stream(chunks(b'a' * 10, 4), 10),
        )
        self.assertEqual(b'a' * 10, response.request_body)
        self.assertNotIn('Authorization', response.request_headers)
        self.assertNotIn('Content-Encoding', response.request_headers)

    async def test_chunked_upload_disabled(self):
        response = self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Length': '10',
                 'x-amz-content-sha256': 'UNSIGNED-PAYLOAD'},
                200,
            ),
        )
        await new_client(chunked_upload=False).put_object(
            'bucket', 'obj', Stream(chunks(b'a' * 10, 4), 10),
        )
        self.assertEqual(b'a' * 10, response.request_body)
        self.assertIn('Authorization', response.request_headers)

    async def test_stream_shorter_than_declared(self):
        self.server.mock_add_request(MockResponse('PUT', OBJECT_URL, {}, 200))
        with self.assertRaises(ValueError) as ctx:
            await new_client().put_object(
                'bucket', 'obj', Stream(chunks(b'a' * 10, 4), 100),
            )
        self.assertNotIsInstance(ctx.exception, TransportError)
        self.assertIn('expected declared length 100', str(ctx.exception))

    async def test_unsigned_stream_longer_than_declared(self):
        self.server.mock_add_request(MockResponse('PUT', OBJECT_URL, {}, 200))
        with self.assertRaises(ValueError) as ctx:
            await new_client(chunked_upload=False).put_object(
                'bucket', 'obj', Stream(chunks(b'a' * 12, 4), 10),
            )
        self.assertIn('more data than declared length 10', str(ctx.exception))

    async def test_multipart_stream_shorter_than_declared(self):
        self.server.mock_add_request(
            MockResponse('POST', OBJECT_URL + '?uploads=', {}, 200,
                         content=INITIATE_RESULT),
        )
        self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL + '?partNumber=1&uploadId=upload1', {}, 200,
            ),
        )
        abort = self.server.mock_add_request(
            MockResponse('DELETE', OBJECT_URL + '?uploadId=upload1', {}, 204),
        )
        with self.assertRaises(ValueError):
            await new_client().put_object(
                'bucket', 'obj',
                Stream(chunks(b'a' * 10, 4), MIN_PART_SIZE + 10),
            )
        self.assertTrue(abort.released)

    async def test_unknown_length_single_part(self):
        response = self.server.mock_add_request(
            MockResponse('PUT', OBJECT_URL, {'Content-Length': '100'}, 200),
        )
        await new_client().put_object(
            'bucket', 'obj', chunks(b'x' * 100, 7),
        )
        self.assertEqual(b'x' * 100, response.request_body)

    async def test_multipart_bytes(self):
        data = b'a' * MIN_PART_SIZE + b'b' * 10
        parts, complete = self.add_multipart_requests(2)
        result = await new_client().put_object('bucket', 'obj', data)
        self.assertEqual(b'a' * MIN_PART_SIZE, parts[0].request_body)
        self.assertEqual(b'b' * 10, parts[1].request_body)
        body = complete.request_body
        self.assertIn(b'<PartNumber>1</PartNumber><ETag>"etag1"</ETag>', body)
        self.assertIn(b'<PartNumber>2</PartNumber><ETag>"etag2"</ETag>', body)
        self.assertEqual('application/xml',
                         complete.request_headers['Content-Type'])
        self.assertEqual('final-2', result.etag)
        self.assertEqual('v2', result.version_id)
        self.assertEqual('http://localhost:9000/bucket/obj', result.location)

    async def test_multipart_known_length_stream(self):
        data = b'a' * MIN_PART_SIZE + b'b' * 10
        parts, _ = self.add_multipart_requests(2)
        await new_client().put_object(
            'bucket', 'obj', Stream(chunks(data, 1024 * 1024), len(data)),
        )
        self.assertEqual(
            str(MIN_PART_SIZE),
            parts[0].request_headers['x-amz-decoded-content-length'],
        )
        self.assertEqual(
            '10', parts[1].request_headers['x-amz-decoded-content-length'],
        )
        self.assertIn(b'\r\n' + b'b' * 10 + b'\r\n', parts[1].request_body)

    async def test_multipart_unknown_length(self):
        data = b'a' * MIN_PART_SIZE + b'b' * 10
        parts, _ = self.add_multipart_requests(2)
        await new_client().put_object(
            'bucket', 'obj', chunks(data, 1024 * 1024),
        )
        self.assertEqual(MIN_PART_SIZE, len(parts[0].request_body))
        self.assertEqual(b'b' * 10, parts[1].request_body)

    async def test_abort_on_part_failure(self):
        self.server.mock_add_request(
            MockResponse('POST', OBJECT_URL + '?uploads=', {}, 200,
                         content=INITIATE_RESULT),
        )
        self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL + '?partNumber=1&uploadId=upload1', {},
                403,
                content=(b'<Error><Code>AccessDenied</Code>'
                         b'<Message>denied</Message></Error>'),
            ),
        )
        abort = self.server.mock_add_request(
            MockResponse('DELETE', OBJECT_URL + '?uploadId=upload1', {}, 204),
        )
        data = b'a' * MIN_PART_SIZE + b'b' * 10
        with self.assertRaises(S3Error) as ctx:
            await new_client().put_object('bucket', 'obj', data)
        self.assertEqual('AccessDenied', ctx.exception.code)
        self.assertTrue(abort.released)

    async def test_complete_error_in_ok_response(self):
        self.server.mock_add_request(
            MockResponse('POST', OBJECT_URL + '?uploads=', {}, 200,
                         content=INITIATE_RESULT),
        )
        for number in (1, 2):
            self.server.mock_add_request(
                MockResponse(
                    'PUT',
                    f'{OBJECT_URL}?partNumber={number}&uploadId=upload1',
                    {}, 200,
                    response_headers={'ETag': f'"etag{number}"'},
                ),
            )
        self.server.mock_add_request(
            MockResponse(
                'POST', OBJECT_URL + '?uploadId=upload1', {}, 200,
                content=(b'<Error><Code>InternalError</Code>'
                         b'<Message>We encountered an internal error.'
                         b'</Message></Error>'),
            ),
        )
        self.server.mock_add_request(
            MockResponse('DELETE', OBJECT_URL + '?uploadId=upload1', {}, 204),
        )
        data = b'a' * MIN_PART_SIZE + b'b' * 10
        with self.assertRaises(S3Error) as ctx:
            await new_client().put_object('bucket', 'obj', data)
        self.assertEqual('InternalError', ctx.exception.code)
        self.assertEqual(200, ctx.exception.status)

    async def test_large_single_part_hashed(self):
        data = bytes(range(256)) * (10 * 4096)
        response = self.server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL,
                {'Content-Length': str(len(data)),
                 'x-amz-content-sha256': hashlib.sha256(data).hexdigest()},
                200,
            ),
        )
        await new_client().put_object(
            'bucket', 'obj', data, part_size=16 * 1024 * 1024,
        )
        self.assertEqual(len(data), len(response.request_body))
