"""Shared fixtures: fake transports, a trimmed discovery document and keys"""
import json
import os
import tempfile
from functools import cache
from pathlib import Path
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from googleapiclient.discovery import build_from_document
from googleapiclient.http import HttpMockSequence

DATA_DIR = Path(__file__).parent / 'data'
TOKEN_URI = 'https://oauth2.googleapis.com/token'
BATCH_GET_URI = 'https://analyticsreporting.googleapis.com/v4/reports:batchGet'
ACCESS_TOKEN = 'test-access-token'


@cache
def discovery_doc() -> str:
    return (DATA_DIR / 'analyticsreporting.v4.json').read_text()


def reporting_service(http: Any):
    """Service object built offline from the checked in discovery document"""
    return build_from_document(discovery_doc(), http=http)


def fake_build(api_name: str, version: str, http: Any = None, **kwargs):
    """Drop-in replacement for googleapiclient.discovery.build in tests"""
    assert (api_name, version) == ('analyticsreporting', 'v4')
    return reporting_service(http)


@cache
def private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def key_info() -> dict[str, str]:
    return {
        'client_email': 'a@b.com',
        'private_key': private_key_pem(),
        'token_uri': TOKEN_URI,
    }


def key_bytes() -> bytes:
    return json.dumps(key_info()).encode()


def write_key_file(directory: str, content: bytes) -> str:
    fd, path = tempfile.mkstemp(suffix='.json', dir=directory)
    with os.fdopen(fd, 'wb') as f:
        f.write(content)
    return path


def json_content(obj: Any) -> bytes:
    return json.dumps(obj).encode()


def token_response() -> tuple[dict[str, str], bytes]:
    return (
        {'status': '200', 'content-type': 'application/json'},
        json_content({'access_token': ACCESS_TOKEN, 'expires_in': 3600,
                      'token_type': 'Bearer'}),
    )


def report_response(obj: Any, status: str = '200') -> tuple[dict[str, str], bytes]:
    return ({'status': status, 'content-type': 'application/json'}, json_content(obj))


class RecordingHttp(HttpMockSequence):
    """HttpMockSequence that remembers every request it answered"""
    def __init__(self, iterable) -> None:
        super().__init__(iterable)
        self.requests: list[dict[str, Any]] = []

    def request(self, uri, method='GET', body=None, headers=None, **kwargs):
        self.requests.append(
            {'uri': uri, 'method': method, 'body': body, 'headers': headers or {}})
        return super().request(uri, method=method, body=body, headers=headers, **kwargs)

    def report_requests(self) -> list[dict[str, Any]]:
        return [req for req in self.requests if req['uri'].startswith(BATCH_GET_URI)]


SAMPLE_RESPONSE = {
    'reports': [
        {
            'columnHeader': {
                'dimensions': ['country'],
                'metricHeader': {
                    'metricHeaderEntries': [{'name': 'sessions', 'type': 'INTEGER'}]
                },
            },
            'data': {
                'rows': [
                    {'dimensions': ['US'], 'metrics': [{'values': ['42']}]}
                ],
                'rowCount': 1,
            },
        }
    ]
}
