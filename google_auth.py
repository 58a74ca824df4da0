"""Module for requesting authenticated service objects

A service account JSON key is turned into JWT credentials scoped to read-only
analytics access. The credentials are bound to an httplib2 transport which
signs every outgoing request with a bearer token, refreshing it as needed.
"""
import json
import logging
import re
from typing import NamedTuple, Optional, Any

from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError
from googleapiclient.http import build_http

from reporting_errors import AuthorizationError, ConfigurationError
from utilities import time_track


__all__ = ('READONLY_SCOPE', 'load_key_file', 'jwt_credentials', 'authorize',
           'analytics_service', 'LoggingHttp')

READONLY_SCOPE = 'https://www.googleapis.com/auth/analytics.readonly'
REDACTED = '<redacted>'
REDACTED_HEADERS = {'authorization'}
SECRET_FIELDS = r'(assertion|access_token|id_token|refresh_token|client_secret)'
REDACTED_FORM_FIELDS = re.compile(r'(?:^|&)' + SECRET_FIELDS + r'=')
REDACTED_JSON_FIELDS = re.compile(r'"' + SECRET_FIELDS + r'"(\s*:\s*)"[^"]*"')


class ApiDataTuple(NamedTuple):
    api_name: str
    version: str


class DiscoveryServices:
    UaReporting = ApiDataTuple('analyticsreporting', 'v4')


def load_key_file(path: str) -> bytes:
    """Read the service account key file issued by the Cloud Console"""
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as error:
        raise ConfigurationError(
            f"Failed to load credentials for Google Analytics from {path}"
        ) from error

    logging.debug(f"Read key file {path}")
    return data


def jwt_credentials(
    data: bytes,
    scope: str = READONLY_SCOPE
) -> service_account.Credentials:
    """Build JWT credentials from the raw contents of a key file

    Nothing here touches the network: the token is only fetched when the first
    request goes out.
    """
    try:
        info = json.loads(data)
    except ValueError as error:
        raise ConfigurationError("Key file is not valid JSON") from error

    if not isinstance(info, dict):
        raise ConfigurationError("Key file must hold a JSON object")

    try:
        creds = service_account.Credentials.from_service_account_info(
            info, scopes=[scope])
    except (ValueError, KeyError, TypeError) as error:
        raise ConfigurationError(
            f"Failed to create JWT config from JSON creds: {error}") from error

    logging.debug("Created jwt config")
    return creds


class LoggingHttp:
    """Wraps an httplib2 style transport and logs every exchange

    Anything other than request() is forwarded to the wrapped transport, so
    the wrapper can stand in wherever an httplib2.Http is expected. Token
    exchanges pass through here too, so secrets are masked in headers and
    in both form encoded and JSON bodies.
    """
    def __init__(self, http: Any) -> None:
        object.__setattr__(self, 'http', http)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.http, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == 'http':
            object.__setattr__(self, name, value)
        else:
            setattr(self.http, name, value)

    @staticmethod
    def redact(headers: Optional[dict]) -> dict:
        return {
            key: REDACTED if key.lower() in REDACTED_HEADERS else value
            for key, value in (headers or {}).items()
        }

    @staticmethod
    def redact_body(body: Any) -> Any:
        if isinstance(body, bytes):
            body = body.decode('utf-8', errors='replace')
        if not isinstance(body, str):
            return body
        # Form encoded grant requests carry little besides the signed assertion
        if REDACTED_FORM_FIELDS.search(body):
            return REDACTED
        return REDACTED_JSON_FIELDS.sub(rf'"\1"\2"{REDACTED}"', body)

    def request(self, uri, method='GET', body=None, headers=None, **kwargs):
        logging.debug(
            f"HTTP request: {method} {uri} headers={self.redact(headers)} "
            f"body={self.redact_body(body)!r}")
        response, content = self.http.request(
            uri, method=method, body=body, headers=headers, **kwargs)
        logging.debug(
            f"HTTP response: {response.status} {uri} body={self.redact_body(content)!r}")
        return response, content


@time_track("Make authorized transport")
def authorize(
    data: bytes,
    scope: str = READONLY_SCOPE,
    debug: bool = False,
    http: Optional[Any] = None
) -> AuthorizedHttp:
    """Returns a transport that authorizes every request it sends

    When debug is set the underlying transport is wrapped in LoggingHttp
    before the credentials are attached, so token exchanges get logged too.
    """
    creds = jwt_credentials(data, scope)
    transport = http if http is not None else build_http()
    if debug:
        transport = LoggingHttp(transport)

    authed = AuthorizedHttp(creds, http=transport)
    logging.debug("Created authentication capable HTTP client")
    return authed


@time_track("Make reporting service")
def analytics_service(http: Any, api: ApiDataTuple = DiscoveryServices.UaReporting):
    """Returns service object for the GA reporting API bound to http"""
    try:
        service = build(api.api_name, api.version, http=http, cache_discovery=False)
    except (GoogleApiError, ValueError) as error:
        raise AuthorizationError(
            "Failed to create Google Analytics Reporting Service") from error

    logging.info("Created Google Analytics Reporting Service object")
    return service
