"""Error taxonomy for the reporting tool

Every failure is surfaced as a ReportingError subclass. Only the entry point
catches them, so the categories exist to give the final log line context.
"""
from typing import Optional


class ReportingError(Exception):
    """Base class for every error the tool reports before exiting"""


class ConfigurationError(ReportingError):
    """Flags, key file or credential fields are missing or malformed"""


class AuthorizationError(ReportingError):
    """The authorized client could not be built or could not get a token"""


class RequestError(ReportingError):
    """The report request never completed"""


class ResponseDecodeError(ReportingError):
    """The response body was not valid JSON"""


class UnexpectedStatusError(ReportingError):
    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(status_code, message)

    def __str__(self) -> str:
        response = [f'Did not get expected HTTP response code (got {self.status_code})']
        if self.message:
            response.append(self.message)
        return ': '.join(response)
