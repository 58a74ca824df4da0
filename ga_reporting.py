"""Client for the GA Reporting API v4 batchGet endpoint"""
import logging
from collections.abc import Sequence
from typing import Any

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from google_auth import analytics_service
from reporting_errors import (
    AuthorizationError,
    ConfigurationError,
    RequestError,
    ResponseDecodeError,
    UnexpectedStatusError,
)
from uar import UARequest
from uar_types import ReportResponse
from utilities import time_track


class ReportClient:
    """Typed binding for reports.batchGet

    Each call sends a batch holding exactly one report request.
    """
    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_http(cls, http: Any) -> 'ReportClient':
        """Bind a client to an already authorized transport"""
        return cls(analytics_service(http))

    @time_track("GET Analytics Report")
    def fetch_report(
        self,
        view_id: str,
        date_range_start: str,
        date_range_end: str,
        metric_expressions: Sequence[str],
        dimension_names: Sequence[str],
    ) -> ReportResponse:
        try:
            query = UARequest.from_names(
                view_id, date_range_start, date_range_end,
                metric_expressions, dimension_names)
        except ValueError as error:
            raise ConfigurationError(f"Invalid report request: {error}") from error
        return self.send(query)

    def send(self, query: UARequest) -> ReportResponse:
        """Execute the query and pair the decoded body with its HTTP status"""
        statuses: list[int] = []

        def record_status(resp: httplib2.Response) -> None:
            statuses.append(resp.status)

        request = self.service.reports().batchGet(body=query.to_batch)
        request.add_response_callback(record_status)

        logging.info("Doing GET request from analytics reporting")
        try:
            body = request.execute()
        except HttpError as error:
            raise UnexpectedStatusError(
                error.resp.status, error.reason) from error
        except RefreshError as error:
            raise AuthorizationError(
                f"Could not obtain an access token: {error}") from error
        except (httplib2.HttpLib2Error, TransportError, OSError) as error:
            raise RequestError(
                f"GET request to analyticsreporting/v4 failed: {error}") from error
        except ValueError as error:
            raise ResponseDecodeError(
                f"Could not decode analyticsreporting/v4 response: {error}") from error

        if not isinstance(body, dict):
            raise ResponseDecodeError(
                f"Expected a JSON object from analyticsreporting/v4, got {type(body).__name__}")
        return ReportResponse.from_doc(body, statuses[-1])
