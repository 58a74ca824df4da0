#!/usr/bin/env python
"""Print last week's sessions per country for a Google Analytics view

Check the README for instructions on obtaining a service account JSON key.
"""
import logging
import sys
from typing import Any, Optional, Sequence

from ga_reporting import ReportClient
from google_auth import READONLY_SCOPE, authorize, load_key_file
from report_printer import print_response
from reporting_errors import ReportingError, UnexpectedStatusError
from utilities import Config, get_config, time_track

START_DATE = "7daysAgo"
END_DATE = "today"
METRICS = ("sessions",)
DIMENSIONS = ("country",)


def configure_logging(config: Config) -> None:
    """Send log lines to stdout, at DEBUG level when requested"""
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    # Logged after the level is set so the flags show up in debug mode
    logging.debug(
        f"Parsed flags: debug={config.debug} keyfile={config.keyfile} "
        f"viewID={config.view_id}")


@time_track("Main func")
def run(config: Config, http: Optional[Any] = None) -> None:
    logging.debug("Setting up Google Analytics reporting service")
    data = load_key_file(config.keyfile)
    authed = authorize(data, READONLY_SCOPE, debug=config.debug, http=http)
    client = ReportClient.from_http(authed)

    response = client.fetch_report(
        config.view_id, START_DATE, END_DATE, METRICS, DIMENSIONS)
    if response.http_status != 200:
        raise UnexpectedStatusError(response.http_status)

    logging.info("Got response from analytics reporting")
    print_response(response, config.view_id)


def main(argv: Optional[Sequence[str]] = None, http: Optional[Any] = None) -> int:
    config = get_config(argv)
    configure_logging(config)
    try:
        run(config, http)
    except ReportingError as error:
        cause = f" ({error.__cause__})" if error.__cause__ else ""
        logging.critical(
            f"{type(error).__name__}: {error}{cause}", exc_info=config.debug)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
