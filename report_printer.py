import logging
from typing import Optional

from uar_types import ReportJson, ReportResponse, ReportRowJson
from utilities import time_track


def header_names(report: ReportJson) -> tuple[list[str], list[str]]:
    """Dimension and metric names of a report, in column order"""
    header = report.get("columnHeader", {})
    dim_hdrs = list(header.get("dimensions", []))
    entries = header.get("metricHeader", {}).get("metricHeaderEntries", [])
    metric_hdrs = [entry.get("name", "") for entry in entries]
    return dim_hdrs, metric_hdrs


def print_row(row: ReportRowJson, dim_hdrs: list[str], metric_hdrs: list[str]) -> None:
    # The server may send fewer values than headers; zip stops at the shorter
    for name, value in zip(dim_hdrs, row.get("dimensions", [])):
        logging.info(f"{name}: {value}")

    # One value set per date range
    for metric in row.get("metrics", []):
        for name, value in zip(metric_hdrs, metric.get("values", [])):
            logging.info(f"{name}: {value}")


@time_track("Print Analytics Report")
def print_response(response: ReportResponse, view_id: Optional[str] = None) -> None:
    """Log every dimension and metric value in the response, one per line"""
    logging.info("Printing Response from analytics reporting")
    for report in response.reports:
        dim_hdrs, metric_hdrs = header_names(report)
        rows = report.get("data", {}).get("rows")

        if not rows:
            logging.info(f"No data found for given view. (viewID={view_id})")
            continue

        for row in rows:
            print_row(row, dim_hdrs, metric_hdrs)
    logging.info("Completed printing response")
