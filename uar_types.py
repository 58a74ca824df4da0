from attrs import frozen, field
from enum import Enum, auto
from typing import TypedDict


class DateRangeJson(TypedDict):
    startDate: str
    endDate: str


class MetricHeaderEntryJson(TypedDict, total=False):
    name: str
    type: str


class MetricHeaderJson(TypedDict, total=False):
    metricHeaderEntries: list[MetricHeaderEntryJson]


class ColumnHeaderJson(TypedDict, total=False):
    dimensions: list[str]
    metricHeader: MetricHeaderJson


class DateRangeValuesJson(TypedDict, total=False):
    values: list[str]


class ReportRowJson(TypedDict, total=False):
    dimensions: list[str]
    metrics: list[DateRangeValuesJson]


class ReportDataJson(TypedDict, total=False):
    rows: list[ReportRowJson]
    rowCount: int


class ReportJson(TypedDict, total=False):
    columnHeader: ColumnHeaderJson
    data: ReportDataJson
    nextPageToken: str


class ReportsResponseJson(TypedDict, total=False):
    reports: list[ReportJson]


class ColumnType(Enum):
    DIMENSION = auto()
    METRIC = auto()


@frozen
class ReportResponse:
    """Decoded batchGet body paired with the HTTP status it arrived with"""
    reports: list[ReportJson] = field(factory=list)
    http_status: int = field(default=200)

    @classmethod
    def from_doc(cls, obj: ReportsResponseJson, http_status: int) -> 'ReportResponse':
        return cls(list(obj.get('reports') or []), http_status)
