from __future__ import annotations
import re
from datetime import date
from typing import Optional, TYPE_CHECKING, Any
from collections.abc import Iterable, Sequence

from attrs import frozen, field

from uar_types import DateRangeJson, ColumnType

if TYPE_CHECKING:
    from attrs import Attribute
    from collections.abc import Sized


GA_PREFIX = "ga:"
RELATIVE_DATE = re.compile(r"^(today|yesterday|[0-9]+daysAgo)$")


def is_report_date(value: str) -> bool:
    """Check for a date the reporting API accepts

    Either an ISO formatted date or one of the relative forms 'today',
    'yesterday' and 'NdaysAgo'.
    """
    if RELATIVE_DATE.match(value):
        return True
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def report_date(self, attribute: Attribute, value: str) -> None:
    if not isinstance(value, str) or not is_report_date(value):
        raise ValueError(f"{attribute.name} is not a valid report date: {value!r}")


def len_between(min_len: int, max_len: int):
    def check(self, attribute: Attribute, value: Optional[Sized]) -> None:
        err_str = f"Length of {attribute.name} must be between {min_len} and {max_len}"
        if value is not None:
            if len(value) < min_len or len(value) > max_len:
                raise ValueError(err_str)

    return check


def prefixed(name: str) -> str:
    """Add the 'ga:' namespace unless the name already carries it"""
    return name if name.startswith(GA_PREFIX) else f"{GA_PREFIX}{name}"


@frozen
class DateRange:
    start_date: str = field(validator=report_date)
    end_date: str = field(validator=report_date)

    @classmethod
    def from_doc(cls, obj: DateRangeJson) -> DateRange:
        return cls(obj["startDate"], obj["endDate"])

    @property
    def to_request(self) -> DateRangeJson:
        """Produce concrete API request data for this date range"""
        return {"startDate": self.start_date, "endDate": self.end_date}


@frozen
class Column:
    ctype: ColumnType
    expression: str

    @property
    def to_request(self) -> dict[str, str]:
        """Produce concrete API request data for this column"""
        if self.ctype == ColumnType.DIMENSION:
            return {"name": prefixed(self.expression)}
        return {"expression": prefixed(self.expression)}


def to_columns(ctype: ColumnType, names: Iterable[str]) -> tuple[Column, ...]:
    return tuple(map(lambda name: Column(ctype, name), names))


@frozen
class UARequest:
    """A single report request against one view

    The API accepts up to 5 of these per batch, but this tool only ever sends
    one, so the batch wrapper is produced here rather than by a separate type.
    """
    view_id: str = field(converter=str)
    date_range: DateRange
    metrics: tuple[Column, ...] = field(converter=tuple, validator=len_between(1, 10))
    dimensions: tuple[Column, ...] = field(
        converter=tuple, default=(), validator=len_between(0, 7))

    @classmethod
    def from_names(
        cls,
        view_id: str,
        start_date: str,
        end_date: str,
        metric_expressions: Sequence[str],
        dimension_names: Sequence[str],
    ) -> UARequest:
        return cls(
            view_id,
            DateRange(start_date, end_date),
            to_columns(ColumnType.METRIC, metric_expressions),
            to_columns(ColumnType.DIMENSION, dimension_names),
        )

    @property
    def to_request(self) -> dict[str, Any]:
        """Produce concrete API request data for this query"""
        return {
            "viewId": self.view_id,
            "dateRanges": [self.date_range.to_request],
            "metrics": list(map(lambda col: col.to_request, self.metrics)),
            "dimensions": list(map(lambda col: col.to_request, self.dimensions)),
        }

    @property
    def to_batch(self) -> dict[str, list[dict[str, Any]]]:
        """Wrap this query in a batchGet body holding only this request"""
        return {"reportRequests": [self.to_request]}
