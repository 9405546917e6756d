import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..parsers.base import LogRecord
from ..utils.constants import DEFAULT_METHOD
from . import stats
from .results import PatternKey, SummaryRow
from .urlpattern import extract

logger = logging.getLogger(__name__)

SORT_FIELDS: Dict[str, Callable[[SummaryRow], object]] = {
    "url": lambda row: row.url,
    "count": lambda row: row.count,
    "sum": lambda row: row.total,
    "avg": lambda row: row.average,
}


class Aggregator:
    """Groups log records by method and URL template and summarizes latency

    Each instance owns its buckets for a single run. Rows come out in the
    order their keys were first seen; that order is not part of the
    contract, use :func:`sort_rows` when a stable order matters.
    """

    def __init__(
        self,
        default_method: str = DEFAULT_METHOD,
        extractor: Callable[[str], str] = extract,
    ):
        """Initialize aggregator

        Args:
            default_method: Label used for records without a method
            extractor: Function mapping a raw path to its template
        """
        self.default_method = default_method
        self.extractor = extractor
        self._buckets: Dict[PatternKey, List[LogRecord]] = {}

    def key_for(self, record: LogRecord) -> PatternKey:
        """Grouping key of a record"""
        method = record.method or self.default_method
        return PatternKey(method, self.extractor(record.path))

    def add(self, record: LogRecord) -> PatternKey:
        """Add a record to its bucket and return the bucket key"""
        key = self.key_for(record)
        self._buckets.setdefault(key, []).append(record)
        return key

    def add_all(self, records: Iterable[LogRecord]) -> None:
        for record in records:
            self.add(record)

    def rows(self) -> List[SummaryRow]:
        """Summarize every bucket collected so far"""
        return [summarize(key, bucket) for key, bucket in self._buckets.items()]

    def aggregate(self, records: Iterable[LogRecord]) -> List[SummaryRow]:
        """Bucket ``records`` and return one summary row per bucket"""
        self.add_all(records)
        rows = self.rows()
        logger.debug(f"Aggregated records into {len(rows)} group(s)")
        return rows

    def __len__(self) -> int:
        return len(self._buckets)


def summarize(key: PatternKey, bucket: List[LogRecord]) -> SummaryRow:
    """Compute the summary row for one bucket"""
    slowest = stats.top(bucket, 1)
    fastest = stats.bottom(bucket, 1)
    return SummaryRow(
        key=key,
        count=len(bucket),
        total=stats.total(bucket),
        average=stats.average(bucket),
        # top/bottom return the whole bucket when it has a single record
        slowest_ms=slowest[-1].score if slowest else 0,
        fastest_ms=fastest[-1].score if fastest else 0,
    )


def sort_rows(rows: Iterable[SummaryRow], by: str, descending: bool = False) -> List[SummaryRow]:
    """Sort rows by ``url``, ``count``, ``sum`` or ``avg``

    Raises:
        ValueError: If ``by`` is not a known field
    """
    if by not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {by}. Expected one of {', '.join(SORT_FIELDS)}")
    return sorted(rows, key=SORT_FIELDS[by], reverse=descending)


def rank_rows(
    rows: List[SummaryRow],
    top: Optional[int] = None,
    bottom: Optional[int] = None,
) -> List[SummaryRow]:
    """Keep the groups with the highest or lowest total latency

    Args:
        rows: Summary rows
        top: Number of highest total rows to keep
        bottom: Number of lowest total rows to keep

    Returns:
        Selected rows; all rows when neither limit is given

    Raises:
        ValueError: If both limits are given
    """
    if top is not None and bottom is not None:
        raise ValueError("top and bottom are mutually exclusive")
    if top is not None:
        return stats.top(rows, top)
    if bottom is not None:
        return stats.bottom(rows, bottom)
    return list(rows)
