from dataclasses import dataclass, field
from typing import List, NamedTuple

from ..parsers.base import LogRecord


class PatternKey(NamedTuple):
    """Grouping key: HTTP method label and normalized path template"""

    method: str
    pattern: str

    def __str__(self) -> str:
        return f"{self.method} {self.pattern}"


@dataclass(frozen=True)
class SummaryRow:
    """Latency summary for one method and path template"""

    key: PatternKey
    count: int
    total: int
    average: float
    slowest_ms: int = 0
    fastest_ms: int = 0

    @property
    def url(self) -> str:
        return str(self.key)

    @property
    def score(self) -> int:
        """Total latency, used when ranking rows"""
        return self.total


@dataclass
class IngestResult:
    records: List[LogRecord] = field(default_factory=list)
    total_lines: int = 0
    skipped_lines: int = 0
    blank_lines: int = 0
    sources: List[str] = field(default_factory=list)
