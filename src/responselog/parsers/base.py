from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class LogRecord:
    """One response log line emitted by the middleware"""

    timestamp: Optional[datetime]
    source: str
    status: int
    length: int
    duration_ms: int
    method: str
    path: str

    @property
    def score(self) -> int:
        """Latency in milliseconds, the value statistics are computed over"""
        return self.duration_ms

    @property
    def status_class(self) -> str:
        """Status category such as ``2xx``"""
        return f"{self.status // 100}xx"


class ParserError(Exception):
    """Raised when a log line cannot be parsed"""

    pass


class BaseParser(ABC):
    """Abstract base class for log line parsers"""

    @abstractmethod
    def parse_line(self, line: Union[str, bytes]) -> Optional[LogRecord]:
        """Parse a single line of log text into a LogRecord

        Args:
            line: Raw log line to parse

        Returns:
            LogRecord if parsing successful, None if line should be skipped

        Raises:
            ParserError: If line cannot be parsed
        """
        pass
