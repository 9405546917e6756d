import json
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..utils.constants import SOURCE_TAG
from ..utils.helpers import parse_rfc3339
from .base import BaseParser, LogRecord, ParserError


class ResponseLogParser(BaseParser):
    """Parser for the JSON lines written by the response logger middleware

    Every field is optional; missing or null fields take zero values. Present
    fields must have the right JSON type. Types are checked before the source
    filter, so a mistyped line is an error even when it belongs to another
    source.
    """

    INT_FIELDS = {"status": "status", "len": "length", "ms": "duration_ms"}
    STR_FIELDS = {"src": "source", "method": "method", "path": "path"}

    def __init__(self, source_tag: str = SOURCE_TAG):
        """Initialize parser

        Args:
            source_tag: Value of the ``src`` field for lines to keep
        """
        self.source_tag = source_tag

    def parse_line(self, line: Union[str, bytes]) -> Optional[LogRecord]:
        """Parse a JSON log line into a LogRecord

        Args:
            line: Raw JSON log line

        Returns:
            LogRecord, or None if the line comes from another source

        Raises:
            ParserError: If the line is not valid JSON or a field has the wrong type
        """
        record = self.decode(line)
        if record.source != self.source_tag:
            return None
        return record

    def decode(self, line: Union[str, bytes]) -> LogRecord:
        """Decode a line without applying the source filter"""
        try:
            data = json.loads(line)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise ParserError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ParserError(f"Expected a JSON object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for field, attr in self.INT_FIELDS.items():
            values[attr] = self._int_field(data, field)
        for field, attr in self.STR_FIELDS.items():
            values[attr] = self._str_field(data, field)

        return LogRecord(timestamp=self._time_field(data, "time"), **values)

    def _int_field(self, data: Dict[str, Any], field: str) -> int:
        value = data.get(field)
        if value is None:
            return 0
        # bool is an int subclass but not a JSON number
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParserError(
                f"Invalid type for {field}. Expected integer, got {type(value).__name__}"
            )
        return value

    def _str_field(self, data: Dict[str, Any], field: str) -> str:
        value = data.get(field)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ParserError(
                f"Invalid type for {field}. Expected string, got {type(value).__name__}"
            )
        return value

    def _time_field(self, data: Dict[str, Any], field: str) -> Optional[datetime]:
        value = data.get(field)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ParserError(
                f"Invalid type for {field}. Expected string, got {type(value).__name__}"
            )
        try:
            return parse_rfc3339(value)
        except ValueError as e:
            raise ParserError(f"Unable to parse timestamp: {value}") from e
