from typing import Optional


class ResponseLogError(Exception):
    """Base exception for responselog errors"""

    pass


class SourceOpenError(ResponseLogError):
    """Raised when an input source cannot be opened"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"could not open {source}: {reason}")


class StreamReadError(ResponseLogError):
    """Raised when reading an input source fails part way through"""

    def __init__(self, source: str, reason: str, line_number: Optional[int] = None):
        self.source = source
        self.reason = reason
        self.line_number = line_number
        location = f"{source}" if line_number is None else f"{source} after line {line_number}"
        super().__init__(f"failed to read data from {location}: {reason}")


class DecodeError(ResponseLogError):
    """Raised when an input line cannot be decoded into a log record

    ``line_number`` is 1-based and counts every physical line of the source,
    including skipped ones.
    """

    def __init__(self, source: str, line_number: int, reason: str):
        self.source = source
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"error decoding {source} line {line_number}: {reason}")
