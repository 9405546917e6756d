import io
import re
from typing import Optional, Union

from responselog.core.aggregator import Aggregator
from responselog.core.ingestor import LogIngestor
from responselog.core.report import write_csv
from responselog.parsers.base import BaseParser, LogRecord, ParserError
from responselog.utils.helpers import parse_rfc3339


class KeyValueParser(BaseParser):
    """Example parser for access logs written as key=value pairs

    Example log format:
    time=2024-02-14T15:48:31Z method=GET path=/users/42 status=200 len=512 ms=12
    """

    PAIR = re.compile(r"(\w+)=(\S*)")

    def parse_line(self, line: Union[str, bytes]) -> Optional[LogRecord]:
        """Parse a key=value log line"""
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")

        fields = dict(self.PAIR.findall(line))
        if "path" not in fields:
            # Not an access log line
            return None

        try:
            return LogRecord(
                timestamp=parse_rfc3339(fields["time"]) if "time" in fields else None,
                source="kv",
                status=int(fields.get("status", 0)),
                length=int(fields.get("len", 0)),
                duration_ms=int(fields.get("ms", 0)),
                method=fields.get("method", ""),
                path=fields["path"],
            )
        except ValueError as e:
            raise ParserError(f"Invalid field value: {e}")


def main():
    sample = "\n".join(
        [
            "time=2024-02-14T15:48:31Z method=GET path=/users/42 status=200 len=512 ms=12",
            "time=2024-02-14T15:48:32Z method=GET path=/users/7 status=200 len=498 ms=30",
            "time=2024-02-14T15:48:33Z level=info msg=started",
            "time=2024-02-14T15:48:34Z path=/status status=204 ms=1",
        ]
    )

    ingestor = LogIngestor(parser=KeyValueParser())
    result = ingestor.ingest(io.BytesIO(sample.encode()))
    rows = Aggregator().aggregate(result.records)

    output = io.StringIO()
    write_csv(rows, output)
    print(output.getvalue())


if __name__ == "__main__":
    main()
