import logging
from typing import Optional

from ..parsers.base import BaseParser, ParserError
from ..parsers.json_parser import ResponseLogParser
from ..utils.config import Config
from ..utils.constants import DEFAULT_INPUT
from .errors import DecodeError
from .reader import LogReader, Source, source_name
from .results import IngestResult

logger = logging.getLogger(__name__)


class LogIngestor:
    """Reads response log sources into typed records

    Ingestion is fail-fast: the first line that cannot be decoded raises
    DecodeError and nothing read so far is returned. Lines from other
    sources are skipped silently.
    """

    def __init__(
        self,
        parser: Optional[BaseParser] = None,
        reader: Optional[LogReader] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or Config()
        self.parser = parser or ResponseLogParser(
            source_tag=self.config.get("parsing.source_tag")
        )
        self.reader = reader or LogReader(chunk_size=self.config.get("parsing.chunk_size"))
        self.ignore_blank_lines = self.config.get_bool("parsing.ignore_blank_lines", False)

    def ingest(self, *sources: Source) -> IngestResult:
        """Ingest one or more sources

        Args:
            *sources: Paths, ``-`` for stdin, or open file objects. Reads
                ``logs.json`` when none are given.

        Returns:
            IngestResult with every kept record, in input order

        Raises:
            SourceOpenError: If a source cannot be opened
            StreamReadError: If reading a source fails
            DecodeError: If a line cannot be decoded
        """
        result = IngestResult()
        for source in sources or (DEFAULT_INPUT,):
            self._ingest_source(source, result)

        logger.info(
            f"Ingested {len(result.records)} records from {len(result.sources)} source(s), "
            f"skipped {result.skipped_lines} line(s) from other sources"
        )
        return result

    def _ingest_source(self, source: Source, result: IngestResult) -> None:
        name = source_name(source)
        logger.debug(f"Reading {name}")
        kept = 0

        for line_number, line in enumerate(self.reader.read_lines(source), 1):
            result.total_lines += 1

            if self.ignore_blank_lines and not line.strip():
                result.blank_lines += 1
                continue

            try:
                record = self.parser.parse_line(line)
            except ParserError as e:
                logger.debug(f"Decode failure in {name} at line {line_number}: {e}")
                raise DecodeError(name, line_number, str(e)) from e

            if record is None:
                result.skipped_lines += 1
                continue

            result.records.append(record)
            kept += 1

        result.sources.append(name)
        logger.debug(f"Kept {kept} records from {name}")
