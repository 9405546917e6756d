import gzip
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO, Union

from ..utils.constants import DEFAULT_CHUNK_SIZE
from .errors import SourceOpenError, StreamReadError

Source = Union[str, Path, BinaryIO, TextIO]

STDIN = "-"


def _chomp(line: bytes) -> bytes:
    return line[:-1] if line.endswith(b"\r") else line


def source_name(source: Source) -> str:
    """Human readable name of an input source"""
    if isinstance(source, Path):
        return str(source)
    if isinstance(source, str):
        return "<stdin>" if source == STDIN else source
    name = getattr(source, "name", None)
    return name if isinstance(name, str) else "<stream>"


class LogReader:
    """Streaming line reader for log files, gzip files, stdin and open streams"""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the log reader

        Args:
            chunk_size: Size of chunks to read at a time (bytes)
        """
        self.chunk_size = chunk_size

    def read_lines(self, source: Source) -> Iterator[bytes]:
        """Read a source line by line

        Line terminators (``\\n`` or ``\\r\\n``) are removed. A final line
        without a terminator is still yielded.

        Args:
            source: Path, ``-`` for stdin, or an open file object

        Yields:
            Each line as bytes

        Raises:
            SourceOpenError: If the source cannot be opened
            StreamReadError: If reading fails part way through
        """
        name = source_name(source)
        with self._open(source, name) as stream:
            yield from self._stream_lines(stream, name)

    @contextmanager
    def _open(self, source: Source, name: str):
        if not isinstance(source, (str, Path)):
            yield source
            return

        if source == STDIN:
            yield sys.stdin.buffer
            return

        path = Path(source)
        try:
            if path.suffix == ".gz":
                stream = gzip.open(path, "rb")
            else:
                stream = open(path, "rb")
        except OSError as e:
            raise SourceOpenError(name, e.strerror or str(e)) from e

        with stream:
            yield stream

    def _stream_lines(self, stream: Union[BinaryIO, TextIO], name: str) -> Iterator[bytes]:
        """Stream lines from a file object"""
        buffer = b""
        lines_read = 0

        while True:
            try:
                chunk = stream.read(self.chunk_size)
            except (OSError, EOFError) as e:
                # gzip reports corrupt or truncated data as OSError/EOFError
                raise StreamReadError(name, str(e) or type(e).__name__, lines_read) from e

            if not chunk:
                if buffer:
                    yield _chomp(buffer)
                break

            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            buffer += chunk

            *lines, buffer = buffer.split(b"\n")
            for line in lines:
                lines_read += 1
                yield _chomp(line)
