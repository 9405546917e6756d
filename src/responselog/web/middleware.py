"""ASGI middleware that logs the status, size and duration of every response.

Each logged request produces one JSON line such as::

    {"time":"2024-02-14T15:48:31Z","src":"rl","status":200,"http_2xx":1,
     "len":12,"ms":3,"method":"GET","path":"/"}

which is the input format the summarize tooling reads back.
"""
import json
import sys
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, TextIO

from ..utils.constants import SOURCE_TAG
from ..utils.helpers import format_rfc3339, strip_control_chars

Scope = Dict[str, Any]
Message = Dict[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

# Called with (scope, status, length in bytes, duration in seconds)
ResponseLogger = Callable[[Scope, int, int, float], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_log_message(
    now: Callable[[], datetime],
    method: str,
    path: str,
    status: int,
    length: int,
    duration: float,
    fields: Optional[Mapping[str, str]] = None,
    source_tag: str = SOURCE_TAG,
) -> str:
    """Format one response as a JSON log line

    Args:
        now: Clock returning the current time
        method: HTTP method
        path: Request path
        status: Response status code
        length: Response body size in bytes
        duration: Time taken in seconds
        fields: Extra string fields appended after the standard ones
        source_tag: Value of the ``src`` field

    Returns:
        JSON object terminated by a newline
    """
    message: Dict[str, Any] = {
        "time": format_rfc3339(now()),
        "src": source_tag,
        "status": status,
        f"http_{status // 100}xx": 1,
        "len": length,
        "ms": int(duration * 1000),
        "method": strip_control_chars(method),
        "path": strip_control_chars(path),
    }
    if fields:
        message.update(fields)
    return json.dumps(message, separators=(",", ":"), ensure_ascii=False) + "\n"


def header_value(scope: Scope, name: str) -> str:
    """First value of a request header, or an empty string"""
    wanted = name.lower().encode("latin-1")
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("latin-1")
    return ""


class JSONLogger:
    """Writes response log lines, stderr by default"""

    def __init__(
        self,
        headers: Iterable[str] = (),
        stream: Optional[TextIO] = None,
        clock: Callable[[], datetime] = utc_now,
        source_tag: str = SOURCE_TAG,
    ):
        """Initialize logger

        Args:
            headers: Request headers whose values are added to each line
            stream: Destination, resolved to ``sys.stderr`` at write time if unset
            clock: Clock used for the ``time`` field
            source_tag: Value of the ``src`` field
        """
        self.headers = list(headers)
        self.stream = stream
        self.clock = clock
        self.source_tag = source_tag

    def __call__(self, scope: Scope, status: int, length: int, duration: float) -> None:
        fields = {name: header_value(scope, name) for name in self.headers}
        line = format_log_message(
            self.clock,
            scope.get("method", ""),
            scope.get("path", ""),
            status,
            length,
            duration,
            fields,
            self.source_tag,
        )
        stream = self.stream or sys.stderr
        stream.write(line)
        stream.flush()


def skip_paths(paths: Iterable[str]) -> Callable[[Scope], bool]:
    """Build a predicate that skips logging for the given exact paths"""
    skipped = frozenset(paths)
    return lambda scope: scope.get("path") in skipped


skip_health_endpoint = skip_paths(["/health"])


class ResponseLoggerMiddleware:
    """Logs status code, byte count and duration of HTTP responses

    Works with any ASGI application. Non-HTTP scopes (websocket, lifespan)
    and requests matched by ``skip`` pass through untouched. When the
    application never starts a response the status is logged as 200.
    """

    def __init__(
        self,
        app: ASGIApp,
        response_logger: Optional[ResponseLogger] = None,
        skip: Callable[[Scope], bool] = skip_health_endpoint,
    ):
        self.app = app
        self.response_logger = response_logger or JSONLogger()
        self.skip = skip

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self.skip(scope):
            await self.app(scope, receive, send)
            return

        status: Optional[int] = None
        length = 0

        async def send_wrapper(message: Message) -> None:
            nonlocal status, length
            if message["type"] == "http.response.start":
                status = message["status"]
            elif message["type"] == "http.response.body":
                length += len(message.get("body", b""))
            await send(message)

        start = time.perf_counter()
        await self.app(scope, receive, send_wrapper)
        duration = time.perf_counter() - start

        self.response_logger(scope, 200 if status is None else status, length, duration)
