import asyncio
import io
import json
from datetime import datetime, timezone

import pytest
from fastapi import FastAPI, Response
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from responselog.parsers.json_parser import ResponseLogParser
from responselog.web.middleware import (
    JSONLogger,
    ResponseLoggerMiddleware,
    format_log_message,
    header_value,
    skip_health_endpoint,
    skip_paths,
)

BODY = "<html>\n<head>\n<title>Example</title>\n</head>\n<body>\nExample\n</body></html>"


def fixed_clock():
    return datetime(2024, 2, 14, 15, 48, 31, tzinfo=timezone.utc)


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def client(stream):
    app = FastAPI()

    @app.get("/index.html")
    async def index():
        return PlainTextResponse(BODY)

    @app.get("/created")
    async def created():
        return Response(content=b"abc", status_code=201)

    @app.get("/missing")
    async def missing():
        return Response(content=b"", status_code=404)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.add_middleware(
        ResponseLoggerMiddleware,
        response_logger=JSONLogger(headers=["X-Request-Id"], stream=stream, clock=fixed_clock),
    )
    return TestClient(app)


def logged_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestMiddleware:
    """Test the response logger around a FastAPI app"""

    def test_logs_status_length_and_path(self, client, stream):
        response = client.get("/index.html")

        assert response.status_code == 200
        assert response.text == BODY
        (line,) = logged_lines(stream)
        assert line["src"] == "rl"
        assert line["status"] == 200
        assert line["http_2xx"] == 1
        assert line["len"] == len(BODY)
        assert line["method"] == "GET"
        assert line["path"] == "/index.html"
        assert line["time"] == "2024-02-14T15:48:31Z"
        assert isinstance(line["ms"], int) and line["ms"] >= 0

    def test_logs_explicit_status(self, client, stream):
        client.get("/created")
        client.get("/missing")

        first, second = logged_lines(stream)
        assert (first["status"], first["http_2xx"], first["len"]) == (201, 1, 3)
        assert (second["status"], second["http_4xx"], second["len"]) == (404, 1, 0)

    def test_health_endpoint_not_logged(self, client, stream):
        assert client.get("/health").status_code == 200
        assert stream.getvalue() == ""

    def test_header_fields(self, client, stream):
        client.get("/index.html", headers={"X-Request-Id": "req-1"})
        client.get("/index.html")

        first, second = logged_lines(stream)
        assert first["X-Request-Id"] == "req-1"
        assert second["X-Request-Id"] == ""

    def test_logged_lines_parse_back(self, client, stream):
        client.get("/missing")

        record = ResponseLogParser().parse_line(stream.getvalue().splitlines()[0])

        assert record.status == 404
        assert record.path == "/missing"


class TestRawASGI:
    """Test behavior that needs a hand-written ASGI app"""

    def run(self, middleware, scope):
        sent = []

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message):
            sent.append(message)

        asyncio.run(middleware(scope, receive, send))
        return sent

    def test_default_status_is_200(self):
        calls = []

        async def app(scope, receive, send):
            await send({"type": "http.response.body", "body": b"hello"})
            await send({"type": "http.response.body", "body": b" world"})

        middleware = ResponseLoggerMiddleware(app, response_logger=lambda *args: calls.append(args))
        sent = self.run(middleware, {"type": "http", "method": "GET", "path": "/x", "headers": []})

        assert len(sent) == 2
        (scope, status, length, duration), = calls
        assert status == 200
        assert length == len(b"hello world")
        assert duration >= 0

    def test_non_http_scope_passes_through(self):
        calls = []
        seen = []

        async def app(scope, receive, send):
            seen.append(scope["type"])

        middleware = ResponseLoggerMiddleware(app, response_logger=lambda *args: calls.append(args))
        self.run(middleware, {"type": "lifespan"})

        assert seen == ["lifespan"]
        assert calls == []


class TestFormatLogMessage:
    """Test the JSON line format"""

    def test_field_order_and_values(self):
        line = format_log_message(fixed_clock, "GET", "/a/1", 503, 42, 0.0129, {"X-Id": "7"})

        assert line.endswith("}\n")
        assert line == (
            '{"time":"2024-02-14T15:48:31Z","src":"rl","status":503,"http_5xx":1,'
            '"len":42,"ms":12,"method":"GET","path":"/a/1","X-Id":"7"}\n'
        )

    def test_control_characters_stripped(self):
        line = format_log_message(fixed_clock, "GE\nT", '/a"\tb\\', 200, 0, 0)
        data = json.loads(line)

        assert data["method"] == "GET"
        assert data["path"] == '/a"b\\'

    def test_status_class_for_unusual_codes(self):
        assert '"http_0xx":1' in format_log_message(fixed_clock, "GET", "/", 50, 0, 0)
        assert '"http_1xx":1' in format_log_message(fixed_clock, "GET", "/", 101, 0, 0)


def test_header_value():
    scope = {"headers": [(b"x-request-id", b"abc"), (b"x-request-id", b"def")]}
    assert header_value(scope, "X-Request-Id") == "abc"
    assert header_value(scope, "Missing") == ""


def test_skip_predicates():
    assert skip_health_endpoint({"path": "/health"})
    assert not skip_health_endpoint({"path": "/health/deep"})
    skip = skip_paths(["/ping", "/ready"])
    assert skip({"path": "/ready"})
    assert not skip({"path": "/"})
