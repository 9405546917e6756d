import io

from rich.console import Console

from responselog.core.report import build_table, format_average, rows_to_dicts, write_csv
from responselog.core.results import PatternKey, SummaryRow


def make_rows():
    return [
        SummaryRow(PatternKey("GET", "/a/{integer}"), 2, 40, 20.0, slowest_ms=30, fastest_ms=10),
        SummaryRow(PatternKey("HTTP", "/x,y"), 3, 4, 4 / 3, slowest_ms=2, fastest_ms=1),
    ]


class TestCsv:
    """Test the canonical CSV output"""

    def test_header_and_rows(self):
        out = io.StringIO()

        written = write_csv(make_rows(), out)

        assert written == 2
        assert out.getvalue().splitlines() == [
            "URL,Count,Sum,Avg",
            "GET /a/{integer},2,40,20.00",
            '"HTTP /x,y",3,4,1.33',
        ]

    def test_header_only_for_no_rows(self):
        out = io.StringIO()
        write_csv([], out)
        assert out.getvalue() == "URL,Count,Sum,Avg\n"


def test_format_average():
    assert format_average(0) == "0.00"
    assert format_average(2 / 3) == "0.67"
    assert format_average(20) == "20.00"


def test_build_table():
    table = build_table(make_rows())
    console = Console(file=io.StringIO(), width=120)
    console.print(table)
    text = console.file.getvalue()

    assert "GET /a/{integer}" in text
    assert "20.00" in text
    assert table.row_count == 2


def test_rows_to_dicts():
    data = rows_to_dicts(make_rows())

    assert data[0] == {
        "url": "GET /a/{integer}",
        "method": "GET",
        "pattern": "/a/{integer}",
        "count": 2,
        "sum": 40,
        "avg": 20.0,
        "min": 10,
        "max": 30,
    }
    assert data[1]["avg"] == 1.33
