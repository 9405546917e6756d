import csv
from typing import Any, Dict, Iterable, List, TextIO

from rich.table import Table

from ..utils.constants import CSV_HEADER
from .results import SummaryRow


def format_average(value: float) -> str:
    """Render an average with exactly two decimals"""
    return f"{value:.2f}"


def write_csv(rows: Iterable[SummaryRow], stream: TextIO) -> int:
    """Write the ``URL,Count,Sum,Avg`` summary as CSV

    Args:
        rows: Summary rows
        stream: Text stream to write to

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    written = 0
    for row in rows:
        writer.writerow([row.url, str(row.count), str(row.total), format_average(row.average)])
        written += 1
    return written


def build_table(rows: Iterable[SummaryRow], title: str = "Response Times") -> Table:
    """Build a rich table of summary rows"""
    table = Table(title=title)
    table.add_column("URL")
    table.add_column("Count", justify="right")
    table.add_column("Sum", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")

    for row in rows:
        table.add_row(
            row.url,
            str(row.count),
            str(row.total),
            format_average(row.average),
            str(row.fastest_ms),
            str(row.slowest_ms),
        )

    return table


def rows_to_dicts(rows: Iterable[SummaryRow]) -> List[Dict[str, Any]]:
    """Convert rows to JSON-ready dictionaries"""
    return [
        {
            "url": row.url,
            "method": row.key.method,
            "pattern": row.key.pattern,
            "count": row.count,
            "sum": row.total,
            "avg": round(row.average, 2),
            "min": row.fastest_ms,
            "max": row.slowest_ms,
        }
        for row in rows
    ]
