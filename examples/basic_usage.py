import io
from pathlib import Path

from rich.console import Console

from responselog.core.aggregator import Aggregator, rank_rows, sort_rows
from responselog.core.ingestor import LogIngestor
from responselog.core.report import build_table, write_csv
from responselog.processors.pipeline import FilterStep, Pipeline, status_class_filter

SAMPLE_LOG = """
{"time":"2024-02-14T15:48:31Z","src":"rl","status":200,"http_2xx":1,"len":512,"ms":12,"method":"GET","path":"/users/42"}
{"time":"2024-02-14T15:48:32Z","src":"rl","status":200,"http_2xx":1,"len":498,"ms":30,"method":"GET","path":"/users/7"}
{"time":"2024-02-14T15:48:33Z","src":"app","msg":"cache warmed"}
{"time":"2024-02-14T15:48:34Z","src":"rl","status":500,"http_5xx":1,"len":0,"ms":250,"method":"POST","path":"/orders/550e8400-e29b-41d4-a716-446655440000"}
{"time":"2024-02-14T15:48:35Z","src":"rl","status":201,"http_2xx":1,"len":64,"ms":41,"method":"POST","path":"/orders"}
""".strip()


def main():
    """Main function demonstrating different usage scenarios"""
    print("\nExample 1: CSV summary")
    print("-" * 50)
    simple_summary()

    print("\nExample 2: Filtering and ranking")
    print("-" * 50)
    filtered_summary()


def simple_summary():
    """Summarize a log file and print the CSV report"""
    log_file = Path("temp_logs.json")
    log_file.write_text(SAMPLE_LOG)

    try:
        result = LogIngestor().ingest(log_file)
        rows = Aggregator().aggregate(result.records)
        output = io.StringIO()
        write_csv(sort_rows(rows, "url"), output)
        print(output.getvalue())
        print(f"Skipped {result.skipped_lines} line(s) from other sources")
    finally:
        log_file.unlink()


def filtered_summary():
    """Keep slow successful requests and show the slowest groups"""
    pipeline = Pipeline()
    pipeline.add_step(status_class_filter(["2xx"]))
    pipeline.add_step(FilterStep("slow_requests", lambda record: record.duration_ms >= 20))

    result = LogIngestor().ingest(io.BytesIO(SAMPLE_LOG.encode()))
    records = pipeline.run(result.records)
    rows = rank_rows(Aggregator().aggregate(records), top=2)

    Console().print(build_table(rows, title="Slow successful requests"))


if __name__ == "__main__":
    main()
