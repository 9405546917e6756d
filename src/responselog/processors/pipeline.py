from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from ..parsers.base import LogRecord


class ProcessingStep(ABC):
    """Base class for record processing steps"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def process(self, record: LogRecord) -> Optional[LogRecord]:
        """Process a log record

        Args:
            record: Record to process

        Returns:
            Processed record or None if record should be filtered out
        """
        raise NotImplementedError


class Pipeline:
    """Processing pipeline for log records"""

    def __init__(self, steps: Optional[Iterable[ProcessingStep]] = None):
        self.steps: List[ProcessingStep] = list(steps or [])

    def add_step(self, step: ProcessingStep) -> None:
        """Add a processing step to the pipeline"""
        self.steps.append(step)

    def process(self, record: LogRecord) -> Optional[LogRecord]:
        """Run a record through every step

        Args:
            record: Record to process

        Returns:
            Processed record or None if filtered out
        """
        current = record
        for step in self.steps:
            if current is None:
                break
            current = step.process(current)
        return current

    def run(self, records: Iterable[LogRecord]) -> List[LogRecord]:
        """Process many records, dropping the filtered ones"""
        kept = []
        for record in records:
            processed = self.process(record)
            if processed is not None:
                kept.append(processed)
        return kept

    def __len__(self) -> int:
        return len(self.steps)


class FilterStep(ProcessingStep):
    """Filter log records based on a predicate"""

    def __init__(self, name: str, predicate: Callable[[LogRecord], bool]):
        """Initialize filter step

        Args:
            name: Step name
            predicate: Function that returns True for records to keep
        """
        super().__init__(name)
        self.predicate = predicate

    def process(self, record: LogRecord) -> Optional[LogRecord]:
        """Filter record based on predicate"""
        return record if self.predicate(record) else None


def method_filter(methods: Iterable[str]) -> FilterStep:
    """Keep records whose method is one of ``methods`` (case-insensitive)"""
    wanted = {m.upper() for m in methods}
    return FilterStep(
        f"method_{'_'.join(sorted(wanted))}",
        lambda record: record.method.upper() in wanted,
    )


def status_class_filter(classes: Iterable[str]) -> FilterStep:
    """Keep records whose status falls in one of ``classes`` such as ``5xx``"""
    wanted = {c.lower() for c in classes}
    return FilterStep(
        f"status_{'_'.join(sorted(wanted))}",
        lambda record: record.status_class in wanted,
    )
