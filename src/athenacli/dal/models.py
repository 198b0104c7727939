from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

Row = List[str]


class ExecutionState(str, Enum):
    """Athena query execution lifecycle states."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Return True when no further transitions are expected."""
        return self in (ExecutionState.SUCCEEDED, ExecutionState.FAILED, ExecutionState.CANCELLED)


@dataclass(frozen=True)
class QueryExecution:
    """Identifier of one submitted query."""

    execution_id: str


@dataclass(frozen=True)
class ExecutionStatistics:
    """Finalized metrics reported for an execution."""

    bytes_scanned: int
    queue_time_ms: int
    total_execution_time_ms: int


@dataclass(frozen=True)
class ExecutionStatus:
    """One status report for an execution.

    ``state`` holds the raw value sent by the service so that unknown values can
    be reported as protocol errors by the poller rather than at parse time.
    """

    execution_id: str
    state: str
    reason_text: Optional[str] = None
    statistics: Optional[ExecutionStatistics] = None


@dataclass(frozen=True)
class ResultPage:
    """One page of tabular output."""

    columns: List[str]
    rows: List[Row]
    continuation_token: Optional[str] = None


@dataclass
class QueryResult:
    """Rows and statistics collected for one successful execution."""

    execution_id: str
    bytes_scanned: int
    queue_time_ms: int
    total_execution_time_ms: int
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    row_count: int = 0

    @classmethod
    def from_statistics(cls, execution_id: str, statistics: ExecutionStatistics) -> "QueryResult":
        """Create an empty result seeded with the terminal execution statistics."""
        return cls(
            execution_id=execution_id,
            bytes_scanned=statistics.bytes_scanned,
            queue_time_ms=statistics.queue_time_ms,
            total_execution_time_ms=statistics.total_execution_time_ms,
        )

    def append_row(self, row: Row) -> None:
        self.rows.append(row)
        self.row_count += 1

    def data_scanned(self) -> str:
        """Return the scanned byte count in the largest fitting decimal unit."""
        return format_bytes(self.bytes_scanned)

    def total_time(self) -> str:
        """Return the total execution time as a compact duration string."""
        return format_duration_ms(self.total_execution_time_ms)


_BYTE_UNITS = ("KB", "MB", "GB", "TB", "PB")
_DURATION_UNITS = (("d", 86_400_000), ("h", 3_600_000), ("m", 60_000), ("s", 1_000), ("ms", 1))


def format_bytes(num_bytes: int) -> str:
    """Format a byte count, e.g. ``1024`` -> ``1.02 KB``."""
    if num_bytes < 1000:
        return f"{num_bytes} B"
    value = float(num_bytes)
    unit = "B"
    for unit in _BYTE_UNITS:
        value /= 1000
        if value < 1000:
            break
    return f"{value:.2f} {unit}"


def format_duration_ms(duration_ms: int) -> str:
    """Format milliseconds, e.g. ``61500`` -> ``1m 1s 500ms``."""
    if duration_ms <= 0:
        return "0s"
    parts = []
    remaining = duration_ms
    for suffix, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{suffix}")
    return " ".join(parts)
