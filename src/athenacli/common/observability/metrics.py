"""Optional low-cardinality metrics for Athena query executions."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from opentelemetry import metrics

from athenacli.common.config.env import get_env_bool

logger = logging.getLogger(__name__)


def is_otel_exporter_configured() -> bool:
    """Return True when OTEL exporter environment indicates external export is configured."""
    if get_env_bool("OTEL_DISABLE_EXPORTER", False):
        return False

    endpoint = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip()
    if (os.getenv("OTEL_METRICS_EXPORTER") or "").strip().lower() == "none":
        return False
    return bool(endpoint)


def is_metrics_enabled(enabled_env_var: str) -> bool:
    """Resolve enablement from an explicit env override, else from OTEL exporter config."""
    raw = os.getenv(enabled_env_var)
    if raw is not None:
        try:
            return get_env_bool(enabled_env_var, False) is True
        except ValueError:
            logger.warning("Invalid %s value '%s'; metrics disabled.", enabled_env_var, raw)
            return False
    return is_otel_exporter_configured()


@dataclass
class QueryMetrics:
    """Counters and histograms describing query lifecycles.

    Every emission is a no-op unless ``enabled_env_var`` (or an OTLP exporter)
    turns metrics on. Emission failures are logged at debug level and never
    interrupt query execution.
    """

    meter_name: str
    enabled_env_var: str
    _meter: Any = None
    _instruments: dict[str, Any] = field(default_factory=dict)

    def _instrument(self, kind: str, name: str, unit: str):
        instrument = self._instruments.get(name)
        if instrument is None:
            if self._meter is None:
                self._meter = metrics.get_meter(self.meter_name)
            factory = (
                self._meter.create_counter if kind == "counter" else self._meter.create_histogram
            )
            instrument = factory(name=name, unit=unit)
            self._instruments[name] = instrument
        return instrument

    def _emit(
        self, kind: str, name: str, value: float, unit: str, attributes: Dict[str, str]
    ) -> None:
        if not is_metrics_enabled(self.enabled_env_var):
            return
        try:
            instrument = self._instrument(kind, name, unit)
            if kind == "counter":
                instrument.add(int(value), attributes)
            else:
                instrument.record(float(value), attributes)
        except Exception as exc:
            logger.debug("Metric emission failed for %s: %s", name, exc)

    def record_transient_error(self, operation: str) -> None:
        """Count a retried transport failure."""
        self._emit("counter", "athena.transient_errors", 1, "1", {"operation": operation})

    def record_outcome(self, outcome: str) -> None:
        """Count a finished execution by outcome (succeeded, failed, cancelled, error)."""
        self._emit("counter", "athena.queries", 1, "1", {"outcome": outcome})

    def record_completion(
        self, row_count: int, bytes_scanned: int, total_execution_time_ms: Optional[int]
    ) -> None:
        """Record volume and latency of a successful execution."""
        self._emit("counter", "athena.rows_fetched", row_count, "1", {})
        self._emit("histogram", "athena.bytes_scanned", bytes_scanned, "By", {})
        if total_execution_time_ms is not None:
            self._emit(
                "histogram", "athena.execution_time", total_execution_time_ms, "ms", {}
            )


athena_metrics = QueryMetrics(
    meter_name="athenacli",
    enabled_env_var="ATHENACLI_METRICS_ENABLED",
)
