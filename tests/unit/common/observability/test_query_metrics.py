"""Tests for optional query metrics."""

from athenacli.common.observability.metrics import QueryMetrics, is_metrics_enabled


class _FakeInstrument:
    def __init__(self):
        self.points = []

    def add(self, value, attributes):
        self.points.append((value, attributes))

    def record(self, value, attributes):
        self.points.append((value, attributes))


class _FakeMeter:
    def __init__(self):
        self.instruments = {}

    def create_counter(self, name, unit="1"):
        return self.instruments.setdefault(name, _FakeInstrument())

    def create_histogram(self, name, unit="1"):
        return self.instruments.setdefault(name, _FakeInstrument())


def test_metrics_disabled_by_default(monkeypatch):
    monkeypatch.delenv("ATHENACLI_TEST_METRICS", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)

    assert is_metrics_enabled("ATHENACLI_TEST_METRICS") is False


def test_metrics_enabled_by_otlp_endpoint(monkeypatch):
    monkeypatch.delenv("ATHENACLI_TEST_METRICS", raising=False)
    monkeypatch.delenv("OTEL_DISABLE_EXPORTER", raising=False)
    monkeypatch.delenv("OTEL_METRICS_EXPORTER", raising=False)
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317")

    assert is_metrics_enabled("ATHENACLI_TEST_METRICS") is True


def test_invalid_override_disables_metrics(monkeypatch, caplog):
    monkeypatch.setenv("ATHENACLI_TEST_METRICS", "sometimes")

    assert is_metrics_enabled("ATHENACLI_TEST_METRICS") is False
    assert any("metrics disabled" in r.message for r in caplog.records)


def test_emissions_are_noops_when_disabled(monkeypatch):
    monkeypatch.setenv("ATHENACLI_TEST_METRICS", "false")
    meter = _FakeMeter()
    query_metrics = QueryMetrics("test", "ATHENACLI_TEST_METRICS", _meter=meter)

    query_metrics.record_outcome("succeeded")

    assert meter.instruments == {}


def test_emissions_when_enabled(monkeypatch):
    monkeypatch.setenv("ATHENACLI_TEST_METRICS", "true")
    meter = _FakeMeter()
    query_metrics = QueryMetrics("test", "ATHENACLI_TEST_METRICS", _meter=meter)

    query_metrics.record_transient_error("GetQueryExecution")
    query_metrics.record_outcome("failed")
    query_metrics.record_completion(row_count=2, bytes_scanned=1024, total_execution_time_ms=900)

    assert meter.instruments["athena.transient_errors"].points == [
        (1, {"operation": "GetQueryExecution"})
    ]
    assert meter.instruments["athena.queries"].points == [(1, {"outcome": "failed"})]
    assert meter.instruments["athena.rows_fetched"].points == [(2, {})]
    assert meter.instruments["athena.bytes_scanned"].points == [(1024.0, {})]
    assert meter.instruments["athena.execution_time"].points == [(900.0, {})]
