"""Unit test environment helpers."""

import pytest


@pytest.fixture(autouse=True)
def _no_telemetry_export(monkeypatch):
    """Keep metrics and tracing off unless a test opts in."""
    for name in (
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "ATHENACLI_METRICS_ENABLED",
        "ATHENACLI_TRACE_QUERIES",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _no_aws_credentials_lookup(monkeypatch):
    """Prevent unit tests from picking up real AWS profiles."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    yield
