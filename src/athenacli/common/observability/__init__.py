"""Shared observability helpers."""

from athenacli.common.observability.metrics import athena_metrics

__all__ = ["athena_metrics"]
