import hashlib
from typing import Awaitable, Optional

from athenacli.common.observability.metrics import is_metrics_enabled

PROVIDER = "athena"


def trace_enabled() -> bool:
    """Return True when query tracing is enabled or OTEL exporter defaults apply."""
    return is_metrics_enabled("ATHENACLI_TRACE_QUERIES")


def _hash_sql(sql: str) -> str:
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()


async def trace_query_operation(
    name: str,
    operation: Awaitable,
    sql: Optional[str] = None,
    execution_id: Optional[str] = None,
):
    """Trace a remote Athena operation with OTEL when enabled."""
    if not trace_enabled():
        return await operation

    from opentelemetry import trace

    tracer = trace.get_tracer("athenacli")
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("db.provider", PROVIDER)
        span.set_attribute("db.execution_model", "async")
        if execution_id:
            span.set_attribute("db.execution_id", execution_id)
        if sql:
            span.set_attribute("db.statement_hash", _hash_sql(sql))
        try:
            result = await operation
            span.set_attribute("db.status", "ok")
            return result
        except Exception as exc:
            span.set_attribute("db.status", "error")
            span.set_attribute("db.error_type", type(exc).__name__)
            raise
