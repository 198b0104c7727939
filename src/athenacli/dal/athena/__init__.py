"""Athena-backed query execution components."""

from .client import AthenaQueryClient
from .config import AthenaConfig
from .orchestrator import QueryOrchestrator
from .paginator import ResultPaginator
from .poller import StatusPoller

__all__ = [
    "AthenaConfig",
    "AthenaQueryClient",
    "QueryOrchestrator",
    "ResultPaginator",
    "StatusPoller",
]
