from typing import Optional, Protocol, runtime_checkable

from athenacli.dal.models import ExecutionStatus, ResultPage


@runtime_checkable
class RemoteQueryClient(Protocol):
    """Protocol for submit/poll/fetch style query services.

    Implementations raise ``RemoteCallError`` for transport failures and
    ``ProtocolError`` for structurally malformed responses. They must be safe
    for concurrent use by independent executions.
    """

    async def submit(
        self,
        sql: str,
        output_location: str,
        database: str,
        workgroup: Optional[str],
        idempotency_token: str,
    ) -> Optional[str]:
        """Submit a query and return the execution ID assigned by the service."""
        ...

    async def get_status(self, execution_id: str) -> ExecutionStatus:
        """Return the current status of an execution."""
        ...

    async def get_results_page(
        self, execution_id: str, continuation_token: Optional[str] = None
    ) -> ResultPage:
        """Return one page of results for a completed execution."""
        ...
