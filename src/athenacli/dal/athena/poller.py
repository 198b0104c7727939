"""Status polling for submitted Athena queries."""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from athenacli.common.observability.metrics import athena_metrics
from athenacli.dal.async_query_executor import RemoteQueryClient
from athenacli.dal.errors import (
    PollError,
    ProtocolError,
    QueryCancelledError,
    QueryFailedError,
    RemoteCallError,
)
from athenacli.dal.models import ExecutionState, ExecutionStatus, format_duration_ms

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_RETRY_BACKOFF_SECONDS = 0.25
DEFAULT_MAX_TRANSIENT_ERRORS = 5

# Non-terminal states in the order Athena moves through them.
_PROGRESS_ORDER = {ExecutionState.QUEUED: 0, ExecutionState.RUNNING: 1}

Sleep = Callable[[float], Awaitable[None]]


class StatusPoller:
    """Poll an execution until it reaches a terminal state.

    Transport failures are retried up to ``max_transient_errors`` times per
    ``poll`` call, with a short backoff between attempts. QUEUED and RUNNING
    responses sleep for ``poll_interval_seconds`` without consuming that budget.
    There is no overall deadline; callers impose one by cancelling the task.
    """

    def __init__(
        self,
        client: RemoteQueryClient,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        max_transient_errors: int = DEFAULT_MAX_TRANSIENT_ERRORS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._retry_backoff_seconds = retry_backoff_seconds
        self._max_transient_errors = max_transient_errors
        self._sleep = sleep

    async def poll(self, execution_id: str) -> ExecutionStatus:
        """Wait for ``execution_id`` to succeed and return its final status.

        Raises:
            PollError: More than ``max_transient_errors`` status calls failed.
            QueryFailedError: The service reports the query failed.
            QueryCancelledError: The service reports the query was cancelled.
            ProtocolError: The service reported an unknown state, omitted fields
                required for the reported state, or moved backwards.
        """
        started_at = time.monotonic()
        error_count = 0
        furthest_progress = -1

        while True:
            try:
                status = await self._client.get_status(execution_id)
            except RemoteCallError as exc:
                error_count += 1
                athena_metrics.record_transient_error("GetQueryExecution")
                if error_count > self._max_transient_errors:
                    logger.error("Error getting query execution status: %s", exc)
                    raise PollError(execution_id, error_count) from exc
                logger.debug(
                    "Transient error polling %s (%d/%d): %s",
                    execution_id,
                    error_count,
                    self._max_transient_errors,
                    exc,
                )
                await self._sleep(self._retry_backoff_seconds)
                continue

            state = _classify(status)

            if state is ExecutionState.SUCCEEDED:
                if status.statistics is None:
                    raise ProtocolError(
                        f"Query {execution_id} succeeded without execution statistics"
                    )
                return status

            if state is ExecutionState.FAILED:
                logger.error("Query %s FAILED: %s", execution_id, status.reason_text)
                raise QueryFailedError(status.reason_text)

            if state is ExecutionState.CANCELLED:
                logger.error("Query %s CANCELLED: %s", execution_id, status.reason_text)
                raise QueryCancelledError(status.reason_text)

            progress = _PROGRESS_ORDER[state]
            if progress < furthest_progress:
                raise ProtocolError(
                    f"Query {execution_id} moved back to {state.value} after running"
                )
            furthest_progress = progress

            elapsed_ms = int((time.monotonic() - started_at) * 1000)
            logger.debug(
                "Query %s is %s (%s elapsed)",
                execution_id,
                state.value,
                format_duration_ms(elapsed_ms),
            )
            await self._sleep(self._poll_interval_seconds)


def _classify(status: ExecutionStatus) -> ExecutionState:
    try:
        state = ExecutionState(status.state)
    except ValueError:
        raise ProtocolError(
            f"Query {status.execution_id} reported unknown state {status.state!r}"
        ) from None

    if state in (ExecutionState.FAILED, ExecutionState.CANCELLED) and status.reason_text is None:
        raise ProtocolError(
            f"Query {status.execution_id} reported {state.value} without a state change reason"
        )
    return state
