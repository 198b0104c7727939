import asyncio
import logging
import time
import uuid
from typing import List, Optional

from athenacli.common.observability.metrics import athena_metrics
from athenacli.dal.async_query_executor import RemoteQueryClient
from athenacli.dal.async_utils import with_timeout
from athenacli.dal.athena.config import AthenaConfig
from athenacli.dal.athena.paginator import ResultPaginator
from athenacli.dal.athena.poller import StatusPoller
from athenacli.dal.errors import (
    AthenaQueryError,
    QueryCancelledError,
    QueryFailedError,
    RemoteCallError,
    SubmissionError,
)
from athenacli.dal.models import QueryResult

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Run one SQL statement end to end: submit, poll, then drain results."""

    def __init__(
        self,
        config: AthenaConfig,
        client: Optional[RemoteQueryClient] = None,
        poller: Optional[StatusPoller] = None,
        paginator: Optional[ResultPaginator] = None,
    ) -> None:
        """Initialize the orchestrator.

        Without an explicit ``client`` a boto3-backed ``AthenaQueryClient`` is
        created for ``config.region``.
        """
        if client is None:
            from athenacli.dal.athena.client import AthenaQueryClient

            client = AthenaQueryClient(config.region, https_proxy=config.https_proxy)
        self._config = config
        self._client = client
        self._poller = poller or StatusPoller(client)
        self._paginator = paginator or ResultPaginator(client)

    @property
    def config(self) -> AthenaConfig:
        return self._config

    async def execute(self, sql: str) -> QueryResult:
        """Execute ``sql`` and return its complete result set.

        Every call submits a new execution with a fresh idempotency token. When
        ``query_timeout_seconds`` is configured and expires, ``asyncio.TimeoutError``
        propagates; the execution itself keeps running in Athena.
        """
        submitted: List[str] = []
        timeout_seconds = self._config.query_timeout_seconds

        async def _on_timeout() -> None:
            logger.warning(
                "Query %s exceeded %ss timeout; the execution keeps running in Athena.",
                submitted[0] if submitted else "<not submitted>",
                timeout_seconds,
            )

        try:
            result = await with_timeout(
                self._execute(sql, submitted), timeout_seconds, on_timeout=_on_timeout
            )
        except QueryFailedError:
            athena_metrics.record_outcome("failed")
            raise
        except QueryCancelledError:
            athena_metrics.record_outcome("cancelled")
            raise
        except AthenaQueryError:
            athena_metrics.record_outcome("error")
            raise
        except asyncio.TimeoutError:
            athena_metrics.record_outcome("timeout")
            raise

        athena_metrics.record_outcome("succeeded")
        athena_metrics.record_completion(
            result.row_count, result.bytes_scanned, result.total_execution_time_ms
        )
        return result

    async def _execute(self, sql: str, submitted: List[str]) -> QueryResult:
        started_at = time.monotonic()
        execution_id = await self._submit(sql)
        submitted.append(execution_id)

        status = await self._poller.poll(execution_id)
        result = QueryResult.from_statistics(execution_id, status.statistics)
        await self._paginator.drain_into(result)

        logger.debug(
            "Query %s complete: %d rows in %.2fs",
            execution_id,
            result.row_count,
            time.monotonic() - started_at,
        )
        return result

    async def _submit(self, sql: str) -> str:
        try:
            execution_id = await self._client.submit(
                sql,
                output_location=self._config.output_location,
                database=self._config.database,
                workgroup=self._config.workgroup,
                idempotency_token=str(uuid.uuid4()),
            )
        except RemoteCallError as exc:
            logger.error("Error starting query execution: %s", exc)
            raise SubmissionError(str(exc)) from exc

        if not execution_id:
            raise SubmissionError("StartQueryExecution returned no query execution id")
        logger.debug("Submitted query execution %s", execution_id)
        return execution_id
