import logging
from typing import List, Optional, Tuple

from athenacli.dal.async_query_executor import RemoteQueryClient
from athenacli.dal.errors import RemoteCallError, ResultFetchError
from athenacli.dal.models import QueryResult, Row

logger = logging.getLogger(__name__)


class ResultPaginator:
    """Drain every result page of a succeeded execution into a QueryResult."""

    def __init__(self, client: RemoteQueryClient) -> None:
        self._client = client

    async def drain(self, execution_id: str) -> Tuple[List[str], List[Row]]:
        """Return the column names and all data rows of ``execution_id``."""
        result = QueryResult(
            execution_id=execution_id,
            bytes_scanned=0,
            queue_time_ms=0,
            total_execution_time_ms=0,
        )
        await self.drain_into(result)
        return result.columns, result.rows

    async def drain_into(self, result: QueryResult) -> QueryResult:
        """Append every data row of ``result.execution_id`` to ``result``.

        Columns are captured from the first page only. The first row of the
        first page repeats the column names and is dropped; later pages carry
        no header row.
        """
        execution_id = result.execution_id
        token: Optional[str] = None
        first_page = True
        page_number = 0

        while True:
            try:
                page = await self._client.get_results_page(execution_id, token)
            except RemoteCallError as exc:
                logger.error("Error getting query results for %s: %s", execution_id, exc)
                raise ResultFetchError(str(exc)) from exc
            page_number += 1

            rows = page.rows
            if first_page:
                # Statements without output (DDL) return an empty first page.
                result.columns = list(page.columns)
                rows = rows[1:]
                first_page = False

            for row in rows:
                result.append_row(list(row))

            logger.debug(
                "Read page %d of query %s (rows_read=%d)",
                page_number,
                execution_id,
                result.row_count,
            )

            if not page.continuation_token:
                return result
            token = page.continuation_token
