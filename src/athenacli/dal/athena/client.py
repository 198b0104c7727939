import asyncio
import logging
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from athenacli.dal.errors import ConfigurationError, ProtocolError, RemoteCallError
from athenacli.dal.models import ExecutionStatistics, ExecutionStatus, ResultPage
from athenacli.dal.tracing import trace_query_operation

logger = logging.getLogger(__name__)

_STATISTIC_FIELDS = (
    "DataScannedInBytes",
    "QueryQueueTimeInMillis",
    "TotalExecutionTimeInMillis",
)


class AthenaQueryClient:
    """RemoteQueryClient backed by the boto3 Athena API.

    boto3 calls are blocking, so each one runs in a worker thread. The
    underlying boto3 client is thread-safe and shared by every execution.
    """

    def __init__(self, region: str, https_proxy: Optional[str] = None) -> None:
        """Create the boto3 client, routing through ``https_proxy`` when given."""
        import boto3
        from botocore.config import Config

        client_config = Config(proxies={"https": https_proxy}) if https_proxy else None
        try:
            self._client = boto3.client("athena", region_name=region, config=client_config)
        except BotoCoreError as exc:
            raise ConfigurationError(f"Unable to create Athena client: {exc}") from exc
        self._region = region

    async def submit(
        self,
        sql: str,
        output_location: str,
        database: str,
        workgroup: Optional[str],
        idempotency_token: str,
    ) -> Optional[str]:
        """Start a query execution and return its ID, if the service assigned one."""
        kwargs: Dict[str, Any] = {
            "QueryString": sql,
            "ClientRequestToken": idempotency_token,
            "QueryExecutionContext": {"Database": database},
            "ResultConfiguration": {"OutputLocation": output_location},
        }
        if workgroup:
            kwargs["WorkGroup"] = workgroup
        response = await trace_query_operation(
            "athena.query.submit",
            self._call("StartQueryExecution", self._client.start_query_execution, **kwargs),
            sql=sql,
        )
        return response.get("QueryExecutionId")

    async def get_status(self, execution_id: str) -> ExecutionStatus:
        """Fetch and parse the current execution status."""
        response = await trace_query_operation(
            "athena.query.poll",
            self._call(
                "GetQueryExecution",
                self._client.get_query_execution,
                QueryExecutionId=execution_id,
            ),
            execution_id=execution_id,
        )
        return parse_execution_status(execution_id, response)

    async def get_results_page(
        self, execution_id: str, continuation_token: Optional[str] = None
    ) -> ResultPage:
        """Fetch and parse one page of query results."""
        kwargs: Dict[str, Any] = {"QueryExecutionId": execution_id}
        if continuation_token:
            kwargs["NextToken"] = continuation_token
        response = await trace_query_operation(
            "athena.query.fetch",
            self._call("GetQueryResults", self._client.get_query_results, **kwargs),
            execution_id=execution_id,
        )
        return parse_result_page(response)

    async def _call(self, operation: str, method, **kwargs) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(method, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            logger.debug("Athena %s call failed in %s: %s", operation, self._region, exc)
            raise RemoteCallError(operation, str(exc)) from exc


def parse_execution_status(execution_id: str, response: Dict[str, Any]) -> ExecutionStatus:
    """Build an ExecutionStatus from a GetQueryExecution payload."""
    try:
        execution = response["QueryExecution"]
        state = execution["Status"]["State"]
    except (KeyError, TypeError) as exc:
        raise ProtocolError(f"Malformed status response for query {execution_id}") from exc

    reported_id = execution.get("QueryExecutionId")
    if reported_id is not None and reported_id != execution_id:
        raise ProtocolError(
            f"Status response for query {execution_id} reported execution {reported_id}"
        )

    return ExecutionStatus(
        execution_id=execution_id,
        state=state,
        reason_text=execution["Status"].get("StateChangeReason"),
        statistics=_parse_statistics(execution_id, execution.get("Statistics")),
    )


def _parse_statistics(
    execution_id: str, statistics: Optional[Dict[str, Any]]
) -> Optional[ExecutionStatistics]:
    # Athena reports partial statistics while a query is running.
    if not statistics or any(statistics.get(name) is None for name in _STATISTIC_FIELDS):
        return None
    values = [statistics[name] for name in _STATISTIC_FIELDS]
    if any(not isinstance(value, int) or value < 0 for value in values):
        raise ProtocolError(f"Invalid statistics for query {execution_id}: {values}")
    bytes_scanned, queue_time_ms, total_execution_time_ms = values
    return ExecutionStatistics(
        bytes_scanned=bytes_scanned,
        queue_time_ms=queue_time_ms,
        total_execution_time_ms=total_execution_time_ms,
    )


def parse_result_page(response: Dict[str, Any]) -> ResultPage:
    """Build a ResultPage from a GetQueryResults payload.

    Cells are kept as display strings; a NULL cell becomes the empty string.
    """
    try:
        result_set = response["ResultSet"]
        column_info = result_set["ResultSetMetadata"]["ColumnInfo"]
        columns = [column["Name"] for column in column_info]
        rows = [
            [datum.get("VarCharValue", "") for datum in row["Data"]]
            for row in result_set["Rows"]
        ]
    except (KeyError, TypeError, AttributeError) as exc:
        raise ProtocolError("Malformed result page") from exc

    return ResultPage(
        columns=columns,
        rows=rows,
        continuation_token=response.get("NextToken") or None,
    )
