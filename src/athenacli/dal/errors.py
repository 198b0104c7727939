"""Error taxonomy for Athena query execution."""

from typing import Optional


class AthenaQueryError(Exception):
    """Base class for every failure surfaced by the query orchestrator."""


class ConfigurationError(AthenaQueryError):
    """Required connection settings are missing or invalid."""


class RemoteCallError(AthenaQueryError):
    """A transport or service error raised by a remote Athena API call."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class SubmissionError(AthenaQueryError):
    """The service rejected or failed to acknowledge a query submission."""


class PollError(AthenaQueryError):
    """The transient-error budget was exhausted while polling for status."""

    def __init__(self, execution_id: str, attempts: int) -> None:
        super().__init__(
            f"Gave up polling query {execution_id} after {attempts} consecutive API errors"
        )
        self.execution_id = execution_id
        self.attempts = attempts


class ProtocolError(AthenaQueryError):
    """A response violated the expected state or field contract."""


class ResultFetchError(AthenaQueryError):
    """A remote error occurred while fetching a page of results."""


class QueryFailedError(AthenaQueryError):
    """The service reports the query itself failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Query failed: {reason}")
        self.reason = reason


class QueryCancelledError(AthenaQueryError):
    """The service reports the query was cancelled."""

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__("Query cancelled" if not reason else f"Query cancelled: {reason}")
        self.reason = reason
