"""Live Athena smoke test (requires AWS credentials and RUN_INTEGRATION_TESTS=1)."""

import pytest

from athenacli.dal.athena.config import AthenaConfig
from athenacli.dal.athena.orchestrator import QueryOrchestrator


@pytest.mark.integration
@pytest.mark.asyncio
async def test_select_literal_round_trip():
    orchestrator = QueryOrchestrator(AthenaConfig.from_env())

    result = await orchestrator.execute("SELECT 1 AS one, 'two' AS two")

    assert result.columns == ["one", "two"]
    assert result.rows == [["1", "two"]]
    assert result.row_count == 1
    assert result.bytes_scanned >= 0
