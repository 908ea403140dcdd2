"""Tests for Cassandra schema bootstrap."""

from unittest.mock import AsyncMock, Mock

import pytest

from learnease.core.database import async_cassandra
from learnease.core.database.async_cassandra import (
    AsyncCassandraConnection,
    init_async_keyspace,
    init_async_tables,
)


@pytest.fixture
def session() -> Mock:
    session = Mock()
    session.aexecute = AsyncMock()
    return session


def _executed(session: Mock) -> list[str]:
    return [call.args[0] for call in session.aexecute.await_args_list]


@pytest.mark.asyncio
async def test_tables_created_in_keyspace(session: Mock) -> None:
    await init_async_tables(session, "lk")

    statements = _executed(session)
    created = [s for s in statements if "CREATE TABLE" in s]
    for table in (
        "courses",
        "courses_by_instructor",
        "courses_by_category",
        "enrollments",
        "enrollments_by_user",
    ):
        assert any(f"lk.{table} (" in s for s in created), table
    assert all("{keyspace}" not in s for s in statements)


@pytest.mark.asyncio
async def test_keyspace_simple_strategy_outside_production(session: Mock) -> None:
    await init_async_keyspace(session, "lk")

    (statement,) = _executed(session)
    assert statement.startswith("CREATE KEYSPACE IF NOT EXISTS lk")
    assert "SimpleStrategy" in statement


@pytest.mark.asyncio
async def test_keyspace_network_topology_in_production(session: Mock, monkeypatch) -> None:
    production = Mock(is_production=True)
    monkeypatch.setattr(async_cassandra, "get_settings", lambda: production)

    await init_async_keyspace(session, "lk")

    assert "NetworkTopologyStrategy" in _executed(session)[0]


def test_not_connected_by_default() -> None:
    assert AsyncCassandraConnection.is_connected() is False
