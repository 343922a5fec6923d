from datetime import datetime, timedelta, timezone

import pytest

from database import seed_demo_data
from registry import AuditLogEntry, InMemoryRegistry, SqliteRegistry, build_registry

pytestmark = pytest.mark.anyio


async def test_sqlite_exact_and_normalized_lookup(sqlite_registry):
    exact = await sqlite_registry.find_foundation("565-471106-1")
    normalized = await sqlite_registry.find_foundation("5654711061")

    assert exact.name == "Songklanagarind for Disaster Relief (ม.อ. ทาดใหญ่)"
    assert normalized == exact
    assert normalized.verified is True


async def test_sqlite_blacklist_lookup(sqlite_registry):
    entry = await sqlite_registry.find_blacklisted("0888888888")

    assert entry.reason == "Ponzi scheme disguised as disaster relief"
    assert entry.reported_by == "admin@truadboon.com"
    assert await sqlite_registry.find_blacklisted("0812345678") is None


async def test_sqlite_logs_round_trip(sqlite_registry):
    await sqlite_registry.append_log(AuditLogEntry(account_number="0999999999", status="DANGER", user_id="7"))
    await sqlite_registry.append_log(AuditLogEntry(account_number="1234567890", status="WARNING"))
    await sqlite_registry.append_log(AuditLogEntry(
        account_number="5555555555",
        status="WARNING",
        created_at=datetime.now(timezone.utc) - timedelta(days=30),
    ))

    recent = await sqlite_registry.get_logs(days=7)
    danger = await sqlite_registry.get_logs(days=7, status="DANGER")

    assert {log.account_number for log in recent} == {"0999999999", "1234567890"}
    assert [log.user_id for log in danger] == ["7"]


async def test_sqlite_list_foundations(sqlite_registry):
    foundations = await sqlite_registry.list_foundations()

    assert len(foundations) == 5
    assert all(f.verified for f in foundations)


async def test_seed_only_fills_an_empty_database(sqlite_registry):
    assert seed_demo_data(sqlite_registry.db_name) is False


async def test_memory_log_filters():
    registry = InMemoryRegistry()
    await registry.append_log(AuditLogEntry(account_number="1", status="SAFE"))
    await registry.append_log(AuditLogEntry(
        account_number="2",
        status="SAFE",
        created_at=datetime.now(timezone.utc) - timedelta(days=10),
    ))
    await registry.append_log(AuditLogEntry(account_number="3", status="WARNING"))

    assert [log.account_number for log in await registry.get_logs(days=7)] == ["1", "3"]
    assert [log.account_number for log in await registry.get_logs(days=30, status="SAFE")] == ["1", "2"]


async def test_build_registry_from_config(tmp_path):
    assert isinstance(build_registry("memory", seed=True), InMemoryRegistry)
    assert isinstance(build_registry("sqlite", db_name=str(tmp_path / "x.db"), seed=False), SqliteRegistry)

    with pytest.raises(ValueError):
        build_registry("postgres")


async def test_demo_memory_registry_matches_seed():
    registry = build_registry("memory", seed=True)

    assert (await registry.find_foundation("0181235047")).category == "Environment"
    assert (await registry.find_blacklisted("0777777777")).reason == "Money laundering operation"


async def test_huge_day_window_is_capped():
    registry = InMemoryRegistry()
    await registry.append_log(AuditLogEntry(account_number="1", status="SAFE"))

    logs = await registry.get_logs(days=99999999999999)

    assert [log.account_number for log in logs] == ["1"]


async def test_sqlite_huge_day_window_is_capped(sqlite_registry):
    await sqlite_registry.append_log(AuditLogEntry(account_number="1", status="SAFE"))

    logs = await sqlite_registry.get_logs(days=99999999999999)

    assert [log.account_number for log in logs] == ["1"]
