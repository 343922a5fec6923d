import pytest

from registry import BlacklistEntry, Foundation, InMemoryRegistry, build_registry


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def memory_registry():
    return InMemoryRegistry(
        foundations=[
            Foundation(
                name="Thai Red Cross Society for Disaster",
                account_number="045-3-04637-0",
                bank="SCB",
                category="Disaster Relief",
                verified=True,
            ),
            Foundation(
                name="Pending Foundation",
                account_number="111-1-11111-1",
                bank="KBANK",
                category="Education",
                verified=False,
            ),
        ],
        blacklist=[
            BlacklistEntry(
                account_number="0999999999",
                reason="Fake charity scam",
                reported_by="user@example.com",
            ),
        ],
    )


@pytest.fixture
def sqlite_registry(tmp_path):
    return build_registry("sqlite", db_name=str(tmp_path / "registry.db"), seed=True)
