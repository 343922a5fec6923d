# registry.py
"""
Trusted-foundation registry, fraud blacklist and verification audit log.

Two implementations behind the same async interface:
  InMemoryRegistry - plain dicts, for tests and demo runs
  SqliteRegistry   - the sqlite database from database.py

Lookups try an exact match on the raw and the normalized account number
first, then fall back to comparing normalized forms of every stored record,
since stored numbers are formatted inconsistently (dashes, spaces).
Foundation lookups return a verified record whenever any match is verified.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import config
from database import DEMO_BLACKLIST, DEMO_FOUNDATIONS, get_db_connection, seed_demo_data, setup_database
from validation import normalize_account_number

logger = logging.getLogger(__name__)


@dataclass
class Foundation:
    name: str
    account_number: str
    bank: Optional[str] = None
    category: Optional[str] = None
    verified: bool = False
    account_name: Optional[str] = None


@dataclass
class BlacklistEntry:
    account_number: str
    bank: Optional[str] = None
    reason: Optional[str] = None
    reported_by: Optional[str] = None
    account_name: Optional[str] = None


@dataclass
class AuditLogEntry:
    account_number: str
    status: str
    source: str = "BOT"
    user_id: Optional[str] = None
    account_name: Optional[str] = None
    bank: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Registry:
    """Interface consumed by the verification engine and the bot handlers."""

    async def find_foundation(self, account_number: str) -> Optional[Foundation]:
        raise NotImplementedError

    async def find_blacklisted(self, account_number: str) -> Optional[BlacklistEntry]:
        raise NotImplementedError

    async def append_log(self, entry: AuditLogEntry) -> None:
        raise NotImplementedError

    async def list_foundations(self, verified_only: bool = True) -> List[Foundation]:
        raise NotImplementedError

    async def get_logs(self, days: int = 7, status: Optional[str] = None) -> List[AuditLogEntry]:
        raise NotImplementedError


def _candidates(records, account_number: str) -> list:
    """Exact matches on raw / normalized key first, then normalized-scan matches."""
    normalized = normalize_account_number(account_number)
    keys = (account_number, normalized)
    exact = [r for r in records if r.account_number in keys]
    loose = [
        r for r in records
        if r.account_number not in keys and normalize_account_number(r.account_number) == normalized
    ]
    return exact + loose


def _pick(candidates: list, prefer_verified: bool = False):
    if prefer_verified:
        for record in candidates:
            if record.verified:
                return record
    return candidates[0] if candidates else None


def _clamp_days(days: int) -> int:
    return max(0, min(int(days), config.LOGS_MAX_DAYS))


class InMemoryRegistry(Registry):

    def __init__(self, foundations: List[Foundation] = None, blacklist: List[BlacklistEntry] = None):
        self._foundations: Dict[str, Foundation] = {}
        self._blacklist: Dict[str, BlacklistEntry] = {}
        self.logs: List[AuditLogEntry] = []
        for foundation in foundations or []:
            self.add_foundation(foundation)
        for entry in blacklist or []:
            self.add_blacklisted(entry)

    def add_foundation(self, foundation: Foundation):
        self._foundations[foundation.account_number] = foundation

    def add_blacklisted(self, entry: BlacklistEntry):
        self._blacklist[entry.account_number] = entry

    async def find_foundation(self, account_number: str) -> Optional[Foundation]:
        return _pick(_candidates(self._foundations.values(), account_number), prefer_verified=True)

    async def find_blacklisted(self, account_number: str) -> Optional[BlacklistEntry]:
        direct = self._blacklist.get(account_number)
        if direct:
            return direct
        return _pick(_candidates(self._blacklist.values(), account_number))

    async def append_log(self, entry: AuditLogEntry) -> None:
        self.logs.append(entry)

    async def list_foundations(self, verified_only: bool = True) -> List[Foundation]:
        return [f for f in self._foundations.values() if f.verified or not verified_only]

    async def get_logs(self, days: int = 7, status: Optional[str] = None) -> List[AuditLogEntry]:
        since = datetime.now(timezone.utc) - timedelta(days=_clamp_days(days))
        return [
            log for log in self.logs
            if log.created_at >= since and (not status or log.status == status)
        ]


def _row_to_foundation(row) -> Foundation:
    return Foundation(
        name=row["name"],
        account_number=row["account_number"],
        bank=row["bank"],
        category=row["category"],
        verified=bool(row["verified"]),
        account_name=row["account_name"],
    )


def _row_to_blacklist(row) -> BlacklistEntry:
    return BlacklistEntry(
        account_number=row["account_number"],
        bank=row["bank"],
        reason=row["reason"],
        reported_by=row["reported_by"],
        account_name=row["account_name"],
    )


def _row_to_log(row) -> AuditLogEntry:
    created_at = datetime.strptime(row["created_at"], "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    return AuditLogEntry(
        account_number=row["account_number"],
        status=row["status"],
        source=row["source"],
        user_id=row["user_id"],
        account_name=row["account_name"],
        bank=row["bank"],
        created_at=created_at,
    )


class SqliteRegistry(Registry):
    """sqlite3 is blocking, so every query runs in a worker thread with its own connection."""

    def __init__(self, db_name: str = config.DB_NAME):
        self.db_name = db_name

    def _lookup(self, table: str, order_by: str, account_number: str, to_record, prefer_verified: bool = False):
        normalized = normalize_account_number(account_number)
        conn = get_db_connection(self.db_name)
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM {table} WHERE account_number IN (?, ?) ORDER BY {order_by}",
                (account_number, normalized)
            )
            exact = [to_record(row) for row in cursor.fetchall()]
            if exact and (not prefer_verified or any(r.verified for r in exact)):
                return _pick(exact, prefer_verified)

            # A verified record may still be stored under a differently formatted number
            cursor.execute(f"SELECT * FROM {table} ORDER BY {order_by}")
            records = [to_record(row) for row in cursor.fetchall()]
            return _pick(_candidates(records, account_number), prefer_verified)
        finally:
            conn.close()

    def _find_foundation(self, account_number: str) -> Optional[Foundation]:
        return self._lookup("foundations", "verified DESC, foundation_id", account_number,
                            _row_to_foundation, prefer_verified=True)

    def _find_blacklisted(self, account_number: str) -> Optional[BlacklistEntry]:
        return self._lookup("blacklisted_accounts", "blacklist_id", account_number, _row_to_blacklist)


    def _append_log(self, entry: AuditLogEntry):
        conn = get_db_connection(self.db_name)
        try:
            conn.execute(
                """
                INSERT INTO verification_logs
                (account_number, account_name, bank, status, source, user_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.account_number,
                    entry.account_name,
                    entry.bank,
                    entry.status,
                    entry.source,
                    entry.user_id,
                    entry.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
                )
            )
            conn.commit()
        finally:
            conn.close()

    def _list_foundations(self, verified_only: bool) -> List[Foundation]:
        conn = get_db_connection(self.db_name)
        try:
            sql = "SELECT * FROM foundations"
            if verified_only:
                sql += " WHERE verified = 1"
            rows = conn.execute(sql + " ORDER BY name").fetchall()
            return [_row_to_foundation(row) for row in rows]
        finally:
            conn.close()

    def _get_logs(self, days: int, status: Optional[str]) -> List[AuditLogEntry]:
        conn = get_db_connection(self.db_name)
        try:
            sql = "SELECT * FROM verification_logs WHERE created_at >= datetime('now', ?)"
            params = [f"-{_clamp_days(days)} days"]
            if status:
                sql += " AND status = ?"
                params.append(status)
            rows = conn.execute(sql + " ORDER BY created_at DESC, log_id DESC", params).fetchall()
            return [_row_to_log(row) for row in rows]
        finally:
            conn.close()

    async def find_foundation(self, account_number: str) -> Optional[Foundation]:
        return await asyncio.to_thread(self._find_foundation, account_number)

    async def find_blacklisted(self, account_number: str) -> Optional[BlacklistEntry]:
        return await asyncio.to_thread(self._find_blacklisted, account_number)

    async def append_log(self, entry: AuditLogEntry) -> None:
        await asyncio.to_thread(self._append_log, entry)

    async def list_foundations(self, verified_only: bool = True) -> List[Foundation]:
        return await asyncio.to_thread(self._list_foundations, verified_only)

    async def get_logs(self, days: int = 7, status: Optional[str] = None) -> List[AuditLogEntry]:
        return await asyncio.to_thread(self._get_logs, days, status)


def demo_registry() -> InMemoryRegistry:
    return InMemoryRegistry(
        foundations=[
            Foundation(name=name, account_number=number, bank=bank, category=category, verified=True)
            for name, number, bank, category in DEMO_FOUNDATIONS
        ],
        blacklist=[
            BlacklistEntry(account_number=number, reason=reason, reported_by=reported_by)
            for number, reason, reported_by in DEMO_BLACKLIST
        ],
    )


def build_registry(backend: str = None, db_name: str = None, seed: bool = None) -> Registry:
    """Pick the registry implementation from configuration."""
    backend = (backend or config.REGISTRY_BACKEND).lower()
    seed = config.SEED_DEMO_DATA if seed is None else seed

    if backend == "memory":
        logger.info("Using in-memory registry")
        return demo_registry() if seed else InMemoryRegistry()

    if backend == "sqlite":
        db_name = db_name or config.DB_NAME
        setup_database(db_name)
        if seed:
            seed_demo_data(db_name)
        logger.info(f"Using sqlite registry at '{db_name}'")
        return SqliteRegistry(db_name)

    raise ValueError(f"Unknown REGISTRY_BACKEND: {backend}")
