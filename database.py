# database.py
import sqlite3
import logging
from config import DB_NAME

logger = logging.getLogger(__name__)

DEMO_FOUNDATIONS = [
    ("Songklanagarind for Disaster Relief (ม.อ. ทาดใหญ่)", "565-471106-1", "Siam Commercial Bank (SCB)", "Disaster Relief"),
    ("Thai Red Cross Society for Disaster", "045-3-04637-0", "Siam Commercial Bank (SCB)", "Disaster Relief"),
    ("Mirror Foundation (มูลนิธิกระจกเงา)", "507-4-10183-8", "Siam Commercial Bank (SCB)", "Medical"),
    ("Doing Good Foundation (มูลนิธิองค์กรกำกี)", "713-2-59590-3", "Kasikorn Bank (KBank)", "Education"),
    ("Hat Yai City Climate (Southern Network)", "018-1-23504-7", "Kasikorn Bank (KBank)", "Environment"),
]

DEMO_BLACKLIST = [
    ("0999999999", "Fake charity scam - impersonating Red Cross", "user@example.com"),
    ("0888888888", "Ponzi scheme disguised as disaster relief", "admin@truadboon.com"),
    ("0777777777", "Money laundering operation", "user@example.com"),
]


def setup_database(db_name: str = DB_NAME):
    """
    Create the registry tables.
    Only creates tables that do not exist yet.
    """
    conn = None
    try:
        conn = sqlite3.connect(db_name)
        cursor = conn.cursor()

        sql_schema = """
        CREATE TABLE IF NOT EXISTS foundations (
            foundation_id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            account_name TEXT,
            account_number TEXT NOT NULL,
            bank TEXT,
            category TEXT,
            verified INTEGER NOT NULL DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS blacklisted_accounts (
            blacklist_id INTEGER PRIMARY KEY AUTOINCREMENT,
            account_number TEXT NOT NULL,
            account_name TEXT,
            bank TEXT,
            reason TEXT,
            reported_by TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS verification_logs (
            log_id INTEGER PRIMARY KEY AUTOINCREMENT,
            account_number TEXT NOT NULL,
            account_name TEXT,
            bank TEXT,
            status TEXT NOT NULL,
            source TEXT NOT NULL DEFAULT 'BOT',
            user_id TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_foundations_account ON foundations(account_number);
        CREATE INDEX IF NOT EXISTS idx_blacklist_account ON blacklisted_accounts(account_number);
        CREATE INDEX IF NOT EXISTS idx_logs_created ON verification_logs(created_at);
        """
        cursor.executescript(sql_schema)
        conn.commit()
        logger.info(f"Database '{db_name}' set up.")
    except sqlite3.Error as e:
        logger.error(f"Error while setting up database: {e}")
        raise
    finally:
        if conn:
            conn.close()


def seed_demo_data(db_name: str = DB_NAME) -> bool:
    """Load the demo foundations and blacklist into an empty database."""
    conn = get_db_connection(db_name)
    try:
        cursor = conn.cursor()
        existing = cursor.execute("SELECT COUNT(*) FROM foundations").fetchone()[0]
        existing += cursor.execute("SELECT COUNT(*) FROM blacklisted_accounts").fetchone()[0]
        if existing:
            logger.info("Registry already has data, skipping demo seed.")
            return False

        cursor.executemany(
            "INSERT INTO foundations (name, account_number, bank, category, verified) VALUES (?, ?, ?, ?, 1)",
            DEMO_FOUNDATIONS
        )
        cursor.executemany(
            "INSERT INTO blacklisted_accounts (account_number, reason, reported_by) VALUES (?, ?, ?)",
            DEMO_BLACKLIST
        )
        conn.commit()
        logger.info(f"Seeded {len(DEMO_FOUNDATIONS)} foundations and {len(DEMO_BLACKLIST)} blacklisted accounts.")
        return True
    finally:
        conn.close()


def get_db_connection(db_name: str = DB_NAME) -> sqlite3.Connection:
    """Helper to get a DB connection (with row_factory)."""
    conn = sqlite3.connect(db_name)
    conn.row_factory = sqlite3.Row
    return conn
