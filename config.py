# config.py
import os
from dotenv import load_dotenv
load_dotenv()


def _require_env(name):
    """Get required environment variable or raise error."""
    val = os.environ.get(name)
    if not val:
        raise RuntimeError(f"Missing required environment variable: {name}. See .env.example")
    return val


def get_bot_token():
    """Bot token is only needed when the bot actually starts."""
    return _require_env('BOT_TOKEN')


# === Bot Configuration ===
DB_NAME = os.environ.get('DB_NAME', 'truadboon.db')
ADMIN_USER_IDS = [int(x) for x in os.environ.get('ADMIN_USER_IDS', '').split(',') if x.strip()]
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# === Registry ===
# 'sqlite' = persistent store, 'memory' = in-process maps (tests / demo)
REGISTRY_BACKEND = os.environ.get('REGISTRY_BACKEND', 'sqlite').lower()
# Applied to each foundation / blacklist lookup
REGISTRY_TIMEOUT_SECONDS = float(os.environ.get('REGISTRY_TIMEOUT_SECONDS', '5'))
# Load the demo foundations + blacklist into an empty registry on startup
SEED_DEMO_DATA = os.environ.get('SEED_DEMO_DATA', 'true').lower() == 'true'

# === Audit Log ===
AUDIT_SOURCE = os.environ.get('AUDIT_SOURCE', 'BOT')
LOG_RETENTION_DAYS = int(os.environ.get('LOG_RETENTION_DAYS', '7'))
LOGS_PAGE_SIZE = int(os.environ.get('LOGS_PAGE_SIZE', '20'))
LOGS_MAX_DAYS = int(os.environ.get('LOGS_MAX_DAYS', '3650'))
