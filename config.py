import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./pantry_credits.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./pantry_credits.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Credit amounts
    SIGNUP_BONUS_CREDITS = data.get("SIGNUP_BONUS_CREDITS", 25)
    PRO_MONTHLY_CREDITS = data.get("PRO_MONTHLY_CREDITS", 40)
    POWER_MONTHLY_CREDITS = data.get("POWER_MONTHLY_CREDITS", 100)
    CREDIT_PACKS = data.get("CREDIT_PACKS", {"credits_10": 10, "credits_30": 30, "credits_75": 75})
    MAX_CREDIT_PACK = data.get("MAX_CREDIT_PACK", 500)  # Largest credits_<N> accepted without a table entry

    # Subscription platform entitlement identifiers
    PRO_ENTITLEMENT_ID = data.get("PRO_ENTITLEMENT_ID", "pantry-chef Pro")
    POWER_ENTITLEMENT_ID = data.get("POWER_ENTITLEMENT_ID", "pantry-chef Power")
    ENTITLEMENT_STALE_HOURS = data.get("ENTITLEMENT_STALE_HOURS", 24)

    # Creator payouts
    MINIMUM_CREATOR_PAYOUT = str(data.get("MINIMUM_CREATOR_PAYOUT", "10.00"))
    PAYOUT_ENABLED = bool(data.get("PAYOUT_ENABLED", True))
    PAYOUT_INTERVAL_SECONDS = data.get("PAYOUT_INTERVAL_SECONDS", 86400)  # Daily

    # Ledger Reconciliation Configuration
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily

    LEDGER_ALERT_WEBHOOK = data.get("LEDGER_ALERT_WEBHOOK", None)
    REQUEST_ALERT_TIMEOUT_SECONDS = data.get("REQUEST_ALERT_TIMEOUT_SECONDS", 2.0)  # Alerts sent while a webhook waits for its ack
