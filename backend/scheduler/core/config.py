import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://localhost:5432/scheduler")
SQL_ECHO = _env_bool("SQL_ECHO", False)

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Location bootstrap is explicit (see scripts/seed_locations.py); the engine
# never creates a location on its own.
DEFAULT_LOCATION_ID = os.getenv("DEFAULT_LOCATION_ID") or None
LOCATION_TIMEZONE = os.getenv("LOCATION_TIMEZONE", "Australia/Sydney")
DEFAULT_LOCATION_CAPACITY = int(os.getenv("DEFAULT_LOCATION_CAPACITY", 20))

# Extra one-off closures, e.g. "2026-07-15=Facility Maintenance;2026-09-01=Staff Day"
CLOSURE_DATES = os.getenv("CLOSURE_DATES", "")

# Webhook-side retry policy for order materialization
MATERIALIZE_MAX_RETRIES = int(os.getenv("MATERIALIZE_MAX_RETRIES", 3))
MATERIALIZE_RETRY_DELAY = float(os.getenv("MATERIALIZE_RETRY_DELAY", 2.0))
