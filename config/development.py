import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "mutabaah_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "weekly" or "monthly"; both currently allow edits in the running month only
MUTABAAH_LOCKING_MODE = os.getenv("MUTABAAH_LOCKING_MODE", "weekly")

# Correction applied to the server clock, and how much drift is tolerated
TIME_OFFSET_SECONDS = float(os.getenv("TIME_OFFSET_SECONDS", "0"))
TIME_DRIFT_THRESHOLD_SECONDS = float(os.getenv("TIME_DRIFT_THRESHOLD_SECONDS", "300"))
# Measure the offset against MySQL NOW() on every check; the DB session time zone must match this host
TIME_SYNC_WITH_DB = bool(int(os.getenv("TIME_SYNC_WITH_DB", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
