import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "mutabaah_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MUTABAAH_LOCKING_MODE = os.getenv("MUTABAAH_LOCKING_MODE", "weekly")
TIME_OFFSET_SECONDS = float(os.getenv("TIME_OFFSET_SECONDS", "0"))
TIME_DRIFT_THRESHOLD_SECONDS = float(os.getenv("TIME_DRIFT_THRESHOLD_SECONDS", "300"))
# Measure the offset against MySQL NOW() on every check; the DB session time zone must match this host
TIME_SYNC_WITH_DB = bool(int(os.getenv("TIME_SYNC_WITH_DB", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
