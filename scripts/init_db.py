"""Apply database/schema.sql and check that every mutabaah table exists."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mutabaah.mutabaah.database.bootstrap import apply_schema, list_tables

REQUIRED_TABLES = (
    "employees",
    "mutabaah_activations",
    "employee_monthly_activities",
    "monthly_submissions",
    "tadarus_requests",
    "missed_prayer_requests",
    "notifications",
)


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = sorted(set(REQUIRED_TABLES) - set(list_tables(db_config)))
    if missing:
        print(f"FAILED: {target} is missing tables: {', '.join(missing)}")
        return 1
    print(f"OK: mutabaah schema ready on {target} ({len(REQUIRED_TABLES)} tables)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
