"""Load the demo organisation (admin, reviewer chain, two employees).

The schema is applied first when it is not there yet.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mutabaah.mutabaah.database.bootstrap import apply_schema, apply_seed_sql, ensure_database_exists, list_tables


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_database_exists(db_config)
    if "employees" not in list_tables(db_config):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    print(
        "OK: demo organisation seeded into "
        f"{db_config.get('database')} (login as ADM001, MTR001 or EMP001)"
    )


if __name__ == "__main__":
    main()
