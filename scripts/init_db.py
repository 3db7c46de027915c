from __future__ import annotations

import argparse

from fieldforce.config import get_settings_module, load_settings
from fieldforce.database.bootstrap import apply_schema, ensure_demo_data, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply schema.sql to the configured database.")
    parser.add_argument("--seed", action="store_true", help="also upsert demo branches and users")
    args = parser.parse_args()

    settings = load_settings(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    if args.seed:
        ensure_demo_data(db_config)

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)}{', demo data seeded' if args.seed else ''})"
    )


if __name__ == "__main__":
    main()
