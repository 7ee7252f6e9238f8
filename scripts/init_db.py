from __future__ import annotations

import importlib

from dotenv import load_dotenv

from shift_attendance.database.bootstrap import apply_schema, seed_defaults
from shift_attendance.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    executed = apply_schema(db_config)
    seed_defaults(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(statements={executed})"
    )


if __name__ == "__main__":
    main()
