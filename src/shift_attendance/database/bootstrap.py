from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")

# (shift_id, shift_name, start, end)
DEFAULT_SHIFTS = (
    ("shift_am", "Morning", "06:00", "14:00"),
    ("shift_pm", "Afternoon", "14:00", "22:00"),
    ("shift_night", "Night", "22:00", "06:00"),
)

_COMMENT_LINE = re.compile(r"(?m)^\s*--.*$")


def split_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quoted literals, dropping ``--`` comment lines."""
    sql = _COMMENT_LINE.sub("", sql)
    current: list[str] = []
    quote: Optional[str] = None
    for ch in sql:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            statement = "".join(current).strip()
            current = []
            if statement:
                yield statement
            continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Union[dict, DBConfig], *, schema_path: Union[str, Path, None] = None) -> int:
    """Create the database and every table; safe to run repeatedly. Returns statements executed."""
    config = db_config if isinstance(db_config, DBConfig) else DBConfig.from_mapping(db_config)
    conn_factory = DatabaseConnection(config)
    ensure_database_exists(conn_factory)

    sql = Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8")
    executed = 0
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for statement in split_sql_statements(sql):
            cur.execute(statement)
            executed += 1
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s@%s/%s (%s statements)", config.user, config.host, config.database, executed)
    return executed


def seed_defaults(db_config: Union[dict, DBConfig]) -> None:
    """Insert the config row and the three default rotating shifts when missing."""
    config = db_config if isinstance(db_config, DBConfig) else DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("INSERT IGNORE INTO attendance_config (config_id) VALUES (1)")
        for shift_id, name, start, end in DEFAULT_SHIFTS:
            cur.execute(
                """
                INSERT IGNORE INTO rotating_shifts (shift_id, shift_name, start_time, end_time, is_active)
                VALUES (%s, %s, %s, %s, 1)
                """,
                (shift_id, name, start, end),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Default attendance configuration seeded")
