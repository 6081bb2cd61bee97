from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DATABASE_DIRECTIVE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def strip_database_directives(sql: str) -> str:
    """Drop ``CREATE DATABASE``/``USE`` lines and ``--`` comments; the target DB comes from config."""
    return _DATABASE_DIRECTIVE.sub("", _LINE_COMMENT.sub("", sql))


def split_statements(sql: str) -> Iterator[str]:
    """Split on ``;`` outside of quoted literals."""
    start = 0
    quote = ""
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in "'\"":
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **config.connect_kwargs(with_database=with_database))


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    with closing(_connect(config, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> int:
    """Create the database and tables. Safe to re-run; returns the statement count."""
    ensure_database_exists(db_config)
    sql = strip_database_directives(Path(schema_path).read_text(encoding="utf-8"))

    count = 0
    with closing(_connect(DBConfig.from_mapping(db_config))) as conn:
        cur = conn.cursor()
        for stmt in split_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()

    logger.info("Applied %d statements from %s", count, schema_path)
    return count


def list_tables(db_config: dict) -> list[str]:
    with closing(_connect(DBConfig.from_mapping(db_config))) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
