"""Shopping list snapshot persistence."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..models import ShoppingListItem
from .schema import ensure_schema


class ShoppingListDB:
    """Manages the shopping_list table."""

    def __init__(self, db_path: str | Path = "~/.config/despensa/despensa.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def save_all(self, entries: list[ShoppingListItem]) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM shopping_list")
            conn.executemany(
                """INSERT INTO shopping_list
                   (id, name, suggested_quantity, unit, reason, priority, position)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        e.id,
                        e.name,
                        e.suggested_quantity,
                        e.unit,
                        e.reason.value,
                        e.priority.value,
                        pos,
                    )
                    for pos, e in enumerate(entries)
                ],
            )

    def load_all(self) -> list[ShoppingListItem]:
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM shopping_list ORDER BY position"
        ).fetchall()
        return [ShoppingListItem.from_dict(dict(r)) for r in rows]
