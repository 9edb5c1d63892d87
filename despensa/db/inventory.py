"""Food item snapshot persistence."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..models import FoodItem
from .schema import ensure_schema

_COLUMNS = (
    "id", "name", "initial_quantity", "current_quantity", "unit",
    "storage_type", "expiry_date", "created_at", "status", "estimated_value",
)


class InventoryDB:
    """Manages the food_items table."""

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

    def save_all(self, items: list[FoodItem]) -> None:
        """Replace the stored inventory with ``items`` in one transaction."""
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM food_items")
            conn.executemany(
                f"""INSERT INTO food_items ({", ".join(_COLUMNS)}, position)
                    VALUES ({", ".join("?" * len(_COLUMNS))}, ?)""",
                [
                    (*(item.to_dict()[c] for c in _COLUMNS), pos)
                    for pos, item in enumerate(items)
                ],
            )

    def load_all(self) -> list[FoodItem]:
        """Return every stored item in registration order."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM food_items ORDER BY position"
        ).fetchall()
        return [FoodItem.from_dict(dict(r)) for r in rows]
