"""SQLite persistence for the inventory and the shopping list."""

from .inventory import InventoryDB
from .schema import ensure_schema
from .shopping import ShoppingListDB

__all__ = [
    "InventoryDB",
    "ShoppingListDB",
    "ensure_schema",
]
