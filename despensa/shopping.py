"""Shopping list: derived replenishment entries and manual edits."""

from __future__ import annotations

from .models import ShoppingListItem, ShoppingPriority, ShoppingReason


class ShoppingList:
    """Owns the shopping list entries.

    Automatically derived entries are deduplicated by case-insensitive name;
    manual additions are not. Operations on unknown ids are silent no-ops.
    """

    def __init__(self, entries: list[ShoppingListItem] | None = None) -> None:
        self._entries: list[ShoppingListItem] = [e.copy() for e in entries or []]

    def __len__(self) -> int:
        return len(self._entries)

    def _find(self, entry_id: str) -> ShoppingListItem | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def entries(self) -> list[ShoppingListItem]:
        return [e.copy() for e in self._entries]

    def find_by_name(self, name: str) -> ShoppingListItem | None:
        key = name.lower()
        for entry in self._entries:
            if entry.key == key:
                return entry.copy()
        return None

    def add_replenishment(
        self,
        name: str,
        unit: str,
        reason: ShoppingReason,
        priority: ShoppingPriority,
    ) -> ShoppingListItem | None:
        """Append an entry unless one already exists for the name."""
        if self.find_by_name(name) is not None:
            return None
        entry = ShoppingListItem(
            name=name,
            suggested_quantity=1,
            unit=unit,
            reason=reason,
            priority=priority,
        )
        self._entries.append(entry)
        return entry.copy()

    def flag_spoiled(self, name: str, unit: str) -> ShoppingListItem:
        """Upgrade the entry for ``name`` to urgent/spoiled, creating it if needed."""
        key = name.lower()
        for entry in self._entries:
            if entry.key == key:
                entry.priority = ShoppingPriority.URGENT
                entry.reason = ShoppingReason.SPOILED
                return entry.copy()

        entry = ShoppingListItem(
            name=name,
            suggested_quantity=1,
            unit=unit,
            reason=ShoppingReason.SPOILED,
            priority=ShoppingPriority.URGENT,
        )
        self._entries.append(entry)
        return entry.copy()

    def add_manual(self, name: str) -> ShoppingListItem | None:
        if not name.strip():
            return None
        entry = ShoppingListItem(
            name=name,
            suggested_quantity=1,
            unit="unidade",
            reason=ShoppingReason.MANUAL,
            priority=ShoppingPriority.NORMAL,
        )
        self._entries.append(entry)
        return entry.copy()

    def adjust_quantity(self, entry_id: str, delta: int) -> None:
        entry = self._find(entry_id)
        if entry is not None:
            entry.suggested_quantity = max(1, entry.suggested_quantity + delta)

    def set_priority(self, entry_id: str, priority: ShoppingPriority) -> None:
        entry = self._find(entry_id)
        if entry is not None:
            entry.priority = ShoppingPriority(priority)

    def remove(self, entry_id: str) -> None:
        self._entries = [e for e in self._entries if e.id != entry_id]

    def clear(self) -> None:
        self._entries = []
