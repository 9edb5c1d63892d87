"""In-memory inventory store with expiry sweeping and consumption allocation."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from .models import FoodItem, FoodStatus

logger = logging.getLogger(__name__)

_DAY = timedelta(days=1)


class InventoryStore:
    """Owns every FoodItem ever registered.

    Items are never deleted; they keep their terminal status and a zero
    quantity as history. Callers only ever receive copies.
    """

    def __init__(self, items: list[FoodItem] | None = None) -> None:
        self._items: list[FoodItem] = [i.copy() for i in items or []]

    def __len__(self) -> int:
        return len(self._items)

    def _find(self, item_id: str) -> FoodItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add_batch(self, items: list[FoodItem]) -> None:
        self._items.extend(i.copy() for i in items)

    def get(self, item_id: str) -> FoodItem | None:
        item = self._find(item_id)
        return item.copy() if item else None

    def items(self) -> list[FoodItem]:
        return [i.copy() for i in self._items]

    def visible_items(self) -> list[FoodItem]:
        """Items still in stock, plus expired ones awaiting attention."""
        return [
            i.copy()
            for i in self._items
            if i.current_quantity > 0 or i.status is FoodStatus.EXPIRED
        ]

    def expiring_soon(self, alert_days: int, now: datetime) -> list[FoodItem]:
        """Return in-stock items whose expiry falls within ``alert_days``."""
        soon = [
            i.copy()
            for i in self._items
            if i.current_quantity > 0 and is_near_expiry(i, now, alert_days)
        ]
        return sorted(soon, key=lambda i: i.expiry_date)

    def sweep_expired(self, now: datetime) -> list[FoodItem]:
        """Expire active, in-stock items whose expiry date is before ``now``.

        Returns:
            Copies of the items expired by this pass. Re-running with the same
            ``now`` returns an empty list.
        """
        expired: list[FoodItem] = []
        for item in self._items:
            if item.current_quantity > 0 and item.is_active and item.expiry_date < now:
                item.status = FoodStatus.EXPIRED
                item.current_quantity = 0
                expired.append(item.copy())
        if expired:
            logger.info("Sweep expired %d item(s)", len(expired))
        return expired

    def mark_spoiled(self, item_id: str) -> FoodItem | None:
        """Zero the item and set it spoiled. Unknown ids are ignored."""
        item = self._find(item_id)
        if item is None:
            return None
        item.current_quantity = 0
        item.status = FoodStatus.SPOILED
        return item.copy()

    def consume(self, name: str, quantity: float) -> list[FoodItem]:
        """Take ``quantity`` of ``name`` from stock, earliest expiry first.

        Whatever cannot be covered by the matching items is dropped.

        Returns:
            Copies of items that were used up by this call.
        """
        key = name.lower()
        matches = sorted(
            (i for i in self._items if i.key == key and i.current_quantity > 0),
            key=lambda i: i.expiry_date,
        )

        remaining = quantity
        finished: list[FoodItem] = []
        for item in matches:
            if remaining <= 0:
                break
            take = min(item.current_quantity, remaining)
            item.current_quantity -= take
            remaining -= take
            if item.current_quantity == 0:
                item.status = FoodStatus.CONSUMED
                finished.append(item.copy())

        if remaining > 0:
            logger.debug(
                "Dropped %.3g of %r beyond available stock", remaining, name
            )
        return finished


def days_left(item: FoodItem, now: datetime) -> int:
    """Whole days until expiry, rounded up."""
    return math.ceil((item.expiry_date - now) / _DAY)


def is_near_expiry(item: FoodItem, now: datetime, alert_days: int) -> bool:
    return 0 < days_left(item, now) <= alert_days


def is_expired(item: FoodItem, now: datetime) -> bool:
    return item.status is FoodStatus.EXPIRED or days_left(item, now) <= 0
