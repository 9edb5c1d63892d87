"""Food tracker: the single entry point that mutates inventory and shopping list."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from .analytics import WasteSummary, summarize
from .errors import GatewayError, GatewayTimeout, TrackerBusyError
from .gateway import ExtractionGateway
from .inventory import InventoryStore
from .models import (
    FoodItem,
    ShoppingListItem,
    ShoppingPriority,
    ShoppingReason,
    StorageType,
    UserProfile,
    utcnow,
)
from .shopping import ShoppingList

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome of a registration or consumption request.

    ``items`` holds the items added (registration) or used up (consumption).
    On a gateway failure ``error`` is set and nothing was changed.
    """

    items: list[FoodItem] = field(default_factory=list)
    shopping_entries: list[ShoppingListItem] = field(default_factory=list)
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def notice(self) -> str | None:
        return self.error.notice if self.error else None


class FoodTracker:
    """Coordinates the gateway, the inventory store and the shopping list.

    Every public method runs to completion without interleaving with another
    mutation; the only suspension point is the gateway call, and at most one
    gateway call may be in flight at a time.
    """

    def __init__(
        self,
        gateway: ExtractionGateway,
        inventory: InventoryStore | None = None,
        shopping: ShoppingList | None = None,
        profile: UserProfile | None = None,
        *,
        gateway_timeout: float | None = 30.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._gateway = gateway
        self.inventory = inventory if inventory is not None else InventoryStore()
        self.shopping = shopping if shopping is not None else ShoppingList()
        self.profile = profile or UserProfile()
        self._gateway_timeout = gateway_timeout
        self._clock = clock
        self._processing = False

    @property
    def processing(self) -> bool:
        """True while a gateway call is in flight."""
        return self._processing

    async def _call_gateway(self, method, *args, **kwargs):
        if self._processing:
            raise TrackerBusyError("Já existe um registro em processamento")
        self._processing = True
        try:
            return await asyncio.wait_for(
                method(*args, **kwargs), timeout=self._gateway_timeout
            )
        except asyncio.TimeoutError as e:
            raise GatewayTimeout(
                f"gateway did not answer within {self._gateway_timeout}s"
            ) from e
        finally:
            self._processing = False

    # ── Acquisition ──

    async def register_text(
        self, text: str, storage: StorageType | None = None
    ) -> OperationResult:
        """Register groceries described in free text (typed or transcribed)."""
        if not text.strip():
            return OperationResult()
        return await self._register(storage, text=text)

    async def register_image(
        self,
        data: bytes,
        mime_type: str = "image/jpeg",
        storage: StorageType | None = None,
    ) -> OperationResult:
        """Register groceries shown in a photo."""
        if not data:
            return OperationResult()
        return await self._register(storage, image=data, mime_type=mime_type)

    async def _register(
        self, storage: StorageType | None, **request
    ) -> OperationResult:
        try:
            records = await self._call_gateway(
                self._gateway.extract_acquisitions, **request
            )
        except GatewayError as e:
            logger.warning("Acquisition extraction failed: %s", e)
            return OperationResult(error=e)

        now = self._clock()
        items = [
            FoodItem.create(
                name=r.name,
                quantity=r.quantity,
                unit=r.unit,
                storage_type=storage or r.storage_type,
                expiry_date=now + timedelta(days=r.expiry_days),
                estimated_value=r.estimated_price,
                created_at=now,
            )
            for r in records
        ]
        if items:
            self.inventory.add_batch(items)
            logger.info("Registered %d item(s)", len(items))
            self.sweep(now)
        return OperationResult(items=items)

    # ── Consumption ──

    async def consume_text(self, text: str) -> OperationResult:
        """Apply a consumption statement against stock, earliest expiry first."""
        if not text.strip():
            return OperationResult()

        try:
            records = await self._call_gateway(
                self._gateway.extract_consumption, text
            )
        except GatewayError as e:
            logger.warning("Consumption extraction failed: %s", e)
            return OperationResult(error=e)

        finished: list[FoodItem] = []
        entries: list[ShoppingListItem] = []
        for record in records:
            for item in self.inventory.consume(record.name, record.quantity):
                finished.append(item)
                entry = self.shopping.add_replenishment(
                    item.name,
                    item.unit,
                    ShoppingReason.FINISHED,
                    ShoppingPriority.NORMAL,
                )
                if entry is not None:
                    entries.append(entry)

        self.sweep()
        return OperationResult(items=finished, shopping_entries=entries)

    # ── Expiry and spoilage ──

    def sweep(self, now: datetime | None = None) -> list[FoodItem]:
        """Expire overdue items and queue urgent replacements for them."""
        now = now or self._clock()
        expired = self.inventory.sweep_expired(now)
        for item in expired:
            self.shopping.add_replenishment(
                item.name,
                item.unit,
                ShoppingReason.EXPIRED,
                ShoppingPriority.URGENT,
            )
        return expired

    def mark_spoiled(self, item_id: str) -> FoodItem | None:
        item = self.inventory.mark_spoiled(item_id)
        if item is None:
            return None
        self.shopping.flag_spoiled(item.name, item.unit)
        logger.info("Marked %r as spoiled", item.name)
        return item

    # ── Shopping list edits ──

    def add_shopping_item(self, name: str) -> ShoppingListItem | None:
        return self.shopping.add_manual(name)

    def adjust_shopping_quantity(self, entry_id: str, delta: int) -> None:
        self.shopping.adjust_quantity(entry_id, delta)

    def set_shopping_priority(
        self, entry_id: str, priority: ShoppingPriority
    ) -> None:
        self.shopping.set_priority(entry_id, priority)

    def remove_shopping_item(self, entry_id: str) -> None:
        self.shopping.remove(entry_id)

    def clear_shopping_list(self) -> None:
        self.shopping.clear()

    # ── Read-only views ──

    def visible_items(self) -> list[FoodItem]:
        return self.inventory.visible_items()

    def expiring_soon(self, now: datetime | None = None) -> list[FoodItem]:
        return self.inventory.expiring_soon(
            self.profile.alert_days_before, now or self._clock()
        )

    def waste_summary(self) -> WasteSummary:
        return summarize(self.inventory.items())
