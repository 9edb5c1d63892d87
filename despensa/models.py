"""Data models for food items, shopping list entries and the user profile."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum


class StorageType(str, Enum):
    OUTSIDE = "fora da geladeira"
    FRIDGE = "geladeira"
    FREEZER = "freezer"
    PANTRY = "despensa"

    @classmethod
    def parse(cls, raw: str) -> StorageType:
        """Accept either the stored value or the member name."""
        text = raw.strip()
        for member in cls:
            if text.lower() in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Tipo de armazenamento desconhecido: {raw!r}")


class FoodStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    SPOILED = "spoiled"
    CONSUMED = "consumed"


class ShoppingReason(str, Enum):
    FINISHED = "finished"
    SPOILED = "spoiled"
    MANUAL = "manual"
    EXPIRED = "expired"


class ShoppingPriority(str, Enum):
    URGENT = "Urgente"
    NORMAL = "Normal"
    LOW = "Baixa"


class UserPlan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


WASTE_STATUSES = (FoodStatus.SPOILED, FoodStatus.EXPIRED)


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FoodItem:
    """One physical batch of a food product."""

    id: str
    name: str
    initial_quantity: float
    current_quantity: float
    unit: str
    storage_type: StorageType
    expiry_date: datetime
    created_at: datetime
    status: FoodStatus = FoodStatus.ACTIVE
    estimated_value: float = 0.0

    @classmethod
    def create(
        cls,
        name: str,
        quantity: float,
        unit: str,
        storage_type: StorageType,
        expiry_date: datetime,
        *,
        estimated_value: float = 0.0,
        created_at: datetime | None = None,
    ) -> FoodItem:
        if quantity <= 0:
            raise ValueError(f"Quantidade inicial deve ser positiva: {quantity}")
        return cls(
            id=new_id(),
            name=name,
            initial_quantity=quantity,
            current_quantity=quantity,
            unit=unit,
            storage_type=storage_type,
            expiry_date=expiry_date,
            created_at=created_at or utcnow(),
            estimated_value=estimated_value,
        )

    @property
    def key(self) -> str:
        """Case-insensitive matching key."""
        return self.name.lower()

    @property
    def is_active(self) -> bool:
        return self.status is FoodStatus.ACTIVE

    def copy(self) -> FoodItem:
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "initial_quantity": self.initial_quantity,
            "current_quantity": self.current_quantity,
            "unit": self.unit,
            "storage_type": self.storage_type.value,
            "expiry_date": self.expiry_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "estimated_value": self.estimated_value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FoodItem:
        return cls(
            id=data["id"],
            name=data["name"],
            initial_quantity=float(data["initial_quantity"]),
            current_quantity=float(data["current_quantity"]),
            unit=data["unit"],
            storage_type=StorageType(data["storage_type"]),
            expiry_date=datetime.fromisoformat(data["expiry_date"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            status=FoodStatus(data["status"]),
            estimated_value=float(data["estimated_value"]),
        )


@dataclass
class ShoppingListItem:
    """A suggested replenishment entry."""

    name: str
    suggested_quantity: int = 1
    unit: str = "unidade"
    reason: ShoppingReason = ShoppingReason.MANUAL
    priority: ShoppingPriority = ShoppingPriority.NORMAL
    id: str = field(default_factory=new_id)

    @property
    def key(self) -> str:
        return self.name.lower()

    def copy(self) -> ShoppingListItem:
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "suggested_quantity": self.suggested_quantity,
            "unit": self.unit,
            "reason": self.reason.value,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ShoppingListItem:
        return cls(
            id=data["id"],
            name=data["name"],
            suggested_quantity=int(data["suggested_quantity"]),
            unit=data["unit"],
            reason=ShoppingReason(data["reason"]),
            priority=ShoppingPriority(data["priority"]),
        )


@dataclass
class UserProfile:
    name: str = ""
    plan: UserPlan = UserPlan.FREE
    alert_days_before: int = 3
