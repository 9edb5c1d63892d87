"""Waste analytics over terminal-state inventory items."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from .models import WASTE_STATUSES, FoodItem, FoodStatus


@dataclass
class WasteSummary:
    total_value: float = 0.0
    by_item: list[tuple[str, float]] = field(default_factory=list)
    consumed_count: int = 0


def _wasted(items: Iterable[FoodItem]) -> list[FoodItem]:
    return [i for i in items if i.status in WASTE_STATUSES]


def total_waste_value(items: Iterable[FoodItem]) -> float:
    """Sum of estimated value over spoiled and expired items."""
    return sum(i.estimated_value for i in _wasted(items))


def waste_by_item(items: Iterable[FoodItem]) -> list[tuple[str, float]]:
    """Waste value grouped by exact item name, largest first.

    Names are grouped case-sensitively, unlike matching elsewhere.
    """
    totals: dict[str, float] = defaultdict(float)
    for item in _wasted(items):
        totals[item.name] += item.estimated_value
    return sorted(totals.items(), key=lambda x: x[1], reverse=True)


def consumed_count(items: Iterable[FoodItem]) -> int:
    return sum(1 for i in items if i.status is FoodStatus.CONSUMED)


def summarize(items: Iterable[FoodItem]) -> WasteSummary:
    items = list(items)
    return WasteSummary(
        total_value=total_waste_value(items),
        by_item=waste_by_item(items),
        consumed_count=consumed_count(items),
    )
