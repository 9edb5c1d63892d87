"""Shared fixtures: a deterministic extraction gateway and a fixed clock."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from despensa.gateway import AcquisitionRecord, ConsumptionRecord, ExtractionGateway
from despensa.models import FoodItem, StorageType
from despensa.tracker import FoodTracker

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


class FakeGateway(ExtractionGateway):
    """Returns canned records and records every call it receives."""

    def __init__(self, acquisitions=None, consumption=None, error=None, delay=0.0):
        self.acquisitions = acquisitions or []
        self.consumption = consumption or []
        self.error = error
        self.delay = delay
        self.calls = []

    async def _answer(self, records):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(records)

    async def extract_acquisitions(self, text=None, image=None, mime_type="image/jpeg"):
        self.calls.append(("acquisitions", text, image, mime_type))
        return await self._answer(self.acquisitions)

    async def extract_consumption(self, text):
        self.calls.append(("consumption", text))
        return await self._answer(self.consumption)


def make_item(name, quantity, expires_in_days, *, value=0.0, unit="unidade", now=NOW):
    return FoodItem.create(
        name=name,
        quantity=quantity,
        unit=unit,
        storage_type=StorageType.FRIDGE,
        expiry_date=now + timedelta(days=expires_in_days),
        estimated_value=value,
        created_at=now - timedelta(days=1),
    )


def acquisition(name, quantity=1, unit="unidade", storage=StorageType.FRIDGE,
                expiry_days=7, price=5.0):
    return AcquisitionRecord(
        name=name,
        quantity=quantity,
        unit=unit,
        storage_type=storage,
        expiry_days=expiry_days,
        estimated_price=price,
    )


def consumption(name, quantity):
    return ConsumptionRecord(name=name, quantity=quantity)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def tracker(gateway):
    return FoodTracker(gateway, clock=lambda: NOW)
