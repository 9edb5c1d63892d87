"""Tests for FoodTracker: registration, consumption, spoilage and sweeps."""

import asyncio
from datetime import timedelta

import pytest

from conftest import NOW, FakeGateway, acquisition, consumption, make_item
from despensa.errors import (
    GatewayMalformedResponse,
    GatewayTimeout,
    GatewayUnavailable,
    TrackerBusyError,
)
from despensa.inventory import InventoryStore
from despensa.models import (
    FoodStatus,
    ShoppingPriority,
    ShoppingReason,
    StorageType,
    UserProfile,
)
from despensa.tracker import FoodTracker


def _tracker_with(gateway, *items, **kwargs):
    return FoodTracker(gateway, InventoryStore(list(items)), clock=lambda: NOW, **kwargs)


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_text_adds_items(self, tracker, gateway):
        gateway.acquisitions = [
            acquisition("Leite", 2, "litro", StorageType.FRIDGE, 7, 9.0),
            acquisition("Arroz", 5, "kg", StorageType.PANTRY, 180, 25.0),
        ]

        result = await tracker.register_text("2 litros de leite e 5kg de arroz")

        assert result.ok
        assert [i.name for i in result.items] == ["Leite", "Arroz"]
        leite = tracker.inventory.get(result.items[0].id)
        assert leite.initial_quantity == leite.current_quantity == 2
        assert leite.status is FoodStatus.ACTIVE
        assert leite.expiry_date == NOW + timedelta(days=7)
        assert leite.created_at == NOW
        assert leite.estimated_value == 9.0
        assert gateway.calls == [
            ("acquisitions", "2 litros de leite e 5kg de arroz", None, "image/jpeg")
        ]

    @pytest.mark.asyncio
    async def test_register_blank_text_skips_gateway(self, tracker, gateway):
        result = await tracker.register_text("   ")
        assert result.ok
        assert result.items == []
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_register_image(self, tracker, gateway):
        gateway.acquisitions = [acquisition("Banana", 6)]
        result = await tracker.register_image(b"\x89PNG...", mime_type="image/png")

        assert len(result.items) == 1
        assert gateway.calls[0][2] == b"\x89PNG..."
        assert gateway.calls[0][3] == "image/png"

    @pytest.mark.asyncio
    async def test_storage_override_wins(self, tracker, gateway):
        gateway.acquisitions = [
            acquisition("Carne", storage=StorageType.FRIDGE),
            acquisition("Batata", storage=StorageType.OUTSIDE),
        ]
        result = await tracker.register_text("carne e batata", storage=StorageType.FREEZER)
        assert {i.storage_type for i in result.items} == {StorageType.FREEZER}

    @pytest.mark.asyncio
    async def test_without_override_uses_inferred_storage(self, tracker, gateway):
        gateway.acquisitions = [acquisition("Batata", storage=StorageType.OUTSIDE)]
        result = await tracker.register_text("batata")
        assert result.items[0].storage_type is StorageType.OUTSIDE

    @pytest.mark.asyncio
    async def test_confirmed_empty_result(self, tracker, gateway):
        result = await tracker.register_text("nada")
        assert result.ok
        assert result.items == []
        assert len(tracker.inventory) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [GatewayUnavailable("down"), GatewayMalformedResponse("junk")]
    )
    async def test_gateway_failure_leaves_inventory_untouched(self, error):
        existing = make_item("Leite", 1, 7)
        gateway = FakeGateway(acquisitions=[acquisition("Pão")], error=error)
        tracker = _tracker_with(gateway, existing)

        result = await tracker.register_text("pão")

        assert not result.ok
        assert result.error is error
        assert result.notice == error.notice
        assert [i.id for i in tracker.inventory.items()] == [existing.id]
        assert not tracker.processing

    @pytest.mark.asyncio
    async def test_timeout_is_a_distinct_error(self):
        gateway = FakeGateway(acquisitions=[acquisition("Pão")], delay=0.5)
        tracker = _tracker_with(gateway, gateway_timeout=0.01)

        result = await tracker.register_text("pão")

        assert isinstance(result.error, GatewayTimeout)
        assert len(tracker.inventory) == 0

    @pytest.mark.asyncio
    async def test_one_gateway_call_at_a_time(self):
        gateway = FakeGateway(acquisitions=[acquisition("Pão")], delay=0.05)
        tracker = _tracker_with(gateway)

        first = asyncio.create_task(tracker.register_text("pão"))
        await asyncio.sleep(0)
        assert tracker.processing
        with pytest.raises(TrackerBusyError):
            await tracker.consume_text("comi pão")

        result = await first
        assert len(result.items) == 1
        assert not tracker.processing
        assert len(gateway.calls) == 1


class TestConsume:
    @pytest.mark.asyncio
    async def test_spills_into_later_batch(self):
        a = make_item("Leite", 1, 7, unit="litro")
        b = make_item("Leite", 0.5, 2, unit="litro")
        gateway = FakeGateway(consumption=[consumption("leite", 1)])
        tracker = _tracker_with(gateway, a, b)

        result = await tracker.consume_text("tomei um litro de leite")

        assert [i.id for i in result.items] == [b.id]
        assert tracker.inventory.get(b.id).status is FoodStatus.CONSUMED
        assert tracker.inventory.get(a.id).current_quantity == 0.5
        assert tracker.inventory.get(a.id).status is FoodStatus.ACTIVE

        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].name == "Leite"
        assert entries[0].unit == "litro"
        assert entries[0].reason is ShoppingReason.FINISHED
        assert entries[0].priority is ShoppingPriority.NORMAL
        assert result.shopping_entries == entries

    @pytest.mark.asyncio
    async def test_small_amount_only_touches_earliest(self):
        later = make_item("Iogurte", 4, 9)
        sooner = make_item("Iogurte", 4, 3)
        gateway = FakeGateway(consumption=[consumption("iogurte", 1)])
        tracker = _tracker_with(gateway, later, sooner)

        await tracker.consume_text("comi um iogurte")

        assert tracker.inventory.get(sooner.id).current_quantity == 3
        assert tracker.inventory.get(later.id).current_quantity == 4
        assert tracker.shopping.entries() == []

    @pytest.mark.asyncio
    async def test_over_consumption_is_lenient(self):
        a = make_item("Ovo", 6, 10)
        b = make_item("Ovo", 6, 12)
        gateway = FakeGateway(consumption=[consumption("ovo", 20)])
        tracker = _tracker_with(gateway, a, b)

        result = await tracker.consume_text("usei 20 ovos")

        assert result.ok
        assert len(result.items) == 2
        for item in tracker.inventory.items():
            assert item.current_quantity == 0
            assert item.status is FoodStatus.CONSUMED
        assert len(tracker.shopping.entries()) == 1

    @pytest.mark.asyncio
    async def test_existing_entry_is_not_duplicated(self):
        item = make_item("Café", 1, 30)
        gateway = FakeGateway(consumption=[consumption("café", 1)])
        tracker = _tracker_with(gateway, item)
        tracker.shopping.flag_spoiled("CAFÉ", "pacote")

        await tracker.consume_text("acabou o café")

        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].reason is ShoppingReason.SPOILED

    @pytest.mark.asyncio
    async def test_several_pairs_in_one_response(self):
        leite = make_item("Leite", 1, 5)
        pao = make_item("Pão", 2, 3)
        gateway = FakeGateway(
            consumption=[consumption("leite", 0.5), consumption("pão", 2)]
        )
        tracker = _tracker_with(gateway, leite, pao)

        result = await tracker.consume_text("meio litro de leite e dois pães")

        assert [i.id for i in result.items] == [pao.id]
        assert tracker.inventory.get(leite.id).current_quantity == 0.5

    @pytest.mark.asyncio
    async def test_blank_text_skips_gateway(self, tracker, gateway):
        result = await tracker.consume_text("")
        assert result.ok
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_gateway_failure(self):
        item = make_item("Leite", 1, 5)
        gateway = FakeGateway(
            consumption=[consumption("leite", 1)], error=GatewayUnavailable("down")
        )
        tracker = _tracker_with(gateway, item)

        result = await tracker.consume_text("tomei leite")

        assert isinstance(result.error, GatewayUnavailable)
        assert tracker.inventory.get(item.id).current_quantity == 1
        assert tracker.shopping.entries() == []


class TestSpoilage:
    def test_mark_spoiled_creates_urgent_entry(self, gateway):
        item = make_item("Alface", 1, 4)
        tracker = _tracker_with(gateway, item)

        spoiled = tracker.mark_spoiled(item.id)

        assert spoiled.current_quantity == 0
        assert spoiled.status is FoodStatus.SPOILED
        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].priority is ShoppingPriority.URGENT
        assert entries[0].reason is ShoppingReason.SPOILED

    def test_two_spoilages_same_name_single_entry(self, gateway):
        a = make_item("Tomate", 3, 4)
        b = make_item("tomate", 2, 6)
        tracker = _tracker_with(gateway, a, b)

        tracker.mark_spoiled(a.id)
        tracker.mark_spoiled(b.id)

        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].priority is ShoppingPriority.URGENT

    def test_spoilage_upgrades_lower_priority_entry(self, gateway):
        item = make_item("Leite", 1, 4)
        tracker = _tracker_with(gateway, item)
        manual = tracker.add_shopping_item("leite")
        tracker.set_shopping_priority(manual.id, ShoppingPriority.LOW)

        tracker.mark_spoiled(item.id)

        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].id == manual.id
        assert entries[0].priority is ShoppingPriority.URGENT

    def test_unknown_item_is_silent(self, tracker):
        assert tracker.mark_spoiled("missing") is None
        assert tracker.shopping.entries() == []


class TestSweep:
    def test_sweep_expires_and_queues_entry(self, gateway):
        item = make_item("Iogurte", 2, -1, unit="pote")
        tracker = _tracker_with(gateway, item)

        expired = tracker.sweep()

        assert [i.id for i in expired] == [item.id]
        swept = tracker.inventory.get(item.id)
        assert swept.status is FoodStatus.EXPIRED
        assert swept.current_quantity == 0
        entries = tracker.shopping.entries()
        assert len(entries) == 1
        assert entries[0].reason is ShoppingReason.EXPIRED
        assert entries[0].priority is ShoppingPriority.URGENT
        assert entries[0].unit == "pote"

    def test_sweep_twice_changes_nothing(self, gateway):
        tracker = _tracker_with(gateway, make_item("Iogurte", 2, -1))
        tracker.sweep()
        inventory = tracker.inventory.items()
        shopping = tracker.shopping.entries()

        assert tracker.sweep() == []
        assert tracker.inventory.items() == inventory
        assert tracker.shopping.entries() == shopping

    def test_sweep_dedupes_against_existing_entries(self, gateway):
        tracker = _tracker_with(
            gateway, make_item("Iogurte", 1, -1), make_item("IOGURTE", 1, -2)
        )
        tracker.sweep()
        assert len(tracker.shopping.entries()) == 1

    def test_sweep_with_explicit_now(self, gateway):
        item = make_item("Pão", 1, 2)
        tracker = _tracker_with(gateway, item)
        assert tracker.sweep() == []
        assert len(tracker.sweep(NOW + timedelta(days=3))) == 1


class TestViews:
    def test_expiring_soon_uses_profile_threshold(self, gateway):
        near = make_item("Pão", 1, 2)
        far = make_item("Arroz", 1, 20)
        tracker = _tracker_with(gateway, near, far, profile=UserProfile(alert_days_before=2))
        assert [i.id for i in tracker.expiring_soon()] == [near.id]

    def test_waste_summary(self, gateway):
        item = make_item("Carne", 1, 3, value=30.0)
        tracker = _tracker_with(gateway, item)
        tracker.mark_spoiled(item.id)

        summary = tracker.waste_summary()
        assert summary.total_value == 30.0
        assert summary.by_item == [("Carne", 30.0)]

    def test_shopping_pass_throughs(self, tracker):
        entry = tracker.add_shopping_item("Manteiga")
        tracker.adjust_shopping_quantity(entry.id, 1)
        assert tracker.shopping.entries()[0].suggested_quantity == 2
        tracker.remove_shopping_item(entry.id)
        assert tracker.shopping.entries() == []
        tracker.add_shopping_item("Sal")
        tracker.clear_shopping_list()
        assert tracker.shopping.entries() == []
