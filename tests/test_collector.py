"""Unit tests for InventoryCollector."""

import unittest

from fakes import (
    BrokenInventory,
    ExplodingSlot,
    FakeDefinition,
    FakeInventory,
    FakeItem,
    FakeSlot,
    arrested_player_inventory,
    slot,
)

from lockup.systems.custody.base import SpecialHandling
from lockup.systems.custody.collector import (
    InventoryCollector,
    extract_item_id,
    extract_item_name,
    extract_stack_count,
)


class TestFieldExtraction(unittest.TestCase):
    """Test the ordered fallback chains."""

    def test_id_prefers_instance_id(self) -> None:
        """Test that the instance id wins over the definition id."""
        item = FakeItem(id="inst", definition=FakeDefinition(id="def"))
        assert extract_item_id(item) == "inst"

    def test_id_falls_back_to_definition(self) -> None:
        """Test definition id fallback."""
        assert extract_item_id(FakeItem(id="", definition=FakeDefinition(id="def"))) == "def"

    def test_id_falls_back_to_unknown(self) -> None:
        """Test the literal fallback."""
        assert extract_item_id(FakeItem()) == "unknown"

    def test_name_chain(self) -> None:
        """Test name, then definition name, then id."""
        assert extract_item_name(FakeItem(name="Apple", definition=FakeDefinition(name="Fruit"))) == "Apple"
        assert extract_item_name(FakeItem(definition=FakeDefinition(name="Fruit"))) == "Fruit"
        assert extract_item_name(FakeItem(id="apple_01")) == "apple_01"
        assert extract_item_name(FakeItem()) == "unknown"

    def test_stack_count_chain(self) -> None:
        """Test stack count, then amount, then 1."""
        assert extract_stack_count(FakeItem(stack_count=5, amount=9)) == 5
        assert extract_stack_count(FakeItem(stack_count=0, amount=9)) == 9
        assert extract_stack_count(FakeItem(stack_count=None, amount=-3)) == 1
        assert extract_stack_count(FakeItem()) == 1


class TestInventoryCollector(unittest.TestCase):
    """Test slot collection and special cases."""

    def setUp(self) -> None:
        """Create the collector."""
        self.collector = InventoryCollector()

    def test_arrest_inventory(self) -> None:
        """Test that cash and ammo are dropped and the weapon is flagged."""
        items = self.collector.collect(arrested_player_inventory())

        assert [item.item_name for item in items] == ["9mm Pistol", "Switchblade"]
        pistol, switchblade = items
        assert pistol.special_handling is SpecialHandling.EMPTY_WEAPON
        assert pistol.is_contraband is False
        assert pistol.item_type == "WeaponItemInstance"
        assert switchblade.special_handling is SpecialHandling.NONE
        assert switchblade.is_contraband is True
        assert switchblade.item_id == "switchblade"

    def test_weapon_keeps_its_contraband_flag(self) -> None:
        """Test that an illegal weapon is both flagged and contraband."""
        items = self.collector.collect(FakeInventory([slot("Sawn-off Shotgun", legal_status=1)]))

        assert len(items) == 1
        assert items[0].special_handling is SpecialHandling.EMPTY_WEAPON
        assert items[0].is_contraband is True

    def test_empty_slots_are_skipped(self) -> None:
        """Test that empty and None slots produce nothing."""
        items = self.collector.collect(FakeInventory([FakeSlot(None), None, slot("Apple")]))
        assert [item.item_name for item in items] == ["Apple"]

    def test_stack_count_is_recorded(self) -> None:
        """Test that stack sizes survive collection."""
        items = self.collector.collect(FakeInventory([slot("Apple", stack_count=12)]))
        assert items[0].stack_count == 12

    def test_failing_slot_is_skipped(self) -> None:
        """Test that one unreadable slot does not stop the batch."""
        items = self.collector.collect(FakeInventory([slot("Apple"), ExplodingSlot(), slot("Pear")]))
        assert [item.item_name for item in items] == ["Apple", "Pear"]

    def test_failing_source_returns_empty_list(self) -> None:
        """Test that an inventory that cannot list slots yields nothing."""
        assert self.collector.collect(BrokenInventory()) == []

    def test_vehicle_items_are_appended(self) -> None:
        """Test that vehicle storage follows the same rules, after the inventory."""
        vehicle = FakeInventory([slot("Spare Tire"), slot("Buckshot Ammo", stack_count=8), slot("Car Cash")])

        items = self.collector.collect(FakeInventory([slot("Apple")]), vehicle)

        assert [item.item_name for item in items] == ["Apple", "Spare Tire"]

    def test_broken_vehicle_keeps_inventory_items(self) -> None:
        """Test that a vehicle error only loses the vehicle part."""
        items = self.collector.collect(FakeInventory([slot("Apple")]), BrokenInventory())
        assert [item.item_name for item in items] == ["Apple"]

    def test_records_are_never_cash_or_ammo(self) -> None:
        """Test that no produced record denotes cash or ammunition."""
        inventory = FakeInventory(
            [
                slot("Cash"),
                slot("Bag of cash"),
                slot("Wad", kind="CashInstance"),
                slot("Bullets"),
                slot("Rifle Magazine"),
                slot("Stripper clip"),
                slot("Bread"),
            ]
        )

        items = self.collector.collect(inventory)

        # "Rifle Magazine" matches a weapon token first and is kept as a weapon
        assert [item.item_name for item in items] == ["Rifle Magazine", "Bread"]
        for item in items:
            assert "cash" not in item.item_name.lower()
            assert item.item_type != "CashInstance"
