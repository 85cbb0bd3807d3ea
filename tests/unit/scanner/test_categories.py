"""Tests for categories and the category mask."""

import pytest

from brogue_scanner.categories import (
    CONCRETE_CATEGORIES,
    FLAG_ORDER,
    Category,
    CategoryMask,
)


class TestCategoryMask:
    """Concrete categories own one bit; meta-categories are unions."""

    def test_concrete_bits_are_distinct(self):
        bits = [category.mask.bits for category in CONCRETE_CATEGORIES]

        assert len(set(bits)) == len(CONCRETE_CATEGORIES)
        assert all(bin(bit).count("1") == 1 for bit in bits)

    def test_item_covers_gear_and_consumables(self):
        assert Category.ITEM.members == (
            Category.ARMOR,
            Category.CHARM,
            Category.POTION,
            Category.RING,
            Category.SCROLL,
            Category.STAFF,
            Category.WAND,
            Category.WEAPON,
        )

    def test_equipment_covers_armor_ring_weapon(self):
        assert Category.EQUIPMENT.members == (Category.ARMOR, Category.RING, Category.WEAPON)

    def test_intersection_semantics(self):
        assert Category.EQUIPMENT.mask.intersects(Category.RING.mask)
        assert Category.ITEM.mask.intersects(Category.EQUIPMENT.mask)
        assert not Category.ITEM.mask.intersects(Category.GOLD.mask)
        assert not Category.ALLY.mask.intersects(Category.ALTAR.mask)

    def test_mask_fits_sixteen_bits(self):
        with pytest.raises(ValueError):
            CategoryMask(1 << 16)

    def test_union_operator(self):
        mask = Category.ARMOR.mask | Category.WEAPON.mask

        assert mask.intersects(Category.WEAPON.mask)
        assert not (mask & Category.RING.mask)
        assert (mask & Category.ARMOR.mask) == Category.ARMOR.mask


class TestCategory:
    def test_parse_accepts_concrete_names_only(self):
        assert Category.parse("wand") is Category.WAND
        with pytest.raises(ValueError):
            Category.parse("item")
        with pytest.raises(ValueError):
            Category.parse("wands")

    def test_capabilities(self):
        assert Category.STAFF.has_enchantment
        assert not Category.POTION.has_enchantment
        assert Category.WEAPON.has_runic
        assert not Category.RING.has_runic

    def test_flag_order_puts_meta_categories_last(self):
        assert FLAG_ORDER[-2:] == (Category.EQUIPMENT, Category.ITEM)
        assert FLAG_ORDER[0] is Category.ALLY
        assert len(FLAG_ORDER) == 15
