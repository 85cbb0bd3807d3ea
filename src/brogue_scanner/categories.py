"""Object categories and the 16-bit category mask used for matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Catalog categories, including the two meta-categories."""

    ALLY = "ally"
    ALTAR = "altar"
    ARMOR = "armor"
    CHARM = "charm"
    FOOD = "food"
    GOLD = "gold"
    KEY = "key"
    POTION = "potion"
    RING = "ring"
    SCROLL = "scroll"
    STAFF = "staff"
    WAND = "wand"
    WEAPON = "weapon"
    ITEM = "item"
    EQUIPMENT = "equipment"

    @property
    def is_meta(self) -> bool:
        return self in {Category.ITEM, Category.EQUIPMENT}

    @property
    def mask(self) -> CategoryMask:
        return _MASKS[self]

    @property
    def members(self) -> tuple[Category, ...]:
        """Concrete categories covered by this category."""
        return tuple(member for member in CONCRETE_CATEGORIES if self.mask.intersects(member.mask))

    @property
    def has_enchantment(self) -> bool:
        return self in ENCHANTABLE

    @property
    def has_runic(self) -> bool:
        return self in RUNIC_BEARING

    @classmethod
    def parse(cls, value: str) -> Category:
        """Return the concrete category named exactly ``value``."""
        category = cls(value)
        if category.is_meta:
            raise ValueError(f"'{value}' is not a concrete category")
        return category

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CategoryMask:
    """Fixed-size bitset over the concrete categories."""

    bits: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.bits <= 0xFFFF:
            raise ValueError(f"category mask out of range: {self.bits:#x}")

    def __or__(self, other: CategoryMask) -> CategoryMask:
        return CategoryMask(self.bits | other.bits)

    def __and__(self, other: CategoryMask) -> CategoryMask:
        return CategoryMask(self.bits & other.bits)

    def __bool__(self) -> bool:
        return self.bits != 0

    def intersects(self, other: CategoryMask) -> bool:
        return bool(self & other)


CONCRETE_CATEGORIES: tuple[Category, ...] = (
    Category.ALLY,
    Category.ALTAR,
    Category.ARMOR,
    Category.CHARM,
    Category.FOOD,
    Category.GOLD,
    Category.KEY,
    Category.POTION,
    Category.RING,
    Category.SCROLL,
    Category.STAFF,
    Category.WAND,
    Category.WEAPON,
)

_CONCRETE_BITS: dict[Category, CategoryMask] = {
    category: CategoryMask(1 << position) for position, category in enumerate(CONCRETE_CATEGORIES)
}


def _union(*categories: Category) -> CategoryMask:
    mask = CategoryMask()
    for category in categories:
        mask = mask | _CONCRETE_BITS[category]
    return mask


_MASKS: dict[Category, CategoryMask] = {
    **_CONCRETE_BITS,
    Category.ITEM: _union(
        Category.ARMOR,
        Category.CHARM,
        Category.POTION,
        Category.RING,
        Category.SCROLL,
        Category.STAFF,
        Category.WAND,
        Category.WEAPON,
    ),
    Category.EQUIPMENT: _union(Category.ARMOR, Category.RING, Category.WEAPON),
}

# Field capabilities of concrete categories
ENCHANTABLE = frozenset(
    {Category.ARMOR, Category.CHARM, Category.RING, Category.STAFF, Category.WAND, Category.WEAPON}
)
RUNIC_BEARING = frozenset({Category.ARMOR, Category.WEAPON})
NUMERIC_POLARITY = frozenset({Category.ARMOR, Category.CHARM, Category.RING, Category.WEAPON})
KIND_POLARITY = frozenset({Category.POTION, Category.SCROLL, Category.STAFF, Category.WAND})

# Order in which category flags are compiled; meta-categories come last so
# concrete criteria are evaluated first.
FLAG_ORDER: tuple[Category, ...] = (*CONCRETE_CATEGORIES, Category.EQUIPMENT, Category.ITEM)
