"""Typed game objects rebuilt from catalog rows for display."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
import re
from typing import Any

from brogue_scanner.catalog import vocabulary
from brogue_scanner.categories import Category
from brogue_scanner.errors import CatalogFormatError
from brogue_scanner.rows import Row


_GOLD_PILES = re.compile(r"^gold pieces(?: \(([0-9]+) piles?\))?$")


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


@dataclass(frozen=True, slots=True)
class GameObject:
    """Base for every reconstructed catalog object."""

    category: Category
    kind: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize every field plus the display name."""
        payload: dict[str, Any] = {item.name: getattr(self, item.name) for item in fields(self)}
        payload["category"] = self.category.value
        payload["name"] = str(self)
        return payload

    def __str__(self) -> str:
        return f"A {self.kind}"


@dataclass(frozen=True, slots=True)
class Gear(GameObject):
    """Armor or weapon with an enchantment and an optional runic."""

    enchantment: int = 0
    runic: str | None = None

    def __str__(self) -> str:
        base = f"A {_signed(self.enchantment)} {self.kind}"
        return f"{base} of {self.runic}" if self.runic else base


@dataclass(frozen=True, slots=True)
class Charm(GameObject):
    enchantment: int = 0

    def __str__(self) -> str:
        return f"A {_signed(self.enchantment)} {self.kind} charm"


@dataclass(frozen=True, slots=True)
class Ring(GameObject):
    enchantment: int = 0

    def __str__(self) -> str:
        sign = "+" if self.enchantment > 0 else ""
        return f"A {sign}{self.enchantment} ring of {self.kind}"


@dataclass(frozen=True, slots=True)
class Staff(GameObject):
    enchantment: int = 0

    def __str__(self) -> str:
        return f"A staff of {self.kind} [{self.enchantment}/{self.enchantment}]"


@dataclass(frozen=True, slots=True)
class Wand(GameObject):
    enchantment: int = 0

    def __str__(self) -> str:
        return f"A wand of {self.kind} [{self.enchantment}]"


@dataclass(frozen=True, slots=True)
class Consumable(GameObject):
    """Potion or scroll."""

    def __str__(self) -> str:
        return f"A {self.category.value} of {self.kind}"


@dataclass(frozen=True, slots=True)
class Gold(GameObject):
    amount: int = 0
    piles: int = 1

    def __str__(self) -> str:
        return f"{self.amount} gold pieces ({self.piles} piles)"


@dataclass(frozen=True, slots=True)
class Key(GameObject):
    opens_vault: int | None = None


@dataclass(frozen=True, slots=True)
class Ally(GameObject):
    status: str = ""
    mutation: str | None = None

    @property
    def is_legendary(self) -> bool:
        return self.status == vocabulary.LEGENDARY_STATUS

    def __str__(self) -> str:
        status = "legendary" if self.is_legendary else self.status
        base = f"A {status} {self.kind}"
        return f"{base} <{self.mutation}>" if self.mutation else base


def _require(names: tuple[str, ...], value: str, what: str) -> str:
    found = vocabulary.lookup_exact(names, value)
    if found is None:
        raise CatalogFormatError(f"unknown {what}: {value!r}")
    return found


def _kind(row: Row) -> str:
    return _require(vocabulary.KINDS[row.category], row.kind, f"{row.category.value} kind")


def _enchantment(row: Row) -> int:
    if row.enchantment is None:
        raise CatalogFormatError(f"{row.category.value} row without enchantment")
    return row.enchantment


def _build_gear(row: Row) -> GameObject:
    runic = None
    if row.runic:
        runic = _require(vocabulary.RUNICS[row.category], row.runic, f"{row.category.value} runic")
    return Gear(row.category, _kind(row), enchantment=_enchantment(row), runic=runic)


def _build_gold(row: Row) -> GameObject:
    match = _GOLD_PILES.match(row.kind)
    if match is None:
        raise CatalogFormatError(f"unknown gold kind: {row.kind!r}")
    piles = int(match.group(1)) if match.group(1) else 1
    return Gold(row.category, row.kind, amount=row.quantity, piles=piles)


def _build_ally(row: Row) -> GameObject:
    mutation = None
    if row.mutation:
        mutation = _require(vocabulary.MUTATIONS, row.mutation, "mutation")
    status = _require(vocabulary.ALLY_STATUSES, row.ally_status, "ally status")
    return Ally(row.category, _kind(row), status=status, mutation=mutation)


_BUILDERS: dict[Category, Callable[[Row], GameObject]] = {
    Category.ALLY: _build_ally,
    Category.ALTAR: lambda row: GameObject(row.category, _kind(row)),
    Category.ARMOR: _build_gear,
    Category.CHARM: lambda row: Charm(row.category, _kind(row), enchantment=_enchantment(row)),
    Category.FOOD: lambda row: GameObject(row.category, _kind(row)),
    Category.GOLD: _build_gold,
    Category.KEY: lambda row: Key(row.category, _kind(row), opens_vault=row.opens_vault),
    Category.POTION: lambda row: Consumable(row.category, _kind(row)),
    Category.RING: lambda row: Ring(row.category, _kind(row), enchantment=_enchantment(row)),
    Category.SCROLL: lambda row: Consumable(row.category, _kind(row)),
    Category.STAFF: lambda row: Staff(row.category, _kind(row), enchantment=_enchantment(row)),
    Category.WAND: lambda row: Wand(row.category, _kind(row), enchantment=_enchantment(row)),
    Category.WEAPON: _build_gear,
}


def build_object(row: Row) -> GameObject:
    """Rebuild the typed object described by ``row``.

    Raises:
        CatalogFormatError: if the row names a kind, runic, status or mutation
            that Brogue does not define. The error carries the row's line.
    """
    try:
        return _BUILDERS[row.category](row)
    except CatalogFormatError as exc:
        if exc.line is not None or row.line is None:
            raise
        raise CatalogFormatError(exc.reason, path=exc.path, line=row.line) from exc
