"""Compile per-category token lists into search criteria.

Tokens carry no delimiters between consecutive criteria. Each token is
classified by the first trial parser of its category's grammar that accepts
it, and lands in one slot of the criterion being built. A token whose slot is
already filled closes that criterion and starts the next one, so
``scale +2 mutuality`` stays one armor criterion while ``scale scale`` yields
two.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import Any

from brogue_scanner.catalog import vocabulary
from brogue_scanner.categories import FLAG_ORDER, Category
from brogue_scanner.config import DEPTH_MAX, DEPTH_MIN
from brogue_scanner.errors import CompileError
from brogue_scanner.rows import I8_MAX, I8_MIN, U32_MAX
from brogue_scanner.search.criteria import (
    CountMode,
    EnchantmentThreshold,
    MagicPolarity,
    SearchCriterion,
    VaultRequirement,
)


logger = logging.getLogger(__name__)

_COUNT = re.compile(r"([<=]?)([0-9]+)")
_DEPTH = re.compile(r"d([0-9]+)")
_AT_LEAST = re.compile(r"\+([0-9]+)")
_AT_MOST = re.compile(r"([0-9]+)-")

_COUNT_MODES = {"": CountMode.AT_LEAST, "<": CountMode.LESS_THAN, "=": CountMode.EQUAL_TO}


class Slot(str, Enum):
    """Criterion slot a classified token fills; pair members share one slot."""

    COUNT = "count"
    DEPTH = "depth"
    ENCHANTMENT = "enchantment"
    KIND = "kind"
    RUNIC = "runic"
    VAULT = "vault"
    MAGIC = "magic"
    STATUS = "status"
    MUTATION = "mutation"


Assignment = dict[str, Any]
Parser = Callable[[Category, str], Assignment | None]


@dataclass(frozen=True, slots=True)
class Trial:
    slot: Slot
    parse: Parser


def parse_count(category: Category, token: str) -> Assignment | None:
    match = _COUNT.fullmatch(token)
    if match is None:
        return None
    target = int(match.group(2))
    if target > U32_MAX:
        return None
    return {"target": target, "mode": _COUNT_MODES[match.group(1)]}


def parse_depth(category: Category, token: str) -> Assignment | None:
    match = _DEPTH.fullmatch(token)
    if match is None:
        return None
    depth = int(match.group(1))
    if not DEPTH_MIN <= depth <= DEPTH_MAX:
        return None
    return {"max_depth": depth}


def parse_positive_enchantment(category: Category, token: str) -> Assignment | None:
    match = _AT_LEAST.fullmatch(token)
    if match is None:
        return None
    value = int(match.group(1))
    if value > I8_MAX:
        return None
    return {"enchantment": EnchantmentThreshold(value)}


def parse_signed_enchantment(category: Category, token: str) -> Assignment | None:
    assignment = parse_positive_enchantment(category, token)
    if assignment is not None:
        return assignment
    match = _AT_MOST.fullmatch(token)
    if match is None:
        return None
    value = -int(match.group(1))
    if value < I8_MIN:
        return None
    return {"enchantment": EnchantmentThreshold(value, at_most=True)}


def _keyword(word: str, assignment: Assignment) -> Parser:
    def parse(category: Category, token: str) -> Assignment | None:
        return dict(assignment) if token == word else None

    return parse


parse_any_runic = _keyword("runic", {"any_runic": True})
parse_legendary = _keyword("legendary", {"any_legendary": True})
parse_any_mutation = _keyword("mutation", {"any_mutation": True})


def parse_vault(category: Category, token: str) -> Assignment | None:
    if token == "vault":
        return {"vault": VaultRequirement.IN_VAULT}
    if token == "novault":
        return {"vault": VaultRequirement.NOT_IN_VAULT}
    return None


def parse_magic(category: Category, token: str) -> Assignment | None:
    for polarity in MagicPolarity:
        if token == polarity.value:
            return {"magic": polarity}
    return None


def parse_status(category: Category, token: str) -> Assignment | None:
    if vocabulary.lookup_exact(vocabulary.ALLY_STATUSES, token) is None:
        return None
    return {"status": token}


def parse_kind(category: Category, token: str) -> Assignment | None:
    return {"kind": token} if vocabulary.is_kind_fragment(category, token) else None


def parse_runic(category: Category, token: str) -> Assignment | None:
    return {"runic": token} if vocabulary.is_runic_fragment(category, token) else None


def parse_mutation(category: Category, token: str) -> Assignment | None:
    return {"mutation": token} if vocabulary.is_mutation_fragment(token) else None


COUNT = Trial(Slot.COUNT, parse_count)
DEPTH = Trial(Slot.DEPTH, parse_depth)
SIGNED_ENCHANTMENT = Trial(Slot.ENCHANTMENT, parse_signed_enchantment)
POSITIVE_ENCHANTMENT = Trial(Slot.ENCHANTMENT, parse_positive_enchantment)
ANY_RUNIC = Trial(Slot.RUNIC, parse_any_runic)
RUNIC = Trial(Slot.RUNIC, parse_runic)
KIND = Trial(Slot.KIND, parse_kind)
VAULT = Trial(Slot.VAULT, parse_vault)
MAGIC = Trial(Slot.MAGIC, parse_magic)
LEGENDARY = Trial(Slot.STATUS, parse_legendary)
STATUS = Trial(Slot.STATUS, parse_status)
ANY_MUTATION = Trial(Slot.MUTATION, parse_any_mutation)
MUTATION = Trial(Slot.MUTATION, parse_mutation)

_GEAR = (SIGNED_ENCHANTMENT, COUNT, DEPTH, ANY_RUNIC, KIND, RUNIC, VAULT, MAGIC)
_CHARGED = (POSITIVE_ENCHANTMENT, COUNT, DEPTH, KIND, VAULT, MAGIC)
_CONSUMABLE = (COUNT, DEPTH, KIND, VAULT, MAGIC)
_META = (SIGNED_ENCHANTMENT, COUNT, DEPTH, ANY_RUNIC, VAULT, MAGIC)

# Ordered trial parsers per category; the first parser accepting a token wins.
GRAMMARS: dict[Category, tuple[Trial, ...]] = {
    Category.ALLY: (COUNT, DEPTH, LEGENDARY, STATUS, ANY_MUTATION, KIND, MUTATION),
    Category.ALTAR: (COUNT, DEPTH, KIND),
    Category.ARMOR: _GEAR,
    Category.CHARM: _CHARGED,
    Category.FOOD: (COUNT, DEPTH, KIND),
    Category.GOLD: (COUNT, DEPTH),
    Category.KEY: (COUNT, DEPTH, KIND),
    Category.POTION: _CONSUMABLE,
    Category.RING: (SIGNED_ENCHANTMENT, COUNT, DEPTH, KIND, VAULT, MAGIC),
    Category.SCROLL: _CONSUMABLE,
    Category.STAFF: _CHARGED,
    Category.WAND: _CHARGED,
    Category.WEAPON: _GEAR,
    Category.EQUIPMENT: _META,
    Category.ITEM: _META,
}

COUNT_REQUIRED = frozenset({Category.FOOD, Category.GOLD})


def classify(category: Category, token: str) -> tuple[Slot, Assignment] | None:
    """Return the slot and field values for ``token``, or None if no trial accepts it."""
    for trial in GRAMMARS[category]:
        assignment = trial.parse(category, token)
        if assignment is not None:
            return trial.slot, assignment
    return None


@dataclass(slots=True)
class _PendingCriterion:
    category: Category
    filled: set[Slot] = field(default_factory=set)
    values: Assignment = field(default_factory=dict)

    def accepts(self, slot: Slot) -> bool:
        return slot not in self.filled

    def fill(self, slot: Slot, assignment: Assignment) -> None:
        self.filled.add(slot)
        self.values.update(assignment)

    def finalize(self, default_depth: int) -> SearchCriterion:
        if self.category in COUNT_REQUIRED and Slot.COUNT not in self.filled:
            raise ValueError(f"COUNT is required for the '{self.category.value}' category")
        if not self.filled:
            raise ValueError(f"empty '{self.category.value}' search criterion")
        values = {"max_depth": default_depth, **self.values}
        return SearchCriterion(category=self.category, **values)


def compile_tokens(
    category: Category,
    tokens: Sequence[str],
    default_depth: int = DEPTH_MAX,
) -> list[SearchCriterion]:
    """Compile one flag occurrence.

    Raises:
        CompileError: with every invalid criterion of this occurrence, or the
            first unrecognized token, which stops the occurrence.
    """
    criteria: list[SearchCriterion] = []
    errors: list[str] = []
    pending = _PendingCriterion(category)

    def close(record: _PendingCriterion) -> None:
        try:
            criteria.append(record.finalize(default_depth))
        except ValueError as exc:
            errors.append(str(exc))

    if not tokens:
        close(pending)
        raise CompileError(errors)

    for token in tokens:
        classified = classify(category, token)
        if classified is None:
            errors.append(f"'{token}' is not a valid {category.value} search term")
            raise CompileError(errors)
        slot, assignment = classified
        if not pending.accepts(slot):
            close(pending)
            pending = _PendingCriterion(category)
        pending.fill(slot, assignment)
    close(pending)

    if errors:
        raise CompileError(errors)
    return criteria


def find_duplicates(criteria: Sequence[SearchCriterion]) -> list[str]:
    messages = []
    for index, criterion in enumerate(criteria):
        if any(criterion == earlier for earlier in criteria[:index]):
            messages.append(f"duplicate search criterion: {criterion.describe()}")
    return messages


def compile_criteria(
    flag_tokens: Mapping[Category, Sequence[Sequence[str]]],
    default_depth: int = DEPTH_MAX,
) -> list[SearchCriterion]:
    """Compile every flag occurrence in fixed category order.

    ``flag_tokens`` maps each category to its flag occurrences, each an ordered
    token list. Concrete categories compile before ``equipment`` and ``item`` so
    their criteria are evaluated first.

    Raises:
        CompileError: carrying every problem found across all occurrences,
            including duplicated criteria.
    """
    criteria: list[SearchCriterion] = []
    errors: list[str] = []
    for category in FLAG_ORDER:
        for tokens in flag_tokens.get(category, ()):
            try:
                criteria.extend(compile_tokens(category, tokens, default_depth))
            except CompileError as exc:
                errors.extend(exc.messages)

    errors.extend(find_duplicates(criteria))
    if errors:
        raise CompileError(errors)
    logger.debug("Compiled %d search criteria", len(criteria))
    return criteria
