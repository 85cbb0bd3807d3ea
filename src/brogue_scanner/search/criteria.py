"""Compiled search criteria and their count semantics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from brogue_scanner.categories import Category, CategoryMask
from brogue_scanner.config import DEPTH_MAX


class CountMode(str, Enum):
    """How a criterion's running count is compared with its target."""

    AT_LEAST = "at_least"
    LESS_THAN = "less_than"
    EQUAL_TO = "equal_to"

    @property
    def prefix(self) -> str:
        return {CountMode.AT_LEAST: "", CountMode.LESS_THAN: "<", CountMode.EQUAL_TO: "="}[self]

    @property
    def label(self) -> str:
        return {CountMode.AT_LEAST: "at least", CountMode.LESS_THAN: "less than", CountMode.EQUAL_TO: "exactly"}[
            self
        ]


class MatchOutcome(str, Enum):
    """Effect of one matched row on the seed being scanned."""

    INCREMENT = "increment"
    DO_NOTHING = "do_nothing"
    EARLY_EXIT = "early_exit"

    @property
    def abandons_seed(self) -> bool:
        return self is MatchOutcome.EARLY_EXIT


class VaultRequirement(str, Enum):
    ANY = "any"
    IN_VAULT = "in_vault"
    NOT_IN_VAULT = "not_in_vault"

    def accepts(self, in_vault: bool) -> bool:
        if self is VaultRequirement.IN_VAULT:
            return in_vault
        if self is VaultRequirement.NOT_IN_VAULT:
            return not in_vault
        return True


class MagicPolarity(str, Enum):
    BENEVOLENT = "good"
    MALEVOLENT = "bad"


@dataclass(frozen=True, slots=True)
class EnchantmentThreshold:
    """Enchantment bound: ``>= value`` by default, ``<= value`` when ``at_most``."""

    value: int
    at_most: bool = False

    def accepts(self, enchantment: int) -> bool:
        if self.at_most:
            return enchantment <= self.value
        return enchantment >= self.value

    @property
    def token(self) -> str:
        if self.at_most:
            return f"{-self.value}-"
        return f"+{self.value}"

    def __str__(self) -> str:
        return f"<= {self.value}" if self.at_most else f">= {self.value}"


@dataclass(slots=True)
class SearchCriterion:
    """One compiled constraint that a seed's rows must collectively satisfy.

    Every field except ``count`` is fixed after compilation. ``count`` is the
    running quantity matched within the current seed and takes no part in
    equality.
    """

    category: Category
    target: int = 1
    mode: CountMode = CountMode.AT_LEAST
    max_depth: int = DEPTH_MAX
    kind: str | None = None
    enchantment: EnchantmentThreshold | None = None
    runic: str | None = None
    any_runic: bool = False
    vault: VaultRequirement = VaultRequirement.ANY
    magic: MagicPolarity | None = None
    status: str | None = None
    any_legendary: bool = False
    mutation: str | None = None
    any_mutation: bool = False
    count: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if self.runic is not None and self.any_runic:
            raise ValueError("a named runic and 'any runic' are mutually exclusive")
        if self.status is not None and self.any_legendary:
            raise ValueError("a named status and 'legendary' are mutually exclusive")
        if self.mutation is not None and self.any_mutation:
            raise ValueError("a named mutation and 'any mutation' are mutually exclusive")

    @property
    def mask(self) -> CategoryMask:
        return self.category.mask

    def is_satisfied(self) -> bool:
        if self.mode is CountMode.LESS_THAN:
            return self.count < self.target
        if self.mode is CountMode.EQUAL_TO:
            return self.count == self.target
        return self.count >= self.target

    def classify(self) -> MatchOutcome:
        """Classify the running count after a match was added."""
        if self.mode is CountMode.LESS_THAN:
            return MatchOutcome.INCREMENT if self.count < self.target else MatchOutcome.EARLY_EXIT
        if self.mode is CountMode.EQUAL_TO:
            return MatchOutcome.INCREMENT if self.count <= self.target else MatchOutcome.EARLY_EXIT
        return MatchOutcome.INCREMENT if self.count <= self.target else MatchOutcome.DO_NOTHING

    def record(self, quantity: int) -> MatchOutcome:
        self.count += quantity
        return self.classify()

    def reset(self) -> None:
        self.count = 0

    def to_tokens(self) -> list[str]:
        """Canonical token form; compiling it for ``category`` yields an equal criterion."""
        tokens = [f"{self.mode.prefix}{self.target}", f"d{self.max_depth}"]
        if self.enchantment is not None:
            tokens.append(self.enchantment.token)
        if self.any_runic:
            tokens.append("runic")
        if self.any_legendary:
            tokens.append("legendary")
        if self.status is not None:
            tokens.append(self.status)
        if self.any_mutation:
            tokens.append("mutation")
        if self.kind is not None:
            tokens.append(self.kind)
        if self.runic is not None:
            tokens.append(self.runic)
        if self.mutation is not None:
            tokens.append(self.mutation)
        if self.vault is VaultRequirement.IN_VAULT:
            tokens.append("vault")
        elif self.vault is VaultRequirement.NOT_IN_VAULT:
            tokens.append("novault")
        if self.magic is not None:
            tokens.append(self.magic.value)
        return tokens

    def describe(self) -> str:
        parts = [f"{self.mode.label} {self.target}", self.category.value]
        if self.kind is not None:
            parts.append(f"'{self.kind}'")
        if self.enchantment is not None:
            parts.append(f"enchantment {self.enchantment}")
        if self.any_runic:
            parts.append("with any runic")
        elif self.runic is not None:
            parts.append(f"of '{self.runic}'")
        if self.any_legendary:
            parts.append("legendary")
        elif self.status is not None:
            parts.append(self.status)
        if self.any_mutation:
            parts.append("with any mutation")
        elif self.mutation is not None:
            parts.append(f"<{self.mutation}>")
        if self.vault is VaultRequirement.IN_VAULT:
            parts.append("in a vault")
        elif self.vault is VaultRequirement.NOT_IN_VAULT:
            parts.append("outside vaults")
        if self.magic is not None:
            parts.append("benevolent" if self.magic is MagicPolarity.BENEVOLENT else "malevolent")
        parts.append(f"by depth {self.max_depth}")
        return " ".join(parts)
