"""Tests for the criteria compiler."""

import pytest

from brogue_scanner.categories import Category
from brogue_scanner.errors import CompileError
from brogue_scanner.search.compiler import Slot, classify, compile_criteria, compile_tokens
from brogue_scanner.search.criteria import (
    CountMode,
    EnchantmentThreshold,
    MagicPolarity,
    SearchCriterion,
    VaultRequirement,
)


class TestClassify:
    """Trial parsers accept exact token shapes only."""

    @pytest.mark.parametrize(
        ("token", "slot", "values"),
        [
            ("2", Slot.COUNT, {"target": 2, "mode": CountMode.AT_LEAST}),
            ("<3", Slot.COUNT, {"target": 3, "mode": CountMode.LESS_THAN}),
            ("=0", Slot.COUNT, {"target": 0, "mode": CountMode.EQUAL_TO}),
            ("d12", Slot.DEPTH, {"max_depth": 12}),
            ("+4", Slot.ENCHANTMENT, {"enchantment": EnchantmentThreshold(4)}),
            ("2-", Slot.ENCHANTMENT, {"enchantment": EnchantmentThreshold(-2, at_most=True)}),
            ("runic", Slot.RUNIC, {"any_runic": True}),
            ("vault", Slot.VAULT, {"vault": VaultRequirement.IN_VAULT}),
            ("novault", Slot.VAULT, {"vault": VaultRequirement.NOT_IN_VAULT}),
            ("bad", Slot.MAGIC, {"magic": MagicPolarity.MALEVOLENT}),
            ("pike", Slot.KIND, {"kind": "pike"}),
            ("quietus", Slot.RUNIC, {"runic": "quietus"}),
        ],
    )
    def test_weapon_tokens(self, token, slot, values):
        assert classify(Category.WEAPON, token) == (slot, values)

    @pytest.mark.parametrize(
        "token",
        ["d0", "d27", "+128", "1.5", "-3", "2 ", "Sword", "", "3x", "٥", "d１２", "+５", "5\n"],
    )
    def test_rejected_weapon_tokens(self, token):
        assert classify(Category.WEAPON, token) is None

    def test_kind_wins_over_runic(self):
        # "sp" is part of both "spear" and "speed"
        assert classify(Category.WEAPON, "sp") == (Slot.KIND, {"kind": "sp"})

    def test_positive_only_enchantment(self):
        assert classify(Category.STAFF, "+2") == (Slot.ENCHANTMENT, {"enchantment": EnchantmentThreshold(2)})
        assert classify(Category.STAFF, "2-") is None
        assert classify(Category.RING, "2-") is not None

    def test_ally_keywords(self):
        assert classify(Category.ALLY, "legendary") == (Slot.STATUS, {"any_legendary": True})
        assert classify(Category.ALLY, "shackled") == (Slot.STATUS, {"status": "shackled"})
        assert classify(Category.ALLY, "mutation") == (Slot.MUTATION, {"any_mutation": True})
        assert classify(Category.ALLY, "vampiric") == (Slot.MUTATION, {"mutation": "vampiric"})
        assert classify(Category.ALLY, "naga") == (Slot.KIND, {"kind": "naga"})

    def test_illegal_slots_are_unrecognized(self):
        assert classify(Category.FOOD, "+2") is None
        assert classify(Category.GOLD, "vault") is None
        assert classify(Category.EQUIPMENT, "scale") is None
        assert classify(Category.RING, "runic") is None


class TestCompileTokens:
    def test_distinct_slots_form_one_criterion(self):
        criteria = compile_tokens(Category.ARMOR, ["2", "+3", "scale", "mutuality"])

        assert criteria == [
            SearchCriterion(
                Category.ARMOR,
                target=2,
                enchantment=EnchantmentThreshold(3),
                kind="scale",
                runic="mutuality",
            )
        ]

    def test_repeated_slot_starts_new_criterion(self):
        # Preserved flush behavior: two identical kind tokens give two criteria.
        criteria = compile_tokens(Category.ARMOR, ["scale", "scale"])

        assert criteria == [SearchCriterion(Category.ARMOR, kind="scale")] * 2

    def test_flush_keeps_token_order(self):
        criteria = compile_tokens(Category.WEAPON, ["+3", "quietus", "+1", "d4", "dagger"])

        assert [c.enchantment.value for c in criteria] == [3, 1]
        assert criteria[0].runic == "quietus"
        assert criteria[1].max_depth == 4
        assert criteria[1].kind == "dagger"

    def test_pair_members_share_a_slot(self):
        criteria = compile_tokens(Category.ALLY, ["caged", "toxic", "legendary", "mutation"])

        assert len(criteria) == 2
        assert criteria[0].status == "caged"
        assert criteria[0].mutation == "toxic"
        assert criteria[1].any_legendary
        assert criteria[1].any_mutation

    def test_default_depth_applies_without_depth_token(self):
        criteria = compile_tokens(Category.POTION, ["life", "d3", "descent"], default_depth=9)

        assert [c.max_depth for c in criteria] == [3, 9]

    def test_food_requires_count(self):
        with pytest.raises(CompileError, match="COUNT is required for the 'food' category"):
            compile_tokens(Category.FOOD, ["mango"])

    def test_gold_requires_count_in_every_criterion(self):
        with pytest.raises(CompileError) as excinfo:
            compile_tokens(Category.GOLD, ["d3", "d5", "500"])

        assert excinfo.value.messages == ["COUNT is required for the 'gold' category"]

    def test_food_rejects_runic(self):
        with pytest.raises(CompileError, match="'runic' is not a valid food search term"):
            compile_tokens(Category.FOOD, ["runic"])

    def test_unrecognized_token_names_the_token(self):
        with pytest.raises(CompileError) as excinfo:
            compile_tokens(Category.WAND, ["+2", "banana", "plenty"])

        assert excinfo.value.messages == ["'banana' is not a valid wand search term"]

    def test_empty_occurrence(self):
        with pytest.raises(CompileError, match="empty 'charm' search criterion"):
            compile_tokens(Category.CHARM, [])


class TestCompileCriteria:
    def test_concrete_categories_compile_before_meta(self):
        criteria = compile_criteria({Category.ITEM: [["+1"]], Category.WAND: [["plenty"]], Category.ALLY: [["naga"]]})

        assert [c.category for c in criteria] == [Category.ALLY, Category.WAND, Category.ITEM]

    def test_occurrences_keep_their_order(self):
        criteria = compile_criteria({Category.RING: [["clairvoyance"], ["light", "+2"]]})

        assert [c.kind for c in criteria] == ["clairvoyance", "light"]

    def test_duplicates_are_rejected(self):
        with pytest.raises(CompileError, match="duplicate search criterion"):
            compile_criteria({Category.ARMOR: [["scale", "scale"]]})

    def test_duplicates_across_occurrences(self):
        with pytest.raises(CompileError, match="duplicate"):
            compile_criteria({Category.GOLD: [["100"], ["100"]]})

    def test_count_distinguishes_criteria(self):
        assert len(compile_criteria({Category.GOLD: [["100"], ["200"]]})) == 2

    def test_errors_from_all_flags_are_collected(self):
        with pytest.raises(CompileError) as excinfo:
            compile_criteria(
                {
                    Category.FOOD: [["runic"]],
                    Category.GOLD: [["d3"]],
                    Category.ARMOR: [["+1"]],
                }
            )

        assert excinfo.value.messages == [
            "'runic' is not a valid food search term",
            "COUNT is required for the 'gold' category",
        ]

    def test_default_depth(self):
        criteria = compile_criteria({Category.SCROLL: [["enchanting"]]}, default_depth=7)

        assert criteria[0].max_depth == 7


class TestRoundTrip:
    """Compiling a criterion's canonical tokens reproduces the criterion."""

    @pytest.mark.parametrize(
        ("category", "tokens"),
        [
            (Category.ARMOR, ["2", "+3", "scale", "mutuality"]),
            (Category.WEAPON, ["runic", "war", "novault", "good"]),
            (Category.RING, ["3-", "vault", "bad", "d4"]),
            (Category.STAFF, ["+2", "fire"]),
            (Category.POTION, ["<2", "d4", "incineration"]),
            (Category.GOLD, ["=500"]),
            (Category.FOOD, ["2", "ration"]),
            (Category.KEY, ["cage key"]),
            (Category.ALTAR, ["commutation"]),
            (Category.ALLY, ["legendary", "unicorn", "mutation"]),
            (Category.ALLY, ["caged", "goblin", "toxic"]),
            (Category.EQUIPMENT, ["+1", "runic", "vault"]),
            (Category.ITEM, ["bad"]),
        ],
    )
    def test_round_trip(self, category, tokens):
        (criterion,) = compile_tokens(category, tokens, default_depth=12)

        assert compile_tokens(category, criterion.to_tokens()) == [criterion]
