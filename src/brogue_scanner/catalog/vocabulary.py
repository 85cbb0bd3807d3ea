"""Name tables for catalog kinds, runics, ally statuses and mutations.

Names are spelled exactly as Brogue CE writes them into the seed catalog.
"""

from __future__ import annotations

from collections.abc import Iterable

from brogue_scanner.categories import Category


MONSTER_CLASSES: tuple[str, ...] = (
    "airborne",
    "abomination",
    "animal",
    "dar",
    "dragon",
    "fireborne",
    "goblin",
    "infernal",
    "jelly",
    "mage",
    "ogre",
    "troll",
    "turret",
    "undead",
    "waterborne",
)

MONSTERS: tuple[str, ...] = (
    "acid mound",
    "acidic jelly",
    "arrow turret",
    "black jelly",
    "bloat",
    "bog monster",
    "centaur",
    "centipede",
    "dar battlemage",
    "dar blademaster",
    "dar priestess",
    "dart turret",
    "dragon",
    "eel",
    "explosive bloat",
    "flame turret",
    "flamedancer",
    "fury",
    "goblin",
    "goblin conjurer",
    "goblin mystic",
    "goblin totem",
    "goblin warlord",
    "golem",
    "guardian spirit",
    "ifrit",
    "imp",
    "jackal",
    "kobold",
    "kraken",
    "lich",
    "mangrove dryad",
    "mirrored totem",
    "monkey",
    "naga",
    "ogre",
    "ogre shaman",
    "ogre totem",
    "phantom",
    "phoenix",
    "phoenix egg",
    "phylactery",
    "pink jelly",
    "pit bloat",
    "pixie",
    "rat",
    "revenant",
    "salamander",
    "sentinel",
    "spark turret",
    "spectral blade",
    "spider",
    "stone guardian",
    "tentacle horror",
    "toad",
    "troll",
    "underworm",
    "unicorn",
    "vampire",
    "vampire bat",
    "warden of yendor",
    "will-o-the-wisp",
    "winged guardian",
    "wraith",
    "zombie",
)

ALLY_STATUSES: tuple[str, ...] = ("allied", "caged", "shackled")
LEGENDARY_STATUS = "allied"

MUTATIONS: tuple[str, ...] = (
    "agile",
    "explosive",
    "grappling",
    "infested",
    "juggernaut",
    "reflective",
    "toxic",
    "vampiric",
)

ARMOR_RUNICS: tuple[str, ...] = (
    "absorption",
    "dampening",
    "multiplicity",
    "mutuality",
    "reflection",
    "reprisal",
    "respiration",
    "burden",
    "immolation",
    "vulnerability",
    *(f"{monster_class} immunity" for monster_class in MONSTER_CLASSES),
)

WEAPON_RUNICS: tuple[str, ...] = (
    "confusion",
    "force",
    "multiplicity",
    "paralysis",
    "quietus",
    "slowing",
    "speed",
    "mercy",
    "plenty",
    *(f"{monster_class} slaying" for monster_class in MONSTER_CLASSES),
)

KINDS: dict[Category, tuple[str, ...]] = {
    Category.ALLY: MONSTERS,
    Category.ALTAR: ("commutation altar", "resurrection altar"),
    Category.ARMOR: ("banded mail", "chain mail", "leather armor", "plate armor", "scale mail", "splint mail"),
    Category.CHARM: (
        "fire immunity",
        "guardian",
        "haste",
        "health",
        "invisibility",
        "levitation",
        "negation",
        "protection",
        "recharging",
        "shattering",
        "telepathy",
        "teleportation",
    ),
    Category.FOOD: ("mango", "ration of food"),
    Category.KEY: ("door key", "cage key", "crystal orb"),
    Category.POTION: (
        "caustic gas",
        "confusion",
        "creeping death",
        "darkness",
        "descent",
        "detect magic",
        "fire immunity",
        "hallucination",
        "incineration",
        "invisibility",
        "levitation",
        "life",
        "paralysis",
        "speed",
        "strength",
        "telepathy",
    ),
    Category.RING: (
        "awareness",
        "clairvoyance",
        "light",
        "reaping",
        "regeneration",
        "stealth",
        "transference",
        "wisdom",
    ),
    Category.SCROLL: (
        "aggravate monsters",
        "discord",
        "enchanting",
        "identify",
        "magic mapping",
        "negation",
        "protect armor",
        "protect weapon",
        "recharging",
        "remove curse",
        "sanctuary",
        "shattering",
        "summon monsters",
        "teleportation",
    ),
    Category.STAFF: (
        "blinking",
        "conjuration",
        "discord",
        "entrancement",
        "firebolt",
        "haste",
        "healing",
        "lightning",
        "obstruction",
        "poison",
        "protection",
        "tunneling",
    ),
    Category.WAND: (
        "beckoning",
        "domination",
        "empowerment",
        "invisibility",
        "negation",
        "plenty",
        "polymorphism",
        "slowness",
        "teleportation",
    ),
    Category.WEAPON: (
        "broadsword",
        "dagger",
        "sword",
        "mace",
        "war hammer",
        "spear",
        "war pike",
        "war axe",
        "axe",
        "rapier",
        "whip",
        "flail",
        "incendiary dart",
        "dart",
        "javelin",
    ),
}

RUNICS: dict[Category, tuple[str, ...]] = {
    Category.ARMOR: ARMOR_RUNICS,
    Category.WEAPON: WEAPON_RUNICS,
}

# Kinds whose effect harms the player; every other kind of these categories is benevolent.
MALEVOLENT_KINDS: dict[Category, frozenset[str]] = {
    Category.POTION: frozenset(
        {
            "caustic gas",
            "confusion",
            "creeping death",
            "darkness",
            "descent",
            "hallucination",
            "incineration",
            "paralysis",
        }
    ),
    Category.SCROLL: frozenset({"aggravate monsters", "summon monsters"}),
    Category.STAFF: frozenset({"haste", "healing", "protection"}),
    Category.WAND: frozenset({"empowerment", "invisibility", "plenty"}),
}


def contains_partial(names: Iterable[str], token: str) -> bool:
    """Return True when ``token`` is a non-empty substring of any name."""
    if not token:
        return False
    return any(token in name for name in names)


def is_kind_fragment(category: Category, token: str) -> bool:
    return contains_partial(KINDS.get(category, ()), token)


def is_runic_fragment(category: Category, token: str) -> bool:
    if category.is_meta:
        return False
    return contains_partial(RUNICS.get(category, ()), token)


def is_mutation_fragment(token: str) -> bool:
    return contains_partial(MUTATIONS, token)


def lookup_exact(names: Iterable[str], value: str) -> str | None:
    for name in names:
        if name == value:
            return name
    return None


def is_malevolent(category: Category, kind: str) -> bool | None:
    """Return the fixed polarity of ``kind``, or None when the category has no polarity table."""
    table = MALEVOLENT_KINDS.get(category)
    if table is None:
        return None
    return kind in table
