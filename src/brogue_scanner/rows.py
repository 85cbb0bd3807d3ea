"""Seed catalog rows and CSV decoding."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
import csv
from dataclasses import dataclass, field
import logging
from typing import TextIO

from brogue_scanner.categories import Category
from brogue_scanner.errors import CatalogFormatError


logger = logging.getLogger(__name__)

COLUMNS: tuple[str, ...] = (
    "dungeon_version",
    "seed",
    "depth",
    "quantity",
    "category",
    "kind",
    "enchantment",
    "runic",
    "vault_number",
    "opens_vault_number",
    "carried_by_monster_name",
    "ally_status_name",
    "mutation_name",
)
HEADER_SIGNATURE = "dungeon_versionseeddepth"

U8_MAX = 0xFF
U32_MAX = 0xFFFFFFFF
I8_MIN, I8_MAX = -128, 127


@dataclass(frozen=True, slots=True)
class Row:
    """One seed catalog record."""

    dungeon_version: str
    seed: int
    depth: int
    quantity: int
    category: Category
    kind: str
    enchantment: int | None = None
    runic: str = ""
    vault: int | None = None
    opens_vault: int | None = None
    carried_by: str | None = None
    ally_status: str = ""
    mutation: str = ""
    line: int | None = field(default=None, compare=False)

    @property
    def in_vault(self) -> bool:
        return self.vault is not None


def validate_header(fields: Sequence[str]) -> None:
    """Reject headers that do not look like a Brogue seed catalog."""
    if len(fields) != len(COLUMNS):
        raise CatalogFormatError(f"expected {len(COLUMNS)} header fields, found {len(fields)}", line=1)
    joined = "".join(name.strip() for name in fields)
    if HEADER_SIGNATURE not in joined:
        raise CatalogFormatError("header is not a seed catalog header", line=1)


def _parse_int(value: str, column: str, lower: int, upper: int, line: int) -> int:
    text = value.strip()
    try:
        number = int(text)
    except ValueError:
        raise CatalogFormatError(f"{column} is not an integer: {value!r}", line=line) from None
    if not lower <= number <= upper:
        raise CatalogFormatError(f"{column} out of range [{lower}, {upper}]: {number}", line=line)
    return number


def _parse_optional_int(value: str, column: str, lower: int, upper: int, line: int) -> int | None:
    if not value.strip():
        return None
    return _parse_int(value, column, lower, upper, line)


def _optional_text(value: str) -> str | None:
    text = value.strip()
    return text or None


def parse_row(fields: Sequence[str], line: int) -> Row:
    """Decode one data record into a :class:`Row`."""
    if len(fields) != len(COLUMNS):
        raise CatalogFormatError(f"expected {len(COLUMNS)} fields, found {len(fields)}", line=line)
    (
        dungeon_version,
        seed,
        depth,
        quantity,
        category,
        kind,
        enchantment,
        runic,
        vault,
        opens_vault,
        carried_by,
        ally_status,
        mutation,
    ) = fields
    try:
        parsed_category = Category.parse(category.strip())
    except ValueError:
        raise CatalogFormatError(f"unknown category: {category!r}", line=line) from None

    return Row(
        dungeon_version=dungeon_version.strip(),
        seed=_parse_int(seed, "seed", 0, U32_MAX, line),
        depth=_parse_int(depth, "depth", 0, U8_MAX, line),
        quantity=_parse_int(quantity, "quantity", 0, U32_MAX, line),
        category=parsed_category,
        kind=kind.strip(),
        enchantment=_parse_optional_int(enchantment, "enchantment", I8_MIN, I8_MAX, line),
        runic=runic.strip(),
        vault=_parse_optional_int(vault, "vault_number", 0, U8_MAX, line),
        opens_vault=_parse_optional_int(opens_vault, "opens_vault_number", 0, U8_MAX, line),
        carried_by=_optional_text(carried_by),
        ally_status=ally_status.strip(),
        mutation=mutation.strip(),
        line=line,
    )


def read_rows(stream: TextIO) -> Iterator[Row]:
    """Yield rows from an open catalog stream after validating its header.

    Blank lines are skipped. Errors carry the 1-based line number of the
    offending record.
    """
    reader = csv.reader(stream)
    try:
        header = next(reader)
    except StopIteration:
        raise CatalogFormatError("catalog is empty", line=1) from None
    except csv.Error as exc:
        raise CatalogFormatError(f"unreadable header: {exc}", line=1) from exc
    validate_header(header)

    while True:
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raise CatalogFormatError(f"malformed record: {exc}", line=reader.line_num) from exc
        if not fields:
            continue
        yield parse_row(fields, reader.line_num)
