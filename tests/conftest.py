"""Shared test fixtures and configuration."""

import codecs
from collections.abc import Callable, Sequence
import os
from pathlib import Path

import pytest


HEADER = (
    "dungeon_version,seed,depth,quantity,category,kind,enchantment,runic,vault_number,"
    "opens_vault_number,carried_by_monster_name,ally_status_name,mutation_name"
)


def _catalog_line(
    seed: int,
    depth: int,
    category: str,
    kind: str,
    *,
    quantity: int = 1,
    enchantment: int | str = "",
    runic: str = "",
    vault: int | str = "",
    opens_vault: int | str = "",
    carried_by: str = "",
    status: str = "",
    mutation: str = "",
    version: str = "CE 1.12",
) -> str:
    fields = (
        version,
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
        status,
        mutation,
    )
    return ",".join(str(field) for field in fields)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Drop scanner settings from the environment and keep stray .env files out of reach."""
    for key in list(os.environ):
        if key.upper().startswith("BROGUE_SCANNER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def catalog_line() -> Callable[..., str]:
    """Build one CSV record; keyword arguments name optional columns."""
    return _catalog_line


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[..., Path]:
    """Write a seed catalog with the standard header.

    Files default to UTF-16LE with a byte-order mark, the format Brogue CE
    writes on Windows.
    """

    def _write(
        name: str,
        lines: Sequence[str],
        *,
        encoding: str = "utf-16",
        header: str = HEADER,
        directory: Path | None = None,
    ) -> Path:
        target_dir = directory or tmp_path / "catalogs"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        text = "\n".join([header, *lines]) + "\n"
        if encoding == "utf-16":
            path.write_bytes(codecs.BOM_UTF16_LE + text.encode("utf-16-le"))
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog_header() -> str:
    return HEADER
