"""Seed catalog discovery and opening."""

from __future__ import annotations

import codecs
from collections.abc import Iterator
import logging
from pathlib import Path
import random
from typing import TextIO

from brogue_scanner.config import Encoding
from brogue_scanner.errors import ConfigurationError


logger = logging.getLogger(__name__)

CATALOG_SUFFIX = ".csv"
_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)

# Python codec names; both consume the byte-order mark.
_CODECS: dict[str, str] = {"utf-16": "utf-16", "utf-8": "utf-8-sig"}


def other_encoding(encoding: Encoding) -> Encoding:
    return "utf-8" if encoding == "utf-16" else "utf-16"


def matches_encoding(path: Path, encoding: Encoding) -> bool:
    """Check the byte-order mark of ``path`` against ``encoding``.

    UTF-16 catalogs must start with the UTF-16LE mark; any file without a
    UTF-16 mark is treated as UTF-8.
    """
    try:
        with path.open("rb") as handle:
            head = handle.read(4)
    except OSError:
        return False
    if encoding == "utf-16":
        return head.startswith(codecs.BOM_UTF16_LE)
    return not head.startswith(_UTF16_BOMS)


def _walk(directory: Path, depth: int, nesting_max: int) -> Iterator[Path]:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if depth < nesting_max:
                try:
                    nested = list(_walk(entry, depth + 1, nesting_max))
                except OSError as exc:
                    logger.warning("Skipping unreadable directory %s: %s", entry, exc)
                    continue
                yield from nested
        elif entry.suffix == CATALOG_SUFFIX:
            yield entry


def list_catalog_files(root: Path, encoding: Encoding, nesting_max: int = 0) -> list[Path]:
    if not root.is_dir():
        raise ConfigurationError([f"catalog directory not found: {root}"])
    try:
        candidates = list(_walk(root, 0, nesting_max))
    except OSError as exc:
        raise ConfigurationError([f"cannot read catalog directory {root}: {exc.strerror or exc}"]) from exc
    return [path for path in candidates if matches_encoding(path, encoding)]


def find_catalog_files(
    root: Path,
    encoding: Encoding,
    nesting_max: int = 0,
    *,
    shuffle: bool = False,
    rng: random.Random | None = None,
) -> tuple[list[Path], Encoding]:
    """Return candidate catalogs under ``root`` and the encoding they use.

    When no file matches ``encoding`` the other encoding is tried. Paths are
    sorted unless ``shuffle`` is set.
    """
    paths = list_catalog_files(root, encoding, nesting_max)
    if not paths:
        encoding = other_encoding(encoding)
        paths = list_catalog_files(root, encoding, nesting_max)
    if shuffle:
        (rng or random.Random()).shuffle(paths)
    return paths, encoding


def open_catalog(path: Path, encoding: Encoding) -> TextIO:
    return path.open("r", encoding=_CODECS[encoding], newline="")
