"""Streaming match engine.

Rows of one seed are contiguous. Each in-bounds row is tested against the
criteria in order and accepted by at most one of them. Matches are buffered
per seed and committed when the seed closes (at the next seed or at end of
file) with every criterion satisfied. Any early exit abandons the seed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from pathlib import Path

from brogue_scanner.catalog import vocabulary
from brogue_scanner.catalog.objects import build_object
from brogue_scanner.categories import KIND_POLARITY, NUMERIC_POLARITY, Category
from brogue_scanner.config import Encoding
from brogue_scanner.errors import CatalogFormatError
from brogue_scanner.files import open_catalog
from brogue_scanner.rows import Row, read_rows
from brogue_scanner.search.criteria import MagicPolarity, SearchCriterion
from brogue_scanner.search.models import FileScanError, SearchMatch, SearchReport
from brogue_scanner.search.query import SearchQuery, SeedScratch


logger = logging.getLogger(__name__)

INPUT_ERRORS = (CatalogFormatError, OSError, UnicodeError)


def _magic_matches(row: Row, polarity: MagicPolarity) -> bool:
    if row.category in NUMERIC_POLARITY:
        if row.enchantment is None:
            return False
        if polarity is MagicPolarity.BENEVOLENT:
            return row.enchantment > 0
        return row.enchantment < 0
    if row.category in KIND_POLARITY:
        malevolent = vocabulary.is_malevolent(row.category, row.kind)
        return malevolent == (polarity is MagicPolarity.MALEVOLENT)
    return False


def _ally_matches(row: Row, criterion: SearchCriterion) -> bool:
    if criterion.any_legendary and row.ally_status != vocabulary.LEGENDARY_STATUS:
        return False
    if criterion.status is not None and criterion.status not in row.ally_status:
        return False
    if criterion.any_mutation and not row.mutation:
        return False
    if criterion.mutation is not None and criterion.mutation not in row.mutation:
        return False
    return True


def matches_criterion(row: Row, criterion: SearchCriterion) -> bool:
    """Category predicate; unset criterion fields accept any row."""
    if criterion.kind is not None and criterion.kind not in row.kind:
        return False
    if criterion.enchantment is not None:
        if row.enchantment is None or not row.category.has_enchantment:
            return False
        if not criterion.enchantment.accepts(row.enchantment):
            return False
    if criterion.any_runic or criterion.runic is not None:
        if not row.category.has_runic or not row.runic:
            return False
        if criterion.runic is not None and criterion.runic not in row.runic:
            return False
    if not criterion.vault.accepts(row.in_vault):
        return False
    if criterion.magic is not None and not _magic_matches(row, criterion.magic):
        return False
    if row.category is Category.ALLY and not _ally_matches(row, criterion):
        return False
    return True


def evaluate(row: Row, query: SearchQuery) -> SearchMatch | None:
    """Return the match produced by the first criterion accepting ``row``.

    The accepting criterion's running count grows by the row quantity and the
    match carries the resulting outcome.
    """
    mask = row.category.mask
    for criterion in query.criteria:
        if not criterion.mask.intersects(mask) or row.depth > criterion.max_depth:
            continue
        if not matches_criterion(row, criterion):
            continue
        outcome = criterion.record(row.quantity)
        return SearchMatch(
            seed=row.seed,
            depth=row.depth,
            object=build_object(row),
            outcome=outcome,
            vault=row.vault,
            carried_by=row.carried_by,
        )
    return None


def _close_seed(query: SearchQuery, scratch: SeedScratch) -> None:
    if scratch.satisfied and not scratch.abandoned and query.all_satisfied():
        query.commit(scratch)


def scan_rows(rows: Iterable[Row], query: SearchQuery) -> int:
    """Scan one file's rows, committing satisfied seeds to ``query``.

    Returns the number of seeds committed. Stops once the success target is
    reached.
    """
    committed_before = query.successes
    scratch = SeedScratch()
    query.reset_counts()

    for row in rows:
        if not query.in_bounds(row):
            continue
        if row.seed != scratch.seed:
            if scratch.seed is not None:
                _close_seed(query, scratch)
                if query.is_complete():
                    return query.successes - committed_before
            scratch.start(row.seed)
            query.reset_counts()
        if scratch.abandoned:
            continue

        match = evaluate(row, query)
        if match is None:
            continue
        if match.outcome.abandons_seed:
            logger.debug("Seed %s abandoned at depth %s", row.seed, row.depth)
            scratch.abandon()
            continue
        scratch.buffer.append(match)
        if not scratch.satisfied and query.all_satisfied():
            scratch.satisfied = True

    if scratch.seed is not None:
        _close_seed(query, scratch)
    return query.successes - committed_before


def scan_file(path: Path, query: SearchQuery, encoding: Encoding) -> int:
    try:
        with open_catalog(path, encoding) as stream:
            return scan_rows(read_rows(stream), query)
    except CatalogFormatError as exc:
        if exc.path is None:
            raise exc.with_path(path) from exc
        raise


def search_files(
    paths: Sequence[Path],
    query: SearchQuery,
    encoding: Encoding,
    *,
    stop_on_error: bool = False,
) -> SearchReport:
    """Scan ``paths`` in order until the query's success target is met.

    A file that fails with an input error stops at the failing record; seeds
    it already committed are kept. The failure is recorded in the report and
    the next file is scanned, unless ``stop_on_error`` is set, in which case
    the error propagates.
    """
    report = SearchReport(target=query.target)
    for path in paths:
        if query.is_complete():
            break
        logger.info("Searching file %s", path)
        try:
            committed = scan_file(path, query, encoding)
        except INPUT_ERRORS as exc:
            logger.error("Failed to scan %s: %s", path, exc)
            report.errors.append(FileScanError(path=path, error_type=type(exc).__name__, message=str(exc)))
            if stop_on_error:
                raise
            continue
        finally:
            report.files_scanned += 1
        logger.debug("Committed %d seeds from %s", committed, path)

    report.matches = list(query.results)
    report.successes = query.successes
    return report
