"""Plain-text rendering of a search and its matches."""

from __future__ import annotations

from collections.abc import Sequence

from brogue_scanner.config import Encoding, SearchLimits
from brogue_scanner.search.criteria import SearchCriterion
from brogue_scanner.search.models import SearchMatch, SearchReport


TITLE = "=====  BROGUE SEED SCANNER  ====="

_ENCODING_LABELS = {"utf-8": "UTF-8", "utf-16": "UTF-16LE"}


def render_search(
    limits: SearchLimits,
    criteria: Sequence[SearchCriterion],
    encoding: Encoding,
    verbosity: int,
) -> str:
    lines = [
        "Search:",
        f" verbosity: {verbosity}",
        f"    format: {_ENCODING_LABELS[encoding]}",
        f"     depth: {limits.depth_min} to {limits.depth_max}",
        f"      seed: {limits.seed_min} to {limits.seed_max}",
        f"   matches: {limits.matches_max}",
        "Objects:",
    ]
    lines.extend(f"    {criterion.describe()}" for criterion in criteria)
    return "\n".join(lines)


def render_matches(matches: Sequence[SearchMatch], verbosity: int) -> str:
    """Group matches by seed, then depth, down to the level ``verbosity`` allows.

    Verbosity 1 lists seeds, 2 adds depths and 3 adds the matched objects.
    """
    lines: list[str] = []
    seed_count = 0
    seed: int | None = None
    depth: int | None = None

    if matches:
        lines.extend(["Matches:", ""])
    for match in matches:
        if match.seed != seed:
            seed = match.seed
            depth = None
            seed_count += 1
            lines.append(f"Seed {seed}")
        if verbosity > 1 and match.depth != depth:
            depth = match.depth
            lines.append(f"    Depth {depth}")
        if verbosity > 2:
            lines.append(f"        {match}")
    lines.extend(["", f"...{seed_count} matches found."])
    return "\n".join(lines)


def render_errors(report: SearchReport) -> str:
    return "\n".join(f"error: {error.path}: {error.message}" for error in report.errors)
