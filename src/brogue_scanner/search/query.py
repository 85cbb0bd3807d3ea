"""Search aggregate and per-seed scratch state."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from brogue_scanner.config import SearchLimits
from brogue_scanner.rows import Row
from brogue_scanner.search.criteria import SearchCriterion
from brogue_scanner.search.models import SearchMatch


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SeedScratch:
    """State of the seed currently being scanned."""

    seed: int | None = None
    buffer: list[SearchMatch] = field(default_factory=list)
    satisfied: bool = False
    abandoned: bool = False

    def start(self, seed: int) -> None:
        self.seed = seed
        self.buffer.clear()
        self.satisfied = False
        self.abandoned = False

    def abandon(self) -> None:
        self.abandoned = True
        self.satisfied = False
        self.buffer.clear()


@dataclass(slots=True)
class SearchQuery:
    """Compiled criteria plus the bounds, success target and results of one run.

    Criteria order is evaluation priority. Running counts belong to the seed
    being scanned; ``successes`` and ``results`` accumulate across files.
    """

    limits: SearchLimits
    criteria: list[SearchCriterion]
    successes: int = 0
    results: list[SearchMatch] = field(default_factory=list)

    @property
    def target(self) -> int:
        return self.limits.matches_max

    def in_bounds(self, row: Row) -> bool:
        return self.limits.seed_in_range(row.seed) and self.limits.depth_in_range(row.depth)

    def all_satisfied(self) -> bool:
        return all(criterion.is_satisfied() for criterion in self.criteria)

    def reset_counts(self) -> None:
        for criterion in self.criteria:
            criterion.reset()

    def is_complete(self) -> bool:
        return self.successes >= self.target

    def commit(self, scratch: SeedScratch) -> None:
        self.results.extend(scratch.buffer)
        self.successes += 1
        logger.debug("Seed %s satisfied all criteria (%d/%d)", scratch.seed, self.successes, self.target)
