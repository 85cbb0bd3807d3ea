"""Match and report records produced by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from brogue_scanner.catalog.objects import GameObject
from brogue_scanner.search.criteria import MatchOutcome


@dataclass(frozen=True, slots=True)
class SearchMatch:
    """A catalog row accepted by one criterion."""

    seed: int
    depth: int
    object: GameObject
    outcome: MatchOutcome
    vault: int | None = None
    carried_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "depth": self.depth,
            "object": self.object.to_dict(),
            "vault": self.vault,
            "carried_by": self.carried_by,
            "outcome": self.outcome.value,
        }

    def __str__(self) -> str:
        if self.carried_by is not None:
            return f"{self.object} ({self.carried_by})"
        if self.vault is not None:
            return f"{self.object} (vault {self.vault})"
        return str(self.object)


@dataclass(frozen=True, slots=True)
class FileScanError:
    """A catalog file whose scan stopped on an input error."""

    path: Path
    error_type: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": str(self.path), "error_type": self.error_type, "message": self.message}


@dataclass(slots=True)
class SearchReport:
    """Outcome of a multi-file search."""

    target: int
    matches: list[SearchMatch] = field(default_factory=list)
    successes: int = 0
    files_scanned: int = 0
    errors: list[FileScanError] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return self.successes >= self.target

    @property
    def seeds(self) -> list[int]:
        seen: list[int] = []
        for match in self.matches:
            if not seen or seen[-1] != match.seed:
                seen.append(match.seed)
        return seen

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "successes": self.successes,
            "satisfied": self.satisfied,
            "files_scanned": self.files_scanned,
            "seeds": self.seeds,
            "matches": [match.to_dict() for match in self.matches],
            "errors": [error.to_dict() for error in self.errors],
        }
