"""Data models for contrib-inspector."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field


# ── Contribution record ───────────────────────────────────────────────────

class Contributions(BaseModel):
    """Lines attributed to each author for one path or subtree.

    ``total_lines`` always equals the sum of ``authors`` once a public
    method returns.
    """

    authors: dict[str, int] = Field(default_factory=dict)
    total_lines: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_lines == 0

    def add_lines(self, author: str, n: int) -> None:
        """Credit ``n`` lines to ``author``."""
        if n < 0:
            raise ValueError(f"cannot add a negative line count ({n})")
        self.authors[author] = self.authors.get(author, 0) + n
        self.total_lines += n

    def merge(self, other: "Contributions") -> "Contributions":
        """Fold ``other`` into this record and return it.

        ``other`` is consumed and must not be used afterwards.
        """
        for author, lines in other.authors.items():
            self.authors[author] = self.authors.get(author, 0) + lines
        self.total_lines += other.total_lines
        return self

    def filter_ignored(self, ignored: Iterable[str]) -> None:
        """Drop ignored authors and their lines from the record."""
        for author in set(ignored):
            lines = self.authors.pop(author, None)
            if lines is not None:
                self.total_lines -= lines

    def lines_by(self, identities: Iterable[str]) -> int:
        return sum(self.authors.get(i, 0) for i in set(identities))

    def ratio_by(self, identities: Iterable[str]) -> float:
        """Share of the lines written by ``identities``; NaN for an empty record."""
        if self.total_lines == 0:
            return math.nan
        return self.lines_by(identities) / self.total_lines

    def top_authors(self, n: int) -> list[tuple[str, float]]:
        """Top ``n`` authors by share, highest first."""
        ranked = [
            (email, lines / self.total_lines if self.total_lines else math.nan)
            for email, lines in sorted(self.authors.items())
        ]
        ranked.sort(key=lambda pair: _desc_key(pair[1]))
        return ranked[:n]

    def authors_str(self, n: int) -> str:
        parts = ", ".join(
            f"{email}: {ratio * 100:.1f}%" for email, ratio in self.top_authors(n)
        )
        return f"({parts})"


def _desc_key(ratio: float) -> float:
    # NaN shares tie with each other, so the stable sort keeps their order
    return 0.0 if math.isnan(ratio) else -ratio


# ── History-walk partials ─────────────────────────────────────────────────

REMOVED: Optional[str] = None
"""Rename destination marking a path that stopped existing."""


@dataclass
class Partial:
    """Contributions and rename edges produced by a contiguous commit range."""

    contributions: dict[str, Contributions] = field(default_factory=dict)
    renames: dict[str, Optional[str]] = field(default_factory=dict)


# ── Results ───────────────────────────────────────────────────────────────

class Mode(str, Enum):
    """How lines are attributed."""

    direct = "direct"
    overwritten = "overwritten"


class FileContribution(BaseModel):
    """Attribution for one file in the current snapshot."""

    path: str
    contributions: Contributions = Field(default_factory=Contributions)


class InspectionResult(BaseModel):
    """Complete result of one attribution run."""

    repo_root: str
    mode: Mode = Mode.direct
    identities: list[str] = Field(default_factory=list)
    files: list[FileContribution] = Field(default_factory=list)
    skipped: int = 0
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_lines(self) -> int:
        return sum(f.contributions.total_lines for f in self.files)
