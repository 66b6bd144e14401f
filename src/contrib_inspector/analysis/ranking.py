"""Ignore-list filtering and per-file ranking."""

import math
from typing import Iterable

from contrib_inspector.models import FileContribution


def drop_ignored(
    files: Iterable[FileContribution], ignored: Iterable[str]
) -> list[FileContribution]:
    """Remove ignored authors from every record, then drop files left empty."""
    ignored = set(ignored)
    kept: list[FileContribution] = []
    for f in files:
        if ignored:
            f.contributions.filter_ignored(ignored)
        if f.contributions.total_lines > 0:
            kept.append(f)
    return kept


def rank_by_ratio(
    files: Iterable[FileContribution],
    identities: Iterable[str],
    reverse: bool = False,
    include_all: bool = False,
) -> list[tuple[str, float]]:
    """``(path, ratio)`` by share written by ``identities``, highest first.

    Empty records rank as ties. Files the identities never touched are left
    out unless ``include_all`` is set.
    """
    identities = set(identities)
    ranked = [(f.path, f.contributions.ratio_by(identities)) for f in files]

    def key(pair: tuple[str, float]) -> float:
        ratio = pair[1]
        if math.isnan(ratio):
            return 0.0
        return ratio if reverse else -ratio

    ranked.sort(key=key)
    if include_all:
        return ranked
    return [(path, ratio) for path, ratio in ranked if ratio > 0.0]
