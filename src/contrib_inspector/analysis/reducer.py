"""Chronological merge of commit-range partials.

Partials from adjacent commit ranges are combined oldest-to-newest. Renames
found in the newer range redirect contributions recorded in the older one, so
``combine`` is associative but not commutative: any parallel reduction must
keep the ranges contiguous and pass the older one on the left.
"""

from typing import Iterable, Sequence

from contrib_inspector.models import REMOVED, Contributions, Partial


def combine(older: Partial, newer: Partial) -> Partial:
    """Merge ``newer`` on top of ``older``. Both inputs are consumed."""
    merged: dict[str, Contributions] = {}

    for path, record in older.contributions.items():
        if path in newer.renames:
            target = newer.renames[path]
            if target is REMOVED:
                continue
            path = target
        _merge_into(merged, path, record)

    for path, record in newer.contributions.items():
        _merge_into(merged, path, record)

    renames = dict(older.renames)
    for src, dst in newer.renames.items():
        # Only the first older edge ending at ``src`` is chained.
        for old_src, old_dst in renames.items():
            if old_dst is not REMOVED and old_dst == src:
                renames[old_src] = dst
                break
        else:
            renames[src] = dst

    return Partial(contributions=merged, renames=renames)


def _merge_into(target: dict[str, Contributions], path: str, record: Contributions) -> None:
    existing = target.get(path)
    if existing is None:
        target[path] = record
    else:
        existing.merge(record)


def reduce_ordered(partials: Sequence[Partial]) -> Partial:
    """Combine oldest-first ``partials`` with a balanced, order-preserving split."""
    if not partials:
        return Partial()
    if len(partials) == 1:
        return partials[0]
    mid = len(partials) // 2
    return combine(reduce_ordered(partials[:mid]), reduce_ordered(partials[mid:]))


def restrict_to(partial: Partial, paths: Iterable[str]) -> dict[str, Contributions]:
    """Keep only the contributions for ``paths``."""
    wanted = set(paths)
    return {p: c for p, c in partial.contributions.items() if p in wanted}
