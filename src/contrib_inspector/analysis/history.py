"""History-walk attribution: credit every line written, even if later overwritten."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

import git  # GitPython

from contrib_inspector.exceptions import AttributionError
from contrib_inspector.models import REMOVED, Contributions, Partial
from contrib_inspector.repo import IdentityResolver, authored_at, is_too_old

logger = logging.getLogger(__name__)

_HUNK_RE = re.compile(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@", re.MULTILINE)


def qualifying_commits(
    repo: git.Repo,
    max_age: Optional[timedelta] = None,
    now: Optional[datetime] = None,
    rev: str = "HEAD",
) -> list[git.Commit]:
    """Single-parent commits reachable from ``rev``, oldest first.

    Merge and root commits are left out, as are commits authored before
    ``now - max_age``.
    """
    now = now or datetime.now(timezone.utc)
    commits: list[git.Commit] = []
    for commit in repo.iter_commits(rev, topo_order=True, reverse=True):
        if len(commit.parents) != 1:
            logger.debug("skipping %s with %d parents", commit.hexsha, len(commit.parents))
            continue
        if is_too_old(authored_at(commit), max_age, now):
            continue
        commits.append(commit)
    return commits


def hunk_sizes(patch: str) -> Iterator[tuple[int, int]]:
    """Yield ``(old_lines, new_lines)`` for each hunk header in ``patch``."""
    for match in _HUNK_RE.finditer(patch):
        old, new = match.groups()
        yield (1 if old is None else int(old), 1 if new is None else int(new))


def attribute_commit(
    repo: git.Repo, commit: git.Commit, resolver: IdentityResolver
) -> Partial:
    """Diff ``commit`` against its parent and attribute the changed lines.

    Lines go to the commit author at each file's post-change path; moved and
    deleted files are recorded as rename edges.

    Raises:
        AttributionError: the diff could not be computed.
    """
    parent = commit.parents[0]
    try:
        # GitPython always passes -M, so moves show up as renames
        diffs = parent.diff(commit, create_patch=True, unified=0)
    except (git.exc.GitCommandError, ValueError) as e:
        raise AttributionError(
            f"unable to diff commit {commit.hexsha}", {"error": str(e)}
        ) from e

    author = resolver.resolve(commit.author)
    if author is None:
        logger.warning("commit %s has no valid author email", commit.hexsha)

    partial = Partial()
    for d in diffs:
        old_path = d.rename_from or d.a_path
        new_path = d.rename_to or d.b_path
        old_exists = not d.new_file
        new_exists = not d.deleted_file

        if old_exists and old_path and not new_exists:
            partial.renames[old_path] = REMOVED
        elif old_exists and old_path and new_path and old_path != new_path:
            partial.renames[old_path] = new_path

        if not new_exists or author is None or not new_path:
            continue
        patch = _decode(d.diff)
        for old_lines, new_lines in hunk_sizes(patch):
            changed = max(old_lines, new_lines)
            if changed:
                partial.contributions.setdefault(new_path, Contributions()).add_lines(
                    author, changed
                )
    return partial


def _decode(patch) -> str:
    if isinstance(patch, bytes):
        return patch.decode("utf-8", errors="replace")
    return patch or ""
