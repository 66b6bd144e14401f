"""Direct-blame attribution of the lines that survive in HEAD."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import git  # GitPython

from contrib_inspector.exceptions import AttributionError
from contrib_inspector.models import Contributions
from contrib_inspector.repo import authored_at, is_too_old

logger = logging.getLogger(__name__)


def blame_path(
    repo: git.Repo,
    path: str,
    max_age: Optional[timedelta] = None,
    now: Optional[datetime] = None,
    rev: str = "HEAD",
) -> Contributions:
    """Fold the blame of ``path`` at ``rev`` into a Contributions record.

    Hunks authored before ``now - max_age`` are dropped from both the
    author count and the total. Hunks without an author email are skipped.

    Raises:
        AttributionError: git could not blame the file.
    """
    now = now or datetime.now(timezone.utc)
    contributions = Contributions()
    try:
        for entry in repo.blame_incremental(rev, path):
            lines = len(entry.linenos)
            commit = entry.commit
            # blame already applied the mailmap to this author
            email = commit.author.email if commit.author else ""
            if is_too_old(authored_at(commit, local=False), max_age, now):
                continue
            if not email:
                logger.warning("hunk without email found in %s", path)
                continue
            contributions.add_lines(email, lines)
    except (git.exc.GitCommandError, ValueError) as e:
        raise AttributionError(f"unable to blame {path}", {"error": str(e)}) from e
    return contributions
