"""Git repository access: opening, per-thread handles, snapshot paths, identities."""

import configparser
import logging
import re
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import git  # GitPython

from contrib_inspector.exceptions import RepositoryError

logger = logging.getLogger(__name__)

_MAILMAP_RE = re.compile(r"<([^>]*)>\s*$")


def open_repo(path: Union[str, Path] = ".") -> git.Repo:
    """Open the repository containing ``path``, searching parent directories."""
    try:
        return git.Repo(str(path), search_parent_directories=True)
    except git.exc.NoSuchPathError as e:
        raise RepositoryError(f"no such path: {path}") from e
    except git.exc.InvalidGitRepositoryError as e:
        raise RepositoryError(f"not a git repository: {path}") from e


def repo_root(repo: git.Repo) -> Path:
    return Path(repo.working_tree_dir or repo.git_dir).resolve()


def head_commit(repo: git.Repo) -> git.Commit:
    """Return the commit HEAD points to."""
    try:
        return repo.head.commit
    except ValueError as e:
        # GitPython raises ValueError for an unborn branch
        raise RepositoryError(f"unable to resolve HEAD: {e}") from e


def default_identity(repo: git.Repo) -> str:
    """The ``user.email`` git is configured with."""
    try:
        email = repo.config_reader().get_value("user", "email")
    except (configparser.NoSectionError, configparser.NoOptionError) as e:
        raise RepositoryError(
            "no user.email configured; pass --email explicitly"
        ) from e
    email = str(email).strip()
    if not email:
        raise RepositoryError("bad email configured")
    return email


# ── Snapshot paths ────────────────────────────────────────────────────────

def list_snapshot_paths(
    repo: git.Repo, subdir: Optional[Union[str, Path]] = None
) -> list[str]:
    """List every file in HEAD's tree, optionally limited to ``subdir``."""
    tree = head_commit(repo).tree
    prefix = _relative_prefix(repo, subdir) if subdir is not None else None
    if prefix is not None:
        logger.info("limiting paths to %s", prefix)

    paths: list[str] = []
    for item in tree.traverse():
        if item.type != "blob":
            continue
        if prefix is not None and not _is_within(item.path, prefix):
            logger.debug("%s not in %s, skipping", item.path, prefix)
            continue
        paths.append(item.path)
    return sorted(paths)


def _relative_prefix(repo: git.Repo, subdir: Union[str, Path]) -> Optional[PurePosixPath]:
    root = repo_root(repo)
    target = Path(subdir).resolve()
    try:
        rel = target.relative_to(root)
    except ValueError as e:
        raise RepositoryError(f"{target} is outside the repository {root}") from e
    if rel == Path("."):
        return None
    return PurePosixPath(rel.as_posix())


def _is_within(path: str, prefix: PurePosixPath) -> bool:
    p = PurePosixPath(path)
    return p == prefix or prefix in p.parents


# ── Per-thread handles ────────────────────────────────────────────────────

class RepoPool:
    """Hands each thread its own ``git.Repo`` opened against the same path.

    Handles are created lazily on first use and live as long as the thread.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._local = threading.local()

    def repo(self) -> git.Repo:
        handle = getattr(self._local, "repo", None)
        if handle is None:
            logger.debug(
                "opening repository handle for thread %s", threading.get_ident()
            )
            handle = open_repo(self.path)
            self._local.repo = handle
        return handle

    def resolver(self) -> "IdentityResolver":
        resolver = getattr(self._local, "resolver", None)
        if resolver is None:
            resolver = IdentityResolver(self.repo())
            self._local.resolver = resolver
        return resolver


# ── Identities ────────────────────────────────────────────────────────────

class IdentityResolver:
    """Canonicalises author identities through the repository's mailmap."""

    def __init__(self, repo: git.Repo) -> None:
        self._repo = repo
        self._cache: dict[tuple[str, str], Optional[str]] = {}

    def resolve(self, actor: Optional[git.Actor]) -> Optional[str]:
        """Return the canonical email for ``actor``, or None if it has none."""
        if actor is None or not actor.email:
            return None
        key = (actor.name or "", actor.email)
        if key not in self._cache:
            self._cache[key] = self._check_mailmap(*key)
        return self._cache[key]

    def _check_mailmap(self, name: str, email: str) -> str:
        try:
            contact = f"{name} <{email}>" if name else f"<{email}>"
            out = self._repo.git.check_mailmap(contact)
        except git.exc.GitCommandError as e:
            logger.debug("check-mailmap failed for %s: %s", email, e)
            return email
        match = _MAILMAP_RE.search(out.strip())
        if not match or not match.group(1):
            return email
        return match.group(1)


# ── Timestamps ────────────────────────────────────────────────────────────

def authored_at(commit: git.Commit, local: bool = True) -> Optional[datetime]:
    """When ``commit`` was authored, in its author's timezone or UTC if not ``local``.

    Returns None when the timestamp cannot be converted. With ``local=False``
    only ``authored_date`` is read; touching the offset on a commit built by
    blame reloads it from the object database and drops its mailmapped author.
    """
    try:
        when = datetime.fromtimestamp(commit.authored_date, timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError) as e:
        logger.warning("unable to convert time of commit %s: %s", commit.hexsha, e)
        return None
    if not local:
        return when
    try:
        # GitPython stores the offset in seconds west of UTC
        tz = timezone(timedelta(seconds=-commit.author_tz_offset))
    except (ValueError, TypeError):
        logger.warning(
            "invalid timezone offset %r on commit %s, defaulting to UTC",
            commit.author_tz_offset,
            commit.hexsha,
        )
        return when
    return when.astimezone(tz)


def is_too_old(
    when: Optional[datetime], max_age: Optional[timedelta], now: datetime
) -> bool:
    """True when ``when`` falls before the ``max_age`` cutoff."""
    if max_age is None or when is None:
        return False
    return now - when > max_age
