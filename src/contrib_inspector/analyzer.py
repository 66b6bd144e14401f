"""Attribution engine orchestration.

Opens the repository, enumerates the snapshot, runs the selected attribution
mode on a thread pool, and returns a complete InspectionResult.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Callable, Optional

import git  # GitPython

from contrib_inspector.analysis.blame import blame_path
from contrib_inspector.analysis.history import attribute_commit, qualifying_commits
from contrib_inspector.analysis.ranking import drop_ignored
from contrib_inspector.analysis.reducer import reduce_ordered, restrict_to
from contrib_inspector.config import InspectConfig
from contrib_inspector.exceptions import AttributionError
from contrib_inspector.models import (
    Contributions,
    FileContribution,
    InspectionResult,
    Mode,
    Partial,
)
from contrib_inspector.repo import (
    RepoPool,
    default_identity,
    head_commit,
    list_snapshot_paths,
    open_repo,
    repo_root,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ProgressCounter:
    """Counts finished units of work across worker threads."""

    def __init__(self, total: int = 0, on_progress: Optional[ProgressCallback] = None) -> None:
        self.total = total
        self._done = 0
        self._lock = threading.Lock()
        self._on_progress = on_progress

    @property
    def done(self) -> int:
        return self._done

    def increment(self) -> None:
        with self._lock:
            self._done += 1
            done = self._done
        if self._on_progress:
            self._on_progress(done, self.total)


class Analyzer:
    """End-to-end line attribution for one repository."""

    def __init__(
        self,
        config: InspectConfig,
        on_status: Optional[Callable[[str], None]] = None,
        on_progress: Optional[ProgressCallback] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.config = config
        self.workers = config.workers or os.cpu_count() or 1
        self._on_status = on_status or (lambda _: None)
        self._on_progress = on_progress
        self._now = now
        self._skipped = 0
        self._skip_lock = threading.Lock()

    # ── Status helper ─────────────────────────────────────────────────────

    def _status(self, msg: str) -> None:
        logger.info(msg)
        self._on_status(msg)

    def _skip(self) -> None:
        with self._skip_lock:
            self._skipped += 1

    # ── Full inspection ───────────────────────────────────────────────────

    def inspect(self) -> InspectionResult:
        """Run the whole attribution pipeline.

        Raises:
            RepositoryError: the repository, HEAD or default identity is unusable.
        """
        cfg = self.config
        now = self._now or datetime.now(timezone.utc)
        self._skipped = 0

        self._status("Opening repository …")
        repo = open_repo(cfg.search_path)
        root = repo_root(repo)
        head_commit(repo)
        logger.info("repo: %s", root)

        identities: list[str] = []
        if not cfg.show_authors:
            identities = list(cfg.emails) or [default_identity(repo)]
            logger.info("looking for lines made by %s", ", ".join(identities))
        if cfg.max_age is not None:
            logger.info("max age: %s", cfg.max_age)

        paths = list_snapshot_paths(repo, cfg.directory)
        pool = RepoPool(root)

        if cfg.mode is Mode.overwritten:
            records = self._attribute_overwritten(repo, pool, paths, now)
        else:
            records = self._attribute_direct(pool, paths, now)

        files = [
            FileContribution(path=path, contributions=records[path])
            for path in sorted(records)
        ]
        files = drop_ignored(files, cfg.ignore_users)

        self._status("Done!")
        return InspectionResult(
            repo_root=str(root),
            mode=cfg.mode,
            identities=identities,
            files=files,
            skipped=self._skipped,
        )

    # ── Direct mode ───────────────────────────────────────────────────────

    def _attribute_direct(
        self, pool: RepoPool, paths: list[str], now: datetime
    ) -> dict[str, Contributions]:
        self._status(f"Blaming {len(paths)} files …")
        progress = ProgressCounter(len(paths), self._on_progress)
        records: dict[str, Contributions] = {}
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {
                executor.submit(self._blame_one, pool, path, now, progress): path
                for path in paths
            }
            for future in as_completed(futures):
                record = future.result()
                if record is not None:
                    records[futures[future]] = record
        return records

    def _blame_one(
        self, pool: RepoPool, path: str, now: datetime, progress: ProgressCounter
    ) -> Optional[Contributions]:
        logger.debug("blaming %s", path)
        try:
            return blame_path(pool.repo(), path, self.config.max_age, now)
        except AttributionError as e:
            logger.warning("Error blaming file %s (%s)", path, e)
            self._skip()
            return None
        finally:
            progress.increment()

    # ── Overwritten-lines mode ────────────────────────────────────────────

    def _attribute_overwritten(
        self, repo: git.Repo, pool: RepoPool, paths: list[str], now: datetime
    ) -> dict[str, Contributions]:
        commits = [c.hexsha for c in qualifying_commits(repo, self.config.max_age, now)]
        self._status(f"Walking {len(commits)} commits …")
        progress = ProgressCounter(len(commits), self._on_progress)

        chunks = _contiguous_chunks(commits, self.workers)
        with ThreadPoolExecutor(max_workers=max(1, len(chunks))) as executor:
            futures = [
                executor.submit(self._walk_chunk, pool, chunk, progress)
                for chunk in chunks
            ]
            # chunk order is commit order; the reducer depends on it
            partials = [f.result() for f in futures]

        self._status("Combining history …")
        return restrict_to(reduce_ordered(partials), paths)

    def _walk_chunk(
        self, pool: RepoPool, hexshas: list[str], progress: ProgressCounter
    ) -> Partial:
        repo = pool.repo()
        resolver = pool.resolver()
        partials: list[Partial] = []
        for hexsha in hexshas:
            logger.debug("diffing %s", hexsha)
            try:
                partials.append(attribute_commit(repo, repo.commit(hexsha), resolver))
            except AttributionError as e:
                logger.warning("Error walking commit %s (%s)", hexsha, e)
                self._skip()
            finally:
                progress.increment()
        return reduce_ordered(partials)


def _contiguous_chunks(items: list[str], n: int) -> list[list[str]]:
    """Split ``items`` into at most ``n`` contiguous, order-preserving chunks."""
    if not items:
        return []
    n = max(1, min(n, len(items)))
    size, extra = divmod(len(items), n)
    chunks: list[list[str]] = []
    start = 0
    for i in range(n):
        end = start + size + (1 if i < extra else 0)
        chunks.append(items[start:end])
        start = end
    return chunks
