"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import git
import pytest

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class RepoBuilder:
    """Builds a throwaway git history with explicit authors and dates."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.repo = git.Repo.init(path)
        with self.repo.config_writer() as cw:
            cw.set_value("user", "name", "Me")
            cw.set_value("user", "email", "me@example.com")

    def write(self, rel: str, lines: list[str]) -> None:
        target = self.path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("".join(f"{line}\n" for line in lines))

    def move(self, old: str, new: str) -> None:
        target = self.path / new
        target.parent.mkdir(parents=True, exist_ok=True)
        (self.path / old).rename(target)

    def remove(self, rel: str) -> None:
        (self.path / rel).unlink()

    def commit(self, email: str, days_ago: int, message: str = "change") -> git.Commit:
        self.repo.git.add(A=True)
        actor = git.Actor(email.split("@")[0].title(), email)
        when = NOW - timedelta(days=days_ago)
        stamp = f"{int(when.timestamp())} +0000"
        return self.repo.index.commit(
            message,
            author=actor,
            committer=actor,
            author_date=stamp,
            commit_date=stamp,
        )


def alice_lines(n: int, start: int = 1) -> list[str]:
    return [f"alice {i:02d}" for i in range(start, start + n)]


@pytest.fixture
def builder(tmp_path):
    return RepoBuilder(tmp_path / "repo")


@pytest.fixture
def history_repo(builder):
    """carol's root commit, then alice/bob/alice on f.txt → g.txt.

    1. alice adds f.txt with 10 lines (300 days ago)
    2. bob rewrites lines 3-6 and renames f.txt to g.txt (200 days ago)
    3. alice appends 2 lines to g.txt (10 days ago)
    """
    builder.write("README.md", ["# project"])
    builder.commit("carol@example.com", 400, "initial")

    lines = alice_lines(10)
    builder.write("f.txt", lines)
    builder.commit("alice@example.com", 300, "add f")

    lines[2:6] = [f"bobby {i:02d}" for i in range(3, 7)]
    builder.remove("f.txt")
    builder.write("g.txt", lines)
    builder.commit("bob@example.com", 200, "rewrite and rename")

    builder.write("g.txt", lines + alice_lines(2, start=11))
    builder.commit("alice@example.com", 10, "append")
    return builder
