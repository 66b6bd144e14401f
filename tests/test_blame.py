"""Tests for direct-blame attribution."""

import logging
from datetime import timedelta
from unittest.mock import MagicMock

import git
import pytest

from contrib_inspector.analysis.blame import blame_path
from contrib_inspector.exceptions import AttributionError

from conftest import NOW


def _entry(email: str, lines: int, days_ago: int = 1) -> MagicMock:
    commit = MagicMock(hexsha="abc123")
    commit.author = git.Actor("Someone", email)
    commit.authored_date = int((NOW - timedelta(days=days_ago)).timestamp())
    return MagicMock(commit=commit, linenos=range(1, lines + 1))


class TestBlamePath:
    def test_surviving_lines_follow_rename(self, history_repo):
        record = blame_path(history_repo.repo, "g.txt", now=NOW)
        assert record.authors == {"alice@example.com": 8, "bob@example.com": 4}
        assert record.total_lines == 12

    def test_single_author_file(self, history_repo):
        record = blame_path(history_repo.repo, "README.md", now=NOW)
        assert record.authors == {"carol@example.com": 1}

    def test_max_age_drops_old_hunks_from_total(self, history_repo):
        record = blame_path(history_repo.repo, "g.txt", max_age=timedelta(days=30), now=NOW)
        assert record.authors == {"alice@example.com": 2}
        assert record.total_lines == 2

    def test_max_age_keeps_recent_rewrites(self, history_repo):
        record = blame_path(history_repo.repo, "g.txt", max_age=timedelta(days=250), now=NOW)
        assert record.authors == {"alice@example.com": 2, "bob@example.com": 4}

    def test_mailmap_is_applied(self, history_repo):
        (history_repo.path / ".mailmap").write_text(
            "Bob <robert@example.com> <bob@example.com>\n"
        )
        record = blame_path(history_repo.repo, "g.txt", now=NOW)
        assert record.authors == {"alice@example.com": 8, "robert@example.com": 4}

    def test_mailmap_is_applied_with_max_age(self, history_repo):
        (history_repo.path / ".mailmap").write_text(
            "Bob <robert@example.com> <bob@example.com>\n"
        )
        record = blame_path(history_repo.repo, "g.txt", max_age=timedelta(days=250), now=NOW)
        assert record.authors == {"alice@example.com": 2, "robert@example.com": 4}

    def test_hunk_without_email_is_skipped(self, caplog):
        repo = MagicMock()
        repo.blame_incremental.return_value = [_entry("alice@example.com", 3), _entry("", 5)]
        with caplog.at_level(logging.WARNING, logger="contrib_inspector.analysis.blame"):
            record = blame_path(repo, "f.txt", now=NOW)
        assert record.authors == {"alice@example.com": 3}
        assert record.total_lines == 3
        assert "hunk without email found in f.txt" in caplog.text

    def test_missing_path(self, history_repo):
        with pytest.raises(AttributionError) as exc:
            blame_path(history_repo.repo, "nope.txt", now=NOW)
        assert "nope.txt" in str(exc.value)
