"""Tests for the data models."""

import math
from datetime import timedelta

import pytest

from contrib_inspector.models import (
    Contributions,
    FileContribution,
    InspectionResult,
    Mode,
    Partial,
)


def _record(**authors: int) -> Contributions:
    c = Contributions()
    for author, n in authors.items():
        c.add_lines(author, n)
    return c


def _invariant_holds(c: Contributions) -> bool:
    return c.total_lines == sum(c.authors.values())


class TestAddLines:
    def test_creates_and_increments(self):
        c = Contributions()
        c.add_lines("alice", 3)
        c.add_lines("alice", 2)
        c.add_lines("bob", 1)
        assert c.authors == {"alice": 5, "bob": 1}
        assert c.total_lines == 6
        assert _invariant_holds(c)

    def test_zero_lines_creates_entry(self):
        c = Contributions()
        c.add_lines("alice", 0)
        assert c.authors == {"alice": 0}
        assert c.total_lines == 0

    def test_negative_rejected(self):
        c = Contributions()
        with pytest.raises(ValueError):
            c.add_lines("alice", -1)
        assert c.total_lines == 0

    def test_empty_record(self):
        c = Contributions()
        assert c.is_empty
        assert _invariant_holds(c)


class TestMerge:
    def test_additive_union(self):
        a = _record(alice=4, bob=1)
        a.merge(_record(bob=2, carol=3))
        assert a.authors == {"alice": 4, "bob": 3, "carol": 3}
        assert a.total_lines == 10
        assert _invariant_holds(a)

    def test_merge_with_empty_is_identity(self):
        a = _record(alice=4, bob=1)
        a.merge(Contributions())
        assert a == _record(alice=4, bob=1)

    def test_commutative(self):
        ab = _record(alice=1, bob=2).merge(_record(bob=3, carol=4))
        ba = _record(bob=3, carol=4).merge(_record(alice=1, bob=2))
        assert ab.authors == ba.authors
        assert ab.total_lines == ba.total_lines

    def test_associative(self):
        left = _record(alice=1).merge(_record(bob=2)).merge(_record(alice=3, carol=1))
        right = _record(alice=1).merge(_record(bob=2).merge(_record(alice=3, carol=1)))
        assert left.authors == right.authors
        assert left.total_lines == right.total_lines

    def test_returns_self(self):
        a = _record(alice=1)
        assert a.merge(_record(bob=1)) is a


class TestFilterIgnored:
    def test_removes_ignored_author(self):
        c = _record(alice=10, bob=5)
        c.filter_ignored({"alice"})
        assert c.authors == {"bob": 5}
        assert c.total_lines == 5

    def test_unknown_identity_is_noop(self):
        c = _record(alice=10)
        c.filter_ignored(["nobody"])
        assert c.authors == {"alice": 10}
        assert c.total_lines == 10

    def test_ignoring_everyone_empties_record(self):
        c = _record(alice=10, bob=5)
        c.filter_ignored(["alice", "bob"])
        assert c.is_empty
        assert c.authors == {}

    def test_duplicate_ignored_entries_counted_once(self):
        c = _record(alice=10, bob=5)
        c.filter_ignored(["alice", "alice"])
        assert c.total_lines == 5


class TestRatios:
    def test_lines_by(self):
        c = _record(alice=3, bob=2, carol=5)
        assert c.lines_by(["alice", "carol"]) == 8
        assert c.lines_by(["nobody"]) == 0

    def test_ratio_single_author_is_one(self):
        c = _record(alice=7)
        assert c.ratio_by(["alice"]) == 1.0

    def test_ratio_multiple_identities(self):
        c = _record(alice=1, alice_old=1, bob=2)
        assert c.ratio_by(["alice", "alice_old"]) == 0.5

    def test_ratio_of_empty_record_is_nan(self):
        assert math.isnan(Contributions().ratio_by(["alice"]))


class TestTopAuthors:
    def test_descending_by_share(self):
        c = _record(alice=1, bob=6, carol=3)
        top = c.top_authors(2)
        assert [a for a, _ in top] == ["bob", "carol"]
        assert top[0][1] == pytest.approx(0.6)

    def test_n_larger_than_authors(self):
        c = _record(alice=1)
        assert c.top_authors(5) == [("alice", 1.0)]

    def test_ties_keep_identity_order(self):
        c = _record(carol=2, alice=2, bob=2)
        assert [a for a, _ in c.top_authors(3)] == ["alice", "bob", "carol"]

    def test_nan_shares_keep_prior_order(self):
        c = Contributions(authors={"zed": 0, "amy": 0}, total_lines=0)
        top = c.top_authors(2)
        assert [a for a, _ in top] == ["amy", "zed"]
        assert all(math.isnan(r) for _, r in top)

    def test_authors_str(self):
        c = _record(alice=3, bob=1)
        assert c.authors_str(3) == "(alice: 75.0%, bob: 25.0%)"
        assert c.authors_str(1) == "(alice: 75.0%)"


class TestPartial:
    def test_defaults_are_independent(self):
        a, b = Partial(), Partial()
        a.renames["x"] = "y"
        assert b.renames == {}


class TestInspectionResult:
    def test_total_lines(self):
        result = InspectionResult(
            repo_root="/tmp/r",
            files=[
                FileContribution(path="a", contributions=_record(alice=2)),
                FileContribution(path="b", contributions=_record(bob=3)),
            ],
        )
        assert result.total_lines == 5
        assert result.mode is Mode.direct
        assert result.skipped == 0

    def test_generated_at_is_utc(self):
        result = InspectionResult(repo_root="/tmp/r")
        assert result.generated_at.utcoffset() == timedelta(0)
