"""Tests for configuration loading."""

from datetime import timedelta

import pytest

from contrib_inspector.config import InspectConfig, env_defaults, load_config, parse_duration
from contrib_inspector.exceptions import ConfigError
from contrib_inspector.models import Mode


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("3d", timedelta(days=3)),
            ("2w", timedelta(weeks=2)),
            ("12h", timedelta(hours=12)),
            ("90m", timedelta(minutes=90)),
            ("6M", timedelta(seconds=6 * 2_630_016)),
            ("1y", timedelta(days=365.25)),
            ("2w 3d", timedelta(days=17)),
            ("1year 2months", timedelta(seconds=31_557_600 + 2 * 2_630_016)),
            ("5 Days", timedelta(days=5)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "3", "3x", "2w junk", "-3d"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            parse_duration(text)


class TestInspectConfig:
    def test_defaults(self):
        cfg = InspectConfig()
        assert cfg.mode is Mode.direct
        assert cfg.max_authors == 3
        assert cfg.search_path == "."
        assert cfg.show_progress

    def test_max_age_string_is_parsed(self):
        assert InspectConfig(max_age="3d").max_age == timedelta(days=3)

    def test_verbose_hides_progress(self):
        assert not InspectConfig(verbose=1).show_progress


class TestLoadConfig:
    def test_env_defaults(self):
        env = {
            "CONTRIB_INSPECTOR_EMAIL": "a@x.com, b@x.com",
            "CONTRIB_INSPECTOR_IGNORE": "old@x.com",
            "CONTRIB_INSPECTOR_MAX_AGE": "2w",
            "CONTRIB_INSPECTOR_WORKERS": "4",
        }
        cfg = load_config(environ=env)
        assert cfg.emails == ["a@x.com", "b@x.com"]
        assert cfg.ignore_users == ["old@x.com"]
        assert cfg.max_age == timedelta(weeks=2)
        assert cfg.workers == 4

    def test_overrides_win(self):
        cfg = load_config(
            environ={"CONTRIB_INSPECTOR_EMAIL": "env@x.com"}, emails=["cli@x.com"]
        )
        assert cfg.emails == ["cli@x.com"]

    def test_unset_overrides_fall_back_to_env(self):
        cfg = load_config(
            environ={"CONTRIB_INSPECTOR_EMAIL": "env@x.com"}, emails=[], max_age=None
        )
        assert cfg.emails == ["env@x.com"]
        assert cfg.max_age is None

    def test_show_authors_ignores_env_email(self):
        cfg = load_config(environ={"CONTRIB_INSPECTOR_EMAIL": "env@x.com"}, show_authors=True)
        assert cfg.emails == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"show_authors": True, "emails": ["a@x.com"]},
            {"show_authors": True, "all": True},
            {"show_authors": True, "reverse": True},
            {"flat": True, "max_depth": 2},
            {"max_authors": 0},
            {"workers": 0},
        ],
    )
    def test_conflicts_and_bad_values(self, overrides):
        with pytest.raises(ConfigError):
            load_config(environ={}, **overrides)

    def test_bad_worker_env(self):
        with pytest.raises(ConfigError):
            env_defaults({"CONTRIB_INSPECTOR_WORKERS": "many"})

    def test_bad_duration(self):
        with pytest.raises(ConfigError):
            load_config(environ={}, max_age="soon")
