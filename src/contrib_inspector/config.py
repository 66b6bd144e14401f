"""Configuration for an inspection run.

Values come from CLI flags, falling back to environment variables (a ``.env``
file is loaded first by the CLI):

    CONTRIB_INSPECTOR_EMAIL    comma-separated identities to report on
    CONTRIB_INSPECTOR_IGNORE   comma-separated identities to ignore
    CONTRIB_INSPECTOR_MAX_AGE  duration such as ``6M`` or ``2w 3d``
    CONTRIB_INSPECTOR_WORKERS  worker thread count
"""

import os
import re
from datetime import timedelta
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from contrib_inspector.exceptions import ConfigError
from contrib_inspector.models import Mode

ENV_PREFIX = "CONTRIB_INSPECTOR_"

_SECONDS = {
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "M": 2_630_016, "month": 2_630_016, "months": 2_630_016,
    "y": 31_557_600, "year": 31_557_600, "years": 31_557_600,
}

_DURATION_RE = re.compile(r"(\d+)\s*([A-Za-z]+)")


def parse_duration(text: str) -> timedelta:
    """Parse ``6M``, ``2w 3d``, ``1year 2months`` and similar into a timedelta.

    ``m`` is minutes and ``M`` is months (30.44 days); a year is 365.25 days.
    """
    text = text.strip()
    if not text:
        raise ConfigError("empty duration")
    pos = 0
    seconds = 0
    for match in _DURATION_RE.finditer(text):
        if text[pos:match.start()].strip():
            break
        unit = match.group(2)
        factor = _SECONDS.get(unit)
        if factor is None and len(unit) > 1:
            factor = _SECONDS.get(unit.lower())
        if factor is None:
            raise ConfigError(f"unknown time unit {unit!r} in duration {text!r}")
        seconds += int(match.group(1)) * factor
        pos = match.end()
    if pos == 0 or text[pos:].strip():
        raise ConfigError(f"invalid duration {text!r}")
    return timedelta(seconds=seconds)


def _split_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class InspectConfig(BaseModel):
    """Options for one inspection run."""

    directory: Optional[str] = None
    emails: list[str] = Field(default_factory=list)
    ignore_users: list[str] = Field(default_factory=list)
    max_age: Optional[timedelta] = None
    mode: Mode = Mode.direct
    show_authors: bool = False
    max_authors: int = Field(default=3, ge=1)
    flat: bool = False
    reverse: bool = False
    all: bool = False
    max_depth: Optional[int] = Field(default=None, ge=0)
    workers: Optional[int] = Field(default=None, ge=1)
    progress: bool = True
    verbose: int = 0

    @field_validator("max_age", mode="before")
    @classmethod
    def _parse_max_age(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @model_validator(mode="after")
    def _check_conflicts(self) -> "InspectConfig":
        if self.show_authors:
            for flag in ("emails", "all", "reverse"):
                if getattr(self, flag):
                    raise ValueError(f"show_authors conflicts with {flag}")
        if self.flat and self.max_depth is not None:
            raise ValueError("max_depth conflicts with flat")
        return self

    @property
    def search_path(self) -> str:
        """Where to look for the repository."""
        return self.directory or "."

    @property
    def show_progress(self) -> bool:
        return self.progress and self.verbose == 0


def env_defaults(environ: Optional[Mapping[str, str]] = None) -> dict[str, object]:
    """Config values taken from ``CONTRIB_INSPECTOR_*`` environment variables."""
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    if emails := _split_list(env.get(ENV_PREFIX + "EMAIL")):
        values["emails"] = emails
    if ignored := _split_list(env.get(ENV_PREFIX + "IGNORE")):
        values["ignore_users"] = ignored
    if max_age := env.get(ENV_PREFIX + "MAX_AGE"):
        values["max_age"] = max_age
    if workers := env.get(ENV_PREFIX + "WORKERS"):
        try:
            values["workers"] = int(workers)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}WORKERS must be an integer, got {workers!r}") from e
    return values


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides: object) -> InspectConfig:
    """Build a config from environment defaults overlaid with ``overrides``.

    Overrides that are None or empty lists are treated as unset.

    Raises:
        ConfigError: a value is invalid or two options conflict.
    """
    values = env_defaults(environ)
    if overrides.get("show_authors"):
        values.pop("emails", None)
    for key, value in overrides.items():
        if value is None or value == []:
            continue
        values[key] = value
    try:
        return InspectConfig(**values)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"invalid configuration: {messages}") from e
