"""Runtime settings read from the environment.

Entry points load a local ``.env`` (python-dotenv) before calling
:func:`load_settings`; library callers may also build
:class:`AnalyticsSettings` directly. Recognized variables:

- ``FA_TIMEZONE``: IANA zone used to turn timestamps into calendar days
  (default ``UTC``).
- ``FA_HISTORY_MONTHS``: how many months before the current one the
  historical series reaches back (default ``5``, i.e. six months in total).
- ``FINANCE_ANALYTICS_LOG_LEVEL``: see :mod:`finance_analytics.logging_setup`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import UTC, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .logging_setup import LEVEL_ENV_VAR, parse_level

TIMEZONE_ENV_VAR = "FA_TIMEZONE"
HISTORY_MONTHS_ENV_VAR = "FA_HISTORY_MONTHS"


@lru_cache(maxsize=32)
def resolve_timezone(name: str | None) -> tzinfo:
    """Return the ``tzinfo`` for an IANA zone name (``None``/``"UTC"`` -> UTC)."""

    if name is None or name.strip().upper() in {"", "UTC", "Z"}:
        return UTC
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"unknown time zone: {name!r}") from exc


class AnalyticsSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    timezone: str = "UTC"
    history_months: int = Field(default=5, ge=0, le=120)
    log_level: int | str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        resolve_timezone(v)
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: int | str) -> int | str:
        parse_level(v)
        return v

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)


def load_settings(environ: Mapping[str, str] | None = None) -> AnalyticsSettings:
    """Build settings from ``environ`` (defaults to ``os.environ``).

    Unset or empty variables fall back to the model defaults. Any invalid
    value is reported as a :class:`ConfigurationError`.
    """

    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for field, var in (
        ("timezone", TIMEZONE_ENV_VAR),
        ("history_months", HISTORY_MONTHS_ENV_VAR),
        ("log_level", LEVEL_ENV_VAR),
    ):
        raw = env.get(var)
        if raw is not None and raw.strip():
            values[field] = raw
    try:
        return AnalyticsSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc


__all__ = ["AnalyticsSettings", "load_settings", "resolve_timezone"]
