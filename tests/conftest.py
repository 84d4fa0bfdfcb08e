"""Pytest configuration for test isolation.

Settings are read from ``FA_*`` / ``FINANCE_ANALYTICS_LOG_LEVEL`` environment
variables, and the CLI attaches a stream handler to the package logger. Both
would leak between tests (and from the developer's shell), so an autouse
fixture clears the variables and undoes any logging configuration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `finance_analytics` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

from finance_analytics.logging_setup import reset_logging  # noqa: E402

_ENV_VARS = ("FA_TIMEZONE", "FA_HISTORY_MONTHS", "FINANCE_ANALYTICS_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # The CLI loads `.env` from the working directory; keep it empty.
    monkeypatch.chdir(tmp_path)
    yield
    # `.env` loading writes straight to os.environ; drop anything it added.
    for var in _ENV_VARS:
        os.environ.pop(var, None)
    reset_logging()
