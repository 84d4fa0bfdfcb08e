"""Exception types raised by ``finance_analytics``.

Two families matter to callers:

- :class:`ConfigurationError` marks a programmer or configuration mistake
  (unknown granularity, bad time zone name). It is raised immediately and is
  never recovered from inside the package.
- :class:`RecordError` marks a single malformed movement. Normalizers raise it;
  aggregators catch it, log the reason, and exclude the record.

Both also derive from :class:`ValueError` so existing ``except ValueError``
handlers keep working.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for all package errors."""


class ConfigurationError(AnalyticsError, ValueError):
    """Invalid configuration or call arguments."""


class RecordError(AnalyticsError, ValueError):
    """A single movement record could not be normalized."""


__all__ = ["AnalyticsError", "ConfigurationError", "RecordError"]
