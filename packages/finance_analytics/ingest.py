"""Load exported movement rows from disk.

Supports the two export shapes the tracker produces:

- CSV with a header row (e.g. ``fecha,tipo,monto,categoria``);
- JSON holding an array of objects (the backend's query result as is).

Rows are returned raw; normalization and skipping of malformed rows happen
in the aggregators.
"""

from __future__ import annotations

import csv
import json
from os import PathLike
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .logging_setup import get_logger

logger = get_logger("finance_analytics.ingest")


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise csv.Error(f"CSV appears to have no header row: {path}")
        rows: list[dict[str, Any]] = []
        for row in reader:
            # Skip blank lines (all values empty)
            if all((v or "").strip() == "" for k, v in row.items() if k is not None):
                continue
            rows.append({k.strip(): v for k, v in row.items() if k is not None})
        return rows


def _read_json(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array of movements in {path}")
    rows = [item for item in payload if isinstance(item, dict)]
    if len(rows) != len(payload):
        logger.warning("Ignoring %d non-object entries in %s", len(payload) - len(rows), path)
    return rows


def load_movements(path: str | PathLike[str]) -> list[dict[str, Any]]:
    """Read movement rows from a ``.csv`` or ``.json`` file.

    Raises ``OSError`` for unreadable files, ``csv.Error`` /
    ``json.JSONDecodeError`` / ``ValueError`` for malformed content and
    :class:`~finance_analytics.errors.ConfigurationError` for an unsupported
    extension.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".csv":
        rows = _read_csv(p)
    elif suffix == ".json":
        rows = _read_json(p)
    else:
        raise ConfigurationError(f"unsupported movements file type: {p.suffix or '(none)'}")
    logger.debug("Loaded %d movement rows from %s", len(rows), p)
    return rows


__all__ = ["load_movements"]
