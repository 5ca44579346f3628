"""
patternenforcer.metrics - Enforcement Metrics
=============================================

Counts how often each check runs and how many violations it finds, per
day, in ``.enforcement-metrics.json`` (or the configured ``logPath``)::

    {
      "2026-10-18": {
        "fileNaming": {"runs": 3, "violations": 1}
      }
    }

Days older than :data:`RETENTION_DAYS` are pruned on every write.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from patternenforcer.models import MetricsConfig


logger = logging.getLogger(__name__)

RETENTION_DAYS = 30

Metrics = dict[str, dict[str, dict[str, int]]]


class MetricsStore:
    """
    Reads and updates the metrics file for one project.

    Parameters
    ----------
    root : Path
        Project root; ``config.log_path`` is resolved against it.

    config : MetricsConfig | None
        Metrics settings. Defaults to enabled with the default path.
    """

    def __init__(self, root: Path, config: MetricsConfig | None = None) -> None:
        self.config = config or MetricsConfig()
        self.path = root / self.config.log_path

    def load(self) -> Metrics:
        """Return the stored metrics; an unreadable file reads as empty."""
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Discarding unreadable metrics file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Discarding malformed metrics file %s", self.path)
            return {}
        return data

    def record(self, check: str, violations: int, today: date | None = None) -> None:
        """Count one run of ``check`` that found ``violations`` violations."""
        if not self.config.enabled:
            return

        day = today or datetime.now(timezone.utc).date()
        metrics = self.load()
        entry = metrics.setdefault(day.isoformat(), {}).setdefault(check, {"runs": 0, "violations": 0})
        entry["runs"] = entry.get("runs", 0) + 1
        entry["violations"] = entry.get("violations", 0) + violations

        metrics = _prune(metrics, day)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(metrics, indent=2, sort_keys=True) + "\n", encoding="utf-8")

    def totals(self) -> dict[str, dict[str, int]]:
        """Sum runs and violations per check across all stored days."""
        totals: dict[str, dict[str, int]] = {}
        for checks in self.load().values():
            if not isinstance(checks, dict):
                continue
            for check, counts in checks.items():
                total = totals.setdefault(check, {"runs": 0, "violations": 0})
                total["runs"] += int(counts.get("runs", 0))
                total["violations"] += int(counts.get("violations", 0))
        return totals


def _prune(metrics: dict[str, Any], today: date) -> Metrics:
    cutoff = today - timedelta(days=RETENTION_DAYS)
    kept: Metrics = {}
    for key, value in metrics.items():
        try:
            day = date.fromisoformat(key)
        except ValueError:
            logger.debug("Dropping metrics entry with invalid date %r", key)
            continue
        if day >= cutoff:
            kept[key] = value
    return kept
