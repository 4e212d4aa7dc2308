"""Outdated detector: which gems to update, most stale first."""

from __future__ import annotations

import logging
from pathlib import Path

from . import bundler
from .models import Severity, UpgradeCandidate
from .parsing import dedupe_and_rank, parse_outdated

log = logging.getLogger(__name__)

# Scan order matters: a gem reported in several tiers keeps its first tier.
TIERS = (Severity.PATCH, Severity.MINOR, Severity.MAJOR)


def outdated_in_tier(severity: Severity, cwd: Path) -> list[UpgradeCandidate]:
    """Query Bundler for one tier and parse the result."""
    candidates = parse_outdated(bundler.outdated(severity, cwd), severity)
    log.debug("%d outdated %s gems", len(candidates), severity.value)
    return candidates


def detect(cwd: Path) -> list[UpgradeCandidate]:
    """Rank every outdated gem in ``cwd``.

    Returns:
        Candidates unique by name, in non-increasing staleness order.
    """
    found: list[UpgradeCandidate] = []
    for severity in TIERS:
        found.extend(outdated_in_tier(severity, cwd))
    ranked = dedupe_and_rank(found)
    for c in ranked:
        log.info("  %s (%s, staleness %d)", c.name, c.severity.value, c.staleness_score)
    return ranked
