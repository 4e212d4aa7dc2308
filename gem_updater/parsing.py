"""Pure parsers for Bundler and git output.

Nothing here runs a process; each function takes text and returns
structured values so the formats can be tested on their own.
"""

from __future__ import annotations

import re

from .models import Severity, UpgradeCandidate

# "  * rails (newest 7.1.3, installed 7.0.8, requested ~> 7.0)"
# ``bundle outdated --parseable`` drops the bullet, so it is optional.
OUTDATED_LINE = re.compile(
    r"^\s*(?:\*\s+)?(?P<name>\S+)\s+\(newest\s+(?P<newest>[^,\s)]+),"
    r"\s+installed\s+(?P<installed>[^,\s)]+)"
)

_LEADING_NUMERIC = re.compile(r"^[\d.]+")


def version_number(version: str) -> int | None:
    """Collapse a version string to an integer by dropping its dots.

    Only the leading numeric part is used, so "1.0.0.rc1" reads as 100.
    Returns None when the string has no leading digits.
    """
    match = _LEADING_NUMERIC.match(version)
    digits = match.group(0).replace(".", "") if match else ""
    if not digits:
        return None
    return int(digits)


def staleness_score(newest: str, installed: str) -> int:
    """Approximate how far behind ``installed`` is from ``newest``.

    This is a ranking heuristic, not a version comparison: both versions are
    read as base-10 integers with the dots removed and subtracted, so
    "1.2.10" vs "1.1.0" scores 1210 - 110 = 1100. Versions with a different
    number of segments can misorder ("1.10" vs "1.9.9"). A version with no
    numeric prefix scores 0, the lowest priority.
    """
    new_int = version_number(newest)
    installed_int = version_number(installed)
    if new_int is None or installed_int is None:
        return 0
    return new_int - installed_int


def parse_outdated(output: str, severity: Severity) -> list[UpgradeCandidate]:
    """Extract candidates from ``bundle outdated`` output.

    Lines that don't describe an outdated gem (banners, blank lines,
    resolver chatter) are ignored. Order of appearance is preserved.
    """
    candidates: list[UpgradeCandidate] = []
    for line in output.splitlines():
        match = OUTDATED_LINE.match(line)
        if not match:
            continue
        candidates.append(
            UpgradeCandidate(
                name=match["name"],
                severity=severity,
                staleness_score=staleness_score(match["newest"], match["installed"]),
            )
        )
    return candidates


def dedupe_and_rank(candidates: list[UpgradeCandidate]) -> list[UpgradeCandidate]:
    """Keep the first occurrence of each gem, then sort most stale first.

    The input is expected in tier-scan order (patch, minor, major), so the
    lowest tier a gem appears in wins. The sort is stable, so ties keep
    scan order.
    """
    seen: set[str] = set()
    unique: list[UpgradeCandidate] = []
    for candidate in candidates:
        if candidate.name in seen:
            continue
        seen.add(candidate.name)
        unique.append(candidate)
    return sorted(unique, key=lambda c: -c.staleness_score)


def lock_version_change(diff: str, gem: str) -> tuple[str, str] | None:
    """Find the old and new version of ``gem`` in a lock file word diff.

    Expects ``git diff --word-diff=plain`` output, where a bumped spec line
    reads ``    rack [-(2.2.7)-]{+(2.2.8)+}``.

    Returns:
        ``(old, new)`` or None if the gem's line didn't change.
    """
    pattern = re.compile(
        rf"^ *{re.escape(gem)} \[-\((?P<old>.+)\)-\]\{{\+\((?P<new>.+)\)\+\}}$",
        re.MULTILINE,
    )
    match = pattern.search(diff)
    if not match:
        return None
    return match["old"], match["new"]


def compare_links(uri: str, versions: tuple[str, str] | None) -> str:
    """Build GitHub-style compare links for a version bump.

    Tags are named either ``v1.2.3`` or ``1.2.3`` depending on the project,
    so both forms are offered. Returns "" when either input is missing.
    """
    if not uri or versions is None:
        return ""
    old, new = versions
    base = uri.rstrip("/")
    return f"{base}/compare/v{old}...v{new} or {base}/compare/{old}...{new}"
