"""Latest-release lookup against the GitHub releases API."""

from __future__ import annotations

import logging
import re
import sys

import requests

logger = logging.getLogger(__name__)

RELEASE_URL = "https://api.github.com/repos/phsym/kmip-explorer/releases/latest"
REQUEST_TIMEOUT_SECONDS = 3.0
DEV_VERSION = "(devel)"

_SEMVER_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$")


def parse_version(text: str) -> tuple[int, int, int, tuple[tuple[int, int | str], ...]] | None:
    """Return a sortable key for a semantic version string, or ``None`` if it is not one.

    Releases sort after their pre-releases; pre-release identifiers compare
    numerically when numeric and lexically otherwise.
    """
    match = _SEMVER_RE.match(text.strip())
    if match is None:
        return None
    major, minor, patch, pre = match.groups()
    if pre is None:
        pre_key: tuple[tuple[int, int | str], ...] = ((2, 0),)
    else:
        pre_key = tuple((0, int(part)) if part.isdigit() else (1, part) for part in pre.split("."))
    return int(major), int(minor or 0), int(patch or 0), pre_key


def is_dev_version(version: str) -> bool:
    return version == DEV_VERSION or "dev" in version or parse_version(version) is None


def fetch_latest_version(url: str = RELEASE_URL, timeout: float = REQUEST_TIMEOUT_SECONDS) -> str:
    """Return the ``tag_name`` of the latest release."""
    response = requests.get(url, headers={"Accept": "application/vnd.github+json"}, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    tag = payload.get("tag_name") if isinstance(payload, dict) else None
    if not isinstance(tag, str) or not tag:
        raise ValueError("release has no tag_name")
    return tag


def check_latest_version(current: str) -> str | None:
    """Return the newer release tag, or ``None`` when up to date or undeterminable.

    Development builds are never checked. Network failures print a warning to
    stderr and never raise.
    """
    if is_dev_version(current):
        return None
    try:
        latest = fetch_latest_version()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("version check failed: %s", exc)
        print(f"Fail to check latest version: {exc}", file=sys.stderr)
        return None
    current_key = parse_version(current)
    latest_key = parse_version(latest)
    if current_key is None or latest_key is None:
        return None
    if current_key < latest_key:
        logger.info("newer release available: %s", latest)
        return latest
    return None


__all__ = [
    "DEV_VERSION",
    "RELEASE_URL",
    "check_latest_version",
    "fetch_latest_version",
    "is_dev_version",
    "parse_version",
]
