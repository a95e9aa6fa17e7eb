"""Upstream release listing and stable-version ordering."""

import logging
import os
import re
from collections.abc import Iterable

import requests

from ..constants import RELEASES_TIMEOUT
from ..models import ReleaseCandidate, Version

logger = logging.getLogger(__name__)

# <major>.<minor>[.<patch>]-stable, nothing else
STABLE_TAG_PATTERN = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?-stable", re.ASCII)


def parse_stable_tag(tag: str) -> Version | None:
    """Parse a stable release tag into ``(major, minor, patch)``.

    Args:
        tag: Raw tag such as ``4.2.1-stable`` or ``4.3-stable``

    Returns:
        Parsed version (patch defaults to 0), or None for pre-releases,
        release candidates and anything else not ending in ``-stable``
    """
    match = STABLE_TAG_PATTERN.fullmatch(tag)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


def sort_key(candidate: ReleaseCandidate) -> tuple[Version, str]:
    """Ordering key: parsed version, then raw tag to break ties."""
    return candidate.version, candidate.tag


def select_stable_releases(tags: Iterable[str], limit: int) -> list[ReleaseCandidate]:
    """Filter tags to stable releases, newest first, truncated to ``limit``.

    Tags that parse to the same version are ordered by raw tag string,
    descending, so the result is deterministic.
    """
    candidates = []
    for tag in tags:
        if not tag:
            continue
        version = parse_stable_tag(tag)
        if version is not None:
            candidates.append(ReleaseCandidate(tag=tag, version=version))
    candidates.sort(key=sort_key, reverse=True)
    return candidates[:limit]


class VersionResolver:
    """Fetches release tags from a GitHub-style releases endpoint."""

    def __init__(
        self,
        releases_url: str,
        timeout: int = RELEASES_TIMEOUT,
        token: str | None = None,
    ) -> None:
        self.releases_url = releases_url
        self.timeout = timeout
        self.token = token if token is not None else os.environ.get("GITHUB_TOKEN")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_tags(self) -> list[str]:
        """Fetch raw ``tag_name`` values from the releases endpoint.

        Raises:
            requests.RequestException: On transport errors or HTTP error status
            ValueError: If the response body is not a JSON list
        """
        r = requests.get(
            self.releases_url,
            headers=self._headers(),
            params={"per_page": 100},
            timeout=self.timeout,
        )
        r.raise_for_status()
        data = r.json()
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of releases, got {type(data).__name__}")
        return [
            item["tag_name"]
            for item in data
            if isinstance(item, dict) and isinstance(item.get("tag_name"), str)
        ]

    def fetch_recent_stable_releases(self, limit: int) -> list[ReleaseCandidate]:
        """Return up to ``limit`` stable releases, newest first.

        Network and parse failures are logged and reported as an empty
        list; callers treat empty as "no releases available".
        """
        try:
            tags = self.fetch_tags()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Could not fetch releases from %s: %s", self.releases_url, e)
            return []
        releases = select_stable_releases(tags, limit)
        logger.debug("Found %d stable releases out of %d tags", len(releases), len(tags))
        return releases
