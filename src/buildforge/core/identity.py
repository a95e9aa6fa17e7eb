"""Build identity derivation and build folder discovery."""

import re
from pathlib import Path

VERSION_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)*", re.ASCII)


def extract_version_number(tag: str) -> str:
    """Extract the numeric version from a release tag.

    Args:
        tag: Release tag such as ``4.2.1-stable``

    Returns:
        Dotted numeric component, e.g. ``4.2.1``

    Raises:
        ValueError: If the tag does not start with a version number
    """
    match = VERSION_NUMBER_PATTERN.match(tag)
    if match is None:
        raise ValueError(f"Tag has no version number: {tag!r}")
    return match.group(0)


def sanitize_slug(name: str) -> str:
    """Convert name to safe slug.

    Args:
        name: Name to sanitize

    Returns:
        Lowercase slug with only alphanumeric and hyphens
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    slug = slug.strip("-")
    return slug[:50] if slug else "unnamed"


def derive_identity(prefix: str, tag: str, variant_name: str) -> str:
    """Build folder name for a version and variant.

    Identities are lowercase so they key the registry the same way on
    case-sensitive and case-insensitive filesystems.

    Example:
        >>> derive_identity("godot", "4.2.1-stable", "Steam Deck")
        'godot-4.2.1-steam-deck'
    """
    return f"{sanitize_slug(prefix)}-{extract_version_number(tag)}-{sanitize_slug(variant_name)}"


def discover_build_folders(builds_dir: Path, marker: str) -> list[Path]:
    """List directories under ``builds_dir`` that contain ``marker``, sorted by name."""
    if not builds_dir.is_dir():
        return []
    return sorted(
        (d for d in builds_dir.iterdir() if d.is_dir() and (d / marker).is_file()),
        key=lambda d: d.name,
    )
