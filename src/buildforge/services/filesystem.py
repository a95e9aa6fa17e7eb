"""Archive extraction and file staging for build folders."""

import logging
import shutil
from pathlib import Path

from ..errors import MissingArtifactError

logger = logging.getLogger(__name__)


def extract_archive(archive: Path, destination: Path) -> None:
    """Unpack an archive (zip, tar.*) into ``destination``.

    Raises:
        MissingArtifactError: If the archive does not exist
    """
    if not archive.is_file():
        raise MissingArtifactError(f"Archive not found: {archive}")
    destination.mkdir(parents=True, exist_ok=True)
    shutil.unpack_archive(archive, destination)


def stage_file(source: Path, destination_dir: Path, required: bool = False) -> Path | None:
    """Copy ``source`` into ``destination_dir``.

    Args:
        source: File to copy
        destination_dir: Directory to copy into (created if missing)
        required: Raise instead of skipping when ``source`` is absent

    Returns:
        Path of the staged copy, or None if an optional source was skipped

    Raises:
        MissingArtifactError: If a required source is absent
    """
    if not source.is_file():
        if required:
            raise MissingArtifactError(f"Required artifact not found: {source}")
        logger.warning("Skipping missing artifact: %s", source)
        return None
    destination_dir.mkdir(parents=True, exist_ok=True)
    return Path(shutil.copy2(source, destination_dir))


def find_first(directory: Path, pattern: str) -> Path | None:
    """Return the first file in ``directory`` matching ``pattern``, sorted by name."""
    if not directory.is_dir():
        return None
    matches = sorted(p for p in directory.glob(pattern) if p.is_file())
    return matches[0] if matches else None
