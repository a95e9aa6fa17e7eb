"""buildforge state directory utilities."""

from pathlib import Path

from ..constants import STATE_DIR


def get_state_dir(working_dir: Path | None = None) -> Path:
    """Get .buildforge directory path.

    Args:
        working_dir: Directory the tool runs in, defaults to the current directory

    Returns:
        Path to .buildforge directory
    """
    if working_dir is None:
        working_dir = Path.cwd()
    return working_dir / STATE_DIR
