"""External toolchain presence checks."""

import shutil

from ..config import ToolsConfig
from ..errors import ToolMissingError


def find_missing_tools(tools: dict[str, str]) -> list[str]:
    """Return names of tools whose executable is not on PATH.

    Args:
        tools: Mapping of tool name to executable (name or path)
    """
    return [name for name, executable in tools.items() if shutil.which(executable) is None]


def check_tools(config: ToolsConfig) -> None:
    """Ensure every required tool is available.

    Raises:
        ToolMissingError: Listing every tool that could not be found
    """
    missing = find_missing_tools(config.required())
    if missing:
        raise ToolMissingError(missing)
