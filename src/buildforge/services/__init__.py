"""External service integrations for buildforge.

This package wraps everything that touches the outside world:
- process: External command execution and the build log
- releases: Upstream release listing over HTTP
- tools: PATH checks for the external toolchain
- filesystem: Archive extraction and file staging
"""

from .filesystem import extract_archive, find_first, stage_file
from .process import BuildLog, ProcessExecutor
from .releases import VersionResolver, parse_stable_tag, select_stable_releases
from .tools import check_tools, find_missing_tools

__all__ = [
    "BuildLog",
    "ProcessExecutor",
    "VersionResolver",
    "check_tools",
    "extract_archive",
    "find_first",
    "find_missing_tools",
    "parse_stable_tag",
    "select_stable_releases",
    "stage_file",
]
