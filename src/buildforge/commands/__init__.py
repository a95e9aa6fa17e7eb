"""CLI command implementations for buildforge.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .build import TyperPrompter, build
from .builds import list_builds, releases
from .init import init

__all__ = [
    "TyperPrompter",
    "build",
    "init",
    "list_builds",
    "releases",
]
