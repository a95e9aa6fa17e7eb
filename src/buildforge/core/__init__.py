"""Core build orchestration logic for buildforge.

- registry: Persistent mapping of build folders to their metadata
- identity: Version extraction and build folder naming
- selection: Operator choice parsing, independent of the terminal
- pipeline: The step sequencer that drives a build run
- state_dir: Location of config, registry and log
"""

from .identity import derive_identity, discover_build_folders, extract_version_number, sanitize_slug
from .pipeline import BuildAborted, BuildOptions, BuildOutcome, Orchestrator
from .registry import BuildRegistry
from .selection import Prompter, parse_selection, select
from .state_dir import get_state_dir

__all__ = [
    "BuildAborted",
    "BuildOptions",
    "BuildOutcome",
    "BuildRegistry",
    "Orchestrator",
    "Prompter",
    "derive_identity",
    "discover_build_folders",
    "extract_version_number",
    "get_state_dir",
    "parse_selection",
    "sanitize_slug",
    "select",
]
