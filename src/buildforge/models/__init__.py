"""Pydantic data models for buildforge.

This package defines the data structures shared across buildforge:
- Registered build folders (BuildRecord)
- Upstream stable releases (ReleaseCandidate)
- Pipeline stages, run state and process results

Example:
    >>> from buildforge.models import BuildRecord
    >>> record = BuildRecord(identity="godot-4.2.1-steam", version_tag="4.2.1-stable",
    ...                      variant_name="steam")
    >>> record.model_dump_json()
"""

from .build_record import BuildRecord
from .pipeline import (
    NEW_BUILD_ONLY,
    PipelineStage,
    PipelineState,
    ProcessResult,
    planned_stages,
)
from .release import ReleaseCandidate, Version

__all__ = [
    "NEW_BUILD_ONLY",
    "BuildRecord",
    "PipelineStage",
    "PipelineState",
    "ProcessResult",
    "ReleaseCandidate",
    "Version",
    "planned_stages",
]
