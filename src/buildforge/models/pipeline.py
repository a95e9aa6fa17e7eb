"""Pipeline models: stages, per-run state and process results."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    """Linear stages of a build run, in execution order."""

    CHECK_TOOLS = "check_tools"
    RESOLVE_IDENTITY = "resolve_identity"
    ACQUIRE_SOURCES = "acquire_sources"
    PREPARE_DEPENDENCIES = "prepare_dependencies"
    BUILD_TOOLING = "build_tooling"
    GENERATE_GLUE = "generate_glue"
    BUILD_EDITOR = "build_editor"
    BUILD_TEMPLATES = "build_templates"
    STAGE_ARTIFACTS = "stage_artifacts"
    BUILD_MANAGED_ASSEMBLIES = "build_managed_assemblies"
    FINALIZE = "finalize"
    ABORTED = "aborted"

    @property
    def label(self) -> str:
        """Human-readable stage name."""
        return self.value.replace("_", " ").capitalize()


# Stages that only run when sources are freshly cloned
NEW_BUILD_ONLY = frozenset({PipelineStage.ACQUIRE_SOURCES, PipelineStage.PREPARE_DEPENDENCIES})


def planned_stages(new_build: bool) -> list[PipelineStage]:
    """Return the stages a run will execute, in order."""
    return [
        stage
        for stage in PipelineStage
        if stage is not PipelineStage.ABORTED and (new_build or stage not in NEW_BUILD_ONLY)
    ]


class PipelineState(BaseModel):
    """Mutable state for a single orchestrator run.

    Not persisted; only the resulting BuildRecord survives the run.

    Attributes:
        current_step: Number of stages entered so far.
        total_steps: Number of stages this run will execute.
        stage: Stage currently executing (or ABORTED).
        build_identity: Build folder name, once resolved.
        source_dir: Absolute path of the build folder, once resolved.
    """

    current_step: int = Field(default=0, ge=0)
    total_steps: int = Field(ge=1)
    stage: PipelineStage = PipelineStage.CHECK_TOOLS
    build_identity: str | None = None
    source_dir: Path | None = None

    @property
    def percent(self) -> int:
        """Progress percentage, for display only."""
        return round(self.current_step / self.total_steps * 100)

    def advance(self, stage: PipelineStage) -> None:
        """Enter the next stage and bump the step counter."""
        self.stage = stage
        self.current_step += 1


class ProcessResult(BaseModel):
    """Outcome of one external process invocation.

    Attributes:
        command: Command line that was executed.
        exit_code: Process exit status.
        stdout_lines: Lines read from standard output, in order.
        stderr_lines: Lines read from standard error, in order.
    """

    command: list[str]
    exit_code: int
    stdout_lines: list[str] = Field(default_factory=list)
    stderr_lines: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the process exited with status 0."""
        return self.exit_code == 0
