"""Build pipeline orchestrator.

Drives the linear build pipeline for one run:

    check tools -> resolve identity -> acquire sources -> prepare dependencies
    -> build tooling -> generate glue -> build editor -> build templates
    -> stage artifacts -> build managed assemblies -> finalize

Sources and dependencies are only acquired for a new build; an existing
build folder is reused as-is. The first failure aborts the run with
``BuildAborted``. Nothing is cleaned up: partial output stays on disk
and registry entries already written are kept.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..config import BuildForgeConfig, ToolsConfig
from ..errors import BuildForgeError, ExternalToolError, InvalidSelectionError, MissingArtifactError
from ..models import BuildRecord, PipelineStage, PipelineState, planned_stages
from ..services.filesystem import extract_archive, find_first, stage_file
from ..services.process import ProcessExecutor
from ..services.releases import VersionResolver
from ..services.tools import check_tools
from .identity import derive_identity, discover_build_folders, extract_version_number, sanitize_slug
from .registry import BuildRegistry
from .selection import Prompter, select

logger = logging.getLogger(__name__)

GLUE_OUTPUT_DIR = "modules/mono/glue"
BUILD_ASSEMBLIES_SCRIPT = "modules/mono/build_scripts/build_assemblies.py"


class BuildAborted(BuildForgeError):
    """A pipeline stage failed and the run was stopped."""

    def __init__(self, stage: PipelineStage, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(f"{stage.label}: {message}")


@dataclass
class BuildOptions:
    """Operator choices for a run. ``None`` means "ask"."""

    clone: bool
    variant_name: str | None = None
    package_source: Path | None = None
    release_limit: int | None = None


@dataclass
class BuildOutcome:
    """Summary of a successful run."""

    record: BuildRecord
    source_dir: Path
    new_build: bool
    elapsed_seconds: float


class Orchestrator:
    """Step sequencer for a single build run.

    Collaborators are injected so each can be replaced in tests: the
    executor runs external commands, the registry maps folders to
    metadata, the resolver lists releases, and the prompter answers
    questions the options left open.
    """

    def __init__(
        self,
        config: BuildForgeConfig,
        registry: BuildRegistry,
        executor: ProcessExecutor,
        resolver: VersionResolver,
        prompter: Prompter,
        working_dir: Path,
        console: Console | None = None,
        tool_check: Callable[[ToolsConfig], None] = check_tools,
    ) -> None:
        self.config = config
        self.registry = registry
        self.executor = executor
        self.resolver = resolver
        self.prompter = prompter
        self.working_dir = working_dir
        self.console = console or Console()
        self.tool_check = tool_check
        self.state: PipelineState | None = None
        self.record: BuildRecord | None = None
        self.options: BuildOptions | None = None

    @property
    def builds_dir(self) -> Path:
        return self._resolve(self.config.paths.builds_dir)

    def _resolve(self, path: Path) -> Path:
        path = path.expanduser()
        return path if path.is_absolute() else self.working_dir / path

    def _stage_handlers(self) -> dict[PipelineStage, Callable[[], None]]:
        return {
            PipelineStage.CHECK_TOOLS: self.check_tools,
            PipelineStage.RESOLVE_IDENTITY: self.resolve_identity,
            PipelineStage.ACQUIRE_SOURCES: self.acquire_sources,
            PipelineStage.PREPARE_DEPENDENCIES: self.prepare_dependencies,
            PipelineStage.BUILD_TOOLING: self.build_tooling,
            PipelineStage.GENERATE_GLUE: self.generate_glue,
            PipelineStage.BUILD_EDITOR: self.build_editor,
            PipelineStage.BUILD_TEMPLATES: self.build_templates,
            PipelineStage.STAGE_ARTIFACTS: self.stage_artifacts,
            PipelineStage.BUILD_MANAGED_ASSEMBLIES: self.build_managed_assemblies,
            PipelineStage.FINALIZE: self.finalize,
        }

    def run(self, options: BuildOptions) -> BuildOutcome:
        """Execute every planned stage in order.

        Raises:
            BuildAborted: On the first failing stage; later stages are not run
        """
        started = time.monotonic()
        self.options = options
        self.record = None
        stages = planned_stages(new_build=options.clone)
        self.state = PipelineState(total_steps=len(stages))
        handlers = self._stage_handlers()

        try:
            try:
                self.executor.log.reset()
            except OSError as e:
                self.state.stage = PipelineStage.ABORTED
                raise BuildAborted(
                    stages[0], f"Could not reset build log {self.executor.log.path}: {e}"
                ) from e
            self.registry.load()
            for stage in stages:
                self.state.advance(stage)
                self._report_progress()
                try:
                    handlers[stage]()
                except BuildAborted:
                    self.state.stage = PipelineStage.ABORTED
                    raise
                except (BuildForgeError, OSError) as e:
                    self.state.stage = PipelineStage.ABORTED
                    raise BuildAborted(stage, str(e)) from e
        finally:
            self.executor.log.close()

        assert self.record is not None and self.state.source_dir is not None
        return BuildOutcome(
            record=self.record,
            source_dir=self.state.source_dir,
            new_build=options.clone,
            elapsed_seconds=time.monotonic() - started,
        )

    def _report_progress(self) -> None:
        assert self.state is not None
        self.console.print(
            f"\n[bold blue][{self.state.current_step}/{self.state.total_steps}] "
            f"{self.state.percent}%[/bold blue] {self.state.stage.label}"
        )

    def _invoke(self, step: str, command: list[str], cwd: Path | None = None) -> None:
        """Run one external command; any non-zero exit is fatal."""
        result = self.executor.run(command, cwd=cwd or self.state.source_dir)
        if not result.ok:
            raise ExternalToolError(step, result.exit_code)

    def _register(self, record: BuildRecord) -> None:
        self.registry.upsert(record.identity, record)
        self.registry.save()
        logger.info("Registered build %s (%s, %s)", record.identity, record.version_tag,
                    record.variant_name)

    def _ask_variant_name(self) -> str:
        name = self.options.variant_name or self.prompter.ask("Variant name")
        name = name.strip()
        if not name:
            raise InvalidSelectionError("Variant name cannot be empty")
        return name

    def _use_folder(self, folder: Path, record: BuildRecord) -> None:
        self.record = record
        self.state.build_identity = folder.name
        self.state.source_dir = folder.resolve()

    # -- stages ---------------------------------------------------------

    def check_tools(self) -> None:
        self.tool_check(self.config.tools)

    def resolve_identity(self) -> None:
        if self.options.clone:
            self._resolve_new_build()
        else:
            self._resolve_existing_build()

    def _resolve_new_build(self) -> None:
        limit = self.options.release_limit or self.config.releases.limit
        releases = self.resolver.fetch_recent_stable_releases(limit)
        if not releases:
            raise BuildAborted(
                PipelineStage.RESOLVE_IDENTITY, "No stable releases available to clone"
            )
        index = select(self.prompter, "Select a release", [r.tag for r in releases])
        release = releases[index]
        variant_name = self._ask_variant_name()

        identity = derive_identity(self.config.source.folder_prefix, release.tag, variant_name)
        folder = self.builds_dir / identity
        if folder.exists():
            raise BuildAborted(
                PipelineStage.RESOLVE_IDENTITY,
                f"Build folder already exists: {folder}. Re-run without --clone to reuse it",
            )
        record = BuildRecord(
            identity=identity, version_tag=release.tag, variant_name=variant_name
        )
        self._register(record)
        self.state.build_identity = identity
        self.state.source_dir = folder.resolve()
        self.record = record

    def _resolve_existing_build(self) -> None:
        folders = discover_build_folders(self.builds_dir, self.config.source.marker)
        if not folders:
            raise BuildAborted(
                PipelineStage.RESOLVE_IDENTITY, f"No existing builds found in {self.builds_dir}"
            )
        on_disk = {folder.name for folder in folders}
        labels = []
        for folder in folders:
            known = self.registry.get(folder.name, on_disk)
            if known is None:
                labels.append(f"{folder.name} (untracked)")
            else:
                labels.append(f"{folder.name} ({known.version_tag}, {known.variant_name})")
        folder = folders[select(self.prompter, "Select a build", labels)]

        record = self.registry.get(folder.name, on_disk)
        if record is None:
            version_tag = self.prompter.ask(f"Version tag for {folder.name}").strip()
            try:
                extract_version_number(version_tag)
            except ValueError as e:
                raise InvalidSelectionError(str(e)) from None
            record = BuildRecord(
                identity=folder.name,
                version_tag=version_tag,
                variant_name=self._ask_variant_name(),
            )
            self._register(record)
        elif self.options.variant_name and self.options.variant_name != record.variant_name:
            logger.warning(
                "Ignoring --name %r: %s is registered as %r",
                self.options.variant_name,
                folder.name,
                record.variant_name,
            )
        self._use_folder(folder, record)

    def acquire_sources(self) -> None:
        builds_dir = self.builds_dir
        builds_dir.mkdir(parents=True, exist_ok=True)
        self._invoke(
            "Source checkout",
            [
                self.config.tools.git,
                "clone",
                "--depth",
                "1",
                "--branch",
                self.record.version_tag,
                self.config.source.repository,
                self.state.build_identity,
            ],
            cwd=builds_dir,
        )

    def prepare_dependencies(self) -> None:
        deps = self.config.dependencies
        if deps.archive is None:
            logger.info("No dependency archive configured")
            return
        archive = self._resolve(deps.archive)
        destination = self.state.source_dir / deps.destination
        try:
            extract_archive(archive, destination)
        except MissingArtifactError:
            if deps.required:
                raise
            logger.warning("Dependency archive not found, skipping: %s", archive)
            return
        logger.info("Extracted %s into %s", archive.name, destination)

    def _scons(self, target: str, variant: bool = False) -> list[str]:
        scons = self.config.scons
        command = [
            self.config.tools.scons,
            f"platform={scons.platform}",
            f"target={target}",
            "module_mono_enabled=yes",
        ]
        if scons.jobs:
            command.append(f"-j{scons.jobs}")
        command.extend(scons.extra_args)
        if variant and scons.variant_suffix:
            command.append(f"extra_suffix={sanitize_slug(self.record.variant_name)}")
        return command

    def build_tooling(self) -> None:
        self._invoke("Tooling build", self._scons("editor"))

    def generate_glue(self) -> None:
        binary = find_first(self.state.source_dir / "bin", self.config.scons.editor_glob)
        if binary is None:
            raise MissingArtifactError(
                f"Editor binary matching {self.config.scons.editor_glob!r} not found in "
                f"{self.state.source_dir / 'bin'}"
            )
        self._invoke(
            "Glue generation",
            [str(binary), "--headless", "--generate-mono-glue", GLUE_OUTPUT_DIR],
        )

    def build_editor(self) -> None:
        self._invoke("Editor build", self._scons("editor", variant=True))

    def build_templates(self) -> None:
        for template in self.config.scons.templates:
            self._invoke(f"Template build ({template})", self._scons(template, variant=True))

    def stage_artifacts(self) -> None:
        for entry in self.config.stage:
            staged = stage_file(
                self._resolve(entry.source),
                self.state.source_dir / entry.destination,
                required=entry.required,
            )
            if staged is not None:
                logger.info("Staged %s", staged)

    def build_managed_assemblies(self) -> None:
        package_source = self._resolve(
            self.options.package_source or self.config.paths.package_source
        )
        package_source.mkdir(parents=True, exist_ok=True)
        self._invoke(
            "Managed assemblies build",
            [
                self.config.tools.python,
                BUILD_ASSEMBLIES_SCRIPT,
                "--godot-output-dir=./bin",
                "--push-nupkgs-local",
                str(package_source),
                f"--godot-platform={self.config.scons.platform}",
            ],
        )

    def finalize(self) -> None:
        self.console.print(
            f"[bold green]Build {escape(self.state.build_identity)} complete[/bold green] "
            f"({escape(self.record.version_tag)}, {escape(self.record.variant_name)}) "
            f"at {escape(str(self.state.source_dir))}"
        )
