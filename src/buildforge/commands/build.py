"""Build command implementation."""

from collections.abc import Sequence
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ..config import load_config
from ..constants import LOG_FILE, REGISTRY_FILE
from ..core import BuildAborted, BuildOptions, BuildRegistry, Orchestrator, get_state_dir
from ..errors import ConfigError
from ..output import get_output_context
from ..services import BuildLog, ProcessExecutor, VersionResolver


class TyperPrompter:
    """Prompter backed by typer prompts on the terminal."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def choose(self, title: str, options: Sequence[str]) -> str:
        self.console.print(f"\n[bold]{title}[/bold]")
        for n, option in enumerate(options, start=1):
            self.console.print(f"  [cyan]{n}[/cyan]. {escape(option)}", highlight=False)
        return typer.prompt("Choice", default="1")

    def ask(self, question: str, default: str | None = None) -> str:
        return typer.prompt(question, default=default)

    def confirm(self, question: str, default: bool = False) -> bool:
        return typer.confirm(question, default=default)


def build(
    clone: bool | None = typer.Option(
        None,
        "--clone/--existing",
        help="Clone a new release, or reuse an existing build folder",
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Variant name"),
    package_source: Path | None = typer.Option(
        None,
        "--package-source",
        "-p",
        help="Local package source for managed assemblies (default from config)",
    ),
    limit: int | None = typer.Option(
        None, "--limit", min=1, help="Number of recent releases to offer"
    ),
) -> None:
    """Run the build pipeline."""
    ctx = get_output_context()
    working_dir = Path.cwd()
    state_dir = get_state_dir(working_dir)

    try:
        config = load_config(state_dir)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    prompter = TyperPrompter(ctx.console)
    if clone is None:
        clone = prompter.confirm("Clone a new version?", default=False)

    orchestrator = Orchestrator(
        config=config,
        registry=BuildRegistry(state_dir / REGISTRY_FILE),
        executor=ProcessExecutor(BuildLog(state_dir / LOG_FILE), console=ctx.console),
        resolver=VersionResolver(config.source.releases_url, timeout=config.releases.timeout),
        prompter=prompter,
        working_dir=working_dir,
        console=ctx.console,
    )
    options = BuildOptions(
        clone=clone,
        variant_name=name,
        package_source=package_source,
        release_limit=limit,
    )

    try:
        outcome = orchestrator.run(options)
    except BuildAborted as e:
        ctx.error(str(e), {"stage": e.stage.value})
        raise typer.Exit(1) from None

    record = outcome.record
    ctx.success(
        f"Build {record.identity} finished in {outcome.elapsed_seconds:.0f}s",
        {
            "identity": record.identity,
            "version": record.version_tag,
            "name": record.variant_name,
            "source_dir": str(outcome.source_dir),
            "new_build": outcome.new_build,
            "elapsed_seconds": round(outcome.elapsed_seconds, 1),
        },
    )
