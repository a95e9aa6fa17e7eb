"""Commands that inspect builds and releases without running the pipeline."""

from pathlib import Path

import typer
from rich.markup import escape

from ..config import load_config
from ..constants import REGISTRY_FILE
from ..core import BuildRegistry, get_state_dir
from ..errors import ConfigError
from ..output import get_output_context
from ..services import VersionResolver


def list_builds() -> None:
    """List registered builds."""
    ctx = get_output_context()
    working_dir = Path.cwd()
    state_dir = get_state_dir(working_dir)

    try:
        config = load_config(state_dir)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    builds_dir = config.paths.builds_dir.expanduser()
    if not builds_dir.is_absolute():
        builds_dir = working_dir / builds_dir

    records = BuildRegistry(state_dir / REGISTRY_FILE).load()
    rows = []
    for identity in sorted(records):
        record = records[identity]
        rows.append(
            {
                "identity": identity,
                "version": record.version_tag,
                "name": record.variant_name,
                "created": record.created_at.isoformat(),
                "exists": (builds_dir / identity).is_dir(),
            }
        )

    if ctx.json_mode:
        ctx.print_json(rows)
        return

    if not rows:
        ctx.print("No builds registered. Start with: buildforge build --clone")
        return

    for row in rows:
        marker = "" if row["exists"] else " [yellow](missing)[/yellow]"
        ctx.print(
            f"[bold]{escape(row['identity'])}[/bold]  {escape(row['version'])}  "
            f"{escape(row['name'])}  "
            f"[dim]{row['created']}[/dim]{marker}"
        )


def releases(
    limit: int | None = typer.Option(
        None, "--limit", min=1, help="Number of releases to show (default from config)"
    ),
) -> None:
    """List recent stable upstream releases."""
    ctx = get_output_context()

    try:
        config = load_config(get_state_dir())
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    resolver = VersionResolver(config.source.releases_url, timeout=config.releases.timeout)
    candidates = resolver.fetch_recent_stable_releases(limit or config.releases.limit)
    if not candidates:
        ctx.error("No stable releases available")
        raise typer.Exit(1)

    if ctx.json_mode:
        ctx.print_json([{"tag": c.tag, "version": c.version_string} for c in candidates])
        return

    for candidate in candidates:
        ctx.print(escape(candidate.tag))
