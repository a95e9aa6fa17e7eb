"""Init command implementation."""

import typer
from rich.markup import escape

from ..config import load_config, write_config_template
from ..constants import CONFIG_FILE
from ..core import get_state_dir
from ..errors import ConfigError
from ..output import get_output_context
from ..services import find_missing_tools


def init() -> None:
    """Initialize buildforge in the current directory."""
    ctx = get_output_context()
    state_dir = get_state_dir()
    config_path = state_dir / CONFIG_FILE

    state_dir.mkdir(exist_ok=True)

    # Create config if missing
    if not config_path.exists():
        write_config_template(state_dir)
        ctx.print(f"[green]Created config template:[/green] {escape(str(config_path))}")
    else:
        ctx.print(f"[yellow]Config already exists:[/yellow] {escape(str(config_path))}")

    try:
        config = load_config(state_dir)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    # Validate toolchain
    tools = config.tools.required()
    missing = find_missing_tools(tools)
    for name, executable in tools.items():
        if name in missing:
            ctx.print(f"[red]✗[/red] {name}: {escape(executable)} not found in PATH")
        else:
            ctx.print(f"[green]✓[/green] {name}")

    ctx.print_json({"config": str(config_path), "missing_tools": missing})
    if missing:
        ctx.print("\n[yellow]Warning: Some tools are missing[/yellow]")
        raise typer.Exit(2)

    ctx.print("\n[bold green]buildforge initialized successfully![/bold green]")
