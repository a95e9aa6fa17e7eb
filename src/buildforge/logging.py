"""Logging configuration for buildforge CLI.

Diagnostics go through the standard ``logging`` module and are rendered
on stderr by a rich handler that shares its console with the rest of the
CLI, so progress lines, relayed tool output and log records interleave
in one stream.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Chatty third-party loggers only shown with --debug
NOISY_LOGGERS = ("urllib3",)


def _level(verbosity: int, quiet: bool, debug: bool) -> int:
    if quiet:
        return logging.WARNING
    if debug or verbosity >= 1:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    debug: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (1 shows commands, 2 adds timestamps)
        quiet: Only warnings and errors (takes precedence over debug/verbosity)
        no_color: Disable colored output
        debug: Debug logging with timestamps, source paths and HTTP traffic

    Returns:
        Rich console shared by logging and command output
    """
    console = Console(
        stderr=True,
        force_terminal=not no_color,
        no_color=no_color,
    )

    detailed = debug or verbosity >= 2
    # Records carry folder names and tool output, never rich markup
    handler = RichHandler(
        console=console,
        markup=False,
        show_time=detailed,
        show_path=detailed,
        rich_tracebacks=debug,
    )

    logging.basicConfig(
        level=_level(verbosity, quiet, debug),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    return console
