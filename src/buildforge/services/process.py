"""External process execution with live console relay and a persistent log."""

import logging
import subprocess
import threading
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import TextIO

from rich.console import Console

from ..constants import LOG_TIMESTAMP_FORMAT
from ..errors import ToolMissingError
from ..models import ProcessResult

logger = logging.getLogger(__name__)


class BuildLog:
    """Append-only, timestamped log of every captured output line.

    The file is opened lazily in append mode and stays open until
    ``close()`` is called (or the context manager exits).
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._handle: TextIO | None = None

    def reset(self) -> None:
        """Truncate the log. Called once at the start of a run."""
        self.close()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def write(self, line: str) -> None:
        """Append one line with a ``YYYY-MM-DD HH:MM:SS`` prefix."""
        if self._handle is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, "a", encoding="utf-8")
        stamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        self._handle.write(f"{stamp} {line}\n")
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "BuildLog":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class ProcessExecutor:
    """Runs external commands, relaying their output line by line.

    Every line read from the child is mirrored to the console (stderr
    lines in red) and then appended to the build log. Standard error is
    drained on a helper thread so a full stderr pipe never stalls the
    child while stdout is being read; ordering within each stream is
    preserved.

    There is no timeout: a hung tool hangs the run.
    """

    def __init__(self, log: BuildLog, console: Console | None = None) -> None:
        self.log = log
        self.console = console or Console()
        self._lock = threading.Lock()

    def _relay(self, line: str, is_error: bool) -> None:
        with self._lock:
            self.console.print(
                line,
                style="red" if is_error else None,
                markup=False,
                highlight=False,
            )
            self.log.write(line)

    def _drain(self, stream: Iterable[str], sink: list[str], is_error: bool) -> None:
        for raw in stream:
            line = raw.rstrip("\r\n")
            sink.append(line)
            self._relay(line, is_error)

    def run(self, command: list[str], cwd: Path | None = None) -> ProcessResult:
        """Run a command to completion.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the child process

        Returns:
            ProcessResult with the exit code and every captured line

        Raises:
            ToolMissingError: If the executable cannot be found
        """
        logger.debug("Running: %s (cwd=%s)", " ".join(command), cwd or ".")
        try:
            process = subprocess.Popen(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,  # Line buffered
            )
        except FileNotFoundError:
            raise ToolMissingError([command[0]]) from None

        assert process.stdout is not None
        assert process.stderr is not None

        stdout_lines: list[str] = []
        stderr_lines: list[str] = []
        stderr_reader = threading.Thread(
            target=self._drain,
            args=(process.stderr, stderr_lines, True),
            daemon=True,
        )
        stderr_reader.start()
        try:
            self._drain(process.stdout, stdout_lines, False)
            stderr_reader.join()
            exit_code = process.wait()
        finally:
            # Ensure process is terminated on any exception (including KeyboardInterrupt)
            if process.poll() is None:
                process.kill()
                process.wait()
            process.stdout.close()
            process.stderr.close()

        logger.debug("Exit code %d: %s", exit_code, command[0])
        return ProcessResult(
            command=command,
            exit_code=exit_code,
            stdout_lines=stdout_lines,
            stderr_lines=stderr_lines,
        )
