"""buildforge errors."""


class BuildForgeError(Exception):
    """Base exception for buildforge errors."""


class ConfigError(BuildForgeError):
    """Raised when config.toml cannot be parsed or validated."""


class ToolMissingError(BuildForgeError):
    """Raised when a required external tool is not on PATH."""

    def __init__(self, tools: list[str]) -> None:
        self.tools = tools
        super().__init__(f"Required tools not found in PATH: {', '.join(tools)}")


class InvalidSelectionError(BuildForgeError):
    """Raised when an interactive selection is not a valid choice."""


class ExternalToolError(BuildForgeError):
    """Raised when an external process exits with a non-zero status."""

    def __init__(self, step: str, exit_code: int) -> None:
        self.step = step
        self.exit_code = exit_code
        super().__init__(f"{step} failed with exit code {exit_code}")


class MissingArtifactError(BuildForgeError):
    """Raised when a critical input file or generated binary is absent."""


class RegistryError(BuildForgeError):
    """Raised when the build registry cannot be written."""
