"""Configuration management for buildforge."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_FILE, DEFAULT_RELEASE_LIMIT, RELEASES_TIMEOUT
from .errors import ConfigError


class SourceConfig(BaseModel):
    """Where engine sources and release listings come from."""

    repository: str = "https://github.com/godotengine/godot.git"
    releases_url: str = "https://api.github.com/repos/godotengine/godot/releases"
    folder_prefix: str = "godot"
    marker: str = Field(
        default="SConstruct", description="File whose presence marks a build folder"
    )


class PathsConfig(BaseModel):
    """Filesystem locations."""

    builds_dir: Path = Path(".")
    package_source: Path = Field(
        default=Path("~/LocalNuGet"), description="Local package source for managed assemblies"
    )


class ToolsConfig(BaseModel):
    """External tool executables."""

    git: str = "git"
    scons: str = "scons"
    python: str = "python"

    def required(self) -> dict[str, str]:
        """Get tools that must be present as {name: executable}."""
        return {"git": self.git, "scons": self.scons, "python": self.python}


class SconsConfig(BaseModel):
    """Native build driver settings."""

    platform: str = "windows"
    jobs: int | None = Field(default=None, ge=1)
    extra_args: list[str] = Field(default_factory=list)
    editor_glob: str = "godot.*.editor.*.mono*"
    templates: list[str] = Field(default=["template_debug", "template_release"])
    variant_suffix: bool = Field(
        default=True, description="Pass the variant as extra_suffix to editor builds"
    )


class DependenciesConfig(BaseModel):
    """SDK archive extracted into fresh source trees."""

    archive: Path | None = None
    destination: Path = Path("modules")
    required: bool = True


class StageEntry(BaseModel):
    """Auxiliary binary copied into a build folder."""

    source: Path
    destination: Path = Path("bin")
    required: bool = False


class ReleasesConfig(BaseModel):
    """Remote release listing settings."""

    limit: int = Field(default=DEFAULT_RELEASE_LIMIT, ge=1)
    timeout: int = Field(default=RELEASES_TIMEOUT, ge=1)


class BuildForgeConfig(BaseModel):
    """Root configuration for buildforge."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    scons: SconsConfig = Field(default_factory=SconsConfig)
    dependencies: DependenciesConfig = Field(default_factory=DependenciesConfig)
    stage: list[StageEntry] = Field(default_factory=list)
    releases: ReleasesConfig = Field(default_factory=ReleasesConfig)


def load_config(state_dir: Path) -> BuildForgeConfig:
    """Load config from .buildforge/config.toml.

    Args:
        state_dir: Path to .buildforge directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_path = state_dir / CONFIG_FILE
    if not config_path.exists():
        return BuildForgeConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return BuildForgeConfig.model_validate(data)
    except OSError as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def write_config_template(state_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        state_dir: Path to .buildforge directory

    Returns:
        Path to the written config file
    """
    config_path = state_dir / CONFIG_FILE
    template = {
        "source": {
            "repository": "https://github.com/godotengine/godot.git",
            "releases_url": "https://api.github.com/repos/godotengine/godot/releases",
            "folder_prefix": "godot",
        },
        "paths": {"builds_dir": ".", "package_source": "~/LocalNuGet"},
        "tools": {"git": "git", "scons": "scons", "python": "python"},
        "scons": {
            "platform": "windows",
            "extra_args": [],
            "templates": ["template_debug", "template_release"],
            "variant_suffix": True,
        },
        "dependencies": {"destination": "modules", "required": True},
        "stage": [],
        "releases": {"limit": DEFAULT_RELEASE_LIMIT, "timeout": RELEASES_TIMEOUT},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
