"""Pipeline configuration.

Each orchestrator receives an explicit config object instead of reading
the working directory or module globals. Values may come from CLI flags
or from an optional TOML file with ``[snapshot]`` and ``[publish]``
tables; CLI flags win.
"""

import tomllib
from pathlib import Path
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from npmirror.core.codec import ARCHIVE_EXTENSION

DEFAULT_REGISTRY = "http://127.0.0.1:4873"
DEFAULT_MAX_DEPTH = 10
DEFAULT_PACK_TIMEOUT = 60.0

SUMMARY_FILENAME = "packages-summary.json"
ERROR_LOG_FILENAME = "error.log"
PUBLISH_LOG_FILENAME = "publish-log.txt"
OUTPUT_DIRNAME = "pkg"
NODE_MODULES_DIRNAME = "node_modules"

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class SnapshotConfig(BaseModel):
    """Settings for mirroring node_modules into archives.

    Attributes:
        project_dir: Project root holding package.json and node_modules.
        output_dir: Archive directory. None means ``<project_dir>/pkg``.
        max_depth: Deepest nested node_modules level that is still read.
        pack_timeout: Seconds allowed for each ``npm pack`` call.
        dry_run: Pass ``--dry-run`` to npm instead of writing archives.
    """

    model_config = ConfigDict(extra="forbid")

    project_dir: Path = Field(default_factory=Path.cwd)
    output_dir: Path | None = None
    max_depth: Annotated[int, Field(ge=0, le=100)] = DEFAULT_MAX_DEPTH
    pack_timeout: Annotated[float, Field(gt=0)] = DEFAULT_PACK_TIMEOUT
    dry_run: bool = False

    @property
    def node_modules_dir(self) -> Path:
        """Root of the dependency tree."""
        return self.project_dir / NODE_MODULES_DIRNAME

    @property
    def archive_dir(self) -> Path:
        """Directory archives are written to."""
        return self.output_dir if self.output_dir is not None else self.project_dir / OUTPUT_DIRNAME

    @property
    def summary_path(self) -> Path:
        """Location of packages-summary.json."""
        return self.project_dir / SUMMARY_FILENAME

    @property
    def error_log_path(self) -> Path:
        """Location of error.log."""
        return self.project_dir / ERROR_LOG_FILENAME


class PublishConfig(BaseModel):
    """Settings for batch-publishing a directory of archives.

    Attributes:
        archive_dir: Directory holding the ``.tgz`` files.
        registry: Registry URL passed to npm.
        log_file: Run log location.
        extension: Archive extension to pick up.
        publish_timeout: Seconds allowed per npm call. None waits forever.
        dry_run: Pass ``--dry-run`` to ``npm publish``.
    """

    model_config = ConfigDict(extra="forbid")

    archive_dir: Path
    registry: str = DEFAULT_REGISTRY
    log_file: Path = Path(PUBLISH_LOG_FILENAME)
    extension: str = ARCHIVE_EXTENSION
    publish_timeout: Annotated[float | None, Field(gt=0)] = None
    dry_run: bool = False

    @field_validator("registry")
    @classmethod
    def validate_registry(cls, v: str) -> str:
        """Require an http(s) registry URL."""
        url = v.strip()
        if not url.startswith(("http://", "https://")):
            msg = f"registry must be an http(s) URL, got '{v}'"
            raise ValueError(msg)
        return url

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Require a dotted extension such as '.tgz'."""
        if not v.startswith(".") or len(v) < 2:
            msg = f"extension must start with '.', got '{v}'"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when a config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when a config file cannot be parsed."""


def load_config_section(path: Path, section: str) -> dict[str, Any]:
    """Read one table from a TOML config file.

    Args:
        path: Config file location.
        section: Table name (``snapshot`` or ``publish``).

    Returns:
        The table's contents, or an empty dict if the table is absent.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the table is not a table.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigError(f"'{section}' in {path} must be a table")
    return table


def build_config(
    model: type[ConfigT],
    path: Path | None,
    section: str,
    overrides: dict[str, Any],
) -> ConfigT:
    """Merge file settings with CLI overrides and validate.

    Args:
        model: Config model to build.
        path: Optional TOML file.
        section: Table to read from the file.
        overrides: CLI values; entries set to None are ignored.

    Returns:
        Validated config instance.

    Raises:
        ConfigError: If the file or the merged values are invalid.
    """
    values = load_config_section(path, section) if path is not None else {}
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return model.model_validate(values)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid {section} configuration: {e}") from e
