"""package.json readers.

Reads package identities from installed packages and the dependency
declarations of the project being mirrored.
"""

import json
import logging
from pathlib import Path
from typing import Any

from npmirror.core.runlog import RunLog
from npmirror.models.package import PackageIdentity
from npmirror.models.summary import ProjectDependencies
from npmirror.utils.formatting import print_info

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"


def _load_json_object(path: Path) -> dict[str, Any]:
    """Load a JSON file whose top level must be an object.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not a JSON object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"{path} does not contain a JSON object"
        raise ValueError(msg)
    return data


def read_package_identity(path: Path) -> PackageIdentity | None:
    """Read name and version from an installed package's package.json.

    Args:
        path: Path to the package.json file.

    Returns:
        PackageIdentity, or None if the file is missing, unparsable or
        lacks a usable name or version.
    """
    try:
        data = _load_json_object(path)
    except (OSError, ValueError) as e:
        logger.debug("Skipping unreadable manifest %s: %s", path, e)
        return None

    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
        logger.debug("Skipping manifest without name/version: %s", path)
        return None

    return PackageIdentity(name=name, version=version)


def _string_map(data: dict[str, Any], field: str) -> dict[str, str]:
    """Extract a ``{name: range}`` mapping, dropping non-string entries."""
    raw = data.get(field)
    if not isinstance(raw, dict):
        return {}
    return {str(key): value for key, value in raw.items() if isinstance(value, str)}


def read_project_dependencies(project_dir: Path, error_log: RunLog | None = None) -> ProjectDependencies:
    """Read the dependency maps declared by the project.

    Args:
        project_dir: Directory holding the project's package.json.
        error_log: Where read failures are recorded.

    Returns:
        ProjectDependencies; empty when the manifest is missing or invalid.
    """
    path = project_dir / MANIFEST_FILENAME
    if not path.exists():
        print_info(f"No project package.json found in {project_dir}")
        return ProjectDependencies()

    try:
        data = _load_json_object(path)
    except (OSError, ValueError) as e:
        message = f"Failed to read project package.json: {e}"
        if error_log is not None:
            error_log.error(message)
        else:
            logger.warning(message)
        return ProjectDependencies()

    return ProjectDependencies(
        dependencies=_string_map(data, "dependencies"),
        dev_dependencies=_string_map(data, "devDependencies"),
        peer_dependencies=_string_map(data, "peerDependencies"),
        optional_dependencies=_string_map(data, "optionalDependencies"),
    )
