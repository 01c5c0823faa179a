"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

InstallPackage = Callable[..., Path]


def install_package(node_modules: Path, name: str, version: str, **extra: object) -> Path:
    """Create ``node_modules/<name>/package.json`` and return the package dir."""
    package_dir = node_modules / name
    package_dir.mkdir(parents=True, exist_ok=True)
    manifest = {"name": name, "version": version, **extra}
    (package_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    return package_dir


@pytest.fixture
def install() -> InstallPackage:
    """Helper that installs a fake package into a node_modules directory."""
    return install_package


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with a package.json and a small node_modules tree.

    Layout::

        package.json              (2 dependencies, 1 devDependency)
        node_modules/
            left-pad@1.3.0
            @babel/core@7.24.0
                node_modules/
                    semver@6.3.1
                    left-pad@1.3.0   (duplicate)
            .bin/
    """
    project = tmp_path / "project"
    project.mkdir()
    (project / "package.json").write_text(
        json.dumps(
            {
                "name": "demo-app",
                "version": "1.0.0",
                "dependencies": {"left-pad": "^1.3.0", "@babel/core": "^7.24.0"},
                "devDependencies": {"semver": "^6.3.1"},
            }
        ),
        encoding="utf-8",
    )

    node_modules = project / "node_modules"
    install_package(node_modules, "left-pad", "1.3.0")
    babel = install_package(node_modules, "@babel/core", "7.24.0")
    install_package(babel / "node_modules", "semver", "6.3.1")
    install_package(babel / "node_modules", "left-pad", "1.3.0")
    (node_modules / ".bin").mkdir()
    return project
