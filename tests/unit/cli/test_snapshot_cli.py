"""Unit tests for the snapshot command."""

import json
from pathlib import Path
from unittest.mock import patch

from npmirror.cli.commands import snapshot as snapshot_command
from npmirror.cli.main import app
from npmirror.core.config import SnapshotConfig
from npmirror.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()


class TestSnapshotCommand:
    """Tests for `npmirror snapshot`."""

    def test_help(self) -> None:
        """Snapshot command shows help."""
        result = runner.invoke(app, ["snapshot", "--help"])
        assert result.exit_code == 0
        assert "--max-depth" in result.stdout

    def test_npm_missing_with_cached_archives(self, project_dir: Path) -> None:
        """Without npm, a fully cached project still completes and writes the summary."""
        archives = project_dir / "pkg"
        archives.mkdir()
        for filename in ("babel-core-7.24.0.tgz", "left-pad-1.3.0.tgz", "semver-6.3.1.tgz"):
            (archives / filename).touch()

        with (
            patch("npmirror.operators.base.command_exists", return_value=False),
            patch("npmirror.operators.base.run_command") as mock_run,
        ):
            result = runner.invoke(app, ["snapshot", "--project-dir", str(project_dir)])

        assert result.exit_code == 0
        assert "not found on PATH" in result.output
        mock_run.assert_not_called()
        assert (project_dir / "packages-summary.json").exists()

    def test_npm_missing_counts_failures(self, project_dir: Path) -> None:
        """Without npm, packages needing an archive fail and are logged."""
        with (
            patch("npmirror.operators.base.command_exists", return_value=False),
            patch("npmirror.operators.base.run_command", side_effect=FileNotFoundError("npm")),
        ):
            result = runner.invoke(app, ["snapshot", "-p", str(project_dir)])

        assert result.exit_code == 0
        assert (project_dir / "packages-summary.json").exists()
        log = (project_dir / "error.log").read_text(encoding="utf-8")
        assert log.count("Could not run npm") == 3

    def test_invalid_option_value(self, project_dir: Path) -> None:
        """A non-positive timeout is rejected by config validation."""
        result = runner.invoke(app, ["snapshot", "-p", str(project_dir), "--timeout", "0"])

        assert result.exit_code == 1
        assert "Invalid snapshot configuration" in result.output

    def test_full_run(self, project_dir: Path) -> None:
        """npm pack is run once per unique package and the summary is written."""
        with (
            patch("npmirror.operators.base.command_exists", return_value=True),
            patch("npmirror.operators.base.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="archive.tgz\n", stderr="", returncode=0)
            result = runner.invoke(app, ["snapshot", "-p", str(project_dir)])

        assert result.exit_code == 0
        packed = [call.args[0][2] for call in mock_run.call_args_list]
        assert packed == ["@babel/core@7.24.0", "left-pad@1.3.0", "semver@6.3.1"]
        summary = json.loads((project_dir / "packages-summary.json").read_text(encoding="utf-8"))
        assert summary["totalPackages"] == 3

    def test_pack_failures_still_exit_zero(self, project_dir: Path) -> None:
        """Per-package failures are reported but do not fail the command."""
        with (
            patch("npmirror.operators.base.command_exists", return_value=True),
            patch("npmirror.operators.base.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="npm ERR! 404", returncode=1)
            result = runner.invoke(app, ["snapshot", "-p", str(project_dir)])

        assert result.exit_code == 0
        assert (project_dir / "error.log").exists()

    def test_options_and_config_file(self, project_dir: Path, tmp_path: Path) -> None:
        """Config file values apply, and CLI flags override them."""
        config_file = tmp_path / "npmirror.toml"
        config_file.write_text("[snapshot]\nmax_depth = 2\npack_timeout = 15\n", encoding="utf-8")
        output = tmp_path / "out"

        with (
            patch("npmirror.operators.base.command_exists", return_value=True),
            patch.object(snapshot_command, "Snapshotter") as mock_snapshotter,
        ):
            result = runner.invoke(
                app,
                ["snapshot", "-p", str(project_dir), "-o", str(output), "-c", str(config_file), "-t", "30"],
            )

        assert result.exit_code == 0
        config = mock_snapshotter.call_args.args[0]
        assert isinstance(config, SnapshotConfig)
        assert config.max_depth == 2
        assert config.pack_timeout == 30.0
        assert config.archive_dir == output.resolve()
        mock_snapshotter.return_value.run.assert_called_once()

    def test_missing_config_file(self, project_dir: Path, tmp_path: Path) -> None:
        """A --config path that does not exist exits with code 1."""
        result = runner.invoke(app, ["snapshot", "-p", str(project_dir), "-c", str(tmp_path / "nope.toml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_dry_run_passes_flag(self, project_dir: Path) -> None:
        """--dry-run is forwarded to npm pack."""
        with (
            patch("npmirror.operators.base.command_exists", return_value=True),
            patch("npmirror.operators.base.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            result = runner.invoke(app, ["snapshot", "-p", str(project_dir), "--dry-run"])

        assert result.exit_code == 0
        assert all(call.args[0][-1] == "--dry-run" for call in mock_run.call_args_list)
