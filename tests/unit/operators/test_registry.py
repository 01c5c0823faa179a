"""Unit tests for RegistryClient."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from npmirror.models.outcome import OutcomeStatus
from npmirror.operators.registry import RegistryClient
from npmirror.utils.shell import CommandResult

REGISTRY = "http://127.0.0.1:4873"


class TestIsPublished:
    """Tests for RegistryClient.is_published."""

    @pytest.fixture
    def client(self) -> RegistryClient:
        """Create RegistryClient instance."""
        return RegistryClient(REGISTRY)

    def test_published_when_version_echoed(self, client: RegistryClient) -> None:
        """npm view printing the version means published."""
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="1.0.0\n", stderr="", returncode=0)

            assert client.is_published("left-pad", "1.0.0") is True

        mock_run.assert_called_once_with(
            ["npm", "view", "left-pad@1.0.0", "version", f"--registry={REGISTRY}"],
            timeout=None,
            cwd=None,
        )

    def test_empty_output_is_not_published(self, client: RegistryClient) -> None:
        """npm view exits 0 with no output when the version does not exist."""
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

            assert client.is_published("left-pad", "9.9.9") is False

    def test_not_found_is_not_published(self, client: RegistryClient) -> None:
        """An E404 exit is 'not published'."""
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="npm ERR! code E404", returncode=1)

            assert client.is_published("@scope/utils", "2.3.4") is False

    @pytest.mark.parametrize(
        "error",
        [subprocess.TimeoutExpired(cmd=["npm"], timeout=1), FileNotFoundError("npm"), OSError("x")],
    )
    def test_errors_are_not_published(self, client: RegistryClient, error: Exception) -> None:
        """Execution errors are treated the same as 'not found'."""
        with patch("npmirror.operators.base.run_command", side_effect=error):
            assert client.is_published("left-pad", "1.0.0") is False

    def test_dry_run_does_not_touch_view(self) -> None:
        """npm view never gets --dry-run."""
        client = RegistryClient(REGISTRY, dry_run=True)
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="1.0.0", stderr="", returncode=0)
            client.is_published("left-pad", "1.0.0")

        assert "--dry-run" not in mock_run.call_args[0][0]


class TestPublish:
    """Tests for RegistryClient.publish."""

    def test_publish_success(self, tmp_path: Path) -> None:
        """A successful publish passes the archive, provenance flag and registry."""
        archive = tmp_path / "left-pad-1.0.0.tgz"
        client = RegistryClient(REGISTRY)
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="+ left-pad@1.0.0", stderr="", returncode=0)

            outcome = client.publish(archive)

        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.subject == "left-pad-1.0.0.tgz"
        assert mock_run.call_args[0][0] == [
            "npm",
            "publish",
            str(archive),
            "--provenance=false",
            f"--registry={REGISTRY}",
        ]

    def test_publish_dry_run(self, tmp_path: Path) -> None:
        """Dry-run mode appends --dry-run to npm publish."""
        client = RegistryClient(REGISTRY, dry_run=True)
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            client.publish(tmp_path / "left-pad-1.0.0.tgz")

        assert mock_run.call_args[0][0][-1] == "--dry-run"

    def test_publish_failure(self, tmp_path: Path) -> None:
        """A failed publish carries npm's error message."""
        client = RegistryClient(REGISTRY)
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="", stderr="npm ERR! code E403\nnpm ERR! forbidden", returncode=1
            )

            outcome = client.publish(tmp_path / "left-pad-1.0.0.tgz")

        assert outcome.failed
        assert outcome.reason == "npm ERR! code E403\nnpm ERR! forbidden"

    def test_publish_timeout(self, tmp_path: Path) -> None:
        """A configured timeout that expires is reported as a failure."""
        client = RegistryClient(REGISTRY, timeout=30.0)
        with patch("npmirror.operators.base.run_command") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd=["npm"], timeout=30.0)

            outcome = client.publish(tmp_path / "left-pad-1.0.0.tgz")

        assert outcome.failed
        assert "timed out after 30s" in (outcome.reason or "")
