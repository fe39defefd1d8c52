"""Tests for monorelease.workspace."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from monorelease.workspace import (
    capture_exec,
    exec_command,
    list_package_names,
    prepare_versions,
    run_script,
    scope_args,
)


class TestScopeArgs:
    def test_one_qualifier_per_name(self) -> None:
        assert scope_args(["a", "b"]) == ["--scope", "a", "--scope", "b"]

    def test_keeps_order_and_repeats(self) -> None:
        """Names are passed through exactly as given."""
        assert scope_args(["c", "a", "c"]) == [
            "--scope",
            "c",
            "--scope",
            "a",
            "--scope",
            "c",
        ]

    def test_empty(self) -> None:
        assert scope_args([]) == []


class TestDispatch:
    """Tests for the commands sent to the workspace tool."""

    @patch("monorelease.workspace.run")
    def test_run_script_parallel(self, mock_run: MagicMock) -> None:
        run_script(["pkg-b", "pkg-a"], "build", parallel=True)

        mock_run.assert_called_once_with(
            "lerna", "run", "build", "--parallel", "--scope", "pkg-b", "--scope", "pkg-a"
        )

    @patch("monorelease.workspace.run")
    def test_run_script_sequential(self, mock_run: MagicMock) -> None:
        run_script(["pkg-a"], "test", tool="/opt/bin/lerna")

        mock_run.assert_called_once_with(
            "/opt/bin/lerna", "run", "test", "--scope", "pkg-a"
        )

    @patch("monorelease.workspace.run")
    def test_exec_command_puts_command_last(self, mock_run: MagicMock) -> None:
        exec_command(["pkg-a", "pkg-b"], "git push && git push --tags")

        mock_run.assert_called_once_with(
            "lerna",
            "exec",
            "--scope",
            "pkg-a",
            "--scope",
            "pkg-b",
            "--",
            "git push && git push --tags",
        )

    @patch("monorelease.workspace.capture")
    def test_capture_exec_returns_output(self, mock_capture: MagicMock) -> None:
        mock_capture.return_value = "/work/packages/pkg-a"

        assert capture_exec(["pkg-a"], "pwd") == "/work/packages/pkg-a"
        mock_capture.assert_called_once_with(
            "lerna", "exec", "--scope", "pkg-a", "--", "pwd"
        )

    @patch("monorelease.workspace.run")
    def test_prepare_versions(self, mock_run: MagicMock) -> None:
        prepare_versions(
            ["pkg-a", "pkg-b"], ["publish", "--skip-npm", "--skip-git", "--exact"]
        )

        mock_run.assert_called_once_with(
            "lerna",
            "publish",
            "--skip-npm",
            "--skip-git",
            "--exact",
            "--scope",
            "pkg-a",
            "--scope",
            "pkg-b",
        )


class TestListPackageNames:
    """Tests for list_package_names()."""

    @patch("monorelease.workspace.capture")
    def test_reads_names_from_json(self, mock_capture: MagicMock) -> None:
        mock_capture.return_value = """[
  {"name": "pkg-a", "version": "1.0.0", "private": false, "location": "/work/packages/a"},
  {"name": "pkg-b", "version": "0.2.0", "private": false, "location": "/work/packages/b"}
]"""

        assert list_package_names() == ["pkg-a", "pkg-b"]
        mock_capture.assert_called_once_with("lerna", "list", "--json")

    @patch("monorelease.workspace.capture")
    def test_ignores_unknown_fields(self, mock_capture: MagicMock) -> None:
        mock_capture.return_value = '[{"name": "pkg-a", "dependencies": {}}]'

        assert list_package_names() == ["pkg-a"]

    @patch("monorelease.workspace.capture")
    def test_empty_output(self, mock_capture: MagicMock) -> None:
        mock_capture.return_value = ""

        assert list_package_names() == []
