"""Tests for command dispatch and error reporting in the CLI."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from fakes import FakeGit, FakeGradle, FakeRepoTool, ScriptedConfirm, make_console

from blockly_workflow.cli import AppState, app, command_names, resolve_args
from blockly_workflow.forks import ForkService
from blockly_workflow.gate import BuildGate
from blockly_workflow.models import EnvironmentContext
from blockly_workflow.workflow import WorkflowService

REPO = Path("/ws/web-alice")
ALICE = EnvironmentContext(user="alice", workspace_root=Path("/ws"))


class ResolveArgsTests(unittest.TestCase):
    def test_known_commands_pass_through(self) -> None:
        self.assertEqual(resolve_args(["push", "--notest"]), ["push", "--notest"])

    def test_empty_and_unknown_commands_show_help(self) -> None:
        self.assertEqual(resolve_args([]), ["--help"])
        self.assertEqual(resolve_args(["deploy", "now"]), ["--help"])

    def test_global_options_pass_through(self) -> None:
        self.assertEqual(resolve_args(["--version"]), ["--version"])

    def test_command_table(self) -> None:
        self.assertEqual(
            command_names(),
            {
                "help", "start", "close", "push", "pull", "rebase", "test",
                "lint", "fclone", "fupdate", "fbranch", "info",
            },
        )


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self.console, self.output = make_console()
        self.repo_tool = FakeRepoTool()
        self.gradle = FakeGradle()
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def state(self, git: FakeGit, env: EnvironmentContext | None = ALICE) -> AppState:
        workflow = WorkflowService(
            env=env,
            repo_path=REPO,
            git=git,
            repo_tool=self.repo_tool,
            gate=BuildGate(git=git, gradle=self.gradle, console=self.console),
            console=self.console,
            confirm=ScriptedConfirm(True),
        )
        forks = ForkService(env=env, repo_path=REPO, git=git, console=self.console)
        return AppState(workflow=workflow, forks=forks, console=self.console)

    def test_help_lists_commands(self) -> None:
        result = self.runner.invoke(app, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("fupdate", result.output)

    def test_help_command(self) -> None:
        result = self.runner.invoke(app, ["help"], obj=self.state(FakeGit(), env=None))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("fbranch", result.output)

    def test_help_ignores_extra_arguments(self) -> None:
        result = self.runner.invoke(app, ["help", "push"], obj=self.state(FakeGit(), env=None))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("fbranch", result.output)
        self.assertIn("Ignoring unknown argument: push", self.output.getvalue())

    def test_push_reports_remote_branch(self) -> None:
        git = FakeGit(branch="featureX", remotes={"origin": "https://github.com/alice/blockly"})
        result = self.runner.invoke(app, ["push", "-f"], obj=self.state(git))
        self.assertEqual(result.exit_code, 0)
        self.assertIn(("push", REPO, "origin", "HEAD:alice-featureX", ("--force",)), git.calls)
        self.assertIn("alice-featureX", self.output.getvalue())

    def test_uninitialized_environment_is_not_fatal(self) -> None:
        git = FakeGit()
        result = self.runner.invoke(app, ["pull"], obj=self.state(git, env=None))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("not initialized", self.output.getvalue())
        self.assertEqual(self.repo_tool.calls, [])

    def test_unknown_option_is_ignored_with_warning(self) -> None:
        result = self.runner.invoke(app, ["pull", "--bogus"], obj=self.state(FakeGit()))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Ignoring unknown option: --bogus", self.output.getvalue())
        self.assertEqual(self.repo_tool.calls, [("sync", REPO)])

    def test_positional_after_unknown_option(self) -> None:
        result = self.runner.invoke(app, ["start", "--bogus", "featureY"], obj=self.state(FakeGit()))
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(self.repo_tool.calls, [("start", REPO, "featureY")])

    def test_fbranch_without_name_prints_usage(self) -> None:
        git = FakeGit()
        result = self.runner.invoke(app, ["fbranch"], obj=self.state(git))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Usage: bw fbranch <name>", self.output.getvalue())
        self.assertEqual(git.calls, [])

    def test_close_on_master_is_refused(self) -> None:
        git = FakeGit(branch="master")
        result = self.runner.invoke(app, ["close"], obj=self.state(git))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Refusing to close 'master'", self.output.getvalue())

    def test_failed_gate_exits_non_zero(self) -> None:
        self.gradle.passed = False
        git = FakeGit(
            remotes={"origin": "https://github.com/alice/blockly-android"},
            toplevel=self.project,
        )
        result = self.runner.invoke(app, ["test", "--verbose"], obj=self.state(git))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("FAILED - ABORTING", self.output.getvalue())

    def test_lint_on_web_project_is_soft_no_op(self) -> None:
        git = FakeGit(remotes={"origin": "https://github.com/alice/blockly"})
        result = self.runner.invoke(app, ["lint"], obj=self.state(git))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("not yet supported", self.output.getvalue())


if __name__ == "__main__":
    unittest.main()
