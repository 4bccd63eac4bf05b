"""Tests for the Android test/lint gate."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fakes import FakeGit, FakeGradle, make_console

from blockly_workflow.exceptions import GateFailedError
from blockly_workflow.gate import BuildGate
from blockly_workflow.models import GateKind

ANDROID_ORIGIN = {"origin": "https://github.com/alice/blockly-android.git"}


class BuildGateTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name).resolve()
        self.console, self.output = make_console()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _gate(self, git: FakeGit, gradle: FakeGradle) -> BuildGate:
        return BuildGate(git=git, gradle=gradle, console=self.console)

    def test_non_android_project_is_skipped(self) -> None:
        gradle = FakeGradle()
        git = FakeGit(remotes={"origin": "https://github.com/alice/blockly.git"})
        result = self._gate(git, gradle).run(self.project, GateKind.TEST)
        self.assertFalse(result.ran)
        self.assertTrue(result.passed)
        self.assertEqual(gradle.calls, [])
        self.assertIn("not yet supported", self.output.getvalue())

    def test_runs_in_project_dir_and_restores_cwd(self) -> None:
        before = Path.cwd()
        gradle = FakeGradle()
        git = FakeGit(remotes=ANDROID_ORIGIN, toplevel=self.project)
        result = self._gate(git, gradle).run(self.project, GateKind.LINT, verbose=True)
        self.assertTrue(result.ran)
        self.assertTrue(result.passed)
        task, verbose, cwd = gradle.calls[0]
        self.assertEqual((task, verbose), ("check", True))
        self.assertEqual(cwd.resolve(), self.project)
        self.assertEqual(Path.cwd(), before)
        self.assertIn("SUCCESS", self.output.getvalue())

    def test_failure_raises_after_restoring_cwd(self) -> None:
        before = Path.cwd()
        gradle = FakeGradle(passed=False, output="3 tests failed")
        git = FakeGit(remotes=ANDROID_ORIGIN, toplevel=self.project)
        with self.assertRaises(GateFailedError):
            self._gate(git, gradle).run(self.project, GateKind.TEST)
        self.assertEqual(Path.cwd(), before)
        printed = self.output.getvalue()
        self.assertIn("3 tests failed", printed)
        self.assertIn("FAILED - ABORTING", printed)


if __name__ == "__main__":
    unittest.main()
