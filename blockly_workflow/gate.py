"""Pre-push test/lint gate backed by the project's Gradle wrapper."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from .exceptions import GateFailedError
from .fs import working_directory
from .git import Git
from .models import GateKind, PushGateResult
from .remotes import is_android


class Gradle:
    """Runs a Gradle task through the wrapper in the current directory."""

    def __init__(self, wrapper: str = "./gradlew"):
        self.wrapper = wrapper

    def run(self, task: str, *, verbose: bool = False) -> tuple[bool, str]:
        cmd = [self.wrapper, task]
        if not verbose:
            cmd.append("-q")
        logging.debug("Running command: %s (in %s)", " ".join(cmd), Path.cwd())
        try:
            proc = subprocess.run(
                cmd,
                check=False,
                text=True,
                stdout=None if verbose else subprocess.PIPE,
                stderr=None if verbose else subprocess.STDOUT,
            )
        except FileNotFoundError:
            return False, f"Gradle wrapper not found: {self.wrapper}"
        return proc.returncode == 0, proc.stdout or ""


@dataclass
class BuildGate:
    git: Git = field(default_factory=Git)
    gradle: Gradle = field(default_factory=Gradle)
    console: Console = field(default_factory=Console)

    def run(self, repo_path: Path, kind: GateKind, *, verbose: bool = False) -> PushGateResult:
        """Run tests or lint for the project containing ``repo_path``.

        Only Android projects have a gate today; anything else is reported
        and treated as passing without running. A failure raises
        GateFailedError after the previous working directory is restored.
        """

        origin = self.git.remote_url(repo_path, "origin")
        if not is_android(origin):
            self.console.print(f"{kind.value.capitalize()} is not yet supported for this project type.")
            return PushGateResult.skipped()

        project_dir = self.git.toplevel(repo_path)
        self.console.print(f"Running {kind.value} in {project_dir}…")
        with working_directory(project_dir):
            passed, output = self.gradle.run(kind.gradle_task, verbose=verbose)

        if not passed:
            if output.strip():
                self.console.print(output.rstrip(), markup=False, highlight=False)
            self.console.print("[bold red]FAILED - ABORTING[/bold red]")
            raise GateFailedError(f"{kind.value} failed for {project_dir}")
        self.console.print("[bold green]SUCCESS[/bold green]")
        return PushGateResult(ran=True, passed=True)
