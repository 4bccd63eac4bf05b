"""Branch lifecycle commands: start, close, push, pull, rebase, test and lint."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import interactive
from .config import require_environment
from .exceptions import GitCommandError, PreconditionError, UsageError
from .gate import BuildGate
from .git import Git
from .models import BranchRef, EnvironmentContext, GateKind, PushGateResult, RemoteIdentity
from .remotes import classify_remote
from .workspace import RepoTool


@dataclass
class WorkflowService:
    env: EnvironmentContext | None
    repo_path: Path
    git: Git = field(default_factory=Git)
    repo_tool: RepoTool = field(default_factory=RepoTool)
    gate: BuildGate | None = None
    console: Console = field(default_factory=Console)
    confirm: Callable[[str], bool] = interactive.confirm

    def __post_init__(self) -> None:
        if self.gate is None:
            self.gate = BuildGate(git=self.git, console=self.console)

    def start(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise UsageError("Usage: bw start <branch>")
        require_environment(self.env)
        self.repo_tool.start(self.repo_path, name)
        self.console.print(f"[green]Started branch '{name}'.[/green]")

    def close(self) -> None:
        ref = self._current_branch_ref(action="close")
        question = (
            f"Delete branch {ref.remote} on origin and abandon {ref.local} locally? "
            "This cannot be undone."
        )
        if not self.confirm(question):
            self.console.print("Cancelled.")
            return
        try:
            self.git.delete_remote_branch(self.repo_path, "origin", ref.remote)
        except GitCommandError as exc:
            # A branch that was never pushed has no remote ref; still abandon it locally.
            self.console.print(f"[yellow]origin/{ref.remote} not deleted: {escape(str(exc))}[/yellow]")
        self.repo_tool.abandon(self.repo_path, ref.local)
        self.console.print(f"[green]Closed {ref.local}.[/green]")

    def push(self, *, force: bool = False, run_tests: bool = True) -> BranchRef:
        env = require_environment(self.env)
        origin = self.git.remote_url(self.repo_path, "origin")
        if classify_remote(origin, env.user) is RemoteIdentity.CANONICAL_UPSTREAM:
            raise PreconditionError(
                f"Refusing to push: origin is the shared repository {origin}. "
                "Push to your fork instead."
            )
        ref = self._current_branch_ref(action="push")

        gate = PushGateResult.skipped()
        if run_tests:
            gate = self.run_gate(GateKind.TEST)

        extra: Sequence[str] = ("--force",) if force else ()
        self.git.push(self.repo_path, "origin", f"HEAD:{ref.remote}", extra)
        tested = "tested" if gate.ran else "untested"
        self.console.print(
            f"[green]Pushed {ref.local} ({tested}) to origin/[bold]{ref.remote}[/bold].[/green] "
            f"Open a pull request from {ref.remote} to request review."
        )
        return ref

    def pull(self) -> None:
        require_environment(self.env)
        self.repo_tool.sync(self.repo_path)
        self.console.print("[green]Workspace synced.[/green]")

    def rebase(self, *, interactive: bool = False) -> None:
        require_environment(self.env)
        self.repo_tool.rebase(self.repo_path, interactive=interactive)
        self.console.print("[green]Rebased onto master.[/green]")

    def run_gate(self, kind: GateKind, *, verbose: bool = False) -> PushGateResult:
        require_environment(self.env)
        return self.gate.run(self.repo_path, kind, verbose=verbose)

    def describe(self) -> list[tuple[str, str]]:
        env = require_environment(self.env)
        branch = self.git.current_branch(self.repo_path)
        ref = BranchRef(user=env.user, local=branch)
        rows = [
            ("User", env.user),
            ("Workspace root", str(env.workspace_root)),
            ("Branch", branch),
            ("Remote branch", "-" if ref.is_protected else ref.remote),
        ]
        for remote in ("origin", "upstream"):
            url = self.git.remote_url(self.repo_path, remote)
            identity = classify_remote(url, env.user)
            rows.append((remote.capitalize(), f"{url or 'not set'} ({identity.value})"))
        return rows

    def _current_branch_ref(self, *, action: str) -> BranchRef:
        env = require_environment(self.env)
        ref = BranchRef(user=env.user, local=self.git.current_branch(self.repo_path))
        if ref.is_protected:
            raise PreconditionError(
                f"Refusing to {action} '{ref.local}'. Check out your feature branch first."
            )
        return ref


def render_info(rows: Sequence[tuple[str, str]], console: Console) -> None:
    table = Table(title="Workflow", show_header=False)
    table.add_column("Key", style="bold", no_wrap=True)
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)
