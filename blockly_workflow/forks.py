"""Fork workflow: clone a personal fork and keep it in sync with google/blockly*."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from .config import require_environment
from .exceptions import CloneError, PreconditionError, UsageError
from .fs import ensure_directory
from .git import Git
from .models import (
    DEVELOP,
    MASTER,
    PROJECT_NAME,
    UPSTREAM_OWNER,
    EnvironmentContext,
    ForkProject,
    RemoteIdentity,
)
from .remotes import classify_remote, is_upstream_project

SHARED_BRANCHES = (MASTER, DEVELOP)


@dataclass
class ForkService:
    env: EnvironmentContext | None
    repo_path: Path
    git: Git = field(default_factory=Git)
    console: Console = field(default_factory=Console)

    def verify_fork_state(self) -> EnvironmentContext:
        """Check that the repository is a clean clone of the user's fork.

        Checks run in order and stop at the first failure:

        1. the environment is initialized
        2. `origin` points at a URL containing the user identifier
        3. `upstream` points at the canonical google/blockly* repository
        4. the working tree has no uncommitted changes

        Once every check passes, missing local `master`/`develop` branches are
        created from their `origin/` tracking branches.
        """

        env = require_environment(self.env)

        origin = self.git.remote_url(self.repo_path, "origin")
        if classify_remote(origin, env.user) is not RemoteIdentity.VALID_FORK:
            raise PreconditionError(
                f"Remote 'origin' ({origin or 'not set'}) is not your fork. "
                f"It should point at {ForkProject.WEB.fork_url(env.user)} or another {PROJECT_NAME}* fork "
                f"owned by '{env.user}'."
            )

        upstream = self.git.remote_url(self.repo_path, "upstream")
        if not is_upstream_project(upstream):
            raise PreconditionError(
                f"Remote 'upstream' ({upstream or 'not set'}) is not {UPSTREAM_OWNER}/{PROJECT_NAME}*. "
                f"Add it with: git remote add upstream {ForkProject.WEB.upstream_url()}"
            )

        if not self.git.is_clean(self.repo_path):
            raise PreconditionError(
                "You have uncommitted changes. Commit or stash them before syncing your fork."
            )

        for branch in SHARED_BRANCHES:
            if not self.git.branch_exists(self.repo_path, branch):
                self.console.print(f"Creating local '{branch}' from origin/{branch}.")
                self.git.create_branch(self.repo_path, branch, f"origin/{branch}")
        return env

    def update_fork(self) -> None:
        self.verify_fork_state()
        self.git.fetch(self.repo_path, "upstream")
        for branch in SHARED_BRANCHES:
            self.console.print(f"Syncing [bold]{branch}[/bold] from upstream…")
            self.git.checkout(self.repo_path, branch)
            self.git.pull(self.repo_path, "upstream", branch)
            self.git.push(self.repo_path, "origin", f"HEAD:{branch}")
        self.console.print("[green]Fork is up to date with upstream master and develop.[/green]")

    def branch_from_fork(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise UsageError("Usage: bw fbranch <name>")
        self.verify_fork_state()
        self.git.checkout(self.repo_path, name, reset_to=f"upstream/{DEVELOP}")
        self.console.print(f"[green]Branch '{name}' now starts at upstream/{DEVELOP}.[/green]")

    def clone_fork(self, project: str) -> Path:
        fork_project = parse_project(project)
        env = require_environment(self.env)

        url = fork_project.fork_url(env.user)
        target = fork_project.clone_dir(env)
        if target.exists():
            raise PreconditionError(f"{target} already exists. Remove it or use the existing clone.")

        ensure_directory(target.parent)
        self.console.print(f"Cloning {url} into {target}…")
        if not self.git.clone(url, target) or not target.is_dir():
            raise CloneError(
                f"Could not clone {url}. Make sure '{env.user}' has forked "
                f"{UPSTREAM_OWNER}/{fork_project.repo_name} on GitHub."
            )

        self.git.add_remote(
            target,
            "upstream",
            fork_project.upstream_url(),
            track=SHARED_BRANCHES,
            fetch=True,
        )
        self.console.print(f"[green]Fork cloned into {target}[/green]")
        self.console.print(f"Next: cd {target}")
        return target


def parse_project(value: str | None) -> ForkProject:
    choices = "|".join(ForkProject.choices())
    try:
        return ForkProject((value or "").strip().lower())
    except ValueError as exc:
        raise UsageError(f"Usage: bw fclone <{choices}>") from exc
