"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable, Sequence

from .exceptions import GitCommandError
from .models import DETACHED_HEAD


def run_git(
    args: Iterable[str],
    *,
    cwd: Path,
    raise_on_error: bool = True,
    capture: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    cmd = ["git", *args]
    logging.debug("Running command: %s (in %s)", " ".join(cmd), cwd)
    proc = subprocess.run(
        cmd,
        cwd=str(cwd),
        capture_output=capture,
        text=True,
        check=False,
    )
    if raise_on_error and proc.returncode != 0:
        raise GitCommandError(cmd, proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
    return proc


class Git:
    """Git operations against an explicit repository path.

    Mutating commands that talk to a remote run uncaptured so progress
    output reaches the terminal.
    """

    def toplevel(self, path: Path) -> Path:
        proc = run_git(["rev-parse", "--show-toplevel"], cwd=path)
        return Path(proc.stdout.strip())

    def current_branch(self, path: Path) -> str:
        """Return the checked out branch, or ``HEAD`` when detached."""

        proc = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=path)
        return proc.stdout.strip() or DETACHED_HEAD

    def remote_url(self, path: Path, remote: str = "origin") -> str | None:
        proc = run_git(
            ["config", "--get", f"remote.{remote}.url"],
            cwd=path,
            raise_on_error=False,
        )
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def is_clean(self, path: Path) -> bool:
        proc = run_git(["status", "--porcelain"], cwd=path)
        return proc.stdout.strip() == ""

    def branch_exists(self, path: Path, branch: str) -> bool:
        proc = run_git(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=path,
            raise_on_error=False,
        )
        return proc.returncode == 0

    def create_branch(self, path: Path, branch: str, start_point: str) -> None:
        run_git(["branch", branch, start_point], cwd=path)

    def checkout(self, path: Path, branch: str, *, reset_to: str | None = None) -> None:
        """Check out ``branch``; with ``reset_to`` the branch is created or force-reset first."""

        if reset_to is None:
            run_git(["checkout", branch], cwd=path)
        else:
            run_git(["checkout", "-B", branch, reset_to], cwd=path)

    def fetch(self, path: Path, remote: str) -> None:
        run_git(["fetch", remote], cwd=path, capture=False)

    def pull(self, path: Path, remote: str, branch: str) -> None:
        run_git(["pull", remote, branch], cwd=path, capture=False)

    def push(self, path: Path, remote: str, refspec: str, extra: Sequence[str] = ()) -> None:
        run_git(["push", remote, refspec, *extra], cwd=path, capture=False)

    def delete_remote_branch(self, path: Path, remote: str, branch: str) -> None:
        run_git(["push", remote, "--delete", branch], cwd=path, capture=False)

    def clone(self, url: str, target: Path) -> bool:
        """Clone ``url`` into ``target``. Returns False instead of raising on failure."""

        proc = run_git(
            ["clone", url, str(target)],
            cwd=target.parent,
            raise_on_error=False,
            capture=False,
        )
        return proc.returncode == 0

    def add_remote(
        self,
        path: Path,
        name: str,
        url: str,
        track: Sequence[str] = (),
        *,
        fetch: bool = False,
    ) -> None:
        args = ["remote", "add"]
        if fetch:
            args.append("-f")
        for branch in track:
            args.extend(["-t", branch])
        args.extend([name, url])
        run_git(args, cwd=path)
