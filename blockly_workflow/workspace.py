"""Wrappers around the multi-repository `repo` tool."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .exceptions import ToolCommandError


class RepoTool:
    """Runs `repo` subcommands scoped to the project at ``path``."""

    def __init__(self, binary: str = "repo"):
        self.binary = binary

    def start(self, path: Path, branch: str) -> None:
        self._run(path, "start", branch, ".")

    def abandon(self, path: Path, branch: str) -> None:
        self._run(path, "abandon", branch, ".")

    def sync(self, path: Path) -> None:
        self._run(path, "sync", ".")

    def rebase(self, path: Path, *, interactive: bool = False) -> None:
        if interactive:
            self._run(path, "rebase", "-i", ".")
        else:
            self._run(path, "rebase", ".")

    def _run(self, path: Path, *args: str) -> None:
        cmd = [self.binary, *args]
        logging.debug("Running command: %s (in %s)", " ".join(cmd), path)
        try:
            proc = subprocess.run(cmd, cwd=str(path), check=False)
        except FileNotFoundError as exc:
            raise ToolCommandError(cmd, 127) from exc
        if proc.returncode != 0:
            raise ToolCommandError(cmd, proc.returncode)
