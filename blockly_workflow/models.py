"""Dataclasses and enums shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

GITHUB_URL = "https://github.com"
UPSTREAM_OWNER = "google"
PROJECT_NAME = "blockly"

MASTER = "master"
DEVELOP = "develop"
DETACHED_HEAD = "HEAD"


@dataclass(frozen=True)
class EnvironmentContext:
    """Values exported by the shell bootstrap before any command runs."""

    user: str
    workspace_root: Path


@dataclass(frozen=True)
class BranchRef:
    """A local branch and the personal branch it is pushed to on origin."""

    user: str
    local: str

    @property
    def remote(self) -> str:
        return f"{self.user}-{self.local}"

    @property
    def is_protected(self) -> bool:
        return self.local in (MASTER, DETACHED_HEAD)


class ForkProject(str, Enum):
    WEB = "web"
    ANDROID = "android"
    IOS = "ios"
    DEVTOOLS = "devtools"

    @property
    def suffix(self) -> str:
        return "" if self is ForkProject.WEB else f"-{self.value}"

    @property
    def repo_name(self) -> str:
        return f"{PROJECT_NAME}{self.suffix}"

    def fork_url(self, user: str) -> str:
        return f"{GITHUB_URL}/{user}/{self.repo_name}"

    def upstream_url(self) -> str:
        return f"{GITHUB_URL}/{UPSTREAM_OWNER}/{self.repo_name}"

    def clone_dir(self, env: EnvironmentContext) -> Path:
        return env.workspace_root / f"{self.value}-{env.user}"

    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]


class RemoteIdentity(str, Enum):
    CANONICAL_UPSTREAM = "canonical-upstream"
    VALID_FORK = "valid-fork"
    INVALID = "invalid"


class GateKind(str, Enum):
    TEST = "test"
    LINT = "lint"

    @property
    def gradle_task(self) -> str:
        return "test" if self is GateKind.TEST else "check"


@dataclass(frozen=True)
class PushGateResult:
    """Outcome of the pre-push build gate."""

    ran: bool
    passed: bool

    @classmethod
    def skipped(cls) -> PushGateResult:
        return cls(ran=False, passed=True)
