"""Classify remote URLs against the user's fork and the canonical project."""

from __future__ import annotations

from urllib.parse import urlparse

from .exceptions import UsageError
from .models import PROJECT_NAME, UPSTREAM_OWNER, ForkProject, RemoteIdentity


def parse_remote(remote: str) -> tuple[str, str, str]:
    remote = remote.strip()
    if remote.startswith("git@"):
        host_token = remote.split("@", 1)[1]
        if ":" not in host_token:
            raise UsageError(f"Unsupported remote URL: {remote}")
        host, path = host_token.split(":", 1)
        path = path.rstrip("/")
    else:
        parsed = urlparse(remote)
        host = parsed.hostname or parsed.netloc
        path = parsed.path.lstrip("/")
    if not host or not path:
        raise UsageError(f"Unsupported remote URL: {remote}")
    parts = [part for part in path.split("/") if part]
    if len(parts) < 2:
        raise UsageError("Remote URL must look like <host>/<owner>/<repo>.")
    owner = parts[-2]
    name = parts[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return host, owner, name


def is_canonical_upstream(url: str) -> bool:
    try:
        _, owner, name = parse_remote(url)
    except UsageError:
        return False
    canonical_names = {project.repo_name for project in ForkProject}
    return owner.lower() == UPSTREAM_OWNER and name.lower() in canonical_names


def is_upstream_project(url: str | None) -> bool:
    """True when the URL names any repository under google/blockly*, matched case-insensitively."""
    return bool(url) and f"{UPSTREAM_OWNER}/{PROJECT_NAME}" in url.lower()


def classify_remote(url: str | None, user: str) -> RemoteIdentity:
    if not url:
        return RemoteIdentity.INVALID
    if is_canonical_upstream(url):
        return RemoteIdentity.CANONICAL_UPSTREAM
    if user and user.lower() in url.lower():
        return RemoteIdentity.VALID_FORK
    return RemoteIdentity.INVALID


def is_android(url: str | None) -> bool:
    return bool(url) and "android" in url.lower()
