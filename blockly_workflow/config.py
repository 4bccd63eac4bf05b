"""Load the bootstrap environment exported by the developer's shell."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import MissingEnvError
from .models import EnvironmentContext

INITIALIZED_VAR = "BLOCKLY_WORKFLOW_INITIALIZED"
USER_VAR = "BLOCKLY_WORKFLOW_USER"
ROOT_VAR = "BLOCKLY_WORKFLOW_ROOT"
DEBUG_VAR = "BLOCKLY_WORKFLOW_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


def load_environment() -> EnvironmentContext:
    if not _env_flag(INITIALIZED_VAR):
        raise MissingEnvError(
            "Environment is not initialized. Run the workspace bootstrap first "
            f"(it exports {INITIALIZED_VAR}=1)."
        )
    user = _require_env(USER_VAR, example="your-github-name").strip()
    root = Path(_require_env(ROOT_VAR, example="$HOME/blockly")).expanduser()
    return EnvironmentContext(user=user, workspace_root=root)


def try_load_environment() -> EnvironmentContext | None:
    try:
        return load_environment()
    except MissingEnvError as exc:
        logging.debug("Environment unavailable: %s", exc)
        return None


def require_environment(env: EnvironmentContext | None) -> EnvironmentContext:
    if env is None:
        raise MissingEnvError(
            "Environment is not initialized. Run the workspace bootstrap and try again."
        )
    return env


def debug_enabled() -> bool:
    return _env_flag(DEBUG_VAR)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _env_flag(var: str) -> bool:
    return os.environ.get(var, "").strip().lower() in _TRUTHY


def _require_env(var: str, *, example: str) -> str:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        raise MissingEnvError(
            f"Environment variable {var} is required. Example: export {var}={example}"
        )
    return raw
