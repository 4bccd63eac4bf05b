"""Top-level package for blockly-workflow."""

from importlib import metadata


try:  # pragma: no cover - best effort metadata lookup
    __version__ = metadata.version("blockly-workflow")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
