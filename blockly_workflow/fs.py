"""Filesystem helpers for blockly-workflow."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """Run the enclosed block inside ``path`` and always return to the previous cwd."""

    previous = Path.cwd()
    logging.debug("Entering %s", path)
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)
        logging.debug("Returned to %s", previous)


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
