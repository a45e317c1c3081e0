"""An opt-in trace of noteworthy events (runtime moduli, failed inverses)."""

import sys
from typing import Optional, TextIO

from . import config

__dest : Optional[TextIO] = sys.stderr if config.log_from_environment() else None


def logging(on : bool, *, dest : TextIO = sys.stderr) -> None:
    """Whether to write diagnostics, and where to write them to."""
    global __dest
    __dest = dest if on else None


def is_logging() -> bool:
    return __dest is not None


def log(message : str) -> None:
    if __dest is not None:
        print(f'[modular] {message}', file=__dest, flush=True)
