"""Diagnostic output for httpkit.

httpkit never writes to stdout. The only thing it reports is a ``debug``
trace of outgoing requests and their classified responses, written to
**stderr** through a Rich :class:`~rich.console.Console`:

* **verbose** -- enables the trace. Off by default, so a client is
  silent unless asked otherwise.
* **colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``no_color`` flag.

Library code fetches the global manager with :func:`get_output`;
applications install their own with :func:`set_output`.

Example::

    from httpkit.output import OutputManager, set_output

    set_output(OutputManager(verbose=True))
"""

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Routes httpkit diagnostics to stderr.

    Args:
        no_color: Disable all colour and Rich markup.
        verbose: Show debug messages.
        file: Stream to write to. Defaults to :data:`sys.stderr`.
    """

    def __init__(
        self,
        no_color: bool = False,
        verbose: bool = False,
        file: Optional[TextIO] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._verbose = verbose
        self._file = file
        self._stderr = Console(
            file=file or sys.stderr,
            no_color=self._no_color,
            stderr=file is None,
        )

    def debug(self, message: str) -> None:
        """Print a dimmed debug message. Only shown when ``verbose`` is enabled."""
        if not self._verbose:
            return
        line = f"[debug] {message}"
        if self._no_color:
            print(line, file=self._file or sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]{escape(line)}[/dim]")


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None
