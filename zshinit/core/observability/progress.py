"""
Progress indicator — a spinner that follows one background process.

Purely cosmetic: it polls the child's liveness on an interval and draws
a frame; it never reads the child's output and never changes the
outcome. Drawing only happens on a TTY.

The cursor is hidden while spinning. Whatever stops the loop — the child
exiting, a timeout, or Ctrl-C — the cursor is shown again and the frame
erased before control leaves ``track``.
"""

from __future__ import annotations

import sys
import time
from typing import IO, Protocol

import click

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"

FRAMES = ("⣷", "⣯", "⣟", "⡿", "⢿", "⣻", "⣽", "⣾")


class _Pollable(Protocol):
    def poll(self) -> int | None: ...


class Spinner:
    """Draw ``label... [⣷]`` while a process runs, then ``[✓]`` / ``[✗]``.

    Args:
        label: Text printed before the spinner.
        stream: Output stream (default: stdout).
        delay: Seconds between liveness polls.
        enabled: Force drawing on/off. Default: only when ``stream`` is a TTY.
    """

    def __init__(
        self,
        label: str,
        *,
        stream: IO[str] | None = None,
        delay: float = 0.1,
        enabled: bool | None = None,
    ) -> None:
        self.label = label
        self.stream = stream if stream is not None else sys.stdout
        self.delay = delay
        if enabled is None:
            isatty = getattr(self.stream, "isatty", None)
            enabled = bool(isatty and isatty())
        self.enabled = enabled
        self._drawn = False

    def track(self, proc: _Pollable, timeout: float | None = None) -> int | None:
        """Poll ``proc`` until it exits or ``timeout`` elapses.

        Returns:
            The exit code, or ``None`` if the timeout hit first.
        """
        deadline = time.monotonic() + timeout if timeout else None
        if self.enabled:
            self._write(f"{self.label}...{_HIDE_CURSOR}")
        index = 0
        returncode: int | None = None
        try:
            while True:
                returncode = proc.poll()
                if returncode is not None:
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    break
                if self.enabled:
                    self._draw(FRAMES[index % len(FRAMES)])
                    index += 1
                time.sleep(self.delay)
        finally:
            self._restore()
        if self.enabled:
            mark = "✓" if returncode == 0 else "✗"
            self._write(f" [{mark}]\n")
        return returncode

    # ── Terminal drawing ────────────────────────────────────────

    def _draw(self, frame: str) -> None:
        if self._drawn:
            self._write("\b" * 6)
        self._write(f" [{frame}]  ")
        self._drawn = True

    def _restore(self) -> None:
        """Erase the last frame and show the cursor again."""
        if not self.enabled:
            return
        if self._drawn:
            self._write("\b" * 6 + " " * 6 + "\b" * 6)
            self._drawn = False
        self._write(_SHOW_CURSOR)

    def _write(self, text: str) -> None:
        click.echo(text, file=self.stream, nl=False, color=True)
        flush = getattr(self.stream, "flush", None)
        if flush:
            flush()
