"""Output sinks."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO

from rich.console import Console


class OutputSink(Protocol):
    """Destination for shell output. Always called with whole, terminated lines."""

    def write(self, text: str) -> None: ...


class StreamOutput:
    """Write plain text to a stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class ConsoleOutput:
    """Write through a rich console, paging text taller than the terminal."""

    def __init__(self, console: Console | None = None, *, pager: bool = True) -> None:
        self.console: Console = console or Console()
        self._pager = pager

    def write(self, text: str) -> None:
        if self._pager and self.needs_paging(text):
            with self.console.pager():
                self.console.out(text, end="", highlight=False)
            return
        self.console.out(text, end="", highlight=False)

    def needs_paging(self, text: str) -> bool:
        if not self.console.is_terminal:
            return False
        return text.count("\n") >= self.console.size.height
