"""Line readers, history files and completion glue."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Protocol, TextIO, TypeAlias

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

CompleteFunc: TypeAlias = Callable[[str, str, int], list[str]]


class LineReader(Protocol):
    """Source of input lines for a shell.

    ``read_line`` raises ``EOFError`` when there is no more input.
    """

    def read_line(self, prompt: str) -> str: ...

    def get_history(self) -> list[str]: ...

    def set_history(self, entries: Iterable[str]) -> None: ...

    def persist(self) -> None: ...


def load_history(path: Path | None) -> list[str]:
    """Read a history file, one entry per line. Missing files give no entries."""

    if path is None:
        return []
    path = path.expanduser()
    if not path.exists():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.opt(exception=True).warning("history.load_failed path={}", path)
        return []
    return [line for line in text.splitlines() if line.strip()]


def save_history(path: Path | None, entries: Iterable[str], limit: int) -> None:
    """Write the newest ``limit`` entries to a history file."""

    if path is None:
        return
    path = path.expanduser()
    kept = [entry for entry in entries if entry.strip() and "\n" not in entry]
    kept = kept[-limit:] if limit else []
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{entry}\n" for entry in kept), encoding="utf-8")
    except OSError:
        logger.opt(exception=True).warning("history.persist_failed path={}", path)
        return
    logger.debug("history.persisted path={} entries={}", path, len(kept))


class StreamLineReader:
    """Read lines from any iterable of strings, such as a file or a list."""

    def __init__(
        self,
        lines: Iterable[str] | TextIO,
        *,
        histfile: Path | None = None,
        histsize: int = 1000,
        echo: TextIO | None = None,
    ) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._histfile = histfile
        self._histsize = histsize
        self._echo = echo
        self._history: list[str] = load_history(histfile)

    def read_line(self, prompt: str) -> str:
        if self._echo is not None:
            self._echo.write(prompt)
            self._echo.flush()
        try:
            raw = next(self._lines)
        except StopIteration:
            raise EOFError from None
        line = raw.removesuffix("\n").removesuffix("\r")
        if line.strip():
            self._history.append(line)
        return line

    def get_history(self) -> list[str]:
        return list(self._history)

    def set_history(self, entries: Iterable[str]) -> None:
        self._history = list(entries)

    def persist(self) -> None:
        save_history(self._histfile, self._history, self._histsize)


class ShellCompleter(Completer):
    """prompt_toolkit completer backed by a ``complete(text, line, begidx)`` function."""

    def __init__(self, complete: CompleteFunc) -> None:
        self._complete = complete

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        line = document.text_before_cursor
        text = document.get_word_before_cursor(WORD=True)
        begidx = len(line) - len(text)
        for candidate in self._complete(text, line, begidx):
            yield Completion(candidate, start_position=-len(text))


class PromptToolkitLineReader:
    """Interactive line editing, history and tab completion via prompt_toolkit."""

    def __init__(
        self,
        *,
        histfile: Path | None = None,
        histsize: int = 1000,
        completer: Completer | None = None,
    ) -> None:
        self._histfile = histfile
        self._histsize = histsize
        self._completer = completer
        self._history = self._build_history(load_history(histfile))
        self._session: PromptSession[str] | None = None

    @staticmethod
    def _build_history(entries: Iterable[str]) -> InMemoryHistory:
        history = InMemoryHistory()
        for entry in entries:
            history.append_string(entry)
        return history

    @property
    def session(self) -> PromptSession[str]:
        # Created on first use so readers can be built without a terminal.
        if self._session is None:
            self._session = PromptSession(
                history=self._history,
                completer=self._completer,
                complete_while_typing=False,
            )
        return self._session

    def read_line(self, prompt: str) -> str:
        with patch_stdout(raw=True):
            return self.session.prompt(prompt)

    def get_history(self) -> list[str]:
        return list(self._history.get_strings())

    def set_history(self, entries: Iterable[str]) -> None:
        self._history = self._build_history(entries)
        self._session = None

    def persist(self) -> None:
        save_history(self._histfile, self.get_history(), self._histsize)
