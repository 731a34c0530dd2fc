import io
from pathlib import Path

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from shellbase.reader import (
    PromptToolkitLineReader,
    ShellCompleter,
    StreamLineReader,
    load_history,
    save_history,
)


def test_stream_reader_strips_line_endings_and_records_history() -> None:
    reader = StreamLineReader(io.StringIO("first\nsecond\r\n\nlast"))
    assert reader.read_line("> ") == "first"
    assert reader.read_line("> ") == "second"
    assert reader.read_line("> ") == ""
    assert reader.read_line("> ") == "last"
    with pytest.raises(EOFError):
        reader.read_line("> ")
    assert reader.get_history() == ["first", "second", "last"]


def test_stream_reader_echoes_prompt() -> None:
    echo = io.StringIO()
    reader = StreamLineReader(["x"], echo=echo)
    reader.read_line("demo> ")
    assert echo.getvalue() == "demo> "


def test_set_history_replaces_entries() -> None:
    reader = StreamLineReader([])
    reader.set_history(["a", "b"])
    assert reader.get_history() == ["a", "b"]


def test_history_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "history"
    save_history(path, ["one", "", "multi\nline", "two", "three"], limit=2)
    assert path.read_text(encoding="utf-8") == "two\nthree\n"
    assert load_history(path) == ["two", "three"]


def test_history_limit_zero_writes_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "history"
    save_history(path, ["one"], limit=0)
    assert path.read_text(encoding="utf-8") == ""


def test_missing_history_file_gives_no_entries(tmp_path: Path) -> None:
    assert load_history(tmp_path / "absent") == []
    assert load_history(None) == []


def test_prompt_toolkit_reader_history_without_terminal(tmp_path: Path) -> None:
    path = tmp_path / "history"
    path.write_text("old\n", encoding="utf-8")
    reader = PromptToolkitLineReader(histfile=path, histsize=10)
    assert reader.get_history() == ["old"]

    reader.set_history(["x", "y"])
    assert reader.get_history() == ["x", "y"]
    reader.persist()
    assert path.read_text(encoding="utf-8") == "x\ny\n"


def test_shell_completer_passes_word_and_offset() -> None:
    calls: list[tuple[str, str, int]] = []

    def complete(text: str, line: str, begidx: int) -> list[str]:
        calls.append((text, line, begidx))
        return ["status", "stop"]

    completer = ShellCompleter(complete)
    document = Document("svc st", cursor_position=6)
    completions = list(completer.get_completions(document, CompleteEvent(completion_requested=True)))

    assert calls == [("st", "svc st", 4)]
    assert [item.text for item in completions] == ["status", "stop"]
    assert all(item.start_position == -2 for item in completions)
