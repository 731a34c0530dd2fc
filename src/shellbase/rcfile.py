"""RC file parsing.

The format is line based::

    # comment
    name = value        # trailing comment
    verbose             # boolean true
    nocolor             # boolean false, stored as color
    long = first part \\
           second part

Later definitions override earlier ones, and later files override earlier
files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from typing import TypeAlias

from loguru import logger

from shellbase.errors import RcFileError

RcValue: TypeAlias = str | bool

ASSIGN_RE = re.compile(r"^(?P<name>[A-Za-z_][\w.-]*)\s*=\s*(?P<value>.*)$")
FLAG_RE = re.compile(r"^(?P<name>[A-Za-z_][\w.-]*)$")
NEGATION_PREFIX = "no"


def parse_rcfile(text: str, *, source: str = "<string>") -> dict[str, RcValue]:
    """Parse rc file text into a flat name -> value mapping."""

    config: dict[str, RcValue] = {}
    for lineno, line in _logical_lines(text):
        assignment = ASSIGN_RE.match(line)
        if assignment is not None:
            config[assignment["name"]] = assignment["value"].strip()
            continue

        flag = FLAG_RE.match(line)
        if flag is None:
            logger.warning("rcfile.malformed_line source={} line={} text={!r}", source, lineno, line)
            continue

        name = flag["name"]
        if name.startswith(NEGATION_PREFIX) and len(name) > len(NEGATION_PREFIX):
            config[name[len(NEGATION_PREFIX) :]] = False
        else:
            config[name] = True
    return config


def load_rcfiles(paths: Iterable[str | PathLike[str]]) -> dict[str, RcValue]:
    """Load and merge rc files in order, skipping files that do not exist."""

    merged: dict[str, RcValue] = {}
    for raw_path in paths:
        path = Path(raw_path).expanduser()
        if not path.exists():
            logger.debug("rcfile.missing path={}", path)
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RcFileError(f"cannot read rc file {path}: {exc}") from exc
        values = parse_rcfile(text, source=str(path))
        logger.debug("rcfile.loaded path={} keys={}", path, len(values))
        merged.update(values)
    return merged


def _logical_lines(text: str) -> Iterable[tuple[int, str]]:
    pending: list[str] = []
    start = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not pending:
            start = lineno
        if line.endswith("\\"):
            pending.append(line[:-1])
            continue
        pending.append(line)
        joined = " ".join(part.strip() for part in pending if part.strip())
        pending = []
        if joined:
            yield start, joined
    if pending:
        joined = " ".join(part.strip() for part in pending if part.strip())
        if joined:
            yield start, joined
