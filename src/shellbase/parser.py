"""Shell-style line parsing."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from shellbase.errors import ParseError

ENV_ASSIGN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")
WHITESPACE = frozenset(" \t\r\n")
# Inside double quotes a backslash only escapes these characters.
DOUBLE_QUOTE_ESCAPES = frozenset('\\"$`\n')


def _empty_env() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ParsedLine:
    """One input line split into command name, environment overlay and arguments."""

    command: str
    env: Mapping[str, str] = field(default_factory=_empty_env)
    args: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.command == ""


@dataclass(frozen=True)
class _Word:
    text: str
    # Number of leading characters taken verbatim, before any quote or escape.
    plain: int


def parse_line(line: str) -> ParsedLine:
    """Parse one input line.

    Leading ``NAME=value`` words are collected into the environment overlay,
    the next word becomes the command and everything after it the arguments.
    A line made only of whitespace, comments or assignments has an empty
    command.

    Raises:
        ParseError: on an unterminated quote or a trailing lone backslash.
    """

    words = _tokenize(line)
    env: dict[str, str] = {}
    index = 0
    while index < len(words) and _is_assignment(words[index]):
        name, value = words[index].text.split("=", 1)
        env[name] = value
        index += 1

    if index >= len(words):
        return ParsedLine(command="", env=MappingProxyType(env))

    return ParsedLine(
        command=words[index].text,
        env=MappingProxyType(env),
        args=tuple(word.text for word in words[index + 1 :]),
    )


def split_words(line: str) -> list[str]:
    """Split text into words using the same rules as :func:`parse_line`."""

    return [word.text for word in _tokenize(line)]


def _is_assignment(word: _Word) -> bool:
    match = ENV_ASSIGN_RE.match(word.text)
    return match is not None and match.end() <= word.plain


def _tokenize(line: str) -> list[_Word]:
    words: list[_Word] = []
    chars: list[str] = []
    plain = 0
    quoted = False
    in_word = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]

        if char in WHITESPACE:
            if in_word:
                words.append(_Word("".join(chars), plain))
                chars, plain, quoted, in_word = [], 0, False, False
            index += 1
            continue

        if char == "\\" and line.startswith("\n", index + 1):
            index += 2
            continue

        if char == "#" and not in_word:
            break

        in_word = True
        if char == "'":
            end = line.find("'", index + 1)
            if end < 0:
                raise ParseError(line, "unterminated single quote")
            chars.append(line[index + 1 : end])
            quoted = True
            index = end + 1
        elif char == '"':
            index = _read_double_quoted(line, index + 1, chars)
            quoted = True
        elif char == "\\":
            if index + 1 >= length:
                raise ParseError(line, "no escaped character")
            chars.append(line[index + 1])
            quoted = True
            index += 2
        else:
            chars.append(char)
            if not quoted:
                plain += 1
            index += 1

    if in_word:
        words.append(_Word("".join(chars), plain))
    return words


def _read_double_quoted(line: str, index: int, chars: list[str]) -> int:
    length = len(line)
    while index < length:
        char = line[index]
        if char == '"':
            return index + 1
        if char == "\\" and index + 1 < length and line[index + 1] in DOUBLE_QUOTE_ESCAPES:
            if line[index + 1] != "\n":
                chars.append(line[index + 1])
            index += 2
            continue
        chars.append(char)
        index += 1
    raise ParseError(line, "unterminated double quote")
