"""Prompt values: a literal string or a generator function."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True)
class LiteralPrompt:
    """A fixed prompt string."""

    text: str

    def render(self, shell: Any) -> str:
        return self.text


@dataclass(frozen=True)
class GeneratedPrompt:
    """A prompt computed on every iteration as ``func(shell, *args)``."""

    func: Callable[..., Any]
    args: tuple[Any, ...] = ()

    def render(self, shell: Any) -> str:
        return str(self.func(shell, *self.args))


Prompt: TypeAlias = LiteralPrompt | GeneratedPrompt


def make_prompt(value: Prompt | str | Callable[..., Any], *args: Any) -> Prompt:
    """Build a prompt from a string, a callable or an existing prompt value."""

    if isinstance(value, LiteralPrompt | GeneratedPrompt):
        if args:
            raise TypeError("extra prompt arguments need a callable prompt")
        return value
    if isinstance(value, str):
        if args:
            raise TypeError("extra prompt arguments need a callable prompt")
        return LiteralPrompt(value)
    if callable(value):
        return GeneratedPrompt(value, tuple(args))
    raise TypeError(f"unsupported prompt value: {value!r}")
