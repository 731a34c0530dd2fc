"""Command registry built from handler-shaped members."""

from __future__ import annotations

import builtins
import inspect
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

HANDLER_PREFIX = "do_"
HELP_PREFIX = "help_"
COMPLETER_PREFIX = "complete_"
COMMAND_MARKER = "__shell_commands__"

F = TypeVar("F", bound=Callable[..., Any])


def command(*names: str) -> Callable[[F], F]:
    """Mark a method as the handler for one or more command names.

    Useful for names that are not valid identifiers::

        @command("ls", "dir")
        def list_entries(self, *args): ...
    """

    if not names:
        raise ValueError("command() needs at least one name")

    def decorator(func: F) -> F:
        setattr(func, COMMAND_MARKER, tuple(names))
        return func

    return decorator


@dataclass(frozen=True)
class HandlerDescriptor:
    """Handler metadata and bound callable."""

    name: str
    handler: Callable[..., Any]
    source: str

    @property
    def doc(self) -> str | None:
        return inspect.getdoc(self.handler)


class CommandRegistry:
    """Dispatchable handlers, help producers and completers of one shell."""

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerDescriptor] = {}
        self._help: dict[str, Callable[..., Any]] = {}
        self._completers: dict[str, Callable[..., Any]] = {}
        self._dispatchable: builtins.list[str] = []
        self._help_topics: builtins.list[str] = []

    @classmethod
    def discover(cls, *providers: object) -> CommandRegistry:
        """Build a registry from the shell and any extension objects, in order."""

        registry = cls()
        for provider in providers:
            registry.scan(provider)
        return registry

    def scan(self, provider: object, *, source: str | None = None) -> None:
        """Record handler, help and completer members of ``provider``.

        Entries found here replace same-named entries from earlier scans.
        """

        label = source or type(provider).__name__
        for attr_name, raw in _iter_members(provider):
            if attr_name.startswith(HANDLER_PREFIX) and len(attr_name) > len(HANDLER_PREFIX):
                self._add_handler(attr_name[len(HANDLER_PREFIX) :], getattr(provider, attr_name), label)
            elif attr_name.startswith(HELP_PREFIX) and len(attr_name) > len(HELP_PREFIX):
                self._add_help(attr_name[len(HELP_PREFIX) :], getattr(provider, attr_name))
            elif attr_name.startswith(COMPLETER_PREFIX) and len(attr_name) > len(COMPLETER_PREFIX):
                self._completers[attr_name[len(COMPLETER_PREFIX) :]] = getattr(provider, attr_name)

            for name in getattr(raw, COMMAND_MARKER, ()):
                self._add_handler(name, getattr(provider, attr_name), label)

    def _add_handler(self, name: str, handler: Callable[..., Any], source: str) -> None:
        self._handlers[name] = HandlerDescriptor(name=name, handler=handler, source=source)
        if name not in self._dispatchable:
            self._dispatchable.append(name)
        if inspect.getdoc(handler) and name not in self._help_topics:
            self._help_topics.append(name)

    def _add_help(self, name: str, producer: Callable[..., Any]) -> None:
        self._help[name] = producer
        if name not in self._help_topics:
            self._help_topics.append(name)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def get(self, name: str) -> HandlerDescriptor | None:
        return self._handlers.get(name)

    def descriptors(self) -> builtins.list[HandlerDescriptor]:
        return [self._handlers[name] for name in self._dispatchable if name in self._handlers]

    def resolve_dispatch(self, name: str) -> Callable[..., Any] | None:
        """Exact-name lookup of an invocable handler, ``None`` when not found."""

        if name not in self._dispatchable:
            return None
        descriptor = self._handlers.get(name)
        if descriptor is None:
            return None
        return descriptor.handler

    def resolve_help(self, name: str) -> Callable[..., Any] | None:
        """Return a help producer for ``name``, ``None`` when there is none.

        A ``help_<name>`` member wins over the handler's docstring.
        """

        producer = self._help.get(name)
        if producer is not None:
            return producer
        descriptor = self._handlers.get(name)
        if descriptor is None or not descriptor.doc:
            return None
        doc = descriptor.doc
        return lambda *_args: doc

    def resolve_completer(self, name: str) -> Callable[..., Any] | None:
        return self._completers.get(name)

    def completions(self, names: Iterable[str] | None = None) -> builtins.list[str]:
        """Get, or replace and get, the dispatchable command names."""

        if names is not None:
            self._dispatchable = _unique(names)
        return list(self._dispatchable)

    def helps(self, names: Iterable[str] | None = None) -> builtins.list[str]:
        """Get, or replace and get, the help topic names."""

        if names is not None:
            self._help_topics = _unique(names)
        return list(self._help_topics)


def _iter_members(provider: object) -> Iterator[tuple[str, Any]]:
    # Base classes first so names come out in declaration order while
    # getattr() still binds the most derived override.
    seen: set[str] = set()
    for klass in reversed(type(provider).__mro__):
        if klass is object:
            continue
        for attr_name, raw in vars(klass).items():
            if attr_name in seen:
                continue
            if isinstance(raw, staticmethod | classmethod):
                raw = raw.__func__
            if not inspect.isfunction(raw):
                continue
            seen.add(attr_name)
            # Decorator markers live on the outermost wrapper.
            yield attr_name, getattr(type(provider), attr_name)


def _unique(names: Iterable[str]) -> builtins.list[str]:
    return list(dict.fromkeys(names))
