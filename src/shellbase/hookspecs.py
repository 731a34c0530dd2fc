"""Pluggy hook namespace and shell extension hook specifications."""

from __future__ import annotations

from typing import Any

import pluggy

SHELL_HOOK_NAMESPACE = "shellbase"
hookspec = pluggy.HookspecMarker(SHELL_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(SHELL_HOOK_NAMESPACE)


class ShellHookSpecs:
    """Hook contract for shell extensions."""

    @hookspec
    def precmd(self, shell: Any, line: str) -> str | None:
        """Rewrite one raw input line before it is parsed. ``None`` keeps it."""

    @hookspec
    def postcmd(self, shell: Any, output: Any) -> Any:
        """Rewrite one command result before it is emitted. ``None`` keeps it."""

    @hookspec(firstresult=True)
    def default(self, shell: Any, command: str, args: list[str]) -> Any:
        """Handle a command no handler is registered for."""

    @hookspec(firstresult=True)
    def emptycommand(self, shell: Any) -> Any:
        """Handle a line without a command."""

    @hookspec(firstresult=True)
    def intro(self, shell: Any) -> str | None:
        """Provide text shown before the first prompt."""

    @hookspec(firstresult=True)
    def outro(self, shell: Any) -> str | None:
        """Provide text shown when the shell quits."""

    @hookspec
    def on_error(self, stage: str, error: Exception, line: str | None) -> None:
        """Observe handler and hook failures."""
