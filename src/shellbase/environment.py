"""Per-shell environment with scoped overlays."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager

_MISSING = object()


class ShellEnvironment(MutableMapping[str, str]):
    """Environment variables visible to one shell's command handlers.

    Seeded from ``os.environ`` when created and never written back to it, so
    two shells in one process do not see each other's changes.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._vars: dict[str, str] = dict(os.environ if initial is None else initial)

    def __getitem__(self, key: str) -> str:
        return self._vars[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._vars[key] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._vars[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._vars)} vars)"

    @contextmanager
    def overlay(self, values: Mapping[str, str]) -> Iterator[ShellEnvironment]:
        """Apply ``values`` for the duration of the block.

        Overlaid keys get their previous value back (or are removed again) on
        every exit path, including exceptions raised inside the block.
        """

        saved = {key: self._vars.get(key, _MISSING) for key in values}
        self._vars.update((key, str(value)) for key, value in values.items())
        try:
            yield self
        finally:
            for key, previous in saved.items():
                if previous is _MISSING:
                    self._vars.pop(key, None)
                else:
                    self._vars[key] = previous  # type: ignore[assignment]

    def to_dict(self) -> dict[str, str]:
        return dict(self._vars)
