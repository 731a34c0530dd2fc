"""Hook execution runtime with per-extension fault isolation."""

from __future__ import annotations

from typing import Any

import pluggy
from loguru import logger


class HookRuntime:
    """Run shell extension hooks so one failing extension cannot break a command."""

    def __init__(self, plugin_manager: pluggy.PluginManager) -> None:
        self._plugin_manager = plugin_manager

    def call_first(self, hook_name: str, **kwargs: Any) -> Any:
        """Run implementations, latest registration first, and return the first non-None value."""

        for impl in reversed(self._iter_hookimpls(hook_name)):
            value = self._invoke_impl(hook_name=hook_name, impl=impl, kwargs=kwargs)
            if value is _SKIP_VALUE:
                continue
            if value is not None:
                return value
        return None

    def call_chain(self, hook_name: str, key: str, value: Any, **kwargs: Any) -> Any:
        """Thread ``value`` through every implementation in registration order.

        Each implementation receives the current value under ``key``; a
        non-None return value replaces it for the next one.
        """

        for impl in self._iter_hookimpls(hook_name):
            result = self._invoke_impl(hook_name=hook_name, impl=impl, kwargs={**kwargs, key: value})
            if result is _SKIP_VALUE or result is None:
                continue
            value = result
        return value

    def notify_error(self, *, stage: str, error: Exception, line: str | None) -> None:
        """Tell on_error observers about a fault. Observer failures are logged only."""

        for impl in self._iter_hookimpls("on_error"):
            call_kwargs = self._kwargs_for_impl(impl, {"stage": stage, "error": error, "line": line})
            try:
                impl.function(**call_kwargs)
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_error_failed stage={} extension={}",
                    stage,
                    impl.plugin_name or "<unknown>",
                )

    def hook_report(self) -> dict[str, list[str]]:
        """Build a hook->extensions mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name, hook_caller in sorted(self._plugin_manager.hook.__dict__.items()):
            if hook_name.startswith("_") or not hasattr(hook_caller, "get_hookimpls"):
                continue
            extension_names = [impl.plugin_name for impl in hook_caller.get_hookimpls()]
            if extension_names:
                report[hook_name] = extension_names
        return report

    def _invoke_impl(self, *, hook_name: str, impl: Any, kwargs: dict[str, Any]) -> Any:
        call_kwargs = self._kwargs_for_impl(impl, kwargs)
        try:
            return impl.function(**call_kwargs)
        except Exception as error:
            logger.opt(exception=True).warning(
                "hook.failed hook={} extension={}",
                hook_name,
                impl.plugin_name or "<unknown>",
            )
            self.notify_error(
                stage=f"{hook_name}:{impl.plugin_name or '<unknown>'}",
                error=error,
                line=_line_from_kwargs(kwargs),
            )
            return _SKIP_VALUE

    def _iter_hookimpls(self, hook_name: str) -> list[Any]:
        # pluggy keeps implementations in registration order.
        hook = getattr(self._plugin_manager.hook, hook_name, None)
        if hook is None or not hasattr(hook, "get_hookimpls"):
            return []
        return list(hook.get_hookimpls())

    @staticmethod
    def _kwargs_for_impl(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {name: kwargs[name] for name in impl.argnames if name in kwargs}


def _line_from_kwargs(kwargs: dict[str, Any]) -> str | None:
    line = kwargs.get("line")
    if isinstance(line, str):
        return line
    return None


_SKIP_VALUE = object()
