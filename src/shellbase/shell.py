"""Line-oriented command interpreter base class."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

import pluggy
from loguru import logger

from shellbase.config import ShellArgs, load_shell_args
from shellbase.environment import ShellEnvironment
from shellbase.errors import HandlerFault, ParseError
from shellbase.help import HelpSystem
from shellbase.hook_runtime import HookRuntime
from shellbase.hookspecs import SHELL_HOOK_NAMESPACE, ShellHookSpecs
from shellbase.output import ConsoleOutput, OutputSink
from shellbase.parser import ParsedLine, parse_line
from shellbase.prompt import Prompt, make_prompt
from shellbase.rcfile import RcValue, load_rcfiles
from shellbase.reader import LineReader, PromptToolkitLineReader, ShellCompleter
from shellbase.registry import CommandRegistry
from shellbase.version import __version__

QUIT_RE = re.compile(r"^\s*(?:quit|exit|logout)\s*$", re.IGNORECASE)
HELP_RE = re.compile(r"^\s*(?:help|\?)\s*$", re.IGNORECASE)
SHELL_ESCAPE = "!"
QUIT_WORDS = ("quit", "exit", "logout")
HELP_WORDS = ("help", "?")

WARRANTY = (
    "This program is distributed in the hope that it will be useful, but\n"
    "WITHOUT ANY WARRANTY; without even the implied warranty of\n"
    "MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE."
)


class ShellState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    QUITTING = "quitting"
    TERMINATED = "terminated"


class ShellBase:
    """Base class for line-oriented command interpreters.

    Subclasses add commands by defining ``do_<name>(self, *args)`` methods
    (or methods marked with :func:`shellbase.registry.command`), help text
    with ``help_<name>`` methods or handler docstrings, and argument
    completion with ``complete_<name>(self, text, line, begidx)`` methods.

    Each input line goes through ``precmd``, is parsed, routed and handled
    with its ``NAME=value`` prefix applied to :attr:`env`, and the result
    goes through ``postcmd`` before it is written to the output sink.
    ``quit``, ``exit`` and ``logout``, ``help`` and ``?``, and ``!`` are
    routed before any handler lookup, so handlers with those names are
    never called.

    Keyword arguments other than ``reader``, ``output``, ``prompt`` and
    ``extensions`` are shell options: ``histfile``, ``rcfiles`` and
    ``histsize`` are understood, anything else is kept in :attr:`args`.
    """

    VERSION = __version__

    def __init__(
        self,
        *,
        reader: LineReader | None = None,
        output: OutputSink | None = None,
        prompt: Prompt | str | Callable[..., Any] | None = None,
        extensions: Iterable[object] = (),
        **args: Any,
    ) -> None:
        options = load_shell_args(args)
        # Unknown options are kept as the caller passed them.
        self._args: dict[str, Any] = {**args, **options.model_dump(include=set(ShellArgs.model_fields))}
        self._config: dict[str, RcValue] = load_rcfiles(options.rcfiles)
        self.env = ShellEnvironment()

        self._plugin_manager = pluggy.PluginManager(SHELL_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(ShellHookSpecs)
        self._hooks = HookRuntime(self._plugin_manager)
        self._registry = CommandRegistry.discover(self)
        self._help = HelpSystem(self._registry)

        self._prompt: Prompt = make_prompt(prompt if prompt is not None else self.default_prompt())
        self._reader: LineReader = (
            reader
            if reader is not None
            else PromptToolkitLineReader(
                histfile=options.histfile,
                histsize=options.histsize,
                completer=ShellCompleter(self.complete),
            )
        )
        self._output: OutputSink = output if output is not None else ConsoleOutput()
        self._state = ShellState.IDLE
        self._quit_requested = False

        for extension in extensions:
            self.register_extension(extension)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={self._state}>"

    @property
    def args(self) -> dict[str, Any]:
        """Construction options, including unrecognized keys. Mutable for the session."""
        return self._args

    @property
    def config(self) -> dict[str, RcValue]:
        """Merged rc file values."""
        return self._config

    @property
    def reader(self) -> LineReader:
        return self._reader

    @property
    def output(self) -> OutputSink:
        return self._output

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested

    @property
    def prompt(self) -> Prompt:
        return self._prompt

    @prompt.setter
    def prompt(self, value: Prompt | str | Callable[..., Any]) -> None:
        self._prompt = make_prompt(value)

    def set_prompt(self, value: Prompt | str | Callable[..., Any], *args: Any) -> None:
        """Set the prompt; a callable is invoked as ``value(shell, *args)`` on every iteration."""
        self._prompt = make_prompt(value, *args)

    def default_prompt(self) -> str:
        return f"{type(self).__name__}> "

    def render_prompt(self) -> str:
        try:
            return self._prompt.render(self)
        except Exception:
            logger.opt(exception=True).warning("shell.prompt_failed shell={}", type(self).__name__)
            return self.default_prompt()

    def completions(self, names: Iterable[str] | None = None) -> list[str]:
        return self._registry.completions(names)

    def helps(self, names: Iterable[str] | None = None) -> list[str]:
        return self._registry.helps(names)

    def history(self, entries: Iterable[str] | None = None) -> list[str]:
        if entries is not None:
            self._reader.set_history(entries)
        return self._reader.get_history()

    def register_extension(self, extension: object, *, name: str | None = None) -> str:
        """Add an extension object.

        Its ``@hookimpl`` methods join the hook chains and its ``do_``,
        ``help_`` and ``complete_`` members are added to the registry,
        replacing same-named entries.
        """

        plugin_name = self._plugin_manager.register(extension, name=name)
        if plugin_name is None:
            raise ValueError(f"extension is blocked: {name or type(extension).__name__}")
        self._registry.scan(extension, source=plugin_name)
        logger.debug("shell.extension_registered name={}", plugin_name)
        return plugin_name

    # Overridable hooks.

    def precmd(self, line: str) -> str:
        return line

    def postcmd(self, output: Any) -> Any:
        return output

    def default(self, command: str, *args: str) -> Any:
        return f"{command}: Unknown command"

    def emptycommand(self) -> Any:
        return None

    def intro(self) -> str | None:
        return None

    def outro(self) -> str | None:
        return None

    def format_error(self, error: Exception) -> str:
        return f"Error: {error}"

    # Loop.

    def run(self) -> None:
        """Read, run and print lines until quit, end of input or an interrupt."""

        if self._state is ShellState.TERMINATED:
            logger.warning("shell.run_after_quit shell={}", type(self).__name__)
            return

        self._state = ShellState.RUNNING
        self._quit_requested = False
        intro = self._guarded("intro", self._first_result, "intro", self.intro)
        if intro is not None:
            self.emit(intro)

        try:
            while not self._quit_requested:
                try:
                    line = self._reader.read_line(self.render_prompt())
                except EOFError:
                    logger.debug("shell.end_of_input")
                    break
                output = self.onecmd(line)
                if output is not None:
                    self.emit(output)
        except KeyboardInterrupt:
            logger.debug("shell.interrupted")

        self._shutdown()

    def _shutdown(self) -> None:
        self._state = ShellState.QUITTING
        outro = self._guarded("outro", self._first_result, "outro", self.outro)
        if outro is not None:
            self.emit(outro)
        self._reader.persist()
        self._state = ShellState.TERMINATED

    def onecmd(self, line: str) -> Any:
        """Run one raw input line and return its output after ``postcmd``."""

        try:
            parsed = parse_line(self._run_precmd(line))
        except ParseError as exc:
            logger.debug("shell.parse_error reason={} line={!r}", exc.reason, exc.line)
            output: Any = self.format_error(exc)
        except Exception as exc:
            output = self._fault("precmd", exc, line, stage="precmd")
        else:
            output = self.dispatch(parsed, line=line)
        return self._run_postcmd(output, line)

    def dispatch(self, parsed: ParsedLine, *, line: str | None = None) -> Any:
        """Route a parsed line with its environment overlay applied."""

        with self.env.overlay(parsed.env):
            try:
                return self._route(parsed)
            except Exception as exc:
                return self._fault(parsed.command, exc, line)

    def _route(self, parsed: ParsedLine) -> Any:
        command, args = parsed.command, parsed.args
        if parsed.is_empty:
            return self._first_result("emptycommand", self.emptycommand)
        if QUIT_RE.match(command):
            return self.quit()
        if HELP_RE.match(command):
            return self.help(*args)
        if command.startswith(SHELL_ESCAPE):
            program = command[len(SHELL_ESCAPE) :]
            return self.shell_escape(*([program] if program else []), *args)

        handler = self._registry.resolve_dispatch(command)
        if handler is None:
            return self._first_result(
                "default",
                self.default,
                command,
                *args,
                hook_kwargs={"command": command, "args": list(args)},
            )
        return handler(*args)

    def quit(self) -> None:
        """Ask the loop to stop after the current line."""

        self._quit_requested = True
        return None

    def help(self, *args: str) -> str:
        return self._help(*args)

    def shell_escape(self, *args: str) -> str | None:
        """Run a program with the shell environment and return its output."""

        if not args:
            return "usage: ! command [args...]"
        try:
            # The user explicitly asked to run this program.
            result = subprocess.run(  # noqa: S603
                list(args),
                env=self.env.to_dict(),
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            return f"error: {exc!s}"

        output = ((result.stdout or "") + (result.stderr or "")).rstrip("\n")
        if result.returncode != 0:
            return f"error: exit={result.returncode}\n{output}" if output else f"error: exit={result.returncode}"
        return output or None

    def complete(self, text: str, line: str, begidx: int) -> list[str]:
        """Completion candidates for ``text``, the word starting at ``begidx`` of ``line``."""

        try:
            parsed = parse_line(line[:begidx])
        except ParseError:
            return []

        if parsed.is_empty:
            names = [*self.completions(), *HELP_WORDS, *QUIT_WORDS]
            return sorted({name for name in names if name.startswith(text)})

        completer = self._registry.resolve_completer(parsed.command)
        if completer is None:
            return []
        try:
            candidates = completer(text, line, begidx) or []
        except Exception:
            logger.opt(exception=True).warning("shell.completer_failed command={}", parsed.command)
            return []
        return sorted({str(candidate) for candidate in candidates if str(candidate).startswith(text)})

    def emit(self, output: Any) -> None:
        """Write one result to the output sink as a terminated line."""

        text = str(output)
        if not text.endswith("\n"):
            text += "\n"
        self._output.write(text)

    def _run_precmd(self, line: str) -> str:
        line = self.precmd(line)
        return self._hooks.call_chain("precmd", "line", line, shell=self)

    def _run_postcmd(self, output: Any, line: str) -> Any:
        try:
            output = self.postcmd(output)
        except Exception as exc:
            return self._fault("postcmd", exc, line, stage="postcmd")
        return self._hooks.call_chain("postcmd", "output", output, shell=self)

    def _first_result(
        self,
        hook_name: str,
        fallback: Callable[..., Any],
        *args: Any,
        hook_kwargs: dict[str, Any] | None = None,
    ) -> Any:
        value = self._hooks.call_first(hook_name, shell=self, **(hook_kwargs or {}))
        if value is not None:
            return value
        return fallback(*args)

    def _guarded(self, stage: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except Exception as exc:
            return self._fault(stage, exc, None, stage=stage)

    def _fault(self, command: str, error: Exception, line: str | None, *, stage: str = "handler") -> str:
        fault = HandlerFault(command, error)
        logger.opt(exception=error).warning("shell.handler_failed command={}", command)
        self._hooks.notify_error(stage=stage, error=fault, line=line)
        return self.format_error(fault)

    # Built-in commands.

    def do_history(self, *args: str) -> str | None:
        """history [count]: show the numbered command history, optionally only the last count entries."""

        entries = self._reader.get_history()
        start = 0
        if args:
            if not args[0].isdigit():
                raise ValueError(f"not a count: {args[0]}")
            start = max(len(entries) - int(args[0]), 0)
        if not entries[start:]:
            return None
        width = len(str(len(entries)))
        return "\n".join(f"{index:>{width}}  {entry}" for index, entry in enumerate(entries[start:], start=start + 1))

    def do_version(self, *args: str) -> str:
        """version: show the shell name and version."""

        return f"{type(self).__name__} v{self.VERSION}"

    def do_warranty(self, *args: str) -> str:
        """warranty: show the warranty disclaimer."""

        return WARRANTY

    def help_help(self, *args: str) -> str:
        return "help [topic]: list the help topics, or show help for one topic. '?' is a synonym."

    def help_quit(self, *args: str) -> str:
        return "quit: leave the shell. 'exit' and 'logout' are synonyms, and end of input quits too."

    def help_shell(self, *args: str) -> str:
        return "! command [args...]: run a program with the shell environment and show its output."
