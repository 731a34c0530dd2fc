"""shellbase - a framework for line-oriented command interpreters."""

from loguru import logger

from .environment import ShellEnvironment
from .errors import ConfigurationError, HandlerFault, ParseError, RcFileError, ShellBaseError
from .hookspecs import hookimpl
from .output import ConsoleOutput, OutputSink, StreamOutput
from .parser import ParsedLine, parse_line, split_words
from .prompt import GeneratedPrompt, LiteralPrompt, make_prompt
from .rcfile import load_rcfiles, parse_rcfile
from .reader import LineReader, PromptToolkitLineReader, StreamLineReader
from .registry import CommandRegistry, command
from .shell import ShellBase
from .version import __version__

logger.disable("shellbase")

__all__ = [
    "CommandRegistry",
    "ConfigurationError",
    "ConsoleOutput",
    "GeneratedPrompt",
    "HandlerFault",
    "LineReader",
    "LiteralPrompt",
    "OutputSink",
    "ParseError",
    "ParsedLine",
    "PromptToolkitLineReader",
    "RcFileError",
    "ShellBase",
    "ShellBaseError",
    "ShellEnvironment",
    "StreamLineReader",
    "StreamOutput",
    "__version__",
    "command",
    "hookimpl",
    "load_rcfiles",
    "make_prompt",
    "parse_line",
    "parse_rcfile",
    "split_words",
]
