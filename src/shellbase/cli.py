"""shellbase CLI bootstrap."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from shellbase.config import ShellSettings, load_settings
from shellbase.errors import ShellBaseError
from shellbase.logging_utils import configure_logging
from shellbase.output import ConsoleOutput, StreamOutput
from shellbase.reader import StreamLineReader
from shellbase.shell import ShellBase

app = typer.Typer(name="shellbase", help="Run the stock shellbase shell.", add_completion=False)


def build_shell(settings: ShellSettings) -> ShellBase:
    """Build a shell for the current process, interactive when stdin is a terminal."""

    options = {"histfile": settings.histfile, "rcfiles": settings.rcfiles, "prompt": settings.prompt}
    if sys.stdin.isatty():
        return ShellBase(output=ConsoleOutput(), **options)
    return ShellBase(
        reader=StreamLineReader(sys.stdin, histfile=settings.histfile),
        output=StreamOutput(sys.stdout),
        **options,
    )


@app.command()
def run(
    histfile: Annotated[Path | None, typer.Option("--histfile", help="History file")] = None,
    rcfile: Annotated[list[Path] | None, typer.Option("--rcfile", help="RC file, may be repeated")] = None,
    prompt: Annotated[str | None, typer.Option("--prompt", help="Prompt text")] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", help="Log level")] = None,
) -> None:
    """Start an interactive shell."""

    settings = load_settings(histfile=histfile, rcfiles=rcfile, prompt=prompt, log_level=log_level)
    configure_logging(settings.log_level)
    try:
        shell = build_shell(settings)
    except ShellBaseError as exc:
        typer.echo(f"shellbase: {exc}", err=True)
        raise typer.Exit(1) from exc
    shell.run()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
