"""Command-line entry point: interactive shell or HTTP server."""

from __future__ import annotations

import logging
import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import load_settings
from .registry import FileRegistry
from .shell import CommandShell

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="versionfs - in-memory files with branchable version history.",
)

VerboseFlag = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
]


def setup_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def shell(verbose: VerboseFlag = False) -> None:
    """Read commands from stdin until EOF or EXIT (type HELP for a list)."""
    settings = load_settings()
    setup_logging(settings.log_level, verbose)
    code = CommandShell(FileRegistry(), page_size=settings.page_size).run(
        sys.stdin, sys.stdout, sys.stderr
    )
    raise typer.Exit(code)


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address (overrides config)")] = "",
    port: Annotated[int, typer.Option(help="Port (overrides config)")] = 0,
    verbose: VerboseFlag = False,
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from .main import create_app

    settings = load_settings()
    setup_logging(settings.log_level, verbose)
    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info("Serving on %s:%d", bind_host, bind_port)
    uvicorn.run(create_app(settings=settings), host=bind_host, port=bind_port)


if __name__ == "__main__":
    app()
