"""Article parser CLI — entry-point for one-off extraction and the HTTP server.

Usage:
    python cli/main.py --help

Commands:
    parse   → run the extraction pipeline on one URL
    serve   → start the HTTP API under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from article_parser.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from dataclasses import replace

import typer

from article_parser.config import settings
from article_parser.errors import ExtractionError
from article_parser.logs import configure_logging
from article_parser.pipeline import extract_article

app = typer.Typer(
    name="article-parser",
    help="Article parser CLI.",
    no_args_is_help=True,
)


@app.command("parse")
def parse(
    url: str = typer.Option(..., help="Article URL to extract."),
    as_json: bool = typer.Option(False, "--json", help="Print the full API-style response."),
    safe_mode: bool = typer.Option(False, "--safe-mode", help="Primary parser only, no fallbacks."),
) -> None:
    """Extract the main content of URL and print it to stdout."""
    configure_logging(settings)
    run_settings = replace(settings, safe_mode=True) if safe_mode else settings

    typer.echo(f"[parse] Fetching {url!r} …", err=True)
    try:
        result = extract_article(url, run_settings)
    except ExtractionError as exc:
        typer.echo(f"[parse] Failed: {exc}", err=True)
        typer.echo("[parse] Try enabling fallbacks or --safe-mode.", err=True)
        raise typer.Exit(1)

    if as_json:
        full = result.candidate.to_dict() if result.candidate is not None else None
        typer.echo(json.dumps({
            "content": result.content,
            "title": result.title,
            "author": result.author,
            "fullResult": full,
        }, indent=2, ensure_ascii=False))
        return

    if result.empty:
        typer.echo("[parse] No main content extracted.")
        typer.echo(f"[parse] Title  : {result.title}")
        return

    typer.echo(f"[parse] Title  : {result.title}")
    typer.echo(f"[parse] Author : {result.author}")
    typer.echo(f"[parse] Source : {result.candidate.source}")
    typer.echo(f"[parse] Words  : {len(result.content.split())}")
    typer.echo("")
    typer.echo(result.content)


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: int = typer.Option(3000, envvar="PORT", help="Port to listen on."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    typer.echo(f"[serve] Server running on port {port}")
    uvicorn.run("article_parser.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
