from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from kb_assistant.config import Settings, load_settings
from kb_assistant.context import AppContext, build_context
from kb_assistant.io import read_urls_from_file
from kb_assistant.logging_utils import setup_logging
from kb_assistant.repl import InteractiveSession

log = logging.getLogger("kb_assistant.cli")

app = typer.Typer(add_completion=False, help="Knowledge-base assistant over a fixed list of web pages")


def _prepare(top_k: Optional[int] = None) -> Settings:
    settings = load_settings()
    if top_k is not None:
        settings = settings.model_copy(update={"top_k": top_k})
    setup_logging(settings.log_level)
    return settings


def _read_urls(settings: Settings, urls_file: Optional[Path]) -> List[str]:
    return read_urls_from_file(urls_file or settings.urls_file)


def _bootstrap(ctx: AppContext, urls: List[str]) -> InteractiveSession:
    """
    Index all URLs; any failure aborts the command with exit code 1.
    """
    session = InteractiveSession(ctx.knowledge_base, ctx.responder)
    try:
        session.start(urls)
    except Exception as e:
        log.exception("Indexing failed")
        typer.secho(f"FAILED stage=indexing state={session.state.value}", fg=typer.colors.RED)
        typer.echo(f"{type(e).__name__}: {e}")
        raise typer.Exit(code=1)
    return session


@app.command()
def health() -> None:
    """Health check to verify config + logging works."""
    settings = _prepare()
    log = logging.getLogger("kb_assistant.health")

    log.info("Health check OK.")
    log.info("Model: %s", settings.openai_model)
    log.info("Embedding model: %s", settings.openai_embedding_model)
    log.info("Data dir: %s", settings.data_dir)
    log.info("URLs file: %s", settings.urls_file)
    log.info("Chunk size: %d (overlap %d), top_k: %d", settings.chunk_size, settings.chunk_overlap, settings.top_k)

    typer.echo("OK")


@app.command()
def version() -> None:
    """Print version and exit."""
    typer.echo("kb-assistant 0.1.0")


@app.command()
def build(
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", help="Path to file with URLs (one per line)"),
) -> None:
    """
    Fetch, chunk and cache every URL, then report what was indexed.
    """
    settings = _prepare()
    urls = _read_urls(settings, urls_file)

    ctx = build_context(settings)
    try:
        session = _bootstrap(ctx, urls)
    finally:
        ctx.close()

    typer.echo(session.summary)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query (natural language)"),
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", help="Path to file with URLs (one per line)"),
    top_k: Optional[int] = typer.Option(None, "--top-k", min=1, help="Number of results to return"),
) -> None:
    """
    Semantic search over the indexed pages.
    """
    settings = _prepare(top_k)
    urls = _read_urls(settings, urls_file)

    ctx = build_context(settings)
    try:
        _bootstrap(ctx, urls)
        hits = ctx.index.search(query, k=settings.top_k)
    finally:
        ctx.close()

    if not hits:
        typer.echo("No results found.")
        return

    for h in hits:
        text = h.chunk.text
        typer.echo("=" * 80)
        typer.echo(f"Rank: {h.rank} | Score: {h.score:.4f}")
        typer.echo(f"Source: {h.chunk.source}")
        typer.echo()
        typer.echo(text[:500] + ("..." if len(text) > 500 else ""))


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question to answer from the indexed pages"),
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", help="Path to file with URLs (one per line)"),
    top_k: Optional[int] = typer.Option(None, "--top-k", min=1, help="Number of chunks used as context"),
) -> None:
    """
    Answer a single question and exit.
    """
    settings = _prepare(top_k)
    urls = _read_urls(settings, urls_file)

    ctx = build_context(settings)
    try:
        _bootstrap(ctx, urls)
        answer = ctx.responder.answer(query)
    finally:
        ctx.close()

    typer.echo(answer.text)
    if answer.sources:
        typer.echo()
        typer.echo("Sources:")
        for s in answer.sources:
            typer.echo(f"- {s}")


@app.command()
def chat(
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", help="Path to file with URLs (one per line)"),
    top_k: Optional[int] = typer.Option(None, "--top-k", min=1, help="Number of chunks used as context"),
) -> None:
    """
    Index the URL list, then answer queries until 'exit'.
    """
    settings = _prepare(top_k)
    urls = _read_urls(settings, urls_file)

    ctx = build_context(settings)
    try:
        session = _bootstrap(ctx, urls)
        code = session.run()
    finally:
        ctx.close()

    raise typer.Exit(code=code)
