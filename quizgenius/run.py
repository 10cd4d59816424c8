#!/usr/bin/env python3
"""
QuizGenius - Main Entry Point

Turns a PDF chapter into a learning module: multiple-choice, true/false
and short-answer questions plus topic summaries.

Pipeline Steps:
1. EXTRACT:  PDF → plain text (PyMuPDF)
2. GENERATE: text → structured quiz (Gemini)
3. EXPORT:   quiz → copy-ready text or JSON

Usage:
    quizgenius generate chapter.pdf
    quizgenius generate chapter.pdf --format json --output quiz.json
    GEMINI_API_KEY=... quizgenius generate chapter.pdf
    quizgenius serve --port 8000

The API key is kept in memory for the duration of the command only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import click

from quizgenius.errors import MissingCredentialError
from quizgenius.export import format_quiz_as_json, format_quiz_for_export
from quizgenius.models import SECTION_TITLES, Document, PipelineState
from quizgenius.pipeline import QuizPipeline
from quizgenius.services import CredentialStore, InMemoryCredentialStore
from quizgenius.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_FAILED = 1
EXIT_CREDENTIAL = 2

PROGRESS_MESSAGES = {
    PipelineState.EXTRACTING: "Extracting text from PDF...",
    PipelineState.GENERATING: "Generating quiz...",
}

CONTENT_UNAVAILABLE_MESSAGE = (
    "Content could not be generated. The AI was unable to create a quiz from the "
    "provided document. This can happen if the document is very short, consists "
    "mainly of images, or is in a complex format."
)

PipelineFactory = Callable[[CredentialStore], QuizPipeline]


def default_pipeline_factory(store: CredentialStore) -> QuizPipeline:
    return QuizPipeline(store)


def _echo_progress(previous: PipelineState, current: PipelineState) -> None:
    message = PROGRESS_MESSAGES.get(current)
    if message:
        click.echo(message, err=True)


@click.group()
@click.option(
    '--verbose', '-v',
    is_flag=True,
    default=False,
    help='Enable verbose logging'
)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Generate quizzes and topic summaries from PDF documents."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("pipeline_factory", default_pipeline_factory)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--api-key', '-k',
    envvar='GEMINI_API_KEY',
    default=None,
    help='Gemini API key (default: $GEMINI_API_KEY, otherwise prompted)'
)
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['text', 'json']),
    default='text',
    help='Export format (default: text)'
)
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write the export to a file instead of stdout'
)
@click.pass_context
def generate(
    ctx: click.Context,
    input_file: Path,
    api_key: str | None,
    output_format: str,
    output: Path | None,
) -> None:
    """
    Generate a learning module from INPUT_FILE.

    \b
    Exit codes:
      0 - quiz generated (or no content could be generated)
      1 - the document could not be processed
      2 - the API key is missing or was rejected
    """
    store = InMemoryCredentialStore()
    pipeline: QuizPipeline = ctx.obj["pipeline_factory"](store)
    pipeline.subscribe(_echo_progress)

    if pipeline.state is PipelineState.CREDENTIAL_NEEDED:
        key = api_key or click.prompt('Gemini API key', hide_input=True, default='', show_default=False)
        try:
            pipeline.submit_credential(key)
        except MissingCredentialError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(EXIT_CREDENTIAL)

    document = Document.from_path(input_file)
    logger.info(f"Processing {document.filename} ({document.media_type}, {len(document.content)} bytes)")
    state = pipeline.process(document)

    if state is PipelineState.FAILED:
        click.echo(f"Error: {pipeline.error_message}", err=True)
        if pipeline.credential_error:
            pipeline.retry_credential()
            ctx.exit(EXIT_CREDENTIAL)
        ctx.exit(EXIT_FAILED)

    if pipeline.content_unavailable:
        click.echo(CONTENT_UNAVAILABLE_MESSAGE, err=True)
        return

    quiz = pipeline.quiz_data
    rendered = format_quiz_as_json(quiz) if output_format == 'json' else format_quiz_for_export(quiz)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding='utf-8')
        click.echo(f"Saved quiz to: {output}", err=True)
    else:
        click.echo(rendered)

    counts = quiz.section_counts()
    summary = ", ".join(f"{SECTION_TITLES[key]}: {n}" for key, n in counts.items())
    click.echo(f"✓ {summary}", err=True)


@main.command()
@click.option('--host', default='127.0.0.1', help='Bind address (default: 127.0.0.1)')
@click.option('--port', default=8000, type=int, help='Port (default: 8000)')
@click.option('--reload', is_flag=True, default=False, help='Reload on code changes')
def serve(host: str, port: int, reload: bool) -> None:
    """Run the session API."""
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=reload)


if __name__ == '__main__':
    main()
