"""ourjournal ask — answer one question from the terminal."""

from __future__ import annotations

import asyncio
import sys

import click

from ourjournal.journal.models import Author


@click.command()
@click.argument("question")
@click.option(
    "--as",
    "asking_user",
    required=True,
    type=click.Choice([a.value for a in Author], case_sensitive=False),
    help="Which author is asking.",
)
@click.option("--entries", type=click.Path(exists=True), help="Entries file (YAML/JSON) or markdown directory.")
@click.option("--history-file", type=click.Path(exists=True, dir_okay=False), help="Prior turns (YAML/JSON list).")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), help="Reference date for relative questions.")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Config file.")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR).")
def ask(
    question: str,
    asking_user: str,
    entries: str | None,
    history_file: str | None,
    today,
    config_file: str | None,
    log_level: str | None,
) -> None:
    """Ask the journal assistant a question."""
    from ourjournal.assistant import JournalAssistant, PartialAnswer
    from ourjournal.core.cli.common import create_backend, load_config, load_history
    from ourjournal.core.exceptions import ConfigurationError, InputError
    from ourjournal.core.utils.logging import setup_logging
    from ourjournal.journal.store import open_store

    try:
        app = load_config(config_file).validated()
        setup_logging(app.logging, log_level)
        entries_path = entries or app.paths.entries
        if entries_path is None:
            raise ConfigurationError("No journal entries path configured (paths.entries)")
        store = open_store(entries_path)
        backend = create_backend(app.llm)
        history = load_history(history_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    assistant = JournalAssistant(store, backend, app.assistant)
    try:
        outcome = asyncio.run(assistant.ask(question, asking_user, history, today.date() if today else None))
    except InputError as e:
        raise click.UsageError(str(e)) from e

    if not outcome.ok:
        click.echo(outcome.message, err=True)
        sys.exit(1)

    if isinstance(outcome, PartialAnswer):
        click.echo("(partial answer)", err=True)
    click.echo(outcome.text)
