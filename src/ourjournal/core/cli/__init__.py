"""ourjournal CLI — entry point for the journal assistant."""

import click

from ourjournal import __version__


@click.group()
@click.version_option(version=__version__, package_name="ourjournal")
def main() -> None:
    """ourjournal — ask questions about your shared journal."""


from .ask_cmd import ask  # noqa: E402

main.add_command(ask)
