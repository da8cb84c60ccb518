"""Entry point of the ``innovation-notifications`` command."""

import click

from innovation_service.cli.commands import database, events
from innovation_service.infra.logging import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="innovation-notifications")
def cli() -> None:
    """Notification dispatch engine for the innovation platform.

    \b
    Commands:
      kinds      List event kinds and their handlers
      dispatch   Dispatch one event and print the delivered notifications
      db init    Check database connectivity
    """


cli.add_command(events.kinds)
cli.add_command(events.dispatch)
cli.add_command(database.db)


def main() -> None:
    setup_logging()
    cli()


if __name__ == "__main__":
    main()
