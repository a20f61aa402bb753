"""CLI commands for Grove."""

import click

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.cli.output import error


def find_repository_or_abort() -> Repository:
    """
    Repository containing the current directory, or abort the command.

    core.bare is read up front so a malformed value is reported as an
    error instead of surfacing from whichever operation reads it first.
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()
    try:
        repo.is_bare
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    return repo


from grove.cli.commands.init import init_cmd  # noqa: E402
from grove.cli.commands.add import add_cmd  # noqa: E402
from grove.cli.commands.rm import rm_cmd  # noqa: E402
from grove.cli.commands.commit import commit_cmd  # noqa: E402
from grove.cli.commands.branch import branch_cmd  # noqa: E402
from grove.cli.commands.checkout import checkout_cmd  # noqa: E402
from grove.cli.commands.merge import merge_cmd  # noqa: E402
from grove.cli.commands.diff import diff_cmd  # noqa: E402
from grove.cli.commands.status import status_cmd  # noqa: E402
from grove.cli.commands.config import config_cmd  # noqa: E402

__all__ = ['find_repository_or_abort', 'init_cmd', 'add_cmd', 'rm_cmd', 'commit_cmd',
           'branch_cmd', 'checkout_cmd', 'merge_cmd', 'diff_cmd', 'status_cmd', 'config_cmd']
