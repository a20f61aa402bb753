"""Checkout command - switch branches or detach HEAD at a commit."""

import click

from grove.core.errors import GroveError, LocalChangesError
from grove.operations.checkout import checkout
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error, info, warning


@click.command('checkout')
@click.argument('ref')
def checkout_cmd(ref):
    """
    Switch the working copy to REF.

    REF is a branch name or a full commit hash; a commit hash leaves
    HEAD detached.

    Examples:
        grove checkout feature
        grove checkout 3b18e512dba79e4c8300dd08aeb37f8e728b8dad
    """
    repo = find_repository_or_abort()

    try:
        message = checkout(repo, ref)
    except LocalChangesError as e:
        click.echo(error(str(e)))
        click.echo(info("Commit your changes before you switch branches."))
        raise click.Abort()
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    first_line, _, rest = message.partition('\n')
    click.echo(success(first_line))
    if rest:
        click.echo(warning(rest))
