"""Branch command - list or create branches."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error, info


@click.command('branch')
@click.argument('name', required=False)
def branch_cmd(name):
    """
    List branches, or create NAME at the current commit.

    Examples:
        grove branch                # List branches
        grove branch feature        # Create branch 'feature'
    """
    repo = find_repository_or_abort()
    refs = repo.refs

    if not name:
        current = refs.get_current_branch()
        branches = refs.list_branches()
        if not branches:
            click.echo(info("No branches yet"))
            return
        for branch_name, commit_hash in branches:
            if branch_name == current:
                click.echo(f"{Fore.GREEN}* {branch_name}{Style.RESET_ALL} {commit_hash[:7]}")
            else:
                click.echo(f"  {branch_name} {commit_hash[:7]}")
        return

    head = refs.resolve_head()
    if not head:
        click.echo(error(f"Not a valid object name: '{refs.get_current_branch() or 'HEAD'}'"))
        raise click.Abort()

    try:
        created = refs.create_branch(name, head)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not created:
        click.echo(error(f"A branch named '{name}' already exists"))
        raise click.Abort()

    click.echo(success(f"Created branch '{name}' at {head[:7]}"))
