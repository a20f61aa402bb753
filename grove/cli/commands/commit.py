"""Commit command - record the staged snapshot."""

import click

from grove.core.errors import GroveError
from grove.operations.commit import create_commit
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error


@click.command('commit')
@click.option('-m', '--message', help='Commit message')
@click.option('--author', help='Author name and email (format: "Name <email>")')
def commit_cmd(message, author):
    """
    Record changes to the repository.

    Creates a commit from the staged changes in the index. During a
    merge this completes the merge, and the prepared merge message is
    used.

    Examples:
        grove commit -m "Initial commit"
        grove commit -m "Add feature" --author "Jane <jane@example.com>"
    """
    repo = find_repository_or_abort()

    merging = repo.refs.is_merge_in_progress()
    if not message and not merging:
        click.echo(error("Commit message required. Use -m \"message\""))
        raise click.Abort()

    try:
        commit_hash = create_commit(repo, message=message, author=author)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    branch = repo.refs.get_current_branch() or 'detached HEAD'
    if merging:
        click.echo(success(f"[{branch} {commit_hash[:7]}] Merge completed"))
    else:
        click.echo(success(f"[{branch} {commit_hash[:7]}] {message.splitlines()[0]}"))
