"""Diff command - name-status view of changes."""

import click

from grove.core.errors import GroveError
from grove.operations.diff import name_status
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import error, status_line


def resolve_or_abort(repo, ref: str) -> str:
    commit_hash = repo.refs.resolve_reference(ref)
    if commit_hash is None:
        click.echo(error(f"ambiguous argument '{ref}': unknown revision"))
        raise click.Abort()
    return commit_hash


@click.command('diff')
@click.argument('ref1', required=False)
@click.argument('ref2', required=False)
def diff_cmd(ref1, ref2):
    """
    Show changed files with their status (A, M, D).

    \b
    grove diff               index vs working copy
    grove diff REF1          REF1 vs working copy
    grove diff REF1 REF2     REF1 vs REF2
    """
    repo = find_repository_or_abort()

    try:
        hash1 = resolve_or_abort(repo, ref1) if ref1 else None
        hash2 = resolve_or_abort(repo, ref2) if ref2 else None
        changes = name_status(repo.diff.diff(hash1, hash2))
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    for path, status in sorted(changes.items()):
        click.echo(status_line(status, path))
