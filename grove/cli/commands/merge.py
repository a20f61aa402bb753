"""Merge command for Grove."""

import click

from grove.core.errors import GroveError
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error, info, warning


@click.command('merge')
@click.argument('ref', required=False)
@click.option('--abort', is_flag=True, help='Abort the current merge operation')
def merge_cmd(ref, abort):
    """
    Merge REF into the current branch.

    REF is a branch name or a commit hash. A REF whose history contains
    the current commit is fast-forwarded; otherwise a three-way merge is
    made and, if it has no conflicts, committed.

    Examples:
        grove merge feature         # Merge feature into the current branch
        grove merge --abort         # Abandon a conflicted merge
    """
    repo = find_repository_or_abort()

    if abort:
        try:
            aborted = repo.merge.abort_merge()
        except GroveError as e:
            click.echo(error(str(e)))
            raise click.Abort()
        if not aborted:
            click.echo(error("No merge in progress"))
            raise click.Abort()
        click.echo(success("Merge aborted"))
        return

    if not ref:
        click.echo(error("Missing ref to merge"))
        click.echo(info("Usage: grove merge <ref>"))
        click.echo(info("       grove merge --abort"))
        raise click.Abort()

    try:
        result = repo.merge.merge(ref)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.conflicts:
        for path in result.conflicts:
            click.echo(warning(f"CONFLICT (content): Merge conflict in {path}"))
        click.echo(error(result.message))
        click.echo(info("Resolve the conflicts, 'grove add' the files and run 'grove commit',"))
        click.echo(info("or run 'grove merge --abort'."))
        raise click.Abort()

    if result.commit_hash:
        click.echo(success(f"{result.message} ({result.commit_hash[:7]})"))
    else:
        click.echo(success(result.message))
