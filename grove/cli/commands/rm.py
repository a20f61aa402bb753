"""Rm command - remove files from the index and the working copy."""

from pathlib import Path

import click

from grove.core.errors import GroveError
from grove.core.index import Index
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error, info


@click.command('rm')
@click.argument('paths', nargs=-1, required=True)
@click.option('--cached', is_flag=True, help='Only remove from the index, keep the file on disk')
def rm_cmd(paths, cached):
    """
    Remove tracked files so the next commit no longer contains them.

    A directory removes every tracked file under it. Removing a
    conflicted file resolves the conflict as a deletion.

    Examples:
        grove rm old.txt
        grove rm --cached build.log
        grove rm docs
    """
    repo = find_repository_or_abort()
    if repo.is_bare:
        click.echo(error("This operation must be run in a work tree"))
        raise click.Abort()

    try:
        index = Index.load(repo)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    removed = []
    for pathspec in paths:
        path = (Path.cwd() / pathspec).resolve()
        if path != repo.work_tree and repo.work_tree not in path.parents:
            click.echo(error(f"'{pathspec}' is outside repository"))
            raise click.Abort()

        prefix = path.relative_to(repo.work_tree).as_posix()
        matched = index.paths_under('' if prefix == '.' else prefix)
        if not matched:
            click.echo(error(f"pathspec '{pathspec}' did not match any files"))
            raise click.Abort()
        removed.extend(matched)

    removed = sorted(set(removed))
    for rel_path in removed:
        if index.is_file_in_conflict(rel_path):
            click.echo(info(f"Resolved conflict in {rel_path}"))
        index.remove_path(rel_path)
        if not cached:
            file_path = repo.work_tree / rel_path
            if file_path.is_file():
                file_path.unlink()

    index.save(repo)
    if not cached:
        repo.working_copy.remove_empty_dirs()

    for rel_path in removed:
        click.echo(f"rm '{rel_path}'")
    click.echo(success(f"Removed {len(removed)} file(s)"))
