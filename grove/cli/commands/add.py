"""Add command - stage files for commit."""

from pathlib import Path
from typing import Iterator

import click

from grove.core.errors import GroveError
from grove.core.index import Index
from grove.operations.status import is_hidden
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import success, error, info


def iter_files(root: Path, work_tree: Path) -> Iterator[Path]:
    """Files under root, leaving out dot-prefixed paths and repository metadata."""
    for file_path in sorted(root.rglob('*')):
        if is_hidden(file_path.relative_to(work_tree)):
            continue
        if file_path.is_file():
            yield file_path


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
def add_cmd(paths):
    """
    Add file contents to the staging area.

    Directories are added recursively, skipping dot-prefixed names. A
    tracked file that no longer exists on disk has its removal staged.
    During a merge, adding a conflicted file (or staging its removal)
    marks it as resolved.

    Examples:
        grove add file.txt
        grove add src
        grove add .
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

    resolved = []
    removed = []
    added = 0
    for pathspec in paths:
        path = (Path.cwd() / pathspec).resolve()
        if path != repo.work_tree and repo.work_tree not in path.parents:
            click.echo(error(f"'{pathspec}' is outside repository"))
            raise click.Abort()

        prefix = path.relative_to(repo.work_tree).as_posix()
        if prefix == '.':
            prefix = ''
        missing = [rel_path for rel_path in index.paths_under(prefix)
                   if not (repo.work_tree / rel_path).is_file()]

        if path.is_dir():
            files = list(iter_files(path, repo.work_tree))
        elif path.is_file():
            files = [path]
        elif missing:
            files = []
        else:
            click.echo(error(f"pathspec '{pathspec}' did not match any files"))
            raise click.Abort()

        for rel_path in missing:
            if index.is_file_in_conflict(rel_path):
                resolved.append(rel_path)
            index.remove_path(rel_path)
            removed.append(rel_path)

        for file_path in files:
            rel_path = file_path.relative_to(repo.work_tree).as_posix()
            if index.is_file_in_conflict(rel_path):
                resolved.append(rel_path)
            index.add_file(repo, str(file_path))
            added += 1

    index.save(repo)

    for rel_path in resolved:
        click.echo(info(f"Resolved conflict in {rel_path}"))
    for rel_path in removed:
        click.echo(info(f"Staged removal of {rel_path}"))
    click.echo(success(f"Staged {added} file(s)"))
