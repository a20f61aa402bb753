"""Initialize a new Grove repository."""

import click
from pathlib import Path

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
@click.option('--bare', is_flag=True, help='Create a bare repository')
def init_cmd(path, bare):
    """
    Initialize a new Grove repository.

    Creates a .grove directory with the object database, refs, HEAD and
    config. With --bare, the same layout is created directly in PATH and
    there is no working copy.

    Examples:
        grove init                  # Initialize in current directory
        grove init my-project       # Initialize in my-project directory
        grove init --bare repo      # Create a bare repository
    """
    repo_path = Path(path).resolve()
    if not repo_path.exists():
        repo_path.mkdir(parents=True)
        click.echo(info(f"Created directory {repo_path}"))

    try:
        repo = Repository(str(repo_path), bare=bare).init()
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    kind = "bare Grove repository" if bare else "Grove repository"
    click.echo(success(f"Initialized empty {kind} in {repo.grove_dir}"))
