"""Status command - show working tree status."""

import click

from grove.core.errors import GroveError
from grove.operations.status import compute_status
from grove.cli.commands import find_repository_or_abort
from grove.cli.output import error, info, warning, status_line


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Lists unmerged paths, changes staged for the next commit, changes
    not yet staged and untracked files.
    """
    repo = find_repository_or_abort()

    try:
        report = compute_status(repo)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if report.branch:
        click.echo(f"On branch {report.branch}")
    else:
        click.echo(f"HEAD detached at {report.head[:7] if report.head else '(none)'}")

    if report.head is None:
        click.echo(info("No commits yet"))

    if report.merging:
        click.echo(warning("You have unmerged paths." if report.unmerged
                           else "All conflicts fixed but you are still merging."))

    if report.unmerged:
        click.echo("\nUnmerged paths:")
        for path in report.unmerged:
            click.echo(f"  both modified: {path}")

    sections = (
        ("Changes to be committed:", report.to_be_committed),
        ("Changes not staged for commit:", report.not_staged),
    )
    for title, changes in sections:
        if changes:
            click.echo(f"\n{title}")
            for status, path in changes:
                click.echo(f"  {status_line(status, path)}")

    if report.untracked:
        click.echo("\nUntracked files:")
        for path in report.untracked:
            click.echo(f"  {path}")

    if report.is_clean:
        click.echo("\nnothing to commit, working tree clean")
