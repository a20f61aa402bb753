"""Main CLI entry point for Grove."""

import logging

import click
from colorama import init

from grove import __version__
from grove.cli.commands import (init_cmd, add_cmd, rm_cmd, commit_cmd, branch_cmd, checkout_cmd,
                                merge_cmd, diff_cmd, status_cmd, config_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log what grove is doing')
def cli(verbose):
    """Grove - a local version-control engine."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


cli.add_command(init_cmd)
cli.add_command(add_cmd)
cli.add_command(rm_cmd)
cli.add_command(commit_cmd)
cli.add_command(branch_cmd)
cli.add_command(checkout_cmd)
cli.add_command(merge_cmd)
cli.add_command(diff_cmd)
cli.add_command(status_cmd)
cli.add_command(config_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
