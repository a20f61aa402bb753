"""Config command - manage repository configuration."""

from typing import Tuple

import click

from grove.core.config import get_config
from grove.core.errors import ConfigError
from grove.core.repository import Repository
from grove.cli.output import success, error, info


def split_key(key: str) -> Tuple[str, str]:
    """'user.name' -> ('user', 'name'); a bare key lives in [core]."""
    section, _, option = key.rpartition('.')
    if not option:
        click.echo(error(f"Invalid config key: {key}"))
        raise click.Abort()
    return section or 'core', option


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        grove config set user.name "Your Name"
        grove config set --global user.email "you@example.com"
    """
    section, option = split_key(key)
    repo = Repository.find_repository()
    if not repo and not is_global:
        click.echo(error("Not a grove repository (use --global for global config)"))
        raise click.Abort()

    try:
        get_config(repo).set(section, option, value, global_config=is_global)
    except ConfigError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
def config_get(key):
    """
    Get a config value. Environment variables (GROVE_<SECTION>_<KEY>)
    win over repository config, which wins over global config.

    Examples:
        grove config get user.name
    """
    section, option = split_key(key)
    value = get_config(Repository.find_repository()).get(section, option)
    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)


@config_cmd.command('list')
def config_list():
    """List global and repository config values, repository winning."""
    values = get_config(Repository.find_repository()).list_all()
    if not values:
        click.echo(info("No configuration set"))
        return

    for section, options in sorted(values.items()):
        for option, value in sorted(options.items()):
            click.echo(f"{section}.{option}={value}")
