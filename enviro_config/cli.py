#!/usr/bin/env python3
"""
enviro-config command line
==========================

Inspect and check `.env.<environment>` files without touching the calling
shell's environment. Each command runs one load cycle against a copy of the
current process environment.

Examples:
    enviro-config show --env production --config-path ./deploy
    enviro-config check --env staging --schema env_schema.yaml -d PORT=8080
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
import yaml

from . import __version__
from .config import ConfigLoader, EnviroConfigError, EnvironmentStore, load_rule_schema
from .config.config_loader import DEFAULT_ENV
from .utils.logger import setup_logging


def _parse_defaults(pairs: Tuple[str, ...]) -> Dict[str, str]:
    defaults = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--default")
        defaults[key.strip()] = value
    return defaults


def _build_loader(env: str, config_path: Path, defaults: Tuple[str, ...], schema: Optional[Path]) -> ConfigLoader:
    rule_schema = load_rule_schema(schema) if schema else None
    return ConfigLoader(
        env=env,
        schema=rule_schema,
        defaults=_parse_defaults(defaults),
        config_path=config_path,
        store=EnvironmentStore(dict(os.environ)),
    )


def _common_options(func):
    func = click.option('--default', '-d', 'defaults', multiple=True, metavar='KEY=VALUE',
                        help='Default value applied when KEY is unset or empty (repeatable).')(func)
    func = click.option('--config-path', '-c', type=click.Path(file_okay=False, path_type=Path),
                        default=Path.cwd, show_default='current directory',
                        help='Directory containing the .env.<env> files.')(func)
    func = click.option('--env', '-e', default=DEFAULT_ENV, show_default=True,
                        help='Environment name, selects .env.<env>.')(func)
    return func


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also write logs to this file.')
@click.version_option(version=__version__)
def cli(log_level: str, log_file: Optional[str]) -> None:
    """Load environment-specific dotenv files with defaults and schema checks."""
    setup_logging(log_level=log_level, log_file=log_file)


@cli.command('show')
@_common_options
@click.option('--schema', '-s', type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help='Optional YAML/JSON rule schema to validate against.')
def show(env: str, config_path: Path, defaults: Tuple[str, ...], schema: Optional[Path]) -> None:
    """Print the variables a load cycle sets, as KEY=VALUE lines."""
    try:
        loader = _build_loader(env, config_path, defaults, schema)
    except (EnviroConfigError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))

    # A key loaded empty and then defaulted appears in both tuples
    for key in dict.fromkeys(loader.loaded_keys + loader.applied_defaults):
        click.echo(f"{key}={loader.get(key, '')}")


@cli.command('check')
@_common_options
@click.option('--schema', '-s', type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True,
              help='YAML/JSON rule schema to validate against.')
def check(env: str, config_path: Path, defaults: Tuple[str, ...], schema: Path) -> None:
    """Validate the merged environment against a rule schema."""
    try:
        _build_loader(env, config_path, defaults, schema)
    except (EnviroConfigError, ValueError, yaml.YAMLError) as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo('OK')


def main() -> None:
    """Entry point for the console script."""
    cli()


if __name__ == '__main__':
    main()
