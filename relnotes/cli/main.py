"""Main CLI entry point for Relnotes."""

import logging
import sys

import click

from .. import __version__
from ..config import get_config, create_sample_config
from .notes import notes


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--github-token', help='GitHub API token (can also be set per command)')
@click.option('--config-file', '-c', help='Path to JSON configuration file')
@click.version_option(version=__version__, prog_name="relnotes")
@click.pass_context
def cli(ctx, debug, github_token, config_file):
    """Relnotes - release notes from git history and GitHub pull requests."""

    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        base_config = get_config(config_file)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj['base_config'] = base_config
    ctx.obj['global_github_token'] = github_token
    ctx.obj['logger'] = logging.getLogger('relnotes')


@cli.command()
@click.option('--path', '-p', default='relnotes.json', help='Path for the config file')
def init_config(path):
    """Create a sample configuration file."""
    try:
        create_sample_config(path)
    except OSError as e:
        click.echo(f"Error creating config file: {e}", err=True)
        sys.exit(1)

    click.echo(f"Sample configuration file created at: {path}")
    click.echo("Please edit the file and add your GitHub token and repository details.")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Relnotes version {__version__}")


cli.add_command(notes)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == '__main__':
    main()
