"""Notes command implementation."""

import sys

import click
import requests

from ..cache import FileCache
from ..git import CommandError
from ..github import GitHubClient
from ..releasenote import MalformedPullRequestError, generate_release_notes


def build_config(ctx, owner=None, repo=None, git_dir=None, cache_dir=None, github_token=None):
    """Apply command line options on top of the loaded configuration."""
    base_config = ctx.obj['base_config']
    overrides = {
        'owner': owner,
        'repo': repo,
        'git_dir': git_dir,
        'cache_dir': cache_dir,
        'github_token': github_token or ctx.obj['global_github_token'],
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    config = base_config.model_copy(update=overrides)

    if not config.owner or not config.repo:
        click.echo("Error: Repository is required. Use --owner/--repo, RELNOTES_OWNER/RELNOTES_REPO or config file", err=True)
        sys.exit(1)

    return config


@click.command()
@click.argument('from_ref')
@click.argument('to_ref')
@click.option('--owner', help='Owner of the primary GitHub repository')
@click.option('--repo', help='Name of the primary GitHub repository')
@click.option('--git-dir', '-d', help='Path to the primary repository checkout')
@click.option('--cache-dir', help='Directory for cached pull request responses')
@click.option('--github-token', help='GitHub API token (overrides global setting)')
@click.option('--output', '-o', help='Output markdown to file instead of stdout')
@click.pass_context
def notes(ctx, from_ref, to_ref, owner, repo, git_dir, cache_dir, github_token, output):
    """Generate release notes for the changes between FROM_REF and TO_REF."""
    config = build_config(ctx, owner, repo, git_dir, cache_dir, github_token)
    logger = ctx.obj['logger']

    logger.info(f"Generating release notes for {config.slug}: {from_ref}..{to_ref}")

    client = GitHubClient(config, cache=FileCache(config.cache_dir), logger=logger)

    try:
        release_notes = generate_release_notes(config, from_ref, to_ref, client)
    except (CommandError, MalformedPullRequestError, requests.RequestException, ValueError) as e:
        logger.error(f"Error generating release notes: {e}")
        click.echo(f"Error generating release notes: {e}", err=True)
        sys.exit(1)

    if output:
        try:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(release_notes)
        except OSError as e:
            click.echo(f"Error writing to file {output}: {e}", err=True)
            sys.exit(1)
        click.echo(f"Release notes saved to: {output}")
    else:
        click.echo(release_notes, nl=False)
