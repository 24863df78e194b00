"""
Slack Notify CLI

Renders build notifications from a JSON build history.

Usage:
    slack-notify [OPTIONS] COMMAND [ARGS]...

Commands:
    render    Print the notification text and color for a build
    status    Print the resolved status of every build in a history
"""

import json
import logging
import sys

import click
from dotenv import load_dotenv

from ..config import NotifierConfig
from ..models.history import BuildHistory, load_history
from ..notification.builder import NotificationBuilder
from ..notification.status import resolve_status
from ..notification.urls import DisplayUrlProvider


def setup_logging(verbose: bool):
    """Configure logging to output to stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s',  # Simple format for CLI
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def _load(path):
    try:
        return load_history(path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        click.echo(click.style(f"Error: could not load {path}: {e}", fg="red"), err=True)
        raise SystemExit(1)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Verbose output (show DEBUG logs)')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode (only show warnings/errors)')
@click.pass_context
def cli(ctx, verbose, quiet):
    """Slack build notifications - render and inspect."""
    load_dotenv()

    if quiet:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')
    else:
        setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj['config'] = NotifierConfig.from_env()


@cli.command()
@click.argument('history_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--build', 'build_number', type=int, default=None, help='Build number (default: last build)')
@click.option('--tests/--no-tests', default=None, help='Include test summary and failed tests')
@click.option('--message', default=None, help='Custom message appended to the notification')
@click.option('--jenkins-url', default=None, help='CI server root URL for the Open link')
@click.option('--json', 'as_json', is_flag=True, help='Output message and color as JSON')
@click.pass_context
def render(ctx, history_file, build_number, tests, message, jenkins_url, as_json):
    """Render the notification for a build."""
    config = ctx.obj['config']
    history = _load(history_file)

    build = history.last_build if build_number is None else history.get(build_number)
    if build is None:
        click.echo(click.style("Error: build not found in history", fg="red"), err=True)
        raise SystemExit(1)

    include_tests = config.include_tests if tests is None else tests
    builder = NotificationBuilder(
        history,
        build,
        url_provider=DisplayUrlProvider(jenkins_url or config.jenkins_url),
    ).compose(include_tests=include_tests, custom_message=message)

    if as_json:
        click.echo(json.dumps({"text": builder.render(), "color": builder.color}))
        return

    click.echo(builder.render())
    click.echo(f"color: {builder.color or 'none'}")


@cli.command()
@click.argument('history_file', type=click.Path(exists=True, dir_okay=False))
def status(history_file):
    """Show the status label each build would get as the job's last build."""
    history = _load(history_file)
    builds = history.builds

    click.echo(f"{'Build':<10} {'Result':<10} {'Status':<16} {'Color':<8}")
    click.echo("-" * 47)
    for position, build in enumerate(builds):
        # Replay the history as it looked when this build was the latest
        snapshot = BuildHistory(history.job_name, builds[:position + 1], history.display_name)
        resolved = resolve_status(snapshot, build)
        result = build.result.value if build.result else "RUNNING"
        click.echo(
            f"{build.display_name:<10} {result:<10} "
            f"{resolved.label.text:<16} {resolved.color or '-':<8}"
        )


if __name__ == '__main__':
    cli()
