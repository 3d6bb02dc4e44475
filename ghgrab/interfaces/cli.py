"""
Command-line entry point: ``ghgrab URL``.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from .. import __version__
from ..infrastructure.error_handler import GrabError
from ..models import (
    DownloadConfig, DownloadEvent, DownloadOutcome, DownloadStatus,
    EventCallback, EventKind, TargetKind
)
from .api import GitHubGrabber


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARTIAL = 3
EXIT_CANCELLED = 130


def make_event_printer(quiet: bool = False, bell: bool = False) -> EventCallback:
    """Build the progress callback that renders events on the terminal."""

    def on_event(event: DownloadEvent) -> None:
        if event.kind is EventKind.COMPLETED:
            if bell:
                click.echo("\a", nl=False)
            return

        if quiet:
            return

        if event.kind is EventKind.FILE_WRITTEN:
            click.echo(f"  {event.local_path}")
        elif event.kind in (EventKind.FILE_FAILED, EventKind.DIRECTORY_FAILED):
            click.secho(f"  failed {event.remote_path}: {event.reason}", fg="red", err=True)

    return on_event


def summarize(outcome: DownloadOutcome) -> Tuple[str, int]:
    """Return the summary line and exit code for an outcome."""

    status = outcome.status
    root = outcome.destination_root

    if status is DownloadStatus.CANCELLED:
        return f"Cancelled after {outcome.files_written} files", EXIT_CANCELLED

    if outcome.kind is TargetKind.FILE:
        return f"Downloaded {root}", EXIT_OK

    if status is DownloadStatus.COMPLETED:
        return f"Downloaded {outcome.files_written} files to {root}/", EXIT_OK

    if status is DownloadStatus.PARTIAL:
        return (
            f"Downloaded {outcome.files_written} files to {root}/ "
            f"({len(outcome.failures)} failed)",
            EXIT_PARTIAL,
        )

    return f"Download failed: all {len(outcome.failures)} items failed", EXIT_FAILURE


async def _download(grabber: GitHubGrabber, url: str, on_event: EventCallback) -> DownloadOutcome:
    async with grabber:
        return await grabber.download(url, on_event=on_event)


@click.command()
@click.argument("url")
@click.option(
    "-d", "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to download into [default: ~/Downloads].",
)
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="GitHub token (or GITHUB_TOKEN).")
@click.option(
    "-j", "--concurrency",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Maximum number of concurrent GitHub requests.",
)
@click.option("--gh-cli", "use_gh_cli", is_flag=True, help="Fetch through the authenticated `gh` CLI.")
@click.option("-q", "--quiet", is_flag=True, help="Only print the final summary.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--bell", is_flag=True, help="Ring the terminal bell when done.")
@click.version_option(version=__version__, prog_name="ghgrab")
def main(
    url: str,
    dest: Optional[Path],
    token: Optional[str],
    concurrency: int,
    use_gh_cli: bool,
    quiet: bool,
    verbose: bool,
    bell: bool,
) -> None:
    """Download the GitHub file or folder at URL."""

    config = DownloadConfig(max_concurrent_downloads=concurrency)
    if dest is not None:
        config.destination = dest.expanduser()

    grabber = GitHubGrabber(
        auth_token=token, config=config, verbose=verbose, use_gh_cli=use_gh_cli
    )

    try:
        outcome = asyncio.run(_download(grabber, url, make_event_printer(quiet, bell)))
    except GrabError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        click.echo("Cancelled", err=True)
        sys.exit(EXIT_CANCELLED)

    message, code = summarize(outcome)
    click.secho(message, fg="green" if code == EXIT_OK else "yellow")
    sys.exit(code)


__all__ = [
    "main",
    "make_event_printer",
    "summarize",
]
