import click
from typing import Optional

from core.services.book_list_sync import SyncReport

def print_sync_start(year: int, genre: str, url: str, pending_url: Optional[str] = None,
                     verbose: bool = False) -> None:
    """Print sync operation start information"""
    if not verbose:
        return

    click.echo(click.style("\nSyncing book list ", fg='blue') +
               click.style(f"{year} {genre}", fg='cyan'))
    click.echo(click.style("List: ", fg='blue') + click.style(url, fg='cyan'))
    if pending_url:
        click.echo(click.style("Pending shelf: ", fg='blue') + click.style(pending_url, fg='cyan'))

def print_sync_report(report: SyncReport, verbose: bool = False) -> None:
    """Print the results of a sync run"""
    click.echo("\n" + click.style("Results:", fg='blue'))
    click.echo(click.style("Processed: ", fg='blue') +
               click.style(str(report.total), fg='cyan') +
               click.style(" books", fg='blue'))
    click.echo(click.style("Created: ", fg='blue') + click.style(str(report.created), fg='green'))
    click.echo(click.style("Updated: ", fg='blue') + click.style(str(report.updated), fg='green'))
    click.echo(click.style("No longer pending: ", fg='blue') +
               click.style(str(report.pending_cleared), fg='green'))
    click.echo(click.style("Unchanged: ", fg='blue') + click.style(str(report.unchanged), fg='cyan'))
    if report.skipped_shelf:
        click.echo(click.style("Skipped shelf books of other genres: ", fg='blue') +
                   click.style(str(report.skipped_shelf), fg='yellow'))

    if report.failed and verbose:
        click.echo("\n" + click.style("Failed books:", fg='red'))
        for url, error in report.failed:
            click.echo("\n" + click.style(f"URL: {url}", fg='red'))
            click.echo(click.style(f"Reason: {error}", fg='red'))
    elif report.failed:
        click.echo(click.style(f"\nFailed {len(report.failed)} books. ", fg='red') +
                   click.style("Use --verbose to see details.", fg='blue'))
