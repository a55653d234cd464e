"""CLI command for synchronizing site content into the search index."""

import json
from pathlib import Path

import click

from search_sync.orchestration.sync_pipeline import SyncPipeline
from search_sync.sync.synchronizer import SyncReport
from search_sync.utils.config import DEFAULT_CONFIG_FILE, Config
from search_sync.utils.exceptions import SearchSyncError
from search_sync.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _display_configuration(config: Config, dry_run: bool, flush: bool, chunk_size: int | None) -> None:
    """Display run configuration to user."""
    click.echo(f"Site Directory: {config.site_dir}")
    click.echo(f"Service URL: {config.service_url}")
    click.echo(f"Index Name: {config.index_name}")
    click.echo(f"Dry Run: {dry_run}")
    click.echo(f"Flush Index: {flush}")
    click.echo(f"Chunk Size: {chunk_size if chunk_size is not None else 'default'}")
    click.echo()


def _display_summary(report: SyncReport) -> None:
    """Display run summary."""
    click.echo()
    click.echo("=" * 60)
    click.echo("Dry Run Complete (nothing written)" if report.dry_run else "Indexing Complete!")
    click.echo("=" * 60)
    click.echo(f"  Documents: {report.total_actions}")
    if not report.dry_run:
        click.echo(f"  Index Flushed: {report.flushed}")
        click.echo(f"  Chunks Submitted: {report.chunks_succeeded}/{report.total_chunks}")
        for number, message in report.failures:
            click.echo(f"  Chunk {number} failed: {message}", err=True)
    click.echo(f"  Duration: {report.duration_seconds:.1f}s")
    click.echo()


@click.command()
@click.option(
    "--site-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Root directory of the site (default: current directory)",
)
@click.option(
    "--config-file",
    type=str,
    default=DEFAULT_CONFIG_FILE,
    help=f"Site config file inside the site directory (default: {DEFAULT_CONFIG_FILE})",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Build the documents and report their count without writing to the index",
)
@click.option(
    "--flush",
    is_flag=True,
    help="Clear the index before submitting documents",
)
@click.option(
    "--chunk-size",
    type=int,
    default=None,
    help="Number of documents per batch request (default: 50)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: LOG_LEVEL environment variable or INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default="json",
    help="Log output format (default: json)",
)
@click.option(
    "--report-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the run report as JSON to this file",
)
def sync(  # noqa: PLR0913
    site_dir: Path,
    config_file: str,
    dry_run: bool,
    flush: bool,
    chunk_size: int | None,
    log_level: str | None,
    log_format: str,
    report_file: Path | None,
) -> None:
    """Synchronize published posts and pages into the search index.

    Requires the SEARCH_SYNC_INDEXING_KEY environment variable (an API key
    allowed to write the index) and search_sync.index_name /
    search_sync.service_url in the site config.

    Examples:

        \b
        # Index the site in the current directory
        search-sync

        \b
        # Rebuild the index from scratch
        search-sync --flush

        \b
        # See how many documents would be indexed
        search-sync --dry-run --site-dir my-site
    """
    try:
        config = Config(site_dir=site_dir, config_file=config_file)
    except SearchSyncError as e:
        click.echo(f"  Configuration error: {e}", err=True)
        raise click.Abort() from e

    # Config loads .env, so LOG_LEVEL is only known from here on
    configure_logging(log_level or config.log_level, json_output=log_format == "json")
    logger.debug("logging_configured", log_level=log_level or config.log_level)

    _display_configuration(config, dry_run, flush, chunk_size)

    try:
        pipeline = SyncPipeline(config, show_progress=True)
        report = pipeline.run({"dry_run": dry_run, "flush": flush, "chunk_size": chunk_size})
    except KeyboardInterrupt:
        click.echo()
        click.echo("  Sync interrupted by user", err=True)
        raise click.Abort() from None
    except SearchSyncError as e:
        click.echo()
        click.echo(f"  Sync failed: {e}", err=True)
        logger.error("sync_failed", error=str(e), error_type=type(e).__name__)
        raise click.Abort() from e
    except Exception as e:
        click.echo()
        click.echo(f"  Sync failed: {e}", err=True)
        logger.error("sync_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise click.Abort() from e

    _display_summary(report)

    if report_file:
        report_file.parent.mkdir(parents=True, exist_ok=True)
        report_file.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        click.echo(f"Report saved to: {report_file}")


if __name__ == "__main__":
    sync()
