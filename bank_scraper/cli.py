# === FILE: bank_scraper/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for BankScraper.

Commands:
  crawl     Crawl the configured site and write the dataset JSON
  config    Show the effective configuration

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml, else built-in defaults)
  --limit INT         Maximum number of records (overrides max_pages)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  --output PATH       Dataset path (overrides output_file)
  --concurrency INT   Batch width (overrides max_concurrent_pages)

Misc:
  --version, -v       Show the BankScraper version

Example:
  bank-scraper --config configs/default.yaml --limit 100 crawl --output dataset.json
"""
import sys
from pathlib import Path

import click

from bank_scraper import __version__
from bank_scraper.config import load_config
from bank_scraper.engine import run_crawl
from bank_scraper.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
INTERRUPTED_EXIT_CODE = 130


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='BankScraper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Maximum number of records (overrides max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stdout only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """BankScraper command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'max_pages': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Dataset JSON path (overrides output_file)'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Fetches in flight per batch (overrides max_concurrent_pages)'
)
@click.pass_context
def crawl(ctx, output, concurrency):
    """Crawl the site and write the dataset."""
    cfg = ctx.obj['config']
    updates = {}
    if output is not None:
        updates['output_file'] = output
    if concurrency is not None:
        updates['max_concurrent_pages'] = concurrency
    if updates:
        cfg = cfg.model_copy(update=updates)

    click.echo(f'Starting crawl of {cfg.target_domain} from {cfg.base_url}')
    try:
        report = run_crawl(cfg)
    except KeyboardInterrupt:
        click.secho('Scraping interrupted by user', fg='yellow', err=True)
        sys.exit(INTERRUPTED_EXIT_CODE)
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    summary = report.summary
    click.echo(
        f"Collected {summary['total_items']} items "
        f"({summary['html_pages']} html, {summary['pdf_documents']} pdf) -> {cfg.output_file}"
    )


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
