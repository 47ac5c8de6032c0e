# === FILE: restyle_proxy/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for restyle_proxy.

Commands:
  serve     Run the HTTP proxy (``/fetch`` and ``/proxy-resource``)
  fetch     Fetch and rewrite one page, print or save the result
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

fetch options:
  --json PATH         Save the JSON envelope to a file
  --html PATH         Save the rewritten HTML to a file
  --pretty            Indent JSON output (2 spaces)

Other:
  --version, -v       Show the version

Example:
  restyle-proxy --config configs/default.yaml serve --port 3001
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from restyle_proxy import __version__
from restyle_proxy.config import load_config
from restyle_proxy.engine import fetch_page
from restyle_proxy.errors import ProxyError
from restyle_proxy.fetcher import FetchGateway
from restyle_proxy.logger import DEFAULT_FORMAT, init_logging
from restyle_proxy.report.html_report import render_html
from restyle_proxy.report.json_report import render_json
from restyle_proxy.server import run as run_server
from restyle_proxy.transformer import DocumentTransformer

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def fetch_once(cfg, url):
    """Fetch and transform one page with a short-lived gateway."""
    transformer = DocumentTransformer.from_config(cfg)
    async with FetchGateway(cfg) as gateway:
        return await fetch_page(gateway, transformer, url)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='restyle-proxy, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
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
    help='Log file (stdout when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """restyle-proxy command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Override the listening interface')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None, help='Override the listening port')
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP proxy."""
    cfg = ctx.obj['config']
    overrides = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    run_server(cfg)


@cli.command('fetch', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON envelope to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the rewritten HTML to a file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output (2 spaces)'
)
@click.pass_context
def fetch(ctx, url, json_output, html_output, pretty):
    """Fetch URL, rewrite it and print or save the result."""
    cfg = ctx.obj['config']
    try:
        result = asyncio.run(fetch_once(cfg, url))
    except ProxyError as e:
        print_error(f'Failed to fetch content: {e}')

    indent = 2 if pretty else None

    # nothing to save: print the envelope
    if not json_output and not html_output:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent))
        return

    if json_output:
        saved_json = render_json(result, json_output, indent=indent)
        click.echo(f'JSON report: {saved_json}')

    if html_output:
        saved_html = render_html(result, html_output)
        click.echo(f'HTML page: {saved_html}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
