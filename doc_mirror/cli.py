# === FILE: doc_mirror/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for DocMirror.

Commands:
  crawl     Mirror a documentation site into Markdown files
  config    Show the resolved configuration

Common options:
  --config PATH       YAML/JSON config file (default: ./doc_mirror.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --component-level C=LEVEL  Level for one component (repeatable)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

Run options (crawl and config):
  --base-url, -u URL  Site to mirror (required unless set in the config)
  --name, -n NAME     Project name, output subdirectory
  --max-depth, -d N   Maximum link depth (default 2)
  --token, -t TOKEN   Reader token (default: $JINA_READER_TOKEN)
  --output-dir, -o    Output root (default ./docs)
  --interval SEC      Pause between fetch jobs (default 3)
  --concurrency N     Simultaneous crawl branches (default 2)
  --reader-url URL    Content-extraction proxy (default https://r.jina.ai)

Example:
  doc-mirror crawl -u https://docs.example.com/guide -n example --max-depth 3
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from doc_mirror import __version__
from doc_mirror.config import load_config
from doc_mirror.engine import start_crawl
from doc_mirror.logger import COMPONENTS, init_logging
from doc_mirror.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def run_options(func):
    """Options shared by every command that resolves a CrawlerConfig."""
    options = [
        click.option('--base-url', '-u', 'base_url', default=None, help='Target URL.'),
        click.option('--name', '-n', 'name', default=None, help='Project name (output subdirectory).'),
        click.option('--max-depth', '-d', 'max_depth', type=int, default=None, help='Max depth to crawl.'),
        click.option('--token', '-t', 'token', default=None,
                     help='Reader token; see https://jina.ai/reader/ (default: $JINA_READER_TOKEN).'),
        click.option('--output-dir', '-o', 'output_dir', default=None,
                     type=click.Path(file_okay=False, path_type=Path), help='Output root directory.'),
        click.option('--interval', 'request_interval', type=float, default=None,
                     help='Seconds between fetch jobs.'),
        click.option('--concurrency', 'concurrency', type=int, default=None,
                     help='Simultaneous crawl branches.'),
        click.option('--reader-url', 'reader_url', default=None, help='Content-extraction proxy URL.'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def parse_component_levels(ctx, param, values):
    levels = {}
    for item in values:
        component, sep, level = item.partition('=')
        component, level = component.strip(), level.strip().upper()
        if not sep or component not in COMPONENTS:
            raise click.BadParameter(
                f'expected COMPONENT=LEVEL with COMPONENT one of {", ".join(COMPONENTS)}, got {item!r}'
            )
        if level not in LOG_LEVELS:
            raise click.BadParameter(f'unknown level {level!r} for {component}')
        levels[component] = level
    return levels


def resolve_config(ctx, overrides):
    try:
        return load_config(ctx.obj['config_path'], overrides)
    except ValidationError as e:
        print_error(f'Invalid configuration:\n{e}')
    except Exception as e:
        print_error(f'Error loading configuration: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(LOG_LEVELS),
    help='Logging level'
)
@click.option(
    '--component-level', 'component_levels',
    multiple=True, metavar='COMPONENT=LEVEL',
    callback=parse_component_levels,
    help=f'Level for one component ({", ".join(COMPONENTS)}); repeatable'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Log file (stdout if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s: %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, component_levels, log_file, log_format):
    """DocMirror: mirror documentation sites as Markdown."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
        component_levels=component_levels
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@run_options
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save the run report as JSON'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent the JSON report'
)
@click.pass_context
def crawl(ctx, json_output, pretty, **overrides):
    """Mirror the site and print a summary."""
    cfg = resolve_config(ctx, overrides)
    click.echo(f'Mirroring {cfg.base_url} into {cfg.output_dir / cfg.name}')
    try:
        report = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    click.echo(report.summary())

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Error saving JSON report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@run_options
@click.pass_context
def show_config(ctx, **overrides):
    """Show the resolved configuration as JSON."""
    cfg = resolve_config(ctx, overrides)
    data = cfg.model_dump(mode='json')
    if data.get('token'):
        data['token'] = '***'
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
