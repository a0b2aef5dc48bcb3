"""
CLI Module

Command line interface for the emoji asset build:
- Full build (fetch, convert, merge)
- Reuse of an existing clone with --skip-download
- Internal worker mode: --worker INDEX START END runs a single batch
"""

import os
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel

from .common.logger import get_logger, set_log_level
from .common.utils import format_duration
from .env import BuildConfig, ConfigurationError, FLUENTMOJI_VERSION
from .orchestrator import BuildOrchestrator, BuildReport
from .source import SourceFetchError, SourceUnavailableError
from .worker import BatchWorker, FragmentWriteError

logger = get_logger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def print_summary(report: BuildReport, console: Optional[Console] = None) -> None:
    """Show the build report in a panel"""
    console = console or Console()

    content = f"Total emojis: [bold]{report.entry_count}[/bold]\n"
    content += f"Icon folders: {report.total_icons} in {report.total_batches} batches\n"
    content += f"Time: {format_duration(report.elapsed_seconds)}\n"
    content += f"Map: {report.map_path}"
    if report.failed_batches:
        failed = ', '.join(str(i + 1) for i in report.failed_batches)
        content += f"\n[yellow]Failed batches: {failed}[/yellow]"
    if report.skipped_fragments:
        content += f"\n[yellow]Skipped fragments: {', '.join(report.skipped_fragments)}[/yellow]"

    style = "yellow" if report.failed_batches or report.skipped_fragments else "green"
    console.print(Panel(content, title="Build Complete", border_style=style))


def run_worker(config: BuildConfig, worker_args: Tuple[int, ...]) -> int:
    """Worker-mode entry: returns the process exit code"""
    if len(worker_args) != 3:
        raise click.UsageError("--worker expects INDEX START END")
    batch_index, start, end = worker_args

    try:
        worker = BatchWorker(config, batch_index, start, end)
        worker.execute()
    except (ValueError, FileNotFoundError, FragmentWriteError) as e:
        logger.error(f"[Worker {batch_index}] {e}")
        return 1
    return 0


def run_build(config: BuildConfig) -> int:
    """Orchestrator-mode entry: returns the process exit code"""
    try:
        report = BuildOrchestrator(config).run()
    except (SourceFetchError, SourceUnavailableError) as e:
        logger.error(f"❌ {e}")
        return 1
    print_summary(report)
    return 0


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.version_option(FLUENTMOJI_VERSION, prog_name='fluentmoji-build')
@click.option('--skip-download', is_flag=True,
              help='Reuse the existing clone instead of fetching the upstream repository')
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML file with build settings')
@click.option('--clone-dir', help='Where the upstream repository is cloned')
@click.option('--output-dir', help='Where the converted assets and emoji-map.json are written')
@click.option('--repo-url', help='Upstream repository to clone')
@click.option('--batch-size', type=int, help='Icons per worker process (default: 200)')
@click.option('--quality', type=int, help='WebP quality 1-100 (default: 90)')
@click.option('--parallel', 'parallel_batches', type=int,
              help='Worker processes allowed to run at once (default: 1)')
@click.option('--keep-source', is_flag=True, help='Do not delete a freshly cloned source tree')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Console log level')
@click.option('--worker', 'worker_mode', is_flag=True, hidden=True)
@click.argument('worker_args', nargs=-1, type=int)
def main(skip_download, config_file, clone_dir, output_dir, repo_url, batch_size, quality,
         parallel_batches, keep_source, log_level, worker_mode, worker_args):
    """Build web-optimized Fluent emoji assets and emoji-map.json."""
    if log_level:
        # Inherited by worker processes
        os.environ['FLUENTMOJI_LOGGING_CONSOLE_LEVEL'] = log_level.upper()
        set_log_level(log_level, 'console')

    if worker_args and not worker_mode:
        raise click.UsageError("Unexpected arguments: " + ' '.join(map(str, worker_args)))

    try:
        config = BuildConfig.load(
            config_file=config_file,
            clone_dir=clone_dir,
            output_dir=output_dir,
            repo_url=repo_url,
            batch_size=batch_size,
            quality=quality,
            parallel_batches=parallel_batches,
            skip_download=skip_download or None,
            keep_source=keep_source or None,
        )
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if worker_mode:
        sys.exit(run_worker(config, worker_args))
    sys.exit(run_build(config))


if __name__ == '__main__':
    main()
