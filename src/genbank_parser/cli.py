"""Command-line interface for the GenBank parser."""

import io
import sys
from pathlib import Path

import click

from . import __version__
from .assembler import parse
from .config import (
    FORMAT_CHOICES,
    ON_ERROR_CHOICES,
    Config,
    create_example_config,
    get_default_config_path,
)
from .error_handler import ErrorHandler
from .errors import GenbankParseError
from .logging_config import LogTimer, log_performance, setup_logging
from .output_formatter import OutputFormatter
from .parallel_processor import parse_records_parallel
from .reader import read_raw_records

# Global flag for quiet mode
_quiet_mode = False


def set_quiet_mode(quiet: bool) -> None:
    """Set the global quiet mode flag."""
    global _quiet_mode
    _quiet_mode = quiet


def echo(message: str = "", err: bool = True, **kwargs) -> None:
    """Echo a status message to stderr unless in quiet mode.

    Errors are always shown.
    """
    if _quiet_mode and not message.startswith("ERROR"):
        return
    click.echo(message, err=err, **kwargs)


def parse_file(path: str, cfg: Config, handler: ErrorHandler) -> list:
    """Parse every record of one file, applying the error policy to failures."""
    try:
        texts = read_raw_records(path, encoding=cfg.processing.encoding)
    except (OSError, ValueError) as e:
        handler.handle_error(e, source=path)
        return []

    records = []
    if cfg.processing.max_workers > 1 and len(texts) > 1:
        for result in parse_records_parallel(texts, max_workers=cfg.processing.max_workers):
            if result.success:
                records.append(result.result)
            else:
                handler.handle_error(result.error, source=path, record_index=result.index + 1)
    else:
        for index, text in enumerate(texts, 1):
            try:
                records.append(parse(text))
            except GenbankParseError as e:
                handler.handle_error(e, source=path, record_index=index)

    return records


@click.command()
@click.argument('files', nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file (default: stdout)')
@click.option('--format', 'output_format', type=click.Choice(FORMAT_CHOICES), help='Output format (default: json)')
@click.option('--on-error', type=click.Choice(ON_ERROR_CHOICES), help='What to do with records that fail to parse')
@click.option('--workers', type=click.IntRange(min=1), help='Number of parallel parsing workers')
@click.option('--no-raw', is_flag=True, help='Leave the verbatim ORIGIN text out of JSON output')
@click.option('--encoding', help='Input file encoding (auto-detected if not specified)')
@click.option('--log-dir', type=click.Path(file_okay=False), help='Also write a rotating log file to this directory')
@click.option('--error-report', type=click.Path(dir_okay=False), help='Write a JSON report of failed records')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress all output except errors')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path')
@click.option('--generate-config', is_flag=True, help='Generate example configuration file')
@click.version_option(__version__, prog_name='genbank-parser')
def main(files, output, output_format, on_error, workers, no_raw, encoding, log_dir, error_report,
         verbose, quiet, config, generate_config):
    """Parse GenBank flat files.

    Reads every record of the given files and writes them out as JSON,
    TSV or CSV summaries, or FASTA.

    Examples:
        genbank-parser sequences.gb -o records.json
        genbank-parser --format fasta *.gbk > sequences.fasta
    """
    if quiet and verbose:
        click.echo("Error: Cannot use both --quiet and --verbose", err=True)
        sys.exit(1)

    set_quiet_mode(quiet)

    if generate_config:
        config_path = create_example_config()
        echo(f"Generated example configuration file: {config_path}")
        sys.exit(0)

    if not files:
        ctx = click.get_current_context()
        click.echo(ctx.get_help())
        return

    # Load configuration
    config_path = Path(config) if config else get_default_config_path()

    try:
        cfg = Config.from_file(config_path)
        cfg.merge_env_vars()
        cfg.merge_cli_args(
            workers=workers,
            on_error=on_error,
            encoding=encoding,
            output_format=output_format,
            no_raw=no_raw,
            verbose=verbose,
            log_dir=log_dir
        )
        cfg.validate()
    except (OSError, ValueError, TypeError) as e:
        click.echo(f"ERROR: Invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(
        log_level=cfg.logging.level,
        log_dir=cfg.logging.log_dir,
        colors=cfg.logging.colors,
        quiet=quiet
    )

    handler = ErrorHandler(cfg.processing.on_error)
    records = []

    try:
        with LogTimer("Parsing") as timer:
            for path in files:
                file_records = parse_file(path, cfg, handler)
                echo(f"Read {len(file_records)} records from {path}")
                records.extend(file_records)
    except (GenbankParseError, OSError, ValueError) as e:
        echo(f"ERROR: {e}", err=True)
        sys.exit(1)
    finally:
        if error_report and handler.error_count:
            handler.export_error_report(error_report)

    log_performance("Parsing", timer.elapsed, items=len(records))

    formatter = OutputFormatter(
        include_origin_raw=cfg.output.include_origin_raw,
        indent=cfg.output.indent
    )

    try:
        if output:
            formatter.format_records(records, output, format=cfg.output.format)
            echo(f"Wrote {len(records)} records to: {output}")
        else:
            buffer = io.StringIO()
            formatter.format_records(records, buffer, format=cfg.output.format)
            click.echo(buffer.getvalue(), nl=False)
    except OSError as e:
        echo(f"ERROR: Failed to write output: {e}", err=True)
        sys.exit(1)

    if handler.error_count:
        echo(f"{handler.error_count} record(s) failed to parse")


if __name__ == '__main__':
    main()
