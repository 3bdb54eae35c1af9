"""
Command-line interface for the excel2csv converter.
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from .converter import ConverterConfig, ExcelToCsvConverter
from .errors import Excel2CsvError

err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.command()
@click.argument('input_file', type=click.Path())
@click.option('-o', '--output', type=click.Path(), help='Output file or directory (default: stdout)')
@click.option('-s', '--sheet', type=str, help='Convert a specific sheet by name or 0-based index (default: all sheets)')
@click.option('-f', '--format', 'output_format', type=click.Choice(['csv', 'tsv', 'european']), default='csv',
              show_default=True, help='Output format: comma, tab or semicolon separated')
@click.option('-e', '--empty', default='', help='Value written for empty cells')
@click.option('-v', '--verbose', is_flag=True, help='Print detailed progress to stderr')
@click.version_option(package_name='excel2csv')
def main(input_file, output, sheet, output_format, empty, verbose):
    """
    Convert Excel files to CSV with cell number formats applied.

    Examples:

        # Single-sheet workbook to stdout
        excel2csv report.xlsx

        # One sheet, tab separated, to a file
        excel2csv report.xlsx -s Summary -f tsv -o summary.tsv

        # Every sheet into a directory
        excel2csv report.xlsx -o out/
    """
    _setup_logging(verbose)
    log = logging.getLogger(__name__)
    log.debug("input: %s", input_file)
    log.debug("format: %s", output_format)

    try:
        config = ConverterConfig(output_format=output_format, empty_value=empty)
        converter = ExcelToCsvConverter(config)

        if output:
            converter.convert_to_path(input_file, output, sheet=sheet)
        else:
            click.echo(converter.convert_to_csv(input_file, sheet=sheet), nl=False)

    except Excel2CsvError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)
    except OSError as e:
        click.echo(f"Error: IO error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
