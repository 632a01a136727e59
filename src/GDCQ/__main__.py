"""
Command‑line interface for the GDCQ toolkit.
Runs one filtered GDC search and prints the surviving files as a table
(or as JSON records with --raw), followed by any warnings.
"""

import click
import json
import logging
import typing

from stairval.notepad import Notepad, create_notepad

from .errors import GDCQueryError
from .query import gdc_query
from .tissue import barcode_definition


@click.group()
def main():
    """GDCQ: Genomic Data Commons queries with barcode-aware filtering."""
    pass


@main.command(name="query")
@click.option("-p", "--project", "projects", required=True, multiple=True, help="project id, e.g. TCGA-ACC (repeatable)")
@click.option("-c", "--data-category", required=True, help="data category, e.g. 'Copy Number Variation'")
@click.option("--data-type", default=None, help="data type to keep")
@click.option("--workflow-type", default=None, help="workflow type to keep (exact match)")
@click.option("--legacy/--harmonized", default=False, help="search the legacy repository (default: harmonized)")
@click.option("--access", default=None, type=click.Choice(["open", "controlled"], case_sensitive=False))
@click.option("--platform", default=None, help="platform to keep (legacy only)")
@click.option("--file-type", default=None, help="file type label, e.g. hg19.seg or results")
@click.option("-b", "--barcode", "barcodes", multiple=True, help="barcode prefix to keep (repeatable)")
@click.option("--experimental-strategy", "strategies", multiple=True, help="experimental strategy (repeatable)")
@click.option("-s", "--sample-type", "sample_types", multiple=True, help="tissue definition, e.g. 'Primary solid Tumor' (repeatable)")
@click.option("--drop-unknown-tissue", is_flag=True, help="drop files with unknown tissue codes instead of failing")
@click.option("-r", "--raw", is_flag=True, help="print JSON records instead of a table")
@click.option("--verbose", is_flag=True, help="log request and filter steps")
def query(
    projects: typing.Tuple[str, ...],
    data_category: str,
    data_type: typing.Optional[str],
    workflow_type: typing.Optional[str],
    legacy: bool,
    access: typing.Optional[str],
    platform: typing.Optional[str],
    file_type: typing.Optional[str],
    barcodes: typing.Tuple[str, ...],
    strategies: typing.Tuple[str, ...],
    sample_types: typing.Tuple[str, ...],
    drop_unknown_tissue: bool,
    raw: bool,
    verbose: bool,
):
    """
    Query GDC for the files of a project and data category, then narrow them
    by the optional filters. Empty repeatable options mean "do not filter".
    """
    _configure_logging(verbose)
    notepad = create_notepad("gdc-query")
    try:
        descriptor = gdc_query(
            list(projects),
            data_category,
            data_type=data_type,
            workflow_type=workflow_type,
            legacy=legacy,
            access=access,
            platform=platform,
            file_type=file_type,
            barcode=list(barcodes),
            experimental_strategy=list(strategies),
            sample_type=list(sample_types),
            drop_unknown_tissue=drop_unknown_tissue,
            notepad=notepad,
        )
    except GDCQueryError as e:
        _report_issues(notepad)
        raise click.ClickException(str(e))

    frame = descriptor.to_frame()
    if raw:
        click.echo(json.dumps(frame.to_dict(orient="records"), indent=2))
    else:
        click.echo(frame.to_string(index=False))
        click.echo(f"Found {len(frame)} files")
    _report_issues(notepad)


@main.command(name="sample-types")
@click.option(
    "-g",
    "--grammar",
    default="tcga",
    type=click.Choice(["tcga", "target"], case_sensitive=False),
    help="which barcode definition table to print (default: tcga)",
)
def sample_types(grammar: str):
    """
    Print the tissue codes and definitions accepted by --sample-type.
    """
    frame = barcode_definition(grammar.upper())
    click.echo(frame.to_string(index=False))


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _report_issues(notepad: Notepad):
    # warnings never stop the query, show them after the results
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in query:", err=True)
        for err in notepad.errors():
            click.echo(f"- {err}", err=True)
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in query:", err=True)
        for w in notepad.warnings():
            click.echo(f"- {w}", err=True)


if __name__ == "__main__":
    main()
