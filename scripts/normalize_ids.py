"""CLI entrypoint for normalizing pasted patent identifiers."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from patent_family_app.config.logging import configure_logging, get_logger
from patent_family_app.identifiers.parser import parse_identifier_list

configure_logging()
LOGGER = get_logger(__name__)


@click.command()
@click.argument("source", type=click.Path(path_type=Path), required=False)
@click.option("--show-skipped", is_flag=True, help="Print unrecognised tokens to stderr")
def normalize_ids(source: Path | None, show_skipped: bool) -> None:
    """Print canonical identifiers found in SOURCE (or stdin), one per line."""
    if source is None:
        text = sys.stdin.read()
    elif source.is_file():
        text = source.read_text(encoding="utf-8")
    else:
        raise click.BadParameter(f"Unsupported source path: {source}")

    parsed = parse_identifier_list(text)
    LOGGER.info(
        "Parsed identifiers",
        extra={"identifiers": len(parsed.identifiers), "skipped": len(parsed.skipped)},
    )

    for identifier in parsed.identifiers:
        click.echo(identifier)

    if show_skipped:
        for token in parsed.skipped:
            click.echo(f"Skipped: {token}", err=True)


if __name__ == "__main__":
    normalize_ids()
