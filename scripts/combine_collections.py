"""Combine identifier collections from JSON files into one deduplicated set."""

from __future__ import annotations

import json
from pathlib import Path

import click

from patent_family_app.config.logging import configure_logging, get_logger
from patent_family_app.config.settings import get_settings
from patent_family_app.dedup.engine import DeduplicationEngine
from patent_family_app.families.preference import PreferenceOrder
from patent_family_app.lookups.base import LookupUnavailableError
from patent_family_app.lookups.static import StaticPatentLookup

configure_logging()
LOGGER = get_logger(__name__)


def _load_collection(path: Path) -> list[str]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("patentIds") or payload.get("patent_ids") or []
    if not isinstance(payload, list):
        raise click.BadParameter(f"{path} must hold a JSON list of identifiers")
    return [str(item) for item in payload]


@click.command()
@click.argument("collections", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--existing", type=click.Path(exists=True, path_type=Path), default=None, help="Destination collection")
@click.option("--records", type=click.Path(exists=True, path_type=Path), default=None, help="Known patent records")
@click.option("--authorities", type=str, default=None, help='Preference order, e.g. "US WO EP"')
@click.option("--keep-family-members", is_flag=True, help="Do not reduce families to one representative")
def combine_collections(
    collections: tuple[Path, ...],
    existing: Path | None,
    records: Path | None,
    authorities: str | None,
    keep_family_members: bool,
) -> None:
    """Merge COLLECTIONS (JSON lists of identifiers) and print the report as JSON."""
    settings = get_settings()
    lookup = StaticPatentLookup.from_json(records) if records else None

    engine = DeduplicationEngine(
        settings=settings,
        validity_lookup=lookup,
        family_lookup=lookup,
        preference_order=PreferenceOrder.from_string(authorities) if authorities else None,
        filter_family=False if keep_family_members else None,
    )

    named = {path.stem: _load_collection(path) for path in collections}
    try:
        report = engine.combine(named, existing=_load_collection(existing) if existing else ())
    except LookupUnavailableError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(json.dumps(report.model_dump(), indent=2))
    for duplicate in report.duplicate_ids:
        click.echo(f"Duplicate: {duplicate}", err=True)
    for invalid in report.invalid_ids:
        click.echo(f"Invalid: {invalid}", err=True)


if __name__ == "__main__":
    combine_collections()
