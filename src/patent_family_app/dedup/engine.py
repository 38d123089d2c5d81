"""Combine identifier collections into one deduplicated set."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Sequence, Tuple, Union

from patent_family_app.config.logging import get_logger
from patent_family_app.config.settings import AppSettings, get_settings
from patent_family_app.dedup.report import DeduplicationReport
from patent_family_app.families.grouper import group_by_family
from patent_family_app.families.preference import PreferenceOrder
from patent_family_app.families.selector import explain_selection
from patent_family_app.identifiers.corrector import canonicalize
from patent_family_app.lookups.base import (
    FamilySource,
    LookupUnavailableError,
    PatentRecord,
    ValidityLookup,
    as_family_lookup,
)

LOGGER = get_logger(__name__)

Collections = Union[Mapping[str, Sequence[str]], Sequence[Sequence[str]]]


def _flatten(collections: Collections) -> Iterator[Tuple[str, str]]:
    if isinstance(collections, Mapping):
        named = list(collections.items())
    else:
        named = [(f"collection_{index}", items) for index, items in enumerate(collections, start=1)]

    for name, items in named:
        if isinstance(items, str):
            raise TypeError(f"Collection {name!r} must be a sequence of identifiers, not a string")
        for raw in items:
            if raw is None:
                continue
            raw = str(raw).strip()
            if raw:
                yield name, raw


class DeduplicationEngine:
    """Remove exact, invalid and family-level duplicates across collections.

    The engine keeps no state between calls; lookups are injected and may be
    shared by concurrent callers.
    """

    def __init__(
        self,
        *,
        settings: AppSettings | None = None,
        validity_lookup: ValidityLookup | None = None,
        family_lookup: FamilySource | None = None,
        preference_order: PreferenceOrder | None = None,
        filter_family: bool | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.validity_lookup = validity_lookup
        self.family_lookup = as_family_lookup(family_lookup)
        self.preference_order = preference_order or self.settings.preference_order()
        self.filter_family = (
            self.settings.filter_family_duplicates if filter_family is None else bool(filter_family)
        )

    def combine(self, collections: Collections, *, existing: Iterable[str] = ()) -> DeduplicationReport:
        """Merge collections, optionally into an ``existing`` destination collection.

        Raises ``LookupUnavailableError`` when the validity or family lookup
        cannot answer.
        """
        report = DeduplicationReport()
        existing_ids = list(dict.fromkeys(canonicalize(raw) for raw in existing if raw))
        existing_set = set(existing_ids)

        seen: set[str] = set()
        working: list[str] = []
        for source, raw in _flatten(collections):
            identifier = canonicalize(raw)
            sources = report.sources.setdefault(identifier, [])
            if source not in sources:
                sources.append(source)

            if identifier in existing_set:
                report.add_duplicate(identifier)
                if identifier not in report.existing_duplicates:
                    report.existing_duplicates.append(identifier)
                continue
            if identifier in seen:
                report.add_duplicate(identifier)
                continue
            seen.add(identifier)
            working.append(identifier)

        if not working:
            LOGGER.info("No identifiers left to validate", extra=report.summary())
            return report

        # One request covers the working ids and, for family filtering, the existing ones.
        lookup_ids = working + existing_ids if self.filter_family else working
        records = self._confirm(lookup_ids)
        valid = []
        for identifier in working:
            if identifier in records:
                valid.append(identifier)
            else:
                report.add_invalid(identifier)

        if self.filter_family:
            report.unique_ids = self._reduce_families(report, valid, records, existing_ids)
        else:
            report.unique_ids = valid

        LOGGER.info("Combined identifier collections", extra=report.summary())
        return report

    def _confirm(self, identifiers: list[str]) -> dict[str, PatentRecord]:
        if self.validity_lookup is None:
            return {identifier: PatentRecord(patent_id=identifier) for identifier in identifiers}

        LOGGER.info("Confirming identifiers", extra={"count": len(identifiers)})
        try:
            records = self.validity_lookup.confirm(identifiers)
        except LookupUnavailableError as exc:
            LOGGER.warning("Validity lookup unavailable", extra={"error": str(exc)})
            raise
        except (TimeoutError, OSError) as exc:
            LOGGER.warning("Validity lookup failed", extra={"error": str(exc)})
            raise LookupUnavailableError("validity", str(exc)) from exc

        confirmed: dict[str, PatentRecord] = {}
        for record in records:
            confirmed.setdefault(canonicalize(record.patent_id), record)
        return confirmed

    def _family_of(self, identifier: str, records: Mapping[str, PatentRecord]) -> str | None:
        record = records.get(identifier)
        if record is not None and record.family_id:
            return record.family_id
        if self.family_lookup is None:
            return None
        try:
            return self.family_lookup.family_of(identifier)
        except LookupUnavailableError as exc:
            LOGGER.warning("Family lookup unavailable", extra={"error": str(exc)})
            raise
        except (TimeoutError, OSError) as exc:
            LOGGER.warning("Family lookup failed", extra={"error": str(exc)})
            raise LookupUnavailableError("family", str(exc)) from exc

    def _reduce_families(
        self,
        report: DeduplicationReport,
        valid: list[str],
        records: Mapping[str, PatentRecord],
        existing_ids: list[str],
    ) -> list[str]:
        grouping = group_by_family(valid, lambda identifier: self._family_of(identifier, records))

        existing_families: dict[str, str] = {}
        if grouping.families:
            for identifier in existing_ids:
                family_id = self._family_of(identifier, records)
                if family_id:
                    existing_families.setdefault(family_id, identifier)

        keep = set(grouping.residual)
        for family_id, group in grouping.families.items():
            if family_id in existing_families:
                for member in group:
                    report.add_duplicate(member)
                    report.family_duplicates[member] = existing_families[family_id]
                    if member not in report.existing_duplicates:
                        report.existing_duplicates.append(member)
                continue

            selection = explain_selection(group, self.preference_order)
            report.selections.append(selection)
            keep.add(selection.representative)
            for member in selection.members[1:]:
                report.add_duplicate(member)
                report.family_duplicates[member] = selection.representative

        return [identifier for identifier in valid if identifier in keep]
