from __future__ import annotations

from typing import Sequence

import pytest

from patent_family_app.config.settings import AppSettings
from patent_family_app.dedup.engine import DeduplicationEngine
from patent_family_app.families.preference import PreferenceOrder
from patent_family_app.lookups.base import LookupUnavailableError, PatentRecord
from patent_family_app.lookups.static import StaticPatentLookup

SETTINGS = AppSettings(PREFERRED_AUTHORITIES="US WO EP GB FR DE CH JP RU SU", FILTER_FAMILY_DUPLICATES=True)

FAMILY_RECORDS = [
    {"patent_id": "EP1000000A1", "family_id": "F1"},
    {"patent_id": "US7000000B2", "family_id": "F1"},
    {"patent_id": "GB5555555A", "family_id": "F2"},
]


class CountingLookup:
    def __init__(self, lookup: StaticPatentLookup) -> None:
        self.lookup = lookup
        self.calls: list[list[str]] = []

    def confirm(self, identifiers: Sequence[str]) -> list[PatentRecord]:
        self.calls.append(list(identifiers))
        return self.lookup.confirm(identifiers)


class UnavailableLookup:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def confirm(self, identifiers: Sequence[str]) -> list[PatentRecord]:
        raise self.error


def _engine(records=FAMILY_RECORDS, **kwargs) -> DeduplicationEngine:
    lookup = StaticPatentLookup(records)
    return DeduplicationEngine(settings=SETTINGS, validity_lookup=lookup, family_lookup=lookup, **kwargs)


def test_exact_duplicates_keep_first_occurrence() -> None:
    report = DeduplicationEngine(settings=SETTINGS).combine([["A", "B", "A"]])

    assert report.unique_ids == ["A", "B"]
    assert report.duplicate_ids == ["A"]
    assert report.invalid_ids == []


def test_formatting_variants_collapse_to_one_canonical_identifier() -> None:
    report = DeduplicationEngine(settings=SETTINGS).combine(
        {"pasted": ["US8125463B2", "US-8125463-B2", "GB1234567A"]}
    )

    assert report.unique_ids == ["US-8125463-B2", "GB-1234567-A"]
    assert report.duplicate_ids == ["US-8125463-B2"]
    assert report.invalid_ids == []


def test_family_members_across_collections_reduce_to_one_representative() -> None:
    report = _engine().combine({"first": ["EP1000000A1"], "second": ["US7000000B2"]})

    assert report.unique_ids == ["US-7000000-B2"]
    assert report.duplicate_ids == ["EP-1000000-A1"]
    assert report.invalid_ids == []
    assert report.family_duplicates == {"EP-1000000-A1": "US-7000000-B2"}
    assert [selection.representative for selection in report.selections] == ["US-7000000-B2"]
    assert report.sources["EP-1000000-A1"] == ["first"]


def test_preference_order_is_configurable() -> None:
    report = _engine(preference_order=PreferenceOrder.from_string("EP US")).combine(
        [["US7000000B2", "EP1000000A1"]]
    )

    assert report.unique_ids == ["EP-1000000-A1"]
    assert report.duplicate_ids == ["US-7000000-B2"]


def test_unconfirmed_identifiers_are_invalid_not_duplicates() -> None:
    report = _engine().combine([["GB5555555A", "NOTAPATENT"]])

    assert report.unique_ids == ["GB-5555555-A"]
    assert report.invalid_ids == ["NOTAPATENT"]
    assert report.duplicate_ids == []


def test_unparseable_identifier_is_kept_without_validity_lookup() -> None:
    report = DeduplicationEngine(settings=SETTINGS).combine([["NOTAPATENT"]])

    assert report.unique_ids == ["NOTAPATENT"]
    assert report.invalid_ids == []


def test_existing_collection_filters_exact_and_family_duplicates() -> None:
    report = _engine().combine(
        {"new": ["US7000000B2", "EP1000000A1", "GB5555555A"]},
        existing=["US-7000000-B2"],
    )

    assert report.unique_ids == ["GB-5555555-A"]
    assert report.duplicate_ids == ["US-7000000-B2", "EP-1000000-A1"]
    assert report.existing_duplicates == ["US-7000000-B2", "EP-1000000-A1"]
    assert report.family_duplicates == {"EP-1000000-A1": "US-7000000-B2"}


def test_family_filter_can_be_disabled() -> None:
    report = _engine(filter_family=False).combine([["EP1000000A1", "US7000000B2"]])

    assert report.unique_ids == ["EP-1000000-A1", "US-7000000-B2"]
    assert report.duplicate_ids == []
    assert report.selections == []


def test_validity_lookup_is_called_once_per_combine() -> None:
    lookup = CountingLookup(StaticPatentLookup(FAMILY_RECORDS))
    engine = DeduplicationEngine(settings=SETTINGS, validity_lookup=lookup)

    engine.combine({"a": ["EP1000000A1", "GB5555555A"], "b": ["US7000000B2", "GB5555555A"]})

    assert lookup.calls == [["EP-1000000-A1", "GB-5555555-A", "US-7000000-B2"]]


def test_empty_input_skips_lookup() -> None:
    engine = DeduplicationEngine(settings=SETTINGS, validity_lookup=UnavailableLookup(AssertionError("called")))

    report = engine.combine({"empty": [], "blank": ["", "  "]})

    assert report.is_empty
    assert report.unique_ids == []


@pytest.mark.parametrize(
    "error",
    [LookupUnavailableError("validity", "timeout"), TimeoutError("timed out"), ConnectionError("refused")],
)
def test_unavailable_lookup_is_surfaced(error: Exception) -> None:
    engine = DeduplicationEngine(settings=SETTINGS, validity_lookup=UnavailableLookup(error))

    with pytest.raises(LookupUnavailableError):
        engine.combine([["US7000000B2"]])


def test_family_lookup_failure_is_surfaced() -> None:
    def broken_family_lookup(identifier: str) -> str | None:
        raise TimeoutError("family service timed out")

    engine = DeduplicationEngine(settings=SETTINGS, family_lookup=broken_family_lookup)

    with pytest.raises(LookupUnavailableError) as exc_info:
        engine.combine([["US7000000B2"]])
    assert exc_info.value.service == "family"


def test_combine_is_idempotent() -> None:
    collections = {"a": ["EP1000000A1", "US7000000B2", "NOTAPATENT"], "b": ["US-7000000-B2"]}
    engine = _engine()

    assert engine.combine(collections) == engine.combine(collections)


def test_string_collection_is_rejected() -> None:
    with pytest.raises(TypeError):
        DeduplicationEngine(settings=SETTINGS).combine({"bad": "US7000000B2"})


def test_existing_family_is_found_through_validity_records_alone() -> None:
    lookup = CountingLookup(StaticPatentLookup(FAMILY_RECORDS))
    engine = DeduplicationEngine(settings=SETTINGS, validity_lookup=lookup)

    report = engine.combine({"new": ["EP1000000A1", "GB5555555A"]}, existing=["US-7000000-B2"])

    assert report.unique_ids == ["GB-5555555-A"]
    assert report.existing_duplicates == ["EP-1000000-A1"]
    assert report.family_duplicates == {"EP-1000000-A1": "US-7000000-B2"}
    assert report.invalid_ids == []
    assert lookup.calls == [["EP-1000000-A1", "GB-5555555-A", "US-7000000-B2"]]


def test_unconfirmed_existing_identifier_is_not_reported_invalid() -> None:
    engine = DeduplicationEngine(settings=SETTINGS, validity_lookup=StaticPatentLookup(FAMILY_RECORDS))

    report = engine.combine({"new": ["GB5555555A"]}, existing=["XX-1"])

    assert report.unique_ids == ["GB-5555555-A"]
    assert report.invalid_ids == []


def test_wipo_publication_variants_are_exact_duplicates() -> None:
    report = DeduplicationEngine(settings=SETTINGS).combine([["WO2012/12345", "WO/2012/12345"]])

    assert report.unique_ids == ["WO-2012012345"]
    assert report.duplicate_ids == ["WO-2012012345"]
