import pytest

from patent_family_app.identifiers.normalizer import (
    era_to_gregorian,
    is_canonical,
    jurisdiction_of,
    normalize,
    parse_identifier,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("US8125463B2", "US-8125463-B2"),
        ("US-8125463-B2", "US-8125463-B2"),
        ("EP1234567A1", "EP-1234567-A1"),
        ("ep1234567a1", "EP-1234567-A1"),
        ("US 8125463 B2", "US-8125463-B2"),
        ("US-8,125,463-B2", "US-8125463-B2"),
        ("JPH1012345A", "JP-199812345-A"),
        ("JPS6012345A", "JP-198512345-A"),
        ("JPR0112345A", "JP-201912345-A"),
        ("InvalidPatent123", "InvalidPatent123"),
    ],
)
def test_normalize_known_formats(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "canonical",
    ["US-8125463-B2", "EP-1234567-A1", "JP-19961234", "GB-1234567-A", "US-D823786-S1", "WO-2012012345-A1"],
)
def test_normalize_is_idempotent_on_canonical_input(canonical: str) -> None:
    assert normalize(canonical) == canonical
    assert normalize(normalize(canonical)) == canonical


def test_japanese_era_year_is_converted() -> None:
    identifier = parse_identifier("JPH081234")

    assert identifier.country_code == "JP"
    assert identifier.serial_number == "19961234"
    assert identifier.kind_code == ""
    assert identifier.canonical == "JP-19961234"


def test_era_letter_is_only_converted_for_japan() -> None:
    identifier = parse_identifier("USH081234")

    assert identifier.canonical == "US-H081234"
    assert "1996" not in identifier.canonical


def test_japanese_era_without_year_digits_is_left_alone() -> None:
    assert normalize("JPH1") == "JPH1"
    assert not parse_identifier("JPH1").parsed


def test_unparseable_input_keeps_raw_value() -> None:
    identifier = parse_identifier("not a patent")

    assert identifier.canonical == "not a patent"
    assert identifier.country_code == ""
    assert not identifier.parsed


def test_era_to_gregorian_rejects_unknown_era() -> None:
    assert era_to_gregorian("h", 8) == 1996
    with pytest.raises(ValueError):
        era_to_gregorian("T", 1)


def test_jurisdiction_and_canonical_checks() -> None:
    assert jurisdiction_of("US8125463B2") == "US"
    assert jurisdiction_of("US-RE45678-E1") == "US"
    assert jurisdiction_of("garbage") == ""
    assert is_canonical("US-8125463-B2")
    assert is_canonical("JP-19961234")
    assert not is_canonical("US8125463B2")
    assert not is_canonical("foo")
