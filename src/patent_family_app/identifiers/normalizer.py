"""Canonical formatting of patent identifiers.

Canonical identifiers look like ``US-8125463-B2``: an uppercase country code,
the serial number and an optional kind code joined by hyphens. Inputs that do
not fit the generic shape are returned untouched so that a later validity
lookup can reject them explicitly.
"""

from __future__ import annotations

import re

from patent_family_app.identifiers.models import PatentIdentifier

# CC + optional era/series letter + digits + optional kind (A, B2, S1...)
IDENTIFIER_PATTERN = re.compile(r"^([A-Za-z]{2})([A-Za-z]?)(\d+)([A-Za-z]\d*)?$")
CANONICAL_PATTERN = re.compile(r"^[A-Z]{2,3}-[A-Z]{0,2}\d+(?:-[A-Z]\d*)?$")
NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")

# Heisei, Showa, Reiwa
JP_ERA_OFFSETS = {
    "H": 1988,
    "S": 1925,
    "R": 2018,
}


def era_to_gregorian(era: str, year: int) -> int:
    """Convert a Japanese imperial era year into a Gregorian year."""
    try:
        return JP_ERA_OFFSETS[era.upper()] + year
    except KeyError:
        raise ValueError(f"Unknown Japanese era letter: {era!r}") from None


def _format(country: str, serial: str, kind: str) -> str:
    return f"{country}-{serial}-{kind}" if kind else f"{country}-{serial}"


def parse_identifier(raw: str) -> PatentIdentifier:
    """Split a raw identifier into its parts.

    Unparseable inputs come back with ``canonical == raw`` and empty parts.
    """
    cleaned = NON_ALPHANUMERIC.sub("", raw or "")
    match = IDENTIFIER_PATTERN.match(cleaned)
    if not match:
        return PatentIdentifier(raw=raw, canonical=raw)

    country = match.group(1).upper()
    letter = match.group(2).upper()
    serial = match.group(3)
    kind = (match.group(4) or "").upper()

    if country == "JP" and letter in JP_ERA_OFFSETS:
        if len(serial) < 2:
            # no room for a two-digit era year
            return PatentIdentifier(raw=raw, canonical=raw)
        year = era_to_gregorian(letter, int(serial[:2]))
        serial = f"{year}{serial[2:]}"
    elif letter:
        serial = f"{letter}{serial}"

    return PatentIdentifier(
        raw=raw,
        canonical=_format(country, serial, kind),
        country_code=country,
        serial_number=serial,
        kind_code=kind,
    )


def normalize(raw: str) -> str:
    """Return the canonical ``COUNTRY-SERIAL[-KIND]`` form, or ``raw`` if unparseable.

    Examples:
        "US 8,125,463 B2" -> "US-8125463-B2"
        "JPH1012345A"     -> "JP-199812345-A"
        "InvalidPatent1"  -> "InvalidPatent1"
    """
    return parse_identifier(raw).canonical


def is_canonical(identifier: str) -> bool:
    return bool(CANONICAL_PATTERN.match(identifier or ""))


def jurisdiction_of(identifier: str) -> str:
    """Country code of an identifier, or an empty string when none can be read."""
    parsed = parse_identifier(identifier)
    if parsed.parsed:
        return parsed.country_code
    head = (identifier or "").split("-", 1)[0].strip().upper()
    if 2 <= len(head) <= 3 and head.isalpha():
        return head
    return ""


__all__ = [
    "CANONICAL_PATTERN",
    "IDENTIFIER_PATTERN",
    "JP_ERA_OFFSETS",
    "era_to_gregorian",
    "is_canonical",
    "jurisdiction_of",
    "normalize",
    "parse_identifier",
]
