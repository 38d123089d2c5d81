"""Split free text into candidate patent identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from patent_family_app.identifiers.corrector import canonicalize
from patent_family_app.identifiers.normalizer import is_canonical

DELIMITERS = re.compile(r"[\s,;|]+")
ANNOTATION = re.compile(r"\([^)]*\)")


@dataclass
class ParsedIdentifiers:
    identifiers: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def split_identifiers(text: str) -> List[str]:
    """Tokenize pasted text, dropping parenthesised notes such as ``(granted)``."""
    if not text:
        return []
    cleaned = ANNOTATION.sub(" ", text)
    return [token for token in DELIMITERS.split(cleaned) if token]


def unique_identifiers(text: str) -> List[str]:
    return list(dict.fromkeys(split_identifiers(text)))


def parse_identifier_list(text: str) -> ParsedIdentifiers:
    """Canonicalize every token, keeping unrecognised ones apart."""
    result = ParsedIdentifiers()
    for token in split_identifiers(text):
        canonical = canonicalize(token)
        if not is_canonical(canonical):
            if token not in result.skipped:
                result.skipped.append(token)
            continue
        if canonical not in result.identifiers:
            result.identifiers.append(canonical)
    return result


__all__ = ["ParsedIdentifiers", "parse_identifier_list", "split_identifiers", "unique_identifiers"]
