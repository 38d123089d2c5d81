"""Correction of common patent identifier variations.

The generic normalizer cannot tell where a serial ends and a kind code starts
when separators are missing, and it knows nothing about office specific
padding. The rules below are keyed by the two-letter prefix and rebuild the
canonical hyphenated form for each jurisdiction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Union

from patent_family_app.config.logging import get_logger
from patent_family_app.identifiers.normalizer import era_to_gregorian, normalize

LOGGER = get_logger(__name__)

KIND = r"(?P<kind>[A-Z]\d?)?"
COMPACT_NOISE = re.compile(r"[\s\-,.]")

Template = Union[str, Callable[[Mapping[str, str]], str]]


@dataclass(frozen=True)
class CorrectionRule:
    """A compiled pattern and the template producing the corrected identifier.

    ``template`` is either a ``str.format`` template over the named groups or a
    callable receiving them. A captured ``kind`` group is appended as the last
    hyphenated part.
    """

    name: str
    pattern: re.Pattern[str]
    template: Template

    def apply(self, value: str) -> str | None:
        match = self.pattern.match(value)
        if not match:
            return None
        groups = {key: group or "" for key, group in match.groupdict().items()}
        if callable(self.template):
            body = self.template(groups)
        else:
            body = self.template.format(**groups)
        kind = groups.get("kind")
        return f"{body}-{kind}" if kind else body


def _rule(name: str, pattern: str, template: Template) -> CorrectionRule:
    return CorrectionRule(name=name, pattern=re.compile(pattern), template=template)


def _japanese_era(groups: Mapping[str, str]) -> str:
    year = era_to_gregorian(groups["era"], int(groups["year"]))
    return f"JP-{year}{groups['serial']}"


def _generic(prefix: str) -> CorrectionRule:
    return _rule(f"{prefix.lower()}_generic", rf"^{prefix}(?P<serial>\d+){KIND}$", prefix + "-{serial}")


CORRECTION_RULES: dict[str, tuple[CorrectionRule, ...]] = {
    "US": (
        _rule("us_standard", rf"^US(?P<serial>(?:RE|PP|[DHPT])?\d+){KIND}$", "US-{serial}"),
    ),
    "WO": (
        _rule(
            "wo_year_serial",
            rf"^WO/?(?P<year>(?:19|20)\d{{2}})/?(?P<serial>\d{{1,6}}){KIND}$",
            "WO-{year}{serial:0>6}",
        ),
    ),
    "KR": (
        _rule("kr_two_digit_year", rf"^KR(?:10)?19(?P<year>\d{{2}})(?P<serial>\d{{7}}){KIND}$", "KR-{year}{serial}"),
        _rule("kr_padding", rf"^KR10(?P<serial>(?:19|20)\d{{9}}){KIND}$", "KR-{serial}"),
        _generic("KR"),
    ),
    "CN": (
        _rule("cn_padding", rf"^CN10(?P<serial>(?:19|20)\d{{6,}}){KIND}$", "CN-{serial}"),
        _generic("CN"),
    ),
    "JP": (
        _rule("jp_era", rf"^JP(?P<era>[HSR])(?P<year>\d{{2}})(?P<serial>\d*){KIND}$", _japanese_era),
        _generic("JP"),
    ),
}


def _compact(raw: str) -> str:
    return COMPACT_NOISE.sub("", raw or "").upper()


def rules_for(prefix: str) -> tuple[CorrectionRule, ...]:
    prefix = prefix.upper()
    if prefix in CORRECTION_RULES:
        return CORRECTION_RULES[prefix]
    if len(prefix) == 2 and prefix.isalpha():
        return (_generic(prefix),)
    return ()


def correct(raw: str) -> str:
    """Rebuild the canonical form of a malformed identifier.

    Returns ``raw`` unchanged when no rule matches or the matching rule
    produces the same value.
    """
    compact = _compact(raw)
    for rule in rules_for(compact[:2]):
        corrected = rule.apply(compact)
        if corrected is None:
            continue
        if corrected == raw:
            return raw
        LOGGER.debug("Corrected identifier", extra={"raw": raw, "corrected": corrected, "rule": rule.name})
        return corrected
    return raw


def canonicalize(raw: str) -> str:
    """Variation correction followed by generic normalization."""
    return normalize(correct(raw))


__all__ = ["CORRECTION_RULES", "CorrectionRule", "canonicalize", "correct", "rules_for"]
