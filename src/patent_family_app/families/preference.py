"""Jurisdiction preference ordering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

DEFAULT_AUTHORITIES: tuple[str, ...] = ("US", "WO", "EP", "GB", "FR", "DE", "CH", "JP", "RU", "SU")

_SEPARATORS = re.compile(r"[\s,;|]+")


@dataclass(frozen=True)
class PreferenceOrder:
    """Ordered jurisdiction codes, most preferred first."""

    codes: tuple[str, ...] = DEFAULT_AUTHORITIES

    @classmethod
    def from_codes(cls, codes: Iterable[str]) -> "PreferenceOrder":
        seen: list[str] = []
        for code in codes:
            code = code.strip().upper()
            if code and code not in seen:
                seen.append(code)
        return cls(tuple(seen))

    @classmethod
    def from_string(cls, value: str) -> "PreferenceOrder":
        """Parse a settings string such as ``"US WO EP"`` or ``"US,WO,EP"``."""
        return cls.from_codes(_SEPARATORS.split(value or ""))

    def rank(self, jurisdiction: str) -> int:
        """Position of the jurisdiction; unknown codes rank after every listed one."""
        try:
            return self.codes.index(jurisdiction.upper())
        except ValueError:
            return len(self.codes)

    def __contains__(self, jurisdiction: object) -> bool:
        return isinstance(jurisdiction, str) and jurisdiction.upper() in self.codes

    def __str__(self) -> str:
        return " ".join(self.codes)


DEFAULT_PREFERENCE_ORDER = PreferenceOrder()
