"""Identifier models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PatentIdentifier:
    raw: str
    canonical: str
    country_code: str = ""
    serial_number: str = ""
    kind_code: str = ""

    @property
    def parsed(self) -> bool:
        return bool(self.country_code)
