"""Contracts for the external family and validity lookups."""

from __future__ import annotations

from typing import Callable, Mapping, Protocol, Sequence, Union, runtime_checkable

from pydantic import BaseModel, field_validator

from patent_family_app.identifiers.corrector import canonicalize


class LookupUnavailableError(RuntimeError):
    """An external lookup failed, timed out or was cancelled.

    Callers decide on a fallback; it must never be read as "every identifier
    is invalid".
    """

    def __init__(self, service: str, reason: str | None = None) -> None:
        self.service = service
        self.reason = reason
        message = f"{service} lookup unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PatentRecord(BaseModel):
    """An identifier confirmed by the validity lookup."""

    patent_id: str
    family_id: str | None = None
    jurisdiction: str | None = None

    @field_validator("patent_id")
    @classmethod
    def _strip_patent_id(cls, value: str) -> str:
        return value.strip()

    @field_validator("family_id", mode="before")
    @classmethod
    def _empty_family_is_none(cls, value: object) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


@runtime_checkable
class FamilyLookup(Protocol):
    def family_of(self, identifier: str) -> str | None:
        ...


@runtime_checkable
class ValidityLookup(Protocol):
    def confirm(self, identifiers: Sequence[str]) -> list[PatentRecord]:
        ...


FamilySource = Union[FamilyLookup, Mapping[str, str | None], Callable[[str], str | None]]


class _MappingFamilyLookup:
    """Keys and queries are compared in canonical form."""

    def __init__(self, mapping: Mapping[str, str | None]) -> None:
        self.mapping = {canonicalize(key): value for key, value in mapping.items()}

    def family_of(self, identifier: str) -> str | None:
        return self.mapping.get(canonicalize(identifier)) or None


class _CallableFamilyLookup:
    def __init__(self, func: Callable[[str], str | None]) -> None:
        self.func = func

    def family_of(self, identifier: str) -> str | None:
        return self.func(identifier) or None


def as_family_lookup(source: FamilySource | None) -> FamilyLookup | None:
    """Adapt mappings and plain callables to the ``FamilyLookup`` protocol."""
    if source is None:
        return None
    if isinstance(source, FamilyLookup):
        return source
    if isinstance(source, Mapping):
        return _MappingFamilyLookup(source)
    if callable(source):
        return _CallableFamilyLookup(source)
    raise TypeError(f"Unsupported family lookup: {type(source).__name__}")
