"""Deduplication report schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from patent_family_app.families.selector import FamilySelection


class DeduplicationReport(BaseModel):
    """Outcome of combining identifier collections.

    ``duplicate_ids`` and ``invalid_ids`` hold each identifier once, in the
    order it was first reported. ``family_duplicates`` maps a dropped family
    member to the identifier that represents its family.
    """

    unique_ids: list[str] = Field(default_factory=list)
    duplicate_ids: list[str] = Field(default_factory=list)
    invalid_ids: list[str] = Field(default_factory=list)
    existing_duplicates: list[str] = Field(default_factory=list)
    family_duplicates: dict[str, str] = Field(default_factory=dict)
    selections: list[FamilySelection] = Field(default_factory=list)
    sources: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.unique_ids or self.duplicate_ids or self.invalid_ids)

    def add_duplicate(self, identifier: str) -> None:
        if identifier not in self.duplicate_ids:
            self.duplicate_ids.append(identifier)

    def add_invalid(self, identifier: str) -> None:
        if identifier not in self.invalid_ids:
            self.invalid_ids.append(identifier)

    def summary(self) -> dict[str, Any]:
        return {
            "unique": len(self.unique_ids),
            "duplicates": len(self.duplicate_ids),
            "invalid": len(self.invalid_ids),
            "families": len(self.selections),
        }
