"""Group identifiers into patent families."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from patent_family_app.identifiers.normalizer import jurisdiction_of
from patent_family_app.lookups.base import FamilySource, as_family_lookup


@dataclass
class FamilyGroup:
    family_id: str
    members: list[str] = field(default_factory=list)

    def add(self, identifier: str) -> bool:
        if identifier in self.members:
            return False
        self.members.append(identifier)
        return True

    def jurisdictions(self) -> dict[str, list[str]]:
        by_code: dict[str, list[str]] = {}
        for member in self.members:
            by_code.setdefault(jurisdiction_of(member), []).append(member)
        return by_code

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self):
        return iter(self.members)


@dataclass
class FamilyGrouping:
    families: dict[str, FamilyGroup] = field(default_factory=dict)
    residual: list[str] = field(default_factory=list)

    def family_of(self, identifier: str) -> str | None:
        for family_id, group in self.families.items():
            if identifier in group.members:
                return family_id
        return None


def group_by_family(identifiers: Iterable[str], family_lookup: FamilySource | None) -> FamilyGrouping:
    """Place each identifier in exactly one family group or once in the residual list.

    Identifiers without a family id (or with no lookup at all) are residual
    and act as singleton families. Repeats are collapsed.
    """
    lookup = as_family_lookup(family_lookup)
    grouping = FamilyGrouping()
    placed: set[str] = set()

    for identifier in identifiers:
        if identifier in placed:
            continue
        placed.add(identifier)

        family_id = lookup.family_of(identifier) if lookup is not None else None
        if not family_id:
            grouping.residual.append(identifier)
            continue

        group = grouping.families.get(family_id)
        if group is None:
            group = grouping.families[family_id] = FamilyGroup(family_id=family_id)
        group.add(identifier)

    return grouping
