"""Choose one representative identifier per patent family."""

from __future__ import annotations

from typing import Iterable, List

from pydantic import BaseModel, Field

from patent_family_app.families.grouper import FamilyGroup
from patent_family_app.families.preference import DEFAULT_PREFERENCE_ORDER, PreferenceOrder
from patent_family_app.identifiers.normalizer import jurisdiction_of


class FamilySelection(BaseModel):
    """Which member represents a family, and why."""

    family_id: str
    representative: str
    members: list[str] = Field(default_factory=list)
    jurisdiction: str = ""
    rank: int
    rationale: str


def rank_members(members: Iterable[str], preference_order: PreferenceOrder | None = None) -> List[str]:
    """Order members by jurisdiction preference. ``sorted`` is stable, so ties keep input order."""
    order = preference_order or DEFAULT_PREFERENCE_ORDER
    return sorted(members, key=lambda member: order.rank(jurisdiction_of(member)))


def select_representative(
    group: FamilyGroup | Iterable[str],
    preference_order: PreferenceOrder | None = None,
) -> str:
    ranked = rank_members(group, preference_order)
    if not ranked:
        raise ValueError("Cannot select a representative from an empty family")
    return ranked[0]


def explain_selection(group: FamilyGroup, preference_order: PreferenceOrder | None = None) -> FamilySelection:
    order = preference_order or DEFAULT_PREFERENCE_ORDER
    ranked = rank_members(group, order)
    if not ranked:
        raise ValueError(f"Family {group.family_id} has no members")

    representative = ranked[0]
    jurisdiction = jurisdiction_of(representative)
    rank = order.rank(jurisdiction)

    if len(ranked) == 1:
        rationale = "only member of its family"
    elif rank < len(order.codes):
        rationale = f"{jurisdiction or 'unknown'} is preference #{rank + 1} ({order})"
    else:
        rationale = f"no member in a preferred jurisdiction ({order}); kept first listed"

    return FamilySelection(
        family_id=group.family_id,
        representative=representative,
        members=ranked,
        jurisdiction=jurisdiction,
        rank=rank,
        rationale=rationale,
    )
