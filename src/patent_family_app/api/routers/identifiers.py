"""Identifier normalization and deduplication endpoints."""

from __future__ import annotations

from typing import Callable, Iterable, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from patent_family_app.config.logging import get_logger
from patent_family_app.config.settings import AppSettings, get_settings
from patent_family_app.dedup.engine import DeduplicationEngine
from patent_family_app.dedup.report import DeduplicationReport
from patent_family_app.families.preference import PreferenceOrder
from patent_family_app.identifiers.corrector import correct
from patent_family_app.identifiers.normalizer import normalize
from patent_family_app.identifiers.parser import parse_identifier_list
from patent_family_app.lookups.base import FamilyLookup, LookupUnavailableError, PatentRecord, ValidityLookup
from patent_family_app.lookups.static import StaticPatentLookup

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/identifiers", tags=["identifiers"])


class NormalizeRequest(BaseModel):
    identifiers: list[str] = Field(min_length=1, max_length=1000)


class NormalizedItem(BaseModel):
    original: str
    corrected: str
    normalized: str


class NormalizeResponse(BaseModel):
    results: list[NormalizedItem]


class ParseRequest(BaseModel):
    text: str = Field(description="Free text containing patent identifiers")


class ParseResponse(BaseModel):
    identifiers: list[str]
    skipped: list[str]


class CombineRequest(BaseModel):
    collections: dict[str, list[str]] = Field(description="Named identifier collections to merge")
    existing: list[str] = Field(default_factory=list, description="Destination collection contents")
    records: list[PatentRecord] | None = Field(
        default=None,
        description="Known patents; identifiers missing from this list are reported invalid",
    )
    preferred_authorities: list[str] | None = Field(default=None, description="Jurisdiction preference")
    filter_family: bool | None = Field(default=None, description="Keep one representative per family")


LookupFactory = Callable[[Iterable[PatentRecord]], ValidityLookup]


def get_lookup_factory() -> LookupFactory:
    return StaticPatentLookup


@router.post("/normalize", response_model=NormalizeResponse)
def normalize_identifiers(payload: NormalizeRequest) -> NormalizeResponse:
    results: List[NormalizedItem] = []
    for raw in payload.identifiers:
        corrected = correct(raw)
        results.append(NormalizedItem(original=raw, corrected=corrected, normalized=normalize(corrected)))
    return NormalizeResponse(results=results)


@router.post("/parse", response_model=ParseResponse)
def parse_identifiers(payload: ParseRequest) -> ParseResponse:
    parsed = parse_identifier_list(payload.text)
    return ParseResponse(identifiers=parsed.identifiers, skipped=parsed.skipped)


@router.post("/combine", response_model=DeduplicationReport)
def combine_collections(
    payload: CombineRequest,
    settings: AppSettings = Depends(get_settings),
    lookup_factory: LookupFactory = Depends(get_lookup_factory),
) -> DeduplicationReport:
    lookup = lookup_factory(payload.records) if payload.records is not None else None
    preference_order = (
        PreferenceOrder.from_codes(payload.preferred_authorities)
        if payload.preferred_authorities
        else None
    )
    engine = DeduplicationEngine(
        settings=settings,
        validity_lookup=lookup,
        family_lookup=lookup if isinstance(lookup, FamilyLookup) else None,
        preference_order=preference_order,
        filter_family=payload.filter_family,
    )

    try:
        return engine.combine(payload.collections, existing=payload.existing)
    except LookupUnavailableError as exc:
        LOGGER.error("Combine failed", extra={"error": str(exc)})
        raise HTTPException(status_code=503, detail=str(exc)) from exc
