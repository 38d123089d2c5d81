"""In-memory patent index serving both lookups."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from patent_family_app.config.logging import get_logger
from patent_family_app.identifiers.corrector import canonicalize
from patent_family_app.identifiers.normalizer import jurisdiction_of
from patent_family_app.lookups.base import PatentRecord

LOGGER = get_logger(__name__)


class StaticPatentLookup:
    """Known patents held in memory, keyed by canonical identifier."""

    def __init__(self, records: Iterable[PatentRecord | dict[str, Any]] = ()) -> None:
        self.records: dict[str, PatentRecord] = {}
        for record in records:
            if not isinstance(record, PatentRecord):
                record = PatentRecord(**record)
            key = canonicalize(record.patent_id)
            self.records[key] = record.model_copy(
                update={
                    "patent_id": key,
                    "jurisdiction": (record.jurisdiction or jurisdiction_of(key)).upper() or None,
                }
            )

    @classmethod
    def from_json(cls, path: Path) -> "StaticPatentLookup":
        """Load a JSON list of ``{"patent_id", "family_id", "jurisdiction"}`` objects."""
        if not path.exists():
            raise FileNotFoundError(path)
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("records", [])
        LOGGER.info("Loaded patent records", extra={"path": str(path), "count": len(payload)})
        return cls(payload)

    def __len__(self) -> int:
        return len(self.records)

    def family_of(self, identifier: str) -> str | None:
        record = self.records.get(canonicalize(identifier))
        return record.family_id if record else None

    def confirm(self, identifiers: Sequence[str]) -> list[PatentRecord]:
        confirmed: list[PatentRecord] = []
        for identifier in identifiers:
            record = self.records.get(canonicalize(identifier))
            if record is not None:
                confirmed.append(record)
        return confirmed
