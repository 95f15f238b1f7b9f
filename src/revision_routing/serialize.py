from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .contracts import Decision, DocumentRevision, PriorRevision, RevisionMetadata


@dataclass(frozen=True)
class RevisionInput:
    doc: DocumentRevision
    old_doc: PriorRevision = None
    meta: RevisionMetadata = field(default_factory=dict)


def decision_to_dict(decision: Decision) -> dict[str, object]:
    return {
        "channels": sorted(decision.channels),
        "expiry": decision.expiry,
        "short_circuited": decision.short_circuited,
        "path": decision.path,
        "reasons": list(decision.reasons),
    }


def revision_input_from_dict(payload: Mapping[str, object]) -> RevisionInput:
    if not isinstance(payload, Mapping):
        raise ValueError("revision input must be a mapping")
    doc = payload.get("doc")
    if not isinstance(doc, Mapping):
        raise ValueError("doc must be a mapping")
    old_doc = payload.get("oldDoc", payload.get("old_doc"))
    if old_doc is not None and not isinstance(old_doc, Mapping):
        raise ValueError("oldDoc must be a mapping or null")
    meta = payload.get("meta")
    if meta is None:
        meta = {}
    if not isinstance(meta, Mapping):
        raise ValueError("meta must be a mapping or null")
    return RevisionInput(doc=doc, old_doc=old_doc, meta=meta)
