from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass

from .clock import parse_timestamp_ms
from .config import ResurrectionPolicy
from .contracts import (
    FIELD_CHANNELS,
    FIELD_EXPIRY,
    FIELD_UPDATED_AT,
    REASON_PRIOR_REVISION_PRESENT,
    REASON_RESURRECTION_WINDOW_EXCEEDED,
    REASON_UPDATED_AT_MISSING,
    REASON_UPDATED_AT_UNPARSABLE,
    REASON_WITHIN_RESURRECTION_WINDOW,
    Decision,
    DocumentRevision,
    Expiry,
    PriorRevision,
    RevisionMetadata,
)


@dataclass(frozen=True)
class RoutingAssessment:
    decision: Decision
    # Set only for orphan revisions whose updatedAt parsed.
    orphan_age_ms: int | None = None


class RoutingDecisionEngine:
    """Decides channel routing and expiry for a single document revision.

    The engine holds only its immutable policy, so one instance may be shared
    across concurrent writes. Time is always supplied by the caller.
    """

    def __init__(self, *, policy: ResurrectionPolicy) -> None:
        if policy is None:
            raise ValueError("policy is required")
        self._policy = policy

    @property
    def policy(self) -> ResurrectionPolicy:
        return self._policy

    def evaluate(
        self,
        doc: DocumentRevision,
        old_doc: PriorRevision,
        meta: RevisionMetadata | None,
        *,
        now_ms: int,
    ) -> Decision:
        return self.assess(doc, old_doc, meta, now_ms=now_ms).decision

    def assess(
        self,
        doc: DocumentRevision,
        old_doc: PriorRevision,
        meta: RevisionMetadata | None,
        *,
        now_ms: int,
    ) -> RoutingAssessment:
        _check_invocation(doc, old_doc, now_ms)

        if old_doc is not None:
            return RoutingAssessment(
                decision=self._normal_routing(doc, reason=REASON_PRIOR_REVISION_PRESENT)
            )

        raw_updated_at = doc.get(FIELD_UPDATED_AT)
        if raw_updated_at is None:
            return RoutingAssessment(
                decision=self._normal_routing(doc, reason=REASON_UPDATED_AT_MISSING)
            )

        updated_at_ms = parse_timestamp_ms(raw_updated_at)
        if updated_at_ms is None:
            return RoutingAssessment(
                decision=self._normal_routing(doc, reason=REASON_UPDATED_AT_UNPARSABLE)
            )

        age_ms = now_ms - updated_at_ms
        resurrection = self._maybe_resurrection(age_ms)
        if resurrection is not None:
            return RoutingAssessment(decision=resurrection, orphan_age_ms=age_ms)

        return RoutingAssessment(
            decision=self._normal_routing(doc, reason=REASON_WITHIN_RESURRECTION_WINDOW),
            orphan_age_ms=age_ms,
        )

    def _maybe_resurrection(self, age_ms: int) -> Decision | None:
        if age_ms <= self._policy.window_ms:
            return None
        return Decision(
            channels=frozenset({self._policy.soft_delete_channel}),
            expiry=self._policy.soft_delete_ttl_s,
            short_circuited=True,
            reasons=(REASON_RESURRECTION_WINDOW_EXCEEDED,),
        )

    def _normal_routing(self, doc: DocumentRevision, *, reason: str) -> Decision:
        return Decision(
            channels=_channels_of(doc.get(FIELD_CHANNELS)),
            expiry=_expiry_of(doc.get(FIELD_EXPIRY)),
            short_circuited=False,
            reasons=(reason,),
        )


def evaluate(
    doc: DocumentRevision,
    old_doc: PriorRevision,
    meta: RevisionMetadata | None,
    *,
    now_ms: int,
    policy: ResurrectionPolicy,
) -> Decision:
    return RoutingDecisionEngine(policy=policy).evaluate(doc, old_doc, meta, now_ms=now_ms)


def _check_invocation(doc: object, old_doc: object, now_ms: object) -> None:
    if now_ms is None:
        raise ValueError("now_ms is required")
    if isinstance(now_ms, bool) or not isinstance(now_ms, int):
        raise ValueError("now_ms must be an int of epoch milliseconds")
    if not isinstance(doc, Mapping):
        raise ValueError("doc must be a mapping")
    if old_doc is not None and not isinstance(old_doc, Mapping):
        raise ValueError("old_doc must be a mapping or None")


def _channels_of(value: object) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value}) if value else frozenset()
    if isinstance(value, bytes) or not isinstance(value, (Sequence, Set)):
        return frozenset()
    return frozenset(item for item in value if isinstance(item, str) and item)


def _expiry_of(value: object) -> Expiry | None:
    # null, false, 0 and "" never reached the host as an expiry.
    if value is None or value is False or value == "" or value == 0:
        return None
    return value  # type: ignore[return-value]
