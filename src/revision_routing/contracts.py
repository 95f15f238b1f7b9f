from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, Sequence, Union

DocumentRevision = Mapping[str, object]
PriorRevision = Union[Mapping[str, object], None]
RevisionMetadata = Mapping[str, object]

# Absolute ISO-8601 timestamp string, or relative TTL in seconds.
Expiry = Union[str, int]

FIELD_CHANNELS = "channels"
FIELD_EXPIRY = "expiry"
FIELD_UPDATED_AT = "updatedAt"

ROUTING_PATH_SOFT_DELETE = "soft_delete"
ROUTING_PATH_NORMAL = "normal"
RoutingPath = Literal["soft_delete", "normal"]

REASON_RESURRECTION_WINDOW_EXCEEDED = "resurrection_window_exceeded"
REASON_PRIOR_REVISION_PRESENT = "prior_revision_present"
REASON_UPDATED_AT_MISSING = "updated_at_missing"
REASON_UPDATED_AT_UNPARSABLE = "updated_at_unparsable"
REASON_WITHIN_RESURRECTION_WINDOW = "within_resurrection_window"
REASON_CODES: Sequence[str] = (
    REASON_RESURRECTION_WINDOW_EXCEEDED,
    REASON_PRIOR_REVISION_PRESENT,
    REASON_UPDATED_AT_MISSING,
    REASON_UPDATED_AT_UNPARSABLE,
    REASON_WITHIN_RESURRECTION_WINDOW,
)


@dataclass(frozen=True)
class Decision:
    channels: frozenset[str] = frozenset()
    expiry: Expiry | None = None
    short_circuited: bool = False
    reasons: tuple[str, ...] = ()

    @property
    def path(self) -> RoutingPath:
        if self.short_circuited:
            return ROUTING_PATH_SOFT_DELETE
        return ROUTING_PATH_NORMAL
