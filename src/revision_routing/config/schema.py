from __future__ import annotations

from dataclasses import dataclass

PROFILE_PRODUCTION = "production"
PROFILE_TEST = "test"


@dataclass(frozen=True)
class ResurrectionPolicy:
    window_ms: int
    soft_delete_channel: str
    soft_delete_ttl_s: int


def validate_policy(policy: ResurrectionPolicy) -> None:
    _require_positive(policy.window_ms, "window_ms")
    _require_positive(policy.soft_delete_ttl_s, "soft_delete_ttl_s")
    if not policy.soft_delete_channel or not policy.soft_delete_channel.strip():
        raise ValueError("soft_delete_channel must be a non-empty string")


def _require_positive(value: int, field_name: str) -> None:
    if value <= 0:
        raise ValueError(f"{field_name} must be > 0")
