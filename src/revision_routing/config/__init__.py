from revision_routing.config.schema import (
    PROFILE_PRODUCTION,
    PROFILE_TEST,
    ResurrectionPolicy,
    validate_policy,
)

__all__ = [
    "PROFILE_PRODUCTION",
    "PROFILE_TEST",
    "ResurrectionPolicy",
    "validate_policy",
]
