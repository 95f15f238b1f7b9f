from __future__ import annotations

import importlib
from collections.abc import Mapping
from importlib import resources
from os import PathLike
from pathlib import Path

from revision_routing.config.schema import ResurrectionPolicy, validate_policy

_ROOT_KEYS = {"default_profile", "profiles"}
_PROFILE_KEYS = {"window_ms", "soft_delete_channel", "soft_delete_ttl_s"}


def load_default_policy(profile: str | None = None) -> ResurrectionPolicy:
    text = (
        resources.files("revision_routing.config")
        .joinpath("default.yaml")
        .read_text(encoding="utf-8")
    )
    return parse_policy(_load_payload(text, "revision_routing default config"), profile)


def load_policy_file(
    path: str | PathLike[str], profile: str | None = None
) -> ResurrectionPolicy:
    text = Path(path).read_text(encoding="utf-8")
    return parse_policy(_load_payload(text, f"policy file {path}"), profile)


def parse_policy(
    payload: Mapping[str, object], profile: str | None = None
) -> ResurrectionPolicy:
    _reject_unknown(payload, _ROOT_KEYS, "revision_routing config")
    profiles = payload.get("profiles")
    if not isinstance(profiles, Mapping) or not profiles:
        raise ValueError("profiles must be a non-empty mapping")
    selected = profile if profile is not None else payload.get("default_profile")
    if not isinstance(selected, str) or not selected:
        raise ValueError("default_profile must be set when no profile is given")
    if selected not in profiles:
        known = ", ".join(sorted(str(name) for name in profiles))
        raise ValueError(f"unknown profile {selected}; expected one of: {known}")
    policy = _parse_profile(profiles[selected], f"profiles.{selected}")
    validate_policy(policy)
    return policy


def _load_payload(text: str, label: str) -> Mapping[str, object]:
    yaml = importlib.import_module("yaml")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"{label} is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValueError(f"{label} must be a mapping")
    return data


def _parse_profile(data: object, label: str) -> ResurrectionPolicy:
    if not isinstance(data, Mapping):
        raise ValueError(f"{label} must be a mapping")
    _reject_unknown(data, _PROFILE_KEYS, label)
    window_ms = data.get("window_ms")
    soft_delete_channel = data.get("soft_delete_channel")
    soft_delete_ttl_s = data.get("soft_delete_ttl_s")
    if isinstance(window_ms, bool) or not isinstance(window_ms, int):
        raise ValueError(f"{label}.window_ms must be an int")
    if not isinstance(soft_delete_channel, str):
        raise ValueError(f"{label}.soft_delete_channel must be a string")
    if isinstance(soft_delete_ttl_s, bool) or not isinstance(soft_delete_ttl_s, int):
        raise ValueError(f"{label}.soft_delete_ttl_s must be an int")
    return ResurrectionPolicy(
        window_ms=window_ms,
        soft_delete_channel=soft_delete_channel,
        soft_delete_ttl_s=soft_delete_ttl_s,
    )


def _reject_unknown(payload: Mapping[str, object], allowed: set[str], label: str) -> None:
    unknown = set(payload.keys()) - allowed
    if unknown:
        unknown_list = ", ".join(sorted(str(item) for item in unknown))
        raise ValueError(f"unknown {label} keys: {unknown_list}")
