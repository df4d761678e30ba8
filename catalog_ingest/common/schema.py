"""Minimal strict schema for the ingest YAML config."""

from __future__ import annotations

from catalog_ingest.common.constants import TRANSPORTS
from catalog_ingest.common.errors import ConfigError

SECTION_KEYS = {
    "source": {"url", "timeout_seconds", "transport", "source_epsg"},
    "store": {"database_path"},
    "retry": {"max_attempts", "multiplier", "max_wait"},
    "normalise": {"country"},
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: object, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number, got {value!r}")


def validate_ingest_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "ingest config")
    _assert_required_keys(cfg, set(SECTION_KEYS), "ingest config")
    _assert_no_unknown_keys(cfg, set(SECTION_KEYS), "ingest config", allow_unknown)

    for section, keys in SECTION_KEYS.items():
        _assert_mapping(cfg[section], section)
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    source = cfg["source"]
    if source["url"] is not None and not isinstance(source["url"], str):
        raise ConfigError("source.url must be a string")
    _assert_positive_number(source["timeout_seconds"], "source.timeout_seconds")
    if source["transport"] not in TRANSPORTS:
        raise ConfigError(f"source.transport must be one of: {', '.join(TRANSPORTS)}")
    if isinstance(source["source_epsg"], bool) or not isinstance(source["source_epsg"], int):
        raise ConfigError("source.source_epsg must be an integer EPSG code")

    if not cfg["store"]["database_path"]:
        raise ConfigError("store.database_path must be set")

    retry = cfg["retry"]
    if isinstance(retry["max_attempts"], bool) or not isinstance(retry["max_attempts"], int) or retry["max_attempts"] < 1:
        raise ConfigError("retry.max_attempts must be an integer >= 1")
    _assert_positive_number(retry["multiplier"], "retry.multiplier")
    _assert_positive_number(retry["max_wait"], "retry.max_wait")

    if not isinstance(cfg["normalise"]["country"], str) or not cfg["normalise"]["country"]:
        raise ConfigError("normalise.country must be a non-empty string")

    return cfg
