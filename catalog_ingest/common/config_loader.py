"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from catalog_ingest.common.errors import ConfigError
from catalog_ingest.common.fs import read_yaml
from catalog_ingest.common.schema import validate_ingest_config

SOURCE_URL_ENV = "SCRAPER_SPECIALISTS_URL"
DATABASE_PATH_ENV = "CATALOG_DB_PATH"


@dataclass(frozen=True)
class SourceConfig:
    url: str
    timeout_seconds: float
    transport: str
    source_epsg: int


@dataclass(frozen=True)
class StoreConfig:
    database_path: str


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 1
    multiplier: float = 1.0
    max_wait: float = 30.0


@dataclass(frozen=True)
class IngestConfig:
    source: SourceConfig
    store: StoreConfig
    retry: RetryConfig
    country: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def _apply_env_overrides(cfg: dict, environ: Mapping[str, str]) -> dict:
    out = _deep_merge(cfg, {})
    if environ.get(SOURCE_URL_ENV):
        out = _deep_merge(out, {"source": {"url": environ[SOURCE_URL_ENV]}})
    if environ.get(DATABASE_PATH_ENV):
        out = _deep_merge(out, {"store": {"database_path": environ[DATABASE_PATH_ENV]}})
    return out


def build_ingest_config(cfg: dict) -> IngestConfig:
    source = cfg["source"]
    retry = cfg["retry"]
    return IngestConfig(
        source=SourceConfig(
            url=source["url"] or "",
            timeout_seconds=float(source["timeout_seconds"]),
            transport=source["transport"],
            source_epsg=int(source["source_epsg"]),
        ),
        store=StoreConfig(database_path=str(cfg["store"]["database_path"])),
        retry=RetryConfig(
            max_attempts=int(retry["max_attempts"]),
            multiplier=float(retry["multiplier"]),
            max_wait=float(retry["max_wait"]),
        ),
        country=cfg["normalise"]["country"],
    )


def load_ingest_config(
    config_path: Path,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
    environ: Mapping[str, str] | None = None,
) -> IngestConfig:
    raw = _load_yaml_with_overlay(config_path, overlay_path)
    raw = _apply_env_overrides(raw, os.environ if environ is None else environ)
    return build_ingest_config(validate_ingest_config(raw, allow_unknown=allow_unknown))
