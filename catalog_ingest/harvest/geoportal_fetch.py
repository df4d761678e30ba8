"""Geoportal specialist harvest."""

from __future__ import annotations

import logging

from catalog_ingest.common.config_loader import SourceConfig
from catalog_ingest.common.errors import ConfigError, DecodeError, PipelineError
from catalog_ingest.common.http import HttpClient, TimeoutConfig
from catalog_ingest.common.logging import log_event, log_failure
from catalog_ingest.common.models import RawSourceRecord

LOGGER = logging.getLogger(__name__)


def parse_feature_collection(payload: object) -> list[RawSourceRecord]:
    if not isinstance(payload, dict):
        raise DecodeError(f"expected a feature collection object, got {type(payload).__name__}")
    features = payload.get("features")
    if features is None:
        return []
    if not isinstance(features, list):
        raise DecodeError("'features' must be a list")

    records: list[RawSourceRecord] = []
    for idx, feature in enumerate(features):
        if not isinstance(feature, dict):
            raise DecodeError(f"features[{idx}] must be an object")
        records.append(RawSourceRecord.from_properties(feature.get("properties") or {}))
    return records


def build_http_client(source_config: SourceConfig) -> HttpClient:
    timeout = TimeoutConfig(connect=source_config.timeout_seconds, read=source_config.timeout_seconds)
    return HttpClient(timeout=timeout, transport=source_config.transport)


def fetch_specialists(
    source_config: SourceConfig,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
) -> list[RawSourceRecord]:
    log = logger or LOGGER
    if not source_config.url:
        log_failure(log, "specialists source url not set", stage="fetch", event="FETCH_FAIL", status="error", error_code=ConfigError.error_code)
        raise ConfigError("SCRAPER_SPECIALISTS_URL not set")

    log_event(log, "fetching specialists", stage="fetch", source=source_config.url, event="FETCH_START", status="ok")

    owns_client = http_client is None
    client = http_client or build_http_client(source_config)
    try:
        payload = client.get_json(source_config.url)
        records = parse_feature_collection(payload)
    except PipelineError as exc:
        log_failure(
            log,
            f"error getting specialists: {exc}",
            stage="fetch",
            source=source_config.url,
            event="FETCH_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        raise
    finally:
        if owns_client:
            client.close()

    log_event(
        log,
        "fetched specialists",
        stage="fetch",
        source=source_config.url,
        event="FETCH_END",
        status="ok",
        rows_out=len(records),
    )
    return records
