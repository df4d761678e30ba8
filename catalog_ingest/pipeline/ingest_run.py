"""Ingestion orchestration: fetch, then reconcile, all-or-nothing per run."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from catalog_ingest.common.config_loader import IngestConfig
from catalog_ingest.common.errors import PipelineError
from catalog_ingest.common.http import HttpClient
from catalog_ingest.common.logging import log_event, log_failure
from catalog_ingest.common.time_utils import elapsed_ms, generate_run_id
from catalog_ingest.harvest.geoportal_fetch import fetch_specialists
from catalog_ingest.pipeline.reconcile import ReconcileStats, Reconciler
from catalog_ingest.store.sqlite_catalog import CatalogStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestSummary:
    run_id: str
    records_fetched: int
    specialties_seen: int
    specialties_added: int
    specialists_added: int
    specialists_skipped: int
    attempts: int
    duration_ms: int

    def to_dict(self) -> dict:
        return asdict(self)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, PipelineError) and exc.retryable


class IngestionRun:
    """One ingestion run against a catalog store.

    Errors from either stage reach the caller as raised. With
    ``retry.max_attempts > 1`` the whole run is repeated for retryable
    failures only; reconciliation is idempotent so a repeat is safe.
    """

    def __init__(
        self,
        config: IngestConfig,
        store: CatalogStore,
        *,
        http_client: HttpClient | None = None,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.store = store
        self.http_client = http_client
        self.logger = logger or LOGGER
        self.run_id = run_id or generate_run_id()
        self.sleep = sleep
        self.reconciler = Reconciler(
            store,
            country=config.country,
            source_epsg=config.source.source_epsg,
            logger=self.logger,
        )

    def _attempt(self) -> tuple[int, ReconcileStats]:
        records = fetch_specialists(self.config.source, self.http_client, logger=self.logger)
        stats = self.reconciler.reconcile(records)
        return len(records), stats

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        log_event(
            self.logger,
            f"retrying ingestion after failure: {exc}",
            run_id=self.run_id,
            stage="ingest",
            event="RUN_RETRY",
            status="retry",
            attempt=retry_state.attempt_number,
            error_code=getattr(exc, "error_code", None),
        )

    def run(self) -> IngestSummary:
        started = time.monotonic()
        log_event(self.logger, "ingestion start", run_id=self.run_id, stage="ingest", event="RUN_START", status="ok")

        retry_cfg = self.config.retry
        retrying = Retrying(
            stop=stop_after_attempt(retry_cfg.max_attempts),
            wait=wait_exponential_jitter(initial=retry_cfg.multiplier, max=retry_cfg.max_wait, jitter=1.0),
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            sleep=self.sleep,
            reraise=True,
        )
        attempts = 0
        try:
            for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    records_fetched, stats = self._attempt()
        except PipelineError as exc:
            log_failure(
                self.logger,
                f"ingestion failed: {exc}",
                run_id=self.run_id,
                stage="ingest",
                event="RUN_FAIL",
                status="error",
                attempt=attempts,
                duration_ms=elapsed_ms(started),
                error_code=exc.error_code,
            )
            raise

        summary = IngestSummary(
            run_id=self.run_id,
            records_fetched=records_fetched,
            specialties_seen=stats.specialties_seen,
            specialties_added=stats.specialties_added,
            specialists_added=stats.specialists_added,
            specialists_skipped=stats.specialists_skipped,
            attempts=attempts,
            duration_ms=elapsed_ms(started),
        )
        log_event(
            self.logger,
            "ingestion end",
            run_id=self.run_id,
            stage="ingest",
            event="RUN_END",
            status="ok",
            attempt=attempts,
            rows_in=records_fetched,
            rows_out=stats.specialties_added + stats.specialists_added,
            duration_ms=summary.duration_ms,
        )
        return summary
