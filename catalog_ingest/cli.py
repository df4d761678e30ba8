"""CLI entrypoint for the specialist catalog ingestion pipeline."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from catalog_ingest.common.config_loader import IngestConfig, load_ingest_config
from catalog_ingest.common.constants import COMMANDS, EXIT_CONFIG_FAIL, EXIT_PIPELINE_FAIL, EXIT_SUCCESS
from catalog_ingest.common.errors import ConfigError, PipelineError
from catalog_ingest.common.fs import write_json
from catalog_ingest.common.logging import build_logger, log_failure
from catalog_ingest.common.time_utils import generate_run_id
from catalog_ingest.common.wkt import decode_point
from catalog_ingest.pipeline.ingest_run import IngestionRun
from catalog_ingest.store.sqlite_catalog import SqliteCatalogStore


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--config", default="./config/ingest.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--report", default=None, help="write the run summary JSON here")
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--specialty", default=None, help="filter for the specialists command")
    parser.add_argument("--wkt", default=None, help="point literal for the decode-wkt command")
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> IngestConfig:
    overlay = Path(args.overlay_config) if args.overlay_config else None
    return load_ingest_config(Path(args.config), overlay_path=overlay)


def _print_json_lines(rows: list[dict]) -> None:
    for row in rows:
        print(json.dumps(row, ensure_ascii=False, sort_keys=True))


def run_ingest(args: argparse.Namespace, config: IngestConfig) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(run_id, log_dir=Path(args.log_dir) if args.log_dir else None, level=args.log_level)
    try:
        with SqliteCatalogStore(config.store.database_path) as store:
            summary = IngestionRun(config, store, logger=logger, run_id=run_id).run()
    except PipelineError as exc:
        if args.report:
            write_json(Path(args.report), {"run_id": run_id, "status": "error", "error_code": exc.error_code, "message": str(exc)})
        if isinstance(exc, ConfigError):
            return EXIT_CONFIG_FAIL
        return EXIT_PIPELINE_FAIL

    if args.report:
        write_json(Path(args.report), {"status": "success", **summary.to_dict()})
    return EXIT_SUCCESS


def run_list_specialties(config: IngestConfig) -> int:
    with SqliteCatalogStore(config.store.database_path) as store:
        _print_json_lines([s.to_dict() for s in store.all_specialties()])
    return EXIT_SUCCESS


def run_list_specialists(config: IngestConfig, specialty_name: str | None) -> int:
    with SqliteCatalogStore(config.store.database_path) as store:
        if specialty_name is None:
            specialists = store.all_specialists()
        else:
            specialty = store.find_specialty_by_name(specialty_name)
            specialists = store.specialists_by_specialty(specialty.id) if specialty else []
        fields = ("id", "name", "specialty_id", "location_wkt", "address", "telephone", "email")
        rows = [{key: s.to_dict()[key] for key in fields} | {"opening_hours": s.opening_hours()} for s in specialists]
        _print_json_lines(rows)
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    if args.command == "decode-wkt":
        if not args.wkt:
            raise ConfigError("decode-wkt requires --wkt")
        longitude, latitude = decode_point(args.wkt)
        print(json.dumps({"longitude": longitude, "latitude": latitude}))
        return EXIT_SUCCESS

    config = _load_config(args)
    if args.command == "ingest":
        return run_ingest(args, config)
    if args.command == "specialties":
        return run_list_specialties(config)
    if args.command == "specialists":
        return run_list_specialists(config, args.specialty)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except ConfigError as exc:
        log_failure(build_logger("cli"), f"configuration error: {exc}", stage="cli", status="error", error_code=exc.error_code)
        return EXIT_CONFIG_FAIL
    except PipelineError as exc:
        log_failure(build_logger("cli"), f"command failed: {exc}", stage="cli", status="error", error_code=exc.error_code)
        return EXIT_PIPELINE_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
