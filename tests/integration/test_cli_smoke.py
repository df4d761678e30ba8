import json
from pathlib import Path

import pytest

from catalog_ingest.cli import main
from catalog_ingest.common.http import HttpClient
from tests.catalog_fakes import feature_collection


def _write_config(tmp_path: Path, url: str) -> Path:
    path = tmp_path / "ingest.yml"
    path.write_text(
        f"""source:
  url: "{url}"
  timeout_seconds: 30
  transport: insecure
  source_epsg: 4326
store:
  database_path: "{tmp_path / 'data' / 'catalog.db'}"
retry:
  max_attempts: 1
  multiplier: 1.0
  max_wait: 30.0
normalise:
  country: Slovenská republika
""",
        encoding="utf-8",
    )
    return path


@pytest.mark.integration
def test_cli_ingest_then_list(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.delenv("SCRAPER_SPECIALISTS_URL", raising=False)
    monkeypatch.delenv("CATALOG_DB_PATH", raising=False)
    payload = feature_collection(
        {"id": 1, "nazov_zariadenia": "Dr. John Doe", "druh_zariadenia": "ortoped", "poloha_lat": 48.43, "poloha_lon": -71.06},
    )
    monkeypatch.setattr(HttpClient, "get_json", lambda self, url, **_kwargs: payload)
    config = _write_config(tmp_path, "https://geoportal.example.sk/ambulancie")
    report = tmp_path / "out" / "run_summary.json"

    assert main(["ingest", "--config", str(config), "--run-id", "run-cli", "--report", str(report)]) == 0

    summary = json.loads(report.read_text(encoding="utf-8"))
    assert summary["status"] == "success"
    assert summary["run_id"] == "run-cli"
    assert summary["specialists_added"] == 1

    capsys.readouterr()
    assert main(["specialties", "--config", str(config)]) == 0
    specialties = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [s["name"] for s in specialties] == ["ortoped"]

    assert main(["specialists", "--config", str(config), "--specialty", "ortoped"]) == 0
    specialists = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert specialists[0]["location_wkt"] == "POINT(-71.06 48.43)"
    assert specialists[0]["opening_hours"]["monday"] == ""

    assert main(["specialists", "--config", str(config), "--specialty", "kardiológ"]) == 0
    assert capsys.readouterr().out == ""


@pytest.mark.integration
def test_cli_ingest_without_source_url_exits_with_config_failure(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("SCRAPER_SPECIALISTS_URL", raising=False)
    monkeypatch.delenv("CATALOG_DB_PATH", raising=False)
    config = _write_config(tmp_path, "")
    report = tmp_path / "run_summary.json"

    assert main(["ingest", "--config", str(config), "--report", str(report)]) == 30
    assert json.loads(report.read_text(encoding="utf-8"))["error_code"] == "CONFIG_ERROR"


@pytest.mark.integration
def test_cli_ingest_source_failure_exits_with_pipeline_failure(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("CATALOG_DB_PATH", raising=False)
    monkeypatch.setenv("SCRAPER_SPECIALISTS_URL", "https://geoportal.example.sk/down")

    class ServerError:
        status_code = 500

    monkeypatch.setattr("requests.Session.request", lambda self, **_kwargs: ServerError())
    config = _write_config(tmp_path, "")

    assert main(["ingest", "--config", str(config)]) == 20
