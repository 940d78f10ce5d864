from __future__ import annotations

import asyncio
import csv
import importlib.util
import json
from pathlib import Path

import pytest

from conftest import FakeExtractionClient, make_row

from assetsiq.core.errors import ServiceFailureError
from assetsiq.core.schema import ASSET_FIELDS

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "extract_folder.py"


@pytest.fixture(scope="module")
def extract_folder():
    spec = importlib.util.spec_from_file_location("extract_folder", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_reports(folder: Path, names: list[str]) -> None:
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_text("<html><body>report</body></html>", encoding="utf-8")


def test_folder_run_writes_exports(extract_folder, tmp_path, capsys):
    reports = tmp_path / "reports"
    output = tmp_path / "out"
    _write_reports(reports, ["PC-002.htm", "PC-001.html", "notes.txt"])
    client = FakeExtractionClient(
        {
            "PC-001.html": [make_row({"Computer Name": "FIN-01"})],
            "PC-002.htm": ServiceFailureError("model service returned HTTP 503", status_code=503),
        }
    )

    exit_code = asyncio.run(extract_folder.run(reports, ["csv", "json"], output, client=client))

    assert exit_code == 0
    assert client.calls == ["PC-001.html", "PC-002.htm"]

    csv_files = list(output.glob("AssetsIQ_Export_*.csv"))
    json_files = list(output.glob("AssetsIQ_Export_*.json"))
    assert len(csv_files) == 1 and len(json_files) == 1
    with csv_files[0].open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == list(ASSET_FIELDS)
    assert len(rows) == 2
    payload = json.loads(json_files[0].read_text(encoding="utf-8"))
    assert [item["Asset Tag"] for item in payload] == ["PC-001"]

    printed = capsys.readouterr().out
    assert "PC-001.html: 1 assets" in printed
    assert "PC-002.htm: error" in printed


def test_folder_without_reports_exits_with_failure(extract_folder, tmp_path):
    reports = tmp_path / "reports"
    _write_reports(reports, ["notes.txt"])
    client = FakeExtractionClient()

    exit_code = asyncio.run(extract_folder.run(reports, ["csv"], tmp_path / "out", client=client))

    assert exit_code == 1
    assert client.calls == []
    assert not (tmp_path / "out").exists()


def test_all_files_failing_exits_with_failure(extract_folder, tmp_path):
    reports = tmp_path / "reports"
    output = tmp_path / "out"
    _write_reports(reports, ["PC-001.html"])
    client = FakeExtractionClient({"PC-001.html": ServiceFailureError("model service returned HTTP 500")})

    exit_code = asyncio.run(extract_folder.run(reports, ["csv"], output, client=client))

    assert exit_code == 1
    assert list(output.glob("*.csv")) == []
