import csv
import io
import json

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from conftest import FakeExtractionClient, make_row

from assetsiq.application import get_inventory_service, reset_inventory_state
from assetsiq.core.errors import ServiceFailureError
from assetsiq.core.schema import ASSET_FIELDS
from assetsiq.core.settings import Settings
from assetsiq.infrastructure import (
    GeminiExtractionClient,
    configure_extraction_client,
    get_extraction_client,
    reset_extraction_client,
)
from assetsiq.workers.pipeline import UploadedDocument

REPORT = b"<html><head><script>track()</script></head><body><h2>System Model</h2></body></html>"


@pytest.fixture(autouse=True)
def reset_state():
    reset_inventory_state()
    yield
    reset_inventory_state()
    reset_extraction_client()


@pytest.fixture()
def fake_client():
    return FakeExtractionClient(
        {
            "PC-001.html": [
                make_row({"Computer Name": "FIN-01", "Processor Type": "i5", "RAM (GB)": "8"}),
                make_row({"Computer Name": "FIN-02", "Processor Type": "i7", "RAM (GB)": "16"}),
            ],
            "PC-002.htm": ServiceFailureError("model service returned HTTP 503", status_code=503),
            "PC-003.MHTML": [make_row({"Computer Name": "LAB-03"})],
        }
    )


@pytest.fixture()
def client(monkeypatch, fake_client):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    from assetsiq.app import create_app

    app = create_app()
    configure_extraction_client(fake_client)
    with TestClient(app) as test_client:
        yield test_client


def _upload(client: TestClient, names: list[tuple[str, str]], source: str | None = None):
    files = [("files", (name, REPORT, content_type)) for name, content_type in names]
    data = {"source": source} if source else None
    return client.post("/api/batches", files=files, data=data)


def test_end_to_end_batch_and_exports(client, fake_client):
    # 1. upload a batch; the response lists every file as pending
    response = _upload(client, [("PC-001.html", "text/html"), ("PC-002.htm", "text/html")])
    assert response.status_code == 200
    body = response.json()
    assert [item["filename"] for item in body["items"]] == ["PC-001.html", "PC-002.htm"]
    assert {item["status"] for item in body["items"]} == {"pending"}

    # 2. processing has finished: one success, one isolated failure
    overview = client.get("/api/batches/current").json()
    assert overview["processing"] is False
    assert overview["batch_error"] is None
    files = {item["filename"]: item for item in overview["files"]}
    assert files["PC-001.html"]["status"] == "complete"
    assert files["PC-001.html"]["items_found"] == 2
    assert files["PC-002.htm"]["status"] == "error"
    assert files["PC-002.htm"]["items_found"] == 0
    assert "503" in files["PC-002.htm"]["error"]
    assert overview["summary"] == {"total": 2, "by_status": {"complete": 1, "error": 1}, "assets": 2}
    assert fake_client.calls == ["PC-001.html", "PC-002.htm"]

    # 3. accumulated records carry the filename-derived asset tag
    assets = client.get("/api/assets").json()
    assert assets["count"] == 2
    assert [item["Asset Tag"] for item in assets["items"]] == ["PC-001", "PC-001"]
    assert list(assets["items"][0].keys()) == list(ASSET_FIELDS)

    # 4. exports
    csv_response = client.get("/api/assets/export", params={"format": "csv"})
    assert csv_response.status_code == 200
    disposition = csv_response.headers["content-disposition"]
    assert "AssetsIQ_Export_" in disposition and disposition.endswith('.csv"')
    rows = list(csv.reader(io.StringIO(csv_response.content.decode("utf-8"))))
    assert rows[0] == list(ASSET_FIELDS)
    assert [row[ASSET_FIELDS.index("Computer Name")] for row in rows[1:]] == ["FIN-01", "FIN-02"]

    json_response = client.get("/api/assets/export", params={"format": "json"})
    assert json_response.status_code == 200
    assert json.loads(json_response.content) == assets["items"]

    xlsx_response = client.get("/api/assets/export", params={"format": "xlsx"})
    assert xlsx_response.status_code == 200
    sheet = load_workbook(io.BytesIO(xlsx_response.content))["Assets"]
    assert len(list(sheet.iter_rows(values_only=True))) == 3

    # 5. clear everything; exports become no-ops
    cleared = client.delete("/api/assets")
    assert cleared.status_code == 200
    assert client.get("/api/assets").json()["count"] == 0
    assert client.get("/api/batches/current").json()["files"] == []
    assert client.get("/api/assets/export", params={"format": "csv"}).status_code == 204


def test_records_accumulate_across_batches(client):
    _upload(client, [("PC-001.html", "text/html")])
    _upload(client, [("PC-003.MHTML", "multipart/related")])

    overview = client.get("/api/batches/current").json()
    assert [item["filename"] for item in overview["files"]] == ["PC-003.MHTML"]
    tags = [item["Asset Tag"] for item in client.get("/api/assets").json()["items"]]
    assert tags == ["PC-001", "PC-001", "PC-003"]


def test_dropped_files_are_filtered(client, fake_client):
    response = _upload(
        client,
        [("notes.txt", "text/plain"), ("PC-003.MHTML", "application/octet-stream"), ("page", "text/html")],
        source="drop",
    )
    assert response.status_code == 200
    assert [item["filename"] for item in response.json()["items"]] == ["PC-003.MHTML", "page"]
    assert fake_client.calls == ["PC-003.MHTML", "page"]


def test_drop_with_only_unsupported_files_is_rejected(client):
    response = _upload(client, [("notes.txt", "text/plain")], source="drop")
    assert response.status_code == 400


def test_picker_files_are_not_filtered(client, fake_client):
    response = _upload(client, [("notes.txt", "text/plain")], source="picker")
    assert response.status_code == 200

    overview = client.get("/api/batches/current").json()
    assert overview["files"] == [{"filename": "notes.txt", "status": "complete", "items_found": 0, "error": None}]
    assert fake_client.calls == ["notes.txt"]


def test_unknown_source_is_rejected(client):
    response = _upload(client, [("PC-001.html", "text/html")], source="clipboard")
    assert response.status_code == 400


def test_concurrent_batch_is_refused(client):
    service = get_inventory_service()
    service.start_batch([UploadedDocument(filename="busy.html", data=REPORT)])

    response = _upload(client, [("PC-001.html", "text/html")])
    assert response.status_code == 409

    assert client.delete("/api/assets").status_code == 409


def test_missing_credential_marks_files_as_error(client):
    reset_extraction_client()

    _upload(client, [("PC-001.html", "text/html")])

    overview = client.get("/api/batches/current").json()
    job = overview["files"][0]
    assert job["status"] == "error"
    assert "GEMINI_API_KEY" in job["error"]
    assert overview["batch_error"] is None
    assert client.get("/api/assets").json()["count"] == 0


def test_export_rejects_unknown_format(client):
    response = client.get("/api/assets/export", params={"format": "pdf"})
    assert response.status_code == 400


def test_root_landing_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "AssetsIQ API"


def test_shutdown_closes_the_model_client():
    from assetsiq.app import create_app

    app = create_app(Settings(gemini_api_key="test-key"))
    installed = get_extraction_client()
    assert isinstance(installed, GeminiExtractionClient)

    with TestClient(app) as test_client:
        assert test_client.get("/").status_code == 200
        assert not installed._client.is_closed

    assert installed._client.is_closed
