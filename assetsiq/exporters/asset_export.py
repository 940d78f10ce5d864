from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal

import pandas as pd
from openpyxl.worksheet.worksheet import Worksheet

from assetsiq.core.schema import ASSET_FIELDS, AssetRecord, records_from_payload

ExportFormat = Literal["csv", "xlsx", "json"]

EXPORT_PREFIX = "AssetsIQ_Export"
EXPORT_FORMATS: tuple[str, ...] = ("csv", "xlsx", "json")
SHEET_NAME = "Assets"

MEDIA_TYPES: dict[str, str] = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "json": "application/json",
}


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    content: bytes
    filename: str
    media_type: str


def export_filename(fmt: ExportFormat, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"{EXPORT_PREFIX}_{stamp}.{fmt}"


def records_to_frame(records: Iterable[AssetRecord]) -> pd.DataFrame:
    rows = [record.to_row() for record in records]
    return pd.DataFrame(rows, columns=list(ASSET_FIELDS), dtype=str)


def _force_text_cells(sheet: Worksheet) -> None:
    # openpyxl marks strings starting with "=" as formulas
    for row in sheet.iter_rows():
        for cell in row:
            if isinstance(cell.value, str):
                cell.data_type = "s"


def encode(records: Iterable[AssetRecord], fmt: ExportFormat, *, today: date | None = None) -> ExportArtifact | None:
    """Serialise records for download; returns ``None`` when there is nothing to export."""

    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"unsupported export format: {fmt}")

    items = list(records)
    if not items:
        return None

    if fmt == "json":
        content = json.dumps([record.to_row() for record in items], indent=2, ensure_ascii=False).encode("utf-8")
    elif fmt == "csv":
        content = records_to_frame(items).to_csv(index=False, lineterminator="\n").encode("utf-8")
    else:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            records_to_frame(items).to_excel(writer, index=False, sheet_name=SHEET_NAME)
            _force_text_cells(writer.sheets[SHEET_NAME])
        content = buffer.getvalue()

    return ExportArtifact(content=content, filename=export_filename(fmt, today), media_type=MEDIA_TYPES[fmt])


def decode_json(content: bytes | str) -> list[AssetRecord]:
    """Read records back from a JSON export."""

    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return records_from_payload(json.loads(content))
