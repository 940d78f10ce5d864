from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from assetsiq.core.errors import RecordSchemaError


ASSET_FIELDS: tuple[str, ...] = (
    "Asset Tag",
    "Block",
    "Floor",
    "Dept",
    "Brand",
    "Service Tag",
    "Computer Name",
    "Processor Type",
    "Processor Generation",
    "Processor Speed (GHz)",
    "RAM (GB)",
    "Hard Drive Type",
    "Hard Drive Size",
    "Graphics Card",
    "Operating System OS",
    "Windows License Key",
    "Installed Applications",
    "Antivirus",
    "IP Address",
    "Remarks",
)


class AssetRecord(BaseModel):
    """One device row of the inventory; every field is a string, blank when unknown."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    asset_tag: str = Field(default="", alias="Asset Tag")
    block: str = Field(default="", alias="Block")
    floor: str = Field(default="", alias="Floor")
    dept: str = Field(default="", alias="Dept")
    brand: str = Field(default="", alias="Brand")
    service_tag: str = Field(default="", alias="Service Tag")
    computer_name: str = Field(default="", alias="Computer Name")
    processor_type: str = Field(default="", alias="Processor Type")
    processor_generation: str = Field(default="", alias="Processor Generation")
    processor_speed_ghz: str = Field(default="", alias="Processor Speed (GHz)")
    ram_gb: str = Field(default="", alias="RAM (GB)")
    hard_drive_type: str = Field(default="", alias="Hard Drive Type")
    hard_drive_size: str = Field(default="", alias="Hard Drive Size")
    graphics_card: str = Field(default="", alias="Graphics Card")
    operating_system: str = Field(default="", alias="Operating System OS")
    windows_license_key: str = Field(default="", alias="Windows License Key")
    installed_applications: str = Field(default="", alias="Installed Applications")
    antivirus: str = Field(default="", alias="Antivirus")
    ip_address: str = Field(default="", alias="IP Address")
    remarks: str = Field(default="", alias="Remarks")

    def to_row(self) -> dict[str, str]:
        """Return the record keyed by wire field names in export order."""

        return self.model_dump(by_alias=True)

    def with_asset_tag(self, asset_tag: str) -> "AssetRecord":
        return self.model_copy(update={"asset_tag": asset_tag})


def records_from_payload(payload: Any) -> list[AssetRecord]:
    """Validate a decoded JSON payload as an array of complete asset rows.

    Every element must be an object carrying all of :data:`ASSET_FIELDS` with
    string values; an empty string is allowed but a missing key is not.
    """

    if not isinstance(payload, list):
        raise RecordSchemaError(f"expected a JSON array, got {type(payload).__name__}")

    records: list[AssetRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise RecordSchemaError(f"item {index} is not an object")
        missing = [name for name in ASSET_FIELDS if name not in item]
        if missing:
            raise RecordSchemaError(f"item {index} is missing fields: {', '.join(missing)}")
        try:
            records.append(AssetRecord.model_validate({name: item[name] for name in ASSET_FIELDS}))
        except ValidationError as exc:
            raise RecordSchemaError(f"item {index} has non-string values") from exc
    return records
