"""Request contract sent to the extraction model: instruction text and output schema."""
from __future__ import annotations

from typing import Any

from assetsiq.core.schema import ASSET_FIELDS

PROCESSOR_TYPES: tuple[str, ...] = ("i5", "i7", "i9", "Pentium", "Xeon", "Intel", "AMD")

FIELD_DESCRIPTIONS: dict[str, str] = {
    "Asset Tag": "The asset tag (derived from filename).",
    "Block": "Building block or location code.",
    "Floor": "Floor number or level.",
    "Dept": "Department name.",
    "Brand": "Device brand/manufacturer (e.g., Dell, HP).",
    "Service Tag": "System Serial Number from System Model section.",
    "Computer Name": "Hostname or computer name.",
    "Processor Type": "CPU model identifier (i5, i7, i9, Pentium, Xeon, Intel, AMD).",
    "Processor Generation": "CPU generation (e.g., 10th Gen, 11th Gen).",
    "Processor Speed (GHz)": "CPU clock speed.",
    "RAM (GB)": "Total memory capacity in rounded GB (integer only).",
    "Hard Drive Type": "SSD or HDD.",
    "Hard Drive Size": "Storage capacity.",
    "Graphics Card": "GPU model.",
    "Operating System OS": "OS name and version.",
    "Windows License Key": "Product key if available.",
    "Installed Applications": "Comma separated list of key software installed.",
    "Antivirus": "Antivirus software name.",
    "IP Address": "Network IP address.",
    "Remarks": "Any additional notes or comments.",
}


def build_response_schema() -> dict[str, Any]:
    """Array of objects with exactly the asset fields, all required strings."""

    item = {
        "type": "OBJECT",
        "properties": {
            name: {"type": "STRING", "description": FIELD_DESCRIPTIONS[name]} for name in ASSET_FIELDS
        },
        "required": list(ASSET_FIELDS),
        "propertyOrdering": list(ASSET_FIELDS),
    }
    return {"type": "ARRAY", "items": item}


def build_instruction(asset_tag: str) -> str:
    processor_types = ", ".join(f'"{value}"' for value in PROCESSOR_TYPES)
    field_list = ", ".join(ASSET_FIELDS)
    return f"""You are an expert data extractor for "AssetsIQ".
Analyze the provided HTML content and extract IT Asset details according to STRICT rules.

CRITICAL EXTRACTION RULES:
1. **Asset Tag**: I will programmatically set this to "{asset_tag}", but please include it in the JSON as "{asset_tag}".
2. **Service Tag (Serial Number)**:
   - Extract the Serial Number *ONLY* from the section titled "System Model", specifically looking for the field "System Serial Number".
   - Do NOT look in "Main Circuit Board", "Chassis", or "BIOS" for this specific value.
   - If "System Serial Number" under "System Model" is not found, leave this field BLANK ("").
3. **Processor Type**: Standardize the output.
   - The value MUST be one of these exact strings (case-insensitive mapping): {processor_types}.
   - Example: "Intel(R) Core(TM) i5-10500" -> "i5".
   - Example: "AMD Ryzen 5" -> "AMD".
   - If it contains "Intel" but not a specific family like i5/i7, output "Intel".
4. **Processor Generation**: Extract the generation if available (e.g., "10th Gen", "11th Gen"). If implied by the model (e.g. i5-10500), infer "10th Gen". Otherwise leave it blank.
5. **RAM (GB)**: Return the total memory as a ROUNDED INTEGER representing Gigabytes.
   - Example: "8192 MB" -> "8". "16384 MB" -> "16". "7.8 GB" -> "8".
   - **DO NOT** return boolean values (true/false).
   - **DO NOT** return units like "GB". Just the number string.

Extract the following fields:
{field_list}.

For "Installed Applications", return a comma-separated string.
If a field is missing, return an empty string. Never use placeholders such as "N/A" or "unknown".
Return one object per device described in the document.
"""
