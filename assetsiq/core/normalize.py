"""Local post-validation of model output.

The extraction model is asked to normalise several fields, but it does not
always comply.  These helpers coerce each returned row into the agreed
vocabulary so downstream exports never carry out-of-range values.
"""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from assetsiq.core.prompt import PROCESSOR_TYPES
from assetsiq.core.schema import ASSET_FIELDS, AssetRecord

PLACEHOLDER_VALUES = {
    "n/a",
    "na",
    "n.a.",
    "none",
    "null",
    "nil",
    "unknown",
    "not available",
    "not found",
    "-",
    "--",
}
BOOLEAN_TOKENS = {"true", "false", "yes", "no"}

_CANONICAL_TYPES = {value.lower(): value for value in PROCESSOR_TYPES}
_CORE_TIER = re.compile(r"(?<![a-z0-9])i([3579])(?![0-9])", re.IGNORECASE)
_CORE_MODEL_NUMBER = re.compile(r"(?<![a-z0-9])i[3579]\s*-\s*(\d{4,5})(g\d)?", re.IGNORECASE)
_GENERATION_LABEL = re.compile(r"(\d{1,2})\s*(?:st|nd|rd|th)?\s*gen(?:eration)?\b", re.IGNORECASE)
_MEMORY_UNIT = r"(tib|tb|gib|gb|g|mib|mb|m|kib|kb|k)"
_MEMORY_AMOUNT = re.compile(
    r"(?<![a-z0-9.,])(\d[\d,]*(?:\.\d+)?)\s*" + _MEMORY_UNIT + r"?(?![a-z])",
    re.IGNORECASE,
)
_MEMORY_MODULES = re.compile(
    r"(?<![a-z0-9.,])(\d+)\s*[x×]\s*(\d[\d,]*(?:\.\d+)?)\s*" + _MEMORY_UNIT + r"(?![a-z])",
    re.IGNORECASE,
)
_THOUSANDS_SEPARATOR = re.compile(r",(?=\d{3}(?!\d))")

_UNIT_TO_GB = {
    None: Decimal(1),
    "tib": Decimal(1024),
    "tb": Decimal(1024),
    "gib": Decimal(1),
    "gb": Decimal(1),
    "g": Decimal(1),
    "mib": Decimal(1) / Decimal(1024),
    "mb": Decimal(1) / Decimal(1024),
    "m": Decimal(1) / Decimal(1024),
    "kib": Decimal(1) / Decimal(1024 * 1024),
    "kb": Decimal(1) / Decimal(1024 * 1024),
    "k": Decimal(1) / Decimal(1024 * 1024),
}
# Bare numbers at or above this are megabyte readings such as "8192".
_BARE_MEGABYTE_THRESHOLD = Decimal(512)


def _ordinal(number: int) -> str:
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def clean_placeholder(value: str) -> str:
    stripped = value.strip()
    if stripped.lower() in PLACEHOLDER_VALUES:
        return ""
    return stripped


def normalise_processor_type(value: str) -> str:
    """Collapse a processor description into the closed family vocabulary."""

    raw = value.strip()
    if not raw:
        return ""
    canonical = _CANONICAL_TYPES.get(raw.lower())
    if canonical:
        return canonical

    lowered = raw.lower()
    if "xeon" in lowered:
        return "Xeon"
    if "pentium" in lowered:
        return "Pentium"
    tier = _CORE_TIER.search(raw)
    if tier and f"i{tier.group(1)}" in _CANONICAL_TYPES:
        return f"i{tier.group(1)}"
    if any(token in lowered for token in ("amd", "ryzen", "athlon", "epyc", "threadripper")):
        return "AMD"
    if any(token in lowered for token in ("intel", "core", "celeron", "atom")) or tier:
        return "Intel"
    return ""


def infer_generation(*sources: str) -> str:
    """Return an "Nth Gen" label from explicit markers or an Intel Core model number."""

    for source in sources:
        match = _GENERATION_LABEL.search(source)
        if match:
            return f"{_ordinal(int(match.group(1)))} Gen"
    for source in sources:
        match = _CORE_MODEL_NUMBER.search(source)
        if match:
            digits = match.group(1)
            # i5-10500 and mobile parts such as i7-1165G7 carry a two-digit generation.
            two_digit = len(digits) == 5 or (match.group(2) and digits.startswith("1"))
            generation = int(digits[:2]) if two_digit else int(digits[0])
            if generation > 0:
                return f"{_ordinal(generation)} Gen"
    return ""


def _parse_amount(text: str) -> Decimal | None:
    try:
        return Decimal(_THOUSANDS_SEPARATOR.sub("", text).replace(",", "."))
    except InvalidOperation:
        return None


def _to_gigabytes(amount: Decimal, unit: str | None) -> Decimal:
    unit = unit.lower() if unit else None
    if unit is None and amount >= _BARE_MEGABYTE_THRESHOLD:
        unit = "mb"
    return amount * _UNIT_TO_GB[unit]


def normalise_ram(value: str) -> str:
    """Round a memory reading to whole gigabytes, returned without a unit.

    ``2 x 8 GB`` style module listings are summed.  Otherwise the first
    amount that carries a unit wins over bare numbers.
    """

    raw = value.strip()
    if not raw or raw.lower() in BOOLEAN_TOKENS:
        return ""

    modules = _MEMORY_MODULES.search(raw)
    if modules:
        size = _parse_amount(modules.group(2))
        if size is None:
            return ""
        gigabytes = int(modules.group(1)) * _to_gigabytes(size, modules.group(3))
    else:
        matches = list(_MEMORY_AMOUNT.finditer(raw))
        if not matches:
            return ""
        match = next((item for item in matches if item.group(2)), matches[0])
        amount = _parse_amount(match.group(1))
        if amount is None:
            return ""
        gigabytes = _to_gigabytes(amount, match.group(2))

    rounded = gigabytes.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return str(int(rounded))


def normalise_record(record: AssetRecord) -> AssetRecord:
    row = {name: clean_placeholder(value) for name, value in record.to_row().items()}

    raw_processor = row["Processor Type"]
    row["Processor Type"] = normalise_processor_type(raw_processor)
    row["Processor Generation"] = infer_generation(row["Processor Generation"], raw_processor)
    row["RAM (GB)"] = normalise_ram(row["RAM (GB)"])

    return AssetRecord.model_validate({name: row[name] for name in ASSET_FIELDS})
