"""Spreadsheet ingestion: turn uploaded place lists into validated ``Place`` records.

Rows are normalized through a header synonym table, validated, geocoded
(once per distinct address in a batch) and tagged with a region. Nothing is
written to the repository until the whole batch has been parsed.
"""
from __future__ import annotations

import hashlib
import io
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

import pandas as pd

from . import config
from .geocoding import Geocoder
from .models import Coordinates, Place
from .regions import resolve_region
from .repository import PlaceRepository

logger = logging.getLogger(__name__)


class IngestionError(RuntimeError):
    pass


FIELD_SYNONYMS: Dict[str, tuple] = {
    "name": ("업체명", "상호", "상호명", "공장명", "회사명", "사업체명", "업체", "name", "company"),
    "address": ("주소", "소재지", "사업장주소", "공장주소", "도로명주소", "address"),
    "representative": ("대표자", "대표", "대표자명", "대표이사", "representative", "ceo"),
    "tel": ("전화번호", "연락처", "전화", "대표번호", "tel", "phone"),
    config.AGGREGATE_TYPE_FIELD: ("골재원", "골재원(종류)", "골재종류", "골재", "aggregate_type", "aggregatetype"),
}

_HEADER_LOOKUP: Dict[str, str] = {
    synonym.replace(" ", "").lower(): canonical
    for canonical, synonyms in FIELD_SYNONYMS.items()
    for synonym in synonyms
}

_NON_DIGITS = re.compile(r"\D")


@dataclass
class IngestionResult:
    places: List[Place] = field(default_factory=list)
    total_rows: int = 0
    skipped_missing_fields: int = 0
    skipped_geocode: int = 0
    skipped_duplicates: int = 0
    geocode_calls: int = 0
    cancelled: bool = False
    added: int = 0


def validate_upload(filename: str, size: int) -> None:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in config.UPLOAD_ALLOWED_EXTENSIONS:
        raise IngestionError(
            "Unsupported file type; only "
            + ", ".join(config.UPLOAD_ALLOWED_EXTENSIONS)
            + " files can be uploaded"
        )
    if size > config.UPLOAD_MAX_BYTES:
        raise IngestionError(
            f"File is too large: {size} bytes (limit {config.UPLOAD_MAX_BYTES} bytes)"
        )


def read_rows(payload: bytes) -> List[Dict[str, Any]]:
    """Rows of the first sheet as dicts keyed by the raw header text."""
    try:
        frame = pd.read_excel(io.BytesIO(payload), sheet_name=0, dtype=str)
    except Exception as exc:
        raise IngestionError(f"Cannot read spreadsheet: {exc}") from exc
    if frame.empty:
        raise IngestionError("Spreadsheet has no data rows")
    return frame.to_dict(orient="records")


def _clean_cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def normalize_header(header: Any) -> Optional[str]:
    key = str(header).replace(" ", "").strip().lower()
    return _HEADER_LOOKUP.get(key)


def normalize_row(row: Dict[str, Any]) -> Dict[str, str]:
    """Map raw headers onto canonical field names; the first non-empty synonym wins."""
    out: Dict[str, str] = {}
    for header, value in row.items():
        canonical = normalize_header(header)
        if canonical is None or canonical in out:
            continue
        cleaned = _clean_cell(value)
        if cleaned is not None:
            out[canonical] = cleaned
    return out


def format_phone(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    digits = _NON_DIGITS.sub("", text)
    n = len(digits)
    if n == 9:
        return f"{digits[:2]}-{digits[2:5]}-{digits[5:]}"
    if n == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    if n == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if n == 12:
        return f"{digits[:4]}-{digits[4:8]}-{digits[8:]}"
    return text


def default_id_prefix(category: str) -> str:
    return category[:2]


def make_place_id(prefix: str, category: str, name: str, address: str) -> str:
    raw = f"{category}|{name}|{address}".encode("utf-8")
    return f"{prefix}-{hashlib.sha256(raw).hexdigest()[:12]}"


def parse_rows(
    rows: List[Dict[str, Any]],
    category: str,
    geocoder: Geocoder,
    id_prefix: Optional[str] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> IngestionResult:
    if category not in config.PLACE_CATEGORIES:
        raise IngestionError(f"Unknown category: {category!r}")

    prefix = id_prefix or default_id_prefix(category)
    result = IngestionResult(total_rows=len(rows))
    geocode_cache: Dict[str, Optional[Coordinates]] = {}
    seen_ids: Set[str] = set()

    for index, raw in enumerate(rows):
        if should_cancel is not None and should_cancel():
            logger.info("Ingestion cancelled after %s of %s rows", index, len(rows))
            result.cancelled = True
            break

        row = normalize_row(raw)
        name = row.get("name")
        address = row.get("address")
        if not name or not address:
            result.skipped_missing_fields += 1
            continue

        if address not in geocode_cache:
            result.geocode_calls += 1
            geocode_cache[address] = geocoder.geocode(address)
        coords = geocode_cache[address]
        if coords is None:
            logger.warning("Skipping row %s: address %r could not be geocoded", index, address)
            result.skipped_geocode += 1
            continue

        place_id = make_place_id(prefix, category, name, address)
        if place_id in seen_ids:
            result.skipped_duplicates += 1
            continue

        aggregate_type = None
        if category == config.CATEGORY_AGGREGATE:
            aggregate_type = row.get(config.AGGREGATE_TYPE_FIELD)

        try:
            place = Place(
                id=place_id,
                name=name,
                address=address,
                region=resolve_region(address),
                category=category,
                lat=coords.lat,
                lng=coords.lng,
                representative=row.get("representative"),
                tel=format_phone(row.get("tel")),
                aggregate_type=aggregate_type,
            )
        except ValueError as exc:
            logger.warning("Skipping row %s: %s", index, exc)
            result.skipped_geocode += 1
            continue

        seen_ids.add(place_id)
        result.places.append(place)

    logger.info(
        "Parsed %s/%s rows for %s (missing fields=%s, geocode failures=%s, duplicates=%s)",
        len(result.places),
        result.total_rows,
        category,
        result.skipped_missing_fields,
        result.skipped_geocode,
        result.skipped_duplicates,
    )
    return result


def parse_places(
    payload: bytes,
    category: str,
    geocoder: Geocoder,
    id_prefix: Optional[str] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> IngestionResult:
    rows = read_rows(payload)
    return parse_rows(rows, category, geocoder, id_prefix=id_prefix, should_cancel=should_cancel)


def import_spreadsheet(
    repository: PlaceRepository,
    payload: bytes,
    category: str,
    geocoder: Geocoder,
    id_prefix: Optional[str] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> IngestionResult:
    """Parse a whole upload, then add the complete records to ``repository``."""
    result = parse_places(
        payload, category, geocoder, id_prefix=id_prefix, should_cancel=should_cancel
    )
    if not result.places and not result.cancelled:
        raise IngestionError("No valid place rows found; check the spreadsheet columns")
    result.added = len(repository.add_places(result.places))
    return result


def import_file(
    repository: PlaceRepository,
    path: str,
    category: str,
    geocoder: Geocoder,
    id_prefix: Optional[str] = None,
) -> IngestionResult:
    size = os.path.getsize(path)
    validate_upload(path, size)
    with open(path, "rb") as f:
        payload = f.read()
    return import_spreadsheet(repository, payload, category, geocoder, id_prefix=id_prefix)
