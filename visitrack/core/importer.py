# visitrack/core/importer.py
"""
Spreadsheet import for the visitor dataset

Uploads are staged to a temporary file, parsed with pandas into plain
row dicts, mapped onto dataset fields and turned into documents ready
for a single insert_many.
"""
import json
import math
import os
import tempfile
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger
from pydantic import BaseModel


SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xls"}

EXCEL_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}

DATASET_FIELDS = ["fullName", "email", "phoneNumber", "company", "city", "state", "country", "pincode"]
IDENTITY_FIELDS = ["fullName", "email", "phoneNumber"]
RESERVED_FIELDS = {"_id", "ownerId", "createdAt", "updatedAt"}
IGNORE_COLUMN = "ignore"

# Lower-cased header -> dataset field
HEADER_MAP: Dict[str, str] = {
    "name": "fullName",
    "full name": "fullName",
    "fullname": "fullName",
    "email": "email",
    "email address": "email",
    "phone": "phoneNumber",
    "phone number": "phoneNumber",
    "phonenumber": "phoneNumber",
    "mobile": "phoneNumber",
    "company": "company",
    "organization": "company",
    "city": "city",
    "state": "state",
    "country": "country",
    "pincode": "pincode",
    "pin code": "pincode",
    "postal code": "pincode",
    "zip code": "pincode",
    "zip": "pincode",
}


class SpreadsheetError(ValueError):
    """Upload could not be turned into rows"""


class ImportResult(BaseModel):
    imported: int = 0
    total: int = 0
    skipped: int = 0


def file_extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lower()


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _clean_value(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _frame_to_rows(frame: pd.DataFrame) -> List[Dict]:
    """Row dicts without blank cells; rows with no values are dropped"""
    rows = []
    headers = [str(column).strip() for column in frame.columns]
    for record in frame.itertuples(index=False, name=None):
        row = {}
        for header, value in zip(headers, record):
            if not header or header.startswith("Unnamed:") or _is_blank(value):
                continue
            row[header] = _clean_value(value)
        if row:
            rows.append(row)
    return rows


def read_rows(path: str, extension: str) -> List[Dict]:
    """Parse a staged spreadsheet into row dicts keyed by header"""
    try:
        if extension == ".csv":
            frame = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        else:
            frame = pd.read_excel(path, sheet_name=0, dtype=str, engine=EXCEL_ENGINES[extension])
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        raise SpreadsheetError(f"Failed to parse file: {e}") from e

    return _frame_to_rows(frame)


def stage_upload(content: bytes, extension: str, tmp_dir: Optional[str] = None) -> str:
    """Write upload bytes to a named temporary file and return its path"""
    if tmp_dir:
        os.makedirs(tmp_dir, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(delete=False, suffix=extension, dir=tmp_dir)
    try:
        handle.write(content)
    finally:
        handle.close()
    return handle.name


def discard_staged(path: Optional[str]):
    if not path:
        return
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as e:
        logger.warning(f"Could not remove staged upload {path}: {e}")


def parse_spreadsheet(content: bytes, filename: Optional[str], tmp_dir: Optional[str] = None) -> List[Dict]:
    """
    Stage and parse an uploaded CSV or Excel file

    Raises:
        SpreadsheetError: unsupported extension or unreadable content
    """
    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetError("Unsupported file format. Please upload CSV or Excel files.")

    path = None
    try:
        path = stage_upload(content, extension, tmp_dir)
        rows = read_rows(path, extension)
        logger.debug(f"Parsed {len(rows)} rows from {filename}")
        return rows
    finally:
        discard_staged(path)


def normalize_headers(row: Dict) -> Dict:
    """Rename known headers to dataset fields; unknown headers stay as they are"""
    normalized = {}
    for header, value in row.items():
        normalized[HEADER_MAP.get(header.strip().lower(), header)] = value
    return normalized


def parse_column_mappings(raw: Optional[str]) -> Dict[str, str]:
    """
    Decode the columnMappings form field

    Raises:
        ValueError: missing, malformed or empty mapping, a target that is not
        a plain field name, or a mapping that covers none of the identity fields
    """
    if not raw or not raw.strip():
        raise ValueError("No column mappings provided")

    try:
        mappings = json.loads(raw)
    except (TypeError, ValueError):
        raise ValueError("Invalid column mappings format")

    if not isinstance(mappings, dict) or not mappings:
        raise ValueError("No column mappings provided")

    for db_field in mappings.values():
        if db_field is None:
            continue
        if not isinstance(db_field, str) or db_field.startswith("$") or "." in db_field:
            raise ValueError("Invalid column mappings format")

    mapped_fields = {value for value in mappings.values() if value and value != IGNORE_COLUMN}
    if not mapped_fields.intersection(IDENTITY_FIELDS):
        raise ValueError("At least one required field (Full Name, Email, or Phone Number) must be mapped")

    return mappings


def apply_column_mappings(row: Dict, mappings: Dict[str, str]) -> Dict:
    mapped = {}
    for file_column, db_field in mappings.items():
        if not db_field or db_field == IGNORE_COLUMN:
            continue
        value = row.get(file_column)
        if _is_blank(value):
            continue
        mapped[db_field] = value
    return mapped


def has_identity(row: Dict) -> bool:
    return any(not _is_blank(row.get(field)) for field in IDENTITY_FIELDS)


def build_dataset_record(row: Dict, owner_id: str, now: datetime) -> Dict:
    record = {field: row.get(field) or "" for field in DATASET_FIELDS}
    if isinstance(record["email"], str):
        record["email"] = record["email"].strip().lower()
    for key, value in row.items():
        if key in record or key in RESERVED_FIELDS:
            continue
        record[key] = value
    record["ownerId"] = owner_id
    record["createdAt"] = now
    record["updatedAt"] = now
    return record


def build_dataset_records(rows: List[Dict], owner_id: str, now: datetime) -> List[Dict]:
    """Documents for every row that carries a name, email or phone number"""
    return [build_dataset_record(row, owner_id, now) for row in rows if has_identity(row)]
