"""
Ingestion: Decode Uploaded Files Into Rows

Turns CSV, Excel and JSON payloads into the list-of-mappings shape the
profiler consumes. No typing happens here beyond what the decoders do by
themselves: CSV cells stay text so that the normalizer sees "1,234" rather
than a half-parsed value.
"""

import csv
import datetime as dt
import io
import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..core.exceptions import InvalidPayloadError, UnsupportedFileError

logger = logging.getLogger("autodash.ingestion")

MAX_FLATTEN_DEPTH = 3


def parse_upload(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """
    Decode an uploaded file based on its extension.

    Raises:
        UnsupportedFileError: For extensions other than csv/xlsx/json.
        InvalidPayloadError: When the content cannot be decoded.
    """
    name = (filename or "").lower()
    logger.info("parse_upload: %s (%d bytes)", filename, len(content))

    if name.endswith(".csv"):
        return records_from_csv(content)
    if name.endswith(".xlsx"):
        return records_from_excel(content)
    if name.endswith(".json"):
        return records_from_json(_decode(content))

    raise UnsupportedFileError("Unsupported file type. Please upload a CSV, Excel (.xlsx) or JSON file.")


# ─── CSV ─────────────────────────────────────────────────────────────


def records_from_csv(content: bytes) -> List[Dict[str, Any]]:
    text = _decode(content)
    if not text.strip():
        return []
    delimiter = _detect_delimiter(text)
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise InvalidPayloadError(f"CSV parsing failed: {e}") from e

    logger.debug("records_from_csv: %d rows, delimiter=%r", len(df), delimiter)
    return df.to_dict(orient="records")


# ─── Excel ───────────────────────────────────────────────────────────


def records_from_excel(content: bytes) -> List[Dict[str, Any]]:
    """Read the first sheet of a workbook."""
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object, engine="openpyxl")
    except Exception as e:
        raise InvalidPayloadError(f"Excel parsing failed: {e}") from e

    df = df.dropna(how="all")
    records = [
        {str(k): _excel_cell(v) for k, v in rec.items()}
        for rec in df.to_dict(orient="records")
    ]
    logger.debug("records_from_excel: %d rows", len(records))
    return records


def _excel_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (pd.Timestamp, dt.datetime, dt.date)):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


# ─── JSON ────────────────────────────────────────────────────────────


def records_from_json(text: str) -> List[Dict[str, Any]]:
    """
    Extract flat records from a JSON document.

    Accepts a top-level array, an object holding an array of objects
    somewhere in its tree (first one found wins), or JSON Lines. Nested
    objects are flattened into dotted keys.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        payload = _json_lines(text)
        if payload is None:
            raise InvalidPayloadError("Invalid JSON payload")

    rows = payload if isinstance(payload, list) else _find_record_array(payload)
    if rows is None:
        raise InvalidPayloadError("No tabular array found in JSON")

    return [flatten_object(r) if isinstance(r, dict) else {"value": r} for r in rows]


def flatten_object(obj: Any, prefix: str = "", out: Optional[Dict[str, Any]] = None, depth: int = 0) -> Dict[str, Any]:
    """Flatten nested dicts into ``a.b.c`` keys; arrays are kept as values."""
    if out is None:
        out = {}
    if not isinstance(obj, dict) or depth > MAX_FLATTEN_DEPTH:
        out[prefix or "value"] = obj
        return out
    for key, value in obj.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flatten_object(value, path, out, depth + 1)
        else:
            out[path] = value
    return out


def _find_record_array(obj: Any) -> Optional[List[Any]]:
    if not isinstance(obj, dict):
        return None
    for value in obj.values():
        if isinstance(value, list) and value and isinstance(value[0], dict):
            return value
        if isinstance(value, dict):
            found = _find_record_array(value)
            if found is not None:
                return found
    return None


def _json_lines(text: str) -> Optional[List[Any]]:
    records = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError:
            return None
    return records or None


# ─── Helpers ─────────────────────────────────────────────────────────


def _decode(content: bytes) -> str:
    """Decode bytes trying common encodings in order."""
    for encoding in ("utf-8-sig", "utf-8", "latin-1", "cp1252"):
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    return content.decode("utf-8", errors="replace")


def _detect_delimiter(sample: str) -> str:
    """Detect CSV delimiter from sample text."""
    try:
        dialect = csv.Sniffer().sniff(sample[:4096], delimiters=",;\t|")
        return dialect.delimiter
    except csv.Error:
        return ","
