# visitrack/core/entry_types.py
from enum import Enum
from typing import Optional


class EntryType(str, Enum):
    MANUAL = "Manual"
    QR = "QR"


class VisitorStatus(str, Enum):
    REGISTRATION = "Registration"
    VISITED = "Visited"


# Values written by older clients, still present in stored documents
ENTRY_LOG_SYNONYMS = ["Manual", "manual", "QR", "qr", "QR Code", "qrcode"]

_NORMALIZED = {
    "manual": EntryType.MANUAL,
    "qr": EntryType.QR,
    "qrcode": EntryType.QR,
}


def normalize_entry_type(value) -> Optional[EntryType]:
    """Map any known spelling of an entry type to its canonical value"""
    if not isinstance(value, str):
        return None
    compact = "".join(value.split()).lower()
    return _NORMALIZED.get(compact)


def entry_log_filter() -> dict:
    return {"entryType": {"$in": ENTRY_LOG_SYNONYMS}}
