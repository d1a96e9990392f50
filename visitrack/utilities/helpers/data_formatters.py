# visitrack/utilities/helpers/data_formatters.py
from datetime import datetime
from typing import Dict, List, Any, Iterable, Optional
from bson import ObjectId


def convert_objectids_to_strings(data):
    """Convert ObjectIds (and datetimes) to JSON friendly values"""
    if isinstance(data, list):
        return [convert_objectids_to_strings(item) for item in data]
    elif isinstance(data, dict):
        converted = {}
        for key, value in data.items():
            if isinstance(value, ObjectId):
                converted[key] = str(value)
            elif isinstance(value, datetime):
                converted[key] = value.isoformat()
            elif isinstance(value, (list, dict)):
                converted[key] = convert_objectids_to_strings(value)
            else:
                converted[key] = value
        return converted
    elif isinstance(data, ObjectId):
        return str(data)
    elif isinstance(data, datetime):
        return data.isoformat()
    else:
        return data


def serialize_document(document: Optional[Dict], hidden: Iterable[str] = ()) -> Optional[Dict]:
    """Stringify ids and drop hidden fields from a stored document"""
    if document is None:
        return None
    cleaned = {key: value for key, value in document.items() if key not in set(hidden)}
    return convert_objectids_to_strings(cleaned)


def serialize_user(user: Optional[Dict]) -> Optional[Dict]:
    """User document without the password hash, with an `id` alias"""
    data = serialize_document(user, hidden=("password",))
    if data is not None and "_id" in data:
        data["id"] = data["_id"]
    return data


def total_pages_for(total_count: int, page_size: int) -> int:
    return (total_count + page_size - 1) // page_size if page_size > 0 else 0


def build_pagination_response(data: List[Dict], total_count: int,
                              page: int, page_size: int, items_key: str = "data") -> Dict[str, Any]:
    """Build standardized pagination response"""
    total_pages = total_pages_for(total_count, page_size)

    return {
        items_key: data,
        "totalCount": total_count,
        "totalPages": total_pages,
        "currentPage": page,
        "limit": page_size,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1
    }
