# visitrack/utilities/helpers/query_helpers.py
from typing import Dict, List, Optional, Tuple
import re

from ...config.setting import settings


VISITOR_DATASET_SEARCH_FIELDS = ["fullName", "email", "phoneNumber", "company", "city", "state", "country"]
VISITOR_SEARCH_FIELDS = ["fullName", "email", "phoneNumber", "company", "eventName"]


def build_search_conditions(search: Optional[str], fields: List[str]) -> List[Dict]:
    """Case-insensitive substring match across fields, user input escaped"""
    if not search or not search.strip():
        return []

    pattern = re.compile(re.escape(search.strip()), re.IGNORECASE)
    return [{field: pattern} for field in fields]


def resolve_pagination(page: Optional[int], limit: Optional[int],
                       default_limit: int = None) -> Tuple[int, int, int]:
    """Clamp page/limit and return (page, limit, skip)"""
    default_limit = default_limit or settings.DEFAULT_PAGE_SIZE

    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    limit = min(limit, settings.MAX_PAGE_SIZE)

    return page, limit, (page - 1) * limit


def paged(cursor, skip: int, limit: int, total_count: int) -> List:
    """One page of a sorted cursor; past the last page nothing is sent to MongoDB"""
    if skip >= total_count:
        return []
    return list(cursor.skip(skip).limit(limit))
