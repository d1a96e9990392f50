# visitrack/core/page_access.py
"""
Per-user page access flags

Flags live on the user document as top-level fields named "<page>:true".
The suffix is part of the field name, not the value: {"reports:true": false}
means the user has no access to reports.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel
from pymongo.errors import PyMongoError

FIELD_SUFFIX = ":true"


class PageKey(str, Enum):
    DASHBOARD = "dashboard"
    VISITORS = "visitors"
    EVENTS = "events"
    BADGE_MANAGEMENT = "badge-management"
    FORM_BUILDER = "form-builder"
    MESSAGES = "messages"
    ENTRY_LOG = "entry-log"
    SCANNER = "scanner"
    REPORTS = "reports"
    SETTING = "setting"
    PROFILE = "profile"

    @property
    def field_name(self) -> str:
        return f"{self.value}{FIELD_SUFFIX}"

    @property
    def path(self) -> str:
        return PAGE_PATHS[self]

    @classmethod
    def from_field_name(cls, field_name: str) -> Optional["PageKey"]:
        if not isinstance(field_name, str) or not field_name.endswith(FIELD_SUFFIX):
            return None
        try:
            return cls(field_name[:-len(FIELD_SUFFIX)])
        except ValueError:
            return None


PAGE_PATHS: Dict[PageKey, str] = {
    PageKey.DASHBOARD: "/admin",
    PageKey.VISITORS: "/admin/visitors",
    PageKey.EVENTS: "/admin/events",
    PageKey.BADGE_MANAGEMENT: "/admin/badge-management",
    PageKey.FORM_BUILDER: "/admin/forms",
    PageKey.MESSAGES: "/admin/messages",
    PageKey.ENTRY_LOG: "/admin/entry-log",
    PageKey.SCANNER: "/admin/scanner",
    PageKey.REPORTS: "/admin/reports",
    PageKey.SETTING: "/admin/settings",
    PageKey.PROFILE: "/admin/profile",
}

PATH_TO_PAGE: Dict[str, PageKey] = {path: key for key, path in PAGE_PATHS.items()}

# Presence of this field marks a user as migrated
BACKFILL_MARKER = PageKey.DASHBOARD.field_name


class PageAccess(BaseModel):
    """Typed view of the page flags on a user document"""
    flags: Dict[PageKey, bool]

    @classmethod
    def from_document(cls, user: Mapping) -> "PageAccess":
        return cls(flags={key: has_page_access(user, key) for key in PageKey})

    def to_document(self) -> Dict[str, bool]:
        return {key.field_name: bool(value) for key, value in self.flags.items()}

    def allows(self, key: PageKey) -> bool:
        return self.flags.get(key) is True


def generate_default_page_access() -> Dict[str, bool]:
    """Storage fields granting every page, applied to new users"""
    return {key.field_name: True for key in PageKey}


def has_page_access(user: Optional[Mapping], key: PageKey) -> bool:
    # Absent field is a denial
    if not user:
        return False
    return user.get(key.field_name) is True


def has_page_access_by_path(user: Optional[Mapping], path: str) -> bool:
    key = PATH_TO_PAGE.get(path)
    if key is None:
        return False
    return has_page_access(user, key)


def get_accessible_pages(user: Optional[Mapping]) -> List[str]:
    return [key.path for key in PageKey if has_page_access(user, key)]


def validate_page_access(mapping) -> bool:
    """True when every key is a known page field and every value a bool"""
    if not isinstance(mapping, Mapping):
        return False
    for field_name, value in mapping.items():
        if PageKey.from_field_name(field_name) is None:
            return False
        if not isinstance(value, bool):
            return False
    return True


def backfill_page_access(db, owner_id: Optional[str] = None) -> Dict[str, int]:
    """
    Give default page access to every user that predates the flags

    Users already carrying the marker field are left untouched, so the
    operation can be re-run safely. With owner_id only that tenant's
    users are touched; without it every tenant is (maintenance use only).

    Returns:
        {"matched": ..., "updated": ..., "failed": ...}
    """
    result = {"matched": 0, "updated": 0, "failed": 0}
    users = db["users"]

    query = {BACKFILL_MARKER: {"$exists": False}}
    if owner_id is not None:
        query["ownerId"] = owner_id

    pending = list(users.find(query, {"_id": 1, "email": 1}))
    result["matched"] = len(pending)
    logger.info(f"Page access backfill ({owner_id or 'all tenants'}): {len(pending)} users without flags")

    defaults = generate_default_page_access()
    for user in pending:
        try:
            update = users.update_one(
                {**query, "_id": user["_id"]},
                {"$set": {**defaults, "updatedAt": datetime.now(timezone.utc)}},
            )
            if update.modified_count:
                result["updated"] += 1
        except PyMongoError as e:
            result["failed"] += 1
            logger.error(f"Page access backfill failed for {user.get('email') or user['_id']}: {e}")

    logger.info(
        f"Page access backfill done: matched={result['matched']} "
        f"updated={result['updated']} failed={result['failed']}"
    )
    return result
