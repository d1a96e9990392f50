# visitrack/middleware/tenant.py
from typing import Dict, List, Optional

from .jwt_middleware import JWTAccount
from ..utilities.helpers.query_helpers import build_search_conditions


class TenantScope:
    """
    Tenant boundary for one request

    Built from the verified token. Services build every storage filter
    and stamp every new document through it, so the owner id in storage
    always comes from the token and never from the request body.
    """

    def __init__(self, account: JWTAccount):
        self.account = account

    @property
    def owner_id(self) -> str:
        return self.account.owner_id

    @property
    def user_id(self) -> str:
        return self.account.user_id

    @property
    def username(self) -> str:
        return self.account.username

    @property
    def role(self) -> str:
        return self.account.role

    def filter(self, extra: Optional[Dict] = None) -> Dict:
        query = dict(extra or {})
        query["ownerId"] = self.owner_id
        return query

    def stamp(self, document: Dict) -> Dict:
        stamped = dict(document)
        stamped["ownerId"] = self.owner_id
        return stamped

    def search_filter(self, search: Optional[str], fields: List[str], extra: Optional[Dict] = None) -> Dict:
        query = self.filter(extra)
        conditions = build_search_conditions(search, fields)
        if conditions:
            query["$or"] = conditions
        return query

    def owns(self, owner_id: Optional[str]) -> bool:
        # No claimed owner means the token's owner is used
        return not owner_id or owner_id == self.owner_id

    def __repr__(self):
        return f"TenantScope(owner_id={self.owner_id!r}, user_id={self.user_id!r})"
