# visitrack/api/dependencies.py
from fastapi import HTTPException, Depends, status
from bson import ObjectId
from loguru import logger

from ..config.database import get_database, DatabaseUnavailableError
from ..config.setting import missing_settings
from ..core.page_access import PageKey, has_page_access
from ..middleware.jwt_middleware import JWTAccount, get_current_user
from ..middleware.tenant import TenantScope


def get_db():
    """Database connection dependency"""
    missing = missing_settings()
    if missing:
        logger.error(f"Request rejected, missing configuration: {missing}")
        raise HTTPException(500, f"Server configuration error: {', '.join(missing)} not configured")

    try:
        return get_database()
    except DatabaseUnavailableError as e:
        logger.error(f"Database unavailable: {e}")
        raise HTTPException(500, "Database connection failed")


async def get_tenant_scope(
    current_user: JWTAccount = Depends(get_current_user)
) -> TenantScope:
    """Tenant boundary derived from the verified token"""
    return TenantScope(current_user)


def load_current_user(db, scope: TenantScope) -> dict:
    """Caller's own user record, looked up inside their tenant"""
    if not ObjectId.is_valid(scope.user_id):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token structure",
                            headers={"WWW-Authenticate": "Bearer"})

    user = db.users.find_one(scope.filter({"_id": ObjectId(scope.user_id)}))
    if not user:
        logger.warning(f"Token user {scope.user_id} not found in tenant {scope.owner_id}")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found",
                            headers={"WWW-Authenticate": "Bearer"})
    return user


def require_page_access(page: PageKey):
    """Dependency factory rejecting callers without the page flag"""

    def validate_page_access(
        scope: TenantScope = Depends(get_tenant_scope),
        db=Depends(get_db)
    ) -> TenantScope:
        user = load_current_user(db, scope)
        if not has_page_access(user, page):
            logger.info(f"Page access denied: user={scope.user_id} page={page.value}")
            raise HTTPException(status.HTTP_403_FORBIDDEN, f"Access denied for page {page.value}")
        return scope

    return validate_page_access


def require_roles(*roles: str, message: str = None):
    """Dependency factory rejecting callers whose token role is not listed"""
    detail = message or f"Access denied. Required role: {' or '.join(roles)}"

    def validate_role(scope: TenantScope = Depends(get_tenant_scope)) -> TenantScope:
        if scope.role not in roles:
            logger.info(f"Role denied: user={scope.user_id} role={scope.role}")
            raise HTTPException(status.HTTP_403_FORBIDDEN, detail)
        return scope

    return validate_role
