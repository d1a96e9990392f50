# visitrack/services/auth_service.py
from typing import Any, Dict, Optional

import bcrypt
from bson import ObjectId
from fastapi import HTTPException
from loguru import logger

from ..config.logging_config import log_auth_event, log_tenant_action
from ..config.setting import settings
from ..core.page_access import PageAccess, generate_default_page_access
from ..middleware.jwt_middleware import JWTAccount, jwt_middleware
from ..middleware.validation import ValidationMiddleware
from ..models.users import LoginRequest, RegisterRequest, UserRole, VALID_CAPACITIES
from ..utilities.helpers.data_formatters import serialize_user
from ..utilities.helpers.date_utils import utc_now

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Credential checks, token issuing and tenant sign-up"""

    def __init__(self, rounds: int = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS
        self._dummy_hash: Optional[bytes] = None

    def hash_password(self, password: str) -> str:
        # bcrypt only reads the first 72 bytes
        hashed = bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8")[:72], hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    def _burn_comparison(self, password: str):
        """Spend one bcrypt comparison so unknown emails take as long as known ones"""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"visitrack-placeholder", bcrypt.gensalt(rounds=self.rounds))
        bcrypt.checkpw(password.encode("utf-8")[:72], self._dummy_hash)

    @staticmethod
    def account_for(user: Dict[str, Any]) -> JWTAccount:
        return JWTAccount(
            user_id=str(user["_id"]),
            owner_id=user["ownerId"],
            username=user["username"],
            role=user["role"],
            email=user.get("email"),
            full_name=user.get("fullName") or user.get("username"),
        )

    def login(self, db, request: LoginRequest) -> Dict[str, Any]:
        """
        Verify credentials and issue a session token

        Unknown email and wrong password produce the same 401.
        """
        if not request.email or not request.password:
            raise HTTPException(400, "Email and password are required")

        email = ValidationMiddleware.validate_email(request.email)

        user = db.users.find_one({"email": email})
        if not user:
            self._burn_comparison(request.password)
            log_auth_event("login", email, False)
            raise HTTPException(401, INVALID_CREDENTIALS)

        if not self.verify_password(request.password, user.get("password")):
            log_auth_event("login", email, False)
            raise HTTPException(401, INVALID_CREDENTIALS)

        if not user.get("isActive"):
            log_auth_event("login-deactivated", email, False)
            raise HTTPException(401, "Account is deactivated. Please contact support.")

        if not user.get("ownerId") or not user.get("username") or not user.get("role"):
            logger.error(f"User record {user['_id']} is missing ownerId, username or role")
            raise HTTPException(500, "User data incomplete. Please contact support.")

        account = self.account_for(user)
        token = jwt_middleware.issue_token(account)

        now = utc_now()
        db.users.update_one({"_id": user["_id"]}, {"$set": {"lastLoginAt": now, "updatedAt": now}})
        user["lastLoginAt"] = now
        user["updatedAt"] = now

        log_auth_event("login", email, True)

        return {
            "message": "Login successful",
            "token": token,
            "user": serialize_user(user),
            "globalVariables": {
                "userId": account.user_id,
                "ownerId": account.owner_id,
                "username": account.username,
                "role": account.role,
                "email": account.email,
            },
            "pageAccess": PageAccess.from_document(user).to_document(),
        }

    def register(self, db, request: RegisterRequest) -> Dict[str, Any]:
        """Create a new tenant with its first admin"""
        required = [request.full_name, request.phone_number, request.email,
                    request.capacity, request.username, request.password]
        if any(value is None or (isinstance(value, str) and not value.strip()) for value in required):
            raise HTTPException(400, "All fields are required")

        email = ValidationMiddleware.validate_email(request.email)

        if request.capacity not in VALID_CAPACITIES:
            raise HTTPException(400, "Invalid capacity selection")

        ValidationMiddleware.validate_password(request.password)

        username = request.username.strip().lower()
        existing = db.users.find_one({"$or": [{"email": email}, {"username": username}]})
        if existing:
            message = "User with this email already exists" if existing.get("email") == email else "Username already taken"
            raise HTTPException(409, message)

        if request.owner_id:
            logger.warning(f"Ignoring client supplied ownerId on registration for {email}")

        now = utc_now()
        new_user = {
            "ownerId": str(ObjectId()),
            "fullName": request.full_name.strip(),
            "phoneNumber": request.phone_number.strip(),
            "email": email,
            "capacity": request.capacity,
            "username": username,
            "password": self.hash_password(request.password),
            "role": UserRole.ADMIN.value,
            "isActive": True,
            "emailVerified": False,
            "lastLoginAt": None,
            "createdAt": now,
            "updatedAt": now,
            **generate_default_page_access(),
        }

        result = db.users.insert_one(new_user)
        new_user["_id"] = result.inserted_id

        token = jwt_middleware.issue_token(self.account_for(new_user))
        log_tenant_action(new_user["ownerId"], "register", email=email, username=username)

        return {
            "message": "User registered successfully",
            "user": serialize_user(new_user),
            "token": token,
        }


# Global service instance
auth_service = AuthService()
