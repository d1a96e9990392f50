# visitrack/middleware/jwt_middleware.py
from datetime import datetime, timedelta, timezone
from fastapi import Request, HTTPException, status
from typing import Optional
from jose import jwt as jose_jwt, JWTError as JoseJWTError
import pydantic
from loguru import logger

from ..config.setting import settings


class JWTAccount(pydantic.BaseModel):
    user_id: str
    owner_id: str
    username: str
    role: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    def to_claims(self) -> dict:
        """Token payload in the camelCase form shared with the web client"""
        claims = {
            "userId": self.user_id,
            "ownerId": self.owner_id,
            "username": self.username,
            "role": self.role,
        }
        if self.email is not None:
            claims["email"] = self.email
        if self.full_name is not None:
            claims["fullName"] = self.full_name
        return claims


class JWTMiddleware:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 7 * 24 * 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def _require_secret(self):
        if not self.secret_key:
            logger.error("JWT_SECRET_KEY is not configured")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server configuration error: JWT secret not configured",
            )

    def issue_token(self, account: JWTAccount) -> str:
        """
        Sign a token carrying the tenant identity

        Args:
            account: identity to embed

        Returns:
            Encoded JWT string
        """
        self._require_secret()

        now = datetime.now(timezone.utc)
        payload = account.to_claims()
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + timedelta(minutes=self.expire_minutes)).timestamp())

        return jose_jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def retrieve_details_from_token(self, token: str) -> JWTAccount:
        """
        Decode JWT token and extract the tenant identity

        Args:
            token: JWT token string

        Returns:
            JWTAccount with user and tenant identifiers

        Raises:
            ValueError: If token is invalid, expired or the payload is malformed
        """
        try:
            payload = jose_jwt.decode(
                token=token,
                key=self.secret_key,
                algorithms=[self.algorithm]
            )
            jwt_account = JWTAccount(
                user_id=payload["userId"],
                owner_id=payload["ownerId"],
                username=payload["username"],
                role=payload["role"],
                email=payload.get("email"),
                full_name=payload.get("fullName"),
            )

        except JoseJWTError as token_decode_error:
            raise ValueError("Invalid or expired token") from token_decode_error

        except pydantic.ValidationError as validation_error:
            raise ValueError("Invalid payload in token") from validation_error

        except KeyError as key_error:
            raise ValueError(f"Missing required field in token: {key_error}") from key_error

        if not all([jwt_account.user_id, jwt_account.owner_id, jwt_account.username, jwt_account.role]):
            raise ValueError("Invalid token structure")

        return jwt_account

    def verify_jwt_token(self, request: Request) -> JWTAccount:
        """
        Extract and verify JWT token from request

        Raises:
            HTTPException: 401 if token is missing or invalid, 500 if no secret is configured
        """
        self._require_secret()

        try:
            authorization = request.headers.get("Authorization")
            if not authorization:
                raise ValueError("Authorization header missing")

            if not authorization.startswith("Bearer "):
                raise ValueError("Invalid authorization header format. Use 'Bearer <token>'")

            token = authorization[len("Bearer "):].strip()
            if not token:
                raise ValueError("Authorization token missing")

            jwt_account = self.retrieve_details_from_token(token)

            logger.debug(f"JWT verified for user: {jwt_account.user_id}, owner: {jwt_account.owner_id}")
            return jwt_account

        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
                headers={"WWW-Authenticate": "Bearer"},
            )


# Create global middleware instance
jwt_middleware = JWTMiddleware(
    secret_key=settings.JWT_SECRET_KEY,
    algorithm=settings.JWT_ALGORITHM,
    expire_minutes=settings.JWT_EXPIRE_MINUTES,
)

# Dependency function for route protection
async def get_current_user(request: Request) -> JWTAccount:
    """
    Dependency to get current authenticated user from JWT token
    """
    return jwt_middleware.verify_jwt_token(request)
