# visitrack/api/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_db
from ..errors import server_error
from ...models.users import LoginRequest, LoginResponse, RegisterRequest
from ...services.auth_service import auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db=Depends(get_db)):
    """Exchange email and password for a session token"""
    try:
        return auth_service.login(db, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error. Please try again later.", e)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db=Depends(get_db)):
    """Sign up a new organization and its admin"""
    try:
        return auth_service.register(db, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error. Please try again later.", e)
