"""Authentication API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import get_current_user
from taskflow.models.user import User
from taskflow.schemas.user import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from taskflow.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user and return a bearer token."""
    user, token = auth_service.register(db, payload.name, payload.email, payload.password)
    return {"message": "User registered successfully", "user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email + password for a bearer token."""
    user, token = auth_service.login(db, payload.email, payload.password)
    return {"message": "Login successful", "user": user, "token": token}


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
