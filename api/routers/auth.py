from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from api.deps.db import get_db
from api.crud.user import create_user, create_organizer, get_user_by_mobile, get_user_by_email
from schemas.auth import (
    UserRegister, UserLogin, MobileCheck, OrganizerRegister, OrganizerLogin, AuthResponse
)
from schemas.user import UserRead
from core.auth import create_user_token, verify_password, get_current_principal
from core.exceptions import Unauthorized
from core.roles import UserRole
from core.logging import logger
from models.user import User

router = APIRouter(prefix="/auth")


def _auth_response(message: str, user: User) -> AuthResponse:
    return AuthResponse(message=message, token=create_user_token(user), user=UserRead.model_validate(user))


@router.post("/user/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserRegister, db: Session = Depends(get_db)):
    """Register a participant"""
    db_user = create_user(db, user)
    logger.info(f"Participant registered: user {db_user.id}")
    return _auth_response("Registration successful", db_user)


@router.post("/user/login", response_model=AuthResponse)
async def login_user(credentials: UserLogin, db: Session = Depends(get_db)):
    """Participant login by mobile number"""
    user = get_user_by_mobile(db, credentials.mobile_no)
    if not user or user.role != UserRole.USER or not verify_password(credentials.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return _auth_response("Login successful", user)


@router.post("/user/check-mobile")
async def check_mobile(payload: MobileCheck, db: Session = Depends(get_db)):
    """Tell the frontend whether to show login or registration"""
    user = get_user_by_mobile(db, payload.mobile_no)
    if not user or user.role != UserRole.USER:
        return {"exists": False}
    return {"exists": True, "user": {"id": user.id, "full_name": user.full_name}}


@router.post("/organizer/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_organizer(organizer: OrganizerRegister, db: Session = Depends(get_db)):
    db_user = create_organizer(db, organizer)
    logger.info(f"Organizer registered: user {db_user.id}")
    return _auth_response("Organizer registration successful", db_user)


@router.post("/organizer/login", response_model=AuthResponse)
async def login_organizer(credentials: OrganizerLogin, db: Session = Depends(get_db)):
    user = get_user_by_email(db, credentials.email)
    if not user or user.role != UserRole.ORGANIZER or not verify_password(credentials.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return _auth_response("Login successful", user)


@router.get("/validate")
async def validate_token(current_user: User = Depends(get_current_principal)):
    """Check the bearer token; 401 with Token expired or Invalid token otherwise"""
    return {"valid": True, "user": UserRead.model_validate(current_user)}


@router.get("/me", response_model=UserRead)
async def get_me(current_user: User = Depends(get_current_principal)):
    return current_user
