from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import Unauthorized, TokenExpired, Forbidden
from core.roles import UserRole
from api.deps.db import get_db
from models.user import User
from schemas.auth import TokenData

# auto_error=False so a missing header yields our own 401 instead of Starlette's default
security = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def create_user_token(user: User) -> str:
    role = user.role.value if hasattr(user.role, "value") else str(user.role)
    return create_access_token(data={"sub": str(user.id), "role": role})


def verify_token(token: str) -> TokenData:
    """Decode a bearer token. Expiry is reported separately so clients can prompt a re-login."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise Unauthorized("Invalid token")

    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role is None:
        raise Unauthorized("Invalid token")
    try:
        return TokenData(user_id=int(user_id), role=UserRole(role))
    except ValueError:
        raise Unauthorized("Invalid token")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authentication required")

    token_data = verify_token(credentials.credentials)
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None or user.role != token_data.role:
        raise Unauthorized("Invalid token")
    return user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Like get_current_principal, but anonymous or broken credentials just yield None"""
    if credentials is None:
        return None
    try:
        return get_current_principal(credentials, db)
    except Unauthorized:
        return None


def require_role(required_role: UserRole):
    """
    Dependency factory restricting an endpoint to one role.

    @router.get("/organizer-only")
    async def endpoint(user: User = Depends(require_role(UserRole.ORGANIZER))):
        ...
    """
    def role_checker(current_user: User = Depends(get_current_principal)):
        if not UserRole.has_permission(current_user.role, required_role):
            raise Forbidden(f"Access denied. {required_role.value.capitalize()} privileges required.")
        return current_user
    return role_checker


def get_current_organizer(current_user: User = Depends(require_role(UserRole.ORGANIZER))):
    """Dependency for organizer-only endpoints"""
    return current_user


def get_current_user(current_user: User = Depends(require_role(UserRole.USER))):
    """Dependency for participant-only endpoints"""
    return current_user
