from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.user import User
from schemas.auth import UserRegister, OrganizerRegister
from core.auth import get_password_hash
from core.exceptions import Conflict
from core.roles import UserRole


def get_user_by_mobile(db: Session, mobile_no: str) -> Optional[User]:
    return db.query(User).filter(User.mobile_no == mobile_no).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def _save_new_user(db: Session, db_user: User) -> User:
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Mobile number or email already registered")
    db.refresh(db_user)
    return db_user


def create_user(db: Session, user: UserRegister) -> User:
    if get_user_by_mobile(db, user.mobile_no):
        raise Conflict("Mobile number already registered")
    if user.email and get_user_by_email(db, user.email):
        raise Conflict("Email already registered")

    db_user = User(
        full_name=user.full_name,
        mobile_no=user.mobile_no,
        email=user.email,
        password_hash=get_password_hash(user.password),
        role=UserRole.USER,
        bank_account_no=user.bank_account_no,
        bank_name=user.bank_name
    )
    return _save_new_user(db, db_user)


def create_organizer(db: Session, organizer: OrganizerRegister) -> User:
    if get_user_by_email(db, organizer.email):
        raise Conflict("Email already registered")
    if get_user_by_mobile(db, organizer.mobile_no):
        raise Conflict("Mobile number already registered")

    db_user = User(
        full_name=organizer.name,
        mobile_no=organizer.mobile_no,
        email=organizer.email,
        password_hash=get_password_hash(organizer.password),
        role=UserRole.ORGANIZER
    )
    return _save_new_user(db, db_user)
