# database/users.py
from typing import Optional

import bcrypt
from loguru import logger
from sqlalchemy.orm import Session

from core.errors import ConflictError
from core.google_auth import GoogleIdentity
from database.models import User


# bcrypt only reads the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, password: str, name: Optional[str] = None) -> User:
    if get_user_by_email(db, email):
        raise ConflictError("User already exists")
    user = User(email=email, hashed_password=hash_password(password), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when the password matches; Google-only accounts never match."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def upsert_google_user(db: Session, identity: GoogleIdentity) -> User:
    """Find the user for a Google identity, merging into an email match or creating one."""
    user = db.query(User).filter(User.google_id == identity.google_id).first()
    if user is None:
        user = get_user_by_email(db, identity.email)
        if user is None:
            user = User(email=identity.email, google_id=identity.google_id)
            db.add(user)
            logger.info(f"Creating user from Google login ({identity.email})")
        else:
            user.google_id = identity.google_id
            logger.info(f"Linking Google login to existing user {user.id}")
    user.name = identity.name
    user.picture = identity.picture
    db.commit()
    db.refresh(user)
    return user
