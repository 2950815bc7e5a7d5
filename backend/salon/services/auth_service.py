# Overview: Service-layer operations for auth; operator accounts and passwords.

"""
Authentication Service

WHY: The back office is one shared workstation; a single operator login keeps
the API off the open network. Passwords are stored as bcrypt hashes only.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 4 characters (front-desk PINs are short)
- Session tokens managed separately (see session_service.py)
"""

from __future__ import annotations

import logging

import bcrypt

from ..extensions import db
from ..models import User
from ..time_utils import utcnow
from ..validation import ConflictError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4


class PasswordValidationError(Exception):
    """Raised when password doesn't meet requirements."""
    pass


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Password is validated before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt comparison; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_user(username: str, password: str) -> User:
    """
    Create an operator account.

    Raises:
        ValueError: username missing
        ConflictError: username already taken
        PasswordValidationError: password too short
    """
    username = (username or "").strip()
    if not username:
        raise ValueError("username is required")

    if db.session.query(User).filter_by(username=username).first():
        raise ConflictError(f"User {username} already exists")

    user = User(username=username, password_hash=hash_password(password), is_active=True)
    db.session.add(user)
    db.session.commit()
    logger.info("user created username=%s", username)
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Check credentials.

    Returns the User on success, None on unknown user, inactive account
    or wrong password (callers must not distinguish these to the client).
    """
    user = db.session.query(User).filter_by(username=(username or "").strip()).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password or "", user.password_hash):
        logger.warning("failed login username=%s", username)
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def change_password(user: User, current_password: str, new_password: str) -> None:
    """
    Replace the user's password after verifying the current one.

    Raises:
        ValueError: current password is wrong
        PasswordValidationError: new password too short
    """
    if not verify_password(current_password or "", user.password_hash):
        raise ValueError("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    db.session.commit()
    logger.info("password changed user_id=%s", user.id)
