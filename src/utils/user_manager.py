"""User management utilities.

This module provides user management functionality including user storage,
password hashing, point balance changes and the per-user history log.
"""

import logging
from datetime import datetime
from typing import List, Optional

import bcrypt
import pytz
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, HISTORY_LIMIT
from core.exceptions import (
    InsufficientPointsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from models.history import HistoryModel
from models.user import UserModel
from schemas.user import HistoryEntry, User, UserSummary
from utils.converters import (
    model_to_history_entry,
    model_to_user,
    model_to_user_summary,
    user_to_model,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72

# Compared against when the username is unknown so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def add_history(db: Session, user_id: int, action: str) -> HistoryModel:
    """Append a history entry for a user without committing.

    Args:
        db: SQLAlchemy Session.
        user_id: Database id of the user.
        action: Action label, e.g. 'redeem:Coffee Mug'.

    Returns:
        The pending HistoryModel instance.
    """
    entry = HistoryModel(
        user_id=user_id,
        action=action,
        created_at=datetime.now(pytz.utc).isoformat(),
    )
    db.add(entry)
    return entry


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            logger.warning(
                "Password exceeds %d bytes (%d bytes), truncating",
                BCRYPT_MAX_BYTES,
                len(password_bytes),
            )
            password_bytes = password_bytes[:BCRYPT_MAX_BYTES]

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password_bytes, salt)
        return hashed.decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            # Malformed hash in storage
            logger.error("Password verification error: %s", e)
            return False

    def create_user(self, username: str, password: str, role: str = "user") -> User:
        """Create a new user with zero points.

        Args:
            username: Username for the new user.
            password: Plain text password.
            role: User role ('user' or 'admin').

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If username already exists.
        """
        existing = self.db.query(UserModel).filter(UserModel.username == username).first()
        if existing:
            raise UserAlreadyExistsError(username)

        user = User(
            username=username,
            password_hash=self.hash_password(password),
            role=role,
        )

        # Two concurrent registrations can both pass the check above;
        # the unique constraint decides.
        try:
            model = user_to_model(user)
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(username) from e

        logger.info("Created user: %s (role=%s)", username, role)
        return model_to_user(model)

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user if the credentials are valid, None otherwise."""
        user = self.get_user_by_username(username)
        if user is None:
            self.verify_password(password, _DUMMY_HASH)
            return None
        if not self.verify_password(password, user.password_hash):
            return None
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by database id.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def list_users(self) -> List[UserSummary]:
        """List all users ordered by username."""
        models = self.db.query(UserModel).order_by(UserModel.username).all()
        return [model_to_user_summary(m) for m in models]

    def get_history(self, user_id: int, limit: int = HISTORY_LIMIT) -> List[HistoryEntry]:
        """Get the newest history entries of a user, newest first.

        Args:
            user_id: Database id of the user.
            limit: Maximum number of entries.

        Returns:
            List of HistoryEntry objects.
        """
        models = (
            self.db.query(HistoryModel)
            .filter(HistoryModel.user_id == user_id)
            .order_by(HistoryModel.id.desc())
            .limit(limit)
            .all()
        )
        return [model_to_history_entry(m) for m in models]

    def reset_password(self, username: str, new_password: str) -> None:
        """Replace a user's password.

        Tokens issued before the reset stay valid until they expire.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if not model:
            raise UserNotFoundError(username)
        model.password_hash = self.hash_password(new_password)
        self.db.commit()
        logger.info("Password reset for user: %s", username)

    def set_role(self, username: str, role: str) -> User:
        """Change a user's role.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if not model:
            raise UserNotFoundError(username)
        model.role = role
        self.db.commit()
        self.db.refresh(model)
        logger.info("Set role of %s to %s", username, role)
        return model_to_user(model)

    def grant_points(self, username: str, delta: int) -> int:
        """Add (or remove, for a negative delta) points to a user.

        The balance check and the write are one conditional UPDATE, so
        concurrent grants and redemptions can never push points below zero.

        Args:
            username: Target username.
            delta: Points to add; may be negative.

        Returns:
            The user's new balance.

        Raises:
            UserNotFoundError: If the user does not exist.
            InsufficientPointsError: If the delta would make points negative.
        """
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.username == username, UserModel.points + delta >= 0)
            .values(points=UserModel.points + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            current = self.db.execute(
                select(UserModel.points).where(UserModel.username == username)
            ).scalar_one_or_none()
            if current is None:
                raise UserNotFoundError(username)
            raise InsufficientPointsError(-delta, current)

        user_id, new_points = self.db.execute(
            select(UserModel.id, UserModel.points).where(UserModel.username == username)
        ).one()
        add_history(self.db, user_id, f"admin:{delta:+d}")
        self.db.commit()
        logger.info("Granted %+d points to %s (balance=%d)", delta, username, new_points)
        return new_points
