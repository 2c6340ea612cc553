"""Promo code management utilities."""

import logging
from datetime import datetime
from typing import Dict, Optional

import pytz
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import ALLOW_CODE_REUSE
from core.exceptions import (
    CodeAlreadyUsedError,
    CodeNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from models.code import CodeModel, CodeRedemptionModel
from models.user import UserModel
from schemas.code import CodeApplication
from utils.user_manager import add_history

logger = logging.getLogger(__name__)


class CodeManager:
    """Manages promo codes and their application to user balances."""

    def __init__(self, db: Session, allow_reuse: bool = ALLOW_CODE_REUSE):
        """Initialize CodeManager.

        Args:
            db: SQLAlchemy Session.
            allow_reuse: Whether a user may apply the same code more than once.
        """
        self.db = db
        self.allow_reuse = allow_reuse

    def get_code_value(self, code: str) -> Optional[int]:
        return self.db.execute(
            select(CodeModel.points).where(CodeModel.code == code)
        ).scalar_one_or_none()

    def list_codes(self) -> Dict[str, int]:
        models = self.db.query(CodeModel).order_by(CodeModel.code).all()
        return {m.code: m.points for m in models}

    def add_code(self, code: str, points: int) -> bool:
        """Insert a code unless it already exists.

        Args:
            code: The code string.
            points: Points granted by the code, must be > 0.

        Returns:
            True if the code was inserted, False if it already existed.

        Raises:
            ValidationError: If points is not positive.
        """
        if points <= 0:
            raise ValidationError("points must be > 0")
        if self.get_code_value(code) is not None:
            return False
        self.db.add(CodeModel(code=code, points=points))
        self.db.commit()
        logger.info("Added code %s worth %d points", code, points)
        return True

    def apply_code(self, user_id: int, code: str) -> CodeApplication:
        """Credit a code's points to a user.

        Args:
            user_id: Database id of the user.
            code: Promo code submitted by the user.

        Returns:
            CodeApplication with the points granted and the new balance.

        Raises:
            CodeNotFoundError: If the code does not exist.
            CodeAlreadyUsedError: If reuse is disabled and the user already
                applied this code.
            UserNotFoundError: If the user does not exist.
        """
        value = self.get_code_value(code)
        if value is None:
            raise CodeNotFoundError(code)

        if not self.allow_reuse:
            self._mark_used(user_id, code)

        credited = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(points=UserModel.points + value)
            .execution_options(synchronize_session=False)
        )
        if credited.rowcount == 0:
            self.db.rollback()
            raise UserNotFoundError(str(user_id))

        new_total = self.db.execute(
            select(UserModel.points).where(UserModel.id == user_id)
        ).scalar_one()
        add_history(self.db, user_id, f"code:{code}")
        self.db.commit()

        logger.info("User %s applied code %s (+%d, balance=%d)", user_id, code, value, new_total)
        return CodeApplication(points_granted=value, new_total=new_total)

    def _mark_used(self, user_id: int, code: str) -> None:
        # The unique (user_id, code) constraint is the real guard against a
        # concurrent double submit; the query only gives the common case a
        # clean path.
        used = (
            self.db.query(CodeRedemptionModel)
            .filter(
                CodeRedemptionModel.user_id == user_id,
                CodeRedemptionModel.code == code,
            )
            .first()
        )
        if used:
            raise CodeAlreadyUsedError(code)

        self.db.add(
            CodeRedemptionModel(
                user_id=user_id,
                code=code,
                created_at=datetime.now(pytz.utc).isoformat(),
            )
        )
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise CodeAlreadyUsedError(code) from e
