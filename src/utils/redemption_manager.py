"""Reward redemption.

Redeeming moves points from a user to the catalog: the user's balance drops
by the reward's cost and the reward's quantity drops by one, together or not
at all.

Both writes are conditional UPDATEs (``quantity > 0`` and
``points >= cost``) executed in one transaction. The database evaluates each
condition against the row it is about to write, so two concurrent requests
can never both take the last item or both spend the same points. A zero
row-count rolls the whole transaction back, then the current rows are read
to report why.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.exceptions import (
    InsufficientPointsError,
    OutOfStockError,
    RewardNotFoundError,
    UserNotFoundError,
)
from models.reward import RewardModel
from models.user import UserModel
from schemas.reward import RedemptionResult
from utils.user_manager import add_history

logger = logging.getLogger(__name__)


class RedemptionManager:
    """Exchanges user points for catalog rewards."""

    def __init__(self, db: Session):
        """Initialize RedemptionManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def redeem(self, user_id: int, reward_name: str) -> RedemptionResult:
        """Redeem one unit of a reward for a user.

        Preconditions are checked in order: the reward exists, it is in
        stock, the user exists and the user can afford it.

        Args:
            user_id: Database id of the redeeming user.
            reward_name: Name of the reward.

        Returns:
            RedemptionResult with the user's new balance and the reward's
            new quantity.

        Raises:
            RewardNotFoundError: If the reward does not exist.
            OutOfStockError: If the reward's quantity is zero.
            UserNotFoundError: If the user does not exist.
            InsufficientPointsError: If the user's balance is below the cost.
        """
        taken = self.db.execute(
            update(RewardModel)
            .where(RewardModel.name == reward_name, RewardModel.quantity > 0)
            .values(quantity=RewardModel.quantity - 1)
            .execution_options(synchronize_session=False)
        )
        if taken.rowcount == 0:
            self.db.rollback()
            self._raise_reward_unavailable(reward_name)

        # The reward row is now write-locked by this transaction
        cost, new_quantity = self.db.execute(
            select(RewardModel.points, RewardModel.quantity).where(
                RewardModel.name == reward_name
            )
        ).one()

        debited = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.points >= cost)
            .values(points=UserModel.points - cost)
            .execution_options(synchronize_session=False)
        )
        if debited.rowcount == 0:
            # Puts the reward's quantity back as well
            self.db.rollback()
            self._raise_user_cannot_pay(user_id, cost)

        new_points = self.db.execute(
            select(UserModel.points).where(UserModel.id == user_id)
        ).scalar_one()
        add_history(self.db, user_id, f"redeem:{reward_name}")
        self.db.commit()

        logger.info(
            "User %s redeemed '%s' for %d points (balance=%d, stock=%d)",
            user_id,
            reward_name,
            cost,
            new_points,
            new_quantity,
        )
        return RedemptionResult(new_points=new_points, new_quantity=new_quantity)

    def _raise_reward_unavailable(self, reward_name: str) -> None:
        quantity = self.db.execute(
            select(RewardModel.quantity).where(RewardModel.name == reward_name)
        ).scalar_one_or_none()
        if quantity is None:
            raise RewardNotFoundError(reward_name)
        raise OutOfStockError(reward_name)

    def _raise_user_cannot_pay(self, user_id: int, cost: int) -> None:
        points = self.db.execute(
            select(UserModel.points).where(UserModel.id == user_id)
        ).scalar_one_or_none()
        if points is None:
            raise UserNotFoundError(str(user_id))
        raise InsufficientPointsError(cost, points)
