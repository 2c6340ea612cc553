"""Conversions between SQLAlchemy models and pydantic schemas."""

from models.history import HistoryModel
from models.reward import RewardModel
from models.user import UserModel
from schemas.reward import Reward
from schemas.user import HistoryEntry, User, UserSummary


def user_to_model(user: User) -> UserModel:
    return UserModel(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        points=user.points,
        role=user.role,
        create_at=user.create_at,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        password_hash=model.password_hash,
        points=model.points,
        role=model.role,
        create_at=model.create_at,
    )


def model_to_user_summary(model: UserModel) -> UserSummary:
    return UserSummary(username=model.username, points=model.points, role=model.role)


def model_to_history_entry(model: HistoryModel) -> HistoryEntry:
    return HistoryEntry(action=model.action, created_at=model.created_at)


def model_to_reward(model: RewardModel) -> Reward:
    return Reward(
        name=model.name,
        points=model.points,
        quantity=model.quantity,
        image=model.image or "",
    )
