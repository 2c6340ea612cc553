"""User schema definitions.

This module defines the User domain object and the request/response models
of the account and admin endpoints.
"""

from datetime import datetime
from typing import List, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field

from config import MAX_AMOUNT, PASSWORD_MIN_LENGTH, USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH


class HistoryEntry(BaseModel):
    action: str = Field(description="What happened, e.g. 'redeem:Coffee Mug' or 'code:WELCOME10'.")
    created_at: str = Field(description="UTC timestamp in ISO format.")


class User(BaseModel):
    """structure of a stored user"""
    id: Optional[int] = Field(
        default=None,
        description="Database id, assigned on insert.",
    )
    username: str = Field(description="Unique login name.")
    password_hash: str = Field(description="Bcrypt hash of the password.")
    points: int = Field(default=0, ge=0, description="Current point balance.")
    role: str = Field(default="user", description="'user' or 'admin'.")
    create_at: str = Field(
        description="The time when the user was created.",
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class RegisterRequest(BaseModel):
    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    new_password: str = Field(alias="newPassword", min_length=PASSWORD_MIN_LENGTH)


class MessageResponse(BaseModel):
    msg: str


class CurrentUserResponse(BaseModel):
    username: str
    points: int
    role: str
    history: List[HistoryEntry] = Field(default_factory=list)


class UserSummary(BaseModel):
    username: str
    points: int
    role: str


class AddPointsRequest(BaseModel):
    username: str = Field(min_length=1)
    points: int = Field(
        ge=-MAX_AMOUNT,
        le=MAX_AMOUNT,
        description="Points to add; negative values remove points.",
    )


class AddPointsResponse(BaseModel):
    msg: str
    points: int = Field(description="The target user's new balance.")
