"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Every
manager is bound to the request-scoped DB session from ``get_db``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import code_manager
from utils import redemption_manager
from utils import reward_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_reward_manager(db: Session = Depends(get_db)) -> reward_manager.RewardManager:
    """Get RewardManager instance with request-scoped DB session."""
    return reward_manager.RewardManager(db)


def get_code_manager(db: Session = Depends(get_db)) -> code_manager.CodeManager:
    """Get CodeManager instance with request-scoped DB session."""
    return code_manager.CodeManager(db)


def get_redemption_manager(
    db: Session = Depends(get_db),
) -> redemption_manager.RedemptionManager:
    """Get RedemptionManager instance with request-scoped DB session."""
    return redemption_manager.RedemptionManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
RewardManagerDep = Annotated[
    reward_manager.RewardManager, Depends(get_reward_manager)
]
CodeManagerDep = Annotated[
    code_manager.CodeManager, Depends(get_code_manager)
]
RedemptionManagerDep = Annotated[
    redemption_manager.RedemptionManager, Depends(get_redemption_manager)
]
