"""Seed the database with sample codes, rewards and an admin account.

Usage:
    python seed.py            # insert whatever is missing
    python seed.py --reset    # delete all codes and rewards first

The admin account is created (or an existing user promoted) only when
ADMIN_USERNAME and ADMIN_PASSWORD are set.
"""

import logging
import sys
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config import ADMIN_PASSWORD, ADMIN_USERNAME, SEED_CODES, SEED_REWARDS
from core.database import SessionLocal
from core.exceptions import RewardAlreadyExistsError
from core.logging_config import setup_logging
from models.code import CodeModel, CodeRedemptionModel
from models.reward import RewardModel
from utils.code_manager import CodeManager
from utils.reward_manager import RewardManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def reset_catalog(db: Session) -> None:
    """Delete all codes, code redemptions and rewards."""
    db.query(CodeRedemptionModel).delete()
    db.query(CodeModel).delete()
    db.query(RewardModel).delete()
    db.commit()
    logger.info("Deleted existing codes and rewards")


def seed_codes(db: Session, codes: Dict[str, int]) -> int:
    """Insert missing codes.

    Returns:
        Number of codes inserted.
    """
    code_manager = CodeManager(db)
    return sum(1 for code, points in codes.items() if code_manager.add_code(code, points))


def seed_rewards(db: Session, rewards: List[Dict[str, int]]) -> int:
    """Insert missing rewards.

    Returns:
        Number of rewards inserted.
    """
    reward_manager = RewardManager(db)
    inserted = 0
    for reward in rewards:
        try:
            reward_manager.add_reward(reward["name"], reward["points"], reward["quantity"])
            inserted += 1
        except RewardAlreadyExistsError:
            logger.info("Reward '%s' already exists, skipping", reward["name"])
    return inserted


def seed_admin(db: Session, username: Optional[str], password: Optional[str]) -> bool:
    """Create the admin account, or promote the user if it already exists.

    Returns:
        True if an admin was created or promoted.
    """
    if not username or not password:
        logger.info("ADMIN_USERNAME/ADMIN_PASSWORD not set, skipping admin account")
        return False

    user_manager = UserManager(db)
    if user_manager.get_user_by_username(username) is None:
        user_manager.create_user(username, password, role="admin")
    else:
        user_manager.set_role(username, "admin")
    return True


def seed(reset: bool = False) -> None:
    with SessionLocal() as db:
        if reset:
            reset_catalog(db)
        codes = seed_codes(db, SEED_CODES)
        rewards = seed_rewards(db, SEED_REWARDS)
        seed_admin(db, ADMIN_USERNAME, ADMIN_PASSWORD)
    logger.info("Seeding done: %d codes, %d rewards inserted", codes, rewards)


def main() -> None:
    """Main entry point."""
    setup_logging()
    reset = "--reset" in sys.argv[1:]
    try:
        seed(reset=reset)
    except Exception as e:
        logger.error("Seeding failed: %s", e)
        raise


if __name__ == "__main__":
    main()
