"""Reward catalog management.

This module handles listing rewards, admin stock updates, adding rewards and
storing their uploaded images on disk.
"""

import logging
import secrets
from pathlib import Path
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import (
    ALLOWED_IMAGE_EXTENSIONS,
    MAX_IMAGE_SIZE,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
)
from core.exceptions import (
    RewardAlreadyExistsError,
    RewardNotFoundError,
    ValidationError,
)
from models.reward import RewardModel
from schemas.reward import Reward
from utils.converters import model_to_reward

logger = logging.getLogger(__name__)


class RewardManager:
    """Manages the reward catalog using SQLAlchemy."""

    def __init__(self, db: Session, upload_dir: Path = UPLOAD_DIR):
        """Initialize RewardManager.

        Args:
            db: SQLAlchemy Session.
            upload_dir: Directory where reward images are written.
        """
        self.db = db
        self.upload_dir = upload_dir

    def list_rewards(self) -> Dict[str, Reward]:
        """List all rewards keyed by name."""
        models = self.db.query(RewardModel).order_by(RewardModel.name).all()
        return {m.name: model_to_reward(m) for m in models}

    def get_reward(self, name: str) -> Reward:
        """Get a reward by name.

        Raises:
            RewardNotFoundError: If the reward does not exist.
        """
        model = self.db.query(RewardModel).filter(RewardModel.name == name).first()
        if not model:
            raise RewardNotFoundError(name)
        return model_to_reward(model)

    def set_quantity(self, name: str, quantity: int) -> Reward:
        """Overwrite the remaining quantity of a reward.

        Args:
            name: Reward name.
            quantity: New absolute quantity, must be >= 0.

        Returns:
            The updated Reward.

        Raises:
            ValidationError: If quantity is negative.
            RewardNotFoundError: If the reward does not exist.
        """
        if quantity < 0:
            raise ValidationError("quantity must be >= 0")

        model = self.db.query(RewardModel).filter(RewardModel.name == name).first()
        if not model:
            raise RewardNotFoundError(name)
        model.quantity = quantity
        self.db.commit()
        self.db.refresh(model)
        logger.info("Set quantity of reward '%s' to %d", name, quantity)
        return model_to_reward(model)

    def add_reward(
        self,
        name: str,
        points: int,
        quantity: int,
        image_content: Optional[bytes] = None,
        image_filename: Optional[str] = None,
    ) -> Reward:
        """Add a reward to the catalog.

        Args:
            name: Unique reward name.
            points: Cost in points, must be > 0.
            quantity: Initial stock, must be >= 0.
            image_content: Optional raw image bytes.
            image_filename: Original filename of the image, used for its extension.

        Returns:
            The created Reward.

        Raises:
            ValidationError: If a field or the image is invalid.
            RewardAlreadyExistsError: If a reward with this name exists.
        """
        name = name.strip()
        if not name:
            raise ValidationError("name cannot be empty")
        if points <= 0:
            raise ValidationError("points must be > 0")
        if quantity < 0:
            raise ValidationError("quantity must be >= 0")

        existing = self.db.query(RewardModel).filter(RewardModel.name == name).first()
        if existing:
            raise RewardAlreadyExistsError(name)

        image_path = None
        image_url = ""
        if image_content is not None:
            image_path = self.store_image(image_content, image_filename)
            image_url = f"{UPLOAD_URL_PREFIX}/{image_path.name}"

        model = RewardModel(name=name, points=points, quantity=quantity, image=image_url)
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except SQLAlchemyError as e:
            self.db.rollback()
            if image_path is not None:
                image_path.unlink(missing_ok=True)
            if isinstance(e, IntegrityError):
                raise RewardAlreadyExistsError(name) from e
            raise

        logger.info("Added reward '%s' (points=%d, quantity=%d)", name, points, quantity)
        return model_to_reward(model)

    def store_image(self, content: bytes, filename: Optional[str]) -> Path:
        """Validate and write an uploaded image under a generated name.

        Args:
            content: Raw image bytes.
            filename: Original filename, used only for its extension.

        Returns:
            Path of the written file.

        Raises:
            ValidationError: If the file is empty, too large or of a disallowed type.
        """
        extension = Path(filename or "").suffix.lower()
        if extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError(
                f"Invalid image type. Allowed types: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}"
            )
        if not content:
            raise ValidationError("Image file is empty.")
        if len(content) > MAX_IMAGE_SIZE:
            raise ValidationError(
                f"Image exceeds maximum allowed size of {MAX_IMAGE_SIZE / 1024 / 1024}MB"
            )

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / f"{secrets.token_hex(8)}{extension}"
        path.write_bytes(content)
        logger.info("Stored reward image: %s (%d bytes)", path.name, len(content))
        return path
