"""Configuration module for the Loyalty Rewards API.

This module provides centralized configuration management, including directory
paths, database and API server settings, authentication and upload limits.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (database file, uploads, logs)
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data"))).resolve()

# Uploaded reward images, served under /uploads
UPLOAD_DIR_NAME = "uploads"
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / UPLOAD_DIR_NAME))).resolve()
UPLOAD_URL_PREFIX = "/uploads"

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/loyalty.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "3000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv(
    "JWT_SECRET_KEY", os.getenv("SECRET_KEY", "my-secret-key-change-in-production")
)
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6

# Bootstrap admin account created by seed.py
ADMIN_USERNAME: Optional[str] = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD: Optional[str] = os.getenv("ADMIN_PASSWORD")

# --- Rewards Configuration ---

# When false, each user can apply a given promo code only once
ALLOW_CODE_REUSE: bool = os.getenv("ALLOW_CODE_REUSE", "false").lower() == "true"

# Largest points or quantity value a client may send (32-bit signed)
MAX_AMOUNT: int = 2**31 - 1

# Number of history entries returned by /api/me
HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "20"))

MAX_IMAGE_SIZE: int = int(os.getenv("MAX_IMAGE_SIZE", str(5 * 1024 * 1024)))  # 5MB
ALLOWED_IMAGE_EXTENSIONS: List[str] = [".png", ".jpg", ".jpeg", ".gif", ".webp"]

# Sample data inserted by seed.py
SEED_CODES: Dict[str, int] = {
    "WELCOME10": 10,
    "SUMMER20": 20,
    "FALL30": 30,
}
SEED_REWARDS: List[Dict[str, int]] = [
    {"name": "Coffee Mug", "points": 100, "quantity": 50},
    {"name": "T-Shirt", "points": 200, "quantity": 20},
    {"name": "Sticker", "points": 50, "quantity": 100},
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE: Optional[str] = os.getenv("LOG_FILE")
