from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from repo root and taskboard/.env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")

STORAGE_URL = os.getenv("TASKBOARD_STORAGE_URL", "sqlite:///./taskboard.db")
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
MIN_PASSWORD_LENGTH = 6

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None
