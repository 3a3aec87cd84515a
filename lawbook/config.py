# lawbook/config.py
import os

from dotenv import load_dotenv

load_dotenv()

DEV_SECRET_KEY = "change-me"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lawbook.db")
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

SECRET_KEY = os.getenv("SECRET_KEY", DEV_SECRET_KEY)

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "lawbook_session")
SESSION_LIFETIME_HOURS = int(os.getenv("SESSION_LIFETIME_HOURS", "12"))
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=True)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
MIN_BCRYPT_ROUNDS = 12

CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "https://lawbookv2.vercel.app")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if SECRET_KEY == DEV_SECRET_KEY:
        raise RuntimeError("SECRET_KEY must be set in production.")
    if BCRYPT_ROUNDS < MIN_BCRYPT_ROUNDS:
        raise RuntimeError(f"BCRYPT_ROUNDS must be at least {MIN_BCRYPT_ROUNDS} in production.")
