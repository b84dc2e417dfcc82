# File: backend/portal/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = "Application Portal API"
    PROJECT_VERSION: str = "0.1.0"

    # Database settings
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", f"sqlite:///{os.path.join(BACKEND_DIR, 'application_portal.db')}"
    )

    # File storage
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", os.path.join(BACKEND_DIR, "uploads"))
    GENERATED_DIR: str = os.getenv("GENERATED_DIR", os.path.join(BACKEND_DIR, "uploads", "generated"))

    # Security settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "insecure-default-secret-key-for-dev-only")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    DOWNLOAD_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("DOWNLOAD_TOKEN_EXPIRE_MINUTES", "60"))
    REQUIRE_SIGNED_DOWNLOADS: bool = _env_bool("REQUIRE_SIGNED_DOWNLOADS", "true")

    # Submission settings
    SUBMISSION_COOLDOWN_MINUTES: int = int(os.getenv("SUBMISSION_COOLDOWN_MINUTES", "0"))  # 0 disables
    PDF_GENERATOR: str = os.getenv("PDF_GENERATOR", "full")  # "full" or "simple"

    # CORS settings
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

settings = Settings()
