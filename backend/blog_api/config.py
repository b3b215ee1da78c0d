# blog_api/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = os.getenv("APP_NAME", "Blog API")
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend (comma separated in env)
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if o.strip()
    ]

    # Create missing tables on startup (use aerich migrations in production)
    db_generate_schemas: bool = _env_bool("DB_GENERATE_SCHEMAS", "true")

    # Bearer token settings
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    token_ttl_minutes: int = int(os.getenv("TOKEN_TTL_MINUTES", "43200"))  # 30 days
    token_ttl_min_minutes: int = int(os.getenv("TOKEN_TTL_MIN_MINUTES", "1"))
    token_ttl_max_minutes: int = int(os.getenv("TOKEN_TTL_MAX_MINUTES", "525600"))  # ~1 year

    # Pagination
    per_page: int = int(os.getenv("PER_PAGE", "15"))
    per_page_max: int = int(os.getenv("PER_PAGE_MAX", "100"))

settings = Settings()  # Instantiate configuration
