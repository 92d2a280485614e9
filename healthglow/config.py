from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the health tracking backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("HEALTHGLOW_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("HEALTHGLOW_DB_PATH") or (self.data_root / "healthglow.db")
        ).expanduser()
        # Dev fallback only; deployments must set HEALTHGLOW_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("HEALTHGLOW_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("HEALTHGLOW_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("HEALTHGLOW_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}
        self.max_image_bytes: int = int(os.environ.get("HEALTHGLOW_MAX_IMAGE_BYTES") or "5000000")
        self.log_level: str = (os.environ.get("HEALTHGLOW_LOG_LEVEL") or "INFO").upper()

        self.anthropic_api_key: str | None = os.environ.get("ANTHROPIC_API_KEY") or None
        self.anthropic_base_url: str = os.environ.get(
            "ANTHROPIC_BASE_URL", "https://api.anthropic.com"
        ).rstrip("/")
        self.anthropic_model: str = os.environ.get("ANTHROPIC_MODEL") or "claude-sonnet-4-20250514"
        self.anthropic_max_tokens: int = int(os.environ.get("ANTHROPIC_MAX_TOKENS") or "1500")
        self.anthropic_timeout: float = float(os.environ.get("ANTHROPIC_TIMEOUT") or "60")

        cors = os.environ.get("HEALTHGLOW_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]
