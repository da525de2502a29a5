"""Configuration management for the employee management service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import time
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    jwt_secret: str
    token_ttl_hours: int
    upload_dir: Path
    max_upload_bytes: int
    late_cutoff: time
    host: str
    port: int
    debug: bool
    log_level: str
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ems.db"),
            jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
            token_ttl_hours=int(os.getenv("TOKEN_TTL_HOURS", "24")),
            upload_dir=Path(os.getenv("UPLOAD_DIR", "./uploads")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
            late_cutoff=time.fromisoformat(os.getenv("LATE_CUTOFF", "09:00:00")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
