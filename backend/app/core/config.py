# backend/app/core/config.py

from __future__ import annotations

import enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClanProviderName(str, enum.Enum):
    MEVENT = "Mevent"
    K1LLY0U = "k1lly0u"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB (persisted limit document + reference host adapters)
    # -----------------------------
    DATABASE_URL_SYNC: str = "sqlite:///./entity_limits.db"

    # -----------------------------
    # JWT (operator endpoints)
    # -----------------------------
    # Keep a dev default, but enforce stronger requirements outside dev.
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # -----------------------------
    # Limits
    # -----------------------------
    AUTO_FILL_ENTITIES: bool = True
    MESSAGE_PREFIX: str = "[Limits]: "
    LIMIT_REACHED_MESSAGE: str = "You have reached the limit of this object ({0})"

    # Pool placements of team / clan members against one quota
    USE_TEAM_POOLING: bool = False
    USE_CLAN_POOLING: bool = False
    CLAN_PROVIDER: ClanProviderName = ClanProviderName.MEVENT

    # Directory holding items.json / prefabs.json exported by the host
    GAME_REGISTRY_DIR: str = "./registry"

    # World scans slower than this are logged as a performance warning
    SCAN_WARNING_MS: int = 100

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        env = (self.ENVIRONMENT or "").strip().lower()

        # Enforce that we never run staging/production with a placeholder secret.
        if env in {"staging", "production"}:
            if not self.JWT_SECRET or self.JWT_SECRET.strip() == "dev-secret-change-me":
                raise ValueError("JWT_SECRET must be set to a strong value in staging/production.")
            if len(self.JWT_SECRET.strip()) < 32:
                raise ValueError("JWT_SECRET is too short; use at least 32 characters in staging/production.")

        # Light sanity checks (all envs)
        if self.JWT_ALGORITHM not in {"HS256"}:
            raise ValueError(f"Unsupported JWT_ALGORITHM={self.JWT_ALGORITHM!r}. Allowed: HS256")

        if "{0}" not in self.LIMIT_REACHED_MESSAGE:
            raise ValueError("LIMIT_REACHED_MESSAGE must contain the {0} placeholder for the limit.")

        if self.SCAN_WARNING_MS < 0:
            raise ValueError("SCAN_WARNING_MS must be >= 0")


# this must exist for: `from app.core.config import settings`
settings = Settings()
