from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    database_url: str = "sqlite:///./spm.db"
    app_version: str = "2026-10-19.v1"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Actor resolution ----
    auth_mode: str = "dev"  # dev|jwt

    # Fixed identity used when no real session exists (auth_mode=dev only)
    dev_user_id: str = "dev-user"
    dev_user_email: str = "dev@spm.local"
    dev_user_first_name: str = "Dev"
    dev_user_last_name: str = "User"
    dev_user_role: str = "admin"
    dev_header_user_id: str = "X-User-Id"

    # ---- JWT (tokens issued by the external identity provider) ----
    jwt_secret: str = "dev-only-secret-change-me-before-deploying"
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # ---- Lookups / dashboard ----
    seed_lookups_on_startup: bool = True
    budget_utilized_placeholder: int = 68  # percent, until spend tracking exists

    # ---- Logging ----
    log_level: str = "INFO"
    sql_log_level: str = "WARNING"

    def model_post_init(self, __context) -> None:
        if not 0 <= int(self.budget_utilized_placeholder) <= 100:
            raise ValueError("budget_utilized_placeholder must be within 0..100")

        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        # Hard fail: the mock actor must never be reachable in prod
        if is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
