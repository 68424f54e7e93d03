from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://ten:ten@db:5432/ten_insights"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # IANA zone used as the viewer's calendar when a request doesn't pass one.
    TIMEZONE: str = "UTC"

    # Heatmap window (days, today included).
    LOOKBACK_DAYS: int = 10
    # How far back ratings are loaded for trend / weekday analysis.
    RATING_HISTORY_DAYS: int = 60

    CHECKIN_COOLDOWN_HOURS: float = 24.0
    # "database" (shared across workers) or "memory" (single process only).
    COOLDOWN_BACKEND: str = "database"

    # Cached friendship scores older than this are treated as absent.
    FRIENDSHIP_SCORE_TTL_SECONDS: int = 3600

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
