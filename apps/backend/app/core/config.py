from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Campaign Stats Collector"
    app_version: str = "views-dedupe-10s-v2-clicks-ui-banners"

    database_url: str = "sqlite:///./data.sqlite"
    # comma separated, "*" allows any origin
    allowed_origins: str = "*"
    log_level: str = "INFO"

    dedup_window_seconds: int = 30
    view_bucket_seconds: int = 10
    max_batch_events: int = 500

    stats_default_days: int = 28
    stats_max_days: int = 365

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()
