from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./yzdice.db"
    environment: str = "local"
    debug: bool = True
    session_secret_key: str = "dev-secret-change-me"

    # Chat visibility used when neither the request nor the user picks one.
    # One of: public, gm_only, blind, self_only.
    default_roll_mode: str = "public"

    # Rolls waiting for a push are kept in memory; the oldest are dropped first.
    max_open_rolls: int = 500


settings = Settings()
