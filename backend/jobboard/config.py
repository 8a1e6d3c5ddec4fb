from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str

    # Auth
    secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 60 * 24 * 7

    # Object storage (local filesystem backend)
    storage_dir: str = "./storage"
    storage_base_url: str = "/media"

    # Application workflow
    enforce_status_transitions: bool = True
    restrict_status_updates_to_job_owner: bool = True

    # App
    allowed_origins: str = ""  # Comma-separated extra CORS origins
    debug: bool = False


settings = Settings()
