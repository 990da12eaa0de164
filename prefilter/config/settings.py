from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    preference_backend: str = "file"
    preference_file_path: str = ".prefilter/preferences.json"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "prefilter"
    db_username: str = "prefilter"
    db_password: str = "secret"

    light_model_path: str = ""
    deep_model_path: str = ""
    deep_model_categories: list[str] = [
        "credit_card",
        "api_keys",
        "secure_document",
        "receipt",
    ]
