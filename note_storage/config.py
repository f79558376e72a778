"""
Application settings for the note storage service.

Values are read from the environment (or a local ``.env`` file).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite:///./note_storage.db"
    sql_echo: bool = False

    # root = depth 0; with the default only root folders may hold subfolders
    max_folder_depth: int = 2

    cors_origins: str = "*"
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
