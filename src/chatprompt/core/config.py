# chatprompt/src/chatprompt/core/config.py

from typing import Optional

import keyring
from keyring.errors import KeyringError
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: Optional[str] = Field(default=None)
    db_user: str = "chatprompt_app"
    db_password: Optional[str] = Field(default=None)
    db_host: str = "localhost"
    db_name: str = "chatprompt_db"

    # Base URL written into generated IDE workspace configs
    app_url: str = Field(default="http://localhost:3000")

    default_search_limit: int = Field(default=20)
    excerpt_length: int = Field(default=150)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore",
    )

    def build_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        password = self.get_secure_value("db_password", self.db_password)
        return f"postgresql://{self.db_user}:{password}@{self.db_host}/{self.db_name}"

    def get_secure_value(self, key: str, default=None):
        try:
            secure = keyring.get_password("chatprompt_app", key)
        except KeyringError:
            secure = None
        return secure or default


# Instantiate settings
settings = Settings()


def get_database_url() -> str:
    """Return the configured database URL, resolving the keyring password."""
    return settings.build_database_url()
