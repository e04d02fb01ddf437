# blobcheck/client/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    SERVER_HOST: str = "localhost"
    SERVER_PORT: int = 3000
    TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="BLOBCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def server_url(self) -> str:
        return f"http://{self.SERVER_HOST}:{self.SERVER_PORT}"
