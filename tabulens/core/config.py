from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    project_name: str = "Tabulens"
    env: str = "dev"

    api_url: str = "http://localhost:8080"
    request_timeout: int = 25
    refresh_path: str = "/auth/refresh"

    cache_duration_seconds: float = 300.0
    preview_limit: int = 10

    max_upload_mb: int = 50
    allowed_extensions: str = ".csv,.xls,.xlsx"  # comma-separated

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TABULENS_",
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    def allowed_extension_list(self) -> List[str]:
        return [e.strip().lower() for e in self.allowed_extensions.split(",") if e.strip()]

settings = Settings()
