"""Configuration settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env")

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout: float = 120.0
    max_image_size: int = 640
    example_images_base_url: str = "https://www.gstatic.com/aistudio/starter-apps/bounding-box/"
    log_level: str = "INFO"


settings = Settings()
