"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # Generation defaults
    default_cell_count: int = Field(default=120, description="Cells per tessellation when none is given")
    default_width: float = Field(default=800, description="Default rectangle width")
    default_height: float = Field(default=600, description="Default rectangle height")
    max_cell_count: int = Field(default=5000, description="Largest cell count the CLI accepts")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    class Config:
        env_prefix = "STAINED_GLASS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
