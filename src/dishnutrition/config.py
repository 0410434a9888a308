"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Sheets reference data
    google_api_key: str = ""
    spreadsheet_id: str = ""
    sheets_base_url: str = "https://sheets.googleapis.com/v4"
    nutrition_sheet_name: str = "Nutrition source"
    measurement_sheet_name: str = "Unit of measurements"
    categories_sheet_name: str = "Food categories"
    sheets_timeout: float = 30.0  # request timeout in seconds
    sheets_max_retries: int = 3

    # Local JSON file with the same three tables (overrides Google Sheets)
    reference_data_path: str = ""

    # Gemini text generation (optional)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    generation_timeout: float = 20.0  # seconds per collaborator call

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def use_static_reference_data(self) -> bool:
        """Check if reference tables come from a local file."""
        return bool(self.reference_data_path)

    @property
    def reference_table_names(self) -> list[str]:
        """Names of the nutrition, unit and category tables."""
        return [
            self.nutrition_sheet_name,
            self.measurement_sheet_name,
            self.categories_sheet_name,
        ]

    @property
    def generation_enabled(self) -> bool:
        """Check if the Gemini collaborators can be used."""
        return bool(self.gemini_api_key)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
