"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="DietPlan", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/dietplan",
        description="SQLAlchemy connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="DietPlan API", description="API documentation title"
    )
    api_description: str = Field(
        default="Diet plan analysis, distribution, substitution, validation and versioning",
        description="API documentation description",
    )

    # Validation engine
    calorie_tolerance: float = Field(
        default=50.0, ge=0, description="Allowed kcal gap between declared and summed totals"
    )
    macro_tolerance: float = Field(
        default=5.0, ge=0, description="Allowed gram gap for protein/carbs/fats totals"
    )
    repeated_food_threshold: int = Field(
        default=3, ge=1, description="A food appearing more times than this is flagged"
    )

    # Substitution matcher
    default_substitution_limit: int = Field(
        default=10, ge=1, description="Default number of substitutions returned"
    )

    # Food suggestions
    default_suggestion_limit: int = Field(
        default=10, ge=1, description="Default number of food suggestions returned"
    )

    # Distribution engine partition shares (share given to the favoured partition)
    protein_focused_main_share: float = Field(
        default=0.4, ge=0, le=1,
        description="Share of calories, carbs and fats given to lunch/dinner",
    )
    protein_focused_main_protein_share: float = Field(
        default=0.5, ge=0, le=1, description="Share of protein given to lunch/dinner"
    )
    carb_strategic_workout_carbs_share: float = Field(
        default=0.5, ge=0, le=1, description="Share of carbs given to workout meals"
    )
    carb_strategic_workout_share: float = Field(
        default=0.3, ge=0, le=1,
        description="Share of calories, protein and fats given to workout meals",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()
