"""
Configuration management using Pydantic Settings for robust validation and environment handling.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from pathlib import Path

from masala_types import AgentRole


class OpenAIConfig(BaseSettings):
    """OpenAI API configuration."""

    api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key"
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Default OpenAI model"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override for OpenAI-compatible endpoints"
    )

    class Config:
        env_prefix = "OPENAI_"


class GeminiConfig(BaseSettings):
    """Google Gemini configuration (served through the OpenAI-compatible endpoint)."""

    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key"
    )
    model: str = Field(
        default="gemini-2.0-flash",
        description="Default Gemini model"
    )

    class Config:
        env_prefix = "GEMINI_"


class AnthropicConfig(BaseSettings):
    """Anthropic Claude API configuration."""

    api_key: Optional[str] = Field(
        default=None,
        description="Anthropic API key"
    )
    model: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Default Anthropic model"
    )

    class Config:
        env_prefix = "ANTHROPIC_"


class OllamaConfig(BaseSettings):
    """Ollama local LLM configuration (FREE)."""

    model: str = Field(
        default="llama3.2:3b",
        description="Default Ollama model"
    )
    host: Optional[str] = Field(
        default=None,
        description="Ollama server URL"
    )

    class Config:
        env_prefix = "OLLAMA_"


class KitchenConfig(BaseSettings):
    """Kitchen orchestration settings."""

    combination_provider: str = Field(
        default="openai",
        description="Provider backing the Spice Expert (combination oracle)"
    )
    planner_provider: str = Field(
        default="openai",
        description="Provider backing the Head Chef (planning agent)"
    )
    verifier_provider: str = Field(
        default="openai",
        description="Provider backing the Food Critic (verification judge)"
    )
    match_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Verification confidence must exceed this to satisfy an order"
    )
    abandoned_dish: str = Field(
        default="Vanished",
        description="Served-dish label recorded on abandoned orders"
    )
    max_agent_steps: int = Field(
        default=40,
        ge=1,
        description="Maximum model calls per planner turn"
    )
    seed_orders: bool = Field(
        default=True,
        description="Start the ledger with the example orders"
    )

    def provider_for(self, role: AgentRole) -> str:
        """Provider configured for one of the three agent roles."""
        return getattr(self, f"{role.value}_provider")

    class Config:
        env_prefix = "KITCHEN_"


class APIConfig(BaseSettings):
    """API server configuration."""

    host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    port: int = Field(
        default=8080,
        description="API server port"
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload"
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="CORS allowed origins"
    )
    title: str = Field(
        default="Madras Masala Lab API",
        description="API title"
    )
    version: str = Field(
        default="1.0.0",
        description="API version"
    )

    class Config:
        env_prefix = "API_"


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    # Data paths
    data_dir: Path = Field(
        default=Path("./data"),
        description="Data directory (session reports are written here)"
    )

    # Component configurations
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    kitchen: KitchenConfig = Field(default_factory=KitchenConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev")

    @property
    def reports_dir(self) -> Path:
        return self.data_dir / "reports"

    def get_configured_llm_providers(self) -> list[str]:
        """Get list of providers that have what they need to run."""
        providers = []
        if self.openai.api_key:
            providers.append("openai")
        if self.gemini.api_key:
            providers.append("gemini")
        if self.anthropic.api_key:
            providers.append("anthropic")
        # Ollama runs locally and needs no key
        providers.append("ollama")
        return providers


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Load settings from file or environment."""
    global _settings

    if config_file and config_file.exists():
        # Load from YAML file if provided
        import yaml
        with open(config_file) as f:
            config_data = yaml.safe_load(f) or {}

        transformed_data = {}

        # Copy top-level fields that Settings expects
        for key in ['environment', 'log_level', 'data_dir']:
            if key in config_data:
                transformed_data[key] = config_data[key]

        # Copy nested configurations directly
        for key in ['openai', 'gemini', 'anthropic', 'ollama', 'kitchen', 'api']:
            if key in config_data:
                transformed_data[key] = config_data[key]

        _settings = Settings(**transformed_data)
    else:
        _settings = Settings()

    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance."""
    global _settings
    _settings = None
