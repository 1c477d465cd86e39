"""
Tests for settings and the model-client factory
"""
import pytest

from autogen_ext.models.ollama import OllamaChatCompletionClient
from autogen_ext.models.openai import OpenAIChatCompletionClient

import config
from config import OpenAIConfig, Settings, get_settings, load_settings, reset_settings
from masala_types import AgentRole
from providers.llm import UnknownProviderError, create_model_client


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("KITCHEN_MATCH_THRESHOLD", raising=False)
        settings = Settings()
        assert settings.kitchen.match_threshold == 0.7
        assert settings.kitchen.abandoned_dish == "Vanished"
        assert settings.kitchen.planner_provider == "openai"
        assert settings.reports_dir == settings.data_dir / "reports"

    def test_kitchen_env_prefix(self, monkeypatch):
        monkeypatch.setenv("KITCHEN_MATCH_THRESHOLD", "0.85")
        monkeypatch.setenv("KITCHEN_PLANNER_PROVIDER", "ollama")
        settings = Settings()
        assert settings.kitchen.match_threshold == 0.85
        assert settings.kitchen.planner_provider == "ollama"

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "log_level: DEBUG\n"
            "kitchen:\n"
            "  max_agent_steps: 5\n"
            "  seed_orders: false\n"
        )

        settings = load_settings(config_file)

        assert settings.log_level == "DEBUG"
        assert settings.kitchen.max_agent_steps == 5
        assert settings.kitchen.seed_orders is False
        assert config.get_settings() is settings

    def test_missing_yaml_falls_back_to_env(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.kitchen.max_agent_steps == 40

    def test_configured_providers(self):
        settings = Settings(openai=OpenAIConfig(api_key="sk-test"))
        providers = settings.get_configured_llm_providers()
        assert "openai" in providers
        assert "ollama" in providers


class TestCreateModelClient:

    def test_unknown_provider(self, tmp_path):
        with pytest.raises(UnknownProviderError) as exc_info:
            create_model_client(Settings(data_dir=tmp_path), "mystery")
        assert exc_info.value.provider == "mystery"
        assert isinstance(exc_info.value, ValueError)

    def test_openai(self, tmp_path):
        settings = Settings(data_dir=tmp_path, openai=OpenAIConfig(api_key="sk-test"))
        client = create_model_client(settings, "openai")
        assert isinstance(client, OpenAIChatCompletionClient)

    def test_ollama(self, tmp_path):
        client = create_model_client(Settings(data_dir=tmp_path), "OLLAMA")
        assert isinstance(client, OllamaChatCompletionClient)
        assert client.model_info["function_calling"]


def test_provider_for_role(monkeypatch):
    monkeypatch.setenv("KITCHEN_VERIFIER_PROVIDER", "anthropic")
    kitchen = Settings().kitchen
    assert kitchen.provider_for(AgentRole.VERIFIER) == "anthropic"
    assert kitchen.provider_for(AgentRole.COMBINATION) == kitchen.combination_provider
