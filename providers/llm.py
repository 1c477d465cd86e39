"""
LLM providers for the kitchen agents.
Builds AutoGen model clients and wraps them as single-shot completion services.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Sequence, Type, Union

from pydantic import BaseModel

from autogen_core.models import ChatCompletionClient, ModelFamily, SystemMessage, UserMessage
from autogen_ext.models.anthropic import AnthropicChatCompletionClient
from autogen_ext.models.ollama import OllamaChatCompletionClient
from autogen_ext.models.openai import OpenAIChatCompletionClient

from config import Settings, get_settings
from masala_types import LLMProviderType

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = [p.value for p in LLMProviderType]


class UnknownProviderError(ValueError):
    """Raised when a role is configured with an unsupported LLM provider"""
    def __init__(self, provider: str, supported: list):
        self.provider = provider
        self.supported = supported
        super().__init__(f"Unknown LLM provider '{provider}'. Supported: {', '.join(supported)}")


def create_model_client(settings: Optional[Settings] = None, provider: Optional[str] = None) -> ChatCompletionClient:
    """Create an AutoGen chat completion client for the given provider."""
    settings = settings or get_settings()
    provider = (provider or settings.kitchen.planner_provider).lower()

    if provider == LLMProviderType.OPENAI.value:
        kwargs: Dict[str, Any] = {"model": settings.openai.model}
        if settings.openai.api_key:
            kwargs["api_key"] = settings.openai.api_key
        if settings.openai.base_url:
            kwargs["base_url"] = settings.openai.base_url
        client = OpenAIChatCompletionClient(**kwargs)
    elif provider == LLMProviderType.GEMINI.value:
        # AutoGen routes gemini-* models to Google's OpenAI-compatible endpoint
        kwargs = {"model": settings.gemini.model}
        if settings.gemini.api_key:
            kwargs["api_key"] = settings.gemini.api_key
        client = OpenAIChatCompletionClient(**kwargs)
    elif provider == LLMProviderType.ANTHROPIC.value:
        kwargs = {"model": settings.anthropic.model}
        if settings.anthropic.api_key:
            kwargs["api_key"] = settings.anthropic.api_key
        client = AnthropicChatCompletionClient(**kwargs)
    elif provider == LLMProviderType.OLLAMA.value:
        kwargs = {
            "model": settings.ollama.model,
            "model_info": {
                "vision": False,
                "function_calling": True,
                "json_output": True,
                "structured_output": True,
                "family": ModelFamily.UNKNOWN,
            },
        }
        if settings.ollama.host:
            kwargs["host"] = settings.ollama.host
        client = OllamaChatCompletionClient(**kwargs)
    else:
        raise UnknownProviderError(provider, SUPPORTED_PROVIDERS)

    logger.info(f"Created {provider} model client ({kwargs['model']})")
    return client


def parse_json_response(response_text: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, tolerating code fences and chatter."""
    # Try to extract JSON from response
    json_match = re.search(r'\{.*\}', response_text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group())
        except json.JSONDecodeError:
            pass

    # Try parsing the entire response as JSON
    try:
        parsed = json.loads(response_text.strip())
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Return empty dict if no valid JSON found
    return {}


class CompletionService:
    """Single-shot structured completion: fixed system instruction, fixed response model.

    Each call is independent; no conversation history is kept.
    """

    def __init__(
        self,
        model_client: ChatCompletionClient,
        system_instruction: str,
        response_model: Type[BaseModel]
    ):
        self.model_client = model_client
        self.system_instruction = system_instruction
        self.response_model = response_model

    def _json_output(self) -> Union[bool, Type[BaseModel], None]:
        model_info = self.model_client.model_info
        if model_info.get("structured_output"):
            return self.response_model
        if model_info.get("json_output"):
            return True
        return None

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw text of the reply."""
        messages: Sequence[Any] = [
            SystemMessage(content=self.system_instruction),
            UserMessage(content=prompt, source="user"),
        ]
        response = await self.model_client.create(messages, json_output=self._json_output())

        if not isinstance(response.content, str):
            raise ValueError(f"Expected text from completion service, got {type(response.content).__name__}")
        return response.content
