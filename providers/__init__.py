"""
LLM Provider package for multi-provider AI integration.
"""

from .llm import (
    CompletionService,
    create_model_client,
    parse_json_response,
    SUPPORTED_PROVIDERS,
    UnknownProviderError,
)

__all__ = [
    "CompletionService",
    "create_model_client",
    "parse_json_response",
    "SUPPORTED_PROVIDERS",
    "UnknownProviderError",
]
