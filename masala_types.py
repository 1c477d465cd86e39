"""
Type definitions for the Madras Masala Lab kitchen
"""
from enum import Enum


class OrderStatus(Enum):
    """Order lifecycle states"""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.FAILED)


class OrderDifficulty(Enum):
    """Order difficulty levels"""
    EASY = "easy"
    INTERMEDIATE = "intermediate"
    DIFFICULT = "difficult"


class AgentRole(Enum):
    """The three model-backed roles in the kitchen"""
    COMBINATION = "combination"   # Spice Expert
    PLANNER = "planner"           # Head Chef (Mami)
    VERIFIER = "verifier"         # Food Critic


class ToolKind(Enum):
    """How the orchestrator treats a tool call"""
    REGULAR = "regular"
    SERVE = "serve"
    ABANDON = "abandon"


class LLMProviderType(Enum):
    """Supported completion providers"""
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
