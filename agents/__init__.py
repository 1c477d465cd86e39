"""
Kitchen Agents Module - Spice Expert, Head Chef and Food Critic
"""
from .combination import CombinationResolver
from .errors import CombinationError, KitchenAgentError, ToolValidationError
from .orchestrator import CookingOrchestrator, PendingNarration, ToolResponse
from .session import PlannerSession, SessionTurn
from .verification import VerificationMatcher

__all__ = [
    'CombinationResolver',
    'CombinationError',
    'KitchenAgentError',
    'ToolValidationError',
    'CookingOrchestrator',
    'PendingNarration',
    'ToolResponse',
    'PlannerSession',
    'SessionTurn',
    'VerificationMatcher',
]
