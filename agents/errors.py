"""
Custom exception classes for the kitchen agents
"""


class KitchenAgentError(Exception):
    """Base exception for kitchen agents"""
    pass


class CombinationError(KitchenAgentError):
    """Raised when the combination oracle cannot produce an ingredient"""
    def __init__(self, action: str, ingredients: list, reason: str = "no result"):
        self.action = action
        self.ingredients = ingredients
        self.reason = reason
        super().__init__(f"Combination {action}({', '.join(ingredients)}) failed: {reason}")


class ToolValidationError(KitchenAgentError):
    """Raised when a tool call from the planner is malformed or unresolvable"""
    def __init__(self, tool_name: str, error: str):
        self.tool_name = tool_name
        self.error = error
        super().__init__(error)

