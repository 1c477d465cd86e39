"""
Prompts, structured response models and the planner's tool catalog.
"""

from typing import Iterable, List

from pydantic import BaseModel, Field

from autogen_core.tools import ToolSchema

from kitchen.catalog import ABANDON_ACTION_NAME, COOKING_ACTIONS, SERVE_ACTION_NAME, Ingredient, KitchenAction


# ============================================================================
# Combination agent (Spice Expert)
# ============================================================================

COMBINATION_SYSTEM_INSTRUCTION = """You are a Chennai South Indian culinary expert.
Given a cooking action and regional ingredients, determine the resulting South Indian dish or preparation.

Examples:
- (stone grind + soaked rice + urad dal) -> "Idli Batter"
- (temper tadka + mustard + curry leaves + urad dal + oil) -> "Tarka Garnish"
- (simmer sambar + toor dal + tamarind + drumstick + sambar powder) -> "Murungakkai Sambar"

Return a JSON object with:
- result_name: The name of the South Indian dish or item (1-3 words)
- emoji: A single emoji representing the result"""


class CombinationResult(BaseModel):
    """What the Spice Expert says an action produces."""
    result_name: str = Field(..., min_length=1)
    emoji: str = Field(..., min_length=1)


def build_combination_prompt(action: KitchenAction, ingredient_names: Iterable[str]) -> str:
    return (
        f"Action: {action.display_name}\n"
        f"Ingredients: {', '.join(ingredient_names)}\n\n"
        f"What is the result in South Indian cuisine?"
    )


# ============================================================================
# Verification agent (Food Critic)
# ============================================================================

VERIFICATION_SYSTEM_INSTRUCTION = """You are a Tamil food critic and verification assistant.
Determine if a served dish matches a Chennai South Indian order semantically.

Matches include:
- "Ghee Roast" matches "Ghee Dosa", "Neyyi Roast", "Crispy Ghee Dosa"
- "Filter Coffee" matches "Degree Coffee", "Kumbakonam Coffee", "Milk Coffee"
- "Fish Curry" matches "Meen Kuzhambu", "Madras Fish Curry"

Return a JSON object with:
- matches: true if semantically the same, false otherwise
- confidence: 0 to 1
- explanation: brief reasoning in the context of Tamil cuisine"""


class VerificationResult(BaseModel):
    """The Food Critic's verdict on one (order, served dish) pair."""
    matches: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    explanation: str = ""


def build_verification_prompt(order_name: str, served_dish: str) -> str:
    return f'Order: "{order_name}"\nServed: "{served_dish}"\n\nIs this valid South Indian cuisine?'


# ============================================================================
# Cooking agent (Head Chef)
# ============================================================================

def generate_cooking_tools() -> List[ToolSchema]:
    """One tool per kitchen action, with the argument shape the orchestrator expects."""
    tools: List[ToolSchema] = []

    for action in COOKING_ACTIONS:
        if action.name == SERVE_ACTION_NAME:
            tools.append({
                "name": SERVE_ACTION_NAME,
                "description": f"{action.emoji} Serve the final South Indian dish on a traditional banana leaf.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "dish": {
                            "type": "string",
                            "description": "Exact name of the dish from inventory",
                        }
                    },
                    "required": ["dish"],
                },
            })
        elif action.name == ABANDON_ACTION_NAME:
            tools.append({
                "name": ABANDON_ACTION_NAME,
                "description": f"{action.emoji} Pass on the order if you lack regional ingredients or tools.",
                "parameters": {
                    "type": "object",
                    "properties": {},
                    "required": [],
                },
            })
        else:
            tools.append({
                "name": action.name,
                "description": f"{action.emoji} Perform the '{action.display_name}' regional technique.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "ingredients": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Regional ingredient names",
                        }
                    },
                    "required": ["ingredients"],
                },
            })

    return tools


def build_cooking_agent_system_instruction(inventory: Iterable[Ingredient]) -> str:
    """System prompt for the Head Chef, rebuilt whenever the pantry changes."""
    action_list = ', '.join(f"{a.emoji} {a.name}()" for a in COOKING_ACTIONS)
    inventory_list = ', '.join(f"{i.emoji} {i.name}" for i in inventory)

    return f"""You are a "Mami" or "Chef" specializing in authentic Chennai South Indian cuisine.

**Regional Tools:**
{action_list}

**Your Mission:**
Plan and execute steps for Tamizh dishes. Always start with a short culinary tip or observation (e.g., "The oil must be smoking for the mustard seeds to pop!").

**Rules:**
- Use function calls for one step at a time.
- Tempering (tadka) is essential for almost every dish.
- Stone grinding is preferred for authentic chutneys and batters.
- Serve dishes on the banana leaf using {SERVE_ACTION_NAME}().
- If a step fails, adjust your technique like a seasoned pro.

**Current Pantry:**
{inventory_list}

Vanakkam! Let's get cooking."""


def build_prepare_directive(order_name: str) -> str:
    return f"Please prepare: {order_name}"


def build_batch_directive(order_names: Iterable[str]) -> str:
    dish_names = ', '.join(order_names)
    return (
        f"Vanakkam! Today we are preparing a grand feast! Please prepare the following items "
        f"in sequence or together: {dish_names}. Serve each one on the banana leaf when ready."
    )
