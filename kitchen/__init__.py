"""
Kitchen state: catalog, pantry, order ledger and cooking timeline.

The engine that wires the agents onto this state lives in ``kitchen.engine``.
"""

from .catalog import (
    ABANDON_ACTION_NAME,
    COOKING_ACTIONS,
    ERROR_INGREDIENT,
    EXAMPLE_ORDERS,
    SERVE_ACTION_NAME,
    STARTING_INGREDIENTS,
    Ingredient,
    KitchenAction,
    get_action,
)
from .ledger import Order, OrderConflictError, OrderLedger
from .pantry import Pantry, find_ingredient, normalize_ingredient_name
from .timeline import Timeline, TimelineEntry

__all__ = [
    "ABANDON_ACTION_NAME",
    "COOKING_ACTIONS",
    "ERROR_INGREDIENT",
    "EXAMPLE_ORDERS",
    "SERVE_ACTION_NAME",
    "STARTING_INGREDIENTS",
    "Ingredient",
    "KitchenAction",
    "get_action",
    "Order",
    "OrderConflictError",
    "OrderLedger",
    "Pantry",
    "find_ingredient",
    "normalize_ingredient_name",
    "Timeline",
    "TimelineEntry",
]
