"""
Chennai kitchen catalog: cooking actions, starting pantry and example orders.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from masala_types import OrderDifficulty


@dataclass(frozen=True)
class Ingredient:
    """A named, emoji-tagged pantry item. Identity is the normalized name."""
    name: str
    emoji: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "emoji": self.emoji}


@dataclass(frozen=True)
class KitchenAction:
    """A cooking technique the chef (or the planner) can apply."""
    name: str           # tool name: alphanumeric + underscores
    display_name: str   # human-readable label
    emoji: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "display_name": self.display_name, "emoji": self.emoji}


def sanitize_name(name: str) -> str:
    """Turn a display label into a tool-safe identifier."""
    return re.sub(r'[^a-zA-Z0-9_]', '', re.sub(r'\s+', '_', name))


def _action(name: str, emoji: str) -> KitchenAction:
    return KitchenAction(name=sanitize_name(name), display_name=name, emoji=emoji)


SERVE_ACTION_NAME = "serve_on_leaf"
ABANDON_ACTION_NAME = "pass"

# Sentinel result recorded on the timeline when a combination fails
ERROR_INGREDIENT = Ingredient(name="error", emoji="❌")


COOKING_ACTIONS: List[KitchenAction] = [
    # Regional techniques
    _action('temper tadka', '🔥'), _action('stone grind', '🪨'), _action('ferment', '🫧'),
    _action('steam idli', '🥟'), _action('deep fry vada', '🍩'), _action('shallow fry', '🍳'),
    _action('dry roast', '🥘'), _action('soak', '💧'), _action('pound', '🔨'),
    _action('banana leaf wrap', '🍃'), _action('simmer sambar', '🍲'), _action('boil', '🫧'),

    # Preparation methods
    _action('chop', '🔪'), _action('dice', '🔪'), _action('mince', '🔪'),
    _action('grate coconut', '🥥'), _action('peel', '🥔'), _action('wash', '💧'),
    _action('extract tamarind', '🍶'), _action('squeeze lemon', '🍋'),

    # Mixing & combining
    _action('mix batter', '🥣'), _action('whisk', '🥄'), _action('stir', '🥄'),
    _action('combine', '🥣'), _action('toss', '🥗'),

    # Advanced techniques
    _action('caramelize', '🍯'), _action('reduce', '🍲'), _action('infuse', '🍵'),
    _action('smoke', '💨'), _action('pickle', '🥒'), _action('rest', '⏰'),

    # Serving / finishing
    _action('serve on leaf', '🍽️'), _action('pass', '🏳️'),
]

_ACTIONS_BY_NAME: Dict[str, KitchenAction] = {action.name: action for action in COOKING_ACTIONS}


def get_action(name: str) -> Optional[KitchenAction]:
    """Look up a catalog action by its tool name."""
    return _ACTIONS_BY_NAME.get(name)


STARTING_INGREDIENTS: List[Ingredient] = [
    # Grains & legumes
    Ingredient('ponni rice', '🌾'), Ingredient('urad dal', '⚪'), Ingredient('toor dal', '🟡'),
    Ingredient('chana dal', '🟠'), Ingredient('semolina', '🌾'),

    # Vegetables (nattu kaigari)
    Ingredient('drumstick murungakkai', '🥢'), Ingredient('pearl onions', '🧅'),
    Ingredient('okra bendakaya', '🥒'), Ingredient('brinjal', '🍆'),
    Ingredient('raw banana', '🍌'), Ingredient('curry leaves', '🍃'),
    Ingredient('coriander leaves', '🌿'), Ingredient('green chilies', '🌶️'),
    Ingredient('ginger', '🫚'), Ingredient('garlic', '🧄'),
    Ingredient('tomato', '🍅'), Ingredient('potato', '🥔'),

    # Pantry & spices
    Ingredient('mustard seeds', '⚫'), Ingredient('cumin seeds', '🤎'),
    Ingredient('asafetida hing', '🧂'), Ingredient('tamarind', '🤎'),
    Ingredient('sambar powder', '🌶️'), Ingredient('turmeric', '🟡'),
    Ingredient('salt', '🧂'), Ingredient('black pepper', '⚫'),
    Ingredient('dry red chilies', '🌶️'), Ingredient('fenugreek seeds', '🟤'),

    # Dairy & fats
    Ingredient('gingelly oil', '🍶'), Ingredient('coconut oil', '🥥'),
    Ingredient('ghee', '🍯'), Ingredient('curd yogurt', '🥛'),
    Ingredient('milk', '🥛'),

    # Proteins
    Ingredient('king fish', '🐟'), Ingredient('chicken', '🍗'),
    Ingredient('shrimp', '🦐'), Ingredient('mutton', '🍖'),
    Ingredient('eggs', '🥚'),

    # Others
    Ingredient('fresh coconut', '🥥'), Ingredient('jaggery', '🤎'),
    Ingredient('coffee decoction', '☕'), Ingredient('sugar', '🍯'),
    Ingredient('water', '💧'),
]

# (id, name, emoji, difficulty)
EXAMPLE_ORDERS = [
    ("order-1", "Filter Coffee", "☕", OrderDifficulty.EASY),
    ("order-2", "Ghee Roast Dosa", "🥞", OrderDifficulty.INTERMEDIATE),
    ("order-3", "Madras Fish Curry", "🥘", OrderDifficulty.DIFFICULT),
    ("order-4", "Masala Dosa", "🥞", OrderDifficulty.DIFFICULT),
    ("order-5", "Idly", "🥞", OrderDifficulty.DIFFICULT),
    ("order-6", "Poori", "🥞", OrderDifficulty.DIFFICULT),
    ("order-7", "Masala Dosa, Idly & Poori Combo", "🥞", OrderDifficulty.DIFFICULT),
]
