"""
Pantry (ingredient inventory) with canonical-name deduplication.
"""

import logging
import re
import threading
from typing import Dict, Iterable, Iterator, List, Optional

from .catalog import Ingredient

logger = logging.getLogger(__name__)


def normalize_ingredient_name(name: str) -> str:
    """Canonical lookup key: lower-cased, alphanumerics only."""
    return re.sub(r'[^a-z0-9]', '', name.lower())


def find_ingredient(name: str, ingredients: Iterable[Ingredient]) -> Optional[Ingredient]:
    """Return the first ingredient whose canonical key matches ``name``."""
    key = normalize_ingredient_name(name)
    if not key:
        return None
    for ingredient in ingredients:
        if normalize_ingredient_name(ingredient.name) == key:
            return ingredient
    return None


class Pantry:
    """Growing, insertion-ordered set of ingredients keyed by canonical name."""

    def __init__(self, ingredients: Optional[Iterable[Ingredient]] = None):
        self._items: List[Ingredient] = []
        self._index: Dict[str, Ingredient] = {}
        self._lock = threading.Lock()

        for ingredient in ingredients or []:
            self.add(ingredient)

    def add(self, ingredient: Ingredient) -> bool:
        """Insert unless an ingredient with the same canonical name exists.

        Returns True when the pantry grew. Names with no letters or digits
        are never stored.
        """
        key = normalize_ingredient_name(ingredient.name)
        if not key:
            logger.warning(f"Refusing ingredient without a lookup key: {ingredient.name!r}")
            return False
        with self._lock:
            if key in self._index:
                return False
            self._index[key] = ingredient
            self._items.append(ingredient)

        logger.info(f"Pantry gained {ingredient.emoji} {ingredient.name}")
        return True

    def find(self, name: str) -> Optional[Ingredient]:
        key = normalize_ingredient_name(name)
        if not key:
            return None
        return self._index.get(key)

    def contains(self, name: str) -> bool:
        return self.find(name) is not None

    def snapshot(self) -> List[Ingredient]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Ingredient]:
        return iter(self.snapshot())
