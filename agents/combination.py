"""
Spice Expert: resolves (action, ingredients) into one new ingredient.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from kitchen.catalog import Ingredient, KitchenAction
from kitchen.pantry import normalize_ingredient_name
from providers.llm import CompletionService, parse_json_response
from .errors import CombinationError
from .prompts import CombinationResult, build_combination_prompt

logger = logging.getLogger(__name__)


class CombinationResolver:
    """Stateless request/response oracle. Callers serialize their own calls."""

    def __init__(self, completion_service: CompletionService):
        self.completion_service = completion_service

    async def combine(self, action: KitchenAction, ingredient_names: Sequence[str]) -> Ingredient:
        """Ask the oracle for the result, raising CombinationError on any failure."""
        names: List[str] = list(ingredient_names)
        if not names:
            raise ValueError("A combination needs at least one ingredient")

        prompt = build_combination_prompt(action, names)
        try:
            response_text = await self.completion_service.generate(prompt)
        except Exception as e:
            raise CombinationError(action.name, names, f"service error: {e}") from e

        try:
            result = CombinationResult.model_validate(parse_json_response(response_text))
        except ValidationError as e:
            raise CombinationError(action.name, names, f"malformed response: {response_text!r}") from e

        name = result.result_name.strip()
        if not name:
            raise CombinationError(action.name, names, "blank result name")
        # A name without a lookup key could never be found in the pantry again
        if not normalize_ingredient_name(name):
            raise CombinationError(action.name, names, f"result name {name!r} has no letters or digits")

        return Ingredient(name=name, emoji=result.emoji.strip())

    async def resolve(self, action: KitchenAction, ingredient_names: Sequence[str]) -> Optional[Ingredient]:
        """Resolve a combination; None means "combination failed", never an exception."""
        try:
            ingredient = await self.combine(action, ingredient_names)
        except CombinationError as e:
            logger.warning(str(e))
            return None

        logger.info(f"{action.name}({', '.join(ingredient_names)}) -> {ingredient.emoji} {ingredient.name}")
        return ingredient
