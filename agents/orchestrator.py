"""
Cooking Orchestrator - the trust boundary between tool calls and kitchen state.

Every tool call (from the planning agent or a manual trigger) is classified,
validated against the pantry and then executed. Nothing a model says can
reach the pantry, ledger or timeline without passing through here, and no
failure from a model-backed collaborator escapes ``dispatch``.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from kitchen.catalog import ABANDON_ACTION_NAME, SERVE_ACTION_NAME, Ingredient, KitchenAction, get_action
from kitchen.ledger import Order
from kitchen.pantry import Pantry, normalize_ingredient_name
from kitchen.timeline import Timeline, TimelineEntry
from masala_types import ToolKind
from .errors import CombinationError, ToolValidationError

logger = logging.getLogger(__name__)

ResolveFn = Callable[[KitchenAction, Sequence[str]], Awaitable[Optional[Ingredient]]]
VerifyFn = Callable[[str], Awaitable[bool]]
AbandonFn = Callable[[], List[Order]]

MISSING_INGREDIENTS_ERROR = "Ingredients missing from pantry."
BUSY_ERROR = "Another action is still cooking."


@dataclass
class ToolResponse:
    """Structured answer returned to whoever issued the tool call."""
    success: bool
    result: Optional[str] = None
    emoji: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        for key in ("result", "emoji", "message", "error"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


class PendingNarration:
    """One-slot buffer for planner text that arrived alongside tool calls.

    The next action attempt takes it; taking clears the slot. A serve, a pass
    or the end of a planner turn drops whatever is left.
    """

    def __init__(self):
        self._text: Optional[str] = None

    def put(self, text: str) -> None:
        if self._text is not None:
            logger.debug(f"Replacing unconsumed narration: {self._text!r}")
        self._text = text

    def take(self) -> Optional[str]:
        text, self._text = self._text, None
        return text

    def peek(self) -> Optional[str]:
        return self._text

    def discard(self) -> None:
        if self._text is not None:
            logger.debug(f"Dropping unconsumed narration: {self._text!r}")
        self._text = None


class CookingOrchestrator:
    """Dispatches tool calls for a single actor (the planner, or the manual chef)."""

    def __init__(
        self,
        pantry: Pantry,
        timeline: Timeline,
        resolve: ResolveFn,
        verify: VerifyFn,
        abandon: AbandonFn,
        actor: str = "planner"
    ):
        self.pantry = pantry
        self.timeline = timeline
        self._resolve = resolve
        self._verify = verify
        self._abandon = abandon
        self.actor = actor
        self.pending_narration = PendingNarration()
        self.active_action: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.active_action is not None

    # ------------------------------------------------------------------
    # Narration events

    def receive_narration(self, text: Optional[str], has_tool_calls: bool = False) -> Optional[TimelineEntry]:
        """Handle free text from the planner.

        Text accompanying tool calls is held for the next action entry;
        standalone text is logged once.
        """
        text = (text or "").strip()
        if not text:
            return None

        if has_tool_calls:
            self.pending_narration.put(text)
            return None

        if self.timeline.has_narration(text):
            return None
        return self.timeline.narrate(text)

    # ------------------------------------------------------------------
    # Tool calls

    async def dispatch(self, name: str, args: Union[Mapping[str, Any], str, None] = None) -> ToolResponse:
        """Classify, validate and execute one tool call."""
        logger.info(f"[{self.actor}] tool call {name}({args})")
        try:
            kind, action = self.classify(name)
            arguments = self._decode_args(name, args)

            if kind == ToolKind.SERVE:
                return await self._serve(arguments)
            if kind == ToolKind.ABANDON:
                return self._pass()
            return await self._cook(action, arguments)

        except ToolValidationError as e:
            logger.warning(f"[{self.actor}] rejected {name}: {e.error}")
            return ToolResponse(success=False, error=e.error)

    def classify(self, name: str) -> Tuple[ToolKind, KitchenAction]:
        action = get_action(name or "")
        if action is None:
            raise ToolValidationError(name, f"Unknown action: {name}")
        if action.name == SERVE_ACTION_NAME:
            return ToolKind.SERVE, action
        if action.name == ABANDON_ACTION_NAME:
            return ToolKind.ABANDON, action
        return ToolKind.REGULAR, action

    def validate_ingredients(self, requested: Sequence[str]) -> List[str]:
        """Resolve requested names against the pantry.

        Unknown names are dropped, duplicates (by canonical key) collapse to
        their first occurrence, and the pantry's own spelling is used.
        """
        validated: List[str] = []
        seen = set()
        for requested_name in requested:
            found = self.pantry.find(requested_name)
            if not found:
                continue
            key = normalize_ingredient_name(found.name)
            if key not in seen:
                seen.add(key)
                validated.append(found.name)
        return validated

    def _decode_args(self, name: str, args: Union[Mapping[str, Any], str, None]) -> Dict[str, Any]:
        if args is None:
            return {}
        if isinstance(args, str):
            if not args.strip():
                return {}
            try:
                args = json.loads(args)
            except json.JSONDecodeError:
                raise ToolValidationError(name, f"Arguments for {name} are not valid JSON.")
        if not isinstance(args, Mapping):
            raise ToolValidationError(name, f"Arguments for {name} must be an object.")
        return dict(args)

    async def _cook(self, action: KitchenAction, arguments: Dict[str, Any]) -> ToolResponse:
        requested = arguments.get("ingredients")
        if not isinstance(requested, list) or not all(isinstance(i, str) for i in requested):
            raise ToolValidationError(action.name, "ingredients must be a list of ingredient names.")
        if not requested:
            raise ToolValidationError(action.name, "No ingredients given.")
        if self.is_busy:
            raise ToolValidationError(action.name, BUSY_ERROR)

        validated = self.validate_ingredients(requested)
        if not validated:
            raise ToolValidationError(action.name, MISSING_INGREDIENTS_ERROR)

        # Pending entry is logged before the oracle is asked
        self.active_action = action.name
        entry = self.timeline.start_attempt(action.name, validated, text=self.pending_narration.take())
        try:
            try:
                ingredient = await self._resolve(action, validated)
                if ingredient is None:
                    raise CombinationError(action.name, validated)
            except Exception as e:
                logger.error(f"[{self.actor}] {action.name} failed: {e}")
                self.timeline.fail(entry.id)
                return ToolResponse(success=False, error=str(e))

            self.pantry.add(ingredient)
            self.timeline.resolve(entry.id, ingredient)
            return ToolResponse(success=True, result=ingredient.name, emoji=ingredient.emoji)
        finally:
            self.active_action = None

    async def _serve(self, arguments: Dict[str, Any]) -> ToolResponse:
        dish = arguments.get("dish")
        if not isinstance(dish, str) or not dish.strip():
            raise ToolValidationError(SERVE_ACTION_NAME, "Name the dish to serve.")
        dish = dish.strip()
        # The matcher writes the only entry for a serve
        self.pending_narration.discard()

        try:
            matched = await self._verify(dish)
        except Exception as e:
            logger.error(f"[{self.actor}] verification of {dish!r} failed: {e}")
            self.timeline.narrate(f'❌ Could not judge "{dish}" right now.')
            matched = False

        if matched:
            return ToolResponse(success=True, message=f"{dish} served! Romba nalla iruku!")
        return ToolResponse(success=False, error=f"{dish} is not what was ordered. Try again!")

    def _pass(self) -> ToolResponse:
        self.pending_narration.discard()
        abandoned = self._abandon()
        self.timeline.narrate("🏳️ Gave up on the order")
        logger.info(f"[{self.actor}] passed on {len(abandoned)} order(s)")
        return ToolResponse(success=True, message="Order abandoned.")
