"""
Kitchen engine - owns the shared kitchen state and wires the three agents together.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from autogen_core.models import ChatCompletionClient

from agents.combination import CombinationResolver
from agents.orchestrator import CookingOrchestrator, ToolResponse
from agents.prompts import (
    COMBINATION_SYSTEM_INSTRUCTION,
    VERIFICATION_SYSTEM_INSTRUCTION,
    CombinationResult,
    VerificationResult,
    build_batch_directive,
    build_prepare_directive,
)
from agents.session import PlannerSession, SessionTurn
from agents.verification import VerificationMatcher
from config import Settings, get_settings
from masala_types import AgentRole, OrderStatus
from providers.llm import CompletionService, create_model_client
from .catalog import COOKING_ACTIONS, EXAMPLE_ORDERS, SERVE_ACTION_NAME, STARTING_INGREDIENTS
from .ledger import Order, OrderConflictError, OrderLedger
from .pantry import Pantry
from .timeline import Timeline

logger = logging.getLogger(__name__)


def seed_orders() -> List[Order]:
    """Fresh copies of the example orders."""
    return [
        Order(id=order_id, name=name, emoji=emoji, difficulty=difficulty)
        for order_id, name, emoji, difficulty in EXAMPLE_ORDERS
    ]


class KitchenEngine:
    """The kitchen: pantry, order ledger, cooking log and the agents acting on them.

    Two orchestrators share the same state: ``manual`` for the human chef and
    ``agent`` for the Head Chef planner. Each serializes its own actions; the
    pantry and ledger make cross-actor updates atomic.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        combination_client: Optional[ChatCompletionClient] = None,
        planner_client: Optional[ChatCompletionClient] = None,
        verifier_client: Optional[ChatCompletionClient] = None
    ):
        self.settings = settings or get_settings()
        kitchen = self.settings.kitchen

        # Kitchen state
        self.pantry = Pantry(STARTING_INGREDIENTS)
        self.ledger = OrderLedger(seed_orders() if kitchen.seed_orders else [])
        self.timeline = Timeline()
        self.is_cooking = False

        # Spice Expert
        combination_client = combination_client or create_model_client(
            self.settings, kitchen.provider_for(AgentRole.COMBINATION)
        )
        self.resolver = CombinationResolver(
            CompletionService(combination_client, COMBINATION_SYSTEM_INSTRUCTION, CombinationResult)
        )

        # Food Critic
        verifier_client = verifier_client or create_model_client(
            self.settings, kitchen.provider_for(AgentRole.VERIFIER)
        )
        self.verifier = VerificationMatcher(
            CompletionService(verifier_client, VERIFICATION_SYSTEM_INSTRUCTION, VerificationResult),
            ledger=self.ledger,
            pantry=self.pantry,
            timeline=self.timeline,
            match_threshold=kitchen.match_threshold
        )

        # Orchestrators
        self.manual = self._create_orchestrator("chef")
        self.agent = self._create_orchestrator("planner")

        # Head Chef
        planner_client = planner_client or create_model_client(
            self.settings, kitchen.provider_for(AgentRole.PLANNER)
        )
        self.planner = PlannerSession(
            planner_client,
            orchestrator=self.agent,
            pantry=self.pantry,
            max_steps=kitchen.max_agent_steps
        )

        logger.info(f"Kitchen engine initialized with {len(self.pantry)} ingredients and {len(self.ledger.all())} orders")

    def _create_orchestrator(self, actor: str) -> CookingOrchestrator:
        return CookingOrchestrator(
            pantry=self.pantry,
            timeline=self.timeline,
            resolve=self.resolver.resolve,
            verify=self._verify_served_dish,
            abandon=self._abandon_orders,
            actor=actor
        )

    # ------------------------------------------------------------------
    # Capabilities handed to the orchestrators

    async def _verify_served_dish(self, served_dish: str) -> bool:
        matched = await self.verifier.verify(served_dish)
        # Cooking only stops once nothing is left on the pass
        if not self.ledger.has_in_progress():
            self.is_cooking = False
        return matched

    def _abandon_orders(self) -> List[Order]:
        abandoned = self.ledger.abandon_in_progress(self.settings.kitchen.abandoned_dish)
        self.is_cooking = False
        return abandoned

    # ------------------------------------------------------------------
    # Orders

    def _require_order(self, order_id: str) -> Order:
        order = self.ledger.get(order_id)
        if order is None:
            raise KeyError(f"Order {order_id} not found")
        return order

    def pick_up_order(self, order_id: str) -> bool:
        """Manually pick up one order. Refused while another order is being cooked."""
        self._require_order(order_id)
        if self.ledger.has_in_progress():
            logger.info(f"Pickup of {order_id} refused: an order is already in progress")
            return False
        return self.ledger.pick_up(order_id)

    def add_custom_order(self, name: str) -> Order:
        return self.ledger.add_order(name)

    def clear_summary(self) -> int:
        return self.ledger.clear_finished()

    # ------------------------------------------------------------------
    # Cooking

    async def execute_action(self, action_name: str, ingredient_names: Iterable[str]) -> ToolResponse:
        """Manual trigger: apply an action to the selected ingredients.

        Serving takes exactly one selected ingredient, which is the dish.
        """
        names = list(ingredient_names)
        if action_name == SERVE_ACTION_NAME:
            if len(names) != 1:
                return ToolResponse(success=False, error="Select exactly one dish to serve.")
            return await self.manual.dispatch(SERVE_ACTION_NAME, {"dish": names[0]})
        return await self.manual.dispatch(action_name, {"ingredients": names})

    async def cook_with_agent(self, order_id: str) -> SessionTurn:
        """Hand one order to the Head Chef."""
        order = self._require_order(order_id)
        if order.is_terminal:
            raise OrderConflictError(f"Order {order_id} is already {order.status.value}")
        if order.status == OrderStatus.NOT_STARTED and not self.pick_up_order(order_id):
            raise OrderConflictError(f"Cannot start {order.name} while another order is in progress")

        self.is_cooking = True
        return await self.planner.send(build_prepare_directive(order.name))

    async def cook_batch_with_agent(self, order_ids: Iterable[str]) -> SessionTurn:
        """Start a set of orders together and give the Head Chef one directive for all of them."""
        requested = list(order_ids)
        for order_id in requested:
            self._require_order(order_id)

        picked = self.ledger.pick_up_batch(requested)
        if not picked:
            raise OrderConflictError(f"Orders {requested} cannot all be started")

        self.is_cooking = True
        return await self.planner.send(build_batch_directive(o.name for o in picked))

    # ------------------------------------------------------------------
    # Views

    def get_kitchen_state(self) -> Dict[str, Any]:
        """Snapshot of the whole kitchen for presentation."""
        return {
            "is_cooking": self.is_cooking,
            "active_actions": {
                orchestrator.actor: orchestrator.active_action
                for orchestrator in (self.manual, self.agent)
            },
            "pantry": [i.to_dict() for i in self.pantry.snapshot()],
            "orders": [o.to_dict() for o in self.ledger.all()],
            "timeline": [e.to_dict() for e in self.timeline.entries()],
            "actions": [a.to_dict() for a in COOKING_ACTIONS],
        }
