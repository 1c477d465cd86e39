"""
Food Critic: decides whether a served dish satisfies an in-progress order.
"""

import logging
from typing import Optional

from kitchen.ledger import Order, OrderLedger
from kitchen.pantry import Pantry
from kitchen.timeline import Timeline
from providers.llm import CompletionService, parse_json_response
from .prompts import VerificationResult, build_verification_prompt

logger = logging.getLogger(__name__)

DEFAULT_SERVED_EMOJI = "✅"


class VerificationMatcher:
    """Matches a served dish against in-progress orders, first eligible order wins."""

    def __init__(
        self,
        completion_service: CompletionService,
        ledger: OrderLedger,
        pantry: Pantry,
        timeline: Timeline,
        match_threshold: float = 0.7
    ):
        self.completion_service = completion_service
        self.ledger = ledger
        self.pantry = pantry
        self.timeline = timeline
        self.match_threshold = match_threshold

    async def judge(self, order: Order, served_dish: str) -> Optional[VerificationResult]:
        """Ask the critic about one order. None when the service fails or answers badly."""
        prompt = build_verification_prompt(order.name, served_dish)
        try:
            response_text = await self.completion_service.generate(prompt)
            return VerificationResult.model_validate(parse_json_response(response_text))
        except Exception as e:
            logger.error(f"Error verifying {served_dish!r} against order {order.id} ({order.name}): {e}")
            return None

    async def verify(self, served_dish: str) -> bool:
        """Try the served dish against every in-progress order, in ledger order."""
        candidates = self.ledger.in_progress()

        if not candidates:
            self.timeline.narrate(f'✅ Served "{served_dish}"')
            return True

        for order in candidates:
            verdict = await self.judge(order, served_dish)
            if verdict is None:
                continue

            logger.info(
                f"Critic on {served_dish!r} vs {order.name!r}: matches={verdict.matches} "
                f"confidence={verdict.confidence:.2f} ({verdict.explanation})"
            )
            if not (verdict.matches and verdict.confidence > self.match_threshold):
                continue

            served = self.pantry.find(served_dish)
            emoji = served.emoji if served else DEFAULT_SERVED_EMOJI
            if not self.ledger.complete(order.id, served_dish, emoji):
                # Abandoned while the critic was thinking
                continue

            self.timeline.narrate(f'✅ Delicious! "{served_dish}" is a perfect match for "{order.name}".')
            return True

        self.timeline.narrate("❌ That's not part of the current feast!")
        return False
