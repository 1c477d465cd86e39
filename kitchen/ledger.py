"""
Order ledger: lifecycle state machine for dish requests.
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from masala_types import OrderDifficulty, OrderStatus

logger = logging.getLogger(__name__)


class OrderConflictError(Exception):
    """An order cannot move to the requested state right now."""


@dataclass
class Order:
    """A dish request with a lifecycle status."""
    id: str
    name: str
    emoji: str
    difficulty: OrderDifficulty
    status: OrderStatus = OrderStatus.NOT_STARTED
    served_dish: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "difficulty": self.difficulty.value,
            "status": self.status.value,
            "served_dish": self.served_dish,
        }


class OrderLedger:
    """Ordered collection of orders; every transition is atomic per order id.

    Pickup is only legal from ``not_started``; completion and abandonment only
    from ``in_progress``. Anything else is a silent no-op so duplicate
    triggers from the UI or the agent never raise.
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        self._orders: List[Order] = list(orders or [])
        self._lock = threading.RLock()

    # Views

    def all(self) -> List[Order]:
        with self._lock:
            return list(self._orders)

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            for order in self._orders:
                if order.id == order_id:
                    return order
        return None

    def in_progress(self) -> List[Order]:
        with self._lock:
            return [o for o in self._orders if o.status == OrderStatus.IN_PROGRESS]

    def finished(self) -> List[Order]:
        with self._lock:
            return [o for o in self._orders if o.is_terminal]

    def has_in_progress(self) -> bool:
        return bool(self.in_progress())

    # Transitions

    def add_order(
        self,
        name: str,
        emoji: str = "📜",
        difficulty: OrderDifficulty = OrderDifficulty.INTERMEDIATE
    ) -> Order:
        """Add a custom menu item."""
        name = name.strip()
        if not name:
            raise ValueError("Order name must not be blank")

        order = Order(
            id=f"order-{uuid.uuid4().hex[:12]}",
            name=name,
            emoji=emoji,
            difficulty=difficulty
        )
        with self._lock:
            self._orders.append(order)

        logger.info(f"Added order {order.id}: {name}")
        return order

    def pick_up(self, order_id: str) -> bool:
        """not_started -> in_progress."""
        with self._lock:
            order = self.get(order_id)
            if not order or order.status != OrderStatus.NOT_STARTED:
                return False
            order.status = OrderStatus.IN_PROGRESS

        logger.info(f"Picked up order {order_id} ({order.name})")
        return True

    def pick_up_batch(self, order_ids: Iterable[str]) -> List[Order]:
        """Pick up a set of orders all-or-nothing.

        Returns the picked-up orders, or an empty list when any requested id
        is unknown or no longer ``not_started``.
        """
        requested = list(dict.fromkeys(order_ids))
        if not requested:
            return []

        with self._lock:
            orders = [self.get(order_id) for order_id in requested]
            if any(o is None or o.status != OrderStatus.NOT_STARTED for o in orders):
                logger.warning(f"Batch pickup refused for {requested}")
                return []
            for order in orders:
                order.status = OrderStatus.IN_PROGRESS

        logger.info(f"Picked up batch: {', '.join(o.name for o in orders)}")
        return orders

    def complete(self, order_id: str, served_dish: str, emoji: str) -> bool:
        """in_progress -> completed."""
        with self._lock:
            order = self.get(order_id)
            if not order or order.status != OrderStatus.IN_PROGRESS:
                return False
            order.status = OrderStatus.COMPLETED
            order.served_dish = served_dish
            order.emoji = emoji

        logger.info(f"Order {order_id} ({order.name}) completed with {served_dish}")
        return True

    def abandon_in_progress(self, served_dish: str) -> List[Order]:
        """in_progress -> failed, for every in-progress order."""
        with self._lock:
            abandoned = [o for o in self._orders if o.status == OrderStatus.IN_PROGRESS]
            for order in abandoned:
                order.status = OrderStatus.FAILED
                order.served_dish = served_dish

        if abandoned:
            logger.warning(f"Abandoned orders: {', '.join(o.name for o in abandoned)}")
        return abandoned

    def clear_finished(self) -> int:
        """Drop completed and failed orders from the ledger."""
        with self._lock:
            before = len(self._orders)
            self._orders = [o for o in self._orders if not o.is_terminal]
            removed = before - len(self._orders)

        logger.info(f"Cleared {removed} finished orders")
        return removed
