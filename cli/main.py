"""
Command Line Interface using Fire - run the kitchen from a terminal
"""
import fire
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union
import uvicorn

from config import Settings, load_settings
from kitchen.catalog import COOKING_ACTIONS, STARTING_INGREDIENTS
from kitchen.engine import KitchenEngine
from kitchen.ledger import OrderConflictError
from kitchen.timeline import TimelineEntry
from masala_types import OrderStatus
from metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


def _split_names(value: Union[str, Sequence[str], None]) -> List[str]:
    """Fire hands over either a comma-separated string or a tuple."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [v.strip() for v in str(value).split(",") if v.strip()]


def _format_entry(entry: TimelineEntry) -> str:
    if not entry.is_attempt:
        return f"  💬 {entry.text}"
    line = f"  🔥 {entry.action}({', '.join(entry.ingredients or [])})"
    if entry.is_pending:
        line += " -> ..."
    else:
        line += f" -> {entry.result.emoji} {entry.result.name}"
    if entry.text:
        line += f"  [{entry.text}]"
    return line


class MasalaLabCLI:
    """Command-line interface for the Madras Masala Lab kitchen"""

    def __init__(self, config_path: str = "configs/config.yaml"):
        """Initialize CLI with configuration"""
        self.config_path = Path(config_path)
        self.settings: Settings = load_settings(self.config_path)

        logging.basicConfig(
            level=getattr(logging, self.settings.log_level.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Model clients are only created when a command needs the kitchen
        self._engine: Optional[KitchenEngine] = None

    @property
    def engine(self) -> KitchenEngine:
        if self._engine is None:
            self._engine = KitchenEngine(self.settings)
        return self._engine

    def _run_async(self, coro):
        """Run async function in sync context"""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    def _print_timeline(self) -> None:
        print("\n=== Cooking Log ===")
        for entry in self.engine.timeline.entries():
            print(_format_entry(entry))

    def _print_orders(self) -> None:
        print("\n=== Orders ===")
        for order in self.engine.ledger.all():
            served = f" -> {order.served_dish}" if order.served_dish else ""
            print(f"  {order.emoji} {order.name} [{order.id}] {order.status.value}{served}")

    # Views
    def pantry(self) -> None:
        """List the starting pantry"""
        print(f"=== Pantry ({len(STARTING_INGREDIENTS)} ingredients) ===")
        for ingredient in STARTING_INGREDIENTS:
            print(f"  {ingredient.emoji} {ingredient.name}")

    def actions(self) -> None:
        """List the cooking actions the chefs can use"""
        print(f"=== Cooking Actions ({len(COOKING_ACTIONS)}) ===")
        for action in COOKING_ACTIONS:
            print(f"  {action.emoji} {action.name:<22} {action.display_name}")

    def orders(self) -> None:
        """List the menu"""
        self._print_orders()

    # Cooking
    def combine(self, action: str, ingredients: Union[str, Sequence[str]]) -> None:
        """Apply one action by hand and show what the Spice Expert makes of it

        Args:
            action: Action name, e.g. stone_grind
            ingredients: Comma-separated ingredient names
        """
        names = _split_names(ingredients)
        response = self._run_async(self.engine.execute_action(action, names))

        if response.success and response.result:
            print(f"{response.emoji} {response.result}")
        elif response.success:
            print(response.message)
        else:
            print(f"Failed: {response.error}")

    def cook(self, order: str, report: bool = False) -> None:
        """Let the Head Chef cook one order

        Args:
            order: Order id, or the name of a new dish to add and cook
            report: Save a session report afterwards
        """
        engine = self.engine
        if engine.ledger.get(order) is None:
            order = engine.add_custom_order(order).id

        try:
            turn = self._run_async(engine.cook_with_agent(order))
        except OrderConflictError as e:
            print(f"Error: {e}")
            return

        self._finish(turn, report)

    def batch(self, orders: Union[str, Sequence[str], None] = None, report: bool = False) -> None:
        """Let the Head Chef cook several orders at once

        Args:
            orders: Comma-separated order ids (default: every order not yet started)
            report: Save a session report afterwards
        """
        engine = self.engine
        order_ids = _split_names(orders) or [
            o.id for o in engine.ledger.all() if o.status == OrderStatus.NOT_STARTED
        ]
        if not order_ids:
            print("Nothing to cook.")
            return

        try:
            turn = self._run_async(engine.cook_batch_with_agent(order_ids))
        except (KeyError, OrderConflictError) as e:
            print(f"Error: {e}")
            return

        self._finish(turn, report)

    def _finish(self, turn, report: bool) -> None:
        self._print_timeline()
        self._print_orders()

        if turn.reply:
            print(f"\nMami: {turn.reply}")
        if turn.error:
            print(f"\nStopped: {turn.error}")
        if report:
            self.report()

    def report(self) -> str:
        """Summarize this session and write it to the reports directory"""
        collector = MetricsCollector(self.engine.timeline, self.engine.ledger, self.settings.reports_dir)

        print("\n=== Session Metrics ===")
        for name, value in collector.summarize().items():
            print(f"{name}: {value}")

        path = collector.save_report()
        print(f"\nReport saved: {path}")
        return str(path)

    # Server commands
    def serve(self, host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
        """Start the FastAPI server

        Args:
            host: Host to bind to
            port: Port to bind to
            reload: Enable auto-reload for development. The reloaded worker
                builds its own kitchen from environment settings.
        """
        from api.server import create_app

        host = host or self.settings.api.host
        port = port or self.settings.api.port
        reload = reload or self.settings.api.reload

        print(f"Starting {self.settings.api.title} on {host}:{port}")
        print(f"Documentation will be available at http://{host}:{port}/docs")

        if reload:
            # uvicorn can only reload an app it imports itself
            uvicorn.run("api.server:create_app", factory=True, host=host, port=port, reload=True, log_level="info")
            return

        app = create_app(self.settings, self.engine)
        uvicorn.run(app, host=host, port=port, log_level="info")


def main():
    """Main CLI entry point"""
    if len(sys.argv) > 1 and sys.argv[1].endswith('.yaml'):
        config_path = sys.argv[1]
        sys.argv = [sys.argv[0]] + sys.argv[2:]  # Remove config from args
    else:
        config_path = "configs/config.yaml"

    try:
        fire.Fire(MasalaLabCLI(config_path))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
