"""
Metrics Collector for Madras Masala Lab
Turns the cooking timeline and order ledger into tables and session reports
"""

import json
import pandas as pd
from typing import Any, Dict, Optional
from pathlib import Path
from datetime import datetime
import logging

from kitchen.ledger import OrderLedger
from kitchen.timeline import Timeline
from masala_types import OrderStatus

logger = logging.getLogger(__name__)

TIMELINE_COLUMNS = [
    "id", "timestamp", "kind", "text", "action", "ingredients", "result", "emoji", "outcome"
]
ORDER_COLUMNS = ["id", "name", "emoji", "difficulty", "status", "served_dish"]


class MetricsCollector:
    """Collect and summarize what happened in one kitchen session"""

    def __init__(self, timeline: Timeline, ledger: OrderLedger, output_dir: Optional[Path] = None):
        self.timeline = timeline
        self.ledger = ledger
        self.output_dir = Path(output_dir) if output_dir else Path("data") / "reports"

    def timeline_frame(self) -> pd.DataFrame:
        """One row per timeline entry, oldest first"""
        rows = []
        for entry in self.timeline.entries():
            if not entry.is_attempt:
                outcome = None
            elif entry.is_pending:
                outcome = "pending"
            elif entry.is_error:
                outcome = "error"
            else:
                outcome = "resolved"

            rows.append({
                "id": entry.id,
                "timestamp": entry.timestamp,
                "kind": "attempt" if entry.is_attempt else "narration",
                "text": entry.text,
                "action": entry.action,
                "ingredients": ", ".join(entry.ingredients) if entry.ingredients else None,
                "result": entry.result.name if entry.result else None,
                "emoji": entry.result.emoji if entry.result else None,
                "outcome": outcome
            })

        return pd.DataFrame(rows, columns=TIMELINE_COLUMNS)

    def order_frame(self) -> pd.DataFrame:
        """One row per order in ledger order"""
        rows = [order.to_dict() for order in self.ledger.all()]
        return pd.DataFrame(rows, columns=ORDER_COLUMNS)

    def summarize(self) -> Dict[str, Any]:
        """Headline numbers for the session"""
        timeline_df = self.timeline_frame()
        order_df = self.order_frame()

        attempts = timeline_df[timeline_df["kind"] == "attempt"]
        outcome_counts = attempts["outcome"].value_counts()
        status_counts = order_df["status"].value_counts()

        orders_by_status = {
            status.value: int(status_counts.get(status.value, 0))
            for status in OrderStatus
        }
        completed = orders_by_status[OrderStatus.COMPLETED.value]
        finished = completed + orders_by_status[OrderStatus.FAILED.value]

        return {
            "narrations": int((timeline_df["kind"] == "narration").sum()),
            "attempts": int(len(attempts)),
            "resolved": int(outcome_counts.get("resolved", 0)),
            "errored": int(outcome_counts.get("error", 0)),
            "pending": int(outcome_counts.get("pending", 0)),
            "actions_used": {
                str(action): int(count)
                for action, count in attempts["action"].value_counts().items()
            },
            "orders_by_status": orders_by_status,
            "completion_rate": completed / finished if finished else 0.0
        }

    def save_report(self, name: str = "kitchen_report") -> Path:
        """Write summary, timeline and orders to a timestamped JSON file"""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().isoformat()
        filename = f"{name}_{timestamp.replace(':', '-').replace('.', '-')}.json"
        filepath = self.output_dir / filename

        report = {
            "timestamp": timestamp,
            "summary": self.summarize(),
            "timeline": [entry.to_dict() for entry in self.timeline.entries()],
            "orders": [order.to_dict() for order in self.ledger.all()]
        }

        with open(filepath, 'w') as f:
            json.dump(report, f, indent=2, default=str, ensure_ascii=False)

        logger.info(f"Saved report to {filepath}")
        return filepath
