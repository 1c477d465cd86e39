"""
FastAPI Server - REST API for the Madras Masala Lab kitchen
"""
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
import logging
from datetime import datetime

from config import Settings, get_settings
from kitchen.engine import KitchenEngine
from kitchen.ledger import Order, OrderConflictError
from metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


# Pydantic models for API
class OrderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Dish to add to the menu")

class OrderResponse(BaseModel):
    id: str
    name: str
    emoji: str
    difficulty: str
    status: str
    served_dish: Optional[str] = None

class BatchCookRequest(BaseModel):
    order_ids: List[str] = Field(..., min_length=1, description="Orders to start together")

class ActionExecuteRequest(BaseModel):
    action: str = Field(..., description="Cooking action name, e.g. stone_grind")
    ingredients: List[str] = Field(default=[], description="Selected ingredient names")

class ActionResultResponse(BaseModel):
    success: bool
    result: Optional[str] = None
    emoji: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

class SessionTurnResponse(BaseModel):
    message: str
    reply: Optional[str] = None
    tool_calls: List[Dict[str, Any]] = []
    steps: int
    completed: bool
    error: Optional[str] = None


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(**order.to_dict())


class KitchenAPI:
    """FastAPI application exposing kitchen views and triggers"""

    def __init__(self, settings: Optional[Settings] = None, engine: Optional[KitchenEngine] = None):
        self.settings = settings or get_settings()
        self.app = FastAPI(
            title=self.settings.api.title,
            description="South Indian kitchen run by a Spice Expert, a Head Chef and a Food Critic",
            version=self.settings.api.version,
            debug=self.settings.is_development,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self.engine = engine or KitchenEngine(self.settings)
        self.metrics_collector = MetricsCollector(
            self.engine.timeline, self.engine.ledger, self.settings.reports_dir
        )

        self._add_routes()
        logger.info("Kitchen API initialized")

    def _add_routes(self):
        """Add all API routes"""
        engine = self.engine

        @self.app.get("/health")
        async def health_check():
            return {"status": "healthy", "timestamp": datetime.now()}

        # Read-only views
        @self.app.get("/pantry")
        async def list_pantry():
            """Ingredients in discovery order"""
            return [i.to_dict() for i in engine.pantry.snapshot()]

        @self.app.get("/orders", response_model=List[OrderResponse])
        async def list_orders():
            return [_order_response(o) for o in engine.ledger.all()]

        @self.app.get("/timeline")
        async def get_timeline():
            """Cooking log, oldest first"""
            return [e.to_dict() for e in engine.timeline.entries()]

        @self.app.get("/actions")
        async def list_actions():
            return engine.get_kitchen_state()["actions"]

        @self.app.get("/state")
        async def get_state():
            """Full kitchen snapshot"""
            return engine.get_kitchen_state()

        @self.app.get("/metrics")
        async def get_metrics():
            return self.metrics_collector.summarize()

        @self.app.post("/metrics/report")
        async def save_report():
            """Write a session report to the data directory"""
            path = self.metrics_collector.save_report()
            return {"path": str(path)}

        # Order triggers
        @self.app.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
        async def add_order(request: OrderCreateRequest):
            """Add a custom menu item"""
            try:
                return _order_response(engine.add_custom_order(request.name))
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))

        @self.app.post("/orders/batch-cook", response_model=SessionTurnResponse)
        async def batch_cook(request: BatchCookRequest):
            """Start several orders and let the Head Chef cook them all"""
            try:
                turn = await engine.cook_batch_with_agent(request.order_ids)
            except KeyError as e:
                raise HTTPException(status_code=404, detail=str(e).strip("'\""))
            except OrderConflictError as e:
                raise HTTPException(status_code=409, detail=str(e))
            return turn.to_dict()

        @self.app.post("/orders/clear")
        async def clear_summary():
            """Remove completed and failed orders"""
            return {"removed": engine.clear_summary()}

        @self.app.post("/orders/{order_id}/pickup", response_model=OrderResponse)
        async def pick_up_order(order_id: str):
            try:
                picked = engine.pick_up_order(order_id)
            except KeyError:
                raise HTTPException(status_code=404, detail="Order not found")
            if not picked:
                raise HTTPException(status_code=409, detail="Order cannot be picked up right now")
            return _order_response(engine.ledger.get(order_id))

        @self.app.post("/orders/{order_id}/cook", response_model=SessionTurnResponse)
        async def cook_order(order_id: str):
            """Hand one order to the Head Chef"""
            try:
                turn = await engine.cook_with_agent(order_id)
            except KeyError:
                raise HTTPException(status_code=404, detail="Order not found")
            except OrderConflictError as e:
                raise HTTPException(status_code=409, detail=str(e))
            return turn.to_dict()

        # Manual cooking
        @self.app.post(
            "/actions/execute",
            response_model=ActionResultResponse,
            response_model_exclude_none=True
        )
        async def execute_action(request: ActionExecuteRequest):
            """Apply an action to selected ingredients, as the human chef"""
            response = await engine.execute_action(request.action, request.ingredients)
            return response.to_dict()


def create_app(settings: Optional[Settings] = None, engine: Optional[KitchenEngine] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    api = KitchenAPI(settings, engine)
    return api.app
