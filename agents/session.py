"""
Head Chef planner session - a stateful tool-calling chat over an AutoGen model client.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autogen_core.models import (
    AssistantMessage,
    ChatCompletionClient,
    FunctionExecutionResult,
    FunctionExecutionResultMessage,
    LLMMessage,
    SystemMessage,
    UserMessage,
)

from kitchen.pantry import Pantry
from .orchestrator import CookingOrchestrator
from .prompts import build_cooking_agent_system_instruction, generate_cooking_tools

logger = logging.getLogger(__name__)


@dataclass
class SessionTurn:
    """What happened during one user message to the planner."""
    message: str
    reply: Optional[str] = None
    tool_calls: List[Dict[str, Any]] = field(default_factory=list)
    steps: int = 0
    completed: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "reply": self.reply,
            "tool_calls": self.tool_calls,
            "steps": self.steps,
            "completed": self.completed,
            "error": self.error,
        }


class PlannerSession:
    """Conversation with the planning agent.

    The system instruction is rebuilt from the live pantry before every model
    call. Each function call in a reply is dispatched through the orchestrator
    one at a time and answered before the model is called again.
    """

    def __init__(
        self,
        model_client: ChatCompletionClient,
        orchestrator: CookingOrchestrator,
        pantry: Pantry,
        max_steps: int = 40,
        source: str = "head_chef"
    ):
        self.model_client = model_client
        self.orchestrator = orchestrator
        self.pantry = pantry
        self.max_steps = max_steps
        self.source = source
        self.tools = generate_cooking_tools()
        self.history: List[LLMMessage] = []
        self._lock = asyncio.Lock()

    def _system_message(self) -> SystemMessage:
        return SystemMessage(content=build_cooking_agent_system_instruction(self.pantry.snapshot()))

    async def send(self, message: str) -> SessionTurn:
        """Send a user message and run the tool loop until the planner replies in text."""
        async with self._lock:
            try:
                return await self._run_turn(message)
            finally:
                # Narration never outlives the turn it arrived in
                self.orchestrator.pending_narration.discard()

    async def _run_turn(self, message: str) -> SessionTurn:
        turn = SessionTurn(message=message)
        self.history.append(UserMessage(content=message, source="user"))
        logger.info(f"Planner <- {message}")

        while turn.steps < self.max_steps:
            turn.steps += 1
            try:
                result = await self.model_client.create(
                    [self._system_message(), *self.history],
                    tools=self.tools,
                )
            except Exception as e:
                logger.error(f"Planner model call failed: {e}")
                turn.error = str(e)
                return turn

            if isinstance(result.content, str):
                self.history.append(AssistantMessage(content=result.content, source=self.source))
                self.orchestrator.receive_narration(result.content, has_tool_calls=False)
                turn.reply = result.content
                turn.completed = True
                logger.info(f"Planner -> {result.content[:100]}")
                return turn

            calls = list(result.content)
            if not calls:
                turn.completed = True
                return turn

            thought = getattr(result, "thought", None)
            self.history.append(AssistantMessage(content=calls, source=self.source, thought=thought))
            self.orchestrator.receive_narration(thought, has_tool_calls=True)

            execution_results = []
            for call in calls:
                response = await self.orchestrator.dispatch(call.name, call.arguments)
                payload = response.to_dict()
                turn.tool_calls.append({
                    "name": call.name,
                    "arguments": call.arguments,
                    "response": payload,
                })
                execution_results.append(FunctionExecutionResult(
                    content=json.dumps(payload, ensure_ascii=False),
                    call_id=call.id,
                    name=call.name,
                    is_error=not response.success,
                ))
            self.history.append(FunctionExecutionResultMessage(content=execution_results))

        logger.warning(f"Planner stopped after {self.max_steps} model calls")
        turn.error = f"Stopped after {self.max_steps} model calls"
        return turn

    def reset(self) -> None:
        """Forget the conversation."""
        self.history.clear()
