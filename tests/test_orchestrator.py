"""
Tests for the cooking orchestrator (tool-call dispatch)
"""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from agents.orchestrator import (
    BUSY_ERROR,
    MISSING_INGREDIENTS_ERROR,
    CookingOrchestrator,
    PendingNarration,
    ToolResponse,
)
from kitchen.catalog import ERROR_INGREDIENT, STARTING_INGREDIENTS, Ingredient, get_action
from kitchen.pantry import Pantry
from kitchen.timeline import Timeline
from masala_types import ToolKind

IDLI_BATTER = Ingredient("Idli Batter", "🥣")


@pytest.fixture
def pantry():
    return Pantry(STARTING_INGREDIENTS)


@pytest.fixture
def timeline():
    return Timeline()


@pytest.fixture
def resolve():
    return AsyncMock(return_value=IDLI_BATTER)


@pytest.fixture
def verify():
    return AsyncMock(return_value=True)


@pytest.fixture
def abandon():
    return Mock(return_value=[])


@pytest.fixture
def orchestrator(pantry, timeline, resolve, verify, abandon):
    return CookingOrchestrator(pantry, timeline, resolve=resolve, verify=verify, abandon=abandon)


class TestClassify:

    def test_kinds(self, orchestrator):
        assert orchestrator.classify("serve_on_leaf")[0] == ToolKind.SERVE
        assert orchestrator.classify("pass")[0] == ToolKind.ABANDON
        kind, action = orchestrator.classify("stone_grind")
        assert kind == ToolKind.REGULAR
        assert action.display_name == "stone grind"


class TestRegularActions:

    @pytest.mark.asyncio
    async def test_successful_combination(self, orchestrator, pantry, timeline, resolve):
        before = len(pantry)
        response = await orchestrator.dispatch("stone_grind", {"ingredients": ["ponni rice", "urad dal"]})

        assert response.to_dict() == {"success": True, "result": "Idli Batter", "emoji": "🥣"}
        resolve.assert_awaited_once_with(get_action("stone_grind"), ["ponni rice", "urad dal"])
        assert len(pantry) == before + 1
        assert pantry.find("idli batter") == IDLI_BATTER

        [entry] = timeline.entries()
        assert entry.action == "stone_grind"
        assert entry.ingredients == ["ponni rice", "urad dal"]
        assert entry.result == IDLI_BATTER
        assert not orchestrator.is_busy

    @pytest.mark.asyncio
    async def test_ingredients_are_validated_against_pantry(self, orchestrator, resolve, timeline):
        await orchestrator.dispatch(
            "stone_grind", {"ingredients": ["Ponni Rice", "urad-dal", "PONNI RICE", "saffron"]}
        )

        resolve.assert_awaited_once_with(get_action("stone_grind"), ["ponni rice", "urad dal"])
        assert timeline.entries()[0].ingredients == ["ponni rice", "urad dal"]

    @pytest.mark.asyncio
    async def test_missing_ingredient_changes_nothing(self, orchestrator, pantry, timeline, resolve):
        before = pantry.snapshot()
        response = await orchestrator.dispatch("stone_grind", {"ingredients": ["nonexistent item"]})

        assert response.to_dict() == {"success": False, "error": MISSING_INGREDIENTS_ERROR}
        assert len(timeline) == 0
        assert pantry.snapshot() == before
        resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_arguments_as_json_string(self, orchestrator, pantry):
        response = await orchestrator.dispatch("stone_grind", '{"ingredients": ["ponni rice"]}')
        assert response.success
        assert pantry.contains("Idli Batter")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name, args, error", [
        ("fly_to_moon", {"ingredients": ["ponni rice"]}, "Unknown action: fly_to_moon"),
        ("stone_grind", "{not json", "Arguments for stone_grind are not valid JSON."),
        ("stone_grind", "[1, 2]", "Arguments for stone_grind must be an object."),
        ("stone_grind", {"ingredients": "ponni rice"}, "ingredients must be a list of ingredient names."),
        ("stone_grind", {}, "ingredients must be a list of ingredient names."),
        ("stone_grind", {"ingredients": []}, "No ingredients given."),
    ])
    async def test_validation_failures(self, orchestrator, timeline, resolve, name, args, error):
        response = await orchestrator.dispatch(name, args)

        assert not response.success
        assert response.error == error
        assert len(timeline) == 0
        resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resolver_without_result_records_error(self, orchestrator, pantry, timeline, resolve):
        resolve.return_value = None
        before = len(pantry)

        response = await orchestrator.dispatch("stone_grind", {"ingredients": ["ponni rice"]})

        assert not response.success
        assert response.error == "Combination stone_grind(ponni rice) failed: no result"
        assert len(pantry) == before
        [entry] = timeline.entries()
        assert entry.result == ERROR_INGREDIENT
        assert not orchestrator.is_busy

    @pytest.mark.asyncio
    async def test_resolver_exception_records_error(self, orchestrator, timeline, resolve):
        resolve.side_effect = RuntimeError("oracle down")

        response = await orchestrator.dispatch("boil", {"ingredients": ["water"]})

        assert response.to_dict() == {"success": False, "error": "oracle down"}
        assert timeline.entries()[0].is_error
        assert not orchestrator.is_busy

    @pytest.mark.asyncio
    async def test_one_action_at_a_time(self, pantry, timeline, verify, abandon):
        gate = asyncio.Event()

        async def slow_resolve(action, names):
            await gate.wait()
            return IDLI_BATTER

        orchestrator = CookingOrchestrator(pantry, timeline, slow_resolve, verify, abandon)
        first = asyncio.create_task(orchestrator.dispatch("stone_grind", {"ingredients": ["ponni rice"]}))
        await asyncio.sleep(0)

        assert orchestrator.is_busy
        assert orchestrator.active_action == "stone_grind"
        assert len(timeline.pending()) == 1

        second = await orchestrator.dispatch("boil", {"ingredients": ["water"]})
        assert second.to_dict() == {"success": False, "error": BUSY_ERROR}
        assert len(timeline) == 1

        gate.set()
        assert (await first).success
        assert not orchestrator.is_busy
        assert timeline.pending() == []


class TestNarration:

    @pytest.mark.asyncio
    async def test_buffered_text_goes_on_the_next_action(self, orchestrator, timeline):
        orchestrator.receive_narration("The oil must be smoking!", has_tool_calls=True)
        assert len(timeline) == 0

        await orchestrator.dispatch("boil", {"ingredients": ["water"]})
        await orchestrator.dispatch("boil", {"ingredients": ["milk"]})

        first, second = timeline.entries()
        assert first.text == "The oil must be smoking!"
        assert second.text is None

    @pytest.mark.asyncio
    async def test_rejected_call_keeps_the_buffer(self, orchestrator, timeline):
        orchestrator.receive_narration("Grind it fine", has_tool_calls=True)
        await orchestrator.dispatch("stone_grind", {"ingredients": ["nonexistent item"]})

        assert orchestrator.pending_narration.peek() == "Grind it fine"

    def test_standalone_text_is_logged_once(self, orchestrator, timeline):
        assert orchestrator.receive_narration("Vanakkam!") is not None
        assert orchestrator.receive_narration("Vanakkam!") is None
        assert orchestrator.receive_narration("   ") is None
        assert orchestrator.receive_narration(None) is None
        assert [e.text for e in timeline.entries()] == ["Vanakkam!"]

    def test_pending_narration_slot(self):
        slot = PendingNarration()
        slot.put("first")
        slot.put("second")
        assert slot.take() == "second"
        assert slot.take() is None


class TestServeAndPass:

    @pytest.mark.asyncio
    async def test_matched_serve(self, orchestrator, verify, timeline):
        response = await orchestrator.dispatch("serve_on_leaf", {"dish": " Filter Coffee "})

        verify.assert_awaited_once_with("Filter Coffee")
        assert response.to_dict() == {"success": True, "message": "Filter Coffee served! Romba nalla iruku!"}
        assert len(timeline) == 0

    @pytest.mark.asyncio
    async def test_unmatched_serve(self, orchestrator, verify):
        verify.return_value = False
        response = await orchestrator.dispatch("serve_on_leaf", {"dish": "Rasam"})
        assert response.to_dict() == {"success": False, "error": "Rasam is not what was ordered. Try again!"}

    @pytest.mark.asyncio
    async def test_verifier_crash_is_unmatched(self, orchestrator, verify, timeline):
        verify.side_effect = RuntimeError("critic asleep")
        response = await orchestrator.dispatch("serve_on_leaf", {"dish": "Rasam"})

        assert not response.success
        assert [e.text for e in timeline.entries()] == ['❌ Could not judge "Rasam" right now.']

    @pytest.mark.asyncio
    async def test_blank_dish(self, orchestrator, verify):
        response = await orchestrator.dispatch("serve_on_leaf", {"dish": "  "})
        assert response.error == "Name the dish to serve."
        verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_serve_drops_the_buffer(self, orchestrator, timeline):
        orchestrator.receive_narration("Plate it nicely", has_tool_calls=True)
        await orchestrator.dispatch("serve_on_leaf", {"dish": "Rasam"})

        assert orchestrator.pending_narration.peek() is None
        await orchestrator.dispatch("boil", {"ingredients": ["water"]})
        assert timeline.entries()[-1].text is None

    @pytest.mark.asyncio
    async def test_pass_drops_the_buffer(self, orchestrator, timeline):
        orchestrator.receive_narration("No king fish today.", has_tool_calls=True)
        await orchestrator.dispatch("pass")

        assert orchestrator.pending_narration.peek() is None
        assert [e.text for e in timeline.entries()] == ["🏳️ Gave up on the order"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", [None, "", {}])
    async def test_pass(self, orchestrator, abandon, timeline, args):
        response = await orchestrator.dispatch("pass", args)

        abandon.assert_called_once_with()
        assert response.to_dict() == {"success": True, "message": "Order abandoned."}
        assert [e.text for e in timeline.entries()] == ["🏳️ Gave up on the order"]


class TestToolResponse:

    def test_none_fields_are_dropped(self):
        assert ToolResponse(success=False, error="nope").to_dict() == {"success": False, "error": "nope"}
