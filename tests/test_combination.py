"""
Tests for the Spice Expert combination resolver and the completion service
"""
import json

import pytest

from agents.combination import CombinationResolver
from agents.errors import CombinationError
from agents.prompts import COMBINATION_SYSTEM_INSTRUCTION, CombinationResult
from kitchen.catalog import Ingredient, get_action
from providers.llm import CompletionService, parse_json_response
from tests.fakes import ScriptedModelClient


def make_resolver(*replies, model_info=None):
    client = ScriptedModelClient(list(replies), model_info=model_info)
    service = CompletionService(client, COMBINATION_SYSTEM_INSTRUCTION, CombinationResult)
    return CombinationResolver(service), client


STONE_GRIND = get_action("stone_grind")


class TestCombinationResolver:

    @pytest.mark.asyncio
    async def test_stone_grind_gives_idli_batter(self):
        resolver, client = make_resolver(json.dumps({"result_name": "Idli Batter", "emoji": "🥣"}))

        result = await resolver.resolve(STONE_GRIND, ["ponni rice", "urad dal"])

        assert result == Ingredient("Idli Batter", "🥣")
        prompt = client.calls[0]["messages"][-1].content
        assert "Action: stone grind" in prompt
        assert "Ingredients: ponni rice, urad dal" in prompt

    @pytest.mark.asyncio
    async def test_fenced_json_is_accepted(self):
        resolver, _ = make_resolver('```json\n{"result_name": " Coconut Chutney ", "emoji": "🥥"}\n```')
        result = await resolver.resolve(STONE_GRIND, ["fresh coconut"])
        assert result.name == "Coconut Chutney"

    @pytest.mark.asyncio
    async def test_malformed_response_is_none(self):
        resolver, _ = make_resolver("Idli batter, obviously")
        assert await resolver.resolve(STONE_GRIND, ["ponni rice"]) is None

    @pytest.mark.asyncio
    async def test_blank_name_is_none(self):
        resolver, _ = make_resolver(json.dumps({"result_name": "   ", "emoji": "🥣"}))
        assert await resolver.resolve(STONE_GRIND, ["ponni rice"]) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["🍛", "பொங்கல்", "~*~"])
    async def test_name_without_letters_or_digits_is_refused(self, name):
        resolver, _ = make_resolver(json.dumps({"result_name": name, "emoji": "🍛"}))
        assert await resolver.resolve(STONE_GRIND, ["ponni rice"]) is None

        resolver, _ = make_resolver(json.dumps({"result_name": name, "emoji": "🍛"}))
        with pytest.raises(CombinationError) as exc_info:
            await resolver.combine(STONE_GRIND, ["ponni rice"])
        assert "no letters or digits" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_service_error_is_none(self):
        resolver, _ = make_resolver(RuntimeError("quota exceeded"))
        assert await resolver.resolve(STONE_GRIND, ["ponni rice"]) is None

    @pytest.mark.asyncio
    async def test_combine_raises(self):
        resolver, _ = make_resolver(RuntimeError("quota exceeded"))
        with pytest.raises(CombinationError) as exc_info:
            await resolver.combine(STONE_GRIND, ["ponni rice"])
        assert exc_info.value.action == "stone_grind"
        assert "quota exceeded" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_combine_needs_ingredients(self):
        resolver, client = make_resolver()
        with pytest.raises(ValueError):
            await resolver.combine(STONE_GRIND, [])
        assert client.calls == []


class TestCompletionService:

    @pytest.mark.asyncio
    async def test_json_mode_without_structured_output(self):
        client = ScriptedModelClient(["{}"])
        await CompletionService(client, "sys", CombinationResult).generate("hi")
        assert client.calls[0]["json_output"] is True
        assert client.calls[0]["messages"][0].content == "sys"

    @pytest.mark.asyncio
    async def test_structured_output_when_supported(self):
        info = {"vision": False, "function_calling": True, "json_output": True,
                "structured_output": True, "family": "unknown"}
        client = ScriptedModelClient(["{}"], model_info=info)
        await CompletionService(client, "sys", CombinationResult).generate("hi")
        assert client.calls[0]["json_output"] is CombinationResult

    @pytest.mark.asyncio
    async def test_plain_text_models(self):
        info = {"vision": False, "function_calling": False, "json_output": False,
                "structured_output": False, "family": "unknown"}
        client = ScriptedModelClient(["{}"], model_info=info)
        await CompletionService(client, "sys", CombinationResult).generate("hi")
        assert client.calls[0]["json_output"] is None


class TestParseJsonResponse:

    def test_embedded_object(self):
        assert parse_json_response('Sure! {"a": 1} Enjoy.') == {"a": 1}

    def test_garbage(self):
        assert parse_json_response("no json here") == {}
