"""
Shared fixtures
"""
import pytest

from config import KitchenConfig, Settings
from kitchen.engine import KitchenEngine
from tests.fakes import PromptModelClient, ScriptedModelClient, food_critic, spice_expert


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path, kitchen=KitchenConfig())


@pytest.fixture
def combination_client() -> PromptModelClient:
    return spice_expert({
        "stone grind": ("Idli Batter", "🥣"),
        "boil": ("Decoction", "☕"),
        "mix batter": ("Filter Coffee", "☕"),
    })


@pytest.fixture
def verifier_client() -> PromptModelClient:
    return food_critic({
        ("Filter Coffee", "Filter Coffee"): 0.9,
        ("Idly", "Idli Batter"): 0.8,
    })


@pytest.fixture
def planner_client() -> ScriptedModelClient:
    return ScriptedModelClient()


@pytest.fixture
def engine(settings, combination_client, planner_client, verifier_client) -> KitchenEngine:
    return KitchenEngine(
        settings,
        combination_client=combination_client,
        planner_client=planner_client,
        verifier_client=verifier_client,
    )
