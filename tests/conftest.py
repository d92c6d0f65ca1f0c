"""
Basic test fixtures for the skirmish test suite.

Provides the small arenas, event bus and log fixtures shared by the unit,
integration and edge case tests.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from skirmish.core.config_loader import BattleConfig
from skirmish.core.data.data_structures import Vector2
from skirmish.core.event_manager import EventManager
from skirmish.game.log_manager import LogManager
from skirmish.game.map import GameMap
from skirmish.game.scenario import BattleScenario
from tests.test_utils import ARENA_ROWS, EventRecorder


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def log_manager(event_manager):
    """Create a log manager wired to the test event manager."""
    return LogManager(event_manager)


@pytest.fixture
def recorder(event_manager):
    """Record every event published on the test event manager."""
    return EventRecorder(event_manager)


@pytest.fixture
def default_config():
    return BattleConfig()


@pytest.fixture
def open_map():
    """Create a 5x5 map with no walls."""
    return GameMap(width=5, height=5)


@pytest.fixture
def arena_scenario():
    """Two elves against two goblins in a 3x3 walled room."""
    return BattleScenario.from_rows(ARENA_ROWS, name="Arena")


@pytest.fixture
def sample_positions():
    """Create a list of sample positions for testing."""
    return [
        Vector2(0, 0),
        Vector2(1, 1),
        Vector2(2, 2),
        Vector2(3, 4)
    ]
