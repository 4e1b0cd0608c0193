"""
Pytest fixtures for AI app tests.

Provides fixtures for:
- A mirrored race position
- Game records with dice in play
- Players with fixed seeds
"""
import pytest

from apps.ai.players import HeuristicPlayer, RandomPlayer
from apps.game.board import Position
from apps.game.tests.factories import make_position, make_state


@pytest.fixture
def race_position():
    """Mirror-image race: both armies have passed each other."""
    return make_position(
        white={18: 3, 19: 3, 20: 3, 21: 2, 22: 2, 23: 2},
        black={5: 3, 4: 3, 3: 3, 2: 2, 1: 2, 0: 2},
    )


@pytest.fixture
def opening_state():
    """Opening position with white to play a 3-1."""
    return make_state(Position.initial(), dice=[3, 1])


@pytest.fixture
def heuristic_player():
    """A fast heuristic player (no lookahead)."""
    return HeuristicPlayer('h1', skill=0.3, seed=5)


@pytest.fixture
def random_player():
    return RandomPlayer('r1', seed=7)
