"""
Pytest configuration and shared fixtures for the backgammon engine.

This module provides fixtures for:
- Positions and game records
- Deterministic dice
- A game engine bound to the test database
"""
import pytest

from apps.game.board import Position
from apps.game.rulesets.backgammon import BackgammonRuleSet
from apps.game.services.game_engine import GameEngine


class FixedDice:
    """Stand-in for ``random.Random`` that rolls a scripted list of values."""

    def __init__(self, *values):
        self.values = list(values)

    def randint(self, low, high):
        return self.values.pop(0)

    def random(self):
        return 0.0


@pytest.fixture
def initial_position():
    """Return the standard starting position."""
    return Position.initial()


@pytest.fixture
def initial_state():
    """Return a fresh game record with white to move."""
    return BackgammonRuleSet().game_state


@pytest.fixture
def fixed_dice():
    """Return the scripted dice class."""
    return FixedDice


@pytest.fixture
def engine(db):
    """Return a game engine using the database backed store."""
    return GameEngine()


@pytest.fixture
def two_player_game(engine):
    """Create a game with alice as white and bob as black."""
    game = engine.create_game('alice', 'Alice')
    engine.join_game(game['id'], 'bob', 'Bob')
    return game['id']
