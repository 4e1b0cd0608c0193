"""
Player abstractions for AI opponents.

Every player implements ``select_action(game_state, legal_actions)`` so
drivers (the match runner, the bot pool) can treat them alike.
"""
from .base import BasePlayer
from .heuristic import PERSONALITIES, HeuristicPlayer
from .random_player import RandomPlayer

__all__ = [
    'BasePlayer',
    'HeuristicPlayer',
    'PERSONALITIES',
    'RandomPlayer',
]
