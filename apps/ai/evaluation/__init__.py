"""
Position evaluation functions for games.

These functions provide hand-coded heuristics for evaluating
game positions, used by:
- The heuristic player's sequence scoring and lookahead
- Tests that pin down what makes positions good/bad
"""
from .backgammon import (
    DEFAULT_WEIGHTS,
    anchor_count,
    blot_count,
    evaluate_position,
    evaluate_side,
    has_contact,
    hit_risk,
    home_board_points,
    longest_prime,
    made_points_count,
    relative_advantage,
)

__all__ = [
    'DEFAULT_WEIGHTS',
    'anchor_count',
    'blot_count',
    'evaluate_position',
    'evaluate_side',
    'has_contact',
    'hit_risk',
    'home_board_points',
    'longest_prime',
    'made_points_count',
    'relative_advantage',
]
