"""
Rule sets for the games the engine can drive.

Usage:
    from apps.game.rulesets import BackgammonRuleSet

    ruleset = BackgammonRuleSet()          # fresh game record
    ruleset.roll_dice()
    moves = ruleset.get_legal_actions(ruleset.get_current_player())
    ruleset.apply_action(ruleset.get_current_player(), moves[0])
"""
from .base import BaseRuleSet
from .backgammon import (
    BackgammonRuleSet,
    apply_move,
    apply_sequence,
    available_moves,
    legal_sequences,
    pip_count,
    winner,
)

__all__ = [
    'BaseRuleSet',
    'BackgammonRuleSet',
    'apply_move',
    'apply_sequence',
    'available_moves',
    'legal_sequences',
    'pip_count',
    'winner',
]
