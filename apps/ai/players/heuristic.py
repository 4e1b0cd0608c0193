"""
Heuristic player implementation.

Plans over whole turns: every legal move sequence for the remaining dice
is applied and scored with the position evaluator, tactical bonuses and,
for stronger settings, a sampled one-ply lookahead at the opponent's best
reply. Only the first move of the best sequence is returned, so the player
is asked again after every checker it moves.
"""
import logging
import math
import random
from typing import Any, Dict, List, Optional, Sequence

from apps.game.board import Move, Position, opponent_of
from apps.game.rulesets.backgammon import (
    apply_sequence,
    expand_dice,
    legal_sequences,
    roll_dice,
)

from ..evaluation.backgammon import blot_count, relative_advantage
from .base import BasePlayer

logger = logging.getLogger(__name__)

# Tactical weights per personality
PERSONALITIES = {
    'balanced': {'hit': 45.0, 'bear_off': 55.0, 'safety': 1.0},
    'aggressive': {'hit': 85.0, 'bear_off': 50.0, 'safety': 0.75},
    'defensive': {'hit': 30.0, 'bear_off': 65.0, 'safety': 1.25},
}

BLOT_REDUCTION_WEIGHT = 18.0
NOISE_AMPLITUDE = 12.0
LOOKAHEAD_MIN_SKILL = 0.45


class HeuristicPlayer(BasePlayer):
    """
    A player that selects moves by scoring complete turn sequences.

    Attributes:
        skill: Strength in [0, 1]. Scales tactical bonuses, turns on the
               lookahead from 0.45 and fades the random noise out.
        personality: 'balanced', 'aggressive' or 'defensive'.
        weights: Optional overrides for the evaluator weights.

    Example:
        player = HeuristicPlayer('bot-1', skill=0.8, personality='aggressive')
        move = player.choose_move(position, dice=[3, 1], used_dice=[], color='white')
    """

    def __init__(
        self,
        player_id: str,
        name: Optional[str] = None,
        skill: float = 0.8,
        personality: str = 'balanced',
        weights: Optional[Dict[str, float]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize a heuristic player.

        Args:
            player_id: Unique identifier for this player.
            name: Optional display name.
            skill: Strength in [0, 1].
            personality: Key of PERSONALITIES.
            weights: Optional evaluator weight overrides.
            seed: Seed for the player's private random generator.
            rng: Random generator to use instead of a seeded one; all dice
                 sampling and noise go through it.

        Raises:
            ValueError: If skill or personality is out of range.
        """
        super().__init__(player_id=player_id, name=name or 'Heuristic Player')

        if not 0.0 <= skill <= 1.0:
            raise ValueError(f"Skill must be between 0 and 1, got {skill}")
        if personality not in PERSONALITIES:
            available = ', '.join(PERSONALITIES)
            raise ValueError(
                f"Unknown personality '{personality}'. Available: {available}"
            )

        self.skill = skill
        self.personality = personality
        self.weights = weights
        self.seed = seed
        self._rng = rng or random.Random(seed)

    @property
    def skill_factor(self) -> float:
        """Multiplier applied to every tactical bonus."""
        return 0.6 + 1.8 * self.skill

    @property
    def uses_lookahead(self) -> bool:
        return self.skill >= LOOKAHEAD_MIN_SKILL

    @property
    def lookahead_samples(self) -> int:
        """Number of opponent rolls sampled per candidate (rounded half up)."""
        return max(2, math.floor(2 + self.skill * 6 + 0.5))

    @property
    def lookahead_weight(self) -> float:
        return 0.12 + 0.34 * self.skill

    def choose_move(
        self,
        position: Position,
        dice: Sequence[int],
        used_dice: Sequence[int],
        color: str,
    ) -> Optional[Move]:
        """
        Pick the next checker move.

        Returns:
            The first move of the best scoring legal sequence, or None when
            no legal sequence exists (the turn must end without using dice).
        """
        sequences = legal_sequences(position, dice, used_dice, color)
        if not sequences:
            return None

        best_sequence = sequences[0]
        best_score = float('-inf')

        for sequence in sequences:
            score = self.score_sequence(position, sequence, color)
            if score > best_score:
                best_score = score
                best_sequence = sequence

        logger.debug(
            f"{self.player_id} picked {[m.key for m in best_sequence]} "
            f"from {len(sequences)} sequences (score {best_score:.1f})"
        )
        return best_sequence[0]

    def score_sequence(
        self,
        position: Position,
        sequence: List[Move],
        color: str,
    ) -> float:
        """Score a full sequence for ``color``, higher is better."""
        after = apply_sequence(position, sequence, color)

        score = relative_advantage(after, color, self.weights)
        score += self.tactical_bonus(position, after, sequence, color)

        if self.uses_lookahead:
            weight = self.lookahead_weight
            score = score * (1 - weight) + self.expected_reply_value(after, color) * weight

        score += self._rng.random() * NOISE_AMPLITUDE * (1 - min(1.0, self.skill))
        return score

    def tactical_bonus(
        self,
        before: Position,
        after: Position,
        sequence: List[Move],
        color: str,
    ) -> float:
        """Bonuses for hits, bear-offs and for tidying up blots."""
        weights = PERSONALITIES[self.personality]
        k = self.skill_factor

        hits = sum(1 for move in sequence if move.is_hit)
        offs = sum(1 for move in sequence if move.is_bear_off)
        blots_removed = blot_count(before, color) - blot_count(after, color)

        return (
            hits * weights['hit'] * k
            + offs * weights['bear_off'] * k
            + blots_removed * BLOT_REDUCTION_WEIGHT * weights['safety'] * k
        )

    def expected_reply_value(self, position: Position, color: str) -> float:
        """
        Average value for ``color`` after the opponent's best reply.

        Samples opponent rolls and assumes the opponent answers each with
        the sequence maximizing its own relative advantage.
        """
        opponent = opponent_of(color)
        samples = self.lookahead_samples

        total = 0.0
        for _ in range(samples):
            dice = expand_dice(roll_dice(self._rng))
            total -= self.best_reply_value(position, opponent, dice)
        return total / samples

    def best_reply_value(self, position: Position, color: str, dice: Sequence[int]) -> float:
        """Best relative advantage ``color`` can reach with ``dice``."""
        sequences = legal_sequences(position, dice, [], color)
        if not sequences:
            return relative_advantage(position, color, self.weights)

        return max(
            relative_advantage(apply_sequence(position, sequence, color), color, self.weights)
            for sequence in sequences
        )

    def select_action(
        self,
        game_state: Dict[str, Any],
        legal_actions: List[Any],
    ) -> Any:
        """
        Select the best move for the player to move in ``game_state``.

        Raises:
            ValueError: If legal_actions is empty, or if the chosen move
                is not one of them.
        """
        if not legal_actions:
            raise ValueError("Cannot select from empty action list")

        move = self.choose_move(
            Position.from_state(game_state),
            game_state.get('dice') or [],
            game_state.get('used_dice') or [],
            game_state.get('current_player', 'white'),
        )

        if move is None:
            raise ValueError(f"{self.player_id}: no legal move sequence for this position")

        for action in legal_actions:
            action_move = action if isinstance(action, Move) else Move.from_dict(action)
            if action_move.key == move.key:
                return action

        raise ValueError(f"{self.player_id}: chosen move {move.key} is not among the legal actions")

    def get_player_type(self) -> str:
        """Return 'heuristic' as the player type."""
        return 'heuristic'

    def get_config(self) -> Dict[str, Any]:
        """Return configuration including skill, personality and weights."""
        config = super().get_config()
        config.update({
            'skill': self.skill,
            'personality': self.personality,
            'weights': self.weights,
            'seed': self.seed,
        })
        return config

    def reset_seed(self, seed: Optional[int] = None) -> None:
        """
        Reset the random number generator with a new seed.

        Args:
            seed: New random seed. If None, uses system entropy.
        """
        self.seed = seed
        self._rng = random.Random(seed)
