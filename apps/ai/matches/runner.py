"""
Match runner for playing games between players.

Plays complete in-memory games between two players through
BackgammonRuleSet, without touching the state store. Used for
benchmarking players against each other and for self-play tests.
"""
import copy
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from apps.game.board import BLACK, WHITE, opponent_of
from apps.game.rulesets.backgammon import BackgammonRuleSet

if TYPE_CHECKING:
    from ..players.base import BasePlayer


@dataclass
class GameResult:
    """Result of a single game."""
    winner: Optional[str] = None  # Player ID or None for draw
    loser: Optional[str] = None
    is_draw: bool = False
    num_moves: int = 0
    final_state: Optional[Dict[str, Any]] = None
    player_colors: Dict[str, str] = field(default_factory=dict)
    game_history: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class MatchResult:
    """Result of a match (multiple games)."""
    player_a_id: str
    player_b_id: str
    player_a_wins: int = 0
    player_b_wins: int = 0
    draws: int = 0
    games: List[GameResult] = field(default_factory=list)

    @property
    def total_games(self) -> int:
        return self.player_a_wins + self.player_b_wins + self.draws

    @property
    def player_a_score(self) -> float:
        """Score for player A (1 per win, 0.5 per draw)."""
        return self.player_a_wins + 0.5 * self.draws

    @property
    def player_b_score(self) -> float:
        """Score for player B."""
        return self.player_b_wins + 0.5 * self.draws


class MatchRunner:
    """
    Run matches between players.

    Handles the complete game flow:
    1. Initialize game state
    2. Roll for the player to move, passing the turn on a dead roll
    3. Ask the player for one checker move at a time and apply it
    4. Stop on a winner or at the move limit (draw)

    Example:
        runner = MatchRunner(rng=random.Random(1))
        result = runner.run_match(
            HeuristicPlayer('smart', skill=0.8),
            RandomPlayer('random', seed=2),
            num_games=10,
        )
        print(f"Heuristic wins: {result.player_a_wins}")
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_moves_per_game: int = 2000,
        record_history: bool = False,
    ):
        """
        Initialize the match runner.

        Args:
            rng: Random generator for the dice.
            max_moves_per_game: Maximum checker moves before declaring a draw.
            record_history: Whether to record every move with the state after it.
        """
        self.rng = rng or random.Random()
        self.max_moves_per_game = max_moves_per_game
        self.record_history = record_history

    def run_game(
        self,
        player_a: 'BasePlayer',
        player_b: 'BasePlayer',
        swap_colors: bool = False,
    ) -> GameResult:
        """
        Run a single game between two players.

        Args:
            player_a: First player.
            player_b: Second player.
            swap_colors: If True, player_b plays white.
        """
        result = GameResult()

        if swap_colors:
            white_player, black_player = player_b, player_a
        else:
            white_player, black_player = player_a, player_b

        players = {WHITE: white_player, BLACK: black_player}
        result.player_colors = {
            white_player.player_id: WHITE,
            black_player.player_id: BLACK,
        }

        ruleset = BackgammonRuleSet()
        move_count = 0
        steps = 0

        while move_count < self.max_moves_per_game and steps < 4 * self.max_moves_per_game:
            steps += 1
            color = ruleset.get_current_player()

            if not ruleset.dice:
                rolled = ruleset.roll_dice(self.rng)
                if not rolled['legal_moves']:
                    ruleset.switch_turn()
                continue

            legal_actions = ruleset.get_legal_actions(color)
            if not legal_actions:
                ruleset.switch_turn()
                continue

            action = players[color].select_action(ruleset.game_state, legal_actions)
            outcome = ruleset.apply_action(color, action)
            move_count += 1

            if self.record_history:
                result.game_history.append({
                    'player': players[color].player_id,
                    'color': color,
                    'action': outcome['move'],
                    'state': copy.deepcopy(ruleset.game_state),
                })

            if outcome['winner']:
                result.winner = players[color].player_id
                result.loser = players[opponent_of(color)].player_id
                result.num_moves = move_count
                result.final_state = ruleset.game_state
                return result

        # Game reached move limit - declare draw
        result.is_draw = True
        result.num_moves = move_count
        result.final_state = ruleset.game_state
        return result

    def run_match(
        self,
        player_a: 'BasePlayer',
        player_b: 'BasePlayer',
        num_games: int = 1,
        alternate_colors: bool = True,
    ) -> MatchResult:
        """
        Run a match of multiple games.

        Args:
            player_a: First player.
            player_b: Second player.
            num_games: Number of games in the match.
            alternate_colors: If True, alternate who plays white.
        """
        result = MatchResult(
            player_a_id=player_a.player_id,
            player_b_id=player_b.player_id,
        )

        for i in range(num_games):
            swap = alternate_colors and (i % 2 == 1)
            game_result = self.run_game(player_a, player_b, swap_colors=swap)
            result.games.append(game_result)

            if game_result.is_draw:
                result.draws += 1
            elif game_result.winner == player_a.player_id:
                result.player_a_wins += 1
            else:
                result.player_b_wins += 1

        return result
