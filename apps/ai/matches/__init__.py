"""
Offline match infrastructure.

Plays complete games between any two players in memory, alternating
colors between games.

Example usage:
    from apps.ai.matches import MatchRunner
    from apps.ai.players import HeuristicPlayer, RandomPlayer

    runner = MatchRunner()
    result = runner.run_match(
        HeuristicPlayer('p1', skill=0.8),
        RandomPlayer('p2'),
        num_games=10,
    )
    print(f"Heuristic wins: {result.player_a_wins}")
"""
from .runner import (
    MatchRunner,
    GameResult,
    MatchResult,
)

__all__ = [
    'MatchRunner',
    'GameResult',
    'MatchResult',
]
