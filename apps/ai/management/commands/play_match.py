"""
Management command to play an offline match between two heuristic players.

Usage:
    python manage.py play_match [--games 10] [--skill-a 0.8] [--skill-b 0.3] [--seed 7]
"""
import random

from django.core.management.base import BaseCommand, CommandError

from apps.ai.matches import MatchRunner
from apps.ai.players import PERSONALITIES, HeuristicPlayer
from apps.game.exceptions import GameError


class Command(BaseCommand):
    help = 'Play a match between two heuristic players and report the score'

    def add_arguments(self, parser):
        parser.add_argument(
            '--games',
            type=int,
            default=10,
            help='Number of games in the match (default: 10)',
        )
        parser.add_argument('--skill-a', type=float, default=0.8)
        parser.add_argument('--skill-b', type=float, default=0.8)
        parser.add_argument(
            '--personality-a',
            type=str,
            default='balanced',
            choices=sorted(PERSONALITIES),
        )
        parser.add_argument(
            '--personality-b',
            type=str,
            default='balanced',
            choices=sorted(PERSONALITIES),
        )
        parser.add_argument(
            '--max-moves',
            type=int,
            default=2000,
            help='Checker moves per game before it is scored a draw (default: 2000)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Seed for dice and players, for reproducible matches',
        )

    def handle(self, *args, **options):
        if options['games'] < 1:
            raise CommandError('--games must be at least 1')

        seed = options['seed']
        rng = random.Random(seed)

        try:
            player_a = HeuristicPlayer(
                'player-a',
                name='Player A',
                skill=options['skill_a'],
                personality=options['personality_a'],
                seed=None if seed is None else seed + 1,
            )
            player_b = HeuristicPlayer(
                'player-b',
                name='Player B',
                skill=options['skill_b'],
                personality=options['personality_b'],
                seed=None if seed is None else seed + 2,
            )
        except ValueError as e:
            raise CommandError(str(e))

        self.stdout.write(f"Playing {options['games']} game(s): {player_a} vs {player_b}")

        runner = MatchRunner(rng=rng, max_moves_per_game=options['max_moves'])
        try:
            result = runner.run_match(player_a, player_b, num_games=options['games'])
        except GameError as e:
            raise CommandError(f"Match aborted: {e}")

        for i, game in enumerate(result.games, start=1):
            outcome = 'draw' if game.is_draw else f"{game.winner} wins"
            self.stdout.write(f"  Game {i}: {outcome} after {game.num_moves} moves")

        self.stdout.write(self.style.SUCCESS(
            f"\nMatch finished!"
            f"\n  {player_a.name}: {result.player_a_wins} wins"
            f"\n  {player_b.name}: {result.player_b_wins} wins"
            f"\n  Draws: {result.draws}"
            f"\n  Score: {result.player_a_score} - {result.player_b_score}"
        ))
