"""
Management command to run AI opponents against stored games.

Usage:
    python manage.py run_bots [--count 1] [--skill 0.8] [--personality balanced]

Bots poll the game store, join open games and play their turns until
the command is interrupted or --duration seconds have passed.
"""
import threading

from django.core.management.base import BaseCommand, CommandError

from apps.ai.bots import BotPool
from apps.ai.players import PERSONALITIES
from apps.game.conf import get_setting


class Command(BaseCommand):
    help = 'Run polling AI opponents that join and play open games'

    def add_arguments(self, parser):
        parser.add_argument(
            '--count',
            type=int,
            default=1,
            help='Number of bots to start (default: 1)',
        )
        parser.add_argument(
            '--skill',
            type=float,
            default=None,
            help='Bot skill between 0 and 1 (default: DEFAULT_SKILL setting)',
        )
        parser.add_argument(
            '--personality',
            type=str,
            default=None,
            choices=sorted(PERSONALITIES),
            help='Bot personality (default: DEFAULT_PERSONALITY setting)',
        )
        parser.add_argument(
            '--poll-interval',
            type=float,
            default=None,
            help='Seconds between polling passes (default: BOT_POLL_INTERVAL setting)',
        )
        parser.add_argument(
            '--duration',
            type=float,
            default=None,
            help='Stop after this many seconds (default: run until interrupted)',
        )

    def handle(self, *args, **options):
        if options['count'] < 1:
            raise CommandError('--count must be at least 1')

        skill = options['skill']
        if skill is not None and not 0.0 <= skill <= 1.0:
            raise CommandError(f"--skill must be between 0 and 1, got {skill}")

        pool = BotPool(poll_interval=options['poll_interval'])
        bot_ids = pool.start(
            count=options['count'],
            skill=skill,
            personality=options['personality'],
        )

        self.stdout.write(self.style.SUCCESS(
            f"Started {len(bot_ids)} bot(s): {', '.join(bot_ids)}"
            f"\n  Skill: {skill if skill is not None else get_setting('DEFAULT_SKILL')}"
            f"\n  Personality: {options['personality'] or get_setting('DEFAULT_PERSONALITY')}"
            f"\n  Poll interval: {pool.poll_interval}s"
        ))

        try:
            threading.Event().wait(options['duration'])
        except KeyboardInterrupt:
            self.stdout.write("\nInterrupted")
        finally:
            pool.stop_all(timeout=5.0)

        self.stdout.write("All bots stopped")
