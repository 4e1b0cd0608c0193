"""
AI opponents playing stored games.

A BotPool owns a set of bots. Each started bot gets a worker thread and a
stop event; the worker polls the shared game state store, takes free seats
in open games and plays its turns one checker move at a time through the
GameEngine. Nothing is registered globally: whoever creates the pool is
responsible for stopping it.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from django.db import DatabaseError, connection

from apps.game.board import Position
from apps.game.conf import get_setting
from apps.game.exceptions import GameError, GameFull, StateConflict
from apps.game.services.game_engine import GameEngine, seat_color

from .players.heuristic import HeuristicPlayer

logger = logging.getLogger(__name__)


@dataclass
class Bot:
    """A bot identity with its decision engine and cancellation handle."""
    bot_id: str
    name: str
    player: HeuristicPlayer
    stop_event: threading.Event = field(default_factory=threading.Event)
    thread: Optional[threading.Thread] = None


class BotPool:
    """
    An explicitly owned collection of polling bots.

    Example:
        pool = BotPool()
        pool.start(count=2, skill=0.6, personality='aggressive')
        ...
        pool.stop_all()
    """

    def __init__(
        self,
        engine: Optional[GameEngine] = None,
        poll_interval: Optional[float] = None,
        turn_delay: Optional[float] = None,
    ):
        """
        Args:
            engine: Game engine used to read and change games.
            poll_interval: Seconds between polling passes.
            turn_delay: Seconds to pause between two checker moves.
        """
        self.engine = engine or GameEngine()
        self.poll_interval = (
            poll_interval if poll_interval is not None else get_setting('BOT_POLL_INTERVAL')
        )
        self.turn_delay = turn_delay if turn_delay is not None else get_setting('BOT_TURN_DELAY')
        self._bots: Dict[str, Bot] = {}
        self._lock = threading.Lock()

    def add_bot(
        self,
        skill: Optional[float] = None,
        personality: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> Bot:
        """Create a bot owned by this pool without starting its worker."""
        bot_id = f"bot-{uuid.uuid4().hex[:8]}"
        player = HeuristicPlayer(
            player_id=bot_id,
            name=f"Bot {bot_id[-4:]}",
            skill=skill if skill is not None else get_setting('DEFAULT_SKILL'),
            personality=personality or get_setting('DEFAULT_PERSONALITY'),
            seed=seed,
        )
        bot = Bot(bot_id=bot_id, name=player.name, player=player)
        with self._lock:
            self._bots[bot_id] = bot
        return bot

    def start(
        self,
        count: int = 1,
        skill: Optional[float] = None,
        personality: Optional[str] = None,
    ) -> List[str]:
        """
        Start ``count`` polling bots.

        Returns:
            The ids of the new bots.
        """
        started = []
        for _ in range(count):
            bot = self.add_bot(skill=skill, personality=personality)
            bot.thread = threading.Thread(
                target=self._run,
                args=(bot,),
                name=bot.bot_id,
                daemon=True,
            )
            bot.thread.start()
            started.append(bot.bot_id)
            logger.info(
                f"Started {bot.bot_id} (skill={bot.player.skill}, "
                f"personality={bot.player.personality})"
            )
        return started

    def stop_all(self, timeout: Optional[float] = None) -> None:
        """Cancel every bot and wait for the workers to finish."""
        with self._lock:
            bots = list(self._bots.values())
            self._bots.clear()

        for bot in bots:
            bot.stop_event.set()
        for bot in bots:
            if bot.thread is not None:
                bot.thread.join(timeout)
            logger.info(f"Stopped {bot.bot_id}")

    def active_bots(self) -> List[str]:
        with self._lock:
            return list(self._bots)

    def poll(self, bot: Bot) -> None:
        """One polling pass: take free seats, then play pending turns."""
        for game in self.engine.list_games():
            if game['player2'] or game['winner']:
                continue
            if (game['player1'] or {}).get('id') == bot.bot_id:
                continue
            try:
                self.engine.join_game(game['id'], bot.bot_id, bot.name)
            except (GameFull, StateConflict) as exc:
                logger.debug(f"{bot.bot_id} could not join {game['id']}: {exc}")

        for game in self.engine.list_games():
            seats = [game['player1'] or {}, game['player2'] or {}]
            if any(seat.get('id') == bot.bot_id for seat in seats):
                self.play_turn(game['id'], bot)

    def play_turn(self, game_id: str, bot: Bot) -> int:
        """
        Play the bot's turn in one game, one die at a time.

        Rolls when no dice are showing, then asks the player for the next
        move until the turn passes, the game ends or the bot is stopped.

        Returns:
            Number of checker moves made.
        """
        moves_made = 0

        while not bot.stop_event.is_set():
            state = self.engine.get_game(game_id)
            color = seat_color(state, bot.bot_id)
            if color is None or state.get('winner') or state.get('current_player') != color:
                break

            if not state.get('dice'):
                result = self.engine.roll_dice(game_id, bot.bot_id)
                logger.debug(f"{bot.bot_id} rolled {result['dice']} in {game_id}")
                continue

            move = bot.player.choose_move(
                Position.from_state(state),
                state['dice'],
                state.get('used_dice') or [],
                color,
            )
            if move is None:
                self.engine.end_turn(game_id, bot.bot_id)
                break

            self.engine.make_move(game_id, bot.bot_id, move)
            moves_made += 1

            if self.turn_delay:
                bot.stop_event.wait(self.turn_delay)

        return moves_made

    def _run(self, bot: Bot) -> None:
        """Worker loop for one bot."""
        try:
            while not bot.stop_event.wait(self.poll_interval):
                try:
                    self.poll(bot)
                except (GameError, DatabaseError) as exc:
                    logger.warning(f"{bot.bot_id} poll error: {exc}")
                except Exception:
                    logger.exception(f"{bot.bot_id} unexpected poll failure")
        finally:
            connection.close()
