"""
Backgammon Game Engine.

Drives stored games on behalf of players and bots:
- Creating, listing, joining and deleting games
- Dice rolling
- Move validation and execution
- Turn passing and undo

Every state change goes through ``GameStateStore.conditional_update`` so
concurrent actors never overwrite each other's moves.
"""
import logging
import random
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from ..board import BLACK, WHITE, Move
from ..conf import get_setting
from ..exceptions import GameError, GameFull, GameNotFound, NotYourTurn, StateConflict
from ..rulesets.backgammon import BackgammonRuleSet, expand_dice, roll_dice
from ..serializers import GameStateSerializer
from .state_store import GameStateStore

logger = logging.getLogger(__name__)


def seat_color(game_state: Dict[str, Any], player_id: str) -> Optional[str]:
    """Get the color of the given player in this game."""
    player1 = game_state.get('player1') or {}
    player2 = game_state.get('player2') or {}
    if player1.get('id') == player_id:
        return WHITE
    if player2.get('id') == player_id:
        return BLACK
    return None


class GameEngine:
    """
    Turn driver for games kept in the shared state store.

    Players are identified by id; white is the creator (``player1``) and
    black the player who joins (``player2``).

    Example:
        engine = GameEngine()
        game = engine.create_game('alice', 'Alice')
        engine.join_game(game['id'], 'bob', 'Bob')
        result = engine.roll_dice(game['id'], 'alice')
        engine.make_move(game['id'], 'alice', result['legal_moves'][0])
    """

    def __init__(
        self,
        store: Optional[GameStateStore] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store or GameStateStore()
        self.rng = rng or random.Random()
        self.key_prefix = get_setting('GAME_KEY_PREFIX')

    def game_key(self, game_id: str) -> str:
        return f"{self.key_prefix}{game_id}"

    def create_game(
        self,
        player_id: str,
        name: str = '',
        initial_state: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create a new game with ``player_id`` seated as white.

        Args:
            player_id: Creator's id.
            name: Creator's display name.
            initial_state: Optional record to start from instead of the
                           standard opening (validated before storing).

        Raises:
            GameError: If ``initial_state`` is not a valid record.
        """
        if initial_state is not None:
            serializer = GameStateSerializer(data=initial_state)
            if not serializer.is_valid():
                raise GameError(f"Invalid game record: {serializer.errors}")
            state = dict(initial_state)
        else:
            state = BackgammonRuleSet().game_state

        game_id = f"game-{uuid.uuid4().hex[:12]}"
        state.update({
            'id': game_id,
            'player1': {'id': player_id, 'name': name or 'Player 1'},
            'player2': state.get('player2'),
        })

        self.store.set(self.game_key(game_id), state)
        logger.info(f"Game {game_id} created by {player_id}")
        return state

    def list_games(self) -> List[Dict[str, Any]]:
        """Summaries of every stored game."""
        games = []
        for key in self.store.list(self.key_prefix):
            record = self.store.get(key)
            if record is None:
                continue
            games.append({
                'id': key[len(self.key_prefix):],
                'player1': record.data.get('player1'),
                'player2': record.data.get('player2'),
                'winner': record.data.get('winner'),
                'version': record.version,
            })
        return games

    def get_game(self, game_id: str) -> Dict[str, Any]:
        """
        Return the stored record.

        Raises:
            GameNotFound: If no game exists under this id.
        """
        record = self.store.get(self.game_key(game_id))
        if record is None:
            raise GameNotFound(f"Game {game_id} not found.")
        return record.data

    def get_legal_moves(self, game_id: str) -> List[Move]:
        """Legal next moves for the player to move."""
        ruleset = BackgammonRuleSet(self.get_game(game_id))
        return ruleset.get_legal_actions(ruleset.get_current_player())

    def join_game(self, game_id: str, player_id: str, name: str = '') -> str:
        """
        Take the black seat of a game.

        Returns:
            The color the player sits at (joining twice is harmless).

        Raises:
            GameFull: If another player already holds the black seat.
        """
        def mutate(ruleset: BackgammonRuleSet, state: Dict[str, Any]) -> str:
            color = seat_color(state, player_id)
            if color:
                return color
            if state.get('player2'):
                raise GameFull("Game is already full.")
            state['player2'] = {'id': player_id, 'name': name or 'Player 2'}
            return BLACK

        color = self._update(game_id, mutate)
        logger.info(f"{player_id} joined game {game_id} as {color}")
        return color

    def roll_dice(self, game_id: str, player_id: str) -> Dict[str, Any]:
        """
        Roll the dice for the player to move.

        When the roll has no legal move the turn passes immediately and
        the result carries ``turn_passed=True``.
        """
        dice = expand_dice(roll_dice(self.rng))

        def mutate(ruleset: BackgammonRuleSet, state: Dict[str, Any]) -> Dict[str, Any]:
            self._require_turn(ruleset, state, player_id)
            result = ruleset.set_dice(dice)
            result['turn_passed'] = False
            if not result['legal_moves']:
                ruleset.switch_turn()
                result['turn_passed'] = True
            return result

        return self._update(game_id, mutate)

    def make_move(
        self,
        game_id: str,
        player_id: str,
        move: Union[Move, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Play a single checker move.

        Raises:
            InvalidMove: If the move is not currently legal.
            NotYourTurn: If it is not the player's turn.
        """
        def mutate(ruleset: BackgammonRuleSet, state: Dict[str, Any]) -> Dict[str, Any]:
            color = self._require_turn(ruleset, state, player_id)
            return ruleset.apply_action(color, move)

        result = self._update(game_id, mutate)
        if result.get('winner'):
            logger.info(f"Game {game_id} won by {result['winner']}")
        return result

    def end_turn(self, game_id: str, player_id: str) -> Dict[str, Any]:
        """Pass the turn to the opponent."""
        def mutate(ruleset: BackgammonRuleSet, state: Dict[str, Any]) -> Dict[str, Any]:
            color = self._require_turn(ruleset, state, player_id)
            return ruleset.apply_action(color, {'type': 'end_turn'})

        return self._update(game_id, mutate)

    def undo_move(self, game_id: str, player_id: str) -> Dict[str, Any]:
        """Take back the last move of the current turn."""
        def mutate(ruleset: BackgammonRuleSet, state: Dict[str, Any]) -> Dict[str, Any]:
            color = self._require_turn(ruleset, state, player_id)
            return ruleset.undo(color)

        return self._update(game_id, mutate)

    def delete_game(self, game_id: str) -> bool:
        deleted = self.store.delete(self.game_key(game_id))
        if deleted:
            logger.info(f"Game {game_id} deleted")
        return deleted

    # Private helper methods

    def _require_turn(
        self,
        ruleset: BackgammonRuleSet,
        state: Dict[str, Any],
        player_id: str,
    ) -> str:
        """Return the player's color, checking it is their turn in a live game."""
        color = seat_color(state, player_id)
        if color is None:
            raise GameError("You are not a player in this game.")
        if ruleset.check_winner():
            raise GameError("The game is already over.")
        if ruleset.get_current_player() != color:
            raise NotYourTurn("It's not your turn.")
        return color

    def _update(
        self,
        game_id: str,
        mutate: Callable[[BackgammonRuleSet, Dict[str, Any]], Any],
    ) -> Any:
        """
        Run ``mutate`` against the stored record under optimistic concurrency.

        Errors raised by ``mutate`` abort the update and propagate.

        Raises:
            GameNotFound: If the game does not exist.
            StateConflict: If the retry budget ran out.
        """
        outcome = {}

        def updater(state: Optional[Dict[str, Any]]) -> Dict[str, Any]:
            if state is None:
                raise GameNotFound(f"Game {game_id} not found.")
            ruleset = BackgammonRuleSet(state)
            outcome['value'] = mutate(ruleset, ruleset.game_state)
            return ruleset.game_state

        if not self.store.conditional_update(self.game_key(game_id), updater):
            raise StateConflict(f"Game {game_id} changed concurrently. Please retry.")
        return outcome['value']
