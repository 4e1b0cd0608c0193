"""
Backgammon rules engine.

This module contains the complete movement rules for backgammon:
- Blocked points and landing checks
- Bar entry priority
- Bearing off (exact and overshoot)
- Full-turn sequence search with the "use as many dice as possible"
  and "forced higher die" rules
- Move application with hit resolution
- Win detection and pip counting

The module-level functions are pure: they take Position snapshots and
return new ones. BackgammonRuleSet wraps them around a mutable game
record for turn drivers (the stored-game engine, the match runner).
"""
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union

from ..board import (
    BAR,
    BLACK,
    OFF,
    TOTAL_POINTS,
    WHITE,
    Checkers,
    Move,
    Position,
    direction,
    distance_to_off,
    entry_point,
    home_board,
    opponent_of,
    validate_position,
)
from ..exceptions import GameError, InvalidMove, NotYourTurn
from .base import BaseRuleSet

MoveSequence = List[Move]


def roll_dice(rng: Optional[random.Random] = None) -> List[int]:
    """Roll two dice."""
    rng = rng or random
    return [rng.randint(1, 6), rng.randint(1, 6)]


def expand_dice(dice: Sequence[int]) -> List[int]:
    """Doubles give four moves of the same value."""
    if len(dice) == 2 and dice[0] == dice[1]:
        return [dice[0]] * 4
    return list(dice)


def blocked_points(board: Dict[int, Checkers], color: str) -> Set[int]:
    """Points held by two or more opposing checkers."""
    opponent = opponent_of(color)
    return {
        point for point, occupant in board.items()
        if occupant.color == opponent and occupant.count >= 2
    }


def can_land_on(board: Dict[int, Checkers], point: int, color: str) -> bool:
    """True if the point is empty, ours, or holds a single opposing checker."""
    occupant = board.get(point)
    if occupant is None or occupant.color == color:
        return True
    return occupant.count == 1


def all_in_home(position: Position, color: str) -> bool:
    """Check that no checker of ``color`` is on the bar or outside its home board."""
    if position.bar.get(color, 0) > 0:
        return False
    home = home_board(color)
    return all(point in home for point, _ in position.points_of(color))


def can_bear_off(position: Position, from_point: int, die: int, color: str) -> bool:
    """
    Check whether a checker may bear off from ``from_point`` with ``die``.

    An exact roll always bears off. A larger roll only bears off the
    checker farthest from home.
    """
    if not all_in_home(position, color):
        return False

    distance = distance_to_off(from_point, color)
    if distance == die:
        return True
    if distance > die:
        return False

    for point, _ in position.points_of(color):
        if distance_to_off(point, color) > distance:
            return False
    return True


def _is_hit(board: Dict[int, Checkers], point: int, color: str) -> bool:
    occupant = board.get(point)
    return occupant is not None and occupant.color != color


def single_moves_for_die(
    position: Position,
    die: int,
    die_index: int,
    color: str,
) -> List[Move]:
    """
    Generate every legal single move for one die.

    A color with checkers on the bar may only enter; nothing else moves
    until the bar is empty.
    """
    board = position.board

    if position.bar.get(color, 0) > 0:
        target = entry_point(die, color)
        if can_land_on(board, target, color):
            return [Move(BAR, target, die, die_index, _is_hit(board, target, color))]
        return []

    moves = []
    blocked = blocked_points(board, color)
    bearing_off = all_in_home(position, color)
    step = direction(color) * die

    for point, _ in position.points_of(color):
        target = point + step

        if target >= TOTAL_POINTS or target < 0:
            if bearing_off and can_bear_off(position, point, die, color):
                moves.append(Move(point, OFF, die, die_index))
            continue

        if target not in blocked:
            moves.append(Move(point, target, die, die_index, _is_hit(board, target, color)))

    return moves


def apply_move(position: Position, move: Move, color: str) -> Position:
    """
    Apply a single move and return the resulting position.

    The move is expected to come from ``available_moves`` or
    ``legal_sequences``. Only a structural check is performed so that a
    bad move cannot corrupt a snapshot.

    Raises:
        InvalidMove: If the origin holds no checker of ``color`` or the
                     destination is a made opposing point.
    """
    board = dict(position.board)
    bar = dict(position.bar)
    borne_off = dict(position.borne_off)

    # Take the checker off its origin
    if move.from_point == BAR:
        if bar.get(color, 0) < 1:
            raise InvalidMove(f"{color} has no checker on the bar.")
        bar[color] -= 1
    else:
        origin = board.get(move.from_point)
        if origin is None or origin.color != color:
            raise InvalidMove(f"No {color} checker on point {move.from_point}.")
        if origin.count == 1:
            del board[move.from_point]
        else:
            board[move.from_point] = Checkers(color, origin.count - 1)

    # Put it on its destination
    if move.to_point == OFF:
        borne_off[color] = borne_off.get(color, 0) + 1
    else:
        target = board.get(move.to_point)
        if target is None:
            board[move.to_point] = Checkers(color, 1)
        elif target.color == color:
            board[move.to_point] = Checkers(color, target.count + 1)
        elif target.count == 1:
            bar[target.color] = bar.get(target.color, 0) + 1
            board[move.to_point] = Checkers(color, 1)
        else:
            raise InvalidMove(f"Point {move.to_point} is blocked for {color}.")

    return Position(board=board, bar=bar, borne_off=borne_off)


def apply_sequence(position: Position, sequence: Iterable[Move], color: str) -> Position:
    """Apply a sequence of moves in order."""
    for move in sequence:
        position = apply_move(position, move, color)
    return position


def _search(
    position: Position,
    dice: Sequence[int],
    remaining: Sequence[int],
    color: str,
    prefix: MoveSequence,
    out: List[MoveSequence],
) -> None:
    """Depth-first search over every ordering of the remaining die indices."""
    extended = False
    tried_values = set()

    for index in remaining:
        die = dice[index]
        # Equal dice are interchangeable; expand only the first unused one
        if die in tried_values:
            continue
        tried_values.add(die)

        rest = [i for i in remaining if i != index]
        for move in single_moves_for_die(position, die, index, color):
            extended = True
            _search(apply_move(position, move, color), dice, rest, color, prefix + [move], out)

    if not extended:
        out.append(prefix)


def legal_sequences(
    position: Position,
    dice: Sequence[int],
    used_dice: Iterable[int],
    color: str,
) -> List[MoveSequence]:
    """
    Generate all legal move sequences for the unused dice.

    Rules enforced:
    - Bar entry before any other move.
    - If more dice can be played, they must be (maximum length only).
    - If only one die can be played and the dice differ, the higher die
      must be played when it is playable.

    Args:
        position: Current snapshot.
        dice: Dice for the turn (two values, or four on doubles).
        used_dice: Indices of dice already consumed this turn.
        color: Color to move.

    Returns:
        De-duplicated sequences of maximal length. Empty when no move
        is possible.
    """
    used = set(used_dice)
    remaining = [i for i in range(len(dice)) if i not in used]

    found: List[MoveSequence] = []
    _search(position, dice, remaining, color, [], found)

    max_length = max((len(seq) for seq in found), default=0)
    if max_length == 0:
        return []

    best = [seq for seq in found if len(seq) == max_length]

    if max_length == 1:
        values = {dice[i] for i in remaining}
        if len(values) > 1:
            high = max(values)
            if any(seq[0].die == high for seq in best):
                best = [seq for seq in best if seq[0].die == high]

    seen = set()
    unique = []
    for seq in best:
        key = tuple(move.key for move in seq)
        if key not in seen:
            seen.add(key)
            unique.append(seq)
    return unique


def available_moves(
    position: Position,
    dice: Sequence[int],
    used_dice: Iterable[int],
    color: str,
) -> List[Move]:
    """Return the distinct first moves of all legal sequences."""
    moves = {}
    for seq in legal_sequences(position, dice, used_dice, color):
        first = seq[0]
        moves.setdefault(first.key, first)
    return list(moves.values())


def has_valid_moves(
    position: Position,
    dice: Sequence[int],
    used_dice: Iterable[int],
    color: str,
) -> bool:
    return bool(available_moves(position, dice, used_dice, color))


def winner(borne_off: Dict[str, int]) -> Optional[str]:
    """Return the first color with all 15 checkers borne off."""
    for color in (WHITE, BLACK):
        if borne_off.get(color, 0) >= 15:
            return color
    return None


def pip_count(position: Position, color: str) -> int:
    """
    Calculate the pip count for a player.

    Checkers on the bar count as 24 pips each.
    """
    total = position.bar.get(color, 0) * TOTAL_POINTS
    for point, count in position.points_of(color):
        total += distance_to_off(point, color) * count
    return total


def game_stats(position: Position, color: str) -> Dict[str, int]:
    """Summary numbers for one side."""
    blots = 0
    made = 0
    for _, count in position.points_of(color):
        if count == 1:
            blots += 1
        else:
            made += 1

    return {
        'on_bar': position.bar.get(color, 0),
        'borne_off': position.borne_off.get(color, 0),
        'pip_count': pip_count(position, color),
        'blots': blots,
        'made_points': made,
    }


class BackgammonRuleSet(BaseRuleSet):
    """
    Backgammon rules bound to a game record.

    The record holds the position fields (``board``, ``bar``,
    ``borne_off``) plus ``current_player``, ``dice``, ``used_dice``,
    ``winner`` and ``history``. ``history`` keeps the snapshots taken
    before each move of the current turn so moves can be undone.
    """

    game_type = 'backgammon'
    display_name = 'Backgammon'
    requires_dice = True

    def get_initial_state(self) -> Dict[str, Any]:
        """Return standard backgammon starting position."""
        state = Position.initial().to_state()
        state.update({
            'current_player': WHITE,
            'dice': [],
            'used_dice': [],
            'winner': None,
            'history': [],
        })
        return state

    @property
    def position(self) -> Position:
        return Position.from_state(self.game_state)

    @property
    def dice(self) -> List[int]:
        return self.game_state.get('dice') or []

    @property
    def used_dice(self) -> List[int]:
        return self.game_state.get('used_dice') or []

    def get_current_player(self) -> str:
        """Return whose turn it is."""
        return self.game_state.get('current_player', WHITE)

    def roll_dice(self, rng: Optional[random.Random] = None) -> Dict[str, Any]:
        """Roll two dice and calculate available moves."""
        return self.set_dice(expand_dice(roll_dice(rng)))

    def set_dice(self, dice: Sequence[int]) -> Dict[str, Any]:
        """
        Start the current player's turn with an already rolled set of dice.

        Raises:
            GameError: If dice are already in play or the game is over.
        """
        if self.check_winner():
            raise GameError("The game is already over.")
        if self.dice:
            raise GameError("Dice have already been rolled.")

        self.game_state['dice'] = list(dice)
        self.game_state['used_dice'] = []
        self.game_state['history'] = []

        return {
            'dice': list(dice),
            'legal_moves': [m.to_dict() for m in self.get_legal_actions(self.get_current_player())],
        }

    def get_legal_actions(self, player_id: str) -> List[Move]:
        """Get all legal next moves for the player, empty if it is not their turn."""
        if player_id != self.get_current_player() or self.check_winner():
            return []
        if not self.dice:
            return []
        return available_moves(self.position, self.dice, self.used_dice, player_id)

    def apply_action(self, player_id: str, action: Union[Move, Dict[str, Any]]) -> Dict[str, Any]:
        """Execute an action and return the result."""
        if isinstance(action, Move):
            action = action.to_dict()
        action_type = action.get('type', 'move')

        if action_type == 'move':
            return self._execute_move(player_id, action)

        elif action_type == 'end_turn':
            return self.end_turn(player_id)

        elif action_type == 'undo':
            return self.undo(player_id)

        raise ValueError(f"Unknown action type: {action_type}")

    def check_winner(self) -> Optional[str]:
        """Check if a player has borne off all checkers."""
        return self.game_state.get('winner') or winner(self.game_state.get('borne_off') or {})

    def validate_state(self) -> bool:
        """Validate the board state is legal."""
        return validate_position(self.position)

    def end_turn(self, player_id: str) -> Dict[str, Any]:
        """Pass the turn without using the remaining dice."""
        self._require_turn(player_id)
        self.switch_turn()
        return {'turn_passed': True}

    def undo(self, player_id: str) -> Dict[str, Any]:
        """
        Restore the snapshot taken before the last move of this turn.

        Raises:
            NotYourTurn: If ``player_id`` is not the player to move.
            GameError: If no move of the current turn can be undone.
        """
        self._require_turn(player_id)
        history = self.game_state.get('history') or []
        if not history:
            raise GameError("Nothing to undo.")

        previous = history.pop()
        self.game_state.update({
            'board': previous['board'],
            'bar': previous['bar'],
            'borne_off': previous['borne_off'],
            'used_dice': previous['used_dice'],
            'history': history,
        })
        return {'undone': True, 'used_dice': list(previous['used_dice'])}

    def switch_turn(self) -> None:
        """Switch to the other player's turn."""
        self.game_state['current_player'] = opponent_of(self.get_current_player())
        self.game_state['dice'] = []
        self.game_state['used_dice'] = []
        self.game_state['history'] = []

    # Private helper methods

    def _require_turn(self, player_id: str) -> None:
        if player_id != self.get_current_player():
            raise NotYourTurn("It's not your turn.")

    def _find_legal_move(self, player_id: str, action: Dict[str, Any]) -> Move:
        """Match a requested move against the legal set."""
        die_index = action.get('die_index', -1)
        die = action.get('die', 0)

        for move in self.get_legal_actions(player_id):
            if move.from_point != action.get('from') or move.to_point != action.get('to'):
                continue
            if die_index is not None and die_index >= 0 and move.die_index != die_index:
                continue
            if die and move.die != die:
                continue
            return move

        raise InvalidMove(f"Illegal move: {action.get('from')} -> {action.get('to')}")

    def _execute_move(self, player_id: str, action: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a move and update state."""
        self._require_turn(player_id)
        move = self._find_legal_move(player_id, action)

        before = self.position
        snapshot = before.to_state()
        snapshot['used_dice'] = list(self.used_dice)

        after = apply_move(before, move, player_id)
        used_dice = self.used_dice + [move.die_index]

        self.game_state.update(after.to_state())
        self.game_state['used_dice'] = used_dice
        self.game_state.setdefault('history', []).append(snapshot)

        result = {'success': True, 'move': move.to_dict(), 'winner': None, 'turn_passed': False}

        game_winner = winner(after.borne_off)
        if game_winner:
            self.game_state['winner'] = game_winner
            result['winner'] = game_winner
            return result

        if len(used_dice) >= len(self.dice) or not has_valid_moves(after, self.dice, used_dice, player_id):
            self.switch_turn()
            result['turn_passed'] = True

        return result
