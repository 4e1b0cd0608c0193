"""
Position model for backgammon.

Board Representation:
    Points are numbered 0-23.
    White moves from point 0 toward point 23 and bears off past 23.
    Black moves from point 23 toward point 0 and bears off past 0.

    White's home board: points 18-23
    Black's home board: points 0-5

A position is an immutable snapshot of the board, the bar and the borne
off counts. Applying a move never changes a snapshot, it builds a new one,
so keeping old snapshots around is all that undo needs.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

WHITE = 'white'
BLACK = 'black'
COLORS = (WHITE, BLACK)

BAR = 'bar'
OFF = 'off'

TOTAL_POINTS = 24
CHECKERS_PER_PLAYER = 15

PointRef = Union[int, str]


def opponent_of(color: str) -> str:
    """Return the other color."""
    return BLACK if color == WHITE else WHITE


def home_board(color: str) -> range:
    """Return the points making up a color's home board."""
    return range(18, 24) if color == WHITE else range(0, 6)


def direction(color: str) -> int:
    """Return +1 for white (moving up the board) and -1 for black."""
    return 1 if color == WHITE else -1


def distance_to_off(point: int, color: str) -> int:
    """Pips a checker on ``point`` still has to travel to bear off."""
    return TOTAL_POINTS - point if color == WHITE else point + 1


def entry_point(die: int, color: str) -> int:
    """Point a checker entering from the bar lands on for a die value."""
    return die - 1 if color == WHITE else TOTAL_POINTS - die


@dataclass(frozen=True)
class Checkers:
    """Occupancy of a single point."""
    color: str
    count: int


@dataclass(frozen=True)
class Move:
    """
    A single checker movement using one die.

    Attributes:
        from_point: Point index or BAR.
        to_point: Point index or OFF.
        die: Die value consumed.
        die_index: Index of the die in the turn's dice list.
        is_hit: Whether the move lands on an opposing blot.
    """
    from_point: PointRef
    to_point: PointRef
    die: int
    die_index: int
    is_hit: bool = False

    @property
    def key(self):
        """Identity used for de-duplication: (from, to, die index)."""
        return (self.from_point, self.to_point, self.die_index)

    @property
    def is_bear_off(self) -> bool:
        return self.to_point == OFF

    @property
    def is_entry(self) -> bool:
        return self.from_point == BAR

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'move',
            'from': self.from_point,
            'to': self.to_point,
            'die': self.die,
            'die_index': self.die_index,
            'is_hit': self.is_hit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Move':
        """Build a move from its dictionary form (``die_index`` may be missing)."""
        return cls(
            from_point=data['from'],
            to_point=data['to'],
            die=data.get('die', 0),
            die_index=data.get('die_index', -1),
            is_hit=bool(data.get('is_hit', False)),
        )


def _empty_counts() -> Dict[str, int]:
    return {WHITE: 0, BLACK: 0}


@dataclass(frozen=True)
class Position:
    """
    Immutable snapshot of board, bar and borne off checkers.

    The dictionaries are never modified after construction; every rules
    engine operation returns a new Position.
    """
    board: Dict[int, Checkers] = field(default_factory=dict)
    bar: Dict[str, int] = field(default_factory=_empty_counts)
    borne_off: Dict[str, int] = field(default_factory=_empty_counts)

    def at(self, point: int) -> Optional[Checkers]:
        """Return the occupancy of a point, or None if it is empty."""
        return self.board.get(point)

    def owns(self, point: int, color: str) -> bool:
        occupant = self.board.get(point)
        return occupant is not None and occupant.color == color

    def points_of(self, color: str):
        """Yield (point, count) for every point held by ``color``, in board order."""
        for point in sorted(self.board):
            occupant = self.board[point]
            if occupant.color == color:
                yield point, occupant.count

    @classmethod
    def initial(cls) -> 'Position':
        """Return the standard starting position."""
        return cls(
            board={
                0: Checkers(WHITE, 2),
                11: Checkers(WHITE, 5),
                16: Checkers(WHITE, 3),
                18: Checkers(WHITE, 5),
                23: Checkers(BLACK, 2),
                12: Checkers(BLACK, 5),
                7: Checkers(BLACK, 3),
                5: Checkers(BLACK, 5),
            },
        )

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> 'Position':
        """
        Build a position from a stored game record.

        Args:
            state: Record with ``board`` (string point keys mapping to
                   ``{'color', 'count'}``), ``bar`` and ``borne_off``.
        """
        board = {}
        for point, occupant in (state.get('board') or {}).items():
            if occupant and occupant.get('count', 0) > 0:
                board[int(point)] = Checkers(occupant['color'], occupant['count'])

        bar = state.get('bar') or {}
        borne_off = state.get('borne_off') or {}
        return cls(
            board=board,
            bar={color: bar.get(color, 0) for color in COLORS},
            borne_off={color: borne_off.get(color, 0) for color in COLORS},
        )

    def to_state(self) -> Dict[str, Any]:
        """Return the record fields describing this position."""
        return {
            'board': {
                str(point): {'color': occupant.color, 'count': occupant.count}
                for point, occupant in sorted(self.board.items())
            },
            'bar': dict(self.bar),
            'borne_off': dict(self.borne_off),
        }


def checker_total(position: Position, color: str) -> int:
    """Count every checker of a color: on the board, on the bar and borne off."""
    on_board = sum(count for _, count in position.points_of(color))
    return on_board + position.bar.get(color, 0) + position.borne_off.get(color, 0)


def validate_position(position: Position) -> bool:
    """Return True if both colors account for exactly 15 checkers."""
    for point, occupant in position.board.items():
        if not 0 <= point < TOTAL_POINTS or occupant.count < 1:
            return False
    return all(checker_total(position, color) == CHECKERS_PER_PLAYER for color in COLORS)
