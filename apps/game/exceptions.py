"""
Exceptions raised by the rules engine and the turn driver.

All of them subclass ``ValueError`` so callers that only care about
"the request was not acceptable" can catch a single type.
"""


class GameError(ValueError):
    """Base class for game-level errors."""


class InvalidMove(GameError):
    """A move was requested that is not in the current legal set."""


class GameNotFound(GameError):
    """No stored game exists under the requested key."""


class GameFull(GameError):
    """Both seats of the game are already taken."""


class NotYourTurn(GameError):
    """The acting player is not the player to move."""


class StateConflict(GameError):
    """A conditional update ran out of attempts because of concurrent writers."""
