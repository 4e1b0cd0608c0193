"""
Abstract base class for rule sets bound to a game record.

A rule set wraps a mutable, JSON-serializable game record and exposes the
turn-level operations drivers need (legal actions, applying an action,
winner detection). The pure position logic lives in module-level
functions next to each implementation.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseRuleSet(ABC):
    """
    Interface shared by rule set implementations.

    Attributes:
        game_type: Unique identifier for this game type (e.g., 'backgammon').
        display_name: Human-readable name.
        requires_dice: Whether the game uses dice.
    """

    game_type: str = ''
    display_name: str = ''
    requires_dice: bool = False

    def __init__(self, game_state: Optional[Dict[str, Any]] = None):
        """
        Initialize rule set with a game record.

        Args:
            game_state: The record to operate on. A fresh initial record is
                        created when omitted or empty.
        """
        self.game_state = game_state or self.get_initial_state()

    @abstractmethod
    def get_initial_state(self) -> Dict[str, Any]:
        """Return the record for a new game."""

    @abstractmethod
    def get_legal_actions(self, player_id: str) -> List[Any]:
        """
        Get all legal actions for the specified player.

        Returns:
            Empty list when the player cannot act.
        """

    @abstractmethod
    def apply_action(self, player_id: str, action: Any) -> Dict[str, Any]:
        """
        Apply an action and return the result.

        Raises:
            ValueError: If the action is invalid.
        """

    @abstractmethod
    def check_winner(self) -> Optional[str]:
        """Return the winner's player ID, or None if the game is ongoing."""

    @abstractmethod
    def get_current_player(self) -> str:
        """Get the ID of the player whose turn it is."""

    @abstractmethod
    def validate_state(self) -> bool:
        """Return True if the record describes a legal position."""

    def roll_dice(self, rng=None) -> Dict[str, Any]:
        """
        Roll dice for the game (if applicable).

        Override this method for games that use dice.
        """
        raise NotImplementedError("This game type doesn't use dice")

    def serialize_state(self) -> Dict[str, Any]:
        """Return the JSON-serializable game record."""
        return self.game_state

    @classmethod
    def deserialize_state(cls, data: Dict[str, Any]) -> 'BaseRuleSet':
        """Create a rule set instance from a stored record."""
        return cls(data)
