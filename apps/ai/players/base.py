"""
Base player abstraction for all player types.

This module defines the interface that all players must implement to take
part in games. The key method is `select_action`, which takes a game record
and the list of legal moves, returning the chosen move.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BasePlayer(ABC):
    """
    Abstract base class for all player types.

    Attributes:
        player_id: Unique identifier for this player instance.
        name: Human-readable name for display purposes.

    Example:
        class FirstMovePlayer(BasePlayer):
            def select_action(self, game_state, legal_actions):
                return legal_actions[0]

            def get_player_type(self):
                return 'first_move'
    """

    def __init__(self, player_id: str, name: Optional[str] = None):
        """
        Initialize a player.

        Args:
            player_id: Unique identifier for this player.
            name: Optional display name. Defaults to player_id if not provided.
        """
        self.player_id = player_id
        self.name = name or player_id

    @abstractmethod
    def select_action(
        self,
        game_state: Dict[str, Any],
        legal_actions: List[Any],
    ) -> Any:
        """
        Choose a move from the list of legal moves.

        Args:
            game_state: Current game record::

                {
                    'board': {'0': {'color': 'white', 'count': 2}, ...},
                    'bar': {'white': 0, 'black': 0},
                    'borne_off': {'white': 0, 'black': 0},
                    'current_player': 'white',
                    'dice': [3, 5],
                    'used_dice': [],
                }

            legal_actions: The legal next moves, as returned by
                           ``BackgammonRuleSet.get_legal_actions``.

        Returns:
            A single element of legal_actions.

        Raises:
            ValueError: If legal_actions is empty.
        """

    @abstractmethod
    def get_player_type(self) -> str:
        """Return the type identifier for this player (e.g. 'heuristic')."""

    def get_config(self) -> Dict[str, Any]:
        """
        Return player configuration for serialization.

        Override to include additional configuration specific to
        your player implementation.
        """
        return {
            'player_id': self.player_id,
            'name': self.name,
            'type': self.get_player_type(),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.player_id})"

    def __str__(self) -> str:
        return f"{self.name} ({self.get_player_type()})"
