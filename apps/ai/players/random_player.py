"""
Random player implementation.

Picks uniformly among the legal next moves. Serves as the baseline the
heuristic player is measured against and as a fast opponent for
self-play tests.
"""
import random
from typing import Any, Dict, List, Optional

from .base import BasePlayer


class RandomPlayer(BasePlayer):
    """
    A player that chooses moves uniformly at random.

    Attributes:
        seed: Optional random seed for reproducibility.

    Example:
        player = RandomPlayer(player_id='random_1', seed=7)
        move = player.select_action(game_state, legal_actions)
    """

    def __init__(
        self,
        player_id: str,
        name: Optional[str] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(player_id=player_id, name=name or 'Random Player')
        self.seed = seed
        self._rng = random.Random(seed)

    def select_action(
        self,
        game_state: Dict[str, Any],
        legal_actions: List[Any],
    ) -> Any:
        """
        Select a random move from legal actions.

        Raises:
            ValueError: If legal_actions is empty.
        """
        if not legal_actions:
            raise ValueError("Cannot select from empty action list")

        return self._rng.choice(legal_actions)

    def get_player_type(self) -> str:
        """Return 'random' as the player type."""
        return 'random'

    def get_config(self) -> Dict[str, Any]:
        """Return configuration including seed."""
        config = super().get_config()
        config['seed'] = self.seed
        return config
