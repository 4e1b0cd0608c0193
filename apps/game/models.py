"""Models for the game app."""
from django.db import models


class GameRecord(models.Model):
    """
    A keyed, JSON game record in the shared game state store.

    The record body follows the layout produced by
    ``BackgammonRuleSet.get_initial_state`` plus seat information.
    ``version`` is the revision marker used for optimistic concurrency:
    every write bumps it and conditional writes only succeed when it is
    unchanged since the read.
    """

    key = models.CharField(max_length=200, primary_key=True)
    data = models.JSONField(default=dict)

    # Optimistic locking
    version = models.PositiveIntegerField(default=1)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'game_records'
        ordering = ['key']

    def __str__(self):
        return f"{self.key} (v{self.version})"
