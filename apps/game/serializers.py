"""Serializers for stored game records."""
from rest_framework import serializers

from .board import CHECKERS_PER_PLAYER, COLORS, TOTAL_POINTS

COLOR_CHOICES = [(color, color.title()) for color in COLORS]


class SeatSerializer(serializers.Serializer):
    """A player sitting at the table."""

    id = serializers.CharField(max_length=100)
    name = serializers.CharField(max_length=100, allow_blank=True)


class CheckersSerializer(serializers.Serializer):
    """Occupancy of one point."""

    color = serializers.ChoiceField(choices=COLOR_CHOICES)
    count = serializers.IntegerField(min_value=1, max_value=CHECKERS_PER_PLAYER)


class ColorCountSerializer(serializers.Serializer):
    """Per-color counter used for the bar and borne off checkers."""

    white = serializers.IntegerField(min_value=0, max_value=CHECKERS_PER_PLAYER, default=0)
    black = serializers.IntegerField(min_value=0, max_value=CHECKERS_PER_PLAYER, default=0)


class GameStateSerializer(serializers.Serializer):
    """
    Validates the game record kept in the shared state store.

    Checks field shapes and the cross-field rules the rules engine relies
    on: 0, 2 or 4 dice, used dice indices inside the dice list, and 15
    checkers per color.
    """

    id = serializers.CharField(max_length=100, required=False)
    player1 = SeatSerializer(allow_null=True, required=False)
    player2 = SeatSerializer(allow_null=True, required=False)
    board = serializers.DictField(child=CheckersSerializer())
    bar = ColorCountSerializer()
    borne_off = ColorCountSerializer()
    current_player = serializers.ChoiceField(choices=COLOR_CHOICES)
    dice = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=6),
        max_length=4,
        default=list,
    )
    used_dice = serializers.ListField(
        child=serializers.IntegerField(min_value=0, max_value=3),
        max_length=4,
        default=list,
    )
    winner = serializers.ChoiceField(choices=COLOR_CHOICES, allow_null=True, required=False)
    history = serializers.ListField(child=serializers.DictField(), default=list)

    def validate_board(self, value):
        for point in value:
            try:
                index = int(point)
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"Invalid point '{point}'.")
            if not 0 <= index < TOTAL_POINTS:
                raise serializers.ValidationError(f"Point {index} is off the board.")
        return value

    def validate_dice(self, value):
        if len(value) not in (0, 2, 4):
            raise serializers.ValidationError("Dice must hold 0, 2 or 4 values.")
        if len(value) == 4 and len(set(value)) != 1:
            raise serializers.ValidationError("Four dice are only rolled on doubles.")
        return value

    def validate(self, attrs):
        dice = attrs.get('dice', [])
        used = attrs.get('used_dice', [])

        if len(set(used)) != len(used):
            raise serializers.ValidationError({'used_dice': "Die indices must be unique."})
        if any(index >= len(dice) for index in used):
            raise serializers.ValidationError({'used_dice': "Die index outside the rolled dice."})

        for color in ('white', 'black'):
            on_board = sum(
                occupant['count'] for occupant in attrs['board'].values()
                if occupant['color'] == color
            )
            total = on_board + attrs['bar'][color] + attrs['borne_off'][color]
            if total != CHECKERS_PER_PLAYER:
                raise serializers.ValidationError(
                    f"{color} has {total} checkers, expected {CHECKERS_PER_PLAYER}."
                )

        return attrs
