"""
Tests for game record validation.
"""
import pytest

from apps.game.serializers import GameStateSerializer

from .factories import initial_record, make_position, make_state


class TestGameStateSerializer:
    """Tests for GameStateSerializer."""

    def test_initial_record_is_valid(self):
        serializer = GameStateSerializer(data=initial_record())
        assert serializer.is_valid(), serializer.errors

    def test_record_with_dice_in_play(self):
        position = make_position(white={23: 15}, black={0: 15})
        state = make_state(position, dice=[5, 5, 5, 5], used_dice=[0, 1])

        assert GameStateSerializer(data=state).is_valid()

    def test_wrong_checker_count(self):
        state = make_state(make_position(white={23: 14}, black={0: 15}))
        serializer = GameStateSerializer(data=state)

        assert not serializer.is_valid()
        assert 'non_field_errors' in serializer.errors

    @pytest.mark.parametrize('dice', [[3], [1, 2, 3], [1, 2, 3, 4]])
    def test_invalid_dice(self, dice):
        state = make_state(make_position(white={23: 15}, black={0: 15}), dice=dice)
        serializer = GameStateSerializer(data=state)

        assert not serializer.is_valid()
        assert 'dice' in serializer.errors

    def test_used_die_outside_roll(self):
        state = make_state(
            make_position(white={23: 15}, black={0: 15}),
            dice=[3, 1],
            used_dice=[2],
        )
        serializer = GameStateSerializer(data=state)

        assert not serializer.is_valid()
        assert 'used_dice' in serializer.errors

    def test_repeated_used_die(self):
        state = make_state(
            make_position(white={23: 15}, black={0: 15}),
            dice=[3, 1],
            used_dice=[0, 0],
        )
        assert not GameStateSerializer(data=state).is_valid()

    def test_point_off_the_board(self):
        state = initial_record()
        state['board']['24'] = state['board'].pop('0')
        serializer = GameStateSerializer(data=state)

        assert not serializer.is_valid()
        assert 'board' in serializer.errors

    def test_unknown_color(self):
        state = initial_record(current_player='red')
        assert not GameStateSerializer(data=state).is_valid()
