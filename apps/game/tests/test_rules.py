"""
Tests for the backgammon rules engine.

Tests the pure position functions and BackgammonRuleSet including:
- Board geometry and position snapshots
- Blocked points and bar entry
- Bearing off
- Full-turn sequence search (maximum dice, forced higher die, doubles)
- Hitting and move application
- Turn flow and undo on a game record
"""
import random

import pytest

from apps.game.board import (
    BAR,
    BLACK,
    OFF,
    WHITE,
    Checkers,
    Move,
    Position,
    checker_total,
    distance_to_off,
    entry_point,
    validate_position,
)
from apps.game.exceptions import GameError, InvalidMove, NotYourTurn
from apps.game.rulesets.backgammon import (
    BackgammonRuleSet,
    apply_move,
    available_moves,
    blocked_points,
    can_bear_off,
    can_land_on,
    expand_dice,
    game_stats,
    has_valid_moves,
    legal_sequences,
    pip_count,
    single_moves_for_die,
    winner,
)

from .factories import make_position, make_state


class TestBoardGeometry:
    """Tests for board constants and position snapshots."""

    def test_entry_points(self):
        """White enters on die-1, black on 24-die."""
        assert entry_point(1, WHITE) == 0
        assert entry_point(6, WHITE) == 5
        assert entry_point(1, BLACK) == 23
        assert entry_point(6, BLACK) == 18

    def test_distance_to_off(self):
        assert distance_to_off(23, WHITE) == 1
        assert distance_to_off(18, WHITE) == 6
        assert distance_to_off(0, BLACK) == 1
        assert distance_to_off(5, BLACK) == 6

    def test_initial_position_is_valid(self, initial_position):
        """Test both colors start with 15 checkers and 167 pips."""
        assert validate_position(initial_position)
        assert checker_total(initial_position, WHITE) == 15
        assert checker_total(initial_position, BLACK) == 15
        assert pip_count(initial_position, WHITE) == 167
        assert pip_count(initial_position, BLACK) == 167

    def test_missing_checker_is_invalid(self):
        position = make_position(white={0: 14}, black={23: 15})
        assert not validate_position(position)

    def test_state_conversion_keeps_position(self, initial_position):
        state = initial_position.to_state()

        assert state['board']['0'] == {'color': WHITE, 'count': 2}
        assert Position.from_state(state) == initial_position

    def test_move_from_dict_without_die_index(self):
        move = Move.from_dict({'from': 16, 'to': 19})
        assert move.die_index == -1
        assert move.die == 0

    def test_bar_counts_as_24_pips(self):
        position = make_position(white={23: 14}, bar={WHITE: 1})
        assert pip_count(position, WHITE) == 14 + 24

    def test_game_stats(self):
        position = make_position(white={0: 1, 5: 3, 9: 1}, bar={WHITE: 1}, borne_off={WHITE: 9})
        stats = game_stats(position, WHITE)

        assert stats['blots'] == 2
        assert stats['made_points'] == 1
        assert stats['on_bar'] == 1
        assert stats['borne_off'] == 9


class TestBlockedPoints:
    """Tests for landing rules."""

    def test_blocked_points_initial(self, initial_position):
        assert blocked_points(initial_position.board, WHITE) == {5, 7, 12, 23}
        assert blocked_points(initial_position.board, BLACK) == {0, 11, 16, 18}

    def test_can_land_on(self):
        board = {
            3: Checkers(WHITE, 2),
            4: Checkers(BLACK, 1),
            5: Checkers(BLACK, 2),
        }
        assert can_land_on(board, 2, WHITE)
        assert can_land_on(board, 3, WHITE)
        assert can_land_on(board, 4, WHITE)
        assert not can_land_on(board, 5, WHITE)

    def test_moves_never_land_on_made_points(self, initial_position):
        for die in range(1, 7):
            for move in single_moves_for_die(initial_position, die, 0, WHITE):
                assert move.to_point not in {5, 7, 12, 23}


class TestBarEntry:
    """Tests for entering checkers from the bar."""

    def test_bar_checker_must_enter_first(self):
        """Test that every first move starts on the bar."""
        position = make_position(white={11: 2}, bar={WHITE: 1})
        moves = available_moves(position, [3, 5], [], WHITE)

        assert moves
        assert all(move.from_point == BAR for move in moves)
        assert {move.to_point for move in moves} == {2, 4}

    def test_black_enters_on_high_points(self):
        position = make_position(black={5: 2}, bar={BLACK: 1})
        moves = available_moves(position, [6, 1], [], BLACK)

        assert {move.to_point for move in moves} == {18, 23}

    def test_closed_entry_points_leave_no_moves(self):
        position = make_position(white={11: 2}, black={2: 2, 4: 2}, bar={WHITE: 1})

        assert legal_sequences(position, [3, 5], [], WHITE) == []
        assert not has_valid_moves(position, [3, 5], [], WHITE)

    def test_entering_on_blot_hits(self):
        position = make_position(white={11: 2}, black={2: 1}, bar={WHITE: 1})
        moves = single_moves_for_die(position, 3, 0, WHITE)

        assert moves == [Move(BAR, 2, 3, 0, True)]


class TestBearingOff:
    """Tests for bearing off."""

    def test_exact_roll_bears_off(self):
        position = make_position(white={20: 1, 23: 1})
        assert can_bear_off(position, 20, 4, WHITE)

    def test_overshoot_from_farthest_checker(self):
        """A larger die bears off the checker farthest from home."""
        position = make_position(white={21: 1, 23: 1})

        assert can_bear_off(position, 21, 5, WHITE)
        assert not can_bear_off(position, 23, 5, WHITE)

    def test_lone_checker_one_pip_from_off(self):
        position = make_position(white={23: 1})

        assert can_bear_off(position, 23, 1, WHITE)
        assert can_bear_off(position, 23, 6, WHITE)

    def test_no_bear_off_with_checker_outside_home(self):
        position = make_position(white={17: 1, 23: 1})

        assert not can_bear_off(position, 23, 1, WHITE)
        moves = single_moves_for_die(position, 1, 0, WHITE)
        assert [move.key for move in moves] == [(17, 18, 0)]

    def test_no_bear_off_with_checker_on_bar(self):
        position = make_position(white={23: 1}, bar={WHITE: 1})
        assert not can_bear_off(position, 23, 1, WHITE)

    def test_black_bears_off_past_zero(self):
        position = make_position(black={2: 1})
        moves = single_moves_for_die(position, 6, 0, BLACK)

        assert moves == [Move(2, OFF, 6, 0)]


class TestSequenceSearch:
    """Tests for full-turn legal sequence generation."""

    def test_opening_roll_uses_both_dice(self, initial_position):
        sequences = legal_sequences(initial_position, [3, 1], [], WHITE)

        assert sequences
        assert all(len(seq) == 2 for seq in sequences)

    def test_both_orders_are_generated(self):
        position = make_position(white={0: 1})
        moves = available_moves(position, [1, 2], [], WHITE)

        assert {move.to_point for move in moves} == {1, 2}

    def test_move_that_strands_a_die_is_excluded(self):
        """A move after which the other die cannot be played is not legal."""
        position = make_position(white={0: 1, 10: 1}, black={3: 2, 12: 2})

        assert Move(0, 1, 1, 0) in single_moves_for_die(position, 1, 0, WHITE)

        keys = {move.key for move in available_moves(position, [1, 2], [], WHITE)}
        assert keys == {(10, 11, 0), (0, 2, 1)}

    def test_forced_higher_die(self):
        """When only one die can be played, it must be the higher one."""
        position = make_position(white={0: 1}, black={7: 2})
        sequences = legal_sequences(position, [2, 5], [], WHITE)

        assert len(sequences) == 1
        assert [move.key for move in sequences[0]] == [(0, 5, 1)]

    def test_forced_six_when_one_is_blocked(self):
        position = make_position(white={0: 1}, black={1: 2, 7: 2})
        moves = available_moves(position, [1, 6], [], WHITE)

        assert moves == [Move(0, 6, 6, 1)]

    def test_lower_die_when_higher_is_unplayable(self):
        position = make_position(white={0: 1}, black={5: 2, 7: 2})
        sequences = legal_sequences(position, [2, 5], [], WHITE)

        assert [[move.key for move in seq] for seq in sequences] == [[(0, 2, 0)]]

    def test_forced_higher_die_when_bearing_off(self):
        position = make_position(white={23: 1}, borne_off={WHITE: 14})
        moves = available_moves(position, [2, 1], [], WHITE)

        assert moves == [Move(23, OFF, 2, 0)]

    def test_doubles_use_four_die_indices(self):
        position = make_position(white={0: 1})
        sequences = legal_sequences(position, expand_dice([2, 2]), [], WHITE)

        assert len(sequences) == 1
        assert [move.die_index for move in sequences[0]] == [0, 1, 2, 3]
        assert [move.to_point for move in sequences[0]] == [2, 4, 6, 8]

    def test_used_dice_are_skipped(self, initial_position):
        moves = available_moves(initial_position, [3, 1], [0], WHITE)

        assert moves
        assert all(move.die_index == 1 for move in moves)

    def test_sequences_are_unique(self, initial_position):
        sequences = legal_sequences(initial_position, [4, 4, 4, 4], [], WHITE)
        keys = [tuple(move.key for move in seq) for seq in sequences]

        assert len(keys) == len(set(keys))

    def test_expand_dice(self):
        assert expand_dice([3, 3]) == [3, 3, 3, 3]
        assert expand_dice([3, 5]) == [3, 5]


class TestApplyMove:
    """Tests for applying moves to snapshots."""

    def test_hit_sends_blot_to_bar(self):
        position = make_position(white={0: 1}, black={3: 1})
        after = apply_move(position, Move(0, 3, 3, 0, True), WHITE)

        assert after.at(3) == Checkers(WHITE, 1)
        assert after.at(0) is None
        assert after.bar[BLACK] == 1

    def test_original_position_is_unchanged(self, initial_position):
        apply_move(initial_position, Move(0, 3, 3, 0), WHITE)

        assert initial_position.at(0) == Checkers(WHITE, 2)
        assert initial_position.at(3) is None

    def test_bear_off_increments_count(self):
        position = make_position(white={23: 2})
        after = apply_move(position, Move(23, OFF, 1, 0), WHITE)

        assert after.borne_off[WHITE] == 1
        assert after.at(23) == Checkers(WHITE, 1)

    def test_empty_origin_raises(self, initial_position):
        with pytest.raises(InvalidMove):
            apply_move(initial_position, Move(3, 5, 2, 0), WHITE)

    def test_blocked_destination_raises(self, initial_position):
        with pytest.raises(InvalidMove):
            apply_move(initial_position, Move(0, 5, 5, 0), WHITE)

    def test_empty_bar_raises(self, initial_position):
        with pytest.raises(InvalidMove):
            apply_move(initial_position, Move(BAR, 2, 3, 0), WHITE)

    def test_winner(self):
        assert winner({WHITE: 15, BLACK: 3}) == WHITE
        assert winner({WHITE: 2, BLACK: 15}) == BLACK
        assert winner({WHITE: 14, BLACK: 14}) is None


class TestBackgammonRuleSet:
    """Tests for turn flow on a game record."""

    def test_initial_state(self):
        ruleset = BackgammonRuleSet()

        assert ruleset.get_current_player() == WHITE
        assert ruleset.dice == []
        assert ruleset.validate_state()
        assert ruleset.get_legal_actions(WHITE) == []

    def test_set_dice_returns_legal_moves(self):
        ruleset = BackgammonRuleSet()
        result = ruleset.set_dice([3, 1])

        assert result['dice'] == [3, 1]
        assert {'type': 'move', 'from': 16, 'to': 19, 'die': 3, 'die_index': 0, 'is_hit': False} \
            in result['legal_moves']

    def test_cannot_roll_twice(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])

        with pytest.raises(GameError):
            ruleset.set_dice([6, 5])

    def test_play_full_turn(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])

        first = ruleset.apply_action(WHITE, {'from': 16, 'to': 19})
        assert first['success']
        assert not first['turn_passed']
        assert ruleset.used_dice == [0]

        second = ruleset.apply_action(WHITE, {'from': 18, 'to': 19})
        assert second['turn_passed']
        assert ruleset.get_current_player() == BLACK
        assert ruleset.dice == []

        position = ruleset.position
        assert position.at(19) == Checkers(WHITE, 2)
        assert position.at(16) == Checkers(WHITE, 2)
        assert position.at(18) == Checkers(WHITE, 4)

    def test_wrong_player_raises(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])

        with pytest.raises(NotYourTurn):
            ruleset.apply_action(BLACK, {'from': 12, 'to': 9})

    def test_illegal_move_raises(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])

        with pytest.raises(InvalidMove):
            ruleset.apply_action(WHITE, {'from': 0, 'to': 5})

    def test_undo_restores_position_and_dice(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])
        before = ruleset.position

        ruleset.apply_action(WHITE, {'from': 16, 'to': 19})
        result = ruleset.apply_action(WHITE, {'type': 'undo'})

        assert result['undone']
        assert ruleset.position == before
        assert ruleset.used_dice == []

    def test_nothing_to_undo(self):
        ruleset = BackgammonRuleSet()
        ruleset.set_dice([3, 1])

        with pytest.raises(GameError):
            ruleset.undo(WHITE)

    def test_turn_passes_when_remaining_die_is_dead(self):
        state = make_state(make_position(white={0: 1}, black={7: 2}), dice=[2, 5])
        ruleset = BackgammonRuleSet(state)

        result = ruleset.apply_action(WHITE, Move(0, 5, 5, 1))

        assert result['turn_passed']
        assert ruleset.get_current_player() == BLACK

    def test_end_turn(self):
        ruleset = BackgammonRuleSet()
        result = ruleset.apply_action(WHITE, {'type': 'end_turn'})

        assert result['turn_passed']
        assert ruleset.get_current_player() == BLACK

    def test_end_turn_out_of_turn(self):
        ruleset = BackgammonRuleSet()
        with pytest.raises(NotYourTurn):
            ruleset.end_turn(BLACK)

    def test_unknown_action_type(self):
        ruleset = BackgammonRuleSet()
        with pytest.raises(ValueError):
            ruleset.apply_action(WHITE, {'type': 'double'})

    def test_last_checker_wins(self):
        position = make_position(white={23: 1}, black={0: 15}, borne_off={WHITE: 14})
        ruleset = BackgammonRuleSet(make_state(position, dice=[2, 1]))

        result = ruleset.apply_action(WHITE, {'from': 23, 'to': OFF})

        assert result['winner'] == WHITE
        assert ruleset.check_winner() == WHITE
        assert ruleset.get_legal_actions(WHITE) == []
        with pytest.raises(GameError):
            ruleset.set_dice([4, 4])

    def test_random_play_keeps_fifteen_checkers(self):
        """Play random legal moves and check the checker count after each."""
        rng = random.Random(11)
        ruleset = BackgammonRuleSet()

        for _ in range(600):
            if ruleset.check_winner():
                break
            color = ruleset.get_current_player()
            if not ruleset.dice:
                if not ruleset.roll_dice(rng)['legal_moves']:
                    ruleset.switch_turn()
                continue
            ruleset.apply_action(color, rng.choice(ruleset.get_legal_actions(color)))
            assert ruleset.validate_state()
