"""
Backgammon position evaluation functions.

These heuristics capture important aspects of backgammon positions:
- Pip count (race position)
- Contact between the two armies
- Blot exposure (vulnerability)
- Made points (blocking)
- Prime structures and anchors
- Home board strength while the opponent is on the bar

Higher values are better for the specified player. The weights were
tuned together with ``hit_risk``'s direct-shot approximation; change
them together or not at all.
"""
from typing import Dict, Optional

from apps.game.board import (
    TOTAL_POINTS,
    WHITE,
    Position,
    home_board,
    opponent_of,
)
from apps.game.rulesets.backgammon import blocked_points, pip_count

DEFAULT_WEIGHTS = {
    'borne_off': 30.0,
    'pips_contact': 0.95,
    'pips_race': 1.35,
    'bar': 55.0,
    'made_points_contact': 6.5,
    'made_points_race': 3.0,
    'blots_contact': 10.0,
    'blots_race': 4.0,
    'hit_risk_contact': 8.0,
    'hit_risk_race': 3.0,
    'prime_step': 10.0,      # per prime point beyond the second
    'prime_square': 1.5,     # times prime length squared
    'anchor': 7.5,
    'home_board': 14.0,      # per home point while the opponent is on the bar
}


def has_contact(position: Position) -> bool:
    """
    Determine if the two sides can still hit each other.

    Compares the occupied ranges of both colors along the track; the
    position is a race once the ranges no longer overlap.
    """
    white_points = [point for point, _ in position.points_of('white')]
    black_points = [point for point, _ in position.points_of('black')]
    if not white_points or not black_points:
        return False

    separated = (
        max(white_points) < min(black_points)
        or max(black_points) < min(white_points)
    )
    return not separated


def made_points_count(position: Position, player: str) -> int:
    """Count the number of made points (2+ checkers) for a player."""
    return sum(1 for _, count in position.points_of(player) if count >= 2)


def blot_count(position: Position, player: str) -> int:
    """Count the number of blots (single checkers) for a player."""
    return sum(1 for _, count in position.points_of(player) if count == 1)


def longest_prime(position: Position, player: str) -> int:
    """
    Find the longest prime (consecutive made points) for a player.

    Returns:
        Length of longest consecutive made points.
    """
    max_length = 0
    current_length = 0

    for point in range(TOTAL_POINTS):
        occupant = position.at(point)
        if occupant is not None and occupant.color == player and occupant.count >= 2:
            current_length += 1
            max_length = max(max_length, current_length)
        else:
            current_length = 0

    return max_length


def anchor_count(position: Position, player: str) -> int:
    """Made points held inside the opponent's home board."""
    opponent_home = home_board(opponent_of(player))
    return sum(
        1 for point, count in position.points_of(player)
        if count >= 2 and point in opponent_home
    )


def home_board_points(position: Position, player: str) -> int:
    """Made points in the player's own home board."""
    home = home_board(player)
    return sum(
        1 for point, count in position.points_of(player)
        if count >= 2 and point in home
    )


def hit_risk(position: Position, player: str) -> int:
    """
    Count the player's blots that an opposing checker hits with one die.

    Only direct shots (distance 1-6 in the opponent's direction of travel)
    from checkers on the board are considered; combination shots, bar
    entries and intermediate blocks are ignored.
    """
    opponent = opponent_of(player)
    landing_blocked = blocked_points(position.board, opponent)
    shooters = [point for point, _ in position.points_of(opponent)]

    risk = 0
    for blot, count in position.points_of(player):
        if count != 1 or blot in landing_blocked:
            continue
        for shooter in shooters:
            distance = blot - shooter if opponent == WHITE else shooter - blot
            if 1 <= distance <= 6:
                risk += 1
                break
    return risk


def _weights(weights: Optional[Dict[str, float]]) -> Dict[str, float]:
    if not weights:
        return DEFAULT_WEIGHTS
    return {**DEFAULT_WEIGHTS, **weights}


def evaluate_side(
    position: Position,
    player: str,
    weights: Optional[Dict[str, float]] = None,
) -> float:
    """
    Score a position for one side, ignoring the opponent's own score.

    Contact positions reward structure (points, primes, anchors) and
    punish blots; race positions are dominated by the pip count.
    """
    w = _weights(weights)
    opponent = opponent_of(player)
    contact = has_contact(position)

    score = 0.0

    # Race core
    score += position.borne_off.get(player, 0) * w['borne_off']
    score -= pip_count(position, player) * (w['pips_contact'] if contact else w['pips_race'])
    score -= position.bar.get(player, 0) * w['bar']

    # Structure
    made = made_points_count(position, player)
    score += made * (w['made_points_contact'] if contact else w['made_points_race'])

    score -= blot_count(position, player) * (w['blots_contact'] if contact else w['blots_race'])
    score -= hit_risk(position, player) * (w['hit_risk_contact'] if contact else w['hit_risk_race'])

    if contact:
        prime = longest_prime(position, player)
        score += max(0, prime - 2) * w['prime_step'] + prime * prime * w['prime_square']
        score += anchor_count(position, player) * w['anchor']

    # Home board points keep a hit checker on the bar
    if position.bar.get(opponent, 0) > 0:
        score += home_board_points(position, player) * w['home_board']

    return score


def relative_advantage(
    position: Position,
    player: str,
    weights: Optional[Dict[str, float]] = None,
) -> float:
    """Side score of ``player`` minus side score of the opponent."""
    return (
        evaluate_side(position, player, weights)
        - evaluate_side(position, opponent_of(player), weights)
    )


def evaluate_position(
    position: Position,
    player: str = WHITE,
    weights: Optional[Dict[str, float]] = None,
) -> float:
    """
    Evaluate a backgammon position using weighted heuristics.

    Higher scores are better for the specified player.
    """
    return relative_advantage(position, player, weights)
