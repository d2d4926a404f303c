"""Elimination order tracking and placement resolution.

The elimination order is a sequence of distinct player ids, earliest knockout
first. A player appears in it exactly when that player is eliminated.
Placements are read from the back of the order: the most recent knockout
finishes just above everyone eliminated before them.
"""
from typing import Iterable, Optional, Sequence

from tourney_bank.bank.models import Player, PlayerDisplayModel


def record_elimination(order: Sequence[int], player_id: int) -> tuple[int, ...]:
    """Move a player to the most-recently-eliminated slot.

    Args:
        order: Current elimination order.
        player_id: Player being eliminated.

    Returns:
        New order with the player appended last.
    """
    return tuple(pid for pid in order if pid != player_id) + (player_id,)


def record_reentry(order: Sequence[int], player_id: int) -> tuple[int, ...]:
    """Remove a player from the order (the elimination was undone)."""
    return tuple(pid for pid in order if pid != player_id)


def sanitize_order(order: Iterable[int], num_players: int) -> tuple[int, ...]:
    """Drop ids outside 1..num_players and repeated ids, keeping first occurrences."""
    seen: set[int] = set()
    sanitized = []
    for pid in order:
        if 1 <= pid <= num_players and pid not in seen:
            seen.add(pid)
            sanitized.append(pid)
    return tuple(sanitized)


def placement_of(order: Sequence[int], num_players: int, player_id: int) -> Optional[int]:
    """Get a player's finishing place, or None while they are still in.

    Args:
        order: Elimination order.
        num_players: Number of seats.
        player_id: Player to look up.

    Returns:
        Placement (1 is the winner) or None if the player is not in the order.
    """
    if player_id not in order:
        return None
    return max(1, num_players - list(order).index(player_id))


def winner_of(order: Sequence[int], num_players: int) -> Optional[int]:
    """Get the player who maps to first place, if already determined."""
    if len(order) >= num_players:
        return order[-1] if order else None
    if num_players - len(order) == 1:
        eliminated = set(order)
        for pid in range(1, num_players + 1):
            if pid not in eliminated:
                return pid
    return None


def player_at_position(order: Sequence[int], num_players: int, position: int) -> Optional[int]:
    """Resolve which player occupies a finishing position.

    Positions fill in from the back of the order, so a position is only
    known once enough players have been eliminated to fix it.

    Args:
        order: Elimination order (already sanitized to 1..num_players).
        num_players: Number of seats.
        position: 1-based finishing position.

    Returns:
        Player id, or None if the position is not yet determined.
    """
    if position < 1 or position > num_players:
        return None
    if position == 1:
        return winner_of(order, num_players)
    index = num_players - position
    if 0 <= index < len(order):
        return order[index]
    return None


def build_player_display_models(
    players: Sequence[Player],
    order: Sequence[int],
) -> list[PlayerDisplayModel]:
    """Order players for display and pair each with its placement.

    Active players come first in seat order, then eliminated
    players with the most recent knockout first. The same ordering feeds the
    eliminator picker, so both always agree.
    """
    if not players:
        return []

    elimination_index = {pid: idx for idx, pid in enumerate(order)}
    seat_index = {player.id: idx for idx, player in enumerate(players)}
    total_players = len(players)

    def sort_key(player: Player) -> tuple[int, int, int]:
        eliminated_rank = elimination_index.get(player.id)
        return (
            1 if player.eliminated else 0,
            -eliminated_rank if eliminated_rank is not None else 1,
            seat_index[player.id],
        )

    models = []
    for player in sorted(players, key=sort_key):
        placement = placement_of(order, total_players, player.id)
        models.append(PlayerDisplayModel(player=player, placement=placement))
    return models
