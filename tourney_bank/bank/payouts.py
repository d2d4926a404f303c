"""Weighted payout calculation and per-player payout breakdowns."""
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Sequence

from tourney_bank.bank.elimination import player_at_position
from tourney_bank.bank.models import Player, PayoutPosition, TournamentConfig
from tourney_bank.utils.formatting import format_currency, format_percent, ordinal_suffix
from tourney_bank.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PayoutResolution:
    """Payout positions mapped onto the players currently occupying them."""
    positions: tuple[PayoutPosition, ...] = ()
    leaderboard_payouts: dict[int, float] = field(default_factory=dict)  # player_id -> payout
    eligible_ids: frozenset[int] = frozenset()
    winner_id: Optional[int] = None


@dataclass(frozen=True)
class PayoutBreakdown:
    """What a single player collects and what they put in."""
    leaderboard_payout: float = 0.0
    knockout_bonus: float = 0.0
    kings_bounty: float = 0.0
    buy_in_cost: float = 0.0
    knockout_count: int = 0

    @property
    def gross_payout(self) -> float:
        """Cash handed to the player."""
        return self.leaderboard_payout + self.knockout_bonus + self.kings_bounty

    @property
    def net_pay(self) -> float:
        """Winnings minus everything the player paid in."""
        return self.gross_payout - self.buy_in_cost


def calculate_payout_positions(weights: Sequence[int], prize_pool: float) -> list[PayoutPosition]:
    """Split the prize pool across the paid positions by weight.

    Args:
        weights: Relative weight per position, index 0 for first place.
        prize_pool: Amount to distribute.

    Returns:
        One PayoutPosition per weight, or an empty list if the weights sum to zero.
    """
    total_weight = sum(weights)
    if total_weight == 0:
        logger.debug("Payout weights sum to zero, no positions are paid")
        return []

    positions = []
    for index, weight in enumerate(weights):
        payout = (weight / total_weight) * prize_pool
        percentage = (payout / prize_pool) * 100 if prize_pool > 0 else 0.0
        position = index + 1
        positions.append(PayoutPosition(
            position=position,
            payout=payout,
            formatted_payout=format_currency(payout),
            formatted_percentage=format_percent(percentage),
            position_suffix=ordinal_suffix(position),
        ))
    return positions


def count_knockouts(players: Sequence[Player]) -> dict[int, int]:
    """Count knockouts credited to each eliminator."""
    counts = Counter(
        player.eliminated_by for player in players if player.eliminated_by is not None
    )
    return dict(counts)


def resolve_payouts(
    positions: Sequence[PayoutPosition],
    order: Sequence[int],
    num_players: int,
) -> PayoutResolution:
    """Map each paid position to the player who currently holds it.

    Args:
        positions: Payout positions from calculate_payout_positions.
        order: Sanitized elimination order.
        num_players: Number of seats.

    Returns:
        Leaderboard payouts, eligible player ids and the winner, if known.
    """
    leaderboard_payouts: dict[int, float] = {}
    for payout in positions:
        player_id = player_at_position(order, num_players, payout.position)
        if player_id is not None:
            leaderboard_payouts[player_id] = payout.payout

    winner_id = None
    if positions:
        winner_id = player_at_position(order, num_players, positions[0].position)

    return PayoutResolution(
        positions=tuple(positions),
        leaderboard_payouts=leaderboard_payouts,
        eligible_ids=frozenset(leaderboard_payouts),
        winner_id=winner_id,
    )


def buy_in_cost(player: Player, config: TournamentConfig) -> float:
    """Everything a player owes: entry, food, bounty and their purchases."""
    return (
        config.buy_in
        + config.food_per_player
        + config.bounty_per_player
        + player.addon_count * config.addon_per_player
        + player.rebuy_count * config.rebuy_per_player
    )


def payout_breakdown(
    player: Player,
    config: TournamentConfig,
    resolution: PayoutResolution,
    knockout_counts: dict[int, int],
) -> PayoutBreakdown:
    """Compute a player's leaderboard payout, bonuses, cost and net pay.

    The winner collects their own bounty back as the king's bounty; every
    knockout credited to a player earns one bounty.
    """
    knockouts = knockout_counts.get(player.id, 0)
    return PayoutBreakdown(
        leaderboard_payout=resolution.leaderboard_payouts.get(player.id, 0.0),
        knockout_bonus=knockouts * config.bounty_per_player,
        kings_bounty=config.bounty_per_player if player.id == resolution.winner_id else 0.0,
        buy_in_cost=buy_in_cost(player, config),
        knockout_count=knockouts,
    )
