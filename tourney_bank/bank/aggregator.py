"""Pool totals over the player list."""
from typing import Sequence

from tourney_bank.bank.models import LedgerTotals, Player, TournamentConfig
from tourney_bank.bank.payouts import PayoutResolution, payout_breakdown


def prize_pool_for(players: Sequence[Player], config: TournamentConfig) -> float:
    """Pool split by the payout weights: buy-ins, rebuys and add-ons.

    Food and bounty money never enter the prize pool.
    """
    num_players = len(players)
    rebuy_pool = sum(p.rebuy_count for p in players) * config.rebuy_per_player
    addon_pool = sum(p.addon_count for p in players) * config.addon_per_player
    return num_players * config.buy_in + rebuy_pool + addon_pool


def aggregate(
    players: Sequence[Player],
    config: TournamentConfig,
    resolution: PayoutResolution,
    knockout_counts: dict[int, int],
) -> LedgerTotals:
    """Compute every pool and running total for the current players.

    Args:
        players: All seats.
        config: Tournament amounts.
        resolution: Payout positions resolved against the elimination order.
        knockout_counts: Knockouts credited per player.

    Returns:
        The ledger totals.
    """
    num_players = len(players)
    total_rebuy_count = sum(p.rebuy_count for p in players)
    total_addon_count = sum(p.addon_count for p in players)

    buy_in_pool = num_players * config.buy_in
    food_pool = num_players * config.food_per_player
    bounty_pool = num_players * config.bounty_per_player
    rebuy_pool = total_rebuy_count * config.rebuy_per_player
    addon_pool = total_addon_count * config.addon_per_player

    # Rebuys and add-ons count as paid in whether or not the buyer checked in
    total_paid_in = sum(config.base_cost for p in players if p.bought_in) + rebuy_pool + addon_pool

    # Gross cash handed out; buy-in costs are not netted here
    total_paid_out = sum(
        payout_breakdown(p, config, resolution, knockout_counts).gross_payout
        for p in players
        if p.paid_out
    )

    return LedgerTotals(
        buy_in_pool=buy_in_pool,
        food_pool=food_pool,
        bounty_pool=bounty_pool,
        rebuy_pool=rebuy_pool,
        addon_pool=addon_pool,
        total_pool=buy_in_pool + food_pool + bounty_pool + rebuy_pool + addon_pool,
        prize_pool=buy_in_pool + rebuy_pool + addon_pool,
        total_paid_in=total_paid_in,
        total_paid_out=total_paid_out,
        total_rebuy_count=total_rebuy_count,
        total_addon_count=total_addon_count,
        active_players=num_players - sum(1 for p in players if p.eliminated),
        paid_out_count=sum(1 for p in players if p.paid_out),
    )
