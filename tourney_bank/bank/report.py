"""Text reports over a ledger snapshot."""
from tourney_bank.bank.elimination import player_at_position
from tourney_bank.bank.models import LedgerSnapshot
from tourney_bank.bank.payouts import PayoutBreakdown, PayoutResolution, payout_breakdown
from tourney_bank.utils.formatting import format_currency, format_signed_currency


def player_breakdowns(snapshot: LedgerSnapshot) -> dict[int, PayoutBreakdown]:
    """Compute every player's payout breakdown from a snapshot.

    Args:
        snapshot: Ledger snapshot.

    Returns:
        Breakdown per player id.
    """
    resolution = PayoutResolution(
        positions=snapshot.payout_positions,
        leaderboard_payouts=snapshot.leaderboard_payouts,
        eligible_ids=snapshot.payout_eligible_ids,
        winner_id=snapshot.winner_id,
    )
    return {
        player.id: payout_breakdown(player, snapshot.config, resolution, snapshot.knockout_counts)
        for player in snapshot.players
    }


def format_players_table(snapshot: LedgerSnapshot) -> str:
    """Format players in display order as a text table."""
    if not snapshot.players:
        return "No players."

    breakdowns = player_breakdowns(snapshot)
    lines = [
        "| Place | Player       | In  | Out | Paid | Rebuys | Add-ons | KOs | Net (+/-)   |",
        "|-------|--------------|-----|-----|------|--------|---------|-----|-------------|",
    ]

    def flag(value: bool) -> str:
        return "x" if value else ""

    for model in snapshot.display:
        p = model.player
        b = breakdowns[p.id]
        place = str(model.placement) if model.placement is not None else "-"
        lines.append(
            f"| {place:>5} | {p.name[:12]:<12} | {flag(p.bought_in):^3} | {flag(p.eliminated):^3} "
            f"| {flag(p.paid_out):^4} | {p.rebuy_count:>6} | {p.addon_count:>7} | {b.knockout_count:>3} "
            f"| {format_signed_currency(b.net_pay):>11} |"
        )

    return "\n".join(lines)


def format_payouts_table(snapshot: LedgerSnapshot) -> str:
    """Format the payout positions and who currently holds them."""
    if not snapshot.payout_positions:
        return "No payout positions."

    lines = [
        "| Place | Payout      | Share   | Player       |",
        "|-------|-------------|---------|--------------|",
    ]
    for position in snapshot.payout_positions:
        holder_id = player_at_position(snapshot.elimination_order, snapshot.player_count, position.position)
        holder = snapshot.get_player(holder_id).name if holder_id is not None else "-"
        place = f"{position.position}{position.position_suffix}"
        lines.append(
            f"| {place:>5} | {position.formatted_payout:>11} | {position.formatted_percentage:>7} | {holder[:12]:<12} |"
        )
    return "\n".join(lines)


def format_summary(snapshot: LedgerSnapshot) -> str:
    """Format the pool totals."""
    totals = snapshot.totals
    rows = [
        ("Players", f"{snapshot.player_count} ({totals.active_players} active)"),
        ("Buy-in pool", format_currency(totals.buy_in_pool)),
        ("Food pool", format_currency(totals.food_pool)),
        ("Bounty pool", format_currency(totals.bounty_pool)),
        ("Rebuy pool", f"{format_currency(totals.rebuy_pool)} ({totals.total_rebuy_count} rebuys)"),
        ("Add-on pool", f"{format_currency(totals.addon_pool)} ({totals.total_addon_count} add-ons)"),
        ("Total pool", format_currency(totals.total_pool)),
        ("Prize pool", format_currency(totals.prize_pool)),
        ("Paid in", format_currency(totals.total_paid_in)),
        ("Paid out", f"{format_currency(totals.total_paid_out)} ({totals.paid_out_count} players)"),
    ]
    if snapshot.is_locked:
        rows.append(("Locked", "yes"))
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{width}}  {value}" for label, value in rows)
