"""Ledger core: players, elimination order, payouts and pool totals.

The controller lives in ``tourney_bank.bank.controller`` and is imported from
there directly.
"""
from .models import (
    LedgerSnapshot,
    LedgerTotals,
    PayoutPosition,
    PendingAction,
    Player,
    PlayerActionType,
    TournamentConfig,
)
from .payouts import calculate_payout_positions, payout_breakdown, resolve_payouts

__all__ = [
    "LedgerSnapshot",
    "LedgerTotals",
    "PayoutPosition",
    "PendingAction",
    "Player",
    "PlayerActionType",
    "TournamentConfig",
    "calculate_payout_positions",
    "payout_breakdown",
    "resolve_payouts",
]
