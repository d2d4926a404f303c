"""Intent schemas accepted by the bank ledger controller."""
from .intents import (
    BankIntent,
    ConfirmPlayerAction,
    ConfirmPlayerActionWithOverride,
    OutToggled,
    ShowPlayerActionDialog,
    parse_intent,
)

__all__ = [
    "BankIntent",
    "ConfirmPlayerAction",
    "ConfirmPlayerActionWithOverride",
    "OutToggled",
    "ShowPlayerActionDialog",
    "parse_intent",
]
