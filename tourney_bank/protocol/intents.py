"""Pydantic schemas for bank ledger intents."""
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from tourney_bank.bank.models import PlayerActionType


# ============= Direct player edits =============

class PlayerNameChanged(BaseModel):
    """Rename a player."""
    type: Literal["player_name_changed"] = "player_name_changed"
    player_id: int
    name: str


class BuyInToggled(BaseModel):
    """Flip the bought-in flag without confirmation."""
    type: Literal["buy_in_toggled"] = "buy_in_toggled"
    player_id: int


class OutToggled(BaseModel):
    """Flip the eliminated flag without confirmation."""
    type: Literal["out_toggled"] = "out_toggled"
    player_id: int


class PaidOutToggled(BaseModel):
    """Flip the paid-out flag without confirmation."""
    type: Literal["paid_out_toggled"] = "paid_out_toggled"
    player_id: int


class PlayerCountChanged(BaseModel):
    """Change the number of seats."""
    type: Literal["player_count_changed"] = "player_count_changed"
    count: int = Field(ge=0)


class PlayerRebuyChanged(BaseModel):
    """Set a player's rebuy count."""
    type: Literal["player_rebuy_changed"] = "player_rebuy_changed"
    player_id: int
    count: int


class PlayerAddonChanged(BaseModel):
    """Set a player's add-on count."""
    type: Literal["player_addon_changed"] = "player_addon_changed"
    player_id: int
    count: int


# ============= Staged actions =============

class ShowPlayerActionDialog(BaseModel):
    """Stage an action for confirmation."""
    type: Literal["show_player_action_dialog"] = "show_player_action_dialog"
    player_id: int
    action: PlayerActionType


class ConfirmPlayerAction(BaseModel):
    type: Literal["confirm_player_action"] = "confirm_player_action"


class ConfirmPlayerActionWithOverride(BaseModel):
    """Confirm with an explicit count or eliminator."""
    type: Literal["confirm_player_action_with_override"] = "confirm_player_action_with_override"
    count: Optional[int] = None
    selected_player_id: Optional[int] = None


class CancelPlayerAction(BaseModel):
    type: Literal["cancel_player_action"] = "cancel_player_action"


class SelectEliminator(BaseModel):
    """Pick who gets the knockout credit; None means nobody."""
    type: Literal["select_eliminator"] = "select_eliminator"
    player_id: Optional[int] = None


# ============= Dialogs and settings =============

class ShowResetDialog(BaseModel):
    type: Literal["show_reset_dialog"] = "show_reset_dialog"


class HideResetDialog(BaseModel):
    type: Literal["hide_reset_dialog"] = "hide_reset_dialog"


class ConfirmReset(BaseModel):
    """Wipe all player data."""
    type: Literal["confirm_reset"] = "confirm_reset"


class UpdateWeights(BaseModel):
    """Replace the payout weights."""
    type: Literal["update_weights"] = "update_weights"
    weights: list[int]


class ShowWeightsDialog(BaseModel):
    type: Literal["show_weights_dialog"] = "show_weights_dialog"


class HideWeightsDialog(BaseModel):
    type: Literal["hide_weights_dialog"] = "hide_weights_dialog"


class ShowPoolSummaryDialog(BaseModel):
    type: Literal["show_pool_summary_dialog"] = "show_pool_summary_dialog"


class HidePoolSummaryDialog(BaseModel):
    type: Literal["hide_pool_summary_dialog"] = "hide_pool_summary_dialog"


BankIntent = Union[
    PlayerNameChanged,
    BuyInToggled,
    OutToggled,
    PaidOutToggled,
    PlayerCountChanged,
    PlayerRebuyChanged,
    PlayerAddonChanged,
    ShowPlayerActionDialog,
    ConfirmPlayerAction,
    ConfirmPlayerActionWithOverride,
    CancelPlayerAction,
    SelectEliminator,
    ShowResetDialog,
    HideResetDialog,
    ConfirmReset,
    UpdateWeights,
    ShowWeightsDialog,
    HideWeightsDialog,
    ShowPoolSummaryDialog,
    HidePoolSummaryDialog,
]


def parse_intent(data: dict) -> BankIntent:
    """Parse an intent from a JSON dict.

    Args:
        data: Intent data dictionary.

    Returns:
        Parsed intent.

    Raises:
        ValueError: If the intent type is unknown or its fields are invalid.
    """
    intent_type = data.get("type")

    type_map = {
        "player_name_changed": PlayerNameChanged,
        "buy_in_toggled": BuyInToggled,
        "out_toggled": OutToggled,
        "paid_out_toggled": PaidOutToggled,
        "player_count_changed": PlayerCountChanged,
        "player_rebuy_changed": PlayerRebuyChanged,
        "player_addon_changed": PlayerAddonChanged,
        "show_player_action_dialog": ShowPlayerActionDialog,
        "confirm_player_action": ConfirmPlayerAction,
        "confirm_player_action_with_override": ConfirmPlayerActionWithOverride,
        "cancel_player_action": CancelPlayerAction,
        "select_eliminator": SelectEliminator,
        "show_reset_dialog": ShowResetDialog,
        "hide_reset_dialog": HideResetDialog,
        "confirm_reset": ConfirmReset,
        "update_weights": UpdateWeights,
        "show_weights_dialog": ShowWeightsDialog,
        "hide_weights_dialog": HideWeightsDialog,
        "show_pool_summary_dialog": ShowPoolSummaryDialog,
        "hide_pool_summary_dialog": HidePoolSummaryDialog,
    }

    if intent_type not in type_map:
        raise ValueError(f"Unknown intent type: {intent_type}")

    return type_map[intent_type](**data)
