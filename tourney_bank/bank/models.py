"""Bank ledger data model."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from tourney_bank.config import config

MAX_PURCHASE_COUNT = config.max_purchase_count


def default_player_name(player_id: int) -> str:
    """Get the default display name for a seat."""
    return f"Player {player_id}"


def clamp_purchase_count(count: int) -> int:
    """Clamp a rebuy/add-on count into [0, MAX_PURCHASE_COUNT]."""
    return max(0, min(count, MAX_PURCHASE_COUNT))


class PlayerActionType(str, Enum):
    """State transitions that go through the confirm dialog."""
    OUT = "out"
    BUY_IN = "buy_in"
    PAID_OUT = "paid_out"
    REBUY = "rebuy"
    ADDON = "addon"


@dataclass(frozen=True)
class Player:
    """A seat in the tournament."""

    id: int
    name: str
    bought_in: bool = False
    eliminated: bool = False
    paid_out: bool = False
    rebuy_count: int = 0
    addon_count: int = 0
    eliminated_by: Optional[int] = None  # id of the player credited with the knockout

    @classmethod
    def default(cls, player_id: int) -> "Player":
        """Create a seat with default values."""
        return cls(id=player_id, name=default_player_name(player_id))

    def with_eliminated(self, value: bool, eliminated_by: Optional[int] = None) -> "Player":
        """Copy with a new elimination state; the eliminator is dropped on re-entry."""
        return replace(self, eliminated=value, eliminated_by=eliminated_by if value else None)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "bought_in": self.bought_in,
            "eliminated": self.eliminated,
            "paid_out": self.paid_out,
            "rebuy_count": self.rebuy_count,
            "addon_count": self.addon_count,
            "eliminated_by": self.eliminated_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create from dictionary."""
        eliminated = data.get("eliminated", False)
        return cls(
            id=data["id"],
            name=data.get("name") or default_player_name(data["id"]),
            bought_in=data.get("bought_in", False),
            eliminated=eliminated,
            paid_out=data.get("paid_out", False),
            rebuy_count=clamp_purchase_count(data.get("rebuy_count", 0)),
            addon_count=clamp_purchase_count(data.get("addon_count", 0)),
            eliminated_by=data.get("eliminated_by") if eliminated else None,
        )


@dataclass(frozen=True)
class TournamentConfig:
    """Monetary settings of the event, read-only to the ledger."""

    buy_in: float = 0.0
    food_per_player: float = 0.0
    bounty_per_player: float = 0.0
    rebuy_per_player: float = 0.0
    addon_per_player: float = 0.0
    payout_weights: tuple[int, ...] = ()  # index 0 is the winner

    @property
    def base_cost(self) -> float:
        """Entry cost every player owes before rebuys and add-ons."""
        return self.buy_in + self.food_per_player + self.bounty_per_player

    @property
    def rebuys_enabled(self) -> bool:
        return self.rebuy_per_player > 0

    @property
    def addons_enabled(self) -> bool:
        return self.addon_per_player > 0


@dataclass(frozen=True)
class PayoutPosition:
    """Payout for a finishing position."""

    position: int
    payout: float
    formatted_payout: str = ""
    formatted_percentage: str = ""
    position_suffix: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position,
            "payout": self.payout,
            "formatted_payout": self.formatted_payout,
            "formatted_percentage": self.formatted_percentage,
            "position_suffix": self.position_suffix,
        }


@dataclass(frozen=True)
class PendingAction:
    """A staged proposal waiting for confirmation, with its preview."""

    player_id: int
    action_type: PlayerActionType
    apply: bool

    # BUY_IN and PAID_OUT previews
    buy_in_cost: float = 0.0
    payout_amount: float = 0.0  # net pay
    leaderboard_payout: float = 0.0
    knockout_bonus: float = 0.0
    kings_bounty: float = 0.0
    knockout_count: int = 0

    # REBUY / ADDON
    base_count: int = 0
    target_count: int = 0

    # OUT
    selectable_player_ids: tuple[int, ...] = ()
    selected_player_id: Optional[int] = None
    allow_unassigned_selection: bool = False

    @property
    def selection_choices(self) -> tuple[Optional[int], ...]:
        """Eliminator choices in display order; ``None`` is the "nobody" choice."""
        if self.allow_unassigned_selection:
            return self.selectable_player_ids + (None,)
        return self.selectable_player_ids

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "player_id": self.player_id,
            "action_type": self.action_type.value,
            "apply": self.apply,
            "buy_in_cost": self.buy_in_cost,
            "payout_amount": self.payout_amount,
            "leaderboard_payout": self.leaderboard_payout,
            "knockout_bonus": self.knockout_bonus,
            "kings_bounty": self.kings_bounty,
            "knockout_count": self.knockout_count,
            "base_count": self.base_count,
            "target_count": self.target_count,
            "selectable_player_ids": list(self.selectable_player_ids),
            "selected_player_id": self.selected_player_id,
            "allow_unassigned_selection": self.allow_unassigned_selection,
        }


@dataclass(frozen=True)
class PlayerDisplayModel:
    """A player paired with its placement, in display order."""
    player: Player
    placement: Optional[int]


@dataclass(frozen=True)
class LedgerTotals:
    """Pool totals derived from the players and the tournament config."""

    buy_in_pool: float = 0.0
    food_pool: float = 0.0
    bounty_pool: float = 0.0
    rebuy_pool: float = 0.0
    addon_pool: float = 0.0
    total_pool: float = 0.0
    prize_pool: float = 0.0
    total_paid_in: float = 0.0
    total_paid_out: float = 0.0
    total_rebuy_count: int = 0
    total_addon_count: int = 0
    active_players: int = 0
    paid_out_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "buy_in_pool": self.buy_in_pool,
            "food_pool": self.food_pool,
            "bounty_pool": self.bounty_pool,
            "rebuy_pool": self.rebuy_pool,
            "addon_pool": self.addon_pool,
            "total_pool": self.total_pool,
            "prize_pool": self.prize_pool,
            "total_paid_in": self.total_paid_in,
            "total_paid_out": self.total_paid_out,
            "total_rebuy_count": self.total_rebuy_count,
            "total_addon_count": self.total_addon_count,
            "active_players": self.active_players,
            "paid_out_count": self.paid_out_count,
        }


@dataclass(frozen=True)
class LedgerSnapshot:
    """Read-only view of the ledger handed to observers."""

    players: tuple[Player, ...] = ()
    elimination_order: tuple[int, ...] = ()
    display: tuple[PlayerDisplayModel, ...] = ()
    config: TournamentConfig = field(default_factory=TournamentConfig)
    totals: LedgerTotals = field(default_factory=LedgerTotals)
    payout_positions: tuple[PayoutPosition, ...] = ()
    leaderboard_payouts: dict[int, float] = field(default_factory=dict)
    knockout_counts: dict[int, int] = field(default_factory=dict)
    payout_eligible_ids: frozenset[int] = frozenset()
    winner_id: Optional[int] = None
    pending_action: Optional[PendingAction] = None
    is_locked: bool = False
    show_reset_dialog: bool = False
    show_weights_dialog: bool = False
    show_pool_summary_dialog: bool = False

    @property
    def player_count(self) -> int:
        return len(self.players)

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get a player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "players": [p.to_dict() for p in self.players],
            "elimination_order": list(self.elimination_order),
            "display_order": [m.player.id for m in self.display],
            "placements": {m.player.id: m.placement for m in self.display},
            "totals": self.totals.to_dict(),
            "payout_positions": [p.to_dict() for p in self.payout_positions],
            "payout_weights": list(self.config.payout_weights),
            "knockout_counts": dict(self.knockout_counts),
            "payout_eligible_ids": sorted(self.payout_eligible_ids),
            "winner_id": self.winner_id,
            "pending_action": self.pending_action.to_dict() if self.pending_action else None,
            "is_locked": self.is_locked,
        }
