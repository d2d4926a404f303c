"""Two-phase propose/confirm machine for player actions.

A request builds a PendingAction with a preview of its effect. Nothing
changes until the proposal is confirmed, at which point the machine hands
back a Resolution describing the mutation and returns to Idle.
"""
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from tourney_bank.bank.aggregator import prize_pool_for
from tourney_bank.bank.elimination import build_player_display_models, sanitize_order
from tourney_bank.bank.models import (
    MAX_PURCHASE_COUNT,
    PendingAction,
    Player,
    PlayerActionType,
    TournamentConfig,
    clamp_purchase_count,
)
from tourney_bank.bank.payouts import (
    buy_in_cost,
    calculate_payout_positions,
    count_knockouts,
    payout_breakdown,
    resolve_payouts,
)
from tourney_bank.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    """No proposal is staged."""


@dataclass(frozen=True)
class Staged:
    """A proposal is waiting for confirm or cancel."""
    proposal: PendingAction


StagingState = Union[Idle, Staged]


@dataclass(frozen=True)
class Resolution:
    """The mutation a confirmed proposal asks for."""
    player_id: int
    action_type: PlayerActionType
    apply: bool
    count: Optional[int] = None  # absolute rebuy/add-on count
    eliminated_by: Optional[int] = None


def _find_player(players: Sequence[Player], player_id: int) -> Optional[Player]:
    for player in players:
        if player.id == player_id:
            return player
    return None


def _stage_out(
    player: Player,
    players: Sequence[Player],
    order: Sequence[int],
) -> Optional[PendingAction]:
    apply = not player.eliminated
    active_count = sum(1 for p in players if not p.eliminated)
    if apply and active_count <= 1:
        logger.debug(f"Rejected OUT for player {player.id}: last player standing")
        return None

    if not apply:
        return PendingAction(player_id=player.id, action_type=PlayerActionType.OUT, apply=False)

    selectable = tuple(
        model.player.id
        for model in build_player_display_models(players, order)
        if model.player.id != player.id
    )
    if player.eliminated_by is not None and player.eliminated_by in selectable:
        initial = player.eliminated_by
    else:
        initial = selectable[0] if selectable else None

    return PendingAction(
        player_id=player.id,
        action_type=PlayerActionType.OUT,
        apply=True,
        selectable_player_ids=selectable,
        selected_player_id=initial,
        allow_unassigned_selection=True,
    )


def _stage_paid_out(
    player: Player,
    players: Sequence[Player],
    order: Sequence[int],
    config: TournamentConfig,
) -> PendingAction:
    apply = not player.paid_out
    if not apply:
        return PendingAction(player_id=player.id, action_type=PlayerActionType.PAID_OUT, apply=False)

    num_players = len(players)
    positions = calculate_payout_positions(config.payout_weights, prize_pool_for(players, config))
    resolution = resolve_payouts(positions, sanitize_order(order, num_players), num_players)
    breakdown = payout_breakdown(player, config, resolution, count_knockouts(players))

    return PendingAction(
        player_id=player.id,
        action_type=PlayerActionType.PAID_OUT,
        apply=True,
        payout_amount=breakdown.net_pay,
        leaderboard_payout=breakdown.leaderboard_payout,
        knockout_bonus=breakdown.knockout_bonus,
        kings_bounty=breakdown.kings_bounty,
        buy_in_cost=breakdown.buy_in_cost,
        knockout_count=breakdown.knockout_count,
    )


def _stage_purchase(player: Player, action_type: PlayerActionType, enabled: bool) -> Optional[PendingAction]:
    if not enabled:
        logger.debug(f"Rejected {action_type.value} for player {player.id}: feature disabled")
        return None
    current = player.rebuy_count if action_type == PlayerActionType.REBUY else player.addon_count
    base_count = max(0, current)
    return PendingAction(
        player_id=player.id,
        action_type=action_type,
        apply=True,
        base_count=base_count,
        target_count=min(base_count + 1, MAX_PURCHASE_COUNT),
    )


def build_proposal(
    player_id: int,
    action_type: PlayerActionType,
    players: Sequence[Player],
    order: Sequence[int],
    config: TournamentConfig,
) -> Optional[PendingAction]:
    """Build the proposal for an action, or None when it would be a no-op.

    Args:
        player_id: Target player.
        action_type: Requested action.
        players: Current players.
        order: Current elimination order.
        config: Tournament amounts.

    Returns:
        The staged proposal with its preview, or None.
    """
    player = _find_player(players, player_id)
    if player is None:
        return None

    if action_type == PlayerActionType.OUT:
        return _stage_out(player, players, order)
    if action_type == PlayerActionType.BUY_IN:
        apply = not player.bought_in
        return PendingAction(
            player_id=player.id,
            action_type=action_type,
            apply=apply,
            buy_in_cost=buy_in_cost(player, config) if apply else 0.0,
        )
    if action_type == PlayerActionType.PAID_OUT:
        return _stage_paid_out(player, players, order, config)
    if action_type == PlayerActionType.REBUY:
        return _stage_purchase(player, action_type, config.rebuys_enabled)
    if action_type == PlayerActionType.ADDON:
        return _stage_purchase(player, action_type, config.addons_enabled)
    return None


class ActionStagingMachine:
    """Holds at most one staged proposal: Idle or Staged."""

    def __init__(self):
        self._state: StagingState = Idle()

    @property
    def state(self) -> StagingState:
        return self._state

    @property
    def pending(self) -> Optional[PendingAction]:
        """The staged proposal, if any."""
        if isinstance(self._state, Staged):
            return self._state.proposal
        return None

    def request(
        self,
        player_id: int,
        action_type: PlayerActionType,
        players: Sequence[Player],
        order: Sequence[int],
        config: TournamentConfig,
    ) -> bool:
        """Stage a proposal, replacing any staged one.

        A no-op request leaves the machine untouched.

        Returns:
            True if a proposal was staged.
        """
        proposal = build_proposal(player_id, action_type, players, order, config)
        if proposal is None:
            return False
        if isinstance(self._state, Staged):
            logger.debug(
                f"Replacing staged {self._state.proposal.action_type.value} "
                f"for player {self._state.proposal.player_id}"
            )
        self._state = Staged(proposal)
        logger.debug(f"Staged {action_type.value} for player {player_id} (apply={proposal.apply})")
        return True

    def select(self, player_id: Optional[int]) -> bool:
        """Change the eliminator picked for a staged knockout.

        Args:
            player_id: Eliminator id, or None for "nobody".

        Returns:
            True if the selection was accepted.
        """
        proposal = self.pending
        if proposal is None or proposal.action_type != PlayerActionType.OUT or not proposal.apply:
            return False
        if player_id not in proposal.selection_choices:
            return False
        self._state = Staged(replace(proposal, selected_player_id=player_id))
        return True

    def cancel(self) -> bool:
        """Discard the staged proposal.

        Returns:
            True if something was discarded.
        """
        was_staged = isinstance(self._state, Staged)
        self._state = Idle()
        return was_staged

    def confirm(
        self,
        override_count: Optional[int] = None,
        override_player_id: Optional[int] = None,
    ) -> Optional[Resolution]:
        """Confirm the staged proposal and return to Idle.

        Args:
            override_count: Absolute rebuy/add-on count to apply instead of the target.
            override_player_id: Eliminator to credit instead of the staged selection.

        Returns:
            The mutation to apply, or None when nothing was staged.
        """
        state = self._state
        if not isinstance(state, Staged):
            return None
        proposal = state.proposal
        self._state = Idle()

        if proposal.action_type == PlayerActionType.OUT:
            eliminated_by = None
            if proposal.apply:
                override = (
                    override_player_id
                    if override_player_id in proposal.selectable_player_ids
                    else None
                )
                eliminated_by = override if override is not None else proposal.selected_player_id
            return Resolution(proposal.player_id, proposal.action_type, proposal.apply, eliminated_by=eliminated_by)

        if proposal.action_type in (PlayerActionType.REBUY, PlayerActionType.ADDON):
            count = override_count if override_count is not None else proposal.target_count
            return Resolution(
                proposal.player_id,
                proposal.action_type,
                proposal.apply,
                count=clamp_purchase_count(count),
            )

        return Resolution(proposal.player_id, proposal.action_type, proposal.apply)
