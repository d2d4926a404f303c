"""Bank ledger controller: the single writer of ledger state."""
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Optional

from tourney_bank.bank.aggregator import aggregate, prize_pool_for
from tourney_bank.bank.elimination import (
    build_player_display_models,
    record_elimination,
    record_reentry,
    sanitize_order,
)
from tourney_bank.bank.models import (
    LedgerSnapshot,
    Player,
    PlayerActionType,
    clamp_purchase_count,
)
from tourney_bank.bank.payouts import calculate_payout_positions, count_knockouts, resolve_payouts
from tourney_bank.bank.staging import ActionStagingMachine, Resolution
from tourney_bank.protocol.intents import (
    BankIntent,
    BuyInToggled,
    CancelPlayerAction,
    ConfirmPlayerAction,
    ConfirmPlayerActionWithOverride,
    ConfirmReset,
    HidePoolSummaryDialog,
    HideResetDialog,
    HideWeightsDialog,
    OutToggled,
    PaidOutToggled,
    PlayerAddonChanged,
    PlayerCountChanged,
    PlayerNameChanged,
    PlayerRebuyChanged,
    SelectEliminator,
    ShowPlayerActionDialog,
    ShowPoolSummaryDialog,
    ShowResetDialog,
    ShowWeightsDialog,
    UpdateWeights,
)
from tourney_bank.utils.logger import get_logger

if TYPE_CHECKING:
    from tourney_bank.state.player_store import PlayerStore
    from tourney_bank.state.tournament_settings import TournamentSettings

logger = get_logger(__name__)

SnapshotListener = Callable[[LedgerSnapshot], None]


class BankLedgerController:
    """Owns the ledger snapshot and applies intents to it.

    Every mutation is persisted through the player store, after which the
    snapshot is recomputed and handed to subscribers.
    """

    def __init__(self, store: "PlayerStore", settings: "TournamentSettings"):
        """Initialize the controller.

        Args:
            store: Player persistence.
            settings: Tournament settings provider.
        """
        self.store = store
        self.settings = settings
        self.staging = ActionStagingMachine()
        self._listeners: list[SnapshotListener] = []

        self._players: tuple[Player, ...] = ()
        self._order: tuple[int, ...] = ()
        self._show_reset_dialog = False
        self._show_weights_dialog = False
        self._show_pool_summary_dialog = False
        self._snapshot = LedgerSnapshot()

        self._load_players(settings.get_player_count())
        self._unsubscribe_settings = settings.subscribe(self._on_settings_changed)

    @property
    def state(self) -> LedgerSnapshot:
        """Current immutable snapshot."""
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Stop listening to settings changes."""
        self._unsubscribe_settings()

    # ============= Dispatch =============

    def dispatch(self, intent: BankIntent) -> None:
        """Apply an intent to the ledger.

        Args:
            intent: Parsed intent.
        """
        if isinstance(intent, PlayerNameChanged):
            self._update_player_name(intent.player_id, intent.name)

        elif isinstance(intent, BuyInToggled):
            player = self._find(intent.player_id)
            if player is not None:
                self._set_bought_in(player.id, not player.bought_in)

        elif isinstance(intent, OutToggled):
            player = self._find(intent.player_id)
            if player is not None:
                apply = not player.eliminated
                self._set_out(player.id, apply, player.eliminated_by if apply else None)

        elif isinstance(intent, PaidOutToggled):
            player = self._find(intent.player_id)
            if player is not None:
                self._set_paid_out(player.id, not player.paid_out)

        elif isinstance(intent, PlayerCountChanged):
            self.settings.set_player_count(intent.count)
            if len(self._players) != intent.count:
                self._resize(intent.count)

        elif isinstance(intent, PlayerRebuyChanged):
            self._set_purchase_count(intent.player_id, PlayerActionType.REBUY, intent.count)

        elif isinstance(intent, PlayerAddonChanged):
            self._set_purchase_count(intent.player_id, PlayerActionType.ADDON, intent.count)

        elif isinstance(intent, ShowPlayerActionDialog):
            staged = self.staging.request(
                intent.player_id,
                intent.action,
                self._players,
                self._order,
                self.settings.current_config(),
            )
            if not staged:
                return

        elif isinstance(intent, ConfirmPlayerAction):
            self._confirm()

        elif isinstance(intent, ConfirmPlayerActionWithOverride):
            self._confirm(intent.count, intent.selected_player_id)

        elif isinstance(intent, CancelPlayerAction):
            if not self.staging.cancel():
                return

        elif isinstance(intent, SelectEliminator):
            if not self.staging.select(intent.player_id):
                return

        elif isinstance(intent, ShowResetDialog):
            if self.store.is_in_default_state(len(self._players)):
                return
            self._show_reset_dialog = True

        elif isinstance(intent, HideResetDialog):
            self._show_reset_dialog = False

        elif isinstance(intent, ConfirmReset):
            self._reset()

        elif isinstance(intent, UpdateWeights):
            self.settings.set_payout_weights(intent.weights)
            self._show_weights_dialog = False

        elif isinstance(intent, ShowWeightsDialog):
            self._show_weights_dialog = True

        elif isinstance(intent, HideWeightsDialog):
            self._show_weights_dialog = False

        elif isinstance(intent, ShowPoolSummaryDialog):
            self._show_pool_summary_dialog = True

        elif isinstance(intent, HidePoolSummaryDialog):
            self._show_pool_summary_dialog = False

        else:
            logger.warning(f"Unhandled intent: {intent!r}")
            return

        self._recompute()

    # ============= Loading and settings =============

    def _load_players(self, count: int) -> None:
        """Load players from the store and normalize the elimination order."""
        players = tuple(self.store.load_player(pid) for pid in range(1, count + 1))
        stored_order = self.store.get_elimination_order()
        order = list(sanitize_order(stored_order, count))
        for player in players:
            if player.eliminated and player.id not in order:
                order.append(player.id)
        if order != stored_order:
            logger.info(f"Normalized elimination order {stored_order} -> {order}")
            order = self.store.save_elimination_order(order)

        self._players = self._drop_stale_eliminators(players, count)
        self._order = tuple(order)

        config = self.settings.current_config()
        if not config.rebuys_enabled and any(p.rebuy_count for p in self._players):
            self._clear_purchases(PlayerActionType.REBUY)
        if not config.addons_enabled and any(p.addon_count for p in self._players):
            self._clear_purchases(PlayerActionType.ADDON)
        self._recompute()

    def _resize(self, count: int) -> None:
        """Truncate or extend the seats, keeping existing players."""
        players = list(self._drop_stale_eliminators(self._players[:count], count))
        for pid in range(len(players) + 1, count + 1):
            player = Player.default(pid)
            self.store.save_player(player)
            players.append(player)

        order = sanitize_order(self.store.get_elimination_order(), count)
        if order != self._order:
            order = tuple(self.store.save_elimination_order(order))

        logger.info(f"Player count changed {len(self._players)} -> {count}")
        self._players = tuple(players)
        self._order = order
        self._recompute()

    def _drop_stale_eliminators(self, players, count: int) -> tuple[Player, ...]:
        """Unset knockout credit pointing at seats above count."""
        kept = []
        for player in players:
            if player.eliminated_by is not None and player.eliminated_by > count:
                logger.info(f"Dropping knockout credit for player {player.id}: seat {player.eliminated_by} removed")
                player = replace(player, eliminated_by=None)
                self.store.save_player_status(player)
            kept.append(player)
        return tuple(kept)

    def _on_settings_changed(self, name: str, value: Any) -> None:
        if name == self.settings.PLAYER_COUNT:
            if value != len(self._players):
                self._resize(value)
            return
        if name == self.settings.REBUY_PER_PLAYER and value <= 0:
            self._clear_purchases(PlayerActionType.REBUY)
        elif name == self.settings.ADDON_PER_PLAYER and value <= 0:
            self._clear_purchases(PlayerActionType.ADDON)
        self._recompute()

    def _clear_purchases(self, action_type: PlayerActionType) -> None:
        """Zero one kind of purchase for every player."""
        if action_type == PlayerActionType.REBUY:
            self.store.clear_all_rebuys()
            self._players = tuple(replace(p, rebuy_count=0) for p in self._players)
        else:
            self.store.clear_all_addons()
            self._players = tuple(replace(p, addon_count=0) for p in self._players)
        logger.info(f"Cleared all {action_type.value} counts")

    # ============= Player mutations =============

    def _find(self, player_id: int) -> Optional[Player]:
        for player in self._players:
            if player.id == player_id:
                return player
        logger.debug(f"Ignoring unknown player {player_id}")
        return None

    def _replace_player(self, updated: Player) -> None:
        self._players = tuple(updated if p.id == updated.id else p for p in self._players)

    def _update_player_name(self, player_id: int, name: str) -> None:
        player = self._find(player_id)
        if player is None:
            return
        self.store.save_player_name(player_id, name)
        self._replace_player(replace(player, name=name))

    def _set_bought_in(self, player_id: int, value: bool) -> None:
        player = self._find(player_id)
        if player is None:
            return
        updated = replace(player, bought_in=value)
        self.store.save_player_status(updated)
        self._replace_player(updated)
        logger.info(f"Player {player_id} bought_in={value}")

    def _set_paid_out(self, player_id: int, value: bool) -> None:
        player = self._find(player_id)
        if player is None:
            return
        updated = replace(player, paid_out=value)
        self.store.save_player_status(updated)
        self._replace_player(updated)
        logger.info(f"Player {player_id} paid_out={value}")

    def _set_out(self, player_id: int, value: bool, eliminated_by: Optional[int]) -> None:
        player = self._find(player_id)
        if player is None:
            return
        updated = player.with_eliminated(value, eliminated_by)
        self.store.save_player_status(updated)
        self._replace_player(updated)

        order = sanitize_order(self._order, len(self._players))
        if value:
            order = record_elimination(order, player_id)
        else:
            order = record_reentry(order, player_id)
        self._order = tuple(self.store.save_elimination_order(order))

        if value:
            logger.info(f"Player {player_id} eliminated (credited to {updated.eliminated_by})")
        else:
            logger.info(f"Player {player_id} back in")

    def _set_purchase_count(self, player_id: int, action_type: PlayerActionType, count: int) -> None:
        player = self._find(player_id)
        if player is None:
            return
        count = clamp_purchase_count(count)
        if action_type == PlayerActionType.REBUY:
            self.store.save_player_rebuys(player_id, count)
            self._replace_player(replace(player, rebuy_count=count))
        else:
            self.store.save_player_addons(player_id, count)
            self._replace_player(replace(player, addon_count=count))
        logger.info(f"Player {player_id} {action_type.value} count={count}")

    def _confirm(self, override_count: Optional[int] = None, override_player_id: Optional[int] = None) -> None:
        resolution = self.staging.confirm(override_count, override_player_id)
        if resolution is None:
            logger.debug("Confirm ignored: nothing staged")
            return
        self._apply(resolution)

    def _apply(self, resolution: Resolution) -> None:
        action_type = resolution.action_type
        if action_type == PlayerActionType.OUT:
            self._set_out(resolution.player_id, resolution.apply, resolution.eliminated_by)
        elif action_type == PlayerActionType.BUY_IN:
            self._set_bought_in(resolution.player_id, resolution.apply)
        elif action_type == PlayerActionType.PAID_OUT:
            self._set_paid_out(resolution.player_id, resolution.apply)
        elif action_type in (PlayerActionType.REBUY, PlayerActionType.ADDON):
            self._set_purchase_count(resolution.player_id, action_type, resolution.count or 0)

    def _reset(self) -> None:
        self.store.reset_all()
        self.staging.cancel()
        self._show_reset_dialog = False
        logger.info("Bank data reset")
        self._load_players(self.settings.get_player_count())

    # ============= Snapshot =============

    def _recompute(self) -> None:
        """Rebuild the snapshot from players, order and settings, then notify."""
        config = self.settings.current_config()
        players = self._players
        num_players = len(players)
        order = sanitize_order(self._order, num_players)

        positions = calculate_payout_positions(config.payout_weights, prize_pool_for(players, config))
        resolution = resolve_payouts(positions, order, num_players)
        knockout_counts = count_knockouts(players)

        self._snapshot = LedgerSnapshot(
            players=players,
            elimination_order=order,
            display=tuple(build_player_display_models(players, order)),
            config=config,
            totals=aggregate(players, config, resolution, knockout_counts),
            payout_positions=resolution.positions,
            leaderboard_payouts=resolution.leaderboard_payouts,
            knockout_counts=knockout_counts,
            payout_eligible_ids=resolution.eligible_ids,
            winner_id=resolution.winner_id,
            pending_action=self.staging.pending,
            is_locked=self.settings.is_locked(),
            show_reset_dialog=self._show_reset_dialog,
            show_weights_dialog=self._show_weights_dialog,
            show_pool_summary_dialog=self._show_pool_summary_dialog,
        )
        for listener in list(self._listeners):
            listener(self._snapshot)
