"""Tournament settings: player count, amounts, payout weights and the lock flag."""
from typing import Any, Callable, Optional

from tourney_bank.bank.models import TournamentConfig
from tourney_bank.config import config
from tourney_bank.state.backends import KeyValueBackend
from tourney_bank.utils.logger import get_logger

logger = get_logger(__name__)

# Relative payout per place, 1st first
DEFAULT_PAYOUT_WEIGHTS = (35, 20, 15, 10, 8, 6, 3, 2, 1)

SettingsListener = Callable[[str, Any], None]


def default_payout_weights_for(player_count: int) -> list[int]:
    """Default weights: pay roughly a third of the field, at least one place."""
    return list(DEFAULT_PAYOUT_WEIGHTS[:max(1, player_count // 3)])


class TournamentSettings:
    """Reads and writes tournament settings and notifies listeners on change.

    Listeners are called with the setting name and its new value, only when
    the value actually changed.
    """

    PLAYER_COUNT = "player_count"
    BUY_IN = "buy_in"
    FOOD_PER_PLAYER = "food_per_player"
    BOUNTY_PER_PLAYER = "bounty_per_player"
    REBUY_PER_PLAYER = "rebuy_per_player"
    ADDON_PER_PLAYER = "addon_per_player"
    PAYOUT_WEIGHTS = "payout_weights"
    LOCKED = "locked"

    def __init__(self, backend: KeyValueBackend, prefix: Optional[str] = None):
        self.backend = backend
        self.prefix = f"{prefix or config.key_prefix}:tournament"
        self._listeners: list[SettingsListener] = []

    def _key(self, name: str) -> str:
        return f"{self.prefix}:{name}"

    def _read(self, name: str, default):
        value = self.backend.get_json(self._key(name))
        return default if value is None else value

    def _write(self, name: str, value, current) -> None:
        self.backend.set_json(self._key(name), value)
        if value != current:
            logger.debug(f"Setting {name} changed to {value}")
            self._notify(name, value)

    def _notify(self, name: str, value) -> None:
        for listener in list(self._listeners):
            listener(name, value)

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Player count
    def get_player_count(self) -> int:
        return int(self._read(self.PLAYER_COUNT, config.default_player_count))

    def set_player_count(self, count: int) -> None:
        """Set the number of seats.

        Weights that still equal the default for the old count follow the
        new count's default.
        """
        count = max(0, count)
        old_count = self.get_player_count()
        weights_were_set = self.backend.exists(self._key(self.PAYOUT_WEIGHTS))
        old_weights = self.get_payout_weights()

        self._write(self.PLAYER_COUNT, count, old_count)

        if not weights_were_set:
            new_defaults = default_payout_weights_for(count)
            if new_defaults != old_weights:
                self._notify(self.PAYOUT_WEIGHTS, new_defaults)
        elif old_weights == default_payout_weights_for(old_count):
            self.set_payout_weights(default_payout_weights_for(count))

    # Amounts
    def get_buy_in(self) -> float:
        return float(self._read(self.BUY_IN, config.default_buy_in))

    def set_buy_in(self, amount: float) -> None:
        self._write(self.BUY_IN, float(amount), self.get_buy_in())

    def get_food_per_player(self) -> float:
        return float(self._read(self.FOOD_PER_PLAYER, config.default_food_per_player))

    def set_food_per_player(self, amount: float) -> None:
        self._write(self.FOOD_PER_PLAYER, float(amount), self.get_food_per_player())

    def get_bounty_per_player(self) -> float:
        return float(self._read(self.BOUNTY_PER_PLAYER, config.default_bounty_per_player))

    def set_bounty_per_player(self, amount: float) -> None:
        self._write(self.BOUNTY_PER_PLAYER, float(amount), self.get_bounty_per_player())

    def get_rebuy_per_player(self) -> float:
        return float(self._read(self.REBUY_PER_PLAYER, config.default_rebuy_per_player))

    def set_rebuy_per_player(self, amount: float) -> None:
        self._write(self.REBUY_PER_PLAYER, float(amount), self.get_rebuy_per_player())

    def get_addon_per_player(self) -> float:
        return float(self._read(self.ADDON_PER_PLAYER, config.default_addon_per_player))

    def set_addon_per_player(self, amount: float) -> None:
        self._write(self.ADDON_PER_PLAYER, float(amount), self.get_addon_per_player())

    # Payout weights
    def get_payout_weights(self) -> list[int]:
        """Get the stored weights, or the default for the current player count."""
        stored = self.backend.get_json(self._key(self.PAYOUT_WEIGHTS)) or []
        weights = [w for w in stored if isinstance(w, int) and not isinstance(w, bool) and w > 0]
        return weights or default_payout_weights_for(self.get_player_count())

    def set_payout_weights(self, weights: list[int]) -> None:
        self._write(self.PAYOUT_WEIGHTS, list(weights), self.get_payout_weights())

    # Lock flag, owned by the timer
    def is_locked(self) -> bool:
        return bool(self._read(self.LOCKED, False))

    def set_locked(self, locked: bool) -> None:
        self._write(self.LOCKED, bool(locked), self.is_locked())

    def current_config(self) -> TournamentConfig:
        """Snapshot of the monetary settings."""
        return TournamentConfig(
            buy_in=self.get_buy_in(),
            food_per_player=self.get_food_per_player(),
            bounty_per_player=self.get_bounty_per_player(),
            rebuy_per_player=self.get_rebuy_per_player(),
            addon_per_player=self.get_addon_per_player(),
            payout_weights=tuple(self.get_payout_weights()),
        )

    def reset_all(self) -> None:
        """Restore every setting to its default and notify listeners."""
        before = {
            self.PLAYER_COUNT: self.get_player_count(),
            self.BUY_IN: self.get_buy_in(),
            self.FOOD_PER_PLAYER: self.get_food_per_player(),
            self.BOUNTY_PER_PLAYER: self.get_bounty_per_player(),
            self.REBUY_PER_PLAYER: self.get_rebuy_per_player(),
            self.ADDON_PER_PLAYER: self.get_addon_per_player(),
            self.PAYOUT_WEIGHTS: self.get_payout_weights(),
            self.LOCKED: self.is_locked(),
        }
        self.backend.delete(*self.backend.keys(f"{self.prefix}:"))
        after = {
            self.PLAYER_COUNT: self.get_player_count(),
            self.BUY_IN: self.get_buy_in(),
            self.FOOD_PER_PLAYER: self.get_food_per_player(),
            self.BOUNTY_PER_PLAYER: self.get_bounty_per_player(),
            self.REBUY_PER_PLAYER: self.get_rebuy_per_player(),
            self.ADDON_PER_PLAYER: self.get_addon_per_player(),
            self.PAYOUT_WEIGHTS: self.get_payout_weights(),
            self.LOCKED: self.is_locked(),
        }
        logger.info("Reset tournament settings to defaults")
        for name, value in after.items():
            if value != before[name]:
                self._notify(name, value)
