"""Player and elimination order persistence."""
from typing import Iterable, Optional

from tourney_bank.bank.models import Player, default_player_name
from tourney_bank.config import config
from tourney_bank.state.backends import KeyValueBackend
from tourney_bank.utils.logger import get_logger

logger = get_logger(__name__)


class PlayerStore:
    """Persists per-player ledger fields and the elimination order.

    Every field has a documented default, so a missing key reads as a fresh
    seat: name "Player {id}", flags False, counts 0, no eliminator.
    """

    NAME = "name"
    BUY_IN = "buy_in"
    OUT = "out"
    PAID_OUT = "paid_out"
    REBUYS = "rebuys"
    ADDONS = "addons"
    ELIMINATED_BY = "eliminated_by"

    def __init__(self, backend: KeyValueBackend, prefix: Optional[str] = None):
        """Initialize the store.

        Args:
            backend: Key-value backend (memory or Redis).
            prefix: Key namespace; defaults to config.key_prefix.
        """
        self.backend = backend
        self.prefix = f"{prefix or config.key_prefix}:bank"

    def _player_prefix(self, field: str) -> str:
        """Get the key prefix shared by one field across all players."""
        return f"{self.prefix}:player_{field}:"

    def _player_key(self, field: str, player_id: int) -> str:
        """Get the key for one player field."""
        return f"{self._player_prefix(field)}{player_id}"

    def _order_key(self) -> str:
        return f"{self.prefix}:elimination_order"

    def _get(self, field: str, player_id: int, default):
        value = self.backend.get_json(self._player_key(field, player_id))
        return default if value is None else value

    def _save(self, field: str, player_id: int, value) -> None:
        self.backend.set_json(self._player_key(field, player_id), value)

    def _clear_field(self, field: str) -> None:
        keys = self.backend.keys(self._player_prefix(field))
        self.backend.delete(*keys)

    # Names
    def get_player_name(self, player_id: int) -> str:
        return self._get(self.NAME, player_id, default_player_name(player_id))

    def save_player_name(self, player_id: int, name: str) -> None:
        self._save(self.NAME, player_id, name)

    # Flags
    def get_player_buy_in(self, player_id: int) -> bool:
        return bool(self._get(self.BUY_IN, player_id, False))

    def save_player_buy_in(self, player_id: int, bought_in: bool) -> None:
        self._save(self.BUY_IN, player_id, bought_in)

    def get_player_out(self, player_id: int) -> bool:
        return bool(self._get(self.OUT, player_id, False))

    def save_player_out(self, player_id: int, out: bool) -> None:
        self._save(self.OUT, player_id, out)

    def get_player_paid_out(self, player_id: int) -> bool:
        return bool(self._get(self.PAID_OUT, player_id, False))

    def save_player_paid_out(self, player_id: int, paid_out: bool) -> None:
        self._save(self.PAID_OUT, player_id, paid_out)

    # Purchases
    def get_player_rebuys(self, player_id: int) -> int:
        return int(self._get(self.REBUYS, player_id, 0))

    def save_player_rebuys(self, player_id: int, rebuys: int) -> None:
        self._save(self.REBUYS, player_id, rebuys)

    def get_player_addons(self, player_id: int) -> int:
        return int(self._get(self.ADDONS, player_id, 0))

    def save_player_addons(self, player_id: int, addons: int) -> None:
        self._save(self.ADDONS, player_id, addons)

    def clear_all_rebuys(self) -> None:
        """Remove every stored rebuy count."""
        self._clear_field(self.REBUYS)

    def clear_all_addons(self) -> None:
        """Remove every stored add-on count."""
        self._clear_field(self.ADDONS)

    # Knockout credit
    def get_player_eliminated_by(self, player_id: int) -> Optional[int]:
        value = self._get(self.ELIMINATED_BY, player_id, None)
        if isinstance(value, int) and value > 0:
            return value
        return None

    def save_player_eliminated_by(self, player_id: int, eliminated_by: Optional[int]) -> None:
        """Save the knockout credit; None removes it."""
        if eliminated_by is None:
            self.backend.delete(self._player_key(self.ELIMINATED_BY, player_id))
        else:
            self._save(self.ELIMINATED_BY, player_id, eliminated_by)

    # Whole players
    def load_player(self, player_id: int) -> Player:
        """Load a player from its stored fields.

        Args:
            player_id: Seat id.

        Returns:
            The player, with defaults for anything never saved.
        """
        return Player.from_dict({
            "id": player_id,
            "name": self.get_player_name(player_id),
            "bought_in": self.get_player_buy_in(player_id),
            "eliminated": self.get_player_out(player_id),
            "paid_out": self.get_player_paid_out(player_id),
            "rebuy_count": self.get_player_rebuys(player_id),
            "addon_count": self.get_player_addons(player_id),
            "eliminated_by": self.get_player_eliminated_by(player_id),
        })

    def save_player(self, player: Player) -> None:
        """Save every field of a player."""
        self.save_player_name(player.id, player.name)
        self.save_player_rebuys(player.id, player.rebuy_count)
        self.save_player_addons(player.id, player.addon_count)
        self.save_player_status(player)

    def save_player_status(self, player: Player) -> None:
        """Save the buy-in, out, paid-out and eliminator fields of a player."""
        self.save_player_buy_in(player.id, player.bought_in)
        self.save_player_out(player.id, player.eliminated)
        self.save_player_paid_out(player.id, player.paid_out)
        self.save_player_eliminated_by(player.id, player.eliminated_by)

    # Elimination order
    def get_elimination_order(self) -> list[int]:
        stored = self.backend.get_json(self._order_key()) or []
        return [pid for pid in stored if isinstance(pid, int) and pid > 0]

    def save_elimination_order(self, order: Iterable[int]) -> list[int]:
        """Save the elimination order, keeping positive ids once each.

        Returns:
            The order as stored.
        """
        sanitized: list[int] = []
        for pid in order:
            if pid > 0 and pid not in sanitized:
                sanitized.append(pid)
        self.backend.set_json(self._order_key(), sanitized)
        logger.debug(f"Saved elimination order {sanitized}")
        return sanitized

    # Reset
    def is_in_default_state(self, player_count: int) -> bool:
        """Check if nothing was changed for any of the first player_count seats."""
        for player_id in range(1, player_count + 1):
            if self.get_player_name(player_id) != default_player_name(player_id):
                return False
            if (
                self.get_player_buy_in(player_id)
                or self.get_player_out(player_id)
                or self.get_player_paid_out(player_id)
            ):
                return False
            if self.get_player_rebuys(player_id) > 0 or self.get_player_addons(player_id) > 0:
                return False
            if self.get_player_eliminated_by(player_id) is not None:
                return False
        return True

    def reset_all(self) -> None:
        """Restore every player field to its default and clear the elimination order."""
        keys = self.backend.keys(f"{self.prefix}:player_")
        self.backend.delete(*keys, self._order_key())
        logger.info(f"Reset bank data ({len(keys)} player keys cleared)")
