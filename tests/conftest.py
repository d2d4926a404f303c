"""Shared fixtures for ledger tests."""
import pytest

from tourney_bank.bank.controller import BankLedgerController
from tourney_bank.state.backends import MemoryBackend
from tourney_bank.state.player_store import PlayerStore
from tourney_bank.state.tournament_settings import TournamentSettings


@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return PlayerStore(backend, prefix="test")


@pytest.fixture
def settings(backend):
    return TournamentSettings(backend, prefix="test")


@pytest.fixture
def make_controller(store, settings):
    """Factory that configures the tournament, then builds a controller."""
    controllers = []

    def _make(
        player_count=4,
        buy_in=100.0,
        food=0.0,
        bounty=0.0,
        rebuy=0.0,
        addon=0.0,
        weights=(3, 2, 1),
    ):
        settings.set_player_count(player_count)
        settings.set_buy_in(buy_in)
        settings.set_food_per_player(food)
        settings.set_bounty_per_player(bounty)
        settings.set_rebuy_per_player(rebuy)
        settings.set_addon_per_player(addon)
        settings.set_payout_weights(list(weights))
        controller = BankLedgerController(store, settings)
        controllers.append(controller)
        return controller

    yield _make

    for controller in controllers:
        controller.close()
