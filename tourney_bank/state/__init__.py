"""Persistence for players and tournament settings."""
from .backends import MemoryBackend, create_backend
from .player_store import PlayerStore
from .redis_client import redis_client
from .tournament_settings import TournamentSettings, default_payout_weights_for

__all__ = [
    "MemoryBackend",
    "create_backend",
    "PlayerStore",
    "redis_client",
    "TournamentSettings",
    "default_payout_weights_for",
]
