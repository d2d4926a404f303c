"""Application configuration."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # Persistence ("memory" or "redis")
    store_backend: str = os.getenv("STORE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    key_prefix: str = os.getenv("KEY_PREFIX", "tourney")
    
    # Purchase limits
    max_purchase_count: int = int(os.getenv("MAX_PURCHASE_COUNT", "20"))
    
    # Tournament defaults (used until the organizer changes them)
    default_player_count: int = int(os.getenv("DEFAULT_PLAYER_COUNT", "5"))
    default_buy_in: float = float(os.getenv("DEFAULT_BUY_IN", "20"))
    default_food_per_player: float = float(os.getenv("DEFAULT_FOOD_PER_PLAYER", "5"))
    default_bounty_per_player: float = float(os.getenv("DEFAULT_BOUNTY_PER_PLAYER", "0"))
    default_rebuy_per_player: float = float(os.getenv("DEFAULT_REBUY_PER_PLAYER", "0"))
    default_addon_per_player: float = float(os.getenv("DEFAULT_ADDON_PER_PLAYER", "0"))
    
    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
