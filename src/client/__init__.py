"""Player-side client components."""

from .player_client import BattleshipsClient

__all__ = ["BattleshipsClient"]
