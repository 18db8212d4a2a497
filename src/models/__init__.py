"""Data models for ZK Battleships."""

from .board import BoardLayout, Shot
from .game import GameState
from .hit_history import HitHistory
from .ship import Orientation, Ship

__all__ = [
    "Ship",
    "Orientation",
    "BoardLayout",
    "Shot",
    "HitHistory",
    "GameState",
]
