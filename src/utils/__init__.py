"""Utility functions and constants for ZK Battleships."""

from .constants import (
    BOARD_BITS,
    GRID_SIZE,
    HIT_HISTORY_BITS,
    HOST,
    JOINER,
    NUM_SHIPS,
    SHIP_LENGTHS,
    SHOT_BITS,
    TOTAL_SHIP_CELLS,
    TREE_DEPTH,
    TREE_LEAVES,
)
from .hashing import FIELD_MODULUS, address_to_fields, hash_fields, random_salt

__all__ = [
    "BOARD_BITS",
    "GRID_SIZE",
    "HIT_HISTORY_BITS",
    "HOST",
    "JOINER",
    "NUM_SHIPS",
    "SHIP_LENGTHS",
    "SHOT_BITS",
    "TOTAL_SHIP_CELLS",
    "TREE_DEPTH",
    "TREE_LEAVES",
    "FIELD_MODULUS",
    "address_to_fields",
    "hash_fields",
    "random_salt",
]
