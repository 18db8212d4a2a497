"""Attack resolution and hit nullification."""

from typing import Sequence

from ..utils.constants import GRID_SIZE, SHIP_LENGTHS
from .board_validator import ship_cells
from .codec import decode_shot, encode_hit_target
from .errors import RangeViolation


def validate_target_range(x: int, y: int) -> None:
    """Assert a target lies on the grid.

    Raises:
        RangeViolation: If x or y is outside 0-9
    """
    if not (0 <= x < GRID_SIZE):
        raise RangeViolation("Target x coordinate is out of bound!")
    if not (0 <= y < GRID_SIZE):
        raise RangeViolation("Target y coordinate is out of bound!")


def validate_target(encoded_shot: int) -> tuple[int, int]:
    """Decode a serialized shot and check it lies on the grid."""
    x, y = decode_shot(encoded_shot)
    validate_target_range(x, y)
    return x, y


def scan_ship(ship: Sequence[int], length: int, shot: tuple[int, int]) -> bool:
    """Return True if the shot lands on one of the ship's cells."""
    x, y = shot
    return x + GRID_SIZE * y in ship_cells(ship, length)


def resolve_attack(ships: Sequence[Sequence[int]], shot: tuple[int, int]) -> bool:
    """Determine whether a shot hits a board.

    The shot is range checked again here because it may have been stored
    several calls before it is resolved.

    Args:
        ships: Validated [x, y, orientation] triples
        shot: (x, y) target

    Returns:
        True on a hit, False on a miss
    """
    validate_target_range(*shot)
    return any(
        scan_ship(ship, length, shot) for ship, length in zip(ships, SHIP_LENGTHS)
    )


def is_target_nullified(shot: tuple[int, int], hit_targets: Sequence[int]) -> bool:
    """Check whether a target already scored against a board.

    The target is encoded and compared against the encoded log directly;
    misses are never logged, so only scoring targets are nullified.

    Args:
        shot: (x, y) target
        hit_targets: Encoded hit log of the board under attack
    """
    return encode_hit_target(*shot) in hit_targets
