"""Board legality checks and board commitments.

Ships are [x, y, orientation] triples with orientation 0 (horizontal) or
1 (vertical). A board is legal when every ship lies inside the 10x10 grid
and no two ships share a cell. Ships are checked in order, range before
collision, so the first offending ship is the one reported.
"""

import logging
from typing import Sequence

from ..utils.constants import GRID_SIZE, SHIP_LENGTHS
from ..utils.hashing import hash_fields
from .codec import decode_board
from .errors import RangeViolation

logger = logging.getLogger(__name__)


def ship_cells(ship: Sequence[int], length: int) -> list[int]:
    """Return the cell indexes (x + 10y) occupied by a ship."""
    x, y, orientation = ship
    step = GRID_SIZE if orientation == 1 else 1
    base = x + GRID_SIZE * y
    return [base + i * step for i in range(length)]


def validate_ship_in_range(ship: Sequence[int], length: int, index: int) -> None:
    """Check one ship's orientation and bounds.

    Args:
        ship: [x, y, orientation] triple
        length: Ship length
        index: Zero-based ship position on the board (reported one-based)

    Raises:
        RangeViolation: If orientation is not binary or the ship leaves the grid
    """
    x, y, orientation = ship
    if orientation not in (0, 1):
        raise RangeViolation("Coordinate z should be 1 or 0!")

    if orientation == 1:
        in_range = x < GRID_SIZE and y + length - 1 < GRID_SIZE
    else:
        in_range = x + length - 1 < GRID_SIZE and y < GRID_SIZE

    if not in_range or x < 0 or y < 0:
        raise RangeViolation(f"Invalid Board! Ship{index + 1} is out of board range!")


def place_ship(ship: Sequence[int], length: int, claimed: set[int], index: int) -> set[int]:
    """Claim a ship's cells, rejecting any cell claimed by an earlier ship.

    Returns:
        The updated set of claimed cells
    """
    for cell in ship_cells(ship, length):
        if cell in claimed:
            raise RangeViolation(
                f"Invalid Board! Collision occurred when placing Ship{index + 1}!"
            )
        claimed.add(cell)
    return claimed


def validate_ships_location(ships: Sequence[Sequence[int]]) -> None:
    """Range and collision check every ship in board order."""
    if len(ships) != len(SHIP_LENGTHS):
        raise RangeViolation(f"A board must contain {len(SHIP_LENGTHS)} ships!")

    claimed: set[int] = set()
    for index, (ship, length) in enumerate(zip(ships, SHIP_LENGTHS)):
        validate_ship_in_range(ship, length, index)
        claimed = place_ship(ship, length, claimed, index)


def hash_board(ships: Sequence[Sequence[int]]) -> int:
    """Commit to a board by hashing its flattened ship triples."""
    return hash_fields(value for ship in ships for value in ship)


def validate_board(encoded_board: int) -> int:
    """Decode, validate and commit to a serialized board.

    Args:
        encoded_board: 120-bit serialized board

    Returns:
        Board commitment

    Raises:
        RangeViolation: If the board is malformed or illegal
    """
    ships = decode_board(encoded_board)
    validate_ships_location(ships)
    commitment = hash_board(ships)
    logger.debug(f"Board validated, commitment {commitment:#x}")
    return commitment
