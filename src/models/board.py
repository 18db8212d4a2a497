"""Board layout and shot coordinate models."""

from dataclasses import dataclass, field
from typing import Sequence

from ..utils.constants import GRID_SIZE, NUM_SHIPS, SHIP_LENGTHS
from .ship import Ship

ROW_LABELS = "ABCDEFGHIJ"


@dataclass(frozen=True)
class BoardLayout:
    """A player's private fleet placement.

    Only structural checks happen here. Grid bounds and collisions are
    checked by the board validator, which also runs on-channel.
    """

    ships: tuple[Ship, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate board data after initialization."""
        object.__setattr__(self, "ships", tuple(self.ships))
        if len(self.ships) != NUM_SHIPS:
            raise ValueError(f"Invalid board: {len(self.ships)} ships (must be {NUM_SHIPS})")

    @classmethod
    def from_triples(cls, triples: Sequence[Sequence[int]]) -> "BoardLayout":
        """Build a board from [x, y, orientation] triples."""
        return cls(ships=tuple(Ship(x, y, orientation) for x, y, orientation in triples))

    def to_triples(self) -> list[list[int]]:
        return [ship.to_triple() for ship in self.ships]

    def occupied_cells(self) -> set[tuple[int, int]]:
        """Return every (x, y) cell covered by a ship."""
        return {
            cell
            for ship, length in zip(self.ships, SHIP_LENGTHS)
            for cell in ship.cells(length)
        }

    def ship_at(self, x: int, y: int) -> int | None:
        """Return the index of the ship covering (x, y), or None."""
        for index, (ship, length) in enumerate(zip(self.ships, SHIP_LENGTHS)):
            if (x, y) in ship.cells(length):
                return index
        return None


@dataclass(frozen=True)
class Shot:
    """A target coordinate on the adversary's grid."""

    x: int  # Column (0-9)
    y: int  # Row (0-9)

    def __post_init__(self):
        """Validate shot data after initialization."""
        if not (0 <= self.x < GRID_SIZE):
            raise ValueError(f"Invalid x coordinate: {self.x} (must be 0-{GRID_SIZE - 1})")
        if not (0 <= self.y < GRID_SIZE):
            raise ValueError(f"Invalid y coordinate: {self.y} (must be 0-{GRID_SIZE - 1})")

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.y

    def notation(self) -> str:
        """Row letter followed by column number, e.g. (3, 4) -> 'E3'."""
        return f"{ROW_LABELS[self.y]}{self.x}"
