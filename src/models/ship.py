"""Ship placement data model."""

from dataclasses import dataclass
from enum import IntEnum


class Orientation(IntEnum):
    """Ship orientation, encoded as the third coordinate of a ship."""

    HORIZONTAL = 0
    VERTICAL = 1


@dataclass(frozen=True)
class Ship:
    """One ship placement: bow position and orientation.

    The ship's length is not stored; it is implied by the ship's position
    in the board (lengths 5, 4, 3, 3, 2).
    """

    x: int  # Bow column (0-9)
    y: int  # Bow row (0-9)
    orientation: Orientation = Orientation.HORIZONTAL

    def __post_init__(self):
        """Validate ship data after initialization."""
        if self.x < 0:
            raise ValueError(f"Invalid x coordinate: {self.x} (must be >= 0)")
        if self.y < 0:
            raise ValueError(f"Invalid y coordinate: {self.y} (must be >= 0)")
        # Accept plain 0/1 and normalize to the enum
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    def to_triple(self) -> list[int]:
        return [self.x, self.y, int(self.orientation)]

    def cells(self, length: int) -> list[tuple[int, int]]:
        """Return the (x, y) cells covered by this ship."""
        if self.orientation == Orientation.VERTICAL:
            return [(self.x, self.y + i) for i in range(length)]
        return [(self.x + i, self.y) for i in range(length)]
