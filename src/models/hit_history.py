"""Hit history data model."""

from dataclasses import dataclass, field

from ..utils.constants import TOTAL_SHIP_CELLS


def _empty_counts() -> list[int]:
    return [0, 0]


def _empty_targets() -> list[list[int]]:
    return [[0] * TOTAL_SHIP_CELLS, [0] * TOTAL_SHIP_CELLS]


@dataclass
class HitHistory:
    """Cumulative hit statistics for both boards.

    Index 0 is the host's board, index 1 the joiner's. hit_counts[i] counts
    the hits landed on board i, and hit_targets[i] logs the encoded targets
    (x + 10y + 1) that scored them, in order, zero-padded to 17 entries.
    Misses are never logged.
    """

    hit_counts: list[int] = field(default_factory=_empty_counts)
    hit_targets: list[list[int]] = field(default_factory=_empty_targets)

    def __post_init__(self):
        """Validate hit history after initialization."""
        if len(self.hit_counts) != 2 or len(self.hit_targets) != 2:
            raise ValueError("Hit history must track exactly two boards")
        for board, (count, targets) in enumerate(zip(self.hit_counts, self.hit_targets)):
            if not (0 <= count <= TOTAL_SHIP_CELLS):
                raise ValueError(
                    f"Invalid hit count for board {board}: {count} (must be 0-{TOTAL_SHIP_CELLS})"
                )
            if len(targets) != TOTAL_SHIP_CELLS:
                raise ValueError(
                    f"Invalid hit log for board {board}: {len(targets)} entries "
                    f"(must be {TOTAL_SHIP_CELLS})"
                )

    def is_sunk(self, board: int) -> bool:
        """Return True if every ship cell of the board has been hit."""
        return self.hit_counts[board] == TOTAL_SHIP_CELLS

    def is_over(self) -> bool:
        return self.is_sunk(0) or self.is_sunk(1)

    def record_hit(self, board: int, encoded_target: int) -> "HitHistory":
        """Return a new history with one more hit logged against a board."""
        if self.is_sunk(board):
            raise ValueError(f"Board {board} is already sunk")
        counts = list(self.hit_counts)
        targets = [list(log) for log in self.hit_targets]
        targets[board][counts[board]] = encoded_target
        counts[board] += 1
        return HitHistory(hit_counts=counts, hit_targets=targets)

    def scored_targets(self, board: int) -> list[int]:
        """Encoded targets that hit the board, without the unused padding."""
        return self.hit_targets[board][: self.hit_counts[board]]
