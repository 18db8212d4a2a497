"""On-channel game state container."""

from dataclasses import dataclass, fields

from ..utils.constants import TREE_LEAVES


@dataclass(frozen=True)
class GameState:
    """The eight persistent slots of a game.

    Every slot holds one fixed-width integer. The full shot and hit
    history lives off-channel with the players; only the two tree roots
    and the latest shot/result are kept here.
    """

    player1_id: int = 0  # Host id, 0 = unclaimed
    player2_id: int = 0  # Joiner id, 0 = unclaimed
    turn_count: int = 0  # Accepted opening/attack calls
    target: int = 0  # Pending encoded shot awaiting the adversary's report
    target_root: int = 0  # Root of the fired-shot tree
    hit_result: bool = False  # Result of the latest reported shot
    hit_root: int = 0  # Root of the hit/miss tree
    serialized_hit_history: int = 0  # 248-bit hit counts and hit logs

    def __post_init__(self):
        """Validate game state after initialization."""
        if not (0 <= self.turn_count <= TREE_LEAVES):
            raise ValueError(f"Invalid turn_count: {self.turn_count} (must be 0-{TREE_LEAVES})")
        for slot in fields(self):
            value = getattr(self, slot.name)
            if value is None or value < 0:
                raise ValueError(f"Invalid {slot.name}: {value!r} (must be >= 0)")

    @classmethod
    def initial(cls, empty_root: int) -> "GameState":
        """State written by initGame: unclaimed players and empty trees."""
        return cls(target_root=empty_root, hit_root=empty_root)

    @classmethod
    def slot_names(cls) -> list[str]:
        return [slot.name for slot in fields(cls)]

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.slot_names()}
