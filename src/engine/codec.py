"""Fixed-width codec for boards, shots and hit history.

Every composite value is packed little-endian: the first field occupies the
lowest bits. The widths are part of the persisted format:

- board: 5 ships x (x, y, orientation) x 8 bits = 120 bits
- shot: x (4 bits) | y (4 bits) = 8 bits
- hit counts: player1 (5 bits) | player2 (5 bits) = 10 bits
- hit log: 17 targets x 7 bits = 119 bits, target = x + 10y + 1, 0 = unused
- hit history: counts (10) | player1 log (119) | player2 log (119) = 248 bits

Decoding checks the width of its input and raises RangeViolation instead of
truncating.
"""

from typing import Sequence

from ..models.hit_history import HitHistory
from ..utils.constants import (
    BOARD_BITS,
    GRID_SIZE,
    HIT_COUNT_BITS,
    HIT_COUNTS_BITS,
    HIT_HISTORY_BITS,
    HIT_LOG_BITS,
    HIT_TARGET_BITS,
    NUM_SHIPS,
    SHIP_FIELD_BITS,
    SHOT_BITS,
    SHOT_COORD_BITS,
    TOTAL_SHIP_CELLS,
)
from .errors import RangeViolation


def _check_width(value: int, bits: int, label: str) -> None:
    if not isinstance(value, int) or value < 0 or value >> bits:
        raise RangeViolation(f"{label} does not fit in {bits} bits: {value!r}")


def pack_fields(values: Sequence[int], bits: int, label: str = "Field") -> int:
    """Concatenate fixed-width fields, first value in the lowest bits.

    Args:
        values: Field values, each must fit in `bits`
        bits: Width of each field
        label: Name used in error messages

    Returns:
        Packed integer
    """
    packed = 0
    for i, value in enumerate(values):
        _check_width(value, bits, label)
        packed |= value << (i * bits)
    return packed


def unpack_fields(packed: int, count: int, bits: int, label: str = "Field") -> list[int]:
    """Split a packed integer into `count` fields of `bits` each."""
    _check_width(packed, count * bits, label)
    mask = (1 << bits) - 1
    return [(packed >> (i * bits)) & mask for i in range(count)]


# =========================================================================
# Board
# =========================================================================


def encode_board(ships: Sequence[Sequence[int]]) -> int:
    """Serialize five (x, y, orientation) triples into a 120-bit integer."""
    if len(ships) != NUM_SHIPS or any(len(ship) != 3 for ship in ships):
        raise RangeViolation(f"A board must contain {NUM_SHIPS} ships of 3 coordinates!")
    flat = [value for ship in ships for value in ship]
    return pack_fields(flat, SHIP_FIELD_BITS, "Ship coordinate")


def decode_board(encoded_board: int) -> list[list[int]]:
    """Deserialize a 120-bit board into five [x, y, orientation] lists."""
    _check_width(encoded_board, BOARD_BITS, "Serialized board")
    flat = unpack_fields(encoded_board, NUM_SHIPS * 3, SHIP_FIELD_BITS)
    return [flat[i : i + 3] for i in range(0, len(flat), 3)]


# =========================================================================
# Shot
# =========================================================================


def encode_shot(x: int, y: int) -> int:
    """Serialize a shot into 8 bits (x low nibble, y high nibble)."""
    return pack_fields([x, y], SHOT_COORD_BITS, "Target coordinate")


def decode_shot(encoded_shot: int) -> tuple[int, int]:
    """Deserialize an 8-bit shot into (x, y). Coordinates are not range checked."""
    _check_width(encoded_shot, SHOT_BITS, "Serialized target")
    x, y = unpack_fields(encoded_shot, 2, SHOT_COORD_BITS)
    return x, y


# =========================================================================
# Hit history
# =========================================================================


def encode_hit_counts(player1_count: int, player2_count: int) -> int:
    return pack_fields([player1_count, player2_count], HIT_COUNT_BITS, "Hit count")


def decode_hit_counts(encoded_counts: int) -> list[int]:
    return unpack_fields(encoded_counts, 2, HIT_COUNT_BITS, "Serialized hit counts")


def encode_hit_target(x: int, y: int) -> int:
    """Map a target to x + 10y + 1 so that 0 stays free as the unused marker.

    Seven bits are enough for the 100 possible values, one bit less per
    logged target than the 8-bit shot encoding.
    """
    if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
        raise RangeViolation(f"Hit target out of board range: ({x}, {y})")
    return x + GRID_SIZE * y + 1


def decode_hit_target(encoded_target: int) -> tuple[int, int]:
    if not isinstance(encoded_target, int) or not (
        1 <= encoded_target <= GRID_SIZE * GRID_SIZE
    ):
        raise RangeViolation(f"Invalid encoded hit target: {encoded_target!r}")
    value = encoded_target - 1
    return value % GRID_SIZE, value // GRID_SIZE


def encode_hit_log(hit_targets: Sequence[int]) -> int:
    """Pack 17 encoded hit targets (7 bits each) into 119 bits."""
    if len(hit_targets) != TOTAL_SHIP_CELLS:
        raise RangeViolation(
            f"A hit log holds exactly {TOTAL_SHIP_CELLS} targets, got {len(hit_targets)}"
        )
    return pack_fields(hit_targets, HIT_TARGET_BITS, "Encoded hit target")


def decode_hit_log(encoded_log: int) -> list[int]:
    return unpack_fields(encoded_log, TOTAL_SHIP_CELLS, HIT_TARGET_BITS, "Serialized hit log")


def encode_hit_history(encoded_counts: int, player1_log: int, player2_log: int) -> int:
    """Combine hit counts and both hit logs into the 248-bit history blob."""
    _check_width(encoded_counts, HIT_COUNTS_BITS, "Serialized hit counts")
    _check_width(player1_log, HIT_LOG_BITS, "Serialized hit log")
    _check_width(player2_log, HIT_LOG_BITS, "Serialized hit log")
    return (
        encoded_counts
        | player1_log << HIT_COUNTS_BITS
        | player2_log << (HIT_COUNTS_BITS + HIT_LOG_BITS)
    )


def decode_hit_history(serialized_history: int) -> tuple[list[int], list[list[int]]]:
    """Split the history blob into hit counts and both decoded hit logs.

    Returns:
        Tuple of ([player1_count, player2_count], [player1_targets, player2_targets])
    """
    _check_width(serialized_history, HIT_HISTORY_BITS, "Serialized hit history")
    log_mask = (1 << HIT_LOG_BITS) - 1
    counts = decode_hit_counts(serialized_history & ((1 << HIT_COUNTS_BITS) - 1))
    player1_log = (serialized_history >> HIT_COUNTS_BITS) & log_mask
    player2_log = serialized_history >> (HIT_COUNTS_BITS + HIT_LOG_BITS)
    return counts, [decode_hit_log(player1_log), decode_hit_log(player2_log)]


def serialize_hit_history(history: HitHistory) -> int:
    """Encode a HitHistory model into the 248-bit history blob."""
    return encode_hit_history(
        encode_hit_counts(*history.hit_counts),
        encode_hit_log(history.hit_targets[0]),
        encode_hit_log(history.hit_targets[1]),
    )


def deserialize_hit_history(serialized_history: int) -> HitHistory:
    """Decode the 248-bit history blob into a HitHistory model."""
    counts, targets = decode_hit_history(serialized_history)
    try:
        return HitHistory(hit_counts=counts, hit_targets=targets)
    except ValueError as e:
        raise RangeViolation(f"Malformed hit history: {e}") from e
