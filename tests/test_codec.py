"""Tests for the fixed-width codec."""

import pytest

from src.engine.codec import (
    decode_board,
    decode_hit_counts,
    decode_hit_history,
    decode_hit_log,
    decode_hit_target,
    decode_shot,
    deserialize_hit_history,
    encode_board,
    encode_hit_counts,
    encode_hit_history,
    encode_hit_log,
    encode_hit_target,
    encode_shot,
    serialize_hit_history,
)
from src.engine.errors import RangeViolation, ViolationType
from src.models.hit_history import HitHistory

HOST_BOARD = [[0, 0, 0], [0, 1, 0], [0, 2, 0], [0, 3, 0], [0, 4, 0]]
JOINER_BOARD = [[9, 0, 1], [9, 5, 1], [6, 9, 0], [6, 8, 0], [7, 7, 0]]


class TestBoardCodec:
    """Test 120-bit board packing."""

    def test_first_coordinate_in_lowest_bits(self):
        """The first ship's x occupies bits 0-7."""
        ships = [[1, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0]]
        assert encode_board(ships) == 1

    def test_field_positions(self):
        """Each of the 15 coordinates takes the next 8-bit field."""
        ships = [[0, 1, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0]]
        assert encode_board(ships) == 1 << 8

        ships = [[0, 0, 0], [1, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0]]
        assert encode_board(ships) == 1 << 24

        ships = [[0, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0], [0, 0, 1]]
        assert encode_board(ships) == 1 << 112

    def test_round_trip(self):
        """Decoding an encoded board returns the same triples."""
        assert decode_board(encode_board(HOST_BOARD)) == HOST_BOARD
        assert decode_board(encode_board(JOINER_BOARD)) == JOINER_BOARD

    def test_wrong_ship_count(self):
        """A board must contain exactly five triples."""
        with pytest.raises(RangeViolation):
            encode_board(HOST_BOARD[:4])

    def test_coordinate_too_wide(self):
        """A coordinate that does not fit 8 bits is a range violation."""
        ships = [[256, 0, 0]] + HOST_BOARD[1:]
        with pytest.raises(RangeViolation, match="does not fit in 8 bits"):
            encode_board(ships)

    def test_decode_rejects_oversized_value(self):
        """A value wider than 120 bits is rejected, never truncated."""
        with pytest.raises(RangeViolation) as exc_info:
            decode_board(1 << 120)
        assert exc_info.value.violation_type == ViolationType.RANGE

    def test_decode_rejects_negative_value(self):
        with pytest.raises(RangeViolation):
            decode_board(-1)


class TestShotCodec:
    """Test 8-bit shot packing."""

    def test_x_low_nibble_y_high_nibble(self):
        assert encode_shot(3, 4) == 3 | 4 << 4
        assert encode_shot(0, 0) == 0
        assert encode_shot(9, 9) == 0x99

    def test_round_trip(self):
        for x, y in [(0, 0), (3, 4), (9, 0), (0, 9), (9, 9)]:
            assert decode_shot(encode_shot(x, y)) == (x, y)

    def test_off_grid_coordinate_still_encodes(self):
        """The codec only checks widths; grid bounds are checked on use."""
        assert decode_shot(encode_shot(10, 0)) == (10, 0)

    def test_coordinate_wider_than_nibble(self):
        with pytest.raises(RangeViolation):
            encode_shot(16, 0)

    def test_decode_rejects_oversized_value(self):
        with pytest.raises(RangeViolation):
            decode_shot(256)


class TestHitCodec:
    """Test hit counts, hit targets and hit logs."""

    def test_hit_counts(self):
        assert encode_hit_counts(1, 0) == 1
        assert encode_hit_counts(0, 1) == 1 << 5
        assert decode_hit_counts(encode_hit_counts(17, 3)) == [17, 3]

    def test_hit_counts_width(self):
        with pytest.raises(RangeViolation):
            encode_hit_counts(32, 0)

    def test_hit_target_mapping(self):
        """Targets map to x + 10y + 1 so 0 stays free."""
        assert encode_hit_target(0, 0) == 1
        assert encode_hit_target(3, 4) == 44
        assert encode_hit_target(9, 9) == 100
        assert decode_hit_target(44) == (3, 4)

    def test_hit_target_off_grid(self):
        with pytest.raises(RangeViolation):
            encode_hit_target(10, 0)

    def test_decode_hit_target_rejects_unused_marker(self):
        with pytest.raises(RangeViolation):
            decode_hit_target(0)
        with pytest.raises(RangeViolation):
            decode_hit_target(101)

    def test_hit_log_packing(self):
        assert encode_hit_log([1] + [0] * 16) == 1
        assert encode_hit_log([0, 1] + [0] * 15) == 1 << 7
        log = list(range(1, 18))
        assert decode_hit_log(encode_hit_log(log)) == log

    def test_hit_log_length(self):
        with pytest.raises(RangeViolation, match="exactly 17"):
            encode_hit_log([0] * 16)

    def test_hit_history_layout(self):
        """Counts in bits 0-9, player1 log from bit 10, player2 log from bit 129."""
        assert encode_hit_history(1, 0, 0) == 1
        assert encode_hit_history(0, 1, 0) == 1 << 10
        assert encode_hit_history(0, 0, 1) == 1 << 129
        assert encode_hit_history(0, 0, (1 << 119) - 1) < 1 << 248

    def test_hit_history_round_trip(self):
        counts = encode_hit_counts(2, 1)
        log1 = encode_hit_log([44, 1] + [0] * 15)
        log2 = encode_hit_log([100] + [0] * 16)
        decoded_counts, logs = decode_hit_history(encode_hit_history(counts, log1, log2))
        assert decoded_counts == [2, 1]
        assert logs[0][:2] == [44, 1]
        assert logs[1][0] == 100

    def test_hit_history_rejects_oversized_value(self):
        with pytest.raises(RangeViolation):
            decode_hit_history(1 << 248)


class TestHitHistorySerialization:
    """Test HitHistory <-> 248-bit blob."""

    def test_empty_history_is_zero(self):
        assert serialize_hit_history(HitHistory()) == 0
        assert deserialize_hit_history(0) == HitHistory()

    def test_single_hit(self):
        history = HitHistory().record_hit(0, 44)
        assert serialize_hit_history(history) == 1 | 44 << 10
        assert deserialize_hit_history(1 | 44 << 10) == history

    def test_malformed_count_is_range_violation(self):
        """A count above 17 fits 5 bits but is not a valid history."""
        with pytest.raises(RangeViolation, match="Malformed hit history"):
            deserialize_hit_history(18)
