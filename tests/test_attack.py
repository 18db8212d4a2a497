"""Tests for attack resolution and hit nullification."""

import pytest

from src.engine.attack import (
    is_target_nullified,
    resolve_attack,
    scan_ship,
    validate_target,
)
from src.engine.codec import encode_hit_target, encode_shot
from src.engine.errors import RangeViolation

# Ship lengths 5, 4, 3, 3, 2 stacked in rows 0-4 from the left edge
HOST_BOARD = [[0, 0, 0], [0, 1, 0], [0, 2, 0], [0, 3, 0], [0, 4, 0]]
JOINER_BOARD = [[9, 0, 1], [9, 5, 1], [6, 9, 0], [6, 8, 0], [7, 7, 0]]


class TestResolveAttack:
    """Test hit/miss resolution."""

    def test_hits(self):
        assert resolve_attack(HOST_BOARD, (0, 0))
        assert resolve_attack(HOST_BOARD, (4, 0))
        assert resolve_attack(HOST_BOARD, (3, 1))
        assert resolve_attack(HOST_BOARD, (1, 4))

    def test_misses(self):
        assert not resolve_attack(HOST_BOARD, (5, 0))
        assert not resolve_attack(HOST_BOARD, (4, 1))
        assert not resolve_attack(HOST_BOARD, (3, 4))
        assert not resolve_attack(HOST_BOARD, (9, 9))

    def test_vertical_ships(self):
        assert resolve_attack(JOINER_BOARD, (9, 4))
        assert resolve_attack(JOINER_BOARD, (9, 8))
        assert not resolve_attack(JOINER_BOARD, (9, 9))
        assert not resolve_attack(JOINER_BOARD, (3, 4))

    def test_every_cell_of_a_board(self):
        """Exactly 17 cells of a legal board are hits."""
        hits = [
            (x, y) for x in range(10) for y in range(10) if resolve_attack(JOINER_BOARD, (x, y))
        ]
        assert len(hits) == 17

    def test_scan_ship(self):
        assert scan_ship([9, 0, 1], 5, (9, 4))
        assert not scan_ship([9, 0, 1], 5, (9, 5))

    def test_out_of_range_shot(self):
        with pytest.raises(RangeViolation, match="Target x coordinate is out of bound!"):
            resolve_attack(HOST_BOARD, (10, 0))
        with pytest.raises(RangeViolation, match="Target y coordinate is out of bound!"):
            resolve_attack(HOST_BOARD, (0, 10))


class TestValidateTarget:
    """Test shot decoding with grid bounds."""

    def test_valid_target(self):
        assert validate_target(encode_shot(3, 4)) == (3, 4)

    def test_x_out_of_bound(self):
        with pytest.raises(RangeViolation, match="Target x coordinate is out of bound!"):
            validate_target(encode_shot(10, 0))

    def test_y_out_of_bound(self):
        with pytest.raises(RangeViolation, match="Target y coordinate is out of bound!"):
            validate_target(encode_shot(0, 15))

    def test_malformed_shot(self):
        with pytest.raises(RangeViolation):
            validate_target(1 << 8)


class TestNullifier:
    """Test the scored-target scan."""

    def test_scored_target_is_nullified(self):
        log = [encode_hit_target(0, 0), encode_hit_target(3, 1)] + [0] * 15
        assert is_target_nullified((0, 0), log)
        assert is_target_nullified((3, 1), log)

    def test_unscored_target_is_not_nullified(self):
        log = [encode_hit_target(0, 0)] + [0] * 16
        assert not is_target_nullified((1, 0), log)

    def test_padding_never_matches(self):
        """Unused entries are 0, which no target encodes to."""
        assert not is_target_nullified((0, 0), [0] * 17)
