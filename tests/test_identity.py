"""Tests for player identity derivation."""

import pytest

from src.engine.board_validator import validate_board
from src.engine.codec import encode_board
from src.engine.errors import RangeViolation
from src.engine.identity import derive_player_id, generate_player_id
from src.utils.hashing import FIELD_MODULUS, address_to_fields, hash_fields

BOARD = encode_board([[0, 0, 0], [0, 1, 0], [0, 2, 0], [0, 3, 0], [0, 4, 0]])
OTHER_BOARD = encode_board([[9, 0, 1], [9, 5, 1], [6, 9, 0], [6, 8, 0], [7, 7, 0]])


def test_id_is_hash_of_commitment_address_and_salt():
    commitment = validate_board(BOARD)
    expected = hash_fields([commitment, *address_to_fields("alice"), 42])
    assert derive_player_id(commitment, "alice", 42) == expected


def test_id_is_deterministic():
    assert generate_player_id(BOARD, "alice", 42) == generate_player_id(BOARD, "alice", 42)


def test_id_is_non_zero():
    """A registered id never collides with the unclaimed marker."""
    assert generate_player_id(BOARD, "alice", 42) != 0


@pytest.mark.parametrize(
    "board,address,salt",
    [
        (OTHER_BOARD, "alice", 42),
        (BOARD, "bob", 42),
        (BOARD, "alice", 43),
    ],
)
def test_every_input_changes_the_id(board, address, salt):
    assert generate_player_id(board, address, salt) != generate_player_id(BOARD, "alice", 42)


def test_salt_must_be_field_element():
    commitment = validate_board(BOARD)
    with pytest.raises(RangeViolation, match="Salt must be a field element"):
        derive_player_id(commitment, "alice", FIELD_MODULUS)


def test_illegal_board_is_rejected():
    board = encode_board([[6, 0, 0], [0, 1, 0], [0, 2, 0], [0, 3, 0], [0, 4, 0]])
    with pytest.raises(RangeViolation):
        generate_player_id(board, "alice", 42)


def test_address_fields():
    x, parity = address_to_fields("alice")
    assert 0 <= x < FIELD_MODULUS
    assert parity == x & 1
    with pytest.raises(ValueError):
        address_to_fields("")
