"""Player identity derivation.

A player id binds an external address, a board commitment and a salt into
one opaque field element. The salt keeps two games played with the same
board and address from producing correlated ids.
"""

from ..utils.hashing import address_to_fields, hash_fields, is_field_element
from .board_validator import validate_board
from .errors import RangeViolation


def derive_player_id(board_commitment: int, address: str, salt: int) -> int:
    """Hash a board commitment, an address and a salt into a player id.

    Raises:
        RangeViolation: If the salt is not a field element
    """
    if not is_field_element(salt):
        raise RangeViolation("Salt must be a field element!")
    return hash_fields([board_commitment, *address_to_fields(address), salt])


def generate_player_id(encoded_board: int, address: str, salt: int) -> int:
    """Validate a serialized board and derive the id it registers under.

    Raises:
        RangeViolation: If the board is illegal
    """
    return derive_player_id(validate_board(encoded_board), address, salt)
