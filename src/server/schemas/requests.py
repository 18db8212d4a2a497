"""Pydantic request schemas for API endpoints.

Field elements (boards, salts, tree hashes) are sent as decimal strings.
"""

from pydantic import BaseModel, Field, field_validator


# Field elements fit in 77 decimal digits, plus one leading zero
MAX_FIELD_DIGITS = 78


def _parse_field(value: str) -> str:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"expected a non-negative decimal integer, got {value!r}")
    if len(value) > MAX_FIELD_DIGITS:
        raise ValueError(f"expected at most {MAX_FIELD_DIGITS} digits, got {len(value)}")
    return value


class WitnessModel(BaseModel):
    """Merkle witness: sibling hashes from leaf to root."""

    path: list[str] = Field(description="Sibling hashes, leaf level first")
    isLeft: list[bool] = Field(  # noqa: N815
        description="True where the path node is the left child"
    )

    @field_validator("path")
    @classmethod
    def check_path(cls, value: list[str]) -> list[str]:
        return [_parse_field(sibling) for sibling in value]


class RegisterRequest(BaseModel):
    """Request to host or join a game."""

    sender: str = Field(min_length=1, description="Caller's external address")
    board: str = Field(description="120-bit serialized board")
    salt: str = Field(description="Salt mixed into the player id")

    @field_validator("board", "salt")
    @classmethod
    def check_field(cls, value: str) -> str:
        return _parse_field(value)


class FirstTurnRequest(RegisterRequest):
    """Request to fire the opening shot."""

    shot: int = Field(ge=0, description="8-bit serialized shot")
    targetWitness: WitnessModel  # noqa: N815


class AttackRequest(FirstTurnRequest):
    """Request to report the pending shot and fire the next one."""

    hitWitness: WitnessModel  # noqa: N815
