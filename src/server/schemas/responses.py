"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel, Field


class GameStateResponse(BaseModel):
    """Response containing the current on-channel state."""

    gameId: str  # noqa: N815
    turn: int
    winner: int | None
    state: dict


class CreateGameResponse(BaseModel):
    """Response after deploying a new game."""

    gameId: str  # noqa: N815
    state: dict


class TransactionResponse(BaseModel):
    """Response after an accepted transaction."""

    accepted: bool
    turn: int
    writtenSlots: list[str] = Field(default_factory=list)  # noqa: N815
    hit: bool | None = None
    winner: int | None = None


class ReceiptsResponse(BaseModel):
    """Ordered transaction log of a game."""

    gameId: str  # noqa: N815
    receipts: list[dict]


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
