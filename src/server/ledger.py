"""In-memory ledger that sequences game transactions.

Stands in for the chain hosting the game: it owns the eight-slot
GameState, applies one transaction at a time through the TurnMachine and
keeps an ordered receipt log. A transaction either lands all its writes
or none of them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from ..engine.errors import ProtocolViolation
from ..engine.turn_machine import TransitionResult, TurnMachine
from ..models.game import GameState

logger = logging.getLogger(__name__)

METHODS = ("host_game", "join_game", "first_turn", "attack")


@dataclass
class Transaction:
    """A signed call to one of the game's methods."""

    sender: str  # External address of the caller
    method: str  # "host_game", "join_game", "first_turn" or "attack"
    args: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate transaction data after initialization."""
        if not self.sender:
            raise ValueError("sender cannot be empty")
        if self.method not in METHODS:
            raise ValueError(f"Unknown method: {self.method} (must be one of {', '.join(METHODS)})")


@dataclass
class Receipt:
    """Record of a submitted transaction."""

    index: int  # Position in the ledger's transaction order
    sender: str
    method: str
    accepted: bool
    turn_count: int  # Turn counter after the transaction
    written_slots: list[str] = field(default_factory=list)
    hit: bool | None = None
    violation_type: str | None = None
    message: str | None = None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "sender": self.sender,
            "method": self.method,
            "accepted": self.accepted,
            "turnCount": self.turn_count,
            "writtenSlots": self.written_slots,
            "hit": self.hit,
            "violation": self.violation_type,
            "message": self.message,
        }


class LocalLedger:
    """Single-game ledger applying transactions in arrival order."""

    def __init__(self, machine: TurnMachine | None = None, state: GameState | None = None):
        """Deploy and initialize a game.

        Args:
            machine: Turn machine to apply transitions with
            state: Previously persisted state to resume from (initGame otherwise)
        """
        self.machine = machine or TurnMachine()
        self.receipts: list[Receipt] = []
        if state is None:
            state = self.machine.init_game().state
        self._state = state

    @property
    def state(self) -> GameState:
        """Latest committed state (immutable snapshot)."""
        return self._state

    def submit(self, tx: Transaction) -> Receipt:
        """Apply a transaction atomically.

        Args:
            tx: Transaction to apply

        Returns:
            Receipt of the accepted transaction

        Raises:
            ProtocolViolation: If the transition is rejected (recorded as a
                rejected receipt, state unchanged)
        """
        transition = getattr(self.machine, tx.method)
        try:
            result: TransitionResult = transition(self._state, tx.sender, **tx.args)
        except ProtocolViolation as e:
            receipt = Receipt(
                index=len(self.receipts),
                sender=tx.sender,
                method=tx.method,
                accepted=False,
                turn_count=self._state.turn_count,
                violation_type=e.violation_type.value,
                message=e.message,
            )
            self.receipts.append(receipt)
            logger.warning(f"Rejected {tx.method} from {tx.sender}: {e.message}")
            raise

        self._state = result.state
        receipt = Receipt(
            index=len(self.receipts),
            sender=tx.sender,
            method=tx.method,
            accepted=True,
            turn_count=result.state.turn_count,
            written_slots=result.written_slots,
            hit=result.hit,
        )
        self.receipts.append(receipt)
        logger.debug(f"Accepted {tx.method} from {tx.sender}, wrote {result.written_slots}")
        return receipt

    def accepted_receipts(self) -> list[Receipt]:
        return [receipt for receipt in self.receipts if receipt.accepted]
