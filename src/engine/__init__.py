"""Game engine components."""

from .errors import ProtocolViolation, ViolationType
from .merkle import EMPTY_TREE_ROOT, MerkleTree, MerkleWitness
from .turn_machine import TransitionResult, TurnMachine

__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleTree",
    "MerkleWitness",
    "ProtocolViolation",
    "TransitionResult",
    "TurnMachine",
    "ViolationType",
]
