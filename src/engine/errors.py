"""Protocol violations raised by rejected transitions.

A violation aborts the whole call: the engine raises before writing any
slot, so the previously committed state stays valid and callable again
with corrected inputs.
"""

from enum import Enum


class ViolationType(Enum):
    """Classification of rejected transitions."""

    ACCESS = "access_violation"
    RANGE = "range_violation"
    INTEGRITY = "integrity_violation"
    SEQUENCING = "sequencing_violation"
    GAME_OVER = "game_over_violation"
    DUPLICATE_REGISTRATION = "duplicate_registration_violation"
    NULLIFIED_TARGET = "nullified_target_violation"


class ProtocolViolation(Exception):
    """Raised when a transition breaks a game rule."""

    violation_type: ViolationType = ViolationType.RANGE

    def __init__(self, message: str, violation_type: ViolationType | None = None):
        """Initialize violation.

        Args:
            message: Human-readable error message
            violation_type: Override of the class-level classification
        """
        if violation_type is not None:
            self.violation_type = violation_type
        self.message = message
        super().__init__(message)


class AccessViolation(ProtocolViolation):
    """Caller identity does not match the player allowed to act."""

    violation_type = ViolationType.ACCESS


class RangeViolation(ProtocolViolation):
    """A coordinate, placement or encoded width is out of range."""

    violation_type = ViolationType.RANGE


class IntegrityViolation(ProtocolViolation):
    """A Merkle witness does not reproduce the stored root."""

    violation_type = ViolationType.INTEGRITY


class SequencingViolation(ProtocolViolation):
    """A call arrived out of order."""

    violation_type = ViolationType.SEQUENCING


class GameOverViolation(ProtocolViolation):
    """An attack was attempted after a fleet was sunk."""

    violation_type = ViolationType.GAME_OVER


class DuplicateRegistrationViolation(ProtocolViolation):
    """A one-shot registration or opening call was repeated."""

    violation_type = ViolationType.DUPLICATE_REGISTRATION


class NullifiedTargetViolation(ProtocolViolation):
    """A target that already scored a hit was credited again."""

    violation_type = ViolationType.NULLIFIED_TARGET


# Single message for every access failure (wrong caller, board, salt or turn)
ACCESS_DENIED_MESSAGE = (
    "Invalid Action: either your address, board, salt or turn is not compliant!"
)
