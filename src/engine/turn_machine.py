"""Two-party turn state machine.

This module drives a game through its transitions:
1. init_game: unclaimed players, empty history trees
2. host_game: host registers (Lobby -> Hosted)
3. join_game: joiner registers (Hosted -> Full)
4. first_turn: host fires the opening shot (Full -> Opened)
5. attack: the player whose turn it is reports the result of the
   adversary's pending shot and fires the next one (Attacking(n) -> n+1)

There is no finalize transition. Once either board has absorbed 17 hits
every further attack is rejected.

Turn parity decides who may act: an even turn_count belongs to the host,
an odd one to the joiner. Reporting always trails firing by one turn, so
the shot fired at turn n is stored at target-tree leaf n and its result at
hit-tree leaf n, written during turn n + 1.

Every transition is pure: it takes the current GameState and the call
inputs and returns a new GameState, or raises a ProtocolViolation without
touching anything.
"""

import logging
from dataclasses import dataclass, field, replace

from ..models.game import GameState
from ..models.hit_history import HitHistory
from ..utils.constants import HOST, JOINER, TREE_DEPTH
from .attack import is_target_nullified, resolve_attack, validate_target
from .board_validator import validate_board
from .codec import (
    decode_board,
    decode_shot,
    deserialize_hit_history,
    encode_hit_target,
    serialize_hit_history,
)
from .errors import (
    ACCESS_DENIED_MESSAGE,
    AccessViolation,
    DuplicateRegistrationViolation,
    GameOverViolation,
    IntegrityViolation,
    NullifiedTargetViolation,
    SequencingViolation,
)
from .identity import derive_player_id
from .merkle import EMPTY_TREE_ROOT, MerkleWitness

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """Outcome of an accepted transition.

    Attributes:
        method: Name of the transition that was applied
        state: Game state after the transition
        written_slots: Slots overwritten by the transition
        hit: Reported hit result (attack only)
    """

    method: str
    state: GameState
    written_slots: list[str] = field(default_factory=list)
    hit: bool | None = None


class TurnMachine:
    """Applies the game's transitions to an explicit GameState.

    Each public method validates every precondition first and builds the
    new state last, so a rejected call never leaves a partial update.
    """

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def current_player(state: GameState) -> int:
        """Index of the player allowed to act (HOST on even turns)."""
        return HOST if state.turn_count % 2 == 0 else JOINER

    @staticmethod
    def hit_history(state: GameState) -> HitHistory:
        return deserialize_hit_history(state.serialized_hit_history)

    def is_game_over(self, state: GameState) -> bool:
        return self.hit_history(state).is_over()

    def winner(self, state: GameState) -> int | None:
        """Index of the winning player, or None while both fleets float."""
        history = self.hit_history(state)
        if history.is_sunk(JOINER):
            return HOST
        if history.is_sunk(HOST):
            return JOINER
        return None

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def init_game(self) -> TransitionResult:
        """Write the initial slots: unclaimed players and empty tree roots."""
        state = GameState.initial(EMPTY_TREE_ROOT)
        return TransitionResult(
            method="init_game", state=state, written_slots=GameState.slot_names()
        )

    def host_game(
        self, state: GameState, sender: str, encoded_board: int, salt: int
    ) -> TransitionResult:
        """Register the host.

        The slot check runs before board validation, so a second call is
        always rejected as a duplicate registration.

        Raises:
            DuplicateRegistrationViolation: If a host is already registered
            RangeViolation: If the board is illegal
        """
        if state.player1_id != 0:
            raise DuplicateRegistrationViolation("This game has already a host!")

        commitment = validate_board(encoded_board)
        host_id = derive_player_id(commitment, sender, salt)

        logger.info(f"Host registered with id {host_id:#x}")
        return TransitionResult(
            method="host_game",
            state=replace(state, player1_id=host_id),
            written_slots=["player1_id"],
        )

    def join_game(
        self, state: GameState, sender: str, encoded_board: int, salt: int
    ) -> TransitionResult:
        """Register the joiner.

        Raises:
            DuplicateRegistrationViolation: If a joiner is already registered
            SequencingViolation: If no host has registered yet
            RangeViolation: If the board is illegal
        """
        if state.player2_id != 0:
            raise DuplicateRegistrationViolation("This game is already full!")
        if state.player1_id == 0:
            raise SequencingViolation("Please wait for a host to create the game!")

        commitment = validate_board(encoded_board)
        joiner_id = derive_player_id(commitment, sender, salt)

        logger.info(f"Joiner registered with id {joiner_id:#x}")
        return TransitionResult(
            method="join_game",
            state=replace(state, player2_id=joiner_id),
            written_slots=["player2_id"],
        )

    def first_turn(
        self,
        state: GameState,
        sender: str,
        encoded_shot: int,
        encoded_board: int,
        salt: int,
        target_witness: MerkleWitness,
    ) -> TransitionResult:
        """Store the host's opening shot.

        Raises:
            DuplicateRegistrationViolation: If the opening shot was already played
            SequencingViolation: If no joiner has registered, or the witness
                index is not the turn counter
            AccessViolation: If the caller does not re-derive the host id
            RangeViolation: If the board or the shot is out of range
            IntegrityViolation: If the witness does not match the stored root
        """
        if state.turn_count != 0:
            raise DuplicateRegistrationViolation(
                "Opening attack can only be played at the beginning of the game!"
            )
        if state.player2_id == 0:
            raise SequencingViolation("Please wait for an adversary to join the game!")

        commitment = validate_board(encoded_board)
        if derive_player_id(commitment, sender, salt) != state.player1_id:
            raise AccessViolation("Only the host is allowed to play the opening shot!")

        validate_target(encoded_shot)
        target_root = self._update_leaf(
            target_witness,
            expected_index=state.turn_count,
            stored_root=state.target_root,
            new_leaf=encoded_shot,
            tree_name="target",
        )

        new_state = replace(
            state,
            target=encoded_shot,
            target_root=target_root,
            turn_count=state.turn_count + 1,
        )
        logger.info(f"Opening shot {decode_shot(encoded_shot)} stored, turn 1 begins")
        return TransitionResult(
            method="first_turn",
            state=new_state,
            written_slots=["target", "target_root", "turn_count"],
        )

    def attack(
        self,
        state: GameState,
        sender: str,
        encoded_shot: int,
        encoded_board: int,
        salt: int,
        target_witness: MerkleWitness,
        hit_witness: MerkleWitness,
    ) -> TransitionResult:
        """Report the result of the pending shot and fire the next one.

        Order of checks:
        1. The opening shot has been played
        2. Neither fleet is sunk
        3. The caller's board is legal and re-derives the id of the player
           whose turn it is
        4. Both witnesses sit at the expected leaf and match the stored roots
        5. The pending shot is resolved against the caller's board; a hit
           must not have scored against this board before
        6. The caller's new shot is on the grid

        Raises:
            SequencingViolation: If called before the opening shot, or a
                witness index does not match the turn counter
            GameOverViolation: If a fleet is already sunk
            AccessViolation: If the caller is not the player to act
            RangeViolation: If the board or the new shot is out of range
            IntegrityViolation: If a witness does not match its stored root
            NullifiedTargetViolation: If the pending shot already scored
        """
        if state.turn_count == 0:
            raise SequencingViolation("Please wait for the host to play the opening shot first!")

        history = self.hit_history(state)
        if history.is_over():
            raise GameOverViolation("Game over: all ships of a player have been sunk!")

        # Access: the reporting player is the one whose board was targeted
        reporter = self.current_player(state)
        stored_id = state.player1_id if reporter == HOST else state.player2_id
        commitment = validate_board(encoded_board)
        if derive_player_id(commitment, sender, salt) != stored_id:
            raise AccessViolation(ACCESS_DENIED_MESSAGE)

        # Sync: both leaves must still be empty in the off-channel trees
        self._verify_witness(
            target_witness,
            expected_index=state.turn_count,
            stored_root=state.target_root,
            tree_name="target",
        )
        self._verify_witness(
            hit_witness,
            expected_index=state.turn_count - 1,
            stored_root=state.hit_root,
            tree_name="hit",
        )

        # Resolve the adversary's pending shot against the caller's board
        pending_shot = decode_shot(state.target)
        hit = resolve_attack(decode_board(encoded_board), pending_shot)

        if hit:
            if is_target_nullified(pending_shot, history.hit_targets[reporter]):
                raise NullifiedTargetViolation(
                    f"Invalid Target! {pending_shot} has already scored a hit!"
                )
            history = history.record_hit(reporter, encode_hit_target(*pending_shot))

        validate_target(encoded_shot)

        hit_root = hit_witness.calculate_root(int(hit))
        target_root = target_witness.calculate_root(encoded_shot)

        new_state = replace(
            state,
            hit_result=hit,
            hit_root=hit_root,
            serialized_hit_history=serialize_hit_history(history),
            target=encoded_shot,
            target_root=target_root,
            turn_count=state.turn_count + 1,
        )

        logger.info(
            f"Turn {state.turn_count}: player{reporter + 1} reports "
            f"{'HIT' if hit else 'miss'} at {pending_shot}, "
            f"fires at {decode_shot(encoded_shot)} (hits {history.hit_counts})"
        )
        return TransitionResult(
            method="attack",
            state=new_state,
            written_slots=[
                "hit_result",
                "hit_root",
                "serialized_hit_history",
                "target",
                "target_root",
                "turn_count",
            ],
            hit=hit,
        )

    # =========================================================================
    # WITNESS CHECKS
    # =========================================================================

    def _verify_witness(
        self,
        witness: MerkleWitness,
        expected_index: int,
        stored_root: int,
        tree_name: str,
    ) -> None:
        """Check a witness points at the expected empty leaf of the stored root.

        Raises:
            SequencingViolation: If the witness does not span the tree depth or
                its index is not expected_index
            IntegrityViolation: If an empty leaf does not fold to stored_root
        """
        if witness.depth != TREE_DEPTH:
            raise SequencingViolation(
                f"{tree_name.capitalize()} witness must have {TREE_DEPTH} levels, got {witness.depth}!"
            )
        if witness.calculate_index() != expected_index:
            raise SequencingViolation(
                f"{tree_name.capitalize()} storage index is not compliant with turn counter!"
            )
        if witness.calculate_root(0) != stored_root:
            raise IntegrityViolation(f"Off-chain {tree_name} merkle tree is out of sync!")

    def _update_leaf(
        self,
        witness: MerkleWitness,
        expected_index: int,
        stored_root: int,
        new_leaf: int,
        tree_name: str,
    ) -> int:
        """Verify a witness against the stored root and return the updated root."""
        self._verify_witness(witness, expected_index, stored_root, tree_name)
        return witness.calculate_root(new_leaf)
