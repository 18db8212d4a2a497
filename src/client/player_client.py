"""Player-side client for a game hosted on a ledger.

Each client owns one player's private board and salt, and that player's
copy of the two history trees. Nothing is shared with the adversary
except through the ledger: the client reads the latest committed slots,
brings its trees up to date, and submits a transaction carrying the
witnesses for the leaves it wants to fill.
"""

import logging

from ..engine.codec import decode_hit_target, encode_board, encode_hit_target, encode_shot
from ..engine.errors import NullifiedTargetViolation
from ..engine.identity import generate_player_id
from ..engine.merkle import MerkleTree
from ..engine.turn_machine import TurnMachine
from ..models.board import BoardLayout, Shot
from ..server.ledger import LocalLedger, Receipt, Transaction
from ..utils.constants import HOST, JOINER
from ..utils.hashing import random_salt

logger = logging.getLogger(__name__)


class BattleshipsClient:
    """One player's view of the game and owner of its off-channel trees."""

    def __init__(
        self,
        ledger: LocalLedger,
        address: str,
        board: BoardLayout,
        salt: int,
        target_tree: MerkleTree | None = None,
        hit_tree: MerkleTree | None = None,
    ):
        """Initialize client.

        Args:
            ledger: Ledger hosting the game
            address: This player's external address
            board: This player's private board
            salt: Random salt mixed into the player id
            target_tree: Restored fired-shot tree (empty if None)
            hit_tree: Restored hit/miss tree (empty if None)
        """
        self.ledger = ledger
        self.address = address
        self.board = board
        self.salt = salt
        self.encoded_board = encode_board(board.to_triples())
        self.target_tree = target_tree or MerkleTree()
        self.hit_tree = hit_tree or MerkleTree()
        self.player_index: int | None = None

    @classmethod
    def initialize(
        cls, ledger: LocalLedger, address: str, board: BoardLayout, salt: int | None = None
    ) -> "BattleshipsClient":
        """Create a client with a fresh random salt unless one is given."""
        return cls(ledger, address, board, salt if salt is not None else random_salt())

    @property
    def player_id(self) -> int:
        """Id this client registers under (and re-derives every turn)."""
        return generate_player_id(self.encoded_board, self.address, self.salt)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def host_game(self) -> Receipt:
        receipt = self._submit(
            "host_game", encoded_board=self.encoded_board, salt=self.salt
        )
        self.player_index = HOST
        return receipt

    def join_game(self) -> Receipt:
        receipt = self._submit(
            "join_game", encoded_board=self.encoded_board, salt=self.salt
        )
        self.player_index = JOINER
        return receipt

    # =========================================================================
    # TURNS
    # =========================================================================

    def play_first_turn(self, target: tuple[int, int]) -> Receipt:
        """Fire the opening shot (host only)."""
        index = self.ledger.state.turn_count
        encoded_shot = encode_shot(*target)

        receipt = self._submit(
            "first_turn",
            encoded_shot=encoded_shot,
            encoded_board=self.encoded_board,
            salt=self.salt,
            target_witness=self.target_tree.get_witness(index),
        )
        self.target_tree.set_leaf(index, encoded_shot)
        return receipt

    def play_turn(self, target: tuple[int, int]) -> Receipt:
        """Report the adversary's last shot and fire at `target`.

        Raises:
            NullifiedTargetViolation: If `target` already scored a hit
            ProtocolViolation: If the ledger rejects the transaction
        """
        self.sync()
        state = self.ledger.state
        index = state.turn_count

        if self.player_index is not None:
            adversary_log = TurnMachine.hit_history(state).hit_targets[1 - self.player_index]
            if encode_hit_target(*target) in adversary_log:
                raise NullifiedTargetViolation(
                    f"Target {Shot(*target).notation()} has already scored a hit!"
                )

        encoded_shot = encode_shot(*target)
        receipt = self._submit(
            "attack",
            encoded_shot=encoded_shot,
            encoded_board=self.encoded_board,
            salt=self.salt,
            target_witness=self.target_tree.get_witness(index),
            hit_witness=self.hit_tree.get_witness(index - 1),
        )

        # Mirror the accepted writes locally
        self.target_tree.set_leaf(index, encoded_shot)
        self.hit_tree.set_leaf(index - 1, int(receipt.hit))
        return receipt

    def sync(self) -> None:
        """Pull the adversary's last move into the local trees.

        The pending target is the shot fired at turn_count - 1, and the
        latest hit result reports the shot fired at turn_count - 2. Both were
        written by the adversary since this client last acted.
        """
        state = self.ledger.state
        index = state.turn_count
        if index >= 1:
            self.target_tree.set_leaf(index - 1, state.target)
        if index >= 2:
            self.hit_tree.set_leaf(index - 2, int(state.hit_result))

        if self.target_tree.get_root() != state.target_root:
            logger.warning(f"{self.address}: local target tree diverges from the ledger")
        if self.hit_tree.get_root() != state.hit_root:
            logger.warning(f"{self.address}: local hit tree diverges from the ledger")
        logger.debug(f"{self.address}: synced trees at turn {index}")

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def game_summary(self) -> dict:
        """Summarize the committed game state from this player's side."""
        state = self.ledger.state
        machine = self.ledger.machine
        history = machine.hit_history(state)
        winner = machine.winner(state)

        def notations(board: int) -> list[str]:
            return [
                Shot(*decode_hit_target(value)).notation()
                for value in history.scored_targets(board)
            ]

        return {
            "address": self.address,
            "player": None if self.player_index is None else self.player_index + 1,
            "turn": state.turn_count,
            "nextPlayer": machine.current_player(state) + 1,
            "hitCounts": list(history.hit_counts),
            "hostHitsTaken": notations(HOST),
            "joinerHitsTaken": notations(JOINER),
            "lastHit": state.hit_result,
            "winner": None if winner is None else winner + 1,
        }

    def _submit(self, method: str, **args) -> Receipt:
        return self.ledger.submit(Transaction(sender=self.address, method=method, args=args))
