"""Deployed games and their spectators."""

import logging
import uuid
from dataclasses import dataclass, field

from fastapi import WebSocket

from ..engine.codec import decode_shot
from ..engine.turn_machine import TurnMachine
from .ledger import LocalLedger, Receipt, Transaction

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One deployed game and the sockets watching it.

    The session only sees the on-channel slots. Boards, salts and history
    trees stay with the players, who send witnesses with each transaction.
    """

    id: str
    ledger: LocalLedger
    spectators: list[WebSocket] = field(default_factory=list)

    def get_public_state(self) -> dict:
        """Serialize the on-channel slots plus derived turn information.

        Field elements are returned as decimal strings.
        """
        state = self.ledger.state
        machine: TurnMachine = self.ledger.machine
        history = machine.hit_history(state)
        winner = machine.winner(state)

        return {
            "player1Id": str(state.player1_id),
            "player2Id": str(state.player2_id),
            "turnCount": state.turn_count,
            "target": list(decode_shot(state.target)),
            "targetRoot": str(state.target_root),
            "hitResult": state.hit_result,
            "hitRoot": str(state.hit_root),
            "serializedHitHistory": str(state.serialized_hit_history),
            "hitCounts": list(history.hit_counts),
            "nextPlayer": machine.current_player(state) + 1,
            "gameOver": history.is_over(),
            "winner": None if winner is None else winner + 1,
        }

    def submit(self, tx: Transaction) -> Receipt:
        """Apply a transaction to this game's ledger."""
        receipt = self.ledger.submit(tx)
        logger.info(f"Game {self.id}: {tx.method} accepted, turn now {receipt.turn_count}")
        return receipt

    async def notify(self, event_type: str, **payload):
        """Push an event to every spectator, dropping sockets that fail."""
        message = {"type": event_type, "gameId": self.id, **payload}
        stale = []
        for socket in self.spectators:
            try:
                await socket.send_json(message)
            except Exception as e:
                logger.warning(f"Game {self.id}: dropping spectator after send failure: {e}")
                stale.append(socket)

        for socket in stale:
            self.spectators.remove(socket)

    def watch(self, websocket: WebSocket):
        self.spectators.append(websocket)
        logger.info(f"Game {self.id}: spectator joined ({len(self.spectators)} watching)")

    def unwatch(self, websocket: WebSocket):
        if websocket not in self.spectators:
            return
        self.spectators.remove(websocket)
        logger.info(f"Game {self.id}: spectator left ({len(self.spectators)} watching)")


class GameSessionManager:
    """In-memory registry of deployed games, one LocalLedger each."""

    def __init__(self):
        self.games: dict[str, GameSession] = {}

    def deploy(self) -> GameSession:
        """Deploy a game and run initGame on its ledger."""
        session = GameSession(id=f"game-{uuid.uuid4().hex[:8]}", ledger=LocalLedger())
        self.games[session.id] = session
        logger.info(f"Deployed {session.id}")
        return session

    def get(self, game_id: str) -> GameSession | None:
        return self.games.get(game_id)

    def remove(self, game_id: str) -> bool:
        """Forget a game. Returns False if it was never deployed."""
        session = self.games.pop(game_id, None)
        if session is None:
            return False
        logger.info(f"Removed {game_id}")
        return True

    async def shutdown(self):
        """Drop every game (called when the server stops)."""
        logger.info(f"Shutting down {len(self.games)} games")
        self.games.clear()
