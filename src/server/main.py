"""FastAPI server for ZK Battleships.

Exposes the game's method surface as a transaction-submission API. Each
request is one transaction against one game's ledger: it is either
accepted with all its slot writes, or rejected with HTTP 400 and the
violation that stopped it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine.errors import ProtocolViolation
from ..engine.merkle import MerkleWitness
from .ledger import Transaction
from .schemas.requests import (
    AttackRequest,
    FirstTurnRequest,
    RegisterRequest,
    WitnessModel,
)
from .schemas.responses import (
    CreateGameResponse,
    ErrorResponse,
    GameStateResponse,
    ReceiptsResponse,
    TransactionResponse,
)
from .session import GameSession, GameSessionManager

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

games = GameSessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("ZK Battleships server starting...")
    yield
    logger.info("ZK Battleships server shutting down...")
    await games.shutdown()


app = FastAPI(
    title="ZK Battleships API",
    description="Transaction-submission API for two-player hidden-board Battleships",
    version="1.0.0",
    lifespan=lifespan,
)

# Browser clients build witnesses locally and post them from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

VIOLATION_RESPONSES = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=404, detail={"error": "not_found", "message": "Game not found"}
    )


def _get_session(game_id: str) -> GameSession:
    session = games.get(game_id)
    if session is None:
        raise _not_found()
    return session


def _witness(model: WitnessModel) -> MerkleWitness:
    try:
        return MerkleWitness.from_dict(model.model_dump())
    except ValueError as e:
        raise HTTPException(
            status_code=422, detail={"error": "invalid_witness", "message": str(e)}
        )


async def _submit(session: GameSession, tx: Transaction) -> TransactionResponse:
    """Apply a transaction and notify spectators of the outcome."""
    try:
        receipt = session.submit(tx)
    except ProtocolViolation as e:
        raise HTTPException(
            status_code=400,
            detail={"error": e.violation_type.value, "message": e.message},
        )

    state = session.get_public_state()
    await session.notify("TRANSACTION_ACCEPTED", receipt=receipt.to_dict(), state=state)
    if state["gameOver"]:
        await session.notify("GAME_OVER", winner=state["winner"])

    return TransactionResponse(
        accepted=True,
        turn=receipt.turn_count,
        writtenSlots=receipt.written_slots,
        hit=receipt.hit,
        winner=state["winner"],
    )


# ============================================
# GAME METHODS
# ============================================


@app.get("/api")
async def health():
    return {
        "service": "ZK Battleships",
        "status": "operational",
        "activeGames": len(games.games),
    }


@app.post("/api/games", response_model=CreateGameResponse)
async def deploy_game():
    """Deploy a new game and run initGame.

    Example:
        POST /api/games
        -> {"gameId": "game-abc123", "state": {"turnCount": 0, ...}}
    """
    session = games.deploy()
    return CreateGameResponse(gameId=session.id, state=session.get_public_state())


@app.get("/api/games/{game_id}/state", response_model=GameStateResponse, responses=VIOLATION_RESPONSES)
async def get_game_state(game_id: str):
    """Read the current on-channel slots."""
    session = _get_session(game_id)
    state = session.get_public_state()
    return GameStateResponse(
        gameId=game_id, turn=state["turnCount"], winner=state["winner"], state=state
    )


@app.post("/api/games/{game_id}/host", response_model=TransactionResponse, responses=VIOLATION_RESPONSES)
async def host_game(game_id: str, request: RegisterRequest):
    """Register the host.

    Example:
        POST /api/games/game-abc123/host
        {"sender": "B62q...", "board": "<120-bit board>", "salt": "42"}
    """
    session = _get_session(game_id)
    tx = Transaction(
        sender=request.sender,
        method="host_game",
        args={"encoded_board": int(request.board), "salt": int(request.salt)},
    )
    return await _submit(session, tx)


@app.post("/api/games/{game_id}/join", response_model=TransactionResponse, responses=VIOLATION_RESPONSES)
async def join_game(game_id: str, request: RegisterRequest):
    """Register the joiner."""
    session = _get_session(game_id)
    tx = Transaction(
        sender=request.sender,
        method="join_game",
        args={"encoded_board": int(request.board), "salt": int(request.salt)},
    )
    return await _submit(session, tx)


@app.post("/api/games/{game_id}/first-turn", response_model=TransactionResponse, responses=VIOLATION_RESPONSES)
async def first_turn(game_id: str, request: FirstTurnRequest):
    """Fire the host's opening shot."""
    session = _get_session(game_id)
    tx = Transaction(
        sender=request.sender,
        method="first_turn",
        args={
            "encoded_shot": request.shot,
            "encoded_board": int(request.board),
            "salt": int(request.salt),
            "target_witness": _witness(request.targetWitness),
        },
    )
    return await _submit(session, tx)


@app.post("/api/games/{game_id}/attack", response_model=TransactionResponse, responses=VIOLATION_RESPONSES)
async def attack(game_id: str, request: AttackRequest):
    """Report the pending shot and fire the next one.

    Example:
        POST /api/games/game-abc123/attack
        {
          "sender": "B62q...", "board": "...", "salt": "42", "shot": 0,
          "targetWitness": {"path": ["0", "..."], "isLeft": [false, true, ...]},
          "hitWitness": {"path": ["0", "..."], "isLeft": [true, true, ...]}
        }
    """
    session = _get_session(game_id)
    tx = Transaction(
        sender=request.sender,
        method="attack",
        args={
            "encoded_shot": request.shot,
            "encoded_board": int(request.board),
            "salt": int(request.salt),
            "target_witness": _witness(request.targetWitness),
            "hit_witness": _witness(request.hitWitness),
        },
    )
    return await _submit(session, tx)


@app.get("/api/games/{game_id}/receipts", response_model=ReceiptsResponse, responses=VIOLATION_RESPONSES)
async def get_receipts(game_id: str):
    """Ordered log of accepted and rejected transactions."""
    session = _get_session(game_id)
    return ReceiptsResponse(
        gameId=game_id, receipts=[receipt.to_dict() for receipt in session.ledger.receipts]
    )


@app.delete("/api/games/{game_id}", responses=VIOLATION_RESPONSES)
async def remove_game(game_id: str):
    if not games.remove(game_id):
        raise _not_found()
    return {"message": f"Game {game_id} removed"}


# ============================================
# SPECTATOR STREAM
# ============================================


@app.websocket("/ws/games/{game_id}")
async def watch_game(websocket: WebSocket, game_id: str):
    """Stream a game's accepted transactions.

    Events sent:
    - CONNECTED: current public state, on connect
    - TRANSACTION_ACCEPTED: receipt and new state (players use this to
      know it is their turn)
    - GAME_OVER: a fleet was sunk
    - PONG: reply to a client PING
    """
    session = games.get(game_id)
    if session is None:
        await websocket.close(code=1008, reason="Game not found")
        return

    await websocket.accept()
    session.watch(websocket)

    try:
        await websocket.send_json(
            {"type": "CONNECTED", "gameId": game_id, "state": session.get_public_state()}
        )
        while True:
            message = await websocket.receive_json()
            if message.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})

    except WebSocketDisconnect:
        logger.info(f"Spectator disconnected from game {game_id}")
    except Exception as e:
        logger.error(f"Spectator stream error in game {game_id}: {e}", exc_info=True)
    finally:
        session.unwatch(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
