"""Game state and player state serialization to/from JSON.

This module saves the eight on-channel slots and each player's private
off-channel state (board, salt, history trees) so a game can be resumed.
Field elements are written as decimal strings to survive JSON readers
that round large numbers.
"""

import json
from pathlib import Path
from typing import Any

from ..client.player_client import BattleshipsClient
from ..engine.merkle import MerkleTree
from ..models.board import BoardLayout
from ..models.game import GameState
from ..server.ledger import LocalLedger


def _resolve_path(filepath: str, create_dir: bool = False) -> Path:
    """Resolve relative paths into the project's state/ directory."""
    path = Path(filepath)
    if not path.is_absolute():
        state_dir = Path(__file__).parent.parent.parent / "state"
        if create_dir:
            state_dir.mkdir(exist_ok=True)
        path = state_dir / filepath
    return path


def save_game_state(state: GameState, filepath: str) -> None:
    """Save the on-channel slots to a JSON file.

    Args:
        state: Game state to save
        filepath: Path to save file (will be created in /state directory if relative)

    Example:
        save_game_state(ledger.state, "game.json")  # Saves to state/game.json
    """
    path = _resolve_path(filepath, create_dir=True)
    with open(path, "w") as f:
        json.dump(_serialize_game_state(state), f, indent=2)


def load_game_state(filepath: str) -> GameState:
    """Load on-channel slots from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If JSON is invalid or a slot is malformed
    """
    path = _resolve_path(filepath)
    with open(path) as f:
        data = json.load(f)
    return _deserialize_game_state(data)


def save_client(client: BattleshipsClient, filepath: str) -> None:
    """Save a player's private off-channel state to a JSON file."""
    path = _resolve_path(filepath, create_dir=True)
    with open(path, "w") as f:
        json.dump(_serialize_client(client), f, indent=2)


def load_client(filepath: str, ledger: LocalLedger) -> BattleshipsClient:
    """Restore a player's client and reattach it to a ledger."""
    path = _resolve_path(filepath)
    with open(path) as f:
        data = json.load(f)
    return _deserialize_client(data, ledger)


def _serialize_game_state(state: GameState) -> dict[str, Any]:
    """Convert GameState to a JSON-compatible dictionary."""
    data: dict[str, Any] = {}
    for name, value in state.to_dict().items():
        data[name] = value if isinstance(value, bool) else str(value)
    return data


def _deserialize_game_state(data: dict[str, Any]) -> GameState:
    """Reconstruct GameState from a dictionary."""
    slots = {}
    for name in GameState.slot_names():
        if name not in data:
            raise ValueError(f"Missing slot in saved game state: {name}")
        slots[name] = bool(data[name]) if name == "hit_result" else int(data[name])
    return GameState(**slots)


def _serialize_tree(tree: MerkleTree) -> dict[str, str]:
    return {str(index): str(value) for index, value in tree.leaves().items()}


def _deserialize_tree(data: dict[str, str]) -> MerkleTree:
    return MerkleTree.from_leaves({int(index): int(value) for index, value in data.items()})


def _serialize_client(client: BattleshipsClient) -> dict[str, Any]:
    """Convert a client's private state to a dictionary."""
    return {
        "address": client.address,
        "board": client.board.to_triples(),
        "salt": str(client.salt),
        "playerIndex": client.player_index,
        "targetTree": _serialize_tree(client.target_tree),
        "hitTree": _serialize_tree(client.hit_tree),
    }


def _deserialize_client(data: dict[str, Any], ledger: LocalLedger) -> BattleshipsClient:
    """Reconstruct a client from a dictionary."""
    client = BattleshipsClient(
        ledger=ledger,
        address=data["address"],
        board=BoardLayout.from_triples(data["board"]),
        salt=int(data["salt"]),
        target_tree=_deserialize_tree(data.get("targetTree", {})),
        hit_tree=_deserialize_tree(data.get("hitTree", {})),
    )
    client.player_index = data.get("playerIndex")
    return client
