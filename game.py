#!/usr/bin/env python3
"""ZK Battleships - Game simulation entry point.

Plays a scripted game between two players on a local ledger. Each player
keeps its own board, salt and history trees; the ledger only ever sees
the eight on-channel slots and the witnesses sent with each transaction.

The default scenario is the fastest possible game: the host sinks every
ship of the joiner in 17 shots.
"""

import argparse
import json
import logging
import sys

from src.client.player_client import BattleshipsClient
from src.engine.errors import ProtocolViolation
from src.models.board import BoardLayout
from src.server.ledger import LocalLedger
from src.utils.serialization import save_client, save_game_state

logger = logging.getLogger(__name__)

DEFAULT_SCENARIO = {
    "boards": {
        "host": [[0, 4, 0], [9, 3, 1], [3, 5, 1], [2, 2, 0], [0, 9, 0]],
        "joiner": [[1, 0, 0], [1, 1, 0], [1, 2, 0], [1, 3, 0], [1, 4, 0]],
    },
    "shots": {
        "host": [
            [1, 0], [2, 0], [3, 0], [4, 0], [5, 0],
            [1, 1], [2, 1], [3, 1], [4, 1],
            [1, 2], [2, 2], [3, 2],
            [1, 3], [2, 3], [3, 3],
            [1, 4], [2, 4],
        ],
        "joiner": [
            [9, 9], [9, 8], [9, 7], [9, 6], [9, 5],
            [9, 4], [9, 3], [9, 2], [9, 1],
            [9, 0], [8, 9], [0, 8],
            [8, 7], [8, 6], [8, 8],
            [8, 4], [8, 5],
        ],
    },
}


class GameSimulation:
    """Drives two clients through a scripted game."""

    def __init__(self, scenario: dict, ledger: LocalLedger | None = None):
        """Initialize simulation.

        Args:
            scenario: Dict with "boards" and "shots", each keyed by "host"/"joiner"
            ledger: Ledger to play on (a fresh one if None)
        """
        self.ledger = ledger or LocalLedger()
        self.host_shots = [tuple(shot) for shot in scenario["shots"]["host"]]
        self.joiner_shots = [tuple(shot) for shot in scenario["shots"]["joiner"]]
        if len(self.host_shots) != len(self.joiner_shots):
            raise ValueError("Host and joiner must have the same number of shots")

        self.host = BattleshipsClient.initialize(
            self.ledger, "host-address", BoardLayout.from_triples(scenario["boards"]["host"])
        )
        self.joiner = BattleshipsClient.initialize(
            self.ledger, "joiner-address", BoardLayout.from_triples(scenario["boards"]["joiner"])
        )

    def run(self) -> dict:
        """Play every scripted shot and return the final summary."""
        print("\n" + "=" * 60)
        print("ZK Battleships: Game Simulation")
        print("=" * 60)

        print("\nHost creates a new game")
        self.host.host_game()

        print("Joiner joins the game")
        self.joiner.join_game()

        print(f"Host plays opening shot at {self.host_shots[0]}")
        self.host.play_first_turn(self.host_shots[0])

        for nonce in range(1, len(self.host_shots)):
            self._play(self.joiner, self.joiner_shots[nonce - 1], "Joiner")
            self._play(self.host, self.host_shots[nonce], "Host")

        # Last report: the final host shot may sink the joiner's fleet
        self._play(self.joiner, self.joiner_shots[-1], "Joiner")

        # Any further report reverts once a fleet is sunk
        if self.ledger.machine.is_game_over(self.ledger.state):
            try:
                self.host.play_turn((0, 0))
            except ProtocolViolation as e:
                logger.info(f"Final host report rejected: {e.message}")

        return self.host.game_summary()

    def _play(self, client: BattleshipsClient, target: tuple[int, int], name: str) -> None:
        turn = self.ledger.state.turn_count
        receipt = client.play_turn(target)
        result = "HIT" if receipt.hit else "miss"
        print(f"Turn {turn:3d}: {name} reports {result}, fires at {target}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ZK Battleships - two-player hidden-board game simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Play the built-in 17-shot game
  %(prog)s --scenario game.json         # Play boards and shots from a JSON file
  %(prog)s --save final.json            # Save final on-channel state
  %(prog)s --debug                      # Show every accepted transaction
        """,
    )
    parser.add_argument(
        "--scenario",
        type=str,
        metavar="FILE",
        help='JSON file with {"boards": {"host", "joiner"}, "shots": {"host", "joiner"}}',
    )
    parser.add_argument(
        "--save",
        type=str,
        metavar="FILE",
        help="Save final game state (and each player's private state) to JSON",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    scenario = DEFAULT_SCENARIO
    if args.scenario:
        try:
            with open(args.scenario) as f:
                scenario = json.load(f)
        except FileNotFoundError:
            print(f"Error: File {args.scenario} not found.")
            sys.exit(1)
        except json.JSONDecodeError as e:
            print(f"Error loading scenario: {e}")
            sys.exit(1)

    try:
        simulation = GameSimulation(scenario)
        summary = simulation.run()
    except (ProtocolViolation, ValueError) as e:
        print(f"Simulation aborted: {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print(f"Turns played: {summary['turn']}")
    print(f"Hits taken: host {summary['hitCounts'][0]}, joiner {summary['hitCounts'][1]}")
    if summary["winner"]:
        winner = "Host" if summary["winner"] == 1 else "Joiner"
        print(f"{winner} wins by sinking all of the adversary's ships!")
    else:
        print("No winner yet: both fleets are still afloat.")

    if args.save:
        save_game_state(simulation.ledger.state, args.save)
        save_client(simulation.host, f"host_{args.save}")
        save_client(simulation.joiner, f"joiner_{args.save}")
        print(f"Game saved to {args.save}")


if __name__ == "__main__":
    main()
