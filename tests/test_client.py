"""Tests for the player client and full simulated games."""

import pytest

from game import DEFAULT_SCENARIO, GameSimulation
from src.client.player_client import BattleshipsClient
from src.engine.errors import (
    AccessViolation,
    GameOverViolation,
    NullifiedTargetViolation,
)
from src.models.board import BoardLayout
from src.server.ledger import LocalLedger

HOST_TRIPLES = DEFAULT_SCENARIO["boards"]["host"]
JOINER_TRIPLES = DEFAULT_SCENARIO["boards"]["joiner"]


@pytest.fixture
def players():
    """A ledger with a registered host and joiner."""
    ledger = LocalLedger()
    host = BattleshipsClient.initialize(ledger, "host", BoardLayout.from_triples(HOST_TRIPLES))
    joiner = BattleshipsClient.initialize(ledger, "joiner", BoardLayout.from_triples(JOINER_TRIPLES))
    host.host_game()
    joiner.join_game()
    return ledger, host, joiner


def test_registration(players):
    ledger, host, joiner = players
    assert ledger.state.player1_id == host.player_id
    assert ledger.state.player2_id == joiner.player_id
    assert host.player_index == 0
    assert joiner.player_index == 1


def test_salts_differ_between_clients(players):
    _, host, joiner = players
    assert host.salt != joiner.salt


def test_trees_follow_the_ledger(players):
    """Each client rebuilds the adversary's writes and keeps matching roots."""
    ledger, host, joiner = players
    host.play_first_turn((1, 0))
    joiner.play_turn((9, 9))
    host.play_turn((2, 0))
    joiner.play_turn((9, 6))

    host.sync()
    for client in (host, joiner):
        assert client.target_tree.get_root() == ledger.state.target_root
    assert host.hit_tree.get_root() == ledger.state.hit_root
    assert joiner.hit_tree.get_root() == ledger.state.hit_root


def test_reported_hits(players):
    ledger, host, joiner = players
    host.play_first_turn((1, 0))
    receipt = joiner.play_turn((0, 8))
    assert receipt.hit is True
    receipt = host.play_turn((9, 9))
    assert receipt.hit is False
    assert host.game_summary()["hitCounts"] == [0, 1]
    assert host.game_summary()["joinerHitsTaken"] == ["A1"]


def test_local_guard_refuses_scored_target(players):
    ledger, host, joiner = players
    host.play_first_turn((1, 0))
    joiner.play_turn((9, 9))
    receipts_before = len(ledger.receipts)

    with pytest.raises(NullifiedTargetViolation, match="A1"):
        host.play_turn((1, 0))
    assert len(ledger.receipts) == receipts_before


def test_outsider_cannot_play(players):
    ledger, host, _ = players
    host.play_first_turn((1, 0))
    outsider = BattleshipsClient.initialize(ledger, "outsider", BoardLayout.from_triples(JOINER_TRIPLES))
    with pytest.raises(AccessViolation):
        outsider.play_turn((5, 5))
    assert ledger.receipts[-1].violation_type == "access_violation"


def test_summary_before_any_shot(players):
    _, host, _ = players
    summary = host.game_summary()
    assert summary["player"] == 1
    assert summary["turn"] == 0
    assert summary["nextPlayer"] == 1
    assert summary["winner"] is None


class TestFastestGame:
    """The host sinks the joiner's fleet with 17 straight hits."""

    def test_simulation(self):
        simulation = GameSimulation(DEFAULT_SCENARIO)
        summary = simulation.run()

        assert summary["turn"] == 34
        assert summary["hitCounts"] == [4, 17]
        assert summary["winner"] == 1
        assert len(summary["joinerHitsTaken"]) == 17
        assert summary["hostHitsTaken"] == ["G9", "F9", "E9", "D9"]

    def test_no_attack_after_game_over(self):
        simulation = GameSimulation(DEFAULT_SCENARIO)
        simulation.run()

        last = simulation.ledger.receipts[-1]
        assert not last.accepted
        assert last.violation_type == "game_over_violation"
        with pytest.raises(GameOverViolation):
            simulation.joiner.play_turn((5, 5))

    def test_every_transaction_but_the_last_is_accepted(self):
        simulation = GameSimulation(DEFAULT_SCENARIO)
        simulation.run()
        # host_game, join_game, first_turn and 33 attacks
        assert len(simulation.ledger.accepted_receipts()) == 36

    def test_mismatched_shot_lists(self):
        scenario = {
            "boards": DEFAULT_SCENARIO["boards"],
            "shots": {"host": [[0, 0]], "joiner": []},
        }
        with pytest.raises(ValueError, match="same number of shots"):
            GameSimulation(scenario)


def test_unfinished_scenario_plays_only_scripted_shots():
    """Without a sunk fleet the simulation stops after the last scripted report."""
    scenario = {
        "boards": DEFAULT_SCENARIO["boards"],
        "shots": {"host": [[1, 0], [2, 0]], "joiner": [[9, 9], [9, 8]]},
    }
    simulation = GameSimulation(scenario)
    summary = simulation.run()

    assert summary["turn"] == 2 * len(scenario["shots"]["host"])
    assert summary["winner"] is None
    assert summary["hitCounts"] == [0, 2]
    assert all(receipt.accepted for receipt in simulation.ledger.receipts)
