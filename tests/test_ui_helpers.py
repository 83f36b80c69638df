from models import Hypothesis, HypothesisStatus
from ui_helpers import format_actions, format_evidence, format_hypotheses, format_result, parse_id_list
from tests.conftest import investigate


def test_parse_id_list() -> None:
    assert parse_id_list("h3 e3, E4") == ["H3", "E3", "E4"]
    assert parse_id_list("") == []


def test_format_hypotheses_marks_rejected() -> None:
    text = format_hypotheses([
        Hypothesis("H1", "One"),
        Hypothesis("H2", "Two", HypothesisStatus.REJECTED),
    ])
    assert "• H1: One" in text
    assert "✗ H2: Two  (rejected)" in text


def test_format_evidence_and_actions(scenario) -> None:
    assert format_evidence(scenario, []) == "  (No evidence yet.)"
    assert "E3:" in format_evidence(scenario, ["E3"])
    actions = format_actions(scenario)
    assert "check_stock" in actions
    assert "declare_solution" not in actions


def test_format_result(game) -> None:
    investigate(game, "check_stock")
    game.declare_solution("H3", ["E3"])
    text = format_result(game.compute_result())
    assert "Score   : 450/1000" in text
    assert "Timeline:" in text
