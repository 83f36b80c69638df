from feedback import build_evaluation, game_over_feedback, generate_feedback
from models import CaseOutcome, EliminationQuality, EvidenceStrength, NoiseQuality, ThinkingLevel
from tests.conftest import investigate


def test_no_decision_feedback(game, scenario) -> None:
    investigate(game, "check_stock")
    game.end_investigation()
    attempt = game.session.attempts[0]

    evaluation = build_evaluation(attempt, scenario)
    assert evaluation.outcome == CaseOutcome.NO_DECISION
    assert evaluation.thinking == ThinkingLevel.UNACCEPTABLE
    assert "never committed" in generate_feedback(attempt, scenario)


def test_right_hypothesis_with_unrelated_evidence_is_diagnosed_specifically(game, scenario) -> None:
    investigate(game, "check_stock", "review_invoices")
    game.declare_solution("H3", ["E3", "E2"])
    text = generate_feedback(game.current_attempt, scenario)
    assert "right hypothesis" in text
    assert "unrelated" in text


def test_right_hypothesis_backed_by_opinion(game, scenario) -> None:
    investigate(game, "check_stock", "talk_customer")
    game.declare_solution("H3", ["E3", "E5"])
    attempt = game.current_attempt

    evaluation = build_evaluation(attempt, scenario)
    assert evaluation.evidence_level == EvidenceStrength.NOISE
    assert evaluation.noise == NoiseQuality.USED_NOISE
    assert generate_feedback(attempt, scenario).startswith("Right conclusion, wrong reason")


def test_overweighted_misleading_indicator(game, scenario) -> None:
    investigate(game, "review_invoices")
    game.declare_solution("H2", ["E2"])
    attempt = game.current_attempt

    assert build_evaluation(attempt, scenario).noise == NoiseQuality.OVERWEIGHTED
    assert "general indicator" in generate_feedback(attempt, scenario)


def test_declaring_a_self_rejected_hypothesis(game, scenario) -> None:
    investigate(game, "talk_salesperson")
    game.reject_hypothesis("H1", ["E1"])
    game.declare_solution("H1", ["E1"])
    assert "already ruled out" in generate_feedback(game.current_attempt, scenario)


def test_declaring_without_decisive_evidence(game, scenario) -> None:
    investigate(game, "talk_salesperson")
    game.declare_solution("H2", [])
    assert "decisive evidence" in generate_feedback(game.current_attempt, scenario)


def test_success_feedback_depends_on_path_not_just_score(game, scenario) -> None:
    investigate(game, "check_stock")
    game.declare_solution("H3", ["E3"])
    concluded_first = generate_feedback(game.current_attempt, scenario, rank="B")

    game.restart_session()
    game.start_session()
    game.start_attempt()
    investigate(game, "talk_salesperson", "check_stock")
    game.reject_hypothesis("H1", ["E1"])
    game.reject_hypothesis("H2", ["E3"])
    game.declare_solution("H3", ["E3"])
    eliminated_first = generate_feedback(game.current_attempt, scenario, rank="B")

    assert concluded_first != eliminated_first
    assert "rule out the alternatives" in concluded_first


def test_imprecise_rejection_is_called_out_on_success(game, scenario) -> None:
    investigate(game, "check_stock", "review_invoices")
    game.reject_hypothesis("H2", ["E2"])
    game.declare_solution("H3", ["E3"])
    attempt = game.current_attempt

    evaluation = build_evaluation(attempt, scenario)
    assert evaluation.elimination == EliminationQuality.HAS_WRONG
    assert "once" in evaluation.cards["elimination"].text
    assert "imprecise rejection" in generate_feedback(attempt, scenario)


def test_weak_success(game, scenario) -> None:
    investigate(game, "talk_cashier")
    game.declare_solution("H3", ["E4"])
    attempt = game.current_attempt
    assert build_evaluation(attempt, scenario).thinking == ThinkingLevel.WEAK
    assert "thin" in generate_feedback(attempt, scenario)


def test_game_over_feedback_uses_last_attempt(game, scenario) -> None:
    assert "Out of attempts" in game_over_feedback(None, scenario)
    game.end_investigation()
    assert game_over_feedback(game.session, scenario) == game.failure_feedback
