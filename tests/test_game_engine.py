from game_engine import DeductionGame
from models import AttemptStatus, HypothesisStatus, Screen, StepKind
from validity import NO_EVIDENCE_MESSAGE
from tests.conftest import investigate


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

def test_session_flow_welcome_intro_gameplay() -> None:
    game = DeductionGame()
    assert game.screen == Screen.WELCOME
    assert game.session is None

    session = game.start_session()
    assert game.screen == Screen.INTRO
    assert session.current_attempt == 1
    assert session.attempts == []

    game.start_attempt()
    assert game.screen == Screen.GAMEPLAY
    assert len(session.attempts) == 1
    assert session.attempts[0].status == AttemptStatus.IN_PROGRESS


def test_operations_without_session_fail_cleanly() -> None:
    game = DeductionGame()
    assert game.start_attempt() is None
    assert game.retry_attempt() is None

    action = game.perform_action("check_stock")
    assert action.success is False
    assert action.discovered_evidence_ids == []

    assert game.reject_hypothesis("H1", ["E1"]).success is False
    assert game.declare_solution("H3", ["E3"]).success is False
    game.end_investigation()
    assert game.screen == Screen.WELCOME

    result = game.compute_result()
    assert result.score == 0
    assert result.timeline == []


def test_restart_discards_session(game) -> None:
    investigate(game, "check_stock")
    game.restart_session()
    assert game.screen == Screen.WELCOME
    assert game.session is None
    assert game.discovered_evidence == []


# ---------------------------------------------------------------------------
# Investigation
# ---------------------------------------------------------------------------

def test_repeat_action_yields_nothing_new(game) -> None:
    first = game.perform_action("check_stock")
    second = game.perform_action("check_stock")

    assert first.discovered_evidence_ids == ["E3"]
    assert second.success is True
    assert second.discovered_evidence_ids == []
    assert game.discovered_evidence == ["E3"]
    assert game.session.discovered_evidence == {"E3"}
    assert game.steps_used == 2


def test_multi_yield_action_skips_already_found_evidence(game) -> None:
    investigate(game, "review_invoices")
    result = game.perform_action("review_reports")
    assert result.discovered_evidence_ids == ["E6"]
    assert game.discovered_evidence == ["E2", "E6"]
    assert result.character_id == "accountant"
    assert result.dialogue


def test_decision_and_unknown_actions_are_refused(game) -> None:
    assert game.perform_action("declare_solution").success is False
    assert game.perform_action("bribe_auditor").success is False
    assert game.current_attempt.steps == []


def test_step_budget_is_enforced(game) -> None:
    investigate(game, *["talk_owner"] * game.config.max_steps)
    steps_before = list(game.current_attempt.steps)

    result = game.perform_action("check_stock")

    assert result.success is False
    assert result.discovered_evidence_ids == []
    assert game.current_attempt.steps == steps_before
    assert game.steps_used == game.config.max_steps
    assert game.remaining_steps == 0


def test_discovery_and_step_counter_are_monotonic(game) -> None:
    seen, used = [], 0
    for action_id in ["talk_salesperson", "talk_salesperson", "review_reports", "check_stock"]:
        game.perform_action(action_id)
        assert game.discovered_evidence[: len(seen)] == seen
        assert game.steps_used >= used
        seen, used = game.discovered_evidence, game.steps_used


# ---------------------------------------------------------------------------
# Rejection
# ---------------------------------------------------------------------------

def test_valid_rejection_is_free_and_marks_hypothesis(game) -> None:
    investigate(game, "talk_salesperson")
    result = game.reject_hypothesis("H1", ["E1"])

    assert result.success is True
    assert game.hypothesis_status("H1") == HypothesisStatus.REJECTED
    assert game.current_attempt.rejected_hypotheses == ["H1"]
    assert game.steps_used == 1
    assert game.current_attempt.steps[-1].kind == StepKind.REJECT


def test_trap_rejection_keeps_hypothesis_active(game) -> None:
    investigate(game, "review_invoices")
    result = game.reject_hypothesis("H2", ["E2"])

    assert result.success is False
    assert result.is_trap is True
    assert game.hypothesis_status("H2") == HypothesisStatus.ACTIVE
    assert game.current_attempt.reasoning_mistakes == 1
    assert game.current_attempt.steps[-1].valid is False


def test_ground_truth_rejection_is_recorded_as_mistake(game) -> None:
    investigate(game, "check_stock")
    result = game.reject_hypothesis("H3", ["E3"])
    assert result.success is False
    assert game.hypothesis_status("H3") == HypothesisStatus.ACTIVE
    assert game.current_attempt.reasoning_mistakes == 1


def test_undiscovered_evidence_is_an_invalid_rejection(game) -> None:
    result = game.reject_hypothesis("H1", ["E1"])

    assert result.success is False
    assert result.message == NO_EVIDENCE_MESSAGE
    [step] = game.current_attempt.rejection_steps()
    assert step.valid is False
    assert step.evidence_ids == ()
    assert game.current_attempt.reasoning_mistakes == 1
    assert game.hypothesis_status("H1") == HypothesisStatus.ACTIVE


def test_empty_rejection_is_recorded_as_mistake(game) -> None:
    investigate(game, "check_stock")
    result = game.reject_hypothesis("H1", [])

    assert result.success is False
    assert len(game.current_attempt.rejection_steps()) == 1
    assert game.current_attempt.reasoning_mistakes == 1
    assert game.steps_used == 1


def test_already_rejected_hypothesis_is_refused(game) -> None:
    investigate(game, "talk_salesperson")
    game.reject_hypothesis("H1", ["E1"])
    result = game.reject_hypothesis("H1", ["E1"])
    assert result.success is False
    assert len(game.current_attempt.rejection_steps()) == 1


def test_per_hypothesis_rejection_cap(game) -> None:
    investigate(game, "review_invoices")
    game.reject_hypothesis("H2", ["E2"])
    game.reject_hypothesis("H2", ["E2"])
    capped = game.reject_hypothesis("H2", ["E2"])

    assert capped.success is False
    assert len(game.current_attempt.rejection_steps("H2")) == 2
    assert game.current_attempt.reasoning_mistakes == 2


def test_per_attempt_rejection_cap(game) -> None:
    investigate(game, "review_invoices", "check_stock")
    game.reject_hypothesis("H1", ["E2"])
    game.reject_hypothesis("H1", ["E2"])
    game.reject_hypothesis("H2", ["E2"])
    game.reject_hypothesis("H3", ["E3"])
    capped = game.reject_hypothesis("H2", ["E3"])

    assert capped.success is False
    assert len(game.current_attempt.rejection_steps()) == 4
    assert game.hypothesis_status("H2") == HypothesisStatus.ACTIVE


# ---------------------------------------------------------------------------
# Declaration and attempt exhaustion
# ---------------------------------------------------------------------------

def test_correct_declaration_reaches_success(game) -> None:
    investigate(game, "check_stock")
    result = game.declare_solution("H3", ["E3"])

    assert result.success is True
    assert game.screen == Screen.SUCCESS
    attempt = game.current_attempt
    assert attempt.status == AttemptStatus.SUCCESS
    assert attempt.final_decision.correct
    assert attempt.steps[-1].kind == StepKind.DECLARE


def test_declaration_drops_undiscovered_evidence(game) -> None:
    investigate(game, "talk_cashier")
    game.declare_solution("H3", ["E3", "E4"])
    assert game.current_attempt.final_decision.evidence_ids == ("E4",)


def test_wrong_declaration_goes_to_failure_then_retry(game) -> None:
    investigate(game, "review_invoices")
    result = game.declare_solution("H2", ["E2"])

    assert result.success is False
    assert result.message == game.scenario.wrong_declare_message
    assert game.screen == Screen.FAILURE
    assert game.failure_feedback

    game.retry_attempt()
    assert game.screen == Screen.GAMEPLAY
    assert game.session.current_attempt == 2
    assert game.discovered_evidence == []
    assert game.steps_used == 0
    assert game.session.discovered_evidence == {"E2"}
    assert game.session.attempts[0].status == AttemptStatus.FAILED


def test_finished_attempt_accepts_no_more_actions(game) -> None:
    investigate(game, "check_stock")
    game.declare_solution("H3", ["E3"])
    steps = list(game.current_attempt.steps)

    assert game.perform_action("talk_cashier").success is False
    assert game.reject_hypothesis("H1", ["E3"]).success is False
    assert game.current_attempt.steps == steps


def test_exhausting_attempts_is_game_over(game) -> None:
    for ordinal in range(1, game.config.max_attempts + 1):
        assert game.session.current_attempt == ordinal
        game.end_investigation()
        if ordinal < game.config.max_attempts:
            assert game.screen == Screen.FAILURE
            game.retry_attempt()

    assert game.screen == Screen.GAMEOVER
    assert game.session.current_attempt == game.config.max_attempts
    assert game.retry_attempt() is game.session
    assert game.screen == Screen.GAMEOVER
    assert all(a.status == AttemptStatus.NO_DECISION for a in game.session.attempts)


def test_compute_result_for_perfect_run(game) -> None:
    investigate(game, "talk_salesperson", "check_stock", "talk_cashier")
    game.reject_hypothesis("H1", ["E1"])
    game.reject_hypothesis("H2", ["E3"])
    game.declare_solution("H3", ["E3", "E4"])

    result = game.compute_result()
    assert result.score == 1000
    assert result.rank == "S"
    assert result.rank_icon == "🏆"
    assert result.attempts_used == 1
    assert len(result.timeline) == 6
    assert result.feedback_text.startswith("Outstanding")
