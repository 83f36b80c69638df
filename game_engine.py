"""
game_engine.py
==============
Core rules engine for The Case of the Missing Revenue.

Contains:
  DeductionGame — the single orchestrating class that owns the play session,
                  drives the screen state machine, and exposes a clean API
                  consumed by any presentation layer (the CLI in cli.py, or a
                  web/desktop front end).

Public API summary:
    game = DeductionGame()
    game.start_session()                       → GameSession
    game.start_attempt()                       → GameSession | None
    game.perform_action(action_id)             → ActionResult
    game.reject_hypothesis(hid, evidence_ids)  → RejectionResult
    game.declare_solution(hid, evidence_ids)   → DeclarationResult
    game.end_investigation()                   → None
    game.retry_attempt()                       → GameSession | None
    game.restart_session()                     → None
    game.compute_result()                      → GameResult
    game.screen                                → Screen (what the UI should show)

Every operation is total. Calling one in the wrong state (no session, wrong
screen, budget exhausted, unknown ID) returns an explicit failure result and
leaves the session untouched; nothing here raises during normal play.

Logging
-------
Every significant event is emitted through the standard ``logging`` module
under the ``missing_revenue.game_engine`` logger. Configure handlers once at
your entry point (see cli.py); this module never does.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Optional

from case_data import MAIN_SCENARIO
from config import GAME_CONFIG, RANK_CONFIG, SCORING_CONFIG, GameConfig, RankConfig, ScoringConfig
from feedback import OUTCOME_TITLES, THINKING_TITLES, build_evaluation, game_over_feedback, generate_feedback
from models import (
    ActionKind,
    ActionResult,
    Attempt,
    AttemptStatus,
    CaseOutcome,
    DeclarationResult,
    FinalDecision,
    GameResult,
    GameSession,
    Hypothesis,
    HypothesisStatus,
    RejectionResult,
    Scenario,
    Screen,
    StepKind,
)
from scoring import calculate_score, determine_rank
from timeline import build_timeline
from validity import can_reject, evaluate_declaration

# ---------------------------------------------------------------------------
# Module-level logger
# ---------------------------------------------------------------------------
logger = logging.getLogger("missing_revenue.game_engine")

NO_INVESTIGATION = "No active investigation."


class DeductionGame:
    """
    Main rules engine.

    Owns the GameSession and the per-attempt working copies of hypothesis
    status. The presentation layer interacts with this class exclusively and
    decides what to render from ``screen``.

    Attributes:
        scenario:         Read-only case definition.
        config:           Session / attempt limits.
        scoring_config:   Weights used by compute_result().
        rank_config:      Grade thresholds used by compute_result().
        screen:           Current state-machine value.
        session:          The live session, or None before start / after restart.
        hypotheses:       Working copies of the scenario hypotheses with live status.
        failure_feedback: Diagnosis of the last failed attempt, for the failure screen.
    """

    def __init__(
        self,
        scenario:       Scenario = MAIN_SCENARIO,
        config:         GameConfig = GAME_CONFIG,
        scoring_config: ScoringConfig = SCORING_CONFIG,
        rank_config:    RankConfig = RANK_CONFIG,
    ) -> None:
        self.scenario       = scenario
        self.config         = config
        self.scoring_config = scoring_config
        self.rank_config    = rank_config

        self.screen: Screen = Screen.WELCOME
        self.session: Optional[GameSession] = None
        self.hypotheses: List[Hypothesis] = []
        self.failure_feedback: str = ""
        self._reset_working_state()

        logger.info(
            "DeductionGame initialised — case_id=%s, max_attempts=%d, max_steps=%d",
            scenario.id,
            config.max_attempts,
            config.max_steps,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_attempt(self) -> Optional[Attempt]:
        return self.session.active_attempt if self.session else None

    @property
    def discovered_evidence(self) -> List[str]:
        attempt = self.current_attempt
        return list(attempt.discovered_evidence) if attempt else []

    @property
    def steps_used(self) -> int:
        attempt = self.current_attempt
        return attempt.steps_used if attempt else 0

    @property
    def remaining_steps(self) -> int:
        return self.config.max_steps - self.steps_used

    @property
    def remaining_attempts(self) -> int:
        if self.session is None:
            return self.config.max_attempts
        return self.session.max_attempts - self.session.current_attempt + 1

    def hypothesis_status(self, hypothesis_id: str) -> Optional[HypothesisStatus]:
        for hyp in self.hypotheses:
            if hyp.id == hypothesis_id:
                return hyp.status
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset_working_state(self) -> None:
        self.hypotheses = list(self.scenario.hypotheses)
        self.failure_feedback = ""

    def _playable_attempt(self, operation: str) -> Optional[Attempt]:
        """Return the attempt if gameplay is live, else log why not and return None."""
        if self.session is None:
            logger.warning("%s called with no active session.", operation)
            return None
        attempt = self.session.active_attempt
        if self.screen != Screen.GAMEPLAY or attempt is None or not attempt.in_progress:
            logger.warning(
                "%s called outside gameplay — screen=%s, attempt_status=%s",
                operation,
                self.screen.value,
                attempt.status.value if attempt else None,
            )
            return None
        return attempt

    def _cited(self, attempt: Attempt, evidence_ids: Iterable[str]) -> List[str]:
        """Known, discovered evidence from a submission, deduplicated, in scenario order."""
        discovered = set(attempt.discovered_evidence)
        return [eid for eid in self.scenario.ordered_evidence(evidence_ids) if eid in discovered]

    def _close_unsuccessful_attempt(self, attempt: Attempt) -> None:
        """Route to failure or game over once an attempt is lost."""
        self.failure_feedback = generate_feedback(attempt, self.scenario)
        if self.session.attempts_exhausted:
            self.screen = Screen.GAMEOVER
            logger.info(
                "Attempt %d lost (%s) — no attempts left, game over.",
                attempt.attempt_number, attempt.status.value,
            )
        else:
            self.screen = Screen.FAILURE
            logger.info(
                "Attempt %d lost (%s) — %d attempt(s) remain.",
                attempt.attempt_number,
                attempt.status.value,
                self.session.max_attempts - self.session.current_attempt,
            )

    def _new_attempt(self) -> Attempt:
        attempt = Attempt(attempt_number=self.session.current_attempt)
        self.session.attempts.append(attempt)
        self._reset_working_state()
        self.screen = Screen.GAMEPLAY
        logger.info("Attempt %d/%d started.", attempt.attempt_number, self.session.max_attempts)
        return attempt

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self) -> GameSession:
        """Create a fresh session at attempt 1 and move to the intro screen."""
        self.session = GameSession(
            max_attempts=self.config.max_attempts,
            max_steps=self.config.max_steps,
        )
        self._reset_working_state()
        self.screen = Screen.INTRO
        logger.info("Session %s started.", self.session.session_id)
        return self.session

    def start_attempt(self) -> Optional[GameSession]:
        """
        Begin the attempt for the current ordinal and enter gameplay.

        Only valid from the intro screen; returns the session unchanged (or
        None with no session) otherwise.
        """
        if self.session is None:
            logger.warning("start_attempt called with no active session.")
            return None
        if self.screen != Screen.INTRO or self.session.active_attempt is not None:
            logger.warning("start_attempt ignored — screen=%s", self.screen.value)
            return self.session
        self._new_attempt()
        return self.session

    def retry_attempt(self) -> Optional[GameSession]:
        """Start the next attempt after a failure. Only valid from the failure screen."""
        if self.session is None:
            logger.warning("retry_attempt called with no active session.")
            return None
        if self.screen != Screen.FAILURE or self.session.attempts_exhausted:
            logger.warning("retry_attempt ignored — screen=%s", self.screen.value)
            return self.session
        self.session.current_attempt += 1
        self._new_attempt()
        return self.session

    def restart_session(self) -> None:
        """Discard the session entirely and return to the welcome screen."""
        if self.session is not None:
            logger.info("Session %s discarded.", self.session.session_id)
        self.session = None
        self._reset_working_state()
        self.screen = Screen.WELCOME

    # ------------------------------------------------------------------
    # Investigation
    # ------------------------------------------------------------------

    def perform_action(self, action_id: str) -> ActionResult:
        """
        Run an investigative action, consuming one step.

        Evidence the action yields is added to the attempt (and the session)
        only if it has not been discovered yet in this attempt, so repeating
        an action still costs a step but reveals nothing new.

        Returns:
            ActionResult with the newly discovered evidence IDs, the speaking
            character, and dialogue lines. success=False (and no step logged)
            when there is no live attempt, the action is unknown or a decision,
            or the step budget is spent.
        """
        attempt = self._playable_attempt("perform_action")
        if attempt is None:
            return ActionResult(success=False, message=NO_INVESTIGATION)

        action = self.scenario.action_index.get(action_id)
        if action is None or action.kind != ActionKind.INVESTIGATE:
            logger.warning("perform_action called with unknown or non-investigative action=%r", action_id)
            return ActionResult(success=False, message="Unknown action.")

        if attempt.steps_used >= self.session.max_steps:
            logger.warning(
                "perform_action(%s) refused — step budget %d exhausted.", action_id, self.session.max_steps
            )
            return ActionResult(success=False, message="No investigation steps left.")

        new_ids: List[str] = []
        for eid in action.yields:
            if eid not in attempt.discovered_evidence and eid not in new_ids:
                new_ids.append(eid)

        attempt.discovered_evidence.extend(new_ids)
        self.session.discovered_evidence.update(new_ids)
        attempt.append_step(
            StepKind.INVESTIGATE,
            action_id,
            discovered=tuple(new_ids),
            result="discovered" if new_ids else "nothing_new",
        )

        logger.info(
            "Step %d/%d — %s → new evidence %s",
            attempt.steps_used, self.session.max_steps, action_id, new_ids or "none",
        )
        return ActionResult(
            success=True,
            discovered_evidence_ids=new_ids,
            message="You found new evidence!" if new_ids else "Nothing new here.",
            character_id=action.character_id,
            dialogue=list(action.dialogue),
        )

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def reject_hypothesis(self, hypothesis_id: str, evidence_ids: Iterable[str]) -> RejectionResult:
        """
        Try to eliminate a hypothesis with discovered evidence.

        Rejection never costs a step. Submissions over the per-attempt or
        per-hypothesis caps, or against unknown or already-rejected
        hypotheses, are refused without logging a step. Every other
        submission is logged; an invalid one (trap or empty citation
        included) counts as a reasoning mistake.
        """
        attempt = self._playable_attempt("reject_hypothesis")
        if attempt is None:
            return RejectionResult(success=False, message=NO_INVESTIGATION)

        status = self.hypothesis_status(hypothesis_id)
        if status is None:
            return RejectionResult(success=False, message="Unknown hypothesis.")
        if status == HypothesisStatus.REJECTED:
            return RejectionResult(success=False, message="That hypothesis is already rejected.")

        if len(attempt.rejection_steps()) >= self.config.max_rejections_per_attempt:
            logger.warning("Rejection cap reached for attempt %d.", attempt.attempt_number)
            return RejectionResult(success=False, message="You have used every rejection in this attempt.")
        if len(attempt.rejection_steps(hypothesis_id)) >= self.config.max_rejections_per_hypothesis:
            logger.warning("Rejection cap reached for %s in attempt %d.", hypothesis_id, attempt.attempt_number)
            return RejectionResult(
                success=False,
                message="You've reached the limit of rejection tries for this hypothesis.",
            )

        # Undiscovered evidence drops out; an empty citation is an invalid rejection.
        cited = self._cited(attempt, evidence_ids)
        check = can_reject(self.scenario, hypothesis_id, cited)
        attempt.append_step(
            StepKind.REJECT,
            "reject_hypothesis",
            hypothesis_id=hypothesis_id,
            evidence_ids=tuple(cited),
            valid=check.valid,
            is_trap=check.is_trap,
            result="valid" if check.valid else ("trap" if check.is_trap else "invalid"),
        )

        if check.valid:
            self.hypotheses = [
                dataclasses.replace(h, status=HypothesisStatus.REJECTED) if h.id == hypothesis_id else h
                for h in self.hypotheses
            ]
            attempt.rejected_hypotheses.append(hypothesis_id)
            logger.info("Hypothesis %s rejected with %s.", hypothesis_id, cited)
            return RejectionResult(success=True, message=check.message)

        attempt.reasoning_mistakes += 1
        logger.info(
            "Invalid rejection of %s with %s (trap=%s) — mistakes=%d",
            hypothesis_id, cited, check.is_trap, attempt.reasoning_mistakes,
        )
        return RejectionResult(success=False, message=check.message, is_trap=check.is_trap)

    def declare_solution(self, hypothesis_id: str, evidence_ids: Iterable[str]) -> DeclarationResult:
        """
        Announce the final answer, ending the attempt either way.

        Undiscovered evidence is silently dropped from the citation. A correct
        declaration moves to the success screen; an incorrect one loses the
        attempt and moves to failure, or to game over on the last attempt.
        """
        attempt = self._playable_attempt("declare_solution")
        if attempt is None:
            return DeclarationResult(success=False, message=NO_INVESTIGATION)
        if hypothesis_id not in self.scenario.hypothesis_index:
            return DeclarationResult(success=False, message="Unknown hypothesis.")

        cited = self._cited(attempt, evidence_ids)
        evaluation = evaluate_declaration(self.scenario, hypothesis_id, cited)
        correct = evaluation.outcome == CaseOutcome.CORRECT

        attempt.append_step(
            StepKind.DECLARE,
            "declare_solution",
            hypothesis_id=hypothesis_id,
            evidence_ids=tuple(cited),
            valid=correct,
            result=evaluation.outcome.value,
        )
        attempt.final_decision = FinalDecision(
            hypothesis_id=hypothesis_id,
            evidence_ids=tuple(cited),
            outcome=evaluation.outcome,
            justification=evaluation.justification,
        )
        attempt.status = AttemptStatus.SUCCESS if correct else AttemptStatus.FAILED

        logger.info(
            "Declaration on attempt %d: %s with %s → %s (%s)",
            attempt.attempt_number, hypothesis_id, cited,
            evaluation.outcome.value, evaluation.justification.value,
        )

        if correct:
            self.screen = Screen.SUCCESS
            return DeclarationResult(
                success=True,
                outcome=evaluation.outcome,
                justification=evaluation.justification,
                message="Case solved!",
            )

        self._close_unsuccessful_attempt(attempt)
        message = (
            self.failure_feedback
            if self.scenario.is_ground_truth(hypothesis_id)
            else self.scenario.wrong_declare_message
        )
        return DeclarationResult(
            success=False,
            outcome=evaluation.outcome,
            justification=evaluation.justification,
            message=message,
        )

    def end_investigation(self) -> None:
        """Give up on the current attempt without declaring; loses the attempt."""
        attempt = self._playable_attempt("end_investigation")
        if attempt is None:
            return
        attempt.append_step(StepKind.END, "end_investigation", result="no_decision")
        attempt.status = AttemptStatus.NO_DECISION
        self._close_unsuccessful_attempt(attempt)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def compute_result(self) -> GameResult:
        """
        Score, rank, feedback and timeline for the current attempt.

        Falls back to an empty failed attempt when none has been started, so
        the call is safe on any screen.
        """
        attempt = self.current_attempt
        ordinal = self.session.current_attempt if self.session else 0
        if attempt is None:
            attempt = Attempt(attempt_number=max(ordinal, 1), status=AttemptStatus.FAILED)

        score = calculate_score(attempt, self.scenario, self.scoring_config)
        rank, rank_icon = determine_rank(score, self.rank_config)
        evaluation = build_evaluation(attempt, self.scenario)

        logger.debug("Result for attempt %d: score=%d rank=%s", attempt.attempt_number, score, rank)
        return GameResult(
            score=score,
            max_score=self.scoring_config.max_score,
            rank=rank,
            rank_icon=rank_icon,
            feedback_text=generate_feedback(attempt, self.scenario, rank),
            timeline=build_timeline(self.scenario, attempt.steps),
            attempts_used=ordinal,
            outcome=evaluation.outcome,
            outcome_title=OUTCOME_TITLES[evaluation.outcome],
            thinking=evaluation.thinking,
            thinking_title=THINKING_TITLES[evaluation.thinking],
            cards=evaluation.cards,
        )

    def game_over_feedback(self) -> str:
        return game_over_feedback(self.session, self.scenario)
