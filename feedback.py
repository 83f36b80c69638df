"""
feedback.py
===========
Diagnostic text for finished attempts.

Two layers:
  build_evaluation()  — classifies an attempt along three axes (evidence
                        strength, elimination quality, noise) and derives a
                        thinking level, each with a short display card.
  generate_feedback() — picks ONE explanatory paragraph from a priority-ordered
                        list of conditions. Specific diagnoses are checked
                        before generic ones; successful attempts are keyed off
                        rank and whether the alternatives were eliminated
                        before the declaration, not off score alone.
"""

from __future__ import annotations

from typing import Optional, Set

from models import (
    Attempt,
    AttemptStatus,
    CaseOutcome,
    EliminationQuality,
    Evaluation,
    EvaluationCard,
    EvidenceStrength,
    EvidenceType,
    GameSession,
    NoiseQuality,
    Scenario,
    ThinkingLevel,
)
from scoring import calculate_score, determine_rank


# ---------------------------------------------------------------------------
# Card texts
# ---------------------------------------------------------------------------

EVIDENCE_CARD_TEXT = {
    EvidenceStrength.STRONG:  "Strong justification: your evidence clearly separates the hypotheses.",
    EvidenceStrength.WEAK:    "Weak justification: a general indicator that can't settle the case alone.",
    EvidenceStrength.INVALID: "Invalid justification: the evidence doesn't logically support the decision.",
    EvidenceStrength.NOISE:   "Noisy justification: you relied on opinion instead of an indicator.",
    EvidenceStrength.NONE:    "No justification: no real evidence backed the decision.",
}

NOISE_CARD_TEXT = {
    NoiseQuality.CLEAN:        "Clean: you stuck to measurable indicators.",
    NoiseQuality.OVERWEIGHTED: "Overweighted: you treated a general indicator as if it were decisive.",
    NoiseQuality.USED_NOISE:   "Noise: an opinion crept into your decision.",
}

OUTCOME_TITLES = {
    CaseOutcome.CORRECT:     "Correct decision",
    CaseOutcome.INCORRECT:   "Incorrect decision",
    CaseOutcome.NO_DECISION: "No decision",
}

THINKING_TITLES = {
    ThinkingLevel.SOUND:        "Sound reasoning",
    ThinkingLevel.WEAK:         "Reasoning needs work",
    ThinkingLevel.UNACCEPTABLE: "Unacceptable method",
}


def elimination_card_text(level: EliminationQuality, wrong_count: int) -> str:
    if level == EliminationQuality.BOTH_CORRECT:
        return "Excellent elimination: every competing hypothesis was rejected with fitting evidence."
    if level == EliminationQuality.ONE_CORRECT:
        return "Good elimination: you rejected a competing hypothesis with fitting evidence."
    if level == EliminationQuality.NONE:
        return "No elimination: you concluded without ruling out the alternatives."
    if wrong_count == 1:
        return "Imprecise elimination: you tried to reject a hypothesis with unfit evidence once."
    if wrong_count == 2:
        return "Imprecise elimination: you tried to reject a hypothesis with unfit evidence twice."
    return f"Imprecise elimination: you tried to reject a hypothesis with unfit evidence {wrong_count} times."


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------

def attempt_outcome(attempt: Attempt) -> CaseOutcome:
    if attempt.final_decision is not None:
        return attempt.final_decision.outcome
    if attempt.status == AttemptStatus.NO_DECISION:
        return CaseOutcome.NO_DECISION
    return CaseOutcome.INCORRECT


def rejected_before_declaration(attempt: Attempt, scenario: Scenario) -> Set[str]:
    """Competing hypotheses validly rejected at an earlier step than the declaration."""
    declared_at = attempt.declaration_step()
    cutoff = declared_at.step_number if declared_at else len(attempt.steps) + 1
    competitors = set(scenario.competing_hypotheses())
    return {
        s.hypothesis_id for s in attempt.rejection_steps()
        if s.valid and s.step_number < cutoff and s.hypothesis_id in competitors
    }


def elimination_quality(attempt: Attempt, scenario: Scenario):
    """Return (EliminationQuality, wrong rejection count)."""
    rejections = attempt.rejection_steps()
    wrong = sum(1 for s in rejections if not s.valid)
    if wrong:
        return EliminationQuality.HAS_WRONG, wrong

    competitors = set(scenario.competing_hypotheses())
    rejected = {s.hypothesis_id for s in rejections if s.valid} & competitors
    if competitors and rejected == competitors:
        return EliminationQuality.BOTH_CORRECT, 0
    if rejected:
        return EliminationQuality.ONE_CORRECT, 0
    return EliminationQuality.NONE, 0


def noise_quality(attempt: Attempt, scenario: Scenario) -> NoiseQuality:
    decision = attempt.final_decision
    if decision is None or not decision.evidence_ids:
        return NoiseQuality.CLEAN
    types = [scenario.evidence_index[eid].type for eid in decision.evidence_ids]
    if EvidenceType.TRAP in types:
        return NoiseQuality.USED_NOISE
    if all(t == EvidenceType.MISLEADING for t in types):
        return NoiseQuality.OVERWEIGHTED
    return NoiseQuality.CLEAN


def thinking_level(outcome: CaseOutcome, evidence: EvidenceStrength) -> ThinkingLevel:
    if outcome != CaseOutcome.CORRECT:
        return ThinkingLevel.UNACCEPTABLE
    if evidence == EvidenceStrength.STRONG:
        return ThinkingLevel.SOUND
    return ThinkingLevel.WEAK


def build_evaluation(attempt: Attempt, scenario: Scenario) -> Evaluation:
    """Classify a finished attempt and attach a display card per axis."""
    outcome = attempt_outcome(attempt)
    evidence_level = (
        attempt.final_decision.justification if attempt.final_decision else EvidenceStrength.NONE
    )
    elimination, wrong = elimination_quality(attempt, scenario)
    noise = noise_quality(attempt, scenario)

    return Evaluation(
        outcome=outcome,
        evidence_level=evidence_level,
        elimination=elimination,
        noise=noise,
        thinking=thinking_level(outcome, evidence_level),
        cards={
            "evidence":    EvaluationCard(level=evidence_level.value, text=EVIDENCE_CARD_TEXT[evidence_level]),
            "elimination": EvaluationCard(level=elimination.value, text=elimination_card_text(elimination, wrong)),
            "noise":       EvaluationCard(level=noise.value, text=NOISE_CARD_TEXT[noise]),
        },
    )


# ---------------------------------------------------------------------------
# Feedback paragraphs
# ---------------------------------------------------------------------------

def _has_decisive_evidence(attempt: Attempt, scenario: Scenario) -> bool:
    return any(
        scenario.evidence_index[eid].type == EvidenceType.DECISIVE
        for eid in attempt.discovered_evidence
    )


def _failure_feedback(attempt: Attempt, scenario: Scenario, evaluation: Evaluation) -> str:
    if evaluation.outcome == CaseOutcome.NO_DECISION:
        if not attempt.discovered_evidence:
            return (
                "You closed the case file without gathering anything. "
                "Start by collecting at least one measurable indicator."
            )
        return (
            "You gathered information but never committed to a decision. "
            "Analysis has to end in a decision, even under uncertainty."
        )

    decision = attempt.final_decision
    justification = evaluation.evidence_level

    if decision is not None and scenario.is_ground_truth(decision.hypothesis_id):
        if justification == EvidenceStrength.NOISE:
            return (
                "Right conclusion, wrong reason: your decision leaned on opinion, not on the shop's "
                "own numbers. Go back to the measurements: footfall, invoices, stock, timing."
            )
        if justification == EvidenceStrength.INVALID:
            return (
                "You picked the right hypothesis but cited evidence unrelated to it. "
                "Link your decision to the evidence that separates it from the alternatives."
            )
        return (
            "You picked the right hypothesis but backed it with nothing. "
            "A correct guess is still a guess; cite the evidence that proves it."
        )

    if decision is not None and decision.hypothesis_id in attempt.rejected_hypotheses:
        return (
            "You declared a hypothesis you had already ruled out yourself. "
            "Keep your eliminations and your conclusion consistent."
        )

    if justification == EvidenceStrength.NOISE:
        return (
            "Your decision is built on general opinion, not on an indicator from the shop itself. "
            "Return to the measurements: footfall, invoices, stock, timing."
        )

    if evaluation.noise == NoiseQuality.OVERWEIGHTED:
        return (
            "You treated a general indicator as if it settled the case. "
            "Numbers that look supportive can mislead; look for a direct contradiction."
        )

    if justification in (EvidenceStrength.STRONG, EvidenceStrength.WEAK):
        return (
            "You locked onto an explanation that only looked supported. "
            "Compare what was recorded with what actually happened before concluding."
        )

    if justification == EvidenceStrength.INVALID:
        return (
            "The evidence you chose doesn't logically support your decision. "
            "Connect each conclusion to the evidence that distinguishes it from the others."
        )

    if not _has_decisive_evidence(attempt, scenario):
        return (
            "You declared before uncovering any decisive evidence. "
            "Keep investigating until something separates the hypotheses."
        )

    return (
        "You declared without enough evidence. "
        "Gather at least one indicator and cite it before announcing a decision."
    )


def _success_feedback(
    attempt: Attempt,
    scenario: Scenario,
    evaluation: Evaluation,
    rank: str,
) -> str:
    competitors = set(scenario.competing_hypotheses())
    eliminated = rejected_before_declaration(attempt, scenario)
    eliminated_all = bool(competitors) and eliminated == competitors

    if evaluation.evidence_level == EvidenceStrength.STRONG:
        if rank == "S" and eliminated_all and evaluation.elimination == EliminationQuality.BOTH_CORRECT:
            return (
                "Outstanding work: you investigated efficiently, eliminated every alternative "
                "with fitting evidence, and closed the case with decisive proof."
            )
        if evaluation.elimination == EliminationQuality.HAS_WRONG:
            return (
                "You reached the answer, but made at least one imprecise rejection along the way. "
                "Every rejection needs evidence that actually disproves the hypothesis."
            )
        if eliminated_all:
            if rank == "A":
                return (
                    "Strong investigation: alternatives eliminated first, then a decisive conclusion. "
                    "Tighten your evidence or your step count to reach the top rank."
                )
            return (
                "Your method was right, eliminate then conclude, but extra steps or retries "
                "cost you points. Aim for a leaner path next time."
            )
        if not eliminated:
            return (
                "Correct, with strong evidence. Next time rule out the alternatives "
                "before you commit to a conclusion."
            )
        return (
            "Correct solution with strong evidence. Eliminate the remaining alternative "
            "first and your case will be airtight."
        )

    if eliminated_all:
        return (
            "You eliminated every alternative, but your final justification was weak. "
            "Cite the evidence that exposes the contradiction directly."
        )
    return (
        "The answer is right, but the reasoning behind it is thin. "
        "Find evidence that proves the contradiction, and eliminate the alternatives first."
    )


def generate_feedback(
    attempt:  Attempt,
    scenario: Scenario,
    rank:     Optional[str] = None,
) -> str:
    """
    Produce one explanatory paragraph for a finished attempt.

    Args:
        attempt:  The attempt to explain. Not mutated.
        scenario: The case being played.
        rank:     Letter grade for a successful attempt. Computed from the
                  default scoring config when omitted.

    Returns:
        Display-ready feedback string.
    """
    evaluation = build_evaluation(attempt, scenario)
    if evaluation.outcome != CaseOutcome.CORRECT:
        return _failure_feedback(attempt, scenario, evaluation)

    if rank is None:
        rank, _ = determine_rank(calculate_score(attempt, scenario))
    return _success_feedback(attempt, scenario, evaluation, rank)


def game_over_feedback(session: Optional[GameSession], scenario: Scenario) -> str:
    """Feedback shown once every attempt has been used up."""
    last = session.attempts[-1] if session and session.attempts else None
    if last is None:
        return "Out of attempts. Try again, focusing on measurable indicators."
    return generate_feedback(last, scenario)
