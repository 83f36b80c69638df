"""
scoring.py
==========
Deterministic, side-effect-free scoring logic.

Extracted from the game engine so it can be unit-tested independently and
adjusted by changing ScoringConfig / RankConfig values in config.py, or the
case rule tables in case_data.py, without touching any game logic or UI code.
"""

from __future__ import annotations

import math
from typing import Dict, FrozenSet, Iterable, Tuple

from config import RANK_CONFIG, SCORING_CONFIG, RankConfig, ScoringConfig
from models import (
    Attempt,
    AttemptStatus,
    DeclarationRule,
    EvidenceStrength,
    RejectionRule,
    Scenario,
)


def combination_bonus(
    bonuses: Iterable[Tuple[FrozenSet[str], int]],
    cited:   Iterable[str],
) -> int:
    """
    Points for a cited evidence set against a table of bonus tiers.

    The richest combination fully contained in the citation wins, so
    decisive + supporting outranks decisive alone, which outranks supporting
    alone. Returns 0 when no combination matches.
    """
    cited = set(cited)
    return max((points for combo, points in bonuses if combo <= cited), default=0)


def declaration_bonus(rule: DeclarationRule, cited: Iterable[str]) -> int:
    """Points for the evidence cited in a declaration."""
    return combination_bonus(rule.bonuses, cited)


def rejection_bonus(rule: RejectionRule, cited: Iterable[str]) -> int:
    """Points for the evidence cited in a valid rejection."""
    return combination_bonus(rule.bonuses, cited)


def mistake_penalty(mistakes: int, cfg: ScoringConfig = SCORING_CONFIG) -> int:
    """
    Escalating penalty for reasoning mistakes.

    Every mistake costs ``penalty_reasoning_mistake``; each one beyond
    ``mistakes_before_escalation`` costs ``penalty_reasoning_mistake_escalation``
    on top.

    Examples (default config):
        >>> mistake_penalty(2)
        80
        >>> mistake_penalty(3)
        140
    """
    if mistakes <= 0:
        return 0
    escalated = max(0, mistakes - cfg.mistakes_before_escalation)
    return (
        mistakes * cfg.penalty_reasoning_mistake
        + escalated * cfg.penalty_reasoning_mistake_escalation
    )


def calculate_score(
    attempt:  Attempt,
    scenario: Scenario,
    cfg:      ScoringConfig = SCORING_CONFIG,
) -> int:
    """
    Compute the score of a finished attempt in the range [0, cfg.max_score].

    Only successful attempts score; failed and no-decision attempts score 0.

    Points breakdown:
        base_score
        + rejection bonus for each hypothesis validly rejected, from the
          richest tier of its rule the cited evidence covers
        + declaration bonus for the cited evidence combination
        + timing bonus: all competitors validly rejected before the
          declaration step → bonus_reject_all_before_solution, otherwise
          bonus_reject_one_before_solution per competitor rejected in time
        - penalty_per_extra_step per investigative step beyond
          min_steps_before_penalty
        - penalty_no_rejections when nothing was rejected
        - penalty_weak_evidence when the declaration rested on supporting
          evidence only
        - mistake_penalty(reasoning_mistakes)

    The subtotal is multiplied by the attempt's multiplier (1.0, 0.7, 0.5 by
    default), rounded down, and clamped.

    Args:
        attempt:  The attempt to score. Not mutated.
        scenario: Case whose rule tables supply the per-case bonuses.
        cfg:      Scoring weights.

    Returns:
        Integer score.
    """
    decision = attempt.final_decision
    if attempt.status != AttemptStatus.SUCCESS or decision is None:
        return 0

    declared_at = attempt.declaration_step()
    declared_step_number = declared_at.step_number if declared_at else len(attempt.steps) + 1
    valid_rejections = [s for s in attempt.rejection_steps() if s.valid]

    score = cfg.base_score

    # --- Rejection evidence, best tier once per hypothesis ---
    best_rejection: Dict[str, int] = {}
    for step in valid_rejections:
        rule = scenario.rejection_rules.get(step.hypothesis_id, RejectionRule())
        points = rejection_bonus(rule, step.evidence_ids)
        best_rejection[step.hypothesis_id] = max(points, best_rejection.get(step.hypothesis_id, 0))
    score += sum(best_rejection.values())

    # --- Declaration evidence ---
    decl_rule = scenario.declaration_rules.get(decision.hypothesis_id, DeclarationRule())
    score += declaration_bonus(decl_rule, decision.evidence_ids)

    # --- Eliminate-then-conclude ordering ---
    competitors = set(scenario.competing_hypotheses())
    rejected_in_time = {
        s.hypothesis_id for s in valid_rejections if s.step_number < declared_step_number
    } & competitors
    if competitors and rejected_in_time == competitors:
        score += cfg.bonus_reject_all_before_solution
    else:
        score += len(rejected_in_time) * cfg.bonus_reject_one_before_solution

    # --- Penalties ---
    extra_steps = max(0, attempt.steps_used - cfg.min_steps_before_penalty)
    score -= extra_steps * cfg.penalty_per_extra_step

    if not attempt.rejected_hypotheses:
        score -= cfg.penalty_no_rejections

    if decision.justification == EvidenceStrength.WEAK:
        score -= cfg.penalty_weak_evidence

    score -= mistake_penalty(attempt.reasoning_mistakes, cfg)

    # --- Later attempts earn less credit ---
    idx = min(max(attempt.attempt_number, 1), len(cfg.attempt_multipliers)) - 1
    # rounded before flooring so float error can't drop a whole point
    score = math.floor(round(score * cfg.attempt_multipliers[idx], 6))

    return max(0, min(cfg.max_score, score))


def determine_rank(score: int, cfg: RankConfig = RANK_CONFIG) -> Tuple[str, str]:
    """
    Map a score to a (letter grade, display icon) pair.

    Examples (default config):
        >>> determine_rank(900)
        ('S', '🏆')
        >>> determine_rank(100)
        ('C', '🥉')
    """
    if score >= cfg.s_threshold:
        rank = "S"
    elif score >= cfg.a_threshold:
        rank = "A"
    elif score >= cfg.b_threshold:
        rank = "B"
    else:
        rank = "C"
    return rank, dict(cfg.icons)[rank]
