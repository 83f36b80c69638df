"""
config.py
=========
Central configuration module for The Case of the Missing Revenue.

All tunable limits, scoring weights, and rank thresholds live here so they
can be adjusted without touching game-rule logic.

Scenario-specific point tables (which evidence earns an ideal-rejection bonus,
how much each declaration combination is worth) are NOT here; they belong to
the case rule tables in case_data.py so a new case can carry its own values.

Usage:
    from config import GAME_CONFIG, SCORING_CONFIG, RANK_CONFIG
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# ---------------------------------------------------------------------------
# Game-balance parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameConfig:
    """
    Session and attempt limits.

    Attributes:
        max_attempts:                  Playthroughs allowed before game over.
        max_steps:                     Investigative actions allowed per attempt.
        max_rejections_per_attempt:    Total rejection submissions per attempt,
                                       valid or not.
        max_rejections_per_hypothesis: Rejection submissions against a single
                                       hypothesis per attempt.
    """
    max_attempts: int = 3
    max_steps:    int = 6

    max_rejections_per_attempt:    int = 4
    max_rejections_per_hypothesis: int = 2


# ---------------------------------------------------------------------------
# Scoring parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """
    Weights for the deterministic scoring function.

    Points breakdown (successful attempts only):
        base_score
        + ideal-rejection bonuses        (per case rule table)
        + declaration bonus              (per case rule table)
        + timing bonus                   (rejections logged before declaring)
        - extra-step penalty             (steps beyond min_steps_before_penalty)
        - no-rejection penalty
        - weak-evidence penalty          (declared on supporting evidence only)
        - reasoning-mistake penalty      (escalates after the second mistake)
        × attempt multiplier             (rounded down)

    The total is clamped to [0, max_score].
    """
    base_score: int = 400
    max_score:  int = 1000

    bonus_reject_all_before_solution: int = 150
    bonus_reject_one_before_solution: int = 75

    penalty_per_extra_step:   int = 40
    min_steps_before_penalty: int = 4

    penalty_no_rejections: int = 150
    penalty_weak_evidence: int = 50

    penalty_reasoning_mistake:            int = 40
    penalty_reasoning_mistake_escalation: int = 20
    mistakes_before_escalation:           int = 2

    attempt_multipliers: Tuple[float, ...] = (1.0, 0.7, 0.5)


# ---------------------------------------------------------------------------
# Rank parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RankConfig:
    """
    Score thresholds for letter grades, lowest first.

    A score at or above ``a_threshold`` earns "A", and so on. Anything below
    ``b_threshold`` is a "C".
    """
    b_threshold: int = 450
    a_threshold: int = 650
    s_threshold: int = 850

    icons: Tuple[Tuple[str, str], ...] = (
        ("S", "🏆"),
        ("A", "🥇"),
        ("B", "🥈"),
        ("C", "🥉"),
    )


# ---------------------------------------------------------------------------
# Singleton instances (import-ready)
# ---------------------------------------------------------------------------

GAME_CONFIG    = GameConfig()
SCORING_CONFIG = ScoringConfig()
RANK_CONFIG    = RankConfig()
