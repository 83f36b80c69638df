"""
validity.py
===========
Pure predicates deciding whether cited evidence legally rejects a hypothesis
or legally justifies a final declaration.

Every decision is driven by the scenario's rule tables (see case_data.py);
nothing here names a specific hypothesis or evidence item. Evidence is always
treated as an unordered set, so submission order never changes a verdict.
"""

from __future__ import annotations

import logging
from typing import Iterable

from models import (
    CaseOutcome,
    DeclarationEvaluation,
    DeclarationRule,
    EvidenceStrength,
    RejectionCheck,
    RejectionRule,
    Scenario,
)

logger = logging.getLogger("missing_revenue.validity")

NO_EVIDENCE_MESSAGE     = "Pick at least one piece of evidence."
NOT_ENOUGH_MESSAGE      = "This evidence isn't enough to reject this hypothesis."
NO_LOGICAL_LINK_MESSAGE = "This evidence doesn't logically disprove that hypothesis."
GENERIC_TRAP_MESSAGE    = "That evidence looks related, but it doesn't disprove the hypothesis."
UNKNOWN_HYPOTHESIS      = "Unknown hypothesis."


def can_reject(
    scenario: Scenario,
    hypothesis_id: str,
    evidence_ids: Iterable[str],
) -> RejectionCheck:
    """
    Decide whether ``evidence_ids`` legally reject ``hypothesis_id``.

    Precedence:
      1. Empty (or entirely unknown) evidence → invalid.
      2. Any trap item in the submission → invalid, is_trap=True. The message
         is the trap message for the first trap item in scenario order.
      3. Ground-truth hypothesis → invalid; it can never be rejected.
      4. Any valid item → valid.
      5. Otherwise → invalid with a generic message.

    Args:
        scenario:      The case being played.
        hypothesis_id: Target of the rejection.
        evidence_ids:  Cited evidence; duplicates and order are ignored.

    Returns:
        RejectionCheck with ``valid``, ``is_trap`` and a display message.
    """
    if hypothesis_id not in scenario.hypothesis_index:
        return RejectionCheck(valid=False, message=UNKNOWN_HYPOTHESIS)

    cited = scenario.ordered_evidence(evidence_ids)
    if not cited:
        return RejectionCheck(valid=False, message=NO_EVIDENCE_MESSAGE)

    rule = scenario.rejection_rules.get(hypothesis_id, RejectionRule())

    traps = [eid for eid in cited if eid in rule.trap]
    if traps:
        message = scenario.trap_messages.get((hypothesis_id, traps[0]), GENERIC_TRAP_MESSAGE)
        logger.debug("Rejection of %s poisoned by trap evidence %s", hypothesis_id, traps)
        return RejectionCheck(valid=False, is_trap=True, message=message)

    if scenario.is_ground_truth(hypothesis_id):
        return RejectionCheck(valid=False, message=NOT_ENOUGH_MESSAGE)

    if any(eid in rule.valid for eid in cited):
        return RejectionCheck(valid=True, message="Hypothesis rejected with fitting evidence ✓")

    return RejectionCheck(valid=False, message=NO_LOGICAL_LINK_MESSAGE)


def classify_justification(rule: DeclarationRule, cited: Iterable[str]) -> EvidenceStrength:
    """
    Classify cited evidence against a declaration rule.

    Noise beats invalid beats strong beats weak: one opinion-based item
    disqualifies the whole justification, however strong the rest is.
    """
    cited = set(cited)
    if not cited:
        return EvidenceStrength.NONE
    if cited & rule.noise:
        return EvidenceStrength.NOISE
    if cited & rule.invalid:
        return EvidenceStrength.INVALID
    if cited & rule.strong:
        return EvidenceStrength.STRONG
    if cited & rule.weak:
        return EvidenceStrength.WEAK
    return EvidenceStrength.NONE


def evaluate_declaration(
    scenario: Scenario,
    hypothesis_id: str,
    evidence_ids: Iterable[str],
) -> DeclarationEvaluation:
    """
    Judge a final declaration.

    A hypothesis other than the ground truth is always incorrect; the
    justification only explains why. The ground truth is correct only when
    the justification is strong or weak; noise, invalid and missing evidence
    all make the declaration incorrect even though the conclusion is right.

    Returns:
        DeclarationEvaluation(outcome, justification).
    """
    cited = scenario.ordered_evidence(evidence_ids)
    if hypothesis_id not in scenario.hypothesis_index:
        return DeclarationEvaluation(outcome=CaseOutcome.INCORRECT, justification=EvidenceStrength.NONE)

    rule = scenario.declaration_rules.get(hypothesis_id, DeclarationRule())
    justification = classify_justification(rule, cited)

    correct = scenario.is_ground_truth(hypothesis_id) and justification in (
        EvidenceStrength.STRONG,
        EvidenceStrength.WEAK,
    )
    outcome = CaseOutcome.CORRECT if correct else CaseOutcome.INCORRECT

    logger.debug(
        "Declaration %s with %s → outcome=%s, justification=%s",
        hypothesis_id, cited, outcome.value, justification.value,
    )
    return DeclarationEvaluation(outcome=outcome, justification=justification)
