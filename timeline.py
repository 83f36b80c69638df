"""
timeline.py
===========
Projects an attempt's step log into display-ready timeline rows.

The projection is pure: it reads the log, looks up display text in the
scenario, and never touches the Attempt.
"""

from __future__ import annotations

from typing import List, Sequence

from models import Scenario, Step, StepKind, TimelineItem


def _hypothesis_text(scenario: Scenario, hypothesis_id) -> str:
    hyp = scenario.hypothesis_index.get(hypothesis_id)
    return hyp.text if hyp else str(hypothesis_id)


def describe_step(scenario: Scenario, step: Step) -> TimelineItem:
    """Build the timeline row for a single step."""
    if step.kind == StepKind.REJECT:
        description = f"Rejected hypothesis: {_hypothesis_text(scenario, step.hypothesis_id)}"
        if step.valid:
            outcome = "Valid rejection ✓"
        elif step.is_trap:
            outcome = "Fell for trap evidence ✗"
        else:
            outcome = "Invalid rejection ✗"
        return TimelineItem(
            step=step.step_number, description=description,
            outcome=outcome, is_positive=bool(step.valid),
        )

    if step.kind == StepKind.DECLARE:
        return TimelineItem(
            step=step.step_number,
            description=f"Declared solution: {_hypothesis_text(scenario, step.hypothesis_id)}",
            outcome="Correct decision ✓" if step.valid else "Incorrect decision ✗",
            is_positive=bool(step.valid),
        )

    if step.kind == StepKind.END:
        return TimelineItem(
            step=step.step_number, description="Ended the investigation",
            outcome="No decision", is_positive=False,
        )

    action = scenario.action_index.get(step.action_id)
    description = action.label if action else step.action_id
    if step.discovered:
        outcome = "Discovered evidence: " + ", ".join(step.discovered)
    else:
        outcome = "Nothing new"
    return TimelineItem(step=step.step_number, description=description, outcome=outcome, is_positive=True)


def build_timeline(scenario: Scenario, steps: Sequence[Step]) -> List[TimelineItem]:
    """One row per logged step, in log order."""
    return [describe_step(scenario, step) for step in steps]
