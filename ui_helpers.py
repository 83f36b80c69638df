"""
ui_helpers.py
=============
Stateless text-formatting helpers for a presentation layer.

These functions carry no game state of their own; they receive everything
they need as arguments. Keeping them separate from cli.py means they can be
imported and tested in isolation without a running game loop.

Contains:
  - parse_id_list()     : "e1, E3 e4" → ["E1", "E3", "E4"]
  - format_hypotheses() : hypothesis board with live status
  - format_evidence()   : discovered evidence list
  - format_actions()    : investigative action menu
  - format_result()     : end-of-attempt report card
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from models import ActionKind, GameResult, Hypothesis, HypothesisStatus, Scenario


def parse_id_list(text: str) -> List[str]:
    """
    Split user input into upper-cased identifiers.

    Commas and whitespace both separate items; empty fragments are dropped.

    Example:
        >>> parse_id_list("e1, E3  e4")
        ['E1', 'E3', 'E4']
    """
    return [token.upper() for token in re.split(r"[\s,]+", text or "") if token]


def format_hypotheses(hypotheses: Sequence[Hypothesis]) -> str:
    lines = []
    for hyp in hypotheses:
        mark = "✗" if hyp.status == HypothesisStatus.REJECTED else "•"
        suffix = "  (rejected)" if hyp.status == HypothesisStatus.REJECTED else ""
        lines.append(f"  {mark} {hyp.id}: {hyp.text}{suffix}")
    return "\n".join(lines)


def format_evidence(scenario: Scenario, evidence_ids: Iterable[str]) -> str:
    lines = [
        f"  {eid}: {scenario.evidence_index[eid].text}"
        for eid in evidence_ids
        if eid in scenario.evidence_index
    ]
    return "\n".join(lines) if lines else "  (No evidence yet.)"


def format_actions(scenario: Scenario) -> str:
    """List only investigative actions; decisions have their own commands."""
    return "\n".join(
        f"  {action.icon} {action.id:<18} {action.label}"
        for action in scenario.actions
        if action.kind == ActionKind.INVESTIGATE
    )


def format_result(result: GameResult) -> str:
    """
    Render a GameResult as a multi-line report card.

    Layout: headline, score / rank / attempts, evaluation cards, feedback,
    then the numbered timeline.
    """
    lines = [
        f"{result.outcome_title} — {result.thinking_title}",
        f"Score   : {result.score}/{result.max_score}",
        f"Rank    : {result.rank_icon} {result.rank}",
        f"Attempts: {result.attempts_used}",
        "",
    ]
    for name in ("evidence", "elimination", "noise"):
        card = result.cards.get(name)
        if card:
            lines.append(f"  [{name}] {card.text}")
    lines += ["", result.feedback_text, "", "Timeline:"]
    for item in result.timeline:
        flag = "+" if item.is_positive else "-"
        lines.append(f"  {item.step:>2}. [{flag}] {item.description} — {item.outcome}")
    return "\n".join(lines)
