"""
case_data.py
============
All narrative content and rule tables for The Case of the Missing Revenue.

Centralising the case here means you can swap out the entire mystery
(hypotheses, evidence, actions, validity tables) without touching any
rules-engine, scoring, or UI logic.

To create a new case:
    1. Replace the constants below with your new story.
    2. Keep exactly one ground-truth hypothesis and make sure every rule
       table references IDs that exist; Scenario() refuses to build otherwise.
    3. Export the result as MAIN_SCENARIO.
"""

from __future__ import annotations

from typing import Dict, Tuple

from models import (
    ActionKind,
    Character,
    DeclarationRule,
    Evidence,
    EvidenceType,
    GameAction,
    Hypothesis,
    RejectionRule,
    Scenario,
)


# ---------------------------------------------------------------------------
# Hypotheses
# ---------------------------------------------------------------------------

HYPOTHESES: Tuple[Hypothesis, ...] = (
    Hypothesis("H1", "Fewer customers are coming into the shop."),
    Hypothesis("H2", "Customers still come, but each one spends less."),
    Hypothesis("H3", "Sales are happening, but they are not being recorded properly."),
)

GROUND_TRUTH = "H3"
"""
The one correct explanation. Never revealed to players directly; the rules
engine consults it when judging rejections and declarations.
"""


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

CHARACTERS: Tuple[Character, ...] = (
    Character("owner",       "Mr. Salim",  "Shop owner",        "👨‍💼"),
    Character("salesperson", "Nadia",      "Floor salesperson", "👩‍💼"),
    Character("cashier",     "Omar",       "Cashier",           "🧑‍💻"),
    Character("stockkeeper", "Hassan",     "Stock keeper",      "📦"),
    Character("customer",    "Mrs. Layla", "Regular customer",  "🛍️"),
    Character("accountant",  "Rania",      "Accountant",        "🧮"),
)


# ---------------------------------------------------------------------------
# Evidence
# ---------------------------------------------------------------------------

EVIDENCE: Tuple[Evidence, ...] = (
    Evidence(
        "E1",
        "The door counter shows the same daily footfall as this time last year.",
        EvidenceType.FACTUAL,
        "talk_salesperson",
    ),
    Evidence(
        "E2",
        "The average invoice value dropped by about 15% this quarter.",
        EvidenceType.MISLEADING,
        "review_invoices",
    ),
    Evidence(
        "E3",
        "More goods left the shelves than the recorded sales account for.",
        EvidenceType.DECISIVE,
        "check_stock",
    ),
    Evidence(
        "E4",
        "The register freezes at peak hours and sales get written on paper slips.",
        EvidenceType.SUPPORTING,
        "talk_cashier",
    ),
    Evidence(
        "E5",
        "A regular customer says 'everyone' has stopped shopping here.",
        EvidenceType.TRAP,
        "talk_customer",
    ),
    Evidence(
        "E6",
        "The gap between stock movement and register entries is concentrated at peak hours.",
        EvidenceType.DECISIVE,
        "review_reports",
    ),
)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

ACTIONS: Tuple[GameAction, ...] = (
    GameAction(
        "talk_owner", "Talk to the owner", "👨‍💼",
        character_id="owner",
        dialogue=(
            "Revenue is down a fifth this quarter and I can't see why.",
            "The shop feels just as busy as ever. Please, find out what's going on.",
        ),
    ),
    GameAction(
        "talk_salesperson", "Talk to the salesperson", "👩‍💼",
        yields=("E1",),
        character_id="salesperson",
        dialogue=(
            "Busy? We're run off our feet most afternoons.",
            "I checked the door counter for you. Same numbers as last year, give or take.",
        ),
    ),
    GameAction(
        "review_invoices", "Review the invoices", "🧾",
        yields=("E2",),
        dialogue=(
            "You leaf through this quarter's invoices.",
            "The average invoice is noticeably smaller than last quarter's.",
        ),
    ),
    GameAction(
        "check_stock", "Check the stock room", "📦",
        yields=("E3",),
        character_id="stockkeeper",
        dialogue=(
            "I reorder what sells, and I've been reordering more than ever.",
            "Funny thing is, the sales system says we sold less than what went out the door.",
        ),
    ),
    GameAction(
        "talk_cashier", "Talk to the cashier", "🧑‍💻",
        yields=("E4",),
        character_id="cashier",
        dialogue=(
            "The register hangs when the queue gets long.",
            "I jot sales on slips and enter them later. Some probably never get entered.",
        ),
    ),
    GameAction(
        "talk_customer", "Talk to a customer", "🛍️",
        yields=("E5",),
        character_id="customer",
        dialogue=(
            "Honestly? Everyone says people have stopped coming here.",
            "I'm here every week myself, mind you.",
        ),
    ),
    GameAction(
        "review_reports", "Review the monthly reports", "📊",
        yields=("E2", "E6"),
        character_id="accountant",
        dialogue=(
            "The reports confirm smaller invoices on paper.",
            "But when I lay stock movement over register entries hour by hour, "
            "the gap sits right in the peak hours.",
        ),
    ),
    GameAction("reject_hypothesis", "Reject a hypothesis", "❌", kind=ActionKind.DECISION),
    GameAction("declare_solution", "Declare the solution", "✅", kind=ActionKind.DECISION),
)


# ---------------------------------------------------------------------------
# Rejection validity table
# ---------------------------------------------------------------------------

REJECTION_RULES: Dict[str, RejectionRule] = {
    # Steady footfall disproves "fewer customers". The smaller invoices and the
    # customer's hearsay look related but say nothing about visitor numbers.
    "H1": RejectionRule(
        valid=frozenset({"E1"}),
        trap=frozenset({"E2", "E5"}),
        bonuses=((frozenset({"E1"}), 100),),
    ),
    # Goods leaving the shelves unrecorded disproves "customers spend less".
    # Smaller invoices look like support for H2, not a disproof.
    "H2": RejectionRule(
        valid=frozenset({"E3", "E6"}),
        trap=frozenset({"E2"}),
        bonuses=(
            (frozenset({"E3"}), 100),
            (frozenset({"E6"}), 80),
        ),
    ),
    # Ground truth: nothing rejects it. E2 is the tempting wrong link.
    "H3": RejectionRule(
        trap=frozenset({"E2"}),
    ),
}


# ---------------------------------------------------------------------------
# Declaration strength table
# ---------------------------------------------------------------------------

DECLARATION_RULES: Dict[str, DeclarationRule] = {
    "H1": DeclarationRule(
        weak=frozenset({"E2"}),
        noise=frozenset({"E5"}),
        invalid=frozenset({"E1", "E3", "E4", "E6"}),
    ),
    "H2": DeclarationRule(
        strong=frozenset({"E2"}),
        noise=frozenset({"E5"}),
        invalid=frozenset({"E3", "E6"}),
    ),
    "H3": DeclarationRule(
        strong=frozenset({"E3", "E6"}),
        weak=frozenset({"E4"}),
        noise=frozenset({"E5"}),
        invalid=frozenset({"E2"}),
        bonuses=(
            (frozenset({"E3", "E4"}), 300),
            (frozenset({"E3"}), 200),
            (frozenset({"E6"}), 150),
            (frozenset({"E4"}), 100),
        ),
    ),
}


# ---------------------------------------------------------------------------
# Player-facing messages
# ---------------------------------------------------------------------------

TRAP_MESSAGES: Dict[Tuple[str, str], str] = {
    ("H1", "E2"): "A smaller average invoice doesn't show that customer numbers held up. That link is wrong.",
    ("H1", "E5"): "That's one person's opinion, not a measurement. Mind the difference between hearsay and fact.",
    ("H2", "E2"): "Trap! Smaller invoices look like support for H2, not a disproof. Think again.",
    ("H3", "E2"): "The average invoice has nothing to do with how sales are recorded.",
}

WRONG_DECLARE_MESSAGE = "You picked the wrong hypothesis. Go back and examine the evidence more carefully."


# ---------------------------------------------------------------------------
# Assembled scenario
# ---------------------------------------------------------------------------

MAIN_SCENARIO = Scenario(
    id="missing_revenue_01",
    title="The Case of the Missing Revenue",
    domain="Retail shop",
    problem="Revenue fell by 20% this quarter, yet the shop looks as busy as ever.",
    correct_hypothesis=GROUND_TRUTH,
    hypotheses=HYPOTHESES,
    evidence=EVIDENCE,
    actions=ACTIONS,
    characters=CHARACTERS,
    rejection_rules=REJECTION_RULES,
    declaration_rules=DECLARATION_RULES,
    trap_messages=TRAP_MESSAGES,
    wrong_declare_message=WRONG_DECLARE_MESSAGE,
)
"""
The bundled case. DeductionGame uses it unless another Scenario is injected.
"""
