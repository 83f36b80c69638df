import dataclasses

import pytest

from case_data import ACTIONS, EVIDENCE, HYPOTHESES, MAIN_SCENARIO, REJECTION_RULES
from models import ActionKind, RejectionRule, Scenario


def test_exactly_one_ground_truth_with_no_rejection_evidence() -> None:
    assert MAIN_SCENARIO.correct_hypothesis == "H3"
    assert not MAIN_SCENARIO.rejection_rules["H3"].valid
    assert MAIN_SCENARIO.competing_hypotheses() == ["H1", "H2"]


def test_lookups_are_keyed_by_id() -> None:
    assert MAIN_SCENARIO.evidence_index["E3"].source == "check_stock"
    assert MAIN_SCENARIO.action_index["review_reports"].yields == ("E2", "E6")
    assert MAIN_SCENARIO.action_index["declare_solution"].kind == ActionKind.DECISION


def test_ordered_evidence_dedupes_and_drops_unknown_ids() -> None:
    assert MAIN_SCENARIO.ordered_evidence(["E4", "E1", "E4", "E99"]) == ["E1", "E4"]


def test_scenario_rejects_unknown_ground_truth() -> None:
    with pytest.raises(ValueError):
        Scenario(
            id="broken", title="t", domain="d", problem="p",
            correct_hypothesis="H9",
            hypotheses=HYPOTHESES, evidence=EVIDENCE, actions=ACTIONS,
        )


def test_scenario_refuses_rejection_evidence_for_ground_truth() -> None:
    rules = dict(REJECTION_RULES)
    rules["H3"] = RejectionRule(valid=frozenset({"E1"}))
    with pytest.raises(ValueError):
        dataclasses.replace(MAIN_SCENARIO, rejection_rules=rules)


def test_scenario_rejects_rules_naming_unknown_evidence() -> None:
    rules = dict(REJECTION_RULES)
    rules["H1"] = RejectionRule(valid=frozenset({"E42"}))
    with pytest.raises(ValueError):
        dataclasses.replace(MAIN_SCENARIO, rejection_rules=rules)


def test_rejection_bonus_must_use_valid_evidence() -> None:
    rules = dict(REJECTION_RULES)
    rules["H1"] = RejectionRule(valid=frozenset({"E1"}), bonuses=((frozenset({"E3"}), 50),))
    with pytest.raises(ValueError):
        dataclasses.replace(MAIN_SCENARIO, rejection_rules=rules)


def test_lookup_indexes_are_declared_fields() -> None:
    derived = {f.name: f for f in dataclasses.fields(Scenario) if not f.init}
    assert set(derived) == {
        "hypothesis_index", "evidence_index", "action_index", "character_index", "evidence_order",
    }
    assert not any(f.compare or f.repr for f in derived.values())

    rebuilt = dataclasses.replace(MAIN_SCENARIO, title="Another title")
    assert rebuilt.evidence_index["E3"] is MAIN_SCENARIO.evidence_index["E3"]
    assert "evidence_index" not in repr(MAIN_SCENARIO)
