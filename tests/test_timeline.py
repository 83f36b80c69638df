from timeline import build_timeline
from tests.conftest import investigate


def test_timeline_follows_log_order(game, scenario) -> None:
    investigate(game, "check_stock", "check_stock", "review_invoices")
    game.reject_hypothesis("H2", ["E2"])
    game.reject_hypothesis("H2", ["E3"])
    game.declare_solution("H3", ["E3"])

    items = build_timeline(scenario, game.current_attempt.steps)

    assert [i.step for i in items] == [1, 2, 3, 4, 5, 6]
    assert items[0].description == "Check the stock room"
    assert "E3" in items[0].outcome
    assert items[1].outcome == "Nothing new"
    assert items[3].is_positive is False
    assert "trap" in items[3].outcome
    assert items[4].is_positive is True
    assert items[5].outcome.startswith("Correct")


def test_timeline_does_not_touch_attempt(game, scenario) -> None:
    game.end_investigation()
    attempt = game.session.attempts[0]
    before = list(attempt.steps)

    first = build_timeline(scenario, attempt.steps)
    second = build_timeline(scenario, attempt.steps)

    assert first == second
    assert attempt.steps == before
    assert first[-1].outcome == "No decision"
    assert first[-1].is_positive is False
