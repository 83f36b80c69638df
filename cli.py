"""
cli.py
======
Command-line interface for The Case of the Missing Revenue.

Provides a text-based game loop for development, testing, and playing the
case without a graphical front end. All game logic is delegated to
DeductionGame; this module only handles I/O.

Usage:
    python cli.py

Environment (read from the process or a .env file):
    LOG_LEVEL     — logging level for missing_revenue.* loggers (default WARNING)
    MAX_ATTEMPTS  — override GameConfig.max_attempts
    MAX_STEPS     — override GameConfig.max_steps

Commands during play:
    /actions                     — list investigative actions
    /do <action>                 — perform an investigative action
    /board                       — show hypotheses, evidence, and budgets
    /reject <H> <E...>           — reject a hypothesis with evidence
    /declare <H> <E...>          — declare the final solution
    /end                         — end the investigation without deciding
    /retry                       — start the next attempt after a failure
    /restart                     — discard the session and start over
    /result                      — show the report card
    /quit                        — exit the game
"""

from __future__ import annotations

import dataclasses
import logging
import os

from dotenv import load_dotenv

from config import GAME_CONFIG, GameConfig
from game_engine import DeductionGame
from models import Screen
from ui_helpers import format_actions, format_evidence, format_hypotheses, format_result, parse_id_list


def config_from_env(base: GameConfig = GAME_CONFIG) -> GameConfig:
    """Apply MAX_ATTEMPTS / MAX_STEPS environment overrides to ``base``."""
    overrides = {}
    for env_name, field_name in (("MAX_ATTEMPTS", "max_attempts"), ("MAX_STEPS", "max_steps")):
        raw = os.environ.get(env_name)
        if raw and raw.isdigit() and int(raw) > 0:
            overrides[field_name] = int(raw)
    return dataclasses.replace(base, **overrides) if overrides else base


def print_briefing(game: DeductionGame) -> None:
    scenario = game.scenario
    print("\n" + "=" * 60)
    print(f"   {scenario.title.upper()}")
    print("=" * 60)
    print(f"\nDOMAIN  : {scenario.domain}")
    print(f"PROBLEM : {scenario.problem}")
    print("\nHypotheses:")
    print(format_hypotheses(game.hypotheses))
    print("\nGather evidence, reject the wrong hypotheses, then declare the solution.")
    print("Commands: /actions, /do, /board, /reject, /declare, /end, /retry, /restart, /result, /quit")
    print("-" * 60)


def print_board(game: DeductionGame) -> None:
    print("Hypotheses:")
    print(format_hypotheses(game.hypotheses))
    print("Evidence:")
    print(format_evidence(game.scenario, game.discovered_evidence))
    print(f"Steps left: {game.remaining_steps}   Attempts left: {game.remaining_attempts}")


def print_screen_change(game: DeductionGame) -> None:
    """Announce terminal screens after a decision."""
    if game.screen == Screen.SUCCESS:
        print("\n🎉 CASE SOLVED!\n")
        print(format_result(game.compute_result()))
    elif game.screen == Screen.FAILURE:
        print(f"\n❌ Attempt lost. {game.failure_feedback}")
        print(f"Attempts left: {game.remaining_attempts - 1}. Type /retry to try again.")
    elif game.screen == Screen.GAMEOVER:
        print(f"\n💀 GAME OVER. {game.game_over_feedback()}")
        print("Type /restart to play again.")


def run_cli() -> None:
    """
    Main CLI game loop.

    Starts a session and its first attempt, prints the case briefing, then
    processes player commands until the player quits.
    """
    game = DeductionGame(config=config_from_env())
    game.start_session()
    game.start_attempt()
    print_briefing(game)

    while True:
        user_input = input(f"\n[{game.screen.value} | steps left {game.remaining_steps}] > ").strip()
        if not user_input:
            continue

        command, _, rest = user_input.partition(" ")
        command = command.lower()

        # ---- Command: quit ----
        if command in {"/quit", "quit", "exit"}:
            print("Thanks for playing!")
            break

        if command == "/actions":
            print(format_actions(game.scenario))
            continue

        if command == "/board":
            print_board(game)
            continue

        # ---- Command: investigate ----
        if command == "/do":
            result = game.perform_action(rest.strip())
            if not result.success:
                print(result.message)
                continue
            character = game.scenario.character_index.get(result.character_id or "")
            speaker = f"{character.avatar} {character.name}" if character else "📋"
            for line in result.dialogue:
                print(f"  {speaker}: {line}")
            print(result.message)
            if result.discovered_evidence_ids:
                print(format_evidence(game.scenario, result.discovered_evidence_ids))
            continue

        # ---- Command: reject / declare ----
        if command in {"/reject", "/declare"}:
            ids = parse_id_list(rest)
            if len(ids) < 2:
                print(f"Usage: {command} <hypothesis> <evidence...>")
                continue
            if command == "/reject":
                outcome = game.reject_hypothesis(ids[0], ids[1:])
                print(("✓ " if outcome.success else "✗ ") + outcome.message)
            else:
                outcome = game.declare_solution(ids[0], ids[1:])
                if outcome.message and not outcome.success:
                    print(outcome.message)
                print_screen_change(game)
            continue

        if command == "/end":
            game.end_investigation()
            print_screen_change(game)
            continue

        if command == "/retry":
            game.retry_attempt()
            if game.screen == Screen.GAMEPLAY:
                print(f"Attempt {game.session.current_attempt} begins.")
                print_board(game)
            else:
                print("Nothing to retry right now.")
            continue

        if command == "/restart":
            game.restart_session()
            game.start_session()
            game.start_attempt()
            print_briefing(game)
            continue

        if command == "/result":
            print(format_result(game.compute_result()))
            continue

        print("Unknown command. Try /actions or /board.")


def main() -> None:
    # Configure logging at the entry point so all missing_revenue.* loggers
    # emit to stdout. Swap StreamHandler for a FileHandler here to redirect
    # logs to disk without touching any other module.
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    run_cli()


if __name__ == "__main__":
    main()
