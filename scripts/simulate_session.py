#!/usr/bin/env python3
"""Simulate a scoring conversation end-to-end through the ScoringEngine.

Sends the same chat messages a user would (``/start``, the test command,
the ventilation reply and numbered answers) and prints every bot reply.

By default answers are **randomised** (``--random``, on by default) so each
run takes a different path through the ventilation branch and the score
bands.  Use ``--no-random`` to always pick option 1 and answer "no".

Usage::

    # Default run (APACHE II, random answers)
    python scripts/simulate_session.py

    # Deterministic APACHE III run
    python scripts/simulate_session.py -c /apacheiii --no-random

    # Force the ventilated branch
    python scripts/simulate_session.py --ventilated

    # List available test commands
    python scripts/simulate_session.py --list-tests
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure src/ is importable when running from a checkout.
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from scoring_rulesets.engine import ScoringEngine  # noqa: E402
from scoring_rulesets.models.session import QuestionStep, ResultStep  # noqa: E402
from scoring_rulesets.ruleset import TestStore  # noqa: E402

USER_ID = "sim_user"
_DEFAULT_COMMAND = "/apacheii"

logger = logging.getLogger("simulate_session")


def _say(text: str, quiet: bool) -> None:
    if not quiet:
        print(text)
        print()


def run_simulation(
    store: TestStore,
    command: str,
    use_random: bool,
    ventilated: bool | None,
    quiet: bool,
) -> ResultStep | None:
    """Drive one test to completion and return its result step."""
    engine = ScoringEngine(store)

    for message in ("/start", command):
        _say(f">>> {message}", quiet)
        reply = engine.handle_message(USER_ID, message)
        _say(reply.text, quiet)

    while isinstance(reply.step, QuestionStep):
        step = reply.step
        if step.awaiting_ventilation:
            on_vent = ventilated if ventilated is not None else (use_random and random.random() < 0.5)
            message = "yes" if on_vent else "no"
        else:
            options = step.question.options
            choice = random.randrange(len(options)) if use_random else 0
            message = str(choice + 1)
            logger.debug("%s -> %r", step.question.parameter_name, options[choice])

        _say(f">>> {message}", quiet)
        reply = engine.handle_message(USER_ID, message)
        _say(reply.text, quiet)

    if not isinstance(reply.step, ResultStep):
        logger.error("Conversation ended without a result: %s", reply.text)
        return None
    return reply.step


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate a scoring conversation end-to-end through the ScoringEngine.",
    )
    parser.add_argument(
        "-c", "--command",
        default=_DEFAULT_COMMAND,
        help="Test command to run (default: /apacheii)",
    )
    parser.add_argument(
        "-f", "--tests-file",
        default=None,
        help="Tests file to load (default: v1/tests.yaml)",
    )
    parser.add_argument(
        "--list-tests",
        action="store_true",
        help="List available test commands and exit",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise answers (default: on). Use --no-random to always pick option 1.",
    )
    parser.add_argument(
        "--ventilated",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force the ventilation answer instead of choosing it.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Print only the final score line",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable DEBUG logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )

    store = TestStore(args.tests_file)
    store.load()

    if args.list_tests:
        for command, name in store.commands().items():
            print(f"  {command:<12s} {name}")
        sys.exit(0)

    if store.find_by_command(args.command) is None:
        print(f"Unknown test command: {args.command}", file=sys.stderr)
        sys.exit(2)

    result = run_simulation(store, args.command, args.random, args.ventilated, args.quiet)
    if result is None:
        sys.exit(1)
    print(f"{result.test_name}: score={result.total_score} "
          f"diagnosis={result.diagnosis!r} mortality={result.mortality_risk}")


if __name__ == "__main__":
    main()
