"""TestStore — loads scoring test definitions from ``v1/tests.yaml``.

This is the single source of truth for test data at runtime.  The store is
loaded once at startup and shared read-only by every session.

The file holds a list of tests.  JSON is a subset of YAML, so the legacy
``tests_config.json`` format (camelCase keys) loads through the same path.

Usage::

    store = TestStore()             # defaults to v1/tests.yaml from repo root
    store.load()

    test = store.get_test("APACHE II (Acute Physiology And Chronic Health Evaluation II)")
    same = store.find_by_command("/apacheii")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from scoring_rulesets.models.schema import ScoringTest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def default_tests_file() -> Path:
    """``SCORING_TESTS_FILE`` if set, else ``v1/tests.yaml`` under the repo root."""
    override = os.getenv("SCORING_TESTS_FILE")
    if override:
        return Path(override)
    return find_repo_root() / "v1" / "tests.yaml"


# ---------------------------------------------------------------------------
# TestStore
# ---------------------------------------------------------------------------

class TestStore:
    """Loads all test definitions from one file and provides lookup.

    Attributes populated after :meth:`load`:

        tests — list[ScoringTest] in file order
    """

    # keep pytest from collecting this class
    __test__ = False

    def __init__(self, tests_file: str | Path | None = None) -> None:
        self._path = Path(tests_file) if tests_file is not None else default_tests_file()
        self.tests: list[ScoringTest] = []
        self._by_name: dict[str, ScoringTest] = {}
        self._by_command: dict[str, ScoringTest] = {}

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse the tests file into typed models.

        Call this once at startup.  Raises ``FileNotFoundError`` if the file
        is missing, ``ValueError`` if it does not hold a list, and pydantic's
        ``ValidationError`` for malformed entries.
        """
        raw = load_yaml(self._path)
        if not isinstance(raw, list):
            raise ValueError(f"Expected a list of tests in {self._path}, got {type(raw).__name__}")
        self.add_tests(ScoringTest.model_validate(entry) for entry in raw)
        logger.info("TestStore loaded %d tests from %s", len(self.tests), self._path)

    def add_tests(self, tests: Iterable[ScoringTest]) -> None:
        """Register already-built tests (used by :meth:`load` and by tests)."""
        for test in tests:
            if test.name in self._by_name:
                logger.warning("Duplicate test name %r; keeping the first definition", test.name)
                continue
            self.tests.append(test)
            self._by_name[test.name] = test
            self._by_command.setdefault(test.chat_command.lower(), test)

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get_test(self, name: str) -> ScoringTest:
        """Look up a test by its exact name.

        Raises:
            KeyError: if no test has that name.
        """
        return self._by_name[name]

    def find_by_command(self, command: str) -> ScoringTest | None:
        """Return the test started by *command* (e.g. ``/apacheii``), or None."""
        return self._by_command.get(command.lower())

    def commands(self) -> dict[str, str]:
        """``{command: test name}`` in file order."""
        return {cmd: test.name for cmd, test in self._by_command.items()}
