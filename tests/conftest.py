"""
Pytest configuration and fixtures for cfgcases tests.
"""

import sys
import pytest
from pathlib import Path

# Add project root to path for all imports
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from grammar.builtin_grammars import BuiltinGrammars
from grammar.grammar_parser import GrammarParser


ARITHMETIC_GRAMMAR = """
E -> E + T | T
T -> T * F | F
F -> ( E ) | id
"""


class FixedSequenceRandom:
    """
    Deterministic stand-in for random.Random.

    randrange() returns the given values in order (cycling), and fails the
    test if a value falls outside the requested range.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = []
        self._index = 0

    def randrange(self, start, stop=None):
        if stop is None:
            start, stop = 0, start
        value = self.values[self._index % len(self.values)]
        self._index += 1
        self.calls.append((start, stop, value))
        assert start <= value < stop, f"{value} not in range({start}, {stop})"
        return value


@pytest.fixture
def arithmetic_grammar():
    """The E/T/F arithmetic expression grammar."""
    return GrammarParser().parse(ARITHMETIC_GRAMMAR, name="arithmetic")


@pytest.fixture
def builtin_arithmetic():
    return BuiltinGrammars.load("arithmetic")


@pytest.fixture
def fixed_random():
    """Factory for fixed-sequence random sources."""
    return FixedSequenceRandom


@pytest.fixture
def temp_app_dir(tmp_path):
    """Create a temporary .cfgcases directory."""
    app_dir = tmp_path / ".cfgcases"
    app_dir.mkdir(parents=True)
    return app_dir


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "max_depth": 30,
        "valid_count": 3,
        "invalid_count": 4,
        "extreme_per_kind": 2,
        "seed": 7,
        "identifier": "id",
        "grammar": "full_arithmetic",
    }
