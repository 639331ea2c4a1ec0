"""
Tests for grammar/extremes.py - extreme case search.
"""

import pytest

from analysis.classifier import Classifier
from grammar.errors import DepthExceeded
from grammar.extremes import (
    COMPLEXITY_FALLBACK, NESTING_LEVELS, ExtremeCaseGenerator, ExtremeKind,
    MinimalDerivation, build_result,
)
from grammar.generator import DerivationEngine
from grammar.grammar_parser import parse_grammar
from grammar.tokens import count_operators, nesting_depth, tokenize


NEVER_TERMINATES = "S -> a S"


class TestFixedShapeKinds:
    """Tests for the kinds built from the arithmetic spellings."""

    def test_max_nesting(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar, seed=1).generate(ExtremeKind.MAX_NESTING)
        tokens = tokenize(result.text)
        assert nesting_depth(tokens) == NESTING_LEVELS == 5
        assert result.nesting_level == 5
        assert tokens.count("(") == tokens.count(")")
        assert result.metric == "nesting_level"
        assert result.metric_value == 5

    def test_max_nesting_shape(self, arithmetic_grammar):
        text = ExtremeCaseGenerator(arithmetic_grammar).generate(ExtremeKind.MAX_NESTING).text
        assert text.startswith("( ( ( ( ( id ) + id )")
        assert text.endswith(") + id )")

    def test_short_expression(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar, seed=1).generate(ExtremeKind.SHORT_EXPRESSION)
        assert result.text == "id"
        assert result.terminal_count == 1
        assert result.operator_count == 0
        assert result.metric == "terminal_count"

    def test_fixed_kinds_ignore_grammar(self):
        generator = ExtremeCaseGenerator(parse_grammar(NEVER_TERMINATES))
        assert generator.generate(ExtremeKind.SHORT_EXPRESSION).text == "id"
        assert generator.generate(ExtremeKind.MAX_NESTING).nesting_level == 5


class TestMinimalDerivation:
    """Tests for the deterministic minimal derivation."""

    def test_arithmetic_minimum(self, arithmetic_grammar):
        text, steps = MinimalDerivation(arithmetic_grammar).derive()
        assert text == "id"
        assert steps == 3

    def test_prefers_fewest_nonterminals_then_shortest(self):
        grammar = parse_grammar("S -> a b c | A | x y\nA -> z")
        text, steps = MinimalDerivation(grammar).derive()
        assert text == "x y"
        assert steps == 1

    def test_tie_goes_to_first_declared(self):
        grammar = parse_grammar("S -> a | b")
        assert MinimalDerivation(grammar).derive() == ("a", 1)

    def test_step_limit(self):
        with pytest.raises(DepthExceeded):
            MinimalDerivation(parse_grammar(NEVER_TERMINATES), step_limit=10).derive()

    def test_min_depth_result(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar).generate(ExtremeKind.MIN_DEPTH)
        assert result.text == "id"
        assert result.depth == 4
        assert result.metric == "depth"

    def test_min_depth_matches_valid_case_depth(self, arithmetic_grammar, fixed_random):
        # E => T => F => id, chosen explicitly and found by the minimal search
        derivation = DerivationEngine(arithmetic_grammar, rng=fixed_random([1, 1, 1])).derive()
        assert derivation.text == "id"

        classifier = Classifier()
        valid = classifier.classify_valid(derivation)
        minimal = classifier.classify_extreme(
            ExtremeCaseGenerator(arithmetic_grammar).generate(ExtremeKind.MIN_DEPTH))
        assert valid.metadata["depth"] == minimal.metadata["depth"] == 4


class TestSearchKinds:
    """Tests for the trial-based kinds."""

    def test_max_depth(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar, depth_bound=20, seed=4).generate(ExtremeKind.MAX_DEPTH)
        assert result.kind == ExtremeKind.MAX_DEPTH
        assert 1 < result.depth <= 2 * 20 + 1
        assert set(tokenize(result.text)) <= {"id", "+", "*", "(", ")"}

    def test_max_complexity(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar, seed=4).generate(ExtremeKind.MAX_COMPLEXITY)
        assert result.operator_count == count_operators(tokenize(result.text))
        assert result.metric == "operator_count"

    def test_long_expression(self, arithmetic_grammar):
        result = ExtremeCaseGenerator(arithmetic_grammar, seed=4).generate(ExtremeKind.LONG_EXPRESSION)
        assert result.terminal_count == len(tokenize(result.text))
        assert result.terminal_count >= 1

    def test_max_depth_fails_when_every_trial_fails(self):
        generator = ExtremeCaseGenerator(parse_grammar(NEVER_TERMINATES), depth_bound=5, seed=1)
        with pytest.raises(DepthExceeded) as exc_info:
            generator.generate(ExtremeKind.MAX_DEPTH)
        assert exc_info.value.max_depth == 10

    def test_long_expression_fails_when_every_trial_fails(self):
        generator = ExtremeCaseGenerator(parse_grammar(NEVER_TERMINATES), depth_bound=5, seed=1)
        with pytest.raises(DepthExceeded):
            generator.generate(ExtremeKind.LONG_EXPRESSION)

    def test_max_complexity_fallback(self):
        generator = ExtremeCaseGenerator(parse_grammar(NEVER_TERMINATES), depth_bound=5, seed=1)
        result = generator.generate(ExtremeKind.MAX_COMPLEXITY)
        assert result.text == COMPLEXITY_FALLBACK
        assert result.operator_count == 4

    def test_max_complexity_keeps_operator_free_success(self):
        generator = ExtremeCaseGenerator(parse_grammar("S -> a"), seed=1)
        result = generator.generate(ExtremeKind.MAX_COMPLEXITY)
        assert result.text == "a"
        assert result.operator_count == 0

    def test_best_trial_first_wins_ties(self, fixed_random):
        # Every trial derives a single-step string, so all scores tie
        grammar = parse_grammar("S -> a | b")
        generator = ExtremeCaseGenerator(grammar, rng=fixed_random([1, 0]))
        assert generator.generate(ExtremeKind.LONG_EXPRESSION).text == "b"


class TestGenerateAll:
    """Tests for generating every kind."""

    def test_every_kind(self, arithmetic_grammar):
        results = ExtremeCaseGenerator(arithmetic_grammar, depth_bound=20, seed=6).generate_all(per_kind=1)
        assert [r.kind for r in results] == list(ExtremeKind)

    def test_per_kind(self, arithmetic_grammar):
        results = ExtremeCaseGenerator(arithmetic_grammar, depth_bound=20, seed=6).generate_all(per_kind=2)
        assert len(results) == 12

    def test_failing_kinds_skipped(self):
        results = ExtremeCaseGenerator(parse_grammar(NEVER_TERMINATES), depth_bound=5, seed=1).generate_all(1)
        kinds = [r.kind for r in results]
        assert kinds == [ExtremeKind.MAX_COMPLEXITY, ExtremeKind.SHORT_EXPRESSION, ExtremeKind.MAX_NESTING]


class TestBuildResult:
    """Tests for metric scanning."""

    def test_scans_missing_metrics(self):
        result = build_result("( id + id ) * id", ExtremeKind.LONG_EXPRESSION, "test")
        assert result.operator_count == 2
        assert result.terminal_count == 7
        assert result.nesting_level == 1
        assert result.depth == 0

    def test_given_metrics_kept(self):
        result = build_result("id", ExtremeKind.SHORT_EXPRESSION, "test", terminal_count=1, depth=3)
        assert result.terminal_count == 1
        assert result.depth == 3
