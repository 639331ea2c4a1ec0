"""
Tests for analysis/classifier.py - test case labeling and metadata.
"""

import pytest

from analysis.classifier import Category, Classifier, TestCase, count_by_category, string_metadata
from grammar.extremes import ExtremeCaseGenerator, ExtremeKind, build_result
from grammar.generator import DerivationEngine
from grammar.mutator import GrammarMutator, MutationKind, MutationResult


def first_derivation(grammar, seed):
    engine = DerivationEngine(grammar, max_depth=20, seed=seed)
    derivation = engine.attempt()
    while derivation is None:
        derivation = engine.attempt()
    return derivation


class TestTestCase:
    """Tests for the TestCase record."""

    def make_case(self):
        return TestCase(id="VALID_0001", content="id", category=Category.VALID, description="d")

    @pytest.mark.parametrize("value", [3, "text", True, {"+": 2, "*": 0}])
    def test_supported_metadata(self, value):
        case = self.make_case()
        case.add_metadata("key", value)
        assert case.metadata["key"] == value

    @pytest.mark.parametrize("value", [1.5, None, [1, 2], {"+": "two"}, {1: 2}])
    def test_unsupported_metadata(self, value):
        case = self.make_case()
        with pytest.raises(TypeError):
            case.add_metadata("key", value)
        assert "key" not in case.metadata

    def test_to_dict(self):
        case = self.make_case()
        case.add_metadata("length", 2)
        data = case.to_dict()
        assert data["category"] == "VALID"
        assert data["metadata"] == {"length": 2}
        assert "created_at" in data

    def test_str(self):
        assert str(self.make_case()) == "[VALID_0001] VALID: id"


class TestStringMetadata:
    """Tests for the metadata shared by every category."""

    def test_counts(self):
        meta = string_metadata("( id + id2 ) * x")
        assert meta["length"] == len("( id + id2 ) * x")
        assert meta["token_count"] == 7
        assert meta["open_parens"] == 1
        assert meta["close_parens"] == 1
        assert meta["parens_balanced"] is True
        assert meta["operators"] == {"+": 1, "*": 1, "-": 0, "/": 0}
        assert meta["total_operators"] == 2
        assert meta["identifier_count"] == 2

    @pytest.mark.parametrize("text,balanced", [
        ("( id", False),
        (") id (", True),
        ("id", True),
        ("( ( id )", False),
    ])
    def test_parens_balanced_is_count_equality(self, text, balanced):
        assert string_metadata(text)["parens_balanced"] is balanced

    def test_custom_identifier(self):
        assert string_metadata("num + num + id", identifier="num")["identifier_count"] == 2


class TestClassifier:
    """Tests for the classification session."""

    def test_valid_case(self, arithmetic_grammar):
        derivation = first_derivation(arithmetic_grammar, seed=5)
        case = Classifier().classify_valid(derivation)
        assert case.id == "VALID_0001"
        assert case.category == Category.VALID
        assert case.content == derivation.text
        assert case.metadata["generation_method"] == "leftmost_derivation"
        assert case.metadata["depth"] == derivation.depth
        assert case.metadata["derivation_steps"] == derivation.expansions
        assert case.metadata["token_count"] == len(derivation.text.split())

    def test_invalid_case(self):
        mutation = MutationResult("+ id + id", MutationKind.LEADING_OPERATOR, "Leading", "id + id")
        case = Classifier().classify_invalid(mutation)
        assert case.id == "INVALID_0001"
        assert case.description == "Leading"
        assert case.metadata["mutation_kind"] == "leading_operator"
        assert case.metadata["original"] == "id + id"
        assert case.metadata["total_operators"] == 2

    def test_extreme_case(self):
        extreme = build_result("id", ExtremeKind.SHORT_EXPRESSION, "Shortest", terminal_count=1)
        case = Classifier().classify_extreme(extreme)
        assert case.id == "EXTREME_0001"
        assert case.metadata["extreme_kind"] == "short_expression"
        assert case.metadata["terminal_count"] == 1
        assert case.metadata["token_count"] == 1
        assert case.metadata["total_operators"] == 0
        assert case.metadata["metric"] == "terminal_count"

    def test_counter_shared_across_categories(self, arithmetic_grammar):
        classifier = Classifier()
        derivation = first_derivation(arithmetic_grammar, seed=1)
        mutation = GrammarMutator(seed=1).mutate(derivation.text, MutationKind.TRAILING_OPERATOR)
        extreme = ExtremeCaseGenerator(arithmetic_grammar).generate(ExtremeKind.MAX_NESTING)

        ids = [
            classifier.classify_valid(derivation).id,
            classifier.classify_invalid(mutation).id,
            classifier.classify_extreme(extreme).id,
        ]
        assert ids == ["VALID_0001", "INVALID_0002", "EXTREME_0003"]

    def test_reset(self, arithmetic_grammar):
        classifier = Classifier()
        derivation = first_derivation(arithmetic_grammar, seed=1)
        classifier.classify_valid(derivation)
        classifier.classify_valid(derivation)
        classifier.reset()
        assert classifier.classify_valid(derivation).id == "VALID_0001"

    def test_ids_strictly_increasing_and_unique(self, arithmetic_grammar):
        classifier = Classifier()
        derivations = DerivationEngine(arithmetic_grammar, max_depth=20, seed=2).generate_derivations(10)
        mutations = GrammarMutator(seed=2).generate_invalid("id + id * id", 10)
        extremes = ExtremeCaseGenerator(arithmetic_grammar, depth_bound=20, seed=2).generate_all(1)

        cases = (classifier.classify_valid_batch(derivations)
                 + classifier.classify_invalid_batch(mutations)
                 + classifier.classify_extreme_batch(extremes))

        numbers = [int(c.id.split("_")[1]) for c in cases]
        assert numbers == list(range(1, len(cases) + 1))
        assert len({c.id for c in cases}) == len(cases)

    def test_parens_metadata_matches_counts_for_every_category(self, arithmetic_grammar):
        classifier = Classifier()
        derivations = DerivationEngine(arithmetic_grammar, max_depth=20, seed=3).generate_derivations(10)
        mutations = GrammarMutator(seed=3).generate_invalid("( id + id ) * id", 20)
        extremes = ExtremeCaseGenerator(arithmetic_grammar, depth_bound=20, seed=3).generate_all(1)

        cases = (classifier.classify_valid_batch(derivations)
                 + classifier.classify_invalid_batch(mutations)
                 + classifier.classify_extreme_batch(extremes))

        for case in cases:
            tokens = case.content.split()
            assert case.metadata["parens_balanced"] == (tokens.count("(") == tokens.count(")"))

    def test_count_by_category(self):
        cases = [
            TestCase(id="VALID_0001", content="id", category=Category.VALID, description=""),
            TestCase(id="VALID_0002", content="id", category=Category.VALID, description=""),
            TestCase(id="EXTREME_0003", content="id", category=Category.EXTREME, description=""),
        ]
        assert count_by_category(cases) == {"VALID": 2, "INVALID": 0, "EXTREME": 1}
