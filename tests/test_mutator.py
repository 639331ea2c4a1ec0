"""
Tests for grammar/mutator.py - invalid case generation.
"""

import pytest

from grammar.mutator import (
    DESCRIPTIONS, INVALID_CHARACTERS, GrammarMutator, MutationKind, mutate_string,
)
from grammar.tokens import OPERATORS


@pytest.fixture
def mutate(fixed_random):
    """Apply one mutation with a fixed random sequence."""
    def apply(text, kind, values):
        return GrammarMutator(rng=fixed_random(values)).mutate(text, kind).text
    return apply


class TestOperatorMutations:
    """Tests for operator-based mutations."""

    @pytest.mark.parametrize("seed", range(5))
    def test_leading_operator(self, seed):
        result = mutate_string("id + id", MutationKind.LEADING_OPERATOR, seed=seed)
        tokens = result.text.split()
        assert tokens[0] in OPERATORS
        assert tokens[1:] == ["id", "+", "id"]

    @pytest.mark.parametrize("seed", range(5))
    def test_trailing_operator(self, seed):
        tokens = mutate_string("id + id", MutationKind.TRAILING_OPERATOR, seed=seed).text.split()
        assert tokens[:3] == ["id", "+", "id"]
        assert tokens[3] in OPERATORS

    def test_duplicate_operator(self, mutate):
        assert mutate("id + id * id", MutationKind.DUPLICATE_OPERATOR, [1]) == "id + id * * id"

    def test_duplicate_operator_without_operators(self, mutate):
        assert mutate("id", MutationKind.DUPLICATE_OPERATOR, [0]) == "+ + id"

    def test_missing_operator(self, mutate):
        assert mutate("id + id", MutationKind.MISSING_OPERATOR, [0]) == "id id"

    def test_missing_operator_is_noop_without_operators(self, mutate):
        assert mutate("( id )", MutationKind.MISSING_OPERATOR, [0]) == "( id )"


class TestParenMutations:
    """Tests for parenthesis mutations."""

    def test_unbalanced_removes_paren(self, mutate):
        assert mutate("( id )", MutationKind.UNBALANCED_PARENS, [0]) == "id )"
        assert mutate("( id )", MutationKind.UNBALANCED_PARENS, [1]) == "( id"

    def test_unbalanced_inserts_paren_when_none(self, mutate):
        assert mutate("id + id", MutationKind.UNBALANCED_PARENS, [1, 1]) == "id ) + id"
        assert mutate("id + id", MutationKind.UNBALANCED_PARENS, [3, 0]) == "id + id ("

    def test_empty_parens(self, mutate):
        assert mutate("id + id", MutationKind.EMPTY_PARENS, [3]) == "id + id ( )"
        assert mutate("id", MutationKind.EMPTY_PARENS, [0]) == "( ) id"


class TestOperandAndTokenMutations:
    """Tests for identifier, character and token mutations."""

    def test_missing_operand(self, mutate):
        assert mutate("id + id2", MutationKind.MISSING_OPERAND, [1]) == "id +"

    def test_missing_operand_is_noop_without_identifiers(self, mutate):
        assert mutate("( + )", MutationKind.MISSING_OPERAND, [0]) == "( + )"

    def test_missing_operand_custom_identifier(self, fixed_random):
        mutator = GrammarMutator(rng=fixed_random([0]), identifier="num")
        assert mutator.mutate("num * num", MutationKind.MISSING_OPERAND).text == "* num"

    def test_invalid_character(self, mutate):
        assert mutate("id", MutationKind.INVALID_CHARACTER, [0, 2]) == "$ id"

    @pytest.mark.parametrize("seed", range(5))
    def test_invalid_character_from_set(self, seed):
        tokens = mutate_string("id * id", MutationKind.INVALID_CHARACTER, seed=seed).text.split()
        assert len(tokens) == 4
        assert len([t for t in tokens if t in INVALID_CHARACTERS]) == 1

    def test_split_token(self, mutate):
        assert mutate("id + id", MutationKind.SPLIT_TOKEN, [2, 1]) == "id + i d"

    def test_split_token_changes_only_chosen_position(self, mutate):
        assert mutate("id + id", MutationKind.SPLIT_TOKEN, [0, 1]) == "i d + id"

    def test_split_token_noop_on_single_character(self, mutate):
        assert mutate("id + id", MutationKind.SPLIT_TOKEN, [1]) == "id + id"


class TestGrammarMutator:
    """Tests for mutation results and batch generation."""

    def test_result_fields(self):
        result = mutate_string("id + id", MutationKind.EMPTY_PARENS, seed=1)
        assert result.kind == MutationKind.EMPTY_PARENS
        assert result.description == DESCRIPTIONS[MutationKind.EMPTY_PARENS]
        assert result.original == "id + id"

    def test_every_kind_has_description(self):
        assert set(DESCRIPTIONS) == set(MutationKind)

    def test_empty_input_returns_none(self):
        assert GrammarMutator(seed=1).mutate("   ", MutationKind.LEADING_OPERATOR) is None

    def test_generate_invalid_count(self):
        results = GrammarMutator(seed=3).generate_invalid("( id + id ) * id", 12)
        assert len(results) == 12
        assert all(r.original == "( id + id ) * id" for r in results)
        assert all(isinstance(r.kind, MutationKind) for r in results)

    def test_generate_invalid_empty_input(self):
        assert GrammarMutator(seed=3).generate_invalid("", 5) == []

    def test_generate_invalid_is_reproducible(self):
        first = GrammarMutator(seed=9).generate_invalid("id + id * id", 8)
        second = GrammarMutator(seed=9).generate_invalid("id + id * id", 8)
        assert [r.text for r in first] == [r.text for r in second]

    def test_kind_drawn_from_rng(self, fixed_random):
        # Index 2 is LEADING_OPERATOR; the next value picks the operator
        mutator = GrammarMutator(rng=fixed_random([2, 0]))
        result = mutator.generate_invalid("id", 1)[0]
        assert result.kind == MutationKind.LEADING_OPERATOR
        assert result.text == "+ id"
