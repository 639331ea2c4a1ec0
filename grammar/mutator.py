"""
Grammar Mutator

Turns valid strings into syntactically invalid ones with token-level
transforms.
"""

import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .tokens import CLOSE_PAREN, DEFAULT_IDENTIFIER, OPEN_PAREN, OPERATORS, is_identifier, tokenize


logger = logging.getLogger("cfgcases.grammar.mutator")

INVALID_CHARACTERS = ("@", "#", "$", "%", "&", "!", "?")


class MutationKind(Enum):
    """Syntactic mutations applied to valid strings"""
    UNBALANCED_PARENS = "unbalanced_parens"
    DUPLICATE_OPERATOR = "duplicate_operator"
    LEADING_OPERATOR = "leading_operator"
    TRAILING_OPERATOR = "trailing_operator"
    EMPTY_PARENS = "empty_parens"
    MISSING_OPERATOR = "missing_operator"
    MISSING_OPERAND = "missing_operand"
    INVALID_CHARACTER = "invalid_character"
    SPLIT_TOKEN = "split_token"


DESCRIPTIONS = {
    MutationKind.UNBALANCED_PARENS: "Unbalanced parentheses",
    MutationKind.DUPLICATE_OPERATOR: "Duplicated operator",
    MutationKind.LEADING_OPERATOR: "Operator at the start of the expression",
    MutationKind.TRAILING_OPERATOR: "Operator at the end of the expression",
    MutationKind.EMPTY_PARENS: "Empty parentheses",
    MutationKind.MISSING_OPERATOR: "Missing operator between operands",
    MutationKind.MISSING_OPERAND: "Missing identifier",
    MutationKind.INVALID_CHARACTER: "Invalid character inserted",
    MutationKind.SPLIT_TOKEN: "Space inserted inside a token",
}


@dataclass(frozen=True)
class MutationResult:
    """An invalid string derived from a valid one"""
    text: str
    kind: MutationKind
    description: str
    original: str


class GrammarMutator:
    """
    Mutates valid strings into invalid test cases.

    Every mutation works on the whitespace-split token list and returns the
    tokens joined by single spaces.

    Mutation strategies:
    - Remove (or add) a parenthesis
    - Duplicate, prepend, append or drop an operator
    - Insert empty parentheses
    - Drop an identifier
    - Insert an out-of-alphabet character
    - Split a token with a space

    Some strategies fall back to an insertion when their target is missing;
    missing-operator, missing-operand and split-token leave the string
    unchanged instead.
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None,
                 identifier: str = DEFAULT_IDENTIFIER):
        """
        Initialize grammar mutator.

        Args:
            rng: Random source exposing randrange(); overrides seed
            seed: Random seed for reproducibility
            identifier: Spelling of the identifier terminal
        """
        self.rng = rng if rng is not None else random.Random(seed)
        self.identifier = identifier
        self.logger = logging.getLogger("cfgcases.grammar.mutator")

        self._strategies = {
            MutationKind.UNBALANCED_PARENS: self._mutate_unbalanced_parens,
            MutationKind.DUPLICATE_OPERATOR: self._mutate_duplicate_operator,
            MutationKind.LEADING_OPERATOR: self._mutate_leading_operator,
            MutationKind.TRAILING_OPERATOR: self._mutate_trailing_operator,
            MutationKind.EMPTY_PARENS: self._mutate_empty_parens,
            MutationKind.MISSING_OPERATOR: self._mutate_missing_operator,
            MutationKind.MISSING_OPERAND: self._mutate_missing_operand,
            MutationKind.INVALID_CHARACTER: self._mutate_invalid_character,
            MutationKind.SPLIT_TOKEN: self._mutate_split_token,
        }

    def mutate(self, input_str: str, kind: MutationKind) -> Optional[MutationResult]:
        """
        Apply one mutation to a valid string.

        Args:
            input_str: Valid string to mutate
            kind: Mutation to apply

        Returns:
            Mutation result, or None if the string has no tokens
        """
        tokens = tokenize(input_str)
        if not tokens:
            return None

        mutated = self._strategies[kind](tokens)
        return MutationResult(" ".join(mutated), kind, DESCRIPTIONS[kind], input_str)

    def generate_invalid(self, input_str: str, count: int) -> List[MutationResult]:
        """
        Generate invalid cases from one valid string.

        A mutation kind is drawn uniformly for every requested case; kinds
        may repeat.

        Args:
            input_str: Valid seed string
            count: Number of mutations to attempt

        Returns:
            List of mutation results (empty for a string with no tokens)
        """
        kinds = list(MutationKind)
        results = []

        for _ in range(count):
            kind = self._pick(kinds)
            result = self.mutate(input_str, kind)
            if result is not None:
                results.append(result)

        self.logger.debug(f"Generated {len(results)} invalid cases from '{input_str}'")
        return results

    def _pick(self, items):
        return items[self.rng.randrange(len(items))]

    def _mutate_unbalanced_parens(self, tokens: List[str]) -> List[str]:
        """Remove a random parenthesis, or insert an unmatched one."""
        parens = [i for i, t in enumerate(tokens) if t in (OPEN_PAREN, CLOSE_PAREN)]

        if parens:
            del tokens[self._pick(parens)]
        else:
            pos = self.rng.randrange(len(tokens) + 1)
            tokens.insert(pos, OPEN_PAREN if self.rng.randrange(2) == 0 else CLOSE_PAREN)

        return tokens

    def _mutate_duplicate_operator(self, tokens: List[str]) -> List[str]:
        """Duplicate a random operator in place, or insert "+ +"."""
        operators = [i for i, t in enumerate(tokens) if t in OPERATORS]

        if operators:
            pos = self._pick(operators)
            tokens.insert(pos + 1, tokens[pos])
        else:
            pos = self.rng.randrange(len(tokens))
            tokens[pos:pos] = ["+", "+"]

        return tokens

    def _mutate_leading_operator(self, tokens: List[str]) -> List[str]:
        tokens.insert(0, self._pick(OPERATORS))
        return tokens

    def _mutate_trailing_operator(self, tokens: List[str]) -> List[str]:
        tokens.append(self._pick(OPERATORS))
        return tokens

    def _mutate_empty_parens(self, tokens: List[str]) -> List[str]:
        pos = self.rng.randrange(len(tokens) + 1)
        tokens[pos:pos] = [OPEN_PAREN, CLOSE_PAREN]
        return tokens

    def _mutate_missing_operator(self, tokens: List[str]) -> List[str]:
        operators = [i for i, t in enumerate(tokens) if t in OPERATORS]
        if operators:
            del tokens[self._pick(operators)]
        return tokens

    def _mutate_missing_operand(self, tokens: List[str]) -> List[str]:
        operands = [i for i, t in enumerate(tokens) if is_identifier(t, self.identifier)]
        if operands:
            del tokens[self._pick(operands)]
        return tokens

    def _mutate_invalid_character(self, tokens: List[str]) -> List[str]:
        pos = self.rng.randrange(len(tokens) + 1)
        tokens.insert(pos, self._pick(INVALID_CHARACTERS))
        return tokens

    def _mutate_split_token(self, tokens: List[str]) -> List[str]:
        """Insert a space inside a random token longer than one character."""
        pos = self.rng.randrange(len(tokens))
        token = tokens[pos]

        if len(token) > 1:
            cut = self.rng.randrange(1, len(token))
            tokens[pos] = f"{token[:cut]} {token[cut:]}"

        return tokens


# Convenience function
def mutate_string(input_str: str, kind: MutationKind, seed: Optional[int] = None) -> Optional[MutationResult]:
    """
    Quick function to mutate string.

    Example:
        >>> result = mutate_string("id + id", MutationKind.LEADING_OPERATOR)
        >>> result.text.split()[1:]
        ['id', '+', 'id']
    """
    mutator = GrammarMutator(seed=seed)
    return mutator.mutate(input_str, kind)
