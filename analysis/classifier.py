"""
Test Case Classifier

Labels generated strings as valid, invalid or extreme test cases with a
sequential identifier and a metadata map for later analysis.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Union

from grammar.extremes import ExtremeResult
from grammar.generator import Derivation
from grammar.mutator import MutationResult
from grammar.tokens import (
    CLOSE_PAREN, DEFAULT_IDENTIFIER, OPEN_PAREN,
    count_identifiers, operator_histogram, tokenize,
)


logger = logging.getLogger("cfgcases.analysis.classifier")

MetadataValue = Union[int, str, bool, Dict[str, int]]


class Category(Enum):
    """Test case categories"""
    VALID = "VALID"
    INVALID = "INVALID"
    EXTREME = "EXTREME"


def _is_metadata_value(value) -> bool:
    if isinstance(value, (int, str)):
        return True
    if isinstance(value, dict):
        return all(isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool)
                   for k, v in value.items())
    return False


@dataclass
class TestCase:
    """A labeled test string"""
    __test__ = False

    id: str
    content: str
    category: Category
    description: str
    metadata: Dict[str, MetadataValue] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)

    def add_metadata(self, key: str, value: MetadataValue):
        """
        Attach one metadata entry.

        Raises:
            TypeError: If value is not an int, str, bool or Dict[str, int]
        """
        if not _is_metadata_value(value):
            raise TypeError(
                f"Unsupported metadata value for '{key}': {type(value).__name__}"
            )
        self.metadata[key] = value

    def to_dict(self) -> Dict:
        """Convert to dictionary with the category as a string"""
        return {
            'id': self.id,
            'content': self.content,
            'category': self.category.value,
            'description': self.description,
            'metadata': dict(self.metadata),
            'created_at': self.created_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"[{self.id}] {self.category.value}: {self.content}"


def string_metadata(text: str, identifier: str = DEFAULT_IDENTIFIER) -> Dict[str, MetadataValue]:
    """Metadata every test case carries, computed from its tokens."""
    tokens = tokenize(text)
    operators = operator_histogram(tokens)
    open_parens = tokens.count(OPEN_PAREN)
    close_parens = tokens.count(CLOSE_PAREN)

    return {
        'length': len(text),
        'token_count': len(tokens),
        'open_parens': open_parens,
        'close_parens': close_parens,
        'parens_balanced': open_parens == close_parens,
        'operators': operators,
        'total_operators': sum(operators.values()),
        'identifier_count': count_identifiers(tokens, identifier),
    }


class Classifier:
    """
    Classification session.

    One counter is shared by every category, so identifiers increase across
    the whole session (VALID_0001, INVALID_0002, EXTREME_0003, ...) until
    reset() is called.
    """

    def __init__(self, identifier: str = DEFAULT_IDENTIFIER):
        """
        Args:
            identifier: Spelling counted as an identifier in the metadata
        """
        self.identifier = identifier
        self.counter = 0
        self.logger = logging.getLogger("cfgcases.analysis.classifier")

    def reset(self):
        """Restart identifier numbering"""
        self.counter = 0

    def _new_case(self, content: str, category: Category, description: str) -> TestCase:
        self.counter += 1
        return TestCase(
            id=f"{category.value}_{self.counter:04d}",
            content=content,
            category=category,
            description=description,
        )

    def _add_string_metadata(self, case: TestCase):
        for key, value in string_metadata(case.content, self.identifier).items():
            case.add_metadata(key, value)

    def classify_valid(self, derivation: Derivation,
                       description: str = "Valid string generated by leftmost derivation") -> TestCase:
        """Label a finished derivation as a valid case."""
        case = self._new_case(derivation.text, Category.VALID, description)

        case.add_metadata('generation_method', 'leftmost_derivation')
        case.add_metadata('depth', derivation.depth)
        case.add_metadata('derivation_steps', derivation.expansions)
        self._add_string_metadata(case)

        return case

    def classify_invalid(self, mutation: MutationResult) -> TestCase:
        """Label a mutated string as an invalid case."""
        case = self._new_case(mutation.text, Category.INVALID, mutation.description)

        case.add_metadata('generation_method', 'mutation')
        case.add_metadata('mutation_kind', mutation.kind.value)
        case.add_metadata('original', mutation.original)
        self._add_string_metadata(case)

        return case

    def classify_extreme(self, extreme: ExtremeResult) -> TestCase:
        """Label an extreme result as an extreme case."""
        case = self._new_case(extreme.text, Category.EXTREME, extreme.description)

        case.add_metadata('generation_method', 'extreme_case')
        case.add_metadata('extreme_kind', extreme.kind.value)
        case.add_metadata('depth', extreme.depth)
        case.add_metadata('operator_count', extreme.operator_count)
        case.add_metadata('terminal_count', extreme.terminal_count)
        case.add_metadata('nesting_level', extreme.nesting_level)
        case.add_metadata('metric', extreme.metric)
        self._add_string_metadata(case)

        return case

    def classify_valid_batch(self, derivations: Iterable[Derivation]) -> List[TestCase]:
        return [self.classify_valid(d) for d in derivations]

    def classify_invalid_batch(self, mutations: Iterable[MutationResult]) -> List[TestCase]:
        return [self.classify_invalid(m) for m in mutations]

    def classify_extreme_batch(self, extremes: Iterable[ExtremeResult]) -> List[TestCase]:
        return [self.classify_extreme(e) for e in extremes]


def count_by_category(cases: Iterable[TestCase]) -> Dict[str, int]:
    """Count cases per category (every category present, zero or not)."""
    counts = {c.value: 0 for c in Category}
    for case in cases:
        counts[case.category.value] += 1
    return counts
