"""
Token scanning helpers shared by the engines and the classifier.

Generated strings are sequences of terminal spellings separated by single
spaces, so every metric here works on the whitespace-split token list.
"""

from typing import Dict, List

OPERATORS = ("+", "*", "-", "/")
OPEN_PAREN = "("
CLOSE_PAREN = ")"
DEFAULT_IDENTIFIER = "id"


def tokenize(text: str) -> List[str]:
    return text.split()


def count_operators(tokens: List[str]) -> int:
    return sum(1 for t in tokens if t in OPERATORS)


def operator_histogram(tokens: List[str]) -> Dict[str, int]:
    return {op: tokens.count(op) for op in OPERATORS}


def is_identifier(token: str, identifier: str = DEFAULT_IDENTIFIER) -> bool:
    return token.startswith(identifier)


def count_identifiers(tokens: List[str], identifier: str = DEFAULT_IDENTIFIER) -> int:
    return sum(1 for t in tokens if is_identifier(t, identifier))


def nesting_depth(tokens: List[str]) -> int:
    """Deepest paren nesting reached while scanning left to right."""
    level = 0
    deepest = 0
    for token in tokens:
        if token == OPEN_PAREN:
            level += 1
            deepest = max(deepest, level)
        elif token == CLOSE_PAREN:
            level -= 1
    return deepest
