"""
Grammar Errors

Exception hierarchy shared by the grammar model, the parser and the
generation engines.
"""

from typing import Optional


class GrammarError(Exception):
    """Base class for every grammar-related failure."""
    pass


class ValidationError(GrammarError):
    """A grammar 4-tuple is inconsistent (raised at construction)."""
    pass


class DepthExceeded(GrammarError):
    """A derivation did not reach a fully terminal form within its bound."""

    def __init__(self, max_depth: int, message: Optional[str] = None):
        self.max_depth = max_depth
        super().__init__(
            message or f"Maximum derivation depth ({max_depth}) reached before the form became terminal"
        )


class NoProductionsAvailable(GrammarError):
    """A non-terminal has no production to expand it with."""

    def __init__(self, nonterminal):
        self.nonterminal = nonterminal
        super().__init__(f"No productions defined for non-terminal '{nonterminal}'")


class MalformedInput(GrammarError):
    """Grammar source text could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"Line {line_number}: {message}"
            if line is not None:
                message = f"{message}\n  {line}"
        super().__init__(message)
