"""
Grammar Parser

Parses plain-text grammar definitions into a validated ContextFreeGrammar.
"""

import os
import logging
from typing import Dict, List, Optional

from .cfg import ContextFreeGrammar
from .errors import GrammarError, MalformedInput
from .symbols import NonTerminal, Production, Symbol, Terminal


logger = logging.getLogger("cfgcases.grammar.parser")

ARROW = "->"
ALTERNATIVE = "|"
EPSILON_SPELLINGS = ("ε", "epsilon", "lambda")


class GrammarParser:
    """
    Parses grammar text, one production per line.

    Supported syntax:
    - Productions: LHS -> S1 S2 ...
    - Alternatives on one line: E -> E + T | T
    - Epsilon: A -> ε, A -> epsilon, A -> lambda, or an empty right side
    - Comments: # comment (whole line or trailing)

    Classification:
    - Non-terminals: a single uppercase letter (E, T, F) or a PascalCase
      word made of letters only (Expr, Term)
    - Terminals: everything else (+, *, id, "(", ...)

    The left side of the first production becomes the start symbol.

    Example grammar:
        # Arithmetic expressions
        E -> E + T | T
        T -> T * F | F
        F -> ( E ) | id
    """

    def __init__(self):
        self.logger = logging.getLogger("cfgcases.grammar.parser")
        self._reset()

    def _reset(self):
        self.variables: Dict[str, NonTerminal] = {}
        self.terminals: Dict[str, Terminal] = {}
        self.productions: List[Production] = []
        self.start: Optional[NonTerminal] = None

    def parse(self, grammar_text: str, name: str = "grammar") -> ContextFreeGrammar:
        """
        Parse grammar text into a grammar.

        Args:
            grammar_text: Grammar definition
            name: Name given to the resulting grammar

        Returns:
            Validated grammar

        Raises:
            MalformedInput: If a line is ill-formed or no production is found
            ValidationError: If the parsed 4-tuple is inconsistent
        """
        self._reset()

        for line_number, raw_line in enumerate(grammar_text.splitlines(), start=1):
            line = self._clean_line(raw_line)

            # Skip empty lines and comments
            if not line:
                continue

            try:
                self._parse_rule(line)
            except MalformedInput as e:
                raise MalformedInput(str(e), line_number, raw_line.rstrip()) from e

        if not self.productions:
            raise MalformedInput("Grammar text contains no productions")

        grammar = ContextFreeGrammar(
            self.variables.values(),
            self.terminals.values(),
            self.productions,
            self.start,
            name=name,
        )
        self.logger.info(
            f"Parsed grammar '{name}' with {len(self.productions)} productions "
            f"(start symbol: {self.start})"
        )
        return grammar

    def load(self, path: str) -> ContextFreeGrammar:
        """
        Load a grammar from a text file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = os.path.expanduser(path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Grammar file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            text = f.read()

        name = os.path.splitext(os.path.basename(path))[0]
        return self.parse(text, name=name)

    def _clean_line(self, line: str) -> str:
        """Strip trailing comments and surrounding whitespace."""
        comment = line.find("#")
        if comment >= 0:
            line = line[:comment]
        return line.strip()

    def _parse_rule(self, line: str):
        """Parse one rule line, which may hold several alternatives."""
        parts = line.split(ARROW)
        if len(parts) != 2:
            raise MalformedInput("Invalid production, expected 'A -> B C D'")

        lhs_text = parts[0].strip()
        if not lhs_text:
            raise MalformedInput("Production left side is empty")
        if len(lhs_text.split()) != 1:
            raise MalformedInput(f"Production left side must be a single symbol, got '{lhs_text}'")
        if not is_nonterminal_spelling(lhs_text):
            raise MalformedInput(f"Production left side '{lhs_text}' is not a non-terminal")

        lhs = self._nonterminal(lhs_text)
        if self.start is None:
            self.start = lhs

        for alternative in parts[1].split(ALTERNATIVE):
            rhs = self._parse_right_side(alternative.strip())
            self.productions.append(Production(lhs, rhs))

    def _parse_right_side(self, text: str) -> List[Symbol]:
        if not text or text.lower() in EPSILON_SPELLINGS:
            return []
        return [self._classify(token) for token in text.split()]

    def _classify(self, token: str) -> Symbol:
        if is_nonterminal_spelling(token):
            return self._nonterminal(token)
        return self._terminal(token)

    def _nonterminal(self, value: str) -> NonTerminal:
        if value not in self.variables:
            self.variables[value] = NonTerminal(value)
        return self.variables[value]

    def _terminal(self, value: str) -> Terminal:
        if value not in self.terminals:
            self.terminals[value] = Terminal(value)
        return self.terminals[value]


def is_nonterminal_spelling(token: str) -> bool:
    """Single uppercase letter, or PascalCase letters only."""
    if not token or not token[0].isupper():
        return False
    return len(token) == 1 or token.isalpha()


# Convenience function
def parse_grammar(grammar_text: str, name: str = "grammar") -> ContextFreeGrammar:
    """
    Quick function to parse grammar.

    Example:
        >>> grammar = parse_grammar('''
        ... E -> E + T | T
        ... T -> T * F | F
        ... F -> ( E ) | id
        ... ''')
    """
    parser = GrammarParser()
    return parser.parse(grammar_text, name=name)


# Testing
if __name__ == "__main__":
    test_grammar = """
    # Simple arithmetic grammar
    E -> E + T | T
    T -> T * F | F
    F -> ( E ) | id
    """

    try:
        grammar = parse_grammar(test_grammar, name="arithmetic")
    except GrammarError as e:
        print(f"✗ Grammar has errors: {e}")
    else:
        print(grammar.describe())
