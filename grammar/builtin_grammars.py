"""
Built-in Grammars

Pre-defined grammars for common expression languages.
"""

from typing import List

from .cfg import ContextFreeGrammar
from .grammar_parser import GrammarParser


class BuiltinGrammars:
    """Collection of built-in grammar specifications."""

    @staticmethod
    def get_arithmetic_grammar() -> str:
        """Get arithmetic expression grammar (+ and * with precedence)."""
        return """
        # E = expression (sums), T = term (products), F = factor
        E -> E + T | T
        T -> T * F | F
        F -> ( E ) | id
        """

    @staticmethod
    def get_full_arithmetic_grammar() -> str:
        """Get arithmetic grammar with all four operators."""
        return """
        Expr -> Expr + Term | Expr - Term | Term
        Term -> Term * Factor | Term / Factor | Factor
        Factor -> ( Expr ) | id | num
        """

    @staticmethod
    def get_balanced_parens_grammar() -> str:
        """Get balanced parentheses grammar (contains an epsilon production)."""
        return """
        S -> ( S ) S
        S -> ε
        """

    @staticmethod
    def get_assignment_grammar() -> str:
        """Get a small statement language of assignments."""
        return """
        Program -> Stmt | Stmt Program
        Stmt -> id = Expr ;
        Expr -> Expr + Term | Expr - Term | Term
        Term -> id | num | ( Expr )
        """

    @staticmethod
    def get_json_grammar() -> str:
        """Get JSON grammar (simplified, scalar values as tokens)."""
        return """
        Value -> Object | Array | str | num | true | false | null
        Object -> { } | { Members }
        Members -> Pair | Pair , Members
        Pair -> str : Value
        Array -> [ ] | [ Elements ]
        Elements -> Value | Value , Elements
        """

    @staticmethod
    def get_grammar(name: str) -> str:
        """
        Get grammar text by name.

        Args:
            name: Grammar name (arithmetic, full_arithmetic, balanced_parens, assignment, json)

        Returns:
            Grammar text
        """
        grammars = {
            'arithmetic': BuiltinGrammars.get_arithmetic_grammar,
            'full_arithmetic': BuiltinGrammars.get_full_arithmetic_grammar,
            'balanced_parens': BuiltinGrammars.get_balanced_parens_grammar,
            'assignment': BuiltinGrammars.get_assignment_grammar,
            'json': BuiltinGrammars.get_json_grammar,
        }

        if name.lower() not in grammars:
            raise ValueError(f"Unknown grammar: {name}. Available: {list(grammars.keys())}")

        return grammars[name.lower()]()

    @staticmethod
    def load(name: str) -> ContextFreeGrammar:
        """Parse a built-in grammar into a validated grammar."""
        return GrammarParser().parse(BuiltinGrammars.get_grammar(name), name=name.lower())

    @staticmethod
    def list_grammars() -> List[str]:
        """List available built-in grammars."""
        return ['arithmetic', 'full_arithmetic', 'balanced_parens', 'assignment', 'json']
