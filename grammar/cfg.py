"""
Context-Free Grammar

The 4-tuple G = (V, Σ, R, S) with construction-time validation.
"""

import logging
from typing import Dict, Iterable, List

from .errors import ValidationError
from .symbols import NonTerminal, Production, Terminal


logger = logging.getLogger("cfgcases.grammar.cfg")


class ContextFreeGrammar:
    """
    Validated context-free grammar.

    Invariants (checked at construction and by add_production):
    - the start symbol belongs to V
    - every production's left side belongs to V
    - every right-side terminal belongs to Σ and every right-side
      non-terminal belongs to V
    """

    def __init__(self, variables: Iterable[NonTerminal], terminals: Iterable[Terminal],
                 productions: Iterable[Production], start: NonTerminal, name: str = "grammar"):
        """
        Initialize and validate a grammar.

        Args:
            variables: Non-terminal symbols (V)
            terminals: Terminal symbols (Σ)
            productions: Production rules (R), in declaration order
            start: Start symbol (S)
            name: Human readable grammar name

        Raises:
            ValidationError: On the first inconsistency found
        """
        self.variables = frozenset(variables)
        self.terminals = frozenset(terminals)
        self.productions: List[Production] = list(productions)
        self.start = start
        self.name = name

        self._validate()
        logger.debug(
            f"Grammar '{name}' validated: {len(self.variables)} variables, "
            f"{len(self.terminals)} terminals, {len(self.productions)} productions"
        )

    def _validate(self):
        if self.start not in self.variables:
            raise ValidationError(f"Start symbol '{self.start}' is not in the variable set V")

        for production in self.productions:
            self._validate_production(production)

    def _validate_production(self, production: Production):
        if production.lhs not in self.variables:
            raise ValidationError(f"Production '{production}' has a left side that is not in V")

        for symbol in production.rhs:
            if isinstance(symbol, NonTerminal):
                if symbol not in self.variables:
                    raise ValidationError(
                        f"Non-terminal '{symbol}' in production '{production}' is not in V"
                    )
            elif symbol not in self.terminals:
                raise ValidationError(
                    f"Terminal '{symbol}' in production '{production}' is not in Σ"
                )

    def productions_for(self, nonterminal: NonTerminal) -> List[Production]:
        """Get every production of a non-terminal, in declaration order."""
        return [p for p in self.productions if p.lhs == nonterminal]

    def has_productions(self, nonterminal: NonTerminal) -> bool:
        return any(p.lhs == nonterminal for p in self.productions)

    def add_production(self, production: Production) -> bool:
        """
        Append a production unless an equal one is already present.

        Returns:
            True if the production was added
        """
        if production in self.productions:
            return False
        self._validate_production(production)
        self.productions.append(production)
        return True

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "start_symbol": self.start.value,
            "variables": sorted(v.value for v in self.variables),
            "terminals": sorted(t.value for t in self.terminals),
            "productions": [str(p) for p in self.productions],
        }

    def describe(self) -> str:
        lines = [f"Context-free grammar '{self.name}':"]
        lines.append(f"V = {{ {', '.join(sorted(v.value for v in self.variables))} }}")
        lines.append(f"Σ = {{ {', '.join(sorted(t.value for t in self.terminals))} }}")
        lines.append(f"S = {self.start.value}")
        lines.append("R = {")
        for production in self.productions:
            lines.append(f"  {production}")
        lines.append("}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()
