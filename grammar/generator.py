"""
Derivation Generator

Generates valid strings of L(G) by leftmost derivation.
"""

import random
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .cfg import ContextFreeGrammar
from .errors import DepthExceeded, NoProductionsAvailable
from .symbols import EPSILON, NonTerminal, Production, Symbol, Terminal, form_to_text


logger = logging.getLogger("cfgcases.grammar.generator")

DEFAULT_MAX_DEPTH = 50


@dataclass(frozen=True)
class DerivationStep:
    """One sentential form of a derivation and the production that produced it."""
    form: Tuple[Symbol, ...]
    production: Optional[Production]
    label: str

    def __str__(self) -> str:
        text = form_to_text(self.form)
        if self.production is None:
            return text
        return f"{text} (applying: {self.production})"


@dataclass(frozen=True)
class Derivation:
    """A finished derivation: the terminal string and its full trace."""
    text: str
    steps: Tuple[DerivationStep, ...]

    @property
    def depth(self) -> int:
        """Trace length, initial form included."""
        return len(self.steps)

    @property
    def expansions(self) -> int:
        return len(self.steps) - 1


def has_nonterminal(form: Tuple[Symbol, ...]) -> bool:
    return any(isinstance(s, NonTerminal) for s in form)


def terminal_string(form: Tuple[Symbol, ...]) -> str:
    """Join the terminal values of a fully terminal form."""
    if not form:
        return EPSILON
    return " ".join(s.value for s in form if isinstance(s, Terminal))


class DerivationEngine:
    """
    Generates strings from a grammar by leftmost derivation.

    Features:
    - Always expands the leftmost non-terminal
    - Uniform random production selection (injected RNG)
    - Depth pressure: once fewer than a third of the steps remain,
      left-recursive productions are avoided when an alternative exists
    - Step-by-step trace of the last derivation
    """

    def __init__(self, grammar: ContextFreeGrammar, max_depth: int = DEFAULT_MAX_DEPTH,
                 rng: Optional[random.Random] = None, seed: Optional[int] = None):
        """
        Initialize derivation engine.

        Args:
            grammar: Validated grammar to derive from
            max_depth: Maximum number of expansion steps per derivation
            rng: Random source exposing randrange(); overrides seed
            seed: Random seed for reproducibility
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        self.grammar = grammar
        self.max_depth = max_depth
        self.rng = rng if rng is not None else random.Random(seed)
        self.history: List[DerivationStep] = []
        self.logger = logging.getLogger("cfgcases.grammar.generator")

    def derive(self) -> Derivation:
        """
        Run one leftmost derivation from the start symbol.

        Returns:
            The finished derivation

        Raises:
            DepthExceeded: If max_depth steps were taken and a non-terminal remains
            NoProductionsAvailable: If a non-terminal has no productions
        """
        self.history = []

        form: Tuple[Symbol, ...] = (self.grammar.start,)
        trace = [DerivationStep(form, None, "Initial sentential form")]
        steps = 0

        while has_nonterminal(form):
            if steps >= self.max_depth:
                raise DepthExceeded(self.max_depth)

            form, production = self._expand_leftmost(form, steps)
            steps += 1
            trace.append(DerivationStep(form, production, f"Expand {production.lhs}"))

        self.history = trace
        return Derivation(terminal_string(form), tuple(trace))

    def _expand_leftmost(self, form: Tuple[Symbol, ...], steps_taken: int) -> Tuple[Tuple[Symbol, ...], Production]:
        """Replace the first non-terminal of the form with a production's right side."""
        for i, symbol in enumerate(form):
            if isinstance(symbol, NonTerminal):
                production = self._select_production(symbol, self.max_depth - steps_taken)
                return form[:i] + production.rhs + form[i + 1:], production

        raise ValueError("Sentential form has no non-terminal to expand")

    def _select_production(self, nonterminal: NonTerminal, remaining: int) -> Production:
        """
        Pick a production for a non-terminal.

        Args:
            nonterminal: Symbol being expanded
            remaining: Steps left before the depth bound

        Returns:
            Selected production
        """
        productions = self.grammar.productions_for(nonterminal)
        if not productions:
            raise NoProductionsAvailable(nonterminal)

        # Close to the bound: prefer productions that do not recurse on the left
        if remaining < self.max_depth // 3:
            non_recursive = [p for p in productions if not p.is_left_recursive]
            if non_recursive:
                productions = non_recursive

        return productions[self.rng.randrange(len(productions))]

    def attempt(self) -> Optional[Derivation]:
        """
        Run one derivation, returning None if it hit the depth bound.
        """
        try:
            return self.derive()
        except DepthExceeded as e:
            self.logger.debug(f"Derivation attempt discarded: {e}")
            return None

    def generate(self) -> str:
        """Generate one valid string (raises like derive())."""
        return self.derive().text

    def generate_derivations(self, count: int) -> List[Derivation]:
        """
        Run count derivation attempts and keep the successful ones.

        Attempts that exceed the depth bound are dropped, so fewer than
        count derivations may be returned.
        """
        attempts = [self.attempt() for _ in range(count)]
        derivations = [d for d in attempts if d is not None]

        if len(derivations) < count:
            self.logger.info(
                f"Generated {len(derivations)}/{count} strings "
                f"({count - len(derivations)} attempts exceeded depth {self.max_depth})"
            )
        return derivations

    def generate_batch(self, count: int) -> List[str]:
        """
        Generate multiple strings.

        Args:
            count: Number of attempts

        Returns:
            List of generated strings (may be shorter than count)
        """
        return [d.text for d in self.generate_derivations(count)]

    def select_production(self, nonterminal: NonTerminal, index: int) -> Production:
        """Select a specific production by index (for controlled derivations)."""
        productions = self.grammar.productions_for(nonterminal)
        if index < 0 or index >= len(productions):
            raise IndexError(
                f"Production index {index} out of range for '{nonterminal}' "
                f"({len(productions)} available)"
            )
        return productions[index]

    def expand(self, nonterminal: NonTerminal) -> List[Symbol]:
        """Expand a single non-terminal with a random production, ignoring depth."""
        productions = self.grammar.productions_for(nonterminal)
        if not productions:
            raise NoProductionsAvailable(nonterminal)
        return list(productions[self.rng.randrange(len(productions))].rhs)

    def history_text(self) -> str:
        """Get the last derivation trace as text."""
        lines = ["Derivation history:", "-" * 50]
        for i, step in enumerate(self.history):
            lines.append(f"Step {i}: {step}")
        return "\n".join(lines)

    def get_statistics(self, samples: int = 100) -> Dict:
        """
        Get statistics about generated strings.

        Args:
            samples: Number of derivation attempts to analyze

        Returns:
            Dict with statistics
        """
        derivations = self.generate_derivations(samples)

        lengths = [len(d.text.split()) for d in derivations]
        depths = [d.depth for d in derivations]
        unique = len(set(d.text for d in derivations))

        return {
            'samples': samples,
            'succeeded': len(derivations),
            'avg_tokens': sum(lengths) / len(lengths) if lengths else 0,
            'min_tokens': min(lengths) if lengths else 0,
            'max_tokens': max(lengths) if lengths else 0,
            'max_depth': max(depths) if depths else 0,
            'unique_count': unique,
            'uniqueness_ratio': (unique / samples) * 100 if samples else 0
        }


# Convenience function
def generate_from_grammar(grammar: ContextFreeGrammar, count: int = 1,
                          max_depth: int = DEFAULT_MAX_DEPTH, seed: Optional[int] = None) -> List[str]:
    """
    Quick function to generate from grammar.

    Example:
        >>> grammar = parse_grammar(grammar_text)
        >>> strings = generate_from_grammar(grammar, count=10)
    """
    engine = DerivationEngine(grammar, max_depth=max_depth, seed=seed)
    return engine.generate_batch(count)
