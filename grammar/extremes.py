"""
Extreme Case Generator

Searches for strings at the structural limits of a grammar: deepest and
shallowest derivations, most operators, longest and shortest expressions,
and deepest parenthesis nesting.
"""

import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .cfg import ContextFreeGrammar
from .errors import DepthExceeded, NoProductionsAvailable
from .generator import DEFAULT_MAX_DEPTH, Derivation, DerivationEngine, has_nonterminal, terminal_string
from .symbols import NonTerminal, Production, Symbol
from .tokens import DEFAULT_IDENTIFIER, count_operators, nesting_depth, tokenize


logger = logging.getLogger("cfgcases.grammar.extremes")

MAX_DEPTH_TRIALS = 10
COMPLEXITY_TRIALS = 20
LONG_EXPRESSION_TRIALS = 15
NESTING_LEVELS = 5
MIN_DEPTH_STEP_LIMIT = 1000

COMPLEXITY_FALLBACK = "id + id * id + id * id"


class ExtremeKind(Enum):
    """Kinds of extreme cases"""
    MAX_DEPTH = "max_depth"
    MIN_DEPTH = "min_depth"
    MAX_COMPLEXITY = "max_complexity"
    LONG_EXPRESSION = "long_expression"
    SHORT_EXPRESSION = "short_expression"
    MAX_NESTING = "max_nesting"


# Metric that makes each kind extreme
KIND_METRIC = {
    ExtremeKind.MAX_DEPTH: "depth",
    ExtremeKind.MIN_DEPTH: "depth",
    ExtremeKind.MAX_COMPLEXITY: "operator_count",
    ExtremeKind.LONG_EXPRESSION: "terminal_count",
    ExtremeKind.SHORT_EXPRESSION: "terminal_count",
    ExtremeKind.MAX_NESTING: "nesting_level",
}


@dataclass(frozen=True)
class ExtremeResult:
    """An extreme test string and its structural metrics"""
    text: str
    kind: ExtremeKind
    description: str
    depth: int
    operator_count: int
    terminal_count: int
    nesting_level: int

    @property
    def metric(self) -> str:
        return KIND_METRIC[self.kind]

    @property
    def metric_value(self) -> int:
        return getattr(self, self.metric)


def build_result(text: str, kind: ExtremeKind, description: str, depth: int = 0,
                 operator_count: Optional[int] = None, terminal_count: Optional[int] = None,
                 nesting_level: Optional[int] = None) -> ExtremeResult:
    """Create a result, scanning the tokens for any metric not given."""
    tokens = tokenize(text)
    return ExtremeResult(
        text=text,
        kind=kind,
        description=description,
        depth=depth,
        operator_count=count_operators(tokens) if operator_count is None else operator_count,
        terminal_count=len(tokens) if terminal_count is None else terminal_count,
        nesting_level=nesting_depth(tokens) if nesting_level is None else nesting_level,
    )


class MinimalDerivation:
    """
    Deterministic derivation of the simplest string of a grammar.

    The leftmost non-terminal is always expanded with the production that
    has the fewest non-terminals, then the shortest right side; ties go to
    the production declared first.
    """

    def __init__(self, grammar: ContextFreeGrammar, step_limit: int = MIN_DEPTH_STEP_LIMIT):
        self.grammar = grammar
        self.step_limit = step_limit

    def choose(self, nonterminal: NonTerminal) -> Production:
        productions = self.grammar.productions_for(nonterminal)
        if not productions:
            raise NoProductionsAvailable(nonterminal)
        return min(productions, key=lambda p: (p.nonterminal_count, len(p.rhs)))

    def derive(self) -> Tuple[str, int]:
        """
        Returns:
            Tuple of (terminal string, expansion steps)

        Raises:
            DepthExceeded: If the grammar never reduces to terminals
        """
        form: Tuple[Symbol, ...] = (self.grammar.start,)
        steps = 0

        while has_nonterminal(form):
            if steps >= self.step_limit:
                raise DepthExceeded(
                    self.step_limit,
                    f"Minimal derivation did not terminate within {self.step_limit} steps",
                )
            i = next(i for i, s in enumerate(form) if isinstance(s, NonTerminal))
            form = form[:i] + self.choose(form[i]).rhs + form[i + 1:]
            steps += 1

        return terminal_string(form), steps


class ExtremeCaseGenerator:
    """
    Generates extreme test cases for a grammar.

    The random kinds run a fixed number of derivation trials and keep the
    best one; failed trials are discarded. The short-expression and
    max-nesting kinds are built from the arithmetic spellings (id, +, parens)
    and do not consult the grammar.
    """

    def __init__(self, grammar: ContextFreeGrammar, depth_bound: int = DEFAULT_MAX_DEPTH,
                 rng: Optional[random.Random] = None, seed: Optional[int] = None):
        """
        Initialize extreme case generator.

        Args:
            grammar: Validated grammar
            depth_bound: Standard derivation bound; deep searches use twice this
            rng: Random source exposing randrange(); overrides seed
            seed: Random seed for reproducibility
        """
        self.grammar = grammar
        self.depth_bound = depth_bound
        self.rng = rng if rng is not None else random.Random(seed)
        self.logger = logging.getLogger("cfgcases.grammar.extremes")

        self._builders = {
            ExtremeKind.MAX_DEPTH: self._max_depth,
            ExtremeKind.MIN_DEPTH: self._min_depth,
            ExtremeKind.MAX_COMPLEXITY: self._max_complexity,
            ExtremeKind.LONG_EXPRESSION: self._long_expression,
            ExtremeKind.SHORT_EXPRESSION: self._short_expression,
            ExtremeKind.MAX_NESTING: self._max_nesting,
        }

    def generate(self, kind: ExtremeKind) -> ExtremeResult:
        """
        Generate one extreme case.

        Raises:
            DepthExceeded: If every trial of a search-based kind failed
            NoProductionsAvailable: If the grammar has an unexpandable non-terminal
        """
        return self._builders[kind]()

    def generate_all(self, per_kind: int = 2) -> List[ExtremeResult]:
        """
        Generate every kind of extreme case per_kind times.

        Kinds that fail are skipped.
        """
        results = []

        for kind in ExtremeKind:
            for _ in range(per_kind):
                try:
                    results.append(self.generate(kind))
                except DepthExceeded as e:
                    self.logger.warning(f"Skipping {kind.value} case: {e}")

        return results

    def _engine(self, max_depth: int) -> DerivationEngine:
        return DerivationEngine(self.grammar, max_depth=max_depth, rng=self.rng)

    def _best_of(self, trials: int, max_depth: int,
                 score: Callable[[Derivation], int]) -> Optional[Tuple[Derivation, int]]:
        """Run derivation trials, keeping the highest score (first wins ties)."""
        engine = self._engine(max_depth)
        best = None

        for _ in range(trials):
            derivation = engine.attempt()
            if derivation is None:
                continue
            value = score(derivation)
            if best is None or value > best[1]:
                best = (derivation, value)

        return best

    def _max_depth(self) -> ExtremeResult:
        bound = self.depth_bound * 2
        best = self._best_of(MAX_DEPTH_TRIALS, bound, lambda d: d.depth)

        if best is None:
            raise DepthExceeded(bound, f"Could not generate a max-depth case: every trial exceeded depth {bound}")

        derivation, depth = best
        return build_result(derivation.text, ExtremeKind.MAX_DEPTH,
                            f"Derivation with {depth} steps", depth=depth)

    def _min_depth(self) -> ExtremeResult:
        text, steps = MinimalDerivation(self.grammar).derive()
        # Same unit as Derivation.depth: trace length, initial form included
        return build_result(text, ExtremeKind.MIN_DEPTH,
                            "Minimal case (shortest derivation)", depth=steps + 1)

    def _max_complexity(self) -> ExtremeResult:
        best = self._best_of(COMPLEXITY_TRIALS, self.depth_bound,
                             lambda d: count_operators(tokenize(d.text)))

        if best is None:
            self.logger.debug("All complexity trials failed, using fallback expression")
            text, operators = COMPLEXITY_FALLBACK, count_operators(tokenize(COMPLEXITY_FALLBACK))
        else:
            text, operators = best[0].text, best[1]

        return build_result(text, ExtremeKind.MAX_COMPLEXITY,
                            f"Expression with {operators} operators", operator_count=operators)

    def _long_expression(self) -> ExtremeResult:
        bound = self.depth_bound * 2
        best = self._best_of(LONG_EXPRESSION_TRIALS, bound, lambda d: len(tokenize(d.text)))

        if best is None:
            raise DepthExceeded(bound, f"Could not generate a long expression: every trial exceeded depth {bound}")

        derivation, terminals = best
        return build_result(derivation.text, ExtremeKind.LONG_EXPRESSION,
                            f"Long expression with {terminals} terminal symbols",
                            terminal_count=terminals)

    def _short_expression(self) -> ExtremeResult:
        # TODO: derive the shortest string from the grammar instead of the fixed identifier
        return build_result(DEFAULT_IDENTIFIER, ExtremeKind.SHORT_EXPRESSION,
                            "Shortest possible expression", terminal_count=1)

    def _max_nesting(self) -> ExtremeResult:
        expression = DEFAULT_IDENTIFIER
        for level in range(NESTING_LEVELS):
            expression = f"( {expression} )"
            if level < NESTING_LEVELS - 1:
                expression += f" + {DEFAULT_IDENTIFIER}"

        return build_result(expression, ExtremeKind.MAX_NESTING,
                            f"Expression with {NESTING_LEVELS} nesting levels",
                            nesting_level=NESTING_LEVELS)
