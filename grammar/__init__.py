"""
cfgcases Grammar Engines

Generates test strings for context-free grammars, enabling parser and
compiler test suites to be built from a grammar definition.

Features:
- Grammar model (V, Σ, R, S) with construction-time validation
- Plain-text grammar parser
- Leftmost derivation with depth-aware production selection
- Token-level mutation of valid strings into invalid ones
- Extreme case search (depth, complexity, length, nesting)
- Built-in grammars (arithmetic, assignment, JSON, ...)
"""

from .symbols import Terminal, NonTerminal, Production, EPSILON
from .cfg import ContextFreeGrammar
from .errors import GrammarError, ValidationError, DepthExceeded, NoProductionsAvailable, MalformedInput
from .grammar_parser import GrammarParser
from .generator import DerivationEngine, Derivation, DerivationStep
from .mutator import GrammarMutator, MutationKind, MutationResult
from .extremes import ExtremeCaseGenerator, ExtremeKind, ExtremeResult
from .builtin_grammars import BuiltinGrammars

__all__ = [
    'Terminal', 'NonTerminal', 'Production', 'EPSILON', 'ContextFreeGrammar',
    'GrammarError', 'ValidationError', 'DepthExceeded', 'NoProductionsAvailable', 'MalformedInput',
    'GrammarParser', 'DerivationEngine', 'Derivation', 'DerivationStep',
    'GrammarMutator', 'MutationKind', 'MutationResult',
    'ExtremeCaseGenerator', 'ExtremeKind', 'ExtremeResult', 'BuiltinGrammars',
]
