"""
Grammar Symbols

Terminal and non-terminal symbols plus the production rules built from them.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union


EPSILON = "ε"


@dataclass(frozen=True)
class Terminal:
    """A constant symbol of the alphabet (Σ)."""
    value: str

    @property
    def is_terminal(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NonTerminal:
    """A variable of the grammar (V)."""
    value: str

    @property
    def is_terminal(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.value


# Closed variant: every symbol is exactly one of these two
Symbol = Union[Terminal, NonTerminal]


class Production:
    """
    A rule A → α.

    The left side is a single non-terminal; the right side is an ordered,
    possibly empty, sequence of symbols. Equality is structural.
    """

    __slots__ = ("lhs", "rhs")

    def __init__(self, lhs: NonTerminal, rhs: Iterable[Symbol] = ()):
        if not isinstance(lhs, NonTerminal):
            raise TypeError(f"Production left side must be a NonTerminal, got {lhs!r}")
        object.__setattr__(self, "lhs", lhs)
        object.__setattr__(self, "rhs", tuple(rhs))

    def __setattr__(self, name, value):
        raise AttributeError("Production is immutable")

    @property
    def is_epsilon(self) -> bool:
        return len(self.rhs) == 0

    @property
    def is_left_recursive(self) -> bool:
        """True if the right side starts with the left-side non-terminal."""
        return bool(self.rhs) and self.rhs[0] == self.lhs

    @property
    def nonterminal_count(self) -> int:
        return sum(1 for s in self.rhs if isinstance(s, NonTerminal))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Production):
            return NotImplemented
        return self.lhs == other.lhs and self.rhs == other.rhs

    def __hash__(self) -> int:
        return hash((self.lhs, self.rhs))

    def __repr__(self) -> str:
        return f"Production({self.lhs!r}, {list(self.rhs)!r})"

    def __str__(self) -> str:
        right = " ".join(s.value for s in self.rhs) if self.rhs else EPSILON
        return f"{self.lhs.value} → {right}"


def form_to_text(form: Tuple[Symbol, ...]) -> str:
    """Render a sentential form, using ε for the empty form."""
    if not form:
        return EPSILON
    return " ".join(s.value for s in form)
