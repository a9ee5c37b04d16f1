"""Solution sets returned by the equation solver."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .expressions import Expr


class SolutionSet:
    """A set of roots: finite (possibly empty) or infinite.

    Finite sets keep insertion order; duplicates collapse by structural
    equality. An infinite set stands for "too many roots to enumerate" and
    carries no elements.
    """

    __slots__ = ("_elements", "_infinite")

    def __init__(self, elements: Iterable[Expr] = (), infinite: bool = False):
        self._elements = {} if infinite else dict.fromkeys(elements)
        self._infinite = infinite

    @classmethod
    def empty(cls) -> "SolutionSet":
        return cls()

    @classmethod
    def singleton(cls, element: Expr) -> "SolutionSet":
        return cls((element,))

    @classmethod
    def of(cls, *elements: Expr) -> "SolutionSet":
        return cls(elements)

    @classmethod
    def infinite(cls) -> "SolutionSet":
        return cls(infinite=True)

    @property
    def is_finite(self) -> bool:
        return not self._infinite

    @property
    def is_empty(self) -> bool:
        return not self._infinite and not self._elements

    def finite_elements(self) -> Optional[tuple[Expr, ...]]:
        """The elements, or None when the set is infinite."""
        if self._infinite:
            return None
        return tuple(self._elements)

    def map(self, fn) -> "SolutionSet":
        if self._infinite:
            return self
        return SolutionSet(fn(element) for element in self._elements)

    def __or__(self, other: "SolutionSet") -> "SolutionSet":
        if self._infinite or other._infinite:
            return SolutionSet.infinite()
        return SolutionSet([*self._elements, *other._elements])

    def __sub__(self, other: "SolutionSet") -> "SolutionSet":
        if self._infinite:
            return self
        if other._infinite:
            # nothing left that can be enumerated
            return SolutionSet.empty()
        return SolutionSet(e for e in self._elements if e not in other._elements)

    def __iter__(self) -> Iterator[Expr]:
        if self._infinite:
            raise TypeError("Cannot iterate over an infinite solution set")
        return iter(self._elements)

    def __len__(self) -> int:
        if self._infinite:
            raise TypeError("An infinite solution set has no length")
        return len(self._elements)

    def __contains__(self, element: object) -> bool:
        return element in self._elements

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SolutionSet):
            return NotImplemented
        if self._infinite or other._infinite:
            return self._infinite == other._infinite
        return set(self._elements) == set(other._elements)

    def __hash__(self) -> int:
        return hash((self._infinite, frozenset(self._elements)))

    def __repr__(self) -> str:
        if self._infinite:
            return "SolutionSet(<infinite>)"
        return "SolutionSet({" + ", ".join(str(e) for e in self._elements) + "})"


def unite(sets: Iterable[SolutionSet]) -> SolutionSet:
    result = SolutionSet.empty()
    for s in sets:
        result = result | s
    return result
