"""Noisy-channel model of text entry estimated from one optimal alignment.

The presented text is the channel input X and the transcription its output Y.
Error rates are read off the alignment; combined with the reference symbol
distribution they give the joint model p(i, j), the equivocation H_Y(X) and
the mutual information I(X;Y) in bits per character.

Whenever the alignment holds a symbol that the reference distribution does not
cover, every dependent quantity is ``None``.
"""
from __future__ import annotations

import logging
import math
from typing import Generic, Hashable, TypeVar

from alignment import GAP, Element, OptimalAlignment
from distribution import SymbolDistribution


logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


class ChannelModel(Generic[S]):
    def __init__(self, alignment: OptimalAlignment[S], distribution: SymbolDistribution[S]) -> None:
        self.alignment = alignment
        self.distribution = distribution
        self.gap_probability = alignment.gap_probability

        n_presented = alignment.count(lambda p, _: p is not GAP)

        # p(I) is taken over every cell; p(M), p(S) and p(C) over the cells
        # with a presented symbol, rescaled by 1 - p(I).
        self.insertion_probability = _ratio(
            alignment.count(lambda p, t: p is GAP and t is not GAP), alignment.length
        )
        kept = 1.0 - self.insertion_probability
        self.omission_probability = (
            _ratio(alignment.count(lambda p, t: p is not GAP and t is GAP), n_presented) * kept
        )
        self.substitution_probability = (
            _ratio(
                alignment.count(lambda p, t: p is not GAP and t is not GAP and p != t),
                n_presented,
            )
            * kept
        )
        self.correct_probability = (
            _ratio(
                alignment.count(lambda p, t: p is not GAP and t is not GAP and p == t),
                n_presented,
            )
            * kept
        )

    @property
    def k(self) -> int:
        return len(self.distribution)

    def uncovered_symbols(self) -> set[S]:
        return {s for s in self.alignment.symbols() if s not in self.distribution}

    def covers(self) -> bool:
        return not self.uncovered_symbols()

    def _covered(self, element: Element) -> bool:
        return element is GAP or element in self.distribution

    def _elements(self) -> tuple[Element, ...]:
        return self.distribution.symbols + (GAP,)

    def p_dash(self, i: Element) -> float | None:
        """p'(i): input probability once gaps take their share of the mass."""
        if i is GAP:
            return self.gap_probability
        p = self.distribution.p(i)
        if p is None:
            return None
        return p * (1.0 - self.gap_probability)

    def transition(self, i: Element, j: Element) -> float:
        """p_i(j): probability of producing j when i was presented."""
        if i is GAP and j is GAP:
            raise ValueError("no transition is defined from a gap to a gap")
        if i is GAP:
            return self.insertion_probability / self.k
        if j is GAP:
            return self.omission_probability
        if i != j:
            return _ratio(self.substitution_probability, self.k - 1)
        return self.correct_probability

    def joint(self, i: Element, j: Element) -> float | None:
        """p(i, j) = p'(i) p_i(j)."""
        if not (self._covered(i) and self._covered(j)):
            return None
        p_dash_i = self.p_dash(i)
        if p_dash_i is None:
            return None
        return p_dash_i * self.transition(i, j)

    def _column_total(self, j: Element) -> float:
        total = 0.0
        for i in self._elements():
            if i is GAP and j is GAP:
                continue
            total += self.joint(i, j)  # type: ignore[operator]
        return total

    def conditional(self, i: Element, j: Element) -> float | None:
        """p_j(i): probability that i was presented given that j was produced."""
        p_ij = self.joint(i, j)
        if p_ij is None:
            return None
        return _ratio(p_ij, self._column_total(j))

    def conditional_entropy(self) -> float | None:
        """H_Y(X) in bits per character."""
        uncovered = self.uncovered_symbols()
        if uncovered:
            logger.info(
                "H_Y(X) undefined: %d symbol(s) outside the distribution: %s",
                len(uncovered),
                ", ".join(sorted(repr(s) for s in uncovered)),
            )
            return None

        elements = self._elements()
        column_totals = {j: self._column_total(j) for j in elements}

        acc = 0.0
        for i in elements:
            for j in elements:
                if i is GAP and j is GAP:
                    continue
                p_ij = self.joint(i, j)
                # 0 log 0 = 0
                if not p_ij:
                    continue
                acc += p_ij * math.log2(p_ij / column_totals[j])
        return -acc

    def mutual_information(self) -> float | None:
        """I(X;Y) = H(X) - H_Y(X), bits transmitted per character."""
        hyx = self.conditional_entropy()
        if hyx is None:
            return None
        return self.distribution.entropy() - hyx
