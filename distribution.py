from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from types import MappingProxyType
from typing import Callable, Generic, Hashable, Iterable, Iterator, Mapping, TypeVar


logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)


@dataclass
class FrequencyTable(Generic[S]):
    """Occurrence counts of each distinct symbol seen in a corpus."""

    counts: dict[S, int] = field(default_factory=dict)

    @classmethod
    def from_counts(cls, counts: Mapping[S, int]) -> FrequencyTable[S]:
        for symbol, count in counts.items():
            if count < 1:
                raise ValueError(f"count for {symbol!r} must be >= 1, got {count}")
        return cls(dict(counts))

    def record(self, symbol: S) -> None:
        self.counts[symbol] = self.counts.get(symbol, 0) + 1

    def record_all(self, symbols: Iterable[S]) -> None:
        for symbol in symbols:
            self.record(symbol)

    @property
    def n(self) -> int:
        return sum(self.counts.values())

    def count(self, symbol: S) -> int:
        return self.counts.get(symbol, 0)

    def filtered(self, keep: Callable[[S], bool]) -> FrequencyTable[S]:
        """Copy of the table holding only the symbols ``keep`` accepts."""
        return FrequencyTable({s: c for s, c in self.counts.items() if keep(s)})

    def as_dict(self) -> dict[S, int]:
        return dict(self.counts)

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.counts

    def __iter__(self) -> Iterator[S]:
        return iter(self.counts)


class SymbolDistribution(Generic[S]):
    """Read-only probability mass function over a symbol alphabet.

    Only symbols with a strictly positive probability belong to the domain.
    Looking up any other symbol yields ``None`` rather than ``0.0`` so that
    callers can tell "never seen" apart from "improbable".
    """

    __slots__ = ("_probabilities",)

    def __init__(self, probabilities: Mapping[S, float]) -> None:
        cleaned: dict[S, float] = {}
        for symbol, p in probabilities.items():
            if p < 0:
                raise ValueError(f"probability for {symbol!r} must be >= 0, got {p}")
            if p > 0:
                cleaned[symbol] = float(p)
        self._probabilities = MappingProxyType(cleaned)

    @classmethod
    def from_frequencies(cls, table: FrequencyTable[S]) -> SymbolDistribution[S]:
        n = table.n
        if n == 0:
            raise ValueError("cannot build a distribution from an empty frequency table")
        return cls({symbol: count / n for symbol, count in table.counts.items()})

    @classmethod
    def from_probabilities(cls, probabilities: Mapping[S, float]) -> SymbolDistribution[S]:
        total = sum(probabilities.values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            logger.debug("distribution probabilities sum to %r, not 1", total)
        return cls(probabilities)

    @property
    def probabilities(self) -> Mapping[S, float]:
        return self._probabilities

    @property
    def symbols(self) -> tuple[S, ...]:
        return tuple(self._probabilities)

    def p(self, symbol: S) -> float | None:
        return self._probabilities.get(symbol)

    def entropy(self) -> float:
        """H(X) in bits per symbol."""
        return -sum(p * math.log2(p) for p in self._probabilities.values())

    def __len__(self) -> int:
        return len(self._probabilities)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._probabilities

    def __iter__(self) -> Iterator[S]:
        return iter(self._probabilities)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolDistribution):
            return NotImplemented
        return dict(self._probabilities) == dict(other._probabilities)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SymbolDistribution({len(self)} symbols, H={self.entropy():.4f})"
