"""Minimum string distance and optimal alignments between two symbol sequences."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Callable, Generic, Hashable, Iterator, Sequence, Tuple, TypeVar, Union


logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)


class Gap(Enum):
    GAP = "-"

    def __repr__(self) -> str:
        return "GAP"


GAP = Gap.GAP

Element = Union[S, Gap]
Track = Tuple[Element, ...]


def msd(presented: Sequence[S], transcribed: Sequence[S]) -> list[list[int]]:
    """Levenshtein matrix ``D`` with ``D[i][j]`` the distance between the
    first ``i`` presented and the first ``j`` transcribed symbols.

    ``D[len(presented)][len(transcribed)]`` is the minimum string distance.
    """
    x_len, y_len = len(presented), len(transcribed)
    d = [[0] * (y_len + 1) for _ in range(x_len + 1)]
    for i in range(x_len + 1):
        d[i][0] = i
    for j in range(y_len + 1):
        d[0][j] = j

    for i in range(1, x_len + 1):
        p = presented[i - 1]
        row, prev = d[i], d[i - 1]
        for j in range(1, y_len + 1):
            cost = 0 if p == transcribed[j - 1] else 1
            row[j] = min(prev[j] + 1, row[j - 1] + 1, prev[j - 1] + cost)
    return d


def _branches(
    d: list[list[int]],
    presented: Sequence[S],
    transcribed: Sequence[S],
    x: int,
    y: int,
) -> list[tuple[Element, Element, int, int]]:
    """Cost-optimal incoming edges of cell (x, y), in exploration order.

    Each branch is (presented element, transcribed element, next x, next y).
    The two diagonal guards are evaluated independently.
    """
    here = d[x][y]
    branches: list[tuple[Element, Element, int, int]] = []
    if x > 0 and y > 0:
        p, t = presented[x - 1], transcribed[y - 1]
        # match
        if here == d[x - 1][y - 1] and p == t:
            branches.append((p, t, x - 1, y - 1))
        # substitution
        if here == d[x - 1][y - 1] + 1:
            branches.append((p, t, x - 1, y - 1))
    # omission
    if x > 0 and here == d[x - 1][y] + 1:
        branches.append((presented[x - 1], GAP, x - 1, y))
    # insertion
    if y > 0 and here == d[x][y - 1] + 1:
        branches.append((GAP, transcribed[y - 1], x, y - 1))
    return branches


def iter_optimal_alignments(
    presented: Sequence[S],
    transcribed: Sequence[S],
    matrix: list[list[int]] | None = None,
) -> Iterator[tuple[Track, Track]]:
    """Yield every minimum-cost alignment as a (presented, transcribed) track pair.

    Paths come out in depth-first order, trying match, substitution, omission
    and insertion at each cell in that order. The number of paths grows
    exponentially on heavily tied inputs, so consume lazily.
    """
    d = matrix if matrix is not None else msd(presented, transcribed)
    stack: list[tuple[int, int, Track, Track]] = [(len(presented), len(transcribed), (), ())]
    while stack:
        x, y, p_track, t_track = stack.pop()
        if x == 0 and y == 0:
            yield p_track, t_track
            continue
        for p, t, next_x, next_y in reversed(_branches(d, presented, transcribed, x, y)):
            stack.append((next_x, next_y, (p,) + p_track, (t,) + t_track))


@dataclass(frozen=True)
class OptimalAlignment(Generic[S]):
    presented: Track
    transcribed: Track
    distance: int

    def __post_init__(self) -> None:
        if len(self.presented) != len(self.transcribed):
            raise AssertionError(
                f"aligned tracks differ in length: {len(self.presented)} != {len(self.transcribed)}"
            )
        for p, t in self.pairs():
            if p is GAP and t is GAP:
                raise AssertionError("alignment cell holds a gap on both tracks")

    @property
    def length(self) -> int:
        return len(self.presented)

    @property
    def gap_probability(self) -> float:
        """P(GAP) on the presented track."""
        if not self.length:
            return 0.0
        return self.count(lambda p, _: p is GAP) / self.length

    def pairs(self) -> Iterator[tuple[Element, Element]]:
        return zip(self.presented, self.transcribed)

    def count(self, predicate: Callable[[Element, Element], bool]) -> int:
        """N(presented -> transcribed) over the cells matching ``predicate``."""
        return sum(1 for p, t in self.pairs() if predicate(p, t))

    def symbols(self) -> set[S]:
        return {e for e in self.presented + self.transcribed if e is not GAP}


def align(presented: Sequence[S], transcribed: Sequence[S]) -> OptimalAlignment[S]:
    """The optimal alignment left over once every path has been enumerated.

    Enumeration overwrites its result on each completed path, so the survivor
    is the last depth-first leaf. Every optimal branch reaches (0, 0), which
    makes that leaf the one found by taking the last branch at every cell; it
    is always equal to the final item of ``iter_optimal_alignments``.
    """
    d = msd(presented, transcribed)
    x, y = len(presented), len(transcribed)
    p_track: list[Element] = []
    t_track: list[Element] = []
    while x or y:
        p, t, x, y = _branches(d, presented, transcribed, x, y)[-1]
        p_track.append(p)
        t_track.append(t)
    p_track.reverse()
    t_track.reverse()

    alignment: OptimalAlignment[S] = OptimalAlignment(
        tuple(p_track), tuple(t_track), distance=d[-1][-1]
    )
    logger.debug(
        "aligned %d presented / %d transcribed symbols: distance %d, %d cells",
        len(presented),
        len(transcribed),
        alignment.distance,
        alignment.length,
    )
    return alignment
