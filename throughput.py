from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from typing import Generic, Hashable, Mapping, Sequence, TypeVar, Union

from alignment import OptimalAlignment, align
from channel import ChannelModel
from distribution import SymbolDistribution
from english import ENGLISH_LETTER_DISTRIBUTION


logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)

Elapsed = Union[float, int, dt.timedelta]


class InvalidInputError(ValueError):
    pass


def _seconds(elapsed: Elapsed) -> float:
    seconds = elapsed.total_seconds() if isinstance(elapsed, dt.timedelta) else float(elapsed)
    # NaN fails this comparison too
    if not seconds > 0:
        raise InvalidInputError(f"elapsed time must be positive, got {seconds!r} seconds")
    return seconds


@dataclass(frozen=True)
class ThroughputReport(Generic[S]):
    alignment: OptimalAlignment[S]
    elapsed_s: float
    chars_per_second: float
    insertion_probability: float
    omission_probability: float
    substitution_probability: float
    correct_probability: float
    entropy: float
    conditional_entropy: float | None
    mutual_information: float | None
    throughput: float | None

    @property
    def defined(self) -> bool:
        return self.throughput is not None


class TextEntryThroughput(Generic[S]):
    """Text entry throughput in bits/second against a reference distribution."""

    def __init__(self, distribution: SymbolDistribution[S]) -> None:
        self.distribution = distribution

    @classmethod
    def english(cls) -> TextEntryThroughput[str]:
        return cls(ENGLISH_LETTER_DISTRIBUTION)  # type: ignore[arg-type]

    @classmethod
    def with_probabilities(cls, probabilities: Mapping[S, float]) -> TextEntryThroughput[S]:
        return cls(SymbolDistribution.from_probabilities(probabilities))

    def report(
        self, presented: Sequence[S], transcribed: Sequence[S], elapsed: Elapsed
    ) -> ThroughputReport[S]:
        seconds = _seconds(elapsed)
        chars_per_second = len(transcribed) / seconds

        alignment = align(presented, transcribed)
        channel = ChannelModel(alignment, self.distribution)
        hyx = channel.conditional_entropy()
        hx = self.distribution.entropy()
        ixy = None if hyx is None else hx - hyx
        throughput = None if ixy is None else ixy * chars_per_second

        if throughput is None:
            logger.info("throughput undefined for %d transcribed symbols", len(transcribed))
        else:
            logger.debug(
                "I(X;Y)=%.6f bits/char at %.3f chars/s -> %.6f bits/s",
                ixy,
                chars_per_second,
                throughput,
            )

        return ThroughputReport(
            alignment=alignment,
            elapsed_s=seconds,
            chars_per_second=chars_per_second,
            insertion_probability=channel.insertion_probability,
            omission_probability=channel.omission_probability,
            substitution_probability=channel.substitution_probability,
            correct_probability=channel.correct_probability,
            entropy=hx,
            conditional_entropy=hyx,
            mutual_information=ixy,
            throughput=throughput,
        )

    def calc(self, presented: Sequence[S], transcribed: Sequence[S], elapsed: Elapsed) -> float | None:
        """Throughput in bits/second, or ``None`` when a symbol falls outside
        the distribution. ``elapsed`` is seconds or a ``timedelta``."""
        return self.report(presented, transcribed, elapsed).throughput
