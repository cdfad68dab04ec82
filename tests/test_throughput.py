"""End-to-end throughput tests."""

import datetime as dt
import math

import pytest

from distribution import FrequencyTable, SymbolDistribution
from throughput import InvalidInputError, TextEntryThroughput


def test_reference_throughput(meter, sample_pair):
    throughput = meter.calc(*sample_pair, 12)

    assert throughput == pytest.approx(12.954965333409255, abs=1e-4)


def test_timedelta_elapsed(meter, sample_pair):
    throughput = meter.calc(*sample_pair, dt.timedelta(seconds=12))

    assert throughput == pytest.approx(12.954965333409255, abs=1e-4)


def test_report_intermediates(meter, sample_pair):
    report = meter.report(*sample_pair, 12.0)

    assert report.defined
    assert report.chars_per_second == pytest.approx(4.0)
    assert report.insertion_probability == 0.0
    assert report.omission_probability == pytest.approx(0.12727272727272726)
    assert report.substitution_probability == pytest.approx(0.03636363636363636)
    assert report.correct_probability == pytest.approx(0.8363636363636363)
    assert report.entropy == pytest.approx(4.090309047790043)
    assert report.conditional_entropy == pytest.approx(0.8515677144377292, abs=1e-9)
    assert report.mutual_information == pytest.approx(3.238741333352314, abs=1e-9)
    assert report.throughput == pytest.approx(report.mutual_information * 4.0)


@pytest.mark.parametrize("elapsed", [0, -1.5, math.nan, dt.timedelta(0)])
def test_non_positive_elapsed_is_rejected(meter, elapsed):
    with pytest.raises(InvalidInputError):
        meter.calc("abc", "abc", elapsed)


def test_invalid_input_is_a_value_error():
    assert issubclass(InvalidInputError, ValueError)


def test_uncovered_symbol_is_undefined(meter):
    assert meter.calc("quickly", "Quickly", 2) is None

    report = meter.report("quickly", "quick-ly", 2)
    assert not report.defined
    assert report.mutual_information is None
    assert report.alignment.distance == 1


def test_corpus_distribution_must_cover_the_transcription():
    table = FrequencyTable()
    table.record_all("large and appropriate text is recommended")
    meter = TextEntryThroughput(SymbolDistribution.from_frequencies(table))

    # 'q', 'u', 'c', 'h', 'k', 'y' never occur in the corpus
    assert meter.calc("quickly", "qucehkly", 2) is None
    assert meter.calc("read a text", "raed a tex", 2) is not None


def test_with_probabilities():
    meter = TextEntryThroughput.with_probabilities({"a": 0.5, "b": 0.5})

    # flawless entry of a one-bit alphabet at 2 symbols per second
    assert meter.calc("abba", "abba", 2) == pytest.approx(2.0)


def test_empty_transcription_has_zero_throughput(meter):
    assert meter.calc("abc", "", 3) == pytest.approx(0.0)


def test_word_level_throughput():
    table = FrequencyTable()
    table.record_all("the cat sat on the mat".split())
    meter = TextEntryThroughput(SymbolDistribution.from_frequencies(table))

    assert meter.calc("the cat sat".split(), "the mat sat".split(), 1.5) > 0
