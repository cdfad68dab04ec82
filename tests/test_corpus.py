"""Tests for corpus readers, table serialization and the corpus CLI."""

import json

import pytest

from corpus import (
    distribution_from_json,
    distribution_to_json,
    frequencies_from_files,
    frequencies_from_json,
    frequencies_from_text,
    frequencies_from_texts,
    frequencies_from_wikipedia,
    load_distribution,
    load_frequencies,
    main,
    save_distribution,
    save_frequencies,
)
from distribution import FrequencyTable, SymbolDistribution


def test_frequencies_from_text():
    table = frequencies_from_text("Abba")

    assert table.as_dict() == {"A": 1, "b": 2, "a": 1}


def test_frequencies_lowercase_and_alphabet():
    table = frequencies_from_text("Hello, World!", lowercase=True, alphabet="abcdefghijklmnopqrstuvwxyz ")

    assert table.count("l") == 3
    assert table.count(",") == 0
    assert table.count(" ") == 1
    assert table.n == 11


def test_frequencies_from_texts_accumulates():
    table = frequencies_from_texts(["ab", "bc"])

    assert table.as_dict() == {"a": 1, "b": 2, "c": 1}


def test_frequencies_from_files(tmp_path):
    first = tmp_path / "one.txt"
    second = tmp_path / "two.txt"
    first.write_text("aab", encoding="utf-8")
    second.write_text("ééa", encoding="utf-8")

    table = frequencies_from_files([first, second])

    assert table.as_dict() == {"a": 3, "b": 1, "é": 2}


def test_frequencies_from_wikipedia_normalizes_extracts():
    extracts = iter([
        ("One", "https://example.org/1", "Hi[1] there!"),
        ("Two", "https://example.org/2", "AB"),
    ])

    table = frequencies_from_wikipedia(2, fetch=lambda: next(extracts))

    assert table.as_dict() == {"h": 2, "i": 1, " ": 1, "t": 1, "e": 2, "r": 1, "a": 1, "b": 1}


def test_frequencies_json_round_trip(tmp_path):
    table = FrequencyTable.from_counts({"a": 3, " ": 2, "é": 1})
    path = tmp_path / "tables" / "freq.json"

    save_frequencies(table, path)

    assert load_frequencies(path) == table
    assert json.loads(path.read_text(encoding="utf-8"))["kind"] == "frequencies"


def test_distribution_json(tmp_path, english):
    path = tmp_path / "dist.json"
    save_distribution(english, path)

    loaded = load_distribution(path)

    assert loaded == english
    assert loaded.entropy() == pytest.approx(english.entropy())


def test_documents_are_checked_for_kind():
    table_doc = {"kind": "frequencies", "counts": {"a": 1}}

    with pytest.raises(ValueError):
        distribution_from_json(table_doc)
    assert frequencies_from_json(table_doc).count("a") == 1


def test_distribution_to_json_keeps_probabilities():
    distribution = SymbolDistribution.from_probabilities({"a": 0.25, "b": 0.75})

    assert distribution_to_json(distribution) == {
        "kind": "distribution",
        "probabilities": {"a": 0.25, "b": 0.75},
    }


def test_cli_writes_distribution(tmp_path):
    corpus_file = tmp_path / "corpus.txt"
    corpus_file.write_text("The east wind", encoding="utf-8")
    output = tmp_path / "out.json"

    code = main([str(corpus_file), "--lowercase", "--alphabet", "abcdefghijklmnopqrstuvwxyz ", "-o", str(output)])

    assert code == 0
    distribution = load_distribution(output)
    assert distribution.p("e") == pytest.approx(2 / 13)
    assert "T" not in distribution


def test_cli_rejects_empty_corpus():
    assert main([]) == 1
