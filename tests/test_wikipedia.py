"""Tests for the Wikipedia lesson fetcher, with the HTTP layer mocked."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from wikipedia import clean_text, fetch_random_article, to_lesson_alphabet


def _response(extract, title="Title"):
    response = MagicMock()
    response.json.return_value = {
        "title": title,
        "extract": extract,
        "content_urls": {"desktop": {"page": f"https://en.wikipedia.org/wiki/{title}"}},
    }
    return response


def test_clean_text():
    assert clean_text("Wind[12] blows\n\n from  the east.") == "Wind blows from the east."


def test_to_lesson_alphabet():
    assert to_lesson_alphabet("The 2 winds, from East-North!") == "the winds from east north"


def test_fetch_returns_first_long_enough_article():
    long_text = "The prevailing wind blows from the east. " * 5
    responses = [_response("Too short."), _response(long_text, title="Wind")]

    with patch("wikipedia.requests.get", side_effect=responses) as get:
        article = fetch_random_article(min_chars=50, max_chars=100)

    assert get.call_count == 2
    assert article.title == "Wind"
    assert article.url == "https://en.wikipedia.org/wiki/Wind"
    assert article.text.startswith("the prevailing wind blows from the east")
    assert len(article.text) <= 100
    assert not article.text.endswith(" ")
    assert set(article.text) <= set("abcdefghijklmnopqrstuvwxyz ")
    for response in responses:
        response.raise_for_status.assert_called_once()


def test_fetch_skips_non_ascii_and_falls_back():
    responses = [_response("Zürich is a city."), _response("")]

    with patch("wikipedia.requests.get", side_effect=responses):
        article = fetch_random_article(tries=2)

    assert article.title == "Wikipedia"
    assert article.extract_len == 0


def test_fetch_keeps_last_short_article():
    with patch("wikipedia.requests.get", side_effect=[_response("Short one."), _response("Short two.")]):
        article = fetch_random_article(min_chars=50, tries=2)

    assert article.text == "short two"


def test_http_errors_propagate():
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("503")

    with patch("wikipedia.requests.get", return_value=response):
        with pytest.raises(requests.HTTPError):
            fetch_random_article()
