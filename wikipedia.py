from __future__ import annotations

from dataclasses import dataclass
import logging
import re
import requests


logger = logging.getLogger(__name__)

WIKI_RANDOM_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/random/summary"
REQUEST_TIMEOUT_S = 8
USER_AGENT = "text-entry-throughput/0.1 (python requests)"

LESSON_MIN_CHARS = 120
LESSON_MAX_CHARS = 300


@dataclass
class Article:
    title: str
    url: str
    text: str
    extract_len: int


def clean_text(text: str) -> str:
    text = re.sub(r"\[\d+\]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def _is_ascii(text: str) -> bool:
    try:
        text.encode("ascii")
        return True
    except UnicodeEncodeError:
        return False


def to_lesson_alphabet(text: str) -> str:
    """Lowercase ``text`` and keep only a-z separated by single spaces."""
    text = re.sub(r"[^a-z]+", " ", text.lower())
    return text.strip()


def _truncate_at_word(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    if " " in cut:
        cut = cut[: cut.rindex(" ")]
    return cut


def fetch_random_extract() -> tuple[str, str, str]:
    """One random article summary as (title, url, raw extract)."""
    response = requests.get(
        WIKI_RANDOM_SUMMARY_URL,
        timeout=REQUEST_TIMEOUT_S,
        allow_redirects=True,
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
    )
    response.raise_for_status()
    data = response.json()
    title = data.get("title") or "Unknown Title"
    url = (
        data.get("content_urls", {})
        .get("desktop", {})
        .get("page", "https://en.wikipedia.org")
    )
    return title, url, data.get("extract") or ""


def fetch_random_article(
    min_chars: int = LESSON_MIN_CHARS, max_chars: int = LESSON_MAX_CHARS, tries: int = 5
) -> Article:
    last_article = None
    for attempt in range(tries):
        title, url, extract = fetch_random_extract()
        text = clean_text(extract)

        if not text:
            continue
        if not _is_ascii(text):
            logger.debug("skipping non-ascii extract %r", title)
            continue

        text = _truncate_at_word(to_lesson_alphabet(text), max_chars)
        last_article = Article(title=title, url=url, text=text, extract_len=len(text))

        if len(text) >= min_chars:
            return last_article
        logger.debug("extract %r too short (%d chars), attempt %d/%d", title, len(text), attempt + 1, tries)

    if last_article is None:
        logger.warning("no usable article after %d tries", tries)
        return Article(
            title="Wikipedia",
            url="https://en.wikipedia.org",
            text="unable to load content please try again",
            extract_len=0,
        )

    return last_article
