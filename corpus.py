from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from distribution import FrequencyTable, SymbolDistribution
from wikipedia import clean_text, fetch_random_extract, to_lesson_alphabet


logger = logging.getLogger(__name__)


def frequencies_from_text(
    text: str,
    lowercase: bool = False,
    alphabet: Iterable[str] | None = None,
    table: FrequencyTable[str] | None = None,
) -> FrequencyTable[str]:
    table = table if table is not None else FrequencyTable()
    if lowercase:
        text = text.lower()
    if alphabet is None:
        table.record_all(text)
    else:
        allowed = set(alphabet)
        table.record_all(ch for ch in text if ch in allowed)
    return table


def frequencies_from_texts(
    texts: Iterable[str], lowercase: bool = False, alphabet: Iterable[str] | None = None
) -> FrequencyTable[str]:
    allowed = set(alphabet) if alphabet is not None else None
    table: FrequencyTable[str] = FrequencyTable()
    for text in texts:
        frequencies_from_text(text, lowercase=lowercase, alphabet=allowed, table=table)
    return table


def frequencies_from_files(
    paths: Iterable[Path],
    encoding: str = "utf-8",
    lowercase: bool = False,
    alphabet: Iterable[str] | None = None,
) -> FrequencyTable[str]:
    def _read() -> Iterable[str]:
        for path in paths:
            logger.debug("reading corpus file %s", path)
            yield Path(path).read_text(encoding=encoding)

    return frequencies_from_texts(_read(), lowercase=lowercase, alphabet=alphabet)


def frequencies_from_wikipedia(
    count: int,
    fetch: Callable[[], tuple[str, str, str]] = fetch_random_extract,
    normalize: Callable[[str], str] = to_lesson_alphabet,
    alphabet: Iterable[str] | None = None,
    table: FrequencyTable[str] | None = None,
) -> FrequencyTable[str]:
    """Counts over ``count`` random article extracts, normalized to the
    lesson alphabet by default."""
    table = table if table is not None else FrequencyTable()
    allowed = set(alphabet) if alphabet is not None else None
    for _ in range(count):
        title, _url, extract = fetch()
        logger.debug("fetched %r (%d chars)", title, len(extract))
        frequencies_from_text(normalize(clean_text(extract)), alphabet=allowed, table=table)
    return table


def frequencies_to_json(table: FrequencyTable[str]) -> dict[str, Any]:
    return {"kind": "frequencies", "counts": table.as_dict()}


def frequencies_from_json(data: dict[str, Any]) -> FrequencyTable[str]:
    _check_kind(data, "frequencies")
    return FrequencyTable.from_counts({str(k): int(v) for k, v in data["counts"].items()})


def distribution_to_json(distribution: SymbolDistribution[str]) -> dict[str, Any]:
    return {"kind": "distribution", "probabilities": dict(distribution.probabilities)}


def distribution_from_json(data: dict[str, Any]) -> SymbolDistribution[str]:
    _check_kind(data, "distribution")
    return SymbolDistribution.from_probabilities(
        {str(k): float(v) for k, v in data["probabilities"].items()}
    )


def _check_kind(data: dict[str, Any], expected: str) -> None:
    kind = data.get("kind") if isinstance(data, dict) else type(data).__name__
    if kind != expected:
        raise ValueError(f"expected a {expected} document, got {kind!r}")


def save_frequencies(table: FrequencyTable[str], path: Path) -> None:
    _write_json(frequencies_to_json(table), path)


def load_frequencies(path: Path) -> FrequencyTable[str]:
    return frequencies_from_json(json.loads(Path(path).read_text(encoding="utf-8")))


def save_distribution(distribution: SymbolDistribution[str], path: Path) -> None:
    _write_json(distribution_to_json(distribution), path)


def load_distribution(path: Path) -> SymbolDistribution[str]:
    return distribution_from_json(json.loads(Path(path).read_text(encoding="utf-8")))


def _write_json(data: dict[str, Any], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("wrote %s", path)


def _symbol_label(symbol: str) -> str:
    return "<space>" if symbol == " " else repr(symbol)


def render_distribution(distribution: SymbolDistribution[str], table: FrequencyTable[str], top: int) -> Table:
    ranked = sorted(distribution.probabilities.items(), key=lambda item: item[1], reverse=True)

    out = Table(title=f"H(X) = {distribution.entropy():.6f} bits/symbol", show_edge=False)
    out.add_column("Symbol", no_wrap=True)
    out.add_column("Count", justify="right")
    out.add_column("p", justify="right")
    for symbol, p in ranked[:top]:
        out.add_row(_symbol_label(symbol), str(table.count(symbol)), f"{p:.6f}")
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tet-corpus",
        description="Build a symbol distribution for text entry throughput from a corpus.",
    )
    parser.add_argument("files", nargs="*", type=Path, help="UTF-8 text files to count")
    parser.add_argument("--wikipedia", type=int, default=0, metavar="N", help="also count N random Wikipedia extracts")
    parser.add_argument("--lowercase", action="store_true", help="lowercase file text before counting")
    parser.add_argument("--alphabet", default=None, help="only count these characters")
    parser.add_argument("-o", "--output", type=Path, default=None, help="write the distribution as JSON")
    parser.add_argument("--top", type=int, default=30, help="rows to show")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    console = Console()

    table = frequencies_from_files(args.files, lowercase=args.lowercase, alphabet=args.alphabet)
    if args.wikipedia:
        frequencies_from_wikipedia(args.wikipedia, alphabet=args.alphabet, table=table)

    if not len(table):
        console.print("[red]corpus is empty: pass text files or --wikipedia N[/]")
        return 1

    distribution = SymbolDistribution.from_frequencies(table)
    console.print(render_distribution(distribution, table, args.top))
    console.print(f"{len(distribution)} symbols, {table.n} occurrences")

    if args.output is not None:
        save_distribution(distribution, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
