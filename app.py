from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
import uuid

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Static, TextArea
from rich.markup import escape
from rich.console import Group
from rich.table import Table

from corpus import load_distribution
from metrics import compute_live_metrics, compute_metrics
from stats import DISTRIBUTION_FILE, SessionRecord, StatsStore
from throughput import TextEntryThroughput
from wikipedia import fetch_random_article


logger = logging.getLogger(__name__)


def load_meter(path: Path = DISTRIBUTION_FILE) -> TextEntryThroughput[str]:
    """Meter over the saved corpus distribution, else the built-in English table."""
    if path.exists():
        try:
            return TextEntryThroughput(load_distribution(path))
        except (ValueError, KeyError) as exc:
            logger.warning("ignoring distribution file %s: %s", path, exc)
    return TextEntryThroughput.english()


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def format_throughput(value: float | None) -> str:
    return "undefined" if value is None else f"{value:.2f} bits/s"


class HomeScreen(Screen):
    BINDINGS = [("q", "quit", "Quit")]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="home"):
            yield Static("Text Entry Throughput", id="title")
            yield Static("Practice on random Wikipedia text, scored in bits per second.", id="subtitle")
            with Horizontal(id="home-buttons"):
                yield Button("Start Session", id="start", variant="success")
                yield Button("View Stats", id="stats")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "start":
            self.app.push_screen(SessionScreen())
        elif event.button.id == "stats":
            self.app.push_screen(StatsScreen())
        elif event.button.id == "quit":
            self.app.exit()


class SessionScreen(Screen):
    BINDINGS = [("escape", "back", "Back")]

    def __init__(self) -> None:
        super().__init__()
        self.target_text = ""
        self.started_at: dt.datetime | None = None
        self.article_meta: dict = {}

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="session"):
            yield Static("Loading lesson...", id="lesson-title")
            yield Static("", id="lesson-text")
            with Horizontal(id="metrics"):
                yield Static("Chars/s: 0.0", id="cps")
                yield Static("Accuracy: 0.0%", id="accuracy")
            yield TextArea("", id="typing-area")
            with Horizontal(id="session-buttons"):
                yield Button("Finish", id="finish", variant="primary")
                yield Button("Back", id="back")
        yield Footer()

    def on_mount(self) -> None:
        self._load_lesson()

    def _load_lesson(self) -> None:
        article = fetch_random_article()
        self.article_meta = {
            "title": article.title,
            "url": article.url,
            "extract_len": article.extract_len,
        }
        self.target_text = article.text

        self.query_one("#lesson-title", Static).update(f"Lesson: {article.title}")
        self._update_lesson_text("")
        self.started_at = None

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        typed_text = self.query_one("#typing-area", TextArea).text
        if self.started_at is None:
            if not typed_text:
                return
            # the clock starts on the first keystroke
            self.started_at = _utcnow()

        elapsed_s = (_utcnow() - self.started_at).total_seconds()
        live = compute_live_metrics(self.target_text, typed_text, elapsed_s)

        self.query_one("#cps", Static).update(f"Chars/s: {live['cps']:.1f}")
        self.query_one("#accuracy", Static).update(f"Accuracy: {live['accuracy'] * 100.0:.1f}%")
        self._update_lesson_text(typed_text)

        if len(typed_text) >= len(self.target_text):
            self._finish_session(typed_text, elapsed_s)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.app.pop_screen()
        elif event.button.id == "finish":
            typed_text = self.query_one("#typing-area", TextArea).text
            if not self.started_at:
                self.app.pop_screen()
                return
            elapsed_s = (_utcnow() - self.started_at).total_seconds()
            self._finish_session(typed_text, elapsed_s)

    def action_back(self) -> None:
        self.app.pop_screen()

    def _finish_session(self, typed_text: str, elapsed_s: float) -> None:
        metrics = compute_metrics(self.target_text, typed_text, max(elapsed_s, 1e-3), load_meter())
        record = SessionRecord(
            id=str(uuid.uuid4()),
            started_at=self.started_at.isoformat() if self.started_at else "",
            ended_at=_utcnow().isoformat(),
            duration_s=elapsed_s,
            source="wikipedia",
            source_meta=self.article_meta,
            text_len=len(self.target_text),
            typed_len=metrics["total_typed"],
            cps=metrics["cps"],
            insertion_probability=metrics["insertion_probability"],
            omission_probability=metrics["omission_probability"],
            substitution_probability=metrics["substitution_probability"],
            correct_probability=metrics["correct_probability"],
            mutual_information=metrics["mutual_information"],
            throughput=metrics["throughput"],
        )
        StatsStore().append_session(record)
        self.app.push_screen(SummaryScreen(record))

    def _update_lesson_text(self, typed_text: str) -> None:
        rendered = []
        for i, ch in enumerate(self.target_text):
            if i < len(typed_text):
                if typed_text[i] == ch:
                    rendered.append(f"[on #2f4f2f]{escape(ch)}[/]")
                else:
                    rendered.append(f"[on #4f2f2f]{escape(ch)}[/]")
            else:
                rendered.append(escape(ch))
        self.query_one("#lesson-text", Static).update("".join(rendered))


class SummaryScreen(Screen):
    BINDINGS = [("enter", "home", "Home"), ("escape", "home", "Home")]

    def __init__(self, record: SessionRecord) -> None:
        super().__init__()
        self.record = record

    def compose(self) -> ComposeResult:
        record = self.record
        ixy = "undefined" if record.mutual_information is None else f"{record.mutual_information:.3f} bits/char"
        yield Header()
        with Vertical(id="summary"):
            yield Static("Session Summary", id="summary-title")
            yield Static(f"Throughput: {format_throughput(record.throughput)}", id="summary-throughput")
            yield Static(f"I(X;Y): {ixy}", id="summary-ixy")
            yield Static(f"Chars/s: {record.cps:.2f}", id="summary-cps")
            yield Static(
                f"Correct {record.correct_probability * 100.0:.1f}%  "
                f"Substituted {record.substitution_probability * 100.0:.1f}%  "
                f"Omitted {record.omission_probability * 100.0:.1f}%  "
                f"Inserted {record.insertion_probability * 100.0:.1f}%",
                id="summary-errors",
            )
            yield Static(f"Duration: {record.duration_s:.1f}s", id="summary-duration")
            yield Static(f"Article: {record.source_meta.get('title', 'Unknown')}")
            yield Button("Back to Home", id="home", variant="success")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "home":
            self.action_home()

    def action_home(self) -> None:
        self.app.pop_screen()
        self.app.pop_screen()


def humanize_timestamp(iso_ts: str, now: dt.datetime | None = None) -> str:
    if not iso_ts:
        return "Unknown time"
    try:
        parsed = dt.datetime.fromisoformat(iso_ts)
    except ValueError:
        return iso_ts
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    now = now or _utcnow()
    seconds = max((now - parsed).total_seconds(), 0.0)

    if seconds < 60:
        return "just now"
    for unit, size in (("year", 86400 * 365), ("month", 86400 * 30), ("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = int(seconds // size)
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


class StatsScreen(Screen):
    BINDINGS = [("escape", "back", "Back")]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="stats"):
            yield Static("Stats Summary", id="stats-title")
            yield Static("", id="stats-body")
            yield Button("Back", id="back")
        yield Footer()

    def on_mount(self) -> None:
        store = StatsStore()
        sessions = store.sessions()
        overview = store.summary()

        def _session_key(session: dict) -> str:
            return session.get("ended_at") or session.get("started_at") or ""

        sessions_sorted = sorted(sessions, key=_session_key, reverse=True)

        summary = (
            f"Total Sessions: {overview['total']}\n"
            f"Average Throughput: {format_throughput(overview['avg_throughput'])}\n"
            f"Average Chars/s: {overview['avg_cps']:.1f}\n"
            f"Average Correct: {overview['avg_correct'] * 100.0:.1f}%\n"
        )

        table = Table(show_header=True, box=None, show_edge=False, pad_edge=False)
        table.add_column("When", width=18, no_wrap=True)
        table.add_column("Bits/s", justify="right", width=9, no_wrap=True)
        table.add_column("Chars/s", justify="right", width=8, no_wrap=True)
        table.add_column("Correct", justify="right", width=8, no_wrap=True)
        table.add_column("Error", justify="right", width=8, no_wrap=True)

        for session in sessions_sorted:
            throughput = session.get("throughput")
            correct = session.get("correct_probability", 0.0)
            error = max(0.0, 1.0 - correct)
            table.add_row(
                humanize_timestamp(_session_key(session)),
                "n/a" if throughput is None else f"{throughput:.2f}",
                f"{session.get('cps', 0.0):.1f}",
                f"{correct * 100.0:.1f}%",
                f"{error * 100.0:.1f}%",
            )

        self.query_one("#stats-body", Static).update(Group(summary, table))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.app.pop_screen()

    def action_back(self) -> None:
        self.app.pop_screen()


class TypingTutorApp(App):
    CSS = """
    #home, #session, #summary, #stats {
        padding: 1 2;
    }

    #title {
        content-align: center middle;
        text-style: bold;
    }

    #subtitle {
        content-align: center middle;
        color: $text-muted;
        margin-bottom: 1;
    }

    #home-buttons, #session-buttons {
        height: auto;
        margin-top: 1;
    }

    #lesson-text {
        height: 12;
        border: solid $primary;
        padding: 1;
        overflow: auto;
    }

    #typing-area {
        height: 10;
        border: solid $secondary;
        padding: 1;
    }

    #metrics {
        height: auto;
        margin: 1 0;
    }

    #summary-title, #stats-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    TITLE = "Text Entry Throughput"

    def on_mount(self) -> None:
        self.push_screen(HomeScreen())


def main() -> None:
    TypingTutorApp().run()


if __name__ == "__main__":
    main()
