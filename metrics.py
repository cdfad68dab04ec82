from __future__ import annotations

from throughput import TextEntryThroughput


def compute_correct_chars(target_text: str, typed_text: str) -> int:
    correct = 0
    for i, ch in enumerate(typed_text):
        if i >= len(target_text):
            break
        if ch == target_text[i]:
            correct += 1
    return correct


def characters_per_second(typed_text: str, elapsed_s: float) -> float:
    return len(typed_text) / max(elapsed_s, 1e-9)


def compute_live_metrics(target_text: str, typed_text: str, elapsed_s: float) -> dict:
    """Cheap per-keystroke numbers; throughput is only worked out at the end."""
    total_typed = len(typed_text)
    correct_chars = compute_correct_chars(target_text, typed_text)
    accuracy = (correct_chars / total_typed) if total_typed > 0 else 0.0

    return {
        "total_typed": total_typed,
        "correct_chars": correct_chars,
        "accuracy": accuracy,
        "cps": characters_per_second(typed_text, elapsed_s),
    }


def compute_metrics(
    target_text: str,
    typed_text: str,
    elapsed_s: float,
    meter: TextEntryThroughput[str] | None = None,
) -> dict:
    meter = meter or TextEntryThroughput.english()
    report = meter.report(target_text, typed_text, elapsed_s)

    return {
        "total_typed": len(typed_text),
        "cps": report.chars_per_second,
        "insertion_probability": report.insertion_probability,
        "omission_probability": report.omission_probability,
        "substitution_probability": report.substitution_probability,
        "correct_probability": report.correct_probability,
        "entropy": report.entropy,
        "mutual_information": report.mutual_information,
        "throughput": report.throughput,
        "distance": report.alignment.distance,
    }
