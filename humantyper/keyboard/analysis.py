from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

from .config import SimulationConfig
from .engine import TypingEngine
from .scheduler import ManualScheduler

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug

SIMULATION_LIMIT_MS = 3_600_000.0  # one simulated hour


def simulate_typing(
    text: Optional[str],
    config: Union[SimulationConfig, Mapping[str, Any], None] = None,
    *,
    seed: Optional[int] = None,
    limit_ms: float = SIMULATION_LIMIT_MS,
) -> TypingEngine:
    """
    Run a whole typing session on a simulated clock and return the engine.

    Nothing sleeps: the ManualScheduler jumps from one step to the next, so
    the engine's event log and stats describe the session as it would have
    played out in real time.
    """
    scheduler = ManualScheduler()
    engine = TypingEngine(text, config, scheduler=scheduler, seed=seed)
    engine.start()
    if not scheduler.run_until(lambda: engine.is_completed, limit_ms=limit_ms):
        print("Simulation stopped at %s after %.0f ms", engine.state.value, scheduler.now())
    return engine


def summarize_typing(engine: TypingEngine) -> str:
    """
    Reports:
      - Total (active) duration
      - Overall Avg WPM (includes pauses/corrections)
      - Keystroke Avg WPM (from the average per-character delay)
      - Printable chars, mistakes made/corrected, backspaces
      - Seed used
    """
    stats = engine.stats
    rec = engine.recorder
    if not rec.events:
        return "No typing data"

    total_s = stats.total_duration / 1000.0
    if total_s <= 0:
        return "Invalid timing data"

    chars = rec.count("char")
    overall_wpm = ((chars / total_s) * 60.0) / 5.0
    if stats.average_char_delay > 0:
        keystroke_wpm = ((1000.0 / stats.average_char_delay) * 60.0) / 5.0
    else:
        keystroke_wpm = 0.0

    return (
        "Typing Summary:\n"
        f"  State: {engine.state.value}\n"
        f"  Total duration: {total_s:.2f}s (paused {stats.paused_duration / 1000.0:.2f}s)\n"
        f"  Overall Avg WPM (with pauses): {overall_wpm:.2f}\n"
        f"  Keystroke Avg WPM (no pauses): {keystroke_wpm:.2f}\n"
        f"  Printable chars: {chars}\n"
        f"  Mistakes made/corrected: {stats.mistakes_made} / {stats.mistakes_corrected}\n"
        f"  Backspaces: {rec.count('backspace')}\n"
        f"  Random seed: {rec.seed if rec.seed is not None else 'N/A'}"
    )
