from __future__ import annotations
import logging
import random
from dataclasses import replace
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..utils import random_uniform as _rand
from .config import SimulationConfig, kcfg
from .mistakes import (
    generate_mistake_char,
    looks_ahead,
    select_mistake_type,
    should_make_mistake,
)
from .scheduler import AsyncioScheduler, Handle, Scheduler
from .telemetry import EventRecorder, MistakeRecord, TypingEvent, TypingStats
from .timing import compute_char_delay, fatigue_step, hand_for

log = logging.getLogger(__name__)


class TypingState(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    THINKING = "thinking"
    CORRECTING = "correcting"
    PAUSED = "paused"
    COMPLETED = "completed"


_ACTIVE = frozenset((TypingState.TYPING, TypingState.THINKING, TypingState.CORRECTING))
_EVENTS = ("state_change", "character", "mistake", "backspace", "progress", "complete")


class TypingEngine:
    """
    Types a target text one character at a time like a person would.

    The engine advances only through callbacks it schedules on its
    Scheduler, holding at most one pending step at a time. Mistakes are
    committed to the display text, noticed after a realization delay, then
    backspaced and retyped (most recent mistake first). Completion waits
    until every mistake is corrected, so at ``completed`` the display text
    equals the target text.

    Subscriber callbacks run synchronously inside a step; anything they
    raise is logged and ignored.
    """

    def __init__(
        self,
        text: Optional[str] = "",
        config: Union[SimulationConfig, Mapping[str, Any], None] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        seed: Optional[int] = None,
    ):
        self._text = text if text is not None else ""
        self._config = SimulationConfig.from_value(config)
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._seed = seed
        self._rng = random.Random(seed)
        self._handle: Optional[Handle] = None
        self._callbacks: Dict[str, Optional[Callable[..., Any]]] = dict.fromkeys(_EVENTS)
        self._state = TypingState.IDLE
        self._clear()

    def _clear(self) -> None:
        self._index = 0
        self._produced = ""
        self._mistakes: List[MistakeRecord] = []
        self._queue: List[int] = []  # stack of indices into self._mistakes
        self._correcting: Optional[int] = None
        self._fatigue = 0.0
        self._last_hand: Optional[str] = None
        self._pause_started: Optional[float] = None
        self._paused_total = 0.0
        self._delay_sum = 0.0
        self._delay_count = 0
        self._stats = TypingStats(total_characters=len(self._text))
        self._recorder = EventRecorder(seed=self._seed)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _debug(self, msg: str, *args: Any) -> None:
        if self._config.debug:
            log.debug(msg, *args)

    def _notify(self, event: str, *args: Any) -> None:
        callback = self._callbacks.get(event)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            level = logging.WARNING if self._config.debug else logging.DEBUG
            log.log(level, "%s subscriber raised; continuing", event, exc_info=True)

    def _set_state(self, state: TypingState) -> bool:
        """Enter state, notify, and report whether a subscriber left it alone."""
        if self._state is not state:
            self._state = state
            self._notify("state_change", state)
        return self._state is state

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self, delay: float, step: Callable[[], None]) -> None:
        self._cancel()
        if self._state not in _ACTIVE:
            return

        def run() -> None:
            self._handle = None
            step()

        try:
            if delay < kcfg.IMMEDIATE_DELAY_MS:
                self._handle = self._scheduler.call_soon(run)
            else:
                self._handle = self._scheduler.call_later(delay, run)
        except RuntimeError:
            # AsyncioScheduler used outside a running event loop
            log.warning("No running event loop to type on; engine stays idle")
            self._halt()
            if not self._recorder.events:
                self._stats.start_time = None
            self._set_state(TypingState.IDLE)

    def _has_uncorrected(self) -> bool:
        return any(not m.corrected for m in self._mistakes)

    def _has_pending_work(self) -> bool:
        return bool(self._queue) or self._correcting is not None or self._has_uncorrected()

    def _fold_pause(self, now: float) -> None:
        if self._pause_started is not None:
            self._paused_total += max(0.0, now - self._pause_started)
            self._pause_started = None
            self._stats.paused_duration = self._paused_total

    def _active_duration(self, now: float) -> float:
        start = self._stats.start_time
        if start is None:
            return 0.0
        end = self._stats.end_time if self._stats.end_time is not None else now
        paused = self._paused_total
        if self._pause_started is not None:
            paused += max(0.0, now - self._pause_started)
        return max(0.0, end - start - paused)

    def _update_timing(self, now: float) -> None:
        self._stats.total_duration = self._active_duration(now)
        minutes = self._stats.total_duration / 60000.0
        if minutes > 0:
            self._stats.current_wpm = round((self._stats.characters_typed / 5.0) / minutes)

    # ------------------------------------------------------------------
    # Typing loop
    # ------------------------------------------------------------------

    def _schedule_next_character(self) -> None:
        if self._state not in _ACTIVE:
            return
        if self._has_uncorrected():
            # A realization timer was cancelled (pause/resume); fix it first
            self._drain_corrections()
            return
        if self._index >= len(self._text):
            self._complete()
            return

        if self._config.concentration_lapses and self._rng.random() < kcfg.CONCENTRATION_LAPSE:
            self._debug("Concentration lapse before index %d", self._index)
            if self._set_state(TypingState.THINKING):
                self._schedule(kcfg.CONCENTRATION_PAUSE, self._end_lapse)
            return

        text, index = self._text, self._index
        delay = compute_char_delay(
            text,
            index,
            self._config,
            last_hand=self._last_hand,
            fatigue=self._fatigue,
            rng=self._rng,
        )
        ahead = looks_ahead(text, index, self._rng)
        wrong = should_make_mistake(text, index, self._config, self._rng, look_ahead=ahead)
        step = partial(self._emit, wrong, ahead, delay)

        if delay > kcfg.THINKING_STATE_THRESHOLD_MS:
            if not self._set_state(TypingState.THINKING):
                return
        self._schedule(delay, step)

    def _end_lapse(self) -> None:
        if self._set_state(TypingState.TYPING):
            self._schedule_next_character()

    def _emit(self, wrong: bool, ahead: bool, delay: float) -> None:
        # Hand, fatigue and pacing count only for steps that actually ran
        self._last_hand = hand_for(self._text[self._index])
        self._fatigue += fatigue_step(self._config)
        self._delay_sum += delay
        self._delay_count += 1
        self._stats.average_char_delay = self._delay_sum / self._delay_count
        if not self._set_state(TypingState.TYPING):
            return
        if wrong:
            self._make_mistake(ahead)
        else:
            self._type_character()

    def _commit(self, chars: str) -> int:
        index = self._index
        now = self._scheduler.now()
        self._produced += chars
        self._index += 1
        self._stats.characters_typed += len(chars)
        self._update_timing(now)
        return index

    def _type_character(self) -> None:
        ch = self._text[self._index]
        index = self._commit(ch)
        self._recorder.log("char", index, self._scheduler.now(), char=ch)
        self._notify("character", ch, index)
        self._report_progress()
        self._schedule_next_character()

    def _make_mistake(self, ahead: bool) -> None:
        text, index = self._text, self._index
        ch = text[index]
        kind = select_mistake_type(ch, self._config, self._rng, look_ahead=ahead)
        wrong = generate_mistake_char(text, index, kind, self._rng)
        if not wrong:
            self._type_character()
            return

        record = MistakeRecord(
            kind=kind,
            original_char=ch,
            mistake_char=wrong,
            position=index,
            realization_delay=self._config.realization_delay
            + _rand(0.0, kcfg.REALIZATION_JITTER, self._rng),
        )
        self._mistakes.append(record)
        number = len(self._mistakes) - 1
        self._stats.mistakes_made += 1
        self._debug("Mistake %r -> %r (%s) at %d", ch, wrong, kind.value, index)

        self._commit(wrong)
        self._recorder.log("mistake", index, self._scheduler.now(), char=wrong, mistake=record)
        self._notify("character", wrong, index)
        self._notify("mistake", record)
        self._report_progress()

        realize_in = max(record.realization_delay, kcfg.MIN_REALIZATION_DELAY)
        self._schedule(realize_in, partial(self._realize, number))

    # ------------------------------------------------------------------
    # Corrections
    # ------------------------------------------------------------------

    def _realize(self, number: int) -> None:
        if not self._mistakes[number].corrected and number not in self._queue:
            self._queue.append(number)
        if not self._process_next_correction() and self._correcting is None:
            self._schedule_next_character()

    def _process_next_correction(self) -> bool:
        """Start correcting the most recent queued mistake. False if none started."""
        if self._correcting is not None or not self._queue:
            return False
        while self._queue:
            number = self._queue.pop()
            if not self._mistakes[number].corrected:
                self._correct(number)
                return True
        return False

    def _continue_corrections(self) -> None:
        if not self._process_next_correction():
            self._schedule_next_character()

    def _queue_uncorrected(self) -> None:
        for number, record in enumerate(self._mistakes):
            if not record.corrected and number not in self._queue and number != self._correcting:
                self._queue.append(number)

    def _drain_corrections(self) -> None:
        if self._correcting is not None:
            return
        self._queue_uncorrected()
        self._process_next_correction()

    def _correct(self, number: int) -> None:
        record = self._mistakes[number]
        self._correcting = number
        if not self._set_state(TypingState.CORRECTING):
            return

        target = record.position
        if (
            self._config.overcorrection
            and target > 0
            and self._rng.random() < kcfg.OVERCORRECTION_RATE
        ):
            target -= 1  # overshoot one correct character
        # A correction restarted after pause() may already be below the mistake
        target = min(target, len(self._produced))

        to_delete = len(self._produced) - target
        self._debug("Correcting %r at %d: %d to delete", record.mistake_char, record.position, to_delete)
        if to_delete <= 0:
            self._finish_correction(number, target)
            return
        self._schedule(
            self._config.backspace_speed, partial(self._backspace, number, target, to_delete)
        )

    def _backspace(self, number: int, target: int, remaining: int) -> None:
        if remaining > 0 and len(self._produced) > target:
            self._produced = self._produced[:-1]
            remaining -= 1
            self._recorder.log("backspace", len(self._produced), self._scheduler.now())
            self._notify("backspace")
            if self._state is not TypingState.CORRECTING:
                return
            if remaining > 0 and len(self._produced) > target:
                self._schedule(
                    self._config.backspace_speed,
                    partial(self._backspace, number, target, remaining),
                )
                return
        self._finish_correction(number, target)

    def _finish_correction(self, number: int, target: int) -> None:
        record = self._mistakes[number]
        self._index = target
        self._produced = self._text[:target]
        record.corrected = True
        self._stats.mistakes_corrected += 1
        self._correcting = None
        self._recorder.log(
            "correction", record.position, self._scheduler.now(),
            char=record.original_char, mistake=record,
        )
        self._schedule(self._config.correction_pause, partial(self._retype, record.position))

    def _retype(self, upto: int) -> None:
        if not self._set_state(TypingState.TYPING):
            return
        ch = self._text[self._index]
        index = self._commit(ch)
        self._recorder.log("char", index, self._scheduler.now(), char=ch)
        self._notify("character", ch, index)
        self._report_progress()
        if self._state is not TypingState.TYPING:
            return
        if self._index <= upto:
            self._schedule(self._config.min_char_delay, partial(self._retype, upto))
        elif self._queue:
            self._schedule(self._config.realization_delay, self._continue_corrections)
        else:
            self._schedule_next_character()

    # ------------------------------------------------------------------
    # Completion and progress
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        if self._state is TypingState.COMPLETED:
            return
        if self._has_pending_work():
            self._debug(
                "End reached with %d queued / %d uncorrected mistakes",
                len(self._queue),
                len(self.uncorrected_mistakes()),
            )
            self._drain_corrections()
            if self._handle is None:
                self._schedule(kcfg.COMPLETION_RECHECK_MS, self._complete)
            return
        self._finalize()

    def _finalize(self) -> None:
        self._cancel()
        now = self._scheduler.now()
        self._fold_pause(now)
        # skip() jumps here mid-text; natural completion already matches
        self._produced = self._text
        self._index = len(self._text)
        self._stats.end_time = now
        self._update_timing(now)
        self._state = TypingState.COMPLETED
        self._debug("Completed %d chars in %.0f ms", len(self._text), self._stats.total_duration)
        self._notify("state_change", TypingState.COMPLETED)
        self._notify("complete")
        self._notify("progress", 100.0)

    def _report_progress(self) -> None:
        self._notify("progress", self.progress)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._state is TypingState.PAUSED:
            self.resume()
            return
        if self._state is not TypingState.IDLE:
            return
        if self._stats.start_time is None:
            self._stats.start_time = self._scheduler.now()
        if self._set_state(TypingState.TYPING):
            self._schedule_next_character()

    def _halt(self) -> None:
        self._cancel()
        self._fold_pause(self._scheduler.now())
        for record in self._mistakes:
            record.corrected = True  # handled; never retried
        self._queue.clear()
        self._correcting = None

    def stop(self) -> None:
        self._halt()
        self._set_state(TypingState.IDLE)

    def pause(self) -> None:
        if self._state not in _ACTIVE:
            return
        self._cancel()
        if self._correcting is not None:
            if self._correcting not in self._queue:
                self._queue.append(self._correcting)
            self._correcting = None
        now = self._scheduler.now()
        self._pause_started = now
        self._recorder.log("pause", self._index, now)
        self._set_state(TypingState.PAUSED)

    def resume(self) -> None:
        if self._state is not TypingState.PAUSED:
            return
        now = self._scheduler.now()
        self._fold_pause(now)
        self._recorder.log("resume", self._index, now)
        if self._set_state(TypingState.TYPING):
            self._schedule_next_character()

    def skip(self) -> None:
        if self._state is TypingState.COMPLETED:
            return
        self._halt()
        self._finalize()

    def reset(self) -> None:
        self._halt()
        self._clear()
        self._state = TypingState.IDLE
        self._notify("state_change", TypingState.IDLE)

    def update_config(
        self, overrides: Union[SimulationConfig, Mapping[str, Any], None] = None, **kwargs: Any
    ) -> None:
        """Merge partial settings into the current config; takes effect on the next step."""
        if isinstance(overrides, SimulationConfig):
            self._config = overrides.merged(kwargs)
        else:
            self._config = self._config.merged(overrides, **kwargs)

    def update_text(self, text: Optional[str]) -> None:
        """Replace the target text. Stops and resets; never restarts by itself."""
        self._halt()
        self._text = text if text is not None else ""
        self.reset()

    def force_correct_all_mistakes(self) -> None:
        """Queue every uncorrected mistake and start fixing them now."""
        if not self._has_uncorrected() and not self._queue:
            return
        if self._state not in _ACTIVE or self._correcting is not None:
            # Picked up by resume() or after the correction in flight
            self._queue_uncorrected()
            return
        self._cancel()
        self._drain_corrections()

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def on_state_change(self, callback: Optional[Callable[[TypingState], Any]]) -> None:
        self._callbacks["state_change"] = callback

    def on_character(self, callback: Optional[Callable[[str, int], Any]]) -> None:
        self._callbacks["character"] = callback

    def on_mistake(self, callback: Optional[Callable[[MistakeRecord], Any]]) -> None:
        self._callbacks["mistake"] = callback

    def on_backspace(self, callback: Optional[Callable[[], Any]]) -> None:
        self._callbacks["backspace"] = callback

    def on_progress(self, callback: Optional[Callable[[float], Any]]) -> None:
        self._callbacks["progress"] = callback

    def on_complete(self, callback: Optional[Callable[[], Any]]) -> None:
        self._callbacks["complete"] = callback

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def display_text(self) -> str:
        return self._produced

    @property
    def state(self) -> TypingState:
        return self._state

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def progress(self) -> float:
        """Percent typed; exactly 100 only once completed (or for empty text)."""
        if self._state is TypingState.COMPLETED or not self._text:
            return 100.0
        raw = self._index / len(self._text) * 100.0
        return raw if raw < 100.0 else 99.0

    @property
    def total_duration(self) -> float:
        """Active milliseconds since start, paused time excluded."""
        duration = self._active_duration(self._scheduler.now())
        self._stats.total_duration = duration
        return duration

    @property
    def stats(self) -> TypingStats:
        duration = self.total_duration
        paused = self._paused_total
        if self._pause_started is not None:
            paused += max(0.0, self._scheduler.now() - self._pause_started)
        return replace(self._stats, total_duration=duration, paused_duration=paused)

    @property
    def mistakes(self) -> List[MistakeRecord]:
        return [replace(m) for m in self._mistakes]

    @property
    def correction_queue(self) -> List[MistakeRecord]:
        return [replace(self._mistakes[i]) for i in self._queue]

    @property
    def events(self) -> List[TypingEvent]:
        return list(self._recorder.events)

    @property
    def recorder(self) -> EventRecorder:
        return self._recorder

    @property
    def is_completed(self) -> bool:
        return self._state is TypingState.COMPLETED

    @property
    def is_typing(self) -> bool:
        return self._state in _ACTIVE

    @property
    def is_paused(self) -> bool:
        return self._state is TypingState.PAUSED

    def uncorrected_mistakes(self) -> List[MistakeRecord]:
        return [replace(m) for m in self._mistakes if not m.corrected]
