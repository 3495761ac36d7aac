import random

import pytest

from humantyper.keyboard import ManualScheduler, SimulationConfig, TypingEngine

# Deterministic enough to reason about: no lapses, no overshoot, no jitter
QUIET = {
    "concentration_lapses": False,
    "overcorrection": False,
    "speed_variation": 0,
}

# Everything as fast as the model allows, for real-time asyncio runs
FAST = {
    **QUIET,
    "speed": 0,
    "min_char_delay": 0,
    "sentence_pause": 0,
    "word_pause": 0,
    "thinking_pause": 0,
    "correction_pause": 0,
    "backspace_speed": 0,
    "realization_delay": 0,
    "fatigue_effect": False,
}


class FixedRandom(random.Random):
    """random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_engine(scheduler):
    def factory(text, seed=1, **overrides):
        config = SimulationConfig().merged(QUIET, **overrides)
        return TypingEngine(text, config, scheduler=scheduler, seed=seed)

    return factory


@pytest.fixture
def finish(scheduler):
    """Run an engine on the manual clock until it completes."""

    def run(engine, limit_ms=3_600_000.0):
        return scheduler.run_until(lambda: engine.is_completed, limit_ms=limit_ms)

    return run


@pytest.fixture
def fast_config():
    return SimulationConfig().merged(FAST)


@pytest.fixture
def fixed_rng():
    return FixedRandom
