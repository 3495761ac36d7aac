from humantyper import TypingEngine, ManualScheduler, simulate_typing, summarize_typing


class TestSimulateTyping:
    def test_runs_to_completion_on_a_simulated_clock(self):
        engine = simulate_typing("Simulated, not slept.", seed=5)
        assert engine.is_completed
        assert engine.display_text == "Simulated, not slept."
        assert engine.total_duration > 0

    def test_accepts_partial_config_mapping(self):
        engine = simulate_typing("abc", {"mistake_frequency": 0, "speed": 200}, seed=1)
        assert engine.config.speed == 200
        assert engine.stats.mistakes_made == 0

    def test_same_seed_same_timeline(self):
        first = simulate_typing("The same text twice.", {"mistake_frequency": 0.2}, seed=11)
        second = simulate_typing("The same text twice.", {"mistake_frequency": 0.2}, seed=11)
        assert first.events == second.events
        assert first.stats.total_duration == second.stats.total_duration

    def test_gives_up_at_the_limit(self):
        engine = simulate_typing("a long text " * 50, seed=1, limit_ms=500)
        assert not engine.is_completed


class TestSummary:
    def test_summary_of_a_finished_run(self):
        engine = simulate_typing("Hello there", {"mistake_frequency": 1.0}, seed=3)
        summary = summarize_typing(engine)
        assert summary.startswith("Typing Summary:")
        assert "State: completed" in summary
        stats = engine.stats
        assert f"Mistakes made/corrected: {stats.mistakes_made} / {stats.mistakes_corrected}" in summary
        assert f"Backspaces: {engine.recorder.count('backspace')}" in summary
        assert "Random seed: 3" in summary

    def test_summary_without_events(self):
        engine = TypingEngine("never started", scheduler=ManualScheduler())
        assert summarize_typing(engine) == "No typing data"

    def test_summary_with_zero_duration(self):
        engine = simulate_typing(
            "ab",
            {"speed": 0, "speed_variation": 0, "min_char_delay": 0,
             "mistake_frequency": 0, "concentration_lapses": False},
        )
        assert summarize_typing(engine) == "Invalid timing data"

    def test_unseeded_run_reports_na(self):
        engine = simulate_typing("ok", {"mistake_frequency": 0, "speed_variation": 0})
        assert "Random seed: N/A" in summarize_typing(engine)
