import random

import pytest

from humantyper.keyboard import SimulationConfig, kcfg
from humantyper.keyboard.timing import compute_char_delay, fatigue_step, hand_for
from humantyper.keyboard.utils import caps_lock_info, next_word

# speed 100, no jitter, no fatigue; rng 0.99 never triggers a burst
PLAIN = SimulationConfig(speed=100, speed_variation=0, fatigue_effect=False)


@pytest.fixture
def rng(fixed_rng):
    return fixed_rng(0.99)


class TestCapsLock:
    def test_single_capital_is_not_a_sequence(self):
        assert not caps_lock_info("Hello", 0).is_sequence

    def test_two_capitals_are_not_enough(self):
        assert not caps_lock_info("AB cd", 0).is_sequence

    def test_first_middle_last_of_run(self):
        text = "say NASA now"
        assert caps_lock_info(text, 4) == (True, True, False)
        assert caps_lock_info(text, 5) == (True, False, False)
        assert caps_lock_info(text, 7) == (True, False, True)

    def test_single_spaces_between_capital_words_join_the_run(self):
        text = "I AM OK"
        assert caps_lock_info(text, 0) == (True, True, False)
        assert caps_lock_info(text, 3) == (True, False, False)
        assert caps_lock_info(text, 6) == (True, False, True)

    def test_lowercase_is_never_part_of_a_run(self):
        assert caps_lock_info("NASAx", 4) == (False, False, False)


class TestDelayModel:
    def test_plain_letter_uses_frequency_discount(self, rng):
        # b: 1.3% frequency
        assert compute_char_delay("ab", 1, PLAIN, rng=rng) == pytest.approx(100 * 0.987)

    def test_vowel_and_frequency_discounts_stack(self, rng):
        config = PLAIN.merged(speed=1000)
        # e: vowel discount 0.9, 12.7% frequency
        assert compute_char_delay("xe", 1, config, rng=rng) == pytest.approx(1000 * 0.9 * 0.873)

    def test_single_capital_pays_shift_hesitation(self, rng):
        lower = compute_char_delay("hi", 0, PLAIN, rng=rng)
        upper = compute_char_delay("Hi", 0, PLAIN, rng=rng)
        assert upper - lower == pytest.approx(kcfg.SHIFT_HESITATION * (1 - 0.061))

    def test_caps_lock_interior_letters_pay_nothing_extra(self, rng):
        interior = compute_char_delay("NASA", 1, PLAIN, rng=rng)
        plain = compute_char_delay("nasa", 1, PLAIN, rng=rng)
        assert interior == pytest.approx(plain)

    def test_caps_lock_first_and_last_pay_engage_and_release(self, rng):
        first = compute_char_delay("NASA", 0, PLAIN, rng=rng)
        last = compute_char_delay("NASA", 3, PLAIN, rng=rng)
        assert first > compute_char_delay("nasa", 0, PLAIN, rng=rng)
        assert last > compute_char_delay("nasa", 3, PLAIN, rng=rng)

    def test_digits_pay_number_row_penalty(self, rng):
        # digits have no letter frequency entry: multiplier 0.99
        assert compute_char_delay("a5", 1, PLAIN, rng=rng) == pytest.approx(
            (100 + kcfg.NUMBER_ROW_PENALTY) * 0.99
        )

    def test_symbol_tiers_increase_delay(self, rng):
        tier1 = compute_char_delay("a'", 1, PLAIN, rng=rng)
        tier2 = compute_char_delay("a-", 1, PLAIN, rng=rng)
        tier3 = compute_char_delay("a=", 1, PLAIN, rng=rng)
        assert tier1 < tier2 < tier3

    def test_sentence_end_adds_sentence_pause(self, rng):
        delay = compute_char_delay("a.", 1, PLAIN, rng=rng)
        expected = (100 + kcfg.SYMBOL_BASE_PENALTY) * 1.2 * 0.99 + PLAIN.sentence_pause
        assert delay == pytest.approx(expected)

    def test_line_break_pause_is_the_largest(self, rng):
        newline = compute_char_delay("a\nb", 1, PLAIN, rng=rng)
        comma = compute_char_delay("a,b", 1, PLAIN, rng=rng)
        assert newline == pytest.approx(100 * 0.99 + kcfg.LINE_BREAK)
        assert newline > comma

    def test_space_before_common_word_adds_word_pause_only(self, rng):
        delay = compute_char_delay("a the", 1, PLAIN, rng=rng)
        assert delay == pytest.approx(100 * 0.99 + PLAIN.word_pause)

    def test_space_before_complex_word_adds_thinking_pause(self, rng):
        delay = compute_char_delay("a xylophone", 1, PLAIN, rng=rng)
        assert delay == pytest.approx(100 * 0.99 + PLAIN.word_pause + PLAIN.thinking_pause)

    def test_next_word_skips_leading_whitespace(self):
        assert next_word("a   word here", 1) == "word"
        assert next_word("end ", 3) is None

    def test_hand_alternation_is_faster(self, rng):
        assert hand_for("a") == "left"
        assert hand_for("k") == "right"
        same = compute_char_delay("xa", 1, PLAIN, last_hand="left", rng=rng)
        alternating = compute_char_delay("xa", 1, PLAIN, last_hand="right", rng=rng)
        assert alternating == pytest.approx(same * kcfg.HAND_ALTERNATION_MULTIPLIER)

    def test_keys_outside_both_hand_maps_get_no_alternation_bonus(self, rng):
        assert hand_for(" ") is None
        assert hand_for("\n") is None
        after_left = compute_char_delay("a b", 1, PLAIN, last_hand="left", rng=rng)
        after_right = compute_char_delay("a b", 1, PLAIN, last_hand="right", rng=rng)
        assert after_left == after_right

    def test_burst_shortens_delay(self, fixed_rng):
        slow = compute_char_delay("ab", 1, PLAIN, rng=fixed_rng(0.99))
        burst = compute_char_delay("ab", 1, PLAIN, rng=fixed_rng(0.0))
        assert burst == pytest.approx(slow * kcfg.BURST_SPEED_MULTIPLIER)

    def test_result_is_floored_at_min_char_delay(self, rng):
        config = PLAIN.merged(speed=0, min_char_delay=25)
        assert compute_char_delay("ab", 1, config, rng=rng) == 25

    def test_speed_variation_stays_within_bounds(self):
        config = PLAIN.merged(speed_variation=40, min_char_delay=0)
        rng = random.Random(3)
        for _ in range(200):
            delay = compute_char_delay("xz", 1, config, rng=rng)
            assert delay <= (100 + 40) * 0.9993 + 1e-9

    def test_same_inputs_give_same_delay(self, rng):
        first = compute_char_delay("Hello there", 5, PLAIN, last_hand="left", fatigue=3, rng=rng)
        second = compute_char_delay("Hello there", 5, PLAIN, last_hand="left", fatigue=3, rng=rng)
        assert first == second


class TestFatigue:
    def test_fatigue_is_ignored_when_disabled(self, rng):
        assert fatigue_step(PLAIN) == 0
        fresh = compute_char_delay("ab", 1, PLAIN, fatigue=0, rng=rng)
        tired = compute_char_delay("ab", 1, PLAIN, fatigue=50, rng=rng)
        assert fresh == tired

    def test_fatigue_component_is_non_decreasing_over_a_run(self, rng):
        config = PLAIN.merged(fatigue_effect=True)
        fatigue = 0.0
        delays = []
        for _ in range(500):
            delays.append(compute_char_delay("ab", 1, config, fatigue=fatigue, rng=rng))
            fatigue += fatigue_step(config)
        assert fatigue == pytest.approx(500 * kcfg.FATIGUE_INCREMENT)
        assert all(b >= a for a, b in zip(delays, delays[1:]))
        assert delays[-1] - delays[0] == pytest.approx(499 * kcfg.FATIGUE_INCREMENT)
