"""Tests for typebench.core.session – the session state machine."""

from __future__ import annotations

import pytest

from typebench.core.config import Difficulty, Mode, SessionConfig
from typebench.core.errors import AlreadyStarted, InvalidTransition
from typebench.core.session import Phase, SessionSnapshot, TypingSession
from typebench.core.tracker import BACKSPACE, CharacterState


def _type(session: TypingSession, keys: str, clock=None, step: float = 0.0) -> None:
    for k in keys:
        session.apply(k)
        if clock is not None:
            clock.advance(step)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_starts_not_started(self, clock):
        s = TypingSession(SessionConfig.quote(), "hello", clock=clock)
        assert s.phase is Phase.NOT_STARTED
        assert s.finish_reason is None
        assert not s.timer.started

    def test_word_list_is_space_joined(self, clock):
        s = TypingSession(SessionConfig.time(30), ["cat", "dog"], clock=clock)
        assert s.target == "cat dog"

    def test_words_mode_truncates_to_count(self, clock):
        s = TypingSession(SessionConfig.words(2), "one two three four", clock=clock)
        assert s.target == "one two"

    def test_quote_mode_disables_word_locking(self, clock):
        s = TypingSession(SessionConfig.quote(), "ab cd", clock=clock)
        _type(s, "ab ")
        s.apply(BACKSPACE)
        assert s.tracker.cursor == 2


# ---------------------------------------------------------------------------
# Start / phase transitions
# ---------------------------------------------------------------------------

class TestTransitions:
    def test_first_keystroke_starts(self, clock):
        s = TypingSession(SessionConfig.quote(), "hello", clock=clock)
        assert s.apply("h") is True
        assert s.phase is Phase.RUNNING
        assert s.timer.started

    def test_ignored_keystroke_does_not_start(self, clock):
        s = TypingSession(SessionConfig.words(2), "cat dog", clock=clock)
        assert s.apply(BACKSPACE) is False
        assert s.apply(" ") is False
        assert s.phase is Phase.NOT_STARTED

    def test_explicit_start(self, clock):
        s = TypingSession(SessionConfig.time(30), "cat dog", clock=clock)
        s.start()
        assert s.phase is Phase.RUNNING

    def test_start_twice_is_invalid(self, clock):
        s = TypingSession(SessionConfig.time(30), "cat dog", clock=clock)
        s.start()
        with pytest.raises(InvalidTransition):
            s.start()

    def test_start_after_finish_is_invalid(self, clock):
        s = TypingSession(SessionConfig.quote(), "hi", clock=clock)
        s.abort()
        with pytest.raises(InvalidTransition):
            s.start()

    def test_timer_restart_is_rejected(self, clock):
        s = TypingSession(SessionConfig.quote(), "hi", clock=clock)
        s.apply("h")
        with pytest.raises(AlreadyStarted):
            s.timer.start()

    def test_apply_after_finish_is_noop(self, clock):
        s = TypingSession(SessionConfig.quote(), "hi", clock=clock)
        _type(s, "hi")
        assert s.phase is Phase.FINISHED
        assert s.apply("x") is False
        assert s.apply(BACKSPACE) is False
        assert len(s.tracker.log) == 2

    def test_tick_before_start(self, clock):
        s = TypingSession(SessionConfig.time(1), "cat", clock=clock)
        clock.advance(5)
        assert s.tick() is Phase.NOT_STARTED


# ---------------------------------------------------------------------------
# Quote mode
# ---------------------------------------------------------------------------

class TestQuoteMode:
    def test_exact_text_finishes_with_full_accuracy(self, clock):
        quote = "Well begun is half done."
        s = TypingSession(SessionConfig.quote(), quote, clock=clock)
        _type(s, quote, clock, step=0.2)
        assert s.phase is Phase.FINISHED
        assert s.finish_reason == "quote completed"
        snap = s.snapshot()
        assert snap.accuracy == 100.0
        assert snap.incorrect_chars == 0
        assert snap.correct_chars == len(quote)
        assert snap.gross_wpm > 0

    def test_not_finished_one_char_short(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        _type(s, "ab")
        assert s.phase is Phase.RUNNING

    def test_errors_can_be_corrected_across_words(self, clock):
        s = TypingSession(SessionConfig.quote(), "ab cd", clock=clock)
        _type(s, "xb c")
        for _ in range(4):
            s.apply(BACKSPACE)
        _type(s, "ab cd")
        assert s.phase is Phase.FINISHED
        assert all(st is CharacterState.CORRECT for st in s.snapshot().states)


# ---------------------------------------------------------------------------
# Words mode
# ---------------------------------------------------------------------------

class TestWordsMode:
    def test_finishes_on_last_char_of_final_word(self, clock):
        s = TypingSession(SessionConfig.words(2), "cat dog", clock=clock)
        _type(s, "cat do")
        assert s.phase is Phase.RUNNING
        assert s.words_completed == 1
        s.apply("g")
        assert s.phase is Phase.FINISHED
        assert s.words_completed == 2
        assert s.finish_reason == "word count reached"

    def test_skipping_final_word_finishes(self, clock):
        s = TypingSession(SessionConfig.words(2), "cat dog", clock=clock)
        _type(s, "cat d ")
        assert s.phase is Phase.FINISHED

    def test_goal_capped_by_available_words(self, clock):
        s = TypingSession(SessionConfig.words(10), "cat dog", clock=clock)
        _type(s, "cat dog")
        assert s.phase is Phase.FINISHED


# ---------------------------------------------------------------------------
# Time mode
# ---------------------------------------------------------------------------

class TestTimeMode:
    def test_no_keystrokes_expires(self, clock):
        s = TypingSession(SessionConfig.time(1), "cat dog", clock=clock)
        s.start()
        clock.advance(1.0)
        assert s.timer.remaining(1) == 0
        assert s.tick() is Phase.FINISHED
        snap = s.snapshot()
        assert snap.gross_wpm == 0.0
        assert snap.net_wpm == 0.0
        assert snap.accuracy == 100.0
        assert snap.remaining == 0.0

    def test_keystroke_after_expiry_finishes_and_is_dropped(self, clock):
        s = TypingSession(SessionConfig.time(5), "cat dog", clock=clock)
        s.apply("c")
        clock.advance(6)
        assert s.apply("a") is False
        assert s.phase is Phase.FINISHED
        assert s.finish_reason == "time expired"
        assert s.tracker.cursor == 1

    def test_running_before_expiry(self, clock):
        s = TypingSession(SessionConfig.time(5), "cat dog", clock=clock)
        s.apply("c")
        clock.advance(4.9)
        assert s.tick() is Phase.RUNNING
        assert s.snapshot().remaining == pytest.approx(0.1)

    def test_metrics_use_duration_after_late_tick(self, clock):
        s = TypingSession(SessionConfig.time(60), "cat dog", clock=clock)
        _type(s, "cat dog"[:5])
        clock.advance(61)
        s.tick()
        snap = s.snapshot()
        assert snap.elapsed == 60.0
        assert snap.gross_wpm == pytest.approx(5 / 5)

    def test_text_exhausted_finishes(self, clock):
        s = TypingSession(SessionConfig.time(60), "hi", clock=clock)
        _type(s, "hi")
        assert s.phase is Phase.FINISHED
        assert s.finish_reason == "text exhausted"


# ---------------------------------------------------------------------------
# Abort
# ---------------------------------------------------------------------------

class TestAbort:
    def test_abort_mid_session(self, clock):
        s = TypingSession(SessionConfig.words(2), "abcde fghij", clock=clock)
        _type(s, "abx", clock, step=5.0)
        s.abort()
        snap = s.snapshot()
        assert snap.phase is Phase.FINISHED
        assert s.finish_reason == "aborted"
        assert 66.0 <= snap.accuracy <= 67.0
        assert snap.elapsed == pytest.approx(15.0)
        # 3 keystrokes over a quarter minute
        assert snap.gross_wpm == pytest.approx(3 / 5 / 0.25)
        assert snap.gross_wpm > 0

    def test_abort_before_start(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        s.abort()
        assert s.phase is Phase.FINISHED
        assert s.snapshot().elapsed == 0.0

    def test_abort_twice_is_harmless(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        s.apply("a")
        s.abort()
        s.abort()
        assert s.phase is Phase.FINISHED

    def test_abort_ignores_completion_policy(self, clock):
        s = TypingSession(SessionConfig.time(120), "cat dog", clock=clock)
        s.apply("c")
        s.abort()
        assert s.phase is Phase.FINISHED


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

class TestSnapshot:
    def test_initial_snapshot(self, clock):
        s = TypingSession(SessionConfig.time(30, Difficulty.EASY), "cat", clock=clock)
        snap = s.snapshot()
        assert isinstance(snap, SessionSnapshot)
        assert snap.phase is Phase.NOT_STARTED
        assert snap.mode is Mode.TIME
        assert snap.cursor == 0
        assert snap.elapsed == 0.0
        assert snap.remaining == 30.0
        assert snap.clock == 30.0
        assert snap.accuracy == 100.0
        assert not snap.started

    def test_clock_is_elapsed_outside_time_mode(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        s.apply("a")
        clock.advance(3)
        snap = s.snapshot()
        assert snap.remaining is None
        assert snap.clock == pytest.approx(3)

    def test_finished_snapshot_is_frozen(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        _type(s, "abc", clock, step=1.0)
        first = s.snapshot()
        clock.advance(100)
        assert s.snapshot() == first

    def test_snapshot_reflects_states(self, clock):
        s = TypingSession(SessionConfig.quote(), "abc", clock=clock)
        _type(s, "ax")
        snap = s.snapshot()
        assert snap.states == (CharacterState.CORRECT, CharacterState.INCORRECT, CharacterState.PENDING)
        assert snap.cursor == 2

    @pytest.mark.parametrize("keys", ["xxxxxxxx", "a\bb\bc", "zzz zzz zzz", "cat dog"])
    def test_metric_bounds(self, clock, keys):
        s = TypingSession(SessionConfig.words(2), "cat dog", clock=clock)
        _type(s, keys, clock, step=0.7)
        snap = s.snapshot()
        assert 0.0 <= snap.accuracy <= 100.0
        assert snap.net_wpm >= 0.0
        assert snap.cursor <= len(snap.target)
