import pytest

from config import SegmenterConfig
from speech import SegmenterState, SpeechSegmenter, TranscriptFragment, normalize_words


def final(text):
    return TranscriptFragment(text, is_final=True)


@pytest.fixture
def segmenter():
    return SpeechSegmenter(SegmenterConfig(pause_threshold=3.0))


def test_restated_fragment_is_not_duplicated(segmenter):
    segmenter.observe(final("I have a"), 0.0)
    segmenter.observe(final("I have a sore throat"), 1.0)

    sentence = segmenter.check_pause(5.0)
    assert sentence == "I have a sore throat."
    assert sentence.count("sore throat") == 1
    assert sentence.count("have") == 1


def test_pause_finalizes_once(segmenter):
    segmenter.observe(final("hello there"), 10.0)

    assert segmenter.check_pause(12.0) is None
    assert segmenter.check_pause(13.0) is None  # not strictly past the threshold
    assert segmenter.check_pause(13.5) == "Hello there."
    assert segmenter.check_pause(30.0) is None
    assert segmenter.sentences == ("Hello there.",)
    assert segmenter.state is SegmenterState.IDLE


def test_existing_punctuation_is_kept(segmenter):
    segmenter.observe(final("does it hurt when you swallow?"), 0.0)
    assert segmenter.on_stream_end() == "Does it hurt when you swallow?"


def test_fragments_are_space_joined(segmenter):
    segmenter.observe(final("take one tablet"), 0.0)
    segmenter.observe(final("twice a day"), 1.0)
    assert segmenter.state is SegmenterState.ACCUMULATING
    assert segmenter.on_stream_end() == "Take one tablet twice a day."


def test_interim_fragments_are_not_buffered(segmenter):
    segmenter.observe(TranscriptFragment("how long", is_final=False), 0.0)
    assert segmenter.interim_text == "how long"
    assert segmenter.buffer == ""
    assert segmenter.check_pause(10.0) is None

    segmenter.observe(final("how long has it been"), 11.0)
    assert segmenter.interim_text == ""
    assert segmenter.buffer == "how long has it been"


def test_identical_fragment_is_dropped(segmenter):
    segmenter.observe(final("thank you"), 0.0)
    segmenter.observe(final("Thank you."), 1.0)
    assert segmenter.on_stream_end() == "Thank you."


def test_prefix_of_previous_fragment_is_dropped(segmenter):
    segmenter.observe(final("I have a sore throat"), 0.0)
    segmenter.observe(final("I have a"), 1.0)
    assert segmenter.buffer == "I have a sore throat"


def test_duplicate_does_not_refresh_activity(segmenter):
    segmenter.observe(final("rest well"), 0.0)
    segmenter.observe(final("rest well"), 2.5)
    assert segmenter.check_pause(3.5) == "Rest well."


def test_restart_keeps_buffer_and_strips_resent_tail():
    segmenter = SpeechSegmenter(SegmenterConfig(continuous=False))
    segmenter.observe(final("my head"), 0.0)

    assert segmenter.on_engine_end(user_stopped=False) is None
    assert segmenter.buffer == "my head"

    segmenter.observe(final("head hurts"), 1.0)
    assert segmenter.on_engine_end(user_stopped=True) == "My head hurts."


def test_repeated_word_without_restart_is_kept(segmenter):
    # only a restart marks the leading words as re-sent
    segmenter.observe(final("I said no"), 0.0)
    segmenter.observe(final("no more pills"), 1.0)
    assert segmenter.buffer == "I said no no more pills"


def test_continuous_engine_end_finalizes(segmenter):
    segmenter.observe(final("see you next week"), 0.0)
    assert segmenter.on_engine_end() == "See you next week."


def test_stream_end_with_empty_buffer(segmenter):
    assert segmenter.on_stream_end() is None
    assert segmenter.sentences == ()


def test_same_words_after_finalize_start_a_new_sentence(segmenter):
    segmenter.observe(final("okay"), 0.0)
    segmenter.check_pause(4.0)
    segmenter.observe(final("okay"), 5.0)
    segmenter.check_pause(9.0)
    assert segmenter.sentences == ("Okay.", "Okay.")


def test_transcript_includes_current_sentence(segmenter):
    segmenter.observe(final("first one"), 0.0)
    segmenter.check_pause(4.0)
    segmenter.observe(final("second"), 5.0)
    assert segmenter.transcript() == ("First one.", "second")


def test_sentence_log_is_a_snapshot(segmenter):
    segmenter.observe(final("one"), 0.0)
    segmenter.on_stream_end()
    snapshot = segmenter.sentences
    segmenter.observe(final("two"), 1.0)
    segmenter.on_stream_end()
    assert snapshot == ("One.",)


def test_clear(segmenter):
    segmenter.observe(final("one"), 0.0)
    segmenter.on_stream_end()
    segmenter.observe(final("two"), 1.0)
    segmenter.clear()
    assert segmenter.transcript() == ()
    assert segmenter.state is SegmenterState.IDLE


def test_normalize_words():
    assert normalize_words("Hello, doctor! I'm OK.") == ["hello", "doctor", "i'm", "ok"]
