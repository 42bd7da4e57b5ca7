import io
import wave

from speech_pipeline.placeholder import render_placeholder_tone, tone_profile_for
from speech_pipeline.tts_engine import PlaceholderToneEngine
from speech_pipeline.voices import VoiceDescriptor, load_default_catalog

CATALOG = load_default_catalog()


def test_tone_profile_follows_voice():
    assert tone_profile_for(CATALOG.get("google-female")).waveform == "sine"
    assert tone_profile_for(CATALOG.get("Mike")).waveform == "sawtooth"
    neutral_hindi = VoiceDescriptor("x", "Narrator", "hi", "neutral", "google")
    assert tone_profile_for(neutral_hindi).waveform == "triangle"
    neutral = VoiceDescriptor("y", "Narrator", "en", "neutral", "google")
    assert tone_profile_for(neutral).base_freq == 300.0


def test_placeholder_is_deterministic():
    voice = CATALOG.get("google-male")

    first = render_placeholder_tone("Same input text", voice, sample_rate=8000)
    second = render_placeholder_tone("Same input text", voice, sample_rate=8000)

    assert first == second


def test_placeholder_varies_with_text_and_voice():
    female = CATALOG.get("google-female")
    male = CATALOG.get("google-male")

    base = render_placeholder_tone("Some text", female, sample_rate=8000)

    assert base != render_placeholder_tone("Other text", female, sample_rate=8000)
    assert base != render_placeholder_tone("Some text", male, sample_rate=8000)


def test_placeholder_is_a_short_mono_wav():
    data = render_placeholder_tone("Hi", CATALOG.get("google-female"))

    with wave.open(io.BytesIO(data)) as wav:
        assert wav.getframerate() == 22050
        assert wav.getnchannels() == 1
        assert wav.getsampwidth() == 2
        # Two seconds is the minimum duration.
        assert wav.getnframes() == 44100
    assert len(data) == 44 + 44100 * 2


def test_placeholder_duration_is_capped():
    data = render_placeholder_tone("word " * 200, CATALOG.get("google-female"), sample_rate=8000)

    with wave.open(io.BytesIO(data)) as wav:
        assert wav.getnframes() == 8 * 8000


def test_placeholder_engine_reports_fallback_provider():
    engine = PlaceholderToneEngine(sample_rate=8000)

    result = engine.synthesize("x" * 900, "en", CATALOG.get("Linda"))

    assert result is not None
    assert result.provider == "fallback"
    assert result.audio[:4] == b"RIFF"
