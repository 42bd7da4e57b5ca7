import pytest

from speech_pipeline.errors import EmptyInputError
from speech_pipeline.synthesizer import SpeechSynthesizer, SynthesisOptions
from speech_pipeline.tts_engine import MockTtsEngine, PlaceholderToneEngine
from speech_pipeline.voices import load_default_catalog

LONG_TEXT = "word " * 120
LONG_HINDI = "नमस्ते " * 100


def _synthesizer(primary_fail=False, secondary_fail=False, placeholder=None):
    primary = MockTtsEngine(provider_name="google", fail=primary_fail)
    secondary = MockTtsEngine(provider_name="voicerss", supported_languages=("en",), fail=secondary_fail)
    synthesizer = SpeechSynthesizer(
        primary,
        secondary,
        catalog=load_default_catalog(),
        placeholder=placeholder or PlaceholderToneEngine(sample_rate=8000),
    )
    return synthesizer, primary, secondary


def test_short_text_uses_primary_first():
    synthesizer, primary, secondary = _synthesizer()

    result = synthesizer.generate_audio("Hello", SynthesisOptions())

    assert result.provider == "google"
    assert result.voice == "Google Female"
    assert len(primary.calls) == 1
    assert secondary.calls == []


def test_short_text_falls_back_to_secondary():
    synthesizer, primary, secondary = _synthesizer(primary_fail=True)

    result = synthesizer.generate_audio("Hello")

    assert result.provider == "voicerss"
    assert len(primary.calls) == 1
    assert len(secondary.calls) == 1


def test_long_hindi_text_only_uses_primary():
    synthesizer, primary, secondary = _synthesizer(primary_fail=True)

    result = synthesizer.generate_audio(LONG_HINDI, SynthesisOptions(voice="Heera"))

    assert result.provider == "fallback"
    assert result.language == "hi"
    assert len(primary.calls) == 1
    assert secondary.calls == []


def test_long_text_with_secondary_voice_prefers_secondary():
    synthesizer, primary, secondary = _synthesizer()

    result = synthesizer.generate_audio(LONG_TEXT, SynthesisOptions(voice="Linda", language="en"))

    assert result.provider == "voicerss"
    assert primary.calls == []


def test_long_text_with_secondary_voice_falls_back_to_primary():
    synthesizer, primary, secondary = _synthesizer(secondary_fail=True)

    result = synthesizer.generate_audio(LONG_TEXT, SynthesisOptions(voice="Mike"))

    assert result.provider == "google"
    assert result.voice == "Mike (Male)"
    assert len(secondary.calls) == 1


def test_long_text_with_primary_voice_skips_secondary():
    synthesizer, primary, secondary = _synthesizer(primary_fail=True)

    result = synthesizer.generate_audio(LONG_TEXT, SynthesisOptions(voice="google-male"))

    assert result.provider == "fallback"
    assert secondary.calls == []


def test_provider_chain_order():
    synthesizer, primary, secondary = _synthesizer()
    catalog = load_default_catalog()
    linda = catalog.get("Linda")
    female = catalog.get("google-female")

    assert synthesizer.provider_chain("short", "en", linda) == [primary, secondary, synthesizer.placeholder]
    assert synthesizer.provider_chain(LONG_TEXT, "en", linda) == [secondary, primary, synthesizer.placeholder]
    assert synthesizer.provider_chain(LONG_TEXT, "en", female) == [primary, synthesizer.placeholder]
    assert synthesizer.provider_chain(LONG_HINDI, "hi", linda) == [primary, synthesizer.placeholder]


def test_all_engines_failing_yields_placeholder_tone():
    synthesizer, _, _ = _synthesizer(primary_fail=True, secondary_fail=True)

    first = synthesizer.generate_audio("Repeatable input")
    second = synthesizer.generate_audio("Repeatable input")

    assert first.provider == "fallback"
    assert first.success
    assert first.audio == second.audio


def test_placeholder_failure_yields_text_echo():
    placeholder = MockTtsEngine(provider_name="fallback", fail=True)
    synthesizer, _, _ = _synthesizer(primary_fail=True, secondary_fail=True, placeholder=placeholder)

    result = synthesizer.generate_audio("Nothing works")

    assert result.provider == "ultimate"
    assert result.service == "Text Fallback"
    assert result.audio == b"Audio for: Nothing works"


def test_empty_text_is_rejected():
    synthesizer, primary, _ = _synthesizer()

    with pytest.raises(EmptyInputError):
        synthesizer.generate_audio("   ")
    assert primary.calls == []
