from urllib.parse import parse_qs

import httpx

from speech_pipeline.tts_engine import (
    GoogleTranslateTtsEngine,
    MockTtsEngine,
    VoiceRssTtsEngine,
    guess_audio_extension,
    text_echo_result,
)
from speech_pipeline.voices import load_default_catalog

CATALOG = load_default_catalog()
FEMALE = CATALOG.get("google-female")
MIKE = CATALOG.get("Mike")
HINDI = CATALOG.get("google-hindi-female")

AUDIO = b"ID3" + b"\x01" * 4000


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_google_engine_returns_result_and_truncates_text():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=AUDIO)

    engine = GoogleTranslateTtsEngine(client=_client(handler))
    result = engine.synthesize("a" * 250, "hi", HINDI)

    assert result is not None
    assert result.audio == AUDIO
    assert result.provider == "google"
    assert result.service == "Google TTS"
    assert result.voice == "Google Hindi Female"
    assert result.language == "hi"
    assert seen[0].url.params["tl"] == "hi"
    assert seen[0].url.params["q"] == "a" * 200
    assert "Mozilla" in seen[0].headers["user-agent"]


def test_google_engine_rejects_tiny_payload():
    engine = GoogleTranslateTtsEngine(client=_client(lambda request: httpx.Response(200, content=b"x" * 1000)))

    assert engine.synthesize("Hello", "en", FEMALE) is None


def test_google_engine_swallows_http_errors():
    engine = GoogleTranslateTtsEngine(client=_client(lambda request: httpx.Response(503)))

    assert engine.synthesize("Hello", "en", FEMALE) is None


def test_google_engine_swallows_timeouts():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    engine = GoogleTranslateTtsEngine(client=_client(handler))

    assert engine.synthesize("Hello", "en", FEMALE) is None


def test_voicerss_refuses_hindi_without_network_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=AUDIO)

    engine = VoiceRssTtsEngine(api_key="key", client=_client(handler))

    assert engine.synthesize("नमस्ते", "hi", HINDI) is None
    assert calls == []


def test_voicerss_posts_form_with_mapped_voice():
    seen = []

    def handler(request):
        seen.append(parse_qs(request.content.decode("utf-8")))
        return httpx.Response(200, content=AUDIO)

    engine = VoiceRssTtsEngine(api_key="secret", client=_client(handler))
    result = engine.synthesize("Hello there", "en", MIKE)

    assert result is not None
    assert result.provider == "voicerss"
    assert seen[0]["v"] == ["Mike"]
    assert seen[0]["key"] == ["secret"]
    assert seen[0]["src"] == ["Hello there"]


def test_voicerss_defaults_to_linda_for_other_voices():
    seen = []

    def handler(request):
        seen.append(parse_qs(request.content.decode("utf-8")))
        return httpx.Response(200, content=AUDIO)

    engine = VoiceRssTtsEngine(api_key="secret", client=_client(handler))
    engine.synthesize("Hello", "en", FEMALE)

    assert seen[0]["v"] == ["Linda"]


def test_voicerss_error_body_is_failure():
    body = b"ERROR: The API key is not available!" + b" " * 2000
    engine = VoiceRssTtsEngine(api_key="secret", client=_client(lambda request: httpx.Response(200, content=body)))

    assert engine.synthesize("Hello", "en", FEMALE) is None


def test_voicerss_without_key_fails_quietly():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=AUDIO)

    engine = VoiceRssTtsEngine(api_key=None, client=_client(handler))

    assert engine.synthesize("Hello", "en", FEMALE) is None
    assert calls == []


def test_mock_engine_records_calls_and_can_fail():
    engine = MockTtsEngine()
    failing = MockTtsEngine(fail=True)

    assert engine.synthesize("Hi", "en", FEMALE) is not None
    assert failing.synthesize("Hi", "en", FEMALE) is None
    assert engine.calls == [("Hi", "en", "google-female")]
    assert failing.calls == [("Hi", "en", "google-female")]


def test_text_echo_result_is_always_populated():
    result = text_echo_result("x" * 300, "en", FEMALE)

    assert result.success
    assert result.provider == "ultimate"
    assert result.audio == ("Audio for: " + "x" * 100).encode("utf-8")


def test_guess_audio_extension():
    assert guess_audio_extension(b"RIFF\x00\x00\x00\x00WAVEfmt ") == "wav"
    assert guess_audio_extension(AUDIO) == "mp3"
