from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

import httpx

from .placeholder import render_placeholder_tone
from .voices import VoiceDescriptor

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_AUDIO_BYTES",
    "SynthesisResult",
    "TtsEngine",
    "GoogleTranslateTtsEngine",
    "VoiceRssTtsEngine",
    "PlaceholderToneEngine",
    "MockTtsEngine",
    "text_echo_result",
    "guess_audio_extension",
]

# Payloads of this size or smaller are treated as error bodies, not audio.
MIN_AUDIO_BYTES = 1000
DEFAULT_MAX_CHARS = 200
DEFAULT_TIMEOUT_SEC = 20.0

GOOGLE_TTS_URL = "https://translate.google.com/translate_tts"
VOICERSS_URL = "https://api.voicerss.org/"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass(frozen=True)
class SynthesisResult:
    audio: bytes
    voice: str
    language: str
    service: str
    provider: str
    success: bool = True

    @property
    def size(self) -> int:
        return len(self.audio)


class TtsEngine(ABC):
    """
    One synthesis backend in the provider chain.

    ``synthesize`` never raises: any failure inside the backend is logged and
    reported as ``None`` so the caller can move on to the next engine.
    """

    provider_name: str = "engine"
    service_label: str = "TTS Engine"
    supported_languages: FrozenSet[str] = frozenset({"en", "hi"})

    def __init__(
        self,
        *,
        max_chars: Optional[int] = DEFAULT_MAX_CHARS,
        min_audio_bytes: int = MIN_AUDIO_BYTES,
    ) -> None:
        self.max_chars = max_chars
        self.min_audio_bytes = min_audio_bytes

    def descriptor(self) -> str:
        return self.__class__.__name__

    def supports(self, language: str) -> bool:
        return language in self.supported_languages

    def synthesize(self, text: str, language: str, voice: VoiceDescriptor) -> Optional[SynthesisResult]:
        if not self.supports(language):
            logger.debug("%s does not support language %r, skipping.", self.descriptor(), language)
            return None

        payload = self._clip(text)
        try:
            audio = self._synthesize_bytes(payload, language, voice)
        except Exception as exc:
            logger.warning("%s failed: %s", self.descriptor(), exc)
            return None

        if not audio or len(audio) <= self.min_audio_bytes:
            logger.warning(
                "%s failed: audio too short (%d bytes).",
                self.descriptor(),
                len(audio or b""),
            )
            return None

        logger.debug("%s produced %d bytes for %d characters.", self.descriptor(), len(audio), len(payload))
        return SynthesisResult(
            audio=audio,
            voice=voice.name,
            language=language,
            service=self.service_label,
            provider=self.provider_name,
        )

    def close(self) -> None:
        pass

    def _clip(self, text: str) -> str:
        if self.max_chars and len(text) > self.max_chars:
            logger.debug("%s truncating %d characters to %d.", self.descriptor(), len(text), self.max_chars)
            return text[: self.max_chars]
        return text

    @abstractmethod
    def _synthesize_bytes(self, text: str, language: str, voice: VoiceDescriptor) -> bytes:
        """
        Return raw audio bytes for ``text`` or raise on any backend failure.
        """


class _HttpTtsEngine(TtsEngine):
    def __init__(
        self,
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._timeout = timeout

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class GoogleTranslateTtsEngine(_HttpTtsEngine):
    """
    Primary engine backed by the public Google Translate speech endpoint.
    """

    provider_name = "google"
    service_label = "Google TTS"
    supported_languages = frozenset({"en", "hi"})

    def __init__(self, *, endpoint: str = GOOGLE_TTS_URL, **kwargs) -> None:
        super().__init__(**kwargs)
        self._endpoint = endpoint

    def _synthesize_bytes(self, text: str, language: str, voice: VoiceDescriptor) -> bytes:
        params = {
            "ie": "UTF-8",
            "q": text,
            "tl": "hi" if language == "hi" else "en",
            "client": "tw-ob",
        }
        response = self._client.get(
            self._endpoint,
            params=params,
            headers={"User-Agent": BROWSER_USER_AGENT},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.content


class VoiceRssTtsEngine(_HttpTtsEngine):
    """
    Secondary engine backed by the VoiceRSS HTTP API. English only.
    """

    provider_name = "voicerss"
    service_label = "VoiceRSS"
    supported_languages = frozenset({"en"})
    voice_map: Dict[str, str] = {"Linda": "Linda", "Mike": "Mike"}
    default_voice = "Linda"

    def __init__(self, *, api_key: Optional[str], endpoint: str = VOICERSS_URL, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._endpoint = endpoint

    def _synthesize_bytes(self, text: str, language: str, voice: VoiceDescriptor) -> bytes:
        if not self._api_key:
            raise RuntimeError("VoiceRSS API key is not configured.")

        form = {
            "key": self._api_key,
            "src": text,
            "hl": "en-us",
            "v": self.voice_map.get(voice.id, self.default_voice),
            "c": "MP3",
            "f": "44khz_16bit_stereo",
            "r": "0",
        }
        response = self._client.post(self._endpoint, data=form, timeout=self._timeout)
        response.raise_for_status()
        # VoiceRSS reports errors as a 200 response with a plain text body.
        if response.content.startswith(b"ERROR"):
            raise RuntimeError(response.text.strip())
        return response.content


class PlaceholderToneEngine(TtsEngine):
    """
    Local last-resort engine rendering a voice-specific tone instead of speech.
    """

    provider_name = "fallback"
    service_label = "Voice-Specific Fallback"

    def __init__(self, *, sample_rate: int = 22050, **kwargs) -> None:
        kwargs.setdefault("max_chars", None)
        super().__init__(**kwargs)
        self.sample_rate = sample_rate

    def supports(self, language: str) -> bool:
        return True

    def _synthesize_bytes(self, text: str, language: str, voice: VoiceDescriptor) -> bytes:
        return render_placeholder_tone(text, voice, sample_rate=self.sample_rate)


class MockTtsEngine(TtsEngine):
    """
    Lightweight in-process engine for tests. Produces predictable payloads and
    records every call it receives.
    """

    def __init__(
        self,
        payloads: Optional[Dict[str, bytes]] = None,
        *,
        provider_name: str = "mock",
        service_label: str = "Mock TTS",
        supported_languages: Tuple[str, ...] = ("en", "hi"),
        fail: bool = False,
        payload_size: int = 2048,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.provider_name = provider_name
        self.service_label = service_label
        self.supported_languages = frozenset(supported_languages)
        self.fail = fail
        self.calls: List[Tuple[str, str, str]] = []
        self._payloads = payloads or {}
        self._payload_size = payload_size

    def _synthesize_bytes(self, text: str, language: str, voice: VoiceDescriptor) -> bytes:
        self.calls.append((text, language, voice.id))
        if self.fail:
            raise RuntimeError(f"{self.provider_name} is unavailable")
        if text in self._payloads:
            return self._payloads[text]
        return b"ID3" + text.encode("utf-8").ljust(self._payload_size, b"\0")


def text_echo_result(text: str, language: str, voice: VoiceDescriptor) -> SynthesisResult:
    """Last-ditch result used when even the placeholder tone could not be rendered."""
    return SynthesisResult(
        audio=f"Audio for: {text[:100]}".encode("utf-8"),
        voice=voice.name,
        language=language,
        service="Text Fallback",
        provider="ultimate",
    )


def guess_audio_extension(audio: bytes) -> str:
    if audio[:4] == b"RIFF" and audio[8:12] == b"WAVE":
        return "wav"
    return "mp3"
