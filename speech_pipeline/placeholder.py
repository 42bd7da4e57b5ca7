from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from typing import Iterator

from pydub import AudioSegment
from pydub.generators import SignalGenerator
from pydub.utils import ratio_to_db

from .voices import VoiceDescriptor

logger = logging.getLogger(__name__)

__all__ = ["ToneProfile", "VoiceToneGenerator", "tone_profile_for", "render_placeholder_tone"]

PLACEHOLDER_SAMPLE_RATE = 22050
PLACEHOLDER_AMPLITUDE = 0.15
MIN_TONE_SECONDS = 2.0
MAX_TONE_SECONDS = 8.0
CHARS_PER_SECOND = 30
CHECKSUM_CHARS = 50
CHECKSUM_SPREAD_HZ = 150


@dataclass(frozen=True)
class ToneProfile:
    base_freq: float
    modulation: float
    waveform: str


def tone_profile_for(voice: VoiceDescriptor) -> ToneProfile:
    if "Linda" in voice.name or voice.gender == "female":
        return ToneProfile(440.0, 120.0, "sine")
    if "Mike" in voice.name or voice.gender == "male":
        return ToneProfile(180.0, 80.0, "sawtooth")
    if voice.language == "hi":
        return ToneProfile(350.0, 100.0, "triangle")
    return ToneProfile(300.0, 70.0, "sine")


class VoiceToneGenerator(SignalGenerator):
    """
    Frequency-wobbling tone with a short linear fade at both ends.

    Samples are produced in [-1, 1]; amplitude is applied through the volume
    argument of ``to_audio_segment``.
    """

    def __init__(
        self,
        base_freq: float,
        modulation: float,
        waveform: str,
        duration_sec: float,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if waveform not in {"sine", "sawtooth", "triangle"}:
            raise ValueError(f"Unsupported waveform: {waveform}")
        self.base_freq = base_freq
        self.modulation = modulation
        self.waveform = waveform
        self.duration_sec = duration_sec

    def generate(self) -> Iterator[float]:
        sample_n = 0
        while True:
            t = sample_n / self.sample_rate
            freq = self.base_freq + math.sin(t * 2) * self.modulation
            envelope = min(1.0, t * 2) * min(1.0, (self.duration_sec - t) * 2)
            yield self._wave(freq, t) * max(0.0, envelope)
            sample_n += 1

    def _wave(self, freq: float, t: float) -> float:
        if self.waveform == "sawtooth":
            return 2 * ((t * freq) % 1) - 1
        if self.waveform == "triangle":
            return 2 * abs(2 * ((t * freq) % 1) - 1) - 1
        return math.sin(2 * math.pi * freq * t)


def placeholder_duration(text: str) -> float:
    return max(MIN_TONE_SECONDS, min(len(text) / CHARS_PER_SECOND, MAX_TONE_SECONDS))


def text_checksum(text: str) -> int:
    return sum(ord(ch) for ch in text[:CHECKSUM_CHARS])


def render_placeholder_tone(
    text: str,
    voice: VoiceDescriptor,
    *,
    sample_rate: int = PLACEHOLDER_SAMPLE_RATE,
) -> bytes:
    """
    Render a deterministic 16-bit mono WAV tone standing in for speech.

    Pitch and waveform come from the voice, duration from the text length, and a
    checksum of the first characters shifts the base frequency so different texts
    sound different while identical input always yields identical bytes.
    """
    profile = tone_profile_for(voice)
    duration_sec = placeholder_duration(text)
    generator = VoiceToneGenerator(
        profile.base_freq + text_checksum(text) % CHECKSUM_SPREAD_HZ,
        profile.modulation,
        profile.waveform,
        duration_sec,
        sample_rate=sample_rate,
        bit_depth=16,
    )
    segment: AudioSegment = generator.to_audio_segment(
        duration=duration_sec * 1000.0,
        volume=ratio_to_db(PLACEHOLDER_AMPLITUDE),
    )
    logger.debug(
        "Rendered %s placeholder tone: %.2fs at %.1f Hz for voice %s.",
        profile.waveform,
        duration_sec,
        generator.base_freq,
        voice.id,
    )
    buffer = io.BytesIO()
    segment.export(buffer, format="wav")
    return buffer.getvalue()
