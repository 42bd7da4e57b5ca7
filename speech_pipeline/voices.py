from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    "AUTO",
    "SUPPORTED_LANGUAGES",
    "VoiceDescriptor",
    "VoiceCatalog",
    "load_default_catalog",
    "detect_language",
    "resolve_language",
    "resolve_voice",
    "group_voices",
]

AUTO = "auto"
SUPPORTED_LANGUAGES = ("auto", "en", "hi")
DEVANAGARI_PATTERN = re.compile(r"[\u0900-\u097F]")

# Preferred "auto" voice per language.
CANONICAL_VOICES = {
    "en": "google-female",
    "hi": "google-hindi-female",
}


@dataclass(frozen=True)
class VoiceDescriptor:
    id: str
    name: str
    language: str
    gender: str
    provider: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class VoiceCatalog:
    """
    Read-only, ordered collection of voices.

    Built once at startup and handed to the resolver and synthesizer explicitly.
    """

    def __init__(self, voices: Iterable[VoiceDescriptor]) -> None:
        self._voices: Tuple[VoiceDescriptor, ...] = tuple(voices)
        if not self._voices:
            raise ValueError("Voice catalog must contain at least one voice.")
        self._by_id = {voice.id: voice for voice in self._voices}

    def __iter__(self) -> Iterator[VoiceDescriptor]:
        return iter(self._voices)

    def __len__(self) -> int:
        return len(self._voices)

    def get(self, voice_id: str) -> Optional[VoiceDescriptor]:
        return self._by_id.get(voice_id)

    def first(self, language: Optional[str] = None) -> Optional[VoiceDescriptor]:
        if language is None:
            return self._voices[0]
        return next((voice for voice in self._voices if voice.language == language), None)

    def for_language(self, language: str) -> List[VoiceDescriptor]:
        return [voice for voice in self._voices if voice.language == language]


def load_default_catalog() -> VoiceCatalog:
    return VoiceCatalog(
        [
            VoiceDescriptor("google-female", "Google Female", "en", "female", "google"),
            VoiceDescriptor("google-male", "Google Male", "en", "male", "google"),
            VoiceDescriptor("google-hindi-female", "Google Hindi Female", "hi", "female", "google"),
            VoiceDescriptor("google-hindi-male", "Google Hindi Male", "hi", "male", "google"),
            VoiceDescriptor("Linda", "Linda (Female)", "en", "female", "voicerss"),
            VoiceDescriptor("Mike", "Mike (Male)", "en", "male", "voicerss"),
            VoiceDescriptor("Heera", "Heera (Hindi Female)", "hi", "female", "voicerss"),
            VoiceDescriptor("Priya", "Priya (Hindi Female)", "hi", "female", "voicerss"),
            VoiceDescriptor(AUTO, "Auto Select (Recommended)", AUTO, AUTO, AUTO),
        ]
    )


def detect_language(text: str) -> str:
    """Return ``hi`` when the text contains any Devanagari character, else ``en``."""
    return "hi" if DEVANAGARI_PATTERN.search(text or "") else "en"


def resolve_language(text: str, requested: Optional[str]) -> str:
    if not requested or requested == AUTO:
        return detect_language(text)
    return requested


def resolve_voice(voice_id: Optional[str], language: str, catalog: VoiceCatalog) -> VoiceDescriptor:
    """
    Map a requested voice to a concrete catalog entry.

    ``auto`` picks the canonical voice for ``language``, then any voice of that
    language, then the first catalog entry. Unknown ids fall back to the ``auto``
    rules instead of raising.
    """
    if voice_id and voice_id != AUTO:
        voice = catalog.get(voice_id)
        if voice is not None:
            return voice
        logger.debug("Voice %r not in catalog, falling back to auto selection.", voice_id)

    canonical_id = CANONICAL_VOICES.get(language)
    voice = catalog.get(canonical_id) if canonical_id else None
    return voice or catalog.first(language) or catalog.first()


def group_voices(catalog: VoiceCatalog) -> Dict[str, List[Dict[str, str]]]:
    return {
        "english": [voice.to_dict() for voice in catalog.for_language("en")],
        "hindi": [voice.to_dict() for voice in catalog.for_language("hi")],
        "special": [voice.to_dict() for voice in catalog if voice.id == AUTO],
    }
