from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import EmptyInputError
from .tts_engine import PlaceholderToneEngine, SynthesisResult, TtsEngine, text_echo_result
from .voices import AUTO, VoiceCatalog, VoiceDescriptor, resolve_language, resolve_voice

logger = logging.getLogger(__name__)

__all__ = ["SynthesisOptions", "SpeechSynthesizer", "SHORT_TEXT_MAX_CHARS"]

SHORT_TEXT_MAX_CHARS = 500


@dataclass(frozen=True)
class SynthesisOptions:
    voice: str = AUTO
    language: str = AUTO


class SpeechSynthesizer:
    """
    Picks an engine order for a piece of text and returns the first result.

    The chain always ends with the local placeholder engine, and a text echo is
    returned if even that fails, so ``generate_audio`` never comes back empty.
    """

    def __init__(
        self,
        primary: TtsEngine,
        secondary: TtsEngine,
        *,
        catalog: VoiceCatalog,
        placeholder: Optional[TtsEngine] = None,
        short_text_max_chars: int = SHORT_TEXT_MAX_CHARS,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.placeholder = placeholder or PlaceholderToneEngine()
        self.catalog = catalog
        self.short_text_max_chars = short_text_max_chars

    def generate_audio(self, text: str, options: Optional[SynthesisOptions] = None) -> SynthesisResult:
        if not text or not text.strip():
            raise EmptyInputError("No text provided for audio generation")

        options = options or SynthesisOptions()
        language = resolve_language(text, options.language)
        voice = resolve_voice(options.voice, language, self.catalog)
        logger.debug("Resolved voice %s (%s) for language %s.", voice.id, voice.provider, language)

        for engine in self.provider_chain(text, language, voice):
            result = engine.synthesize(text, language, voice)
            if result is not None:
                logger.info("Synthesized %d characters with %s.", len(text), result.service)
                return result

        logger.error("All engines failed including placeholder; returning text echo.")
        return text_echo_result(text, language, voice)

    def provider_chain(self, text: str, language: str, voice: VoiceDescriptor) -> List[TtsEngine]:
        if len(text) <= self.short_text_max_chars:
            chain = [self.primary, self.secondary]
        elif language == "hi":
            chain = [self.primary]
        elif voice.provider == self.secondary.provider_name:
            chain = [self.secondary, self.primary]
        else:
            chain = [self.primary]
        chain.append(self.placeholder)
        return chain

    def close(self) -> None:
        for engine in (self.primary, self.secondary, self.placeholder):
            engine.close()
