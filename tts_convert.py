#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Sequence

from speech_pipeline.errors import InputError, PipelineError
from speech_pipeline.inputs import read_text_input
from speech_pipeline.metadata import MetadataBuilder
from speech_pipeline.pipeline import ChunkPipeline, PipelineConfig
from speech_pipeline.storage import ArtifactStore
from speech_pipeline.synthesizer import SHORT_TEXT_MAX_CHARS, SpeechSynthesizer, SynthesisOptions
from speech_pipeline.tts_engine import (
    GoogleTranslateTtsEngine,
    PlaceholderToneEngine,
    VoiceRssTtsEngine,
    guess_audio_extension,
)
from speech_pipeline.voices import SUPPORTED_LANGUAGES, VoiceCatalog, group_voices, load_default_catalog

logger = logging.getLogger(__name__)

DEFAULT_TEST_TEXT = "This is a test to verify voice tones work properly."


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert text of any length into a single audio file.")
    parser.add_argument(
        "--output-dir",
        default=os.environ.get("TTS_OUTPUT_DIR", "./outputs"),
        help="Directory for generated audio files.",
    )
    parser.add_argument(
        "--temp-dir",
        default=os.environ.get("TTS_TEMP_DIR", "./temp"),
        help="Directory for per-chunk scratch files.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Synthesize text or a .txt file.")
    source = convert.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Text to synthesize.")
    source.add_argument("--input", help="Plain text file to synthesize.")
    convert.add_argument("--input-encoding", default="utf-8", help="Encoding used for input file.")
    convert.add_argument("--metadata-output", help="Optional path for the result JSON.")
    _add_synthesis_arguments(convert)
    convert.add_argument("--chunk-size", type=int, default=PipelineConfig.chunk_max_chars, help="Maximum characters per chunk.")
    convert.add_argument(
        "--chunk-delay",
        type=float,
        default=PipelineConfig.chunk_delay_sec,
        help="Pause in seconds between chunk requests.",
    )

    test = subparsers.add_parser("test", help="Synthesize a short sample without chunking.")
    test.add_argument("--text", default=DEFAULT_TEST_TEXT, help="Sample text.")
    _add_synthesis_arguments(test)

    subparsers.add_parser("voices", help="List available voices.")
    subparsers.add_parser("files", help="List generated audio files.")
    subparsers.add_parser("health", help="Show output directory usage.")

    delete = subparsers.add_parser("delete", help="Delete a generated audio file.")
    delete.add_argument("name", help="File name as shown by the files command.")
    return parser.parse_args(argv)


def _add_synthesis_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--voice", default="auto", help="Voice identifier or 'auto'.")
    parser.add_argument("--language", default="auto", choices=SUPPORTED_LANGUAGES, help="Language of the text.")
    parser.add_argument(
        "--voicerss-key",
        default=os.environ.get("VOICERSS_API_KEY"),
        help="VoiceRSS API key (defaults to VOICERSS_API_KEY env var).",
    )
    parser.add_argument("--timeout", type=float, default=20.0, help="Per-request provider timeout in seconds.")
    parser.add_argument(
        "--short-text-chars",
        type=int,
        default=SHORT_TEXT_MAX_CHARS,
        help="Texts up to this length try every online provider.",
    )


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def create_synthesizer(args: argparse.Namespace, catalog: VoiceCatalog) -> SpeechSynthesizer:
    if not args.voicerss_key:
        logger.warning("No VoiceRSS API key configured; the secondary provider will be skipped.")
    return SpeechSynthesizer(
        GoogleTranslateTtsEngine(timeout=args.timeout),
        VoiceRssTtsEngine(api_key=args.voicerss_key, timeout=args.timeout),
        catalog=catalog,
        placeholder=PlaceholderToneEngine(),
        short_text_max_chars=args.short_text_chars,
    )


def emit(payload: Dict[str, object]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def run_convert(args: argparse.Namespace, store: ArtifactStore, catalog: VoiceCatalog) -> int:
    metadata_builder = MetadataBuilder(
        output_path=Path(args.metadata_output) if args.metadata_output else None
    )
    try:
        text = read_text_input(
            args.text,
            upload_path=Path(args.input) if args.input else None,
            encoding=args.input_encoding,
        )
    except (InputError, FileNotFoundError) as exc:
        emit(metadata_builder.build_error(exc, error="Invalid input"))
        return 1
    if args.chunk_size <= 0:
        emit(metadata_builder.build_error(ValueError("--chunk-size must be positive."), error="Invalid input"))
        return 1

    synthesizer = create_synthesizer(args, catalog)
    pipeline = ChunkPipeline(
        synthesizer,
        store,
        PipelineConfig(chunk_max_chars=args.chunk_size, chunk_delay_sec=args.chunk_delay),
    )
    options = SynthesisOptions(voice=args.voice, language=args.language)
    try:
        result = pipeline.process(text, options)
    except (InputError, PipelineError) as exc:
        logger.error("Processing error: %s", exc)
        emit(metadata_builder.build_error(exc))
        return 1
    finally:
        synthesizer.close()

    metadata = metadata_builder.build_metadata(result)
    if metadata_builder.output_path is not None:
        metadata_builder.write_metadata(metadata)
        logger.info("Metadata written to %s", metadata_builder.output_path)
    emit(metadata)
    logger.info("Synthesis complete. Final audio saved to %s", result.output_path)
    return 0


def run_test(args: argparse.Namespace, store: ArtifactStore, catalog: VoiceCatalog) -> int:
    synthesizer = create_synthesizer(args, catalog)
    try:
        result = synthesizer.generate_audio(args.text, SynthesisOptions(voice=args.voice, language=args.language))
    except InputError as exc:
        emit(MetadataBuilder().build_error(exc, error="Test audio generation failed"))
        return 1
    finally:
        synthesizer.close()

    output_path = store.new_output_path("test", guess_audio_extension(result.audio))
    output_path.write_bytes(result.audio)
    emit(
        {
            "success": True,
            "message": "Test audio created successfully!",
            "file": str(output_path),
            "fileSize": result.size,
            "testText": args.text,
            "voiceUsed": result.voice,
            "service": result.service,
            "provider": result.provider,
            "language": result.language,
        }
    )
    return 0


def run_delete(args: argparse.Namespace, store: ArtifactStore) -> int:
    try:
        store.delete_output(args.name)
    except InputError as exc:
        emit(MetadataBuilder().build_error(exc, error="Invalid filename"))
        return 1
    except FileNotFoundError as exc:
        emit({"success": False, "error": "File not found", "message": str(exc)})
        return 1
    emit({"success": True, "message": "File deleted successfully"})
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.debug)

    catalog = load_default_catalog()
    store = ArtifactStore(Path(args.output_dir), Path(args.temp_dir))

    if args.command == "convert":
        return run_convert(args, store, catalog)
    if args.command == "test":
        return run_test(args, store, catalog)
    if args.command == "delete":
        return run_delete(args, store)
    if args.command == "voices":
        emit({"success": True, "voices": group_voices(catalog), "totalVoices": len(catalog)})
        return 0
    if args.command == "files":
        files = [f.to_dict() for f in store.list_outputs()]
        emit({"success": True, "files": files, "totalFiles": len(files)})
        return 0
    if args.command == "health":
        emit({"status": "OK", "outputs": store.usage()})
        return 0
    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.error("Interrupted by user.")
        sys.exit(1)
    except Exception as exc:
        logger.exception("Fatal error: %s", exc)
        sys.exit(1)
