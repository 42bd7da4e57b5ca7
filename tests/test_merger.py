from speech_pipeline.merger import concatenate_audio_files


def _write_chunks(chunk_dir, payloads):
    chunk_dir.mkdir(exist_ok=True)
    paths = []
    for index, payload in enumerate(payloads):
        path = chunk_dir / f"chunk_{index}.mp3"
        path.write_bytes(payload)
        paths.append(path)
    return paths


def test_single_chunk_is_copied_verbatim(tmp_path):
    # Even an undersized single chunk is copied without validation.
    paths = _write_chunks(tmp_path / "chunks", [b"tiny"])
    output_path = tmp_path / "out" / "merged.mp3"

    assert concatenate_audio_files(paths, output_path)
    assert output_path.read_bytes() == b"tiny"


def test_multiple_chunks_are_joined_in_order(tmp_path):
    payloads = [b"a" * 1500, b"b" * 2000, b"c" * 1200]
    paths = _write_chunks(tmp_path / "chunks", payloads)
    output_path = tmp_path / "merged.mp3"

    assert concatenate_audio_files(paths, output_path)
    assert output_path.read_bytes() == b"".join(payloads)


def test_undersized_chunks_are_excluded(tmp_path):
    payloads = [b"a" * 1500, b"b" * 1000, b"c" * 1200]
    paths = _write_chunks(tmp_path / "chunks", payloads)
    output_path = tmp_path / "merged.mp3"

    assert concatenate_audio_files(paths, output_path)
    assert output_path.read_bytes() == b"a" * 1500 + b"c" * 1200


def test_no_valid_chunks_reports_failure(tmp_path):
    paths = _write_chunks(tmp_path / "chunks", [b"a" * 10, b"b" * 20])
    output_path = tmp_path / "merged.mp3"

    assert not concatenate_audio_files(paths, output_path)
    assert not output_path.exists()


def test_unreadable_chunk_falls_back_to_first_valid_file(tmp_path):
    paths = _write_chunks(tmp_path / "chunks", [b"a" * 10, b"b" * 1500, b"c" * 1500])
    paths.insert(1, tmp_path / "chunks" / "missing.mp3")
    output_path = tmp_path / "merged.mp3"

    assert concatenate_audio_files(paths, output_path)
    assert output_path.read_bytes() == b"b" * 1500


def test_empty_input_reports_failure(tmp_path):
    assert not concatenate_audio_files([], tmp_path / "merged.mp3")


def test_custom_threshold(tmp_path):
    paths = _write_chunks(tmp_path / "chunks", [b"a" * 50, b"b" * 150])
    output_path = tmp_path / "merged.mp3"

    assert concatenate_audio_files(paths, output_path, min_bytes=100)
    assert output_path.read_bytes() == b"b" * 150
