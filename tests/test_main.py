import sys
from array import array

import pytest

from local_whisper.coordinator import ModelCoordinator
from local_whisper.main import read_samples, run
from local_whisper.models import ModelState
from local_whisper.request_handler import TranscriptionRequestHandler
from local_whisper.status import StatusDisplay


def write_samples(path, values) -> None:
    samples = array("f", values)
    if sys.byteorder == "big":
        samples.byteswap()
    path.write_bytes(samples.tobytes())


def wire(backend):
    coordinator = ModelCoordinator(backend, "m")
    status = StatusDisplay(coordinator)
    coordinator.subscribe(status)
    return coordinator, TranscriptionRequestHandler(coordinator), status


def test_read_samples_little_endian_float32(tmp_path):
    path = tmp_path / "clip.f32"
    write_samples(path, [0.5, -0.25, 1.0])

    assert list(read_samples(path)) == [0.5, -0.25, 1.0]


@pytest.mark.asyncio
async def test_run_without_files_preloads_model(backend):
    coordinator, handler, status = wire(backend)

    assert await run(coordinator, handler, status, []) == 0

    assert backend.load_calls == ["m"]
    assert coordinator.get_status() is ModelState.NOT_LOADED


@pytest.mark.asyncio
async def test_run_preload_failure_exit_code(backend):
    backend.error = RuntimeError("offline")
    coordinator, handler, status = wire(backend)

    assert await run(coordinator, handler, status, []) == 1


@pytest.mark.asyncio
async def test_run_prints_transcripts(backend, tmp_path, capsys):
    path = tmp_path / "clip.f32"
    write_samples(path, [0.1, 0.2])
    coordinator, handler, status = wire(backend)

    assert await run(coordinator, handler, status, [path]) == 0

    assert capsys.readouterr().out.strip() == "transcribed text"


@pytest.mark.asyncio
async def test_run_reports_no_speech(backend, tmp_path, capsys):
    backend.infer.return_value = {"text": " "}
    path = tmp_path / "clip.f32"
    write_samples(path, [0.1])
    coordinator, handler, status = wire(backend)

    await run(coordinator, handler, status, [path])

    assert capsys.readouterr().out.strip() == "No speech detected in recording"


@pytest.mark.asyncio
async def test_run_empty_file_fails_without_loading(backend, tmp_path):
    path = tmp_path / "empty.f32"
    path.write_bytes(b"")
    coordinator, handler, status = wire(backend)

    assert await run(coordinator, handler, status, [path]) == 1
    assert backend.load_calls == []


@pytest.mark.asyncio
async def test_run_skips_unreadable_files_and_continues(backend, tmp_path, capsys):
    truncated = tmp_path / "truncated.f32"
    truncated.write_bytes(b"\x00\x00\x80")
    missing = tmp_path / "missing.f32"
    good = tmp_path / "clip.f32"
    write_samples(good, [0.1, 0.2])
    coordinator, handler, status = wire(backend)

    assert await run(coordinator, handler, status, [truncated, missing, good]) == 1

    assert capsys.readouterr().out.strip() == "transcribed text"
    assert backend.load_calls == ["m"]
