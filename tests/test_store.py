import os
import stat
import sys
from pathlib import Path

import pytest

from lottery_vault.errors import StorageDecodeError, StorageEncodeError, StorageEnvironmentError, StorageIOError
from lottery_vault.models import RemainingDraws, create_default_state
from lottery_vault.store import StateStore


def test_absent_file_returns_default_without_creating_it(data_root: Path):
    store = StateStore(data_root)

    state = store.load()

    assert data_root.is_dir()
    assert not store.data_path.exists()
    assert len(state.available_prizes) == 6
    assert state.config.draws_per_cycle == 6
    assert state.current_cycle.results == []


def test_save_then_load(data_root: Path):
    store = StateStore(data_root)
    state = create_default_state()

    path = store.save(state)

    assert path == data_root / "data.json"
    assert StateStore(data_root).load() == state


def test_save_replaces_previous_contents(data_root: Path):
    store = StateStore(data_root)
    first = create_default_state()
    second = create_default_state()
    second.config.enable_animations = False

    store.save(first)
    store.save(second)

    assert store.load() == second
    # No temp files left behind
    assert sorted(p.name for p in data_root.iterdir()) == ["data.json"]


def test_corrupt_file_is_fatal_not_defaulted(data_root: Path):
    store = StateStore(data_root)
    store.data_path.write_text("garbage {{{", encoding="utf-8")

    with pytest.raises(StorageDecodeError):
        store.load()
    # The corrupt file is left alone for inspection
    assert store.data_path.read_text(encoding="utf-8") == "garbage {{{"


def test_failed_write_keeps_old_file(data_root: Path, monkeypatch):
    store = StateStore(data_root)
    store.save(create_default_state())
    before = store.data_path.read_bytes()

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("lottery_vault.fs.os.replace", broken_replace)

    changed = create_default_state()
    with pytest.raises(StorageIOError) as ei:
        store.save(changed)
    assert "disk full" in str(ei.value)
    assert ei.value.operation == "write"
    assert store.data_path.read_bytes() == before
    assert sorted(p.name for p in data_root.iterdir()) == ["data.json"]


def test_unencodable_state_leaves_file_untouched(data_root: Path):
    store = StateStore(data_root)
    original = create_default_state()
    store.save(original)
    before = store.data_path.read_bytes()

    bad = create_default_state()
    bad.current_cycle.remaining_draws = RemainingDraws(red=-1, yellow=2, blue=2)
    with pytest.raises(StorageEncodeError) as ei:
        store.save(bad)

    assert "remainingDraws" in str(ei.value)
    assert store.data_path.read_bytes() == before
    assert store.load() == original


@pytest.mark.skipif(sys.platform == "win32", reason="directories cannot be opened on Windows")
def test_directory_is_synced_after_rename(data_root: Path, monkeypatch):
    store = StateStore(data_root)
    kinds = []
    real_fsync = os.fsync

    def recording_fsync(fd):
        kinds.append("dir" if stat.S_ISDIR(os.fstat(fd).st_mode) else "file")
        real_fsync(fd)

    monkeypatch.setattr("lottery_vault.fs.os.fsync", recording_fsync)
    store.save(create_default_state())

    assert kinds == ["file", "dir"]


def test_custom_file_name(data_root: Path):
    store = StateStore(data_root, data_file_name="state.json")
    store.save(create_default_state())
    assert (data_root / "state.json").exists()


def test_uncreatable_directory_is_environment_error(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(StorageEnvironmentError):
        StateStore(blocker / "sub")


def test_default_root_from_environment(tmp_path: Path, monkeypatch):
    target = tmp_path / "from_env"
    monkeypatch.setenv("LOTTERY_DATA_DIR", str(target))
    store = StateStore()
    assert store.data_path == target / "data.json"
