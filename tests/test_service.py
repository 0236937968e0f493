from __future__ import annotations

import threading
from pathlib import Path
from typing import List

import pytest

from lottery_vault.config import StorageSettings
from lottery_vault.errors import NoDataToBackupError, StorageDecodeError, StorageIOError
from lottery_vault.models import RemainingDraws, create_default_state
from lottery_vault.service import LotteryStorageService


@pytest.fixture()
def svc(data_root: Path) -> LotteryStorageService:
    return LotteryStorageService(root_dir=data_root)


def test_validate_on_empty_install(svc: LotteryStorageService):
    assert svc.validate_data() is True
    assert not svc.data_path.exists()


def test_validate_reports_problems_as_false(svc: LotteryStorageService):
    svc.data_path.write_text("not json", encoding="utf-8")
    assert svc.validate_data() is False

    state = create_default_state()
    state.current_cycle.remaining_draws = RemainingDraws(1, 1, 1)
    svc.save_lottery_data(state)
    assert svc.validate_data() is False


def test_validate_unreadable_file_is_false(svc: LotteryStorageService, monkeypatch):
    svc.save_lottery_data(create_default_state())

    def boom():
        raise StorageIOError("read", svc.data_path, PermissionError("denied"))

    monkeypatch.setattr(svc.store, "read_bytes", boom)
    assert svc.validate_data() is False


def test_end_to_end_recovery(svc: LotteryStorageService):
    original = create_default_state()

    assert svc.validate_data() is True
    svc.save_lottery_data(original)
    backup_path = svc.backup_data()
    assert isinstance(backup_path, str)
    assert Path(backup_path).read_bytes() == svc.data_path.read_bytes()

    svc.data_path.write_bytes(b"\xff\xfe corrupted beyond repair")
    with pytest.raises(StorageDecodeError):
        svc.load_lottery_data()

    svc.restore_from_backup(backup_path)
    assert svc.load_lottery_data() == original


def test_backup_before_any_save(svc: LotteryStorageService):
    with pytest.raises(NoDataToBackupError):
        svc.backup_data()


def test_root_from_settings(tmp_path: Path):
    settings = StorageSettings(data_dir=tmp_path / "configured", data_file_name="game.json")
    svc = LotteryStorageService(settings=settings)
    assert svc.data_path == tmp_path / "configured" / "game.json"


def test_save_retries_io_errors(data_root: Path, monkeypatch):
    sleeps: List[float] = []
    settings = StorageSettings(save_retries=3, retry_delay=1.0)
    svc = LotteryStorageService(root_dir=data_root, settings=settings, sleep=sleeps.append)

    real_write = svc.store.write_bytes
    calls = {"n": 0}

    def flaky(data: bytes) -> None:
        calls["n"] += 1
        if calls["n"] < 3:
            raise StorageIOError("write", svc.data_path, OSError("busy"))
        real_write(data)

    monkeypatch.setattr(svc.store, "write_bytes", flaky)
    state = create_default_state()

    svc.save(state)

    assert calls["n"] == 3
    assert sleeps == [1.0, 2.0]
    assert svc.load_lottery_data() == state


def test_save_gives_up_after_configured_attempts(data_root: Path, monkeypatch):
    settings = StorageSettings(save_retries=2, retry_delay=0.0)
    svc = LotteryStorageService(root_dir=data_root, settings=settings, sleep=lambda s: None)
    calls = {"n": 0}

    def always_fails(data: bytes) -> None:
        calls["n"] += 1
        raise StorageIOError("write", svc.data_path, OSError("read-only"))

    monkeypatch.setattr(svc.store, "write_bytes", always_fails)

    with pytest.raises(StorageIOError):
        svc.save(create_default_state())
    assert calls["n"] == 2


def test_auto_save_never_raises(data_root: Path, monkeypatch):
    settings = StorageSettings(save_retries=1)
    svc = LotteryStorageService(root_dir=data_root, settings=settings, sleep=lambda s: None)
    assert svc.auto_save(create_default_state()) is True

    def always_fails(data: bytes) -> None:
        raise StorageIOError("write", svc.data_path, OSError("gone"))

    monkeypatch.setattr(svc.store, "write_bytes", always_fails)
    assert svc.auto_save(create_default_state()) is False


def test_safe_load_warns_on_invalid_data(svc: LotteryStorageService, caplog):
    state = create_default_state()
    state.available_prizes = []
    svc.save_lottery_data(state)

    with caplog.at_level("WARNING"):
        loaded = svc.safe_load()

    assert loaded == state
    assert any("failed validation" in rec.message for rec in caplog.records)


def test_emergency_restore(svc: LotteryStorageService, tmp_path: Path):
    state = create_default_state()
    svc.save_lottery_data(state)
    backup = svc.backup_data()

    assert svc.emergency_restore() is None
    assert svc.emergency_restore(tmp_path / "missing.json") is None
    assert svc.emergency_restore(backup) == state


def test_create_backup_and_list(svc: LotteryStorageService):
    svc.save_lottery_data(create_default_state())
    info = svc.create_backup()
    assert [b.path for b in svc.list_backups()] == [info.path]


def test_operations_are_serialized(svc: LotteryStorageService, monkeypatch):
    # While one save holds the lock, a concurrent validate must wait.
    svc.save_lottery_data(create_default_state())
    entered = threading.Event()
    release = threading.Event()
    order: List[str] = []
    real_write = svc.store.write_bytes

    def slow_write(data: bytes) -> None:
        entered.set()
        release.wait(timeout=5)
        order.append("save")
        real_write(data)

    monkeypatch.setattr(svc.store, "write_bytes", slow_write)

    saver = threading.Thread(target=svc.save_lottery_data, args=(create_default_state(),))
    saver.start()
    assert entered.wait(timeout=5)

    def validate() -> None:
        svc.validate_data()
        order.append("validate")

    checker = threading.Thread(target=validate)
    checker.start()
    checker.join(timeout=0.2)
    assert checker.is_alive()

    release.set()
    saver.join(timeout=5)
    checker.join(timeout=5)
    assert order == ["save", "validate"]


def test_deeply_nested_file_is_handled(svc: LotteryStorageService, tmp_path: Path):
    svc.data_path.write_text("[" * 200000, encoding="utf-8")
    assert svc.validate_data() is False
    with pytest.raises(StorageDecodeError):
        svc.load_lottery_data()

    nested = tmp_path / "nested.json"
    nested.write_text("[" * 200000, encoding="utf-8")
    assert svc.emergency_restore(nested) is None


def test_safe_load_holds_lock_between_check_and_read(svc: LotteryStorageService, monkeypatch):
    svc.save_lottery_data(create_default_state())
    lock_free_during_load: List[bool] = []
    real_load = svc.load_lottery_data

    def load_while_checking_lock():
        def try_lock() -> None:
            acquired = svc.lock.acquire(blocking=False)
            if acquired:
                svc.lock.release()
            lock_free_during_load.append(acquired)

        t = threading.Thread(target=try_lock)
        t.start()
        t.join(timeout=5)
        return real_load()

    monkeypatch.setattr(svc, "load_lottery_data", load_while_checking_lock)
    svc.safe_load()

    assert lock_free_during_load == [False]
