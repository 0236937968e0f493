import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # Never let a developer's environment redirect test writes
    monkeypatch.delenv("LOTTERY_DATA_DIR", raising=False)
    monkeypatch.delenv("LOTTERY_LOG_LEVEL", raising=False)


@pytest.fixture()
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "lottery-game"
