from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class ScriptedSource:
    """Byte source replaying a fixed script, then reporting end of stream."""

    def __init__(self, data: bytes = b"") -> None:
        self._pending: List[bytes] = [bytes([byte]) for byte in data]
        self.timeouts: List[Optional[float]] = []

    def feed(self, data: bytes) -> None:
        self._pending.extend(bytes([byte]) for byte in data)

    def read(self, timeout: Optional[float]) -> bytes:
        self.timeouts.append(timeout)
        if self._pending:
            return self._pending.pop(0)
        return b""


@pytest.fixture(autouse=True)
def isolated_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    state = tmp_path / "state"
    monkeypatch.setenv("DUSKY_STATE_DIR", str(state))
    monkeypatch.setenv("DUSKY_HYPR_SOURCE_DIR", str(tmp_path / "hypr"))
    monkeypatch.delenv("DUSKY_ENV_FILE", raising=False)
    monkeypatch.delenv("DUSKY_ESC_TIMEOUT", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("DUSKY_MATUGEN_BIN", raising=False)
    return state


def events_from(data: bytes, timeout: float = 0.05) -> Iterable:
    from dusky.tui.keys import Key, read_key

    source = ScriptedSource(data)
    while True:
        event = read_key(source, timeout)
        if event.key is Key.EOF:
            return
        yield event
