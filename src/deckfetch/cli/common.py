from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, field
from typing import Any


def _default_progress_enabled(stream) -> bool:
    try:
        return stream.isatty()  # type: ignore[call-arg]
    except (AttributeError, ValueError):
        return False


@dataclass
class ProgressPrinter:
    """Render single-line progress updates in a TTY-friendly way.

    Off a TTY every update is written on its own line, so piped output keeps
    the full ``Downloading card i of n`` trail.
    """

    stream: Any = field(default_factory=lambda: sys.stdout)
    enabled: bool = field(default_factory=lambda: _default_progress_enabled(sys.stdout))
    history: list[str] = field(default_factory=list, init=False)
    _last_len: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def update(self, label: str, *, final: bool = False) -> None:
        with self._lock:
            self.history.append(label)

            if not self.enabled:
                self.stream.write(label + os.linesep)
                self.stream.flush()
                return

            padding = max(0, self._last_len - len(label))
            self.stream.write(f"\r{label}{' ' * padding}")
            if final:
                self.stream.write(os.linesep)
                self._last_len = 0
            else:
                self._last_len = len(label)
            self.stream.flush()

    def card_started(self, index: int, total: int, card) -> None:
        """Progress callback for ``DeckDownloader``."""
        self.update(f"Downloading card {index} of {total - 1}")

    def close(self, label: str | None = None) -> None:
        if self.enabled or label:
            self.update(label or "", final=True)


def exit_with_message(message: str, *, code: int = 0) -> None:
    stream = sys.stderr if code else sys.stdout
    stream.write(message + os.linesep)
    stream.flush()
    raise SystemExit(code)
