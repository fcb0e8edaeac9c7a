"""Per-run state handed to a tool plugin."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable

ProgressCallback = Callable[[float, str], None]


def _ignore_progress(fraction: float, message: str) -> None:
    pass


@dataclass
class ExecutionContext:
    """Everything a run may consult besides its own arguments.

    The CLI fills config from ~/.config/sigtrail/config.yaml; the API
    leaves it empty and passes its settings explicitly.

    Cancellation is cooperative: a front end sets cancel_event and the
    tool notices at its next checkpoint.
    """

    config: dict[str, Any] = field(default_factory=dict)
    on_progress: ProgressCallback = _ignore_progress
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def progress(self, fraction: float, message: str) -> None:
        """Report progress as a fraction in [0.0, 1.0] with a short message."""
        self.on_progress(fraction, message)

    def setting(self, key: str, default: Any = None) -> Any:
        """Config value for key, or default when unset or null."""
        value = self.config.get(key)
        return default if value is None else value

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()
