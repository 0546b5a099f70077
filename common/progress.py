"""Progress events yielded by long running plugin operations.

OCR and speech synthesis expose their work as generators of
:class:`ProgressEvent`. A stream is finite, is consumed once, and always ends
with exactly one terminal event: ``done`` carrying the result, or ``error``
carrying a message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

EventKind = Literal["progress", "done", "error"]


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    kind: EventKind
    progress: float
    message: str = ""
    result: Any = None

    @property
    def terminal(self) -> bool:
        return self.kind != "progress"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "progress": round(self.progress, 4),
            "message": self.message,
        }


def progress(fraction: float, message: str) -> ProgressEvent:
    return ProgressEvent(kind="progress", progress=min(max(fraction, 0.0), 1.0), message=message)


def done(result: Any, message: str = "Finished") -> ProgressEvent:
    return ProgressEvent(kind="done", progress=1.0, message=message, result=result)


def failed(message: str, fraction: float = 0.0) -> ProgressEvent:
    return ProgressEvent(kind="error", progress=fraction, message=message)


def drain(events: Iterable[ProgressEvent]) -> tuple[ProgressEvent, list[ProgressEvent]]:
    """Consume ``events`` and return ``(terminal_event, full_log)``.

    Raises :class:`RuntimeError` if the stream ends without a terminal event.
    """

    log: list[ProgressEvent] = []
    for event in events:
        log.append(event)
        if event.terminal:
            return event, log
    raise RuntimeError("progress stream ended without a terminal event")


__all__ = ["EventKind", "ProgressEvent", "progress", "done", "failed", "drain"]
