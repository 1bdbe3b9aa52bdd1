from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional


class PipelinePhase(str, Enum):
    IDLE = "idle"
    TRANSLATING = "translating"
    GENERATING_AUDIO = "generating-audio"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PipelineProgress:
    phase: PipelinePhase = PipelinePhase.IDLE
    current: int = 0
    total: int = 0
    message: str = ""


@dataclass
class ProgressTracker:
    progress: PipelineProgress = field(default_factory=PipelineProgress)
    last_error: str | None = None
    on_change: Optional[Callable[[PipelineProgress], None]] = None

    @property
    def is_processing(self) -> bool:
        return self.progress.phase not in (PipelinePhase.IDLE, PipelinePhase.COMPLETE)

    def _set(self, progress: PipelineProgress) -> None:
        self.progress = progress
        if self.on_change is not None:
            self.on_change(progress)

    def set_idle(self) -> None:
        self._set(PipelineProgress())

    def start(self, phase: PipelinePhase, total: int, message: str) -> None:
        self._set(PipelineProgress(phase=phase, current=0, total=total, message=message))

    def step(self, current: int, message: str) -> None:
        self._set(replace(self.progress, current=current, message=message))

    def set_message(self, message: str) -> None:
        self._set(replace(self.progress, message=message))

    def finish(self, total: int, message: str) -> None:
        self._set(PipelineProgress(phase=PipelinePhase.COMPLETE, current=total, total=total, message=message))

    def record_error(self, detail: str) -> None:
        self.last_error = detail

    def dismiss_error(self) -> None:
        self.last_error = None
