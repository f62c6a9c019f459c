# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Execution context for step renders.

`StepContext` captures runtime information for a single render of a single
step: which flow and step it belongs to, whether back navigation was offered,
the outcome the step produced or the exception it raised, and timing. It is
the object handed to every lifecycle hook registered on a `Flow`.
"""
from __future__ import annotations

import time
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from devflow.outcomes import Back


class StepContext(BaseModel):
    """
    Represents the runtime metadata for one step render.

    Attributes:
        name (str): The step id.
        flow (str): The name of the flow driving the step.
        index (int): Position of the step in the flow's step list.
        is_first (bool): Whether the step was the first reachable step, i.e.
            rendered without back navigation.
        state (Any): The committed state handed to the step.
        outcome (Any | None): The `Next` or `Back` outcome, if the step completed.
        exception (BaseException | None): The exception raised, if any. Flow
            signals such as `CancelSignal` are recorded here too.
        start_time / end_time (float | None): High-resolution timing.
        start_wall / end_wall (datetime | None): Wall-clock timestamps.

    Properties:
        duration (float | None): The render duration in seconds.
        success (bool): Whether the step completed without raising.
        status (str): "OK", "BACK" or "ERROR".
    """

    name: str
    flow: str = ""
    index: int = 0
    is_first: bool = False
    state: Any = None
    outcome: Any | None = None
    exception: BaseException | None = None

    start_time: float | None = None
    end_time: float | None = None
    start_wall: datetime | None = None
    end_wall: datetime | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def start_timer(self):
        self.start_wall = datetime.now()
        self.start_time = time.perf_counter()

    def stop_timer(self):
        self.end_time = time.perf_counter()
        self.end_wall = datetime.now()

    @property
    def duration(self) -> float | None:
        if self.start_time is None:
            return None
        if self.end_time is None:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time

    @property
    def success(self) -> bool:
        return self.exception is None

    @property
    def status(self) -> str:
        if not self.success:
            return "ERROR"
        if isinstance(self.outcome, Back):
            return "BACK"
        return "OK"

    def to_log_line(self) -> str:
        """Structured flat-line format for logging."""
        duration_str = f"{self.duration:.3f}s" if self.duration is not None else "n/a"
        exception_str = (
            f"{type(self.exception).__name__}: {self.exception}"
            if self.exception
            else "None"
        )
        return (
            f"[{self.flow}:{self.name}] status={self.status} duration={duration_str} "
            f"outcome={self.outcome!r} exception={exception_str}"
        )

    def __str__(self) -> str:
        duration_str = f"{self.duration:.3f}s" if self.duration is not None else "n/a"
        return f"<StepContext '{self.flow}:{self.name}' | {self.status} | {duration_str}>"
