# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Step outcomes understood by the flow controller.

A step's `run` returns exactly one of:

- `Next(values)`: the step completed; `values` is merged into the flow state.
- `Back()`: the user asked to return to the previous non-skipped step.

Anything else is a programming error and is rejected with `InvalidStepError`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Next:
    """The step completed and contributes `values` to the flow state."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", dict(self.values))

    def __repr__(self) -> str:
        return f"Next({dict(self.values)!r})"


@dataclass(frozen=True)
class Back:
    """The user asked to return to the previous non-skipped step."""

    def __repr__(self) -> str:
        return "Back()"


StepOutcome = Union[Next, Back]
