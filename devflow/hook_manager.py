# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `HookManager` and `HookType` used by `Flow` to run callbacks
around every step render.

Hooks receive the `StepContext` of the render. They are meant for logging,
diagnostics and tests; a failing hook is logged and skipped, it never changes
the flow's control path.

Usage:
    hooks = HookManager()
    hooks.register(HookType.BEFORE, log_before)
"""
from __future__ import annotations

import inspect
from enum import Enum
from typing import Awaitable, Callable, Union

from devflow.context import StepContext
from devflow.logger import logger

Hook = Union[Callable[[StepContext], None], Callable[[StepContext], Awaitable[None]]]


class HookType(Enum):
    """
    Enum for supported hook lifecycle phases.

    Members:
        BEFORE: Run before the step renders.
        ON_SUCCESS: Run after the step returned an outcome (`Next` or `Back`).
        ON_ERROR: Run when the step raised an exception.
        AFTER: Run after every render, including full cancellation.

    Aliases:
        "success" → "on_success"
        "error" → "on_error"
    """

    BEFORE = "before"
    ON_SUCCESS = "on_success"
    ON_ERROR = "on_error"
    AFTER = "after"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "success": "on_success",
            "error": "on_error",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> HookType:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class HookManager:
    """
    Manages lifecycle hooks for a flow.

    Methods:
        register(hook_type, hook): Register a callable for a given HookType.
        clear(hook_type): Remove hooks for one or all lifecycle stages.
        trigger(hook_type, context): Execute all hooks of a given type.
    """

    def __init__(self) -> None:
        self._hooks: dict[HookType, list[Hook]] = {
            hook_type: [] for hook_type in HookType
        }

    def register(self, hook_type: HookType | str, hook: Hook):
        """
        Register a new hook for a given lifecycle phase.

        Raises:
            ValueError: If the hook type is invalid.
            TypeError: If the hook is not callable.
        """
        hook_type = HookType(hook_type)
        if not callable(hook):
            raise TypeError(f"Hook for '{hook_type}' must be callable, got {hook!r}")
        self._hooks[hook_type].append(hook)

    async def trigger(self, hook_type: HookType, context: StepContext):
        """Invoke all hooks registered for a given lifecycle phase.

        Exceptions raised by hooks are logged and skipped.
        """
        if hook_type not in self._hooks:
            raise ValueError(f"Unsupported hook type: {hook_type}")
        for hook in self._hooks[hook_type]:
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(context)
                else:
                    hook(context)
            except Exception as hook_error:
                logger.warning(
                    "[Hook:%s] raised an exception during '%s' for '%s': %s",
                    getattr(hook, "__name__", repr(hook)),
                    hook_type,
                    context.name,
                    hook_error,
                )

    def __str__(self) -> str:
        def format_hook_list(hooks: list[Hook]) -> str:
            return ", ".join(h.__name__ for h in hooks) if hooks else "—"

        lines = ["<HookManager>"]
        for hook_type in HookType:
            hook_list = self._hooks.get(hook_type, [])
            lines.append(f"  {hook_type.value}: {format_hook_list(hook_list)}")
        return "\n".join(lines)
