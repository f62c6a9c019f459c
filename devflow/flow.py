# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The step-flow engine behind every interactive devflow command.

A `Flow` walks the user through an ordered list of `Step`s, accumulating their
answers in a typed `FlowState`. Every step returns either `Next(values)`, which
merges `values` into the state and moves forward, or `Back()`, which returns to
the previous step that is not skipped.

Transition rules:
- Before landing on a step its skip predicate is evaluated against the current
  state, moving in either direction. Skipped steps never render.
- A step is rendered with `is_first=True` when no earlier step is reachable.
  Such a render offers no back navigation, and a `Back()` from it is a no-op.
- Steps marked `preset` were answered before the flow started (usually by a CLI
  flag). The mark is evaluated once against the initial state and the step stays
  skipped for the whole run, whatever the state becomes.
- The flow terminates when it moves past the last step and returns the state.

The controller owns no retry or recovery policy. Validation is handled inside
each prompt, and any exception a step raises, including `CancelSignal`,
propagates to the caller untouched.

A single process renders one prompt at a time. Running two flows concurrently
is not supported; the cancellation broker rejects the second pending prompt.

Example:
    class CommitState(FlowState):
        type: str = ""
        message: str = ""

    flow = Flow(
        "commit",
        [
            PromptStep("type", "type", PromptKind.SELECT, type_options),
            PromptStep("message", "message", PromptKind.INPUT, message_options),
        ],
    )
    state = await flow.run(CommitState())
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

from devflow.context import StepContext
from devflow.debug import register_debug_hooks
from devflow.exceptions import InvalidStepError
from devflow.hook_manager import HookManager, HookType
from devflow.logger import logger
from devflow.outcomes import Back, Next, StepOutcome
from devflow.prompts import BACK, PromptAdapter, PromptKind, PromptOptions
from devflow.utils import ensure_async

StateT = TypeVar("StateT", bound="FlowState")


class FlowState(BaseModel):
    """
    Base class for the typed answers accumulated by a flow.

    Subclasses declare one field per answer with a default, so that a state can
    be created empty or partially pre-seeded from CLI flags. Unknown fields are
    rejected, which catches steps contributing to a misspelled field.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    def merge(self: StateT, partial: Mapping[str, Any]) -> StateT:
        """Return a new, validated state with `partial` applied on top."""
        unknown = sorted(set(partial) - set(type(self).model_fields))
        if unknown:
            raise InvalidStepError(
                f"{type(self).__name__} has no field(s): {', '.join(unknown)}"
            )
        if not partial:
            return self
        return type(self).model_validate({**dict(self), **partial})


class BaseStep(ABC, Generic[StateT]):
    """
    One point in a flow.

    Subclasses implement `run(state, is_first)` and return a `StepOutcome`.

    Args:
        id (str): Identifier, unique within the flow, used for diagnostics.
        skip (Callable[[state], bool] | None): Re-evaluated every time the flow is
            about to land on the step.
        preset (bool | Callable[[state], bool]): Whether the step's value was
            supplied before the flow started. Evaluated once on the initial state.
    """

    def __init__(
        self,
        id: str,
        *,
        skip: Callable[[StateT], bool] | None = None,
        preset: bool | Callable[[StateT], bool] = False,
    ) -> None:
        self.id = id
        self._skip = skip
        self._preset = preset

    @abstractmethod
    async def run(self, state: StateT, is_first: bool) -> StepOutcome:
        raise NotImplementedError("run must be implemented by subclasses")

    def skip(self, state: StateT) -> bool:
        return bool(self._skip(state)) if self._skip else False

    def is_preset(self, initial_state: StateT) -> bool:
        if callable(self._preset):
            return bool(self._preset(initial_state))
        return bool(self._preset)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class Step(BaseStep[StateT]):
    """
    A step backed by a plain function.

    Args:
        id (str): Step identifier.
        run (Callable): `(state, is_first) -> StepOutcome`, sync or async.
        skip / preset: See `BaseStep`.
    """

    def __init__(
        self,
        id: str,
        run: Callable[[StateT, bool], StepOutcome | Awaitable[StepOutcome]],
        *,
        skip: Callable[[StateT], bool] | None = None,
        preset: bool | Callable[[StateT], bool] = False,
    ) -> None:
        super().__init__(id, skip=skip, preset=preset)
        if not callable(run):
            raise TypeError(f"Step '{id}' needs a callable run, got {run!r}")
        self._run = ensure_async(run)

    async def run(self, state: StateT, is_first: bool) -> StepOutcome:
        return await self._run(state, is_first)


class PromptStep(BaseStep[StateT]):
    """
    A step that renders one prompt and stores the answer in one state field.

    The prompt options are rebuilt from the committed state on every render,
    so defaults always reflect answers that were actually accepted.

    Args:
        id (str): Step identifier.
        field (str): State field receiving the answer.
        kind (PromptKind | str): The prompt to render.
        options (PromptOptions | Callable[[state], PromptOptions]): Prompt
            configuration, or a factory building it from the state.
        transform (Callable[[value, state], Mapping] | None): Maps the answer to
            the partial state instead of `{field: value}`.
        skip / preset: See `BaseStep`.
        adapter (PromptAdapter | None): Adapter used to render. Defaults to a
            `PromptAdapter` bound to the process-wide broker.
    """

    def __init__(
        self,
        id: str,
        field: str,
        kind: PromptKind | str,
        options: PromptOptions | Callable[[StateT], PromptOptions],
        *,
        transform: Callable[[Any, StateT], Mapping[str, Any]] | None = None,
        skip: Callable[[StateT], bool] | None = None,
        preset: bool | Callable[[StateT], bool] = False,
        adapter: PromptAdapter | None = None,
    ) -> None:
        super().__init__(id, skip=skip, preset=preset)
        self.field = field
        self.kind = PromptKind(kind)
        self.options = options
        self.transform = transform
        self.adapter = adapter

    def build_options(self, state: StateT) -> PromptOptions:
        if callable(self.options):
            return self.options(state)
        return self.options

    async def run(self, state: StateT, is_first: bool) -> StepOutcome:
        if self.adapter is None:
            self.adapter = PromptAdapter()
        value = await self.adapter.render(
            self.kind, self.build_options(state), allow_back=not is_first
        )
        if value is BACK:
            return Back()
        if self.transform:
            return Next(self.transform(value, state))
        return Next({self.field: value})


class Flow(Generic[StateT]):
    """
    Drives the user through an ordered list of steps.

    Args:
        name (str): Name of the flow, used in logs and hook contexts.
        steps (Sequence[BaseStep]): The ordered, fixed step list.
        hooks (HookManager | None): Hooks triggered around every render.
        logging_hooks (bool): Register the debug logging hooks.

    Attributes:
        trail (list[str]): Step ids in the order they were rendered during the
            last run.

    Raises:
        InvalidStepError: If two steps share an id.
    """

    def __init__(
        self,
        name: str,
        steps: Sequence[BaseStep[StateT]],
        *,
        hooks: HookManager | None = None,
        logging_hooks: bool = False,
    ) -> None:
        self.name = name
        self.steps: list[BaseStep[StateT]] = list(steps)
        self.hooks = hooks or HookManager()
        self.trail: list[str] = []
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise InvalidStepError(f"[{name}] Duplicate step id '{step.id}'.")
            seen.add(step.id)
        if logging_hooks:
            register_debug_hooks(self.hooks)

    def _is_skipped(self, index: int, state: StateT, preset: frozenset[int]) -> bool:
        if index in preset:
            return True
        return self.steps[index].skip(state)

    def _next_index(self, index: int, state: StateT, preset: frozenset[int]) -> int:
        """First renderable index at or after `index`, or `len(steps)`."""
        while index < len(self.steps) and self._is_skipped(index, state, preset):
            logger.debug("[%s] Skipping step '%s'.", self.name, self.steps[index].id)
            index += 1
        return index

    def _previous_index(self, index: int, state: StateT, preset: frozenset[int]) -> int:
        """Last renderable index before `index`, or -1 when there is none."""
        index -= 1
        while index >= 0 and self._is_skipped(index, state, preset):
            index -= 1
        return index

    async def run(self, initial_state: StateT) -> StateT:
        """Run the flow to completion and return the accumulated state."""
        state = initial_state
        preset = frozenset(
            index
            for index, step in enumerate(self.steps)
            if step.is_preset(initial_state)
        )
        if preset:
            logger.debug(
                "[%s] Preset steps: %s",
                self.name,
                ", ".join(self.steps[index].id for index in sorted(preset)),
            )
        self.trail = []

        index = self._next_index(0, state, preset)
        while index < len(self.steps):
            step = self.steps[index]
            is_first = self._previous_index(index, state, preset) < 0
            self.trail.append(step.id)
            outcome = await self._render(index, step, state, is_first)

            if isinstance(outcome, Next):
                state = state.merge(outcome.values)
                index = self._next_index(index + 1, state, preset)
                continue

            target = self._previous_index(index, state, preset)
            if target < 0:
                logger.debug(
                    "[%s] Back at first step '%s' ignored.", self.name, step.id
                )
                continue
            logger.debug(
                "[%s] Back from '%s' to '%s'.", self.name, step.id, self.steps[target].id
            )
            index = target

        logger.debug("[%s] Completed after %d render(s).", self.name, len(self.trail))
        return state

    async def _render(
        self, index: int, step: BaseStep[StateT], state: StateT, is_first: bool
    ) -> StepOutcome:
        context = StepContext(
            name=step.id,
            flow=self.name,
            index=index,
            is_first=is_first,
            state=state,
        )
        context.start_timer()
        try:
            await self.hooks.trigger(HookType.BEFORE, context)
            outcome = await step.run(state, is_first)
            if not isinstance(outcome, (Next, Back)):
                raise InvalidStepError(
                    f"[{self.name}] Step '{step.id}' returned {outcome!r}; "
                    "expected Next(...) or Back()."
                )
            context.outcome = outcome
            await self.hooks.trigger(HookType.ON_SUCCESS, context)
            return outcome
        except Exception as error:
            context.exception = error
            await self.hooks.trigger(HookType.ON_ERROR, context)
            raise
        finally:
            context.stop_timer()
            await self.hooks.trigger(HookType.AFTER, context)

    def __str__(self) -> str:
        return f"Flow(name={self.name!r}, steps={[step.id for step in self.steps]})"


async def run_steps(
    steps: Sequence[BaseStep[StateT]],
    initial_state: StateT,
    *,
    name: str = "flow",
    hooks: HookManager | None = None,
) -> StateT:
    """Run `steps` once from `initial_state` and return the final state."""
    return await Flow(name, steps, hooks=hooks).run(initial_state)
